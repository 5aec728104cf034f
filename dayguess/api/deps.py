from __future__ import annotations

from typing import Optional

from fastapi import Header, Query, Request

from dayguess.core.config import settings
from dayguess.core.errors import ValidationError
from dayguess.features.daily.clock import local_timezone_name, resolve_timezone
from dayguess.features.game.service import DEFAULT_PLAYER_ID, GameSession

MAX_PLAYER_ID_LENGTH = 64


def get_session(
    request: Request,
    x_player_id: Optional[str] = Header(None),
    tz: Optional[str] = Query(None, description="IANA timezone of the player, e.g. Europe/Paris"),
) -> GameSession:
    """Build the player's session from the app's storage and pool."""
    player_id = (x_player_id or DEFAULT_PLAYER_ID).strip()
    if not player_id or len(player_id) > MAX_PLAYER_ID_LENGTH or ":" in player_id:
        raise ValidationError("Invalid X-Player-Id header")

    zone = resolve_timezone(tz or settings.TIMEZONE)
    return GameSession(
        request.app.state.storage,
        request.app.state.pool,
        player_id=player_id,
        tz=zone,
        timezone_name=local_timezone_name(zone),
        share_url=settings.SHARE_URL,
    )
