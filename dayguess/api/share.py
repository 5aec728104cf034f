from __future__ import annotations

from fastapi import APIRouter, Depends

from dayguess.api.deps import get_session
from dayguess.core.errors import ConflictError, PreconditionViolation
from dayguess.features.game.service import GameSession

router = APIRouter()


@router.get("/v1/share/today")
def get_share_message(session: GameSession = Depends(get_session)):
    """Plain-text share message for today's result."""
    try:
        message = session.share()
    except PreconditionViolation as e:
        raise ConflictError("Guess today's day before sharing", code="precondition_failed") from e
    return {"message": message}
