"""
Static pool of international days, real and invented.

The dataset is a JSON list in the browser client's camelCase shape. It is
validated once at load time; a bad dataset is a startup failure.
"""

from __future__ import annotations

import json
import logging
import re
from functools import lru_cache
from pathlib import Path
from typing import Iterable, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError as PydanticValidationError

from dayguess.models.pool import PoolEntry

logger = logging.getLogger("dayguess")

DEFAULT_POOL_PATH = Path(__file__).resolve().parents[2] / "data" / "days_pool.json"

MMDD_PATTERN = re.compile(r"^(0[1-9]|1[0-2])-(0[1-9]|[12]\d|3[01])$")
URL_PATTERN = re.compile(r"^https?://")


class PoolValidationError(ValueError):
    """The dataset breaks a pool invariant."""


class PoolEntryRecord(BaseModel):
    """Wire shape of one dataset record."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    id: str = Field(..., min_length=1)
    name: str
    is_real: bool = Field(..., alias="isReal")
    date: Optional[str] = None
    description: str
    source_url: Optional[str] = Field(None, alias="sourceUrl")

    def to_entry(self) -> PoolEntry:
        return PoolEntry(
            id=self.id,
            name=self.name,
            is_real=self.is_real,
            date=self.date,
            description=self.description,
            source_url=self.source_url,
        )


def validate_pool(entries: Iterable[PoolEntry]) -> Tuple[PoolEntry, ...]:
    """Check dataset invariants and return the entries as a tuple."""
    pool = tuple(entries)
    if not pool:
        raise PoolValidationError("pool must contain at least one entry")

    seen = set()
    for entry in pool:
        if entry.id in seen:
            raise PoolValidationError(f"duplicate pool id: {entry.id}")
        seen.add(entry.id)

        if not entry.name.strip():
            raise PoolValidationError(f"{entry.id}: name must not be blank")
        if not entry.description.strip():
            raise PoolValidationError(f"{entry.id}: description must not be blank")

        if entry.is_real:
            if not entry.date or not MMDD_PATTERN.match(entry.date):
                raise PoolValidationError(f"{entry.id}: real entries need an MM-DD date")
            if not entry.source_url or not URL_PATTERN.match(entry.source_url):
                raise PoolValidationError(f"{entry.id}: real entries need an http(s) source URL")
        else:
            if entry.date is not None or entry.source_url is not None:
                raise PoolValidationError(f"{entry.id}: fake entries must not carry a date or source URL")

    return pool


def parse_pool(records: object) -> Tuple[PoolEntry, ...]:
    if not isinstance(records, list):
        raise PoolValidationError("pool file must hold a JSON list")
    try:
        entries = [PoolEntryRecord.model_validate(record).to_entry() for record in records]
    except PydanticValidationError as e:
        raise PoolValidationError(f"malformed pool record: {e}") from e
    return validate_pool(entries)


def load_pool(path: Optional[str | Path] = None) -> Tuple[PoolEntry, ...]:
    """Load and validate a pool file (bundled dataset by default)."""
    source = Path(path) if path else DEFAULT_POOL_PATH
    try:
        records = json.loads(source.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise PoolValidationError(f"cannot read pool from {source}: {e}") from e

    pool = parse_pool(records)
    real_count = sum(1 for entry in pool if entry.is_real)
    logger.info(f"[pool] loaded {len(pool)} entries ({real_count} real) from {source.name}")
    return pool


@lru_cache(maxsize=None)
def get_pool(path: Optional[str] = None) -> Tuple[PoolEntry, ...]:
    """Process-wide cached pool."""
    return load_pool(path)
