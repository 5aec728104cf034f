from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Literal, Optional, TypeVar

T = TypeVar("T")

LoadSource = Literal["stored", "fresh", "default"]


@dataclass(frozen=True)
class LoadResult(Generic[T]):
    """
    Outcome of reading persisted state.

    ``source`` is "stored" when the slot held a usable record; otherwise the
    state is the documented fallback and ``reason`` says why.
    """

    state: T
    source: LoadSource
    reason: Optional[str] = None

    @property
    def recovered(self) -> bool:
        return self.source != "stored"
