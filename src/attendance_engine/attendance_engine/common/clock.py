from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, tzinfo
from typing import Protocol


class Clock(Protocol):
    """Source of the evaluation instant.

    Resolvers never read the wall clock themselves; services take "now" from here.
    """

    def now(self) -> datetime:
        raise NotImplementedError


@dataclass(frozen=True)
class SystemClock:
    tz: tzinfo

    def now(self) -> datetime:
        return datetime.now(self.tz)


@dataclass
class FixedClock:
    """Clock pinned to one instant (reproducible runs, tests)."""

    instant: datetime

    def now(self) -> datetime:
        return self.instant
