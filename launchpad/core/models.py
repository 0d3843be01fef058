# launchpad/core/models.py
"""Shutdown lifecycle models."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ShutdownState(Enum):
    """Process lifecycle state."""
    RUNNING = "RUNNING"
    DRAINING = "DRAINING"
    TERMINATED = "TERMINATED"


class ShutdownPath(Enum):
    """How draining ended."""
    CLEAN = "CLEAN"
    FORCED = "FORCED"


EXIT_CODES = {
    ShutdownPath.CLEAN: 0,
    ShutdownPath.FORCED: 1,
}


@dataclass(frozen=True)
class ShutdownOutcome:
    """Result of a completed shutdown."""
    path: ShutdownPath
    signal_name: Optional[str]
    drain_seconds: float

    @property
    def exit_code(self) -> int:
        return EXIT_CODES[self.path]

    @property
    def forced(self) -> bool:
        return self.path == ShutdownPath.FORCED
