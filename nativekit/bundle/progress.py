"""
Progress reporting for the install/build sequence.

Progress is purely observational: a handler is any callable accepting a
``ProgressStage`` and a fraction in [0, 1] (or ``NO_ESTIMATION``).
"""

import logging
import sys
from enum import Enum
from typing import Callable, Optional, TextIO

logger = logging.getLogger(__name__)

NO_ESTIMATION = -1.0
"""Fraction reported while the amount of remaining work is unknown."""


class ProgressStage(Enum):
    """Stages of the build, in the order they are reported."""

    LOCATING = 1
    DOWNLOADING = 2
    EXTRACTING = 3
    INSTALLING = 4
    INITIALIZING = 5
    INITIALIZED = 6

    @property
    def label(self) -> str:
        return self.name.capitalize()

    def __lt__(self, other):
        if not isinstance(other, ProgressStage):
            return NotImplemented
        return self.value < other.value


ProgressHandler = Callable[[ProgressStage, float], None]


def format_fraction(fraction: float) -> str:
    """
    Format a fraction for display.

    Example:
        >>> format_fraction(0.4213)
        '42.1%'
        >>> format_fraction(NO_ESTIMATION)
        '...'
    """
    if fraction == NO_ESTIMATION:
        return "..."
    return f"{fraction * 100:.1f}%"


class LoggingProgressHandler:
    """Default handler: reports stage changes at INFO, fractions at DEBUG."""

    def __init__(self, log: Optional[logging.Logger] = None):
        self.log = log or logger
        self._last_stage: Optional[ProgressStage] = None

    def __call__(self, stage: ProgressStage, fraction: float) -> None:
        if stage is not self._last_stage:
            self._last_stage = stage
            self.log.info(f"{stage.label}")
        if fraction != NO_ESTIMATION:
            self.log.debug(f"{stage.label}: {format_fraction(fraction)}")


class ConsoleProgressHandler:
    """Renders a single updating progress line to a terminal stream."""

    def __init__(self, stream: Optional[TextIO] = None, width: int = 30):
        self.stream = stream or sys.stderr
        self.width = width

    def __call__(self, stage: ProgressStage, fraction: float) -> None:
        if fraction == NO_ESTIMATION:
            line = f"{stage.label}..."
        else:
            filled = int(self.width * max(0.0, min(fraction, 1.0)))
            bar = "#" * filled + "-" * (self.width - filled)
            line = f"{stage.label} [{bar}] {format_fraction(fraction)}"

        end = "\n" if stage is ProgressStage.INITIALIZED else ""
        self.stream.write(f"\r{line:<{self.width + 30}}{end}")
        self.stream.flush()
