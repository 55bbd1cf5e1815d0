"""
Scoring System
==============

Awards points for filled gaps based on game configuration.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from gaprunner.gap_core.config_loader import GameConfig, load_config


@dataclass
class ScoreEvent:
    """Record of a scoring event."""
    points: int
    value: int            # Gap value that was filled
    queue_position: int   # Index of the gap in the round's queue

    def __repr__(self) -> str:
        return f"ScoreEvent(gap_{self.queue_position}={self.value}, +{self.points})"


class ScoreTracker:
    """
    Tracks the session score.

    Every correctly filled gap is worth the same fixed amount in both modes.
    Score never goes down within a session.
    """

    def __init__(self, config: Optional[GameConfig] = None):
        """
        Initialize score tracker.

        Args:
            config: Game configuration. Uses default if None.
        """
        if config is None:
            config = load_config()

        self._points_per_gap = config.scoring.points_per_gap
        self._score: int = 0
        self._gaps_filled: int = 0

    @property
    def score(self) -> int:
        """Current total score."""
        return self._score

    @property
    def gaps_filled(self) -> int:
        """Total number of gaps filled this session."""
        return self._gaps_filled

    @property
    def points_per_gap(self) -> int:
        return self._points_per_gap

    def apply_gap(self, value: int, queue_position: int) -> ScoreEvent:
        """
        Award points for a filled gap and return the event.

        Args:
            value: The value that filled the gap.
            queue_position: Index of the gap in the round's queue.

        Returns:
            ScoreEvent describing the points awarded.
        """
        event = ScoreEvent(
            points=self._points_per_gap,
            value=value,
            queue_position=queue_position
        )
        self._score += event.points
        self._gaps_filled += 1
        return event

    def reset(self) -> None:
        """Reset score to zero."""
        self._score = 0
        self._gaps_filled = 0
