"""
Game Rules
==========

Handles lives and session termination.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from gaprunner.gap_core.config_loader import GameConfig, load_config


@dataclass
class TerminationResult:
    """Result of a termination check."""
    terminated: bool
    reason: str

    @staticmethod
    def none() -> "TerminationResult":
        return TerminationResult(False, "")

    @staticmethod
    def game_over(reason: str) -> "TerminationResult":
        return TerminationResult(True, reason)


class LifeRules:
    """
    Tracks remaining lives.

    - Wrong tile: one life
    - Sequence scrolls off with gaps left: one life, however many gaps remain
    - No lives left: session over
    """

    def __init__(self, config: Optional[GameConfig] = None):
        """
        Initialize life rules.

        Args:
            config: Game configuration. Uses default if None.
        """
        if config is None:
            config = load_config()

        self._starting_lives = config.session.starting_lives
        self._lives = self._starting_lives
        self._lost_to_mistakes = 0
        self._lost_to_misses = 0

    @property
    def lives(self) -> int:
        """Lives remaining."""
        return self._lives

    @property
    def starting_lives(self) -> int:
        return self._starting_lives

    @property
    def lost_to_mistakes(self) -> int:
        """Lives lost to wrong tiles this session."""
        return self._lost_to_mistakes

    @property
    def lost_to_misses(self) -> int:
        """Lives lost to sequences that scrolled away unfinished."""
        return self._lost_to_misses

    def reset(self) -> None:
        """Restore the starting lives."""
        self._lives = self._starting_lives
        self._lost_to_mistakes = 0
        self._lost_to_misses = 0

    def lose_life(self, reason: str) -> TerminationResult:
        """
        Take one life.

        Args:
            reason: "mistake" for a wrong tile, "missed" for a timer expiry.

        Returns:
            TerminationResult, terminated once no lives remain.
        """
        if self._lives > 0:
            self._lives -= 1
            if reason == "missed":
                self._lost_to_misses += 1
            else:
                self._lost_to_mistakes += 1
        return self.check_termination()

    def check_termination(self) -> TerminationResult:
        """Check whether the session is out of lives."""
        if self._lives <= 0:
            return TerminationResult.game_over("out_of_lives")
        return TerminationResult.none()
