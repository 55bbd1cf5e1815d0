"""
Renderer Interface
==================

Hooks the game session calls as state changes. The base class does nothing;
front ends override the hooks they care about.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from gaprunner.gap_core.records import RoundRecord
    from gaprunner.gap_core.selection_pool import SelectionPool
    from gaprunner.gap_core.sequence_generator import TileSequence
    from gaprunner.gap_core.tile_catalog import Tile


class Renderer:
    """
    No-op renderer.

    The session calls outward through these hooks; the front end calls back
    in through GameSession.submit_selection() and GameSession.on_time_expired().
    """

    def on_round_started(
        self,
        sequence: "TileSequence",
        pool: "SelectionPool",
        generation: int
    ) -> None:
        """A new round is ready to draw. Start the scroll animation tagged with generation."""

    def on_score_changed(self, score: int) -> None:
        pass

    def on_lives_changed(self, lives: int) -> None:
        pass

    def on_round_changed(self, round_number: int) -> None:
        """Round counter shown to the player, starting at 1."""

    def on_gap_filled(self, queue_position: int, tile: "Tile") -> None:
        pass

    def on_selection_rejected(self, tile: "Tile") -> None:
        """A tapped tile did not match the next gap."""

    def on_round_complete(self) -> None:
        pass

    def on_session_ended(self, record: Optional["RoundRecord"]) -> None:
        """Session over. record is None when the player quit."""
