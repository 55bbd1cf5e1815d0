"""
Round Engine
============

Resolves player selections against one round's gaps.

Gaps must be filled strictly left to right: only the front of the gap queue
can be satisfied, whatever the tile's family. A tile whose value belongs to a
later gap is a mistake.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Deque, Dict, Optional, Tuple

from gaprunner.gap_core.selection_pool import SelectionPool
from gaprunner.gap_core.sequence_generator import TileSequence
from gaprunner.gap_core.tile_catalog import Tile

logger = logging.getLogger(__name__)


class Outcome(str, Enum):
    CORRECT = "correct"
    INCORRECT = "incorrect"


@dataclass(frozen=True)
class SelectionResult:
    """What a single tap did."""
    outcome: Outcome
    tile: Tile
    expected_value: int
    queue_position: int            # Index of the front gap in the round's queue
    slot_position: int             # Position of that gap in the sequence
    points: int = 0

    @property
    def is_correct(self) -> bool:
        return self.outcome is Outcome.CORRECT


class RoundEngine:
    """
    Per-round state: the gap queue, the selection pool and what has been
    placed so far.
    """

    def __init__(
        self,
        sequence: TileSequence,
        pool: SelectionPool,
        points_per_gap: int,
        generation: int = 0
    ):
        """
        Initialize round.

        Args:
            sequence: The generated sequence.
            pool: Tiles offered for this round. Consumed as gaps are filled.
            points_per_gap: Points awarded per correct tile.
            generation: Timer generation the round was armed with.
        """
        self._sequence = sequence
        self._pool = pool
        self._points_per_gap = points_per_gap
        self._generation = generation

        # (expected value, slot position), leftmost first
        self._queue: Deque[Tuple[int, int]] = deque(
            (slot.value, slot.position) for slot in sequence.slots if slot.is_gap
        )
        self._total_gaps = len(self._queue)
        self._placed: Dict[int, Tile] = {}
        self._forfeited = False

    @property
    def sequence(self) -> TileSequence:
        return self._sequence

    @property
    def pool(self) -> SelectionPool:
        return self._pool

    @property
    def generation(self) -> int:
        """Timer generation this round belongs to."""
        return self._generation

    @property
    def gap_queue(self) -> Tuple[int, ...]:
        """Outstanding expected values, front first."""
        return tuple(value for value, _ in self._queue)

    @property
    def expected_value(self) -> Optional[int]:
        """Value the next tap must have, or None when nothing is outstanding."""
        return self._queue[0][0] if self._queue else None

    @property
    def front_position(self) -> Optional[int]:
        """Sequence position of the front gap."""
        return self._queue[0][1] if self._queue else None

    @property
    def gaps_filled(self) -> int:
        return self._total_gaps - len(self._queue)

    @property
    def placed_tiles(self) -> Dict[int, Tile]:
        """Tiles the player has put into gaps, keyed by slot position."""
        return dict(self._placed)

    @property
    def forfeited(self) -> bool:
        """True once the timer ran out on this round."""
        return self._forfeited

    def is_complete(self) -> bool:
        """True when every gap has been filled."""
        return not self._queue

    def submit_selection(self, tile: Tile) -> Optional[SelectionResult]:
        """
        Resolve a tapped tile against the front gap.

        Args:
            tile: The tapped tile.

        Returns:
            SelectionResult, or None if the tap was ignored (round complete or
            forfeited, or the tile isn't in the pool).
        """
        if not self._queue or self._forfeited:
            logger.debug("Ignoring %r: round has no open gaps", tile)
            return None
        if tile not in self._pool:
            logger.debug("Ignoring %r: not in selection pool", tile)
            return None

        expected, slot_position = self._queue[0]
        queue_position = self.gaps_filled

        if tile.value != expected:
            return SelectionResult(
                outcome=Outcome.INCORRECT,
                tile=tile,
                expected_value=expected,
                queue_position=queue_position,
                slot_position=slot_position
            )

        self._pool.consume(tile)
        self._queue.popleft()
        self._placed[slot_position] = tile
        return SelectionResult(
            outcome=Outcome.CORRECT,
            tile=tile,
            expected_value=expected,
            queue_position=queue_position,
            slot_position=slot_position,
            points=self._points_per_gap
        )

    def on_time_expired(self) -> bool:
        """
        The sequence finished scrolling.

        Returns:
            True if gaps were still open, meaning the round is forfeited and
            one life is lost. False if the round was already over.
        """
        if not self._queue or self._forfeited:
            return False
        self._forfeited = True
        return True
