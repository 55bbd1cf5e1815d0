"""
Sequence Generator
==================

Builds one round's scrolling sequence: a run of consecutive values with some
tiles withheld as gaps.

Gap positions are picked one at a time, uniformly among the positions that
would not complete a run of more than `max_consecutive_gaps` adjacent gaps.
When no position is left the picker stops early, so a round may end up with
fewer gaps than were requested.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from gaprunner.gap_core.config_loader import GameConfig, GameMode, TileFamily, load_config
from gaprunner.gap_core.rng import RandomSource
from gaprunner.gap_core.tile_catalog import Tile, TileCatalog

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SequenceSlot:
    """One position in the sequence. A slot without a tile is a gap."""
    position: int
    value: int
    tile: Optional[Tile] = None

    @property
    def is_gap(self) -> bool:
        return self.tile is None


@dataclass(frozen=True)
class TileSequence:
    """A generated sequence of slots in left-to-right order."""
    slots: Tuple[SequenceSlot, ...]
    mode: GameMode
    family: Optional[TileFamily] = None  # Uniform mode only
    requested_gaps: int = 0

    def __len__(self) -> int:
        return len(self.slots)

    def __iter__(self):
        return iter(self.slots)

    @property
    def start(self) -> int:
        """Value of the leftmost slot."""
        return self.slots[0].value

    @property
    def gap_positions(self) -> Tuple[int, ...]:
        """Gap positions, ascending."""
        return tuple(slot.position for slot in self.slots if slot.is_gap)

    @property
    def gap_values(self) -> Tuple[int, ...]:
        """Expected values in the order the gaps must be filled."""
        return tuple(slot.value for slot in self.slots if slot.is_gap)

    @property
    def gap_count(self) -> int:
        return len(self.gap_positions)

    @property
    def is_degraded(self) -> bool:
        """True when fewer gaps were placed than requested."""
        return self.gap_count < self.requested_gaps

    def describe(self) -> str:
        """Compact text form, e.g. '[2 _ 4]'."""
        return "[" + " ".join("_" if s.is_gap else str(s.value) for s in self.slots) + "]"


def has_gap_run(positions: Iterable[int], max_run: int = 2) -> bool:
    """
    Check whether any run of adjacent positions is longer than max_run.

    Args:
        positions: Gap positions in any order.
        max_run: Longest allowed run of adjacent gaps.

    Returns:
        True if some max_run + 1 consecutive integers are all present.
    """
    ordered = sorted(set(positions))
    run = 0
    previous = None
    for pos in ordered:
        run = run + 1 if previous is not None and pos == previous + 1 else 1
        if run > max_run:
            return True
        previous = pos
    return False


def pick_gap_positions(
    length: int,
    gap_count: int,
    rng: RandomSource,
    max_run: int = 2
) -> List[int]:
    """
    Choose up to gap_count distinct gap positions in [0, length).

    Args:
        length: Sequence length.
        gap_count: Number of gaps requested.
        rng: Random source for the picks.
        max_run: Longest allowed run of adjacent gaps.

    Returns:
        Chosen positions, ascending. May be shorter than gap_count.
    """
    chosen: List[int] = []
    available = list(range(length))

    for _ in range(gap_count):
        valid = [
            pos for pos in available
            if not has_gap_run(chosen + [pos], max_run)
        ]
        if not valid:
            break
        pos = rng.choice(valid)
        chosen.append(pos)
        available.remove(pos)

    return sorted(chosen)


class SequenceGenerator:
    """
    Produces the scrolling sequence for each round.
    """

    def __init__(
        self,
        catalog: TileCatalog,
        rng: RandomSource,
        config: Optional[GameConfig] = None
    ):
        """
        Initialize sequence generator.

        Args:
            catalog: Tile catalog the filled slots are drawn from.
            rng: Random source for every draw.
            config: Game configuration. Uses default if None.
        """
        if config is None:
            config = load_config()

        self._config = config
        self._catalog = catalog
        self._rng = rng

    def generate(self, mode: GameMode) -> TileSequence:
        """
        Generate a sequence with at least one gap.

        Args:
            mode: Uniform draws every filled tile from one family,
                diverse picks a family per slot.

        Returns:
            The generated TileSequence.
        """
        mode = GameMode(mode)
        attempts = self._config.sequence.max_generation_attempts
        for attempt in range(attempts):
            sequence = self._build(mode)
            if sequence.gap_count > 0:
                if sequence.is_degraded:
                    logger.debug(
                        "Placed %d of %d requested gaps in %s",
                        sequence.gap_count, sequence.requested_gaps, sequence.describe()
                    )
                return sequence
            logger.debug("Regenerating sequence with no gaps (attempt %d)", attempt + 1)

        # The first pick is always valid, so this only trips on a broken config
        raise RuntimeError(f"No gapped sequence after {attempts} attempts")

    def _build(self, mode: GameMode) -> TileSequence:
        """Run one pass of the generation algorithm."""
        seq_config = self._config.sequence
        min_value = self._catalog.min_value
        max_value = self._catalog.max_value

        length = self._rng.randint(seq_config.min_length, seq_config.max_length)
        requested = self._rng.randint(1, length - 1)
        start = self._rng.randint(min_value, max_value - length + 1)

        gap_positions = set(pick_gap_positions(
            length, requested, self._rng, seq_config.max_consecutive_gaps
        ))

        family = self._rng.choice(self._catalog.families) if mode is GameMode.UNIFORM else None

        slots = []
        for position in range(length):
            value = start + position
            if position in gap_positions:
                slots.append(SequenceSlot(position, value))
                continue
            slot_family = family if family is not None else self._rng.choice(self._catalog.families)
            slots.append(SequenceSlot(position, value, self._catalog.get(slot_family, value)))

        return TileSequence(
            slots=tuple(slots),
            mode=mode,
            family=family,
            requested_gaps=requested
        )
