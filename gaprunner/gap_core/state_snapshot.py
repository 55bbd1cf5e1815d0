"""
State Snapshot
==============

Packs session state into fixed-size numpy arrays for renderers.

Sequences are padded to the longest possible sequence and the selection grid
to the largest grid across modes, so consumers can preallocate.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Dict, Optional

import numpy as np

from gaprunner.gap_core.config_loader import GameConfig, load_config
from gaprunner.gap_core.tile_catalog import TileCatalog

if TYPE_CHECKING:
    from gaprunner.gap_core.game import GameSession

# Family index used for gaps, empty cells and padding
NO_FAMILY = -1


@dataclass
class RoundSnapshot:
    """
    Complete round state snapshot.

    All arrays are fixed-size with masking for variable lengths.
    """
    # Session scalars
    phase: str
    score: int
    lives: int
    round_number: int
    scroll_progress: float            # 0 when the sequence enters, 1 when it leaves
    front_gap_position: int           # Slot index of the next gap, -1 if none

    # Sequence arrays (MAX_SLOTS,)
    slot_value: np.ndarray            # int8
    slot_family: np.ndarray           # int8, NO_FAMILY for open gaps
    slot_is_gap: np.ndarray           # bool, True for every gap, filled or not
    slot_resolved: np.ndarray         # bool, gap filled by the player
    slot_mask: np.ndarray             # bool

    # Selection grid arrays (MAX_CELLS,)
    pool_value: np.ndarray            # int8, 0 for empty cells
    pool_family: np.ndarray           # int8
    pool_mask: np.ndarray             # bool
    grid_rows: int
    grid_cols: int

    @property
    def slot_count(self) -> int:
        return int(self.slot_mask.sum())

    @property
    def open_gap_count(self) -> int:
        return int((self.slot_is_gap & ~self.slot_resolved & self.slot_mask).sum())

    def to_dict(self) -> Dict[str, np.ndarray]:
        """Arrays and scalars keyed by name."""
        return {
            "score": np.array(self.score, dtype=np.int64),
            "lives": np.array(self.lives, dtype=np.int32),
            "round_number": np.array(self.round_number, dtype=np.int32),
            "scroll_progress": np.array(self.scroll_progress, dtype=np.float32),
            "front_gap_position": np.array(self.front_gap_position, dtype=np.int32),
            "slot_value": self.slot_value,
            "slot_family": self.slot_family,
            "slot_is_gap": self.slot_is_gap,
            "slot_resolved": self.slot_resolved,
            "slot_mask": self.slot_mask,
            "pool_value": self.pool_value,
            "pool_family": self.pool_family,
            "pool_mask": self.pool_mask,
        }


class SnapshotBuilder:
    """
    Builds RoundSnapshots from a live session.
    """

    def __init__(self, config: Optional[GameConfig] = None, catalog: Optional[TileCatalog] = None):
        """
        Initialize snapshot builder.

        Args:
            config: Game configuration. Uses default if None.
            catalog: Catalog for family indices. Built from config if None.
        """
        if config is None:
            config = load_config()

        self._config = config
        self._catalog = catalog if catalog is not None else TileCatalog(config)
        self._max_slots = config.sequence.max_length
        self._max_cells = config.max_grid_size

    @property
    def max_slots(self) -> int:
        return self._max_slots

    @property
    def max_cells(self) -> int:
        return self._max_cells

    def build(self, session: "GameSession") -> RoundSnapshot:
        """
        Snapshot the session's current round.

        Args:
            session: The session to read. May not have started yet.

        Returns:
            RoundSnapshot with arrays sized for the config.
        """
        slot_value = np.zeros(self._max_slots, dtype=np.int8)
        slot_family = np.full(self._max_slots, NO_FAMILY, dtype=np.int8)
        slot_is_gap = np.zeros(self._max_slots, dtype=bool)
        slot_resolved = np.zeros(self._max_slots, dtype=bool)
        slot_mask = np.zeros(self._max_slots, dtype=bool)

        pool_value = np.zeros(self._max_cells, dtype=np.int8)
        pool_family = np.full(self._max_cells, NO_FAMILY, dtype=np.int8)
        pool_mask = np.zeros(self._max_cells, dtype=bool)

        grid_rows = grid_cols = 0
        front = -1

        current = session.current_round
        if current is not None:
            placed = current.placed_tiles
            for slot in current.sequence.slots:
                i = slot.position
                slot_mask[i] = True
                slot_value[i] = slot.value
                slot_is_gap[i] = slot.is_gap
                tile = slot.tile if slot.tile is not None else placed.get(i)
                if tile is not None:
                    slot_family[i] = self._catalog.family_index(tile.family)
                    slot_resolved[i] = slot.is_gap

            pool = current.pool
            grid_rows, grid_cols = pool.rows, pool.cols
            for i, tile in enumerate(pool.cells):
                if tile is None:
                    continue
                pool_mask[i] = True
                pool_value[i] = tile.value
                pool_family[i] = self._catalog.family_index(tile.family)

            if current.front_position is not None:
                front = current.front_position

        return RoundSnapshot(
            phase=session.phase.value,
            score=session.score,
            lives=session.lives,
            round_number=session.round_number,
            scroll_progress=float(session.timer.progress),
            front_gap_position=front,
            slot_value=slot_value,
            slot_family=slot_family,
            slot_is_gap=slot_is_gap,
            slot_resolved=slot_resolved,
            slot_mask=slot_mask,
            pool_value=pool_value,
            pool_family=pool_family,
            pool_mask=pool_mask,
            grid_rows=grid_rows,
            grid_cols=grid_cols
        )
