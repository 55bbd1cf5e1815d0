"""
Selection Pool
==============

The grid of tappable tiles shown under the sequence, and the generator that
fills it for a round.
"""

from __future__ import annotations

from typing import Iterator, List, Optional, Sequence, Tuple

from gaprunner.gap_core.config_loader import GameConfig, GameMode, TileFamily, load_config
from gaprunner.gap_core.rng import RandomSource
from gaprunner.gap_core.tile_catalog import Tile, TileCatalog


class SelectionPool:
    """
    Tiles offered for tapping during one round, laid out on a fixed grid.

    Consuming a tile empties its cell; the remaining tiles keep their cells
    so the grid does not reflow under the player's finger.
    """

    def __init__(self, tiles: Sequence[Tile], rows: int, cols: int):
        """
        Initialize pool.

        Args:
            tiles: Tiles in grid order (row-major).
            rows: Grid rows.
            cols: Grid columns.

        Raises:
            ValueError: If the tiles contain duplicates or don't fit the grid.
        """
        if len(set(tiles)) != len(tiles):
            raise ValueError("Selection pool cannot contain duplicate tiles")
        if len(tiles) > rows * cols:
            raise ValueError(f"{len(tiles)} tiles do not fit a {rows}x{cols} grid")

        self._rows = rows
        self._cols = cols
        self._cells: List[Optional[Tile]] = list(tiles) + [None] * (rows * cols - len(tiles))

    def __len__(self) -> int:
        """Number of tiles still available."""
        return sum(1 for cell in self._cells if cell is not None)

    def __iter__(self) -> Iterator[Tile]:
        """Iterate over available tiles in grid order."""
        return (cell for cell in self._cells if cell is not None)

    def __contains__(self, tile: object) -> bool:
        return tile is not None and tile in self._cells

    @property
    def rows(self) -> int:
        return self._rows

    @property
    def cols(self) -> int:
        return self._cols

    @property
    def cells(self) -> Tuple[Optional[Tile], ...]:
        """All grid cells in row-major order; None marks an empty cell."""
        return tuple(self._cells)

    def grid(self) -> List[List[Optional[Tile]]]:
        """Cells as a list of rows."""
        return [
            self._cells[row * self._cols:(row + 1) * self._cols]
            for row in range(self._rows)
        ]

    def cell_of(self, tile: Tile) -> Optional[int]:
        """Cell index holding a tile, or None if it isn't in the pool."""
        try:
            return self._cells.index(tile)
        except ValueError:
            return None

    def tile_at(self, cell: int) -> Optional[Tile]:
        """Tile in a cell, or None for an empty or out-of-range cell."""
        if 0 <= cell < len(self._cells):
            return self._cells[cell]
        return None

    def consume(self, tile: Tile) -> bool:
        """
        Remove a tile for the rest of the round.

        Returns:
            True if the tile was present.
        """
        cell = self.cell_of(tile)
        if cell is None:
            return False
        self._cells[cell] = None
        return True


class SelectionPoolGenerator:
    """
    Fills the selection grid for a round.

    - Uniform: the nine tiles of the round's family, in value order
    - Diverse: every tile in the catalog, shuffled
    """

    def __init__(self, rng: RandomSource, config: Optional[GameConfig] = None):
        """
        Initialize pool generator.

        Args:
            rng: Random source for shuffles and family picks.
            config: Game configuration. Uses default if None.
        """
        if config is None:
            config = load_config()

        self._config = config
        self._rng = rng

    def generate(
        self,
        mode: GameMode,
        catalog: TileCatalog,
        family: Optional[TileFamily] = None
    ) -> SelectionPool:
        """
        Build the pool for a round.

        Args:
            mode: Game mode.
            catalog: Tile catalog.
            family: Family of the round's sequence (uniform mode). Picked at
                random when None.

        Returns:
            A fresh SelectionPool.
        """
        mode = GameMode(mode)
        mode_config = self._config.get_mode(mode)

        if mode is GameMode.UNIFORM:
            if family is None:
                family = self._rng.choice(catalog.families)
            tiles = list(catalog.suite(family))
        else:
            tiles = self._rng.shuffled(catalog.all_tiles)

        return SelectionPool(tiles, mode_config.grid_rows, mode_config.grid_cols)
