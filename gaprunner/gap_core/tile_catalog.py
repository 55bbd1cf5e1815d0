"""
Tile Catalog
============

Provides access to the tile families and values defined in config.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterator, Optional, Tuple

from gaprunner.gap_core.config_loader import (
    FamilyConfig,
    GameConfig,
    TileFamily,
    load_config
)


@dataclass(frozen=True)
class Tile:
    """
    A single tile. Identity is (family, value).

    Frozen so tiles can live in sets and be compared across rounds.
    """
    family: TileFamily
    value: int

    def __repr__(self) -> str:
        return f"Tile({self.family.value} {self.value})"


class TileCatalog:
    """
    Every tile in the game, grouped by family.

    Built once from config and passed to whatever needs it.
    """

    def __init__(self, config: Optional[GameConfig] = None):
        """
        Initialize catalog from game config.

        Args:
            config: GameConfig instance. If None, loads from default location.
        """
        if config is None:
            config = load_config()

        self._config = config
        catalog_config = config.catalog
        self._family_configs: Dict[TileFamily, FamilyConfig] = {
            fc.family: fc for fc in catalog_config.families
        }
        self._families: Tuple[TileFamily, ...] = tuple(
            fc.family for fc in catalog_config.families
        )
        self._values: Tuple[int, ...] = tuple(
            range(catalog_config.min_value, catalog_config.max_value + 1)
        )
        self._suites: Dict[TileFamily, Tuple[Tile, ...]] = {
            family: tuple(Tile(family, value) for value in self._values)
            for family in self._families
        }

    def __len__(self) -> int:
        """Total number of tiles across all families."""
        return len(self._families) * len(self._values)

    def __iter__(self) -> Iterator[Tile]:
        """Iterate over all tiles, family by family."""
        return iter(self.all_tiles)

    def __contains__(self, tile: object) -> bool:
        return (
            isinstance(tile, Tile)
            and tile.family in self._suites
            and tile.value in self._values
        )

    @property
    def families(self) -> Tuple[TileFamily, ...]:
        """Families in config order."""
        return self._families

    @property
    def values(self) -> Tuple[int, ...]:
        """The value range every family covers, ascending."""
        return self._values

    @property
    def min_value(self) -> int:
        return self._values[0]

    @property
    def max_value(self) -> int:
        return self._values[-1]

    @property
    def all_tiles(self) -> Tuple[Tile, ...]:
        """All tiles, family by family, each family in value order."""
        return tuple(tile for family in self._families for tile in self._suites[family])

    def suite(self, family: TileFamily) -> Tuple[Tile, ...]:
        """All tiles of one family in value order."""
        return self._suites[TileFamily(family)]

    def get(self, family: TileFamily, value: int) -> Tile:
        """
        Look up a tile by identity.

        Raises:
            KeyError: If the family or value is not in the catalog.
        """
        suite = self._suites[TileFamily(family)]
        index = value - self._values[0]
        if not 0 <= index < len(suite):
            raise KeyError(f"Tile value {value} out of range [{self.min_value}, {self.max_value}]")
        return suite[index]

    def family_index(self, family: TileFamily) -> int:
        """Position of a family in config order (used for array encodings)."""
        return self._families.index(family)

    def label(self, family: TileFamily) -> str:
        """Human-readable family name."""
        return self._family_configs[family].label

    def asset_name(self, tile: Tile) -> str:
        """Image asset name for a tile, e.g. 'pict 3'."""
        return f"{self._family_configs[tile.family].asset_prefix} {tile.value}"

    def identifier(self, tile: Tile) -> str:
        """Stable string identifier for a tile, e.g. 'pict_3'."""
        return f"{self._family_configs[tile.family].asset_prefix}_{tile.value}"

    def get_by_identifier(self, identifier: str) -> Optional[Tile]:
        """Inverse of identifier(); None if it doesn't name a catalog tile."""
        prefix, _, value_text = identifier.rpartition("_")
        for family, family_config in self._family_configs.items():
            if family_config.asset_prefix == prefix:
                try:
                    return self.get(family, int(value_text))
                except (KeyError, ValueError):
                    return None
        return None
