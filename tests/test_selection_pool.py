"""
Tests for the selection pool and its generator.
"""

import pytest

from gaprunner.gap_core.config_loader import GameMode, TileFamily
from gaprunner.gap_core.rng import RandomSource
from gaprunner.gap_core.selection_pool import SelectionPool, SelectionPoolGenerator
from gaprunner.gap_core.tile_catalog import Tile


@pytest.fixture
def pool_generator(config):
    return SelectionPoolGenerator(RandomSource(seed=42), config)


class TestSelectionPool:
    """Test pool layout and consumption."""

    def test_rejects_duplicates(self):
        tile = Tile(TileFamily.DOT, 1)
        with pytest.raises(ValueError):
            SelectionPool([tile, tile], 1, 2)

    def test_rejects_overflow(self, catalog):
        with pytest.raises(ValueError):
            SelectionPool(catalog.suite(TileFamily.DOT), 2, 4)

    def test_padding_cells(self, catalog):
        pool = SelectionPool(catalog.all_tiles, 5, 6)
        assert len(pool.cells) == 30
        assert pool.cells[27:] == (None, None, None)
        assert len(pool) == 27

    def test_consume_keeps_layout(self, catalog):
        suite = catalog.suite(TileFamily.BAMBOO)
        pool = SelectionPool(suite, 3, 3)
        target = suite[4]

        assert pool.consume(target)
        assert target not in pool
        assert pool.tile_at(4) is None
        assert pool.tile_at(5) == suite[5]
        assert len(pool) == 8

        # Second consume is a miss
        assert not pool.consume(target)

    def test_grid_rows(self, catalog):
        pool = SelectionPool(catalog.suite(TileFamily.DOT), 3, 3)
        grid = pool.grid()
        assert len(grid) == 3
        assert [t.value for t in grid[1]] == [4, 5, 6]

    def test_tile_at_out_of_range(self, catalog):
        pool = SelectionPool(catalog.suite(TileFamily.DOT), 3, 3)
        assert pool.tile_at(-1) is None
        assert pool.tile_at(9) is None


class TestSelectionPoolGenerator:
    """Test per-mode pool contents."""

    def test_uniform_is_one_family_in_order(self, pool_generator, catalog):
        pool = pool_generator.generate(GameMode.UNIFORM, catalog, TileFamily.CHARACTER)
        assert (pool.rows, pool.cols) == (3, 3)
        assert list(pool) == list(catalog.suite(TileFamily.CHARACTER))

    def test_uniform_without_family_picks_one(self, pool_generator, catalog):
        pool = pool_generator.generate(GameMode.UNIFORM, catalog)
        families = {t.family for t in pool}
        assert len(families) == 1
        assert len(pool) == 9

    def test_diverse_is_whole_catalog_shuffled(self, pool_generator, catalog):
        pool = pool_generator.generate(GameMode.DIVERSE, catalog)
        assert (pool.rows, pool.cols) == (5, 6)
        assert len(pool) == 27
        assert set(pool) == set(catalog.all_tiles)

        orders = {tuple(pool_generator.generate(GameMode.DIVERSE, catalog)) for _ in range(5)}
        assert len(orders) > 1

    def test_diverse_ignores_family(self, pool_generator, catalog):
        pool = pool_generator.generate(GameMode.DIVERSE, catalog, TileFamily.DOT)
        assert set(pool) == set(catalog.all_tiles)
