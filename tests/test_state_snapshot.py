"""
Tests for the render snapshot arrays.
"""

import numpy as np
import pytest

from gaprunner.gap_core.config_loader import TileFamily
from gaprunner.gap_core.game import GameSession
from gaprunner.gap_core.state_snapshot import NO_FAMILY

from conftest import FixedSequenceGenerator, make_sequence


@pytest.fixture
def session(config, catalog, clock):
    return GameSession(
        "uniform",
        config=config,
        catalog=catalog,
        seed=3,
        clock=clock,
        sequence_generator=FixedSequenceGenerator([make_sequence(catalog, 2, "x_x")])
    )


class TestSnapshot:
    """Test snapshot layout."""

    def test_before_start(self, session):
        snap = session.snapshot()
        assert snap.phase == "not_started"
        assert snap.slot_count == 0
        assert not snap.pool_mask.any()
        assert (snap.grid_rows, snap.grid_cols) == (0, 0)
        assert snap.front_gap_position == -1

    def test_fixed_shapes(self, session):
        session.start()
        snap = session.snapshot()
        assert snap.slot_value.shape == (7,)
        assert snap.slot_value.dtype == np.int8
        assert snap.pool_value.shape == (30,)
        assert snap.pool_mask.dtype == bool

    def test_round_contents(self, session):
        session.start()
        snap = session.snapshot()

        assert snap.slot_count == 3
        assert list(snap.slot_value[:3]) == [2, 3, 4]
        assert list(snap.slot_is_gap[:3]) == [False, True, False]
        assert snap.slot_family[1] == NO_FAMILY
        assert snap.slot_family[0] == 0
        assert snap.open_gap_count == 1
        assert snap.front_gap_position == 1

        assert (snap.grid_rows, snap.grid_cols) == (3, 3)
        assert int(snap.pool_mask.sum()) == 9
        assert list(snap.pool_value[:9]) == list(range(1, 10))

    def test_filled_gap(self, session, catalog):
        session.start()
        session.submit_selection(catalog.get(TileFamily.BAMBOO, 3))
        snap = session.snapshot()

        assert snap.slot_resolved[1]
        assert snap.slot_family[1] == catalog.family_index(TileFamily.BAMBOO)
        assert snap.open_gap_count == 0
        assert snap.front_gap_position == -1
        assert int(snap.pool_mask.sum()) == 8
        assert not snap.pool_mask[2]
        assert snap.score == 10

    def test_scroll_progress(self, session):
        session.start()
        session.tick(9.0)
        assert session.snapshot().scroll_progress == pytest.approx(0.5)

    def test_to_dict(self, session):
        session.start()
        data = session.snapshot().to_dict()
        assert int(data["lives"]) == 5
        assert int(data["round_number"]) == 1
        assert set(data) >= {"slot_value", "pool_value", "pool_mask"}
