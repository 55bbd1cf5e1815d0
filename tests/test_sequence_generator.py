"""
Tests for sequence generation and gap placement.
"""

import pytest

from gaprunner.gap_core.config_loader import GameMode, TileFamily
from gaprunner.gap_core.rng import RandomSource
from gaprunner.gap_core.sequence_generator import (
    SequenceGenerator,
    has_gap_run,
    pick_gap_positions,
)


class ForcedRandom(RandomSource):
    """RandomSource that pins chosen randint ranges to fixed answers."""

    def __init__(self, forced, seed=0):
        super().__init__(seed)
        self._forced = forced

    def randint(self, low, high):
        if (low, high) in self._forced:
            return self._forced[(low, high)]
        return super().randint(low, high)


class FirstChoice(RandomSource):
    """RandomSource whose choice() always takes the first option."""

    def choice(self, options):
        return options[0]


@pytest.fixture
def generator(config, catalog):
    return SequenceGenerator(catalog, RandomSource(seed=42), config)


class TestGapRun:
    """Test the adjacent-gap run check."""

    def test_short_lists_never_run(self):
        assert not has_gap_run([])
        assert not has_gap_run([3])
        assert not has_gap_run([3, 4])

    def test_three_in_a_row(self):
        assert has_gap_run([1, 2, 3])
        assert has_gap_run([6, 0, 5, 4])

    def test_gaps_between(self):
        assert not has_gap_run([0, 1, 3, 4, 6])
        assert not has_gap_run([0, 2, 4, 6])

    def test_custom_limit(self):
        assert has_gap_run([1, 2], max_run=1)
        assert not has_gap_run([1, 2, 3], max_run=3)


class TestPickGapPositions:
    """Test incremental gap placement."""

    def test_stops_early_when_no_valid_position(self):
        rng = FirstChoice(seed=0)
        positions = pick_gap_positions(7, 6, rng)
        assert positions == [0, 1, 3, 4, 6]

    def test_positions_are_distinct_and_sorted(self):
        rng = RandomSource(seed=7)
        for _ in range(200):
            positions = pick_gap_positions(5, 3, rng)
            assert positions == sorted(set(positions))
            assert all(0 <= p < 5 for p in positions)

    def test_length_seven_six_requested(self):
        """Never a run of three gaps, never more gaps than requested."""
        rng = RandomSource(seed=1234)
        for _ in range(1000):
            positions = pick_gap_positions(7, 6, rng)
            assert not has_gap_run(positions)
            assert 1 <= len(positions) <= 6

    def test_first_pick_always_succeeds(self):
        rng = RandomSource(seed=3)
        for length in range(3, 8):
            assert len(pick_gap_positions(length, 1, rng)) == 1


class TestSequenceGenerator:
    """Test full sequence generation."""

    @pytest.mark.parametrize("mode", list(GameMode))
    def test_invariants(self, generator, mode):
        for _ in range(500):
            sequence = generator.generate(mode)
            length = len(sequence)
            assert 3 <= length <= 7
            assert sequence.start >= 1
            assert sequence.start + length - 1 <= 9
            assert [s.value for s in sequence] == list(range(sequence.start, sequence.start + length))
            assert [s.position for s in sequence] == list(range(length))
            assert 1 <= sequence.gap_count <= length - 1
            assert sequence.gap_count <= sequence.requested_gaps
            assert not has_gap_run(sequence.gap_positions)

    def test_filled_slots_carry_matching_tiles(self, generator):
        for _ in range(200):
            sequence = generator.generate(GameMode.DIVERSE)
            for slot in sequence:
                if slot.is_gap:
                    assert slot.tile is None
                else:
                    assert slot.tile.value == slot.value

    def test_uniform_uses_one_family(self, generator):
        for _ in range(200):
            sequence = generator.generate(GameMode.UNIFORM)
            families = {s.tile.family for s in sequence if not s.is_gap}
            assert families == {sequence.family}

    def test_diverse_mixes_families(self, generator):
        families = set()
        for _ in range(200):
            sequence = generator.generate(GameMode.DIVERSE)
            assert sequence.family is None
            families.update(s.tile.family for s in sequence if not s.is_gap)
        assert families == set(TileFamily)

    def test_gap_values_in_position_order(self, generator):
        for _ in range(200):
            sequence = generator.generate(GameMode.UNIFORM)
            expected = [s.value for s in sequence if s.is_gap]
            assert list(sequence.gap_values) == expected
            assert list(sequence.gap_values) == sorted(sequence.gap_values)

    def test_forced_long_sequence(self, config, catalog):
        rng = ForcedRandom({(3, 7): 7, (1, 6): 6}, seed=99)
        generator = SequenceGenerator(catalog, rng, config)
        for _ in range(1000):
            sequence = generator.generate(GameMode.UNIFORM)
            assert len(sequence) == 7
            assert sequence.requested_gaps == 6
            assert sequence.gap_count <= 6
            assert sequence.is_degraded
            assert not has_gap_run(sequence.gap_positions)

    def test_forced_shape(self, config, catalog):
        rng = ForcedRandom({(3, 7): 3, (1, 2): 1, (1, 7): 2}, seed=5)
        sequence = SequenceGenerator(catalog, rng, config).generate(GameMode.UNIFORM)
        assert len(sequence) == 3
        assert sequence.start == 2
        assert sequence.gap_count == 1
        assert not sequence.is_degraded

    def test_seed_reproducible(self, config, catalog):
        a = SequenceGenerator(catalog, RandomSource(seed=11), config)
        b = SequenceGenerator(catalog, RandomSource(seed=11), config)
        assert [a.generate("diverse") for _ in range(20)] == [b.generate("diverse") for _ in range(20)]

    def test_describe(self, generator):
        sequence = generator.generate(GameMode.UNIFORM)
        text = sequence.describe()
        assert text.startswith("[") and text.endswith("]")
        assert text.count("_") == sequence.gap_count
