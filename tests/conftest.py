"""
Shared test doubles for the GapRunner tests.
"""

from typing import List, Optional

import pytest

from gaprunner.gap_core.config_loader import GameMode, TileFamily, load_config
from gaprunner.gap_core.renderer import Renderer
from gaprunner.gap_core.sequence_generator import SequenceSlot, TileSequence
from gaprunner.gap_core.tile_catalog import TileCatalog


def make_sequence(
    catalog: TileCatalog,
    start: int,
    pattern: str,
    family: Optional[TileFamily] = TileFamily.BAMBOO,
    mode: GameMode = GameMode.UNIFORM
) -> TileSequence:
    """
    Build a sequence from a pattern such as "x_x" ('_' marks a gap).

    Filled slots use `family`, or cycle through the catalog families when
    family is None.
    """
    slots = []
    for position, mark in enumerate(pattern):
        value = start + position
        if mark == "_":
            slots.append(SequenceSlot(position, value))
        else:
            slot_family = family or catalog.families[position % len(catalog.families)]
            slots.append(SequenceSlot(position, value, catalog.get(slot_family, value)))
    return TileSequence(
        slots=tuple(slots),
        mode=mode,
        family=family if mode is GameMode.UNIFORM else None,
        requested_gaps=pattern.count("_")
    )


class FixedSequenceGenerator:
    """Hands out prepared sequences in order, repeating the last one."""

    def __init__(self, sequences: List[TileSequence]):
        self._sequences = list(sequences)
        self.calls = 0

    def generate(self, mode) -> TileSequence:
        index = min(self.calls, len(self._sequences) - 1)
        self.calls += 1
        return self._sequences[index]


class RecordingRenderer(Renderer):
    """Collects every hook call as (name, args)."""

    def __init__(self):
        self.events = []

    def names(self) -> List[str]:
        return [name for name, _ in self.events]

    def last(self, name: str):
        for event_name, args in reversed(self.events):
            if event_name == name:
                return args
        return None

    def on_round_started(self, sequence, pool, generation):
        self.events.append(("round_started", (sequence, pool, generation)))

    def on_score_changed(self, score):
        self.events.append(("score_changed", score))

    def on_lives_changed(self, lives):
        self.events.append(("lives_changed", lives))

    def on_round_changed(self, round_number):
        self.events.append(("round_changed", round_number))

    def on_gap_filled(self, queue_position, tile):
        self.events.append(("gap_filled", (queue_position, tile)))

    def on_selection_rejected(self, tile):
        self.events.append(("selection_rejected", tile))

    def on_round_complete(self):
        self.events.append(("round_complete", None))

    def on_session_ended(self, record):
        self.events.append(("session_ended", record))


class ManualClock:
    """Clock whose time only moves when told to."""

    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def config():
    return load_config()


@pytest.fixture
def catalog(config):
    return TileCatalog(config)


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def renderer():
    return RecordingRenderer()
