"""
GapRunner Core - The round-generation and gap-resolution engine.

This module provides the game session, the sequence and selection pool
generators, round resolution, the scroll timer and record persistence.

Main exports:
- GameSession: Drives rounds, lives and score for one player
- SequenceGenerator: Builds a round's scrolling sequence with gaps
- SelectionPoolGenerator: Fills the grid of tappable tiles
- RoundEngine: Resolves taps against the gap queue
- ScrollTimer: Cancelable countdown with generation tracking
- GameConfig: Configuration loaded from game_config.yaml
"""

from gaprunner.gap_core.config_loader import GameConfig, GameMode, TileFamily, load_config
from gaprunner.gap_core.tile_catalog import Tile, TileCatalog
from gaprunner.gap_core.rng import RandomSource
from gaprunner.gap_core.sequence_generator import (
    SequenceGenerator,
    SequenceSlot,
    TileSequence,
    has_gap_run,
    pick_gap_positions,
)
from gaprunner.gap_core.selection_pool import SelectionPool, SelectionPoolGenerator
from gaprunner.gap_core.round_engine import Outcome, RoundEngine, SelectionResult
from gaprunner.gap_core.scroll_timer import ScrollTimer
from gaprunner.gap_core.renderer import Renderer
from gaprunner.gap_core.records import (
    JsonRecordStore,
    MemoryRecordStore,
    RecordStore,
    RoundRecord,
)
from gaprunner.gap_core.state_snapshot import RoundSnapshot, SnapshotBuilder
from gaprunner.gap_core.game import GameSession, SessionPhase, SessionState

__all__ = [
    "GameConfig",
    "GameMode",
    "TileFamily",
    "load_config",
    "Tile",
    "TileCatalog",
    "RandomSource",
    "SequenceGenerator",
    "SequenceSlot",
    "TileSequence",
    "has_gap_run",
    "pick_gap_positions",
    "SelectionPool",
    "SelectionPoolGenerator",
    "Outcome",
    "RoundEngine",
    "SelectionResult",
    "ScrollTimer",
    "Renderer",
    "JsonRecordStore",
    "MemoryRecordStore",
    "RecordStore",
    "RoundRecord",
    "RoundSnapshot",
    "SnapshotBuilder",
    "GameSession",
    "SessionPhase",
    "SessionState",
]
