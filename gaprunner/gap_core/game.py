"""
Game Session
============

Main game orchestrator combining sequence generation, the selection pool,
round resolution, scoring, lives and the scroll timer.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Dict, Optional

from gaprunner.gap_core.config_loader import GameConfig, GameMode, load_config
from gaprunner.gap_core.records import MemoryRecordStore, RecordStore, RoundRecord
from gaprunner.gap_core.renderer import Renderer
from gaprunner.gap_core.rng import RandomSource
from gaprunner.gap_core.round_engine import RoundEngine, SelectionResult
from gaprunner.gap_core.rules import LifeRules
from gaprunner.gap_core.scoring import ScoreTracker
from gaprunner.gap_core.scroll_timer import ScrollTimer
from gaprunner.gap_core.selection_pool import SelectionPoolGenerator
from gaprunner.gap_core.sequence_generator import SequenceGenerator
from gaprunner.gap_core.state_snapshot import RoundSnapshot, SnapshotBuilder
from gaprunner.gap_core.tile_catalog import Tile, TileCatalog

logger = logging.getLogger(__name__)


class SessionPhase(str, Enum):
    NOT_STARTED = "not_started"
    IN_ROUND = "in_round"
    ROUND_COMPLETE = "round_complete"
    ENDED = "ended"


@dataclass
class SessionState:
    """Cross-round counters. Only GameSession mutates these."""
    score: int = 0
    lives: int = 0
    rounds_completed: int = 0
    started_at: float = 0.0


class GameSession:
    """
    Main game session class.

    Orchestrates:
    - Sequence and selection pool generation
    - Round resolution
    - Scoring
    - Lives and termination
    - Scroll timer
    - Record hand-off at session end

    Nothing here raises during play: taps and timer expiries that arrive in
    the wrong phase are ignored.
    """

    def __init__(
        self,
        mode: GameMode,
        config: Optional[GameConfig] = None,
        catalog: Optional[TileCatalog] = None,
        rng: Optional[RandomSource] = None,
        seed: Optional[int] = None,
        renderer: Optional[Renderer] = None,
        record_store: Optional[RecordStore] = None,
        clock: Optional[Callable[[], float]] = None,
        sequence_generator: Optional[SequenceGenerator] = None,
        pool_generator: Optional[SelectionPoolGenerator] = None
    ):
        """
        Initialize session.

        Args:
            mode: Uniform or diverse.
            config: Game configuration. Uses default if None.
            catalog: Tile catalog. Built from config if None.
            rng: Random source for all draws. Created from seed if None.
            seed: Random seed, used only when rng is None.
            renderer: Receives state-change hooks. No-op if None.
            record_store: Receives the record when lives run out.
                In-memory if None.
            clock: Wall clock in seconds. time.time if None.
            sequence_generator: Override for the sequence generator.
            pool_generator: Override for the selection pool generator.
        """
        if config is None:
            config = load_config()

        self._config = config
        self._mode = GameMode(mode)
        self._mode_config = config.get_mode(self._mode)
        self._catalog = catalog if catalog is not None else TileCatalog(config)
        self._rng = rng if rng is not None else RandomSource(seed)
        self._renderer = renderer if renderer is not None else Renderer()
        self._record_store = record_store if record_store is not None else MemoryRecordStore()
        self._clock = clock if clock is not None else time.time

        # Subsystems
        self._sequence_generator = sequence_generator or SequenceGenerator(
            self._catalog, self._rng, config
        )
        self._pool_generator = pool_generator or SelectionPoolGenerator(self._rng, config)
        self._scorer = ScoreTracker(config)
        self._lives = LifeRules(config)
        self._timer = ScrollTimer()
        self._snapshot_builder = SnapshotBuilder(config, self._catalog)

        # Session state
        self._phase = SessionPhase.NOT_STARTED
        self._rounds_completed: int = 0
        self._started_at: float = 0.0
        self._ended_at: Optional[float] = None
        self._round: Optional[RoundEngine] = None
        self._intermission: float = 0.0
        self._last_record: Optional[RoundRecord] = None
        self._end_reason: str = ""

    @property
    def config(self) -> GameConfig:
        return self._config

    @property
    def mode(self) -> GameMode:
        return self._mode

    @property
    def catalog(self) -> TileCatalog:
        return self._catalog

    @property
    def renderer(self) -> Renderer:
        return self._renderer

    @property
    def record_store(self) -> RecordStore:
        return self._record_store

    @property
    def phase(self) -> SessionPhase:
        return self._phase

    @property
    def is_over(self) -> bool:
        """True once the session has ended."""
        return self._phase is SessionPhase.ENDED

    @property
    def score(self) -> int:
        return self._scorer.score

    @property
    def lives(self) -> int:
        return self._lives.lives

    @property
    def rounds_completed(self) -> int:
        return self._rounds_completed

    @property
    def round_number(self) -> int:
        """Round shown to the player, starting at 1."""
        return self._rounds_completed + 1

    @property
    def state(self) -> SessionState:
        """Copy of the cross-round counters."""
        return SessionState(
            score=self._scorer.score,
            lives=self._lives.lives,
            rounds_completed=self._rounds_completed,
            started_at=self._started_at
        )

    @property
    def current_round(self) -> Optional[RoundEngine]:
        """The active round, or the last one after the session ended."""
        return self._round

    @property
    def timer(self) -> ScrollTimer:
        return self._timer

    @property
    def scroll_seconds(self) -> float:
        """How long a sequence takes to cross the screen in this mode."""
        return self._mode_config.scroll_seconds

    @property
    def elapsed_seconds(self) -> float:
        """Wall time since start(), frozen once the session ends."""
        if self._phase is SessionPhase.NOT_STARTED:
            return 0.0
        end = self._ended_at if self._ended_at is not None else self._clock()
        return max(0.0, end - self._started_at)

    @property
    def last_record(self) -> Optional[RoundRecord]:
        """Record produced when lives last ran out."""
        return self._last_record

    @property
    def end_reason(self) -> str:
        """'out_of_lives', 'quit', or empty while playing."""
        return self._end_reason

    def start(self) -> None:
        """
        Reset counters and begin the first round.

        May be called again after the session ended to play again.
        """
        self._timer.cancel()
        self._scorer.reset()
        self._lives.reset()
        self._rounds_completed = 0
        self._started_at = self._clock()
        self._ended_at = None
        self._intermission = 0.0
        self._last_record = None
        self._end_reason = ""

        logger.info("Session started in %s mode", self._mode.value)
        self._renderer.on_score_changed(self._scorer.score)
        self._renderer.on_lives_changed(self._lives.lives)
        self._begin_round()

    def submit_selection(self, tile: Tile) -> Optional[SelectionResult]:
        """
        Handle a tapped tile.

        Args:
            tile: The tile the player tapped.

        Returns:
            SelectionResult, or None if the tap was ignored.
        """
        if self._phase is not SessionPhase.IN_ROUND or self._round is None:
            logger.debug("Ignoring selection %r in phase %s", tile, self._phase.value)
            return None

        result = self._round.submit_selection(tile)
        if result is None:
            return None

        if result.is_correct:
            self._on_correct_selection(result)
        else:
            self._on_incorrect_selection(result)
        return result

    def on_time_expired(self, generation: Optional[int] = None) -> bool:
        """
        The sequence scrolled off screen.

        Args:
            generation: Generation the scroll was started with. Expiries from
                an earlier round are ignored. None means the active round.

        Returns:
            True if a life was lost.
        """
        if self._phase is not SessionPhase.IN_ROUND or self._round is None:
            logger.debug("Ignoring timer expiry in phase %s", self._phase.value)
            return False
        if generation is not None and generation != self._round.generation:
            logger.debug(
                "Ignoring stale timer expiry (generation %d, active %d)",
                generation, self._round.generation
            )
            return False
        if not self._round.on_time_expired():
            return False

        self._timer.cancel()
        logger.info(
            "Round %d missed with %d gap(s) open",
            self.round_number, len(self._round.gap_queue)
        )
        self._lose_life("missed")
        return True

    def tick(self, dt: float) -> None:
        """
        Advance time for hosts that run a frame loop.

        Counts down the scroll timer during a round and the presentation delay
        after a completed round.

        Args:
            dt: Seconds since the last tick.
        """
        if self._phase is SessionPhase.IN_ROUND:
            self._timer.tick(dt)
        elif self._phase is SessionPhase.ROUND_COMPLETE:
            self._intermission -= dt
            if self._intermission <= 0:
                self._advance_round()

    def quit(self) -> bool:
        """
        Abandon the session. Nothing is recorded.

        Returns:
            True if a running session was ended.
        """
        if self._phase not in (SessionPhase.IN_ROUND, SessionPhase.ROUND_COMPLETE):
            return False
        self._timer.cancel()
        self._phase = SessionPhase.ENDED
        self._ended_at = self._clock()
        self._end_reason = "quit"
        logger.info("Session quit at score %d", self._scorer.score)
        self._renderer.on_session_ended(None)
        return True

    def snapshot(self) -> RoundSnapshot:
        """Pack the current state into arrays for drawing."""
        return self._snapshot_builder.build(self)

    def get_info(self) -> Dict[str, Any]:
        """Summary dict for logging and front ends."""
        info: Dict[str, Any] = {
            "phase": self._phase.value,
            "mode": self._mode.value,
            "score": self._scorer.score,
            "lives": self._lives.lives,
            "rounds_completed": self._rounds_completed,
            "gaps_filled": self._scorer.gaps_filled,
            "lost_to_mistakes": self._lives.lost_to_mistakes,
            "lost_to_misses": self._lives.lost_to_misses,
            "elapsed_seconds": self.elapsed_seconds,
            "end_reason": self._end_reason,
        }
        if self._round is not None:
            info["sequence"] = self._round.sequence.describe()
            info["gap_queue"] = list(self._round.gap_queue)
        return info

    def _begin_round(self) -> None:
        """Generate and arm a fresh round."""
        sequence = self._sequence_generator.generate(self._mode)
        pool = self._pool_generator.generate(self._mode, self._catalog, sequence.family)

        # Re-arming bumps the generation, so any expiry still in flight for
        # the previous round no longer matches
        generation = self._timer.arm(self._mode_config.scroll_seconds, self.on_time_expired)
        self._round = RoundEngine(
            sequence,
            pool,
            points_per_gap=self._scorer.points_per_gap,
            generation=generation
        )
        self._phase = SessionPhase.IN_ROUND

        logger.info(
            "Round %d: %s gaps=%s",
            self.round_number, sequence.describe(), list(sequence.gap_values)
        )
        self._renderer.on_round_changed(self.round_number)
        self._renderer.on_round_started(sequence, pool, generation)

    def _advance_round(self) -> None:
        self._rounds_completed += 1
        self._begin_round()

    def _on_correct_selection(self, result: SelectionResult) -> None:
        self._scorer.apply_gap(result.expected_value, result.queue_position)
        self._renderer.on_score_changed(self._scorer.score)
        self._renderer.on_gap_filled(result.queue_position, result.tile)

        if not self._round.is_complete():
            return

        self._timer.cancel()
        self._phase = SessionPhase.ROUND_COMPLETE
        self._intermission = self._config.session.presentation_delay
        logger.info("Round %d complete, score %d", self.round_number, self._scorer.score)
        self._renderer.on_round_complete()

        if self._intermission <= 0:
            self._advance_round()

    def _on_incorrect_selection(self, result: SelectionResult) -> None:
        self._renderer.on_selection_rejected(result.tile)
        self._lose_life("mistake")

    def _lose_life(self, reason: str) -> None:
        termination = self._lives.lose_life(reason)
        self._renderer.on_lives_changed(self._lives.lives)

        if termination.terminated:
            self._end(termination.reason)
            return

        if reason == "missed" or self._config.session.restart_round_on_mistake:
            self._timer.cancel()
            self._advance_round()

    def _end(self, reason: str) -> None:
        """Finish the session and hand the record to the store."""
        self._timer.cancel()
        self._phase = SessionPhase.ENDED
        self._ended_at = self._clock()
        self._end_reason = reason

        record = RoundRecord.create(
            score=self._scorer.score,
            mode=self._mode,
            duration_seconds=self._ended_at - self._started_at,
            completed_at=datetime.fromtimestamp(self._ended_at, tz=timezone.utc)
        )
        self._last_record = record
        try:
            self._record_store.save(record)
        except (OSError, ValueError):
            # ValueError covers an unreadable record file
            logger.exception("Failed to save record %s", record.id)

        logger.info(
            "Session ended (%s): score %d after %d round(s)",
            reason, record.score, self._rounds_completed
        )
        self._renderer.on_session_ended(record)
