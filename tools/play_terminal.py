"""
Terminal Play Mode
==================

Play GapRunner in a terminal. The sequence "scrolls" in wall-clock time:
the time you spend thinking between moves is fed to the session, so a slow
answer can still lose the round.

Controls:
    1..N     Tap the tile in that grid cell
    q        Quit (the session is not recorded)
    r        Play again after game over

Usage:
    python -m tools.play_terminal [--mode uniform|diverse] [--seed SEED] [--records PATH]
"""

from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path
from typing import Optional

# Add project root to path for direct script execution
_project_root = Path(__file__).parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

from gaprunner.gap_core.config_loader import GameMode, load_config
from gaprunner.gap_core.game import GameSession, SessionPhase
from gaprunner.gap_core.records import JsonRecordStore, RoundRecord
from gaprunner.gap_core.renderer import Renderer
from gaprunner.gap_core.selection_pool import SelectionPool
from gaprunner.gap_core.sequence_generator import TileSequence
from gaprunner.gap_core.tile_catalog import Tile, TileCatalog


class TerminalRenderer(Renderer):
    """Prints session events as plain text."""

    def __init__(self, catalog: TileCatalog, out=None):
        self._catalog = catalog
        self._out = out if out is not None else sys.stdout

    def _print(self, text: str = "") -> None:
        print(text, file=self._out)

    def tile_label(self, tile: Tile) -> str:
        return f"{self._catalog.label(tile.family)[0]}{tile.value}"

    def on_round_started(self, sequence: TileSequence, pool: SelectionPool, generation: int) -> None:
        self._print()
        self._print("  " + " ".join(
            " __ " if slot.is_gap else f"[{self.tile_label(slot.tile)}]"
            for slot in sequence.slots
        ))
        self._print()
        self.draw_pool(pool)

    def draw_pool(self, pool: SelectionPool) -> None:
        for r, row in enumerate(pool.grid()):
            cells = []
            for c, tile in enumerate(row):
                index = r * pool.cols + c + 1
                cells.append(f"{index:>2}:{self.tile_label(tile)}" if tile is not None else "  :  ")
            self._print("  " + "  ".join(cells))

    def on_score_changed(self, score: int) -> None:
        self._print(f"Score: {score}")

    def on_lives_changed(self, lives: int) -> None:
        self._print("Lives: " + ("♥" * lives if lives > 0 else "-"))

    def on_round_changed(self, round_number: int) -> None:
        self._print(f"\n=== Round {round_number} ===")

    def on_gap_filled(self, queue_position: int, tile: Tile) -> None:
        self._print(f"Correct! Gap {queue_position + 1} filled with {self.tile_label(tile)}")

    def on_selection_rejected(self, tile: Tile) -> None:
        self._print(f"Wrong tile: {self.tile_label(tile)}")

    def on_round_complete(self) -> None:
        self._print("Round complete!")

    def on_session_ended(self, record: Optional[RoundRecord]) -> None:
        if record is None:
            self._print("\nSession abandoned.")
            return
        self._print(f"\nGame Over - score {record.score} in {record.format_duration()}")


class TerminalPlayer:
    """Reads moves from stdin and feeds them to a session."""

    def __init__(self, session: GameSession, renderer: TerminalRenderer):
        self._session = session
        self._renderer = renderer
        self._last_time = time.monotonic()

    def _advance_clock(self) -> None:
        now = time.monotonic()
        self._session.tick(now - self._last_time)
        self._last_time = now

    def _finish_intermission(self) -> None:
        # No frame loop here, so skip straight past the presentation delay
        while self._session.phase is SessionPhase.ROUND_COMPLETE:
            self._session.tick(self._session.config.session.presentation_delay)

    def run(self) -> int:
        """
        Play until the user quits.

        Returns:
            Score of the last session.
        """
        self._session.start()
        self._last_time = time.monotonic()

        while True:
            phase = self._session.phase
            prompt = "play again? [r/q] " if phase is SessionPhase.ENDED else "tile> "
            try:
                line = input(prompt).strip().lower()
            except EOFError:
                self._session.quit()
                break

            if line == "q":
                self._session.quit()
                break
            if line == "r" and self._session.is_over:
                self._session.start()
                self._last_time = time.monotonic()
                continue
            if self._session.is_over:
                continue

            generation = self._session.current_round.generation
            self._advance_clock()
            if self._session.phase is not SessionPhase.IN_ROUND:
                continue
            current = self._session.current_round
            if current.generation != generation:
                print("Too slow! The sequence scrolled away.")
                continue

            try:
                cell = int(line) - 1
            except ValueError:
                print("Enter a grid cell number, or q to quit")
                continue
            tile = current.pool.tile_at(cell)
            if tile is None:
                print("That cell is empty")
                continue

            self._session.submit_selection(tile)
            self._finish_intermission()

        return self._session.score


def main():
    parser = argparse.ArgumentParser(description="Play GapRunner in the terminal")
    parser.add_argument("--mode", choices=[m.value for m in GameMode], default="uniform",
                        help="Game mode (default: uniform)")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--config", type=str, default=None, help="Path to game_config.yaml")
    parser.add_argument("--records", type=str, default=None,
                        help="Record file (default: records.path from config)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log engine events")

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )

    config = load_config(args.config)
    catalog = TileCatalog(config)
    renderer = TerminalRenderer(catalog)
    store = JsonRecordStore(args.records or config.records.path)

    session = GameSession(
        mode=GameMode(args.mode),
        config=config,
        catalog=catalog,
        seed=args.seed,
        renderer=renderer,
        record_store=store
    )
    score = TerminalPlayer(session, renderer).run()
    print(f"\nFinal Score: {score}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
