"""
Configuration Loader
====================

Loads and validates game_config.yaml, providing typed access to all parameters.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import yaml

# Upper bound on session.starting_lives; the lives display holds five hearts
MAX_LIVES = 5


class TileFamily(str, Enum):
    """The three tile suits."""
    BAMBOO = "bamboo"
    CHARACTER = "character"
    DOT = "dot"


class GameMode(str, Enum):
    """Round flavour: one family per round, or all families mixed."""
    UNIFORM = "uniform"
    DIVERSE = "diverse"


@dataclass(frozen=True)
class FamilyConfig:
    """Display data for a single tile family."""
    family: TileFamily
    label: str
    asset_prefix: str


@dataclass(frozen=True)
class CatalogConfig:
    """Tile families and the value range every family covers."""
    families: Tuple[FamilyConfig, ...]
    min_value: int
    max_value: int

    @property
    def value_count(self) -> int:
        return self.max_value - self.min_value + 1


@dataclass(frozen=True)
class SequenceConfig:
    """Bounds for the scrolling sequence."""
    min_length: int
    max_length: int
    max_consecutive_gaps: int
    max_generation_attempts: int


@dataclass(frozen=True)
class SessionConfig:
    """Cross-round session parameters."""
    starting_lives: int
    presentation_delay: float  # Seconds between round completion and next round
    restart_round_on_mistake: bool  # Wrong tile forfeits the round as well as a life


@dataclass(frozen=True)
class ScoringConfig:
    """Scoring parameters."""
    points_per_gap: int


@dataclass(frozen=True)
class ModeConfig:
    """Per-mode timing and selection grid layout."""
    mode: GameMode
    label: str
    scroll_seconds: float      # Time for the sequence to cross the screen
    grid_rows: int
    grid_cols: int

    @property
    def grid_size(self) -> int:
        return self.grid_rows * self.grid_cols


@dataclass(frozen=True)
class RecordsConfig:
    """Record persistence settings."""
    path: str


@dataclass(frozen=True)
class GameConfig:
    """
    Complete game configuration loaded from YAML.

    All values are immutable to prevent accidental modification during runtime.
    """
    catalog: CatalogConfig
    sequence: SequenceConfig
    session: SessionConfig
    scoring: ScoringConfig
    modes: Dict[GameMode, ModeConfig]
    records: RecordsConfig

    def get_mode(self, mode: GameMode) -> ModeConfig:
        """Get mode config, accepting either the enum or its string value."""
        try:
            return self.modes[GameMode(mode)]
        except (KeyError, ValueError):
            raise ValueError(f"Invalid game mode: {mode!r}") from None

    @property
    def max_grid_size(self) -> int:
        """Largest selection grid across modes."""
        return max(m.grid_size for m in self.modes.values())


def _parse_family(family_data: dict) -> FamilyConfig:
    """Parse a single family entry from YAML."""
    key = str(family_data["key"])
    try:
        family = TileFamily(key)
    except ValueError:
        raise ValueError(f"Unknown tile family: {key!r}") from None
    return FamilyConfig(
        family=family,
        label=str(family_data.get("label", key.title())),
        asset_prefix=str(family_data["asset_prefix"])
    )


def _parse_mode(mode: GameMode, mode_data: dict) -> ModeConfig:
    """Parse one entry of the modes section."""
    return ModeConfig(
        mode=mode,
        label=str(mode_data.get("label", mode.value.title())),
        scroll_seconds=float(mode_data["scroll_seconds"]),
        grid_rows=int(mode_data["grid_rows"]),
        grid_cols=int(mode_data["grid_cols"])
    )


def _validate_config(config: GameConfig) -> None:
    """Validate configuration consistency."""
    catalog = config.catalog

    # Every family exactly once
    seen: List[TileFamily] = [f.family for f in catalog.families]
    if sorted(seen) != sorted(TileFamily):
        raise ValueError(
            f"catalog.families must list each of {[f.value for f in TileFamily]} "
            f"exactly once, got {[f.value for f in seen]}"
        )

    if catalog.min_value < 1 or catalog.max_value < catalog.min_value:
        raise ValueError(
            f"Invalid value range [{catalog.min_value}, {catalog.max_value}]"
        )

    seq = config.sequence
    if seq.min_length < 2 or seq.max_length < seq.min_length:
        raise ValueError(
            f"Invalid sequence length range [{seq.min_length}, {seq.max_length}]"
        )
    if seq.max_length > catalog.value_count:
        raise ValueError(
            f"sequence.max_length ({seq.max_length}) exceeds the number of "
            f"tile values ({catalog.value_count})"
        )
    if seq.max_consecutive_gaps < 1:
        raise ValueError("sequence.max_consecutive_gaps must be at least 1")
    if seq.max_generation_attempts < 1:
        raise ValueError("sequence.max_generation_attempts must be at least 1")

    if not 1 <= config.session.starting_lives <= MAX_LIVES:
        raise ValueError(f"session.starting_lives must be between 1 and {MAX_LIVES}")
    if config.session.presentation_delay < 0:
        raise ValueError("session.presentation_delay cannot be negative")
    if config.scoring.points_per_gap < 0:
        raise ValueError("scoring.points_per_gap cannot be negative")

    # Pool sizes: uniform shows one family, diverse shows the whole catalog
    for mode in GameMode:
        if mode not in config.modes:
            raise ValueError(f"Missing modes.{mode.value} section")
        mode_config = config.modes[mode]
        if mode_config.scroll_seconds <= 0:
            raise ValueError(f"modes.{mode.value}.scroll_seconds must be positive")
        needed = catalog.value_count
        if mode is GameMode.DIVERSE:
            needed *= len(catalog.families)
        if mode_config.grid_size < needed:
            raise ValueError(
                f"modes.{mode.value} grid {mode_config.grid_rows}x{mode_config.grid_cols} "
                f"cannot hold {needed} tiles"
            )


def default_config_path() -> str:
    """Location of the bundled game_config.yaml."""
    return os.path.join(
        os.path.dirname(os.path.dirname(__file__)),
        "game_config.yaml"
    )


def load_config(config_path: Optional[str] = None) -> GameConfig:
    """
    Load and validate game configuration from YAML.

    Args:
        config_path: Path to game_config.yaml. If None, uses default location.

    Returns:
        Validated GameConfig instance.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        ValueError: If config validation fails.
    """
    if config_path is None:
        config_path = default_config_path()

    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, "r") as f:
        raw = yaml.safe_load(f)

    if not isinstance(raw, dict):
        raise ValueError(f"Config file is not a mapping: {config_path}")

    try:
        catalog_data = raw["catalog"]
        catalog = CatalogConfig(
            families=tuple(_parse_family(f) for f in catalog_data["families"]),
            min_value=int(catalog_data.get("min_value", 1)),
            max_value=int(catalog_data.get("max_value", 9))
        )

        seq_data = raw["sequence"]
        sequence = SequenceConfig(
            min_length=int(seq_data["min_length"]),
            max_length=int(seq_data["max_length"]),
            max_consecutive_gaps=int(seq_data.get("max_consecutive_gaps", 2)),
            max_generation_attempts=int(seq_data.get("max_generation_attempts", 16))
        )

        session_data = raw["session"]
        session = SessionConfig(
            starting_lives=int(session_data["starting_lives"]),
            presentation_delay=float(session_data.get("presentation_delay", 1.5)),
            restart_round_on_mistake=bool(session_data.get("restart_round_on_mistake", True))
        )

        scoring = ScoringConfig(
            points_per_gap=int(raw["scoring"]["points_per_gap"])
        )

        modes_data = raw["modes"]
        modes = {
            GameMode(key): _parse_mode(GameMode(key), data)
            for key, data in modes_data.items()
        }

        records_data = raw.get("records", {})
        records = RecordsConfig(
            path=str(records_data.get("path", "gaprunner_records.json"))
        )
    except KeyError as exc:
        raise ValueError(f"Missing config key: {exc.args[0]}") from None

    config = GameConfig(
        catalog=catalog,
        sequence=sequence,
        session=session,
        scoring=scoring,
        modes=modes,
        records=records
    )

    _validate_config(config)
    return config
