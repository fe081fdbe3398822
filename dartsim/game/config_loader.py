"""
Build match settings from the YAML-backed Config.

Unknown keys are ignored (logged at debug level) so older config files keep
working when new fields appear.
"""
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Optional
import logging

from dartsim.core import Config, DEFAULT_CONFIG_PATH
from .game_modes import GameMode, create_game_mode
from .player import PlayerProfile

logger = logging.getLogger(__name__)

GAME_MODES = ("x01", "cricket")


def _default_players() -> List[PlayerProfile]:
    return [
        PlayerProfile("Player 1"),
        PlayerProfile("Computer", is_computer=True),
    ]


@dataclass
class AiConfig:
    """Pacing of computer turns; display only, never changes outcomes."""
    start_delay_sec: float = 0.6
    dart_delay_sec: float = 1.5
    seed: Optional[int] = None  # Fixed seed for reproducible matches

    def __post_init__(self):
        if self.start_delay_sec < 0 or self.dart_delay_sec < 0:
            raise ValueError("AI delays must not be negative")


@dataclass
class MatchConfig:
    """Rules and line-up of one match."""
    mode: str = "x01"
    start_score: int = 501
    double_in: bool = False
    double_out: bool = True
    players: List[PlayerProfile] = field(default_factory=_default_players)
    ai: AiConfig = field(default_factory=AiConfig)

    def __post_init__(self):
        if self.mode not in GAME_MODES:
            raise ValueError(f"Unknown game mode: {self.mode}")
        if self.start_score < 2:
            raise ValueError(f"Start score must be at least 2, got {self.start_score}")
        if len(self.players) != 2:
            raise ValueError(f"A match needs exactly two players, got {len(self.players)}")

    def create_game_mode(self) -> GameMode:
        return create_game_mode(
            self.mode,
            start_score=self.start_score,
            double_in=self.double_in,
            double_out=self.double_out,
        )


def _known_fields(cls, overrides: Dict[str, Any], exclude: tuple = ()) -> Dict[str, Any]:
    """
    Keep only keys that are fields of cls.

    Unknown keys are ignored to remain forward compatible with new YAML fields.
    """
    names = {f.name for f in fields(cls)} - set(exclude)
    kwargs = {}
    for key, value in (overrides or {}).items():
        if key in names:
            kwargs[key] = value
        else:
            logger.debug("Ignoring unknown config key: %s", key)
    return kwargs


def build_match_config(config: Optional[Config] = None) -> MatchConfig:
    """
    Construct MatchConfig from a Config.

    Args:
        config: Loaded configuration (default: built-in defaults)

    Returns:
        Validated MatchConfig

    Raises:
        ValueError: If the configured values break a rule
    """
    config = config or Config()

    match_kwargs = _known_fields(MatchConfig, config.get_section("match"), exclude=("players", "ai"))
    ai_config = AiConfig(**_known_fields(AiConfig, config.get_section("ai")))

    players_section = config.get_section("players") or []
    players = [PlayerProfile(**_known_fields(PlayerProfile, entry)) for entry in players_section]

    return MatchConfig(players=players, ai=ai_config, **match_kwargs)


def load_match_config(config_path: Optional[Path] = None) -> MatchConfig:
    """
    Convenience wrapper to load and build a match config in one call.
    """
    return build_match_config(Config(Path(config_path) if config_path else DEFAULT_CONFIG_PATH))
