"""
Game module - rules, player state, turn engine and computer turn pacing.
"""
from .player import (
    PlayerProfile,
    TurnProgress,
    X01Stats,
    X01Turn,
    X01PlayerState,
    CricketTurn,
    CricketPlayerState,
)
from .game_modes import (
    DartEffect,
    GameMode,
    ModeX01,
    ModeCricket,
    apply_cricket_marks,
    create_game_mode,
)
from .config_loader import (
    AiConfig,
    MatchConfig,
    build_match_config,
    load_match_config,
)
from .result import (
    CricketGameStats,
    MatchResult,
    PlayerResult,
    X01GameStats,
    build_match_result,
)
from .game_state import DartOutcome, Match, MatchPhase, MatchSnapshot
from .pacing import AiTurnRunner

__all__ = [
    "PlayerProfile",
    "TurnProgress",
    "X01Stats",
    "X01Turn",
    "X01PlayerState",
    "CricketTurn",
    "CricketPlayerState",
    "DartEffect",
    "GameMode",
    "ModeX01",
    "ModeCricket",
    "apply_cricket_marks",
    "create_game_mode",
    "AiConfig",
    "MatchConfig",
    "build_match_config",
    "load_match_config",
    "CricketGameStats",
    "MatchResult",
    "PlayerResult",
    "X01GameStats",
    "build_match_result",
    "DartOutcome",
    "Match",
    "MatchPhase",
    "MatchSnapshot",
    "AiTurnRunner",
]
