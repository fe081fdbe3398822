"""
Match results handed to whoever persists them.
"""
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from .game_modes import GameMode, ModeX01
from .player import CricketPlayerState, PlayerProfile, X01PlayerState


@dataclass
class X01GameStats:
    start_score: int
    final_remaining: int
    darts_thrown: int
    rounds: int
    total_score: int
    average_per_dart: float
    average_per_turn: float
    highest_turn: int
    one_eighties: int
    ton_plus: int
    checkout_attempts: int
    checkout_hits: int
    double_in: bool
    double_out: bool


@dataclass
class CricketGameStats:
    darts_thrown: int
    rounds: int
    total_marks: int
    total_points: int
    average_marks_per_round: float
    numbers_closed_first: int


@dataclass
class PlayerResult:
    name: str
    is_computer: bool
    won: bool
    skill: Optional[int] = None
    x01_stats: Optional[X01GameStats] = None
    cricket_stats: Optional[CricketGameStats] = None


@dataclass
class MatchResult:
    """Final state of a finished match."""
    mode: str
    mode_name: str
    winner: int
    winner_name: str
    duration_seconds: float
    players: List[PlayerResult] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _x01_stats(mode: ModeX01, state: X01PlayerState) -> X01GameStats:
    return X01GameStats(
        start_score=mode.starting_score,
        final_remaining=state.remaining,
        darts_thrown=state.darts_thrown,
        rounds=state.rounds,
        total_score=state.stats.total_score,
        average_per_dart=state.stats.average_per_dart,
        average_per_turn=state.stats.average_per_turn,
        highest_turn=state.stats.highest_turn,
        one_eighties=state.stats.one_eighties,
        ton_plus=state.stats.ton_plus,
        checkout_attempts=state.stats.checkout_attempts,
        checkout_hits=state.stats.checkout_hits,
        double_in=mode.double_in,
        double_out=mode.double_out,
    )


def _cricket_stats(state: CricketPlayerState) -> CricketGameStats:
    return CricketGameStats(
        darts_thrown=state.darts_thrown,
        rounds=state.rounds,
        total_marks=state.total_marks,
        total_points=state.points,
        average_marks_per_round=state.average_marks_per_round,
        numbers_closed_first=len(state.closed_first),
    )


def build_match_result(
        game_mode: GameMode,
        profiles: Sequence[PlayerProfile],
        states: Sequence,
        winner: int,
        duration_seconds: float
) -> MatchResult:
    """
    Collect per-player statistics of a finished match.

    Args:
        game_mode: Rules the match was played with
        profiles: Player profiles, in throwing order
        states: Final player states, same order
        winner: Index of the winner
        duration_seconds: Wall time from start to the winning dart
    """
    is_x01 = isinstance(game_mode, ModeX01)
    players = []
    for idx, (profile, state) in enumerate(zip(profiles, states)):
        players.append(PlayerResult(
            name=profile.name,
            is_computer=profile.is_computer,
            won=idx == winner,
            skill=profile.skill if profile.is_computer else None,
            x01_stats=_x01_stats(game_mode, state) if is_x01 else None,
            cricket_stats=None if is_x01 else _cricket_stats(state),
        ))

    return MatchResult(
        mode="x01" if is_x01 else "cricket",
        mode_name=game_mode.get_name(),
        winner=winner,
        winner_name=profiles[winner].name,
        duration_seconds=duration_seconds,
        players=players,
    )
