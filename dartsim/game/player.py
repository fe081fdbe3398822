"""
Player data structures and statistics.
"""
from dataclasses import dataclass, field
from typing import Dict, List

from dartsim.core import CRICKET_NUMBERS, Segment

DARTS_PER_TURN = 3
CLOSED = 3
MAX_CHECKOUT = 170


@dataclass
class PlayerProfile:
    """Who is playing: a human or a computer of a given skill."""
    name: str
    is_computer: bool = False
    skill: int = 5  # 1 (wild) - 10 (precise), computer players only

    def __post_init__(self):
        if not self.name:
            raise ValueError("Player name must not be empty")
        if not 1 <= self.skill <= 10:
            raise ValueError(f"Skill must be between 1 and 10, got {self.skill}")


@dataclass
class TurnProgress:
    """Accumulators for the turn being thrown."""
    darts: List[Segment] = field(default_factory=list)
    scored: int = 0  # X01 points this turn
    marks: int = 0  # Cricket marks this turn
    points: int = 0  # Cricket points this turn
    opened: bool = False  # Double-in hit during this turn
    bust: bool = False

    @property
    def darts_thrown(self) -> int:
        return len(self.darts)

    @property
    def is_complete(self) -> bool:
        return self.bust or len(self.darts) >= DARTS_PER_TURN


# ============================================================
# X01
# ============================================================

@dataclass
class X01Stats:
    """Running X01 statistics."""
    total_score: int = 0
    highest_turn: int = 0
    average_per_dart: float = 0.0
    average_per_turn: float = 0.0
    checkout_attempts: int = 0
    checkout_hits: int = 0
    one_eighties: int = 0
    ton_plus: int = 0  # Turns of 100 or more


@dataclass
class X01Turn:
    """A completed X01 visit."""
    darts: List[Segment]
    total_score: int
    is_bust: bool
    remaining: int  # Remaining after the turn


@dataclass
class X01PlayerState:
    """X01 state of one player."""
    remaining: int
    darts_thrown: int = 0
    rounds: int = 0
    started: bool = True  # False until a double is hit when double-in applies
    turn_history: List[X01Turn] = field(default_factory=list)
    stats: X01Stats = field(default_factory=X01Stats)

    def finalize_turn(self, turn: TurnProgress) -> X01Turn:
        """
        Commit a finished turn.

        A bust leaves the remaining score untouched and adds nothing to
        the scoring statistics, but its darts still count as thrown.

        Args:
            turn: The completed turn

        Returns:
            The recorded turn
        """
        start_remaining = self.remaining
        self.darts_thrown += len(turn.darts)
        self.rounds += 1

        if turn.bust:
            record = X01Turn(list(turn.darts), 0, True, start_remaining)
        else:
            self.remaining = start_remaining - turn.scored
            if turn.opened:
                self.started = True

            stats = self.stats
            stats.total_score += turn.scored
            if turn.scored > stats.highest_turn:
                stats.highest_turn = turn.scored
            if turn.scored == 180:
                stats.one_eighties += 1
            if turn.scored >= 100:
                stats.ton_plus += 1
            if start_remaining <= MAX_CHECKOUT:
                stats.checkout_attempts += 1
                if self.remaining == 0:
                    stats.checkout_hits += 1

            record = X01Turn(list(turn.darts), turn.scored, False, self.remaining)

        self.turn_history.append(record)
        self._update_averages()
        return record

    def _update_averages(self) -> None:
        stats = self.stats
        stats.average_per_dart = stats.total_score / self.darts_thrown if self.darts_thrown else 0.0
        stats.average_per_turn = stats.total_score / self.rounds if self.rounds else 0.0

    @property
    def checkout_percentage(self) -> float:
        """Share of checkout attempts that finished the leg."""
        if self.stats.checkout_attempts == 0:
            return 0.0
        return 100.0 * self.stats.checkout_hits / self.stats.checkout_attempts


# ============================================================
# Cricket
# ============================================================

def _empty_marks() -> Dict[int, int]:
    return {number: 0 for number in CRICKET_NUMBERS}


@dataclass
class CricketTurn:
    """A completed Cricket visit."""
    darts: List[Segment]
    marks_scored: int
    points_scored: int


@dataclass
class CricketPlayerState:
    """Cricket state of one player."""
    marks: Dict[int, int] = field(default_factory=_empty_marks)
    points: int = 0
    darts_thrown: int = 0
    rounds: int = 0
    turn_history: List[CricketTurn] = field(default_factory=list)
    closed_first: List[int] = field(default_factory=list)  # Closed before the opponent

    def is_closed(self, number: int) -> bool:
        return self.marks.get(number, 0) >= CLOSED

    @property
    def all_closed(self) -> bool:
        return all(self.is_closed(n) for n in CRICKET_NUMBERS)

    @property
    def total_marks(self) -> int:
        return sum(min(self.marks.get(n, 0), CLOSED) for n in CRICKET_NUMBERS)

    @property
    def average_marks_per_round(self) -> float:
        return self.total_marks / self.rounds if self.rounds else 0.0

    def finalize_turn(self, turn: TurnProgress) -> CricketTurn:
        """Commit a finished turn (marks and points are applied per dart)."""
        self.darts_thrown += len(turn.darts)
        self.rounds += 1
        record = CricketTurn(list(turn.darts), turn.marks, turn.points)
        self.turn_history.append(record)
        return record
