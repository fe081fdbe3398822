"""
Game modes (X01, Cricket) with rule implementations.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from dartsim.core import BULL, CRICKET_NUMBERS, AimTarget, Segment
from dartsim.ai import (
    CHECKOUT_TABLE,
    CheckoutTable,
    CricketSituation,
    choose_cricket_target,
    choose_x01_target,
)
from .player import (
    CLOSED,
    CricketPlayerState,
    TurnProgress,
    X01PlayerState,
)


@dataclass
class DartEffect:
    """What a single dart did to the game."""
    scored: int = 0  # X01 points or Cricket points
    marks: int = 0  # Cricket marks
    dead: bool = False  # Ignored because double-in is still pending
    bust: bool = False
    checkout: bool = False
    message: Optional[str] = None


class GameMode(ABC):
    """Abstract base class for game modes."""

    @abstractmethod
    def get_name(self) -> str:
        """Get game mode name."""
        pass

    @abstractmethod
    def create_player_state(self):
        """Fresh state for one player at match start."""
        pass

    @abstractmethod
    def apply_dart(
            self,
            players: Sequence,
            player_idx: int,
            turn: TurnProgress,
            segment: Segment
    ) -> DartEffect:
        """
        Apply one dart for the player at player_idx.

        Records the dart in the turn and updates whatever the rules change
        immediately.
        """
        pass

    @abstractmethod
    def finish_turn(self, player, turn: TurnProgress):
        """Commit a completed turn to the player's history and statistics."""
        pass

    @abstractmethod
    def check_winner(self, players: Sequence) -> Optional[int]:
        """Index of the winning player, or None."""
        pass

    @abstractmethod
    def ai_target(
            self,
            players: Sequence,
            player_idx: int,
            turn: TurnProgress,
            table: CheckoutTable = CHECKOUT_TABLE
    ) -> AimTarget:
        """Target for a computer player's next dart."""
        pass


class ModeX01(GameMode):
    """
    X01 game mode (301, 501, ...) with configurable in/out rules.

    Rules:
    - Subtract each dart from the remaining score
    - Must finish exactly on 0
    - Double-in: darts count only once a double has been hit
    - Double-out: the finishing dart must be a double (or inner bull)
    - Bust if: score goes below 0, to 1 with double-out, or to 0 without
      a double when double-out applies. The turn ends and the remaining
      score reverts to its value before the turn.
    """

    def __init__(
            self,
            starting_score: int = 501,
            double_out: bool = True,
            double_in: bool = False
    ):
        """
        Initialize X01 game mode.

        Args:
            starting_score: Starting score (501, 301, etc.)
            double_out: Require double to finish
            double_in: Require double to start scoring
        """
        if starting_score < 2:
            raise ValueError(f"Starting score must be at least 2, got {starting_score}")
        self.starting_score = starting_score
        self.double_out = double_out
        self.double_in = double_in

    def get_name(self) -> str:
        """Get game mode name."""
        suffix = ""
        if self.double_out:
            suffix = " (Double Out)"
        if self.double_in:
            suffix += " (Double In)"
        return f"{self.starting_score}{suffix}"

    def create_player_state(self) -> X01PlayerState:
        return X01PlayerState(remaining=self.starting_score, started=not self.double_in)

    def remaining_in_turn(self, player: X01PlayerState, turn: TurnProgress) -> int:
        """Remaining score including darts already thrown this turn."""
        return player.remaining - turn.scored

    def is_bust(self, new_remaining: int, segment: Segment) -> bool:
        if new_remaining < 0:
            return True
        if self.double_out and new_remaining == 1:
            return True
        if self.double_out and new_remaining == 0 and not segment.is_double:
            return True
        return False

    def apply_dart(
            self,
            players: Sequence[X01PlayerState],
            player_idx: int,
            turn: TurnProgress,
            segment: Segment
    ) -> DartEffect:
        player = players[player_idx]
        turn.darts.append(segment)

        if not player.started and not turn.opened:
            if not segment.is_double:
                return DartEffect(dead=True, message="Double in required")
            turn.opened = True

        new_remaining = self.remaining_in_turn(player, turn) - segment.score

        if self.is_bust(new_remaining, segment):
            turn.bust = True
            return DartEffect(bust=True, message="BUST!")

        turn.scored += segment.score

        if new_remaining == 0:
            return DartEffect(scored=segment.score, checkout=True, message="CHECKOUT!")

        return DartEffect(scored=segment.score)

    def finish_turn(self, player: X01PlayerState, turn: TurnProgress):
        return player.finalize_turn(turn)

    def opening_double(
            self,
            remaining: int,
            darts_thrown: int = 0,
            table: CheckoutTable = CHECKOUT_TABLE
    ) -> AimTarget:
        """
        Double to open with when double-in is still pending.

        An even score of 40 or less is finished with its own double. Anything
        else takes the largest double that does not bust (D20 from 42 up).
        """
        if remaining <= 40 and remaining % 2 == 0:
            return choose_x01_target(remaining, darts_thrown, table)
        limit = remaining - 2 if self.double_out else remaining
        return AimTarget(max(1, min(20, limit // 2)), 2)

    def check_winner(self, players: Sequence[X01PlayerState]) -> Optional[int]:
        for idx, player in enumerate(players):
            if player.remaining == 0:
                return idx
        return None

    def ai_target(
            self,
            players: Sequence[X01PlayerState],
            player_idx: int,
            turn: TurnProgress,
            table: CheckoutTable = CHECKOUT_TABLE
    ) -> AimTarget:
        player = players[player_idx]
        if not player.started and not turn.opened:
            return self.opening_double(self.remaining_in_turn(player, turn), turn.darts_thrown, table)
        return choose_x01_target(
            self.remaining_in_turn(player, turn),
            turn.darts_thrown,
            table,
        )


def apply_cricket_marks(
        thrower: CricketPlayerState,
        opponent: CricketPlayerState,
        number: int,
        multiplier: int
) -> Tuple[int, int]:
    """
    Apply a hit mark by mark.

    Each of the multiplier's marks either closes the number further for the
    thrower, scores the number's value while the opponent still has it open,
    or does nothing once both players have closed it. A treble can therefore
    close a number and score on it with the same dart.

    Args:
        thrower: State receiving the marks
        opponent: The other player (read only)
        number: Number hit; anything outside CRICKET_NUMBERS is ignored
        multiplier: Marks carried by the hit

    Returns:
        (marks_added, points_added)
    """
    if number not in CRICKET_NUMBERS:
        return 0, 0

    value = 25 if number == BULL else number
    marks_added = 0
    points_added = 0

    for _ in range(multiplier):
        own = thrower.marks.get(number, 0)
        if own < CLOSED:
            thrower.marks[number] = own + 1
            marks_added += 1
            if own + 1 == CLOSED and not opponent.is_closed(number):
                thrower.closed_first.append(number)
        elif not opponent.is_closed(number):
            thrower.points += value
            points_added += value

    return marks_added, points_added


class ModeCricket(GameMode):
    """
    Cricket game mode.

    Rules:
    - Close numbers 20, 19, 18, 17, 16, 15, and Bull
    - Need 3 marks to close a number (double = 2 marks, treble = 3)
    - Marks on a number you closed score its value while the opponent
      has it open (Bull scores 25)
    - First to close everything while level or ahead on points wins
    """

    def get_name(self) -> str:
        """Get game mode name."""
        return "Cricket"

    def create_player_state(self) -> CricketPlayerState:
        return CricketPlayerState()

    def apply_dart(
            self,
            players: Sequence[CricketPlayerState],
            player_idx: int,
            turn: TurnProgress,
            segment: Segment
    ) -> DartEffect:
        turn.darts.append(segment)
        marks, points = apply_cricket_marks(
            players[player_idx],
            players[1 - player_idx],
            segment.number,
            segment.multiplier,
        )
        turn.marks += marks
        turn.points += points
        return DartEffect(scored=points, marks=marks)

    def finish_turn(self, player: CricketPlayerState, turn: TurnProgress):
        return player.finalize_turn(turn)

    def check_winner(self, players: Sequence[CricketPlayerState]) -> Optional[int]:
        for idx, player in enumerate(players):
            opponent = players[1 - idx]
            if player.all_closed and player.points >= opponent.points:
                return idx
        return None

    def ai_target(
            self,
            players: Sequence[CricketPlayerState],
            player_idx: int,
            turn: TurnProgress,
            table: CheckoutTable = CHECKOUT_TABLE
    ) -> AimTarget:
        own = players[player_idx]
        opponent = players[1 - player_idx]
        return choose_cricket_target(CricketSituation(
            own_marks=dict(own.marks),
            opponent_marks=dict(opponent.marks),
            own_points=own.points,
            opponent_points=opponent.points,
        ))


def create_game_mode(
        mode: str,
        start_score: int = 501,
        double_in: bool = False,
        double_out: bool = True
) -> GameMode:
    """Build a game mode from its config name ("x01" or "cricket")."""
    if mode == "x01":
        return ModeX01(start_score, double_out=double_out, double_in=double_in)
    if mode == "cricket":
        return ModeCricket()
    raise ValueError(f"Unknown game mode: {mode}")
