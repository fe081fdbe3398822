"""
Match state management.

A Match is the only owner of game state. Every dart, human or computer,
goes through it:

- AWAITING_DART: the current player may throw
- AI_TURN: a computer turn is being played; human input and undo are refused
- GAME_OVER: a checkout (X01) or closing with the lead (Cricket) ended the match

A turn ends after three darts, on a bust, or when the match is won; play
then passes to the other player. Human darts push a deep snapshot first so
they can be undone one at a time, back to the first dart of the match.
"""
import copy
import threading
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Tuple
import logging

from dartsim.core import AimTarget, Segment
from dartsim.ai import CHECKOUT_TABLE, CheckoutTable, ThrowSimulator
from .config_loader import MatchConfig
from .game_modes import ModeX01
from .player import PlayerProfile, TurnProgress
from .result import MatchResult, build_match_result

logger = logging.getLogger(__name__)


class MatchPhase(Enum):
    """Phases of a match."""
    AWAITING_DART = "awaiting_dart"
    AI_TURN = "ai_turn"
    GAME_OVER = "game_over"


@dataclass
class MatchSnapshot:
    """Deep copy of everything a dart can change."""
    players: list
    current_player_idx: int
    turn: TurnProgress


@dataclass
class DartOutcome:
    """
    Result of one dart, available as soon as it has been applied.

    Carries enough to draw the dart on a board: the landed segment and, for
    computer darts, the aim target and the exact landing point.
    """
    player_idx: int
    segment: Segment
    dart_in_turn: int  # 1-3
    scored: int = 0
    marks: int = 0
    dead: bool = False
    bust: bool = False
    checkout: bool = False
    turn_complete: bool = False
    game_over: bool = False
    winner: Optional[int] = None
    remaining: Optional[int] = None  # X01 only
    target: Optional[AimTarget] = None
    landing_point: Optional[Tuple[float, float]] = None
    message: Optional[str] = None


class Match:
    """
    Two-player match engine for X01 and Cricket.

    Example:
        match = Match(MatchConfig(mode="x01", start_score=301))
        match.throw_dart(Segment(20, 3))
        match.undo()
    """

    def __init__(
            self,
            config: Optional[MatchConfig] = None,
            simulator: Optional[ThrowSimulator] = None,
            checkout_table: Optional[CheckoutTable] = None,
            on_game_over: Optional[Callable[[MatchResult], None]] = None
    ):
        """
        Initialize a match.

        Args:
            config: Rules and players (default: MatchConfig())
            simulator: Throw simulator for computer players
            checkout_table: Checkout table (default: shared table)
            on_game_over: Called with the MatchResult when the match ends
        """
        self.config = config or MatchConfig()
        self.game_mode = self.config.create_game_mode()
        self.profiles: List[PlayerProfile] = list(self.config.players)
        self.simulator = simulator or ThrowSimulator(seed=self.config.ai.seed)
        self.checkout_table = checkout_table or CHECKOUT_TABLE
        self.on_game_over = on_game_over

        # Bumped on rematch so paced darts of an old match are discarded
        self.generation = 0

        self._lock = threading.RLock()
        self._undo_stack: List[MatchSnapshot] = []
        self._ai_turn_active = False

        self._reset_state()

        logger.info(
            f"Match started: {self.game_mode.get_name()} - "
            f"{self.profiles[0].name} vs {self.profiles[1].name}"
        )

    def _reset_state(self) -> None:
        self.players = [self.game_mode.create_player_state() for _ in self.profiles]
        self.current_player_idx = 0
        self.turn = TurnProgress()
        self.game_over = False
        self.winner: Optional[int] = None
        self.started_at = time.time()
        self.finished_at: Optional[float] = None
        self._result: Optional[MatchResult] = None

    # ------------------------------------------------------------
    # State queries
    # ------------------------------------------------------------

    @property
    def is_x01(self) -> bool:
        return isinstance(self.game_mode, ModeX01)

    @property
    def current_player(self):
        """State of the player to throw."""
        return self.players[self.current_player_idx]

    @property
    def current_profile(self) -> PlayerProfile:
        return self.profiles[self.current_player_idx]

    @property
    def is_ai_turn(self) -> bool:
        return not self.game_over and self.current_profile.is_computer

    @property
    def phase(self) -> MatchPhase:
        if self.game_over:
            return MatchPhase.GAME_OVER
        if self._ai_turn_active:
            return MatchPhase.AI_TURN
        return MatchPhase.AWAITING_DART

    @property
    def current_remaining(self) -> Optional[int]:
        """X01 score left for the current player, counting this turn's darts."""
        if not self.is_x01:
            return None
        return self.game_mode.remaining_in_turn(self.current_player, self.turn)

    @property
    def undo_depth(self) -> int:
        return len(self._undo_stack)

    @property
    def can_undo(self) -> bool:
        return bool(self._undo_stack) and not self._ai_turn_active

    def checkout_suggestion(self) -> Optional[str]:
        """Finishing route for the current player, None outside X01."""
        if not self.is_x01 or self.game_over or self.turn.bust:
            return None
        return self.checkout_table.suggestion(self.current_remaining)

    def snapshot(self) -> MatchSnapshot:
        """Deep copy of the mutable match state."""
        with self._lock:
            return copy.deepcopy(MatchSnapshot(
                players=self.players,
                current_player_idx=self.current_player_idx,
                turn=self.turn,
            ))

    def result(self) -> Optional[MatchResult]:
        """Final result once the match is over."""
        return self._result

    # ------------------------------------------------------------
    # Darts
    # ------------------------------------------------------------

    def throw_dart(self, segment: Segment) -> Optional[DartOutcome]:
        """
        Apply a dart entered by a human player.

        Args:
            segment: Where the dart landed

        Returns:
            DartOutcome, or None if the dart was refused
        """
        with self._lock:
            if self.game_over:
                logger.warning("Dart ignored: match is over")
                return None
            if self._ai_turn_active or self.current_profile.is_computer:
                logger.warning(f"Dart ignored: it is {self.current_profile.name}'s computer turn")
                return None

            self._undo_stack.append(self.snapshot())
            return self._apply(segment)

    def execute_ai_dart(self, generation: Optional[int] = None) -> Optional[DartOutcome]:
        """
        Let the computer player choose a target and throw one dart.

        The target is chosen from the live state, so each dart reacts to the
        previous ones. Computer darts are not pushed on the undo stack.

        Args:
            generation: Match generation the caller belongs to; the dart
                is refused if a rematch happened since

        Returns:
            DartOutcome, or None if the dart was refused
        """
        with self._lock:
            if generation is not None and generation != self.generation:
                logger.info("Stale computer dart discarded")
                return None
            if self.game_over:
                logger.warning("Computer dart ignored: match is over")
                return None
            profile = self.current_profile
            if not profile.is_computer:
                logger.warning(f"Computer dart ignored: {profile.name} is not a computer player")
                return None

            target = self.game_mode.ai_target(
                self.players,
                self.current_player_idx,
                self.turn,
                self.checkout_table,
            )
            throw = self.simulator.simulate(target, profile.skill)
            return self._apply(throw.segment, target=target, landing_point=throw.landing_point)

    def begin_ai_turn(self) -> bool:
        """
        Mark a computer turn as running.

        Returns:
            True if a computer turn may start now
        """
        with self._lock:
            if not self.is_ai_turn or self._ai_turn_active:
                return False
            self._ai_turn_active = True
            logger.debug(f"State transition: awaiting_dart → ai_turn ({self.current_profile.name})")
            return True

    def end_ai_turn(self, generation: Optional[int] = None) -> None:
        """Release the computer turn lock taken by begin_ai_turn()."""
        with self._lock:
            if generation is not None and generation != self.generation:
                return
            self._ai_turn_active = False

    def execute_ai_turn(self) -> List[DartOutcome]:
        """
        Play a whole computer turn without pacing.

        Stops after three darts, on a bust, or when the match is won.

        Returns:
            Outcomes of the darts thrown (empty if it is not a computer turn)
        """
        with self._lock:
            if not self.begin_ai_turn():
                return []
            outcomes = []
            try:
                while True:
                    outcome = self.execute_ai_dart()
                    if outcome is None:
                        break
                    outcomes.append(outcome)
                    if outcome.turn_complete:
                        break
            finally:
                self.end_ai_turn()
            return outcomes

    def _apply(
            self,
            segment: Segment,
            target: Optional[AimTarget] = None,
            landing_point: Optional[Tuple[float, float]] = None
    ) -> DartOutcome:
        """Apply a dart to the current player and advance the state machine."""
        idx = self.current_player_idx
        player = self.players[idx]
        effect = self.game_mode.apply_dart(self.players, idx, self.turn, segment)
        dart_in_turn = self.turn.darts_thrown

        turn_complete = (
            effect.checkout
            or self.turn.is_complete
            or self.game_mode.check_winner(self.players) is not None
        )

        winner = None
        if turn_complete:
            self.game_mode.finish_turn(player, self.turn)
            winner = self.game_mode.check_winner(self.players)
            remaining = player.remaining if self.is_x01 else None
        else:
            remaining = self.current_remaining

        outcome = DartOutcome(
            player_idx=idx,
            segment=segment,
            dart_in_turn=dart_in_turn,
            scored=effect.scored,
            marks=effect.marks,
            dead=effect.dead,
            bust=effect.bust,
            checkout=effect.checkout,
            turn_complete=turn_complete,
            game_over=winner is not None,
            winner=winner,
            remaining=remaining,
            target=target,
            landing_point=landing_point,
            message=effect.message,
        )

        logger.debug(
            f"{self.profiles[idx].name} dart {dart_in_turn}: {segment.label} "
            f"(scored={effect.scored}, marks={effect.marks}"
            f"{', BUST' if effect.bust else ''})"
        )

        if winner is not None:
            self._finish_game(winner)
        elif turn_complete:
            self._next_player()

        return outcome

    def _next_player(self) -> None:
        self.current_player_idx = 1 - self.current_player_idx
        self.turn = TurnProgress()
        logger.debug(f"Next player: {self.current_profile.name}")

    def _finish_game(self, winner: int) -> None:
        self.game_over = True
        self.winner = winner
        self.finished_at = time.time()
        self._result = build_match_result(
            self.game_mode,
            self.profiles,
            self.players,
            winner,
            self.finished_at - self.started_at,
        )
        logger.info(f"Game finished! Winner: {self.profiles[winner].name}")

        if self.on_game_over:
            try:
                self.on_game_over(self._result)
            except Exception as e:
                logger.warning(f"Game over handler failed: {e}")

    # ------------------------------------------------------------
    # Undo / rematch
    # ------------------------------------------------------------

    def undo(self) -> bool:
        """
        Undo the most recent human dart.

        Restores the snapshot taken just before that dart, including
        reopening a match that the dart had won.

        Returns:
            True if a dart was undone
        """
        with self._lock:
            if self._ai_turn_active:
                logger.warning("Undo refused: computer turn in progress")
                return False
            if not self._undo_stack:
                return False

            snapshot = self._undo_stack.pop()
            self.players = snapshot.players
            self.current_player_idx = snapshot.current_player_idx
            self.turn = snapshot.turn
            self.game_over = False
            self.winner = None
            self.finished_at = None
            self._result = None

            logger.info(f"Undone: back to {self.current_profile.name}, dart {self.turn.darts_thrown + 1}")
            return True

    def rematch(self) -> None:
        """Start over with the same players and rules."""
        with self._lock:
            self.generation += 1
            self._ai_turn_active = False
            self._undo_stack.clear()
            self._reset_state()
            logger.info(f"Rematch: {self.game_mode.get_name()}")
