"""
Paced computer turns.

Reveals a computer turn one dart at a time so a display can animate it.
The delays are presentation only: with zero delays (or run_sync()) the
same darts are applied in the same order. Cancelling a runner, or starting
a rematch, guarantees that no pending dart lands on the wrong match.
"""
import threading
from typing import Callable, List, Optional
import logging

from .game_state import DartOutcome, Match

logger = logging.getLogger(__name__)


class AiTurnRunner:
    """
    Plays the current computer turn of a match on a background thread.

    Example:
        runner = AiTurnRunner(match, on_dart=show_marker)
        runner.start()
        ...
        runner.cancel()  # match abandoned
    """

    def __init__(
            self,
            match: Match,
            start_delay_sec: Optional[float] = None,
            dart_delay_sec: Optional[float] = None,
            on_dart: Optional[Callable[[DartOutcome], None]] = None,
            on_complete: Optional[Callable[[List[DartOutcome]], None]] = None
    ):
        """
        Initialize runner.

        Args:
            match: Match whose current computer turn is played
            start_delay_sec: Pause before the first dart (default: match config)
            dart_delay_sec: Pause between darts (default: match config)
            on_dart: Called after every dart
            on_complete: Called with all outcomes once the turn has ended
        """
        self.match = match
        ai_config = match.config.ai
        self.start_delay_sec = ai_config.start_delay_sec if start_delay_sec is None else start_delay_sec
        self.dart_delay_sec = ai_config.dart_delay_sec if dart_delay_sec is None else dart_delay_sec
        self.on_dart = on_dart
        self.on_complete = on_complete

        self.outcomes: List[DartOutcome] = []

        self._thread: Optional[threading.Thread] = None
        self._stop_event = threading.Event()
        self._generation: Optional[int] = None
        self._is_running = False
        self._cancelled = False

    @property
    def is_running(self) -> bool:
        return self._is_running

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def start(self) -> bool:
        """
        Start playing the computer turn in the background.

        Returns:
            True if started, False if it is not a computer's turn
        """
        if self._is_running:
            logger.warning("Computer turn already running")
            return True

        if not self._claim_turn():
            return False

        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._run,
            kwargs={"paced": True},
            daemon=True,
            name="AiTurn"
        )
        self._is_running = True
        self._thread.start()
        return True

    def run_sync(self) -> List[DartOutcome]:
        """
        Play the computer turn in the calling thread without delays.

        Returns:
            Outcomes of the darts thrown
        """
        if self._is_running or not self._claim_turn():
            return []
        self._is_running = True
        self._run(paced=False)
        return self.outcomes

    def cancel(self, timeout: float = 2.0) -> None:
        """Stop the turn; darts not yet applied will never be applied."""
        was_running = self._is_running
        self._cancelled = True
        self._stop_event.set()

        if self._thread and self._thread is not threading.current_thread():
            self._thread.join(timeout=timeout)

        if was_running:
            logger.info(f"Computer turn cancelled after {len(self.outcomes)} darts")

    def join(self, timeout: Optional[float] = None) -> None:
        """Wait for a started turn to finish."""
        if self._thread and self._thread is not threading.current_thread():
            self._thread.join(timeout=timeout)

    def _claim_turn(self) -> bool:
        if not self.match.begin_ai_turn():
            logger.debug("No computer turn to play")
            return False
        self._generation = self.match.generation
        self._cancelled = False
        self.outcomes = []
        return True

    def _wait(self, seconds: float, paced: bool) -> bool:
        """Pause between darts; True if the runner was cancelled meanwhile."""
        if paced and seconds > 0:
            return self._stop_event.wait(seconds)
        return self._stop_event.is_set()

    def _run(self, paced: bool) -> None:
        finished = False
        try:
            if self._wait(self.start_delay_sec, paced):
                return

            while True:
                outcome = self.match.execute_ai_dart(generation=self._generation)
                if outcome is None:
                    return
                self.outcomes.append(outcome)

                if self.on_dart:
                    self.on_dart(outcome)

                if outcome.turn_complete:
                    finished = True
                    break

                if self._wait(self.dart_delay_sec, paced):
                    return
        finally:
            self.match.end_ai_turn(self._generation)
            self._is_running = False

        if finished and self.on_complete:
            self.on_complete(self.outcomes)
