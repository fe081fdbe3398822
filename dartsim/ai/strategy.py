"""
Target selection for computer players.

Decisions never depend on skill; skill only changes how accurately the
chosen target is hit. Both games use an ordered rule table: the first rule
whose guard matches picks the target. Targets are re-chosen before every
dart because each dart changes the situation.
"""
from dataclasses import dataclass, field
from typing import Callable, List, Mapping, NamedTuple, Optional, Sequence, Tuple
import logging

from dartsim.core import BULL, CRICKET_NUMBERS, AimTarget
from .checkout import CHECKOUT_TABLE, MAX_CHECKOUT, MIN_CHECKOUT, CheckoutTable

logger = logging.getLogger(__name__)

DARTS_PER_TURN = 3
CLOSED = 3

# Leaves that set up an easy double, most wanted first
PREFERRED_LEAVES: Tuple[int, ...] = (32, 40, 36, 24, 16, 20, 28, 50)

TREBLE_20 = AimTarget(20, 3)


class TargetRule(NamedTuple):
    """A guard and the target it produces when the guard matches."""
    name: str
    applies: Callable
    aim: Callable


def first_matching_rule(rules: Sequence[TargetRule], situation) -> Tuple[str, AimTarget]:
    """
    Evaluate rules in order and return the first match.

    Raises:
        LookupError: If no rule applies (rule tables end with a catch-all)
    """
    for rule in rules:
        if rule.applies(situation):
            return rule.name, rule.aim(situation)
    raise LookupError("No targeting rule matched")


# ============================================================
# X01
# ============================================================

@dataclass(frozen=True)
class X01Situation:
    """What a computer player knows before an X01 dart."""
    remaining: int
    darts_thrown: int = 0
    table: CheckoutTable = field(default=CHECKOUT_TABLE, compare=False, repr=False)

    @property
    def darts_left(self) -> int:
        return DARTS_PER_TURN - self.darts_thrown


class _Candidate(NamedTuple):
    target: AimTarget
    leave: int
    priority: int


def _leave_candidates(situation: X01Situation) -> List[_Candidate]:
    """Targets whose leave has a checkout, best first."""
    candidates = []
    for number in range(1, 21):
        for multiplier in (3, 1, 2):
            target = AimTarget(number, multiplier)
            leave = situation.remaining - target.score
            if leave < MIN_CHECKOUT or leave > MAX_CHECKOUT:
                continue
            if leave not in situation.table:
                continue
            priority = PREFERRED_LEAVES.index(leave) if leave in PREFERRED_LEAVES else len(PREFERRED_LEAVES)
            candidates.append(_Candidate(target, leave, priority))

    candidates.sort(key=lambda c: (c.priority, -c.target.score))
    return candidates


def _checkout_in_reach(s: X01Situation) -> bool:
    route = s.table.lookup(s.remaining)
    return route is not None and len(route) <= s.darts_left


def _aim_checkout(s: X01Situation) -> AimTarget:
    first = s.table.lookup(s.remaining)[0]
    return AimTarget(first.number, first.multiplier)


X01_RULES: Tuple[TargetRule, ...] = (
    TargetRule(
        "checkout",
        _checkout_in_reach,
        _aim_checkout,
    ),
    # Odd finish: a single 1 leaves an even number for a double
    TargetRule(
        "fix_parity",
        lambda s: s.remaining <= 40 and s.remaining % 2 == 1,
        lambda s: AimTarget(1, 1),
    ),
    TargetRule(
        "go_for_double",
        lambda s: 2 <= s.remaining <= 40 and s.remaining % 2 == 0,
        lambda s: AimTarget(s.remaining // 2, 2),
    ),
    TargetRule(
        "maximum_scoring",
        lambda s: s.remaining > 180,
        lambda s: TREBLE_20,
    ),
    TargetRule(
        "set_up_leave",
        lambda s: bool(_leave_candidates(s)),
        lambda s: _leave_candidates(s)[0].target,
    ),
    TargetRule(
        "fallback",
        lambda s: True,
        lambda s: TREBLE_20,
    ),
)


def explain_x01_target(
        remaining: int,
        darts_thrown: int = 0,
        table: Optional[CheckoutTable] = None
) -> Tuple[str, AimTarget]:
    """Chosen X01 target together with the name of the rule that chose it."""
    situation = X01Situation(remaining, darts_thrown, table or CHECKOUT_TABLE)
    name, target = first_matching_rule(X01_RULES, situation)
    logger.debug(f"X01 remaining={remaining} dart={darts_thrown + 1}: {name} → {target.label}")
    return name, target


def choose_x01_target(
        remaining: int,
        darts_thrown: int = 0,
        table: Optional[CheckoutTable] = None
) -> AimTarget:
    """
    Pick the X01 target for the next dart.

    Args:
        remaining: Score left before this dart
        darts_thrown: Darts already thrown this turn (0-2)
        table: Checkout table (default: shared table)

    Returns:
        Target to aim at
    """
    return explain_x01_target(remaining, darts_thrown, table)[1]


# ============================================================
# Cricket
# ============================================================

@dataclass(frozen=True)
class CricketSituation:
    """What a computer player knows before a Cricket dart."""
    own_marks: Mapping[int, int]
    opponent_marks: Mapping[int, int]
    own_points: int = 0
    opponent_points: int = 0

    def own(self, number: int) -> int:
        return self.own_marks.get(number, 0)

    def opponent(self, number: int) -> int:
        return self.opponent_marks.get(number, 0)

    @property
    def is_ahead(self) -> bool:
        return self.own_points > self.opponent_points

    @property
    def bleeding(self) -> List[int]:
        """Numbers the opponent can score on against us."""
        return [n for n in CRICKET_NUMBERS if self.opponent(n) >= CLOSED and self.own(n) < CLOSED]

    @property
    def scoreable(self) -> List[int]:
        """Numbers we can score on."""
        return [n for n in CRICKET_NUMBERS if self.own(n) >= CLOSED and self.opponent(n) < CLOSED]

    @property
    def unclosed(self) -> List[int]:
        return [n for n in CRICKET_NUMBERS if self.own(n) < CLOSED]


def _nearest_to_closing(s: CricketSituation) -> AimTarget:
    # Most marks first, then highest number
    number = min(s.unclosed, key=lambda n: (-s.own(n), -n))
    if number == BULL:
        return AimTarget(BULL, 1 if s.own(BULL) == 0 else 2)
    return AimTarget(number, 3)


CRICKET_RULES: Tuple[TargetRule, ...] = (
    TargetRule(
        "stop_bleeding",
        lambda s: bool(s.bleeding),
        lambda s: AimTarget(max(s.bleeding), 1 if max(s.bleeding) == BULL else 3),
    ),
    TargetRule(
        "score_when_behind",
        lambda s: not s.is_ahead and bool(s.scoreable),
        lambda s: AimTarget(max(s.scoreable), 2 if max(s.scoreable) == BULL else 3),
    ),
    TargetRule(
        "close_nearest",
        lambda s: bool(s.unclosed),
        _nearest_to_closing,
    ),
    TargetRule(
        "bull_for_points",
        lambda s: True,
        lambda s: AimTarget(BULL, 2),
    ),
)


def explain_cricket_target(situation: CricketSituation) -> Tuple[str, AimTarget]:
    """Chosen Cricket target together with the name of the rule that chose it."""
    name, target = first_matching_rule(CRICKET_RULES, situation)
    logger.debug(
        f"Cricket points {situation.own_points}:{situation.opponent_points}: "
        f"{name} → {target.label}"
    )
    return name, target


def choose_cricket_target(situation: CricketSituation) -> AimTarget:
    """Pick the Cricket target for the next dart."""
    return explain_cricket_target(situation)[1]
