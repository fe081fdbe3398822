"""
Core data types for the dart scoring simulator.
Defines contracts between modules to ensure stable interfaces.
"""
from dataclasses import dataclass
from typing import List, Tuple

BULL = 25
MISS_NUMBER = 0

# Numbers played in Cricket, highest value first (25 = Bull)
CRICKET_NUMBERS: Tuple[int, ...] = (20, 19, 18, 17, 16, 15, 25)

_PREFIXES = {1: "S", 2: "D", 3: "T"}


def _label(number: int, multiplier: int) -> str:
    if number == MISS_NUMBER:
        return "MISS"
    if number == BULL:
        return "BULL" if multiplier == 2 else "25"
    return f"{_PREFIXES[multiplier]}{number}"


def _score(number: int, multiplier: int) -> int:
    if number == MISS_NUMBER:
        return 0
    if number == BULL:
        return 50 if multiplier == 2 else 25
    return number * multiplier


def _validate(number: int, multiplier: int) -> None:
    if multiplier not in (1, 2, 3):
        raise ValueError(f"Invalid multiplier: {multiplier}")
    if number == MISS_NUMBER:
        if multiplier != 1:
            raise ValueError("A miss has no multiplier")
    elif number == BULL:
        if multiplier == 3:
            raise ValueError("There is no triple bull")
    elif not 1 <= number <= 20:
        raise ValueError(f"Invalid board number: {number}")


@dataclass(frozen=True)
class Segment:
    """
    A scoring zone of the board where a dart landed.

    number is 0 for a miss, 1-20 for the numbered beds and 25 for the
    bull (multiplier 1 = outer bull/25, multiplier 2 = inner bull/50).
    """
    number: int
    multiplier: int = 1

    def __post_init__(self):
        _validate(self.number, self.multiplier)

    @property
    def score(self) -> int:
        return _score(self.number, self.multiplier)

    @property
    def label(self) -> str:
        return _label(self.number, self.multiplier)

    @property
    def is_double(self) -> bool:
        return self.number != MISS_NUMBER and self.multiplier == 2

    @property
    def is_bull(self) -> bool:
        return self.number == BULL

    @property
    def is_miss(self) -> bool:
        return self.number == MISS_NUMBER

    def __str__(self) -> str:
        return self.label


MISS = Segment(MISS_NUMBER, 1)
SINGLE_BULL = Segment(BULL, 1)
DOUBLE_BULL = Segment(BULL, 2)


def create_segment(number: int, multiplier: int = 1) -> Segment:
    """Create a segment, mapping any multiplier on a miss to MISS."""
    if number == MISS_NUMBER:
        return MISS
    return Segment(number, multiplier)


def all_segments() -> List[Segment]:
    """All segments a keypad offers: S/D/T 1-20, both bulls and a miss."""
    segments = [Segment(n, m) for n in range(1, 21) for m in (1, 2, 3)]
    segments.extend([SINGLE_BULL, DOUBLE_BULL, MISS])
    return segments


@dataclass(frozen=True)
class AimTarget:
    """
    Where a computer player intends to throw.
    This is an intent, not a guaranteed outcome.
    """
    number: int
    multiplier: int = 1

    def __post_init__(self):
        if self.number == MISS_NUMBER:
            raise ValueError("Cannot aim at a miss")
        _validate(self.number, self.multiplier)

    @property
    def score(self) -> int:
        return _score(self.number, self.multiplier)

    @property
    def label(self) -> str:
        return _label(self.number, self.multiplier)

    @property
    def is_bull(self) -> bool:
        return self.number == BULL

    def to_segment(self) -> Segment:
        return Segment(self.number, self.multiplier)

    def __str__(self) -> str:
        return self.label


@dataclass
class BoardGeometry:
    """
    Dartboard geometric parameters (official dimensions).
    All measurements in millimeters unless specified.
    """
    # Radii (from center)
    inner_bull_radius: float = 6.35  # Double bull (50 points)
    outer_bull_radius: float = 15.9  # Single bull (25 points)
    triple_inner_radius: float = 99.0  # Inner edge of triple ring
    triple_outer_radius: float = 107.0  # Outer edge of triple ring
    double_inner_radius: float = 162.0  # Inner edge of double ring
    double_outer_radius: float = 170.0  # Outer edge of double ring (board edge)

    # Sector configuration
    num_sectors: int = 20
    sector_angle: float = 18.0  # Degrees per sector
    sector_sequence: Tuple[int, ...] = (20, 1, 18, 4, 13, 6, 10, 15, 2, 17,
                                        3, 19, 7, 16, 8, 11, 14, 9, 12, 5)

    def __post_init__(self):
        if len(self.sector_sequence) != self.num_sectors:
            raise ValueError("Sector sequence must list every sector once")
        if not (0 < self.inner_bull_radius < self.outer_bull_radius
                < self.triple_inner_radius < self.triple_outer_radius
                < self.double_inner_radius < self.double_outer_radius):
            raise ValueError("Board radii must be strictly increasing")

    @property
    def board_radius(self) -> float:
        """Outer edge of the scoring area."""
        return self.double_outer_radius
