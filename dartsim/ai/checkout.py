"""
Checkout table for X01 games.

Maps a remaining score (2-170) to a finishing sequence of up to three
darts ending on a double or the inner bull. Scores that cannot be
finished in three darts (159, 162, 163, 165, 166, 168, 169) have no
entry at all.
"""
from typing import Dict, Iterator, List, Optional, Tuple
import logging

from dartsim.core import Segment, SINGLE_BULL, DOUBLE_BULL

logger = logging.getLogger(__name__)

MIN_CHECKOUT = 2
MAX_CHECKOUT = 170

Checkout = Tuple[Segment, ...]

# Finishes used by strong players, preferred over anything the search finds.
# Each entry is a sequence of (number, multiplier) pairs.
PREFERRED_CHECKOUTS: Dict[int, Tuple[Tuple[int, int], ...]] = {
    170: ((20, 3), (20, 3), (25, 2)),
    167: ((20, 3), (19, 3), (25, 2)),
    164: ((20, 3), (18, 3), (25, 2)),
    161: ((20, 3), (17, 3), (25, 2)),
    160: ((20, 3), (20, 3), (20, 2)),
    158: ((20, 3), (20, 3), (19, 2)),
    157: ((20, 3), (19, 3), (20, 2)),
    156: ((20, 3), (20, 3), (18, 2)),
    155: ((20, 3), (19, 3), (19, 2)),
    154: ((20, 3), (18, 3), (20, 2)),
    153: ((20, 3), (19, 3), (18, 2)),
    152: ((20, 3), (20, 3), (16, 2)),
    151: ((20, 3), (17, 3), (20, 2)),
    150: ((20, 3), (18, 3), (18, 2)),
    149: ((20, 3), (19, 3), (16, 2)),
    148: ((20, 3), (16, 3), (20, 2)),
    147: ((20, 3), (17, 3), (18, 2)),
    146: ((20, 3), (18, 3), (16, 2)),
    145: ((20, 3), (15, 3), (20, 2)),
    144: ((20, 3), (20, 3), (12, 2)),
    143: ((20, 3), (17, 3), (16, 2)),
    142: ((20, 3), (14, 3), (20, 2)),
    141: ((20, 3), (19, 3), (12, 2)),
    140: ((20, 3), (20, 3), (10, 2)),
    139: ((20, 3), (13, 3), (20, 2)),
    138: ((20, 3), (18, 3), (12, 2)),
    137: ((20, 3), (19, 3), (10, 2)),
    136: ((20, 3), (20, 3), (8, 2)),
    135: ((20, 3), (17, 3), (12, 2)),
    134: ((20, 3), (14, 3), (16, 2)),
    133: ((20, 3), (19, 3), (8, 2)),
    132: ((20, 3), (20, 3), (6, 2)),
    131: ((20, 3), (13, 3), (16, 2)),
    130: ((20, 3), (18, 3), (8, 2)),
    129: ((19, 3), (20, 3), (6, 2)),
    128: ((20, 3), (20, 3), (4, 2)),
    127: ((20, 3), (17, 3), (8, 2)),
    126: ((19, 3), (19, 3), (6, 2)),
    125: ((20, 3), (19, 3), (4, 2)),
    124: ((20, 3), (16, 3), (8, 2)),
    123: ((19, 3), (16, 3), (9, 2)),
    122: ((18, 3), (20, 3), (4, 2)),
    121: ((20, 3), (11, 3), (14, 2)),
    120: ((20, 3), (20, 1), (20, 2)),
    119: ((19, 3), (12, 3), (13, 2)),
    118: ((20, 3), (18, 1), (20, 2)),
    117: ((20, 3), (17, 1), (20, 2)),
    116: ((20, 3), (16, 1), (20, 2)),
    115: ((20, 3), (15, 1), (20, 2)),
    114: ((20, 3), (14, 1), (20, 2)),
    113: ((20, 3), (13, 1), (20, 2)),
    112: ((20, 3), (12, 1), (20, 2)),
    111: ((20, 3), (19, 1), (16, 2)),
    110: ((20, 3), (18, 1), (16, 2)),
    109: ((20, 3), (17, 1), (16, 2)),
    108: ((20, 3), (16, 1), (16, 2)),
    107: ((19, 3), (18, 1), (16, 2)),
    106: ((20, 3), (14, 1), (16, 2)),
    105: ((20, 3), (13, 1), (16, 2)),
    104: ((18, 3), (18, 1), (16, 2)),
    103: ((20, 3), (11, 1), (16, 2)),
    102: ((20, 3), (10, 1), (16, 2)),
    101: ((20, 3), (9, 1), (16, 2)),
    100: ((20, 3), (20, 2)),
    99: ((19, 3), (10, 1), (16, 2)),
    98: ((20, 3), (6, 1), (16, 2)),
    97: ((19, 3), (8, 1), (16, 2)),
    96: ((20, 3), (18, 2)),
    95: ((20, 3), (3, 1), (16, 2)),
    94: ((18, 3), (8, 1), (16, 2)),
    93: ((19, 3), (4, 1), (16, 2)),
    92: ((20, 3), (16, 2)),
    91: ((17, 3), (20, 2)),
    90: ((20, 3), (18, 1), (6, 2)),
    89: ((19, 3), (16, 2)),
    88: ((16, 3), (20, 2)),
    87: ((17, 3), (18, 2)),
    86: ((18, 3), (16, 2)),
    85: ((15, 3), (20, 2)),
    84: ((20, 3), (12, 2)),
    83: ((17, 3), (16, 2)),
    82: ((14, 3), (20, 2)),
    81: ((19, 3), (12, 2)),
    80: ((20, 3), (10, 2)),
    79: ((13, 3), (20, 2)),
    78: ((18, 3), (12, 2)),
    77: ((19, 3), (10, 2)),
    76: ((20, 3), (8, 2)),
    75: ((17, 3), (12, 2)),
    74: ((14, 3), (16, 2)),
    73: ((19, 3), (8, 2)),
    72: ((20, 3), (6, 2)),
    71: ((13, 3), (16, 2)),
    70: ((18, 3), (8, 2)),
    69: ((19, 3), (6, 2)),
    68: ((20, 3), (4, 2)),
    67: ((17, 3), (8, 2)),
    66: ((10, 3), (18, 2)),
    65: ((19, 3), (4, 2)),
    64: ((16, 3), (8, 2)),
    63: ((13, 3), (12, 2)),
    62: ((10, 3), (16, 2)),
    61: ((15, 3), (8, 2)),
    60: ((20, 1), (20, 2)),
    59: ((19, 1), (20, 2)),
    58: ((18, 1), (20, 2)),
    57: ((17, 1), (20, 2)),
    56: ((16, 1), (20, 2)),
    55: ((15, 1), (20, 2)),
    54: ((14, 1), (20, 2)),
    53: ((13, 1), (20, 2)),
    52: ((12, 1), (20, 2)),
    51: ((11, 1), (20, 2)),
    50: ((25, 2),),
    49: ((9, 1), (20, 2)),
    48: ((8, 1), (20, 2)),
    47: ((7, 1), (20, 2)),
    46: ((6, 1), (20, 2)),
    45: ((5, 1), (20, 2)),
    44: ((4, 1), (20, 2)),
    43: ((3, 1), (20, 2)),
    42: ((10, 1), (16, 2)),
    41: ((9, 1), (16, 2)),
}


def _scoring_darts() -> List[Segment]:
    """Every dart that scores: S/D/T 1-20 and both bulls."""
    darts = [Segment(n, m) for n in range(1, 21) for m in (1, 2, 3)]
    darts.extend([SINGLE_BULL, DOUBLE_BULL])
    return darts


def _finishing_darts() -> List[Segment]:
    """Every dart that may end a leg: D1-D20 and the inner bull."""
    darts = [Segment(n, 2) for n in range(1, 21)]
    darts.append(DOUBLE_BULL)
    return darts


def is_valid_checkout(remaining: int, darts: Checkout) -> bool:
    """True if the darts sum to remaining and the last one is a double."""
    return (
        0 < len(darts) <= 3
        and sum(d.score for d in darts) == remaining
        and darts[-1].is_double
    )


def format_checkout(darts: Checkout, separator: str = " → ") -> str:
    """Human readable route, e.g. "T20 → T20 → BULL"."""
    return separator.join(d.label for d in darts)


class CheckoutTable:
    """
    Lookup of remaining score → finishing darts.

    The table is built once: a generative search over one, two and three
    dart routes fills every reachable score with the first route found,
    then PREFERRED_CHECKOUTS replaces those routes where a well-known
    finish exists. The table is read-only afterwards.
    """

    def __init__(self, preferred: Optional[Dict[int, Tuple[Tuple[int, int], ...]]] = None):
        """
        Build the checkout table.

        Args:
            preferred: Curated finishes merged over the generated ones
                (default: PREFERRED_CHECKOUTS)
        """
        generated = self._generate()
        curated = self._curated(PREFERRED_CHECKOUTS if preferred is None else preferred)

        self._table: Dict[int, Checkout] = {**generated, **curated}

        logger.debug(
            f"CheckoutTable built: {len(self._table)} finishes "
            f"({len(generated)} generated, {len(curated)} preferred)"
        )

    @staticmethod
    def _generate() -> Dict[int, Checkout]:
        """Record the first route found for every score, shortest routes first."""
        setups = _scoring_darts()
        finishes = _finishing_darts()
        table: Dict[int, Checkout] = {}

        def record(route: Checkout) -> None:
            total = sum(d.score for d in route)
            if MIN_CHECKOUT <= total <= MAX_CHECKOUT and total not in table:
                table[total] = route

        for last in finishes:
            record((last,))

        for first in setups:
            for last in finishes:
                record((first, last))

        for first in setups:
            for second in setups:
                for last in finishes:
                    record((first, second, last))

        return table

    @staticmethod
    def _curated(preferred: Dict[int, Tuple[Tuple[int, int], ...]]) -> Dict[int, Checkout]:
        curated: Dict[int, Checkout] = {}
        for remaining, pairs in preferred.items():
            try:
                route = tuple(Segment(number, multiplier) for number, multiplier in pairs)
            except ValueError as e:
                logger.warning(f"Ignoring preferred checkout {remaining}: {e}")
                continue

            if not is_valid_checkout(remaining, route):
                logger.warning(
                    f"Ignoring preferred checkout {remaining}: "
                    f"{format_checkout(route)} does not finish exactly on a double"
                )
                continue
            curated[remaining] = route
        return curated

    def lookup(self, remaining: int) -> Optional[Checkout]:
        """
        Finishing darts for a remaining score.

        Returns:
            Tuple of segments, or None if no three dart finish exists
        """
        return self._table.get(remaining)

    def darts_needed(self, remaining: int) -> Optional[int]:
        """Number of darts in the stored route, None without a route."""
        route = self._table.get(remaining)
        return len(route) if route else None

    def suggestion(self, remaining: int) -> Optional[str]:
        """Formatted route for display, None without a route."""
        route = self._table.get(remaining)
        return format_checkout(route) if route else None

    def keys(self) -> List[int]:
        return sorted(self._table)

    def __contains__(self, remaining: object) -> bool:
        return remaining in self._table

    def __len__(self) -> int:
        return len(self._table)

    def __iter__(self) -> Iterator[int]:
        return iter(self.keys())


# Shared table, built on first import
CHECKOUT_TABLE = CheckoutTable()
