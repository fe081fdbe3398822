"""
Throw simulation for computer players.

The simulator aims at the centre of the target zone and adds independent
Gaussian noise on both board axes. Wide spreads naturally drift into
neighbouring sectors and rings, so no separate "miss the number" model is
needed.
"""
from dataclasses import dataclass
from typing import Optional, Tuple
import logging

import numpy as np

from dartsim.core import AimTarget, Segment
from dartsim.board import DartboardMapper

logger = logging.getLogger(__name__)

# spread(skill) = SPREAD_SCALE_MM * exp(-SPREAD_DECAY * skill)
SPREAD_SCALE_MM = 70.0
SPREAD_DECAY = 0.28


def spread_for_skill(skill: float) -> float:
    """
    Standard deviation of a throw in mm.

    Skill 1 ≈ 53mm (wild), skill 5 ≈ 17mm, skill 10 ≈ 4.3mm (precise).
    """
    return SPREAD_SCALE_MM * float(np.exp(-SPREAD_DECAY * skill))


@dataclass(frozen=True)
class Throw:
    """A simulated dart: where it was aimed and where it landed."""
    target: AimTarget
    skill: float
    spread_mm: float
    aim_point: Tuple[float, float]
    landing_point: Tuple[float, float]
    segment: Segment


class ThrowSimulator:
    """
    Turns an aim target and a skill level into a landed segment.

    Holds no game state; the only state is the random number generator.
    """

    def __init__(
            self,
            mapper: Optional[DartboardMapper] = None,
            rng: Optional[np.random.Generator] = None,
            seed: Optional[int] = None
    ):
        """
        Initialize throw simulator.

        Args:
            mapper: Board mapper used to locate targets and score landings
            rng: Random generator (takes precedence over seed)
            seed: Seed for a new generator, for reproducible matches
        """
        self.mapper = mapper or DartboardMapper()
        self.rng = rng if rng is not None else np.random.default_rng(seed)

    def _uniform_open(self) -> float:
        """Uniform draw in (0, 1); zero is redrawn so log() stays finite."""
        u = 0.0
        while u == 0.0:
            u = float(self.rng.random())
        return u

    def gaussian(self) -> float:
        """Standard normal sample via the Box-Muller transform."""
        u = self._uniform_open()
        v = self._uniform_open()
        return float(np.sqrt(-2.0 * np.log(u)) * np.cos(2.0 * np.pi * v))

    def aim_point(self, target: AimTarget) -> Tuple[float, float]:
        """Centre of the target zone; bull targets get a random angle."""
        angle = None
        if target.is_bull:
            angle = float(self.rng.random()) * 360.0
        return self.mapper.target_point(target.number, target.multiplier, angle)

    def simulate(self, target: AimTarget, skill: float) -> Throw:
        """
        Throw one dart.

        Args:
            target: Intended zone
            skill: 1 (beginner) to 10 (professional)

        Returns:
            Throw with aim point, landing point and resulting segment
        """
        aim_x, aim_y = self.aim_point(target)
        spread = spread_for_skill(skill)

        x = aim_x + self.gaussian() * spread
        y = aim_y + self.gaussian() * spread
        segment = self.mapper.classify_point(x, y)

        logger.debug(
            "Aimed %s (skill %s, σ=%.1fmm) → landed %s",
            target.label, skill, spread, segment.label
        )

        return Throw(
            target=target,
            skill=skill,
            spread_mm=spread,
            aim_point=(aim_x, aim_y),
            landing_point=(x, y),
            segment=segment,
        )

    def throw_at(self, target: AimTarget, skill: float) -> Segment:
        """Throw one dart and return only where it landed."""
        return self.simulate(target, skill).segment
