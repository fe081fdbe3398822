"""
Dartboard geometry calculations and sector mapping.
"""
import numpy as np
from typing import Dict, Optional, Tuple
import logging

from dartsim.core import (
    BULL,
    BoardGeometry,
    Segment,
    MISS,
    SINGLE_BULL,
    DOUBLE_BULL,
)

logger = logging.getLogger(__name__)


class DartboardMapper:
    """
    Maps board coordinates (millimetres from the centre) to segments.

    Coordinates use screen orientation: x grows to the right, y grows
    downwards. Angles are in degrees with 0 at the top of the board,
    increasing clockwise. The same classifier scores a tapped point and a
    simulated throw, so human and computer darts are always scored alike.
    """

    def __init__(self, board_geometry: Optional[BoardGeometry] = None):
        """
        Initialize dartboard mapper.

        Args:
            board_geometry: Board dimensions (default: BoardGeometry())
        """
        self.geometry = board_geometry or BoardGeometry()
        self._sector_index = {
            number: idx for idx, number in enumerate(self.geometry.sector_sequence)
        }

    def angle_of_number(self, number: int) -> float:
        """
        Centre angle of a numbered sector.

        Args:
            number: Board number (1-20)

        Returns:
            Angle in degrees (0° = top, clockwise)

        Raises:
            ValueError: If the number is not on the board
        """
        if number not in self._sector_index:
            raise ValueError(f"Number {number} has no sector")
        return self._sector_index[number] * self.geometry.sector_angle

    def polar_to_point(self, angle: float, radius: float) -> Tuple[float, float]:
        """
        Convert a board angle and radius to (x, y).

        Args:
            angle: Degrees, 0° = top, clockwise
            radius: Distance from centre in mm

        Returns:
            (x, y) in mm relative to the board centre
        """
        angle_rad = np.radians(angle - 90.0)
        return float(radius * np.cos(angle_rad)), float(radius * np.sin(angle_rad))

    def point_to_polar(self, x: float, y: float) -> Tuple[float, float]:
        """
        Convert (x, y) to board polar coordinates.

        Returns:
            (angle, radius) where angle is in [0, 360)
        """
        radius = float(np.hypot(x, y))

        # atan2 measures from the x axis; shift so the top of the board is 0°
        angle = float(np.degrees(np.arctan2(y, x))) + 90.0
        if angle < 0:
            angle += 360.0
        if angle >= 360.0:
            angle -= 360.0

        return angle, radius

    def angle_to_sector(self, angle: float) -> int:
        """
        Convert angle to sector number.

        Each sector spans 18°; sector 20 covers [-9°, 9°).
        """
        sector_angle = self.geometry.sector_angle
        adjusted_angle = (angle + sector_angle / 2) % 360
        sector_idx = int(adjusted_angle / sector_angle) % self.geometry.num_sectors
        return self.geometry.sector_sequence[sector_idx]

    def classify_point(self, x: float, y: float) -> Segment:
        """
        Resolve a point to the segment it lies in.

        Radius is checked first (board edge, inner bull, outer bull), then
        the angle picks the sector and the radius picks the ring. Ring edges
        are inclusive; a point exactly on an edge takes the first ring
        checked.
        """
        angle, radius = self.point_to_polar(x, y)
        geo = self.geometry

        if radius > geo.double_outer_radius:
            segment = MISS
        elif radius <= geo.inner_bull_radius:
            segment = DOUBLE_BULL
        elif radius <= geo.outer_bull_radius:
            segment = SINGLE_BULL
        else:
            number = self.angle_to_sector(angle)
            if geo.triple_inner_radius <= radius <= geo.triple_outer_radius:
                multiplier = 3
            elif geo.double_inner_radius <= radius <= geo.double_outer_radius:
                multiplier = 2
            else:
                multiplier = 1
            segment = Segment(number, multiplier)

        logger.debug(
            "Point (%.1f, %.1f) → r=%.1fmm, θ=%.1f° → %s",
            x, y, radius, angle, segment.label
        )
        return segment

    def adjacent_numbers(self, number: int) -> Tuple[int, int]:
        """
        Neighbouring sectors of a number.

        Returns:
            (left, right) = (counter-clockwise neighbour, clockwise neighbour)
        """
        idx = self._sector_index.get(number)
        if idx is None:
            raise ValueError(f"Number {number} has no sector")
        sequence = self.geometry.sector_sequence
        count = self.geometry.num_sectors
        return sequence[(idx - 1) % count], sequence[(idx + 1) % count]

    def target_radius(self, number: int, multiplier: int) -> float:
        """
        Radius of the centre of a scoring zone.

        Singles aim at the inner single bed, trebles and doubles at the
        middle of their ring. The inner bull is the board centre.
        """
        geo = self.geometry
        if number == BULL:
            if multiplier == 2:
                return 0.0
            return (geo.inner_bull_radius + geo.outer_bull_radius) / 2
        if multiplier == 3:
            return (geo.triple_inner_radius + geo.triple_outer_radius) / 2
        if multiplier == 2:
            return (geo.double_inner_radius + geo.double_outer_radius) / 2
        return (geo.outer_bull_radius + geo.triple_inner_radius) / 2

    def target_point(
            self,
            number: int,
            multiplier: int,
            angle: Optional[float] = None
    ) -> Tuple[float, float]:
        """
        Centre point of a scoring zone.

        Args:
            number: Board number or 25 for bull
            multiplier: 1, 2 or 3
            angle: Angle to use for bull targets (bull is rotationally
                symmetric); ignored for numbered sectors

        Returns:
            (x, y) in mm
        """
        radius = self.target_radius(number, multiplier)
        if number == BULL:
            return self.polar_to_point(angle or 0.0, radius)
        return self.polar_to_point(self.angle_of_number(number), radius)

    def is_on_board(self, x: float, y: float) -> bool:
        """Check if a point lies within the scoring area."""
        _, radius = self.point_to_polar(x, y)
        return radius <= self.geometry.board_radius

    def get_ring_boundaries(self) -> Dict[str, float]:
        """
        Get all ring boundaries in mm.

        Returns:
            Dictionary with ring names and radii
        """
        geo = self.geometry
        return {
            "inner_bull": geo.inner_bull_radius,
            "outer_bull": geo.outer_bull_radius,
            "triple_inner": geo.triple_inner_radius,
            "triple_outer": geo.triple_outer_radius,
            "double_inner": geo.double_inner_radius,
            "double_outer": geo.double_outer_radius,
        }
