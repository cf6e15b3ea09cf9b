"""
Boussinesq superposition of surface point loads.

The vertical stress at pipe depth below each measurement point is the sum of
the elastic half-space solutions of every point load.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Dict, List, Union

import numpy as np

from surfaceload.core.models import MeasurementPoint, PointLoad
from surfaceload.core.validators import NumericDegeneracyError

logger = logging.getLogger(__name__)


@dataclass
class BoussinesqResult:
    """Pressures at pipe depth, psi, keyed by measurement point label."""
    pressures: Dict[str, float] = field(default_factory=dict)
    max_pressure: float = 0.0
    governing_location: str = ""
    total_load: float = 0.0


def point_load_stress(load: Union[float, np.ndarray], depth: float,
                      radial_distance: Union[float, np.ndarray]) -> Union[float, np.ndarray]:
    """
    Vertical stress below a surface point load.

    sigma = 3Q / (2 pi z^2 (1 + (R/z)^2)^2.5)

    Args:
        load: Point load Q, lb
        depth: Depth z below the surface, in
        radial_distance: Horizontal distance R from the load, in

    Returns:
        Vertical stress, psi
    """
    if depth <= 0:
        raise NumericDegeneracyError(f"Boussinesq stress needs a positive depth, got {depth}")
    ratio = np.asarray(radial_distance) / depth
    stress = 3 * np.asarray(load) / (2 * math.pi * depth ** 2 * (1 + ratio ** 2) ** 2.5)
    return float(stress) if np.ndim(stress) == 0 else stress


def superpose(point_loads: List[PointLoad], measurement_points: List[MeasurementPoint],
              depth: float) -> BoussinesqResult:
    """
    Sum the point load stresses at each measurement point.

    The governing location is the point with the highest pressure; on a tie
    the earlier point in the list wins.

    Args:
        point_loads: Surface point loads
        measurement_points: Evaluation points, in priority order
        depth: Depth of the pipe crown below the surface, in

    Returns:
        Pressures at every point and the governing maximum
    """
    xs = np.array([p.x for p in point_loads], dtype=float)
    ys = np.array([p.y for p in point_loads], dtype=float)
    loads = np.array([p.load for p in point_loads], dtype=float)

    result = BoussinesqResult(total_load=float(loads.sum()))
    for point in measurement_points:
        radial = np.hypot(xs - point.x, ys - point.y)
        pressure = float(np.sum(point_load_stress(loads, depth, radial)))
        result.pressures[point.label] = pressure

        if not result.governing_location or pressure > result.max_pressure:
            result.max_pressure = pressure
            result.governing_location = point.label

    logger.debug(f"Boussinesq at {depth:.1f} in: {result.pressures}, "
                 f"governing '{result.governing_location}'")
    return result
