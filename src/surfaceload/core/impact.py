"""
Dynamic impact factor for surface live loads.
"""

import logging

from surfaceload.core.models import PavementType, VehicleClass
from surfaceload.utils.constants import (
    IMPACT_FACTORS, IMPACT_DEPTH_THRESHOLD, IMPACT_DECAY_PER_INCH, IMPACT_FACTOR_FLOOR
)

logger = logging.getLogger(__name__)


def base_impact_factor(vehicle_class: VehicleClass, pavement_type: PavementType) -> float:
    """Impact factor at shallow cover for a vehicle class and pavement."""
    factor = IMPACT_FACTORS[vehicle_class.value]
    if isinstance(factor, dict):
        factor = factor[pavement_type.value]
    return factor


def impact_factor(vehicle_class: VehicleClass, pavement_type: PavementType,
                  depth: float) -> float:
    """
    Impact factor reduced for deep cover.

    Below 60 in of cover the factor drops by 0.0025 per inch, never below 1.0.

    Args:
        vehicle_class: Highway, farm or tracked vehicle
        pavement_type: Rigid or flexible (highway only)
        depth: Depth of cover, in

    Returns:
        Impact factor
    """
    factor = base_impact_factor(vehicle_class, pavement_type)
    if depth > IMPACT_DEPTH_THRESHOLD:
        factor = max(IMPACT_FACTOR_FLOOR,
                     factor - IMPACT_DECAY_PER_INCH * (depth - IMPACT_DEPTH_THRESHOLD))
    logger.debug(f"Impact factor {vehicle_class.value}/{pavement_type.value} at {depth:.1f} in: {factor:.4f}")
    return factor
