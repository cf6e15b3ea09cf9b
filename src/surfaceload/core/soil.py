"""
Soil-pipe interaction model.

Bedding constants, the modulus of soil reaction E′ and the earth load on the
pipe crown. All inputs and outputs are in English units.
"""

import logging
import math
from dataclasses import dataclass
from typing import Optional

import numpy as np

from surfaceload.core.models import (
    EPrimeMethod, ModulusOfSoilReaction, SoilLoadMethod, SoilType
)
from surfaceload.core.validators import LoadCaseValidationError, NumericDegeneracyError
from surfaceload.utils.constants import (
    BEDDING_TABLE, BEDDING_ANGLES, E_PRIME_COMPACTION_LEVELS, E_PRIME_EPR1,
    E_PRIME_EPR2, E_PRIME_EPR3, IN_PER_FT, SQIN_PER_SQFT, CUIN_PER_CUFT,
    TRAP_DOOR_MIN_COVER_RATIO
)

logger = logging.getLogger(__name__)


@dataclass
class BeddingParameters:
    """Bedding constants for a given bedding angle."""
    kb: float     # bending moment parameter
    kz: float     # deflection parameter
    theta: float  # load distribution angle, degrees


@dataclass
class EPrimeCoefficients:
    """Coefficients of E′ = Epr1 · Epr2^H · (compaction/100)^Epr3."""
    epr1: float
    epr2: float
    epr3: float


def bedding_parameters(bedding_angle: float) -> BeddingParameters:
    """
    Look up Kb, Kz and Theta for a bedding angle.

    Args:
        bedding_angle: Bedding angle in degrees, one of 0, 30, ... 180

    Returns:
        Bedding parameters

    Raises:
        LoadCaseValidationError: If the angle is not in the table
    """
    if bedding_angle not in BEDDING_TABLE:
        raise LoadCaseValidationError.for_field(
            "soil.bedding_angle",
            f"Bedding angle {bedding_angle} is not one of {BEDDING_ANGLES}"
        )
    kb, kz, theta = BEDDING_TABLE[bedding_angle]
    return BeddingParameters(kb=kb, kz=kz, theta=theta)


def e_prime_coefficients(soil_type: SoilType, compaction: float) -> EPrimeCoefficients:
    """
    Interpolate the E′ coefficients for a soil type and compaction.

    Coefficients are tabulated at 80, 85, 90, 95 and 100 % compaction and
    interpolated linearly in between. Compaction outside the table takes the
    coefficients of the nearest end row.
    """
    levels = E_PRIME_COMPACTION_LEVELS
    if not levels[0] <= compaction <= levels[-1]:
        logger.warning(f"Compaction {compaction}% outside {levels[0]}-{levels[-1]}%, using end row coefficients")

    return EPrimeCoefficients(
        epr1=float(np.interp(compaction, levels, E_PRIME_EPR1[soil_type.value])),
        epr2=float(np.interp(compaction, levels, E_PRIME_EPR2)),
        epr3=float(np.interp(compaction, levels, E_PRIME_EPR3)),
    )


def lookup_e_prime(soil_type: SoilType, compaction: float, depth_of_cover: float) -> float:
    """
    Modulus of soil reaction from the soil table.

    Args:
        soil_type: Backfill soil group
        compaction: Percent standard Proctor
        depth_of_cover: Depth of cover in feet

    Returns:
        E′ in psi
    """
    coefficients = e_prime_coefficients(soil_type, compaction)
    e_prime = (coefficients.epr1
               * coefficients.epr2 ** depth_of_cover
               * (compaction / 100.0) ** coefficients.epr3)
    logger.debug(f"E' lookup {soil_type.value} at {compaction}%: {e_prime:.1f} psi")
    return e_prime


def modulus_of_soil_reaction(modulus: ModulusOfSoilReaction, depth_of_cover: float) -> float:
    """Resolve E′ in psi from a user value or the lookup table."""
    if modulus.method == EPrimeMethod.USER_DEFINED:
        return modulus.value
    return lookup_e_prime(modulus.soil_type, modulus.compaction, depth_of_cover)


def prism_load(unit_weight: float, depth_of_cover: float) -> float:
    """Weight of the soil prism over the crown, psi."""
    return unit_weight * depth_of_cover / SQIN_PER_SQFT


def trap_door_load(unit_weight: float, depth_of_cover: float, diameter: float,
                   friction_angle: float, cohesion: float = 0.0) -> float:
    """
    Arching-reduced earth load (trap-door model).

    Falls back to the prism load while the cover is shallower than
    2.5 pipe diameters.

    Args:
        unit_weight: Soil unit weight, lb/ft³
        depth_of_cover: Cover depth, ft
        diameter: Pipe outer diameter, in
        friction_angle: Soil friction angle, degrees
        cohesion: Soil cohesion, psi

    Returns:
        Earth pressure at the crown, psi
    """
    depth = depth_of_cover * IN_PER_FT
    prism = prism_load(unit_weight, depth_of_cover)
    if depth < TRAP_DOOR_MIN_COVER_RATIO * diameter:
        logger.debug(f"Cover {depth:.1f} in below {TRAP_DOOR_MIN_COVER_RATIO}D, using prism load")
        return prism

    if diameter <= 0:
        raise NumericDegeneracyError("Trap-door load needs a positive pipe diameter")

    sin_phi = math.sin(math.radians(friction_angle))
    ka = (1 - sin_phi) / (1 + sin_phi)
    decay = math.exp(-2 * ka * depth / diameter)
    density_term = unit_weight / CUIN_PER_CUFT - 2 * (cohesion / SQIN_PER_SQFT) / diameter

    return density_term * diameter / (2 * ka) * (1 - decay) + prism * decay


def soil_load(method: SoilLoadMethod, unit_weight: float, depth_of_cover: float,
              diameter: float, friction_angle: Optional[float] = None,
              cohesion: float = 0.0) -> float:
    """Earth pressure on the pipe crown in psi for the selected method."""
    if method == SoilLoadMethod.TRAP_DOOR:
        return trap_door_load(unit_weight, depth_of_cover, diameter, friction_angle, cohesion)
    return prism_load(unit_weight, depth_of_cover)
