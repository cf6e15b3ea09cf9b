"""
Pipe stress resolution.

Hoop stresses from earth, live and internal pressure, longitudinal stresses
from local ovaling, beam-on-elastic-foundation bending and temperature
change, and the equivalent stress of their combinations. All values are in
English units (psi, in, lb).
"""

import logging
import math
from dataclasses import dataclass
from typing import Dict

import numpy as np

from surfaceload.core.models import (
    EquivalentStress, EquivalentStressMethod, LiveLoadEnvelope, PipeSection,
    StressComponents, StressEnvelope, StressState
)
from surfaceload.core.soil import BeddingParameters
from surfaceload.core.validators import NumericDegeneracyError
from surfaceload.utils.constants import (
    STEEL_ELASTIC_MODULUS, STEEL_POISSON_RATIO, STEEL_THERMAL_EXPANSION,
    HOOP_STIFFNESS_COEFFICIENT, LOCAL_OVALING_COEFFICIENT, LOAD_SPREAD_TANGENT,
    MOMENT_SEARCH_EXTENT, MOMENT_SEARCH_SAMPLES
)

logger = logging.getLogger(__name__)

# Shell stiffness parameter of the local ovaling term
BETA = (12 * (1 - STEEL_POISSON_RATIO ** 2)) ** 0.125


@dataclass
class FoundationBending:
    """Beam-on-elastic-foundation bending of the pipe under a surface load."""
    moment_of_inertia: float      # in^4
    decay: float                  # lambda, 1/in
    loaded_length: float          # in
    equivalent_load: float        # lb
    line_load_pressure: float     # psi
    moment_max: float             # lb·in
    stress: float                 # psi


def _require_wall(thickness: float):
    if thickness <= 0:
        raise NumericDegeneracyError(f"Wall thickness must be positive, got {thickness}")


def hoop_denominator(internal_pressure: float, diameter: float, thickness: float,
                     kz: float, e_prime: float) -> float:
    """Pressure and soil stiffening of the ring, 1 + 3Kz(P/E)(D/t)^3 + 0.0915(E'/E)(D/t)^3."""
    _require_wall(thickness)
    ratio_cubed = (diameter / thickness) ** 3
    return (1
            + 3 * kz * (internal_pressure / STEEL_ELASTIC_MODULUS) * ratio_cubed
            + HOOP_STIFFNESS_COEFFICIENT * (e_prime / STEEL_ELASTIC_MODULUS) * ratio_cubed)


def hoop_stress(pressure: float, internal_pressure: float, diameter: float,
                thickness: float, kb: float, kz: float, e_prime: float) -> float:
    """
    Ring bending hoop stress from an external pressure on the crown.

    Args:
        pressure: External (earth or live) pressure, psi
        internal_pressure: Internal pressure, psi
        diameter: Outer diameter, in
        thickness: Wall thickness, in
        kb: Bedding bending moment parameter
        kz: Bedding deflection parameter
        e_prime: Modulus of soil reaction, psi

    Returns:
        Hoop stress, psi
    """
    denominator = hoop_denominator(internal_pressure, diameter, thickness, kz, e_prime)
    return 3 * kb * pressure * (diameter / thickness) ** 2 / denominator


def internal_hoop_stress(internal_pressure: float, diameter: float, thickness: float) -> float:
    """Barlow hoop stress, P D / 2t."""
    _require_wall(thickness)
    return internal_pressure * diameter / (2 * thickness)


def local_ovaling_stress(hoop_live: float) -> float:
    """Longitudinal stress from local ovaling under the live load."""
    return LOCAL_OVALING_COEFFICIENT * BETA ** 4 * hoop_live


def thermal_stress(delta_t: float) -> float:
    """Restrained thermal stress, compressive (negative) for a temperature rise."""
    return -STEEL_ELASTIC_MODULUS * STEEL_THERMAL_EXPANSION * delta_t


def moment_of_inertia(diameter: float, thickness: float) -> float:
    outer = diameter / 2
    inner = outer - thickness
    return math.pi / 4 * (outer ** 4 - inner ** 4)


def _decay_shape(u: np.ndarray) -> np.ndarray:
    return np.exp(-u) * (np.cos(u) + np.sin(u))


def bending_moment(x: np.ndarray, line_load: float, decay: float,
                   loaded_length: float) -> np.ndarray:
    """
    Bending moment along a beam on elastic foundation.

    Args:
        x: Distances from the load centre, in
        line_load: Equivalent line load pressure, psi
        decay: Foundation decay parameter lambda, 1/in
        loaded_length: Half length of the loaded zone, in

    Returns:
        Moment at each x, lb·in
    """
    distance = np.abs(x)
    scale = line_load / (4 * decay ** 3)

    inside = scale * _decay_shape(decay * distance) - line_load * distance ** 2 / 2
    beyond = np.maximum(distance - loaded_length, 0.0)
    outside = scale * (_decay_shape(decay * distance) - _decay_shape(decay * beyond))

    return np.where(distance <= loaded_length, inside, outside)


def foundation_bending(boussinesq_max: float, impact: float, depth: float,
                       diameter: float, thickness: float, e_prime: float,
                       theta: float) -> FoundationBending:
    """
    Longitudinal bending stress from the surface load.

    The surface load is turned back into the equivalent concentrated load
    that produces ``boussinesq_max`` at the crown, spread over a loaded
    length of H tan(29.9°), and applied to the pipe as a beam on an elastic
    foundation. The maximum moment is found on a fixed sample grid spanning
    100 loaded lengths either side of the load.

    Args:
        boussinesq_max: Governing pressure at pipe depth before impact, psi
        impact: Impact factor
        depth: Depth of cover, in
        diameter: Outer diameter, in
        thickness: Wall thickness, in
        e_prime: Modulus of soil reaction, psi
        theta: Bedding load distribution angle, degrees

    Returns:
        Foundation bending results
    """
    _require_wall(thickness)
    if e_prime <= 0:
        raise NumericDegeneracyError(f"E' must be positive for foundation bending, got {e_prime}")
    if depth <= 0:
        raise NumericDegeneracyError(f"Depth of cover must be positive, got {depth}")

    inertia = moment_of_inertia(diameter, thickness)
    foundation_stiffness = e_prime * diameter * theta / 360
    decay = (foundation_stiffness / (4 * STEEL_ELASTIC_MODULUS * inertia)) ** 0.25
    if decay <= 0:
        raise NumericDegeneracyError("Foundation decay parameter is zero")

    equivalent_load = boussinesq_max * 2 * math.pi * depth ** 2 / 3 * impact
    loaded_length = depth * LOAD_SPREAD_TANGENT
    line_load = equivalent_load / (math.pi * loaded_length ** 2)

    x = np.linspace(-MOMENT_SEARCH_EXTENT * loaded_length,
                    MOMENT_SEARCH_EXTENT * loaded_length,
                    MOMENT_SEARCH_SAMPLES)
    moments = bending_moment(x, line_load, decay, loaded_length)
    moment_max = float(np.max(np.abs(moments)))
    stress = moment_max * (diameter / 2) / inertia

    logger.debug(f"Foundation bending: lambda={decay:.5f} 1/in, Lload={loaded_length:.2f} in, "
                 f"Mmax={moment_max:.1f} lb·in, stress={stress:.1f} psi")

    return FoundationBending(
        moment_of_inertia=inertia,
        decay=decay,
        loaded_length=loaded_length,
        equivalent_load=equivalent_load,
        line_load_pressure=line_load,
        moment_max=moment_max,
        stress=stress
    )


def equivalent_stress(method: EquivalentStressMethod, hoop: StressEnvelope,
                      longitudinal: StressEnvelope, smys: float) -> EquivalentStress:
    """
    Combine hoop and longitudinal envelopes into an equivalent stress.

    Every pairing of the hoop and longitudinal high and low values is
    evaluated; the result carries the largest and smallest.

    Args:
        method: Tresca or Von Mises
        hoop: Hoop stress envelope
        longitudinal: Longitudinal stress envelope
        smys: Specified minimum yield strength, psi

    Returns:
        Equivalent stress envelope and its percentage of SMYS
    """
    if smys <= 0:
        raise NumericDegeneracyError(f"SMYS must be positive, got {smys}")

    values = []
    for h in (hoop.high, hoop.low):
        for l in (longitudinal.high, longitudinal.low):
            if method == EquivalentStressMethod.TRESCA:
                values.append(abs(h - l))
            else:
                values.append(math.sqrt(h * h - h * l + l * l))

    high = max(values)
    return EquivalentStress(high=high, low=min(values), percent_smys=100.0 * high / smys)


class PipeStressResolver:
    """
    Resolves the stress state of one pipe section at any internal pressure.

    Earth, live and bending terms are fixed for a load case; only the
    internal pressure changes between the zero-pressure and MOP states.
    """

    def __init__(self, pipe: PipeSection, bedding: BeddingParameters, e_prime: float,
                 soil_pressure: float, live_pressure: float, boussinesq_max: float,
                 impact: float, depth: float,
                 method: EquivalentStressMethod = EquivalentStressMethod.VON_MISES,
                 envelope: LiveLoadEnvelope = LiveLoadEnvelope.ADDITIVE):
        """
        Initialize resolver.

        Args:
            pipe: Pipe section in English units
            bedding: Bedding parameters
            e_prime: Modulus of soil reaction, psi
            soil_pressure: Earth pressure on the crown, psi
            live_pressure: Surface live pressure at the crown including impact, psi
            boussinesq_max: Governing pressure at pipe depth before impact, psi
            impact: Impact factor
            depth: Depth of cover, in
            method: Equivalent stress method
            envelope: Live load envelope convention
        """
        _require_wall(pipe.wall_thickness)
        self.pipe = pipe
        self.bedding = bedding
        self.e_prime = e_prime
        self.soil_pressure = soil_pressure
        self.live_pressure = live_pressure
        self.method = method
        self.envelope = envelope
        self.thermal = thermal_stress(pipe.delta_t)
        self.bending = foundation_bending(
            boussinesq_max, impact, depth, pipe.outer_diameter, pipe.wall_thickness,
            e_prime, bedding.theta
        )

    def _hoop(self, pressure: float, internal_pressure: float) -> float:
        return hoop_stress(pressure, internal_pressure, self.pipe.outer_diameter,
                           self.pipe.wall_thickness, self.bedding.kb, self.bedding.kz,
                           self.e_prime)

    def hoop_terms(self, internal_pressure: float) -> Dict[str, float]:
        """Individual hoop and longitudinal stress terms at an internal pressure."""
        hoop_soil = self._hoop(self.soil_pressure, internal_pressure)
        hoop_live = self._hoop(self.live_pressure, internal_pressure)
        hoop_internal = internal_hoop_stress(internal_pressure, self.pipe.outer_diameter,
                                             self.pipe.wall_thickness)
        local = local_ovaling_stress(hoop_live)

        return {
            'hoop_soil': hoop_soil,
            'hoop_live': hoop_live,
            'hoop_internal': hoop_internal,
            'longitudinal_soil': STEEL_POISSON_RATIO * hoop_soil,
            'longitudinal_internal': STEEL_POISSON_RATIO * hoop_internal,
            'longitudinal_local': local,
            'longitudinal_live': local + self.bending.stress,
        }

    def resolve(self, internal_pressure: float) -> StressState:
        """
        Stress state at an internal pressure.

        Args:
            internal_pressure: Internal pressure, psi

        Returns:
            Hoop, longitudinal and equivalent stresses
        """
        terms = self.hoop_terms(internal_pressure)
        live_low = -1.0 if self.envelope == LiveLoadEnvelope.SYMMETRIC else 0.0

        hoop_base = terms['hoop_soil'] + terms['hoop_internal']
        hoop_high = hoop_base + terms['hoop_live']
        hoop = StressEnvelope(
            high=hoop_high,
            low=hoop_base + live_low * terms['hoop_live'],
            components=StressComponents(
                pressure=terms['hoop_internal'],
                earth=terms['hoop_soil'],
                thermal=0.0,
                total=hoop_high
            )
        )

        long_base = terms['longitudinal_soil'] + terms['longitudinal_internal'] + self.thermal
        long_high = long_base + terms['longitudinal_live']
        longitudinal = StressEnvelope(
            high=long_high,
            low=long_base + live_low * terms['longitudinal_live'],
            components=StressComponents(
                pressure=terms['longitudinal_internal'],
                earth=terms['longitudinal_soil'],
                thermal=self.thermal,
                total=long_high
            )
        )

        return StressState(
            internal_pressure=internal_pressure,
            hoop=hoop,
            longitudinal=longitudinal,
            equivalent=equivalent_stress(self.method, hoop, longitudinal, self.pipe.smys)
        )

    def deflection_ratio(self, internal_pressure: float) -> float:
        """Ring deflection strain from the earth load, hoop soil stress over E."""
        return self._hoop(self.soil_pressure, internal_pressure) / STEEL_ELASTIC_MODULUS
