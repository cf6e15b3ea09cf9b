"""
Surface load analysis engine.

Runs a load case through validation, unit normalization, the soil model,
the vehicle footprint generator, Boussinesq superposition, the impact
factor, pipe stress resolution and code compliance.
"""

import logging
from typing import Any, Dict

from surfaceload.core.boussinesq import superpose
from surfaceload.core.compliance import (
    allowable_stresses, code_profile, evaluate_compliance, sustained_longitudinal_stress
)
from surfaceload.core.footprints import (
    AxleFootprintGenerator, FootprintGenerator, GridFootprintGenerator,
    TrackFootprintGenerator
)
from surfaceload.core.impact import impact_factor
from surfaceload.core.models import AnalysisResult, LoadCase, StressResults, VehicleType
from surfaceload.core.soil import bedding_parameters, modulus_of_soil_reaction, soil_load
from surfaceload.core.stresses import PipeStressResolver
from surfaceload.core.units import denormalize_result, normalize_load_case
from surfaceload.core.validators import raise_for_invalid
from surfaceload.utils.constants import IN_PER_FT

logger = logging.getLogger(__name__)


class SurfaceLoadEngine:
    """Main analysis engine coordinating the vehicle footprint generators."""

    def __init__(self):
        """Initialize the engine with a generator for every vehicle type."""
        self.generators: Dict[VehicleType, FootprintGenerator] = {
            VehicleType.TRACK: TrackFootprintGenerator(),
            VehicleType.TWO_AXLE: AxleFootprintGenerator(axle_count=2),
            VehicleType.THREE_AXLE: AxleFootprintGenerator(axle_count=3),
            VehicleType.GRID: GridFootprintGenerator(),
        }

    def get_generator(self, vehicle_type: VehicleType) -> FootprintGenerator:
        if vehicle_type not in self.generators:
            raise ValueError(f"Unknown vehicle type: {vehicle_type}")
        return self.generators[vehicle_type]

    def analyze(self, case: LoadCase) -> AnalysisResult:
        """
        Analyze one load case.

        Args:
            case: Load case in either unit system

        Returns:
            Analysis result in the unit system of the load case

        Raises:
            LoadCaseValidationError: If the load case is invalid
            NumericDegeneracyError: If a formula has no meaningful value
        """
        raise_for_invalid(case)
        en = normalize_load_case(case)

        pipe, soil, options = en.pipe, en.soil, en.options
        depth = soil.depth_of_cover * IN_PER_FT

        bedding = bedding_parameters(soil.bedding_angle)
        e_prime = modulus_of_soil_reaction(en.e_prime, soil.depth_of_cover)
        soil_pressure = soil_load(soil.soil_load_method, soil.unit_weight, soil.depth_of_cover,
                                  pipe.outer_diameter, soil.friction_angle, soil.cohesion)

        layout = self.get_generator(en.vehicle_type).generate(en.vehicle)
        boussinesq = superpose(layout.point_loads, layout.measurement_points, depth)
        impact = impact_factor(options.vehicle_class, options.pavement_type, depth)
        live_pressure = boussinesq.max_pressure * impact

        resolver = PipeStressResolver(
            pipe, bedding, e_prime, soil_pressure, live_pressure, boussinesq.max_pressure,
            impact, depth, options.equivalent_stress_method, options.live_load_envelope
        )
        stresses = StressResults(
            at_zero_pressure=resolver.resolve(0.0),
            at_mop=resolver.resolve(pipe.mop),
        )

        profile = code_profile(options.code_check, options.user_limits)
        allowables = allowable_stresses(profile, pipe.smys)
        pass_fail = evaluate_compliance(stresses, profile, allowables)

        contact_pressure = layout.max_contact_pressure
        diagnostics: Dict[str, Any] = {
            'kb': bedding.kb,
            'kz': bedding.kz,
            'theta': bedding.theta,
            'lateral_pressure_coefficient': soil.lateral_pressure_coefficient,
            'depth_of_cover': depth,
            'boussinesq_max': boussinesq.max_pressure,
            'contact_pressure': contact_pressure,
            'influence_factor': boussinesq.max_pressure / contact_pressure,
            'total_surface_load': layout.total_load,
            'point_load_count': len(layout.point_loads),
            'divisions_x': layout.footprints[0].divisions_x,
            'divisions_y': layout.footprints[0].divisions_y,
            'characteristic_length': 1.0 / resolver.bending.decay,
            'loaded_length': resolver.bending.loaded_length,
            'equivalent_surface_load': resolver.bending.equivalent_load,
            'line_load_pressure': resolver.bending.line_load_pressure,
            'moment_max': resolver.bending.moment_max,
            'longitudinal_bending': resolver.bending.stress,
            'longitudinal_thermal': resolver.thermal,
        }
        for label, state in (('zero', stresses.at_zero_pressure), ('mop', stresses.at_mop)):
            terms = resolver.hoop_terms(state.internal_pressure)
            diagnostics[f'hoop_live_{label}'] = terms['hoop_live']
            diagnostics[f'longitudinal_local_{label}'] = terms['longitudinal_local']
            diagnostics[f'sustained_longitudinal_{label}'] = sustained_longitudinal_stress(state)
        diagnostics['hoop_soil'] = stresses.at_zero_pressure.hoop.components.earth
        diagnostics['hoop_internal_mop'] = stresses.at_mop.hoop.components.pressure

        result = AnalysisResult(
            name=en.name,
            units=en.units,
            vehicle_type=en.vehicle_type,
            max_surface_pressure=live_pressure,
            governing_location=boussinesq.governing_location,
            impact_factor=impact,
            measurement_pressures=dict(boussinesq.pressures),
            stresses=stresses,
            allowable_stress=allowables.equivalent,
            allowables=allowables,
            code_profile=profile,
            pass_fail=pass_fail,
            e_prime=e_prime,
            soil_load=soil_pressure,
            deflection_ratio=resolver.deflection_ratio(pipe.mop),
            diagnostics=diagnostics,
        )

        logger.info(f"Analyzed '{case.name}' ({case.vehicle_type.value}): "
                    f"{live_pressure:.3f} psi at '{boussinesq.governing_location}', "
                    f"{'PASS' if pass_fail.overall_pass else 'FAIL'} against {profile.label}")

        return denormalize_result(result, case.units)


# Global analysis engine instance
analysis_engine = SurfaceLoadEngine()


def analyze(case: LoadCase) -> AnalysisResult:
    """Analyze a load case with the shared engine."""
    return analysis_engine.analyze(case)
