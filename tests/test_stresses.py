"""
Tests for pipe stress resolution.
"""

import math

import numpy as np
import pytest

from surfaceload.core.models import (
    EquivalentStressMethod, LiveLoadEnvelope, PipeSection, StressEnvelope
)
from surfaceload.core.soil import bedding_parameters
from surfaceload.core.stresses import (
    PipeStressResolver, bending_moment, equivalent_stress, foundation_bending,
    hoop_stress, internal_hoop_stress, local_ovaling_stress, moment_of_inertia,
    thermal_stress
)
from surfaceload.core.validators import NumericDegeneracyError
from surfaceload.utils.constants import MOMENT_SEARCH_SAMPLES


class TestHoopStress:
    """Test ring bending and internal pressure hoop stresses."""

    def test_earth_load_hoop_stress(self):
        """3.333 psi on a 24 x 0.375 in pipe with E' = 1000 psi and 90 degree bedding."""
        stress = hoop_stress(120.0 * 4.0 / 144.0, 0.0, 24.0, 0.375, 0.103, 0.108, 1000.0)

        assert abs(stress - 2344.42) < 0.05

    def test_internal_pressure_stiffens_the_ring(self):
        unpressurized = hoop_stress(5.0, 0.0, 24.0, 0.375, 0.103, 0.108, 1000.0)
        pressurized = hoop_stress(5.0, 1000.0, 24.0, 0.375, 0.103, 0.108, 1000.0)

        assert pressurized < unpressurized

    def test_barlow_stress(self):
        assert internal_hoop_stress(1000.0, 24.0, 0.375) == pytest.approx(32000.0)

    def test_zero_wall_thickness_is_degenerate(self):
        with pytest.raises(NumericDegeneracyError):
            hoop_stress(5.0, 0.0, 24.0, 0.0, 0.103, 0.108, 1000.0)
        with pytest.raises(NumericDegeneracyError):
            internal_hoop_stress(1000.0, 24.0, 0.0)


class TestLongitudinalStress:
    """Test local ovaling, thermal and foundation bending terms."""

    def test_local_ovaling_coefficient(self):
        """(0.153 / 1.56) * sqrt(12 * (1 - 0.3^2)) = 0.3241"""
        assert local_ovaling_stress(1000.0) == pytest.approx(324.10, abs=0.01)

    def test_thermal_stress_compressive_for_heating(self):
        """30e6 * 6.5e-6 * 50 = 9750 psi in compression."""
        assert thermal_stress(50.0) == pytest.approx(-9750.0)
        assert thermal_stress(0.0) == 0.0

    def test_moment_at_load_centre(self):
        """At x = 0 the moment is P / (4 lambda^3)."""
        moments = bending_moment(np.array([0.0]), 0.5, 0.01, 25.0)

        assert moments[0] == pytest.approx(0.5 / (4 * 0.01 ** 3))

    def test_moment_is_symmetric(self):
        x = np.array([-150.0, -10.0, 10.0, 150.0])
        moments = bending_moment(x, 0.5, 0.01, 25.0)

        assert moments[0] == pytest.approx(moments[3])
        assert moments[1] == pytest.approx(moments[2])

    def test_foundation_bending(self):
        """Bending stress is the governing moment over the section modulus."""
        bending = foundation_bending(0.2, 1.5, 48.0, 24.0, 0.375, 1000.0, 105.0)
        inertia = moment_of_inertia(24.0, 0.375)

        assert bending.moment_of_inertia == pytest.approx(math.pi / 4 * (12.0 ** 4 - 11.625 ** 4))
        assert bending.loaded_length == pytest.approx(48.0 * math.tan(math.radians(29.9)))
        assert bending.moment_max == pytest.approx(bending.line_load_pressure / (4 * bending.decay ** 3), rel=1e-6)
        assert bending.stress == pytest.approx(bending.moment_max * 12.0 / inertia)

    def test_moment_search_is_bounded(self):
        """The search grid has a fixed size that contains the load centre."""
        assert MOMENT_SEARCH_SAMPLES % 2 == 1
        shallow = foundation_bending(0.2, 1.5, 12.0, 24.0, 0.375, 1000.0, 105.0)
        deep = foundation_bending(0.2, 1.5, 1200.0, 24.0, 0.375, 1000.0, 105.0)

        assert shallow.moment_max > 0
        assert deep.moment_max > 0

    def test_zero_e_prime_is_degenerate(self):
        with pytest.raises(NumericDegeneracyError):
            foundation_bending(0.2, 1.5, 48.0, 24.0, 0.375, 0.0, 105.0)


class TestEquivalentStress:
    """Test equivalent stress combinations."""

    def test_tresca_over_all_combinations(self):
        hoop = StressEnvelope(high=100.0, low=50.0)
        longitudinal = StressEnvelope(high=-20.0, low=30.0)

        result = equivalent_stress(EquivalentStressMethod.TRESCA, hoop, longitudinal, 1000.0)

        assert result.high == pytest.approx(120.0)
        assert result.low == pytest.approx(20.0)
        assert result.percent_smys == pytest.approx(12.0)

    def test_von_mises_over_all_combinations(self):
        hoop = StressEnvelope(high=100.0, low=50.0)
        longitudinal = StressEnvelope(high=-20.0, low=30.0)

        result = equivalent_stress(EquivalentStressMethod.VON_MISES, hoop, longitudinal, 1000.0)

        assert result.high == pytest.approx(math.sqrt(12400.0))
        assert result.low == pytest.approx(math.sqrt(1900.0))

    def test_zero_smys_is_degenerate(self):
        envelope = StressEnvelope(high=1.0, low=1.0)
        with pytest.raises(NumericDegeneracyError):
            equivalent_stress(EquivalentStressMethod.TRESCA, envelope, envelope, 0.0)


class TestPipeStressResolver:
    """Test stress states and envelope conventions."""

    @pytest.fixture
    def pipe(self):
        return PipeSection(outer_diameter=24.0, wall_thickness=0.375, smys=52000.0, mop=1000.0,
                           delta_t=20.0)

    def make_resolver(self, pipe, envelope=LiveLoadEnvelope.ADDITIVE):
        return PipeStressResolver(
            pipe, bedding_parameters(90), e_prime=1000.0, soil_pressure=3.3333,
            live_pressure=3.0, boussinesq_max=2.0, impact=1.5, depth=48.0,
            envelope=envelope
        )

    def test_additive_envelope(self, pipe):
        """Live load only raises the high side."""
        resolver = self.make_resolver(pipe)
        state = resolver.resolve(0.0)
        terms = resolver.hoop_terms(0.0)

        assert state.hoop.high - state.hoop.low == pytest.approx(terms['hoop_live'])
        assert state.hoop.low == pytest.approx(terms['hoop_soil'])
        assert state.longitudinal.high - state.longitudinal.low == pytest.approx(terms['longitudinal_live'])

    def test_symmetric_envelope(self, pipe):
        """Live load is added on the high side and subtracted on the low side."""
        resolver = self.make_resolver(pipe, LiveLoadEnvelope.SYMMETRIC)
        state = resolver.resolve(0.0)
        terms = resolver.hoop_terms(0.0)

        assert state.hoop.high - state.hoop.low == pytest.approx(2 * terms['hoop_live'])

    def test_components(self, pipe):
        resolver = self.make_resolver(pipe)
        state = resolver.resolve(pipe.mop)

        assert state.hoop.components.pressure == pytest.approx(32000.0)
        assert state.hoop.components.thermal == 0.0
        assert state.hoop.components.total == state.hoop.high
        assert state.longitudinal.components.pressure == pytest.approx(0.3 * 32000.0)
        assert state.longitudinal.components.thermal == pytest.approx(thermal_stress(20.0))
        assert state.longitudinal.components.earth == pytest.approx(0.3 * state.hoop.components.earth)

    def test_zero_pressure_state_has_no_internal_stress(self, pipe):
        state = self.make_resolver(pipe).resolve(0.0)

        assert state.internal_pressure == 0.0
        assert state.hoop.components.pressure == 0.0

    def test_deflection_ratio(self, pipe):
        resolver = self.make_resolver(pipe)

        assert resolver.deflection_ratio(pipe.mop) == pytest.approx(
            resolver.hoop_terms(pipe.mop)['hoop_soil'] / 30.0e6
        )
