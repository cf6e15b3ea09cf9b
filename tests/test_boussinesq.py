"""
Tests for Boussinesq superposition.
"""

import pytest

from surfaceload.core.boussinesq import point_load_stress, superpose
from surfaceload.core.footprints import GridFootprintGenerator
from surfaceload.core.models import GridLoad, MeasurementPoint, PointLoad
from surfaceload.core.validators import NumericDegeneracyError


class TestPointLoadStress:
    """Test the single point load solution."""

    def test_directly_below_load(self):
        """1000 lb at 48 in depth: 3000 / (2 pi 48^2) = 0.2073 psi."""
        assert abs(point_load_stress(1000.0, 48.0, 0.0) - 0.2073) < 1e-4

    def test_stress_falls_off_with_radius(self):
        assert point_load_stress(1000.0, 48.0, 24.0) < point_load_stress(1000.0, 48.0, 0.0)

    def test_zero_depth_is_degenerate(self):
        with pytest.raises(NumericDegeneracyError):
            point_load_stress(1000.0, 0.0, 0.0)


class TestSuperposition:
    """Test superposition over measurement points."""

    def test_single_load(self):
        result = superpose([PointLoad(0.0, 0.0, 1000.0)], [MeasurementPoint("Below", 0.0, 0.0)], 48.0)

        assert result.max_pressure == pytest.approx(0.207233, abs=1e-5)
        assert result.governing_location == "Below"
        assert result.total_load == 1000.0

    def test_loads_add(self):
        loads = [PointLoad(10.0, 0.0, 500.0), PointLoad(-10.0, 0.0, 500.0)]
        result = superpose(loads, [MeasurementPoint("Centre", 0.0, 0.0)], 36.0)

        assert result.max_pressure == pytest.approx(2 * point_load_stress(500.0, 36.0, 10.0))

    def test_tie_goes_to_first_point(self):
        """Symmetric points see equal pressure; the first listed governs."""
        loads = [PointLoad(0.0, 0.0, 1000.0)]
        points = [MeasurementPoint("Left", -12.0, 0.0), MeasurementPoint("Right", 12.0, 0.0)]

        result = superpose(loads, points, 48.0)

        assert result.pressures["Left"] == result.pressures["Right"]
        assert result.governing_location == "Left"

    def test_highest_point_governs(self):
        loads = [PointLoad(30.0, 0.0, 1000.0)]
        points = [MeasurementPoint("Centerline", 0.0, 0.0), MeasurementPoint("Under load", 30.0, 0.0)]

        result = superpose(loads, points, 48.0)

        assert result.governing_location == "Under load"
        assert result.max_pressure == result.pressures["Under load"]

    def test_pressure_decreases_with_depth(self):
        """Deeper cover never increases the governing pressure."""
        layout = GridFootprintGenerator().generate(
            GridLoad(length=4.0, width=4.0, total_load=20000.0, divisions_x=8, divisions_y=8)
        )
        pressures = [
            superpose(layout.point_loads, layout.measurement_points, depth_ft * 12.0).max_pressure
            for depth_ft in (4.0, 5.0, 6.0, 8.0, 12.0, 20.0)
        ]

        assert all(deeper <= shallower for shallower, deeper in zip(pressures, pressures[1:]))
        assert pressures[-1] < pressures[0]
