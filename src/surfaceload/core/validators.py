"""
Data validation for load cases.

This module checks a load case for missing, inconsistent or out-of-range
values before any calculation runs, and defines the errors raised by the
analysis engine.
"""

import logging
import math
from typing import Any, List, Optional, Tuple
from dataclasses import dataclass
from enum import Enum

from surfaceload.core.models import (
    AxleVehicle, CodeCheck, ContactPatchMode, EPrimeMethod, GridLoad,
    GridLoadType, LoadCase, Quantity, SoilLoadMethod, TireContact,
    TrackVehicle, UnitSystem, VehicleType
)
from surfaceload.core.units import to_canonical
from surfaceload.utils.constants import BEDDING_TABLE, BEDDING_ANGLES, PARAMETER_RANGES

logger = logging.getLogger(__name__)


class ValidationSeverity(Enum):
    """Validation result severity levels."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


@dataclass
class ValidationResult:
    """Result of a validation check."""
    is_valid: bool
    severity: ValidationSeverity
    message: str
    field_name: Optional[str] = None
    suggested_value: Optional[Any] = None


class LoadCaseValidationError(ValueError):
    """Raised when a load case fails validation. Carries the failing checks."""

    def __init__(self, results: List[ValidationResult]):
        self.results = results
        lines = [f"{r.field_name}: {r.message}" if r.field_name else r.message
                 for r in results]
        super().__init__("Invalid load case:\n" + "\n".join(lines))

    @property
    def field_names(self) -> List[str]:
        return [r.field_name for r in self.results if r.field_name]

    @classmethod
    def for_field(cls, field_name: str, message: str,
                  suggested_value: Optional[Any] = None) -> 'LoadCaseValidationError':
        return cls([ValidationResult(
            is_valid=False,
            severity=ValidationSeverity.ERROR,
            message=message,
            field_name=field_name,
            suggested_value=suggested_value
        )])


class NumericDegeneracyError(ArithmeticError):
    """Raised when a formula would divide by zero or lose its physical meaning."""


# Number of axles per wheeled vehicle type
AXLE_COUNTS = {
    VehicleType.TWO_AXLE: 2,
    VehicleType.THREE_AXLE: 3,
}

VEHICLE_RECORDS = {
    VehicleType.TRACK: TrackVehicle,
    VehicleType.TWO_AXLE: AxleVehicle,
    VehicleType.THREE_AXLE: AxleVehicle,
    VehicleType.GRID: GridLoad,
}


class LoadCaseValidator:
    """Validation of every part of a load case."""

    def __init__(self, units: UnitSystem = UnitSystem.EN):
        """
        Initialize validator.

        Args:
            units: Unit system of the values being validated
        """
        self.units = units
        self.parameter_ranges = PARAMETER_RANGES
        self.validation_results: List[ValidationResult] = []

    def clear_results(self):
        """Clear previous validation results."""
        self.validation_results.clear()

    def add_result(self, result: ValidationResult):
        """Add validation result to the list."""
        self.validation_results.append(result)

    def get_results(self) -> List[ValidationResult]:
        """Get all validation results."""
        return self.validation_results.copy()

    def get_errors(self) -> List[ValidationResult]:
        return [r for r in self.validation_results
                if r.severity in [ValidationSeverity.ERROR, ValidationSeverity.CRITICAL]]

    def has_errors(self) -> bool:
        """Check if any validation errors exist."""
        return any(r.severity in [ValidationSeverity.ERROR, ValidationSeverity.CRITICAL]
                   for r in self.validation_results)

    def has_warnings(self) -> bool:
        """Check if any validation warnings exist."""
        return any(r.severity == ValidationSeverity.WARNING
                   for r in self.validation_results)

    def _error(self, field_name: str, message: str, suggested_value: Optional[Any] = None):
        self.add_result(ValidationResult(
            is_valid=False,
            severity=ValidationSeverity.ERROR,
            message=message,
            field_name=field_name,
            suggested_value=suggested_value
        ))

    def require_number(self, value: Any, field_name: str) -> bool:
        """Check that a value is present and a finite number."""
        if value is None:
            self._error(field_name, "Value is required")
            return False
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            self._error(field_name, f"Value must be a number: {value!r}")
            return False
        if not math.isfinite(value):
            self._error(field_name, f"Value must be finite: {value}")
            return False
        return True

    def require_positive(self, value: Any, field_name: str) -> bool:
        """Check that a value is a finite number greater than zero."""
        if not self.require_number(value, field_name):
            return False
        if value <= 0:
            self._error(field_name, f"Value must be greater than zero: {value}")
            return False
        return True

    def require_non_negative(self, value: Any, field_name: str) -> bool:
        if not self.require_number(value, field_name):
            return False
        if value < 0:
            self._error(field_name, f"Value cannot be negative: {value}")
            return False
        return True

    def require_count(self, value: Any, field_name: str) -> bool:
        """Check that a value is a whole number of at least one."""
        if isinstance(value, bool) or not isinstance(value, int) or value < 1:
            self._error(field_name, f"Value must be a whole number of at least 1: {value!r}")
            return False
        return True

    def check_range(self, value: float, parameter: str, field_name: str,
                    quantity: Optional[Quantity] = None) -> bool:
        """
        Warn when a value is outside its typical range.

        Args:
            value: Value in the validator's unit system
            parameter: Key into PARAMETER_RANGES
            field_name: Field being checked
            quantity: Physical quantity, for conversion to English units

        Returns:
            True if the value is within the typical range
        """
        limits = self.parameter_ranges[parameter]
        english = to_canonical(value, quantity, self.units) if quantity else value
        if limits['min'] <= english <= limits['max']:
            return True

        self.add_result(ValidationResult(
            is_valid=True,
            severity=ValidationSeverity.WARNING,
            message=(f"{parameter.replace('_', ' ').capitalize()} {english:.4g} {limits['units']} "
                     f"is outside the typical range ({limits['min']} to {limits['max']} {limits['units']})"),
            field_name=field_name
        ))
        return False

    def validate_pipe(self, pipe) -> bool:
        """
        Validate pipe geometry, strength and operating conditions.

        Args:
            pipe: PipeSection to validate

        Returns:
            True if no errors were found
        """
        errors_before = len(self.get_errors())

        diameter_ok = self.require_positive(pipe.outer_diameter, "pipe.outer_diameter")
        thickness_ok = self.require_positive(pipe.wall_thickness, "pipe.wall_thickness")
        self.require_positive(pipe.smys, "pipe.smys")
        self.require_non_negative(pipe.mop, "pipe.mop")
        self.require_number(pipe.delta_t, "pipe.delta_t")

        if diameter_ok and thickness_ok:
            if pipe.outer_diameter <= 2 * pipe.wall_thickness:
                self._error("pipe.wall_thickness",
                            f"Wall thickness {pipe.wall_thickness} leaves no bore in a "
                            f"{pipe.outer_diameter} outer diameter")
            else:
                self.check_range(pipe.outer_diameter, 'outer_diameter', "pipe.outer_diameter",
                                 Quantity.LENGTH)
                self.check_range(pipe.outer_diameter / pipe.wall_thickness,
                                 'diameter_thickness_ratio', "pipe.wall_thickness")

        return len(self.get_errors()) == errors_before

    def validate_soil(self, soil) -> bool:
        """Validate backfill properties, burial depth and bedding."""
        errors_before = len(self.get_errors())

        if self.require_positive(soil.unit_weight, "soil.unit_weight"):
            self.check_range(soil.unit_weight, 'unit_weight', "soil.unit_weight",
                             Quantity.UNIT_WEIGHT)
        if self.require_positive(soil.depth_of_cover, "soil.depth_of_cover"):
            self.check_range(soil.depth_of_cover, 'depth_of_cover', "soil.depth_of_cover",
                             Quantity.DISTANCE)

        if soil.bedding_angle not in BEDDING_TABLE:
            self._error("soil.bedding_angle",
                        f"Bedding angle {soil.bedding_angle} is not one of {BEDDING_ANGLES}")

        if not isinstance(soil.soil_load_method, SoilLoadMethod):
            self._error("soil.soil_load_method",
                        f"Unknown soil load method: {soil.soil_load_method!r}")
        elif soil.soil_load_method == SoilLoadMethod.TRAP_DOOR:
            if soil.friction_angle is None:
                self._error("soil.friction_angle",
                            "Friction angle is required for the trap-door soil load")
            elif self.require_number(soil.friction_angle, "soil.friction_angle"):
                if not 0 < soil.friction_angle < 90:
                    self._error("soil.friction_angle",
                                f"Friction angle must be between 0 and 90 degrees: {soil.friction_angle}")
                else:
                    self.check_range(soil.friction_angle, 'friction_angle', "soil.friction_angle")
            self.require_non_negative(soil.cohesion, "soil.cohesion")

        self.require_positive(soil.lateral_pressure_coefficient, "soil.lateral_pressure_coefficient")

        return len(self.get_errors()) == errors_before

    def validate_e_prime(self, e_prime) -> bool:
        """Validate the modulus of soil reaction input for its method."""
        errors_before = len(self.get_errors())

        if e_prime.method == EPrimeMethod.USER_DEFINED:
            if self.require_positive(e_prime.value, "e_prime.value"):
                self.check_range(e_prime.value, 'e_prime', "e_prime.value", Quantity.PRESSURE)
        elif e_prime.method == EPrimeMethod.LOOKUP:
            if e_prime.soil_type is None:
                self._error("e_prime.soil_type", "Soil type is required for the E' lookup")
            if self.require_positive(e_prime.compaction, "e_prime.compaction"):
                if not self.check_range(e_prime.compaction, 'compaction', "e_prime.compaction"):
                    logger.debug(f"Compaction {e_prime.compaction}% will be clamped to the table range")
        else:
            self._error("e_prime.method", f"Unknown E' method: {e_prime.method!r}")

        return len(self.get_errors()) == errors_before

    def validate_options(self, options) -> bool:
        """Validate code selection and user-defined limits."""
        errors_before = len(self.get_errors())

        if options.code_check == CodeCheck.USER_DEFINED:
            limits = options.user_limits
            if limits is None:
                self._error("options.user_limits",
                            "Hoop, longitudinal and equivalent limits are required for a user-defined code")
            else:
                self.require_positive(limits.hoop, "options.user_limits.hoop")
                self.require_positive(limits.longitudinal, "options.user_limits.longitudinal")
                self.require_positive(limits.equivalent, "options.user_limits.equivalent")

        return len(self.get_errors()) == errors_before

    def validate_track(self, track: TrackVehicle) -> bool:
        errors_before = len(self.get_errors())
        self.require_positive(track.vehicle_weight, "vehicle.vehicle_weight")
        self.require_positive(track.track_length, "vehicle.track_length")
        self.require_positive(track.track_width, "vehicle.track_width")
        self.require_positive(track.track_separation, "vehicle.track_separation")
        return len(self.get_errors()) == errors_before

    def validate_tire(self, tire: TireContact, field_name: str) -> bool:
        """Validate tire contact data for manual or automatic sizing."""
        errors_before = len(self.get_errors())

        self.require_positive(tire.tire_width, f"{field_name}.tire_width")
        self.require_count(tire.tires_per_axle, f"{field_name}.tires_per_axle")
        if tire.mode == ContactPatchMode.MANUAL:
            self.require_positive(tire.contact_length, f"{field_name}.contact_length")
        elif tire.mode == ContactPatchMode.AUTOMATIC:
            if self.require_positive(tire.tire_pressure, f"{field_name}.tire_pressure"):
                self.check_range(tire.tire_pressure, 'tire_pressure', f"{field_name}.tire_pressure",
                                 Quantity.PRESSURE)
        else:
            self._error(f"{field_name}.mode", f"Unknown contact patch mode: {tire.mode!r}")

        return len(self.get_errors()) == errors_before

    def validate_axles(self, vehicle: AxleVehicle, axle_count: int) -> bool:
        """
        Validate a wheeled vehicle.

        Args:
            vehicle: AxleVehicle to validate
            axle_count: Number of axles the vehicle type requires

        Returns:
            True if no errors were found
        """
        errors_before = len(self.get_errors())

        if len(vehicle.axles) != axle_count:
            self._error("vehicle.axles",
                        f"Expected {axle_count} axles, got {len(vehicle.axles)}")
        if len(vehicle.axle_spacings) != max(len(vehicle.axles) - 1, 0):
            self._error("vehicle.axle_spacings",
                        f"Expected {len(vehicle.axles) - 1} axle spacings, got {len(vehicle.axle_spacings)}")
        for i, spacing in enumerate(vehicle.axle_spacings):
            self.require_positive(spacing, f"vehicle.axle_spacings[{i}]")
        self.require_number(vehicle.lane_offset, "vehicle.lane_offset")

        if vehicle.tire is not None:
            self.validate_tire(vehicle.tire, "vehicle.tire")
        for i, axle in enumerate(vehicle.axles):
            self.require_positive(axle.load, f"vehicle.axles[{i}].load")
            if axle.tire is not None:
                self.validate_tire(axle.tire, f"vehicle.axles[{i}].tire")
            elif vehicle.tire is None:
                self._error(f"vehicle.axles[{i}].tire",
                            "Tire contact data is required on the axle or the vehicle")

        return len(self.get_errors()) == errors_before

    def validate_grid(self, grid: GridLoad) -> bool:
        errors_before = len(self.get_errors())

        self.require_positive(grid.length, "vehicle.length")
        self.require_positive(grid.width, "vehicle.width")
        self.require_number(grid.offset_x, "vehicle.offset_x")
        self.require_number(grid.offset_y, "vehicle.offset_y")
        self.require_count(grid.divisions_x, "vehicle.divisions_x")
        self.require_count(grid.divisions_y, "vehicle.divisions_y")

        if grid.load_type == GridLoadType.TOTAL_LOAD:
            self.require_positive(grid.total_load, "vehicle.total_load")
        elif grid.load_type == GridLoadType.UNIFORM_PRESSURE:
            self.require_positive(grid.uniform_pressure, "vehicle.uniform_pressure")
        else:
            self._error("vehicle.load_type", f"Unknown grid load type: {grid.load_type!r}")

        return len(self.get_errors()) == errors_before

    def validate_vehicle(self, vehicle_type: VehicleType, vehicle) -> bool:
        """Check that the vehicle record matches its type, then validate it."""
        expected = VEHICLE_RECORDS.get(vehicle_type)
        if expected is None:
            self._error("vehicle_type", f"Unknown vehicle type: {vehicle_type!r}")
            return False
        if not isinstance(vehicle, expected):
            self._error("vehicle",
                        f"{vehicle_type.value} requires a {expected.__name__}, "
                        f"got {type(vehicle).__name__}")
            return False

        if vehicle_type == VehicleType.TRACK:
            return self.validate_track(vehicle)
        if vehicle_type == VehicleType.GRID:
            return self.validate_grid(vehicle)
        return self.validate_axles(vehicle, AXLE_COUNTS[vehicle_type])


# Convenience functions
def validate_load_case(case: LoadCase) -> Tuple[bool, List[ValidationResult]]:
    """
    Validate a complete load case.

    Args:
        case: Load case in either unit system

    Returns:
        Tuple of (is_valid, validation_results)
    """
    validator = LoadCaseValidator(case.units)

    validator.validate_pipe(case.pipe)
    validator.validate_soil(case.soil)
    validator.validate_e_prime(case.e_prime)
    validator.validate_options(case.options)
    validator.validate_vehicle(case.vehicle_type, case.vehicle)

    return not validator.has_errors(), validator.get_results()


def raise_for_invalid(case: LoadCase) -> List[ValidationResult]:
    """
    Validate a load case and raise if it has errors.

    Returns:
        Warnings and informational results of a valid case

    Raises:
        LoadCaseValidationError: If any check fails
    """
    is_valid, results = validate_load_case(case)
    if not is_valid:
        errors = [r for r in results
                  if r.severity in [ValidationSeverity.ERROR, ValidationSeverity.CRITICAL]]
        raise LoadCaseValidationError(errors)

    for result in results:
        if result.severity == ValidationSeverity.WARNING:
            logger.warning(f"Validation warning: {result.field_name}: {result.message}")
    return results
