"""
JSON import and export of load cases and analysis results.

Load cases are read from plain or gzip-compressed JSON, checked against the
load case schema and converted to model objects. Results and load cases are
written back with export metadata so a run can be reproduced or compared.
"""

import json
import logging
import gzip
from dataclasses import fields, is_dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

import jsonschema

from surfaceload.core.models import (
    AnalysisOptions, AnalysisResult, Axle, AxleVehicle, CodeCheck,
    ContactPatchMode, EPrimeMethod, EquivalentStressMethod, GridLoad,
    GridLoadType, LiveLoadEnvelope, LoadCase, ModulusOfSoilReaction,
    PavementType, PipeSection, SoilLoadMethod, SoilProfile, SoilType,
    TireContact, TrackVehicle, UnitSystem, UserDefinedLimits, VehicleClass,
    VehicleType
)
from surfaceload.core.validators import LoadCaseValidationError
from surfaceload.utils.constants import (
    CURRENT_JSON_VERSION, SUPPORTED_JSON_VERSIONS, LOAD_CASE_SCHEMA_PATH
)

logger = logging.getLogger(__name__)


def _enum(enum_cls, value: Any, field_name: str, default: Optional[Enum] = None) -> Optional[Enum]:
    if value is None:
        return default
    try:
        return enum_cls(value)
    except ValueError:
        choices = [member.value for member in enum_cls]
        raise LoadCaseValidationError.for_field(
            field_name, f"Unknown value {value!r}, expected one of {choices}"
        )


def _tire_from_dict(data: Optional[Dict[str, Any]], field_name: str) -> Optional[TireContact]:
    if data is None:
        return None
    return TireContact(
        tire_width=data.get('tire_width'),
        mode=_enum(ContactPatchMode, data.get('mode'), f"{field_name}.mode",
                   ContactPatchMode.MANUAL),
        contact_length=data.get('contact_length'),
        tire_pressure=data.get('tire_pressure'),
        tires_per_axle=data.get('tires_per_axle', 2),
    )


def _vehicle_from_dict(vehicle_type: VehicleType, data: Dict[str, Any]):
    if vehicle_type == VehicleType.TRACK:
        return TrackVehicle(
            vehicle_weight=data.get('vehicle_weight'),
            track_length=data.get('track_length'),
            track_width=data.get('track_width'),
            track_separation=data.get('track_separation'),
        )

    if vehicle_type == VehicleType.GRID:
        return GridLoad(
            length=data.get('length'),
            width=data.get('width'),
            load_type=_enum(GridLoadType, data.get('load_type'), "vehicle.load_type",
                            GridLoadType.TOTAL_LOAD),
            total_load=data.get('total_load'),
            uniform_pressure=data.get('uniform_pressure'),
            offset_x=data.get('offset_x', 0.0),
            offset_y=data.get('offset_y', 0.0),
            divisions_x=data.get('divisions_x', 10),
            divisions_y=data.get('divisions_y', 10),
        )

    axles = [
        Axle(load=axle.get('load'), tire=_tire_from_dict(axle.get('tire'), f"vehicle.axles[{i}].tire"))
        for i, axle in enumerate(data.get('axles', []))
    ]
    return AxleVehicle(
        axles=axles,
        axle_spacings=list(data.get('axle_spacings', [])),
        lane_offset=data.get('lane_offset', 0.0),
        tire=_tire_from_dict(data.get('tire'), "vehicle.tire"),
    )


def load_case_from_dict(data: Dict[str, Any]) -> LoadCase:
    """
    Build a load case from its JSON representation.

    Args:
        data: Parsed JSON object

    Returns:
        Load case (not yet validated)

    Raises:
        LoadCaseValidationError: If an enumerated value is unknown
    """
    vehicle_type = _enum(VehicleType, data.get('vehicle_type'), "vehicle_type")
    if vehicle_type is None:
        raise LoadCaseValidationError.for_field("vehicle_type", "Vehicle type is required")

    pipe = data.get('pipe', {})
    soil = data.get('soil', {})
    e_prime = data.get('e_prime', {})
    options = data.get('options', {})
    limits = options.get('user_limits')

    return LoadCase(
        name=data.get('name', ""),
        units=_enum(UnitSystem, data.get('units'), "units", UnitSystem.EN),
        vehicle_type=vehicle_type,
        pipe=PipeSection(
            outer_diameter=pipe.get('outer_diameter'),
            wall_thickness=pipe.get('wall_thickness'),
            smys=pipe.get('smys'),
            mop=pipe.get('mop'),
            delta_t=pipe.get('delta_t', 0.0),
        ),
        soil=SoilProfile(
            unit_weight=soil.get('unit_weight'),
            depth_of_cover=soil.get('depth_of_cover'),
            bedding_angle=soil.get('bedding_angle', 90),
            soil_load_method=_enum(SoilLoadMethod, soil.get('soil_load_method'),
                                   "soil.soil_load_method", SoilLoadMethod.PRISM),
            friction_angle=soil.get('friction_angle'),
            cohesion=soil.get('cohesion', 0.0),
            lateral_pressure_coefficient=soil.get('lateral_pressure_coefficient', 1.0),
        ),
        e_prime=ModulusOfSoilReaction(
            method=_enum(EPrimeMethod, e_prime.get('method'), "e_prime.method",
                         EPrimeMethod.USER_DEFINED),
            value=e_prime.get('value'),
            soil_type=_enum(SoilType, e_prime.get('soil_type'), "e_prime.soil_type"),
            compaction=e_prime.get('compaction'),
        ),
        options=AnalysisOptions(
            pavement_type=_enum(PavementType, options.get('pavement_type'),
                                "options.pavement_type", PavementType.FLEXIBLE),
            vehicle_class=_enum(VehicleClass, options.get('vehicle_class'),
                                "options.vehicle_class", VehicleClass.HIGHWAY),
            equivalent_stress_method=_enum(EquivalentStressMethod,
                                           options.get('equivalent_stress_method'),
                                           "options.equivalent_stress_method",
                                           EquivalentStressMethod.VON_MISES),
            code_check=_enum(CodeCheck, options.get('code_check'), "options.code_check",
                             CodeCheck.B31_8),
            user_limits=UserDefinedLimits(**limits) if limits else None,
            live_load_envelope=_enum(LiveLoadEnvelope, options.get('live_load_envelope'),
                                     "options.live_load_envelope", LiveLoadEnvelope.ADDITIVE),
        ),
        vehicle=_vehicle_from_dict(vehicle_type, data.get('vehicle', {})),
    )


def to_json_dict(obj: Any) -> Any:
    """Convert model objects to JSON-compatible values."""
    if is_dataclass(obj):
        return {f.name: to_json_dict(getattr(obj, f.name)) for f in fields(obj)}
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, (list, tuple)):
        return [to_json_dict(item) for item in obj]
    if isinstance(obj, dict):
        return {str(key): to_json_dict(value) for key, value in obj.items()}
    if isinstance(obj, datetime):
        return obj.isoformat()
    return obj


def summary_row(result: AnalysisResult) -> Dict[str, Any]:
    """
    Flat record of the headline values of a result.

    This is the row a sensitivity sweep collects for every perturbed case.
    """
    mop = result.stresses.at_mop
    return {
        'name': result.name,
        'units': result.units.value,
        'vehicle_type': result.vehicle_type.value,
        'max_surface_pressure': result.max_surface_pressure,
        'governing_location': result.governing_location,
        'impact_factor': result.impact_factor,
        'hoop_high_mop': mop.hoop.high,
        'longitudinal_high_mop': mop.longitudinal.high,
        'equivalent_high_mop': mop.equivalent.high,
        'equivalent_percent_smys': mop.equivalent.percent_smys,
        'allowable_stress': result.allowable_stress,
        'code': result.code_profile.label,
        'overall_pass': result.pass_fail.overall_pass,
    }


class LoadCaseImporter:
    """Handles importing load cases from JSON format."""

    def __init__(self, schema_path: Union[str, Path] = LOAD_CASE_SCHEMA_PATH):
        """
        Initialize importer.

        Args:
            schema_path: JSON schema used to check load case files
        """
        self.schema_path = Path(schema_path)
        self.schema = self._load_json_schema()

    def import_load_case(self, input_path: Union[str, Path],
                         validate_schema: bool = True) -> Optional[LoadCase]:
        """
        Import a load case from a JSON file.

        Args:
            input_path: Input JSON file path (.json or .json.gz)
            validate_schema: Whether to validate against the JSON schema

        Returns:
            Load case if successful, None otherwise
        """
        json_data = self._load_json_file(input_path)
        if json_data is None:
            return None

        if not self._check_version_compatibility(json_data):
            return None

        if validate_schema and not self._validate_json_schema(json_data):
            return None

        try:
            case = load_case_from_dict(json_data)
        except (LoadCaseValidationError, TypeError) as e:
            logger.error(f"Invalid load case in {input_path}: {e}")
            return None

        logger.info(f"Load case '{case.name}' imported from {input_path}")
        return case

    def validate_import_schema(self, input_path: Union[str, Path]) -> Tuple[bool, List[str]]:
        """
        Validate a JSON file against the schema without importing.

        Args:
            input_path: Input JSON file path

        Returns:
            Tuple of (is_valid, error_messages)
        """
        json_data = self._load_json_file(input_path)
        if json_data is None:
            return False, ["Failed to load JSON file"]

        if not self.schema:
            return False, ["JSON schema not available"]

        validator = jsonschema.Draft7Validator(self.schema)
        errors = [f"{'/'.join(str(p) for p in error.path) or '<root>'}: {error.message}"
                  for error in validator.iter_errors(json_data)]
        return not errors, errors

    def _load_json_file(self, input_path: Union[str, Path]) -> Optional[Dict[str, Any]]:
        """Load JSON data from file, handling compression."""
        input_path = Path(input_path)
        try:
            if input_path.suffix == '.gz':
                with gzip.open(input_path, 'rt', encoding='utf-8') as f:
                    return json.load(f)
            else:
                with open(input_path, 'r', encoding='utf-8') as f:
                    return json.load(f)

        except FileNotFoundError:
            logger.error(f"Import file not found: {input_path}")
            return None
        except json.JSONDecodeError as e:
            logger.error(f"Invalid JSON format in {input_path}: {e}")
            return None
        except OSError as e:
            logger.error(f"Failed to load {input_path}: {e}")
            return None

    def _load_json_schema(self) -> Optional[Dict[str, Any]]:
        """Load JSON schema for validation."""
        if not self.schema_path.exists():
            logger.warning(f"JSON schema not found: {self.schema_path}")
            return None
        with open(self.schema_path, 'r', encoding='utf-8') as f:
            return json.load(f)

    def _check_version_compatibility(self, json_data: Dict[str, Any]) -> bool:
        """Check if JSON data version is compatible."""
        export_meta = json_data.get('export_metadata', {})
        version = export_meta.get('exporter_version', CURRENT_JSON_VERSION)

        if version not in SUPPORTED_JSON_VERSIONS:
            logger.error(f"Unsupported JSON version: {version}")
            return False

        return True

    def _validate_json_schema(self, json_data: Dict[str, Any]) -> bool:
        """Validate JSON data against schema."""
        if not self.schema:
            logger.warning("No schema available for validation")
            return True

        try:
            jsonschema.validate(json_data, self.schema)
            return True
        except jsonschema.ValidationError as e:
            logger.error(f"Schema validation failed: {e.message}")
            return False
        except jsonschema.SchemaError as e:
            logger.error(f"Schema error: {e.message}")
            return False


class ResultExporter:
    """Handles exporting load cases and analysis results to JSON format."""

    def export_result(self, result: AnalysisResult, output_path: Union[str, Path],
                      compress: bool = False) -> bool:
        """
        Export an analysis result.

        Args:
            result: Analysis result to export
            output_path: Output file path
            compress: Whether to compress the output

        Returns:
            True if export successful, False otherwise
        """
        data = to_json_dict(result)
        data['summary'] = summary_row(result)
        return self._write(data, output_path, 'analysis_result', compress)

    def export_load_case(self, case: LoadCase, output_path: Union[str, Path],
                         compress: bool = False) -> bool:
        """Export a load case in the importable format."""
        return self._write(to_json_dict(case), output_path, 'load_case', compress)

    def _write(self, data: Dict[str, Any], output_path: Union[str, Path],
               export_type: str, compress: bool) -> bool:
        # Add export metadata
        data['export_metadata'] = {
            'export_date': datetime.now().isoformat(),
            'exporter_version': CURRENT_JSON_VERSION,
            'export_type': export_type,
            'compression': compress
        }

        output_path = Path(output_path)
        try:
            if compress:
                output_path = output_path.with_suffix(output_path.suffix + '.gz')
                with gzip.open(output_path, 'wt', encoding='utf-8') as f:
                    json.dump(data, f, indent=2)
            else:
                with open(output_path, 'w', encoding='utf-8') as f:
                    json.dump(data, f, indent=2)
        except OSError as e:
            logger.error(f"Export failed: {e}")
            return False

        logger.info(f"{export_type.replace('_', ' ').capitalize()} exported to {output_path}")
        return True


# Convenience functions
def import_load_case(input_path: Union[str, Path], validate_schema: bool = True) -> Optional[LoadCase]:
    """
    Import a load case from a JSON file.

    Args:
        input_path: Input JSON file path
        validate_schema: Whether to validate against schema

    Returns:
        Load case if successful, None otherwise
    """
    importer = LoadCaseImporter()
    return importer.import_load_case(input_path, validate_schema)


def validate_json_file(input_path: Union[str, Path]) -> Tuple[bool, List[str]]:
    """Validate a JSON file against the load case schema."""
    importer = LoadCaseImporter()
    return importer.validate_import_schema(input_path)


def export_result_to_json(result: AnalysisResult, output_path: Union[str, Path],
                          compress: bool = False) -> bool:
    """Export an analysis result to a JSON file."""
    exporter = ResultExporter()
    return exporter.export_result(result, output_path, compress)
