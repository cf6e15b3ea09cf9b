"""
Tests for JSON import and export of load cases and results.
"""

import gzip
import json

import pytest

from surfaceload.core.engine import analyze
from surfaceload.core.json_io import (
    LoadCaseImporter, ResultExporter, export_result_to_json, import_load_case,
    load_case_from_dict, summary_row, to_json_dict, validate_json_file
)
from surfaceload.core.models import GridLoadType, SoilLoadMethod, VehicleType
from surfaceload.core.validators import LoadCaseValidationError


def write_json(path, data):
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(data, f)
    return path


class TestLoadCaseImport:
    """Test reading load cases from JSON."""

    @pytest.fixture
    def minimal_data(self):
        """Smallest file the schema accepts; everything else defaults."""
        return {
            'vehicle_type': 'GRID',
            'pipe': {'outer_diameter': 24.0, 'wall_thickness': 0.375, 'smys': 52000, 'mop': 1000},
            'soil': {'unit_weight': 120, 'depth_of_cover': 4},
            'e_prime': {'method': 'USER_DEFINED', 'value': 1000},
            'vehicle': {'length': 4, 'width': 4, 'total_load': 1000},
        }

    def test_minimal_file_uses_defaults(self, tmp_path, minimal_data):
        case = import_load_case(write_json(tmp_path / "case.json", minimal_data))

        assert case is not None
        assert case.vehicle_type == VehicleType.GRID
        assert case.soil.bedding_angle == 90
        assert case.soil.soil_load_method == SoilLoadMethod.PRISM
        assert case.vehicle.load_type == GridLoadType.TOTAL_LOAD
        assert case.vehicle.divisions_x == 10

    def test_missing_file(self, tmp_path):
        assert import_load_case(tmp_path / "missing.json") is None

    def test_malformed_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{ not json", encoding='utf-8')

        assert import_load_case(path) is None

    def test_schema_violation_rejected(self, tmp_path, minimal_data):
        del minimal_data['pipe']['smys']
        path = write_json(tmp_path / "case.json", minimal_data)

        assert import_load_case(path) is None

    def test_schema_check_can_be_skipped(self, tmp_path, minimal_data):
        minimal_data['pipe']['grade'] = "X52"
        path = write_json(tmp_path / "case.json", minimal_data)

        assert import_load_case(path) is None
        assert import_load_case(path, validate_schema=False) is not None

    def test_unsupported_version(self, tmp_path, minimal_data):
        minimal_data['export_metadata'] = {'exporter_version': '0.0.1'}
        path = write_json(tmp_path / "case.json", minimal_data)

        assert import_load_case(path) is None

    def test_validate_json_file_reports_paths(self, tmp_path, minimal_data):
        minimal_data['soil']['bedding_angle'] = 45
        minimal_data['pipe']['mop'] = "high"
        is_valid, errors = validate_json_file(write_json(tmp_path / "case.json", minimal_data))

        assert not is_valid
        assert len(errors) == 2
        assert any(error.startswith("soil/bedding_angle") for error in errors)
        assert any(error.startswith("pipe/mop") for error in errors)

    def test_validate_json_file_accepts_valid(self, tmp_path, minimal_data):
        is_valid, errors = validate_json_file(write_json(tmp_path / "case.json", minimal_data))

        assert is_valid
        assert errors == []

    def test_missing_schema_skips_validation(self, tmp_path, minimal_data):
        importer = LoadCaseImporter(schema_path=tmp_path / "no_schema.json")
        minimal_data['pipe']['grade'] = "X52"

        assert importer.schema is None
        assert importer.import_load_case(write_json(tmp_path / "case.json", minimal_data)) is not None


class TestLoadCaseFromDict:
    """Test conversion of parsed JSON into load cases."""

    def test_unknown_enum_names_field(self, grid_case):
        data = to_json_dict(grid_case)
        data['options']['code_check'] = "ASME_VIII"

        with pytest.raises(LoadCaseValidationError) as excinfo:
            load_case_from_dict(data)

        assert excinfo.value.field_names == ["options.code_check"]

    def test_missing_vehicle_type(self, grid_case):
        data = to_json_dict(grid_case)
        del data['vehicle_type']

        with pytest.raises(LoadCaseValidationError):
            load_case_from_dict(data)

    def test_axle_tire_override_kept(self, three_axle_case):
        case = load_case_from_dict(to_json_dict(three_axle_case))

        assert case.vehicle.axles[0].tire is None
        assert case.vehicle.axles[2].tire.tires_per_axle == 4
        assert case == three_axle_case


class TestExport:
    """Test writing load cases and results."""

    def test_load_case_round_trip(self, tmp_path, three_axle_case):
        path = tmp_path / "tandem.json"

        assert ResultExporter().export_load_case(three_axle_case, path)
        assert import_load_case(path) == three_axle_case

    def test_compressed_round_trip(self, tmp_path, si_case):
        assert ResultExporter().export_load_case(si_case, tmp_path / "metric.json", compress=True)

        path = tmp_path / "metric.json.gz"
        assert path.exists()
        assert import_load_case(path) == si_case

    def test_result_export(self, tmp_path, grid_case):
        result = analyze(grid_case)
        path = tmp_path / "result.json"

        assert export_result_to_json(result, path)

        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)

        assert data['export_metadata']['export_type'] == 'analysis_result'
        assert data['export_metadata']['compression'] is False
        assert data['vehicle_type'] == 'GRID'
        assert data['summary']['overall_pass'] == result.pass_fail.overall_pass
        assert data['stresses']['at_mop']['hoop']['high'] == pytest.approx(
            result.stresses.at_mop.hoop.high)
        assert data['code_profile']['code'] == 'B31_8'

    def test_compressed_result_export(self, tmp_path, grid_case):
        assert export_result_to_json(analyze(grid_case), tmp_path / "result.json", compress=True)

        with gzip.open(tmp_path / "result.json.gz", 'rt', encoding='utf-8') as f:
            data = json.load(f)
        assert data['export_metadata']['compression'] is True

    def test_export_to_missing_directory(self, tmp_path, grid_case):
        assert not export_result_to_json(analyze(grid_case), tmp_path / "missing" / "result.json")


class TestSummaryRow:
    """Test the flat result summary."""

    def test_headline_values(self, track_case):
        result = analyze(track_case)
        row = summary_row(result)

        assert row['vehicle_type'] == 'TRACK'
        assert row['governing_location'] == "Under the tracks"
        assert row['max_surface_pressure'] == result.max_surface_pressure
        assert row['equivalent_high_mop'] == result.stresses.at_mop.equivalent.high
        assert row['code'] == result.code_profile.label
        assert row['overall_pass'] == result.pass_fail.overall_pass
