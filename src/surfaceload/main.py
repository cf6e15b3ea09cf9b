#!/usr/bin/env python3
"""
Pipeline Surface Load - command line entry point

Screens a buried pipe for overstress under a surface vehicle or area load
described in a JSON load case file.
"""

import sys
import argparse
import logging
from logging.handlers import RotatingFileHandler
from typing import List, Optional

from surfaceload.core.engine import analyze
from surfaceload.core.json_io import export_result_to_json, import_load_case
from surfaceload.core.models import AnalysisResult, Quantity
from surfaceload.core.units import unit_label
from surfaceload.core.validators import LoadCaseValidationError, NumericDegeneracyError
from surfaceload.utils.constants import (
    APP_NAME, APP_VERSION, LOG_FILE_NAME, LOG_MAX_SIZE, LOG_BACKUP_COUNT
)

logger = logging.getLogger(__name__)

EXIT_PASS = 0
EXIT_FAIL = 1
EXIT_INVALID = 2


def configure_logging(level: str = "INFO", log_file: Optional[str] = LOG_FILE_NAME):
    """Configure logging to stdout and a rotating log file."""
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(RotatingFileHandler(log_file, maxBytes=LOG_MAX_SIZE,
                                            backupCount=LOG_BACKUP_COUNT))
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=handlers,
        force=True
    )


def format_summary(result: AnalysisResult) -> str:
    """Human readable summary of an analysis result."""
    pressure = unit_label(Quantity.PRESSURE, result.units)
    stress = unit_label(Quantity.STRESS, result.units)
    lines = [
        f"{result.name or 'Load case'} ({result.vehicle_type.value}, {result.units.value} units)",
        f"  Surface pressure at pipe: {result.max_surface_pressure:.3f} {pressure} "
        f"({result.governing_location}, impact factor {result.impact_factor:.3f})",
        f"  Soil load: {result.soil_load:.3f} {pressure}   E': {result.e_prime:.1f} {pressure}",
    ]
    for label, state in (("zero pressure", result.stresses.at_zero_pressure),
                         ("MOP", result.stresses.at_mop)):
        lines.append(
            f"  At {label}: hoop {state.hoop.high:.2f} / {state.hoop.low:.2f}, "
            f"longitudinal {state.longitudinal.high:.2f} / {state.longitudinal.low:.2f}, "
            f"equivalent {state.equivalent.high:.2f} {stress} ({state.equivalent.percent_smys:.1f}% SMYS)"
        )
    lines.append(f"  Allowable ({result.code_profile.label}): {result.allowable_stress:.2f} {stress}")
    lines.append(f"  Result: {'PASS' if result.pass_fail.overall_pass else 'FAIL'}")
    return "\n".join(lines)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="surfaceload",
        description="Screen a buried pipeline for surface load overstress"
    )
    parser.add_argument('load_case', help="Load case JSON file (.json or .json.gz)")
    parser.add_argument('-o', '--output', help="Write the analysis result to this JSON file")
    parser.add_argument('--log-level', default="INFO",
                        help="Logging level (DEBUG, INFO, WARNING, ERROR)")
    parser.add_argument('--log-file', default=LOG_FILE_NAME,
                        help="Rotating log file, empty to disable")
    parser.add_argument('--version', action='version', version=f"{APP_NAME} {APP_VERSION}")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main application entry point."""
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level, args.log_file or None)

    case = import_load_case(args.load_case)
    if case is None:
        return EXIT_INVALID

    try:
        result = analyze(case)
    except LoadCaseValidationError as e:
        logger.error(str(e))
        return EXIT_INVALID
    except NumericDegeneracyError as e:
        logger.error(f"Analysis failed: {e}")
        return EXIT_INVALID

    print(format_summary(result))

    if args.output and not export_result_to_json(result, args.output):
        return EXIT_INVALID

    return EXIT_PASS if result.pass_fail.overall_pass else EXIT_FAIL


if __name__ == "__main__":
    sys.exit(main())
