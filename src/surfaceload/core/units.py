"""
Unit normalization between the English and SI systems.

All calculations run in English units (in, ft, psi, lb, lb/ft³, °F). SI load
cases are converted on the way in and results are converted back on the way
out. Conversion is driven by the ``Quantity`` declared on each dataclass
field, see ``core.models``.
"""

import logging
from dataclasses import fields, is_dataclass, replace
from enum import Enum
from typing import Any, Callable, Dict, Optional

from surfaceload.core.models import (
    AnalysisResult, LoadCase, Quantity, UnitSystem
)
from surfaceload.utils.constants import (
    IN_TO_MM, FT_TO_M, PSI_TO_KPA, PSI_TO_MPA, LB_TO_KG, PCF_TO_KGM3,
    LBIN_TO_KGM, F_TO_C_DELTA
)

logger = logging.getLogger(__name__)

# SI value = English value * factor
SI_FACTORS: Dict[Quantity, float] = {
    Quantity.LENGTH: IN_TO_MM,
    Quantity.DISTANCE: FT_TO_M,
    Quantity.PRESSURE: PSI_TO_KPA,
    Quantity.STRESS: PSI_TO_MPA,
    Quantity.FORCE: LB_TO_KG,
    Quantity.UNIT_WEIGHT: PCF_TO_KGM3,
    Quantity.TEMPERATURE_DIFFERENCE: F_TO_C_DELTA,
    Quantity.MOMENT: LBIN_TO_KGM,
}

UNIT_LABELS = {
    UnitSystem.EN: {
        Quantity.LENGTH: 'in',
        Quantity.DISTANCE: 'ft',
        Quantity.PRESSURE: 'psi',
        Quantity.STRESS: 'psi',
        Quantity.FORCE: 'lb',
        Quantity.UNIT_WEIGHT: 'lb/ft³',
        Quantity.TEMPERATURE_DIFFERENCE: '°F',
        Quantity.MOMENT: 'lb·in',
    },
    UnitSystem.SI: {
        Quantity.LENGTH: 'mm',
        Quantity.DISTANCE: 'm',
        Quantity.PRESSURE: 'kPa',
        Quantity.STRESS: 'MPa',
        Quantity.FORCE: 'kg',
        Quantity.UNIT_WEIGHT: 'kg/m³',
        Quantity.TEMPERATURE_DIFFERENCE: '°C',
        Quantity.MOMENT: 'kg·m',
    },
}


def to_canonical(value: Optional[float], quantity: Quantity,
                 system: UnitSystem) -> Optional[float]:
    """
    Convert a value from ``system`` to English units.

    Args:
        value: Value in ``system`` units (None passes through)
        quantity: Physical quantity of the value
        system: Unit system the value is expressed in

    Returns:
        Value in English units
    """
    if value is None or system == UnitSystem.EN:
        return value
    return value / SI_FACTORS[quantity]


def from_canonical(value: Optional[float], quantity: Quantity,
                   system: UnitSystem) -> Optional[float]:
    """Convert a value from English units to ``system``."""
    if value is None or system == UnitSystem.EN:
        return value
    return value * SI_FACTORS[quantity]


def unit_label(quantity: Quantity, system: UnitSystem) -> str:
    return UNIT_LABELS[system][quantity]


def _convert_value(value: Any, quantity: Optional[Quantity],
                   convert: Callable[[float, Quantity], float]) -> Any:
    if value is None or isinstance(value, (bool, Enum, str)):
        return value
    if is_dataclass(value):
        return _convert_dataclass(value, convert)
    if isinstance(value, list):
        return [_convert_value(item, quantity, convert) for item in value]
    if isinstance(value, dict):
        return {key: _convert_value(item, quantity, convert) for key, item in value.items()}
    if quantity is not None and isinstance(value, (int, float)):
        return convert(value, quantity)
    return value


def _convert_dataclass(obj: Any, convert: Callable[[float, Quantity], float]) -> Any:
    changes = {}
    for f in fields(obj):
        value = getattr(obj, f.name)
        quantity_map = f.metadata.get('quantity_map')
        if quantity_map is not None and isinstance(value, dict):
            changes[f.name] = {
                key: _convert_value(item, quantity_map.get(key), convert)
                for key, item in value.items()
            }
        else:
            changes[f.name] = _convert_value(value, f.metadata.get('quantity'), convert)
    return replace(obj, **changes)


def normalize_load_case(case: LoadCase) -> LoadCase:
    """
    Convert a load case to English units.

    A case that is already in English units comes back as an equal copy.
    """
    if case.units == UnitSystem.EN:
        return replace(case)

    logger.debug(f"Normalizing load case '{case.name}' from {case.units.value} units")
    converted = _convert_dataclass(case, lambda v, q: to_canonical(v, q, case.units))
    return replace(converted, units=UnitSystem.EN)


def denormalize_load_case(case: LoadCase, system: UnitSystem) -> LoadCase:
    """Express an English-unit load case in ``system``."""
    if case.units != UnitSystem.EN:
        case = normalize_load_case(case)
    if system == UnitSystem.EN:
        return case

    converted = _convert_dataclass(case, lambda v, q: from_canonical(v, q, system))
    return replace(converted, units=system)


def denormalize_result(result: AnalysisResult, system: UnitSystem) -> AnalysisResult:
    """Express an English-unit analysis result in ``system``."""
    if system == UnitSystem.EN:
        return replace(result, units=UnitSystem.EN)

    converted = _convert_dataclass(result, lambda v, q: from_canonical(v, q, system))
    return replace(converted, units=system)
