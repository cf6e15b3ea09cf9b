"""
Data models for buried pipeline surface-load analysis.

This module defines the core data structures used throughout the application:
the load case describing pipe, soil, vehicle and code options, the
intermediate footprint and point-load records, and the analysis result.

Numeric fields that carry a physical unit declare their ``Quantity`` in the
dataclass field metadata. Unit conversion walks these declarations, so a new
field only needs the right ``quantity_field`` to be converted correctly.
"""

from dataclasses import dataclass, field
from typing import List, Dict, Optional, Any, Union
from enum import Enum


class Quantity(Enum):
    """Physical quantities and their English / SI units."""
    LENGTH = "length"                          # in | mm
    DISTANCE = "distance"                      # ft | m
    PRESSURE = "pressure"                      # psi | kPa
    STRESS = "stress"                          # psi | MPa
    FORCE = "force"                            # lb | kg
    UNIT_WEIGHT = "unit_weight"                # lb/ft³ | kg/m³
    TEMPERATURE_DIFFERENCE = "temperature_difference"  # °F | °C
    MOMENT = "moment"                          # lb·in | kg·m


def quantity_field(quantity: Quantity, **kwargs) -> Any:
    """Declare a dataclass field measured in ``quantity``."""
    return field(metadata={'quantity': quantity}, **kwargs)


class UnitSystem(Enum):
    """Unit system of a load case or result."""
    EN = "EN"
    SI = "SI"


class VehicleType(Enum):
    """Surface load variants."""
    TRACK = "TRACK"
    TWO_AXLE = "TWO_AXLE"
    THREE_AXLE = "THREE_AXLE"
    GRID = "GRID"


class SoilLoadMethod(Enum):
    """Earth load formulation."""
    PRISM = "PRISM"
    TRAP_DOOR = "TRAP_DOOR"


class EPrimeMethod(Enum):
    """Source of the modulus of soil reaction."""
    USER_DEFINED = "USER_DEFINED"
    LOOKUP = "LOOKUP"


class SoilType(Enum):
    """Backfill soil groups for the modulus of soil reaction lookup."""
    FINE = "FINE"
    COARSE_WITH_FINES = "COARSE_WITH_FINES"
    COARSE_NO_FINES = "COARSE_NO_FINES"


class PavementType(Enum):
    RIGID = "RIGID"
    FLEXIBLE = "FLEXIBLE"


class VehicleClass(Enum):
    HIGHWAY = "HIGHWAY"
    FARM = "FARM"
    TRACK = "TRACK"


class EquivalentStressMethod(Enum):
    TRESCA = "TRESCA"
    VON_MISES = "VON_MISES"


class CodeCheck(Enum):
    """Pipeline design codes available for compliance checks."""
    B31_4 = "B31_4"
    B31_8 = "B31_8"
    CSA_Z662 = "CSA_Z662"
    USER_DEFINED = "USER_DEFINED"


class ContactPatchMode(Enum):
    """How the tire contact length is obtained."""
    MANUAL = "MANUAL"
    AUTOMATIC = "AUTOMATIC"


class GridLoadType(Enum):
    TOTAL_LOAD = "TOTAL_LOAD"
    UNIFORM_PRESSURE = "UNIFORM_PRESSURE"


class LiveLoadEnvelope(Enum):
    """
    Convention for the live load in the stress envelopes.

    ADDITIVE places the live load on the high side only; SYMMETRIC also
    subtracts it on the low side.
    """
    ADDITIVE = "ADDITIVE"
    SYMMETRIC = "SYMMETRIC"


@dataclass
class PipeSection:
    """Pipe geometry, material strength and operating conditions."""
    outer_diameter: float = quantity_field(Quantity.LENGTH)
    wall_thickness: float = quantity_field(Quantity.LENGTH)
    smys: float = quantity_field(Quantity.STRESS)
    mop: float = quantity_field(Quantity.PRESSURE)
    delta_t: float = quantity_field(Quantity.TEMPERATURE_DIFFERENCE, default=0.0)


@dataclass
class SoilProfile:
    """Backfill properties and burial geometry."""
    unit_weight: float = quantity_field(Quantity.UNIT_WEIGHT)
    depth_of_cover: float = quantity_field(Quantity.DISTANCE)
    bedding_angle: float = 90.0
    soil_load_method: SoilLoadMethod = SoilLoadMethod.PRISM
    friction_angle: Optional[float] = None  # degrees
    cohesion: float = quantity_field(Quantity.PRESSURE, default=0.0)
    lateral_pressure_coefficient: float = 1.0


@dataclass
class ModulusOfSoilReaction:
    """Modulus of soil reaction E′, given directly or looked up."""
    method: EPrimeMethod
    value: Optional[float] = quantity_field(Quantity.PRESSURE, default=None)
    soil_type: Optional[SoilType] = None
    compaction: Optional[float] = None  # % standard Proctor


@dataclass
class UserDefinedLimits:
    """Allowable stresses as a percentage of SMYS."""
    hoop: float
    longitudinal: float
    equivalent: float


@dataclass
class AnalysisOptions:
    """Impact, equivalent stress and code selections."""
    pavement_type: PavementType = PavementType.FLEXIBLE
    vehicle_class: VehicleClass = VehicleClass.HIGHWAY
    equivalent_stress_method: EquivalentStressMethod = EquivalentStressMethod.VON_MISES
    code_check: CodeCheck = CodeCheck.B31_8
    user_limits: Optional[UserDefinedLimits] = None
    live_load_envelope: LiveLoadEnvelope = LiveLoadEnvelope.ADDITIVE


@dataclass
class TrackVehicle:
    """Tracked vehicle with two parallel tracks crossing the pipe."""
    vehicle_weight: float = quantity_field(Quantity.FORCE)
    track_length: float = quantity_field(Quantity.DISTANCE)
    track_width: float = quantity_field(Quantity.LENGTH)
    track_separation: float = quantity_field(Quantity.DISTANCE)


@dataclass
class TireContact:
    """Tire contact geometry, entered directly or sized from tire pressure."""
    tire_width: float = quantity_field(Quantity.LENGTH)
    mode: ContactPatchMode = ContactPatchMode.MANUAL
    contact_length: Optional[float] = quantity_field(Quantity.LENGTH, default=None)
    tire_pressure: Optional[float] = quantity_field(Quantity.PRESSURE, default=None)
    tires_per_axle: int = 2


@dataclass
class Axle:
    load: float = quantity_field(Quantity.FORCE)
    tire: Optional[TireContact] = None  # overrides the vehicle tire


@dataclass
class AxleVehicle:
    """Wheeled vehicle; axles are laid out along the pipe axis."""
    axles: List[Axle]
    axle_spacings: List[float] = quantity_field(Quantity.DISTANCE, default_factory=list)
    lane_offset: float = quantity_field(Quantity.DISTANCE, default=0.0)
    tire: Optional[TireContact] = None


@dataclass
class GridLoad:
    """Rectangular area load. Width runs across the pipe, length along it."""
    length: float = quantity_field(Quantity.DISTANCE)
    width: float = quantity_field(Quantity.DISTANCE)
    load_type: GridLoadType = GridLoadType.TOTAL_LOAD
    total_load: Optional[float] = quantity_field(Quantity.FORCE, default=None)
    uniform_pressure: Optional[float] = quantity_field(Quantity.PRESSURE, default=None)
    offset_x: float = quantity_field(Quantity.DISTANCE, default=0.0)
    offset_y: float = quantity_field(Quantity.DISTANCE, default=0.0)
    divisions_x: int = 10
    divisions_y: int = 10


Vehicle = Union[TrackVehicle, AxleVehicle, GridLoad]


@dataclass
class LoadCase:
    """Complete input for one analysis."""
    vehicle_type: VehicleType
    pipe: PipeSection
    soil: SoilProfile
    e_prime: ModulusOfSoilReaction
    vehicle: Vehicle
    options: AnalysisOptions = field(default_factory=AnalysisOptions)
    units: UnitSystem = UnitSystem.EN
    name: str = ""


@dataclass
class PointLoad:
    """Concentrated surface load. x is across the pipe, y along it (inches)."""
    x: float
    y: float
    load: float


@dataclass
class MeasurementPoint:
    label: str
    x: float
    y: float


@dataclass
class Footprint:
    """Rectangular contact area carrying a uniformly distributed load."""
    center_x: float
    center_y: float
    width: float
    length: float
    load: float
    divisions_x: int = 1
    divisions_y: int = 1

    @property
    def area(self) -> float:
        return self.width * self.length

    @property
    def contact_pressure(self) -> float:
        return self.load / self.area


@dataclass
class StressComponents:
    """Contributions to a stress envelope."""
    pressure: float = quantity_field(Quantity.STRESS)
    earth: float = quantity_field(Quantity.STRESS)
    thermal: float = quantity_field(Quantity.STRESS)
    total: float = quantity_field(Quantity.STRESS)


@dataclass
class StressEnvelope:
    high: float = quantity_field(Quantity.STRESS)
    low: float = quantity_field(Quantity.STRESS)
    components: Optional[StressComponents] = None


@dataclass
class EquivalentStress:
    high: float = quantity_field(Quantity.STRESS)
    low: float = quantity_field(Quantity.STRESS)
    percent_smys: float = 0.0


@dataclass
class StressState:
    """Hoop, longitudinal and equivalent stresses at one internal pressure."""
    internal_pressure: float = quantity_field(Quantity.PRESSURE)
    hoop: StressEnvelope = None
    longitudinal: StressEnvelope = None
    equivalent: EquivalentStress = None


@dataclass
class StressResults:
    at_zero_pressure: StressState
    at_mop: StressState


@dataclass
class CodeProfile:
    """Allowable stress fractions of a design code."""
    code: CodeCheck
    label: str
    description: str = ""
    hoop_limit: float = 90.0
    longitudinal_limit: float = 90.0
    equivalent_limit: float = 90.0
    uses_sustained_longitudinal_check: bool = False


@dataclass
class AllowableStresses:
    hoop: float = quantity_field(Quantity.STRESS)
    longitudinal: float = quantity_field(Quantity.STRESS)
    equivalent: float = quantity_field(Quantity.STRESS)


@dataclass
class PassFailSummary:
    """Outcome of every compliance check."""
    hoop_at_zero: bool
    hoop_at_mop: bool
    longitudinal_at_zero: bool
    longitudinal_at_mop: bool
    equivalent_at_zero: bool
    equivalent_at_mop: bool
    overall_pass: bool
    sustained_at_zero: Optional[bool] = None
    sustained_at_mop: Optional[bool] = None


# Units of the diagnostic values reported with every result. Keys not listed
# here are dimensionless.
DIAGNOSTIC_QUANTITIES: Dict[str, Quantity] = {
    'boussinesq_max': Quantity.PRESSURE,
    'contact_pressure': Quantity.PRESSURE,
    'total_surface_load': Quantity.FORCE,
    'depth_of_cover': Quantity.LENGTH,
    'hoop_soil': Quantity.STRESS,
    'hoop_live_zero': Quantity.STRESS,
    'hoop_live_mop': Quantity.STRESS,
    'hoop_internal_mop': Quantity.STRESS,
    'longitudinal_local_zero': Quantity.STRESS,
    'longitudinal_local_mop': Quantity.STRESS,
    'longitudinal_bending': Quantity.STRESS,
    'longitudinal_thermal': Quantity.STRESS,
    'sustained_longitudinal_zero': Quantity.STRESS,
    'sustained_longitudinal_mop': Quantity.STRESS,
    'moment_max': Quantity.MOMENT,
    'characteristic_length': Quantity.LENGTH,
    'loaded_length': Quantity.LENGTH,
    'equivalent_surface_load': Quantity.FORCE,
    'line_load_pressure': Quantity.PRESSURE,
}


@dataclass
class AnalysisResult:
    """Complete output of one analysis, in the unit system of the load case."""
    name: str
    units: UnitSystem
    vehicle_type: VehicleType
    max_surface_pressure: float = quantity_field(Quantity.PRESSURE)
    governing_location: str = ""
    impact_factor: float = 1.0
    measurement_pressures: Dict[str, float] = quantity_field(Quantity.PRESSURE, default_factory=dict)
    stresses: Optional[StressResults] = None
    allowable_stress: float = quantity_field(Quantity.STRESS, default=0.0)
    allowables: Optional[AllowableStresses] = None
    code_profile: Optional[CodeProfile] = None
    pass_fail: Optional[PassFailSummary] = None
    e_prime: float = quantity_field(Quantity.PRESSURE, default=0.0)
    soil_load: float = quantity_field(Quantity.PRESSURE, default=0.0)
    deflection_ratio: float = 0.0
    diagnostics: Dict[str, float] = field(default_factory=dict,
                                          metadata={'quantity_map': DIAGNOSTIC_QUANTITIES})
