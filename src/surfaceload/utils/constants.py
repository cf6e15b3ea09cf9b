"""
Application constants and configuration values.
"""

import math
from pathlib import Path

# Application information
APP_NAME = "Pipeline Surface Load"
APP_VERSION = "0.1.0"
APP_ORGANIZATION = "Pipeline Integrity Engineering"

# File paths
APP_DIR = Path(__file__).parent.parent
RESOURCES_DIR = APP_DIR / "resources"

# Schema files
LOAD_CASE_SCHEMA_PATH = RESOURCES_DIR / "load_case_schema.json"

# Export/Import settings
JSON_EXPORT_EXTENSION = ".json"

# Logging settings
LOG_FILE_NAME = "surfaceload.log"
LOG_MAX_SIZE = 10 * 1024 * 1024  # 10 MB
LOG_BACKUP_COUNT = 5

# Calculation tolerances
FLOATING_POINT_TOLERANCE = 1e-10

# Unit conversion factors (exact, English to SI)
IN_TO_MM = 25.4
FT_TO_M = 0.3048
LB_TO_KG = 0.45359237
PSI_TO_KPA = 6.894757293168361
PSI_TO_MPA = PSI_TO_KPA / 1000.0
PCF_TO_KGM3 = LB_TO_KG / FT_TO_M ** 3
LBIN_TO_KGM = LB_TO_KG * IN_TO_MM / 1000.0
F_TO_C_DELTA = 5.0 / 9.0
IN_PER_FT = 12.0
SQIN_PER_SQFT = 144.0
CUIN_PER_CUFT = 1728.0

# Pipe steel properties
STEEL_ELASTIC_MODULUS = 30.0e6  # psi
STEEL_POISSON_RATIO = 0.3
STEEL_THERMAL_EXPANSION = 6.5e-6  # 1/°F

# Hoop stress formulation
HOOP_STIFFNESS_COEFFICIENT = 0.0915
LOCAL_OVALING_COEFFICIENT = 0.153 / 1.56

# Longitudinal bending search
LOAD_SPREAD_ANGLE_DEG = 29.9
MOMENT_SEARCH_EXTENT = 100.0  # multiples of the loaded length
MOMENT_SEARCH_SAMPLES = 20001  # odd, so the sample grid contains x = 0

# Footprint discretization
FOOTPRINT_GRID_SPACING = 6.0  # inches
DEFAULT_GRID_DIVISIONS = 10
DEFAULT_TIRES_PER_AXLE = 2

# Trap-door arching applies once the cover exceeds this many diameters
TRAP_DOOR_MIN_COVER_RATIO = 2.5

# Bedding angle (deg) -> (Kb, Kz, Theta in deg)
BEDDING_TABLE = {
    0: (0.110, 0.083, 135.0),
    30: (0.108, 0.088, 130.0),
    60: (0.105, 0.100, 120.0),
    90: (0.103, 0.108, 105.0),
    120: (0.101, 0.116, 90.0),
    150: (0.100, 0.120, 75.0),
    180: (0.096, 0.127, 60.0),
}
BEDDING_ANGLES = sorted(BEDDING_TABLE)

# Modulus of soil reaction lookup
E_PRIME_COMPACTION_LEVELS = [80.0, 85.0, 90.0, 95.0, 100.0]
E_PRIME_EPR1 = {
    'FINE': [500.0, 700.0, 1000.0, 1500.0, 3000.0],
    'COARSE_WITH_FINES': [1000.0, 1400.0, 2000.0, 3000.0, 6000.0],
    'COARSE_NO_FINES': [1500.0, 2100.0, 3000.0, 4500.0, 9000.0],
}
E_PRIME_EPR2 = [1.0, 1.0, 1.0, 1.0, 1.0]
E_PRIME_EPR3 = [4.8, 4.5, 4.0, 3.3, 2.5]

# Impact factors by vehicle class, keyed by pavement type where it matters
IMPACT_FACTORS = {
    'HIGHWAY': {'RIGID': 1.0, 'FLEXIBLE': 1.5},
    'FARM': 1.25,
    'TRACK': 1.5,
}
IMPACT_DEPTH_THRESHOLD = 60.0  # inches
IMPACT_DECAY_PER_INCH = 0.0025
IMPACT_FACTOR_FLOOR = 1.0

# Design code profiles
DEFAULT_LIMIT_PERCENT = 90.0
CODE_PROFILES = {
    'B31_4': {
        'label': 'ASME B31.4',
        'description': 'Pipeline Transportation Systems for Liquids and Slurries',
        'sustained_check': True,
    },
    'B31_8': {
        'label': 'ASME B31.8',
        'description': 'Gas Transmission and Distribution Piping Systems',
        'sustained_check': False,
    },
    'CSA_Z662': {
        'label': 'CSA Z662',
        'description': 'Oil and Gas Pipeline Systems',
        'sustained_check': False,
    },
}

# Typical parameter ranges for validation warnings (English units)
PARAMETER_RANGES = {
    'unit_weight': {'min': 80, 'max': 150, 'units': 'pcf'},
    'friction_angle': {'min': 15, 'max': 45, 'units': 'degrees'},
    'depth_of_cover': {'min': 1, 'max': 30, 'units': 'ft'},
    'compaction': {'min': 80, 'max': 100, 'units': '%'},
    'e_prime': {'min': 50, 'max': 10000, 'units': 'psi'},
    'outer_diameter': {'min': 2, 'max': 60, 'units': 'in'},
    'diameter_thickness_ratio': {'min': 10, 'max': 150, 'units': 'dimensionless'},
    'tire_pressure': {'min': 20, 'max': 150, 'units': 'psi'},
}

# File format versions
CURRENT_JSON_VERSION = "1.0.0"
SUPPORTED_JSON_VERSIONS = ["1.0.0"]

LOAD_SPREAD_TANGENT = math.tan(math.radians(LOAD_SPREAD_ANGLE_DEG))
