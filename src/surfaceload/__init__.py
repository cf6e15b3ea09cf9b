"""
Buried pipeline surface load screening.

Resolves hoop, longitudinal and equivalent stresses in a buried pipe under
tracked vehicles, wheeled vehicles and rectangular area loads, and checks
them against pipeline design code limits.
"""

from surfaceload.core.engine import SurfaceLoadEngine, analyze
from surfaceload.core.models import AnalysisResult, LoadCase, UnitSystem, VehicleType
from surfaceload.utils.constants import APP_VERSION as __version__

__all__ = ["SurfaceLoadEngine", "analyze", "AnalysisResult", "LoadCase", "UnitSystem", "VehicleType"]
