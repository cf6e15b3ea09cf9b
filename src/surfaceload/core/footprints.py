"""
Surface load distribution.

Each vehicle type is turned into rectangular footprints, the footprints into
a grid of point loads, and a fixed set of measurement points where the soil
pressure at pipe depth is evaluated. Coordinates are in inches with x across
the pipe and y along the pipe axis; the pipe centerline is x = 0.
"""

import logging
import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional, Tuple

from surfaceload.core.models import (
    AxleVehicle, ContactPatchMode, Footprint, GridLoad, GridLoadType,
    MeasurementPoint, PointLoad, TireContact, TrackVehicle, Vehicle
)
from surfaceload.core.validators import LoadCaseValidationError, NumericDegeneracyError
from surfaceload.utils.constants import (
    FLOATING_POINT_TOLERANCE, FOOTPRINT_GRID_SPACING, IN_PER_FT, SQIN_PER_SQFT
)

logger = logging.getLogger(__name__)


@dataclass
class ContactPatch:
    """Contact area of a single tire."""
    width: float
    length: float
    area: float


@dataclass
class SurfaceLoadLayout:
    """Footprints, point loads and measurement points of one vehicle."""
    footprints: List[Footprint]
    point_loads: List[PointLoad]
    measurement_points: List[MeasurementPoint]
    total_load: float = 0.0

    @property
    def max_contact_pressure(self) -> float:
        return max(fp.contact_pressure for fp in self.footprints)


def grid_divisions(dimension: float, spacing: float = FOOTPRINT_GRID_SPACING) -> int:
    """Number of cells needed to cover ``dimension`` at ``spacing`` or finer."""
    return max(1, math.ceil(dimension / spacing - FLOATING_POINT_TOLERANCE))


def footprint_point_loads(footprint: Footprint) -> List[PointLoad]:
    """
    Subdivide a footprint into equal cells with a point load at each centre.

    Args:
        footprint: Footprint with its division counts set

    Returns:
        Point loads summing to the footprint load
    """
    nx, ny = footprint.divisions_x, footprint.divisions_y
    cell_width = footprint.width / nx
    cell_length = footprint.length / ny
    cell_load = footprint.load / (nx * ny)

    x0 = footprint.center_x - footprint.width / 2 + cell_width / 2
    y0 = footprint.center_y - footprint.length / 2 + cell_length / 2

    return [PointLoad(x=x0 + i * cell_width, y=y0 + j * cell_length, load=cell_load)
            for i in range(nx) for j in range(ny)]


def contact_patch(axle_load: float, tires_per_axle: int, tire_pressure: float,
                  tire_width: float) -> ContactPatch:
    """
    Size a tire contact patch from the tire pressure.

    The tire width is fixed and the contact length follows from the area
    needed to carry the tire load at the inflation pressure.

    Args:
        axle_load: Axle load, lb
        tires_per_axle: Number of tires sharing the axle load
        tire_pressure: Inflation pressure, psi
        tire_width: Tire width, in

    Returns:
        Contact patch of one tire
    """
    if tire_pressure <= 0 or tire_width <= 0 or tires_per_axle < 1:
        raise NumericDegeneracyError("Contact patch needs positive tire pressure, width and count")

    area = (axle_load / tires_per_axle) / tire_pressure
    return ContactPatch(width=tire_width, length=area / tire_width, area=area)


class FootprintGenerator(ABC):
    """Abstract base class for vehicle footprint generators."""

    @abstractmethod
    def footprints(self, vehicle: Vehicle) -> List[Footprint]:
        """Contact footprints of the vehicle."""
        pass

    @abstractmethod
    def measurement_points(self, vehicle: Vehicle) -> List[MeasurementPoint]:
        """Points where the pressure at pipe depth is evaluated, in priority order."""
        pass

    def generate(self, vehicle: Vehicle) -> SurfaceLoadLayout:
        """Build the complete surface load layout of a vehicle."""
        footprints = self.footprints(vehicle)
        point_loads = []
        for footprint in footprints:
            point_loads.extend(footprint_point_loads(footprint))

        total_load = sum(fp.load for fp in footprints)
        logger.debug(f"{type(self).__name__}: {len(footprints)} footprints, "
                     f"{len(point_loads)} point loads, {total_load:.1f} lb")

        return SurfaceLoadLayout(
            footprints=footprints,
            point_loads=point_loads,
            measurement_points=self.measurement_points(vehicle),
            total_load=total_load
        )


class TrackFootprintGenerator(FootprintGenerator):
    """Two tracks, each carrying half the vehicle weight, centred on the pipe."""

    def footprints(self, vehicle: TrackVehicle) -> List[Footprint]:
        half_separation = vehicle.track_separation * IN_PER_FT / 2
        length = vehicle.track_length * IN_PER_FT
        width = vehicle.track_width

        return [
            Footprint(
                center_x=side * half_separation,
                center_y=0.0,
                width=width,
                length=length,
                load=vehicle.vehicle_weight / 2,
                divisions_x=grid_divisions(width),
                divisions_y=grid_divisions(length)
            )
            for side in (-1, 1)
        ]

    def measurement_points(self, vehicle: TrackVehicle) -> List[MeasurementPoint]:
        return [
            MeasurementPoint("Under the tracks", vehicle.track_separation * IN_PER_FT / 2, 0.0),
            MeasurementPoint("Between tracks", 0.0, 0.0),
        ]


class AxleFootprintGenerator(FootprintGenerator):
    """
    Wheeled vehicle with axles spaced along the pipe axis.

    Each axle is a single footprint as wide as its tires side by side,
    centred on the lane offset, with the axle group centred on y = 0.
    """

    def __init__(self, axle_count: int):
        self.axle_count = axle_count

    def tire_footprint(self, axle_load: float, tire: TireContact) -> Tuple[float, float]:
        """
        Footprint width and length of one axle.

        Returns:
            Tuple of (width, length) in inches
        """
        if tire.mode == ContactPatchMode.AUTOMATIC:
            patch = contact_patch(axle_load, tire.tires_per_axle, tire.tire_pressure, tire.tire_width)
            length = patch.length
        else:
            length = tire.contact_length
        return tire.tire_width * tire.tires_per_axle, length

    def axle_positions(self, vehicle: AxleVehicle) -> List[float]:
        """Axle positions along the pipe axis in inches, centred on zero."""
        positions = [0.0]
        for spacing in vehicle.axle_spacings:
            positions.append(positions[-1] + spacing * IN_PER_FT)
        offset = positions[-1] / 2
        return [position - offset for position in positions]

    def footprints(self, vehicle: AxleVehicle) -> List[Footprint]:
        if len(vehicle.axles) != self.axle_count:
            raise LoadCaseValidationError.for_field(
                "vehicle.axles", f"Expected {self.axle_count} axles, got {len(vehicle.axles)}"
            )

        lane_offset = vehicle.lane_offset * IN_PER_FT
        footprints = []

        for axle, position in zip(vehicle.axles, self.axle_positions(vehicle)):
            tire: Optional[TireContact] = axle.tire or vehicle.tire
            width, length = self.tire_footprint(axle.load, tire)
            footprints.append(Footprint(
                center_x=lane_offset,
                center_y=position,
                width=width,
                length=length,
                load=axle.load,
                divisions_x=grid_divisions(width),
                divisions_y=grid_divisions(length)
            ))

        return footprints

    def measurement_points(self, vehicle: AxleVehicle) -> List[MeasurementPoint]:
        return [
            MeasurementPoint("Under load center", vehicle.lane_offset * IN_PER_FT, 0.0),
            MeasurementPoint("At pipe centerline", 0.0, 0.0),
        ]


class GridFootprintGenerator(FootprintGenerator):
    """Rectangular area load with explicit grid divisions."""

    def total_load(self, grid: GridLoad) -> float:
        """Total load in lb, given directly or from a uniform pressure."""
        if grid.load_type == GridLoadType.UNIFORM_PRESSURE:
            return grid.uniform_pressure * grid.width * grid.length * SQIN_PER_SQFT
        return grid.total_load

    def footprints(self, grid: GridLoad) -> List[Footprint]:
        return [Footprint(
            center_x=grid.offset_x * IN_PER_FT,
            center_y=grid.offset_y * IN_PER_FT,
            width=grid.width * IN_PER_FT,
            length=grid.length * IN_PER_FT,
            load=self.total_load(grid),
            divisions_x=grid.divisions_x,
            divisions_y=grid.divisions_y
        )]

    def measurement_points(self, grid: GridLoad) -> List[MeasurementPoint]:
        return [
            MeasurementPoint("Under load center", grid.offset_x * IN_PER_FT, grid.offset_y * IN_PER_FT),
            MeasurementPoint("At pipe centerline", 0.0, 0.0),
        ]
