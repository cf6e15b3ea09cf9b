"""
Shared load case fixtures.
"""

import pytest

from surfaceload.core.models import (
    AnalysisOptions, Axle, AxleVehicle, CodeCheck, ContactPatchMode,
    EPrimeMethod, EquivalentStressMethod, GridLoad, GridLoadType, LoadCase,
    ModulusOfSoilReaction, PavementType, PipeSection, SoilLoadMethod,
    SoilProfile, SoilType, TireContact, TrackVehicle, UnitSystem,
    VehicleClass, VehicleType
)


@pytest.fixture
def pipe():
    """NPS 24 x 0.375 in X52 line pipe."""
    return PipeSection(outer_diameter=24.0, wall_thickness=0.375, smys=52000.0, mop=1000.0, delta_t=0.0)


@pytest.fixture
def soil():
    """Four feet of cover, 120 pcf backfill, 90 degree bedding."""
    return SoilProfile(unit_weight=120.0, depth_of_cover=4.0, bedding_angle=90)


@pytest.fixture
def e_prime():
    return ModulusOfSoilReaction(method=EPrimeMethod.USER_DEFINED, value=1000.0)


@pytest.fixture
def options():
    return AnalysisOptions(
        pavement_type=PavementType.FLEXIBLE,
        vehicle_class=VehicleClass.HIGHWAY,
        equivalent_stress_method=EquivalentStressMethod.VON_MISES,
        code_check=CodeCheck.B31_8,
    )


@pytest.fixture
def track_case(pipe, soil, e_prime):
    """Tracked excavator crossing the pipe."""
    return LoadCase(
        name="Excavator crossing",
        vehicle_type=VehicleType.TRACK,
        pipe=pipe,
        soil=soil,
        e_prime=e_prime,
        options=AnalysisOptions(vehicle_class=VehicleClass.TRACK, code_check=CodeCheck.B31_4),
        vehicle=TrackVehicle(vehicle_weight=40000.0, track_length=12.0, track_width=24.0,
                             track_separation=8.0),
    )


@pytest.fixture
def two_axle_case(pipe, soil, e_prime, options):
    """Loaded dump truck with manually entered tire contact."""
    return LoadCase(
        name="Dump truck",
        vehicle_type=VehicleType.TWO_AXLE,
        pipe=pipe,
        soil=soil,
        e_prime=e_prime,
        options=options,
        vehicle=AxleVehicle(
            axles=[Axle(load=12000.0), Axle(load=32000.0)],
            axle_spacings=[14.0],
            lane_offset=0.0,
            tire=TireContact(tire_width=10.0, contact_length=10.0, tires_per_axle=2),
        ),
    )


@pytest.fixture
def three_axle_case(pipe, soil, options):
    """Tandem truck with tire-pressure sizing and a looked-up E'."""
    return LoadCase(
        name="Tandem truck",
        vehicle_type=VehicleType.THREE_AXLE,
        pipe=pipe,
        soil=SoilProfile(unit_weight=120.0, depth_of_cover=6.0, bedding_angle=60,
                         soil_load_method=SoilLoadMethod.TRAP_DOOR, friction_angle=30.0),
        e_prime=ModulusOfSoilReaction(method=EPrimeMethod.LOOKUP,
                                      soil_type=SoilType.COARSE_WITH_FINES, compaction=90.0),
        options=options,
        vehicle=AxleVehicle(
            axles=[
                Axle(load=12000.0),
                Axle(load=17000.0),
                Axle(load=17000.0, tire=TireContact(tire_width=8.0, contact_length=12.0,
                                                    tires_per_axle=4)),
            ],
            axle_spacings=[14.0, 4.5],
            lane_offset=2.0,
            tire=TireContact(tire_width=8.0, mode=ContactPatchMode.AUTOMATIC,
                             tire_pressure=80.0, tires_per_axle=4),
        ),
    )


@pytest.fixture
def grid_case(pipe, soil, e_prime, options):
    """Stockpile footprint over the pipe."""
    return LoadCase(
        name="Stockpile",
        vehicle_type=VehicleType.GRID,
        pipe=pipe,
        soil=soil,
        e_prime=e_prime,
        options=options,
        vehicle=GridLoad(length=4.0, width=4.0, load_type=GridLoadType.TOTAL_LOAD,
                         total_load=1000.0, divisions_x=8, divisions_y=8),
    )


@pytest.fixture
def si_case():
    """Metric two-axle load case."""
    return LoadCase(
        name="Metric truck",
        units=UnitSystem.SI,
        vehicle_type=VehicleType.TWO_AXLE,
        pipe=PipeSection(outer_diameter=610.0, wall_thickness=9.5, smys=359.0, mop=6895.0,
                         delta_t=20.0),
        soil=SoilProfile(unit_weight=1900.0, depth_of_cover=1.2, bedding_angle=90,
                         cohesion=5.0, soil_load_method=SoilLoadMethod.TRAP_DOOR,
                         friction_angle=32.0),
        e_prime=ModulusOfSoilReaction(method=EPrimeMethod.USER_DEFINED, value=6900.0),
        options=AnalysisOptions(),
        vehicle=AxleVehicle(
            axles=[Axle(load=5443.0), Axle(load=14515.0)],
            axle_spacings=[4.3],
            lane_offset=0.6,
            tire=TireContact(tire_width=254.0, mode=ContactPatchMode.AUTOMATIC,
                             tire_pressure=550.0, tires_per_axle=2),
        ),
    )
