"""Event searches: lunar phases, eclipses, seasons, planetary events and rise/set."""

from __future__ import annotations

from .jupiter import GRSLongitudeTable, central_meridian_system_ii, next_grs_transit
from .lunar import MoonPhase, lunar_eclipse, moon_phase, solar_eclipse
from .meteors import MeteorShowerRecord, meteor_showers
from .planetary import (
    PlanetaryEvent,
    conjunction,
    greatest_elongation,
    opposition,
    perihelion_aphelion,
    planetary_event,
    transit_over_sun,
)
from .results import (
    ASTRONOMICAL,
    CIVIL,
    HORIZON,
    HORIZON_34ARCMIN,
    NAUTICAL,
    AlwaysBelowHorizon,
    Circumpolar,
    EventResult,
    Found,
    LunarEclipseDetails,
    MeteorShowerDetails,
    NoRiseSetTransit,
    NotFound,
    RiseSetTransit,
    SolarEclipseDetails,
    Twilight,
    TwilightDefinition,
)
from .rise_set import horizon_depression, hour_angle, rise_set_transit, twilight_elevation
from .saturn import ring_tilt, saturn_ring_edge_on, saturn_ring_maximum_aperture
from .search import SearchMode
from .seasons import Season, equinox_solstice

__all__ = [
    "ASTRONOMICAL",
    "AlwaysBelowHorizon",
    "CIVIL",
    "Circumpolar",
    "EventResult",
    "Found",
    "GRSLongitudeTable",
    "HORIZON",
    "HORIZON_34ARCMIN",
    "LunarEclipseDetails",
    "MeteorShowerDetails",
    "MeteorShowerRecord",
    "MoonPhase",
    "NAUTICAL",
    "NoRiseSetTransit",
    "NotFound",
    "PlanetaryEvent",
    "RiseSetTransit",
    "SearchMode",
    "Season",
    "SolarEclipseDetails",
    "Twilight",
    "TwilightDefinition",
    "central_meridian_system_ii",
    "conjunction",
    "equinox_solstice",
    "greatest_elongation",
    "horizon_depression",
    "hour_angle",
    "lunar_eclipse",
    "meteor_showers",
    "moon_phase",
    "next_grs_transit",
    "opposition",
    "perihelion_aphelion",
    "planetary_event",
    "ring_tilt",
    "rise_set_transit",
    "saturn_ring_edge_on",
    "saturn_ring_maximum_aperture",
    "solar_eclipse",
    "transit_over_sun",
]
