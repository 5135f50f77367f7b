"""
orbitjax is a small JAX library for evaluating the position of a body on a
Keplerian orbit with secular element rates, driven by a simulation clock.
"""

from .constants import (
    DEG2RAD,
    MS_PER_DAY,
    JD_UNIX_EPOCH,
    JD_ELEMENT_EPOCH,
    MS_ELEMENT_EPOCH,
    DAYS_PER_CENTURY,
    AU,
    ECC_MAX,
)

from .config import set_dtype, get_dtype, get_kepler_tolerance

from .time import (
    julian_day,
    julian_century,
    julian_century_from_instant,
    instant_ms_from_julian_century,
    datetime_to_instant_ms,
    parse_instant_ms,
    instant_ms_to_datetime,
)

from .elements import (
    OrbitalElements,
    PropagatedElements,
    DerivedAngles,
    clamp_eccentricity,
    propagate_elements,
    derive_angles,
)

from .kepler import (
    KeplerConfig,
    KeplerSolution,
    kepler_residual,
    solve_kepler,
)

from .frames import (
    position_orbital_plane,
    rotation_orbital_to_ecliptic,
    position_orbital_to_ecliptic,
    flip_y,
)

from .planets import PLANET_NAMES, planet_elements

from .clock import SimulationClock, rate_multiplier

from .engine import (
    StateVector,
    Simulation,
    state_at_century,
    state_from_elements,
    evaluate,
)

__all__ = [
    # Constants
    "DEG2RAD",
    "MS_PER_DAY",
    "JD_UNIX_EPOCH",
    "JD_ELEMENT_EPOCH",
    "MS_ELEMENT_EPOCH",
    "DAYS_PER_CENTURY",
    "AU",
    "ECC_MAX",
    # Config
    "set_dtype",
    "get_dtype",
    "get_kepler_tolerance",
    # Time
    "julian_day",
    "julian_century",
    "julian_century_from_instant",
    "instant_ms_from_julian_century",
    "datetime_to_instant_ms",
    "parse_instant_ms",
    "instant_ms_to_datetime",
    # Elements
    "OrbitalElements",
    "PropagatedElements",
    "DerivedAngles",
    "clamp_eccentricity",
    "propagate_elements",
    "derive_angles",
    # Kepler
    "KeplerConfig",
    "KeplerSolution",
    "kepler_residual",
    "solve_kepler",
    # Frames
    "position_orbital_plane",
    "rotation_orbital_to_ecliptic",
    "position_orbital_to_ecliptic",
    "flip_y",
    # Planets
    "PLANET_NAMES",
    "planet_elements",
    # Clock
    "SimulationClock",
    "rate_multiplier",
    # Engine
    "StateVector",
    "Simulation",
    "state_at_century",
    "state_from_elements",
    "evaluate",
]
