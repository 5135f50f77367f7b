"""
The `constants` module defines the mathematical, time, and physical constants used by orbitjax.
"""

from jax.numpy import pi as PI

# Mathematical Constants
"""
Constant to convert degrees to radians. Equal to 2pi/360. Units: *rad/deg*
"""
DEG2RAD = 2.0 * PI / 360.0

# Time Constants

"""
Milliseconds in one day. Units: *ms/day*
"""
MS_PER_DAY = 86400000.0

"""
Julian Date of the Unix epoch (1970-01-01 00:00:00 UTC). Units: *days*
"""
JD_UNIX_EPOCH = 2440587.5

"""
Julian Date subtracted from absolute Julian Dates to obtain the day count
used for element propagation. Corresponds to 1999-12-31 00:00:00 UTC, so a
day count of zero lies 1.5 days before the J2000.0 epoch proper. Units: *days*
"""
JD_ELEMENT_EPOCH = 2451543.5

"""
Unix timestamp of the element epoch, ``(JD_ELEMENT_EPOCH - JD_UNIX_EPOCH) * MS_PER_DAY``.
Exactly representable in float64. Units: *ms*
"""
MS_ELEMENT_EPOCH = 946598400000.0

"""
Number of days in a Julian century. Units: *days*
"""
DAYS_PER_CENTURY = 36525.0

# Physical Constants
"""
Astronomical Unit. Equal to the mean distance of the Earth from the sun.
TDB-compatible value. Units: *m*

References:

1. P. Gérard and B. Luzum, *IERS Technical Note 36*, 2010
"""
AU = 1.49597870700e11  # [m] Astronomical Unit IAU 2010

# Orbit Constants
"""
Largest eccentricity accepted by the Kepler equation solver. Propagated
eccentricities are clamped to ``[0, ECC_MAX]``. [dimensionless]
"""
ECC_MAX = 0.9
