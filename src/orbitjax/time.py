"""Conversions between wall-clock instants and the Julian time scales used
for element propagation.

Instants are Unix timestamps in milliseconds (the unit browsers and most UI
toolkits hand out).  The numeric functions are JAX-traceable and propagate
non-finite input unchanged; callers detect invalid instants themselves.
"""

from __future__ import annotations

import datetime
import logging
import math

import jax
import jax.numpy as jnp
from jax.typing import ArrayLike

from .config import get_dtype
from .constants import DAYS_PER_CENTURY, JD_ELEMENT_EPOCH, JD_UNIX_EPOCH, MS_ELEMENT_EPOCH, MS_PER_DAY

logger = logging.getLogger(__name__)


def _days_since_element_epoch(instant_ms: ArrayLike):
    # Python scalars stay float64 until the caller's final cast
    if isinstance(instant_ms, (int, float)):
        return (float(instant_ms) - MS_ELEMENT_EPOCH) / MS_PER_DAY
    instant_ms = jnp.asarray(instant_ms, dtype=get_dtype())
    return (instant_ms - MS_ELEMENT_EPOCH) / MS_PER_DAY


def julian_day(instant_ms: ArrayLike) -> jax.Array:
    """Convert a Unix millisecond instant to days since the element epoch.

    Computes ``instant_ms / 86400000 + 2440587.5 - 2451543.5``: days since
    1970, plus the Julian Date of 1970, minus the Julian Date of the element
    epoch (see :data:`orbitjax.constants.JD_ELEMENT_EPOCH`).  The two Julian
    Dates are folded into :data:`orbitjax.constants.MS_ELEMENT_EPOCH` and
    subtracted before dividing, so the large absolute Julian Date never
    appears in the configured dtype.

    A Python scalar instant is reduced in float64 and rounded to the
    configured dtype once, at the end.  Arrays and traced values are cast to
    the configured dtype first, so in float32 they resolve only to about
    two minutes at present-day instants.

    Args:
        instant_ms (ArrayLike): Unix timestamp. Units: *ms*

    Returns:
        Day count relative to the element epoch. Units: *days*
    """
    return jnp.asarray(_days_since_element_epoch(instant_ms), dtype=get_dtype())


def julian_century(day: ArrayLike) -> jax.Array:
    """Convert a day count to Julian centuries.

    Args:
        day (ArrayLike): Day count relative to the element epoch. Units: *days*

    Returns:
        Julian centuries ``T``.
    """
    day = jnp.asarray(day, dtype=get_dtype())
    return day / DAYS_PER_CENTURY


def julian_century_from_instant(instant_ms: ArrayLike) -> jax.Array:
    """Julian centuries ``T`` for a Unix millisecond instant.

    Follows the same precision rule as :func:`julian_day`: Python scalars
    are converted in float64 and rounded to the configured dtype once.

    Args:
        instant_ms (ArrayLike): Unix timestamp. Units: *ms*

    Returns:
        Julian centuries ``T``.
    """
    return jnp.asarray(_days_since_element_epoch(instant_ms) / DAYS_PER_CENTURY, dtype=get_dtype())


def instant_ms_from_julian_century(T: float) -> float:
    """Unix millisecond instant corresponding to Julian century ``T``.

    Inverse of :func:`julian_century_from_instant`, computed in Python
    floats so the result does not depend on the configured dtype.

    Args:
        T (float): Julian centuries.

    Returns:
        float: Unix timestamp. Units: *ms*
    """
    day = float(T) * DAYS_PER_CENTURY
    return (day - JD_UNIX_EPOCH + JD_ELEMENT_EPOCH) * MS_PER_DAY


def datetime_to_instant_ms(value: datetime.datetime) -> float:
    """Convert a ``datetime`` to a Unix millisecond instant.

    Naive datetimes are interpreted as UTC.

    Args:
        value (datetime.datetime): Date and time.

    Returns:
        float: Unix timestamp. Units: *ms*
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=datetime.timezone.utc)
    return value.timestamp() * 1000.0


def parse_instant_ms(text: str) -> float:
    """Parse an ISO 8601 date or date-time string into a Unix millisecond instant.

    Accepts anything ``datetime.fromisoformat`` accepts, e.g. ``"2024-06-15"``,
    ``"2024-06-15T12:30"`` or ``"2024-06-15T12:30:00Z"``.  Strings without an
    offset are taken as UTC.

    An unparsable string does not raise: it yields ``nan``, which the engine
    treats as an invalid simulated instant.

    Args:
        text (str): Date string.

    Returns:
        float: Unix timestamp in ms, or ``nan`` if *text* cannot be parsed.
    """
    stripped = text.strip()
    if stripped.endswith(("Z", "z")):
        stripped = stripped[:-1] + "+00:00"
    try:
        value = datetime.datetime.fromisoformat(stripped)
    except ValueError:
        logger.debug("Unparsable date %r", text)
        return math.nan
    return datetime_to_instant_ms(value)


def instant_ms_to_datetime(instant_ms: float) -> datetime.datetime | None:
    """Convert a Unix millisecond instant to a UTC ``datetime``.

    Args:
        instant_ms (float): Unix timestamp. Units: *ms*

    Returns:
        Timezone-aware UTC datetime, or ``None`` if the instant is not finite
        or outside the range ``datetime`` can represent.
    """
    instant_ms = float(instant_ms)
    if not math.isfinite(instant_ms):
        return None
    epoch = datetime.datetime(1970, 1, 1, tzinfo=datetime.timezone.utc)
    try:
        return epoch + datetime.timedelta(milliseconds=instant_ms)
    except OverflowError:
        return None
