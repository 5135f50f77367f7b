"""Angle helpers."""

import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike


def wrap_degrees(angle: ArrayLike) -> Array:
    """Wrap an angle in degrees into ``(-360, 360)`` keeping its sign.

    This is a truncated remainder (``fmod``), not a floored modulo: ``-30``
    stays ``-30`` rather than becoming ``330``.  Both describe the same
    direction, but the solver starts its iteration from the value as given.

    Args:
        angle (ArrayLike): Angle. Units: *deg*

    Returns:
        Wrapped angle. Units: *deg*
    """
    return jnp.fmod(angle, 360.0)
