"""Orbital-plane and ecliptic coordinates.

A body's position is first located in its orbital (perifocal) plane from the
eccentric anomaly, then rotated into the ecliptic reference plane with the
standard three-angle rotation ``Rz(-o) @ Rx(-I) @ Rz(-wp)``.  Only the
in-plane ``(x, y)`` components are computed, so the rotation reduces to the
upper-left 2x2 block of the full 3x3 matrix.

Positions carry the unit of the semi-major axis passed in.  No display
convention is applied; screen coordinate systems with a downward ``y`` axis
should negate ``y`` themselves (see :func:`flip_y`).

References:
    E.M. Standish & J.G. Williams, "Keplerian Elements for
    Approximate Positions of the Major Planets",
    https://ssd.jpl.nasa.gov/planets/approx_pos.html
"""

from __future__ import annotations

import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike

from orbitjax.config import get_dtype


def position_orbital_plane(a: ArrayLike, e: ArrayLike, E: ArrayLike) -> Array:
    """Position in the orbital plane, periapsis along ``+x``.

    Args:
        a: Semi-major axis. Units: *AU* (or any distance unit)
        e: Eccentricity. Dimensionless.
        E: Eccentric anomaly. Units: *rad*

    Returns:
        ``[xp, yp]`` in the unit of ``a``. Shape ``(2,)``.
    """
    _float = get_dtype()
    a = jnp.asarray(a, dtype=_float)
    e = jnp.asarray(e, dtype=_float)
    E = jnp.asarray(E, dtype=_float)

    xp = a * (jnp.cos(E) - e)
    yp = a * jnp.sqrt(1.0 - e**2) * jnp.sin(E)
    return jnp.array([xp, yp])


def rotation_orbital_to_ecliptic(wp: ArrayLike, I: ArrayLike, o: ArrayLike) -> Array:
    """In-plane block of the orbital-plane to ecliptic rotation.

    Args:
        wp: Argument of periapsis. Units: *rad*
        I: Inclination. Units: *rad*
        o: Longitude of the ascending node. Units: *rad*

    Returns:
        Rotation block mapping ``[xp, yp]`` to ecliptic ``[x, y]``. Shape ``(2, 2)``.
    """
    _float = get_dtype()
    wp = jnp.asarray(wp, dtype=_float)
    I = jnp.asarray(I, dtype=_float)
    o = jnp.asarray(o, dtype=_float)

    cw, sw = jnp.cos(wp), jnp.sin(wp)
    co, so = jnp.cos(o), jnp.sin(o)
    ci = jnp.cos(I)

    return jnp.array([[cw * co - sw * so * ci, -sw * co - cw * so * ci],
                      [cw * so + sw * co * ci, -sw * so + cw * co * ci]])


def position_orbital_to_ecliptic(r_orbital: ArrayLike, wp: ArrayLike, I: ArrayLike, o: ArrayLike) -> Array:
    """Rotate an orbital-plane position into the ecliptic plane.

    Args:
        r_orbital: Orbital-plane position ``[xp, yp]``. Shape ``(2,)``.
        wp: Argument of periapsis. Units: *rad*
        I: Inclination. Units: *rad*
        o: Longitude of the ascending node. Units: *rad*

    Returns:
        Ecliptic position ``[x, y]`` in the unit of ``r_orbital``. Shape ``(2,)``.

    Examples:
        ```python
        import jax.numpy as jnp
        from orbitjax.frames import position_orbital_plane, position_orbital_to_ecliptic
        r_orb = position_orbital_plane(1.0, 0.0167, 0.5)
        r_ecl = position_orbital_to_ecliptic(r_orb, 1.999, 0.0, -0.197)
        ```
    """
    r_orbital = jnp.asarray(r_orbital, dtype=get_dtype())
    return rotation_orbital_to_ecliptic(wp, I, o) @ r_orbital


def flip_y(position: ArrayLike) -> Array:
    """Negate the ``y`` component of a 2D position.

    For consumers whose vertical axis points down (canvas and most raster
    screen coordinates).

    Args:
        position: Position ``[x, y]``. Shape ``(2,)``.

    Returns:
        ``[x, -y]``. Shape ``(2,)``.
    """
    position = jnp.asarray(position, dtype=get_dtype())
    return position * jnp.array([1.0, -1.0], dtype=position.dtype)
