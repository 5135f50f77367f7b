"""Keplerian element sets with linear secular rates.

An :class:`OrbitalElements` record holds the six classical elements at the
reference epoch together with their rates per Julian century.  Propagation
is a linear extrapolation of each element::

    element(T) = element_0 + element_rate * T

where *T* is Julian centuries from the element epoch.  Eccentricity is the
only element that is constrained: it is clamped to ``[0, ECC_MAX]`` so the
Kepler solver always operates inside its stable domain.

Both record types are :class:`~typing.NamedTuple` instances, which JAX treats
as pytrees, so they pass through ``jax.jit`` and ``jax.vmap`` unchanged.

References:
    E.M. Standish & J.G. Williams, "Keplerian Elements for
    Approximate Positions of the Major Planets",
    https://ssd.jpl.nasa.gov/planets/approx_pos.html
"""

from __future__ import annotations

from typing import NamedTuple

import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike

from orbitjax.config import get_dtype
from orbitjax.constants import DEG2RAD, ECC_MAX
from orbitjax.utils import wrap_degrees


class OrbitalElements(NamedTuple):
    """Epoch values and per-century rates of the six Keplerian elements.

    Attributes:
        a0: Semi-major axis at epoch. Units: *AU*
        e0: Eccentricity at epoch. Dimensionless.
        I0: Inclination at epoch. Units: *deg*
        L0: Mean longitude at epoch. Units: *deg*
        Lp0: Longitude of perihelion at epoch. Units: *deg*
        o0: Longitude of the ascending node at epoch. Units: *deg*
        ac: Semi-major axis rate. Units: *AU/century*
        ec: Eccentricity rate. Units: *1/century*
        Ic: Inclination rate. Units: *deg/century*
        Lc: Mean longitude rate. Units: *deg/century*
        Lpc: Longitude of perihelion rate. Units: *deg/century*
        oc: Longitude of the ascending node rate. Units: *deg/century*
    """

    a0: ArrayLike
    e0: ArrayLike
    I0: ArrayLike
    L0: ArrayLike
    Lp0: ArrayLike
    o0: ArrayLike
    ac: ArrayLike = 0.0
    ec: ArrayLike = 0.0
    Ic: ArrayLike = 0.0
    Lc: ArrayLike = 0.0
    Lpc: ArrayLike = 0.0
    oc: ArrayLike = 0.0

    @classmethod
    def from_table(cls, rows: ArrayLike) -> OrbitalElements:
        """Build elements from a ``(6, 2)`` table of ``[value, rate]`` rows.

        Row order is ``a, e, I, L, Lp, o``, matching the JPL element tables.

        Args:
            rows: Element table. Shape ``(6, 2)``.

        Returns:
            OrbitalElements: Element set.

        Raises:
            ValueError: If *rows* does not have shape ``(6, 2)``.
        """
        rows = jnp.asarray(rows)
        if rows.shape != (6, 2):
            raise ValueError(f"Element table must have shape (6, 2), got {rows.shape}")
        return cls(
            a0=rows[0, 0], e0=rows[1, 0], I0=rows[2, 0],
            L0=rows[3, 0], Lp0=rows[4, 0], o0=rows[5, 0],
            ac=rows[0, 1], ec=rows[1, 1], Ic=rows[2, 1],
            Lc=rows[3, 1], Lpc=rows[4, 1], oc=rows[5, 1],
        )


class PropagatedElements(NamedTuple):
    """Keplerian elements evaluated at a specific Julian century.

    Attributes:
        a: Semi-major axis. Units: *AU*
        e: Eccentricity, clamped to ``[0, ECC_MAX]``. Dimensionless.
        I: Inclination. Units: *deg*
        L: Mean longitude. Units: *deg*
        Lp: Longitude of perihelion. Units: *deg*
        o: Longitude of the ascending node. Units: *deg*
    """

    a: Array
    e: Array
    I: Array
    L: Array
    Lp: Array
    o: Array


class DerivedAngles(NamedTuple):
    """Angles in radians prepared for the Kepler solver and the frame rotation.

    Attributes:
        M: Mean anomaly. Units: *rad*
        wp: Argument of periapsis. Units: *rad*
        I: Inclination. Units: *rad*
        L: Mean longitude. Units: *rad*
        Lp: Longitude of perihelion. Units: *rad*
        o: Longitude of the ascending node. Units: *rad*
    """

    M: Array
    wp: Array
    I: Array
    L: Array
    Lp: Array
    o: Array


def clamp_eccentricity(e: ArrayLike) -> Array:
    """Clamp eccentricity to the solver domain ``[0, ECC_MAX]``.

    Args:
        e: Eccentricity. Dimensionless.

    Returns:
        Clamped eccentricity.
    """
    e = jnp.asarray(e, dtype=get_dtype())
    return jnp.clip(e, 0.0, ECC_MAX)


def propagate_elements(elements: OrbitalElements, T: ArrayLike) -> PropagatedElements:
    """Linearly propagate epoch elements to Julian century ``T``.

    Each element is extrapolated independently.  Eccentricity is clamped
    after propagation, since secular drift could otherwise push it outside
    ``[0, ECC_MAX]``.  At ``T = 0`` the epoch values are returned unchanged.

    Args:
        elements (OrbitalElements): Epoch elements and rates.
        T (ArrayLike): Julian centuries from the element epoch.

    Returns:
        PropagatedElements: Elements at ``T``.

    Examples:
        ```python
        from orbitjax.elements import propagate_elements
        from orbitjax.planets import planet_elements
        el = propagate_elements(planet_elements("mars"), 0.245)
        ```
    """
    _float = get_dtype()
    T = jnp.asarray(T, dtype=_float)

    def _linear(value0, rate):
        return jnp.asarray(value0, dtype=_float) + jnp.asarray(rate, dtype=_float) * T

    return PropagatedElements(
        a=_linear(elements.a0, elements.ac),
        e=clamp_eccentricity(_linear(elements.e0, elements.ec)),
        I=_linear(elements.I0, elements.Ic),
        L=_linear(elements.L0, elements.Lc),
        Lp=_linear(elements.Lp0, elements.Lpc),
        o=_linear(elements.o0, elements.oc),
    )


def derive_angles(elements: PropagatedElements) -> DerivedAngles:
    """Derive the solver and rotation angles from propagated elements.

    Two stages, in this order:

    1. In degrees: mean anomaly ``M = fmod(L - Lp, 360)`` and argument of
       periapsis ``wp = Lp - o``.
    2. Convert ``M``, ``wp`` and the element angles ``I``, ``L``, ``Lp``,
       ``o`` to radians.

    The wrap of ``M`` is a signed remainder in degree space (see
    :func:`orbitjax.utils.wrap_degrees`), so ``M`` lies in ``(-2*pi, 2*pi)``.

    Args:
        elements (PropagatedElements): Elements in degrees.

    Returns:
        DerivedAngles: Angles in radians.
    """
    M_deg = wrap_degrees(elements.L - elements.Lp)
    wp_deg = elements.Lp - elements.o

    return DerivedAngles(
        M=M_deg * DEG2RAD,
        wp=wp_deg * DEG2RAD,
        I=elements.I * DEG2RAD,
        L=elements.L * DEG2RAD,
        Lp=elements.Lp * DEG2RAD,
        o=elements.o * DEG2RAD,
    )
