"""Kepler equation solver.

Solves ``M = E - e * sin(E)`` for the eccentric anomaly ``E`` by
Newton-Raphson iteration, starting from ``E0 = M``.  Iteration stops when
successive estimates differ by less than a tolerance, or when an iteration
cap is reached.  The loop is a ``jax.lax.while_loop``, so the solver is
traceable under ``jax.jit`` and ``jax.vmap``.

The result is tagged: :class:`KeplerSolution` carries a ``converged`` flag
alongside the estimate, so callers can flag degraded accuracy instead of
blocking on an iteration that does not settle.  Near ``e = 1`` the
derivative ``1 - e * cos(E)`` approaches zero around periapsis; eccentricity
is therefore limited to ``[0, ECC_MAX]`` upstream.
"""

from __future__ import annotations

from typing import NamedTuple

import jax
import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike

from orbitjax.config import get_dtype, get_kepler_tolerance

DEFAULT_TOL = 1e-5
DEFAULT_MAX_ITER = 100


class KeplerConfig(NamedTuple):
    """Stopping criteria for the Kepler solver.

    Attributes:
        tol: Step-size tolerance. Iteration stops once
            ``|E_n - E_{n+1}| < tol``. Units: *rad*
        max_iter: Maximum number of Newton updates.
    """

    tol: float = DEFAULT_TOL
    max_iter: int = DEFAULT_MAX_ITER

    def validate(self) -> KeplerConfig:
        """Check the configuration values.

        Returns:
            KeplerConfig: ``self``, for chaining.

        Raises:
            ValueError: If ``tol`` or ``max_iter`` is not positive.
        """
        if not self.tol > 0.0:
            raise ValueError(f"Kepler tolerance must be positive, got {self.tol}")
        if self.max_iter < 1:
            raise ValueError(f"Kepler max_iter must be at least 1, got {self.max_iter}")
        return self


class KeplerSolution(NamedTuple):
    """Result of :func:`solve_kepler`.

    ``converged`` is the tag: ``True`` means the step tolerance was met,
    ``False`` means the iteration cap was hit and ``eccentric_anomaly`` is
    the best estimate reached.

    Attributes:
        eccentric_anomaly: Eccentric anomaly. Units: *rad*
        converged: Whether the step tolerance was met.
        iterations: Number of Newton updates performed.
    """

    eccentric_anomaly: Array
    converged: Array
    iterations: Array


def kepler_residual(E: ArrayLike, e: ArrayLike, M: ArrayLike) -> Array:
    """Residual of Kepler's equation, ``E - e * sin(E) - M``.

    Args:
        E: Eccentric anomaly. Units: *rad*
        e: Eccentricity. Dimensionless.
        M: Mean anomaly. Units: *rad*

    Returns:
        Residual. Units: *rad*
    """
    _float = get_dtype()
    E = jnp.asarray(E, dtype=_float)
    e = jnp.asarray(e, dtype=_float)
    M = jnp.asarray(M, dtype=_float)
    return E - e * jnp.sin(E) - M


def _solve_scalar(M: Array, e: Array, tol: float, max_iter: int) -> KeplerSolution:
    def newton_step(E):
        return E - (E - e * jnp.sin(E) - M) / (1.0 - e * jnp.cos(E))

    def cond(carry):
        _, dE, i = carry
        return (jnp.abs(dE) >= tol) & (i < max_iter)

    def body(carry):
        E, _, i = carry
        E_next = newton_step(E)
        return E_next, E - E_next, i + 1

    # dE starts at inf so the first update always runs
    init = (M, jnp.full_like(M, jnp.inf), jnp.int32(0))
    E, dE, iterations = jax.lax.while_loop(cond, body, init)

    return KeplerSolution(
        eccentric_anomaly=E,
        converged=jnp.abs(dE) < tol,
        iterations=iterations,
    )


def solve_kepler(
    M: ArrayLike,
    e: ArrayLike,
    tol: float = DEFAULT_TOL,
    max_iter: int = DEFAULT_MAX_ITER,
) -> KeplerSolution:
    """Solve Kepler's equation for the eccentric anomaly.

    Newton-Raphson with ``E0 = M`` and update
    ``E_{n+1} = E_n - (E_n - e sin E_n - M) / (1 - e cos E_n)``.
    Stops when ``|E_n - E_{n+1}| < tol`` or after ``max_iter`` updates.
    The tolerance is raised to :func:`orbitjax.config.get_kepler_tolerance`
    when the configured dtype cannot resolve it.

    ``M`` and ``e`` broadcast against each other; array inputs are solved
    element-wise with ``jax.vmap`` and each element carries its own tag.

    Args:
        M: Mean anomaly. Units: *rad*
        e: Eccentricity, expected in ``[0, ECC_MAX]``. Dimensionless.
        tol: Step-size tolerance. Units: *rad*. Default: ``1e-5``
        max_iter: Maximum number of Newton updates. Default: ``100``

    Returns:
        KeplerSolution: Tagged eccentric anomaly estimate.

    Raises:
        ValueError: If *tol* is not positive or *max_iter* is less than 1.

    Examples:
        ```python
        from orbitjax.kepler import solve_kepler
        sol = solve_kepler(1.0, 0.3)
        E = sol.eccentric_anomaly
        ```
    """
    KeplerConfig(tol, max_iter).validate()

    _float = get_dtype()
    M, e = jnp.broadcast_arrays(jnp.asarray(M, dtype=_float), jnp.asarray(e, dtype=_float))
    tol = max(float(tol), get_kepler_tolerance())

    if M.ndim == 0:
        return _solve_scalar(M, e, tol, max_iter)

    shape = M.shape
    sol = jax.vmap(lambda m, ecc: _solve_scalar(m, ecc, tol, max_iter))(M.ravel(), e.ravel())
    return KeplerSolution(*(x.reshape(shape) for x in sol))
