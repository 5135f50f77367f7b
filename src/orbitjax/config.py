"""Module-wide floating-point precision configuration.

Provides ``set_dtype`` and ``get_dtype`` to control the float dtype used
throughout orbitjax.  The default is ``jnp.float32`` for GPU/TPU
compatibility.  Switching to ``jnp.float64`` automatically enables
JAX's 64-bit mode (``jax_enable_x64``).

Call ``set_dtype`` **before** any JIT compilation, just like JAX's own
``jax.config.update("jax_enable_x64", True)``.  Under JIT, ``get_dtype()``
runs during tracing and its result is baked into the compiled program.

Precision note:
    Unix millisecond instants are around ``1e12``, which float32 resolves
    only to about two minutes.  Python float instants are therefore reduced
    to the element-epoch day count and Julian century in float64 before the
    cast (see :func:`orbitjax.time.julian_day`), and :class:`orbitjax.Simulation`
    passes the century ``T`` into its compiled core.  In float32 ``T``
    resolves to under a minute for present-day dates.  Arrays of instants
    are cast as given; use float64 when evaluating them at fine steps.
"""

from __future__ import annotations

import jax
import jax.numpy as jnp

_VALID_DTYPES = (jnp.float16, jnp.bfloat16, jnp.float32, jnp.float64)

_dtype = jnp.float32


def set_dtype(dtype) -> None:
    """Set the float dtype used for element, angle and position arrays.

    Eager calls pick up the new dtype immediately.  A
    :class:`orbitjax.Simulation` compiles its engine on the first tick, so
    set the dtype before ticking.  ``jnp.float64`` also turns on
    ``jax_enable_x64``.

    Args:
        dtype: One of ``jnp.float16``, ``jnp.bfloat16``, ``jnp.float32``,
            or ``jnp.float64``.

    Raises:
        ValueError: If *dtype* is not a supported float type.
    """
    global _dtype
    if dtype not in _VALID_DTYPES:
        raise ValueError(
            f"Unsupported dtype {dtype}. Must be one of: "
            f"jnp.float16, jnp.bfloat16, jnp.float32, jnp.float64"
        )
    if dtype == jnp.float64:
        jax.config.update("jax_enable_x64", True)
    _dtype = dtype


def get_dtype():
    """Return the current module-wide float dtype.

    Returns:
        The dtype arrays are coerced to (``jnp.float32`` unless changed).
    """
    return _dtype


def get_kepler_tolerance() -> float:
    """Return the smallest Kepler solver step tolerance the dtype can resolve.

    The solver stops once successive eccentric anomaly estimates differ by
    less than its tolerance.  Below float32 the default ``1e-5`` rad cannot
    be met reliably, so callers clamp their tolerance to this floor:

    - ``float16``:  1e-2 rad
    - ``bfloat16``: 1e-2 rad
    - ``float32``:  1e-6 rad
    - ``float64``:  1e-12 rad

    Returns:
        float: Minimum usable tolerance in radians.
    """
    if _dtype == jnp.float64:
        return 1e-12
    if _dtype == jnp.float32:
        return 1e-6
    # float16 and bfloat16
    return 1e-2
