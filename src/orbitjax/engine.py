"""Orbital state evaluation and the tick-driven simulation loop.

:func:`state_from_elements` is the numeric core: a pure JAX composition of

1. time conversion (instant -> Julian century ``T``),
2. linear element propagation,
3. the two-stage angle derivation (degree-space wrap, then radians),
4. the bounded Kepler solver,
5. the orbital-plane to ecliptic rotation.

It is deterministic in ``(elements, instant_ms)`` and compatible with
``jax.jit`` and ``jax.vmap``.  Steps 2-5 are :func:`state_at_century`,
which :class:`Simulation` compiles; the instant is reduced to ``T`` on the
host first.  :func:`evaluate` adds the validity check on
the simulated instant and returns ``None`` instead of a state for non-finite
instants.

:class:`Simulation` is the orchestration layer.  It owns the
:class:`~orbitjax.clock.SimulationClock`, advances it once per tick,
evaluates the engine at the instant derived from that tick's accumulator,
and publishes the resulting immutable :class:`StateVector` as
:attr:`Simulation.latest`.  Render loops read ``latest`` and nothing else.
"""

from __future__ import annotations

import datetime
import logging
import math
import time
from typing import Callable, NamedTuple

import jax
import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike

from orbitjax.clock import SimulationClock
from orbitjax.elements import OrbitalElements, derive_angles, propagate_elements
from orbitjax.frames import position_orbital_plane, position_orbital_to_ecliptic
from orbitjax.kepler import KeplerConfig, solve_kepler
from orbitjax.time import datetime_to_instant_ms, julian_century_from_instant, parse_instant_ms

logger = logging.getLogger(__name__)


class StateVector(NamedTuple):
    """Snapshot of a body's state at one simulated instant.

    Attributes:
        position: Ecliptic position ``[x, y]``. Units: *AU*. Shape ``(2,)``.
        a: Semi-major axis. Units: *AU*
        e: Eccentricity. Dimensionless.
        I: Inclination. Units: *rad*
        L: Mean longitude. Units: *rad*
        Lp: Longitude of perihelion. Units: *rad*
        o: Longitude of the ascending node. Units: *rad*
        wp: Argument of periapsis. Units: *rad*
        M: Mean anomaly. Units: *rad*
        E: Eccentric anomaly. Units: *rad*
        converged: Whether the Kepler solver met its tolerance. When ``False``
            the position is computed from the solver's best estimate.
        iterations: Kepler solver iterations used.
    """

    position: Array
    a: Array
    e: Array
    I: Array
    L: Array
    Lp: Array
    o: Array
    wp: Array
    M: Array
    E: Array
    converged: Array
    iterations: Array


def state_at_century(
    elements: OrbitalElements,
    T: ArrayLike,
    config: KeplerConfig = KeplerConfig(),
) -> StateVector:
    """Evaluate the orbital state of a body at Julian century ``T``.

    The numeric core of :func:`state_from_elements`.  Taking ``T`` rather
    than a Unix instant keeps time resolution under ``jax.jit`` in float32:
    ``T`` is small, whereas a millisecond instant only resolves to minutes
    once it is cast to float32 at the JIT boundary.

    Args:
        elements (OrbitalElements): Epoch elements and rates.
        T (ArrayLike): Julian centuries from the element epoch.
        config (KeplerConfig): Kepler solver stopping criteria. Static under
            ``jax.jit`` (pass with ``static_argnames=("config",)``).

    Returns:
        StateVector: State at ``T``.

    Raises:
        ValueError: If *config* is invalid.
    """
    config.validate()
    propagated = propagate_elements(elements, T)
    angles = derive_angles(propagated)

    sol = solve_kepler(angles.M, propagated.e, config.tol, config.max_iter)
    E = sol.eccentric_anomaly

    r_orbital = position_orbital_plane(propagated.a, propagated.e, E)
    position = position_orbital_to_ecliptic(r_orbital, angles.wp, angles.I, angles.o)

    return StateVector(
        position=position,
        a=propagated.a,
        e=propagated.e,
        I=angles.I,
        L=angles.L,
        Lp=angles.Lp,
        o=angles.o,
        wp=angles.wp,
        M=angles.M,
        E=E,
        converged=sol.converged,
        iterations=sol.iterations,
    )


def state_from_elements(
    elements: OrbitalElements,
    instant_ms: ArrayLike,
    config: KeplerConfig = KeplerConfig(),
) -> StateVector:
    """Evaluate the orbital state of a body at a Unix millisecond instant.

    Performs no validity check on ``instant_ms``; a non-finite instant gives
    a non-finite state.  Use :func:`evaluate` at the UI boundary.

    Args:
        elements (OrbitalElements): Epoch elements and rates.
        instant_ms (ArrayLike): Simulated instant, Unix timestamp. Units: *ms*
        config (KeplerConfig): Kepler solver stopping criteria. Static under
            ``jax.jit`` (pass with ``static_argnames=("config",)``).

    Returns:
        StateVector: State at ``instant_ms``.

    Raises:
        ValueError: If *config* is invalid.

    Examples:
        ```python
        import jax
        from orbitjax.engine import state_from_elements
        from orbitjax.planets import planet_elements
        state = state_from_elements(planet_elements("earth"), 1.7e12)
        state_jit = jax.jit(state_from_elements, static_argnames=("config",))
        ```
    """
    return state_at_century(elements, julian_century_from_instant(instant_ms), config)


def evaluate(
    elements: OrbitalElements,
    instant_ms: float,
    config: KeplerConfig = KeplerConfig(),
) -> StateVector | None:
    """Evaluate the orbital state, rejecting invalid simulated instants.

    Args:
        elements (OrbitalElements): Epoch elements and rates.
        instant_ms (float): Simulated instant, Unix timestamp. Units: *ms*
        config (KeplerConfig): Kepler solver stopping criteria.

    Returns:
        The state at ``instant_ms``, or ``None`` if ``instant_ms`` is not
        finite (for example when the base date could not be parsed).

    Raises:
        ValueError: If *config* is invalid, whether or not the instant is
            valid.
    """
    config.validate()
    if not math.isfinite(float(instant_ms)):
        return None
    return state_from_elements(elements, instant_ms, config)


BaseDate = str | datetime.datetime | float


def _to_instant_ms(base_date: BaseDate) -> float:
    if isinstance(base_date, str):
        return parse_instant_ms(base_date)
    if isinstance(base_date, datetime.datetime):
        return datetime_to_instant_ms(base_date)
    return float(base_date)


class Simulation:
    """Tick-driven orchestration of the clock and the state engine.

    Owns exactly one :class:`~orbitjax.clock.SimulationClock`.  Each call to
    :meth:`tick` advances the clock, derives the simulated instant from the
    advanced accumulator and evaluates the engine.  A valid result replaces
    :attr:`latest`; an invalid instant leaves the previous snapshot in place.

    Args:
        base_date: Instant the simulation starts from: an ISO 8601 string,
            a ``datetime`` or a Unix timestamp in ms.  An unparsable string
            is accepted; ticks then publish nothing until the base date is
            replaced.
        config: Kepler solver stopping criteria.
        jit: Compile the engine with ``jax.jit``. The compiled function bakes
            in the dtype active at the first tick.

    Raises:
        ValueError: If *config* is invalid.

    Examples:
        ```python
        from orbitjax.engine import Simulation
        from orbitjax.planets import planet_elements
        sim = Simulation("2024-06-15")
        state = sim.tick(planet_elements("mars"), dt=1 / 60, speed=6)
        ```
    """

    def __init__(
        self,
        base_date: BaseDate,
        config: KeplerConfig = KeplerConfig(),
        jit: bool = True,
    ) -> None:
        self._config = config.validate()
        self._clock = SimulationClock()
        self._base_instant_ms = _to_instant_ms(base_date)
        self._latest: StateVector | None = None
        self._last_dt = 0.0
        if jit:
            self._state_fn = jax.jit(state_at_century, static_argnames=("config",))
        else:
            self._state_fn = state_at_century

    @property
    def latest(self) -> StateVector | None:
        """Most recently published snapshot, or ``None`` before the first valid tick."""
        return self._latest

    @property
    def clock(self) -> SimulationClock:
        """Current simulation clock."""
        return self._clock

    @property
    def base_instant_ms(self) -> float:
        """Base instant, Unix timestamp in ms. ``nan`` if the base date was unparsable."""
        return self._base_instant_ms

    @property
    def simulated_instant_ms(self) -> float:
        """Current simulated instant, Unix timestamp in ms."""
        return self._clock.simulated_instant_ms(self._base_instant_ms)

    @property
    def last_dt(self) -> float:
        """Real-time delta of the most recent tick. Units: *s*"""
        return self._last_dt

    def set_base_date(self, base_date: BaseDate) -> None:
        """Replace the base instant and reset the elapsed simulated time.

        Args:
            base_date: ISO 8601 string, ``datetime`` or Unix timestamp in ms.
        """
        self._base_instant_ms = _to_instant_ms(base_date)
        self._clock = self._clock.reset()
        logger.debug("Base instant set to %s ms", self._base_instant_ms)

    def tick(self, elements: OrbitalElements, dt: float, speed: float) -> StateVector | None:
        """Advance the simulation by one tick.

        Args:
            elements (OrbitalElements): Current element values. May differ
                from the previous tick.
            dt (float): Measured real time since the previous tick. Units: *s*
            speed (float): Speed exponent; simulated time runs at
                ``sign(speed) * 10**|speed|`` times real time.

        Returns:
            The latest snapshot: the new state, or the previous one if this
            tick's simulated instant is invalid.
        """
        self._last_dt = float(dt)
        self._clock = self._clock.tick(dt, speed)
        instant_ms = self.simulated_instant_ms

        if not math.isfinite(instant_ms):
            logger.debug("Invalid simulated instant, keeping previous state")
            return self._latest

        T = julian_century_from_instant(instant_ms)
        state = self._state_fn(elements, T, config=self._config)
        if not bool(state.converged):
            logger.warning(
                "Kepler solver did not converge after %d iterations (M=%.6f rad, e=%.6f); "
                "position has degraded accuracy",
                int(state.iterations), float(state.M), float(state.e),
            )
        self._latest = state
        return state

    def run(
        self,
        get_inputs: Callable[[], tuple[OrbitalElements, float]],
        rate_hz: float = 60.0,
        max_ticks: int | None = None,
        on_tick: Callable[[StateVector | None], None] | None = None,
    ) -> StateVector | None:
        """Run the tick loop at a fixed target rate.

        The real-time delta passed to each tick is measured with
        ``time.monotonic``, not assumed from ``rate_hz``.

        Args:
            get_inputs: Called once per tick; returns ``(elements, speed)``.
            rate_hz: Target tick rate. Units: *Hz*. Default: ``60.0``
            max_ticks: Stop after this many ticks. Runs until interrupted
                when ``None``.
            on_tick: Called with the latest snapshot after every tick.

        Returns:
            The latest snapshot when the loop ends.

        Raises:
            ValueError: If *rate_hz* is not positive.
        """
        if not rate_hz > 0.0:
            raise ValueError(f"rate_hz must be positive, got {rate_hz}")

        period = 1.0 / rate_hz
        last = time.monotonic()
        ticks = 0
        logger.info("Starting simulation loop at %.1f Hz", rate_hz)

        while max_ticks is None or ticks < max_ticks:
            remaining = last + period - time.monotonic()
            if remaining > 0.0:
                time.sleep(remaining)

            now = time.monotonic()
            dt = now - last
            last = now

            elements, speed = get_inputs()
            snapshot = self.tick(elements, dt, speed)
            if on_tick is not None:
                on_tick(snapshot)
            ticks += 1

        logger.info("Simulation loop stopped after %d ticks", ticks)
        return self._latest
