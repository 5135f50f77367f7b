"""Simulated time accumulation.

The simulation clock turns measured real-time deltas into simulated elapsed
time.  The speed setting is an exponent ``s``: simulated time runs at
``sign(s) * 10**|s|`` times real time, so ``s = 0`` freezes the simulation
and negative values run it backwards.

The clock is plain Python (it is advanced once per UI tick, outside any
traced computation).  :class:`SimulationClock` is immutable; :meth:`tick`
returns the advanced clock, which the orchestration layer stores.
"""

from __future__ import annotations

import math
from typing import NamedTuple


def rate_multiplier(speed: float) -> float:
    """Simulated-to-real time ratio for a speed exponent.

    Args:
        speed (float): Speed exponent ``s``.

    Returns:
        float: ``sign(s) * 10**|s|``; ``0.0`` when ``s`` is zero.
    """
    speed = float(speed)
    if speed == 0.0:
        return 0.0
    return math.copysign(10.0 ** abs(speed), speed)


class SimulationClock(NamedTuple):
    """Accumulated simulated time.

    Attributes:
        elapsed_ms: Simulated time elapsed since the base instant. Signed.
            Units: *ms*
    """

    elapsed_ms: float = 0.0

    def tick(self, dt: float, speed: float) -> SimulationClock:
        """Advance the clock by one tick.

        Args:
            dt (float): Measured real time since the previous tick. Units: *s*
            speed (float): Speed exponent ``s``.

        Returns:
            SimulationClock: Clock with
            ``elapsed_ms + rate_multiplier(speed) * dt * 1000``.
        """
        return SimulationClock(self.elapsed_ms + rate_multiplier(speed) * float(dt) * 1000.0)

    def reset(self) -> SimulationClock:
        """Return a clock with no elapsed simulated time."""
        return SimulationClock(0.0)

    def simulated_instant_ms(self, base_instant_ms: float) -> float:
        """Simulated instant for a base instant.

        Args:
            base_instant_ms (float): Unix timestamp the simulation started from.
                Units: *ms*

        Returns:
            float: ``elapsed_ms + base_instant_ms``. Non-finite when the base
            instant is.
        """
        return self.elapsed_ms + float(base_instant_ms)
