# /// script
# requires-python = ">=3.11"
# dependencies = ["typer>=0.9.0", "orbitjax"]
#
# [tool.uv.sources]
# orbitjax = { path = ".." }
# ///
"""Run the orbit simulation headless and print the state panel.

Drives :class:`orbitjax.Simulation` with a fixed-rate tick loop for a planet
preset (or hand-entered elements) and prints the same fields a graphical
front end shows: propagated elements, angles, position and current date.

Requires orbitjax to be installed (``uv pip install -e .`` from the repo root).

Usage:
    uv run examples/simulate.py [OPTIONS]

Examples:
    # Earth at one simulated day per real second, 2 seconds of ticks
    uv run examples/simulate.py --planet earth --speed 4.94 --ticks 120

    # Mars running backwards, printing every 30th tick
    uv run examples/simulate.py --planet mars --speed -6 --every 30

    # Hand-entered elements override the preset
    uv run examples/simulate.py --a0 2.5 --e0 0.6 --lp0 45 --ticks 10
"""

import logging
import math
import sys
from typing import Annotated

import jax.numpy as jnp
import typer

from orbitjax import (
    AU,
    PLANET_NAMES,
    OrbitalElements,
    Simulation,
    StateVector,
    instant_ms_to_datetime,
    planet_elements,
    set_dtype,
)

set_dtype(jnp.float64)  # Must be before any JIT compilation


def format_panel(state: StateVector, instant_ms: float, dt: float) -> str:
    """Text panel for one snapshot."""
    date = instant_ms_to_datetime(instant_ms)
    date_text = date.strftime("%A, %B %d, %Y") if date is not None else "Invalid date"
    x, y = (float(v) for v in state.position)
    flag = "" if bool(state.converged) else "  (Kepler solver did not converge)"
    return "\n".join([
        f"Date: {date_text}   dt: {dt:.4f} s{flag}",
        f"  Semimajor axis: {float(state.a)} AU ({float(state.a) * AU:.6e} m)",
        f"  Eccentricity: {float(state.e)}",
        f"  Inclination: {float(state.I)} rad",
        f"  Mean longitude: {float(state.L)} rad",
        f"  Longitude of perihelion: {float(state.Lp)} rad",
        f"  Longitude of ascending node: {float(state.o)} rad",
        f"  Argument of periapsis: {float(state.wp)} rad",
        f"  Mean anomaly: {float(state.M)} rad",
        f"  Eccentric anomaly: {float(state.E)} rad",
        f"  X: {x} AU",
        f"  Y: {y} AU",
    ])


def main(
    planet: Annotated[str, typer.Option(help=f"Preset: {', '.join(PLANET_NAMES)}")] = "earth",
    date: Annotated[str, typer.Option(help="Base date (ISO 8601)")] = "2000-01-01",
    speed: Annotated[float, typer.Option(help="Speed exponent s; time runs at sign(s)*10^|s| x real time")] = 5.0,
    ticks: Annotated[int, typer.Option(help="Number of ticks to run")] = 60,
    rate: Annotated[float, typer.Option(help="Tick rate in Hz")] = 60.0,
    every: Annotated[int, typer.Option(help="Print every N-th tick")] = 10,
    a0: Annotated[float | None, typer.Option(help="Semi-major axis override (AU)")] = None,
    e0: Annotated[float | None, typer.Option(help="Eccentricity override")] = None,
    i0: Annotated[float | None, typer.Option(help="Inclination override (deg)")] = None,
    l0: Annotated[float | None, typer.Option(help="Mean longitude override (deg)")] = None,
    lp0: Annotated[float | None, typer.Option(help="Longitude of perihelion override (deg)")] = None,
    o0: Annotated[float | None, typer.Option(help="Longitude of ascending node override (deg)")] = None,
    verbose: Annotated[bool, typer.Option(help="Enable debug logging")] = False,
) -> None:
    """Simulate a body's orbit and print its state."""
    logging.basicConfig(level=logging.DEBUG if verbose else logging.INFO)

    try:
        elements = planet_elements(planet)
    except ValueError as err:
        print(f"ERROR: {err}")
        sys.exit(1)

    overrides = {"a0": a0, "e0": e0, "I0": i0, "L0": l0, "Lp0": lp0, "o0": o0}
    elements = elements._replace(**{k: v for k, v in overrides.items() if v is not None})

    sim = Simulation(date)
    if not math.isfinite(sim.base_instant_ms):
        print(f"WARNING: could not parse date {date!r}; no state will be published")

    count = 0

    def get_inputs() -> tuple[OrbitalElements, float]:
        return elements, speed

    def on_tick(state: StateVector | None) -> None:
        nonlocal count
        count += 1
        if state is not None and (count % max(every, 1) == 0 or count == ticks):
            print(format_panel(state, sim.simulated_instant_ms, sim.last_dt))

    sim.run(get_inputs, rate_hz=rate, max_ticks=ticks, on_tick=on_tick)
    print("\nDone.")


if __name__ == "__main__":
    typer.run(main)
