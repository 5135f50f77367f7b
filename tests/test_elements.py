import math

import jax
import jax.numpy as jnp
import pytest

from orbitjax.constants import ECC_MAX
from orbitjax.elements import (
    DerivedAngles,
    OrbitalElements,
    PropagatedElements,
    clamp_eccentricity,
    derive_angles,
    propagate_elements,
)
from orbitjax.utils import wrap_degrees

_EARTH_LIKE = OrbitalElements(
    a0=1.00000261, e0=0.01671123, I0=-0.00001531,
    L0=100.46457166, Lp0=102.93768193, o0=0.0,
    ac=0.00000562, ec=-0.00004392, Ic=-0.01294668,
    Lc=35999.37244981, Lpc=0.32327364, oc=0.0,
)


# ──────────────────────────────────────────────
# Construction
# ──────────────────────────────────────────────

class TestOrbitalElements:
    def test_rates_default_to_zero(self):
        el = OrbitalElements(1.0, 0.1, 2.0, 3.0, 4.0, 5.0)
        assert (el.ac, el.ec, el.Ic, el.Lc, el.Lpc, el.oc) == (0.0,) * 6

    def test_from_table(self):
        rows = [[1.0, 0.1], [0.2, 0.01], [3.0, 0.3], [40.0, 400.0], [50.0, 0.5], [60.0, -0.6]]
        el = OrbitalElements.from_table(rows)
        assert float(el.a0) == pytest.approx(1.0)
        assert float(el.e0) == pytest.approx(0.2)
        assert float(el.L0) == pytest.approx(40.0)
        assert float(el.Lc) == pytest.approx(400.0)
        assert float(el.oc) == pytest.approx(-0.6)

    def test_from_table_bad_shape(self):
        with pytest.raises(ValueError, match="shape"):
            OrbitalElements.from_table([[1.0, 0.0]] * 5)

    def test_is_pytree(self):
        leaves = jax.tree_util.tree_leaves(_EARTH_LIKE)
        assert len(leaves) == 12


# ──────────────────────────────────────────────
# Propagation
# ──────────────────────────────────────────────

class TestPropagateElements:
    def test_epoch_values_at_zero(self):
        p = propagate_elements(_EARTH_LIKE, 0.0)
        assert float(p.a) == _EARTH_LIKE.a0
        assert float(p.e) == _EARTH_LIKE.e0
        assert float(p.I) == _EARTH_LIKE.I0
        assert float(p.L) == _EARTH_LIKE.L0
        assert float(p.Lp) == _EARTH_LIKE.Lp0
        assert float(p.o) == _EARTH_LIKE.o0

    def test_linear_one_century(self):
        p = propagate_elements(_EARTH_LIKE, 1.0)
        assert float(p.a) == pytest.approx(_EARTH_LIKE.a0 + _EARTH_LIKE.ac, abs=1e-12)
        assert float(p.e) == pytest.approx(_EARTH_LIKE.e0 + _EARTH_LIKE.ec, abs=1e-12)
        assert float(p.L) == pytest.approx(_EARTH_LIKE.L0 + _EARTH_LIKE.Lc, abs=1e-9)
        assert float(p.Lp) == pytest.approx(_EARTH_LIKE.Lp0 + _EARTH_LIKE.Lpc, abs=1e-12)

    def test_linear_backwards(self):
        p = propagate_elements(_EARTH_LIKE, -0.5)
        assert float(p.I) == pytest.approx(_EARTH_LIKE.I0 - 0.5 * _EARTH_LIKE.Ic, abs=1e-12)

    def test_angles_not_wrapped(self):
        p = propagate_elements(_EARTH_LIKE, 1.0)
        assert float(p.L) > 360.0

    def test_eccentricity_clamped_high(self):
        el = OrbitalElements(1.0, 0.85, 0.0, 0.0, 0.0, 0.0, ec=0.1)
        p = propagate_elements(el, 2.0)
        assert float(p.e) == ECC_MAX

    def test_eccentricity_clamped_low(self):
        el = OrbitalElements(1.0, 0.01, 0.0, 0.0, 0.0, 0.0, ec=-0.1)
        p = propagate_elements(el, 1.0)
        assert float(p.e) == 0.0

    def test_epoch_eccentricity_clamped(self):
        el = OrbitalElements(1.0, 1.5, 0.0, 0.0, 0.0, 0.0)
        assert float(propagate_elements(el, 0.0).e) == ECC_MAX

    def test_clamp_eccentricity(self):
        assert float(clamp_eccentricity(-0.2)) == 0.0
        assert float(clamp_eccentricity(0.5)) == 0.5
        assert float(clamp_eccentricity(0.95)) == ECC_MAX

    def test_returns_propagated_elements(self):
        assert isinstance(propagate_elements(_EARTH_LIKE, 0.1), PropagatedElements)

    def test_jit_compatible(self):
        p_eager = propagate_elements(_EARTH_LIKE, 0.245)
        p_jit = jax.jit(propagate_elements)(_EARTH_LIKE, 0.245)
        for x, y in zip(p_eager, p_jit):
            assert jnp.allclose(x, y)

    def test_vmap_over_time(self):
        T = jnp.linspace(-1.0, 1.0, 5)
        p = jax.vmap(propagate_elements, in_axes=(None, 0))(_EARTH_LIKE, T)
        assert p.a.shape == (5,)
        assert jnp.allclose(p.L, _EARTH_LIKE.L0 + _EARTH_LIKE.Lc * T)


# ──────────────────────────────────────────────
# Angle derivation
# ──────────────────────────────────────────────

class TestDeriveAngles:
    def _propagated(self, L, Lp, o=0.0, I=0.0):
        return PropagatedElements(
            a=jnp.asarray(1.0), e=jnp.asarray(0.1), I=jnp.asarray(I),
            L=jnp.asarray(L), Lp=jnp.asarray(Lp), o=jnp.asarray(o),
        )

    def test_mean_anomaly(self):
        d = derive_angles(self._propagated(100.0, 40.0))
        assert float(d.M) == pytest.approx(math.radians(60.0), abs=1e-12)

    def test_mean_anomaly_wrapped_in_degrees(self):
        d = derive_angles(self._propagated(770.0, 20.0))
        assert float(d.M) == pytest.approx(math.radians(30.0), abs=1e-12)

    def test_mean_anomaly_keeps_sign(self):
        # fmod(-370, 360) = -10, not the floored 350
        d = derive_angles(self._propagated(10.0, 380.0))
        assert float(d.M) == pytest.approx(math.radians(-10.0), abs=1e-12)

    def test_mean_anomaly_negative_small(self):
        d = derive_angles(self._propagated(100.46, 102.94))
        assert float(d.M) == pytest.approx(math.radians(-2.48), abs=1e-12)

    def test_argument_of_periapsis(self):
        d = derive_angles(self._propagated(0.0, 102.94, o=-11.26))
        assert float(d.wp) == pytest.approx(math.radians(114.2), abs=1e-12)

    def test_argument_of_periapsis_not_wrapped(self):
        d = derive_angles(self._propagated(0.0, 400.0, o=0.0))
        assert float(d.wp) == pytest.approx(math.radians(400.0), abs=1e-12)

    def test_element_angles_converted(self):
        d = derive_angles(self._propagated(725.0, 90.0, o=45.0, I=10.0))
        assert float(d.I) == pytest.approx(math.radians(10.0), abs=1e-12)
        assert float(d.L) == pytest.approx(math.radians(725.0), abs=1e-12)
        assert float(d.Lp) == pytest.approx(math.radians(90.0), abs=1e-12)
        assert float(d.o) == pytest.approx(math.radians(45.0), abs=1e-12)

    def test_returns_derived_angles(self):
        assert isinstance(derive_angles(self._propagated(1.0, 2.0)), DerivedAngles)

    def test_mean_anomaly_bounded(self):
        for L in (-1000.0, -359.9, 0.0, 359.9, 1e5):
            d = derive_angles(self._propagated(L, 0.0))
            assert -2.0 * math.pi < float(d.M) < 2.0 * math.pi


class TestAngleHelpers:
    def test_wrap_degrees(self):
        assert float(wrap_degrees(370.0)) == pytest.approx(10.0)
        assert float(wrap_degrees(-370.0)) == pytest.approx(-10.0)
        assert float(wrap_degrees(360.0)) == 0.0
