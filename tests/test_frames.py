import math

import jax
import jax.numpy as jnp
import pytest

from orbitjax.frames import (
    flip_y,
    position_orbital_plane,
    position_orbital_to_ecliptic,
    rotation_orbital_to_ecliptic,
)


def _reference_ecliptic(xp, yp, wp, I, o):
    """Rotation written out term by term with the math module."""
    x = xp * (math.cos(wp) * math.cos(o) - math.sin(wp) * math.sin(o) * math.cos(I)) \
        + yp * (-math.sin(wp) * math.cos(o) - math.cos(wp) * math.sin(o) * math.cos(I))
    y = xp * (math.cos(wp) * math.sin(o) + math.sin(wp) * math.cos(o) * math.cos(I)) \
        + yp * (-math.sin(wp) * math.sin(o) + math.cos(wp) * math.cos(o) * math.cos(I))
    return x, y


class TestPositionOrbitalPlane:
    def test_periapsis(self):
        r = position_orbital_plane(2.0, 0.25, 0.0)
        assert jnp.allclose(r, jnp.array([1.5, 0.0]), atol=1e-15)

    def test_apoapsis(self):
        r = position_orbital_plane(2.0, 0.25, math.pi)
        assert jnp.allclose(r, jnp.array([-2.5, 0.0]), atol=1e-12)

    def test_quarter(self):
        r = position_orbital_plane(1.0, 0.6, math.pi / 2)
        assert jnp.allclose(r, jnp.array([-0.6, 0.8]), atol=1e-12)

    def test_circular_radius_equals_a(self):
        E = jnp.linspace(-jnp.pi, jnp.pi, 50)
        r = jax.vmap(position_orbital_plane, in_axes=(None, None, 0))(3.7, 0.0, E)
        assert jnp.allclose(jnp.linalg.norm(r, axis=1), 3.7, atol=1e-12)

    def test_radius_within_apsides(self):
        E = jnp.linspace(-jnp.pi, jnp.pi, 73)
        for e in (0.0, 0.1, 0.5, 0.9):
            r = jax.vmap(position_orbital_plane, in_axes=(None, None, 0))(1.5, e, E)
            dist = jnp.linalg.norm(r, axis=1)
            assert float(jnp.min(dist)) >= 1.5 * (1 - e) - 1e-12
            assert float(jnp.max(dist)) <= 1.5 * (1 + e) + 1e-12

    def test_shape(self):
        assert position_orbital_plane(1.0, 0.1, 0.3).shape == (2,)


class TestRotationOrbitalToEcliptic:
    def test_identity(self):
        R = rotation_orbital_to_ecliptic(0.0, 0.0, 0.0)
        assert jnp.allclose(R, jnp.eye(2), atol=1e-15)

    def test_planar_orbit_rotates_by_wp_plus_o(self):
        wp, o = 0.7, -0.3
        R = rotation_orbital_to_ecliptic(wp, 0.0, o)
        c, s = math.cos(wp + o), math.sin(wp + o)
        assert jnp.allclose(R, jnp.array([[c, -s], [s, c]]), atol=1e-12)

    def test_planar_rotation_is_orthogonal(self):
        R = rotation_orbital_to_ecliptic(1.1, 0.0, 2.3)
        assert jnp.allclose(R @ R.T, jnp.eye(2), atol=1e-12)

    def test_polar_orbit_collapses_onto_node_line(self):
        # With I = 90 deg, orbital-plane y maps out of the ecliptic
        R = rotation_orbital_to_ecliptic(math.pi / 2, math.pi / 2, 0.0)
        r = R @ jnp.array([1.0, 0.0])
        assert jnp.allclose(r, jnp.array([0.0, 0.0]), atol=1e-12)

    def test_matches_reference(self):
        for wp, I, o in ((0.3, 0.2, 1.0), (2.0, 1.2, -0.5), (-1.0, 3.0, 4.0)):
            r = position_orbital_to_ecliptic(jnp.array([0.8, -0.4]), wp, I, o)
            x, y = _reference_ecliptic(0.8, -0.4, wp, I, o)
            assert float(r[0]) == pytest.approx(x, abs=1e-12)
            assert float(r[1]) == pytest.approx(y, abs=1e-12)


class TestPositionOrbitalToEcliptic:
    def test_inclined_projection_never_exceeds_radius(self):
        r_orb = position_orbital_plane(1.0, 0.3, 2.0)
        r = position_orbital_to_ecliptic(r_orb, 0.4, 0.9, 1.3)
        assert float(jnp.linalg.norm(r)) <= float(jnp.linalg.norm(r_orb)) + 1e-12

    def test_jit_compatible(self):
        r_orb = jnp.array([0.5, 0.5])
        r_eager = position_orbital_to_ecliptic(r_orb, 0.1, 0.2, 0.3)
        r_jit = jax.jit(position_orbital_to_ecliptic)(r_orb, 0.1, 0.2, 0.3)
        assert jnp.allclose(r_eager, r_jit)

    def test_differentiable_wrt_angles(self):
        def x_of_o(o):
            return position_orbital_to_ecliptic(jnp.array([1.0, 0.0]), 0.0, 0.0, o)[0]

        # x = cos(o) for a planar orbit with wp = 0
        assert float(jax.grad(x_of_o)(0.5)) == pytest.approx(-math.sin(0.5), abs=1e-12)


def test_flip_y():
    assert jnp.allclose(flip_y(jnp.array([1.5, -2.0])), jnp.array([1.5, 2.0]))
