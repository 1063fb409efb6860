"""
Kepler Element Conversion Tests
===============================

Tests for the element-to-state transform and its inverse.
"""
import numpy as np
import pytest

from orbprop.src.calc.kepler import (
    cartesian_to_keplerian,
    keplerian_to_cartesian,
    orbital_period,
    specific_energy,
    to_state_vector,
)
from orbprop.src.errors import InvalidOrbitGeometry
from orbprop.src.model.mission import KeplerElements, StateVector


def vis_viva_speed_squared(r, a, mu):
    return mu * (2.0 / r - 1.0 / a)


class TestToStateVector:
    """Tests for to_state_vector."""

    def test_circular_equatorial_reduces_to_closed_form(self, leo_circular_elements, mu):
        """e=0, i=0, nu=0 gives r=(a,0,0), v=(0,sqrt(mu/a),0)."""
        a = leo_circular_elements.semi_major_axis
        position, velocity = to_state_vector(leo_circular_elements, mu)

        assert np.allclose(position, [a, 0.0, 0.0], rtol=0, atol=1e-6)
        assert np.allclose(velocity, [0.0, np.sqrt(mu / a), 0.0], rtol=0, atol=1e-9)

    def test_eccentric_equatorial_at_periapsis(self, mu):
        """a=7000 km, e=0.1 puts periapsis at 6300 km with vis-viva speed."""
        elements = KeplerElements(semi_major_axis=7.0e6, eccentricity=0.1)
        position, velocity = to_state_vector(elements, mu)

        assert np.allclose(position, [6.3e6, 0.0, 0.0], rtol=1e-12, atol=1e-6)

        v_y = np.sqrt(vis_viva_speed_squared(6.3e6, 7.0e6, mu))
        assert np.allclose(velocity, [0.0, v_y, 0.0], rtol=1e-12, atol=1e-9)

        speed2 = np.dot(velocity, velocity)
        assert speed2 == pytest.approx(vis_viva_speed_squared(np.linalg.norm(position), 7.0e6, mu), rel=1e-6)

    def test_apoapsis_velocity_is_retrograde_in_y(self, mu):
        """At nu=pi the spacecraft sits on -x moving along -y."""
        elements = KeplerElements(semi_major_axis=7.0e6, eccentricity=0.1, true_anomaly=np.pi)
        position, velocity = to_state_vector(elements, mu)

        assert position[0] == pytest.approx(-7.7e6, rel=1e-12)
        assert velocity[1] == pytest.approx(-np.sqrt(vis_viva_speed_squared(7.7e6, 7.0e6, mu)), rel=1e-12)
        assert abs(velocity[0]) < 1e-9

    def test_matches_horizons_reference_state(self, iss_elements, iss_state, mu):
        """ISS elements reproduce the JPL Horizons state."""
        expected_position, expected_velocity = iss_state
        position, velocity = to_state_vector(iss_elements, mu)

        assert np.allclose(position, expected_position, rtol=0, atol=0.5)
        assert np.allclose(velocity, expected_velocity, rtol=0, atol=0.5e-3)

    @pytest.mark.parametrize("elements", [
        KeplerElements(7.0e6, 0.0, 0.3, 1.0, 0.0, 2.0),
        KeplerElements(2.6e7, 0.74, np.radians(63.4), np.radians(300.0), np.radians(270.0), np.radians(170.0)),
        KeplerElements(4.2164e7, 0.0002, 0.001, 5.0, 1.2, 4.0),
        KeplerElements(1.0e7, 0.3, np.pi, 0.5, 0.25, 3.0),
    ])
    def test_radius_and_vis_viva(self, elements, mu):
        """|r| equals p/(1+e cos nu) and the speed satisfies vis-viva."""
        position, velocity = to_state_vector(elements, mu)

        p = elements.semi_latus_rectum
        r_formula = p / (1 + elements.eccentricity * np.cos(elements.true_anomaly))
        r = np.linalg.norm(position)

        assert r == pytest.approx(r_formula, rel=1e-12)
        assert np.dot(velocity, velocity) == pytest.approx(
            vis_viva_speed_squared(r, elements.semi_major_axis, mu), rel=1e-10)

    def test_angular_momentum(self, eccentric_elements, mu):
        """h = r x v has magnitude sqrt(mu p) and the orientation set by (i, Omega)."""
        position, velocity = to_state_vector(eccentric_elements, mu)
        h_vec = np.cross(position, velocity)

        i = eccentric_elements.inclination
        Omega = eccentric_elements.longitude_of_ascending_node
        expected_direction = np.array([np.sin(i) * np.sin(Omega), -np.sin(i) * np.cos(Omega), np.cos(i)])

        assert np.linalg.norm(h_vec) == pytest.approx(np.sqrt(mu * eccentric_elements.semi_latus_rectum), rel=1e-12)
        assert np.allclose(h_vec / np.linalg.norm(h_vec), expected_direction, atol=1e-12)
        assert abs(np.dot(position, h_vec)) / (np.linalg.norm(position) * np.linalg.norm(h_vec)) < 1e-12

    def test_hyperbolic_elements(self, mu):
        """Negative a with e>1 keeps a positive semi-latus rectum."""
        elements = KeplerElements(semi_major_axis=-7.0e6, eccentricity=1.5)
        position, velocity = to_state_vector(elements, mu)

        assert np.linalg.norm(position) == pytest.approx(3.5e6, rel=1e-12)
        assert np.dot(velocity, velocity) == pytest.approx(vis_viva_speed_squared(3.5e6, -7.0e6, mu), rel=1e-10)

    def test_returns_state_vector(self, iss_elements, mu):
        state = to_state_vector(iss_elements, mu)

        assert isinstance(state, StateVector)
        assert state.as_array().shape == (6,)

    def test_keplerian_to_cartesian_wrapper(self, iss_elements, mu):
        r, v = keplerian_to_cartesian(*iss_elements)
        state = to_state_vector(iss_elements, mu)

        assert np.array_equal(r, state.position)
        assert np.array_equal(v, state.velocity)


class TestInvalidGeometry:
    """to_state_vector fails eagerly on non-physical input."""

    @pytest.mark.parametrize("bad_mu", [0.0, -398600.4418e9, np.nan, np.inf])
    def test_non_positive_mu(self, iss_elements, bad_mu):
        with pytest.raises(InvalidOrbitGeometry):
            to_state_vector(iss_elements, bad_mu)

    @pytest.mark.parametrize("elements", [
        KeplerElements(semi_major_axis=7.0e6, eccentricity=1.0),
        KeplerElements(semi_major_axis=-7.0e6, eccentricity=0.5),
        KeplerElements(semi_major_axis=0.0),
        KeplerElements(semi_major_axis=7.0e6, eccentricity=-0.1),
        KeplerElements(semi_major_axis=np.nan),
        KeplerElements(semi_major_axis=7.0e6, inclination=np.inf),
        KeplerElements(semi_major_axis=-7.0e6, eccentricity=1.5, true_anomaly=np.pi),
    ])
    def test_degenerate_elements(self, elements, mu):
        with pytest.raises(InvalidOrbitGeometry):
            to_state_vector(elements, mu)

    def test_invalid_geometry_is_value_error(self, mu):
        with pytest.raises(ValueError):
            to_state_vector(KeplerElements(semi_major_axis=-1.0), mu)


class TestCartesianToKeplerian:
    """Tests for cartesian_to_keplerian."""

    def test_recovers_horizons_elements(self, iss_state, iss_elements, mu):
        elements = cartesian_to_keplerian(*iss_state, mu=mu)

        assert elements.semi_major_axis == pytest.approx(iss_elements.semi_major_axis, rel=1e-6)
        assert elements.eccentricity == pytest.approx(iss_elements.eccentricity, abs=1e-7)
        assert elements.inclination == pytest.approx(iss_elements.inclination, abs=1e-7)
        assert elements.longitude_of_ascending_node == pytest.approx(
            iss_elements.longitude_of_ascending_node, abs=1e-7)
        # omega and nu are poorly conditioned at small e; their sum is not
        assert (elements.argument_of_periapsis + elements.true_anomaly) % (2 * np.pi) == pytest.approx(
            (iss_elements.argument_of_periapsis + iss_elements.true_anomaly) % (2 * np.pi), abs=1e-7)

    def test_inverse_of_to_state_vector(self, eccentric_elements, mu):
        elements = cartesian_to_keplerian(*to_state_vector(eccentric_elements, mu), mu=mu)

        assert np.allclose(elements, eccentric_elements, rtol=1e-10, atol=1e-10)

    def test_circular_equatorial_reports_true_longitude(self, mu):
        state = to_state_vector(KeplerElements(semi_major_axis=7.0e6, true_anomaly=1.0), mu)
        elements = cartesian_to_keplerian(*state, mu=mu)

        assert elements.eccentricity == 0.0
        assert elements.longitude_of_ascending_node == 0.0
        assert elements.argument_of_periapsis == 0.0
        assert elements.true_anomaly == pytest.approx(1.0, abs=1e-12)

    def test_zero_radius_rejected(self, mu):
        with pytest.raises(InvalidOrbitGeometry):
            cartesian_to_keplerian(np.zeros(3), [0.0, 7.5e3, 0.0], mu=mu)


class TestOrbitQuantities:

    def test_orbital_period(self, mu):
        assert orbital_period(7.0e6, mu) == pytest.approx(2 * np.pi * np.sqrt(7.0e6**3 / mu))

    def test_orbital_period_rejects_hyperbola(self, mu):
        with pytest.raises(InvalidOrbitGeometry):
            orbital_period(-7.0e6, mu)

    def test_specific_energy_matches_semi_major_axis(self, eccentric_elements, mu):
        position, velocity = to_state_vector(eccentric_elements, mu)

        assert specific_energy(position, velocity, mu) == pytest.approx(
            -mu / (2 * eccentric_elements.semi_major_axis), rel=1e-12)
