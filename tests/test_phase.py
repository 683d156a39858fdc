import math
import pytest

from eclipse_sim.physics.phase import (
    PHASE_GOALS_DEG,
    phase_metrics,
    phase_name_from_angle,
    signed_phase_angle,
)

SUN = (0.0, 0.0, 0.0)
EARTH = (10.0, 0.0, 0.0)
POLE = (0.0, 0.0, 1.0)


def moon_at(theta_rad, z=0.0):
    """Moon on a 2.5-unit circle around EARTH, theta=0 on the anti-Sun side."""
    return (10.0 + 2.5 * math.cos(theta_rad), 2.5 * math.sin(theta_rad), z)


class TestPhaseMetrics:
    def test_full_moon(self):
        m = phase_metrics(SUN, EARTH, (12.5, 0.0, 0.0))
        assert m.phase_angle == pytest.approx(0.0, abs=1e-7)
        assert m.illuminated_fraction == pytest.approx(1.0)

    def test_new_moon(self):
        # Moon between Sun and Earth
        m = phase_metrics(SUN, EARTH, (7.5, 0.0, 0.0))
        assert m.phase_angle == pytest.approx(math.pi)
        assert m.illuminated_fraction == pytest.approx(0.0, abs=1e-12)

    def test_quarter(self):
        # Right angle at the Moon: Moon on the circle with the Sun-Earth diameter
        m = phase_metrics(SUN, EARTH, (5.0, 5.0, 0.0))
        assert math.degrees(m.phase_angle) == pytest.approx(90.0)
        assert m.illuminated_fraction == pytest.approx(0.5)

    def test_fraction_in_unit_range(self):
        for k in range(36):
            m = phase_metrics(SUN, EARTH, moon_at(math.radians(10.0 * k)))
            assert 0.0 <= m.phase_angle <= math.pi
            assert 0.0 <= m.illuminated_fraction <= 1.0


class TestSignedPhase:
    def test_sign_follows_orbital_sense(self):
        after_full = signed_phase_angle(SUN, EARTH, moon_at(0.3), POLE)
        before_full = signed_phase_angle(SUN, EARTH, moon_at(-0.3), POLE)
        assert after_full > 0.0
        assert before_full < 0.0
        assert after_full == pytest.approx(-before_full)

    def test_magnitude_matches_phase_angle_in_plane(self):
        for theta in [0.2, 1.0, 2.0, -2.5]:
            moon = moon_at(theta)
            signed = signed_phase_angle(SUN, EARTH, moon, POLE)
            assert abs(signed) == pytest.approx(phase_metrics(SUN, EARTH, moon).phase_angle)

    def test_new_moon_is_plus_pi(self):
        assert signed_phase_angle(SUN, EARTH, (7.5, 0.0, 0.0), POLE) == pytest.approx(math.pi)

    def test_out_of_plane_offset_ignored(self):
        # Moon above the plane at opposition: true phase angle is not 0, in-plane angle is
        moon = (12.5, 0.0, 0.3)
        assert phase_metrics(SUN, EARTH, moon).phase_angle > math.radians(1.0)
        assert signed_phase_angle(SUN, EARTH, moon, POLE) == pytest.approx(0.0, abs=1e-12)


class TestPhaseName:
    def test_named_bands(self):
        assert phase_name_from_angle(math.radians(180.0)) == "new"
        assert phase_name_from_angle(math.radians(172.5)) == "new"
        assert phase_name_from_angle(math.radians(3.0)) == "full"
        assert phase_name_from_angle(math.radians(95.0)) == "quarter"
        assert phase_name_from_angle(math.radians(85.0)) == "quarter"

    def test_between_bands_is_none(self):
        for d in [45.0, 120.0, 171.0, 9.0]:
            assert phase_name_from_angle(math.radians(d)) is None

    def test_custom_band(self):
        assert phase_name_from_angle(math.radians(12.0), eps_deg=15.0) == "full"
        assert phase_name_from_angle(math.radians(12.0), eps_deg=5.0) is None

    def test_goals(self):
        assert PHASE_GOALS_DEG == {"new": 180.0, "full": 0.0, "quarter": 90.0}
