"""
Tests for phase root-finding on synthetic phase functions.
"""
import pytest

from eclipse_sim.analysis.phase_search import find_time_for_phase, wrap_deg

DAY_S = 86400.0
RATE_DEG_PER_DAY = 12.2  # roughly one synodic month per 360 deg
FULL_AT_S = 2.0 * DAY_S


def signed_phase(t_ms):
    """Linear signed phase: 0 (full) at FULL_AT_S, ±180 (new) half a cycle later."""
    return wrap_deg(RATE_DEG_PER_DAY * (t_ms / 1000.0 - FULL_AT_S) / DAY_S)


def unsigned_phase(t_ms):
    return abs(signed_phase(t_ms))


class TestWrapDeg:
    def test_range(self):
        assert wrap_deg(180.0) == 180.0
        assert wrap_deg(-180.0) == 180.0
        assert wrap_deg(190.0) == -170.0
        assert wrap_deg(-190.0) == 170.0
        assert wrap_deg(540.0) == 180.0
        assert wrap_deg(10.0) == 10.0


class TestFindTimeForPhase:
    def test_finds_full(self):
        t = find_time_for_phase(signed_phase, 0.0, center_ms=0.0, search_window_s=30 * DAY_S)
        assert t is not None
        assert abs(t / 1000.0 - FULL_AT_S) < 600.0
        assert abs(wrap_deg(signed_phase(t))) < 0.2

    def test_finds_nearest_new_and_ignores_wraparound(self):
        period_days = 360.0 / RATE_DEG_PER_DAY
        t = find_time_for_phase(signed_phase, 180.0, center_ms=0.0, search_window_s=30 * DAY_S)
        assert t is not None
        # New moons at full +/- half a period; the earlier one is nearer to 0
        expected_s = FULL_AT_S - 0.5 * period_days * DAY_S
        assert abs(t / 1000.0 - expected_s) < 600.0
        assert abs(wrap_deg(signed_phase(t) - 180.0)) < 0.2

    def test_quarter_on_unsigned_phase(self):
        t = find_time_for_phase(unsigned_phase, 90.0, center_ms=0.0, search_window_s=30 * DAY_S)
        assert t is not None
        assert abs(unsigned_phase(t) - 90.0) < 0.2

    def test_exact_zero_on_scan_grid(self):
        def phase(t_ms):
            return t_ms / 1000.0

        t = find_time_for_phase(phase, 0.0, center_ms=0.0, search_window_s=1000.0)
        assert t == 0.0

    def test_no_occurrence_in_short_window(self):
        # One hour around day 10 never reaches full
        t = find_time_for_phase(signed_phase, 0.0, center_ms=10 * DAY_S * 1000.0, search_window_s=3600.0)
        assert t is None

    def test_constant_phase_never_brackets(self):
        assert find_time_for_phase(lambda t: 50.0, 0.0, 0.0, 30 * DAY_S) is None

    def test_deterministic(self):
        a = find_time_for_phase(signed_phase, 0.0, 0.0, 30 * DAY_S)
        b = find_time_for_phase(signed_phase, 0.0, 0.0, 30 * DAY_S)
        assert a == b

    def test_validates_arguments(self):
        with pytest.raises(ValueError, match="steps must be >= 1"):
            find_time_for_phase(signed_phase, 0.0, 0.0, DAY_S, steps=0)
        with pytest.raises(ValueError, match="search_window_s must be positive"):
            find_time_for_phase(signed_phase, 0.0, 0.0, 0.0)
