import math
import pytest

from eclipse_sim.physics.gravity import (
    kepler_residual,
    solve_keplers_equation,
    wrap_to_pi,
)


def test_kepler_zero_eccentricity():
    # If e=0, E=M exactly (after normalization)
    for M in [0.0, 0.5, 1.0, 2.0, 5.0, -4.0]:
        E = solve_keplers_equation(M, 0.0)
        assert math.isclose(E, wrap_to_pi(M), abs_tol=1e-12)


def test_kepler_converges_typical():
    E = solve_keplers_equation(M_rad=1.0, e=0.4)
    res = E - 0.4 * math.sin(E) - 1.0
    assert abs(res) < 1e-10


@pytest.mark.parametrize("e", [0.0, 0.0167, 0.0549, 0.2, 0.5, 0.7, 0.79, 0.8, 0.85, 0.9])
def test_kepler_converges_over_wide_mean_anomaly_range(e):
    n = 81
    for k in range(n):
        M = -10.0 * math.pi + k * (20.0 * math.pi / (n - 1)) + 0.0137
        E = solve_keplers_equation(M, e)
        assert abs(kepler_residual(E, M, e)) < 1e-6, (e, M, E)


def test_kepler_small_mean_anomaly_high_eccentricity():
    # Conservative ±π seed region
    for M in [1e-9, 1e-6, 1e-3, -1e-3, -1e-6]:
        E = solve_keplers_equation(M, 0.9)
        assert abs(kepler_residual(E, M, 0.9)) < 1e-6


def test_kepler_result_in_normalized_range():
    for M in [-7.0, -3.0, 0.0, 3.0, 7.0, 40.0]:
        E = solve_keplers_equation(M, 0.3)
        assert -math.pi - 1e-9 <= E <= math.pi + 1e-9


def test_kepler_bounded_iterations_never_raise():
    # One Newton step is not enough to converge, but a value comes back anyway
    E = solve_keplers_equation(2.5, 0.95, max_iter=1)
    assert math.isfinite(E)

    E0 = solve_keplers_equation(2.5, 0.95, max_iter=0)
    assert E0 == math.pi


class TestAngleWrapping:
    def test_wrap_to_pi_range(self):
        assert wrap_to_pi(math.pi) == pytest.approx(math.pi)
        assert wrap_to_pi(-math.pi) == pytest.approx(math.pi)
        assert wrap_to_pi(3 * math.pi / 2) == pytest.approx(-math.pi / 2)
        assert wrap_to_pi(-3 * math.pi / 2) == pytest.approx(math.pi / 2)
        assert wrap_to_pi(0.25) == pytest.approx(0.25)
