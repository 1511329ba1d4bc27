import numpy as np
import pytest

from discrete_feedback.utils import integrate
from discrete_feedback.utils.error_handling import NonconvergentIntegration


def test_power_law_matches_analytic():
    """Test the integral of m**-2.3 against the closed form"""
    expected = (8.0**-1.3 - 100.0**-1.3) / 1.3
    result = integrate.qag(lambda m: m**-2.3, 8.0, 100.0)

    assert result == pytest.approx(expected, rel=1.0e-10)


def test_empty_interval_is_zero():
    assert integrate.qag(np.exp, 2.0, 2.0) == 0.0


def test_reversed_limits_change_sign():
    forward = integrate.qag(np.exp, 0.0, 1.0)
    backward = integrate.qag(np.exp, 1.0, 0.0)

    assert backward == pytest.approx(-forward, rel=1.0e-12)
    assert forward == pytest.approx(np.e - 1.0, rel=1.0e-10)


@pytest.mark.parametrize("points", [[0.5], [-1.0, 0.5, 3.0], [0.0, 1.0], [-5.0]])
def test_breakpoints(points):
    """Breakpoints outside or on the interval bounds are ignored"""
    step = lambda x: 1.0 if x < 0.5 else 3.0
    result = integrate.qag(step, 0.0, 1.0, points=points)

    if 0.5 in points:
        assert result == pytest.approx(2.0, rel=1.0e-10)
    else:
        assert np.isfinite(result)


def test_nonconvergence_raises():
    """A narrow peak cannot be integrated accurately on a single subinterval"""
    peak = lambda x: np.exp(-(((x - 0.5) / 1.0e-3) ** 2))

    with pytest.raises(NonconvergentIntegration, match="did not converge"):
        _ = integrate.qag(peak, 0.0, 1.0, limit=1)
