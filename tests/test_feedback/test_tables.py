import warnings

import numpy as np
import pytest

from discrete_feedback.feedback import tables
from discrete_feedback.utils.interpolate import Interpolator


def test_snia_delay_table_knots(feedback):
    spline = feedback.snia_delay_table
    xs, ys = spline.xs, spline.ys

    assert spline.kind == "cubic"
    assert len(spline) == tables.N_KNOTS_SNIA_DELAY == 30
    assert xs[0] == -2.0 + ys[1]
    assert ys[0] == 0.0
    assert xs[1] == np.log10(0.03)
    assert xs[28] == np.log10(13.6) and ys[28] == 1.0
    assert xs[29] == np.log10(13.8) and ys[29] == 1.0
    assert (np.diff(ys) >= 0.0).all()
    assert ((ys >= 0.0) & (ys <= 1.0)).all()


def test_snia_delay_table_matches_integral(feedback):
    spline = feedback.snia_delay_table
    delay = feedback.snia_delay

    for x, y in zip(spline.xs[1:28], spline.ys[1:28]):
        assert y == delay.cumulative(10.0**x)


def test_snia_delay_table_boundaries(feedback):
    """Zero at the earliest SNIa, one from the latest SNIa onwards"""
    assert feedback.snia_cumulative(np.log10(0.03)) == pytest.approx(0.0, abs=1.0e-12)
    assert feedback.snia_cumulative(np.log10(13.6)) == pytest.approx(1.0)
    assert feedback.snia_cumulative(np.log10(13.8)) == pytest.approx(1.0)
    assert feedback.snia_cumulative(2.0) == 1.0
    assert feedback.snia_cumulative(-3.0) == 0.0


def test_popiii_mass_table_knots(feedback):
    spline = feedback.popiii_mass_table
    imf = feedback.popiii_imf
    xs, ys = spline.xs, spline.ys

    assert spline.kind == "linear"
    assert len(spline) == tables.N_KNOTS_POPIII_MASS == 289
    assert xs[0] == -2.0 and ys[0] == imf.integrate(0.0, imf.mass_upp)
    assert xs[1] == np.log10(imf.mass_low)
    assert xs[287] == np.log10(imf.mass_upp) and ys[287] == 0.0
    assert xs[288] == 3.0 and ys[288] == 0.0
    assert (np.diff(ys) <= 0.0).all()


def test_popiii_mass_table_sentinels(feedback):
    """The head sentinel holds the full IMF integral, the tail sentinel zero"""
    imf = feedback.popiii_imf
    full = imf.integrate(0.0, imf.mass_upp)

    assert feedback.popiii_remaining_imf(-2.0) == full
    assert feedback.popiii_remaining_imf(3.0) == 0.0
    assert feedback.popiii_remaining_imf(-5.0) == full
    assert feedback.popiii_remaining_imf(4.0) == 0.0
    assert full == pytest.approx(imf.integrate(imf.mass_low, imf.mass_upp), rel=1.0e-8)


def test_popiii_mass_table_interpolates_sn_number(feedback):
    """The number of stars above 10 solar masses read from the table"""
    assert feedback.popiii_remaining_imf(1.0) == pytest.approx(
        feedback.integrals.popiii_sn_number, rel=1.0e-3
    )


def test_snia_delay_table_warns_on_tail_overshoot(feedback):
    """The natural spline bulges above 1 between the two trailing knots"""
    with pytest.warns(UserWarning, match="overshoots"):
        spline = tables.build_snia_delay_table(feedback.snia_delay)

    tail = np.linspace(spline.xs[28], spline.xs[29], 11)[1:-1]
    assert spline(tail).max() > 1.0
    assert spline == feedback.snia_delay_table


def test_cumulative_bounds_check_passes_inside_unit_interval():
    spline = Interpolator("cubic", [0.0, 1.0, 2.0], [0.0, 0.5, 1.0])

    with warnings.catch_warnings():
        warnings.simplefilter("error")
        tables._check_cumulative_bounds(spline, 0.0, 2.0)
