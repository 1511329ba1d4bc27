"""Cumulative tables used to sample SNIa delay times and PopIII masses.

Both tables are built once from the closed-form distributions. The knot sets
are fixed: the leading and trailing knots pin the tables outside the model
domain so that lookups never rely on extrapolation.
"""

import logging
import warnings

import numpy as np

from .. import config
from ..utils.error_handling import ProgramError
from ..utils.interpolate import Interpolator
from .imf import PopIIIIMF
from .snia_delay import SNIaDelay

logger = logging.getLogger(__name__)

N_KNOTS_SNIA_DELAY = 30
N_KNOTS_POPIII_MASS = 289


def build_snia_delay_table(delay: SNIaDelay) -> Interpolator:
    """Cumulative SNIa delay time distribution as a function of log10(t).

    Knots are spaced by 0.1 dex from log10(time_min) up to log10(time_max). The
    table is 0 at the leading knot and 1 at the knots log10(time_max) and
    log10(time_tail). Between those two knots the natural spline is not exactly
    1: it rises slightly above it, which is reported with a warning. Beyond the
    last knot the table is clamped to 1.

    Parameters
    ----------
    delay: SNIaDelay
        The normalised delay time distribution.

    Returns
    -------
    Interpolator
        A natural cubic spline with 30 knots.
    """
    params = config.SNIA_DELAY_PARAMS
    log_t_min = np.log10(delay.time_min)
    log_t_max = np.log10(delay.time_max)

    ts = [params["log_time_head"]]
    cumul_delay = [0.0]
    # Accumulate the step, the knot positions depend on the rounding.
    t = log_t_min
    while t < log_t_max:
        ts.append(t)
        cumul_delay.append(delay.cumulative(10.0**t))
        t += params["log_time_step"]
    ts.append(log_t_max)
    cumul_delay.append(1.0)
    ts.append(np.log10(params["time_tail"]))
    cumul_delay.append(1.0)
    # keeps the first segment from being flat
    ts[0] += cumul_delay[1]

    if len(ts) != N_KNOTS_SNIA_DELAY:
        raise ProgramError(
            f"Cumulative SNIa delay table has {len(ts)} knots, expected {N_KNOTS_SNIA_DELAY}"
        )
    spline = Interpolator("cubic", ts, cumul_delay)
    logger.info(f"Built cumulative SNIa delay table with {len(spline)} knots")
    _check_cumulative_bounds(spline, log_t_min, spline.xs[-1])

    return spline


def build_popiii_mass_table(imf: PopIIIIMF) -> Interpolator:
    """Number of PopIII stars above a given mass as a function of log10(m).

    Knots are spaced by 0.01 dex from log10(mass_low) up to log10(mass_upp), each
    holding the IMF integrated from that mass to mass_upp. The leading knot holds
    the integral over the whole IMF and the trailing knot is 0.

    Parameters
    ----------
    imf: PopIIIIMF
        The PopIII IMF.

    Returns
    -------
    Interpolator
        A linear interpolator with 289 knots.
    """
    params = config.POPIII_PARAMS
    log_m_low = np.log10(imf.mass_low)
    log_m_upp = np.log10(imf.mass_upp)

    ms = [params["log_mass_head"]]
    remaining = [imf.integrate(0.0, imf.mass_upp)]
    m = log_m_low
    while m < log_m_upp:
        ms.append(m)
        remaining.append(imf.integrate(10.0**m, imf.mass_upp))
        m += params["log_mass_step"]
    ms.append(log_m_upp)
    remaining.append(0.0)
    ms.append(params["log_mass_tail"])
    remaining.append(0.0)

    if len(ms) != N_KNOTS_POPIII_MASS:
        raise ProgramError(
            f"Cumulative PopIII IMF table has {len(ms)} knots, expected {N_KNOTS_POPIII_MASS}"
        )
    spline = Interpolator("linear", ms, remaining)
    logger.info(f"Built cumulative PopIII IMF table with {len(spline)} knots")

    return spline


def _check_cumulative_bounds(spline: Interpolator, x_min: float, x_max: float, n_probe=1000):
    """Warn if the cubic spline of a cumulative distribution leaves [0, 1] inside [x_min, x_max].

    The spline is sampled on a uniform grid and at the midpoint of every knot
    interval, so that short intervals are never skipped.
    """
    mids = 0.5 * (spline.xs[:-1] + spline.xs[1:])
    mids = mids[(mids >= x_min) & (mids <= x_max)]
    probe = spline(np.concatenate([np.linspace(x_min, x_max, n_probe), mids]))
    low, high = float(probe.min()), float(probe.max())
    if low < 0.0 or high > 1.0:
        warnings.warn(
            f"Cumulative table overshoots [0, 1] between knots (range [{low}, {high}]). "
            f"Sampling from it must tolerate small non-monotonicities."
        )
