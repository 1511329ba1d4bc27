"""The delay time distribution of SNe Ia.

A prompt component, a narrow Gaussian burst near 50 Myr, and a delayed component
that rises exponentially up to 250 Myr and decays slowly afterwards. The prompt
component holds 40 % of all SNe Ia and the delayed component the remaining 60 %.

See Mannucci et al. (2006) - https://arxiv.org/abs/astro-ph/0510315
"""

import logging
from typing import Union

import numpy as np

from .. import config
from ..utils import integrate

logger = logging.getLogger(__name__)

ArrayLike = Union[float, np.ndarray]


class SNIaDelay(object):
    """
    The SNIa delay time distribution (times in Gyr), normalised to unity over
    [time_min, time_max].

    Attributes
    ----------
    mu: float
        Centre of the prompt component.
    sigma: float
        Width of the prompt component.
    norm1: float
        Normalisation of the prompt component.
    norm2: float
        Normalisation of the delayed component.
    """

    def __init__(self, mu=None, sigma=None, norm1=None, norm2=None):
        params = config.SNIA_DELAY_PARAMS
        if mu is None:
            mu = params["mu"]
        if sigma is None:
            sigma = params["sigma"]
        self.mu = float(mu)
        self.sigma = float(sigma)
        self.time_min = float(params["time_min"])
        self.time_max = float(params["time_max"])
        self.time_break = float(params["time_break"])
        self.rise_scale = float(params["rise_scale"])
        self.decay_scale = float(params["decay_scale"])
        self.norm1 = 1.0
        self.norm2 = 1.0
        # Each component is integrated with unit normalisation before it is scaled.
        if norm1 is None:
            norm1 = params["burst_fraction"] / integrate.qag(
                self.prompt, self.time_min, self.time_max, points=(self.mu,)
            )
            logger.debug(f"SNIa prompt component normalisation: {norm1}")
        if norm2 is None:
            norm2 = params["decay_fraction"] / integrate.qag(
                self.delayed, self.time_min, self.time_max, points=(self.time_break,)
            )
            logger.debug(f"SNIa delayed component normalisation: {norm2}")
        self.norm1 = float(norm1)
        self.norm2 = float(norm2)

    @property
    def breakpoints(self):
        return (self.mu, self.time_break)

    def prompt(self, t: ArrayLike) -> ArrayLike:
        """The Gaussian burst component."""
        a = (t - self.mu) / self.sigma
        return (
            self.norm1 * (t - self.time_min) * (self.time_max - t) * np.exp(-0.5 * a * a)
        )

    def delayed(self, t: ArrayLike) -> ArrayLike:
        """The rising then decaying component, floored at zero."""
        t = np.asarray(t, dtype=float)
        floor = np.exp((self.time_min - self.time_break) / self.rise_scale)
        delay = np.where(
            t < self.time_break,
            self.norm2 * (np.exp((t - self.time_break) / self.rise_scale) - floor),
            self.norm2 * (np.exp((self.time_break - t) / self.decay_scale) - floor),
        )
        delay = np.where(delay > 0.0, delay, 0.0)
        if delay.ndim == 0:
            return float(delay)
        return delay

    def functional_form(self, t: ArrayLike) -> ArrayLike:
        """Returns the SNIa rate per unit time, a delay t after star formation."""
        return self.prompt(t) + self.delayed(t)

    __call__ = functional_form

    def cumulative(self, t: float) -> float:
        """Fraction of SNe Ia that have exploded a time t after star formation."""
        return integrate.qag(self.functional_form, self.time_min, t, points=self.breakpoints)

    def params(self):
        return (self.mu, self.sigma, self.norm1, self.norm2)
