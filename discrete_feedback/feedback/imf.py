"""The initial mass functions of PopII and PopIII stars."""

from typing import Callable, Tuple, Union

import numpy as np

from .. import config
from ..utils import integrate
from ..utils.error_handling import ConfigurationError

ArrayLike = Union[float, np.ndarray]


def _as_result(result: np.ndarray) -> ArrayLike:
    if result.ndim == 0:
        return float(result)
    return result


class PopIIIMF(object):
    """
    The Chabrier (2003) IMF for PopII stars.
    Lognormal below 1 solar mass and a power law, phi(m) ~ m**-2.3, above.
    The lognormal branch is scaled so that the IMF is continuous at m = 1.

    Attributes
    ----------
    mass_low: float
        The minimum stellar mass (solar masses).
    mass_upp: float
        The maximum stellar mass (solar masses).
    mass_snii_low: float
        The minimum mass of a star that explodes as a SNII.
    mass_snia_low: float
        The minimum mass of a SNIa progenitor.
    mass_snia_upp: float
        The maximum mass of a SNIa progenitor.
    fac: float
        Normalisation of the lognormal branch.
    """

    slope = 2.3
    log_mass_peak = -1.1024
    log_mass_var = 0.4761  # 0.69**2

    def __init__(
        self,
        mass_low=None,
        mass_upp=None,
        mass_snii_low=None,
        mass_snia_low=None,
        mass_snia_upp=None,
        fac=None,
    ):
        if mass_low is None:
            mass_low = config.POPII_PARAMS["mass_low"]
        if mass_upp is None:
            mass_upp = config.POPII_PARAMS["mass_upp"]
        if mass_snii_low is None:
            mass_snii_low = config.POPII_PARAMS["mass_snii_low"]
        if mass_snia_low is None:
            mass_snia_low = config.POPII_PARAMS["mass_snia_low"]
        if mass_snia_upp is None:
            mass_snia_upp = config.POPII_PARAMS["mass_snia_upp"]
        if not mass_low < mass_upp:
            raise ConfigurationError(
                f"PopII IMF needs mass_low < mass_upp, got {mass_low} and {mass_upp}"
            )
        self.mass_low = float(mass_low)
        self.mass_upp = float(mass_upp)
        self.mass_snii_low = float(mass_snii_low)
        self.mass_snia_low = float(mass_snia_low)
        self.mass_snia_upp = float(mass_snia_upp)
        if fac is None:
            fac = 1.0 / self.low_mass_branch(1.0)
        self.fac = float(fac)

    @property
    def breakpoints(self) -> Tuple[float, ...]:
        return (1.0,)

    def low_mass_branch(self, m: ArrayLike) -> ArrayLike:
        """The unnormalised lognormal part of the IMF."""
        a = np.log10(m) - self.log_mass_peak
        return np.exp(-0.5 * (a * a / self.log_mass_var)) / m

    def functional_form(self, m: ArrayLike) -> ArrayLike:
        """
        Returns the value of the IMF at the specified m, zero outside (mass_low, mass_upp).
        """
        m = np.asarray(m, dtype=float)
        result = np.zeros_like(m)
        inside = (m > self.mass_low) & (m < self.mass_upp)
        lo = inside & (m < 1.0)
        hi = inside & (m >= 1.0)
        result[lo] = self.fac * self.low_mass_branch(m[lo])
        result[hi] = m[hi] ** (-1.0 * self.slope)

        return _as_result(result)

    __call__ = functional_form

    def mass_weighted(self, m: ArrayLike) -> ArrayLike:
        """m * phi(m), the integrand of the total mass."""
        return m * self.functional_form(m)

    def integrate(self, lower: float, upper: float) -> float:
        """Number of stars between lower and upper."""
        return integrate.qag(self.functional_form, lower, upper, points=self.breakpoints)

    def integrate_mass(self, lower: float, upper: float) -> float:
        """Mass in stars between lower and upper."""
        return integrate.qag(self.mass_weighted, lower, upper, points=self.breakpoints)

    def params(self) -> Tuple[float, ...]:
        return (
            self.mass_low,
            self.mass_upp,
            self.fac,
            self.mass_snii_low,
            self.mass_snia_low,
            self.mass_snia_upp,
        )


class PopIIIIMF(object):
    """
    The Susa et al. (2014) IMF for PopIII stars.

    A skewed bump in log-mass: with x = log10(m), the shape
        s = 0.5 * (x - m1) / (m2 - m1)                  for x < m2
        s = 0.5 * (x + m3 - 2 * m2) / (m3 - m2)         for x >= m2
    runs from 0 at m1 = log10(mass_low) through 0.5 at m2 to 1 at m3 = log10(mass_upp),
    and phi(m) = fac * (s * (1 - s))**pw / m. The constants fac, m2 and pw are fits
    to the published distribution.

    Attributes
    ----------
    cutoff: float
        log10 metallicity above which PopIII stars no longer form.
    mass_low: float
        The minimum stellar mass (solar masses).
    mass_upp: float
        The maximum stellar mass (solar masses).
    mass_sn_low: float
        The minimum mass of a star that explodes as a SN.
    m1, m2, m3: float
        log10 of the lower bound, the peak and the upper bound of the IMF.
    fac: float
        Normalisation of the IMF.
    pw: float
        Exponent of the IMF.
    sn_energy: Callable, optional
        Explosion energy (erg) as a function of mass.
    """

    def __init__(
        self,
        cutoff=None,
        mass_low=None,
        mass_upp=None,
        mass_sn_low=None,
        m1=None,
        m2=None,
        m3=None,
        fac=None,
        pw=None,
        sn_energy: Callable[[float], float] = None,
    ):
        if cutoff is None:
            cutoff = config.POPIII_PARAMS["cutoff"]
        if mass_low is None:
            mass_low = config.POPIII_PARAMS["mass_low"]
        if mass_upp is None:
            mass_upp = config.POPIII_PARAMS["mass_upp"]
        if mass_sn_low is None:
            mass_sn_low = config.POPIII_PARAMS["mass_sn_low"]
        if not mass_low < mass_upp:
            raise ConfigurationError(
                f"PopIII IMF needs mass_low < mass_upp, got {mass_low} and {mass_upp}"
            )
        if m1 is None:
            m1 = np.log10(mass_low)
        if m2 is None:
            m2 = config.POPIII_PARAMS["m2"]
        if m3 is None:
            m3 = np.log10(mass_upp)
        if fac is None:
            fac = config.POPIII_PARAMS["fac"]
        if pw is None:
            pw = config.POPIII_PARAMS["pw"]
        self.cutoff = float(cutoff)
        self.mass_low = float(mass_low)
        self.mass_upp = float(mass_upp)
        self.mass_sn_low = float(mass_sn_low)
        self.m1 = float(m1)
        self.m2 = float(m2)
        self.m3 = float(m3)
        self.fac = float(fac)
        self.pw = float(pw)
        self.sn_energy = sn_energy

    @property
    def breakpoints(self) -> Tuple[float, ...]:
        return (10.0**self.m2,)

    def functional_form(self, m: ArrayLike) -> ArrayLike:
        """
        Returns the value of the IMF at the specified m, zero outside (mass_low, mass_upp).
        """
        m = np.asarray(m, dtype=float)
        result = np.zeros_like(m)
        inside = (m > self.mass_low) & (m < self.mass_upp)
        m_in = m[inside]
        logm = np.log10(m_in)
        s = np.where(
            logm < self.m2,
            0.5 * (logm - self.m1) / (self.m2 - self.m1),
            0.5 * (logm + self.m3 - 2.0 * self.m2) / (self.m3 - self.m2),
        )
        base = s * (1.0 - s)
        # rounding can push s just outside [0, 1] next to the mass bounds
        positive = base > 0.0
        value = np.zeros_like(m_in)
        value[positive] = self.fac * base[positive] ** self.pw / m_in[positive]
        result[inside] = value

        return _as_result(result)

    __call__ = functional_form

    def mass_weighted(self, m: ArrayLike) -> ArrayLike:
        """m * phi(m), the integrand of the total mass."""
        return m * self.functional_form(m)

    def energy_weighted(self, m: ArrayLike) -> ArrayLike:
        """E_SN(m) * phi(m), the integrand of the total SN energy."""
        if self.sn_energy is None:
            raise ConfigurationError("No SN energy function attached to the PopIII IMF")
        return self.sn_energy(m) * self.functional_form(m)

    def integrate(self, lower: float, upper: float) -> float:
        """Number of stars between lower and upper."""
        return integrate.qag(self.functional_form, lower, upper, points=self.breakpoints)

    def integrate_mass(self, lower: float, upper: float) -> float:
        """Mass in stars between lower and upper."""
        return integrate.qag(self.mass_weighted, lower, upper, points=self.breakpoints)

    def integrate_energy(self, lower: float, upper: float) -> float:
        """Total SN energy released by stars between lower and upper."""
        points = self.breakpoints + tuple(getattr(self.sn_energy, "breakpoints", ()))
        return integrate.qag(self.energy_weighted, lower, upper, points=points)

    def forms_popiii(self, log_z: float) -> bool:
        """True if gas with log10 metallicity log_z is pristine enough to form PopIII stars."""
        return log_z < self.cutoff

    def params(self) -> Tuple[float, ...]:
        return (
            self.cutoff,
            self.mass_low,
            self.mass_upp,
            self.mass_sn_low,
            self.m1,
            self.m2,
            self.m3,
            self.fac,
            self.pw,
        )
