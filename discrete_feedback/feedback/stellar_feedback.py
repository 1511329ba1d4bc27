"""Discrete stellar feedback: the lookup tables and yields of a star particle.

Each star particle represents a population of stars formed at one time with one
metallicity. Rather than tracking individual stars, the host simulation samples
explosion times and progenitor masses from the tables held here.

Typical usage example:

    fb = DiscreteStellarFeedback.build()
    fb.save("restart.bin")
    ...
    fb = DiscreteStellarFeedback.load("restart.bin")
"""

from dataclasses import astuple, dataclass
import logging
from typing import Union

import numpy as np
import pandas as pd

from .. import config
from ..io import check_tables
from ..io.restart_file import RestartFile
from ..utils.error_handling import ConfigurationError, RestoreFormatError
from ..utils.interpolate import Interpolator
from . import tables
from .approx_lifetime import ApproxLifetime
from .imf import PopIIIIMF, PopIIIMF
from .sn_energy import PopIIISNEnergy
from .snia_delay import SNIaDelay
from .yields import N_VALUES, FeedbackYields, generate_yields

logger = logging.getLogger(__name__)

ArrayLike = Union[float, np.ndarray]


@dataclass(frozen=True)
class DerivedIntegrals:
    """Integrals over the IMFs, computed once when the tables are built.

    Attributes
    ----------
    popii_mass: float
        Integral of m * phi(m) over the PopII IMF.
    popii_snii_number: float
        Integral of phi(m) over the SNII mass range.
    popii_snia_number: float
        Integral of phi(m) over the SNIa progenitor mass range.
    popiii_mass: float
        Integral of m * phi(m) over the PopIII IMF.
    popiii_sn_number: float
        Integral of phi(m) over the PopIII SN mass range.
    popiii_sn_energy: float
        Integral of E_SN(m) * phi(m) over the PopIII SN mass range.
    """

    popii_mass: float
    popii_snii_number: float
    popii_snia_number: float
    popiii_mass: float
    popiii_sn_number: float
    popiii_sn_energy: float

    def values(self):
        return astuple(self)


@dataclass(frozen=True, eq=False)
class DiscreteStellarFeedback:
    """The feedback tables. Read-only once built or restored.

    Attributes
    ----------
    popii_imf: PopIIIMF
        The Chabrier IMF of PopII stars.
    snia_delay: SNIaDelay
        The normalised SNIa delay time distribution.
    popiii_imf: PopIIIIMF
        The Susa IMF of PopIII stars, with the SN energy attached.
    sn_energy: PopIIISNEnergy
        PopIII SN explosion energy as a function of mass.
    lifetimes: ApproxLifetime
        PopII and PopIII stellar lifetimes as a function of mass.
    integrals: DerivedIntegrals
        Integrals over the IMFs.
    snia_delay_table: Interpolator
        Cumulative SNIa delay time distribution over log10(t).
    popiii_mass_table: Interpolator
        Number of PopIII stars above a mass, over log10(m).
    yields: FeedbackYields
        The yields of every feedback channel.
    """

    popii_imf: PopIIIMF
    snia_delay: SNIaDelay
    popiii_imf: PopIIIIMF
    sn_energy: PopIIISNEnergy
    lifetimes: ApproxLifetime
    integrals: DerivedIntegrals
    snia_delay_table: Interpolator
    popiii_mass_table: Interpolator
    yields: FeedbackYields

    @classmethod
    def build(
        cls,
        popii_mass_low: float = None,
        popii_mass_upp: float = None,
        popiii_mass_low: float = None,
        popiii_mass_upp: float = None,
    ) -> "DiscreteStellarFeedback":
        """Compute every integral and table.

        All parameters come from config; the IMF mass bounds can be overridden.

        Raises
        ------
        ConfigurationError: If the parameters are inconsistent.
        NonconvergentIntegration: If any integral fails to converge.
        """
        popii_params = dict(config.POPII_PARAMS)
        if popii_mass_low is not None:
            popii_params["mass_low"] = popii_mass_low
        if popii_mass_upp is not None:
            popii_params["mass_upp"] = popii_mass_upp
        popiii_params = dict(config.POPIII_PARAMS)
        if popiii_mass_low is not None:
            popiii_params["mass_low"] = popiii_mass_low
        if popiii_mass_upp is not None:
            popiii_params["mass_upp"] = popiii_mass_upp
        check_tables.check_config(popii_params=popii_params, popiii_params=popiii_params)

        popii_imf = PopIIIMF(
            mass_low=popii_params["mass_low"],
            mass_upp=popii_params["mass_upp"],
            mass_snii_low=popii_params["mass_snii_low"],
            mass_snia_low=popii_params["mass_snia_low"],
            mass_snia_upp=popii_params["mass_snia_upp"],
        )
        sn_energy = PopIIISNEnergy()
        popiii_imf = PopIIIIMF(
            mass_low=popiii_params["mass_low"],
            mass_upp=popiii_params["mass_upp"],
            mass_sn_low=popiii_params["mass_sn_low"],
            sn_energy=sn_energy,
        )

        integrals = DerivedIntegrals(
            popii_mass=popii_imf.integrate_mass(popii_imf.mass_low, popii_imf.mass_upp),
            popii_snii_number=popii_imf.integrate(popii_imf.mass_snii_low, popii_imf.mass_upp),
            popii_snia_number=popii_imf.integrate(
                popii_imf.mass_snia_low, popii_imf.mass_snia_upp
            ),
            popiii_mass=popiii_imf.integrate_mass(popiii_imf.mass_low, popiii_imf.mass_upp),
            popiii_sn_number=popiii_imf.integrate(popiii_imf.mass_sn_low, popiii_imf.mass_upp),
            popiii_sn_energy=popiii_imf.integrate_energy(
                popiii_imf.mass_sn_low, popiii_imf.mass_upp
            ),
        )
        for name, value in zip(DerivedIntegrals.__dataclass_fields__, integrals.values()):
            logger.info(f"{name}: {value}")

        snia_delay = SNIaDelay()
        snia_delay_table = tables.build_snia_delay_table(snia_delay)
        popiii_mass_table = tables.build_popiii_mass_table(popiii_imf)

        return cls(
            popii_imf=popii_imf,
            snia_delay=snia_delay,
            popiii_imf=popiii_imf,
            sn_energy=sn_energy,
            lifetimes=ApproxLifetime(),
            integrals=integrals,
            snia_delay_table=snia_delay_table,
            popiii_mass_table=popiii_mass_table,
            yields=generate_yields(integrals.popiii_sn_energy),
        )

    def popii_imf_value(self, m: ArrayLike) -> ArrayLike:
        return self.popii_imf(m)

    def popiii_imf_value(self, m: ArrayLike) -> ArrayLike:
        return self.popiii_imf(m)

    def snia_delay_value(self, t: ArrayLike) -> ArrayLike:
        return self.snia_delay(t)

    def snia_cumulative(self, log_t: ArrayLike) -> ArrayLike:
        """Fraction of SNe Ia exploded by log10(t) after star formation."""
        return self.snia_delay_table(log_t)

    def popiii_remaining_imf(self, log_m: ArrayLike) -> ArrayLike:
        """Number of PopIII stars more massive than 10**log_m."""
        return self.popiii_mass_table(log_m)

    def popii_log_lifetime(self, m: ArrayLike) -> ArrayLike:
        return self.lifetimes.log_lifetime_popii(m)

    def popiii_log_lifetime(self, m: ArrayLike) -> ArrayLike:
        return self.lifetimes.log_lifetime_popiii(m)

    def popiii_sn_energy(self, m: ArrayLike) -> ArrayLike:
        return self.sn_energy(m)

    def do_feedback(self, star, particles, dt: float):
        """Give feedback from a star particle to the surrounding gas over a time dt."""
        raise NotImplementedError("Applying discrete feedback to gas particles is not implemented")

    def scalars(self):
        """All scalars in restart file order, excluding the interpolators."""
        return (
            self.popii_imf.params()
            + self.snia_delay.params()
            + self.popiii_imf.params()
            + self.integrals.values()
        )

    def summary(self) -> pd.DataFrame:
        """The derived integrals and yields as a two column dataframe."""
        rows = [
            (f"integral.{k}", v)
            for k, v in zip(DerivedIntegrals.__dataclass_fields__, self.integrals.values())
        ]
        for channel in ("snii", "snia", "popii_wind", "popiii_sn", "popiii_wind"):
            record = getattr(self.yields, channel)
            for k in record.__dataclass_fields__:
                rows.append((f"{channel}.{k}", getattr(record, k)))

        return pd.DataFrame(rows, columns=["quantity", "value"])

    def dump(self, rfile: RestartFile) -> None:
        """Write everything needed to restore the object without integrating."""
        for value in self.scalars():
            rfile.write(value)
        self.snia_delay_table.dump(rfile)
        self.popiii_mass_table.dump(rfile)
        self.lifetimes.f_popii.dump(rfile)
        self.lifetimes.f_popiii.dump(rfile)
        self.sn_energy.spline.dump(rfile)
        for value in self.yields.values():
            rfile.write(value)

    @classmethod
    def restore(cls, rfile: RestartFile) -> "DiscreteStellarFeedback":
        """Read an object written with dump().

        Raises
        ------
        RestoreFormatError: If the stream is truncated, out of order, or holds
            invalid values.
        """
        popii = _read_values(rfile, 10)
        popiii = _read_values(rfile, 9)
        integral_values = _read_values(rfile, 6)
        snia_delay_table = Interpolator.from_restart(rfile)
        popiii_mass_table = Interpolator.from_restart(rfile)
        f_popii = Interpolator.from_restart(rfile)
        f_popiii = Interpolator.from_restart(rfile)
        sn_energy_spline = Interpolator.from_restart(rfile)
        yield_values = _read_values(rfile, N_VALUES)

        try:
            popii_imf = PopIIIMF(
                mass_low=popii[0],
                mass_upp=popii[1],
                fac=popii[2],
                mass_snii_low=popii[3],
                mass_snia_low=popii[4],
                mass_snia_upp=popii[5],
            )
            snia_delay = SNIaDelay(mu=popii[6], sigma=popii[7], norm1=popii[8], norm2=popii[9])
            sn_energy = PopIIISNEnergy(spline=sn_energy_spline)
            popiii_imf = PopIIIIMF(*popiii, sn_energy=sn_energy)
        except ConfigurationError as err:
            raise RestoreFormatError(
                f"Invalid model parameters in restart file: {err.message}"
            ) from err

        logger.info("Restored discrete stellar feedback tables")

        return cls(
            popii_imf=popii_imf,
            snia_delay=snia_delay,
            popiii_imf=popiii_imf,
            sn_energy=sn_energy,
            lifetimes=ApproxLifetime(f_popii=f_popii, f_popiii=f_popiii),
            integrals=DerivedIntegrals(*integral_values),
            snia_delay_table=snia_delay_table,
            popiii_mass_table=popiii_mass_table,
            yields=FeedbackYields.from_values(yield_values),
        )

    def save(self, path: str) -> None:
        with open(path, "wb") as f:
            self.dump(RestartFile(f, mode="w"))

    @classmethod
    def load(cls, path: str) -> "DiscreteStellarFeedback":
        with open(path, "rb") as f:
            return cls.restore(RestartFile(f, mode="r"))


def _read_values(rfile: RestartFile, n: int):
    values = [rfile.read() for _ in range(n)]
    if not np.isfinite(values).all():
        raise RestoreFormatError(f"Non-finite values in restart file: {values}")
    return values
