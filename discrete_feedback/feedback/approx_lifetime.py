"""
A class to look up stellar lifetimes as a function of mass for PopII and PopIII stars.
Values are interpolated with natural cubic splines through tabulated lifetimes:
87 masses in range 0.65 Msun - 350 Msun for PopII stars (log10 of the lifetime in
years), and 24 masses in range 0.7 Msun - 500 Msun for PopIII stars (log10 of the
lifetime in Gyr). Interpolating for masses outside this range will return the
boundary value of the data.

Example
-------
>>> lt = approx_lifetime.ApproxLifetime()
>>> lt.log_lifetime_popii(mass=1.0)
>>> 9.79803
>>> lt.log_lifetime_popiii(mass=1.0)
>>> 0.78533
"""

from typing import Union

import numpy as np
import pandas as pd

from .. import config
from ..io import check_tables
from ..utils.interpolate import Interpolator

N_KNOTS_POPII = 87
N_KNOTS_POPIII = 24


class ApproxLifetime(object):
    """
    Attributes
    ----------
    f_popii: Interpolator
        log10 lifetime (years) of PopII stars as a function of mass.
    f_popiii: Interpolator
        log10 lifetime (Gyr) of PopIII stars as a function of mass.
    """

    def __init__(self, f_popii: Interpolator = None, f_popiii: Interpolator = None):
        if f_popii is None:
            data = self._read_lifetimes(config.FILEPATHS["lifetimes_popii"], N_KNOTS_POPII)
            f_popii = self._interpolate_lifetimes(data)
        if f_popiii is None:
            data = self._read_lifetimes(config.FILEPATHS["lifetimes_popiii"], N_KNOTS_POPIII)
            f_popiii = self._interpolate_lifetimes(data)
        self.f_popii = f_popii
        self.f_popiii = f_popiii

    def log_lifetime_popii(self, mass: Union[float, np.ndarray]) -> Union[float, np.ndarray]:
        """Returns log10 of the lifetime (years) of a PopII star.

        Parameters
        ----------
        mass: float
            The stars mass in solar masses.
        Returns
        -------
        float
            log10 stellar lifetime in years.
        """
        return self.f_popii(mass)

    def log_lifetime_popiii(self, mass: Union[float, np.ndarray]) -> Union[float, np.ndarray]:
        """Returns log10 of the lifetime (Gyr) of a PopIII star.

        Parameters
        ----------
        mass: float
            The stars mass in solar masses.
        Returns
        -------
        float
            log10 stellar lifetime in Gyr.
        """
        return self.f_popiii(mass)

    def _read_lifetimes(self, data_path: str, n_knots: int) -> pd.DataFrame:
        """
        Reads the stellar lifetime data in whitespace separated format and returns a dataframe.
        """
        return check_tables.read_knot_table(data_path, ["mass", "log_lifetime"], n_knots)

    def _interpolate_lifetimes(self, data: pd.DataFrame) -> Interpolator:
        """Interpolates between masses for stellar lifetimes.

        Parameters
        ----------
        data: pd.DataFrame
            The stellar lifetime data at discrete masses. Must have a `mass` column in
            ascending order and a `log_lifetime` column.
            E.g.
            mass    log_lifetime
            0.65    10.452
            0.7     10.3415
            ... etc.
        Returns
        -------
        Interpolator
            A natural cubic spline.
        """
        return Interpolator("cubic", data.mass.to_numpy(), data.log_lifetime.to_numpy())
