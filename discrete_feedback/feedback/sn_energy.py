"""
Explosion energies of PopIII supernovae as a function of progenitor mass.
Values are interpolated linearly between the models of Heger & Woosley 2002
(https://arxiv.org/abs/astro-ph/0107037): 1e51 erg for core collapse SNe up to
140 solar masses, rising steeply for pair instability SNe above that. The pair
instability onset is encoded as two knots 1e-10 solar masses apart.

Example
-------
>>> e_sn = sn_energy.PopIIISNEnergy()
>>> e_sn(20.0)
>>> 1.e51
"""

from typing import Tuple, Union

import numpy as np

from .. import config
from ..io import check_tables
from ..utils.error_handling import ConfigurationError
from ..utils.interpolate import Interpolator

N_KNOTS = 18
PAIR_INSTABILITY_ONSET = 140.0 + 1.0e-10


class PopIIISNEnergy(object):
    """
    Attributes
    ----------
    spline: Interpolator
        Linear interpolation of the energy (in units of energy_unit) over mass.
    energy_unit: float
        Energy scale of the tabulated values (erg).
    """

    def __init__(self, spline: Interpolator = None, energy_unit: float = None):
        if spline is None:
            spline = self._interpolate_energies(self._read_energies())
        if energy_unit is None:
            energy_unit = config.FEEDBACK_PARAMS["sn_energy_unit"]
        self.spline = spline
        self.energy_unit = float(energy_unit)

    def __call__(self, mass: Union[float, np.ndarray]) -> Union[float, np.ndarray]:
        return self.energy(mass)

    @property
    def breakpoints(self) -> Tuple[float, ...]:
        return tuple(self.spline.xs)

    def energy(self, mass: Union[float, np.ndarray]) -> Union[float, np.ndarray]:
        """Returns the explosion energy (erg) of a PopIII star of the given mass."""
        return self.energy_unit * self.spline(mass)

    def _read_energies(self):
        """
        Reads the explosion energy table and returns a dataframe.
        """
        data = check_tables.read_knot_table(
            config.FILEPATHS["sn_energy_popiii"], ["mass", "energy"], N_KNOTS
        )
        if PAIR_INSTABILITY_ONSET not in data.mass.to_numpy():
            raise ConfigurationError(
                f"SN energy table has no knot at {PAIR_INSTABILITY_ONSET!r} solar masses"
            )
        return data

    def _interpolate_energies(self, data) -> Interpolator:
        return Interpolator("linear", data.mass.to_numpy(), data.energy.to_numpy())
