"""Check reference tables and model parameters for completeness, inconsistencies, etc."""

from typing import Dict, List

import numpy as np
import pandas as pd

from .. import config
from ..utils.error_handling import ConfigurationError


def read_knot_table(filepath: str, columns: List[str], n_knots: int) -> pd.DataFrame:
    """Read a whitespace separated table of interpolation knots and validate it.

    Parameters
    ----------
    filepath: str
        Path to the table. Lines starting with '#' are comments.
    columns: List[str]
        The expected column labels, abscissa first.
    n_knots: int
        The expected number of rows.

    Returns
    -------
    pd.DataFrame
        The validated table.
    """
    df = pd.read_csv(filepath, comment="#", sep=r"\s+", float_precision="round_trip")
    check_knots(df, columns, n_knots, name=filepath)

    return df


def check_knots(df: pd.DataFrame, columns: List[str], n_knots: int, name: str = "table") -> None:
    """Check that a knot table has the right shape and a strictly increasing abscissa.

    Raises
    ------
    ConfigurationError: If columns are missing, the number of knots is wrong, values
        are missing or non-finite, or the abscissa is not strictly increasing.
    """
    missing_columns = list(set(columns) - set(df.columns))
    if len(missing_columns) != 0:
        raise ConfigurationError(f"Knot table {name} is missing required columns:\n{missing_columns}")
    if len(df) != n_knots:
        raise ConfigurationError(f"Knot table {name} has {len(df)} knots, expected {n_knots}")
    values = df[columns].to_numpy(dtype=float)
    if not np.isfinite(values).all():
        raise ConfigurationError(f"Knot table {name} contains missing or non-finite values")
    if not (np.diff(values[:, 0]) > 0.0).all():
        raise ConfigurationError(
            f"Knot table {name} must have a strictly increasing '{columns[0]}' column"
        )


def check_config(
    popii_params: Dict[str, float] = None,
    popiii_params: Dict[str, float] = None,
    delay_params: Dict[str, float] = None,
    feedback_params: Dict[str, float] = None,
) -> None:
    """Validate the model parameters before any integration is done.

    Parameters default to the dictionaries in config.

    Raises
    ------
    ConfigurationError: If any mass or time interval is empty or inconsistent, or the
        feedback efficiency is outside (0, 1].
    """
    if popii_params is None:
        popii_params = config.POPII_PARAMS
    if popiii_params is None:
        popiii_params = config.POPIII_PARAMS
    if delay_params is None:
        delay_params = config.SNIA_DELAY_PARAMS
    if feedback_params is None:
        feedback_params = config.FEEDBACK_PARAMS

    mass_low = popii_params["mass_low"]
    mass_upp = popii_params["mass_upp"]
    if not 0.0 < mass_low < mass_upp:
        raise ConfigurationError(
            f"PopII IMF needs 0 < mass_low < mass_upp, got mass_low = {mass_low} "
            f"and mass_upp = {mass_upp}"
        )
    _check_window("PopII SNII", popii_params["mass_snii_low"], mass_upp, mass_low, mass_upp)
    _check_window(
        "PopII SNIa",
        popii_params["mass_snia_low"],
        popii_params["mass_snia_upp"],
        mass_low,
        mass_upp,
    )

    mass_low = popiii_params["mass_low"]
    mass_upp = popiii_params["mass_upp"]
    if not 0.0 < mass_low < mass_upp:
        raise ConfigurationError(
            f"PopIII IMF needs 0 < mass_low < mass_upp, got mass_low = {mass_low} "
            f"and mass_upp = {mass_upp}"
        )
    if not np.log10(mass_low) < popiii_params["m2"] < np.log10(mass_upp):
        raise ConfigurationError(
            f"PopIII IMF peak (log10 m = {popiii_params['m2']}) must lie inside "
            f"({mass_low}, {mass_upp})"
        )
    if not popiii_params["log_mass_head"] < np.log10(mass_low):
        raise ConfigurationError("PopIII cumulative table head must lie below log10(mass_low)")
    if not np.log10(mass_upp) < popiii_params["log_mass_tail"]:
        raise ConfigurationError("PopIII cumulative table tail must lie above log10(mass_upp)")
    _check_window("PopIII SN", popiii_params["mass_sn_low"], mass_upp, mass_low, mass_upp)

    time_min = delay_params["time_min"]
    time_max = delay_params["time_max"]
    time_tail = delay_params["time_tail"]
    if not 0.0 < time_min < time_max < time_tail:
        raise ConfigurationError(
            f"SNIa delay times need 0 < time_min < time_max < time_tail, got "
            f"{time_min}, {time_max}, {time_tail}"
        )
    if not delay_params["log_time_head"] < np.log10(time_min):
        raise ConfigurationError("SNIa cumulative table head must lie below log10(time_min)")

    efficiency = feedback_params["efficiency"]
    if not 0.0 < efficiency <= 1.0:
        raise ConfigurationError(f"Feedback efficiency must be in (0, 1], got {efficiency}")


def _check_window(name: str, lower: float, upper: float, mass_low: float, mass_upp: float):
    if not mass_low <= lower < upper <= mass_upp:
        raise ConfigurationError(
            f"{name} mass range [{lower}, {upper}] must be non-empty and lie inside "
            f"the IMF domain [{mass_low}, {mass_upp}]"
        )
