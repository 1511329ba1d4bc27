"""Configuration parameters for the discrete stellar feedback tables.

PopII stars follow a Chabrier (2003) IMF with a Mannucci et al. (2006) SNIa
delay time distribution, PopIII stars follow the Susa et al. (2014) IMF with
Heger & Woosley (2002) explosion energies.
    https://arxiv.org/abs/astro-ph/0304382
    https://arxiv.org/abs/astro-ph/0607332
"""

import os
import pathlib

INSTALL_DIR = pathlib.Path(__file__).parent.absolute()

# Relevant filepaths
FILEPATHS = {
    "lifetimes_popii": os.path.join(INSTALL_DIR, "data/lifetimes_popii.csv"),
    "lifetimes_popiii": os.path.join(INSTALL_DIR, "data/lifetimes_popiii.csv"),
    "sn_energy_popiii": os.path.join(INSTALL_DIR, "data/sn_energy_popiii.csv"),
}

POPII_PARAMS = {
    "mass_low": 0.07,  # solar masses, minimum stellar mass.
    "mass_upp": 100.0,  # solar masses, maximum stellar mass.
    "mass_snii_low": 8.0,  # solar masses, minimum stellar mass for SNII.
    "mass_snia_low": 3.0,  # solar masses, minimum mass of SNIa progenitors.
    "mass_snia_upp": 8.0,  # solar masses, maximum mass of SNIa progenitors.
}

# Two component delay time distribution, times in Gyr
SNIA_DELAY_PARAMS = {
    "mu": 0.05,  # centre of the prompt component.
    "sigma": 0.01,  # width of the prompt component.
    "time_min": 0.03,  # earliest SNIa.
    "time_max": 13.6,  # latest SNIa.
    "time_tail": 13.8,  # trailing knot of the cumulative table.
    "burst_fraction": 0.4,  # fraction of SNIa in the prompt component.
    "decay_fraction": 0.6,  # fraction of SNIa in the delayed component.
    "time_break": 0.25,  # peak of the delayed component.
    "rise_scale": 0.1,  # e-folding time before the peak.
    "decay_scale": 7.0,  # e-folding time after the peak.
    "log_time_step": 0.1,  # dex, spacing of the cumulative table.
    "log_time_head": -2.0,  # leading knot of the cumulative table.
}

POPIII_PARAMS = {
    "cutoff": -5.0,  # log10 metallicity above which no PopIII stars form.
    "mass_low": 0.7,  # solar masses, minimum stellar mass.
    "mass_upp": 500.0,  # solar masses, maximum stellar mass.
    "mass_sn_low": 10.0,  # solar masses, minimum stellar mass for a SN.
    "m2": 1.51130759,  # log10 solar masses, peak of the IMF.
    "fac": 708.92544818,  # normalisation of the IMF.
    "pw": 2.8008394,  # exponent of the IMF.
    "log_mass_step": 0.01,  # dex, spacing of the cumulative table.
    "log_mass_head": -2.0,  # leading knot of the cumulative table.
    "log_mass_tail": 3.0,  # trailing knot of the cumulative table.
}

# Energies in erg, masses as fractions of the particle mass, wind end times in Myr.
# TODO: convert energies and times to the internal units of the host simulation
FEEDBACK_PARAMS = {
    "efficiency": 0.7,  # fraction of the energy coupled to the gas.
    "sn_energy_unit": 1.0e51,  # erg, energy scale of the PopIII SN energy table.
    "snii": {
        "energy": 1.0e51,
        "mass": 0.191445322565,
        "metals": 0.0241439721018,
        "fe": 0.000932719658516,
        "mg": 0.00151412640705,
    },
    "snia": {
        "energy": 1.0e51,
        "mass": 0.00655147325196,
        "metals": 0.00655147325196,
        "fe": 0.00165100587997,
        "mg": 0.000257789470044,
    },
    "popii_wind": {
        "energy": 1.0e50,
        "end_time": 31.0,
    },
    # The PopIII SN energy follows from the IMF weighted energy integral.
    "popiii_sn": {
        "mass": 0.45,
        "metals": 0.026,
        "fe": 0.0000932719658516,
        "mg": 0.000151412640705,
    },
    "popiii_wind": {
        "energy": 1.0e51,
        "end_time": 16.7,
    },
}

INTEGRATION_PARAMS = {
    "epsrel": 1.0e-8,  # relative accuracy of every derived integral.
    "limit": 200,  # maximum number of subintervals.
}
