"""Energy, mass and metal yields of the discrete feedback events."""

from dataclasses import astuple, dataclass

from .. import config


@dataclass(frozen=True)
class Yield:
    """The yield of a single explosive feedback event.

    Attributes
    ----------
    energy: float
        Energy coupled to the gas (erg).
    mass: float
        Ejected mass, as a fraction of the star particle mass.
    metals: float
        Ejected metal mass, as a fraction of the star particle mass.
    fe: float
        Ejected iron mass, as a fraction of the star particle mass.
    mg: float
        Ejected magnesium mass, as a fraction of the star particle mass.
    """

    energy: float
    mass: float
    metals: float
    fe: float
    mg: float

    def values(self):
        return astuple(self)


@dataclass(frozen=True)
class WindYield:
    """Continuous energy injection by stellar winds.

    Attributes
    ----------
    energy: float
        Energy coupled to the gas per unit time (erg/Myr).
    end_time: float
        Time after star formation at which the winds stop (Myr).
    """

    energy: float
    end_time: float

    def values(self):
        return astuple(self)


@dataclass(frozen=True)
class FeedbackYields:
    """The yields of all feedback channels."""

    snii: Yield
    snia: Yield
    popii_wind: WindYield
    popiii_sn: Yield
    popiii_wind: WindYield

    def values(self):
        """All yield scalars, in restart file order."""
        return (
            self.snii.values()
            + self.snia.values()
            + self.popii_wind.values()
            + self.popiii_sn.values()
            + self.popiii_wind.values()
        )

    @classmethod
    def from_values(cls, values):
        """Inverse of values()."""
        values = [float(v) for v in values]
        return cls(
            snii=Yield(*values[0:5]),
            snia=Yield(*values[5:10]),
            popii_wind=WindYield(*values[10:12]),
            popiii_sn=Yield(*values[12:17]),
            popiii_wind=WindYield(*values[17:19]),
        )


N_VALUES = 19


def generate_yields(popiii_sn_energy_integral: float, feedback_params=None) -> FeedbackYields:
    """Set up the yields of every feedback channel.

    Only the energies are scaled by the feedback efficiency. The PopIII SN energy
    is the IMF weighted explosion energy rather than a fixed value, and wind
    energies are spread evenly over the lifetime of the winds.

    Parameters
    ----------
    popiii_sn_energy_integral: float
        The integral of E_SN(m) * phi(m) over the PopIII SN mass range.
    feedback_params: dict, optional
        Defaults to config.FEEDBACK_PARAMS.
    """
    if feedback_params is None:
        feedback_params = config.FEEDBACK_PARAMS
    efficiency = feedback_params["efficiency"]

    snii = feedback_params["snii"]
    snia = feedback_params["snia"]
    popii_wind = feedback_params["popii_wind"]
    popiii_sn = feedback_params["popiii_sn"]
    popiii_wind = feedback_params["popiii_wind"]

    return FeedbackYields(
        snii=Yield(
            energy=snii["energy"] * efficiency,
            mass=snii["mass"],
            metals=snii["metals"],
            fe=snii["fe"],
            mg=snii["mg"],
        ),
        snia=Yield(
            energy=snia["energy"] * efficiency,
            mass=snia["mass"],
            metals=snia["metals"],
            fe=snia["fe"],
            mg=snia["mg"],
        ),
        popii_wind=WindYield(
            energy=popii_wind["energy"] * efficiency / popii_wind["end_time"],
            end_time=popii_wind["end_time"],
        ),
        popiii_sn=Yield(
            energy=popiii_sn_energy_integral * efficiency,
            mass=popiii_sn["mass"],
            metals=popiii_sn["metals"],
            fe=popiii_sn["fe"],
            mg=popiii_sn["mg"],
        ),
        popiii_wind=WindYield(
            energy=popiii_wind["energy"] * efficiency / popiii_wind["end_time"],
            end_time=popiii_wind["end_time"],
        ),
    )
