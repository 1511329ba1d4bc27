import dataclasses

import pytest

from discrete_feedback import config
from discrete_feedback.feedback import yields

fb_yields = yields.generate_yields(2.0e51)


def test_energies_scaled_by_efficiency():
    efficiency = config.FEEDBACK_PARAMS["efficiency"]

    assert fb_yields.snii.energy == pytest.approx(0.7e51)
    assert fb_yields.snia.energy == pytest.approx(0.7e51)
    assert fb_yields.popiii_sn.energy == 2.0e51 * efficiency
    assert fb_yields.popii_wind.energy == pytest.approx(0.7e50 / 31.0)
    assert fb_yields.popiii_wind.energy == pytest.approx(0.7e51 / 16.7)


def test_masses_not_scaled():
    assert fb_yields.snii == yields.Yield(
        energy=fb_yields.snii.energy,
        mass=0.191445322565,
        metals=0.0241439721018,
        fe=0.000932719658516,
        mg=0.00151412640705,
    )
    assert fb_yields.snia.mass == fb_yields.snia.metals == 0.00655147325196
    assert fb_yields.popiii_sn.mass == 0.45
    assert fb_yields.popiii_sn.metals == 0.026
    assert fb_yields.popii_wind.end_time == 31.0
    assert fb_yields.popiii_wind.end_time == 16.7


def test_values_order():
    values = fb_yields.values()

    assert len(values) == yields.N_VALUES == 19
    assert values[0] == fb_yields.snii.energy
    assert values[10:12] == (fb_yields.popii_wind.energy, 31.0)
    assert values[12] == fb_yields.popiii_sn.energy
    assert values[-1] == 16.7
    assert yields.FeedbackYields.from_values(values) == fb_yields


def test_yields_are_immutable():
    with pytest.raises(dataclasses.FrozenInstanceError):
        fb_yields.snii.energy = 0.0
