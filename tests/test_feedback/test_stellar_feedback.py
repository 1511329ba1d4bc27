import dataclasses
import io

import numpy as np
import pytest

from discrete_feedback.feedback.stellar_feedback import DiscreteStellarFeedback
from discrete_feedback.io.restart_file import RestartFile
from discrete_feedback.utils.error_handling import ConfigurationError, RestoreFormatError

# The header is the magic string and a uint64 version, the first scalar follows.
FIRST_TAG = 15

PROBE_MASSES = np.array([0.08, 0.5, 1.0, 3.0, 8.0, 9.5, 40.0, 140.0, 260.0, 499.0])
PROBE_TIMES = np.array([0.02, 0.03, 0.05, 0.1, 0.25, 1.0, 5.0, 13.6, 14.0])


def _dumped(fb):
    stream = io.BytesIO()
    fb.dump(RestartFile(stream, mode="w"))
    return stream.getvalue()


def _restored(data):
    return DiscreteStellarFeedback.restore(RestartFile(io.BytesIO(data), mode="r"))


def test_derived_integrals(feedback):
    integrals = feedback.integrals

    assert np.isfinite(integrals.values()).all()
    assert 0.0 < integrals.popii_snii_number < integrals.popii_mass
    assert 0.0 < integrals.popii_snia_number
    assert 0.0 < integrals.popiii_sn_number < integrals.popiii_mass
    assert integrals.popiii_sn_energy > 0.0


def test_scalars_and_summary(feedback):
    summary = feedback.summary()

    assert len(feedback.scalars()) == 25
    assert list(summary.columns) == ["quantity", "value"]
    assert len(summary) == 25
    assert summary["quantity"].iloc[0] == "integral.popii_mass"
    assert summary.set_index("quantity").loc["popiii_sn.energy", "value"] == (
        feedback.yields.popiii_sn.energy
    )


def test_lookups(feedback):
    assert feedback.popii_imf_value(1.0) == feedback.popii_imf(1.0)
    assert feedback.popiii_imf_value(30.0) == feedback.popiii_imf(30.0)
    assert feedback.snia_delay_value(0.05) == feedback.snia_delay(0.05)
    assert feedback.popii_log_lifetime(1.0) == feedback.lifetimes.log_lifetime_popii(1.0)
    assert feedback.popiii_log_lifetime(1.0) == feedback.lifetimes.log_lifetime_popiii(1.0)


def test_popiii_sn_energy_jump(feedback):
    """Pair instability SNe start just above 140 solar masses"""
    assert feedback.popiii_sn_energy(140.0) == pytest.approx(1.0e51, rel=1.0e-12)
    assert feedback.popiii_sn_energy(140.0 + 1.0e-10) == pytest.approx(9.0e51, rel=1.0e-12)


def test_restore_is_exact(feedback):
    restored = _restored(_dumped(feedback))

    assert restored.scalars() == feedback.scalars()
    assert restored.integrals == feedback.integrals
    assert restored.yields == feedback.yields
    assert restored.snia_delay_table == feedback.snia_delay_table
    assert restored.popiii_mass_table == feedback.popiii_mass_table
    assert restored.lifetimes.f_popii == feedback.lifetimes.f_popii
    assert restored.lifetimes.f_popiii == feedback.lifetimes.f_popiii
    assert restored.summary().equals(feedback.summary())


def test_restore_evaluates_identically(feedback):
    restored = _restored(_dumped(feedback))
    log_masses = np.log10(PROBE_MASSES)
    log_times = np.log10(PROBE_TIMES)

    np.testing.assert_array_equal(
        restored.popii_imf_value(PROBE_MASSES), feedback.popii_imf_value(PROBE_MASSES)
    )
    np.testing.assert_array_equal(
        restored.popiii_imf_value(PROBE_MASSES), feedback.popiii_imf_value(PROBE_MASSES)
    )
    np.testing.assert_array_equal(
        restored.snia_delay_value(PROBE_TIMES), feedback.snia_delay_value(PROBE_TIMES)
    )
    np.testing.assert_array_equal(
        restored.snia_cumulative(log_times), feedback.snia_cumulative(log_times)
    )
    np.testing.assert_array_equal(
        restored.popiii_remaining_imf(log_masses), feedback.popiii_remaining_imf(log_masses)
    )
    np.testing.assert_array_equal(
        restored.popii_log_lifetime(PROBE_MASSES), feedback.popii_log_lifetime(PROBE_MASSES)
    )
    np.testing.assert_array_equal(
        restored.popiii_log_lifetime(PROBE_MASSES), feedback.popiii_log_lifetime(PROBE_MASSES)
    )
    np.testing.assert_array_equal(
        restored.popiii_sn_energy(PROBE_MASSES), feedback.popiii_sn_energy(PROBE_MASSES)
    )


def test_save_and_load(feedback, tmp_path):
    path = tmp_path / "restart.bin"
    feedback.save(path)
    loaded = DiscreteStellarFeedback.load(path)

    assert loaded.scalars() == feedback.scalars()
    assert loaded.yields == feedback.yields
    assert path.read_bytes() == _dumped(loaded)


@pytest.mark.parametrize("length", [0, 10, FIRST_TAG + 5, 400, -1])
def test_restore_truncated(feedback, length):
    data = _dumped(feedback)
    with pytest.raises(RestoreFormatError):
        _restored(data[:length])


def test_restore_out_of_order(feedback):
    data = bytearray(_dumped(feedback))
    data[FIRST_TAG : FIRST_TAG + 1] = b"b"

    with pytest.raises(RestoreFormatError, match="Type mismatch"):
        _restored(bytes(data))


@pytest.mark.parametrize(
    "value, match",
    [
        (np.nan, "Non-finite values"),
        (np.inf, "Non-finite values"),
        (200.0, "Invalid model parameters"),
    ],
)
def test_restore_invalid_values(feedback, value, match):
    data = bytearray(_dumped(feedback))
    data[FIRST_TAG + 1 : FIRST_TAG + 9] = np.array([value], dtype="<f8").tobytes()

    with pytest.raises(RestoreFormatError, match=match):
        _restored(bytes(data))


def test_build_rejects_inverted_mass_range():
    with pytest.raises(ConfigurationError, match="PopII IMF needs"):
        DiscreteStellarFeedback.build(popii_mass_low=100.0, popii_mass_upp=0.07)


def test_do_feedback_not_implemented(feedback):
    with pytest.raises(NotImplementedError):
        feedback.do_feedback(None, [], 1.0)


def test_read_only(feedback):
    with pytest.raises(dataclasses.FrozenInstanceError):
        feedback.yields = None
    with pytest.raises(ValueError):
        feedback.snia_delay_table.ys[0] = 1.0
