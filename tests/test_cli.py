import pandas as pd
import pytest

import discrete_feedback
from discrete_feedback.feedback import stellar_feedback


def test_parse_build_defaults():
    args = discrete_feedback.parse_cli_args().parse_args(["build"])

    assert args.command == "build"
    assert args.output_path == "./"
    assert args.name == "feedback_restart.bin"
    assert args.func is discrete_feedback.run_build
    assert not args.verbose


def test_build_then_inspect(feedback, monkeypatch, tmp_path, capsys):
    monkeypatch.setattr(
        stellar_feedback.DiscreteStellarFeedback, "build", classmethod(lambda cls: feedback)
    )

    discrete_feedback.main(["build", "-o", str(tmp_path), "-n", "fb.bin"])
    assert (tmp_path / "fb.bin").exists()
    assert "fb.bin" in capsys.readouterr().out

    output_csv = tmp_path / "summary.csv"
    discrete_feedback.main(["inspect", str(tmp_path / "fb.bin"), "-o", str(output_csv)])
    summary = pd.read_csv(output_csv)

    assert list(summary.columns) == ["quantity", "value"]
    assert len(summary) == 25
    assert summary["value"].iloc[0] == pytest.approx(feedback.integrals.popii_mass)


def test_inspect_prints_summary(feedback, tmp_path, capsys):
    path = tmp_path / "fb.bin"
    feedback.save(path)

    discrete_feedback.main(["-v", "inspect", str(path)])

    out = capsys.readouterr().out
    assert "integral.popiii_sn_energy" in out
    assert "popiii_wind.end_time" in out
