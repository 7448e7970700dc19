"""Tests for the command line entry point."""

import json
from unittest.mock import MagicMock

import pytest

from face_forensics import main as cli
from face_forensics.imaging import RGBAImage, load_image, save_png
from face_forensics.utils.timing import format_uptime

from conftest import make_checkerboard


@pytest.fixture(autouse=True)
def quiet_logging(monkeypatch):
    monkeypatch.setattr(cli, "setup_logging", MagicMock())
    monkeypatch.setattr(cli, "_load_local_env", MagicMock())


def test_analyze_writes_artifacts(tmp_path, capsys):
    source = save_png(RGBAImage.from_array(make_checkerboard()), tmp_path / "board.png")
    out_dir = tmp_path / "out"

    cli.main(["analyze", str(source), "--out", str(out_dir), "--no-detect", "--annotate"])

    report = json.loads((out_dir / "analysis.json").read_text(encoding="utf-8"))
    assert report["metrics"]["spoofRisk"] == pytest.approx(0.3)
    assert report["faces"] == []
    assert load_image(out_dir / "enhanced.png").width == 4
    assert (out_dir / "annotated.png").exists()
    assert str(out_dir / "analysis.json") in capsys.readouterr().out


def test_amount_override_reaches_pipeline(tmp_path, monkeypatch):
    seen = {}
    real_analyze = cli.analyze

    def spy(image, config, detector):
        seen["amount"] = config.unsharp_amount
        seen["radius"] = config.unsharp_radius
        return real_analyze(image, config, detector)

    monkeypatch.setattr(cli, "analyze", spy)
    source = save_png(RGBAImage.from_array(make_checkerboard()), tmp_path / "board.png")

    cli.main(["analyze", str(source), "--out", str(tmp_path), "--no-detect",
              "--radius", "2", "--amount", "1.25"])

    assert seen == {"amount": 1.25, "radius": 2}


def test_missing_file_exits_with_error(tmp_path):
    with pytest.raises(SystemExit) as exc:
        cli.main(["analyze", str(tmp_path / "nope.png"), "--no-detect"])
    assert exc.value.code == 2


def test_format_uptime():
    assert format_uptime(5) == "5s"
    assert format_uptime(3661) == "1h 1m 1s"
    assert format_uptime(90061) == "1d 1h 1m 1s"
    assert format_uptime(86400) == "1d 0s"
