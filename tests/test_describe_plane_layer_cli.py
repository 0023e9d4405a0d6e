from __future__ import annotations

import json
import subprocess
import sys
from pathlib import Path

import pytest

REPO_ROOT = Path(__file__).resolve().parent.parent
SCRIPT = REPO_ROOT / "scripts" / "describe_plane_layer.py"


def _run(*args: str) -> subprocess.CompletedProcess:
    cmd = [sys.executable, str(SCRIPT), *args]
    return subprocess.run(cmd, capture_output=True, text=True)


def test_describe_layer_and_clone():
    proc = _run("--thickness", "2.0", "--shift", "0", "0", "5")
    assert proc.returncode == 0, proc.stderr
    payload = json.loads(proc.stdout)

    layer = payload["layer"]
    assert layer["thickness"] == 2.0
    assert layer["layer_type"] == "active"
    assert layer["bounds"]["shape"] == "RectangleBounds"
    assert layer["bounds"]["area"] == pytest.approx(100.0)
    assert layer["approach_descriptor"]["derived"] is True
    offsets = sorted(s["offset"] for s in layer["approach_descriptor"]["surfaces"])
    assert offsets == pytest.approx([-1.0, 0.0, 1.0])
    assert layer["mesh"]["volume"] == pytest.approx(200.0)

    clone = payload["clone"]
    assert clone["transform"][2][3] == pytest.approx(5.0)
    assert clone["sensitive_surfaces"] == 0


def test_probe_reports_entry_face():
    proc = _run("--thickness", "2.0", "--probe", "0", "0", "-10", "0", "0", "1")
    assert proc.returncode == 0, proc.stderr
    probe = json.loads(proc.stdout)["layer"]["probe"]
    assert probe["surface"]["role"] == "approach"
    assert probe["surface"]["offset"] == pytest.approx(-1.0)
    assert probe["path_length"] == pytest.approx(9.0)


def test_probe_tie_prefers_layer_surface():
    proc = _run("--probe", "0", "0", "-10", "0", "0", "1")
    assert proc.returncode == 0, proc.stderr
    probe = json.loads(proc.stdout)["layer"]["probe"]
    assert probe["surface"]["role"] == "layer"


def test_trapezoid_with_tilted_normal():
    proc = _run(
        "--shape", "trapezoid", "--min-half-x", "2", "--max-half-x", "4", "--half-y", "3",
        "--normal", "1", "0", "0", "--center", "10", "0", "0", "--layer-type", "navigation",
    )
    assert proc.returncode == 0, proc.stderr
    layer = json.loads(proc.stdout)["layer"]
    assert layer["layer_type"] == "navigation"
    assert layer["bounds"]["parameters"] == [2.0, 4.0, 3.0]
    for surface in layer["approach_descriptor"]["surfaces"]:
        assert surface["normal"] == pytest.approx([1.0, 0.0, 0.0])
        assert surface["center"] == pytest.approx([10.0, 0.0, 0.0])


def test_negative_thickness_is_rejected():
    proc = _run("--thickness", "-1")
    assert proc.returncode == 2
    assert "thickness" in proc.stderr


def test_zero_probe_direction_is_rejected():
    proc = _run("--probe", "0", "0", "-1", "0", "0", "0")
    assert proc.returncode == 2
    assert "Direction cannot be zero" in proc.stderr
    assert "Traceback" not in proc.stderr
