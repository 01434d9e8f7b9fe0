import json
import os
import subprocess
import sys

import pytest

SRC_PATH = os.path.join(os.path.dirname(__file__), "..", "..", "src")

# ~100m between points along a meridian
LAT_STEP = 100 / 111000


def _gpx(elevations: list[float]) -> str:
    trkpts = "\n".join(
        f'<trkpt lat="{45.0 + i * LAT_STEP:.7f}" lon="6.0"><ele>{e}</ele></trkpt>'
        for i, e in enumerate(elevations)
    )
    return f"""<?xml version="1.0"?>
<gpx version="1.1" xmlns="http://www.topografix.com/GPX/1/1">
  <trk><trkseg>
{trkpts}
  </trkseg></trk>
</gpx>"""


def _run(args: list[str], cwd) -> subprocess.CompletedProcess:
    env = dict(os.environ)
    env["PYTHONPATH"] = os.pathsep.join(filter(None, [os.path.abspath(SRC_PATH), env.get("PYTHONPATH")]))
    return subprocess.run(
        [sys.executable, "-m", "gpx_climbs", *args],
        capture_output=True,
        text=True,
        cwd=cwd,
        env=env,
    )


@pytest.fixture
def climb_gpx(tmp_path):
    """3km flat, a 2km climb gaining 100m, then 4km flat."""
    elevations = [100.0] * 30 + [100.0 + 5 * i for i in range(1, 21)] + [200.0] * 40
    path = tmp_path / "climb.gpx"
    path.write_text(_gpx(elevations))
    return str(path)


@pytest.fixture
def flat_gpx(tmp_path):
    path = tmp_path / "flat.gpx"
    path.write_text(_gpx([100.0] * 50))
    return str(path)


class TestCli:
    def test_run_with_climb(self, climb_gpx, tmp_path):
        result = _run([climb_gpx], tmp_path)
        assert result.returncode == 0, result.stderr
        output = result.stdout
        assert "GPX Climb Analysis" in output
        assert "Distance:" in output
        assert "Elevation Gain:" in output
        assert "Elevation Loss:" in output
        assert "Climbs:         1" in output
        assert "CAT4" in output

    def test_flat_route(self, flat_gpx, tmp_path):
        result = _run([flat_gpx], tmp_path)
        assert result.returncode == 0, result.stderr
        assert "No climbs detected." in result.stdout

    def test_json_output(self, climb_gpx, tmp_path):
        result = _run(["--json", climb_gpx], tmp_path)
        assert result.returncode == 0, result.stderr
        climbs = json.loads(result.stdout)
        assert len(climbs) == 1
        assert climbs[0]["category"] == "CAT4"
        assert climbs[0]["startPoint"]["distance"] < climbs[0]["endPoint"]["distance"]
        assert climbs[0]["averageGradient"] >= 1.5

    def test_unsmoothed_gradient(self, climb_gpx, tmp_path):
        result = _run(["--json", "--smoothing-window", "1", climb_gpx], tmp_path)
        assert result.returncode == 0, result.stderr
        climbs = json.loads(result.stdout)
        assert len(climbs) == 1
        assert climbs[0]["averageGradient"] == pytest.approx(5.0, rel=0.01)
        assert climbs[0]["elevationGain"] == pytest.approx(100.0)

    def test_high_min_gradient_finds_nothing(self, climb_gpx, tmp_path):
        result = _run(["--min-gradient", "8", climb_gpx], tmp_path)
        assert result.returncode == 0, result.stderr
        assert "No climbs detected." in result.stdout

    def test_chart_written(self, climb_gpx, tmp_path):
        chart_path = tmp_path / "profile.png"
        result = _run(["--chart", str(chart_path), climb_gpx], tmp_path)
        assert result.returncode == 0, result.stderr
        assert chart_path.read_bytes().startswith(b"\x89PNG")
        assert "Chart written to" in result.stdout

    def test_local_config_file(self, climb_gpx, tmp_path):
        (tmp_path / "gpx-climbs.json").write_text(json.dumps({"min_length": 5000}))
        result = _run([climb_gpx], tmp_path)
        assert result.returncode == 0, result.stderr
        assert "No climbs detected." in result.stdout

    def test_bad_config_value(self, climb_gpx, tmp_path):
        (tmp_path / "gpx-climbs.json").write_text(json.dumps({"min_length": "long"}))
        result = _run([climb_gpx], tmp_path)
        assert result.returncode != 0
        assert "Error" in result.stderr

    def test_invalid_smoothing_window(self, climb_gpx, tmp_path):
        result = _run(["--smoothing-window", "0", climb_gpx], tmp_path)
        assert result.returncode != 0
        assert "smoothing_window" in result.stderr

    def test_verbose_logs_detection(self, climb_gpx, tmp_path):
        result = _run(["-v", climb_gpx], tmp_path)
        assert result.returncode == 0, result.stderr
        assert "Found climb" in result.stderr

    def test_nonexistent_file(self, tmp_path):
        result = _run(["/nonexistent/file.gpx"], tmp_path)
        assert result.returncode != 0
        assert "Error: File not found" in result.stderr

    def test_malformed_gpx(self, tmp_path):
        path = tmp_path / "broken.gpx"
        path.write_text("<gpx><trk>")
        result = _run([str(path)], tmp_path)
        assert result.returncode != 0
        assert "Error parsing GPX file" in result.stderr

    def test_too_few_points(self, tmp_path):
        path = tmp_path / "short.gpx"
        path.write_text(_gpx([100.0]))
        result = _run([str(path)], tmp_path)
        assert result.returncode != 0
        assert "fewer than 2" in result.stderr
