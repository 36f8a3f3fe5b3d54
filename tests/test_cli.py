import os
import sys
from unittest.mock import patch

import pytest

from greatcircle import cli
from greatcircle.config import GreatCircleConfig
from greatcircle.geometry import NamedCoordinate
from greatcircle.route import Route

FIXTURE = os.path.join(os.path.dirname(__file__), "fixtures", "ksfo_klax.gpx")

KSFO = NamedCoordinate.from_dms("KSFO", "37:37:00", "122:22:00")
KLAX = NamedCoordinate.from_dms("KLAX", "33:57:00", "118:24:00")
KSJC = NamedCoordinate.from_dms("KSJC", "37:22:00", "121:55:00")


def run_main(monkeypatch, *args):
    monkeypatch.setattr(sys, "argv", ["greatcircle", *args])
    cli.main()


class TestArgumentParser:
    def test_defaults(self):
        args = cli.create_argument_parser().parse_args(["route.gpx"])
        config = GreatCircleConfig.from_args(args)
        assert config == GreatCircleConfig()
        assert args.no_map is False

    def test_options(self):
        args = cli.create_argument_parser().parse_args(
            [
                "route.gpx",
                "--max-distance", "10",
                "--bbox-buffer", "5",
                "--output", "out.html",
                "--no-open",
                "--log-level", "DEBUG",
            ]
        )
        config = GreatCircleConfig.from_args(args)
        assert config.max_distance == 10.0
        assert config.bbox_buffer == 5.0
        assert config.output == "out.html"
        assert config.open_browser is False
        assert config.log_level == "DEBUG"

    def test_invalid_log_level(self):
        with pytest.raises(SystemExit):
            cli.create_argument_parser().parse_args(["route.gpx", "--log-level", "LOUD"])


class TestHelpers:
    def test_determine_output_filename_explicit(self):
        assert cli.determine_output_filename("route.gpx", "custom.html") == "custom.html"

    def test_determine_output_filename_generated(self, tmp_path):
        output = cli.determine_output_filename(str(tmp_path / "route.gpx"), None)
        assert output == str(tmp_path / "route map.html")

    def test_exclude_route_points(self):
        route = Route([KSFO, KLAX])
        assert cli.exclude_route_points(route, [KSFO, KSJC, KLAX]) == [KSJC]

    def test_log_matches_none(self, capsys):
        cli.log_matches([], 25.0)
        assert "No waypoints within 25.0 nm of route" in capsys.readouterr().out

    def test_log_matches(self, capsys):
        route = Route([KSFO, KLAX])
        cli.log_matches(route.points_of_interest([KSJC], 25.0), 25.0)
        out = capsys.readouterr().out
        assert "Waypoints within 25.0 nm of route (1):" in out
        assert "KSJC    5.7 nm" in out

    def test_print_flight_plans_without_matches(self, capsys):
        cli.print_flight_plans(Route([KSFO, KLAX]), [])
        out = capsys.readouterr().out
        assert "KSFO KLAX" in out
        assert "skyvector.com" not in out

    @patch("greatcircle.cli.webbrowser.open")
    def test_open_file_in_browser(self, mock_open, tmp_path):
        target = tmp_path / "map.html"
        cli.open_file_in_browser(str(target))
        mock_open.assert_called_once_with(f"file://{target}")


class TestMain:
    def test_no_map(self, monkeypatch, capsys):
        run_main(monkeypatch, FIXTURE, "--no-map")
        out = capsys.readouterr().out
        assert "Waypoints within 25.0 nm of route (3):" in out
        assert "KSFO KLAX\n" in out
        assert "KSFO KSJC E16 KKIC KLAX" in out
        assert "https://skyvector.com/" in out

    def test_max_distance(self, monkeypatch, capsys):
        run_main(monkeypatch, FIXTURE, "--no-map", "--max-distance", "5")
        assert "No waypoints within 5.0 nm of route" in capsys.readouterr().out

    @patch("greatcircle.cli.open_file_in_browser")
    def test_writes_map(self, mock_browser, monkeypatch, tmp_path, capsys):
        output = tmp_path / "out.html"
        run_main(monkeypatch, FIXTURE, "--output", str(output), "--no-open")
        assert output.exists()
        assert "KSJC" in output.read_text(encoding="utf-8")
        mock_browser.assert_not_called()

    @patch("greatcircle.cli.open_file_in_browser")
    def test_opens_browser(self, mock_browser, monkeypatch, tmp_path, capsys):
        output = tmp_path / "out.html"
        run_main(monkeypatch, FIXTURE, "--output", str(output))
        mock_browser.assert_called_once_with(str(output))

    def test_missing_filename(self, monkeypatch, capsys):
        with pytest.raises(SystemExit) as excinfo:
            run_main(monkeypatch)
        assert excinfo.value.code == 1
        assert "usage:" in capsys.readouterr().out

    def test_missing_file(self, monkeypatch, tmp_path):
        with pytest.raises(SystemExit) as excinfo:
            run_main(monkeypatch, str(tmp_path / "missing.gpx"), "--no-map")
        assert excinfo.value.code == 1

    def test_malformed_gpx(self, monkeypatch, tmp_path):
        bad = tmp_path / "bad.gpx"
        bad.write_text("not a gpx file", encoding="utf-8")
        with pytest.raises(SystemExit) as excinfo:
            run_main(monkeypatch, str(bad), "--no-map")
        assert excinfo.value.code == 1

    def test_route_too_short(self, monkeypatch, tmp_path):
        short = tmp_path / "short.gpx"
        short.write_text(
            '<?xml version="1.0" encoding="UTF-8"?>\n'
            '<gpx version="1.1" creator="test" xmlns="http://www.topografix.com/GPX/1/1">'
            '<rte><rtept lat="37.6" lon="-122.4"><name>KSFO</name></rtept></rte>'
            "</gpx>",
            encoding="utf-8",
        )
        with pytest.raises(SystemExit) as excinfo:
            run_main(monkeypatch, str(short), "--no-map")
        assert excinfo.value.code == 1
