"""Tests for the orchestrator and CLI."""

from datetime import datetime

import pytest
from PIL import Image

from life_calendar import app
from life_calendar.errors import DateParseError


@pytest.fixture
def applied(monkeypatch):
    recorded = []
    monkeypatch.setattr(app, "set_wallpaper", lambda path, fit: recorded.append((path, fit)) or True)
    return recorded


class TestParseNow:
    def test_date_only(self):
        assert app.parse_now("2024-06-15") == datetime(2024, 6, 15)

    def test_datetime(self):
        assert app.parse_now("2024-06-15T08:30:00") == datetime(2024, 6, 15, 8, 30)

    def test_invalid(self):
        with pytest.raises(DateParseError):
            app.parse_now("next tuesday")

    def test_no_override_is_now(self):
        before = datetime.now()
        assert before <= app.parse_now(None) <= datetime.now()


class TestRun:
    def test_generates_and_applies(self, config_file, applied, isolated_cwd):
        path = app.run(config_file, now=datetime(2024, 6, 15), resolution_override="1280x720")

        assert path == isolated_cwd / "life_calendar_wallpaper.png"
        assert applied == [(path, "fill")]
        with Image.open(path) as image:
            assert image.size == (1280, 720)

    def test_no_set(self, config_file, applied):
        app.run(config_file, now=datetime(2024, 6, 15), resolution_override="1024x768",
                set_as_wallpaper=False)
        assert applied == []


class TestRunApp:
    def test_success(self, config_file, applied, tmp_path):
        out = tmp_path / "out.png"
        code = app.run_app([
            "--config", str(config_file), "--no-set", "--resolution", "1280x720",
            "--date", "2024-06-15", "--output", str(out),
        ])
        assert code == 0
        assert out.exists()
        assert applied == []

    def test_env_overrides(self, config_file, applied, isolated_cwd, monkeypatch):
        monkeypatch.setenv("TEST_DATE", "2024-02-01")
        monkeypatch.setenv("TEST_RESOLUTION", "1024x768")

        assert app.run_app([]) == 0

        with Image.open(isolated_cwd / "life_calendar_wallpaper.png") as image:
            assert image.size == (1024, 768)
        assert len(applied) == 1

    def test_missing_config_exits_1(self, tmp_path, applied):
        assert app.run_app(["--config", str(tmp_path / "missing.json")]) == 1
        assert applied == []

    def test_bad_date_exits_1(self, config_file, applied):
        assert app.run_app(["--config", str(config_file), "--date", "soon"]) == 1

    def test_wallpaper_failure_exits_1(self, config_file, monkeypatch):
        def fail(path, fit):
            raise OSError("desktop refused")

        monkeypatch.setattr(app, "set_wallpaper", fail)
        code = app.run_app(["--config", str(config_file), "--resolution", "1024x768",
                            "--date", "2024-06-15"])
        assert code == 1

    def test_multiple_resolutions(self, config_file, applied, isolated_cwd, monkeypatch):
        monkeypatch.setattr(app, "TEST_RESOLUTIONS", [(800, 600, "SVGA"), (1024, 768, "XGA")])

        assert app.run_app(["--config", str(config_file), "--test-resolutions",
                            "--date", "2024-06-15"]) == 0

        out_dir = isolated_cwd / "resolution_tests"
        for width, height in [(800, 600), (1024, 768)]:
            with Image.open(out_dir / f"life_calendar_{width}x{height}.png") as image:
                assert image.size == (width, height)
        assert applied == []
