"""Tests for applying the wallpaper."""

import subprocess
import sys
from types import SimpleNamespace

import pytest

from life_calendar import wallpaper_setter
from life_calendar.errors import WallpaperApplyError, WallpaperNotFoundError


@pytest.fixture
def image(tmp_path):
    path = tmp_path / "life_calendar_wallpaper.png"
    path.write_bytes(b"\x89PNG")
    return path


@pytest.fixture
def calls(monkeypatch):
    recorded = []

    def fake_run(cmd, *args, **kwargs):
        recorded.append(cmd)
        return subprocess.CompletedProcess(cmd, 0, "", "")

    monkeypatch.setattr(wallpaper_setter.subprocess, "run", fake_run)
    return recorded


def use_platform(monkeypatch, name):
    monkeypatch.setattr(wallpaper_setter.platform, "system", lambda: name)


class TestSetWallpaper:
    def test_missing_file(self, tmp_path, calls):
        with pytest.raises(WallpaperNotFoundError) as excinfo:
            wallpaper_setter.set_wallpaper(tmp_path / "missing.png")
        assert isinstance(excinfo.value, FileNotFoundError)
        assert calls == []

    def test_relative_path_is_made_absolute(self, image, calls, monkeypatch):
        use_platform(monkeypatch, "Linux")
        monkeypatch.setenv("XDG_CURRENT_DESKTOP", "i3")
        monkeypatch.delenv("DESKTOP_SESSION", raising=False)

        assert wallpaper_setter.set_wallpaper(image.name) is True
        assert calls == [["feh", "--bg-fill", str(image)]]

    def test_gnome(self, image, calls, monkeypatch):
        use_platform(monkeypatch, "Linux")
        monkeypatch.setenv("XDG_CURRENT_DESKTOP", "ubuntu:GNOME")

        wallpaper_setter.set_wallpaper(image)

        uri = image.as_uri()
        schema = "org.gnome.desktop.background"
        assert calls == [
            ["gsettings", "set", schema, "picture-uri", uri],
            ["gsettings", "set", schema, "picture-uri-dark", uri],
            ["gsettings", "set", schema, "picture-options", "zoom"],
        ]

    def test_feh_fit_modes(self, image, calls, monkeypatch):
        use_platform(monkeypatch, "Linux")
        monkeypatch.setenv("XDG_CURRENT_DESKTOP", "")
        monkeypatch.setenv("DESKTOP_SESSION", "openbox")

        wallpaper_setter.set_wallpaper(image, fit="center")
        assert calls[-1][:2] == ["feh", "--bg-center"]

    def test_macos(self, image, calls, monkeypatch):
        use_platform(monkeypatch, "Darwin")

        wallpaper_setter.set_wallpaper(image)

        assert len(calls) == 1
        assert calls[0][:2] == ["osascript", "-e"]
        assert str(image) in calls[0][2]

    def test_macos_escapes_quotes_in_path(self, tmp_path, calls, monkeypatch):
        folder = tmp_path / 'my "walls"'
        folder.mkdir()
        image = folder / "wallpaper.png"
        image.write_bytes(b"\x89PNG")
        use_platform(monkeypatch, "Darwin")

        wallpaper_setter.set_wallpaper(image)

        script = calls[0][2]
        assert 'my \\"walls\\"' in script
        assert 'my "walls"' not in script

    def test_unsupported_platform(self, image, calls, monkeypatch):
        use_platform(monkeypatch, "Plan9")
        with pytest.raises(WallpaperApplyError):
            wallpaper_setter.set_wallpaper(image)

    def test_os_failure_propagates_unchanged(self, image, monkeypatch):
        def failing(cmd, *args, **kwargs):
            raise subprocess.CalledProcessError(2, cmd)

        use_platform(monkeypatch, "Linux")
        monkeypatch.setenv("XDG_CURRENT_DESKTOP", "")
        monkeypatch.delenv("DESKTOP_SESSION", raising=False)
        monkeypatch.setattr(wallpaper_setter.subprocess, "run", failing)

        with pytest.raises(subprocess.CalledProcessError):
            wallpaper_setter.set_wallpaper(image)


class FakeRegistry:
    HKEY_CURRENT_USER = "HKCU"
    KEY_SET_VALUE = 0x0002
    REG_SZ = 1

    def __init__(self):
        self.opened = []
        self.values = {}
        self.closed = False

    def OpenKey(self, root, sub_key, reserved, access):
        self.opened.append((root, sub_key, access))
        return "desktop-key"

    def SetValueEx(self, key, name, reserved, kind, value):
        assert key == "desktop-key"
        assert kind == self.REG_SZ
        self.values[name] = value

    def CloseKey(self, key):
        self.closed = True


class TestSetWallpaperWindows:
    @pytest.fixture
    def registry(self, monkeypatch):
        fake = FakeRegistry()
        monkeypatch.setitem(sys.modules, "winreg", fake)
        return fake

    @pytest.fixture
    def user32(self, monkeypatch):
        fake = SimpleNamespace(calls=[], result=1)

        def system_parameters_info(action, param, value, flags):
            fake.calls.append((action, param, value, flags))
            return fake.result

        fake.SystemParametersInfoW = system_parameters_info
        monkeypatch.setattr(wallpaper_setter, "ctypes",
                            SimpleNamespace(windll=SimpleNamespace(user32=fake)))
        use_platform(monkeypatch, "Windows")
        return fake

    def test_fill_writes_registry_and_applies(self, image, registry, user32):
        assert wallpaper_setter.set_wallpaper(image) is True

        assert registry.opened == [("HKCU", r"Control Panel\Desktop", 0x0002)]
        assert registry.values == {"WallpaperStyle": "10", "TileWallpaper": "0"}
        assert registry.closed
        assert user32.calls == [(0x14, 0, str(image), 0x03)]

    def test_tile_mode(self, image, registry, user32):
        wallpaper_setter.set_wallpaper(image, fit="tile")
        assert registry.values == {"WallpaperStyle": "0", "TileWallpaper": "1"}

    def test_unknown_fit_uses_fill(self, image, registry, user32):
        wallpaper_setter.set_wallpaper(image, fit="mosaic")
        assert registry.values == {"WallpaperStyle": "10", "TileWallpaper": "0"}

    def test_rejected_by_windows(self, image, registry, user32):
        user32.result = 0
        with pytest.raises(WallpaperApplyError):
            wallpaper_setter.set_wallpaper(image)
        assert registry.closed
