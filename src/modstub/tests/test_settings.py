from pathlib import Path

from modstub.settings import Settings, get_settings, settings_path


def test_defaults(tmp_path):
    settings = get_settings(tmp_path / "missing.yaml")
    assert settings == Settings()
    assert not settings.debug
    assert settings.restore_originals


def test_load_yaml(tmp_path):
    path = tmp_path / "settings.yaml"
    path.write_text("debug: true\nrestore_originals: false\n")

    settings = get_settings(path)
    assert isinstance(settings, Settings)
    assert settings.debug
    assert not settings.restore_originals
    assert not settings.force_color


def test_settings_path(tmp_path, monkeypatch):
    monkeypatch.setenv("MODSTUB_SETTINGS", str(tmp_path / "custom.yaml"))
    assert settings_path() == tmp_path / "custom.yaml"

    monkeypatch.delenv("MODSTUB_SETTINGS")
    assert settings_path() == Path("~/.config/modstub/settings.yaml").expanduser()
