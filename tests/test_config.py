"""Configuration loader tests."""

from config.loader import ConfigLoader


def test_environment_overrides_default(monkeypatch, tmp_path):
    monkeypatch.setenv("API_BASE_URL", "https://converter.example")
    loader = ConfigLoader(env_path=str(tmp_path / "missing.env"))

    assert loader.get("API_BASE_URL", "http://localhost:5000") == "https://converter.example"


def test_values_are_parsed_by_default_type(monkeypatch, tmp_path):
    monkeypatch.setenv("PORT", "8080")
    monkeypatch.setenv("CONNECT_TIMEOUT", "2.5")
    monkeypatch.setenv("FLAG", "yes")
    loader = ConfigLoader(env_path=str(tmp_path / "missing.env"))

    assert loader.get("PORT", 3000) == 8080
    assert loader.get("CONNECT_TIMEOUT", 10.0) == 2.5
    assert loader.get("FLAG", False) is True


def test_unparseable_number_falls_back_to_default(monkeypatch, tmp_path):
    monkeypatch.setenv("PORT", "eighty")
    loader = ConfigLoader(env_path=str(tmp_path / "missing.env"))

    assert loader.get("PORT", 3000) == 3000


def test_env_file_is_loaded(monkeypatch, tmp_path):
    monkeypatch.delenv("LOGIN_TIMEOUT_TEST", raising=False)
    env_file = tmp_path / ".env"
    env_file.write_text("LOGIN_TIMEOUT_TEST=42\n")

    loader = ConfigLoader(env_path=str(env_file))

    assert loader.get("LOGIN_TIMEOUT_TEST", 300) == 42
    monkeypatch.delenv("LOGIN_TIMEOUT_TEST", raising=False)


def test_home_paths_are_expanded(tmp_path):
    loader = ConfigLoader(env_path=str(tmp_path / "missing.env"))

    assert not loader.get("UNSET_TOKEN_FILE_SETTING", "~/tokens.json").startswith("~")


def test_env_file_location_can_come_from_environment(monkeypatch, tmp_path):
    monkeypatch.delenv("DEFAULT_PLAYLIST_NAME_TEST", raising=False)
    env_file = tmp_path / "converter.env"
    env_file.write_text("DEFAULT_PLAYLIST_NAME_TEST=Mixtape\n")
    monkeypatch.setenv("CONVERTER_ENV_FILE", str(env_file))

    loader = ConfigLoader()

    assert loader.env_file_loaded
    assert loader.get("DEFAULT_PLAYLIST_NAME_TEST", "Converted YouTube Playlist") == "Mixtape"
    monkeypatch.delenv("DEFAULT_PLAYLIST_NAME_TEST", raising=False)


def test_environment_wins_over_env_file(monkeypatch, tmp_path):
    monkeypatch.setenv("PORT_PRIORITY_TEST", "4000")
    env_file = tmp_path / ".env"
    env_file.write_text("PORT_PRIORITY_TEST=5000\n")

    loader = ConfigLoader(env_path=str(env_file))

    assert loader.get("PORT_PRIORITY_TEST", 3000) == 4000
