import pytest

from committee_access.config import Settings, load_settings


def test_defaults():
    settings = load_settings(environ={})
    assert settings == Settings()
    assert settings.log_level == "INFO"


def test_file_and_environment(tmp_path):
    config = tmp_path / "settings.yaml"
    config.write_text("secret_key: from-file\nlog_level: debug\nfixtures_path: a.yaml\n", encoding="utf8")

    settings = load_settings(str(config), environ={"COMMITTEE_ACCESS_SECRET_KEY": "from-env"})
    assert settings.secret_key == "from-env"
    assert settings.log_level == "DEBUG"
    assert settings.fixtures_path == "a.yaml"

    via_env = load_settings(environ={"COMMITTEE_ACCESS_CONFIG": str(config)})
    assert via_env.secret_key == "from-file"


def test_unknown_settings(tmp_path):
    config = tmp_path / "settings.yaml"
    config.write_text("colour: blue\n", encoding="utf8")
    with pytest.raises(ValueError):
        load_settings(str(config), environ={})
