import pytest

from fanportal import config
from fanportal.config import SettingsManager, load_config


def test_config_loader_success(tmp_path):
    """Checks that a YAML config loads into a dict."""
    config_file = tmp_path / "config.yml"
    config_file.write_text("database_path: ~/portal.db\nlog_level: debug\n")
    loaded = load_config(str(config_file))
    assert loaded['database_path'] == "~/portal.db"
    assert loaded['log_level'] == "debug"


def test_config_loader_file_not_found():
    """A missing config file raises FileNotFoundError."""
    with pytest.raises(FileNotFoundError):
        load_config("non_existent_file.yml")


def test_db_path_from_user_config(tmp_path, mocker):
    user_config = tmp_path / "user_config.yml"
    user_config.write_text(f"database_path: {tmp_path / 'custom.db'}\n")
    mocker.patch.object(config, "get_user_config_path", return_value=user_config)

    assert config.get_db_path() == tmp_path / "custom.db"
    assert config.get_db_url() == f"sqlite:///{tmp_path / 'custom.db'}"


def test_db_path_defaults_to_data_dir(tmp_path, mocker):
    mocker.patch.object(config, "get_user_config_path", return_value=tmp_path / "missing.yml")
    assert config.get_db_path().name == "fanportal.db"


def test_log_level_from_user_config(tmp_path, mocker):
    user_config = tmp_path / "user_config.yml"
    user_config.write_text("log_level: info\n")
    mocker.patch.object(config, "get_user_config_path", return_value=user_config)
    assert config.get_log_level() == "INFO"


def test_broken_user_config_falls_back(tmp_path, mocker):
    user_config = tmp_path / "user_config.yml"
    user_config.write_text("database_path: [unclosed\n")
    mocker.patch.object(config, "get_user_config_path", return_value=user_config)
    assert config.get_db_path().name == "fanportal.db"


def test_settings_defaults(storage):
    settings = SettingsManager(storage.Session)
    settings.ensure_defaults()
    settings.load_settings()

    assert settings.get("auth.bootstrap_admins") == []
    assert settings.get("auth.register_on_profile") is True
    assert settings.get("content.case_sensitive_filters") is False
    assert settings.get("homepage.trending_limit") == 3
    assert settings.get("missing.key", "fallback") == "fallback"


def test_settings_set_and_reload(storage):
    settings = SettingsManager(storage.Session)
    settings.ensure_defaults()
    settings.set("auth.bootstrap_admins", "alice, bob", "list")
    settings.set("homepage.trending_limit", "5", "integer")

    reloaded = SettingsManager(storage.Session)
    reloaded.load_settings()
    assert reloaded.get("auth.bootstrap_admins") == ["alice", "bob"]
    assert reloaded.get("homepage.trending_limit") == 5
    assert reloaded.get("auth.register_on_profile") is True


def test_ensure_defaults_keeps_stored_values(storage):
    settings = SettingsManager(storage.Session)
    settings.set("content.case_sensitive_filters", "true", "boolean")
    settings.ensure_defaults()
    settings.load_settings()
    assert settings.get("content.case_sensitive_filters") is True
