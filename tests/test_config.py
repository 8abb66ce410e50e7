"""Tests for config module."""

from pathlib import Path
from unittest.mock import Mock

import pytest
import yaml

from ipwatch.config import (
    DEFAULT_IP_SERVICE_URL,
    Config,
    EmailConfig,
    default_state_file,
    get_config_path,
    load_config,
)
from ipwatch.errors import ConfigError, FatalError


FULL_CONFIG = {
    "fromEmailAddress": "from@example.com",
    "toEmailAddress": "to@example.com",
    "emailSMTPServer": "smtp.example.com",
    "emailSMTPPort": 587,
    "emailUser": "user@example.com",
    "emailPassword": "secret",
}


class TestConfigDefaults:
    """Test default configuration values."""

    def test_default_config_values(self):
        """Ambient settings have defaults, email settings do not."""
        config = Config()

        assert config.email == EmailConfig()
        assert config.email.smtp_server is None
        assert config.ip_service_url == "https://api.ipify.org"
        assert config.state_file == default_state_file()
        assert config.log_level == "INFO"
        assert config.log_file is None

    def test_config_is_immutable(self):
        """Config cannot be modified after creation."""
        config = Config()

        with pytest.raises(AttributeError):
            config.log_level = "DEBUG"

    def test_password_hidden_from_repr(self):
        """Password does not leak into repr output."""
        email = EmailConfig(user="me", password="hunter2")

        assert "hunter2" not in repr(email)


class TestGetConfigPath:
    """Test config path resolution."""

    def test_get_config_path_default(self):
        """Default config path is ~/.config/ipwatch/config.yaml."""
        path = get_config_path()
        assert path == Path.home() / ".config" / "ipwatch" / "config.yaml"

    def test_get_config_path_custom(self):
        """Can override config path."""
        custom = Path("/custom/config.yaml")
        assert get_config_path(custom) == custom


class TestLoadConfig:
    """Test config loading."""

    def test_load_config_from_file(self, tmp_path):
        """Config loads email settings from YAML file."""
        config_file = tmp_path / "config.yaml"
        config_file.write_text(yaml.dump(FULL_CONFIG))

        config = load_config(config_file)

        assert config.email.from_address == "from@example.com"
        assert config.email.to_address == "to@example.com"
        assert config.email.smtp_server == "smtp.example.com"
        assert config.email.user == "user@example.com"
        assert config.email.password == "secret"

    def test_values_coerced_to_strings(self, tmp_path):
        """Numeric YAML values are kept as strings."""
        config_file = tmp_path / "config.yaml"
        config_file.write_text(yaml.dump(FULL_CONFIG))

        config = load_config(config_file)

        assert config.email.smtp_port == "587"

    def test_scalars_kept_verbatim(self, tmp_path):
        """Values YAML would reinterpret are kept exactly as written."""
        config_file = tmp_path / "config.yaml"
        config_file.write_text(
            "emailPassword: 0777\n"
            "emailUser: on\n"
            "emailSMTPPort: 0587\n"
            "fromEmailAddress: 1e3\n"
            "toEmailAddress: ~\n"
        )

        config = load_config(config_file)

        assert config.email.password == "0777"
        assert config.email.user == "on"
        assert config.email.smtp_port == "0587"
        assert config.email.from_address == "1e3"
        assert config.email.to_address == "~"

    def test_optional_settings_from_file(self, tmp_path):
        """Optional settings override defaults."""
        config_file = tmp_path / "config.yaml"
        config_file.write_text(
            yaml.dump(
                {
                    "stateFile": "/var/lib/ipwatch/ip.txt",
                    "ipServiceUrl": "https://icanhazip.com",
                    "logLevel": "DEBUG",
                    "logFile": "/var/log/ipwatch.log",
                }
            )
        )

        config = load_config(config_file)

        assert config.state_file == "/var/lib/ipwatch/ip.txt"
        assert config.ip_service_url == "https://icanhazip.com"
        assert config.log_level == "DEBUG"
        assert config.log_file == "/var/log/ipwatch.log"

    def test_missing_keys_not_validated_at_load(self, tmp_path):
        """Missing email keys load as None instead of failing."""
        config_file = tmp_path / "config.yaml"
        config_file.write_text(yaml.dump({"emailUser": "me"}))

        config = load_config(config_file)

        assert config.email.user == "me"
        assert config.email.password is None
        assert config.ip_service_url == DEFAULT_IP_SERVICE_URL

    def test_unknown_keys_ignored(self, tmp_path):
        """Unrecognised keys do not cause errors."""
        config_file = tmp_path / "config.yaml"
        config_file.write_text(yaml.dump({"somethingElse": 1}))

        config = load_config(config_file)

        assert config.email == EmailConfig()

    def test_load_config_handles_empty_file(self, tmp_path):
        """Empty file yields an all-default config."""
        config_file = tmp_path / "config.yaml"
        config_file.write_text("")

        config = load_config(config_file)

        assert config == Config()

    def test_load_config_with_injectable_reader(self, tmp_path):
        """Config loading supports injectable file reader for testing."""
        mock_reader = Mock(return_value={"emailSMTPServer": "mail", "logLevel": "WARNING"})

        config = load_config(tmp_path / "config.yaml", file_reader=mock_reader)

        assert config.email.smtp_server == "mail"
        assert config.log_level == "WARNING"
        mock_reader.assert_called_once_with(tmp_path / "config.yaml")


class TestLoadConfigErrors:
    """Test fatal configuration failures."""

    def test_missing_file_is_fatal(self, tmp_path):
        """A missing config file raises ConfigError."""
        missing = tmp_path / "nonexistent.yaml"

        with pytest.raises(ConfigError) as exc_info:
            load_config(missing)

        assert "nonexistent.yaml" in str(exc_info.value)

    def test_config_error_is_fatal(self, tmp_path):
        """ConfigError belongs to the fatal error family."""
        with pytest.raises(FatalError):
            load_config(tmp_path / "nonexistent.yaml")

    def test_directory_is_fatal(self, tmp_path):
        """A directory in place of the config file raises ConfigError."""
        with pytest.raises(ConfigError):
            load_config(tmp_path)

    def test_invalid_yaml_is_fatal(self, tmp_path):
        """Unparseable YAML raises ConfigError."""
        config_file = tmp_path / "config.yaml"
        config_file.write_text("invalid: yaml: content: [")

        with pytest.raises(ConfigError):
            load_config(config_file)

    def test_non_mapping_is_fatal(self, tmp_path):
        """A YAML list instead of a mapping raises ConfigError."""
        config_file = tmp_path / "config.yaml"
        config_file.write_text("- a\n- b\n")

        with pytest.raises(ConfigError):
            load_config(config_file)
