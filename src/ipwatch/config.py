"""Configuration management for ipwatch."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable

import yaml

from ipwatch.errors import ConfigError


DEFAULT_IP_SERVICE_URL = "https://api.ipify.org"

# Flat config file keys for the email settings
KEY_FROM_ADDRESS = "fromEmailAddress"
KEY_TO_ADDRESS = "toEmailAddress"
KEY_SMTP_SERVER = "emailSMTPServer"
KEY_SMTP_PORT = "emailSMTPPort"
KEY_USER = "emailUser"
KEY_PASSWORD = "emailPassword"


def _config_dir() -> Path:
    return Path.home() / ".config" / "ipwatch"


def default_state_file() -> str:
    """Default location of the last known IP file."""
    return str(_config_dir() / "external_ip.txt")


@dataclass(frozen=True)
class EmailConfig:
    """Email notification settings.

    None of these have defaults. They are only checked when an email
    actually has to be sent.
    """

    from_address: str | None = None
    to_address: str | None = None
    smtp_server: str | None = None
    smtp_port: str | None = None
    user: str | None = None
    password: str | None = field(default=None, repr=False)


@dataclass(frozen=True)
class Config:
    """ipwatch configuration, loaded once per run."""

    email: EmailConfig = field(default_factory=EmailConfig)
    state_file: str = field(default_factory=default_state_file)
    ip_service_url: str = DEFAULT_IP_SERVICE_URL
    log_level: str = "INFO"
    log_file: str | None = None


def get_config_path(custom_path: Path | None = None) -> Path:
    """Get the configuration file path.

    Args:
        custom_path: Override path. If None, returns default.

    Returns:
        Path to config file.
    """
    if custom_path is not None:
        return custom_path
    return _config_dir() / "config.yaml"


def _default_file_reader(path: Path) -> dict[str, Any] | None:
    """Default file reader that loads YAML from disk.

    Every scalar is kept as the string written in the file, so values
    like passwords are never reinterpreted as numbers or booleans.

    Raises:
        ConfigError: If the file is missing, unreadable or not valid YAML.
    """
    try:
        content = path.read_text()
    except OSError as e:
        raise ConfigError(f"Can not load configuration file '{path}': {e}") from e
    try:
        return yaml.load(content, Loader=yaml.BaseLoader)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in configuration file '{path}': {e}") from e


def _as_str(value: Any) -> str | None:
    if value is None:
        return None
    return str(value)


def load_config(
    path: Path | None = None,
    file_reader: Callable[[Path], dict[str, Any] | None] | None = None,
) -> Config:
    """Load configuration from file.

    Args:
        path: Path to config file. If None, uses default path.
        file_reader: Injectable file reader for testing.

    Returns:
        Config object with values from file.

    Raises:
        ConfigError: If the file cannot be read or is not a mapping.
    """
    config_path = get_config_path(path)
    reader = file_reader or _default_file_reader

    data = reader(config_path)

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(
            f"Configuration file '{config_path}' must contain a key-value mapping"
        )

    email_config = EmailConfig(
        from_address=_as_str(data.get(KEY_FROM_ADDRESS)),
        to_address=_as_str(data.get(KEY_TO_ADDRESS)),
        smtp_server=_as_str(data.get(KEY_SMTP_SERVER)),
        smtp_port=_as_str(data.get(KEY_SMTP_PORT)),
        user=_as_str(data.get(KEY_USER)),
        password=_as_str(data.get(KEY_PASSWORD)),
    )

    return Config(
        email=email_config,
        state_file=_as_str(data.get("stateFile")) or default_state_file(),
        ip_service_url=_as_str(data.get("ipServiceUrl")) or DEFAULT_IP_SERVICE_URL,
        log_level=_as_str(data.get("logLevel")) or Config.log_level,
        log_file=_as_str(data.get("logFile")),
    )
