"""Base exceptions for ipwatch."""


class IpWatchError(Exception):
    """Base exception for all ipwatch errors."""

    pass


class FatalError(IpWatchError):
    """Unrecoverable failure; the current run must stop."""

    pass


class ConfigError(FatalError):
    """Configuration file could not be loaded."""

    pass


class AddressResolutionError(FatalError):
    """Public IP address could not be determined."""

    pass


class StateReadError(FatalError):
    """State file exists but could not be read."""

    pass


class NotificationError(FatalError):
    """Change notification email could not be sent."""

    pass


class StateWriteError(IpWatchError):
    """State file could not be written (degraded, not fatal)."""

    pass
