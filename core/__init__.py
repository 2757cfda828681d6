from .exceptions import (
    RemediationError,
    ConfigurationError,
    SecretResolutionError,
    NotificationDecodeError,
    RemoteCommandError,
)

__all__ = [
    "RemediationError",
    "ConfigurationError",
    "SecretResolutionError",
    "NotificationDecodeError",
    "RemoteCommandError",
]
