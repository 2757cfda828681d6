class RemediationError(Exception):
    """Base exception for the remediation function."""

    pass


class ConfigurationError(RemediationError):
    """Raised when the runtime configuration cannot be built."""

    pass


class SecretResolutionError(ConfigurationError):
    """Raised when the SSH private key cannot be read from Secrets Manager."""

    pass


class NotificationDecodeError(RemediationError):
    """Raised when an SNS message is not a recognised CloudWatch alarm payload."""

    pass


class RemoteCommandError(RemediationError):
    """Raised when a command cannot be run over SSH."""

    def __init__(self, address: str, message: str):
        super().__init__(f"{address}: {message}")
        self.address = address
