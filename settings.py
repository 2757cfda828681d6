import json
import os
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import yaml
from botocore.exceptions import BotoCoreError, ClientError

from constants import *
from core import ConfigurationError, SecretResolutionError
from session import SessionManager
from utils import load_yaml, to_bool

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RemediationConfig:
    """Runtime configuration, built once per process.

    Attributes:
        start_command (str): Shell command that starts the application
        stop_command (str): Shell command that stops the application
        region (str): Region of the load balancer and the instances
        os_user (str): Login user on the instances
        private_key (str): SSH private key material (PEM or OpenSSH)
        account_id (str): Account that owns the target groups
        target_group_marker (str): Dimension name that identifies a target group
        ssh_port (int): SSH port on the instances
        connect_timeout (float): Seconds to wait for the SSH handshake
        command_timeout (float): Seconds to wait on a command, None waits forever
        known_hosts_file (str): Pinned host keys; unknown hosts are rejected when set
        dry_run (bool): Log the commands instead of running them
        log_level (str): Root logger level
    """

    start_command: str
    stop_command: str
    region: str = DEFAULT_REGION
    os_user: str = DEFAULT_OS_USER
    private_key: str = field(default="", repr=False)
    account_id: str = DEFAULT_ACCOUNT_ID
    target_group_marker: str = TARGET_GROUP_DIMENSION
    ssh_port: int = DEFAULT_SSH_PORT
    connect_timeout: float = DEFAULT_CONNECT_TIMEOUT
    command_timeout: Optional[float] = None
    known_hosts_file: Optional[str] = None
    dry_run: bool = False
    log_level: str = DEFAULT_LOG_LEVEL


def load_settings_file(path: Union[str, Path], required: bool = False) -> Dict[str, Any]:
    """Load the YAML settings file and flatten its ``ssh`` section."""
    path = Path(path)
    if not path.exists():
        if required:
            raise ConfigurationError(f"Settings file not found: {path}")
        logger.debug(f"No settings file at {path}, using defaults")
        return {}

    try:
        data = load_yaml(path)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid settings file {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"Settings file {path} must contain a mapping")

    settings = {k: v for k, v in data.items() if k != "ssh"}
    for key, value in (data.get("ssh") or {}).items():
        settings[f"ssh_{key}"] = value
    logger.info(f"Loaded settings from {path}")
    return settings


def resolve_private_key(
    secret_name: str,
    secrets_client,
    secret_key: Optional[str] = None,
) -> str:
    """Read the SSH private key from Secrets Manager.

    The secret is either the key itself or a JSON object holding it under
    ``secret_key``.
    """
    try:
        response = secrets_client.get_secret_value(SecretId=secret_name)
    except (BotoCoreError, ClientError) as e:
        logger.error(f"Failed to read secret {secret_name}: {e}")
        raise SecretResolutionError(f"Failed to read secret {secret_name}: {e}") from e

    secret = response.get("SecretString")
    if not secret:
        raise SecretResolutionError(f"Secret {secret_name} has no SecretString")

    if not secret_key:
        return secret

    try:
        value = json.loads(secret)[secret_key]
    except (ValueError, KeyError, TypeError) as e:
        raise SecretResolutionError(
            f"Secret {secret_name} has no field '{secret_key}'"
        ) from e
    return value


def _read_key_file(path: str) -> str:
    try:
        return Path(path).read_text()
    except OSError as e:
        raise ConfigurationError(f"Cannot read private key file {path}: {e}") from e


def _number(name: str, value: Any, cast=float) -> Optional[Any]:
    if value is None or value == "":
        return None
    try:
        return cast(value)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"{name} must be a number, got {value!r}") from e


def load_config(
    environ: Optional[Mapping[str, str]] = None,
    secrets_client=None,
    settings_path: Optional[Union[str, Path]] = None,
) -> RemediationConfig:
    """Build the configuration from defaults, the settings file and the environment."""
    env = os.environ if environ is None else environ

    if settings_path is None and env.get(ENV_SETTINGS_FILE):
        settings = load_settings_file(env[ENV_SETTINGS_FILE], required=True)
    else:
        settings = load_settings_file(settings_path or REMEDIATION_SETTINGS)

    def pick(env_name: str, setting_name: str, default: Any = None) -> Any:
        if env.get(env_name) not in (None, ""):
            return env[env_name]
        value = settings.get(setting_name)
        return default if value is None else value

    region = str(pick(ENV_REGION, "region", DEFAULT_REGION))

    private_key = ""
    secret_name = env.get(ENV_PEM_SECRET_NAME)
    if secret_name:
        if secrets_client is None:
            secrets_client = SessionManager.get_session(region).client("secretsmanager")
        private_key = resolve_private_key(
            secret_name, secrets_client, env.get(ENV_PEM_SECRET_KEY)
        )
        logger.info(f"Resolved SSH private key from secret {secret_name}")
    elif env.get(ENV_PRIVATE_KEY_FILE):
        private_key = _read_key_file(env[ENV_PRIVATE_KEY_FILE])
    else:
        logger.warning("No SSH private key configured; remote commands will fail")

    config = RemediationConfig(
        start_command=env.get(ENV_START_COMMAND, ""),
        stop_command=env.get(ENV_STOP_COMMAND, ""),
        region=region,
        os_user=str(pick(ENV_OS_USER, "os_user", DEFAULT_OS_USER)),
        private_key=private_key,
        account_id=str(pick(ENV_ACCOUNT_ID, "account_id", DEFAULT_ACCOUNT_ID)),
        target_group_marker=str(
            pick(ENV_TARGET_GROUP_DIMENSION, "target_group_dimension", TARGET_GROUP_DIMENSION)
        ),
        ssh_port=_number(ENV_SSH_PORT, pick(ENV_SSH_PORT, "ssh_port", DEFAULT_SSH_PORT), int),
        connect_timeout=_number(
            ENV_CONNECT_TIMEOUT,
            pick(ENV_CONNECT_TIMEOUT, "ssh_connect_timeout", DEFAULT_CONNECT_TIMEOUT),
        ),
        command_timeout=_number(
            ENV_COMMAND_TIMEOUT, pick(ENV_COMMAND_TIMEOUT, "ssh_command_timeout")
        ),
        known_hosts_file=pick(ENV_KNOWN_HOSTS_FILE, "ssh_known_hosts_file"),
        dry_run=to_bool(pick(ENV_DRY_RUN, "dry_run", False)),
        log_level=str(pick(ENV_LOG_LEVEL, "log_level", DEFAULT_LOG_LEVEL)).upper(),
    )
    logger.info(f"Loaded configuration: {config}")
    return config
