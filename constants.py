from pathlib import Path
from typing import Final

### Common constants ###
# File paths
CONFIG_DIR = Path(__file__).parent / "configs"
REMEDIATION_SETTINGS = CONFIG_DIR / "remediation_settings.yml"

# Logging
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DEFAULT_LOG_LEVEL = "INFO"


### AWS constants ###
DEFAULT_REGION = "ap-southeast-1"
DEFAULT_ACCOUNT_ID: Final[str] = "197542431507"
TARGET_GROUP_ARN_FORMAT: Final[str] = (
    "arn:aws:elasticloadbalancing:{region}:{account_id}:{suffix}"
)

# CloudWatch dimension that names the target group behind an alarm
TARGET_GROUP_DIMENSION: Final[str] = "TargetGroup"


### SSH constants ###
DEFAULT_OS_USER = "ec2-user"
DEFAULT_SSH_PORT: Final[int] = 22
DEFAULT_CONNECT_TIMEOUT: Final[float] = 10.0


### Environment variables ###
ENV_START_COMMAND = "RUNTIME_START_CMD"
ENV_STOP_COMMAND = "RUNTIME_STOP_CMD"
ENV_REGION = "DEFAULT_REGION"
ENV_OS_USER = "OS_USER"
ENV_PEM_SECRET_NAME = "PEM_SECRET_NAME"
ENV_PEM_SECRET_KEY = "PEM_SECRET_KEY"
ENV_PRIVATE_KEY_FILE = "SSH_PRIVATE_KEY_FILE"
ENV_ACCOUNT_ID = "ACCOUNT_ID"
ENV_TARGET_GROUP_DIMENSION = "TARGET_GROUP_DIMENSION"
ENV_SSH_PORT = "SSH_PORT"
ENV_CONNECT_TIMEOUT = "SSH_CONNECT_TIMEOUT"
ENV_COMMAND_TIMEOUT = "SSH_COMMAND_TIMEOUT"
ENV_KNOWN_HOSTS_FILE = "SSH_KNOWN_HOSTS_FILE"
ENV_DRY_RUN = "DRY_RUN"
ENV_LOG_LEVEL = "LOG_LEVEL"
ENV_SETTINGS_FILE = "REMEDIATION_SETTINGS_FILE"
