import dataclasses
import json
import logging
from typing import Any, Dict, Optional

# Internal Module Imports
from alarm_engine import RemediationHandler
from cli_parser import CliParser, CliArgs
from logger import LoggerSetup
from remote_shell import RemoteCommandRunner
from resource_discovery import InstanceAddressResolver, TargetHealthQuery
from session import SessionManager
from settings import RemediationConfig, load_config
from utils import load_json

# Constants & Config
from constants import LOG_FORMAT

logger = logging.getLogger(__name__)

# Built on the first invocation and reused while the Lambda container is warm
_config: Optional[RemediationConfig] = None


def get_config() -> RemediationConfig:
    global _config
    if _config is None:
        _config = load_config()
    return _config


def build_handler(config: RemediationConfig) -> RemediationHandler:
    """Wire the AWS clients and the SSH runner for the configured region."""
    session = SessionManager.get_session(config.region)
    return RemediationHandler(
        config=config,
        health_query=TargetHealthQuery(session),
        address_resolver=InstanceAddressResolver(session),
        runner=RemoteCommandRunner.from_config(config),
    )


def lambda_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """Entry point for SNS-triggered invocations."""
    LoggerSetup(LOG_FORMAT)
    try:
        config = get_config()
    except Exception as e:
        logger.exception(f"Failed to load configuration: {e}")
        raise
    LoggerSetup(LOG_FORMAT, config.log_level)

    request_id = getattr(context, "aws_request_id", None)
    logger.info(f"Received {len(event.get('Records') or [])} records (request {request_id})")
    return build_handler(config).handle(event)


def main() -> None:
    # Parse CLI arguments using CliParser
    args: CliArgs = CliParser.parse_arguments()

    # Initialize logger (configured once)
    logger = LoggerSetup(LOG_FORMAT, args.log_level or "INFO").get_logger("main")
    logger.info(f"Replaying event file {args.event_file}")

    config = load_config()
    overrides = {}
    if args.dry_run:
        overrides["dry_run"] = True
    if args.log_level:
        overrides["log_level"] = args.log_level
    if overrides:
        config = dataclasses.replace(config, **overrides)
    LoggerSetup(LOG_FORMAT, config.log_level)

    event = load_json(args.event_file)
    result = build_handler(config).handle(event)
    print(json.dumps(result, indent=2))


if __name__ == "__main__":
    main()
