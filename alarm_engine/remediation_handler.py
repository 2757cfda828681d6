# ====================================================
# Standard Library Imports
# ====================================================
import logging
from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Optional

# ====================================================
# Internal Module Imports
# ====================================================
from core import NotificationDecodeError, RemoteCommandError
from remote_shell import CommandResult, RemoteCommandRunner
from resource_discovery import (
    InstanceAddressResolver,
    TargetHealthQuery,
    build_target_group_arn,
)
from settings import RemediationConfig
from .dimension_scanner import find_target_groups
from .notification import decode_notification, iter_sns_messages

# ====================================================
# Logger Setup
# ====================================================
logger = logging.getLogger(__name__)

STATUS_REMEDIATED = "remediated"
STATUS_DRY_RUN = "dry_run"
STATUS_SKIPPED = "skipped"
STATUS_FAILED = "failed"


@dataclass(frozen=True)
class RemediationOutcome:
    """What happened to one unhealthy target."""

    target_group_arn: str
    target_id: str
    status: str
    address: str = ""
    reason: str = ""
    stop_result: Optional[CommandResult] = None
    start_result: Optional[CommandResult] = None


# ====================================================
# RemediationHandler Class Definition
# ====================================================
class RemediationHandler:
    """
    Restarts the application on the unhealthy targets of the target groups
    named by CloudWatch alarm notifications.
    Records, dimensions and targets are processed one at a time, in order.
    """

    def __init__(
        self,
        config: RemediationConfig,
        health_query: TargetHealthQuery,
        address_resolver: InstanceAddressResolver,
        runner: RemoteCommandRunner,
    ) -> None:
        self.config = config
        self.health_query = health_query
        self.address_resolver = address_resolver
        self.runner = runner

    # ----------------------------
    # Event Processing
    # ----------------------------
    def handle(self, event: Dict[str, Any]) -> Dict[str, Any]:
        """Process every SNS record of the event and summarise the outcomes."""
        outcomes: List[RemediationOutcome] = []
        records = 0

        for message_id, message in iter_sns_messages(event):
            records += 1
            try:
                outcomes.extend(self.process_message(message_id, message))
            except Exception as e:
                logger.exception(f"Unexpected error processing message {message_id}: {e}")

        remediated = sum(1 for o in outcomes if o.status == STATUS_REMEDIATED)
        logger.info(
            f"Processed {records} records: {remediated} of {len(outcomes)} unhealthy targets remediated"
        )
        return {
            "status": "Completed",
            "records": records,
            "remediations": [asdict(outcome) for outcome in outcomes],
        }

    def process_message(self, message_id: str, message: str) -> List[RemediationOutcome]:
        try:
            notification = decode_notification(message)
        except NotificationDecodeError as e:
            logger.error(f"Failed to decode message {message_id}: {e}")
            return []

        logger.info(
            f"Alarm '{notification.alarm_name}' changed from "
            f"{notification.old_state_value} to {notification.new_state_value}"
        )

        outcomes: List[RemediationOutcome] = []
        for suffix in find_target_groups(
            notification.trigger.dimensions, self.config.target_group_marker
        ):
            try:
                outcomes.extend(self.remediate_target_group(suffix))
            except Exception as e:
                logger.exception(f"Unexpected error remediating target group {suffix}: {e}")

        logger.info(f"Region is {notification.region}")
        return outcomes

    # ----------------------------
    # Remediation
    # ----------------------------
    def remediate_target_group(self, suffix: str) -> List[RemediationOutcome]:
        target_group_arn = build_target_group_arn(
            self.config.region, self.config.account_id, suffix
        )
        records = self.health_query.describe(target_group_arn)
        return [
            self.remediate_target(target_group_arn, record.target_id)
            for record in records
            if record.is_unhealthy
        ]

    def remediate_target(self, target_group_arn: str, target_id: str) -> RemediationOutcome:
        """Run the stop command and then the start command on one unhealthy target.

        The start command is always attempted, whatever happened to the stop
        command; every failure is recorded in the outcome.
        """
        address = self.address_resolver.resolve(target_id)
        if not address:
            logger.warning(f"Skipping unhealthy target {target_id}: no private IP address")
            return RemediationOutcome(
                target_group_arn=target_group_arn,
                target_id=target_id,
                status=STATUS_SKIPPED,
                reason="address not resolved",
            )

        logger.info(f"Unhealthy target is {target_id}, the IP is {address}")

        if self.config.dry_run:
            logger.info(
                f"Dry run: would run '{self.config.stop_command}' then "
                f"'{self.config.start_command}' on {address}"
            )
            return RemediationOutcome(
                target_group_arn=target_group_arn,
                target_id=target_id,
                status=STATUS_DRY_RUN,
                address=address,
            )

        errors = []
        stop_result = self._run_step("stop", self.config.stop_command, target_id, address, errors)
        start_result = self._run_step("start", self.config.start_command, target_id, address, errors)

        return RemediationOutcome(
            target_group_arn=target_group_arn,
            target_id=target_id,
            status=STATUS_FAILED if errors else STATUS_REMEDIATED,
            address=address,
            reason="; ".join(errors),
            stop_result=stop_result,
            start_result=start_result,
        )

    def _run_step(
        self, step: str, command: str, target_id: str, address: str, errors: List[str]
    ) -> Optional[CommandResult]:
        try:
            result = self.runner.run(command, address)
        except RemoteCommandError as e:
            logger.error(f"{step.capitalize()} command failed on {target_id}: {e}")
            errors.append(f"{step}: {e}")
            return None
        logger.info(f"{step} command result: {result.describe()}")
        return result
