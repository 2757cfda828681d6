import logging
from typing import List

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from constants import TARGET_GROUP_ARN_FORMAT
from .resource import HealthState, TargetHealthRecord

logger = logging.getLogger(__name__)

# describe_target_health error codes
INVALID_TARGET = "InvalidTarget"
TARGET_GROUP_NOT_FOUND = "TargetGroupNotFound"
HEALTH_UNAVAILABLE = "HealthUnavailable"

KNOWN_ERROR_CODES = (INVALID_TARGET, TARGET_GROUP_NOT_FOUND, HEALTH_UNAVAILABLE)


def build_target_group_arn(region: str, account_id: str, suffix: str) -> str:
    """Build a target group ARN from the ``targetgroup/<name>/<id>`` dimension value."""
    return TARGET_GROUP_ARN_FORMAT.format(
        region=region, account_id=account_id, suffix=suffix
    )


class TargetHealthQuery:
    """Reads the health of the targets registered in a target group."""

    def __init__(self, session: boto3.Session):
        self.elbv2_client = session.client("elbv2")

    def describe(self, target_group_arn: str) -> List[TargetHealthRecord]:
        """Return the health of every target, or nothing if the call fails."""
        try:
            response = self.elbv2_client.describe_target_health(
                TargetGroupArn=target_group_arn
            )
        except ClientError as e:
            code = e.response.get("Error", {}).get("Code", "")
            if code in KNOWN_ERROR_CODES:
                logger.error(f"{code}: {target_group_arn}: {e}")
            else:
                logger.error(f"Error describing target health for {target_group_arn}: {e}")
            return []
        except BotoCoreError as e:
            logger.error(f"Error describing target health for {target_group_arn}: {e}")
            return []

        records = []
        for description in response.get("TargetHealthDescriptions", []):
            target = description.get("Target", {})
            health = description.get("TargetHealth", {})
            if not target.get("Id"):
                logger.warning(f"Skipping target without id in {target_group_arn}")
                continue
            records.append(
                TargetHealthRecord(
                    target_id=target["Id"],
                    state=HealthState.parse(health.get("State", "")),
                    port=target.get("Port", 0),
                    reason=health.get("Reason", ""),
                    description=health.get("Description", ""),
                )
            )

        logger.info(f"Found {len(records)} targets in {target_group_arn}")
        return records
