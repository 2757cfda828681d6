import logging

import boto3
from botocore.exceptions import BotoCoreError, ClientError

logger = logging.getLogger(__name__)


class InstanceAddressResolver:
    def __init__(self, session: boto3.Session):
        self.client = session.client("ec2")

    def resolve(self, instance_id: str) -> str:
        """Return the private IP of an instance, or "" when it cannot be found."""
        try:
            response = self.client.describe_instances(InstanceIds=[instance_id])
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Error describing instance {instance_id}: {e}")
            return ""

        reservations = response.get("Reservations", [])
        if not reservations or not reservations[0].get("Instances"):
            logger.error(f"No instance found for {instance_id}")
            return ""

        address = reservations[0]["Instances"][0].get("PrivateIpAddress")
        if not address:
            logger.error(f"Instance {instance_id} has no private IP address")
            return ""
        return address
