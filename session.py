import boto3
import logging
from typing import Dict, Optional

from constants import DEFAULT_REGION

logger = logging.getLogger(__name__)


def create_session(
    region: str = DEFAULT_REGION, profile_name: Optional[str] = None
) -> boto3.Session:
    """Create a boto3 Session using the default credential chain."""
    try:
        return boto3.Session(region_name=region, profile_name=profile_name)
    except Exception as e:
        logger.error(f"Failed to create session for region {region}: {e}")
        raise


class SessionManager:
    _sessions: Dict[str, boto3.Session] = {}

    @classmethod
    def get_session(
        cls, region: str = DEFAULT_REGION, profile_name: Optional[str] = None
    ) -> boto3.Session:
        """Get or create a boto3 Session for the region.

        Sessions survive across warm Lambda invocations.
        """
        session_key = f"{profile_name or 'default'}:{region}"

        if session_key not in cls._sessions:
            cls._sessions[session_key] = create_session(region, profile_name)

        return cls._sessions[session_key]

    @classmethod
    def clear_session(
        cls, region: str = DEFAULT_REGION, profile_name: Optional[str] = None
    ) -> None:
        """Remove a session from the cache."""
        session_key = f"{profile_name or 'default'}:{region}"
        if session_key in cls._sessions:
            del cls._sessions[session_key]
            logger.info(f"Session cleared for {session_key}")
