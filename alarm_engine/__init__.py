from .notification import (
    AlarmNotification,
    Dimension,
    Trigger,
    decode_notification,
    iter_sns_messages,
)
from .dimension_scanner import find_target_groups
from .remediation_handler import RemediationHandler, RemediationOutcome

__all__ = [
    "AlarmNotification",
    "Dimension",
    "Trigger",
    "decode_notification",
    "iter_sns_messages",
    "find_target_groups",
    "RemediationHandler",
    "RemediationOutcome",
]
