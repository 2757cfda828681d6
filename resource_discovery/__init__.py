from .resource import HealthState, TargetHealthRecord
from .target_health import TargetHealthQuery, build_target_group_arn
from .instance_address import InstanceAddressResolver

__all__ = [
    "HealthState",
    "TargetHealthRecord",
    "TargetHealthQuery",
    "build_target_group_arn",
    "InstanceAddressResolver",
]
