from dataclasses import dataclass
from enum import Enum


class HealthState(str, Enum):
    """ELBv2 target health states"""

    INITIAL = "initial"
    HEALTHY = "healthy"
    UNHEALTHY = "unhealthy"
    UNHEALTHY_DRAINING = "unhealthy.draining"
    UNUSED = "unused"
    DRAINING = "draining"
    UNAVAILABLE = "unavailable"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, value: str) -> "HealthState":
        try:
            return cls(value)
        except ValueError:
            return cls.UNKNOWN


@dataclass(frozen=True)
class TargetHealthRecord:
    target_id: str  # EC2 instance id for instance targets
    state: HealthState
    port: int = 0
    reason: str = ""
    description: str = ""

    @property
    def is_unhealthy(self) -> bool:
        return self.state is HealthState.UNHEALTHY
