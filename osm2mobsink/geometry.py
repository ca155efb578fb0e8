from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional

# Slot 1 holds the static speed limit of a way
STATIC_CONTROL_SLOT = 1


@dataclass(frozen=True)
class Point:
    x: float
    y: float


class Flow(Enum):
    BIDIRECTIONAL = "bidirectional"
    A_TO_B = "ab"


@dataclass(frozen=True)
class TrafficControl:
    speed_limit: float


@dataclass
class PathSegment:
    """Directed edge a -> b of the MobSink network.

    ``controls`` is sparse: a missing slot means no restriction at that time.
    """

    a: Point
    b: Point
    name: str = ""
    flow: Flow = Flow.BIDIRECTIONAL
    controls: Dict[int, TrafficControl] = field(default_factory=dict)

    @property
    def speed_limit(self) -> Optional[float]:
        control = self.controls.get(STATIC_CONTROL_SLOT)
        if control is None:
            return None
        return control.speed_limit

    def set_speed_limit(self, speed_limit: float) -> None:
        self.controls[STATIC_CONTROL_SLOT] = TrafficControl(speed_limit)
