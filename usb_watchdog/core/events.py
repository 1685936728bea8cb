import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional
from datetime import datetime

class Decision(Enum):
    DEVICE_FOUND = "device_found"
    NO_HISTORY = "no_history"
    CONDITIONS_NOT_MET = "conditions_not_met"
    TRIGGERED = "triggered"

@dataclass(frozen=True)
class WatchdogThresholds:
    wait_min: int
    uptime_min: int

@dataclass(frozen=True)
class LastSeen:
    """
    Content of the last-success record.
    `at` is None when the record exists but could not be parsed.
    """
    raw: str
    at: Optional[datetime] = None

    @property
    def malformed(self) -> bool:
        return self.at is None

@dataclass(frozen=True)
class WatchdogEvent:
    level: int
    message: str

@dataclass
class Verdict:
    decision: Decision
    events: List[WatchdogEvent] = field(default_factory=list)
    new_last_seen: Optional[datetime] = None
    elapsed_minutes: Optional[float] = None
    uptime_minutes: Optional[int] = None

    @property
    def should_fire(self) -> bool:
        return self.decision == Decision.TRIGGERED

    def note(self, message: str, level: int = logging.INFO):
        self.events.append(WatchdogEvent(level, message))
