from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Optional
import time


@dataclass
class AimEvent:
    """One pointer sample or intent decision captured by the recorder."""

    x: float
    y: float
    t: float  # seconds since start (monotonic)
    kind: str  # "sample"|"switch"|"wait"
    reason: Optional[str] = None


@dataclass
class AimRecorder:
    """Collects samples and verdicts during a session for analysis and rendering."""

    events: List[AimEvent] = field(default_factory=list)
    start_ts: float = field(default_factory=lambda: time.perf_counter())

    def _now(self) -> float:
        return time.perf_counter() - self.start_ts

    def log_sample(self, x: float, y: float) -> None:
        """Append a pointer 'sample' event."""
        self.events.append(AimEvent(x, y, self._now(), "sample"))

    def log_decision(self, x: float, y: float, switch: bool, reason: str) -> None:
        """Append a 'switch' or 'wait' verdict taken at (x, y)."""
        kind = "switch" if switch else "wait"
        self.events.append(AimEvent(x, y, self._now(), kind, reason))

    @property
    def samples(self) -> List[AimEvent]:
        return [e for e in self.events if e.kind == "sample"]

    @property
    def decisions(self) -> List[AimEvent]:
        return [e for e in self.events if e.kind in ("switch", "wait")]

    def reset(self) -> None:
        """Clear all recorded events and reset the time origin to now."""
        self.events.clear()
        self.start_ts = time.perf_counter()
