from __future__ import annotations
from collections import Counter
from typing import Optional

from .telemetry import AimRecorder


def summarize_decisions(recorder: AimRecorder, *, title: Optional[str] = None) -> str:
    """Summarize recorded intent verdicts.

    Reports the number of pointer samples, switch and wait verdicts, the
    share of checks that were delayed, and a per-reason breakdown.
    """
    decisions = recorder.decisions
    if not decisions:
        return "No decisions recorded"
    switches = sum(1 for d in decisions if d.kind == "switch")
    waits = len(decisions) - switches
    reasons = Counter(d.reason for d in decisions)
    breakdown = ", ".join(f"{reason}={count}" for reason, count in sorted(reasons.items()))
    summary = (
        f"decisions={len(decisions)}, switch={switches}, wait={waits}, "
        f"delayed={waits / len(decisions):.0%}, samples={len(recorder.samples)} | {breakdown}"
    )
    return f"{title}: {summary}" if title else summary
