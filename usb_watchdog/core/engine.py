import logging
from datetime import datetime
from typing import Optional
from .events import Decision, LastSeen, Verdict, WatchdogThresholds

def decide(present: bool, last_seen: Optional[LastSeen], now: datetime,
           uptime_minutes: int, thresholds: WatchdogThresholds) -> Verdict:
    """
    Decide the outcome of one watchdog run.

    Pure function: the caller persists `new_last_seen`, logs `events`
    and launches the recovery command when the verdict says so.
    """
    # 1. Device present: refresh the last-success record
    if present:
        verdict = Verdict(Decision.DEVICE_FOUND, new_last_seen=now)
        verdict.note("USB device found. Timestamp updated.")
        return verdict

    # 2. No usable history: nothing to measure against
    if last_seen is None:
        verdict = Verdict(Decision.NO_HISTORY)
        verdict.note("USB device not found. No timestamp file. Exiting.")
        return verdict

    if last_seen.malformed:
        verdict = Verdict(Decision.NO_HISTORY)
        verdict.note(f"Last success timestamp is malformed: {last_seen.raw!r}", logging.WARNING)
        verdict.note("USB device not found. Stored timestamp unusable, treating as no history. Exiting.")
        return verdict

    # 3. Compare elapsed time and uptime against the thresholds
    elapsed = (now - last_seen.at).total_seconds() / 60.0
    verdict = Verdict(Decision.CONDITIONS_NOT_MET, elapsed_minutes=elapsed, uptime_minutes=uptime_minutes)
    verdict.note(f"Last success timestamp read: {last_seen.raw}")
    verdict.note(f"USB device not found. Time since last success: {elapsed:.2f} min, Uptime: {uptime_minutes} min.")

    waited = elapsed >= thresholds.wait_min
    verdict.note(f"Time since last success ({int(elapsed)}) {'>=' if waited else '<'} wait_min ({thresholds.wait_min})")

    booted = uptime_minutes >= thresholds.uptime_min
    verdict.note(f"System uptime ({uptime_minutes}) {'>=' if booted else '<'} uptime_min ({thresholds.uptime_min})")

    if waited and booted:
        verdict.decision = Decision.TRIGGERED
    else:
        verdict.note("Conditions NOT met. No action taken.")
    return verdict
