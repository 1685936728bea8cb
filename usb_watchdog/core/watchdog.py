from datetime import datetime
from typing import Callable
from .action import launch_action
from .config import WatchdogSettings
from .engine import decide
from .enumeration import DeviceEnumeration
from .errors import ActionLaunchFailure
from .events import Verdict
from .logger import logger
from .presence import find_device
from .store import TimestampStore, current_time
from .uptime import uptime_minutes

def run_check(settings: WatchdogSettings,
              enumeration: DeviceEnumeration,
              store: TimestampStore,
              uptime: Callable[[], int] = uptime_minutes,
              launcher: Callable[[str], object] = launch_action,
              clock: Callable[[], datetime] = current_time) -> Verdict:
    """
    One check-and-decide cycle: look for the device, decide, then apply the
    verdict (store the new timestamp, launch the recovery command).
    """
    # Separator line for each run
    logger.info("-" * 60)
    logger.info(f"Starting check for USB device: {settings.device_id}")

    matched = find_device(enumeration, settings.device_id)
    if matched is not None:
        logger.info(f"Found connected device: {matched}")

    now = clock()
    last_seen = None if matched is not None else store.read()
    verdict = decide(matched is not None, last_seen, now, uptime(), settings.thresholds)

    for event in verdict.events:
        logger.log(event.level, event.message)

    if verdict.new_last_seen is not None:
        store.write(verdict.new_last_seen)

    if verdict.should_fire:
        logger.warning(f"Conditions met. Executing command: {settings.command}")
        try:
            launcher(settings.command)
        except ActionLaunchFailure as e:
            logger.error(str(e))

    logger.debug(f"Decision: {verdict.decision.value}")
    return verdict
