import os
from datetime import datetime
from pathlib import Path
from typing import Optional
from .errors import MalformedStoredTimestamp
from .events import LastSeen
from .logger import logger

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
DEFAULT_STATE_FILE = "usb_watchdog_last_success.txt"

def current_time() -> datetime:
    """Local wall-clock time at second precision."""
    return datetime.now().replace(microsecond=0)

def format_timestamp(value: datetime) -> str:
    return value.strftime(TIMESTAMP_FORMAT)

def parse_timestamp(text: str) -> datetime:
    try:
        return datetime.strptime(text.strip(), TIMESTAMP_FORMAT)
    except ValueError:
        raise MalformedStoredTimestamp(text) from None

class TimestampStore:
    """Single-record store for the moment the device was last seen."""

    def __init__(self, directory, filename: str = DEFAULT_STATE_FILE):
        self.path = Path(directory) / filename

    def read(self) -> Optional[LastSeen]:
        if not self.path.exists():
            return None

        try:
            # Undecodable bytes become U+FFFD and fail the parse below
            with open(self.path, "r", encoding="utf-8", errors="replace") as f:
                raw = f.readline().strip()
        except OSError as e:
            logger.warning(f"Could not read stored timestamp {self.path}: {e}")
            return LastSeen(raw="")

        try:
            return LastSeen(raw=raw, at=parse_timestamp(raw))
        except MalformedStoredTimestamp as e:
            logger.warning(str(e))
            return LastSeen(raw=raw)

    def write(self, now: datetime):
        """Replace the record with `now`. Readers see either the old or the new value."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        with open(tmp, "w", encoding="utf-8") as f:
            f.write(format_timestamp(now))
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp, self.path)
