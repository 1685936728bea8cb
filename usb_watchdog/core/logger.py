import logging
import time
from pathlib import Path
from datetime import datetime
from typing import Optional
from rich.logging import RichHandler
from rich.console import Console

# Setup rich console
console = Console()

LOGGER_NAME = "usb_watchdog"
DEFAULT_LOG_PREFIX = "usb_watchdog_"
LOG_LINE_FORMAT = "%(asctime)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

logger = logging.getLogger(LOGGER_NAME)

def monthly_log_name(now: Optional[datetime] = None, prefix: str = DEFAULT_LOG_PREFIX) -> str:
    """One log file per calendar month, e.g. usb_watchdog_202610.log"""
    now = now or datetime.now()
    return f"{prefix}{now:%Y%m}.log"

def setup_logger(log_dir, verbose: bool = False, console_output: bool = True,
                 level: str = "INFO", prefix: str = DEFAULT_LOG_PREFIX):
    """
    Attach the monthly file handler and the rich console handler.
    Handlers from an earlier call are closed and replaced.
    """
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    logger.setLevel(logging.DEBUG if verbose else level.upper())

    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / monthly_log_name(prefix=prefix)

    # File Handler (plain text, appended)
    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setFormatter(logging.Formatter(LOG_LINE_FORMAT, datefmt=LOG_DATE_FORMAT))
    logger.addHandler(file_handler)

    # Console Handler (Rich)
    if console_output:
        console_handler = RichHandler(console=console, show_path=False, log_time_format="[%Y-%m-%d %H:%M:%S]")
        logger.addHandler(console_handler)

    return logger, log_file

def delete_old_logs(log_dir, max_age_days: int = 365, prefix: str = DEFAULT_LOG_PREFIX, now: Optional[float] = None):
    """Delete prefixed log files whose age in whole days exceeds max_age_days."""
    log_dir = Path(log_dir)
    if not log_dir.is_dir():
        return []

    now = time.time() if now is None else now
    removed = []
    for entry in log_dir.iterdir():
        if not entry.is_file() or not entry.name.startswith(prefix) or entry.suffix != ".log":
            continue
        age_days = int((now - entry.stat().st_mtime) // 86400)
        if age_days > max_age_days:
            entry.unlink()
            removed.append(entry)
    return removed
