import time
import psutil

def uptime_minutes() -> int:
    """Whole minutes since the host booted."""
    return int((time.time() - psutil.boot_time()) // 60)
