import copy
import yaml
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional
from platformdirs import user_config_dir
from .errors import ConfigurationError
from .events import WatchdogThresholds
from .logger import console

APP_NAME = "usb_watchdog"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

# Default configuration if file is missing
DEFAULT_CONFIG = {
    "logging": {
        "level": "INFO",
        "console_output": True,
        "retention_days": 365,
        "file_prefix": "usb_watchdog_"
    },
    "state": {
        "filename": "usb_watchdog_last_success.txt"
    },
    "watchdog": {
        "uid_usb": None,
        "wait_min": None,
        "uptime_min": None,
        "exec": None,
        "pathlog": None
    }
}

def default_config_path() -> Path:
    return Path(user_config_dir(APP_NAME)) / "config.yaml"

def deep_update(d: Dict[str, Any], u: Dict[str, Any]) -> Dict[str, Any]:
    for k, v in u.items():
        if isinstance(v, dict):
            d[k] = deep_update(d.get(k, {}), v)
        else:
            d[k] = v
    return d

def load_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load configuration from a YAML file.
    Falls back to defaults if file is missing or invalid.
    """
    file_path = Path(config_path) if config_path else default_config_path()

    if not file_path.exists():
        if config_path:
            console.print(f"[yellow]Config file {file_path} not found. Using defaults.[/yellow]")
        return copy.deepcopy(DEFAULT_CONFIG)

    try:
        with open(file_path, "r") as f:
            config = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        console.print(f"[yellow]Error loading config {file_path}: {e}. Using defaults.[/yellow]")
        return copy.deepcopy(DEFAULT_CONFIG)

    if not isinstance(config, dict):
        return copy.deepcopy(DEFAULT_CONFIG)

    # Merge with defaults
    return deep_update(copy.deepcopy(DEFAULT_CONFIG), config)

@dataclass(frozen=True)
class WatchdogSettings:
    device_id: str
    thresholds: WatchdogThresholds
    command: str
    log_dir: Path
    state_filename: str = DEFAULT_CONFIG["state"]["filename"]
    log_prefix: str = DEFAULT_CONFIG["logging"]["file_prefix"]
    log_level: str = DEFAULT_CONFIG["logging"]["level"]
    console_output: bool = True
    retention_days: int = DEFAULT_CONFIG["logging"]["retention_days"]

def parse_positive_int(value: Any, name: str) -> int:
    """Strict whole-number parse: '15' is fine, '15min', '1.5', '0' and '-3' are not."""
    if isinstance(value, bool):
        raise ConfigurationError(f"Invalid {name} value: {value!r}")
    if isinstance(value, int):
        number = value
    else:
        text = str(value).strip()
        # str.isdigit also accepts superscripts and non-ASCII digits
        if not (text.isascii() and text.isdigit()):
            raise ConfigurationError(f"Invalid {name} value: {value!r}")
        number = int(text)
    if number <= 0:
        raise ConfigurationError(f"Invalid {name} value: {value!r} (must be a positive integer)")
    return number

def _pick(cli_value, file_value):
    return cli_value if cli_value is not None else file_value

def build_settings(config: Dict[str, Any], uid_usb: Optional[str] = None, wait_min: Optional[str] = None,
                   uptime_min: Optional[str] = None, exec_cmd: Optional[str] = None,
                   pathlog: Optional[str] = None) -> WatchdogSettings:
    """Merge command-line values over the config file and validate the result."""
    section = config.get("watchdog") or {}
    values = {
        "uid_usb": _pick(uid_usb, section.get("uid_usb")),
        "wait_min": _pick(wait_min, section.get("wait_min")),
        "uptime_min": _pick(uptime_min, section.get("uptime_min")),
        "exec": _pick(exec_cmd, section.get("exec")),
        "pathlog": _pick(pathlog, section.get("pathlog")),
    }

    missing = [name for name, value in values.items() if value is None or str(value).strip() == ""]
    if missing:
        raise ConfigurationError("Missing required parameters: " + ", ".join(missing))

    thresholds = WatchdogThresholds(
        wait_min=parse_positive_int(values["wait_min"], "wait_min"),
        uptime_min=parse_positive_int(values["uptime_min"], "uptime_min"),
    )

    log_cfg = config.get("logging") or {}
    level = str(log_cfg.get("level", "INFO")).upper()
    if level not in LOG_LEVELS:
        raise ConfigurationError(f"Invalid logging level: {level!r}")

    return WatchdogSettings(
        device_id=str(values["uid_usb"]).strip(),
        thresholds=thresholds,
        command=str(values["exec"]),
        log_dir=Path(str(values["pathlog"])),
        state_filename=(config.get("state") or {}).get("filename") or DEFAULT_CONFIG["state"]["filename"],
        log_prefix=log_cfg.get("file_prefix") or DEFAULT_CONFIG["logging"]["file_prefix"],
        log_level=level,
        console_output=bool(log_cfg.get("console_output", True)),
        retention_days=parse_positive_int(log_cfg.get("retention_days", 365), "retention_days"),
    )
