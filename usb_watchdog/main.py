import typer
import sys
from typing import List, Optional
from rich.markup import escape
from rich.tree import Tree
from .core.action import launch_action
from .core.config import load_config, build_settings, WatchdogSettings
from .core.enumeration import DeviceEnumeration
from .core.errors import ConfigurationError, EnumerationUnavailable
from .core.logger import logger, console, setup_logger, delete_old_logs
from .core.presence import walk_forest
from .core.store import TimestampStore
from .core.uptime import uptime_minutes
from .core.watchdog import run_check

# DOS-style help tokens, e.g. `usb-watchdog /?`
LEGACY_HELP_FLAGS = ("-?", "/?", "?")

app = typer.Typer(
    add_completion=False,
    help="Run a recovery command when a USB device has been missing for too long.",
)

def open_enumeration() -> DeviceEnumeration:
    """Device tree of the current host."""
    if sys.platform == 'linux':
        from .platforms.linux import LinuxDeviceEnumeration
        return LinuxDeviceEnumeration()
    if sys.platform == 'win32':
        from .platforms.windows import WindowsDeviceEnumeration
        return WindowsDeviceEnumeration()
    raise EnumerationUnavailable(f"Unsupported platform: {sys.platform}")

def prepare_logging(settings: WatchdogSettings, verbose: bool = False):
    """Attach log handlers in pathlog and prune old logs there."""
    try:
        setup_logger(settings.log_dir, verbose=verbose, console_output=settings.console_output,
                     level=settings.log_level, prefix=settings.log_prefix)
        removed = delete_old_logs(settings.log_dir, settings.retention_days, prefix=settings.log_prefix)
    except OSError as e:
        raise ConfigurationError(f"Unusable pathlog {settings.log_dir}: {e}") from e
    for path in removed:
        logger.debug(f"Deleted old log file {path.name}")

@app.command()
def check(
    uid_usb: Optional[str] = typer.Option(None, "--uid-usb", "-u", help="USB device instance path (substring, case-insensitive)"),
    wait_min: Optional[str] = typer.Option(None, "--wait-min", "-w", help="Max allowed minutes without USB connection"),
    uptime_min: Optional[str] = typer.Option(None, "--uptime-min", "-t", help="Min system uptime in minutes before executing the command"),
    exec_cmd: Optional[str] = typer.Option(None, "--exec", "-e", help="Command to execute when conditions are met"),
    pathlog: Optional[str] = typer.Option(None, "--pathlog", "-p", help="Directory to store logs and the last-success timestamp"),
    config_path: Optional[str] = typer.Option(None, "--config", "-c", help="Path to a YAML config file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
):
    """Check for the USB device once and run the command if it has been gone too long."""
    config = load_config(config_path)
    try:
        settings = build_settings(config, uid_usb=uid_usb, wait_min=wait_min, uptime_min=uptime_min,
                                  exec_cmd=exec_cmd, pathlog=pathlog)
        prepare_logging(settings, verbose)
    except ConfigurationError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(code=1)

    try:
        enumeration = open_enumeration()
    except EnumerationUnavailable as e:
        logger.error(f"Cannot enumerate devices: {e}")
        raise typer.Exit(code=1)

    store = TimestampStore(settings.log_dir, settings.state_filename)
    try:
        run_check(settings, enumeration, store, uptime=uptime_minutes, launcher=launch_action)
    except OSError as e:
        logger.error(f"Unusable pathlog {settings.log_dir}: {e}")
        raise typer.Exit(code=1)

@app.command()
def list_devices(
    filter_: Optional[str] = typer.Option(None, "--filter", "-f", help="Highlight devices whose identifier contains this text"),
):
    """Print the device tree of this host (Snapshot)."""
    console.print("[dim]Scanning devices...[/dim]")
    try:
        enumeration = open_enumeration()
    except EnumerationUnavailable as e:
        console.print(f"[red]Cannot enumerate devices: {e}[/red]")
        raise typer.Exit(code=1)

    pattern = filter_.upper() if filter_ else None
    branches = {}
    tree = None
    matches = 0
    for node, depth in walk_forest(enumeration):
        device_id = enumeration.device_id(node)
        if depth == 0 and device_id is None:
            label = "[dim]<host>[/dim]"
        elif device_id is None:
            label = "[dim]<unreadable>[/dim]"
        elif pattern and pattern in device_id.upper():
            label = f"[bold green]{escape(device_id)}[/bold green]"
            matches += 1
        else:
            label = escape(device_id)

        if depth == 0:
            tree = branches[0] = Tree(label)
        else:
            branches[depth] = branches[depth - 1].add(label)

    console.print(tree)
    if pattern:
        color = "green" if matches else "yellow"
        console.print(f"[{color}]{matches} device(s) match '{escape(filter_)}'.[/{color}]")

def run(argv: Optional[List[str]] = None):
    """Console entry point. No arguments or a legacy help token prints the usage."""
    args = list(sys.argv[1:] if argv is None else argv)
    if not args or any(arg in LEGACY_HELP_FLAGS for arg in args):
        args = ["--help"]
    app(args=args, prog_name="usb-watchdog")

if __name__ == "__main__":
    run()
