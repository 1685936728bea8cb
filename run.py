import sys
import subprocess
import venv
from pathlib import Path

PROJECT_DIR = Path(__file__).parent.resolve()

class VenvBootstrap:
    """
    Runs the watchdog from a private virtual environment next to this script.
    The project is installed once; the marker file records a finished install,
    so an interrupted first setup is retried on the next run.
    """

    MARKER = ".usb_watchdog_installed"

    def __init__(self, env_dir: Path = PROJECT_DIR / "venv"):
        self.env_dir = env_dir

    @staticmethod
    def active() -> bool:
        return getattr(sys, "base_prefix", sys.prefix) != sys.prefix

    @property
    def python(self) -> Path:
        if sys.platform == "win32":
            return self.env_dir / "Scripts" / "python.exe"
        return self.env_dir / "bin" / "python"

    @property
    def installed(self) -> bool:
        return (self.env_dir / self.MARKER).exists()

    def ensure(self):
        if self.installed:
            return
        if not self.python.exists():
            print(f"[*] Creating virtual environment in {self.env_dir}...")
            venv.create(self.env_dir, with_pip=True)

        print(f"[*] Installing usb-watchdog from {PROJECT_DIR}...")
        try:
            subprocess.check_call([str(self.python), "-m", "pip", "install", str(PROJECT_DIR)])
        except subprocess.CalledProcessError as e:
            print(f"[!] Installation failed: {e}")
            sys.exit(1)
        (self.env_dir / self.MARKER).touch()
        print("[*] Setup complete.")

    def relaunch(self, argv):
        """Run this script again under the environment's interpreter and exit with its status."""
        try:
            code = subprocess.call([str(self.python), __file__] + list(argv))
        except KeyboardInterrupt:
            code = 130
        sys.exit(code)

def launch_watchdog():
    try:
        from usb_watchdog.main import run
    except ImportError as e:
        print(f"[!] usb-watchdog is not importable here ({e}).")
        print("[!] Delete the 'venv' folder next to run.py to reinstall it.")
        sys.exit(1)
    run()

if __name__ == "__main__":
    if VenvBootstrap.active():
        launch_watchdog()
    else:
        bootstrap = VenvBootstrap()
        bootstrap.ensure()
        bootstrap.relaunch(sys.argv[1:])
