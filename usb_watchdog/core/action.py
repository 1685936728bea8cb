import subprocess
from .errors import ActionLaunchFailure

def launch_action(command: str) -> subprocess.Popen:
    """
    Start the recovery command through the shell and return without waiting.
    The child runs in its own session so it outlives the watchdog process.
    """
    try:
        return subprocess.Popen(
            command,
            shell=True,
            stdin=subprocess.DEVNULL,
            start_new_session=True,
        )
    except (OSError, ValueError) as e:
        raise ActionLaunchFailure(command, e) from e
