class WatchdogError(Exception):
    """Base class for every error raised by the watchdog."""


class ConfigurationError(WatchdogError):
    """A required input is missing, empty or malformed."""


class EnumerationUnavailable(WatchdogError):
    """The host device enumeration service cannot be reached."""


class MalformedStoredTimestamp(WatchdogError):
    def __init__(self, raw: str):
        super().__init__(f"Stored timestamp is not in the expected format: {raw!r}")
        self.raw = raw


class ActionLaunchFailure(WatchdogError):
    def __init__(self, command: str, reason: Exception):
        super().__init__(f"Failed to launch recovery command {command!r}: {reason}")
        self.command = command
        self.reason = reason
