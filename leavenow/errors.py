class LeaveNowError(Exception):
    """Base class for errors raised by leavenow."""


class PositionSourceError(LeaveNowError):
    """The live position source could not produce a fix."""


class PositionUnavailable(LeaveNowError):
    """Neither a live fix nor a cached position is available."""


class ConfigUnavailable(LeaveNowError):
    """The known places configuration is missing or malformed."""


class NotificationWriteError(LeaveNowError):
    """A reminder could not be written to the notification store."""
