"""
Debug tracing for a planning cycle.

Components take a Telemetry object and call it unconditionally; whether
anything is written is decided once, when the telemetry is built.
"""
import logging
from contextlib import contextmanager

INDENT = "   "


class NullTelemetry:
    """Telemetry that records nothing."""

    @contextmanager
    def section(self, name):
        yield self

    def trace(self, message, *args):
        pass

    def error(self, message, *args):
        pass


class LoggingTelemetry(NullTelemetry):
    """
    Writes trace lines through a logger, indented by how deep the current
    section is nested, and prefixed with the section's name.
    """

    def __init__(self, logger=None):
        self.logger = logger or logging.getLogger("leavenow.trace")
        self.stack = []

    @contextmanager
    def section(self, name):
        self.stack.append(name)
        self.trace("enter")
        try:
            yield self
        finally:
            self.trace("exit")
            self.stack.pop()

    def _prefix(self):
        name = self.stack[-1] if self.stack else ""
        depth = max(len(self.stack) - 1, 0)
        return f"{name:<25}\t{INDENT * depth}"

    def trace(self, message, *args):
        self.logger.debug(self._prefix() + message, *args)

    def error(self, message, *args):
        self.logger.error(self._prefix() + message, *args)


def make_telemetry(enabled, logger=None):
    return LoggingTelemetry(logger) if enabled else NullTelemetry()
