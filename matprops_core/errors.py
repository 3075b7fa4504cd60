"""Error taxonomy for the compute dispatcher and export pipeline."""

from __future__ import annotations


class MatPropsError(Exception):
    """Base class for all errors raised by ``matprops_core``."""


class RequestShapeError(MatPropsError, ValueError):
    """Raised when a computation request is structurally malformed."""


class ConfigError(MatPropsError, ValueError):
    """Raised when a configuration file holds values of the wrong type."""


class ChannelError(MatPropsError):
    """Base class for failures of a single invocation channel."""


class ChannelUnavailable(ChannelError):
    """The channel's transport is absent in this host. A routing signal, not a fault."""


class ChannelInvocationError(ChannelError):
    """Transport, serialization or host-side failure during an invocation."""


class ChannelMalformedResponse(ChannelError):
    """The channel answered, but not with a sequence of numbers."""


class ArityMismatch(ChannelMalformedResponse):
    """The response length differs from the arity of the computation kind."""

    def __init__(self, expected: int, actual: int):
        super().__init__(f"expected {expected} values, got {actual}")
        self.expected = expected
        self.actual = actual


class ExportError(MatPropsError):
    """Base class for export pipeline failures."""


class ExportUnavailable(ExportError):
    """Export was requested before any result was computed."""


class EncoderInitFailure(ExportError):
    """The spreadsheet encoder could not be initialized."""
