"""
Domain errors raised by the prakerin services.

Views translate these into DRF responses; services never return error
strings in place of values.
"""


class PrakerinError(Exception):
    """Base class for all domain errors."""


class ScopeError(PrakerinError):
    """A record lies outside the caller's major scope."""


class AggregationError(PrakerinError):
    """The final grade of a placement could not be computed."""


class CredentialError(PrakerinError):
    """Login credentials could not be issued."""


class RosterError(PrakerinError):
    """A student roster file could not be imported."""


class BackupError(PrakerinError):
    """A backup document is malformed or could not be restored."""


class ExportError(PrakerinError):
    """A report could not be exported."""
