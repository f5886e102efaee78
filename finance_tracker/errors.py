# finance_tracker/errors.py


class FinanceTrackerError(Exception):
    """Base class for errors raised by the tracker."""


class ValidationError(FinanceTrackerError):
    """User input was rejected. Nothing was recorded."""


class RemoteUnavailable(FinanceTrackerError):
    """The remote store could not be reached, authorised or written to."""


class CacheCorrupt(FinanceTrackerError):
    """The local snapshot could not be decoded."""
