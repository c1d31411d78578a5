"""Custom exceptions for TripLedger."""


class TripLedgerError(Exception):
    """Base exception for all TripLedger errors."""

    pass


class ConfigurationError(TripLedgerError):
    """Raised when configuration is invalid or missing."""

    pass


class InvalidEntryError(TripLedgerError):
    """Raised when a ledger entry violates the entry contract."""

    def __init__(self, entry_id: str, reason: str):
        self.entry_id = entry_id
        self.reason = reason
        super().__init__(f"Entry {entry_id} is invalid: {reason}")


class DivisionByZeroError(TripLedgerError, ZeroDivisionError):
    """Raised when a Money amount is divided by zero."""

    pass


class UnknownViewerError(TripLedgerError):
    """Raised when the viewing participant is not on the trip roster."""

    def __init__(self, viewer_id: str):
        self.viewer_id = viewer_id
        super().__init__(f"Viewer {viewer_id} is not a member of this trip")


class SnapshotError(TripLedgerError):
    """Raised when a trip snapshot file cannot be read or written."""

    pass
