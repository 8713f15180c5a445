"""
kvjournal exception hierarchy.

All kvjournal exceptions inherit from KvJournalError, making it easy for the
dispatcher boundary to catch library-level errors while still distinguishing
specific failure modes.
"""


class KvJournalError(Exception):
    """Base exception class for all kvjournal errors."""


class ConfigurationError(KvJournalError):
    """Raised for configuration errors (missing keys, invalid values)."""


class InvalidArgumentError(KvJournalError):
    """Raised for a wrong argument count, or an empty/non-integer positional argument."""


class LookupFailureError(KvJournalError):
    """Raised when a ledger read fails or a named lookup cannot be completed."""


class DuplicateKeyError(KvJournalError):
    """Raised when a journal is created for a cpr-nr that is already in use."""


class StorageFailureError(KvJournalError):
    """Raised when a ledger write fails. Earlier steps are not rolled back."""


class UnknownOperationError(KvJournalError):
    """Raised when the dispatcher has no handler for a function name."""


class DeserializationError(KvJournalError):
    """Raised when a stored value cannot be decoded into the expected structure."""
