"""Custom exceptions for pycabinetwiring."""


class WiringError(Exception):
    """
    Base class for all wiring-length errors.

    Per-record failures during a batch are reported as outcomes rather than
    raised, so most of these only surface from the single-call APIs.
    """

    pass


class UnresolvedReferenceError(WiringError):
    """Raised when a reference text matches no mapping and no bulk range."""

    def __init__(self, reference: str):
        self.reference = reference
        super().__init__(f"Reference '{reference}' has no component mapping.")


class NoPathFoundError(WiringError):
    """Raised when two grid cells are not connected in the topology."""

    def __init__(self, start: tuple[int, int], end: tuple[int, int], reason: str = ""):
        self.start = start
        self.end = end
        detail = f" ({reason})" if reason else ""
        super().__init__(f"No path from {start} to {end}{detail}.")


class InvalidArgumentsError(WiringError, ValueError):
    """Raised when a mutation or configuration call gets malformed arguments."""

    pass


class PersistenceReadError(WiringError):
    """Raised when stored mapping data cannot be read or parsed."""

    def __init__(self, path: str, cause: Exception):
        self.path = path
        self.cause = cause
        super().__init__(f"Could not read mappings from '{path}': {cause}")


class PersistenceWriteError(WiringError):
    """Raised when mapping data cannot be written."""

    def __init__(self, path: str, cause: Exception):
        self.path = path
        self.cause = cause
        super().__init__(f"Could not save mappings to '{path}': {cause}")


class RowSourceUnavailableError(WiringError):
    """Raised when no worksheet is available for an operation that needs one."""

    def __init__(self, message: str = "No worksheet is open."):
        super().__init__(message)


class MappingSessionError(WiringError):
    """Raised on an invalid mapping-session state transition."""

    def __init__(self, action: str, state: str):
        self.action = action
        self.state = state
        super().__init__(f"Cannot {action} while the mapping session is {state}.")


class MeasurementLogFullError(WiringError):
    """Raised when no empty result row is left up to the log's last row."""

    def __init__(self, max_row: int):
        self.max_row = max_row
        super().__init__(f"No empty result row left up to row {max_row}.")


class MappingPersistenceWarning(UserWarning):
    """Emitted when a mapping mutation could not be persisted."""

    pass
