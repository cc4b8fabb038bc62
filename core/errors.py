# =============================================================================
# core/errors.py  —  Exceptions raised by the core package
# =============================================================================
#
# Almost every failure in this system is a VALUE, not an exception:
# validation errors, HTTP errors and connection errors all come back as an
# OperationResult with is_error=True.  The only thing that is raised is a
# request for an operation that does not exist.
# =============================================================================


class KweenklError(Exception):
    """Base class for kweenkl adapter errors."""


class UnknownOperationError(KweenklError, LookupError):
    """Raised when a caller asks for an operation name we do not implement."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown tool: {name}")
