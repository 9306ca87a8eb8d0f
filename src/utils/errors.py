"""Custom exception hierarchy for the review engine.

All engine exceptions inherit from :class:`ReviewEngineError`, which
carries an optional ``content_id`` so error handlers and bulk reports can
identify which review item caused the failure, plus a stable ``code``
string that callers can map onto their own transport status codes.

The hierarchy is organized by failure category:

    ReviewEngineError  (base -- catch-all for any engine error)
    +-- ContentNotFoundError      (unknown id / content_id)
    +-- InvalidTransitionError    (illegal state-machine transition)
    +-- InputValidationError      (missing or empty required input)
    +-- UnsupportedOperationError (operation intentionally not implemented)
    +-- InternalEngineError       (unexpected failure in scoring or edits)

Bulk operations catch these per item and report ``code`` and ``message``
in the aggregate result instead of aborting the batch.
"""


class ReviewEngineError(Exception):
    """Base exception for all review engine errors.

    The ``__str__`` method prefixes the content id in brackets for
    structured log output, e.g. ``[post-42] Content already approved``.
    """

    code = "error"

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        content_id: str | None = None,
    ) -> None:
        self._message = message
        self._content_id = content_id
        super().__init__(self._message)

    @property
    def message(self) -> str:
        return self._message

    @property
    def content_id(self) -> str | None:
        return self._content_id

    def __str__(self) -> str:
        if self._content_id:
            return f"[{self._content_id}] {self._message}"
        return self._message


# ---------------------------------------------------------------------------
# Lookup / state errors
# ---------------------------------------------------------------------------

class ContentNotFoundError(ReviewEngineError):
    """Raised when no review item exists for the given id or content id."""

    code = "not_found"

    def __init__(
        self,
        message: str = "Content not found in review queue",
        content_id: str | None = None,
    ) -> None:
        super().__init__(message=message, content_id=content_id)


class InvalidTransitionError(ReviewEngineError):
    """Raised when a transition is not legal from the item's current status.

    Example: approving an item that is already ``approved`` or
    ``auto_approved``.  The stored item is left untouched.
    """

    code = "conflict"

    def __init__(
        self,
        message: str = "Invalid review state transition",
        content_id: str | None = None,
    ) -> None:
        super().__init__(message=message, content_id=content_id)


# ---------------------------------------------------------------------------
# Caller input errors
# ---------------------------------------------------------------------------

class InputValidationError(ReviewEngineError):
    """Raised when required input is missing, blank or out of range."""

    code = "validation"

    def __init__(
        self,
        message: str = "Invalid input",
        content_id: str | None = None,
    ) -> None:
        super().__init__(message=message, content_id=content_id)


class UnsupportedOperationError(ReviewEngineError):
    """Raised for operations the engine deliberately does not implement."""

    code = "not_implemented"

    def __init__(
        self,
        message: str = "Operation not implemented",
        content_id: str | None = None,
    ) -> None:
        super().__init__(message=message, content_id=content_id)


# ---------------------------------------------------------------------------
# Unexpected failures
# ---------------------------------------------------------------------------

class InternalEngineError(ReviewEngineError):
    """Raised when scoring or edit application fails unexpectedly."""

    code = "internal"

    def __init__(
        self,
        message: str = "Internal review engine failure",
        content_id: str | None = None,
    ) -> None:
        super().__init__(message=message, content_id=content_id)
