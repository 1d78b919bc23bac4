"""ArcSearch exceptions.

Every failure carries a ``kind`` (stable machine-readable name), a
human-readable message and, for engine failures, the reason category
reported by OpenSearch.  The API layer maps ``status_code`` directly onto
the HTTP response.
"""

from __future__ import annotations


class ArcSearchError(Exception):
    """Base exception for ArcSearch errors."""

    kind = "error"
    status_code = 500

    def __init__(self, message: str, reason: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.reason = reason

    def to_dict(self) -> dict[str, str | None]:
        return {"error": self.kind, "message": self.message, "reason": self.reason}


class ValidationError(ArcSearchError):
    """Raised when required input is missing or malformed."""

    kind = "validation_error"
    status_code = 400


class UnsupportedEventError(ArcSearchError):
    """Raised when a lifecycle event type is not part of the vocabulary."""

    kind = "unsupported_event"
    status_code = 422

    def __init__(self, event_type: str) -> None:
        super().__init__(f"Unsupported event type: {event_type!r}")
        self.event_type = event_type


class MissingScopeError(ArcSearchError):
    """Raised when a query arrives without a site scope."""

    kind = "missing_scope"
    status_code = 400

    def __init__(self, message: str = "Missing required parameter: arc-site or arcSite") -> None:
        super().__init__(message)


class SearchEngineError(ArcSearchError):
    """Raised when OpenSearch rejects a request or cannot be reached.

    Attributes:
        reason: Engine-reported category (``index_not_found``,
            ``schema_mismatch``, ``transport``, ``engine_error``).
        retryable: Whether repeating the same call may succeed.
    """

    kind = "search_engine_error"

    INDEX_NOT_FOUND = "index_not_found"
    SCHEMA_MISMATCH = "schema_mismatch"
    TRANSPORT = "transport"
    ENGINE_ERROR = "engine_error"

    def __init__(self, message: str, reason: str = ENGINE_ERROR, retryable: bool = False) -> None:
        super().__init__(message, reason=reason)
        self.retryable = retryable

    @property
    def status_code(self) -> int:  # type: ignore[override]
        if self.reason == self.SCHEMA_MISMATCH:
            return 400
        if self.reason == self.INDEX_NOT_FOUND:
            return 503
        return 502
