"""Custom exception classes for the CouchDB client."""

from typing import Optional


class CouchDbException(Exception):
    """
    Base exception class for all CouchDB client errors.

    Attributes:
        message: Error message
        status_code: HTTP status returned by the server, if any
        error: CouchDB error token (e.g. "not_found", "conflict")
        reason: CouchDB reason string
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        error: Optional[str] = None,
        reason: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.error = error
        self.reason = reason


class ValidationError(CouchDbException):
    """
    Raised before any request is sent when a required argument is missing
    or invalid (empty source/target, missing document id or revision).
    """

    def __init__(self, message: str, field_name: Optional[str] = None) -> None:
        super().__init__(message)
        self.field_name = field_name


class NotFoundError(CouchDbException):
    """
    Raised when the requested document or database does not exist.
    """
    pass


class ConflictError(CouchDbException):
    """
    Raised on a document update conflict (revision mismatch).
    """
    pass


class PreconditionFailedError(CouchDbException):
    """
    Raised when a precondition fails, e.g. creating a database that exists.
    """
    pass


class TransportError(CouchDbException):
    """
    Raised when the server cannot be reached or the exchange fails mid-flight.
    """
    pass


class ResponseParseError(TransportError):
    """
    Raised when a response body cannot be decoded into the expected shape.
    """
    pass
