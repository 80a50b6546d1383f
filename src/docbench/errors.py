"""
Error types for the document store binding.

Two families matter to the binding:

- ``ConfigurationError``: a missing or invalid option. Raised while settings
  are resolved, before any operation runs.
- ``RemoteCallError``: anything the remote client reports during a call. The
  binding maps every one of these to ``Status.ERROR`` without retrying.

Not-found on read and not-found on update are not errors at all; the client
returns ``None`` for the read and the binding treats the update as a no-op.

Usage:
    from docbench.errors import DocumentNotFoundError, RemoteCallError

    try:
        client.delete_document(path, options)
    except DocumentNotFoundError:
        ...
    except RemoteCallError as e:
        logger.error("remote_call_failed", status_code=e.status_code)
"""

from __future__ import annotations

from typing import Any


class DocbenchError(Exception):
    """Base class for all binding errors."""

    def __init__(self, message: str, *, cause: Exception | None = None):
        super().__init__(message)
        self.message = message
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging."""
        result: dict[str, Any] = {
            "error_type": self.__class__.__name__,
            "message": self.message,
        }
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r})"


# =============================================================================
# CONFIGURATION ERRORS
# =============================================================================


class ConfigurationError(DocbenchError):
    """
    Configuration error.

    Fatal at startup - the binding never begins an operation.
    """

    def __init__(self, message: str, *, key: str | None = None, cause: Exception | None = None):
        self.key = key
        super().__init__(message, cause=cause)


# =============================================================================
# REMOTE CALL ERRORS
# =============================================================================


class RemoteCallError(DocbenchError):
    """A failure reported by the remote document client."""

    default_status_code: int | None = None

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message, cause=cause)
        self.status_code = status_code if status_code is not None else self.default_status_code

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        if self.status_code is not None:
            result["status_code"] = self.status_code
        return result


class BadRequestError(RemoteCallError):
    """The store rejected the request as malformed (e.g. missing partition key)."""

    default_status_code = 400


class DocumentNotFoundError(RemoteCallError):
    """The addressed resource does not exist."""

    default_status_code = 404


class DocumentConflictError(RemoteCallError):
    """A document with the same id already exists."""

    default_status_code = 409


class PreconditionFailedError(RemoteCallError):
    """The if-match version tag no longer matches the stored document."""

    default_status_code = 412


_ERRORS_BY_STATUS: dict[int, type[RemoteCallError]] = {
    400: BadRequestError,
    404: DocumentNotFoundError,
    409: DocumentConflictError,
    412: PreconditionFailedError,
}


def error_for_status(
    status_code: int | None, message: str, cause: Exception | None = None
) -> RemoteCallError:
    """Build the most specific RemoteCallError for an HTTP-style status code."""
    error_class = _ERRORS_BY_STATUS.get(status_code, RemoteCallError) if status_code else RemoteCallError
    return error_class(message, status_code=status_code, cause=cause)
