"""
Typed errors raised by the query builder.

Client failures are translated into these instead of leaking the
underlying transport exceptions, keeping the engine's status code and
message so the caller can decide what is recoverable.
"""

from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional

from elasticsearch import ApiError, NotFoundError, TransportError


class QueryError(Exception):
    """Base error for all query builder failures."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.details = details or {}


class NotFound(QueryError):
    """Missing document, index or template (engine 404)."""


class ClientError(QueryError):
    """Request rejected by the engine or the transport failed."""


class ConfigurationError(QueryError):
    """Required index/type/template configuration is absent."""


@contextmanager
def elastic_errors(operation: str) -> Iterator[None]:
    """
    Translate elasticsearch client exceptions into QueryError subclasses.

    Args:
        operation: Human readable name used as the message prefix

    Raises:
        NotFound: On a 404 from the engine
        ClientError: On any other API or transport error
    """
    try:
        yield
    except NotFoundError as e:
        raise NotFound(
            f"{operation} failed: {e.message}",
            status_code=404,
            details={"body": e.body},
        ) from e
    except ApiError as e:
        raise ClientError(
            f"{operation} failed: {e.message}",
            status_code=e.status_code,
            details={"body": e.body},
        ) from e
    except TransportError as e:
        raise ClientError(f"{operation} failed: {e.message}") from e
