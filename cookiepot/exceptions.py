from __future__ import annotations

import typing


class CookiepotError(Exception):
    """Base class for all cookiepot errors."""


class ConfigurationError(CookiepotError, ValueError):
    """Raised when a store or a client is constructed with invalid arguments."""


class StoreError(CookiepotError):
    """A cookie store operation failed.

    The message names the operation, the host and the backend but never the
    connection URL, the underlying driver error is chained as ``__cause__``."""

    def __init__(self, message: str, *, operation: str = "", host: str = "", backend: str = "") -> None:
        super().__init__(message)
        self.operation = operation
        self.host = host
        self.backend = backend

    @classmethod
    def for_operation(
        cls,
        operation: str,
        host: str,
        backend: str,
        cause: BaseException | None = None,
    ) -> typing.Self:
        message = f"{backend} cookie store: {operation} failed"
        if host:
            message += f' for host "{host}"'
        if cause is not None:
            message += f" ({type(cause).__name__})"
        return cls(message, operation=operation, host=host, backend=backend)


class StoreConnectionError(StoreError):
    """The storage backend is unreachable."""


class StoreTimeoutError(StoreError):
    """The storage backend did not answer in time."""


class SerializationError(StoreError, ValueError):
    """Cookies could not be encoded to or decoded from JSON."""
