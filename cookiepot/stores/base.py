from __future__ import annotations

import abc
import enum
import types
import typing

from cookiepot.cookies import Cookie, merge_cookies, unique_by_name


class WritePolicy(enum.StrEnum):
    REPLACE = "replace"
    """A write drops every cookie previously stored for the host."""

    MERGE = "merge"
    """A write keeps stored cookies whose names the new cookies do not mention."""


class CookieStore(abc.ABC):
    """Storage for cookies keyed by hostname."""

    backend_name: typing.ClassVar[str] = "base"
    default_policy: typing.ClassVar[WritePolicy] = WritePolicy.REPLACE

    def __init__(self, policy: WritePolicy | None = None) -> None:
        self.policy = WritePolicy(policy or self.default_policy)

    @abc.abstractmethod
    def put(self, host: str, cookies: typing.Iterable[Cookie], *, timeout: float | None = None) -> None:
        """Store cookies received from host.

        An empty host is ignored. The call raises StoreTimeoutError when it does not
        finish within timeout seconds, None applies the store default."""

    @abc.abstractmethod
    def get(self, host: str, path: str = "/", *, timeout: float | None = None) -> list[Cookie]:
        """Return cookies to send to host, an empty list when nothing is stored."""

    def close(self) -> None:
        """Release the storage handle."""

    def combine(self, existing: typing.Iterable[Cookie], incoming: typing.Iterable[Cookie]) -> list[Cookie]:
        if self.policy is WritePolicy.MERGE:
            return merge_cookies(existing, incoming)
        return unique_by_name(incoming)

    def __enter__(self) -> typing.Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: types.TracebackType | None,
    ) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"<{type(self).__name__} policy={self.policy.value}>"
