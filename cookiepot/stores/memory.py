from __future__ import annotations

import logging
import threading
import typing

from cookiepot.cookies import Cookie
from cookiepot.exceptions import StoreTimeoutError
from cookiepot.locks import hold
from cookiepot.stores.base import CookieStore, WritePolicy

logger = logging.getLogger(__name__)


class MemoryCookieStore(CookieStore):
    """Process local storage, lookups match the exact hostname only."""

    backend_name = "memory"

    def __init__(self, policy: WritePolicy | None = None) -> None:
        super().__init__(policy)
        self.cookies: dict[str, list[Cookie]] = {}
        self._lock = threading.Lock()

    def put(self, host: str, cookies: typing.Iterable[Cookie], *, timeout: float | None = None) -> None:
        if not host:
            logger.debug("Ignoring cookies for a URL without hostname.")
            return

        host = host.lower()
        try:
            with hold(self._lock, timeout):
                self.cookies[host] = self.combine(self.cookies.get(host, []), cookies)
        except TimeoutError as ex:
            raise StoreTimeoutError.for_operation("put", host, self.backend_name, ex) from ex

    def get(self, host: str, path: str = "/", *, timeout: float | None = None) -> list[Cookie]:
        if not host:
            return []

        host = host.lower()
        try:
            with hold(self._lock, timeout):
                return list(self.cookies.get(host, []))
        except TimeoutError as ex:
            raise StoreTimeoutError.for_operation("get", host, self.backend_name, ex) from ex

    def close(self) -> None:
        with self._lock:
            self.cookies.clear()
