from __future__ import annotations

import typing

import httpx

from cookiepot.cookies import Cookie
from cookiepot.stores.base import CookieStore

URLTypes = typing.Union[str, httpx.URL]


class CookieJar:
    """Connects a cookie store to the HTTP client.

    URLs are reduced to a hostname, which is the store key, and a path. URLs without
    hostname are accepted and ignored by the store. Store calls are bounded by timeout
    seconds, None leaves the limit to the store."""

    def __init__(self, store: CookieStore, timeout: float | None = None) -> None:
        self.store = store
        self.timeout = timeout

    def set_cookies(self, url: URLTypes, cookies: typing.Iterable[Cookie]) -> None:
        self.store.put(httpx.URL(url).host, list(cookies), timeout=self.timeout)

    def cookies(self, url: URLTypes) -> list[Cookie]:
        url = httpx.URL(url)
        return self.store.get(url.host, url.path or "/", timeout=self.timeout)

    def close(self) -> None:
        self.store.close()

    def __repr__(self) -> str:
        return f"<CookieJar store={self.store!r}>"
