from __future__ import annotations

import http.cookiejar
import json
import logging
import types
import typing

import httpx

from cookiepot.cookies import Cookie, parse_set_cookie
from cookiepot.exceptions import ConfigurationError, StoreError
from cookiepot.jar import CookieJar, URLTypes

logger = logging.getLogger(__name__)

HeaderTypes = typing.Union[
    typing.Mapping[str, str],
    typing.Sequence[typing.Tuple[str, str]],
]


def _disabled_cookie_jar() -> http.cookiejar.CookieJar:
    # httpx would keep response cookies on its own, all cookies go through CookieJar instead
    return http.cookiejar.CookieJar(policy=http.cookiejar.DefaultCookiePolicy(allowed_domains=[]))


class Response:
    """A finished HTTP response with the body read into memory."""

    def __init__(
        self,
        status_code: int,
        content: bytes = b"",
        headers: httpx.Headers | None = None,
        encoding: str | None = None,
    ) -> None:
        self.status_code = status_code
        self.content = content
        self.headers = headers or httpx.Headers()
        self.encoding = encoding or "utf-8"

    @property
    def text(self) -> str:
        return self.content.decode(self.encoding, errors="replace")

    def json(self) -> typing.Any:
        """Decode the body as JSON.
        Raises ValueError when the body is not valid JSON."""
        return json.loads(self.content)

    @classmethod
    def from_httpx(cls, response: httpx.Response) -> Response:
        return cls(
            status_code=response.status_code,
            content=response.content,
            headers=response.headers,
            encoding=response.encoding,
        )

    def __repr__(self) -> str:
        return f"<Response [{self.status_code}]>"


class Client:
    """Synchronous HTTP client that keeps cookies in a :class:`CookieJar`.

    Before every request, including redirects, stored cookies for the URL are sent in the
    Cookie header. Cookies from Set-Cookie response headers are written back to the jar.
    When the cookie store fails the request goes on without cookies and the failure is
    logged, unless raise_cookie_errors is set."""

    def __init__(
        self,
        jar: CookieJar | None = None,
        *,
        timeout: float = 30.0,
        follow_redirects: bool = True,
        raise_cookie_errors: bool = False,
        http: httpx.Client | None = None,
    ) -> None:
        self.jar = jar
        self.raise_cookie_errors = raise_cookie_errors
        self.http = http or httpx.Client(timeout=timeout, follow_redirects=follow_redirects)
        self.http.cookies = _disabled_cookie_jar()

        hooks = self.http.event_hooks
        self.http.event_hooks = {
            "request": [*hooks["request"], self._attach_cookies],
            "response": [*hooks["response"], self._store_cookies],
        }

    def with_cookie_jar(self, jar: CookieJar) -> typing.Self:
        self.jar = jar
        return self

    def request(
        self,
        method: str,
        url: URLTypes,
        *,
        headers: HeaderTypes | None = None,
        content: bytes | str | None = None,
        data: typing.Mapping[str, typing.Any] | None = None,
        json: typing.Any = None,
    ) -> Response:
        response = self.http.request(method, url, headers=headers, content=content, data=data, json=json)
        return Response.from_httpx(response)

    def get(self, url: URLTypes, *, headers: HeaderTypes | None = None) -> Response:
        return self.request("GET", url, headers=headers)

    def post(
        self,
        url: URLTypes,
        *,
        headers: HeaderTypes | None = None,
        content: bytes | str | None = None,
        data: typing.Mapping[str, typing.Any] | None = None,
        json: typing.Any = None,
    ) -> Response:
        return self.request("POST", url, headers=headers, content=content, data=data, json=json)

    def put(
        self,
        url: URLTypes,
        *,
        headers: HeaderTypes | None = None,
        content: bytes | str | None = None,
        data: typing.Mapping[str, typing.Any] | None = None,
        json: typing.Any = None,
    ) -> Response:
        return self.request("PUT", url, headers=headers, content=content, data=data, json=json)

    def patch(
        self,
        url: URLTypes,
        *,
        headers: HeaderTypes | None = None,
        content: bytes | str | None = None,
        data: typing.Mapping[str, typing.Any] | None = None,
        json: typing.Any = None,
    ) -> Response:
        return self.request("PATCH", url, headers=headers, content=content, data=data, json=json)

    def delete(
        self,
        url: URLTypes,
        *,
        headers: HeaderTypes | None = None,
        content: bytes | str | None = None,
    ) -> Response:
        return self.request("DELETE", url, headers=headers, content=content)

    def cookies(self, url: URLTypes) -> list[Cookie]:
        """Return cookies the client would send to url."""
        if self.jar is None:
            return []
        return self.jar.cookies(url)

    def set_cookie(self, url: URLTypes, cookie: Cookie) -> None:
        if self.jar is None:
            raise ConfigurationError("Client has no cookie jar.")
        self.jar.set_cookies(url, [cookie])

    def close(self) -> None:
        self.http.close()

    def __enter__(self) -> typing.Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: types.TracebackType | None,
    ) -> None:
        self.close()

    def _attach_cookies(self, request: httpx.Request) -> None:
        if self.jar is None:
            return

        try:
            cookies = self.jar.cookies(request.url)
        except StoreError as ex:
            if self.raise_cookie_errors:
                raise
            logger.warning("Sending request to %s without cookies: %s", request.url.host, ex)
            return

        if not cookies:
            return

        pairs = [cookie.to_header() for cookie in cookies]
        if "cookie" in request.headers:
            pairs.insert(0, request.headers["cookie"])
        request.headers["Cookie"] = "; ".join(pairs)

    def _store_cookies(self, response: httpx.Response) -> None:
        if self.jar is None:
            return

        cookies = [
            cookie
            for cookie in (parse_set_cookie(header) for header in response.headers.get_list("set-cookie"))
            if cookie is not None
        ]
        if not cookies:
            return

        try:
            self.jar.set_cookies(response.request.url, cookies)
        except StoreError as ex:
            if self.raise_cookie_errors:
                raise
            logger.warning("Discarding %d cookie(s) from %s: %s", len(cookies), response.request.url.host, ex)
