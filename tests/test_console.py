import functools
import pathlib
import typing
from unittest import mock

import httpx
import pytest
from click.testing import CliRunner

from cookiepot.client import Client
from cookiepot.console import app, format_cookie
from cookiepot.cookies import Cookie
from cookiepot.stores import store_from_url


@pytest.fixture
def store_url(tmp_path: pathlib.Path) -> str:
    return f"sqlite:///{tmp_path / 'cookies.db'}"


def _site(request: httpx.Request) -> httpx.Response:
    return httpx.Response(200, headers=[("set-cookie", "session-id=abc123xyz; Path=/; HttpOnly")], text="ok")


def _offline(request: httpx.Request) -> httpx.Response:
    raise httpx.ConnectError("Connection refused", request=request)


def _patch_transport(handler: typing.Callable[[httpx.Request], httpx.Response]) -> typing.Any:
    http = httpx.Client(transport=httpx.MockTransport(handler))
    return mock.patch("cookiepot.console.Client", functools.partial(Client, http=http))


def test_format_cookie() -> None:
    cookie = Cookie("session-id", "abc123xyz", domain="example.com", secure=True, http_only=True)
    assert format_cookie(cookie) == "session-id=abc123xyz; Path=/; Domain=example.com; Secure; HttpOnly"
    assert format_cookie(Cookie("a", "1", path="/app")) == "a=1; Path=/app"


def test_cookies_command(store_url: str) -> None:
    with store_from_url(store_url) as store:
        store.put("example.com", [Cookie("theme", "dark", domain="example.com")])

    runner = CliRunner()
    result = runner.invoke(app, ["--store", store_url, "cookies", "https://www.example.com/"])
    assert result.exit_code == 0
    assert result.output == "theme=dark; Path=/; Domain=example.com\n"


def test_cookies_command_with_empty_store(store_url: str) -> None:
    runner = CliRunner()
    result = runner.invoke(app, ["--store", store_url, "cookies", "https://example.com/"])
    assert result.exit_code == 0
    assert result.output == ""


def test_fetch_stores_cookies(store_url: str) -> None:
    runner = CliRunner()
    with _patch_transport(_site):
        result = runner.invoke(app, ["--store", store_url, "fetch", "https://example.com/"])
    assert result.exit_code == 0
    assert result.output == "200\nsession-id=abc123xyz; Path=/; HttpOnly\n"

    result = runner.invoke(app, ["--store", store_url, "cookies", "https://example.com/"])
    assert result.output == "session-id=abc123xyz; Path=/; HttpOnly\n"


def test_fetch_reports_network_errors(store_url: str) -> None:
    runner = CliRunner()
    with _patch_transport(_offline):
        result = runner.invoke(app, ["--store", store_url, "fetch", "https://example.com/"])
    assert result.exit_code == 1
    assert "Connection refused" in result.output


def test_invalid_store_url() -> None:
    runner = CliRunner()
    result = runner.invoke(app, ["--store", "gopher://localhost", "cookies", "https://example.com/"])
    assert result.exit_code == 1
    assert "Error:" in result.output


def test_verbose_flag(store_url: str) -> None:
    runner = CliRunner()
    result = runner.invoke(app, ["--verbose", "--store", store_url, "cookies", "https://example.com/"])
    assert result.exit_code == 0
