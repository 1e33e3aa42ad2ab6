import os
import secrets
import typing

import pytest
import redis
import sqlalchemy as sa
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import JSONResponse, PlainTextResponse, RedirectResponse, Response
from starlette.routing import Route
from starlette.testclient import TestClient

from cookiepot.stores import MemoryCookieStore, RedisCookieStore, SQLCookieStore
from cookiepot.stores.sql import create_engine

DATABASE_URL = os.environ.get("DATABASE_URL", "sqlite://")
REDIS_URL = os.environ.get("REDIS_URL", "redis://")


@pytest.fixture
def db_engine() -> typing.Generator[sa.Engine, None, None]:
    engine = create_engine(DATABASE_URL)
    yield engine
    engine.dispose()


@pytest.fixture
def table_name(db_engine: sa.Engine) -> typing.Generator[str, None, None]:
    name = "cookiepot_test_" + secrets.token_hex(4)
    yield name
    with db_engine.begin() as conn:
        conn.execute(sa.text(f"DROP TABLE IF EXISTS {name}"))


@pytest.fixture
def sql_store(db_engine: sa.Engine, table_name: str) -> SQLCookieStore:
    return SQLCookieStore(db_engine, table_name)


@pytest.fixture
def redis_client() -> typing.Generator[redis.Redis, None, None]:
    client = redis.Redis.from_url(REDIS_URL, socket_connect_timeout=1)
    try:
        client.ping()
    except (redis.exceptions.ConnectionError, redis.exceptions.TimeoutError):
        pytest.skip("Redis is not available.")
    yield client
    client.close()


@pytest.fixture
def redis_store(redis_client: redis.Redis) -> typing.Generator[RedisCookieStore, None, None]:
    prefix = "cookiepot_test_" + secrets.token_hex(4)
    yield RedisCookieStore(redis_client, prefix=prefix)
    for key in redis_client.scan_iter(f"{prefix}:*"):
        redis_client.delete(key)


@pytest.fixture
def memory_store() -> MemoryCookieStore:
    return MemoryCookieStore()


def _set_cookie(request: Request) -> Response:
    response = PlainTextResponse("ok")
    for name, value in request.query_params.items():
        response.set_cookie(name, value, domain=request.headers.get("x-cookie-domain"))
    return response


def _echo_cookies(request: Request) -> Response:
    return JSONResponse(dict(request.cookies))


def _login(request: Request) -> Response:
    response = RedirectResponse("/echo", status_code=302)
    response.set_cookie("session", "after-redirect", httponly=True)
    return response


def _json(request: Request) -> Response:
    return JSONResponse({"items": [1, 2, 3]})


@pytest.fixture
def test_app() -> Starlette:
    return Starlette(
        routes=[
            Route("/set", _set_cookie),
            Route("/echo", _echo_cookies),
            Route("/login", _login),
            Route("/json", _json),
        ]
    )


@pytest.fixture
def test_client(test_app: Starlette) -> TestClient:
    return TestClient(test_app)
