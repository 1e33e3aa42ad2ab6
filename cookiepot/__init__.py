from cookiepot.client import Client, Response
from cookiepot.cookies import Cookie, SameSite
from cookiepot.exceptions import (
    ConfigurationError,
    CookiepotError,
    SerializationError,
    StoreConnectionError,
    StoreError,
    StoreTimeoutError,
)
from cookiepot.jar import CookieJar
from cookiepot.stores import (
    CookieStore,
    MemoryCookieStore,
    RedisCookieStore,
    SQLCookieStore,
    WritePolicy,
    store_from_url,
)

__all__ = [
    "Client",
    "Response",
    "Cookie",
    "SameSite",
    "CookieJar",
    "CookieStore",
    "MemoryCookieStore",
    "RedisCookieStore",
    "SQLCookieStore",
    "WritePolicy",
    "store_from_url",
    "CookiepotError",
    "ConfigurationError",
    "StoreError",
    "StoreConnectionError",
    "StoreTimeoutError",
    "SerializationError",
]

__version__ = "0.1.0"
