from __future__ import annotations

from cookiepot.stores.base import CookieStore, WritePolicy
from cookiepot.stores.factory import store_from_url
from cookiepot.stores.memory import MemoryCookieStore
from cookiepot.stores.redis import RedisCookieStore
from cookiepot.stores.sql import SQLCookieStore

__all__ = [
    "CookieStore",
    "WritePolicy",
    "MemoryCookieStore",
    "RedisCookieStore",
    "SQLCookieStore",
    "store_from_url",
]
