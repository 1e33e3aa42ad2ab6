from __future__ import annotations

import dataclasses
import datetime
import enum
import http.cookiejar
import json
import logging
import re
import typing

from cookiepot.exceptions import SerializationError

logger = logging.getLogger(__name__)

# "no expiry" marker, the zero timestamp of the stored records
ZERO_TIME = "0001-01-01T00:00:00Z"

# datetime keeps microseconds, longer fractions are truncated
_FRACTION = re.compile(r"(\.\d{6})\d+")
_EXPIRES = re.compile(r";\s*expires\s*=([^;]*)", re.IGNORECASE)


class SameSite(enum.IntEnum):
    UNSET = 0
    LAX = 2
    STRICT = 3
    NONE = 4

    @classmethod
    def from_value(cls, value: typing.Any) -> SameSite:
        try:
            return cls(int(value))
        except (TypeError, ValueError):
            return cls.UNSET

    @classmethod
    def from_attribute(cls, value: str) -> SameSite:
        """Convert a SameSite attribute of a Set-Cookie header."""
        return {
            "lax": cls.LAX,
            "strict": cls.STRICT,
            "none": cls.NONE,
        }.get(value.strip().lower(), cls.UNSET)


@dataclasses.dataclass
class Cookie:
    name: str
    value: str
    path: str = "/"
    domain: str = ""
    expires: datetime.datetime | None = None
    raw_expires: str = ""
    max_age: int = 0
    secure: bool = False
    http_only: bool = False
    same_site: SameSite = SameSite.UNSET
    raw: str = ""

    def __post_init__(self) -> None:
        if self.expires is not None and self.expires.tzinfo is None:
            self.expires = self.expires.replace(tzinfo=datetime.timezone.utc)

    @property
    def host_only(self) -> bool:
        return not self.domain

    def to_header(self) -> str:
        """Render the cookie as a pair for the Cookie request header."""
        return f"{self.name}={self.value}"

    def to_dict(self) -> dict[str, typing.Any]:
        return {
            "Name": self.name,
            "Value": self.value,
            "Path": self.path,
            "Domain": self.domain,
            "Expires": _format_time(self.expires),
            "RawExpires": self.raw_expires,
            "MaxAge": self.max_age,
            "Secure": self.secure,
            "HttpOnly": self.http_only,
            "SameSite": int(self.same_site),
            "Raw": self.raw,
        }

    @classmethod
    def from_dict(cls, data: typing.Mapping[str, typing.Any]) -> Cookie:
        return cls(
            name=str(data["Name"]),
            value=str(data.get("Value", "")),
            path=str(data.get("Path", "/")),
            domain=str(data.get("Domain", "")),
            expires=_parse_time(data.get("Expires") or ""),
            raw_expires=str(data.get("RawExpires", "")),
            max_age=int(data.get("MaxAge") or 0),
            secure=bool(data.get("Secure", False)),
            http_only=bool(data.get("HttpOnly", False)),
            same_site=SameSite.from_value(data.get("SameSite", 0)),
            raw=str(data.get("Raw", "")),
        )


def _format_time(value: datetime.datetime | None) -> str:
    if value is None:
        return ZERO_TIME
    return value.astimezone(datetime.timezone.utc).isoformat().replace("+00:00", "Z")


def _parse_time(value: str) -> datetime.datetime | None:
    if not value or value == ZERO_TIME:
        return None
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    parsed = datetime.datetime.fromisoformat(_FRACTION.sub(r"\1", value))
    if parsed.year == 1:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=datetime.timezone.utc)
    return parsed


def dump_cookies(cookies: typing.Iterable[Cookie]) -> str:
    """Serialize cookies into a JSON array."""
    try:
        return json.dumps([cookie.to_dict() for cookie in cookies])
    except (TypeError, ValueError) as ex:
        raise SerializationError(f"Cannot encode cookies: {ex}") from ex


def load_cookies(payload: str | bytes) -> list[Cookie]:
    """Deserialize a JSON array produced by :func:`dump_cookies`."""
    try:
        items = json.loads(payload)
        if not isinstance(items, list):
            raise ValueError(f"expected a JSON array, got {type(items).__name__}")
        return [Cookie.from_dict(item) for item in items]
    except (TypeError, ValueError, KeyError) as ex:
        raise SerializationError(f"Cannot decode cookies: {ex}") from ex


def unique_by_name(cookies: typing.Iterable[Cookie]) -> list[Cookie]:
    """Drop cookies with repeated names, the last one wins."""
    return list({cookie.name: cookie for cookie in cookies}.values())


def merge_cookies(existing: typing.Iterable[Cookie], incoming: typing.Iterable[Cookie]) -> list[Cookie]:
    """Combine two cookie sets of one host.

    Every incoming cookie is kept, existing cookies survive only when the incoming set
    does not mention their name."""
    incoming = unique_by_name(incoming)
    names = {cookie.name for cookie in incoming}
    return [cookie for cookie in unique_by_name(existing) if cookie.name not in names] + incoming


def parse_set_cookie(header: str) -> Cookie | None:
    """Parse a single Set-Cookie header value.

    Attributes are split by :func:`http.cookiejar.parse_ns_headers`, the parser httpx applies
    to responses, so unknown attributes and values outside the cookie token charset are kept.
    Returns None when the header has no name=value pair."""
    parsed = http.cookiejar.parse_ns_headers([header])
    if not parsed:
        return None

    (name, value), *pairs = parsed[0]
    if value is None:
        logger.debug("Ignoring Set-Cookie header without value: %s", header)
        return None
    if len(value) > 1 and value[0] == value[-1] == '"':
        value = value[1:-1]

    attributes = {key.lower(): attribute for key, attribute in pairs}
    raw_expires = ""
    expires: datetime.datetime | None = None
    if match := _EXPIRES.search(header):
        raw_expires = match.group(1).strip()
        if attributes.get("expires") is not None:
            expires = datetime.datetime.fromtimestamp(attributes["expires"], tz=datetime.timezone.utc)
        else:
            logger.debug("Ignoring unparsable expiry %r of cookie %s.", raw_expires, name)

    max_age = 0
    if attributes.get("max-age"):
        try:
            max_age = int(attributes["max-age"])
        except ValueError:
            logger.debug("Ignoring invalid max-age %r of cookie %s.", attributes["max-age"], name)
        else:
            max_age = max_age if max_age > 0 else -1

    return Cookie(
        name=name,
        value=value,
        path=attributes.get("path") or "/",
        domain=(attributes.get("domain") or "").lstrip("."),
        expires=expires,
        raw_expires=raw_expires,
        max_age=max_age,
        secure="secure" in attributes,
        http_only="httponly" in attributes,
        same_site=SameSite.from_attribute(attributes.get("samesite") or ""),
        raw=header,
    )
