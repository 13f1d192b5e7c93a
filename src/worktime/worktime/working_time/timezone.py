from __future__ import annotations

from datetime import datetime, timezone, tzinfo
from functools import lru_cache
from typing import Protocol
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from ..common.datetime_utils import ensure_utc
from ..core.exceptions import ConfigurationError


class LocalTimeConverter(Protocol):
    """Converts between absolute instants and naive wall-clock time in a zone."""

    def to_local(self, instant: datetime, tz_name: str) -> datetime:
        raise NotImplementedError

    def to_utc(self, local: datetime, tz_name: str) -> datetime:
        raise NotImplementedError


class ZoneInfoConverter(LocalTimeConverter):
    """tz-database backed converter. Sub-second precision is dropped."""

    def to_local(self, instant: datetime, tz_name: str) -> datetime:
        local = ensure_utc(instant).astimezone(get_zone(tz_name))
        return local.replace(tzinfo=None, microsecond=0)

    def to_utc(self, local: datetime, tz_name: str) -> datetime:
        return local.replace(tzinfo=get_zone(tz_name)).astimezone(timezone.utc)


@lru_cache(maxsize=64)
def get_zone(tz_name: str) -> tzinfo:
    try:
        return ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError, TypeError) as e:
        raise ConfigurationError(f"Unknown timezone: {tz_name!r}") from e
