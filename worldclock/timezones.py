# Copyright (c) 2025 Luc Vincent. All Rights Reserved.
"""Time zone lookup and time source for clock rendering."""

import logging
import threading
from datetime import datetime, timezone
from typing import Optional, Protocol, FrozenSet
from zoneinfo import ZoneInfo, available_timezones

logger = logging.getLogger(__name__)

# Reserved timezone value meaning "use the observer's local zone"
LOCAL = "LOCAL"


class ZoneRegistry:
    """Set of recognized IANA zone names.

    The names are read from the system zone database (or the ``tzdata``
    package) the first time a lookup happens, then cached.
    """

    def __init__(self, names: Optional[FrozenSet[str]] = None):
        """
        Args:
            names: Fixed set of zone names. If None, the installed zone
                database is used.
        """
        self._names = frozenset(names) if names is not None else None
        self._lock = threading.Lock()

    def _load(self) -> FrozenSet[str]:
        with self._lock:
            if self._names is None:
                self._names = frozenset(available_timezones())
                logger.debug(f"Loaded {len(self._names)} timezone names")
            return self._names

    def __contains__(self, name: object) -> bool:
        if not isinstance(name, str):
            return False
        return name in self._load()

    def __len__(self) -> int:
        return len(self._load())


class TimeSource(Protocol):
    """Anything that can report the current instant."""

    def now(self) -> datetime:
        ...


class SystemTimeSource:
    """Reads the system clock as an aware UTC instant."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


def localize(instant: datetime, zone: str) -> datetime:
    """
    Reinterpret an instant in the given zone.

    Args:
        instant: The instant to convert. Naive values are taken as local time.
        zone: An IANA zone name, or LOCAL for the system zone.

    Returns:
        Aware datetime in the requested zone.
    """
    if zone == LOCAL:
        return instant.astimezone()
    return instant.astimezone(ZoneInfo(zone))
