# Copyright (c) 2025-2026 Luc Vincent. All Rights Reserved.
"""Lookup from display surfaces back to the clocks that own them."""

import logging
from typing import Dict, Iterator, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .clock import Worldclock
    from .surface import DisplaySurface

logger = logging.getLogger(__name__)


class ClockRegistry:
    """Maps each display surface to the clock rendering into it.

    Surfaces are keyed by identity, so two equal-looking surfaces are still
    tracked separately.
    """

    def __init__(self):
        self._clocks: Dict[int, 'Worldclock'] = {}

    def register(self, surface: 'DisplaySurface', clock: 'Worldclock') -> None:
        existing = self._clocks.get(id(surface))
        if existing is not None and existing is not clock:
            logger.warning(f"Surface {surface!r} already had a clock, replacing it")
        self._clocks[id(surface)] = clock

    def unregister(self, surface: 'DisplaySurface') -> None:
        self._clocks.pop(id(surface), None)

    def lookup(self, surface: 'DisplaySurface') -> Optional['Worldclock']:
        """Return the clock attached to a surface, if any."""
        return self._clocks.get(id(surface))

    def __contains__(self, surface: object) -> bool:
        return id(surface) in self._clocks

    def __len__(self) -> int:
        return len(self._clocks)

    def __iter__(self) -> Iterator['Worldclock']:
        return iter(list(self._clocks.values()))
