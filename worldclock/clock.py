# Copyright (c) 2025 Luc Vincent. All Rights Reserved.
"""
Live digital clock engine.
Renders the time for a configurable timezone into a display surface once
per second, blinking the separators on alternate seconds.
"""

import logging
from collections.abc import Mapping
from typing import Any, Dict, Optional

from .errors import InvalidArgument
from .options import OPTION_SCHEMA, OptionSpec, OptionStore
from .registry import ClockRegistry
from .surface import CLOCK_FIELDS, SEPARATORS, ClockField, DisplaySurface
from .tick import ThreadedTickSource, TickHandle, TickSource
from .timezones import SystemTimeSource, TimeSource, localize

logger = logging.getLogger(__name__)

_UNSET = object()


class Worldclock:
    """
    A clock bound to a single display surface.

    Construction builds the clock's regions on the surface, applies the
    options and starts the clock. Options can be read and changed at any
    time with option().

    Note that invalid option values supplied at construction never raise
    (they fall back to the default with a warning), whereas option(name,
    value) raises InvalidOptionValue for the same values.
    """

    TICK_INTERVAL_MS = 1000
    SEPARATOR_TEXT = ":"

    def __init__(
        self,
        surface: DisplaySurface,
        options: Optional[Mapping] = None,
        *,
        schema: Mapping[str, OptionSpec] = OPTION_SCHEMA,
        time_source: Optional[TimeSource] = None,
        tick_source: Optional[TickSource] = None,
        registry: Optional[ClockRegistry] = None,
    ):
        """
        Args:
            surface: The display surface to render into. It is emptied.
            options: Optional mapping of option name to value.
            schema: Option schema (defaults to the standard clock options).
            time_source: Source of the current instant.
            tick_source: Scheduler invoking the render once per second.
                Defaults to a ThreadedTickSource, so the clock runs without
                an event loop.
            registry: If given, the clock registers itself under its surface.

        Raises:
            InvalidArgument: If surface is not exactly one DisplaySurface, or
                options is not a mapping.
        """
        if not isinstance(surface, DisplaySurface):
            raise InvalidArgument(
                "the first argument must be exactly one display surface, "
                f"got {type(surface).__name__}"
            )
        if options is None:
            options = {}
        if not isinstance(options, Mapping):
            raise InvalidArgument("if present, the options must be a mapping of names to values")

        self._surface = surface
        self._time_source = time_source or SystemTimeSource()
        self._tick_source = tick_source or ThreadedTickSource()
        self._registry = registry
        self._tick_handle: Optional[TickHandle] = None

        # Initialise the surface
        self._surface.build(list(CLOCK_FIELDS))
        for separator in SEPARATORS:
            self._surface.set_text(separator, self.SEPARATOR_TEXT)

        self._store = OptionStore(schema, owner=self)
        self._store.initialize(options)

        if self._registry is not None:
            self._registry.register(surface, self)

        logger.info(f"Clock created for timezone {self._store.get('timezone')}")
        self.start()

    # --- Accessors ----------------------------------------------------------

    @property
    def surface(self) -> DisplaySurface:
        """The display surface this clock renders into."""
        return self._surface

    @property
    def running(self) -> bool:
        return self._tick_handle is not None

    def option(self, name: str, value: Any = _UNSET) -> Any:
        """
        Get or set an option.

        Args:
            name: Option name.
            value: New value. If omitted, the current value is returned.

        Returns:
            The option's value when getting, or this clock when setting (to
            allow chaining).

        Raises:
            InvalidArgument: If name is not a string.
            UnknownOption: If name is not a recognized option.
            InvalidOptionValue: If value is invalid and cannot be coerced.
        """
        if not isinstance(name, str):
            raise InvalidArgument("the option name must be a string")

        if value is _UNSET:
            return self._store.get(name)

        self._store.set(name, value)
        logger.debug(f"Option '{name}' is now {self._store.get(name)!r}")
        return self

    def options(self) -> Dict[str, Any]:
        """Snapshot of all current option values."""
        return self._store.as_dict()

    # --- Control ------------------------------------------------------------

    def start(self) -> 'Worldclock':
        """Start the clock running. Does nothing if it already is."""
        if self._tick_handle is not None:
            return self

        self._tick_handle = self._tick_source.subscribe(self.render, self.TICK_INTERVAL_MS)
        logger.debug(f"Clock started ({self._store.get('timezone')})")
        return self

    def stop(self) -> 'Worldclock':
        """Stop the clock, releasing its tick subscription."""
        if self._tick_handle is None:
            return self

        self._tick_source.unsubscribe(self._tick_handle)
        self._tick_handle = None
        logger.debug(f"Clock stopped ({self._store.get('timezone')})")
        return self

    def destroy(self) -> None:
        """Stop the clock and detach it from its registry."""
        self.stop()
        if self._registry is not None and self._registry.lookup(self._surface) is self:
            self._registry.unregister(self._surface)
        logger.info(f"Clock destroyed ({self._store.get('timezone')})")

    def render(self) -> None:
        """Render the current time into the surface."""
        # One consistent view of the options, even if another thread sets one
        options = self._store.as_dict()
        now = localize(self._time_source.now(), options['timezone'])

        self._surface.set_text(ClockField.HOURS, f"{now.hour:02d}")
        self._surface.set_text(ClockField.MINUTES, f"{now.minute:02d}")
        self._surface.set_text(ClockField.SECONDS, f"{now.second:02d}")

        if options['blinkSeparators']:
            if now.second % 2 == 0:
                opacity = options['separatorOnOpacity']
            else:
                opacity = options['separatorOffOpacity']
            duration = options['animationTime']
            for separator in SEPARATORS:
                self._surface.fade_to(separator, opacity, duration)

    def __repr__(self) -> str:
        state = "running" if self.running else "stopped"
        return f"<Worldclock timezone={self._store.get('timezone')!r} {state}>"


def attach(
    surface: DisplaySurface,
    options: Optional[Mapping] = None,
    *,
    registry: ClockRegistry,
    **kwargs,
) -> Worldclock:
    """
    Return the clock attached to a surface, creating one if needed.

    An existing clock is returned as-is; options are only applied when a new
    clock is built.

    Args:
        surface: The display surface.
        options: Options for a newly created clock.
        registry: Registry consulted for an existing clock.
        **kwargs: Passed to the Worldclock constructor.
    """
    existing = registry.lookup(surface)
    if existing is not None:
        logger.debug(f"Surface already has a clock: {existing!r}")
        return existing
    return Worldclock(surface, options, registry=registry, **kwargs)
