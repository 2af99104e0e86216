# Copyright (c) 2025 Luc Vincent. All Rights Reserved.
"""
Option schema and store for clocks.
Handles validation, coercion, defaults and change notification for every
recognized clock option.
"""

import logging
import math
import threading
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Callable, Dict, List, Mapping, Optional

from .errors import InvalidOptionValue, UnknownOption
from .surface import ClockField, SEPARATORS
from .timezones import LOCAL, ZoneRegistry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OptionSpec:
    """Metadata for a single option.

    Attributes:
        description: What the option expects, used in error messages.
        default: Value used when nothing valid was supplied.
        validator: Predicate deciding whether a candidate is acceptable.
        coercer: Optional (candidate, default) -> value. Options with a
            coercer never reject input.
        on_change: Optional (clock, new_value) callback fired when the
            stored value changes through validation.
    """
    description: str
    default: Any
    validator: Callable[[Any], bool]
    coercer: Optional[Callable[[Any, Any], Any]] = None
    on_change: Optional[Callable[[Any, Any], None]] = None


# --- Validators -------------------------------------------------------------

def is_number(value: Any) -> bool:
    """True for ints and floats, but not bools."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_boolean(value: Any) -> bool:
    return isinstance(value, bool)


def is_animation_time(value: Any) -> bool:
    """Whole number of milliseconds between 0 and 1,000 inclusive."""
    if not is_number(value) or not math.isfinite(value):
        return False
    if int(value) != value:
        return False
    return 0 <= value <= 1000


def is_opacity(value: Any) -> bool:
    """Number between 0 (transparent) and 1 (opaque) inclusive."""
    return is_number(value) and 0 <= value <= 1


def coerce_to_boolean(value: Any, default: Any) -> bool:
    """Truthiness of the value, or of the default when the value is None."""
    if value is None:
        return bool(default)
    return bool(value)


# --- Change hooks -----------------------------------------------------------

def _on_separator_on_opacity(clock, value: float) -> None:
    # Blinking clocks pick the new opacity up on their next tick
    if not clock.option('blinkSeparators'):
        duration = clock.option('animationTime')
        for separator in SEPARATORS:
            clock.surface.fade_to(separator, value, duration)


def _on_show_seconds(clock, value: bool) -> None:
    duration = clock.option('animationTime')
    if value:
        clock.surface.hide(ClockField.SEPARATOR_MS, duration)
        clock.surface.hide(ClockField.SECONDS, duration)
    else:
        clock.surface.show(ClockField.SEPARATOR_MS, duration)
        clock.surface.show(ClockField.SECONDS, duration)


def make_schema(zones: Optional[ZoneRegistry] = None) -> Mapping[str, OptionSpec]:
    """
    Build the option schema.

    Args:
        zones: Registry used to validate the timezone option. If None, the
            installed zone database is used.

    Returns:
        Read-only mapping of option name to OptionSpec.
    """
    if zones is None:
        zones = ZoneRegistry()

    def is_timezone(value: Any) -> bool:
        return value == LOCAL or value in zones

    return MappingProxyType({
        'animationTime': OptionSpec(
            description="the time animations should happen over in milliseconds - "
                        "a whole number between 0 and 1,000 inclusive",
            default=250,
            validator=is_animation_time,
        ),
        'blinkSeparators': OptionSpec(
            description="a boolean indicating whether or not to blink the separators",
            default=True,
            validator=is_boolean,
            coercer=coerce_to_boolean,
        ),
        'separatorOnOpacity': OptionSpec(
            description="the opacity to use for a separator when it is 'on' "
                        "as a number between 0 and 1 inclusive",
            default=0.8,
            validator=is_opacity,
            on_change=_on_separator_on_opacity,
        ),
        'separatorOffOpacity': OptionSpec(
            description="the opacity to use for a separator when it is 'off' "
                        "as a number between 0 and 1 inclusive",
            default=0.2,
            validator=is_opacity,
        ),
        'showSeconds': OptionSpec(
            description="a boolean indicating whether or not to show the seconds",
            default=False,
            validator=is_boolean,
            coercer=coerce_to_boolean,
            on_change=_on_show_seconds,
        ),
        'timezone': OptionSpec(
            description=f"an IANA timezone name, or the special value '{LOCAL}'",
            default=LOCAL,
            validator=is_timezone,
        ),
    })


OPTION_SCHEMA = make_schema()


class OptionStore:
    """
    Holds the current value of every option in a schema.

    The store is always fully populated: it starts out with the defaults and
    every write is validated or coerced first, so a stored value never fails
    its validator.

    Reads and writes are serialized with a re-entrant lock, so a clock
    ticking on a worker thread can be reconfigured from another thread.
    Change hooks run while the lock is held and may read other options.
    """

    def __init__(self, schema: Mapping[str, OptionSpec] = OPTION_SCHEMA, owner: Any = None):
        """
        Args:
            schema: Option name to OptionSpec mapping.
            owner: Object passed to on_change hooks (normally the clock).
        """
        self._schema = schema
        self._owner = owner
        self._values: Dict[str, Any] = {name: spec.default for name, spec in schema.items()}
        self._lock = threading.RLock()

    def _spec(self, name: str) -> OptionSpec:
        spec = self._schema.get(name) if isinstance(name, str) else None
        if spec is None:
            raise UnknownOption(name)
        return spec

    def initialize(self, supplied: Optional[Mapping[str, Any]] = None) -> None:
        """
        Populate every option from caller-supplied values.

        Invalid values never raise here: they are coerced when the option
        has a coercer, otherwise replaced by the default with a warning.
        Once all values are final, each option's on_change hook fires once.

        Args:
            supplied: Mapping of option name to candidate value. Missing
                keys and None values mean "use the default".
        """
        supplied = supplied or {}

        for name in supplied:
            if name not in self._schema:
                logger.warning(f"Ignoring unknown option '{name}'")

        values = {}
        for name, spec in self._schema.items():
            candidate = supplied.get(name)
            if candidate is None:
                values[name] = spec.default
            elif spec.validator(candidate):
                values[name] = candidate
            elif spec.coercer is not None:
                values[name] = spec.coercer(candidate, spec.default)
                logger.debug(f"Coerced option '{name}' from {candidate!r} to {values[name]!r}")
            else:
                logger.warning(
                    f"Received invalid value {candidate!r} for option '{name}' "
                    f"(should be {spec.description}) - using default value {spec.default!r} instead"
                )
                values[name] = spec.default

        with self._lock:
            self._values = values

            for name, spec in self._schema.items():
                if spec.on_change is not None:
                    spec.on_change(self._owner, self._values[name])

    def get(self, name: str) -> Any:
        self._spec(name)
        with self._lock:
            return self._values[name]

    def set(self, name: str, candidate: Any) -> None:
        """
        Validate and store a new value.

        A valid value fires the option's on_change hook. A value that only
        passes through coercion is stored silently.

        Raises:
            UnknownOption: If the name is not in the schema.
            InvalidOptionValue: If the value is invalid and cannot be coerced.
        """
        spec = self._spec(name)
        with self._lock:
            if spec.validator(candidate):
                self._values[name] = candidate
                if spec.on_change is not None:
                    spec.on_change(self._owner, candidate)
            elif spec.coercer is not None:
                self._values[name] = spec.coercer(candidate, spec.default)
            else:
                raise InvalidOptionValue(name, candidate, spec.description)

    def names(self) -> List[str]:
        return list(self._schema)

    def as_dict(self) -> Dict[str, Any]:
        with self._lock:
            return dict(self._values)

    def __contains__(self, name: object) -> bool:
        return name in self._schema
