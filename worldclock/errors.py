# Copyright (c) 2025 Luc Vincent. All Rights Reserved.
"""Exceptions raised by the clock core."""

from typing import Any


class WorldclockError(Exception):
    """Base class for all Worldclock errors."""


class InvalidArgument(WorldclockError, TypeError):
    """Raised when a constructor or accessor receives a badly shaped argument."""


class UnknownOption(WorldclockError, LookupError):
    """Raised when an option name is not part of the schema."""

    def __init__(self, name: Any):
        self.name = name
        super().__init__(f"unknown option '{name}'")


class InvalidOptionValue(WorldclockError, ValueError):
    """Raised when a value fails validation and the option has no coercion."""

    def __init__(self, name: str, value: Any, description: str):
        self.name = name
        self.value = value
        super().__init__(
            f"invalid value {value!r} for option '{name}' (should be {description})"
        )
