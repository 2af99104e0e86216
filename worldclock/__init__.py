# Copyright (c) 2025 Luc Vincent. All Rights Reserved.
# Worldclock - Live Digital Clocks for Any Time Zone
"""
Worldclock renders live digital clocks for arbitrary time zones, blinking
the separators once per second and applying schema-validated options.
"""

__version__ = "1.0.0"
__author__ = "Worldclock"

from .clock import Worldclock, attach
from .errors import InvalidArgument, InvalidOptionValue, UnknownOption, WorldclockError
from .options import OPTION_SCHEMA, OptionSpec, OptionStore
from .timezones import LOCAL

__all__ = [
    'Worldclock',
    'attach',
    'OPTION_SCHEMA',
    'OptionSpec',
    'OptionStore',
    'LOCAL',
    'WorldclockError',
    'InvalidArgument',
    'UnknownOption',
    'InvalidOptionValue',
]
