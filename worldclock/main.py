#!/usr/bin/env python3
# Copyright (c) 2025 Luc Vincent. All Rights Reserved.
"""
Worldclock - Main Application.
Wires configuration, the display window and one clock per configured zone.
"""

import argparse
import copy
import logging
import signal
import sys
import threading
from pathlib import Path
from typing import Any, List, Optional, Tuple

import yaml

# Initialize logging early
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.StreamHandler(sys.stdout)
    ]
)
logger = logging.getLogger(__name__)


def setup_file_logging(log_dir: str) -> None:
    """Set up file logging in addition to console."""
    log_path = Path(log_dir)
    log_path.mkdir(parents=True, exist_ok=True)

    file_handler = logging.FileHandler(log_path / 'worldclock.log')
    file_handler.setFormatter(logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    ))
    logging.getLogger().addHandler(file_handler)


def parse_option_arg(text: str) -> Tuple[str, Any]:
    """
    Parse a NAME=VALUE option override.

    The value is read as YAML, so "true", "500" and "0.5" arrive as a bool,
    an int and a float.
    """
    name, sep, raw_value = text.partition('=')
    if not sep or not name.strip():
        raise argparse.ArgumentTypeError(f"expected NAME=VALUE, got '{text}'")
    try:
        value = yaml.safe_load(raw_value)
    except yaml.YAMLError:
        value = raw_value
    return name.strip(), value


def apply_cli_overrides(config, args: argparse.Namespace):
    """
    Return a copy of the config with command-line overrides applied.

    --timezone replaces the configured clocks; --option sets an option on
    every clock; --windowed disables fullscreen.
    """
    from .config import ClockConfig

    config = copy.deepcopy(config)

    if args.timezone:
        config.clocks = [
            ClockConfig(label=zone, options={'timezone': zone})
            for zone in args.timezone
        ]

    for name, value in args.option or []:
        for clock in config.clocks:
            if isinstance(clock.options, dict):
                clock.options[name] = value

    if args.windowed:
        config.window.fullscreen = False

    return config


class WorldclockApp:
    """Main Worldclock application."""

    def __init__(self, config_path: Optional[str] = None, args: Optional[argparse.Namespace] = None):
        """
        Initialize Worldclock.

        Args:
            config_path: Path to configuration file.
            args: Parsed command-line arguments to apply over the config.
        """
        self.config_path = config_path
        self.args = args
        self.config = None
        self.display = None
        self.tick_source = None
        self.registry = None
        self.clocks: List = []

        self._running = False
        self._shutdown_event = threading.Event()

        # Set up signal handlers
        signal.signal(signal.SIGINT, self._signal_handler)
        signal.signal(signal.SIGTERM, self._signal_handler)

    def _signal_handler(self, signum, frame):
        """Handle shutdown signals."""
        logger.info(f"Received signal {signum}, initiating shutdown...")
        self.stop()

    def _load_config(self) -> bool:
        """Load configuration."""
        from .config import load_config, validate_config

        try:
            self.config = load_config(self.config_path)
            if self.args is not None:
                self.config = apply_cli_overrides(self.config, self.args)

            # Validate
            errors = validate_config(self.config)
            if errors:
                for error in errors:
                    logger.warning(f"Config warning: {error}")

            logger.info(f"Configuration loaded from: {self.config.config_path or 'defaults'}")
            return True

        except Exception as e:
            logger.error(f"Failed to load configuration: {e}")
            return False

    def _setup_logging(self) -> None:
        """Apply configured log level and optional log file."""
        level = str(self.config.logging.level).upper()
        if self.args is None or not self.args.verbose:
            logging.getLogger().setLevel(getattr(logging, level, logging.INFO))

        if self.config.logging.directory:
            try:
                setup_file_logging(self.config.logging.directory)
            except OSError as e:
                logger.warning(f"Could not set up file logging: {e}")

    def _init_display(self) -> bool:
        """Initialize the display window."""
        from .display import ClockDisplay

        try:
            labels = [clock.label for clock in self.config.clocks]
            self.display = ClockDisplay(self.config.window, labels)
            logger.info("Display initialized")
            return True

        except Exception as e:
            logger.error(f"Failed to initialize display: {e}")
            return False

    def _init_clocks(self) -> bool:
        """Create one clock per configured entry."""
        from .clock import Worldclock
        from .registry import ClockRegistry
        from .tick import LoopTickSource

        self.tick_source = LoopTickSource()
        self.registry = ClockRegistry()

        try:
            for clock_config, surface in zip(self.config.clocks, self.display.surfaces):
                options = clock_config.options
                if not isinstance(options, dict):
                    logger.debug(
                        f"Clock '{clock_config.label}' options are {type(options).__name__}, "
                        f"not a mapping - using defaults"
                    )
                    options = {}
                clock = Worldclock(
                    surface,
                    options,
                    tick_source=self.tick_source,
                    registry=self.registry,
                )
                # Show the time straight away instead of after the first tick
                clock.render()
                self.clocks.append(clock)
            logger.info(f"Started {len(self.clocks)} clock(s)")
            return True

        except Exception as e:
            logger.error(f"Failed to initialize clocks: {e}")
            return False

    def run(self) -> int:
        """
        Run the main application loop.

        Returns:
            Exit code (0 for success).
        """
        logger.info("Starting Worldclock...")

        # Load configuration
        if not self._load_config():
            return 1

        self._setup_logging()

        # Initialize components
        if not self._init_display():
            return 1

        if not self._init_clocks():
            self._cleanup()
            return 1

        self._running = True
        logger.info("Worldclock started successfully")

        # Main loop
        try:
            self._main_loop()
        except Exception as e:
            logger.error(f"Main loop error: {e}")
            return 1
        finally:
            self._cleanup()

        return 0

    def _main_loop(self) -> None:
        """Main application loop."""
        while self._running and not self._shutdown_event.is_set():
            try:
                if "quit" in self.display.handle_events():
                    logger.info("Display quit requested")
                    break

                self.tick_source.pump()
                self.display.render()
                self.display.tick(self.config.window.fps)

            except Exception as e:
                logger.error(f"Error in main loop: {e}")
                self._shutdown_event.wait(1.0)

    def stop(self) -> None:
        """Stop the application."""
        logger.info("Stopping Worldclock...")
        self._running = False
        self._shutdown_event.set()

    def _cleanup(self) -> None:
        """Clean up resources."""
        logger.info("Cleaning up...")

        for clock in self.clocks:
            try:
                clock.destroy()
            except Exception as e:
                logger.error(f"Error destroying clock: {e}")
        self.clocks = []

        if self.display:
            try:
                self.display.cleanup()
            except Exception as e:
                logger.error(f"Error cleaning up display: {e}")
            self.display = None

        logger.info("Worldclock stopped")


def build_parser() -> argparse.ArgumentParser:
    """Build the command-line parser."""
    parser = argparse.ArgumentParser(
        description="Worldclock - Live Digital Clocks",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )

    parser.add_argument(
        '-c', '--config',
        help='Path to configuration file'
    )

    parser.add_argument(
        '-z', '--timezone',
        action='append',
        metavar='ZONE',
        help='Show a clock for this IANA zone (or LOCAL); repeatable, replaces configured clocks'
    )

    parser.add_argument(
        '-o', '--option',
        action='append',
        type=parse_option_arg,
        metavar='NAME=VALUE',
        help='Set a clock option on every clock (e.g. -o animationTime=500); repeatable'
    )

    parser.add_argument(
        '--windowed',
        action='store_true',
        help='Run in a window even if the config asks for fullscreen'
    )

    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Enable verbose logging'
    )

    parser.add_argument(
        '--version',
        action='store_true',
        help='Show version and exit'
    )

    return parser


def main(argv: Optional[List[str]] = None):
    """Main entry point."""
    args = build_parser().parse_args(argv)

    if args.version:
        from . import __version__
        print(f"Worldclock {__version__}")
        return 0

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    app = WorldclockApp(config_path=args.config, args=args)
    return app.run()


if __name__ == "__main__":
    sys.exit(main())
