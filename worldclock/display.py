# Copyright (c) 2025 Luc Vincent. All Rights Reserved.
"""
Display engine for Worldclock.
Uses SDL2's hardware-accelerated texture rendering so separator fades are
drawn with per-texture alpha.
"""

import logging
from typing import Dict, List, Optional, Tuple

import pygame
import pygame._sdl2 as sdl2

from .config import WindowConfig
from .surface import AnimatedSurface

logger = logging.getLogger(__name__)


def parse_resolution(resolution: str) -> Optional[Tuple[int, int]]:
    """Parse 'WIDTHxHEIGHT' into a tuple. Returns None for 'auto'."""
    if resolution == "auto":
        return None
    parts = resolution.lower().split('x')
    return int(parts[0]), int(parts[1])


def layout_row(widths: List[int], screen_width: int, offset_x: int = 0) -> List[int]:
    """
    Compute x positions that center a row of adjacent items.

    Args:
        widths: Width of each item, in display order.
        screen_width: Width available for the row.
        offset_x: Extra horizontal offset.

    Returns:
        Left x coordinate of each item.
    """
    x = (screen_width - sum(widths)) // 2 + offset_x
    positions = []
    for width in widths:
        positions.append(x)
        x += width
    return positions


class ClockDisplay:
    """
    Window showing one row per clock surface.

    Each region of a clock is rendered to its own texture so its alpha can
    follow the surface's opacity and visibility animations. Regions that
    have finished hiding are collapsed out of the row.
    """

    ROW_GAP = 20  # Pixels between a clock and its label / the next clock

    def __init__(self, config: WindowConfig, labels: List[str]):
        """
        Initialize the window with hardware-accelerated rendering.

        Args:
            config: Window configuration.
            labels: One caption per clock, in display order.
        """
        self.config = config

        # Initialize pygame (needed for fonts and events)
        pygame.init()

        size = parse_resolution(config.resolution)
        if size is None:
            info = pygame.display.Info()
            size = (info.current_w, info.current_h)
        self.screen_width, self.screen_height = size

        self._window = sdl2.Window(
            "Worldclock",
            size=size,
            fullscreen=config.fullscreen
        )
        if config.fullscreen:
            # Query actual window size after fullscreen is set
            self.screen_width, self.screen_height = self._window.size

        logger.info(f"Display resolution: {self.screen_width}x{self.screen_height}")

        self._renderer = sdl2.Renderer(self._window, accelerated=True, vsync=True)
        self._bg_color = tuple(config.background_color) + (255,)

        self.surfaces = [AnimatedSurface(label=label) for label in labels]

        self._init_fonts()
        self.clock = pygame.time.Clock()

        # Rendered text cache: (font id, text) -> texture
        self._texture_cache: Dict[Tuple[int, str], sdl2.Texture] = {}

        if config.fullscreen:
            pygame.mouse.set_visible(False)

    def _init_fonts(self) -> None:
        """Initialize fonts for digits and labels."""
        font_names = [
            "DejaVuSansMono",
            "DejaVuSans",
            "FreeSans",
            "LiberationSans",
            None
        ]

        self._time_font = None
        self._label_font = None

        for font_name in font_names:
            try:
                self._time_font = pygame.font.SysFont(font_name, self.config.font_size)
                if self.config.label_font_size > 0:
                    self._label_font = pygame.font.SysFont(font_name, self.config.label_font_size)
                break
            except Exception:
                continue

        if self._time_font is None:
            self._time_font = pygame.font.Font(None, self.config.font_size)
        if self._label_font is None and self.config.label_font_size > 0:
            self._label_font = pygame.font.Font(None, self.config.label_font_size)

    def _text_texture(self, font: pygame.font.Font, text: str, color) -> sdl2.Texture:
        """Render text to an alpha-blended texture, cached by content."""
        key = (id(font), text)
        texture = self._texture_cache.get(key)
        if texture is None:
            surface = font.render(text, True, tuple(color))
            texture = sdl2.Texture.from_surface(self._renderer, surface)
            texture.blend_mode = 1  # Enable alpha blending
            self._texture_cache[key] = texture
        return texture

    def handle_events(self) -> list:
        """Process pygame events."""
        events = []

        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                events.append("quit")
            elif event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                events.append("quit")

        return events

    def _row_height(self) -> int:
        height = self._time_font.get_linesize()
        if self._label_font is not None:
            height += self.ROW_GAP // 2 + self._label_font.get_linesize()
        return height

    def render(self) -> None:
        """Draw every clock surface and present the frame."""
        self._renderer.draw_color = self._bg_color
        self._renderer.clear()

        row_height = self._row_height()
        total_height = row_height * len(self.surfaces) + self.ROW_GAP * (len(self.surfaces) - 1)
        y = (self.screen_height - total_height) // 2

        for surface in self.surfaces:
            self._render_clock(surface, y)
            y += row_height + self.ROW_GAP

        self._renderer.present()

    def _render_clock(self, surface: AnimatedSurface, y: int) -> None:
        """Render one clock row with its label."""
        items = []
        for field in surface.fields:
            if not surface.is_visible(field):
                continue
            text = surface.text(field)
            if not text:
                continue
            texture = self._text_texture(self._time_font, text, self.config.font_color)
            items.append((texture, surface.opacity(field)))

        positions = layout_row([t.width for t, _ in items], self.screen_width)
        for (texture, opacity), x in zip(items, positions):
            texture.alpha = int(255 * max(0.0, min(1.0, opacity)))
            texture.draw(dstrect=(x, y, texture.width, texture.height))
            texture.alpha = 255

        if self._label_font is not None and surface.label:
            label = self._text_texture(self._label_font, surface.label, self.config.label_color)
            label_x = (self.screen_width - label.width) // 2
            label_y = y + self._time_font.get_linesize() + self.ROW_GAP // 2
            label.draw(dstrect=(label_x, label_y, label.width, label.height))

    def tick(self, fps: int) -> None:
        """Limit the frame rate."""
        self.clock.tick(fps)

    def cleanup(self) -> None:
        """Clean up SDL2 and pygame resources."""
        self._texture_cache.clear()
        del self._renderer
        del self._window
        pygame.quit()

    @property
    def resolution(self) -> Tuple[int, int]:
        """Get current display resolution."""
        return (self.screen_width, self.screen_height)
