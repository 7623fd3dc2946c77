#!/usr/bin/env python3

"""
PyGame Renderer Plugin

Used by a Framebuffer object to draw the screen.  Pixels are collected in an
offscreen RGB buffer at the emulated resolution (64x32), which is turned into
a surface and stretched to fit the window on each refresh.  Stretching uses
'Nearest Neighbour' scaling, so pixels stay crisp and square.

Refreshing is skipped entirely if nothing has been drawn since the last one.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import pygame
from .r_null import RendererError, Renderer as RendererBase
from ..constants import APP_NAME

DEFAULT_PALETTE = (0x111111, 0xDDDDDD)  # Background, foreground


def parse_palette(palette):
    # Accepts "RRGGBB,RRGGBB" (background, foreground).  Either may be left blank to keep the default.
    colour_map = list(DEFAULT_PALETTE)

    if palette is None:
        return colour_map

    palette_split = palette.split(",")

    if len(palette_split) > len(colour_map):
        raise RendererError("Too many palette colours defined.  Only a background and foreground are used.")

    for colour_num, colour in enumerate(palette_split):
        if not colour:
            continue

        if len(colour) != 6:
            raise RendererError("Palette colours must all be 6 hex digits long.")

        try:
            colour_map[colour_num] = int(colour, 16)
        except ValueError:
            raise RendererError("Invalid palette colour defined.") from None

    return colour_map


class Renderer(RendererBase):
    def __init__(self, scale=None, palette=None, **kwargs):
        if scale is None:
            scale = 640  # Default window width

        # Split compound RGB values for faster byte-based lookup later
        self.rgb_map = [bytes((i >> 16, (i >> 8) & 0xFF, i & 0xFF)) for i in parse_palette(palette)]
        self.rgb_buffer = None

        pygame.display.init()
        self.scaled_size = (scale, scale // 2)
        self.display_surface = pygame.display.set_mode(self.scaled_size)
        pygame.display.set_caption(APP_NAME)

        super().__init__(scale)

    def set_resolution(self, width, height):
        self.width = width
        self.height = height
        self.rgb_buffer = memoryview(bytearray(self.rgb_map[0] * (width * height)))

        if width and height:
            self.refresh_display(True)

    def set_pixel(self, x, y, colour):
        # Update RGB buffer in-place to minimise allocations and PyGame calls
        rgb_location = (y * self.width + x) * 3
        self.rgb_buffer[rgb_location:rgb_location + 3] = self.rgb_map[colour]

    def refresh_display(self, content_changed=False):
        if content_changed and self.width and self.height:
            # Blit the bytearray straight to a surface, rather than drawing pixel by pixel
            render_surface = pygame.image.frombuffer(self.rgb_buffer, (self.width, self.height), "RGB")
            scaled_win = pygame.transform.scale(render_surface, self.scaled_size)
            self.display_surface.blit(scaled_win, (0, 0))
            pygame.display.flip()

    def set_title(self, title):
        pygame.display.set_caption(title)
        super().set_title(title)

    def shutdown(self):
        # PyGame currently segfaults if display.quit is called via __del__
        pygame.display.quit()
        super().shutdown()
