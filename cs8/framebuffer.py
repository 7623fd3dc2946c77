#!/usr/bin/env python3

"""
Framebuffer Emulator

Pixels are written here, and are only drawn to the actual display (the host
rendering system) when the host asks for a refresh, normally at 60Hz.  Each
changed pixel is passed on to the renderer straight away, so the renderer
only ever has to deal with deltas.

Programs cannot write directly into video RAM.  Instead, sprites are drawn
using XOR, and the CPU is told whether any lit pixel was switched off (a
collision).  Coordinates always wrap around the screen edges.

Video RAM is a single bank of one byte per pixel (0 = off, 1 = on), stored
row by row.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from .constants import APP_NAME, VID_WIDTH, VID_HEIGHT
from .ram import RAM


class FramebufferError(Exception):
    pass


class Framebuffer:
    def __init__(self, renderer, vid_width=VID_WIDTH, vid_height=VID_HEIGHT):
        if vid_width <= 0 or vid_height <= 0:
            raise FramebufferError("Display must be at least 1x1 pixels")

        self.renderer = renderer
        self.vid_width = vid_width
        self.vid_height = vid_height
        self.vid_size = vid_width * vid_height
        self.vram = RAM(self.vid_size)
        self.content_changed = True
        self.renderer.set_resolution(vid_width, vid_height)
        self.report_perf()

    def clear(self):
        self.vram.clear()
        self.content_changed = True

        for y in range(self.vid_height):
            for x in range(self.vid_width):
                self.renderer.set_pixel(x, y, 0)

    def xor_pixel(self, x, y):
        # Flips one pixel and returns True if it was lit beforehand (a collision)
        x %= self.vid_width
        y %= self.vid_height
        vram_loc = y * self.vid_width + x
        pixel = self.vram.read(vram_loc)
        new_pixel = pixel ^ 1
        self.vram.write(vram_loc, new_pixel)
        self.renderer.set_pixel(x, y, new_pixel)
        self.content_changed = True

        return pixel != 0

    def get_pixel(self, x, y):
        return self.vram.read((y % self.vid_height) * self.vid_width + (x % self.vid_width))

    def snapshot(self):
        # Immutable copy for readers outside the CPU
        return bytes(self.vram.mem)

    def refresh_display(self):
        self.renderer.refresh_display(self.content_changed)
        self.content_changed = False

    def get_vid_size(self):
        return self.vid_width, self.vid_height

    def report_perf(self, fps=0, ops=0):
        self.renderer.set_title("{} - {} FPS, {} OPS".format(APP_NAME, fps, ops))
