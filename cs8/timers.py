#!/usr/bin/env python3

"""
Delay and Sound Timers

Two 8-bit counters which count down to zero, one step per tick.  Ticking is
driven from outside at 60Hz, never by the CPU, so the rate at which
instructions run has no effect on in-game timing.

The sound timer doubles as the buzzer switch: while it is non-zero, a tone
should be playing.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"


class Timers:
    def __init__(self):
        self.dt = 0  # Delay timer
        self.ds = 0  # Sound timer

    def reset(self):
        self.dt = 0
        self.ds = 0

    def tick(self):
        if self.dt > 0:
            self.dt -= 1

        if self.ds > 0:
            self.ds -= 1

    def set_delay(self, value):
        self.dt = value & 0xFF

    def set_sound(self, value):
        self.ds = value & 0xFF

    def is_sound_active(self):
        return self.ds > 0
