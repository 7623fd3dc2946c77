#!/usr/bin/env python3

"""
PyGame Audio Plugin

Plays the CHIP-8 buzzer through PyGame / SDL.

The original hardware could only switch a single fixed tone on and off, so a
short square wave sample is generated up-front and looped for as long as the
buzzer is enabled.  The sample is built from whole wave periods, so the loop
point doesn't click.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import pygame
from .a_null import Audio as AudioBase
from ..constants import DEFAULT_TONE

PLAYBACK_FREQUENCY = 44100.0
DEFAULT_VOLUME = 0.1
SAMPLE_LENGTH = 0.1  # Seconds (roughly) of tone per loop


def square_wave(frequency, playback_frequency=PLAYBACK_FREQUENCY):
    # Unsigned 8-bit mono samples, high for the first half of each period and low for the second
    period = playback_frequency / frequency
    num_periods = max(1, round(SAMPLE_LENGTH * frequency))
    num_samples = max(2, round(period * num_periods))
    samples = bytearray(num_samples)

    for pos in range(num_samples):
        samples[pos] = 0xFF if (pos % period) < (period / 2.0) else 0x00

    return samples


class Audio(AudioBase):
    def __init__(self):
        self.sound = None
        super().__init__()
        pygame.mixer.pre_init(int(PLAYBACK_FREQUENCY), size=8, channels=1, buffer=512, allowedchanges=0)
        pygame.mixer.init()
        self.set_frequency(DEFAULT_TONE)

    def set_frequency(self, frequency):
        if frequency == self.frequency:
            return

        super().set_frequency(frequency)

        if self.buzzer_enabled:
            self.sound.stop()

        self.sound = pygame.mixer.Sound(buffer=bytes(square_wave(frequency)))
        self.sound.set_volume(DEFAULT_VOLUME)

        if self.buzzer_enabled:
            self.sound.play(-1)

    def enable_buzzer(self, enabled):
        # If the buzzer is already in the requested state, leave it alone so the tone isn't restarted
        if enabled:
            if not self.buzzer_enabled:
                self.sound.play(-1)
        elif self.buzzer_enabled:
            self.sound.stop()

        super().enable_buzzer(enabled)

    def shutdown(self):
        if self.sound:
            self.sound.stop()

        pygame.mixer.quit()
        super().shutdown()
