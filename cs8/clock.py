#!/usr/bin/env python3

"""
Host Clock

Drives the CPU in real time.  Three things are kept on separate schedules:

    * Instructions, at the configured clock speed (or as fast as possible)
    * Delay/sound timer ticks, at a fixed 60Hz
    * Display refreshes and input polling, at 60Hz

Linking the timers to the instruction rate would make games run faster or
slower depending on the chosen clock speed, so the timers keep their own
deadline.  If the host falls behind, missed timer ticks are caught up
straight away.  Missed instructions are only caught up for a short while,
otherwise a long stall (window dragging, etc.) would be followed by a burst
of frantic activity.

step() does one pass of the timing work for a given moment, which makes it
possible to drive the clock with made-up times when testing.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from time import perf_counter
from .constants import DEFAULT_CLOCK_SPEED, TIMER_FREQ

TIMER_INTERVAL = 1.0 / TIMER_FREQ
DISPLAY_FREQ = 60.0  # 60Hz host display refresh
DISPLAY_INTERVAL = 1.0 / DISPLAY_FREQ
MAX_CYCLE_LAG = 0.1  # Seconds of missed instructions that will be caught up


class Clock:
    def __init__(self, cpu, framebuffer, inputs, audio, clock_speed=None):
        self.cpu = cpu
        self.framebuffer = framebuffer
        self.inputs = inputs
        self.audio = audio

        if clock_speed is None:
            clock_speed = DEFAULT_CLOCK_SPEED

        # A clock speed of 0 (or less) means uncapped
        self.core_interval = None if clock_speed <= 0 else 1.0 / clock_speed
        self.buzzer_enabled = False
        self.start(0.0)

    def start(self, now):
        self.next_cycle_time = now
        self.next_timer_time = now + TIMER_INTERVAL
        self.next_display_update_time = now
        self.next_perf_report_time = now + 1.0
        self.perf_counter_fps = 0
        self.perf_counter_ops = 0

    def step(self, now):
        # Returns True if an instruction was executed
        while now >= self.next_timer_time:
            self.cpu.tick_timers()
            self.next_timer_time += TIMER_INTERVAL

        ran = False
        core_interval = self.core_interval

        if core_interval is None:
            self.cpu.run_cycle()
            ran = True
        elif now >= self.next_cycle_time:
            self.cpu.run_cycle()
            ran = True
            self.next_cycle_time += core_interval

            if now - self.next_cycle_time > MAX_CYCLE_LAG:
                self.next_cycle_time = now

        if ran:
            self.perf_counter_ops += 1

        self.update_buzzer()
        return ran

    def update_buzzer(self):
        # Only tell the audio system when something changes
        sound_active = self.cpu.should_play_sound()

        if sound_active != self.buzzer_enabled:
            self.audio.enable_buzzer(sound_active)
            self.buzzer_enabled = sound_active

    def run(self):
        # Returns when the input system asks to quit.  CPU faults are raised to the caller.
        self.start(perf_counter())

        try:
            while True:
                this_time = perf_counter()

                if this_time >= self.next_perf_report_time:
                    self.next_perf_report_time = int(this_time) + 1.0
                    self.framebuffer.report_perf(self.perf_counter_fps, self.perf_counter_ops)
                    self.perf_counter_ops = 0
                    self.perf_counter_fps = 0

                if this_time >= self.next_display_update_time:
                    if self.inputs.process_messages():
                        return

                    self.next_display_update_time = this_time + DISPLAY_INTERVAL
                    self.framebuffer.refresh_display()
                    self.perf_counter_fps += 1

                self.step(this_time)

                if self.core_interval is not None:
                    # Wait for whichever job is due next
                    next_time = min(self.next_cycle_time, self.next_timer_time, self.next_display_update_time)

                    while perf_counter() < next_time:  # Unfortunately we have to do this to get the timing right
                        pass
        finally:
            if self.buzzer_enabled:
                self.audio.enable_buzzer(False)
                self.buzzer_enabled = False
