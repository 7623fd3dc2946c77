#!/usr/bin/env python3

"""
Null Audio Plugin

Serves as a base class for other Audio plugins.  Can be used on its own if no
sound is required.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"


class Audio:
    def __init__(self):
        # Buzzer should be disabled (not playing sounds) by default
        self.frequency = None
        self.buzzer_enabled = False

    def set_frequency(self, frequency):
        # Set buzzer pitch in Hz
        self.frequency = frequency

    def enable_buzzer(self, enabled):
        # The buzzer should sound while the sound timer is >0
        self.buzzer_enabled = enabled

    def shutdown(self):
        pass
