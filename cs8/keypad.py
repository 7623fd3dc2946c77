#!/usr/bin/env python3

"""
Hex Keypad State

Holds which of the 16 keys (0-F) are currently down.  Input plugins write to
it as host key events arrive, and the CPU reads it.

The 'wait for key' instruction needs a fresh press, not a key that happens to
be held already, so every up-to-down transition is also latched.  The CPU
clears the latch when it starts waiting, then polls it on each cycle.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

NUM_KEYS = 0x10


class KeypadError(Exception):
    pass


class InvalidKeyError(KeypadError):
    def __init__(self, key):
        self.key = key
        super().__init__("Key {!r} is out of range (0x0 - 0xF)".format(key))


class Keypad:
    def __init__(self):
        self.key_down = [False] * NUM_KEYS
        self.last_keypress = None

    def reset(self):
        for key in range(NUM_KEYS):
            self.key_down[key] = False

        self.last_keypress = None

    def set_key(self, key, is_down):
        if not isinstance(key, int) or isinstance(key, bool) or not 0 <= key < NUM_KEYS:
            raise InvalidKeyError(key)

        is_down = bool(is_down)

        if is_down and not self.key_down[key]:
            self.last_keypress = key

        self.key_down[key] = is_down

    def snapshot(self):
        return tuple(self.key_down)

    def setup_keypress(self):
        # Forget any earlier presses, so only keys pressed from now on count
        self.last_keypress = None

    def get_keypress(self):
        return self.last_keypress
