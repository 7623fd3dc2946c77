#!/usr/bin/env python3

"""
Null Input Plugin

Serves as a base class for other Input plugins.  Can be used on its own if zero
input functionality is required.

Input plugins translate host key events into key presses and releases on the
emulated keypad.  The keymap is a comma-separated list of 16 host key codes,
one for each keypad key from 0 to F.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"


class InputsError(Exception):
    pass


def parse_keymap(keymap):
    # Returns a dictionary of host key code -> keypad key
    keymap_dict = {}
    keymap_split = keymap.split(",")

    if len(keymap_split) != 0x10:
        raise InputsError("Incorrect number of keys defined -- 16 required.  Use commas to split numbers")

    for key_num, key_defined in enumerate(keymap_split):
        try:
            key_code = int(key_defined)
        except ValueError:
            raise InputsError("Defined keys are not all integer values") from None

        if key_code in keymap_dict:
            raise InputsError("Duplicate keys defined")

        keymap_dict[key_code] = key_num

    return keymap_dict


class Inputs:
    def __init__(self, keymap, keypad):
        self.keymap_dict = parse_keymap(keymap)
        self.keypad = keypad

    def process_messages(self):
        return False  # Don't exit the program

    def key_event(self, key_code, is_down):
        # Returns True if the host key is mapped to the keypad
        hex_key = self.keymap_dict.get(key_code)

        if hex_key is None:
            return False

        self.keypad.set_key(hex_key, is_down)
        return True

    def shutdown(self):
        pass
