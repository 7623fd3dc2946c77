#!/usr/bin/env python3

__author__ = "Gregory Maynard-Hoare"
__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"
__version__ = "1.0.0"

from argparse import ArgumentParser
from cs8 import main
from cs8.constants import DEFAULT_CLOCK_SPEED, DEFAULT_KEYMAP, CPU_QUIRKS


def parse_args(argv=None):
    parser = ArgumentParser(description="CHIP-8 emulator")
    parser.add_argument("filename", help="ROM to execute (normally ending in .ch8 or .c8)")
    parser.add_argument(
        "-c", "--clock_speed", type=int,
        help="set the CPU speed in instructions/second (default {}, 0 = uncapped).  Timers always run at 60Hz".format(
            DEFAULT_CLOCK_SPEED
        )
    )
    parser.add_argument(
        "-r", "--renderer", choices=["pygame", "null"],
        help="set the rendering, input, and audio systems (pygame by default)"
    )
    parser.add_argument("-s", "--scale", type=int, help="set the window width in pixels (default 640)")
    parser.add_argument(
        "-m", "--mute", type=int, choices=[0, 1], default=0, help="mute the buzzer.  0 = unmuted (default), 1 = muted"
    )
    parser.add_argument("-t", "--tone", type=float, help="set the buzzer pitch in Hz (default 440)")
    parser.add_argument(
        "-k", "--keymap", default=DEFAULT_KEYMAP,
        help="redefine the 16 PyGame keyscan codes for keys 0-F.  Separate each decimal with a comma"
    )
    parser.add_argument(
        "-p", "--palette",
        help="redefine the background and foreground colours in comma-separated hex, e.g. 000000,33FF66"
    )

    for cpu_quirk in CPU_QUIRKS:
        parser.add_argument(
            "--{}_quirks".format(cpu_quirk), type=int, choices=[0, 1],
            help="manually disable or enable {} quirks".format(cpu_quirk.replace("_", " "))
        )

    parser.add_argument(
        "-d", "--debug", action="store_true", default=False,
        help="enable live debug output for every instruction.  Slows CPU execution"
    )
    return parser.parse_args(argv)  # Can call sys.exit(2) if args are incorrect


def run():
    # It is possible to start the emulator from a GUI by calling main() with a dictionary
    main(vars(parse_args()))


if __name__ == "__main__":
    run()
