#!/usr/bin/env python3

"""
Main Startup Module

Simply call main(args) to start the emulator, replacing args with a dictionary
of options.  This can be done via the Terminal or GUI.

All options must be supplied.  Defaults can be specified with a 'None'.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from .clock import Clock
from .constants import APP_INTRO, APP_COPYRIGHT, CPU_QUIRKS, DEFAULT_KEYMAP, DEFAULT_TONE, MEM_SIZE, STACK_DEPTH
from .cpu import CPU, CPUError
from .debugger import Debugger
from .framebuffer import Framebuffer
from .hostio import Loader
from .instructions import UnknownOpcodeError
from .keypad import Keypad
from .ram import RAM
from .stack import Stack, StackError
from .timers import Timers


class StartupError(Exception):
    pass


def select_plugins(opt_renderer, mute_audio):
    # Returns the Renderer, Inputs and Audio classes to use
    if opt_renderer is None or opt_renderer == "pygame":
        # pylint: disable=unused-import, import-outside-toplevel
        try:
            import pygame  # noqa: F401
        except ImportError:
            raise StartupError("PyGame does not appear to be installed.  Use the 'null' renderer to run headless.") \
                from None

        from .inputs.i_pygame import Inputs
        from .renderers.r_pygame import Renderer

        if mute_audio:
            from .audio.a_null import Audio
        else:
            from .audio.a_pygame import Audio
    elif opt_renderer == "null":
        # pylint: disable=import-outside-toplevel
        from .inputs.i_null import Inputs
        from .renderers.r_null import Renderer
        from .audio.a_null import Audio
    else:
        raise StartupError("Unknown renderer '{}'.".format(opt_renderer))

    return Renderer, Inputs, Audio


def main(args):
    print("".join((APP_INTRO, APP_COPYRIGHT)))
    quirk_settings = {}

    for cpu_quirk in CPU_QUIRKS:
        quirk_label = "{}_quirks".format(cpu_quirk)
        quirk_setting = args[quirk_label]
        quirk_settings[quirk_label] = None if quirk_setting is None else bool(quirk_setting)

    Renderer, Inputs, Audio = select_plugins(args["renderer"], args["mute"])

    # Read the ROM before opening any windows, so a bad filename fails cleanly
    program = Loader().load_binary(args["filename"])

    renderer = Renderer(scale=args["scale"], palette=args["palette"])
    keypad = Keypad()
    inputs = audio = None

    try:
        framebuffer = Framebuffer(renderer)
        inputs = Inputs(args["keymap"] or DEFAULT_KEYMAP, keypad)
        audio = Audio()
        audio.set_frequency(DEFAULT_TONE if args["tone"] is None else float(args["tone"]))

        debugger = Debugger()
        debugger.set_live(args["debug"])

        # Create a new CPU, plug it into the rest of the system, and load the program at the default address
        cpu = CPU(
            RAM(MEM_SIZE), Stack(STACK_DEPTH), framebuffer, keypad, Timers(), debugger, **quirk_settings
        )
        cpu.load_program(program)

        clock = Clock(cpu, framebuffer, inputs, audio, clock_speed=args["clock_speed"])

        try:
            clock.run()
        except (UnknownOpcodeError, StackError, CPUError) as err:
            # Leave the last frame on screen, and explain what went wrong
            framebuffer.refresh_display()
            print(debugger.crash_report(cpu, err))
            raise
    finally:
        # __del__ cannot be relied upon when using PyPy, so shut everything down here
        if audio is not None:
            audio.shutdown()

        if inputs is not None:
            inputs.shutdown()

        renderer.shutdown()
