#!/usr/bin/env python3

"""
CPU Emulator (CHIP-8)

Like a real computer, this is where most of the processing happens.  The CPU
owns the registers, and is the only thing allowed to change RAM, the stack,
the timers or the framebuffer while it runs.

Each call to run_cycle() fetches one instruction, moves the program counter
past it, then decodes and executes it.  Jumps, calls and skips simply
overwrite the already-advanced program counter.

Timing is not handled here.  Whatever drives the CPU calls run_cycle() at the
chosen instruction rate, and tick_timers() at 60Hz, separately.

Fatal faults (unknown opcodes, stack overflow/underflow) leave the program
counter on the offending instruction and are raised to the caller.  The CPU
then refuses to run until a new program is loaded.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from random import randint
from .constants import ADDR_MASK, FONT_GLYPH_SIZE, FONT_LOC, PROGRAM_LOC, PROGRAM_MAX_SIZE, SYSTEM_FONT
from .instructions import Op, UnknownOpcodeError, decode
from .stack import StackError

CPU_ENDIAN = "big"  # CHIP-8 is big-endian


class CPUError(Exception):
    pass


class CPUHaltedError(CPUError):
    def __init__(self, fault):
        self.fault = fault
        super().__init__("CPU halted after an earlier fault: {}".format(fault))


class ProgramTooLargeError(CPUError):
    def __init__(self, size, limit):
        self.size = size
        self.limit = limit
        super().__init__("Program is {} bytes, but only {} bytes are available".format(size, limit))


def default_random_byte():
    return randint(0, 0xFF)


class CPU:
    def __init__(self, ram, stack, framebuffer, keypad, timers, debugger, random_byte=None,
                 index_overflow_quirks=None):

        self.ram = ram
        self.stack = stack
        self.framebuffer = framebuffer
        self.keypad = keypad
        self.timers = timers
        self.debugger = debugger
        self.live_debug = self.debugger.is_live()
        self.random_byte = default_random_byte if random_byte is None else random_byte

        # Amiga-style VF flag on I overflow.  Off unless asked for, as the COSMAC VIP never touched VF here.
        self.index_overflow_quirks = False if index_overflow_quirks is None else index_overflow_quirks

        self.instructions = {
            Op.CLS:       self._00E0,
            Op.RET:       self._00EE,
            Op.JP:        self._1nnn,
            Op.CALL:      self._2nnn,
            Op.SE_BYTE:   self._3xnn,
            Op.SNE_BYTE:  self._4xnn,
            Op.SE_REG:    self._5xy0,
            Op.LD_BYTE:   self._6xnn,
            Op.ADD_BYTE:  self._7xnn,
            Op.LD_REG:    self._8xy0,
            Op.OR:        self._8xy1,
            Op.AND:       self._8xy2,
            Op.XOR:       self._8xy3,
            Op.ADD_REG:   self._8xy4,
            Op.SUB:       self._8xy5,
            Op.SHR:       self._8xy6,
            Op.SUBN:      self._8xy7,
            Op.SHL:       self._8xyE,
            Op.SNE_REG:   self._9xy0,
            Op.LD_I:      self._Annn,
            Op.JP_V0:     self._Bnnn,
            Op.RND:       self._Cxnn,
            Op.DRW:       self._Dxyn,
            Op.SKP:       self._Ex9E,
            Op.SKNP:      self._ExA1,
            Op.LD_VX_DT:  self._Fx07,
            Op.LD_VX_K:   self._Fx0A,
            Op.LD_DT_VX:  self._Fx15,
            Op.LD_ST_VX:  self._Fx18,
            Op.ADD_I:     self._Fx1E,
            Op.LD_F:      self._Fx29,
            Op.LD_B:      self._Fx33,
            Op.LD_MEM_VX: self._Fx55,
            Op.LD_VX_MEM: self._Fx65
        }

        unhandled = [op.name for op in Op if op not in self.instructions]

        if unhandled:
            raise CPUError("No handler for instruction(s): {}".format(", ".join(unhandled)))

        # Registers
        self.v = memoryview(bytearray(16))
        self.i = 0
        self.pc = PROGRAM_LOC
        self.debug_pc = PROGRAM_LOC  # Address of the instruction being executed
        self.opcode = 0

        # Key state as seen by the current cycle
        self.keys = self.keypad.snapshot()
        self.awaiting_keypress = False

        # Set to the exception that stopped the CPU, if any
        self.fault = None

        self.reset()

    def reset(self):
        self.ram.clear()
        self.ram.write_block(FONT_LOC, SYSTEM_FONT)
        self.v[:] = bytes(16)
        self.i = 0
        self.pc = PROGRAM_LOC
        self.debug_pc = PROGRAM_LOC
        self.opcode = 0
        self.stack.clear()
        self.timers.reset()
        self.framebuffer.clear()
        self.keypad.reset()
        self.keys = self.keypad.snapshot()
        self.awaiting_keypress = False
        self.fault = None

    # Boundary operations used by the host

    def load_program(self, program):
        # Check before touching anything, so a rejected program leaves the machine as it was
        size = len(program)

        if size > PROGRAM_MAX_SIZE:
            raise ProgramTooLargeError(size, PROGRAM_MAX_SIZE)

        self.reset()
        self.ram.write_block(PROGRAM_LOC, program)

    def run_cycle(self):
        if self.fault is not None:
            raise CPUHaltedError(self.fault)

        self.debug_pc = self.pc
        self.opcode = self.fetch()
        self.keys = self.keypad.snapshot()  # Keys can't change part-way through an instruction
        self.inc_pc()

        try:
            return self.decode_exec()
        except (UnknownOpcodeError, StackError) as err:
            # Nothing has been changed by a faulting instruction, so just point back at it
            self.pc = self.debug_pc
            self.fault = err
            raise

    def tick_timers(self):
        self.timers.tick()

    def set_key(self, key, is_down):
        self.keypad.set_key(key, is_down)

    def display_snapshot(self):
        return self.framebuffer.snapshot()

    def should_play_sound(self):
        return self.timers.is_sound_active()

    # Cycle internals

    def fetch(self):
        pc = self.pc
        return int.from_bytes(
            bytes((self.ram.read(pc), self.ram.read((pc + 1) & ADDR_MASK))), CPU_ENDIAN, signed=False
        )

    def decode_exec(self):
        instruction = decode(self.opcode, self.debug_pc)

        if self.live_debug:
            self.debugger.output(self, instruction)

        self.instructions[instruction.op](instruction)
        return instruction

    def inc_pc(self):
        self.pc = (self.pc + 2) & ADDR_MASK

    def dec_pc(self):
        # Only used to re-run an instruction (waiting for a keypress)
        self.pc = (self.pc - 2) & ADDR_MASK

    def _post_skip(self):
        self.inc_pc()

    def _00E0(self, ins):  # CLS
        self.framebuffer.clear()

    def _00EE(self, ins):  # RET
        self.pc = self.stack.pop()

    def _1nnn(self, ins):  # JP addr
        self.pc = ins.nnn

    def _2nnn(self, ins):  # CALL addr
        self.stack.push(self.pc)
        self.pc = ins.nnn

    def _3xnn(self, ins):  # SE Vx, byte
        if self.v[ins.x] == ins.nn:
            self._post_skip()

    def _4xnn(self, ins):  # SNE Vx, byte
        if self.v[ins.x] != ins.nn:
            self._post_skip()

    def _5xy0(self, ins):  # SE Vx, Vy
        if self.v[ins.x] == self.v[ins.y]:
            self._post_skip()

    def _6xnn(self, ins):  # LD Vx, byte
        self.v[ins.x] = ins.nn

    def _7xnn(self, ins):  # ADD Vx, byte
        self.v[ins.x] = (self.v[ins.x] + ins.nn) & 0xFF  # No carry flag

    def _8xy0(self, ins):  # LD Vx, Vy
        self.v[ins.x] = self.v[ins.y]

    def _8xy1(self, ins):  # OR Vx, Vy
        self.v[ins.x] |= self.v[ins.y]

    def _8xy2(self, ins):  # AND Vx, Vy
        self.v[ins.x] &= self.v[ins.y]

    def _8xy3(self, ins):  # XOR Vx, Vy
        self.v[ins.x] ^= self.v[ins.y]

    # From here on, Vf is always written after Vx, as Vf may also be one of the operands.  The flag wins.

    def _8xy4(self, ins):  # ADD Vx, Vy
        val = self.v[ins.x] + self.v[ins.y]
        self.v[ins.x] = val & 0xFF
        self.v[0xF] = int(val > 0xFF)  # Carry

    def _post_8xy5_8xy7(self, ins, val):  # Post-SUB/SUBN
        self.v[ins.x] = val & 0xFF
        self.v[0xF] = int(val >= 0)  # Set when NOT borrowing

    def _8xy5(self, ins):  # SUB Vx, Vy
        self._post_8xy5_8xy7(ins, self.v[ins.x] - self.v[ins.y])

    def _8xy6(self, ins):  # SHR Vx
        val = self.v[ins.x]
        self.v[ins.x] = val >> 1
        self.v[0xF] = val & 1

    def _8xy7(self, ins):  # SUBN Vx, Vy
        self._post_8xy5_8xy7(ins, self.v[ins.y] - self.v[ins.x])

    def _8xyE(self, ins):  # SHL Vx
        val = self.v[ins.x]
        self.v[ins.x] = (val << 1) & 0xFF
        self.v[0xF] = val >> 7

    def _9xy0(self, ins):  # SNE Vx, Vy
        if self.v[ins.x] != self.v[ins.y]:
            self._post_skip()

    def _Annn(self, ins):  # LD I, addr
        self.i = ins.nnn

    def _Bnnn(self, ins):  # JP V0, addr
        self.pc = (self.v[0] + ins.nnn) & ADDR_MASK

    def _Cxnn(self, ins):  # RND Vx, byte
        # The ANDing here is intentional.  This is not a random number between 0 and 'byte' inclusive.
        self.v[ins.x] = self.random_byte() & ins.nn

    def _Dxyn(self, ins):  # DRW Vx, Vy, nibble
        # Sprites are always 8 pixels wide, one byte per row.  Every pixel wraps around the screen edges.
        framebuffer = self.framebuffer
        vid_width, vid_height = framebuffer.get_vid_size()
        vx_pos = self.v[ins.x] % vid_width
        vy_pos = self.v[ins.y] % vid_height
        i = self.i
        collided = False

        for y in range(ins.n):
            spr_data = self.ram.read((i + y) & ADDR_MASK)

            for x in range(8):
                if spr_data & (0x80 >> x) and framebuffer.xor_pixel(vx_pos + x, vy_pos + y):
                    # Don't stop drawing.  Just remember a lit pixel was switched off.
                    collided = True

        self.v[0xF] = int(collided)

    def _Ex9E(self, ins):  # SKP Vx
        if self.keys[self.v[ins.x] & 0xF]:
            self._post_skip()

    def _ExA1(self, ins):  # SKNP Vx
        if not self.keys[self.v[ins.x] & 0xF]:
            self._post_skip()

    def _Fx07(self, ins):  # LD Vx, DT
        self.v[ins.x] = self.timers.dt

    def _Fx0A(self, ins):  # LD Vx, K
        # Rather than blocking, rewind the program counter so this instruction runs again next cycle.  That way the
        # host carries on ticking timers, drawing and reading keys while the program waits.

        if self.awaiting_keypress:
            key = self.keypad.get_keypress()
        else:
            self.keypad.setup_keypress()  # Keys already held down don't count
            self.awaiting_keypress = True
            key = None

        if key is None:
            self.dec_pc()
        else:
            self.v[ins.x] = key
            self.awaiting_keypress = False

    def _Fx15(self, ins):  # LD DT, Vx
        self.timers.set_delay(self.v[ins.x])

    def _Fx18(self, ins):  # LD ST, Vx
        self.timers.set_sound(self.v[ins.x])

    def _Fx1E(self, ins):  # ADD I, Vx
        val = self.i + self.v[ins.x]
        self.i = val & ADDR_MASK

        if self.index_overflow_quirks:
            self.v[0xF] = int(val > ADDR_MASK)

    def _Fx29(self, ins):  # LD F, Vx
        self.i = FONT_LOC + FONT_GLYPH_SIZE * (self.v[ins.x] & 0xF)

    def _Fx33(self, ins):  # LD B, Vx
        val = self.v[ins.x]
        i = self.i
        self.ram.write(i & ADDR_MASK, val // 100)               # Most-significant digit
        self.ram.write((i + 1) & ADDR_MASK, (val // 10) % 10)   # Middle digit
        self.ram.write((i + 2) & ADDR_MASK, val % 10)           # Least-significant digit

    def _Fx55(self, ins):  # LD [I], Vx
        i = self.i

        for reg in range(ins.x + 1):
            self.ram.write((i + reg) & ADDR_MASK, self.v[reg])

    def _Fx65(self, ins):  # LD Vx, [I]
        i = self.i

        for reg in range(ins.x + 1):
            self.v[reg] = self.ram.read((i + reg) & ADDR_MASK)
