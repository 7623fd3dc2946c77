#!/usr/bin/env python3

"""
Call Stack Emulator

CHIP-8 keeps return addresses on a small stack that programs cannot address
directly, so it lives outside system RAM as a plain list.  The stack pointer
is simply the number of items held.

Overflowing (calling too deep) and underflowing (returning from nothing) are
both fatal to the running program, and are raised as different exceptions so
the host can tell them apart.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"


class StackError(Exception):
    pass


class StackOverflowError(StackError):
    pass


class StackUnderflowError(StackError):
    pass


class Stack:
    def __init__(self, size):
        self.items = []
        self.size = size

    @property
    def sp(self):
        return len(self.items)

    def push(self, item):
        if len(self.items) >= self.size:
            raise StackOverflowError("Stack overflow (more than {} nested calls)".format(self.size))

        self.items.append(item)

    def pop(self):
        try:
            return self.items.pop()
        except IndexError:
            raise StackUnderflowError("Stack underflow (return without call)") from None

    def clear(self):
        self.items.clear()

    def get_items(self):
        # For debugging
        return self.items
