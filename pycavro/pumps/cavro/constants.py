"""Cavro protocol constants.

Wire-level markers, status byte layout and the numeric limits the command
layer clamps to.
"""

from __future__ import annotations

# Request framing
FRAME_START = b"/"
FRAME_END = b"\r"

# Replies end with ETX, CR, LF. The serial reader strips this before decoding.
DEFAULT_TERMINATOR = b"\x03\r\n"

# Line-end bytes that never belong to a reply payload
REPLY_TRAILER_BYTES = b"\x03\r\n"

# Status byte
STATUS_BYTE_INDEX = 2
MIN_REPLY_LENGTH = STATUS_BYTE_INDEX + 1
STATUS_READY_NIBBLE = 0x6
STATUS_BUSY_NIBBLE = 0x4

# Command limits
MAX_SPEED = 40
MAX_POSITION = 3000  # full stroke, in steps
