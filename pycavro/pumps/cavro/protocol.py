"""Cavro protocol framing and reply decoding.

Request frame::

    +-----+---------+--------------+----+
    | '/' | address | command body | CR |
    +-----+---------+--------------+----+

Reply frame::

    +---------------+-------------+-----------------+-----------+
    | 2 byte header | status byte | payload (0..N)  | ETX CR LF |
    +---------------+-------------+-----------------+-----------+

The status byte's high nibble is 0x6 when the pump is ready and 0x4 when it is
busy; its low nibble is the error code. The trailing ETX CR LF is not part of
the payload.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from .commands import CavroCommand
from .constants import (
  FRAME_END,
  FRAME_START,
  MIN_REPLY_LENGTH,
  REPLY_TRAILER_BYTES,
  STATUS_BUSY_NIBBLE,
  STATUS_BYTE_INDEX,
  STATUS_READY_NIBBLE,
)
from .enums import Address, ErrorCode
from .errors import CavroDecodeError, CavroFramingError


@dataclass(frozen=True)
class Reply:
  """A decoded reply.

  Attributes:
    ready: Whether the pump can accept a new command.
    status: Error code from the status byte.
    data: Payload bytes following the status byte, in order. Not decoded as text.
    raw: The complete reply the payload was taken from.
  """

  ready: bool
  status: ErrorCode
  data: bytes = b""
  raw: bytes = b""

  def __repr__(self) -> str:
    return (
      f"Reply(ready={self.ready}, status={self.status.name}, "
      f"data={self.data.hex(' ') if self.data else '(empty)'})"
    )


def encode(address: Address, command: CavroCommand) -> bytes:
  """Build the request frame for a command.

  Args:
    address: Address of the pump on the line.
    command: The command to send.

  Returns:
    The bytes to write to the serial port.
  """
  return FRAME_START + address.char.encode("ascii") + command.body().encode("ascii") + FRAME_END


def split_frame(frame: bytes) -> Tuple[Address, str]:
  """Split a request frame built by :func:`encode` into address and command body.

  Raises:
    ValueError: If ``frame`` is not a request frame.
  """
  if len(frame) < 3 or not frame.startswith(FRAME_START) or not frame.endswith(FRAME_END):
    raise ValueError(f"Not a Cavro request frame: {frame!r}")
  return Address(frame[1]), frame[2:-1].decode("ascii")


def decode(raw: bytes) -> Reply:
  """Decode a reply.

  Args:
    raw: Reply bytes. Trailing ETX, CR and LF bytes are ignored, so the reply may be passed with or
      without its line terminator.

  Returns:
    The decoded reply.

  Raises:
    CavroFramingError: If the reply is shorter than 3 bytes.
    CavroDecodeError: If the status byte's high nibble is not busy or ready.
  """
  raw = bytes(raw)
  frame = raw.rstrip(REPLY_TRAILER_BYTES)
  if len(frame) < MIN_REPLY_LENGTH:
    raise CavroFramingError(
      f"Reply too short: expected at least {MIN_REPLY_LENGTH} bytes, got {len(frame)}", raw=raw
    )

  status_byte = frame[STATUS_BYTE_INDEX]
  high_nibble = status_byte >> 4
  if high_nibble == STATUS_READY_NIBBLE:
    ready = True
  elif high_nibble == STATUS_BUSY_NIBBLE:
    ready = False
  else:
    raise CavroDecodeError(f"Unexpected status byte 0x{status_byte:02X}", raw=raw)

  return Reply(
    ready=ready,
    status=ErrorCode.from_status_nibble(status_byte),
    data=frame[STATUS_BYTE_INDEX + 1 :],
    raw=raw,
  )
