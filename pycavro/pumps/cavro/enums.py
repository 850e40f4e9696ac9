"""Cavro enumeration types."""

from __future__ import annotations

import enum

from pycavro.pumps.standard import ValvePosition  # pylint: disable=unused-import


class Address(enum.IntEnum):
  """Device address as set on the pump's address switch.

  The value is the ASCII code that is sent on the wire, so switch position 0
  is transmitted as ``"1"``.
  """

  A0 = 0x31
  A1 = 0x32
  A2 = 0x33
  A3 = 0x34
  A4 = 0x35
  A5 = 0x36
  A6 = 0x37
  A7 = 0x38
  A8 = 0x39
  A9 = 0x3A
  AA = 0x3B
  AB = 0x3C
  AC = 0x3D
  AD = 0x3E
  AE = 0x3F

  @property
  def char(self) -> str:
    return chr(self.value)


class SyringeSize(enum.IntEnum):
  """Full-stroke syringe volumes, in uL."""

  S50 = 50
  S100 = 100
  S250 = 250
  S500 = 500
  S1000 = 1000
  S2500 = 2500
  S5000 = 5000


class ErrorCode(enum.IntEnum):
  """Error codes carried in the low nibble of the status byte."""

  NO_ERROR = 0
  INITIALIZATION = 1
  INVALID_COMMAND = 2
  INVALID_OPERAND = 3
  INVALID_COMMAND_SEQUENCE = 4
  UNUSED = 5
  EEPROM_FAILURE = 6
  DEVICE_NOT_INITIALIZED = 7
  PLUNGER_OVERLOAD = 9
  VALVE_OVERLOAD = 10
  PLUNGER_MOVE_NOT_ALLOWED = 11
  COMMAND_OVERFLOW = 15

  @classmethod
  def from_status_nibble(cls, nibble: int) -> "ErrorCode":
    """Map the low nibble of a status byte to an error code.

    Reserved nibbles (8, 12, 13, 14) map to ``UNUSED``.
    """
    try:
      return cls(nibble & 0x0F)
    except ValueError:
      return cls.UNUSED


class ConnectionState(enum.Enum):
  """Lifecycle of a backend's connection to the pump."""

  DISCONNECTED = "disconnected"
  CONNECTING = "connecting"
  CONNECTED = "connected"
