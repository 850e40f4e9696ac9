"""Cavro syringe pump backend."""

from .backend import CavroBackend
from .commands import (
  CavroCommand,
  InitializeSyringe,
  QueryStatus,
  QueryValvePosition,
  SetAbsolutePosition,
  SetSpeed,
  SetValvePosition,
)
from .communication import CavroCommunicationMixin
from .constants import DEFAULT_TERMINATOR, MAX_POSITION, MAX_SPEED
from .enums import Address, ConnectionState, ErrorCode, SyringeSize, ValvePosition
from .error_codes import get_error_message
from .errors import (
  CavroDecodeError,
  CavroDeviceError,
  CavroDeviceNotFoundError,
  CavroError,
  CavroFramingError,
  CavroTimeoutError,
  CavroWaitAbortedError,
)
from .protocol import Reply, decode, encode, split_frame
