"""Cavro exception classes.

Transport failures, reply decoding failures and errors reported by the pump
itself are separate classes, so callers can tell them apart with
``except`` clauses instead of matching on messages.
"""

from __future__ import annotations

from typing import List, Optional

from .enums import ErrorCode
from .error_codes import get_error_message


class CavroError(Exception):
  """Base class for all Cavro backend errors."""


class CavroDeviceNotFoundError(CavroError):
  """No candidate port answered a status query with a well-formed reply.

  Attributes:
    ports: The ports that were tried.
  """

  def __init__(self, ports: List[str]) -> None:
    self.ports = ports
    tried = ", ".join(ports) if ports else "no serial ports available"
    super().__init__(f"Cavro pump not found (tried: {tried})")


class CavroTimeoutError(CavroError, TimeoutError):
  """A reply was not terminated within the read timeout.

  Attributes:
    port: The serial port that was read.
    received: Whatever bytes did arrive before the timeout.
  """

  def __init__(self, port: Optional[str], received: bytes = b"") -> None:
    self.port = port
    self.received = received
    super().__init__(f"Timed out reading reply on {port} (received: {received!r})")


class CavroDecodeError(CavroError):
  """A reply could not be interpreted.

  Raised for a status byte whose high nibble is neither busy nor ready, and for
  payloads that do not have the expected shape.

  Attributes:
    raw: The raw reply bytes (terminator stripped).
  """

  def __init__(self, message: str, raw: bytes = b"") -> None:
    self.raw = raw
    super().__init__(f"{message} (raw: {raw.hex(' ') if raw else '(empty)'})")


class CavroFramingError(CavroDecodeError):
  """A reply was too short to contain a status byte."""


class CavroDeviceError(CavroError):
  """The pump reported an error in the status byte.

  Attributes:
    error_code: The decoded error code.
    message: Human-readable error description.
  """

  def __init__(self, error_code: ErrorCode) -> None:
    self.error_code = error_code
    self.message = get_error_message(error_code)
    super().__init__(f"Cavro error {int(error_code)} ({error_code.name}): {self.message}")


class CavroWaitAbortedError(CavroError):
  """A bounded wait for the pump gave up before the pump became ready."""
