"""Types shared by all syringe pump backends."""

import enum
import operator


class ValvePosition(enum.IntEnum):
  """Rotary valve ports. The value is the port number used on the wire."""

  POS1 = 1
  POS2 = 2
  POS3 = 3


def as_operand(value, name: str) -> int:
  """Check that `value` is a non-negative integer and return it as an int.

  Pump operands are sent as decimal digits, so anything else would produce a malformed command.

  Raises:
    TypeError: If `value` is not an integer. Booleans are rejected too.
    ValueError: If `value` is negative.
  """
  if isinstance(value, bool):
    raise TypeError(f"{name} must be an integer, got {value!r}")
  try:
    number = operator.index(value)
  except TypeError as e:
    raise TypeError(f"{name} must be an integer, got {value!r}") from e
  if number < 0:
    raise ValueError(f"{name} must not be negative, got {number}")
  return number
