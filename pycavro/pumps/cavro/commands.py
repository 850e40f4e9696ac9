"""Cavro request variants.

Each command the backend can send is its own immutable type with typed fields.
The frame body is produced by :meth:`CavroCommand.body`, so callers never
assemble command strings by hand.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from pycavro.pumps.standard import as_operand

from .enums import ValvePosition


class CavroCommand(ABC):
  """A single request to the pump."""

  @abstractmethod
  def body(self) -> str:
    """The ASCII command body, without address and frame markers."""


@dataclass(frozen=True)
class QueryStatus(CavroCommand):
  """Report status. The reply's status byte tells whether the pump is ready."""

  def body(self) -> str:
    return "Q"


@dataclass(frozen=True)
class InitializeSyringe(CavroCommand):
  """Initialize plunger and valve (``Z`` command) and execute immediately.

  Attributes:
    force: Initialization force. 0 is full force.
    input_port: Valve port used as input during initialization, 0 is the default.
    output_port: Valve port used as output during initialization, 0 is the default.
  """

  force: int = 0
  input_port: int = 0
  output_port: int = 0

  def __post_init__(self):
    for name in ("force", "input_port", "output_port"):
      object.__setattr__(self, name, as_operand(getattr(self, name), name))

  def body(self) -> str:
    return f"Z{self.force},{self.input_port},{self.output_port}R"


@dataclass(frozen=True)
class SetSpeed(CavroCommand):
  speed: int

  def __post_init__(self):
    object.__setattr__(self, "speed", as_operand(self.speed, "speed"))

  def body(self) -> str:
    return f"S{self.speed}R"


@dataclass(frozen=True)
class SetAbsolutePosition(CavroCommand):
  position: int

  def __post_init__(self):
    object.__setattr__(self, "position", as_operand(self.position, "position"))

  def body(self) -> str:
    return f"A{self.position}R"


@dataclass(frozen=True)
class SetValvePosition(CavroCommand):
  position: ValvePosition

  def body(self) -> str:
    return f"I{int(self.position)}R"


@dataclass(frozen=True)
class QueryValvePosition(CavroCommand):
  def body(self) -> str:
    return "?6"
