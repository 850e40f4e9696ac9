from abc import ABCMeta, abstractmethod

from pycavro.machines.backend import MachineBackend
from pycavro.pumps.standard import ValvePosition


class SyringePumpBackend(MachineBackend, metaclass=ABCMeta):
  """Abstract base class for syringe pump backends with a rotary valve."""

  @abstractmethod
  async def initialize(self, **backend_kwargs) -> int:
    """Home the plunger and valve.

    Returns:
      The status code the pump reported for the initialization command, 0 on success.
    """

  @abstractmethod
  async def set_speed(self, speed: int):
    """Set the plunger speed.

    Args:
      speed: speed code, pump-specific. Values above the pump's maximum are capped.
    """

  @abstractmethod
  async def set_absolute_position(self, position: int):
    """Move the plunger to an absolute position.

    Args:
      position: plunger position in steps. Values above full stroke are capped.
    """

  @abstractmethod
  async def set_valve_position(self, position: ValvePosition):
    """Turn the valve to a port. Does nothing if the valve is already there."""

  @abstractmethod
  async def get_valve_position(self) -> ValvePosition:
    """Report the current valve port."""
