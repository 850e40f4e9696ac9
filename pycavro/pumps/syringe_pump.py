from pycavro.error_handling import with_error_handler
from pycavro.machines.machine import Machine, need_setup_finished
from pycavro.pumps.backend import SyringePumpBackend
from pycavro.pumps.standard import ValvePosition, as_operand


class SyringePump(Machine):
  """Frontend for a syringe pump with a rotary valve.

  Example:
    >>> from pycavro.pumps import SyringePump
    >>> from pycavro.pumps.cavro import CavroBackend
    >>> async with SyringePump(backend=CavroBackend()) as pump:
    ...   await pump.initialize()
    ...   await pump.set_valve_position(ValvePosition.POS1)
    ...   await pump.set_speed(20)
    ...   await pump.set_absolute_position(3000)

  Every operation accepts an `error_handler` keyword, see
  :func:`pycavro.error_handling.with_error_handler`. Nothing is retried unless a handler is passed.
  """

  def __init__(self, backend: SyringePumpBackend):
    super().__init__(backend=backend)
    self.backend: SyringePumpBackend = backend  # fix type

  @with_error_handler
  @need_setup_finished
  async def initialize(self, **backend_kwargs) -> int:
    """Home the plunger and valve. Returns once the pump has accepted the command.

    Args:
      backend_kwargs: passed on to the backend, e.g. `timeout` for :class:`CavroBackend`.

    Returns:
      The status code the pump reported, 0 on success.
    """
    return await self.backend.initialize(**backend_kwargs)

  @with_error_handler
  @need_setup_finished
  async def set_speed(self, speed: int):
    """Set the plunger speed.

    Args:
      speed: speed code. Values above the pump's maximum are capped, not rejected.

    Raises:
      TypeError: If `speed` is not an integer.
      ValueError: If `speed` is negative.
    """
    await self.backend.set_speed(speed=as_operand(speed, "speed"))

  @with_error_handler
  @need_setup_finished
  async def set_absolute_position(self, position: int):
    """Move the plunger to an absolute position.

    Args:
      position: plunger position in steps. Values above full stroke are capped.

    Raises:
      TypeError: If `position` is not an integer.
      ValueError: If `position` is negative.
    """
    await self.backend.set_absolute_position(position=as_operand(position, "position"))

  @with_error_handler
  @need_setup_finished
  async def set_valve_position(self, position: ValvePosition):
    """Turn the valve to `position`, if it is not already there."""
    await self.backend.set_valve_position(position=ValvePosition(position))

  @with_error_handler
  @need_setup_finished
  async def get_valve_position(self) -> ValvePosition:
    """The port the valve is currently turned to."""
    return await self.backend.get_valve_position()
