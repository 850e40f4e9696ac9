from pycavro.pumps.backend import SyringePumpBackend
from pycavro.pumps.standard import ValvePosition


class SyringePumpChatterboxBackend(SyringePumpBackend):
  """Chatter box backend for device-free testing. Prints out all operations.

  Keeps track of the valve and plunger the way a pump would, including the speed and position caps.
  """

  def __init__(
    self,
    max_speed: int = 40,
    max_position: int = 3000,
    valve_position: ValvePosition = ValvePosition.POS1,
  ) -> None:
    super().__init__()
    self.max_speed = max_speed
    self.max_position = max_position
    self.valve_position = ValvePosition(valve_position)
    self.speed = 0
    self.position = 0

  async def setup(self):
    print("Setting up the syringe pump.")

  async def stop(self):
    print("Stopping the syringe pump.")

  def serialize(self) -> dict:
    return {
      **super().serialize(),
      "max_speed": self.max_speed,
      "max_position": self.max_position,
      "valve_position": int(self.valve_position),
    }

  async def initialize(self, **backend_kwargs) -> int:
    print("Initializing the syringe pump.")
    self.position = 0
    return 0

  async def set_speed(self, speed: int):
    self.speed = min(speed, self.max_speed)
    print(f"Setting speed to {self.speed}.")

  async def set_absolute_position(self, position: int):
    self.position = min(position, self.max_position)
    print(f"Moving plunger to position {self.position}.")

  async def set_valve_position(self, position: ValvePosition):
    if position == self.valve_position:
      print(f"Valve already at position {int(position)}.")
      return
    self.valve_position = position
    print(f"Turning valve to position {int(position)}.")

  async def get_valve_position(self) -> ValvePosition:
    return self.valve_position
