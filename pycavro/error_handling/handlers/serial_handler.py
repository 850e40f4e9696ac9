from typing import Callable, List


class serial_error_handler:
  """Run a different handler for each consecutive failure, in order.

  When all handlers have been used up the last error is raised.
  """

  def __init__(self, child_handlers: List[Callable]):
    self.child_handlers = child_handlers
    self.index = 0

  async def __call__(self, func, error, **kwargs):
    if self.index >= len(self.child_handlers):
      raise error
    handler = self.child_handlers[self.index]
    self.index += 1
    return await handler(func, error, **kwargs)
