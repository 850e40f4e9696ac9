from typing import Callable, Optional


class until_success:
  """Keep delegating to `handler` until the call succeeds.

  Args:
    handler: The handler to run for every failure.
    max_tries: Maximum number of times `handler` is run. `None` means no limit.
  """

  def __init__(self, handler: Callable, max_tries: Optional[int] = None):
    self.handler = handler
    self.max_tries = max_tries
    self.attempts = 0

  async def __call__(self, func, error, **kwargs):
    if self.max_tries is not None and self.attempts >= self.max_tries:
      raise error
    self.attempts += 1
    return await self.handler(func, error, **kwargs)
