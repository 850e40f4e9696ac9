from typing import Callable, Dict, Type


def choose_handler(handlers: Dict[Type[Exception], Callable]) -> Callable:
  """Dispatch to a handler by error type. Errors without a matching handler are raised."""

  async def handler(func, error, **kwargs):
    for exc_type, exc_handler in handlers.items():
      if isinstance(error, exc_type):
        return await exc_handler(func, error, **kwargs)
    raise error

  return handler
