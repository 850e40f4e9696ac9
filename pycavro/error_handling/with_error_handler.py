from __future__ import annotations

import functools
import inspect
import logging
from typing import Any, Awaitable, Callable, Optional

logger = logging.getLogger("pycavro.error_handling")

# handler(func, error, **kwargs), where func is the decorated method bound to its instance and
# kwargs are the arguments of the failed call.
Handler = Callable[..., Awaitable[Any]]


def with_error_handler(func):
  """Let callers recover from errors raised by an async method.

  The decorated method accepts an extra keyword argument `error_handler`. When the method raises
  and a handler was passed, the handler is awaited with the bound method, the error and the
  original arguments, and its result is returned. Without a handler the error propagates.
  """

  @functools.wraps(func)
  async def wrapper(self, *args, error_handler: Optional[Handler] = None, **kwargs):
    try:
      return await func(self, *args, **kwargs)
    except Exception as error:
      if error_handler is None:
        raise
      logger.warning("%s raised %r, handling with %s", func.__name__, error, error_handler)

      bound = wrapper.__get__(self, type(self))

      # convert all args to kwargs, remove self
      sig = inspect.signature(func)
      bound_args = sig.bind(self, *args, **kwargs)
      call_kwargs = {}
      for name, value in bound_args.arguments.items():
        if name == "self":
          continue
        if sig.parameters[name].kind is inspect.Parameter.VAR_KEYWORD:
          call_kwargs.update(value)
        else:
          call_kwargs[name] = value
      call_kwargs["error_handler"] = error_handler

      return await error_handler(bound, error, **call_kwargs)

  return wrapper
