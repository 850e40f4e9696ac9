from __future__ import annotations

import functools
import logging
import sys
from abc import ABC
from typing import Any, Awaitable, Callable, TypeVar

from pycavro.machines.backend import MachineBackend

if sys.version_info < (3, 10):
  from typing_extensions import ParamSpec
else:
  from typing import ParamSpec

logger = logging.getLogger("pycavro")

_P = ParamSpec("_P")
_R = TypeVar("_R", bound=Awaitable[Any])


def need_setup_finished(func: Callable[_P, _R]) -> Callable[_P, _R]:
  """Only allow calling a frontend method after `Machine.setup` has finished.

  Raises:
    RuntimeError: If the machine is not set up.
  """

  @functools.wraps(func)
  async def wrapper(machine, *args, **kwargs):
    if not isinstance(machine, Machine):
      raise TypeError(f"{func.__name__} must be a method of a Machine")
    if not machine.setup_finished:
      raise RuntimeError(f"Cannot call {func.__name__}: {machine!r} is not set up. Call setup().")
    return await func(machine, *args, **kwargs)

  return wrapper  # type: ignore[return-value]


class Machine(ABC):
  """Base class for device frontends.

  A frontend validates arguments and delegates to exactly one backend. `setup` connects the
  backend and `stop` disconnects it; ``async with`` does both.
  """

  def __init__(self, backend: MachineBackend):
    self.backend = backend
    self._setup_finished = False

  @property
  def setup_finished(self) -> bool:
    return self._setup_finished

  def __repr__(self) -> str:
    return f"{type(self).__name__}(backend={self.backend!r})"

  def serialize(self) -> dict:
    return {"backend": self.backend.serialize()}

  @classmethod
  def deserialize(cls, data: dict):
    kwargs = dict(data)
    kwargs["backend"] = MachineBackend.deserialize(kwargs["backend"])
    return cls(**kwargs)

  async def setup(self, **backend_kwargs):
    await self.backend.setup(**backend_kwargs)
    self._setup_finished = True
    logger.debug("%r set up", self)

  @need_setup_finished
  async def stop(self):
    try:
      await self.backend.stop()
    finally:
      self._setup_finished = False
    logger.debug("%r stopped", self)

  async def __aenter__(self):
    await self.setup()
    return self

  async def __aexit__(self, exc_type, exc_value, traceback):
    # the block may already have called stop()
    if self.setup_finished:
      await self.stop()
