import inspect
import weakref
from abc import ABC, abstractmethod
from typing import List

from pycavro.utils.object_parsing import find_subclass


class MachineBackend(ABC):
  """Base class for device backends.

  A backend owns the connection to one device. Live backends are tracked, so that
  :func:`pycavro.io.validate` can reach their serial connections.
  """

  _instances: "weakref.WeakSet[MachineBackend]" = weakref.WeakSet()

  def __init__(self):
    self._instances.add(self)

  @abstractmethod
  async def setup(self):
    """Open the connection to the device."""

  @abstractmethod
  async def stop(self):
    """Close the connection to the device. Safe to call more than once."""

  def serialize(self) -> dict:
    """The constructor arguments of this backend, plus its class name under ``"type"``."""
    return {"type": type(self).__name__}

  @classmethod
  def deserialize(cls, data: dict) -> "MachineBackend":
    kwargs = dict(data)
    class_name = kwargs.pop("type")
    backend_class = find_subclass(class_name, cls=cls)
    if backend_class is None:
      raise ValueError(f"Unknown backend type {class_name!r}")
    if inspect.isabstract(backend_class):
      raise ValueError(f"Backend type {class_name!r} is abstract")
    return backend_class(**kwargs)

  @classmethod
  def get_all_instances(cls) -> List["MachineBackend"]:
    """All live backends that are instances of `cls`."""
    return [backend for backend in cls._instances if isinstance(backend, cls)]
