from abc import ABC, abstractmethod


class IOBase(ABC):
  """A byte stream to one device. Every method is a coroutine."""

  @abstractmethod
  async def setup(self):
    """Open the stream."""

  @abstractmethod
  async def stop(self):
    """Close the stream. Does nothing if it is not open."""

  @abstractmethod
  async def write(self, data: bytes):
    """Write all of `data`."""

  @abstractmethod
  async def read_until(self, expected: bytes) -> bytes:
    """Read up to and including `expected`, or whatever arrived before the read timeout."""

  def serialize(self) -> dict:
    """Constructor arguments, used to build a validator that stands in for this stream."""
    return {}
