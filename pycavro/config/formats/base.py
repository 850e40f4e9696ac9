from abc import ABC, abstractmethod
from typing import IO

from pycavro.config.config import Config


class ConfigFormat(ABC):
  """Converts a Config to and from one text format.

  Attributes:
    extension: File extension of this format, without the dot.
  """

  extension: str

  @abstractmethod
  def load(self, r: IO[str]) -> Config:
    """Parse a Config from an open text stream.

    Raises:
      ValueError: If the stream does not hold a config in this format.
    """

  @abstractmethod
  def save(self, w: IO[str], cfg: Config):
    """Write `cfg` to an open text stream."""
