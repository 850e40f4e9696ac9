import logging
from pathlib import Path
from typing import Optional, Union

from pycavro.config.config import Config
from pycavro.config.formats import ConfigFormat, format_for

logger = logging.getLogger(__name__)


class FileReader:
  """Reads a Config from a file.

  Args:
    fmt: Format of the file. If None, it is chosen by the extension of the file being read.
  """

  encoding = "utf-8"

  def __init__(self, fmt: Optional[ConfigFormat] = None):
    self.fmt = fmt

  def read(self, path: Union[str, Path]) -> Config:
    fmt = self.fmt or format_for(path)
    with open(path, "r", encoding=self.encoding) as f:
      cfg = fmt.load(f)
    logger.debug("Loaded config from %s", path)
    return cfg


class FileWriter:
  """Writes a Config to a file, creating its directory if needed.

  Args:
    fmt: Format of the file. If None, it is chosen by the extension of the file being written.
  """

  encoding = "utf-8"

  def __init__(self, fmt: Optional[ConfigFormat] = None):
    self.fmt = fmt

  def write(self, path: Union[str, Path], cfg: Config):
    fmt = self.fmt or format_for(path)
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding=self.encoding) as f:
      fmt.save(f, cfg)
    logger.debug("Wrote config to %s", path)
