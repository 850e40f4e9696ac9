"""Config file formats, selected by file extension."""

from pathlib import Path
from typing import List, Union

from pycavro.config.formats.base import ConfigFormat
from pycavro.config.formats.ini_config import IniFormat
from pycavro.config.formats.json_config import JsonFormat

# In order of preference: new config files are written in the first format.
FORMATS: List[ConfigFormat] = [IniFormat(), JsonFormat()]


def format_for(path: Union[str, Path]) -> ConfigFormat:
  """The format of a config file, by its extension.

  Raises:
    ValueError: If no format uses the file's extension.
  """
  extension = Path(path).suffix.lstrip(".").lower()
  for fmt in FORMATS:
    if fmt.extension == extension:
      return fmt
  supported = ", ".join(f".{fmt.extension}" for fmt in FORMATS)
  raise ValueError(f"Unsupported config file {path}, expected one of {supported}")
