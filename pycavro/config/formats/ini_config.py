import configparser
from typing import IO

from pycavro.config.config import Config
from pycavro.config.formats.base import ConfigFormat


class IniFormat(ConfigFormat):
  """INI files, one section per part of the config.

  Example::

    [logging]
    level = DEBUG
    log_dir = logs

    [serial]
    baudrate = 9600
    read_timeout = 0.1
    poll_interval = 0.5
    terminator = 030d0a
  """

  extension = "ini"

  def load(self, r: IO[str]) -> Config:
    parser = configparser.ConfigParser()
    try:
      parser.read_file(r)
    except configparser.Error as e:
      raise ValueError(f"Not an INI config: {e}") from e
    if not parser.has_section("logging") and not parser.has_section("serial"):
      raise ValueError("INI config has neither a [logging] nor a [serial] section")
    return Config.from_dict({name: dict(parser[name]) for name in parser.sections()})

  def save(self, w: IO[str], cfg: Config):
    parser = configparser.ConfigParser()
    for name, values in cfg.as_dict.items():
      # configparser only stores strings; None means "not set"
      parser[name] = {key: str(value) for key, value in values.items() if value is not None}
    parser.write(w)
