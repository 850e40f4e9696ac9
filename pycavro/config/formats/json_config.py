import json
from typing import IO

from pycavro.config.config import Config
from pycavro.config.formats.base import ConfigFormat


class JsonFormat(ConfigFormat):
  """JSON files with the same sections as :class:`IniFormat`, as nested objects."""

  extension = "json"

  def load(self, r: IO[str]) -> Config:
    try:
      data = json.load(r)
    except json.JSONDecodeError as e:
      raise ValueError(f"Not a JSON config: {e}") from e
    if not isinstance(data, dict):
      raise ValueError(f"JSON config must be an object, got {type(data).__name__}")
    return Config.from_dict(data)

  def save(self, w: IO[str], cfg: Config):
    json.dump(cfg.as_dict, w, indent=2)
