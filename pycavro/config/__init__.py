"""Module-level configuration.

PyCavro looks for ``pycavro.ini`` or ``pycavro.json`` in the working directory and then in each of
its parents, and uses the first one it finds. Without a config file the defaults of
:class:`Config` apply.
"""

from pathlib import Path
from typing import Optional, Union

from pycavro.config.config import Config
from pycavro.config.files import FileReader, FileWriter
from pycavro.config.formats import FORMATS


def find_config_file(base_name: str, start: Optional[Union[str, Path]] = None) -> Optional[Path]:
  """The nearest config file called `base_name`, with any supported extension.

  Args:
    base_name: File name without extension.
    start: Directory to start searching in, the working directory by default.

  Returns:
    The path of the config file, or None if neither `start` nor any parent has one.
  """
  start_dir = Path(start) if start is not None else Path.cwd()
  for directory in [start_dir, *start_dir.parents]:
    for fmt in FORMATS:
      candidate = directory / f"{base_name}.{fmt.extension}"
      if candidate.is_file():
        return candidate
  return None


def project_dir() -> Path:
  """The repository root containing the working directory (the nearest parent with a .git
  directory), or the working directory itself when it is not inside a repository."""
  cwd = Path.cwd()
  for directory in [cwd, *cwd.parents]:
    if (directory / ".git").exists():
      return directory
  return cwd


def load_config(
  base_name: str, create_default: bool = False, create_in_project_dir: bool = True
) -> Config:
  """Load the config file called `base_name`, see :func:`find_config_file`.

  Args:
    base_name: File name without extension.
    create_default: If no config file exists, write one with the default settings.
    create_in_project_dir: Write the default file to :func:`project_dir` rather than the working
      directory.
  """
  path = find_config_file(base_name)
  if path is None:
    if not create_default:
      return Config()
    directory = project_dir() if create_in_project_dir else Path.cwd()
    path = directory / f"{base_name}.{FORMATS[0].extension}"
    FileWriter().write(path, Config())

  return FileReader().read(path)
