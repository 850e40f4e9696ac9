import datetime
import logging
from pathlib import Path
from typing import Optional, Union

from pycavro.__version__ import __version__
from pycavro.config import Config, load_config
from pycavro.io import end_validation, start_capture, stop_capture, validate

CONFIG_FILE_NAME = "pycavro"

CONFIG = load_config(CONFIG_FILE_NAME, create_default=False)


def setup_logger(log_dir: Optional[Union[Path, str]], level: int):
  """Set up the `pycavro` logger.

  Args:
    log_dir: The directory to store dated log files in. Created if it does not exist. If None, no
      log file is written.
    level: The logging level.
  """
  logger = logging.getLogger("pycavro")
  logger.setLevel(level)

  # drop handlers from a previous configure()
  for handler in list(logger.handlers):
    if isinstance(handler, logging.FileHandler):
      handler.close()
    logger.removeHandler(handler)

  if log_dir is not None:
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    now = datetime.datetime.now().strftime("%Y%m%d")
    fh = logging.FileHandler(log_dir / f"pycavro-{now}.log")
    fh.setLevel(logging.NOTSET)  # logs everything it receives, the logger level filters
    fh.setFormatter(logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s"))
    logger.addHandler(fh)


def configure(cfg: Config):
  """Apply a config: set up logging and make `cfg` the module-level config.

  Backends created afterwards take their serial defaults from `cfg.serial`.
  """
  global CONFIG
  CONFIG = cfg
  setup_logger(cfg.logging.log_dir, cfg.logging.level)


configure(CONFIG)
