import tempfile
from pathlib import Path

import pytest

from pycavro import Config, configure

TEST_CONFIG = Config(
  logging=Config.Logging(log_dir=Path(tempfile.gettempdir()) / "pycavro_test_logs"),
)


@pytest.fixture(autouse=True)
def setup_test_config():
  configure(TEST_CONFIG)
  yield
