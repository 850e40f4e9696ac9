"""Recording of serial traffic to a JSON capture file.

A capture file lists every IO event in order::

    {
      "version": "0.1.0",
      "events": [
        {"module": "serial", "device_id": "/dev/ttyUSB0", "action": "write", "data": "2f31510d"},
        ...
      ]
    }

Binary data is stored as hex. Capture files are replayed by :mod:`pycavro.io.validation`.
"""

import json
import logging
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import List, Optional, Union

from pycavro.__version__ import __version__
from pycavro.io.errors import ValidationError

logger = logging.getLogger(__name__)

# set while a capture is being recorded or replayed
_io_locked = False


def get_capture_or_validation_active() -> bool:
  return _io_locked


def _lock_io(locked: bool):
  global _io_locked
  _io_locked = locked


@dataclass
class IOEvent:
  """One call on an IO object.

  Attributes:
    module: Kind of IO, e.g. ``"serial"``.
    device_id: The port or device the call went to.
    action: Name of the method that was called.
    data: Bytes written or read, as hex. Empty for calls without data.
  """

  module: str
  device_id: str
  action: str
  data: str = ""


class CaptureWriter:
  """Collects IO events in memory and writes them to a file when stopped."""

  def __init__(self):
    self.path: Optional[Path] = None
    self.events: List[IOEvent] = []

  @property
  def capture_active(self) -> bool:
    return self.path is not None

  def start(self, path: Path):
    if self.capture_active:
      raise RuntimeError(f"Already capturing to {self.path}")
    self.path = path
    self.events = []
    _lock_io(True)

  def record(self, event: IOEvent):
    if self.capture_active:
      self.events.append(event)

  def stop(self):
    if self.path is None:
      raise RuntimeError("Not capturing. Call start_capture() first.")

    try:
      with open(self.path, "w", encoding="utf-8") as f:
        json.dump(
          {"version": __version__, "events": [asdict(event) for event in self.events]}, f, indent=2
        )
      logger.info("Captured %d IO events to %s", len(self.events), self.path)
    finally:
      self.path = None
      self.events = []
      _lock_io(False)


class CaptureReader:
  """Hands out the events of a capture file one at a time, in the order they were recorded."""

  def __init__(self, path: Union[str, Path]):
    self.path = Path(path)
    with open(self.path, "r", encoding="utf-8") as f:
      self.events = [IOEvent(**event) for event in json.load(f)["events"]]
    self.position = 0

  def start(self):
    _lock_io(True)

  def next_event(self) -> IOEvent:
    if self.position >= len(self.events):
      raise ValidationError(
        f"More IO was done than {self.path} recorded ({len(self.events)} events)"
      )
    event = self.events[self.position]
    self.position += 1
    return event

  def done(self):
    """Check that every recorded event was replayed, then end the replay."""
    remaining = self.events[self.position :]
    self.reset()
    if remaining:
      raise ValidationError(
        f"{len(remaining)} recorded IO events were not replayed, starting with {remaining[0]}"
      )
    logger.info("Validation against %s successful", self.path)

  def reset(self):
    self.position = 0
    _lock_io(False)


capturer = CaptureWriter()


def start_capture(path: Union[Path, str] = Path("./validation.json")):
  """Record all IO from now on, to be written to `path` by :func:`stop_capture`.

  Connect the backends first: no new serial connections can be opened while capturing.
  """
  path = Path(path)
  if path.is_dir():
    raise ValueError(f"{path} is a directory, expected a file path")
  capturer.start(path)


def stop_capture():
  """Stop recording and write the capture file."""
  capturer.stop()
