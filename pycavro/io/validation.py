"""Replaying capture files against live backends."""

import logging
from typing import Optional

from pycavro.io.capture import CaptureReader, capturer
from pycavro.io.serial import Serial, SerialValidator
from pycavro.machines.backend import MachineBackend

logger = logging.getLogger(__name__)

cr: Optional[CaptureReader] = None


def validate(capture_file: str):
  """Check all following IO against a capture file made with :func:`start_capture`.

  The serial connection of every connected backend is swapped for a :class:`SerialValidator`:
  writes must match the capture byte for byte, and reads return what was captured. Connect the
  backends before calling this. Call :func:`end_validation` when done.
  """

  global cr

  if capturer.capture_active:
    raise RuntimeError("Cannot validate while capturing")

  reader = CaptureReader(path=capture_file)
  for backend in MachineBackend.get_all_instances():
    io = getattr(backend, "io", None)
    if isinstance(io, SerialValidator):
      io.cr = reader
    elif isinstance(io, Serial):
      backend.io = SerialValidator(cr=reader, **io.serialize())
      logger.debug("Validating %r against %s", backend, capture_file)
    elif io is not None:
      raise RuntimeError(f"Cannot validate {backend!r}: unsupported IO {type(io).__name__}")

  cr = reader
  cr.start()


def end_validation():
  """Finish validation. Raises :class:`ValidationError` if the capture was not fully replayed."""
  if cr is None:
    raise RuntimeError("Validation not started. Call validate() first.")
  cr.done()
