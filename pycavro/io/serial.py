"""Async access to serial ports through pyserial.

pyserial blocks, so every call runs on a worker thread owned by the port. There is exactly one
worker per port, which keeps the calls on a port in the order they were made.
"""

import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, List, Optional

try:
  import serial
  import serial.tools.list_ports

  HAS_SERIAL = True
except ImportError:
  HAS_SERIAL = False

from pycavro.io.capture import CaptureReader, IOEvent, capturer, get_capture_or_validation_active
from pycavro.io.errors import ValidationError
from pycavro.io.io import IOBase
from pycavro.io.validation_utils import LOG_LEVEL_IO, describe_mismatch

logger = logging.getLogger(__name__)


def _require_pyserial():
  if not HAS_SERIAL:
    raise RuntimeError("pyserial is not installed. Run `pip install pyserial`.")


def list_serial_ports() -> List[str]:
  """Names of the serial ports present on this machine, e.g. ``/dev/ttyUSB0`` or ``COM3``."""
  _require_pyserial()
  return sorted(info.device for info in serial.tools.list_ports.comports())


class Serial(IOBase):
  """One serial port.

  Every call is logged at the ``IO`` level and recorded while a capture is active.

  Args:
    port: Device name of the port.
    baudrate: Line speed.
    bytesize: Data bits per character.
    parity: ``"N"``, ``"E"``, ``"O"``, ``"M"`` or ``"S"``.
    stopbits: Stop bits per character.
    write_timeout: Seconds a write may block, None to block until done.
    timeout: Seconds a read may block, None to block until done.
  """

  def __init__(
    self,
    port: str,
    baudrate: int = 9600,
    bytesize: int = 8,
    parity: str = "N",
    stopbits: float = 1,
    write_timeout: Optional[float] = 1,
    timeout: Optional[float] = 1,
  ):
    if get_capture_or_validation_active():
      raise RuntimeError(f"Cannot open {port} while an IO capture or validation is running")

    self._port = port
    self.baudrate = baudrate
    self.bytesize = bytesize
    self.parity = parity
    self.stopbits = stopbits
    self.write_timeout = write_timeout
    self.timeout = timeout
    self._ser: Optional["serial.Serial"] = None
    self._executor: Optional[ThreadPoolExecutor] = None

  def __repr__(self) -> str:
    return f"Serial({self._port!r}, {self.baudrate} baud)"

  @property
  def port(self) -> str:
    return self._port

  @property
  def is_open(self) -> bool:
    return self._ser is not None and self._ser.is_open

  def _record(self, action: str, data: bytes = b""):
    logger.log(LOG_LEVEL_IO, "[%s] %s %r", self._port, action, data)
    capturer.record(IOEvent("serial", self._port, action, data.hex()))

  async def _call(self, method: str, *args) -> Any:
    """Run a method of the pyserial port on the worker thread."""
    if self._ser is None or self._executor is None:
      raise RuntimeError(f"{self._port} is not open. Call setup() first.")
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(self._executor, getattr(self._ser, method), *args)

  async def setup(self):
    _require_pyserial()
    executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix=f"serial-{self._port}")
    loop = asyncio.get_running_loop()
    try:
      self._ser = await loop.run_in_executor(
        executor,
        lambda: serial.Serial(
          port=self._port,
          baudrate=self.baudrate,
          bytesize=self.bytesize,
          parity=self.parity,
          stopbits=self.stopbits,
          write_timeout=self.write_timeout,
          timeout=self.timeout,
        ),
      )
    except Exception:
      executor.shutdown(wait=True)
      raise
    self._executor = executor
    logger.debug("Opened %r", self)

  async def stop(self):
    ser, self._ser = self._ser, None
    executor, self._executor = self._executor, None
    if executor is None:
      return
    if ser is not None and ser.is_open:
      await asyncio.get_running_loop().run_in_executor(executor, ser.close)
    executor.shutdown(wait=True)
    logger.debug("Closed %r", self)

  async def write(self, data: bytes):
    await self._call("write", data)
    self._record("write", data)

  async def read_until(self, expected: bytes = b"\n") -> bytes:
    """Read until `expected` arrives or the read timeout expires.

    Returns:
      Everything read, including `expected` when it was found. After a timeout the result does not
      end with `expected`.
    """
    data: bytes = await self._call("read_until", expected)
    self._record("read_until", data)
    return data

  async def reset_input_buffer(self):
    await self._call("reset_input_buffer")
    self._record("reset_input_buffer")

  async def reset_output_buffer(self):
    await self._call("reset_output_buffer")
    self._record("reset_output_buffer")

  def serialize(self) -> dict:
    return {
      "port": self._port,
      "baudrate": self.baudrate,
      "bytesize": self.bytesize,
      "parity": self.parity,
      "stopbits": self.stopbits,
      "write_timeout": self.write_timeout,
      "timeout": self.timeout,
    }

  @classmethod
  def deserialize(cls, data: dict) -> "Serial":
    return cls(**data)


class SerialValidator(Serial):
  """Stands in for a :class:`Serial` and checks every call against a capture file.

  Nothing is opened: writes are compared with the captured writes, and reads return the captured
  data.
  """

  def __init__(self, cr: CaptureReader, **kwargs):
    super().__init__(**kwargs)
    self.cr = cr

  @property
  def is_open(self) -> bool:
    return True

  async def setup(self):
    pass

  async def stop(self):
    pass

  def _expect(self, action: str) -> bytes:
    event = self.cr.next_event()
    if (event.module, event.device_id, event.action) != ("serial", self._port, action):
      raise ValidationError(f"Expected {event}, but got serial {action} on {self._port}")
    return bytes.fromhex(event.data)

  async def write(self, data: bytes):
    expected = self._expect("write")
    if expected != data:
      raise ValidationError(f"Data mismatch on {self._port}:\n{describe_mismatch(expected, data)}")

  async def read_until(self, expected: bytes = b"\n") -> bytes:
    return self._expect("read_until")

  async def reset_input_buffer(self):
    self._expect("reset_input_buffer")

  async def reset_output_buffer(self):
    self._expect("reset_output_buffer")
