"""Cavro syringe pump backend.

Drives Cavro XP3000-class syringe pumps with a three-port rotary valve over RS-232, using the
pump's ASCII command set.

Protocol Details:
- Serial: 9600 baud, 8 data bits, 1 stop bit, no parity
- Request: '/', address character, command body, CR
- Reply: header, status byte, payload, then ETX CR LF
- Status byte: high nibble 0x6 ready, 0x4 busy; low nibble is the error code
"""

from __future__ import annotations

import logging
import time
from typing import Callable, List, Optional

import pycavro
from pycavro.io.serial import Serial, list_serial_ports
from pycavro.pumps.backend import SyringePumpBackend
from pycavro.pumps.standard import as_operand

from .commands import (
  InitializeSyringe,
  QueryStatus,
  QueryValvePosition,
  SetAbsolutePosition,
  SetSpeed,
  SetValvePosition,
)
from .communication import CavroCommunicationMixin
from .constants import MAX_POSITION, MAX_SPEED
from .enums import Address, ConnectionState, ErrorCode, SyringeSize, ValvePosition
from .errors import CavroDecodeError, CavroDeviceError, CavroDeviceNotFoundError
from .protocol import Reply

logger = logging.getLogger("pycavro.pumps.cavro")

_VALVE_DIGITS = {ord(str(int(p))): p for p in ValvePosition}


class CavroBackend(CavroCommunicationMixin, SyringePumpBackend):
  """Backend for Cavro syringe pumps.

  `setup` scans the candidate serial ports and connects to the first one where a pump answers a
  status query. Every command waits for the pump to report ready before it is sent, and raises
  :class:`CavroDeviceError` if the pump reports an error for it.

  Attributes:
    address: Address of the pump, as set on its address switch.
    syringe_size: Volume of the mounted syringe. Stored only, no volume conversion is done.
    ports: Serial ports to try in `setup`. None means all ports on this machine.

  Example:
    >>> backend = CavroBackend(address=Address.A0, ports=["/dev/ttyUSB0"])
    >>> pump = SyringePump(backend=backend)
    >>> await pump.setup()
    >>> await pump.initialize()
    >>> await pump.set_absolute_position(1500)
  """

  def __init__(
    self,
    address: Address = Address.A0,
    syringe_size: SyringeSize = SyringeSize.S250,
    ports: Optional[List[str]] = None,
    baudrate: Optional[int] = None,
    read_timeout: Optional[float] = None,
    poll_interval: Optional[float] = None,
    ready_timeout: Optional[float] = None,
    terminator: Optional[bytes] = None,
  ) -> None:
    """Create a new Cavro backend.

    Serial parameters left as None are taken from `pycavro.CONFIG.serial`.

    Args:
      address: Address of the pump on the line.
      syringe_size: Volume of the mounted syringe.
      ports: Serial ports to try in `setup`, in order. None means all ports on this machine.
      baudrate: Line speed.
      read_timeout: Seconds to wait for a reply.
      poll_interval: Seconds between status queries while the pump is busy.
      ready_timeout: Default time budget for waiting until the pump is ready. None means no limit.
      terminator: Reply terminator.
    """
    super().__init__()
    serial_config = pycavro.CONFIG.serial

    self.address = Address(address)
    self.syringe_size = SyringeSize(syringe_size)
    self.ports = list(ports) if ports is not None else None
    self.baudrate = baudrate if baudrate is not None else serial_config.baudrate
    self.read_timeout = read_timeout if read_timeout is not None else serial_config.read_timeout
    self.poll_interval = poll_interval if poll_interval is not None else serial_config.poll_interval
    self.ready_timeout = ready_timeout
    self.terminator = terminator if terminator is not None else serial_config.terminator
    if not self.terminator:
      raise ValueError("terminator must not be empty")

    self.io: Optional[Serial] = None
    self._port: Optional[str] = None
    self._state = ConnectionState.DISCONNECTED

  def __repr__(self) -> str:
    return (
      f"<CavroBackend address={self.address.char!r} ({self.address.name}) "
      f"{self._state.value} at {self._port}>"
    )

  @property
  def state(self) -> ConnectionState:
    return self._state

  @property
  def is_connected(self) -> bool:
    return self._state is ConnectionState.CONNECTED

  @property
  def port(self) -> Optional[str]:
    """The port of the connected pump, None when not connected."""
    return self._port

  def serialize(self) -> dict:
    return {
      **super().serialize(),
      "address": int(self.address),
      "syringe_size": int(self.syringe_size),
      "ports": self.ports,
      "baudrate": self.baudrate,
      "read_timeout": self.read_timeout,
      "poll_interval": self.poll_interval,
      "ready_timeout": self.ready_timeout,
    }

  # ============== Session ==============

  def _make_io(self, port: str) -> Serial:
    return Serial(port=port, baudrate=self.baudrate, timeout=self.read_timeout)

  async def _query_port(self, io: Serial) -> Reply:
    await io.setup()
    await io.reset_input_buffer()
    await io.reset_output_buffer()
    return await self._exchange(io, QueryStatus())

  async def setup(self):
    """Connect to the pump. Does nothing if already connected.

    Ports are tried in order. The first port whose reply to a status query can be decoded is kept
    open; all other ports are closed again.

    Raises:
      CavroDeviceNotFoundError: If no port answered.
    """
    if self.is_connected:
      return

    ports = list(self.ports) if self.ports is not None else list_serial_ports()
    logger.debug("Looking for Cavro pump %s on %s", self.address.name, ports)

    self._state = ConnectionState.CONNECTING
    try:
      for port in ports:
        io = self._make_io(port)
        adopted = False
        try:
          reply = await self._query_port(io)
          adopted = True
        except Exception as e:  # pylint: disable=broad-except
          # whatever went wrong, there is no usable pump on this port
          logger.debug("No Cavro pump on %s: %r", port, e)
        finally:
          if not adopted:
            await io.stop()

        if adopted:
          self.io = io
          self._port = port
          self._state = ConnectionState.CONNECTED
          logger.info("Connected to Cavro pump %s on %s (%r)", self.address.name, port, reply)
          return
    finally:
      if self._state is ConnectionState.CONNECTING:
        self._state = ConnectionState.DISCONNECTED

    raise CavroDeviceNotFoundError(ports)

  async def stop(self):
    """Disconnect and close the serial port. Safe to call when not connected."""
    self._state = ConnectionState.DISCONNECTED
    io, self.io = self.io, None
    port, self._port = self._port, None
    if io is not None:
      await io.stop()
      logger.info("Disconnected from Cavro pump on %s", port)

  # ============== Commands ==============

  @staticmethod
  def check_reply(reply: Reply) -> None:
    """Raise if the pump reported an error.

    Raises:
      CavroDeviceError: If the reply's status is not NO_ERROR.
    """
    if reply.status is not ErrorCode.NO_ERROR:
      raise CavroDeviceError(reply.status)

  async def initialize(
    self,
    timeout: Optional[float] = None,
    stop_flag: Optional[Callable[[], bool]] = None,
    raise_on_error: bool = False,
  ) -> ErrorCode:
    """Initialize plunger and valve.

    The initialization command is sent again for as long as the pump answers that it is not
    initialized, waiting for the pump to become ready before every attempt. Any other error ends
    the loop: it is logged and returned, or raised if `raise_on_error` is set.

    Args:
      timeout: Time budget in seconds for all waiting, None for no limit.
      stop_flag: Stops waiting when it returns True, see `wait_for_ready`.
      raise_on_error: Raise :class:`CavroDeviceError` for errors other than "not initialized".

    Returns:
      The status of the last initialization command.
    """
    t0 = time.monotonic()
    attempts = 0
    while True:
      remaining = None if timeout is None else max(timeout - (time.monotonic() - t0), 0.0)
      await self.wait_for_ready(timeout=remaining, stop_flag=stop_flag)
      reply = await self.send_command(InitializeSyringe())
      attempts += 1
      if reply.status is not ErrorCode.DEVICE_NOT_INITIALIZED:
        break
      logger.info("Pump not initialized yet, retrying initialization (attempt %d)", attempts + 1)

    if reply.status is not ErrorCode.NO_ERROR:
      if raise_on_error:
        raise CavroDeviceError(reply.status)
      logger.warning("Initialization finished with status %s", reply.status.name)
    return reply.status

  async def set_speed(self, speed: int):
    """Set the plunger speed code. Values above 40 are capped to 40."""
    speed = as_operand(speed, "speed")
    await self.wait_for_ready()
    if speed > MAX_SPEED:
      logger.info("Speed %d capped to %d", speed, MAX_SPEED)
      speed = MAX_SPEED
    self.check_reply(await self.send_command(SetSpeed(speed=speed)))

  async def set_absolute_position(self, position: int):
    """Move the plunger to `position` steps. Values above 3000 (full stroke) are capped."""
    position = as_operand(position, "position")
    await self.wait_for_ready()
    if position > MAX_POSITION:
      logger.info("Position %d capped to %d", position, MAX_POSITION)
      position = MAX_POSITION
    self.check_reply(await self.send_command(SetAbsolutePosition(position=position)))

  async def set_valve_position(self, position: ValvePosition):
    """Turn the valve to `position`. No command is sent if the valve is already there."""
    position = ValvePosition(position)
    await self.wait_for_ready()
    current = await self.get_valve_position()
    if current is position:
      logger.debug("Valve already at %s", position.name)
      return
    self.check_reply(await self.send_command(SetValvePosition(position=position)))

  async def get_valve_position(self) -> ValvePosition:
    """Query the valve position.

    Does not wait for the pump to be ready and does not check the reply's status.

    Raises:
      CavroDecodeError: If the reply is not a single digit 1, 2 or 3.
    """
    reply = await self.send_command(QueryValvePosition())
    if len(reply.data) != 1:
      raise CavroDecodeError(
        f"Expected one valve position byte, got {len(reply.data)}", raw=reply.raw
      )
    if reply.data[0] not in _VALVE_DIGITS:
      raise CavroDecodeError(f"Unexpected valve position {reply.data!r}", raw=reply.raw)
    return _VALVE_DIGITS[reply.data[0]]
