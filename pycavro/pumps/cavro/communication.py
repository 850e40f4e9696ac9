"""Cavro request/reply exchange and readiness polling.

This module contains the mixin class that moves frames between the backend and the serial port.
The pump processes one command at a time, so every request is followed by reading its reply before
anything else is sent.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import TYPE_CHECKING, Callable, Optional

from .commands import CavroCommand, QueryStatus
from .enums import Address, ConnectionState
from .errors import CavroTimeoutError, CavroWaitAbortedError
from .protocol import Reply, decode, encode

if TYPE_CHECKING:
  from pycavro.io.serial import Serial


logger = logging.getLogger("pycavro.pumps.cavro")


class CavroCommunicationMixin:
  """Mixin providing command exchange and ready polling for Cavro pumps.

  Requires:
    self.io: Serial IO wrapper of the connected port, or None
    self.address: Address of the pump
    self.terminator: Reply terminator
    self.poll_interval: Seconds between status queries in `wait_for_ready`
    self.ready_timeout: Default time budget of `wait_for_ready`, None for no limit
    self._state: Connection state
  """

  io: Optional[Serial]
  address: Address
  terminator: bytes
  poll_interval: float
  ready_timeout: Optional[float]
  _state: ConnectionState

  async def _exchange(self, io: Serial, command: CavroCommand) -> Reply:
    """Write one command to `io` and decode the reply.

    Raises:
      CavroTimeoutError: If the reply terminator was not received in time.
      CavroDecodeError: If the reply cannot be decoded.
    """
    frame = encode(self.address, command)
    await io.write(frame)
    logger.debug("[%s] sent %r", io.port, frame)

    raw = await io.read_until(self.terminator)
    if not raw.endswith(self.terminator):
      raise CavroTimeoutError(port=io.port, received=raw)

    reply = decode(raw[: -len(self.terminator)])
    logger.debug("[%s] received %r", io.port, reply)
    return reply

  async def send_command(self, command: CavroCommand) -> Reply:
    """Send a command to the connected pump and return the decoded reply.

    The reply's status is not checked here, see `check_reply`.

    Raises:
      RuntimeError: If the backend is not connected.
    """
    if self._state is not ConnectionState.CONNECTED or self.io is None:
      raise RuntimeError("Not connected to a Cavro pump - call setup() first")
    return await self._exchange(self.io, command)

  async def wait_for_ready(
    self,
    timeout: Optional[float] = None,
    stop_flag: Optional[Callable[[], bool]] = None,
  ) -> Reply:
    """Poll the pump's status until it reports ready.

    Busy replies are the only thing absorbed here; transport and decoding errors propagate. The
    error code in the status byte is not checked.

    Args:
      timeout: Give up after this many seconds. Defaults to `self.ready_timeout`; None means wait
        as long as it takes.
      stop_flag: Called before every poll. Waiting stops when it returns True.

    Returns:
      The first reply that reported ready.

    Raises:
      CavroWaitAbortedError: If `timeout` expired or `stop_flag` returned True.
    """
    if timeout is None:
      timeout = self.ready_timeout

    t0 = time.monotonic()
    polls = 0
    while True:
      if stop_flag is not None and stop_flag():
        raise CavroWaitAbortedError("Stopped waiting for the pump to become ready (stop flag set)")

      reply = await self.send_command(QueryStatus())
      polls += 1
      if reply.ready:
        if polls > 1:
          logger.debug("Pump ready after %d polls", polls)
        return reply

      if timeout is not None and time.monotonic() - t0 >= timeout:
        raise CavroWaitAbortedError(f"Pump still busy after {timeout}s ({polls} polls)")

      logger.debug(
        "Pump busy (status %s), polling again in %ss", reply.status.name, self.poll_interval
      )
      await asyncio.sleep(self.poll_interval)
