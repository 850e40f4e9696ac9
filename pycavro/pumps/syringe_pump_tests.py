import unittest
from unittest.mock import AsyncMock, Mock

from pycavro.error_handling import basic_retry_handler, choose_handler, until_success
from pycavro.pumps import SyringePump, SyringePumpChatterboxBackend, ValvePosition
from pycavro.pumps.backend import SyringePumpBackend
from pycavro.pumps.cavro import CavroBackend, CavroDeviceError, ErrorCode
from pycavro.pumps.cavro.mock_tests import MockSerial, reply


class TestSyringePump(unittest.IsolatedAsyncioTestCase):
  """Tests for the SyringePump frontend."""

  def setUp(self):
    self.mock_backend = Mock(spec=SyringePumpBackend)
    for method in ("setup", "stop", "initialize", "set_speed", "set_absolute_position",
                   "set_valve_position", "get_valve_position"):
      setattr(self.mock_backend, method, AsyncMock())

  async def test_setup(self):
    async with SyringePump(backend=self.mock_backend) as pump:
      self.assertTrue(pump.setup_finished)
      self.mock_backend.setup.assert_awaited_once()
    self.assertFalse(pump.setup_finished)
    self.mock_backend.stop.assert_awaited_once()

  async def test_need_setup(self):
    pump = SyringePump(backend=self.mock_backend)
    with self.assertRaises(RuntimeError):
      await pump.set_speed(10)
    self.mock_backend.set_speed.assert_not_called()

  async def test_delegates_to_backend(self):
    self.mock_backend.initialize.return_value = 0
    self.mock_backend.get_valve_position.return_value = ValvePosition.POS2
    async with SyringePump(backend=self.mock_backend) as pump:
      self.assertEqual(await pump.initialize(), 0)
      await pump.set_speed(20)
      await pump.set_absolute_position(1500)
      await pump.set_valve_position(3)
      self.assertEqual(await pump.get_valve_position(), ValvePosition.POS2)

    self.mock_backend.initialize.assert_awaited_once_with()
    self.mock_backend.set_speed.assert_awaited_once_with(speed=20)
    self.mock_backend.set_absolute_position.assert_awaited_once_with(position=1500)
    self.mock_backend.set_valve_position.assert_awaited_once_with(position=ValvePosition.POS3)

  async def test_initialize_backend_kwargs(self):
    async with SyringePump(backend=self.mock_backend) as pump:
      await pump.initialize(timeout=30)
    self.mock_backend.initialize.assert_awaited_once_with(timeout=30)

  async def test_invalid_arguments(self):
    async with SyringePump(backend=self.mock_backend) as pump:
      with self.assertRaises(ValueError):
        await pump.set_speed(-1)
      with self.assertRaises(ValueError):
        await pump.set_absolute_position(-10)
      with self.assertRaises(ValueError):
        await pump.set_valve_position(4)
    self.mock_backend.set_speed.assert_not_called()
    self.mock_backend.set_absolute_position.assert_not_called()
    self.mock_backend.set_valve_position.assert_not_called()

  async def test_non_integer_arguments(self):
    async with SyringePump(backend=self.mock_backend) as pump:
      with self.assertRaises(TypeError):
        await pump.set_speed(20.5)
      with self.assertRaises(TypeError):
        await pump.set_absolute_position(True)
    self.mock_backend.set_speed.assert_not_called()
    self.mock_backend.set_absolute_position.assert_not_called()

  def test_serialize(self):
    pump = SyringePump(backend=SyringePumpChatterboxBackend())
    deserialized = SyringePump.deserialize(pump.serialize())
    self.assertIsInstance(deserialized.backend, SyringePumpChatterboxBackend)


class TestErrorHandling(unittest.IsolatedAsyncioTestCase):
  """Errors propagate unless the caller passes an error handler."""

  def setUp(self):
    self.mock_backend = Mock(spec=SyringePumpBackend)
    self.mock_backend.setup = AsyncMock()
    self.mock_backend.stop = AsyncMock()
    self.mock_backend.set_speed = AsyncMock(
      side_effect=[CavroDeviceError(ErrorCode.INVALID_COMMAND_SEQUENCE), None]
    )

  async def test_no_handler(self):
    async with SyringePump(backend=self.mock_backend) as pump:
      with self.assertRaises(CavroDeviceError):
        await pump.set_speed(10)
    self.assertEqual(self.mock_backend.set_speed.await_count, 1)

  async def test_retry(self):
    async with SyringePump(backend=self.mock_backend) as pump:
      await pump.set_speed(10, error_handler=until_success(basic_retry_handler, max_tries=3))
    self.assertEqual(self.mock_backend.set_speed.await_count, 2)
    self.mock_backend.set_speed.assert_awaited_with(speed=10)

  async def test_retry_gives_up(self):
    self.mock_backend.set_speed.side_effect = CavroDeviceError(ErrorCode.PLUNGER_OVERLOAD)
    async with SyringePump(backend=self.mock_backend) as pump:
      with self.assertRaises(CavroDeviceError):
        await pump.set_speed(10, error_handler=until_success(basic_retry_handler, max_tries=2))
    self.assertEqual(self.mock_backend.set_speed.await_count, 3)

  async def test_choose_handler(self):
    handler = choose_handler({CavroDeviceError: basic_retry_handler})
    async with SyringePump(backend=self.mock_backend) as pump:
      await pump.set_speed(10, error_handler=handler)
    self.assertEqual(self.mock_backend.set_speed.await_count, 2)

  async def test_choose_handler_no_match(self):
    handler = choose_handler({TimeoutError: basic_retry_handler})
    async with SyringePump(backend=self.mock_backend) as pump:
      with self.assertRaises(CavroDeviceError):
        await pump.set_speed(10, error_handler=handler)


class TestSyringePumpWithCavro(unittest.IsolatedAsyncioTestCase):
  """The frontend driving a Cavro backend over a mock serial port."""

  async def test_session(self):
    io = MockSerial(replies=[reply(0x60)])
    backend = CavroBackend(ports=[io.port], poll_interval=0)
    backend._make_io = lambda port: io  # type: ignore[method-assign]

    async with SyringePump(backend=backend) as pump:
      io.queue(reply(0x60), reply(0x60))
      self.assertEqual(await pump.initialize(), ErrorCode.NO_ERROR)
      io.queue(reply(0x60), reply(0x60, b"1"), reply(0x60))
      await pump.set_valve_position(ValvePosition.POS3)
      io.queue(reply(0x60), reply(0x60))
      await pump.set_absolute_position(3000)

    self.assertFalse(io.is_open)
    self.assertEqual(
      io.written,
      [
        b"/1Q\r",
        b"/1Q\r",
        b"/1Z0,0,0R\r",
        b"/1Q\r",
        b"/1?6\r",
        b"/1I3R\r",
        b"/1Q\r",
        b"/1A3000R\r",
      ],
    )


class TestChatterbox(unittest.IsolatedAsyncioTestCase):
  async def asyncSetUp(self):
    await super().asyncSetUp()
    self.backend = SyringePumpChatterboxBackend()
    self.pump = SyringePump(backend=self.backend)
    await self.pump.setup()

  async def asyncTearDown(self):
    await self.pump.stop()
    await super().asyncTearDown()

  async def test_initialize(self):
    self.assertEqual(await self.pump.initialize(), 0)
    self.assertEqual(self.backend.position, 0)

  async def test_caps(self):
    await self.pump.set_speed(55)
    await self.pump.set_absolute_position(5000)
    self.assertEqual(self.backend.speed, 40)
    self.assertEqual(self.backend.position, 3000)

  async def test_valve(self):
    self.assertEqual(await self.pump.get_valve_position(), ValvePosition.POS1)
    await self.pump.set_valve_position(ValvePosition.POS2)
    self.assertEqual(await self.pump.get_valve_position(), ValvePosition.POS2)
