import unittest

from pycavro.error_handling import (
  basic_retry_handler,
  serial_error_handler,
  until_success,
  with_error_handler,
)


class FlakyDevice:
  def __init__(self, failures: int):
    self.failures = failures
    self.calls = []

  @with_error_handler
  async def move(self, position: int, **kwargs):
    self.calls.append((position, kwargs))
    if len(self.calls) <= self.failures:
      raise IOError(f"failure {len(self.calls)}")
    return position


class TestWithErrorHandler(unittest.IsolatedAsyncioTestCase):
  async def test_no_error(self):
    device = FlakyDevice(failures=0)
    self.assertEqual(await device.move(10), 10)

  async def test_error_without_handler(self):
    device = FlakyDevice(failures=1)
    with self.assertRaises(IOError):
      await device.move(10)

  async def test_retry_keeps_arguments(self):
    device = FlakyDevice(failures=1)
    self.assertEqual(await device.move(10, timeout=5, error_handler=basic_retry_handler), 10)
    self.assertEqual(device.calls, [(10, {"timeout": 5}), (10, {"timeout": 5})])

  async def test_until_success(self):
    device = FlakyDevice(failures=3)
    handler = until_success(basic_retry_handler, max_tries=3)
    self.assertEqual(await device.move(1, error_handler=handler), 1)
    self.assertEqual(len(device.calls), 4)

  async def test_serial_error_handler(self):
    used = []

    async def note_and_retry(func, error, **kwargs):
      used.append(str(error))
      return await func(**kwargs)

    device = FlakyDevice(failures=5)
    handler = serial_error_handler([note_and_retry, note_and_retry])
    with self.assertRaises(IOError):
      await device.move(1, error_handler=handler)
    self.assertEqual(used, ["failure 1", "failure 2"])
    self.assertEqual(len(device.calls), 3)
