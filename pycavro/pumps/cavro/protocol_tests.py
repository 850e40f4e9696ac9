import unittest

from .commands import (
  InitializeSyringe,
  QueryStatus,
  QueryValvePosition,
  SetAbsolutePosition,
  SetSpeed,
  SetValvePosition,
)
from .enums import Address, ErrorCode, ValvePosition
from .errors import CavroDecodeError, CavroFramingError
from .protocol import decode, encode, split_frame


class TestEncode(unittest.TestCase):
  def test_query_status(self):
    self.assertEqual(encode(Address.A0, QueryStatus()), b"/1Q\r")

  def test_command_bodies(self):
    cases = [
      (InitializeSyringe(), b"/1Z0,0,0R\r"),
      (SetSpeed(speed=12), b"/1S12R\r"),
      (SetAbsolutePosition(position=3000), b"/1A3000R\r"),
      (SetValvePosition(position=ValvePosition.POS3), b"/1I3R\r"),
      (QueryValvePosition(), b"/1?6\r"),
    ]
    for command, expected in cases:
      with self.subTest(command=command):
        self.assertEqual(encode(Address.A0, command), expected)

  def test_operands_must_be_integers(self):
    for make in (lambda: SetSpeed(speed=1.5), lambda: SetAbsolutePosition(position=True),
                 lambda: SetAbsolutePosition(position="10"), lambda: InitializeSyringe(force=0.0)):
      with self.assertRaises(TypeError):
        make()
    with self.assertRaises(ValueError):
      SetSpeed(speed=-1)

  def test_address_character(self):
    self.assertEqual(encode(Address.A9, QueryStatus()), b"/:Q\r")
    self.assertEqual(encode(Address.AE, QueryStatus()), b"/?Q\r")

  def test_split_frame_recovers_address_and_body(self):
    for address in Address:
      with self.subTest(address=address):
        frame = encode(address, SetSpeed(speed=7))
        self.assertEqual(split_frame(frame), (address, "S7R"))

  def test_split_frame_rejects_non_frames(self):
    for frame in (b"", b"/1", b"1Q\r", b"/1Q"):
      with self.subTest(frame=frame):
        with self.assertRaises(ValueError):
          split_frame(frame)


class TestDecode(unittest.TestCase):
  def test_ready_no_error_no_payload(self):
    reply = decode(bytes([0x2F, 0x31, 0x60]))
    self.assertTrue(reply.ready)
    self.assertEqual(reply.status, ErrorCode.NO_ERROR)
    self.assertEqual(reply.data, b"")

  def test_busy_not_initialized(self):
    reply = decode(b"/0\x47")
    self.assertFalse(reply.ready)
    self.assertEqual(reply.status, ErrorCode.DEVICE_NOT_INITIALIZED)

  def test_status_nibbles(self):
    for low in range(16):
      for high, ready in ((0x6, True), (0x4, False)):
        with self.subTest(status=hex(high << 4 | low)):
          reply = decode(b"/0" + bytes([high << 4 | low]))
          self.assertEqual(reply.ready, ready)
          if low in (8, 12, 13, 14):
            self.assertEqual(reply.status, ErrorCode.UNUSED)
          else:
            self.assertEqual(int(reply.status), low)

  def test_payload(self):
    reply = decode(b"/0`12345")
    self.assertEqual(reply.data, b"12345")
    self.assertEqual(len(reply.data), 5)
    self.assertEqual(reply.data[0], ord("1"))
    self.assertEqual(reply.raw, b"/0`12345")

  def test_trailer_is_not_payload(self):
    reply = decode(bytes.fromhex("2F31600D"))
    self.assertTrue(reply.ready)
    self.assertEqual(reply.status, ErrorCode.NO_ERROR)
    self.assertEqual(reply.data, b"")
    self.assertEqual(reply.raw, bytes.fromhex("2F31600D"))

  def test_payload_with_full_terminator(self):
    reply = decode(b"/0`1\x03\r\n")
    self.assertEqual(reply.data, b"1")

  def test_trailer_only_is_short(self):
    for raw in (b"\x03\r\n", b"/0\r", b"/0\x03\r\n"):
      with self.subTest(raw=raw):
        with self.assertRaises(CavroFramingError):
          decode(raw)

  def test_short_reply(self):
    for raw in (b"", b"/", b"/0"):
      with self.subTest(raw=raw):
        with self.assertRaises(CavroFramingError):
          decode(raw)

  def test_framing_error_is_decode_error(self):
    with self.assertRaises(CavroDecodeError):
      decode(b"/0")

  def test_bad_status_high_nibble(self):
    for status in (0x00, 0x20, 0x50, 0x70, 0xE0):
      with self.subTest(status=hex(status)):
        with self.assertRaises(CavroDecodeError) as ctx:
          decode(b"/0" + bytes([status]))
        self.assertNotIsInstance(ctx.exception, CavroFramingError)

  def test_repr(self):
    self.assertEqual(repr(decode(b"/0`1")), "Reply(ready=True, status=NO_ERROR, data=31)")


class TestEnums(unittest.TestCase):
  def test_address_range(self):
    self.assertEqual(len(Address), 15)
    self.assertEqual(Address.A0.char, "1")
    with self.assertRaises(ValueError):
      Address(0x30)
    with self.assertRaises(ValueError):
      Address(0x40)

  def test_error_code_from_status_nibble(self):
    self.assertEqual(ErrorCode.from_status_nibble(0x69), ErrorCode.PLUNGER_OVERLOAD)
    self.assertEqual(ErrorCode.from_status_nibble(8), ErrorCode.UNUSED)
    self.assertEqual(ErrorCode.from_status_nibble(15), ErrorCode.COMMAND_OVERFLOW)
