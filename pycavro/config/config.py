import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

LOG_FROM_STRING = {
  "IO": 5,
  "DEBUG": logging.DEBUG,
  "INFO": logging.INFO,
  "WARNING": logging.WARNING,
  "ERROR": logging.ERROR,
  "CRITICAL": logging.CRITICAL,
}

LOG_TO_STRING = {v: k for k, v in LOG_FROM_STRING.items()}


@dataclass
class Config:
  """The configuration object for PyCavro."""

  @dataclass
  class Logging:
    """The logging configuration."""

    level: int = logging.INFO
    log_dir: Optional[Path] = None

  @dataclass
  class Serial:
    """Defaults for serial connections to pumps.

    Attributes:
      baudrate: Line speed. Cavro pumps ship configured for 9600 baud.
      read_timeout: Seconds to wait for a reply terminator.
      poll_interval: Seconds between status queries while waiting for the pump to become ready.
      terminator: Reply terminator, ETX CR LF.
    """

    baudrate: int = 9600
    read_timeout: float = 0.1
    poll_interval: float = 0.5
    terminator: bytes = b"\x03\r\n"

  logging: Logging = field(default_factory=Logging)
  serial: Serial = field(default_factory=Serial)

  @classmethod
  def from_dict(cls, d: dict) -> "Config":
    log = d.get("logging", {})
    ser = d.get("serial", {})
    defaults = cls.Serial()
    level_name = str(log.get("level", "INFO")).upper()
    terminator = bytes.fromhex(ser["terminator"]) if "terminator" in ser else defaults.terminator
    if not terminator:
      raise ValueError("serial terminator must not be empty")
    if level_name not in LOG_FROM_STRING:
      raise ValueError(f"Unknown log level {level_name!r}, expected one of {list(LOG_FROM_STRING)}")
    return cls(
      logging=cls.Logging(
        level=LOG_FROM_STRING[level_name],
        log_dir=Path(log["log_dir"]) if log.get("log_dir") is not None else None,
      ),
      serial=cls.Serial(
        baudrate=int(ser.get("baudrate", defaults.baudrate)),
        read_timeout=float(ser.get("read_timeout", defaults.read_timeout)),
        poll_interval=float(ser.get("poll_interval", defaults.poll_interval)),
        terminator=terminator,
      ),
    )

  @property
  def as_dict(self) -> dict:
    return {
      "logging": {
        "level": LOG_TO_STRING[self.logging.level],
        "log_dir": str(self.logging.log_dir) if self.logging.log_dir is not None else None,
      },
      "serial": {
        "baudrate": self.serial.baudrate,
        "read_timeout": self.serial.read_timeout,
        "poll_interval": self.serial.poll_interval,
        "terminator": self.serial.terminator.hex(),
      },
    }
