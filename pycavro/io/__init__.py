from .capture import start_capture, stop_capture
from .errors import ValidationError
from .io import IOBase
from .serial import Serial, SerialValidator, list_serial_ports
from .validation import end_validation, validate
