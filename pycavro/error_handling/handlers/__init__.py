from .choose_handler import choose_handler
from .retry import basic_retry_handler
from .serial_handler import serial_error_handler
from .until_success import until_success
