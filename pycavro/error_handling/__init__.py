from .handlers import basic_retry_handler, choose_handler, serial_error_handler, until_success
from .with_error_handler import with_error_handler
