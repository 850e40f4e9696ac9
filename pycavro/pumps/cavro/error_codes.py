"""Human-readable descriptions of Cavro error codes."""

from typing import Dict

from .enums import ErrorCode

ERROR_CODES: Dict[ErrorCode, str] = {
  ErrorCode.NO_ERROR: "No error.",
  ErrorCode.INITIALIZATION: "Initialization error. The plunger or valve failed to initialize.",
  ErrorCode.INVALID_COMMAND: "Invalid command.",
  ErrorCode.INVALID_OPERAND: "Invalid operand. A command parameter is out of range.",
  ErrorCode.INVALID_COMMAND_SEQUENCE: "Invalid command sequence.",
  ErrorCode.UNUSED: "Reserved error code reported by the device.",
  ErrorCode.EEPROM_FAILURE: "EEPROM failure.",
  ErrorCode.DEVICE_NOT_INITIALIZED: "Device not initialized.",
  ErrorCode.PLUNGER_OVERLOAD: "Plunger overload. The plunger must be re-initialized.",
  ErrorCode.VALVE_OVERLOAD: "Valve overload. The valve must be re-initialized.",
  ErrorCode.PLUNGER_MOVE_NOT_ALLOWED: "Plunger move not allowed while the valve is in bypass.",
  ErrorCode.COMMAND_OVERFLOW: "Command overflow. The command buffer is full.",
}


def get_error_message(error_code: ErrorCode) -> str:
  """Get the description for an error code."""
  return ERROR_CODES.get(error_code, f"Unknown error code {int(error_code)}")
