"""
device-bridge error types: one class per failure the host can be told about.
"""

from typing import Any, Optional


class BridgeError(Exception):
    def __init__(self, code: str, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.code = code
        self.details = details


class ValidationError(BridgeError):
    """A required field was missing or empty. Raised before any I/O."""

    def __init__(self, message: str, fields: Optional[list[str]] = None):
        super().__init__("validation_error", message, {"fields": fields} if fields else None)
        self.fields = fields or []


class DecodeError(BridgeError):
    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__("decode_error", message, details)


class TransportError(BridgeError):
    def __init__(self, message: str):
        super().__init__("transport_error", message)


class RemoteLogicError(BridgeError):
    """The remote platform answered with a non-zero status code."""

    def __init__(self, remote_code: int, remote_message: str, operation: str = ""):
        message = f"remote platform error: {remote_message or f'code {remote_code}'}"
        super().__init__("remote_error", message, {"operation": operation} if operation else None)
        self.remote_code = remote_code
        self.remote_message = remote_message


class UnsupportedFormType(BridgeError):
    def __init__(self, form_type: str):
        super().__init__("unsupported_form_type", f"unsupported form type: {form_type}")
        self.form_type = form_type
