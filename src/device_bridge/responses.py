"""
Response/error mapping between the remote platform and the host's
{code, message, data} contract.
"""

from typing import Any

from device_bridge.errors import (
    BridgeError,
    DecodeError,
    RemoteLogicError,
    TransportError,
    UnsupportedFormType,
    ValidationError,
)
from device_bridge.models.envelope import HostResponse

SUCCESS_CODE = 200
SUCCESS_MESSAGE = "获取成功"  # literal the host UI expects on success

# Remote platforms report success as code 0.
REMOTE_OK = 0

ERROR_CODES: dict[type, int] = {
    ValidationError: 400,
    UnsupportedFormType: 400,
    DecodeError: 502,
    TransportError: 503,
}
DEFAULT_ERROR_CODE = 500


def success(data: Any) -> dict[str, Any]:
    """Fields for a success envelope, ready for a HostResponse subclass."""
    return {"code": SUCCESS_CODE, "message": SUCCESS_MESSAGE, "data": data}


def raise_for_remote(code: int, msg: str, operation: str = "") -> None:
    if code != REMOTE_OK:
        raise RemoteLogicError(code, msg, operation)


def error_response(exc: BaseException) -> HostResponse:
    if isinstance(exc, RemoteLogicError):
        return HostResponse(code=exc.remote_code, message=exc.remote_message or str(exc))
    if isinstance(exc, BridgeError):
        for cls, code in ERROR_CODES.items():
            if isinstance(exc, cls):
                return HostResponse(code=code, message=str(exc))
    return HostResponse(code=DEFAULT_ERROR_CODE, message=str(exc) or exc.__class__.__name__)
