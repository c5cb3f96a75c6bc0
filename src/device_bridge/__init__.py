"""
device-bridge: device-management adapter for a host IoT plugin framework.

Answers the host's device-lifecycle callbacks by proxying to a third-party
device platform, scoped per tenant by the voucher carried in each request.
"""

from device_bridge.adapter import AsyncDeviceAdapter, DeviceAdapter
from device_bridge.cache import DeviceStatus, DeviceStatusCache
from device_bridge.config import BridgeConfig, load_config
from device_bridge.errors import (
    BridgeError,
    DecodeError,
    RemoteLogicError,
    TransportError,
    UnsupportedFormType,
    ValidationError,
)
from device_bridge.voucher import Credential

__version__ = "0.1.0"
__all__ = [
    "AsyncDeviceAdapter",
    "DeviceAdapter",
    "DeviceStatus",
    "DeviceStatusCache",
    "BridgeConfig",
    "load_config",
    "Credential",
    "BridgeError",
    "ValidationError",
    "DecodeError",
    "TransportError",
    "RemoteLogicError",
    "UnsupportedFormType",
]
