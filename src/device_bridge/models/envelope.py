"""
Host response envelope: {code, message, data}.
"""

from typing import Any, Optional
from pydantic import BaseModel

from device_bridge.models.device import DeviceItem, DeviceListData


class HostResponse(BaseModel):
    code: int
    message: str
    data: Optional[Any] = None


class DeviceListResponse(HostResponse):
    data: DeviceListData


class DeviceInfoResponse(HostResponse):
    data: DeviceItem
