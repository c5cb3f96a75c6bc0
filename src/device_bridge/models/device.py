"""
Device models: host-side shapes and the remote platform's wire shapes.
"""

from typing import Any, Optional
from pydantic import BaseModel, Field, ValidationInfo, field_validator


class DeviceItem(BaseModel):
    """A device as the host expects it in list and detail envelopes."""
    device_name: str = ""
    device_number: str = ""
    description: str = ""


class DeviceListData(BaseModel):
    items: list[DeviceItem] = Field(default_factory=list, alias="list")
    total: int = 0

    model_config = {"populate_by_name": True}


class DeviceListQuery(BaseModel):
    """The host's device-list request.

    The remote /device/list endpoint accepts the same shape the host sends,
    so these four fields are forwarded verbatim and nothing else is.
    """
    voucher: str
    service_identifier: str = ""
    page: int
    page_size: int

    def forward_body(self) -> dict[str, Any]:
        return {
            "voucher": self.voucher,
            "service_identifier": self.service_identifier,
            "page": self.page,
            "page_size": self.page_size,
        }


# Remote platform wire shapes

class RemoteModel(BaseModel):
    """Go-style backends send null for empty strings, lists and numbers."""

    @field_validator("*", mode="before")
    @classmethod
    def null_as_empty(cls, value: Any, info: ValidationInfo) -> Any:
        if value is None:
            return cls.model_fields[info.field_name].get_default(call_default_factory=True)
        return value


class RemoteDeviceItem(RemoteModel):
    device_name: str = ""
    device_number: str = ""
    description: str = ""


class RemoteDeviceList(RemoteModel):
    total: int = 0
    items: list[RemoteDeviceItem] = Field(default_factory=list, alias="list")

    model_config = {"populate_by_name": True}


class RemoteDeviceListResponse(RemoteModel):
    """POST /device/list response"""
    code: int = 0
    msg: str = ""
    data: Optional[RemoteDeviceList] = None


class RemoteDeviceDetail(RemoteModel):
    device_name: str = ""
    device_number: str = ""
    device_description: str = ""


class RemoteDeviceDetailResponse(RemoteModel):
    """POST /device/bind response"""
    code: int = 0
    msg: str = ""
    data: Optional[RemoteDeviceDetail] = None
