"""
AsyncDeviceAdapter / DeviceAdapter: the five host plugin callbacks.

Every callback is a single request/response transaction:
receive -> validate -> delegate -> map -> respond. Errors are logged with the
callback name and re-raised for the host framework to report.
"""

import asyncio
import json
import logging
from typing import Any, Optional

import pydantic

from device_bridge import forms, voucher
from device_bridge.cache import DeviceStatus, DeviceStatusCache
from device_bridge.config import BridgeConfig
from device_bridge.errors import BridgeError, DecodeError, ValidationError
from device_bridge.models.device import DeviceItem, DeviceListData, DeviceListQuery
from device_bridge.models.envelope import DeviceInfoResponse, DeviceListResponse
from device_bridge.platform import HostPlatformClient, StatusPublisher
from device_bridge.responses import success
from device_bridge.transport.http import RemotePlatformClient

logger = logging.getLogger(__name__)


class MessageType:
    SERVICE_CONFIG_CHANGED = "1"
    DEVICE_CONFIG_CHANGED = "2"


class AsyncDeviceAdapter:
    """Async callback adapter (primary)."""

    def __init__(
        self,
        config: Optional[BridgeConfig] = None,
        *,
        cache: Optional[DeviceStatusCache] = None,
        remote: Optional[RemotePlatformClient] = None,
        publisher: Optional[StatusPublisher] = None,
    ):
        self._config = config or BridgeConfig()
        self.cache = cache if cache is not None else DeviceStatusCache()
        self.remote = remote or RemotePlatformClient(timeout=self._config.remote.timeout)
        self.publisher = publisher or HostPlatformClient(
            base_url=self._config.platform.url,
            status_path=self._config.platform.status_path,
            timeout=self._config.platform.timeout,
        )

    async def get_form_config(self, protocol_type: str, device_type: str, form_type: str) -> Optional[Any]:
        logger.info(
            "get_form_config protocol_type=%s device_type=%s form_type=%s",
            protocol_type, device_type, form_type,
        )
        try:
            return forms.get_form_config(form_type, self._config.form_asset)
        except BridgeError as e:
            logger.error("get_form_config form_type=%s failed: %s", form_type, e)
            raise

    async def device_disconnect(self, device_id: str) -> None:
        """Clear whatever is cached for the device, then report it offline.

        The cache is keyed by device number, so the identity is resolved
        first. A miss is not an error; only the status push can fail.
        """
        logger.info("device_disconnect device_id=%s", device_id)
        device = self.cache.get_by_id(device_id)
        if device is not None:
            self.cache.clear_by_number(device.device_number)
            logger.info("device_disconnect device_id=%s cleared device_number=%s", device_id, device.device_number)
        else:
            logger.debug("device_disconnect device_id=%s not cached", device_id)

        try:
            await self.publisher.send_device_status(device_id, DeviceStatus.OFFLINE)
        except BridgeError as e:
            logger.error("device_disconnect device_id=%s offline push failed: %s", device_id, e)
            raise

    async def notification(self, message_type: str, message: str) -> None:
        logger.info("notification message_type=%s", message_type)
        try:
            payload = json.loads(message)
        except json.JSONDecodeError as e:
            logger.error("notification message_type=%s undecodable message: %s", message_type, e)
            raise DecodeError(f"notification message is not valid JSON: {e}") from e
        if not isinstance(payload, dict):
            logger.error("notification message_type=%s message is not an object", message_type)
            raise DecodeError("notification message must be a JSON object")

        if message_type == MessageType.SERVICE_CONFIG_CHANGED:
            logger.info(
                "service config changed service_identifier=%s",
                payload.get("service_identifier", ""),
            )
        elif message_type == MessageType.DEVICE_CONFIG_CHANGED:
            self._apply_device_config_change(payload)
        else:
            # Notifications are fire-and-forget for the host; never fail on an unknown type.
            logger.warning("notification: unknown message_type=%s ignored", message_type)

    def _apply_device_config_change(self, payload: dict[str, Any]) -> None:
        """Fold a device-config-changed message into the cache.

        With a ``device_id`` the message (re)registers the device, so a later
        disconnect of that id can find and clear its number. Without one, a
        ``status`` updates the number and its absence drops the stale entry.
        """
        number = payload.get("device_number")
        if not number or not isinstance(number, str):
            logger.info("device config changed without device_number, nothing cached to update")
            return
        device_id = payload.get("device_id")
        status = payload.get("status")
        if device_id and isinstance(device_id, str):
            self.cache.put(device_id, DeviceItem(
                device_name=str(payload.get("device_name") or ""),
                device_number=number,
                description=str(payload.get("description") or ""),
            ))
            logger.info("device config changed device_id=%s device_number=%s registered", device_id, number)
        elif status is None:
            self.cache.clear_by_number(number)
            logger.info("device config changed device_number=%s cache cleared", number)
        if status is not None:
            self.cache.set_status(number, str(status))
            logger.info("device config changed device_number=%s status=%s", number, status)

    async def get_device_list(
        self, voucher_raw: str, service_identifier: str, page: int, page_size: int,
    ) -> DeviceListResponse:
        logger.info(
            "get_device_list service_identifier=%s page=%s page_size=%s",
            service_identifier, page, page_size,
        )
        try:
            query = _list_query(voucher_raw, service_identifier, page, page_size)
            credential = voucher.decode(voucher_raw)
            voucher.require(credential, "remote_base_url", "secret")
            result = await self.remote.list_devices(credential, query)
        except BridgeError as e:
            logger.error("get_device_list service_identifier=%s failed: %s", service_identifier, e)
            raise

        data = DeviceListData(
            items=[
                DeviceItem(
                    device_name=d.device_name,
                    device_number=d.device_number,
                    description=d.description,
                )
                for d in result.items
            ],
            total=result.total,
        )
        rsp = DeviceListResponse(**success(data))
        logger.info("get_device_list total=%d returned=%d", data.total, len(data.items))
        return rsp

    async def get_device_info(self, device_code: str, voucher_raw: str) -> DeviceInfoResponse:
        logger.info("get_device_info device_code=%s", device_code)
        try:
            if not device_code:
                raise ValidationError("device code must not be empty", fields=["device_code"])
            if not voucher_raw:
                raise ValidationError("voucher must not be empty", fields=["voucher"])
            credential = voucher.decode(voucher_raw)
            voucher.require(credential, "remote_base_url", "secret", "agent_id", "external_api_key")
            detail = await self.remote.get_device_detail(credential, device_code)
        except BridgeError as e:
            logger.error("get_device_info device_code=%s failed: %s", device_code, e)
            raise

        item = DeviceItem(
            device_name=detail.device_name,
            device_number=detail.device_number,
            description=detail.device_description,
        )
        return DeviceInfoResponse(**success(item))

    async def close(self) -> None:
        await self.remote.close()
        close = getattr(self.publisher, "close", None)
        if close is not None:
            await close()


def _list_query(voucher_raw: str, service_identifier: str, page: Any, page_size: Any) -> DeviceListQuery:
    try:
        return DeviceListQuery(
            voucher=voucher_raw, service_identifier=service_identifier, page=page, page_size=page_size,
        )
    except pydantic.ValidationError as e:
        fields = [str(err["loc"][0]) for err in e.errors() if err["loc"]]
        raise ValidationError(f"invalid device list request: {', '.join(fields)}", fields=fields) from e


class DeviceAdapter:
    """Sync wrapper around AsyncDeviceAdapter. Runs the event loop internally."""

    def __init__(self, config: Optional[BridgeConfig] = None, **kwargs: Any):
        self._async = AsyncDeviceAdapter(config, **kwargs)
        self._loop = asyncio.new_event_loop()

    def _run(self, coro: Any) -> Any:
        return self._loop.run_until_complete(coro)

    @property
    def cache(self) -> DeviceStatusCache:
        return self._async.cache

    def get_form_config(self, protocol_type: str, device_type: str, form_type: str) -> Optional[Any]:
        return self._run(self._async.get_form_config(protocol_type, device_type, form_type))

    def device_disconnect(self, device_id: str) -> None:
        self._run(self._async.device_disconnect(device_id))

    def notification(self, message_type: str, message: str) -> None:
        self._run(self._async.notification(message_type, message))

    def get_device_list(self, voucher_raw: str, service_identifier: str, page: int, page_size: int) -> DeviceListResponse:
        return self._run(self._async.get_device_list(voucher_raw, service_identifier, page, page_size))

    def get_device_info(self, device_code: str, voucher_raw: str) -> DeviceInfoResponse:
        return self._run(self._async.get_device_info(device_code, voucher_raw))

    def close(self) -> None:
        self._run(self._async.close())
        self._loop.close()
