"""
Remote platform HTTP client.

Stateless with respect to tenants: every call takes the decoded voucher and
builds an absolute URL from it, so one client serves all service access
points. Calls are never retried; each one returns a typed result or raises
exactly one classified error.
"""

import logging
from typing import Any, Optional, TypeVar

import httpx
import pydantic
from pydantic import BaseModel

from device_bridge.errors import DecodeError, TransportError
from device_bridge.models.device import (
    DeviceListQuery,
    RemoteDeviceDetail,
    RemoteDeviceDetailResponse,
    RemoteDeviceList,
    RemoteDeviceListResponse,
)
from device_bridge.responses import raise_for_remote
from device_bridge.voucher import Credential

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0
USER_AGENT = "device-bridge/0.1.0"

DEVICE_LIST_PATH = "/device/list"
DEVICE_BIND_PATH = "/device/bind"

_MASKED_HEADERS = {"x-token", "authorization"}

M = TypeVar("M", bound=BaseModel)


class RemotePlatformClient:
    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._client = httpx.AsyncClient(
            headers={"User-Agent": USER_AGENT, "Accept": "application/json"},
            timeout=timeout,
            transport=transport,
        )

    async def list_devices(self, credential: Credential, query: DeviceListQuery) -> RemoteDeviceList:
        """POST {ServerURL}/device/list authenticated with the voucher secret."""
        resp = await self._post(
            "list_devices",
            credential.remote_base_url + DEVICE_LIST_PATH,
            query.forward_body(),
            headers={"Content-Type": "application/json", "x-token": credential.secret},
        )
        result = self._decode("list_devices", resp, RemoteDeviceListResponse)
        raise_for_remote(result.code, result.msg, "list_devices")
        return result.data or RemoteDeviceList()

    async def get_device_detail(self, credential: Credential, device_code: str) -> RemoteDeviceDetail:
        """POST {ServerURL}/device/bind. Credentials travel in the body, not a header.

        The caller must have checked agent_id and external_api_key already.
        """
        body = {
            "secret": credential.secret,
            "agent_id": credential.agent_id,
            "external_api_key": credential.external_api_key,
            "device_code": device_code,
        }
        resp = await self._post(
            "get_device_detail",
            credential.remote_base_url + DEVICE_BIND_PATH,
            body,
            headers={"Content-Type": "application/json"},
        )
        result = self._decode("get_device_detail", resp, RemoteDeviceDetailResponse)
        raise_for_remote(result.code, result.msg, "get_device_detail")
        return result.data or RemoteDeviceDetail()

    async def _post(
        self, operation: str, url: str, body: dict[str, Any], headers: dict[str, str],
    ) -> httpx.Response:
        logger.info("operation=%s POST %s headers=%s", operation, url, _mask(headers))
        try:
            resp = await self._client.post(url, json=body, headers=headers)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.error("operation=%s POST %s failed: %s", operation, url, e)
            raise TransportError(f"{operation}: request to {url} failed: {e}") from e
        logger.info("operation=%s status=%d body=%s", operation, resp.status_code, resp.text[:500])
        return resp

    @staticmethod
    def _decode(operation: str, resp: httpx.Response, model: type[M]) -> M:
        if not resp.is_success:
            raise DecodeError(
                f"{operation}: HTTP {resp.status_code}: {resp.text[:200]}",
                {"status_code": resp.status_code},
            )
        try:
            return model.model_validate_json(resp.content)
        except pydantic.ValidationError as e:
            raise DecodeError(f"{operation}: malformed response body: {e.error_count()} error(s)") from e

    async def close(self) -> None:
        await self._client.aclose()


def _mask(headers: dict[str, str]) -> dict[str, str]:
    return {k: ("***" if k.lower() in _MASKED_HEADERS else v) for k, v in headers.items()}
