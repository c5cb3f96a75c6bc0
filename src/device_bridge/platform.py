"""
Host platform client: pushes device status back to the host.

The disconnect callback reports a device offline through this client. Any
object with a matching async ``send_device_status`` can stand in for it.
"""

import logging
from typing import Optional, Protocol

import httpx

from device_bridge.errors import RemoteLogicError, TransportError, ValidationError
from device_bridge.transport.http import DEFAULT_TIMEOUT, USER_AGENT

logger = logging.getLogger(__name__)

DEFAULT_STATUS_PATH = "/device/status"


class StatusPublisher(Protocol):
    async def send_device_status(self, device_id: str, status: str) -> None: ...


class HostPlatformClient:
    def __init__(
        self,
        base_url: str = "",
        status_path: str = DEFAULT_STATUS_PATH,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._status_path = status_path
        self._client = httpx.AsyncClient(
            headers={"User-Agent": USER_AGENT, "Accept": "application/json"},
            timeout=timeout,
            transport=transport,
        )

    async def send_device_status(self, device_id: str, status: str) -> None:
        if not self._base_url:
            raise ValidationError("host platform url is not configured", fields=["platform.url"])
        url = self._base_url + self._status_path
        logger.info("send_device_status device_id=%s status=%s url=%s", device_id, status, url)
        try:
            resp = await self._client.post(url, json={"device_id": device_id, "status": status})
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise TransportError(f"send_device_status: request to {url} failed: {e}") from e
        if resp.status_code >= 400:
            raise RemoteLogicError(resp.status_code, f"HTTP {resp.status_code}: {resp.text[:200]}", "send_device_status")

    async def close(self) -> None:
        await self._client.aclose()
