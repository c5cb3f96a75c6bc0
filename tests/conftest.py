"""Shared fakes: a recording httpx transport and an in-memory status publisher."""

import json
from typing import Any, Callable, Optional

import httpx
import pytest

from device_bridge.errors import BridgeError
from device_bridge.transport.http import RemotePlatformClient

VOUCHER = {
    "ServerURL": "http://remote.test/xiaozhi",
    "Secret": "7cecb9b4-acde-4fb1-9c40-2a7f60e135ea",
    "AgentId": "agent-1",
    "ThingsPanelApiKey": "sk_e6e72a3ef2aa",
    "ThingsPanelApiURL": "http://thingspanel.local/api/v1",
}

LIST_OK = {
    "code": 0,
    "msg": "ok",
    "data": {
        "total": 2,
        "list": [
            {"device_name": "Speaker", "device_number": "SN-001", "description": "living room", "mac": "aa:bb"},
            {"device_name": "Lamp", "device_number": "SN-002", "description": ""},
        ],
    },
}

BIND_OK = {
    "code": 0,
    "msg": "ok",
    "data": {"device_name": "Speaker", "device_number": "SN-001", "device_description": "living room"},
}


class Recorder:
    """httpx.MockTransport handler that remembers every request it served."""

    def __init__(self, responder: Callable[[httpx.Request], httpx.Response]):
        self.requests: list[httpx.Request] = []
        self._responder = responder

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._responder(request)

    @property
    def count(self) -> int:
        return len(self.requests)

    def body(self, index: int = -1) -> Any:
        return json.loads(self.requests[index].content)


class FakePublisher:
    def __init__(self, error: Optional[BridgeError] = None):
        self.calls: list[tuple[str, str]] = []
        self._error = error

    async def send_device_status(self, device_id: str, status: str) -> None:
        self.calls.append((device_id, status))
        if self._error is not None:
            raise self._error


def json_response(payload: Any, status_code: int = 200) -> Callable[[httpx.Request], httpx.Response]:
    return lambda request: httpx.Response(status_code, json=payload)


@pytest.fixture
def voucher_json() -> str:
    return json.dumps(VOUCHER)


@pytest.fixture
def make_remote():
    def _make(responder):
        recorder = Recorder(responder)
        return RemotePlatformClient(transport=httpx.MockTransport(recorder)), recorder
    return _make
