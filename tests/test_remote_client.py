"""Remote platform client: request shape and failure classification."""

import asyncio
import logging

import httpx
import pytest

from device_bridge import voucher
from device_bridge.errors import DecodeError, RemoteLogicError, TransportError
from device_bridge.models.device import DeviceListQuery

from conftest import BIND_OK, LIST_OK, VOUCHER, json_response


def _query(raw: str) -> DeviceListQuery:
    return DeviceListQuery(voucher=raw, service_identifier="xiaozhi", page=1, page_size=20)


class TestListDevices:
    @pytest.mark.asyncio
    async def test_request_url_header_and_body(self, make_remote, voucher_json):
        client, recorder = make_remote(json_response(LIST_OK))
        cred = voucher.decode(voucher_json)

        result = await client.list_devices(cred, _query(voucher_json))

        assert recorder.count == 1
        request = recorder.requests[0]
        assert request.method == "POST"
        assert str(request.url) == VOUCHER["ServerURL"] + "/device/list"
        assert request.headers["x-token"] == VOUCHER["Secret"]
        assert request.headers["content-type"] == "application/json"
        assert recorder.body() == {
            "voucher": voucher_json,
            "service_identifier": "xiaozhi",
            "page": 1,
            "page_size": 20,
        }
        assert result.total == 2
        assert [d.device_number for d in result.items] == ["SN-001", "SN-002"]
        await client.close()

    @pytest.mark.asyncio
    async def test_pagination_is_forwarded_unchecked(self, make_remote, voucher_json):
        client, recorder = make_remote(json_response(LIST_OK))
        query = DeviceListQuery(voucher=voucher_json, service_identifier="", page=-1, page_size=0)
        await client.list_devices(voucher.decode(voucher_json), query)
        assert recorder.body()["page"] == -1
        assert recorder.body()["page_size"] == 0
        await client.close()

    @pytest.mark.asyncio
    async def test_missing_data_yields_empty_list(self, make_remote, voucher_json):
        client, _ = make_remote(json_response({"code": 0, "msg": "ok"}))
        result = await client.list_devices(voucher.decode(voucher_json), _query(voucher_json))
        assert result.total == 0
        assert result.items == []
        await client.close()

    @pytest.mark.asyncio
    async def test_null_list_and_msg_yield_empty_values(self, make_remote, voucher_json):
        client, _ = make_remote(json_response({"code": 0, "msg": None, "data": {"total": 0, "list": None}}))
        result = await client.list_devices(voucher.decode(voucher_json), _query(voucher_json))
        assert result.total == 0
        assert result.items == []
        await client.close()

    @pytest.mark.asyncio
    async def test_null_item_fields_become_empty_strings(self, make_remote, voucher_json):
        payload = {
            "code": 0,
            "msg": "ok",
            "data": {"total": None, "list": [{"device_name": None, "device_number": "SN-001", "description": None}]},
        }
        client, _ = make_remote(json_response(payload))
        result = await client.list_devices(voucher.decode(voucher_json), _query(voucher_json))
        assert result.total == 0
        assert result.items[0].device_name == ""
        assert result.items[0].description == ""
        assert result.items[0].device_number == "SN-001"
        await client.close()

    @pytest.mark.asyncio
    async def test_remote_code_is_a_logic_error(self, make_remote, voucher_json):
        client, _ = make_remote(json_response({"code": 401, "msg": "bad token", "data": None}))
        with pytest.raises(RemoteLogicError) as exc:
            await client.list_devices(voucher.decode(voucher_json), _query(voucher_json))
        assert exc.value.remote_code == 401
        assert "bad token" in str(exc.value)
        await client.close()


class TestGetDeviceDetail:
    @pytest.mark.asyncio
    async def test_request_body_carries_credentials(self, make_remote, voucher_json):
        client, recorder = make_remote(json_response(BIND_OK))
        detail = await client.get_device_detail(voucher.decode(voucher_json), "CODE-123")

        request = recorder.requests[0]
        assert str(request.url) == VOUCHER["ServerURL"] + "/device/bind"
        assert "x-token" not in request.headers
        assert recorder.body() == {
            "secret": VOUCHER["Secret"],
            "agent_id": "agent-1",
            "external_api_key": "sk_e6e72a3ef2aa",
            "device_code": "CODE-123",
        }
        assert detail.device_description == "living room"
        await client.close()

    @pytest.mark.asyncio
    async def test_null_msg_and_description_are_accepted(self, make_remote, voucher_json):
        payload = {
            "code": 0,
            "msg": None,
            "data": {"device_name": "Speaker", "device_number": "SN-001", "device_description": None},
        }
        client, _ = make_remote(json_response(payload))
        detail = await client.get_device_detail(voucher.decode(voucher_json), "CODE-123")
        assert detail.device_name == "Speaker"
        assert detail.device_description == ""
        await client.close()

    @pytest.mark.asyncio
    async def test_null_msg_on_failure_falls_back_to_code(self, make_remote, voucher_json):
        client, _ = make_remote(json_response({"code": 7, "msg": None, "data": None}))
        with pytest.raises(RemoteLogicError) as exc:
            await client.get_device_detail(voucher.decode(voucher_json), "CODE-123")
        assert exc.value.remote_code == 7
        assert "code 7" in str(exc.value)
        await client.close()

    @pytest.mark.asyncio
    async def test_non_zero_code_surfaces_remote_message(self, make_remote, voucher_json):
        client, _ = make_remote(json_response({"code": 5, "msg": "not found"}))
        with pytest.raises(RemoteLogicError) as exc:
            await client.get_device_detail(voucher.decode(voucher_json), "CODE-123")
        assert exc.value.remote_code == 5
        assert "not found" in str(exc.value)
        await client.close()


class TestFailureClassification:
    @pytest.mark.asyncio
    async def test_connect_error_is_transport_error(self, make_remote, voucher_json):
        def refuse(request):
            raise httpx.ConnectError("connection refused", request=request)

        client, _ = make_remote(refuse)
        with pytest.raises(TransportError):
            await client.get_device_detail(voucher.decode(voucher_json), "CODE-123")
        await client.close()

    @pytest.mark.asyncio
    async def test_timeout_is_transport_error(self, make_remote, voucher_json):
        def hang(request):
            raise httpx.ReadTimeout("timed out", request=request)

        client, _ = make_remote(hang)
        with pytest.raises(TransportError):
            await client.list_devices(voucher.decode(voucher_json), _query(voucher_json))
        await client.close()

    @pytest.mark.asyncio
    async def test_non_2xx_is_decode_error(self, make_remote, voucher_json):
        client, _ = make_remote(lambda request: httpx.Response(500, text="boom"))
        with pytest.raises(DecodeError) as exc:
            await client.list_devices(voucher.decode(voucher_json), _query(voucher_json))
        assert exc.value.details == {"status_code": 500}
        await client.close()

    @pytest.mark.asyncio
    async def test_malformed_body_is_decode_error(self, make_remote, voucher_json):
        client, _ = make_remote(lambda request: httpx.Response(200, text="<html>"))
        with pytest.raises(DecodeError):
            await client.get_device_detail(voucher.decode(voucher_json), "CODE-123")
        await client.close()

    @pytest.mark.asyncio
    async def test_wrong_shape_is_decode_error(self, make_remote, voucher_json):
        client, _ = make_remote(json_response({"code": "zero", "data": {"list": "nope"}}))
        with pytest.raises(DecodeError):
            await client.list_devices(voucher.decode(voucher_json), _query(voucher_json))
        await client.close()


def test_secret_never_reaches_the_log(make_remote, voucher_json, caplog):
    client, _ = make_remote(json_response(LIST_OK))
    caplog.set_level(logging.INFO, logger="device_bridge.transport.http")

    async def _go():
        await client.list_devices(voucher.decode(voucher_json), _query(voucher_json))
        await client.close()

    asyncio.run(_go())
    assert "/device/list" in caplog.text
    assert "x-token" in caplog.text
    assert VOUCHER["Secret"] not in caplog.text
