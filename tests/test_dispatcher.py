"""
tests/test_dispatcher.py

End-to-end pipeline against a stub kweenkl API.
"""

import asyncio
import json

import httpx
import pytest

from core.dispatcher import Dispatcher
from core.errors import UnknownOperationError
from core.models import Operation
from tests.conftest import API_URL, DEVICE_TOKEN


def make_dispatcher(settings, stub_api):
    return Dispatcher(settings, transport=stub_api.transport)


class TestAvailableOperations:

    def test_without_device_token(self, settings, stub_api):
        dispatcher = make_dispatcher(settings, stub_api)

        assert dispatcher.available_operations() == [Operation.SEND_NOTIFICATION]

    def test_with_device_token(self, admin_settings, stub_api):
        dispatcher = make_dispatcher(admin_settings, stub_api)

        assert dispatcher.available_operations() == list(Operation)


class TestSendNotification:

    @pytest.mark.asyncio
    async def test_success(self, settings, stub_api):
        stub_api.respond(200, {"subscribers_notified": 5, "notification_id": "abc"})
        dispatcher = make_dispatcher(settings, stub_api)

        result = await dispatcher.dispatch(
            "kweenkl", {"webhook_token": "tok-1", "message": "Deploy finished"}
        )

        assert not result.is_error
        assert "5" in result.display_text
        assert "abc" in result.display_text
        assert len(stub_api.requests) == 1
        request = stub_api.last_request
        assert request.method == "POST"
        assert str(request.url) == f"{API_URL}/webhook/tok-1"
        assert request.headers["content-type"] == "application/json"
        assert "authorization" not in request.headers

    @pytest.mark.asyncio
    async def test_only_message_key_is_sent(self, settings, stub_api):
        dispatcher = make_dispatcher(settings, stub_api)

        await dispatcher.dispatch("kweenkl", {"webhook_token": "t", "message": "m"})

        assert stub_api.last_body == {"message": "m"}

    @pytest.mark.asyncio
    async def test_optional_fields_are_sent(self, settings, stub_api):
        dispatcher = make_dispatcher(settings, stub_api)

        await dispatcher.dispatch("kweenkl", {
            "webhook_token": "t",
            "message": "m",
            "title": "Build",
            "priority": "high",
            "payload": {"build": 42},
        })

        assert stub_api.last_body == {
            "message": "m",
            "title": "Build",
            "priority": "high",
            "payload": {"build": 42},
        }

    @pytest.mark.asyncio
    @pytest.mark.parametrize("params", [
        {"message": "m"},
        {"webhook_token": "t"},
        {"webhook_token": "", "message": "m"},
        {"webhook_token": "t", "message": ""},
        {"webhook_token": "t", "message": "m", "priority": "urgent"},
    ])
    async def test_invalid_input_makes_no_request(self, settings, stub_api, params):
        dispatcher = make_dispatcher(settings, stub_api)

        result = await dispatcher.dispatch("kweenkl", params)

        assert result.is_error
        assert stub_api.requests == []

    @pytest.mark.asyncio
    async def test_remote_error_message(self, settings, stub_api):
        stub_api.respond(404, {"error": {"message": "Channel not found"}})
        dispatcher = make_dispatcher(settings, stub_api)

        result = await dispatcher.dispatch("kweenkl", {"webhook_token": "t", "message": "m"})

        assert result.is_error
        assert "Channel not found" in result.display_text

    @pytest.mark.asyncio
    async def test_remote_error_plain_text(self, settings, stub_api):
        stub_api.respond(404, text="Not Found")
        dispatcher = make_dispatcher(settings, stub_api)

        result = await dispatcher.dispatch("kweenkl", {"webhook_token": "t", "message": "m"})

        assert result.is_error
        assert "Not Found" in result.display_text

    @pytest.mark.asyncio
    async def test_transport_failure(self, settings, stub_api):
        stub_api.fail(httpx.ConnectError("Connection refused"))
        dispatcher = make_dispatcher(settings, stub_api)

        result = await dispatcher.dispatch("kweenkl", {"webhook_token": "t", "message": "m"})

        assert result.is_error
        assert result.display_text == "❌ Failed to send notification: Connection refused"
        assert len(stub_api.requests) == 1

    @pytest.mark.asyncio
    async def test_token_httpx_cannot_put_in_a_url(self, settings, stub_api):
        dispatcher = make_dispatcher(settings, stub_api)

        result = await dispatcher.dispatch(
            "kweenkl", {"webhook_token": "tok\nen", "message": "m"}
        )

        assert result.is_error
        assert result.display_text.startswith("❌ Failed to send notification: ")
        assert stub_api.requests == []

    @pytest.mark.asyncio
    async def test_concurrent_sends_do_not_interfere(self, settings):
        def handler(request):
            token = request.url.path.rsplit("/", 1)[-1]
            body = json.loads(request.content)
            return httpx.Response(200, json={
                "subscribers_notified": len(body["message"]),
                "notification_id": f"id-{token}",
            })

        dispatcher = Dispatcher(settings, transport=httpx.MockTransport(handler))
        tokens = [f"tok{i}" for i in range(10)]

        results = await asyncio.gather(*[
            dispatcher.dispatch("kweenkl", {"webhook_token": t, "message": "x" * (i + 1)})
            for i, t in enumerate(tokens)
        ])

        for i, (token, result) in enumerate(zip(tokens, results)):
            assert not result.is_error
            assert f"Notification ID: id-{token}" in result.display_text
            assert f"{i + 1} subscriber(s) notified" in result.display_text


class TestUnknownOperation:

    @pytest.mark.asyncio
    async def test_unknown_name_raises(self, admin_settings, stub_api):
        dispatcher = make_dispatcher(admin_settings, stub_api)

        with pytest.raises(UnknownOperationError) as exc_info:
            await dispatcher.dispatch("kweenkl_launch_rocket", {})

        assert exc_info.value.name == "kweenkl_launch_rocket"
        assert stub_api.requests == []


class TestChannelManagement:

    @pytest.mark.asyncio
    @pytest.mark.parametrize("name, params", [
        ("kweenkl_list_channels", {}),
        ("kweenkl_create_channel", {"name": "Alerts"}),
        ("kweenkl_update_channel", {"channel_id": "ch_1", "name": "x"}),
        ("kweenkl_delete_channel", {"channel_id": "ch_1"}),
    ])
    async def test_requires_device_token(self, settings, stub_api, name, params):
        dispatcher = make_dispatcher(settings, stub_api)

        result = await dispatcher.dispatch(name, params)

        assert result.is_error
        assert "KWEENKL_DEVICE_TOKEN" in result.display_text
        assert stub_api.requests == []

    @pytest.mark.asyncio
    async def test_list_empty(self, admin_settings, stub_api):
        stub_api.respond(200, {"channels": []})
        dispatcher = make_dispatcher(admin_settings, stub_api)

        result = await dispatcher.dispatch("kweenkl_list_channels")

        assert not result.is_error
        assert "No channels found" in result.display_text
        request = stub_api.last_request
        assert request.method == "GET"
        assert request.headers["authorization"] == f"Bearer {DEVICE_TOKEN}"

    @pytest.mark.asyncio
    async def test_create(self, admin_settings, stub_api):
        stub_api.respond(201, {
            "channel": {"id": "ch_3", "name": "Alerts"},
            "webhook_url": "https://api.kweenkl.com/webhook/abc",
        })
        dispatcher = make_dispatcher(admin_settings, stub_api)

        result = await dispatcher.dispatch(
            "kweenkl_create_channel", {"name": "Alerts", "color": "#FF0000"}
        )

        assert not result.is_error
        assert "ch_3" in result.display_text
        assert stub_api.last_body == {"name": "Alerts", "color": "#FF0000"}

    @pytest.mark.asyncio
    async def test_update_without_fields_makes_no_request(self, admin_settings, stub_api):
        dispatcher = make_dispatcher(admin_settings, stub_api)

        result = await dispatcher.dispatch("kweenkl_update_channel", {"channel_id": "ch_1"})

        assert result.is_error
        assert "No fields to update" in result.display_text
        assert stub_api.requests == []

    @pytest.mark.asyncio
    async def test_update_sends_explicit_empty_string(self, admin_settings, stub_api):
        stub_api.respond(200, {"channel": {"id": "ch_1", "name": "A", "webhook_url": "u"}})
        dispatcher = make_dispatcher(admin_settings, stub_api)

        await dispatcher.dispatch(
            "kweenkl_update_channel", {"channel_id": "ch_1", "description": ""}
        )

        assert stub_api.last_request.method == "PATCH"
        assert str(stub_api.last_request.url) == f"{API_URL}/api/v1/channels/ch_1"
        assert stub_api.last_body == {"description": ""}

    @pytest.mark.asyncio
    async def test_delete(self, admin_settings, stub_api):
        stub_api.respond(200, {"deleted_channel": {"id": "ch_1", "name": "Old"}})
        dispatcher = make_dispatcher(admin_settings, stub_api)

        result = await dispatcher.dispatch("kweenkl_delete_channel", {"channel_id": "ch_1"})

        assert result.display_text == '✅ Channel "Old" deleted successfully.'
        assert stub_api.last_request.method == "DELETE"
        assert stub_api.last_request.content == b""

    @pytest.mark.asyncio
    async def test_delete_remote_error(self, admin_settings, stub_api):
        stub_api.respond(403, {"error": {"message": "Not your channel"}})
        dispatcher = make_dispatcher(admin_settings, stub_api)

        result = await dispatcher.dispatch("kweenkl_delete_channel", {"channel_id": "ch_1"})

        assert result.is_error
        assert result.display_text == "❌ Failed to delete channel: Not your channel"
