"""Tests for pushbullet_endpoints: operation table and path building."""

import json

import pytest

from pushbullet_endpoints import DEFAULT_ENDPOINTS, OPERATIONS, PushbulletEndpoints, prepare_call

EXPECTED = {
    "send_ephemeral": ("POST", "/v2/ephemerals"),
    "get_chats": ("GET", "/v2/chats"),
    "create_chat": ("POST", "/v2/chats"),
    "update_chat": ("POST", "/v2/chats/{iden}"),
    "delete_chat": ("DELETE", "/v2/chats/{iden}"),
    "get_devices": ("GET", "/v2/devices"),
    "create_device": ("POST", "/v2/devices"),
    "update_device": ("POST", "/v2/devices/{iden}"),
    "delete_device": ("DELETE", "/v2/devices/{iden}"),
    "get_pushes": ("GET", "/v2/pushes"),
    "create_push": ("POST", "/v2/pushes"),
    "update_push": ("POST", "/v2/pushes/{iden}"),
    "delete_push": ("DELETE", "/v2/pushes/{iden}"),
    "delete_pushes": ("DELETE", "/v2/pushes"),
    "get_subscriptions": ("GET", "/v2/subscriptions"),
    "create_subscription": ("POST", "/v2/subscriptions"),
    "update_subscription": ("POST", "/v2/subscriptions/{iden}"),
    "delete_subscription": ("DELETE", "/v2/subscriptions/{iden}"),
    "get_channel_info": ("GET", "/v2/channel-info"),
    "get_user": ("GET", "/v2/users/me"),
}


class TestOperationTable:
    def test_same_operations(self):
        assert set(OPERATIONS) == set(EXPECTED)

    @pytest.mark.parametrize("name", sorted(EXPECTED))
    def test_verb_and_path(self, name):
        method, template = EXPECTED[name]
        call = prepare_call(name, iden="abc123", data={"k": "v"})
        assert call.method == method
        assert call.path == template.format(iden="abc123")

    def test_only_posts_carry_body(self):
        for name, op in OPERATIONS.items():
            assert op.with_data == (op.method == "POST"), name

    def test_every_operation_documented(self):
        assert all(op.doc for op in OPERATIONS.values())


class TestPrepareCall:
    def test_data_passed_through(self):
        data = {"type": "note", "title": "t"}
        assert prepare_call("create_push", data=data).data == {"type": "note", "title": "t"}

    def test_nested_values_become_json_fields(self):
        data = {"type": "push", "push": {"type": "mirror", "body": "hello"}}
        call = prepare_call("send_ephemeral", data=data)
        assert call.data["type"] == "push"
        assert json.loads(call.data["push"]) == {"type": "mirror", "body": "hello"}
        assert data["push"] == {"type": "mirror", "body": "hello"}

    def test_list_values_become_json_fields(self):
        call = prepare_call("create_push", data={"type": "list", "items": ["a", "b"]})
        assert call.data["items"] == '["a", "b"]'

    def test_no_data_sends_no_body(self):
        assert prepare_call("create_chat").data is None

    def test_data_dropped_for_get_and_delete(self):
        assert prepare_call("get_pushes", data={"x": 1}).data is None
        assert prepare_call("delete_push", iden="p1", data={"x": 1}).data is None

    def test_iden_is_single_path_segment(self):
        assert prepare_call("delete_device", iden="a/b c").path == "/v2/devices/a%2Fb%20c"

    def test_unknown_operation(self):
        with pytest.raises(KeyError):
            prepare_call("get_everything")

    def test_custom_endpoints(self):
        endpoints = PushbulletEndpoints(pushes="/v3/pushes")
        assert prepare_call("delete_push", iden="p1", endpoints=endpoints).path == "/v3/pushes/p1"
        assert DEFAULT_ENDPOINTS.pushes == "/v2/pushes"
