"""Unit tests for the outbound Response envelope."""

import json

import pytest
from pydantic import ValidationError

from githistory_bridge.protocol.responses import Response
from githistory_bridge.types import Avatar, RefType


class TestResponseCreation:
    def test_result(self):
        response = Response.result("r1", {"count": 3})

        assert response.request_id == "r1"
        assert response.payload == {"count": 3}
        assert response.is_error() is False

    def test_failure(self):
        response = Response.failure("r1", {"code": "HANDLER_ERROR", "message": "boom"})

        assert response.is_error() is True
        assert response.payload is None

    def test_payload_and_error_are_exclusive(self):
        with pytest.raises(ValidationError):
            Response(request_id="r1", payload={"a": 1}, error={"code": "X", "message": "y"})


class TestResponseWireFormat:
    def test_success_message_has_payload_only(self):
        message = Response.result("r1", [1, 2]).to_message()

        assert message == {"requestId": "r1", "payload": [1, 2]}

    def test_success_without_result(self):
        message = Response.result("r1").to_message()

        assert message == {"requestId": "r1", "payload": None}

    def test_error_message_has_error_only(self):
        message = Response.failure("r2", {"code": "UNKNOWN_COMMAND", "message": "nope"}).to_message()

        assert message == {"requestId": "r2", "error": {"code": "UNKNOWN_COMMAND", "message": "nope"}}

    def test_nested_models_serialize_with_wire_names(self):
        avatar = Avatar(login="ada", avatar_url="https://a.test/ada.png")
        message = Response.result("r3", [avatar]).to_message()

        assert message["payload"][0]["avatarUrl"] == "https://a.test/ada.png"

    def test_message_is_json_serializable(self):
        payload = {"refs": [{"type": RefType.TAG, "name": "v1"}]}
        message = Response.result("r4", payload).to_message()

        assert json.loads(json.dumps(message)) == {
            "requestId": "r4",
            "payload": {"refs": [{"type": 2, "name": "v1"}]},
        }
