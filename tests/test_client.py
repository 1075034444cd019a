"""
Tests for the BroChat REST Client

Uses httpx.MockTransport in place of a server so the full request path
(URL building, headers, body encoding, status mapping and response
decoding) runs without a network.

Tests for:
- Request construction for every operation
- Success results with and without content
- Server error bodies passed through verbatim
- Status fallbacks when the error body is missing
- Transport failures mapped to client failure codes
- Unexpected response bodies
"""

import json

import httpx
import pytest

from brochat import AuthInfo, BroChatClient, QueryOptions, ResponseCode
from brochat.schemas import (
    AcceptFriendRequestRequest,
    CreateRoomRequest,
    RoomMembershipModel,
    SendFriendRequestRequest,
)

BASE_URL = "https://chat.example.com"
AUTH = AuthInfo(access_token="token-123")
DEEPLY_NESTED_BODY = b"[" * 100000 + b"]" * 100000


def user_info_data(user_id="u1", username="alice"):
    return {
        "id": user_id,
        "username": username,
        "last_online_utc": "2024-03-01T12:30:00Z",
    }


def room_data(room_id="room-1"):
    return {
        "id": room_id,
        "name": "Board Games",
        "channel_id": "channel-9",
        "owner": user_info_data(),
        "membership_model": "public",
        "created_at_utc": "2024-02-01T08:00:00Z",
    }


class RecordingHandler:
    """Mock server that records requests and replies with a fixed response."""

    def __init__(self, status_code=200, json_body=None, content=b"", error=None):
        self.status_code = status_code
        self.json_body = json_body
        self.content = content
        self.error = error
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error(f"simulated {self.error.__name__}", request=request)
        if self.json_body is not None:
            return httpx.Response(self.status_code, json=self.json_body)
        return httpx.Response(self.status_code, content=self.content)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


def make_client(handler, base_url=BASE_URL):
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return BroChatClient(base_url, http_client=http_client)


# ----------------------------------------------------------------------------
# Successful operations
# ----------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_get_user():
    """Test that get_user decodes the profile and sends the bearer token."""
    handler = RecordingHandler(
        json_body={
            "id": "me",
            "username": "me",
            "relationships": [],
            "rooms": [room_data()],
            "last_online_utc": "2024-03-01T12:30:00Z",
            "created_at_utc": "2023-01-01T00:00:00Z",
        }
    )
    result = await make_client(handler).get_user(AUTH)

    assert result.code is ResponseCode.SUCCESS
    assert result.content.username == "me"
    assert result.content.rooms[0].id == "room-1"
    assert handler.last.method == "GET"
    assert handler.last.url.path == "/api/brochat/user"
    assert handler.last.headers["Authorization"] == "Bearer token-123"


@pytest.mark.asyncio
async def test_get_users_sends_query_options():
    handler = RecordingHandler(
        json_body=[user_info_data("u1", "alice"), user_info_data("u2", "bob")]
    )
    options = QueryOptions(page=1, page_size=500, exclude_self=True)
    result = await make_client(handler).get_users(AUTH, options)

    assert not result.is_failure
    assert [user.username for user in result.content] == ["alice", "bob"]
    params = handler.last.url.params
    assert handler.last.url.path == "/api/brochat/users"
    assert params["page"] == "1"
    assert params["page-size"] == "500"
    assert params["exclude-self"] == "true"
    assert "exclude-friends" not in params


@pytest.mark.asyncio
async def test_get_channel_substitutes_channel_id():
    handler = RecordingHandler(
        json_body={"id": "chan-7", "type": 0, "users": [user_info_data()]}
    )
    result = await make_client(handler).get_channel(AUTH, "chan-7")

    assert result.code is ResponseCode.SUCCESS
    assert result.content.id == "chan-7"
    assert handler.last.url.path == "/api/brochat/channels/chan-7"


@pytest.mark.asyncio
async def test_get_channel_messages():
    handler = RecordingHandler(
        json_body=[
            {
                "id": "m1",
                "channel_id": "chan-7",
                "sender_user_id": "u1",
                "content": "hello",
                "recieved_at_utc": "2024-03-01T12:30:00Z",
            }
        ]
    )
    options = QueryOptions(before_msg="m9")
    result = await make_client(handler).get_channel_messages(AUTH, "chan-7", options)

    assert result.content[0].content == "hello"
    assert handler.last.url.path == "/api/brochat/channels/chan-7/messages"
    assert handler.last.url.params["before-msg"] == "m9"


@pytest.mark.asyncio
async def test_get_rooms_empty_list():
    handler = RecordingHandler(json_body=[])
    result = await make_client(handler).get_rooms(AUTH)

    assert result.code is ResponseCode.SUCCESS
    assert result.content == []
    assert handler.last.url.path == "/api/brochat/rooms"


@pytest.mark.asyncio
async def test_create_room():
    """Test that create_room posts a JSON body and expects 201."""
    handler = RecordingHandler(status_code=201, json_body=room_data("new-room"))
    request = CreateRoomRequest(
        name="Board Games", membership_model=RoomMembershipModel.FRIENDS
    )
    result = await make_client(handler).create_room(AUTH, request)

    assert result.code is ResponseCode.SUCCESS
    assert result.content.id == "new-room"
    assert handler.last.method == "POST"
    assert handler.last.headers["Content-Type"] == "application/json"
    assert json.loads(handler.last.content) == {
        "name": "Board Games",
        "membership_model": "friends",
    }


@pytest.mark.asyncio
async def test_join_room_no_content():
    handler = RecordingHandler(status_code=204)
    result = await make_client(handler).join_room(AUTH, "room-1")

    assert result.code is ResponseCode.SUCCESS_NO_CONTENT
    assert result.content is None
    assert result.error() is None
    assert handler.last.method == "PUT"
    assert handler.last.url.path == "/api/brochat/rooms/room-1/join"
    assert handler.last.content == b""
    assert "Content-Type" not in handler.last.headers


@pytest.mark.asyncio
async def test_send_friend_request():
    handler = RecordingHandler(status_code=204)
    request = SendFriendRequestRequest(requested_user_id="bob")
    result = await make_client(handler).send_friend_request(AUTH, request)

    assert result.code is ResponseCode.SUCCESS_NO_CONTENT
    assert handler.last.method == "PUT"
    assert handler.last.url.path == "/api/brochat/friends/send-friend-request"
    assert json.loads(handler.last.content) == {"requested_user_id": "bob"}


@pytest.mark.asyncio
async def test_accept_friend_request():
    handler = RecordingHandler(status_code=204)
    request = AcceptFriendRequestRequest(initiating_user_id="alice")
    result = await make_client(handler).accept_friend_request(AUTH, request)

    assert result.code is ResponseCode.SUCCESS_NO_CONTENT
    assert handler.last.url.path == "/api/brochat/friends/accept-friend-request"
    assert json.loads(handler.last.content) == {"initiating_user_id": "alice"}


@pytest.mark.asyncio
async def test_base_url_path_is_replaced():
    handler = RecordingHandler(json_body=[])
    await make_client(handler, base_url="https://chat.example.com/ignored/").get_rooms(
        AUTH
    )
    assert str(handler.last.url) == "https://chat.example.com/api/brochat/rooms"


# ----------------------------------------------------------------------------
# Server-reported failures
# ----------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_server_error_body_is_passed_through():
    """Test that the server's code and details are kept verbatim."""
    handler = RecordingHandler(
        status_code=409, json_body={"code": 5, "details": ["already friends"]}
    )
    request = SendFriendRequestRequest(requested_user_id="bob")
    result = await make_client(handler).send_friend_request(AUTH, request)

    assert result.code is ResponseCode.CONFLICT
    assert result.details == ("already friends",)
    assert str(result.error()) == (
        "the request conflicts with the current state: already friends"
    )


@pytest.mark.asyncio
@pytest.mark.parametrize("server_code", [128, 129, 1000])
async def test_error_body_with_success_code_uses_status_fallback(server_code):
    """Test that an error status never turns into a successful Result."""
    handler = RecordingHandler(
        status_code=404, json_body={"code": server_code, "details": []}
    )
    result = await make_client(handler).get_user(AUTH)

    assert result.code is ResponseCode.NOT_FOUND
    assert result.is_failure
    assert result.content is None
    assert result.details == ("unexpected status code 404",)


@pytest.mark.asyncio
async def test_unknown_server_code_is_preserved():
    handler = RecordingHandler(
        status_code=422, json_body={"code": 12, "details": ["room limit reached"]}
    )
    result = await make_client(handler).create_room(AUTH, CreateRoomRequest("x"))

    assert result.code == 12
    assert result.is_failure
    assert result.content is None
    assert result.error().message == "unknown error"


@pytest.mark.asyncio
async def test_not_found_without_body():
    handler = RecordingHandler(status_code=404)
    result = await make_client(handler).get_user(AUTH)

    assert result.code is ResponseCode.NOT_FOUND
    assert result.is_failure
    assert result.content is None
    assert result.error().message == "resource not found"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "status,code",
    [
        (400, ResponseCode.VALIDATION),
        (401, ResponseCode.UNAUTHORIZED),
        (403, ResponseCode.FORBIDDEN),
        (500, ResponseCode.UNHANDLED),
        (200, ResponseCode.UNHANDLED),
    ],
)
async def test_status_fallbacks(status, code):
    """Test statuses without an error body, including a wrong success status."""
    handler = RecordingHandler(status_code=status, content=b"<html>oops</html>")
    result = await make_client(handler).join_room(AUTH, "room-1")

    assert result.code is code
    assert result.details == (f"unexpected status code {status}",)


# ----------------------------------------------------------------------------
# Client-side failures
# ----------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_create_room_with_bad_body_is_unexpected_response():
    handler = RecordingHandler(status_code=201, content=b'{"id": 42}')
    result = await make_client(handler).create_room(AUTH, CreateRoomRequest("x"))

    assert result.code is ResponseCode.UNEXPECTED_RESPONSE
    assert result.content is None


@pytest.mark.asyncio
async def test_get_rooms_with_non_json_body_is_unexpected_response():
    handler = RecordingHandler(status_code=200, content=b"not json")
    result = await make_client(handler).get_rooms(AUTH)

    assert result.code is ResponseCode.UNEXPECTED_RESPONSE


@pytest.mark.asyncio
async def test_deeply_nested_success_body_is_unexpected_response():
    handler = RecordingHandler(status_code=200, content=DEEPLY_NESTED_BODY)
    result = await make_client(handler).get_rooms(AUTH)

    assert result.code is ResponseCode.UNEXPECTED_RESPONSE
    assert result.content is None


@pytest.mark.asyncio
async def test_deeply_nested_error_body_uses_status_fallback():
    handler = RecordingHandler(status_code=500, content=DEEPLY_NESTED_BODY)
    result = await make_client(handler).get_rooms(AUTH)

    assert result.code is ResponseCode.UNHANDLED
    assert result.details == ("unexpected status code 500",)


@pytest.mark.asyncio
async def test_join_room_timeout():
    handler = RecordingHandler(error=httpx.ConnectTimeout)
    result = await make_client(handler).join_room(AUTH, "room-1")

    assert result.code is ResponseCode.CONNECTION_TIMEOUT


@pytest.mark.asyncio
async def test_join_room_read_timeout():
    handler = RecordingHandler(error=httpx.ReadTimeout)
    result = await make_client(handler).join_room(AUTH, "room-1")

    assert result.code is ResponseCode.CONNECTION_TIMEOUT


@pytest.mark.asyncio
async def test_join_room_connection_refused():
    """Test that a refused connection is distinct from a timeout."""
    handler = RecordingHandler(error=httpx.ConnectError)
    result = await make_client(handler).join_room(AUTH, "room-1")

    assert result.code is ResponseCode.CONNECTION_ERROR


@pytest.mark.asyncio
async def test_other_transport_error():
    handler = RecordingHandler(error=httpx.RemoteProtocolError)
    result = await make_client(handler).get_rooms(AUTH)

    assert result.code is ResponseCode.CONNECTION_ERROR


@pytest.mark.asyncio
@pytest.mark.parametrize("base_url", ["", "chat.example.com", "ftp://chat.example.com"])
async def test_invalid_base_url(base_url):
    handler = RecordingHandler(json_body=[])
    result = await make_client(handler, base_url=base_url).get_rooms(AUTH)

    assert result.code is ResponseCode.INVALID_HOST_ADDRESS
    assert handler.requests == []


@pytest.mark.asyncio
async def test_unserializable_body_is_formatting_error():
    handler = RecordingHandler(status_code=201, json_body=room_data())
    request = CreateRoomRequest(name=object())
    result = await make_client(handler).create_room(AUTH, request)

    assert result.code is ResponseCode.REQUEST_FORMATTING_ERROR
    assert handler.requests == []


# ----------------------------------------------------------------------------
# Contract violations
# ----------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_missing_channel_id_raises():
    client = make_client(RecordingHandler())
    with pytest.raises(ValueError):
        await client.get_channel(AUTH, "")


@pytest.mark.asyncio
async def test_missing_request_raises():
    client = make_client(RecordingHandler())
    with pytest.raises(ValueError):
        await client.create_room(AUTH, None)


@pytest.mark.asyncio
async def test_missing_auth_raises():
    client = make_client(RecordingHandler())
    with pytest.raises(ValueError):
        await client.get_rooms(None)
