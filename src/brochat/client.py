"""
BroChat REST Client

This module provides the client for the BroChat REST API. Every operation
returns a Result: transport failures, server-reported failures and
unexpected responses are all reported through the response code, never
raised.

Architecture:
    - Uses httpx for async HTTP requests
    - Supports dependency injection of the httpx.AsyncClient (for connection
      reuse and for testing with httpx.MockTransport)
    - Holds no per-call state, so one instance can serve concurrent callers
    - No retries and no caching; retry policy belongs to the caller

Usage:
    client = BroChatClient("https://chat.example.com")
    auth = AuthInfo(access_token="...")
    result = await client.get_rooms(auth)
    if result.is_failure:
        print(result.error())
"""

import json
import logging
from dataclasses import dataclass
from http import HTTPStatus
from typing import Any, Callable, Dict, List, Optional

import httpx

from .codes import ResponseCode
from .options import QueryOptions
from .result import Result, make_content_result, make_result
from .routes import (
    ACCEPT_FRIEND_REQUEST_PATH,
    CHANNEL_ID_PARAM,
    CREATE_ROOM_PATH,
    GET_CHANNEL_MESSAGES_PATH,
    GET_CHANNEL_PATH,
    GET_ROOMS_PATH,
    GET_USER_PATH,
    GET_USERS_PATH,
    JOIN_ROOM_PATH,
    ROOM_ID_PARAM,
    SEND_FRIEND_REQUEST_PATH,
    STATUS_CREATED,
    STATUS_NO_CONTENT,
    STATUS_OK,
    build_url,
    is_valid_base_url,
    resolve_path,
)
from .schemas import (
    AcceptFriendRequestRequest,
    Channel,
    ChatMessage,
    CreateRoomRequest,
    ErrorResponse,
    Room,
    Schema,
    SendFriendRequestRequest,
    User,
    UserInfo,
)

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0
DEFAULT_TOKEN_TYPE = "Bearer"
JSON_CONTENT_TYPE = "application/json"

# Used when a non-success response has no decodable error body.
STATUS_CODE_FALLBACKS: Dict[int, ResponseCode] = {
    HTTPStatus.BAD_REQUEST: ResponseCode.VALIDATION,
    HTTPStatus.UNAUTHORIZED: ResponseCode.UNAUTHORIZED,
    HTTPStatus.FORBIDDEN: ResponseCode.FORBIDDEN,
    HTTPStatus.NOT_FOUND: ResponseCode.NOT_FOUND,
}


@dataclass(frozen=True)
class AuthInfo:
    """
    Token material for the Authorization header.

    Attributes:
        access_token: The access token (opaque to this library)
        token_type: Token type, most likely "Bearer"
    """

    access_token: str
    token_type: str = DEFAULT_TOKEN_TYPE

    def header_value(self) -> str:
        """Return the Authorization header value."""
        return f"{self.token_type} {self.access_token}"

    def __repr__(self) -> str:
        return f"AuthInfo(token_type={self.token_type!r}, access_token='***')"


def _require(value: Any, name: str) -> None:
    if value is None or value == "":
        raise ValueError(f"{name} is required")


def status_to_response_code(status_code: int) -> ResponseCode:
    """Map an HTTP status to the generic response code for it."""
    return STATUS_CODE_FALLBACKS.get(status_code, ResponseCode.UNHANDLED)


class BroChatClient:
    """
    Client for the BroChat REST API.

    Attributes:
        base_url: Base URL of the BroChat server (e.g. https://chat.example.com)
    """

    def __init__(
        self,
        base_url: str,
        http_client: Optional[httpx.AsyncClient] = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        """
        Initialize the client.

        Args:
            base_url: Base URL of the BroChat server
            http_client: Optional httpx.AsyncClient to send requests with.
                         The caller owns it and is responsible for closing it.
                         When omitted a client is created per request.
            timeout: Connect/read timeout in seconds for per-request clients
        """
        self.base_url = base_url
        self._http_client = http_client
        self._timeout = timeout

    async def get_user(self, auth: AuthInfo) -> Result[User]:
        """
        Get the calling user's profile.

        Args:
            auth: Token material of the calling user

        Returns:
            Result with the User on success
        """
        return await self._call(
            "GET", GET_USER_PATH, auth, STATUS_OK, parse=User.from_json
        )

    async def get_users(
        self, auth: AuthInfo, options: Optional[QueryOptions] = None
    ) -> Result[List[UserInfo]]:
        """
        List users.

        Args:
            auth: Token material of the calling user
            options: Filters and pagination (exclude_self, exclude_friends,
                     username_filter, page, page_size)

        Returns:
            Result with a list of UserInfo on success
        """
        return await self._call(
            "GET",
            GET_USERS_PATH,
            auth,
            STATUS_OK,
            options=options,
            parse=UserInfo.list_from_json,
        )

    async def get_channel(self, auth: AuthInfo, channel_id: str) -> Result[Channel]:
        """
        Get a channel.

        Args:
            auth: Token material of the calling user
            channel_id: ID of the channel

        Returns:
            Result with the Channel on success
        """
        _require(channel_id, "channel_id")
        path = resolve_path(GET_CHANNEL_PATH, CHANNEL_ID_PARAM, channel_id)
        return await self._call("GET", path, auth, STATUS_OK, parse=Channel.from_json)

    async def get_channel_messages(
        self,
        auth: AuthInfo,
        channel_id: str,
        options: Optional[QueryOptions] = None,
    ) -> Result[List[ChatMessage]]:
        """
        Get a page of messages from a channel.

        Args:
            auth: Token material of the calling user
            channel_id: ID of the channel
            options: Pagination (page, page_size, before_msg)

        Returns:
            Result with a list of ChatMessage on success
        """
        _require(channel_id, "channel_id")
        path = resolve_path(GET_CHANNEL_MESSAGES_PATH, CHANNEL_ID_PARAM, channel_id)
        return await self._call(
            "GET",
            path,
            auth,
            STATUS_OK,
            options=options,
            parse=ChatMessage.list_from_json,
        )

    async def send_friend_request(
        self, auth: AuthInfo, request: SendFriendRequestRequest
    ) -> Result[None]:
        """
        Send a friend request to another user.

        Returns:
            Result with SUCCESS_NO_CONTENT on success. A conflict code means
            a request already exists or the users are already friends.
        """
        _require(request, "request")
        return await self._call(
            "PUT", SEND_FRIEND_REQUEST_PATH, auth, STATUS_NO_CONTENT, body=request
        )

    async def accept_friend_request(
        self, auth: AuthInfo, request: AcceptFriendRequestRequest
    ) -> Result[None]:
        """
        Accept a friend request from another user.

        Returns:
            Result with SUCCESS_NO_CONTENT on success
        """
        _require(request, "request")
        return await self._call(
            "PUT", ACCEPT_FRIEND_REQUEST_PATH, auth, STATUS_NO_CONTENT, body=request
        )

    async def get_rooms(self, auth: AuthInfo) -> Result[List[Room]]:
        """
        Get the rooms the calling user can join but does not belong to.

        Returns:
            Result with a list of Room on success
        """
        return await self._call(
            "GET", GET_ROOMS_PATH, auth, STATUS_OK, parse=Room.list_from_json
        )

    async def create_room(
        self, auth: AuthInfo, request: CreateRoomRequest
    ) -> Result[Room]:
        """
        Create a room.

        Returns:
            Result with the created Room on success
        """
        _require(request, "request")
        return await self._call(
            "POST",
            CREATE_ROOM_PATH,
            auth,
            STATUS_CREATED,
            body=request,
            parse=Room.from_json,
        )

    async def join_room(self, auth: AuthInfo, room_id: str) -> Result[None]:
        """
        Join a room.

        Returns:
            Result with SUCCESS_NO_CONTENT on success
        """
        _require(room_id, "room_id")
        path = resolve_path(JOIN_ROOM_PATH, ROOM_ID_PARAM, room_id)
        return await self._call("PUT", path, auth, STATUS_NO_CONTENT)

    async def _call(
        self,
        method: str,
        path: str,
        auth: AuthInfo,
        expected_status: int,
        body: Optional[Schema] = None,
        options: Optional[QueryOptions] = None,
        parse: Optional[Callable[[bytes], Any]] = None,
    ) -> Result:
        """
        Issue one request and map the outcome to a Result.

        Args:
            method: HTTP method
            path: Resolved resource path
            auth: Token material for the Authorization header
            expected_status: Status that means success for this operation
            body: Optional request body
            options: Optional query options
            parse: Decoder for the success body. None for no-content
                   operations
        """
        _require(auth, "auth")

        if not is_valid_base_url(self.base_url):
            logger.error("Invalid BroChat base URL: %r", self.base_url)
            return make_result(
                ResponseCode.INVALID_HOST_ADDRESS, f"invalid base URL: {self.base_url}"
            )
        url = build_url(self.base_url, path)

        headers = {"Authorization": auth.header_value()}
        content = None
        if body is not None:
            try:
                content = json.dumps(body.to_dict(), allow_nan=False).encode("utf-8")
            except (TypeError, ValueError) as e:
                logger.error("Could not serialize %s request body: %s", path, e)
                return make_result(ResponseCode.REQUEST_FORMATTING_ERROR, str(e))
            headers["Content-Type"] = JSON_CONTENT_TYPE

        params = options.to_params() if options is not None else None

        logger.debug("%s %s params=%s", method, url, params)
        try:
            response = await self._send(method, url, headers, content, params)
        except httpx.TimeoutException as e:
            logger.warning("%s %s timed out: %s", method, url, e)
            return make_result(ResponseCode.CONNECTION_TIMEOUT, str(e))
        except (httpx.InvalidURL, httpx.UnsupportedProtocol) as e:
            logger.error("Invalid request URL %s: %s", url, e)
            return make_result(ResponseCode.INVALID_HOST_ADDRESS, str(e))
        except httpx.TransportError as e:
            logger.warning("%s %s failed to connect: %s", method, url, e)
            return make_result(ResponseCode.CONNECTION_ERROR, str(e))
        except httpx.HTTPError as e:
            logger.error("%s %s failed: %s", method, url, e)
            return make_result(ResponseCode.REQUEST_ERROR, str(e))

        logger.debug("%s %s -> %s", method, url, response.status_code)

        if response.status_code != expected_status:
            return self._error_result(response)

        if parse is None:
            return make_result(ResponseCode.SUCCESS_NO_CONTENT)

        try:
            decoded = parse(response.content)
        except (KeyError, TypeError, ValueError, RecursionError) as e:
            logger.warning("Unexpected response body from %s %s: %s", method, url, e)
            return make_result(ResponseCode.UNEXPECTED_RESPONSE, str(e))

        return make_content_result(ResponseCode.SUCCESS, decoded)

    async def _send(
        self,
        method: str,
        url: str,
        headers: Dict[str, str],
        content: Optional[bytes],
        params: Optional[Dict[str, str]],
    ) -> httpx.Response:
        if self._http_client is not None:
            return await self._http_client.request(
                method, url, headers=headers, content=content, params=params
            )
        async with httpx.AsyncClient(timeout=self._timeout) as client:
            return await client.request(
                method, url, headers=headers, content=content, params=params
            )

    @staticmethod
    def _error_result(response: httpx.Response) -> Result[None]:
        """
        Build the failure Result for a response with an unexpected status.

        A decodable error body is passed through verbatim. Otherwise the
        status code is mapped to a generic code.
        """
        try:
            error = ErrorResponse.from_json(response.content)
        except (KeyError, TypeError, ValueError, RecursionError):
            code = status_to_response_code(response.status_code)
            logger.info(
                "Status %s without error body, mapped to %s",
                response.status_code,
                code.name,
            )
            return make_result(code, f"unexpected status code {response.status_code}")

        logger.info(
            "Server returned status %s with code %s: %s",
            response.status_code,
            error.code,
            error.details,
        )
        return make_result(error.code, *error.details)
