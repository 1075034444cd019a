"""
Feed Client for Real-Time Events

This module provides the FeedClient, which consumes the BroChat real-time
feed over an existing WebSocket endpoint. Incoming frames are decoded as
feed envelopes and dispatched to handlers registered per message type.

Architecture:
    - Uses the websockets library for the connection
    - Supports dependency injection of the connection factory (for testing)
    - Frames that fail to decode are logged, counted and skipped; one bad
      frame never stops the receive loop
    - A handler that raises is logged and counted; the remaining handlers
      and frames still run
    - Unrecognized message types are counted separately from corrupt
      frames, since they are expected while servers roll out new versions

Usage:
    feed = FeedClient("wss://chat.example.com/api/brochat/feed", auth)
    feed.on(FeedMessageType.CHAT_MESSAGE, show_message)
    await feed.connect()
    await feed.receive_feed()
"""

import asyncio
import inspect
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Union

import websockets
from websockets.exceptions import ConnectionClosed, WebSocketException

from .client import AuthInfo
from .errors import (
    MacroParsingError,
    MalformedFeedMessageError,
    MalformedPayloadError,
    UnsupportedContentTypeError,
)
from .feed import (
    FeedCodec,
    FeedMessage,
    FeedMessageType,
    UnrecognizedFeedMessage,
    default_codec,
)
from .macro import MacroType, classify
from .schemas import ChatMessageRequest, SetActiveChannelRequest

logger = logging.getLogger(__name__)

FeedHandler = Callable[[Any], Any]


@dataclass
class FeedStats:
    """
    Counters for frames seen by a FeedClient.

    Attributes:
        received: Frames received
        dispatched: Frames decoded into a known payload
        unrecognized: Frames with a type tag this client does not know
        unsupported_content_type: Frames with a content type with no codec
        malformed: Frames or payloads that failed to parse
        handler_errors: Exceptions raised by registered handlers
    """

    received: int = 0
    dispatched: int = 0
    unrecognized: int = 0
    unsupported_content_type: int = 0
    malformed: int = 0
    handler_errors: int = 0


class FeedClient:
    """
    Client for the BroChat real-time feed.

    Attributes:
        feed_url: WebSocket URL of the feed
        websocket: Active connection (None if not connected)
        stats: Frame counters
    """

    def __init__(
        self,
        feed_url: str,
        auth: AuthInfo,
        websocket_factory: Optional[Callable] = None,
        codec: Optional[FeedCodec] = None,
    ):
        """
        Initialize the feed client.

        Args:
            feed_url: WebSocket URL of the feed
            auth: Token material sent in the Authorization header
            websocket_factory: Optional factory for creating WebSocket
                             connections (for dependency injection/testing)
            codec: Codec registry; the module default when omitted
        """
        self.feed_url = feed_url
        self.websocket = None
        self.stats = FeedStats()
        self._auth = auth
        self._websocket_factory = websocket_factory or websockets.connect
        self._codec = codec or default_codec()
        self._handlers: Dict[FeedMessageType, List[FeedHandler]] = {}
        self._unrecognized_handlers: List[FeedHandler] = []
        self._connected = False

        logger.info("FeedClient initialized for feed: %s", feed_url)

    async def connect(self) -> None:
        """
        Open the WebSocket connection to the feed.

        Raises:
            ConnectionError: If the connection fails
        """
        headers = {"Authorization": self._auth.header_value()}
        try:
            logger.info("Connecting to feed %s...", self.feed_url)
            self.websocket = await self._websocket_factory(
                self.feed_url, additional_headers=headers
            )
            self._connected = True
            logger.info("Connected to feed")
        except (OSError, asyncio.TimeoutError, WebSocketException) as e:
            logger.error("Failed to connect to feed: %s", e)
            raise ConnectionError(f"Could not connect to {self.feed_url}: {e}") from e

    async def disconnect(self) -> None:
        """Close the feed connection."""
        if self.websocket:
            await self.websocket.close()
            self.websocket = None
            self._connected = False
            logger.info("Disconnected from feed")

    @property
    def is_connected(self) -> bool:
        """Check if currently connected to the feed."""
        return self._connected and self.websocket is not None

    def _set_test_mode(self, mock_websocket: object = None) -> None:
        """
        Use a mock connection instead of a real WebSocket.

        Note: This should only be used in tests.

        Raises:
            ValueError: If mock_websocket is not provided
        """
        if mock_websocket is None:
            raise ValueError("_set_test_mode requires a mock_websocket object")
        self._connected = True
        self.websocket = mock_websocket

    def on(
        self, message_type: Union[FeedMessageType, str], handler: FeedHandler
    ) -> None:
        """
        Register a handler for a message type.

        Handlers receive the decoded payload. They may be plain functions
        or coroutine functions.
        """
        self._handlers.setdefault(FeedMessageType(message_type), []).append(handler)

    def on_unrecognized(self, handler: FeedHandler) -> None:
        """Register a handler for envelopes with unknown type tags."""
        self._unrecognized_handlers.append(handler)

    async def send(self, envelope: FeedMessage) -> None:
        """
        Send an envelope over the feed.

        Raises:
            ConnectionError: If not connected
        """
        if not self.is_connected:
            raise ConnectionError("Not connected to the feed")
        logger.debug("Sending feed message %s", envelope.type_tag)
        await self.websocket.send(envelope.to_json())

    async def send_chat_message(self, channel_id: str, content: str) -> None:
        """Send a chat message to a channel (fire-and-forget)."""
        request = ChatMessageRequest(channel_id=channel_id, content=content)
        await self.send(
            self._codec.encode(FeedMessageType.CHAT_MESSAGE_REQUEST, request)
        )

    async def send_chat_line(self, channel_id: str, line: str) -> MacroType:
        """
        Send a line typed by the user.

        Plain text and recognized macros are sent as a chat message; the
        server runs the macro. Unrecognized commands are not sent.

        Returns:
            The macro type of the line (MacroType.NONE for plain text)

        Raises:
            MacroParsingError: If the line is an unrecognized command
        """
        _, macro_type = classify(line)
        if macro_type is MacroType.UNRECOGNIZED:
            command = line.split(maxsplit=1)[0]
            raise MacroParsingError(f"unknown command: {command}")
        await self.send_chat_message(channel_id, line)
        return macro_type

    async def set_active_channel(self, channel_id: str) -> None:
        """Tell the server which channel the user is looking at."""
        request = SetActiveChannelRequest(channel_id=channel_id)
        await self.send(
            self._codec.encode(FeedMessageType.SET_ACTIVE_CHANNEL_REQUEST, request)
        )

    async def receive_feed(self) -> None:
        """
        Receive and dispatch frames until the connection closes.

        Raises:
            ConnectionError: If not connected
        """
        if not self.is_connected:
            raise ConnectionError("Not connected to the feed")

        logger.info("Starting feed receive loop")

        try:
            async for frame in self.websocket:
                await self.process_frame(frame)
        except ConnectionClosed:
            logger.warning("Feed connection closed by server")
            self._connected = False

    async def process_frame(self, frame: Union[str, bytes]) -> Optional[Any]:
        """
        Decode one raw frame and dispatch it.

        Args:
            frame: Raw envelope frame

        Returns:
            The decoded payload, an UnrecognizedFeedMessage, or None when
            the frame could not be decoded
        """
        self.stats.received += 1

        try:
            envelope = FeedMessage.from_bytes(frame)
            payload = self._codec.decode(envelope)
        except UnsupportedContentTypeError as e:
            self.stats.unsupported_content_type += 1
            logger.warning("Skipping feed frame: %s", e)
            return None
        except (MalformedFeedMessageError, MalformedPayloadError) as e:
            self.stats.malformed += 1
            logger.error("Skipping malformed feed frame: %s", e)
            return None

        if isinstance(payload, UnrecognizedFeedMessage):
            self.stats.unrecognized += 1
            for handler in self._unrecognized_handlers:
                await self._call_handler(handler, payload)
            return payload

        self.stats.dispatched += 1
        handlers = self._handlers.get(envelope.type, [])
        if not handlers:
            logger.debug("No handler for feed message %s", envelope.type_tag)
        for handler in handlers:
            await self._call_handler(handler, payload)
        return payload

    async def _call_handler(self, handler: FeedHandler, payload: Any) -> None:
        """Run one handler. A handler that raises is logged and counted."""
        try:
            result = handler(payload)
            if inspect.isawaitable(result):
                await result
        except Exception:
            self.stats.handler_errors += 1
            logger.exception("Feed handler %r failed", handler)
