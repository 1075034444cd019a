"""
Feed Envelope Protocol

Real-time events travel over the feed as FeedMessage envelopes:

    {
        "type": "brochat:feed_message_type:<name>",
        "content_type": "application/json",
        "content": "<base64 of the encoded payload>"
    }

The type tag selects the payload shape and the content type selects the
decoder. A consumer must check both before touching the content bytes.

Forward compatibility:
    - An unknown type tag decodes to UnrecognizedFeedMessage. It is logged
      and returned, never raised, because sender and receiver may run
      different protocol versions.
    - A known tag with a content type that has no registered codec raises
      UnsupportedContentTypeError ("we don't speak this format").
    - A registered codec that cannot parse the payload raises
      MalformedPayloadError ("the sender sent garbage").

Envelopes carry no sequencing metadata. Ordering across envelopes is
whatever the underlying connection provides.
"""

import base64
import binascii
import json
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Type, Union

from .errors import (
    MalformedFeedMessageError,
    MalformedPayloadError,
    SerializationError,
    UnsupportedContentTypeError,
)
from .schemas.base import Schema
from .schemas.channel import ChatMessage
from .schemas.events import (
    ChatMessageRequest,
    ChatNotification,
    FriendRequestAcceptedEvent,
    FriendRequestReceivedEvent,
    RoomCreatedEvent,
    SetActiveChannelRequest,
    UserJoinedRoomEvent,
    UserOfflineEvent,
    UserOnlineEvent,
    UserProfileUpdatedEvent,
)

logger = logging.getLogger(__name__)

JSON_CONTENT_TYPE = "application/json"


class FeedMessageType(str, Enum):
    """Type tags of feed envelopes. The string values are the wire format."""

    CHAT_MESSAGE_REQUEST = "brochat:feed_message_type:chat_message_request"
    SET_ACTIVE_CHANNEL_REQUEST = (
        "brochat:feed_message_type:set_active_channel_request"
    )
    USER_ONLINE_EVENT = "brochat:feed_message_type:user_online_event"
    USER_OFFLINE_EVENT = "brochat:feed_message_type:user_offline_event"
    CHAT_NOTIFICATION = "brochat:feed_message_type:chat_notification"
    CHAT_MESSAGE = "brochat:feed_message_type:chat_message"
    # The misspelling is what servers send.
    FRIEND_REQUEST_RECEIVED = "brochat:feed_message_type:friend_request_recieved"
    FRIEND_REQUEST_ACCEPTED = "brochat:feed_message_type:friend_request_accepted"
    ROOM_CREATED = "brochat:feed_message_type:room_created"
    USER_JOINED_ROOM = "brochat:feed_message_type:user_joined_room"
    USER_PROFILE_UPDATED = "brochat:feed_message_type:user_profile_updated"


PAYLOAD_TYPES: Dict[FeedMessageType, Type[Schema]] = {
    FeedMessageType.CHAT_MESSAGE_REQUEST: ChatMessageRequest,
    FeedMessageType.SET_ACTIVE_CHANNEL_REQUEST: SetActiveChannelRequest,
    FeedMessageType.USER_ONLINE_EVENT: UserOnlineEvent,
    FeedMessageType.USER_OFFLINE_EVENT: UserOfflineEvent,
    FeedMessageType.CHAT_NOTIFICATION: ChatNotification,
    FeedMessageType.CHAT_MESSAGE: ChatMessage,
    FeedMessageType.FRIEND_REQUEST_RECEIVED: FriendRequestReceivedEvent,
    FeedMessageType.FRIEND_REQUEST_ACCEPTED: FriendRequestAcceptedEvent,
    FeedMessageType.ROOM_CREATED: RoomCreatedEvent,
    FeedMessageType.USER_JOINED_ROOM: UserJoinedRoomEvent,
    FeedMessageType.USER_PROFILE_UPDATED: UserProfileUpdatedEvent,
}


@dataclass(frozen=True)
class FeedMessage:
    """
    Envelope for feed messages.

    Attributes:
        type: Type tag. A FeedMessageType member for known tags, or the raw
              string for tags this client does not know
        content_type: How the content bytes are encoded
        content: The encoded payload
    """

    type: Union[FeedMessageType, str]
    content_type: str
    content: bytes

    @property
    def type_tag(self) -> str:
        """The type tag as a plain string."""
        if isinstance(self.type, FeedMessageType):
            return self.type.value
        return self.type

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the JSON envelope dictionary."""
        return {
            "type": self.type_tag,
            "content_type": self.content_type,
            "content": base64.b64encode(self.content).decode("ascii"),
        }

    def to_json(self) -> str:
        """Convert to a JSON envelope string."""
        return json.dumps(self.to_dict())

    def to_bytes(self) -> bytes:
        """Convert to a UTF-8 encoded JSON envelope frame."""
        return self.to_json().encode("utf-8")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FeedMessage":
        """
        Create from an envelope dictionary.

        Raises:
            MalformedFeedMessageError: If a field is missing or invalid
        """
        if not isinstance(data, dict):
            raise MalformedFeedMessageError("feed envelope must be a JSON object")

        tag = data.get("type")
        content_type = data.get("content_type")
        content = data.get("content")
        if not isinstance(tag, str) or not tag:
            raise MalformedFeedMessageError("feed envelope has no type tag")
        if not isinstance(content_type, str):
            raise MalformedFeedMessageError("feed envelope has no content type")

        if content is None:
            raw = b""
        elif isinstance(content, str):
            try:
                raw = base64.b64decode(content, validate=True)
            except (binascii.Error, ValueError) as e:
                raise MalformedFeedMessageError(
                    f"feed envelope content is not base64: {e}"
                ) from e
        else:
            raise MalformedFeedMessageError("feed envelope content must be a string")

        return cls(type=_parse_tag(tag), content_type=content_type, content=raw)

    @classmethod
    def from_bytes(cls, frame: Union[bytes, str]) -> "FeedMessage":
        """
        Create from a raw envelope frame.

        Raises:
            MalformedFeedMessageError: If the frame is not a JSON envelope
        """
        try:
            data = json.loads(frame)
        except (ValueError, RecursionError) as e:
            raise MalformedFeedMessageError(f"feed envelope is not JSON: {e}") from e
        return cls.from_dict(data)


@dataclass(frozen=True)
class UnrecognizedFeedMessage:
    """
    An envelope whose type tag this client does not understand.

    Returned instead of raising so newer servers can add event types
    without breaking older clients. The original envelope is kept.
    """

    envelope: FeedMessage

    @property
    def type_tag(self) -> str:
        """The unrecognized tag."""
        return self.envelope.type_tag


def _parse_tag(tag: str) -> Union[FeedMessageType, str]:
    try:
        return FeedMessageType(tag)
    except ValueError:
        return tag


class JSONCodec:
    """Encodes payload dictionaries as UTF-8 JSON."""

    def encode(self, data: Dict[str, Any]) -> bytes:
        return json.dumps(data, allow_nan=False).encode("utf-8")

    def decode(self, content: bytes) -> Any:
        return json.loads(content)


class FeedCodec:
    """
    Encodes and decodes feed envelopes with a registry of content codecs.

    A codec is any object with encode(dict) -> bytes and
    decode(bytes) -> object methods. Instances start with the JSON codec
    registered.
    """

    def __init__(self):
        self._codecs: Dict[str, Any] = {JSON_CONTENT_TYPE: JSONCodec()}

    def register(self, content_type: str, codec: Any) -> None:
        """
        Register a codec for a content type.

        Args:
            content_type: MIME-like content type string
            codec: Object with encode and decode methods
        """
        if not content_type:
            raise ValueError("content_type must not be empty")
        self._codecs[content_type] = codec
        logger.debug("Registered feed codec for %s", content_type)

    def supports(self, content_type: str) -> bool:
        """True if a codec is registered for content_type."""
        return content_type in self._codecs

    def encode(
        self,
        message_type: Union[FeedMessageType, str],
        payload: Schema,
        content_type: str = JSON_CONTENT_TYPE,
    ) -> FeedMessage:
        """
        Wrap a payload in a feed envelope.

        Args:
            message_type: Type tag to stamp on the envelope
            payload: Payload schema instance
            content_type: Content type to encode with

        Returns:
            The FeedMessage envelope

        Raises:
            SerializationError: If the payload cannot be represented or no
                                codec is registered for content_type
        """
        codec = self._codecs.get(content_type)
        if codec is None:
            raise SerializationError(
                f"no codec registered for content type {content_type!r}"
            )
        if not isinstance(payload, Schema):
            raise SerializationError(
                f"cannot encode {type(payload).__name__} as a feed payload"
            )

        try:
            content = codec.encode(payload.to_dict())
        except (TypeError, ValueError) as e:
            raise SerializationError(f"cannot encode feed payload: {e}") from e

        return FeedMessage(
            type=_parse_tag(message_type),
            content_type=content_type,
            content=content,
        )

    def decode(
        self, envelope: FeedMessage
    ) -> Union[Schema, UnrecognizedFeedMessage]:
        """
        Decode the payload of a feed envelope.

        Args:
            envelope: The envelope to decode

        Returns:
            The payload schema instance, or UnrecognizedFeedMessage for
            type tags this client does not know.

        Raises:
            UnsupportedContentTypeError: If no codec handles the content type
            MalformedPayloadError: If the payload does not decode
        """
        payload_cls = PAYLOAD_TYPES.get(_parse_tag(envelope.type))
        if payload_cls is None:
            logger.info(
                "Skipping unrecognized feed message type: %s", envelope.type_tag
            )
            return UnrecognizedFeedMessage(envelope)

        codec = self._codecs.get(envelope.content_type)
        if codec is None:
            raise UnsupportedContentTypeError(envelope.content_type)

        try:
            data = codec.decode(envelope.content)
            return payload_cls.from_dict(data)
        except (KeyError, TypeError, ValueError, RecursionError) as e:
            raise MalformedPayloadError(envelope.type_tag, str(e)) from e


_default_codec = FeedCodec()


def default_codec() -> FeedCodec:
    """Return the module-level codec registry."""
    return _default_codec


def encode(
    message_type: Union[FeedMessageType, str],
    payload: Schema,
    content_type: str = JSON_CONTENT_TYPE,
) -> FeedMessage:
    """Encode a payload with the default codec registry."""
    return _default_codec.encode(message_type, payload, content_type)


def encode_json(
    message_type: Union[FeedMessageType, str], payload: Schema
) -> FeedMessage:
    """Encode a payload as JSON."""
    return _default_codec.encode(message_type, payload, JSON_CONTENT_TYPE)


def decode(envelope: FeedMessage) -> Union[Schema, UnrecognizedFeedMessage]:
    """Decode an envelope with the default codec registry."""
    return _default_codec.decode(envelope)

