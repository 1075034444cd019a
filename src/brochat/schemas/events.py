"""
Feed Payload Definitions

This module defines the payloads carried inside feed envelopes. Each
payload is selected by the envelope's type tag (see brochat.feed).

Events about other users carry UserInfo projections, never full User
profiles. A profile update event only says which part of the profile is
stale; the receiver re-fetches the profile itself.
"""

from dataclasses import dataclass
from enum import IntFlag
from typing import Any, Dict, List

from .base import Schema, get_int, get_list, get_str
from .member import UserInfo
from .room import Room


class UserProfileUpdateCode(IntFlag):
    """
    Which parts of a user's profile went stale.

    Flags combine, e.g. ROOMS | RELATIONSHIPS.
    """

    ROOMS = 0x1
    RELATIONSHIPS = 0x2


@dataclass
class ChatMessageRequest(Schema):
    """
    An unprocessed chat message sent by a client.

    Attributes:
        channel_id: ID of the channel the message is sent in
        content: The message text
    """

    channel_id: str
    content: str

    @classmethod
    def _from_data(cls, data: Dict[str, Any]) -> "ChatMessageRequest":
        """Create from data dictionary."""
        return cls(
            channel_id=get_str(data, "channel_id"),
            content=get_str(data, "content"),
        )


@dataclass
class ChatMacroRequest(Schema):
    """
    An unprocessed chat macro.

    Attributes:
        channel_id: ID of the channel the macro is sent in
        type: Macro type value (e.g. "dice-roll")
        arguments: Macro arguments; their meaning depends on the type
    """

    channel_id: str
    type: str
    arguments: List[str]

    @classmethod
    def _from_data(cls, data: Dict[str, Any]) -> "ChatMacroRequest":
        """Create from data dictionary."""
        arguments = get_list(data, "arguments")
        if not all(isinstance(arg, str) for arg in arguments):
            raise TypeError("macro arguments must be strings")
        return cls(
            channel_id=get_str(data, "channel_id"),
            type=get_str(data, "type"),
            arguments=arguments,
        )


@dataclass
class ChatNotification(Schema):
    """
    Unread activity in a channel the user is not actively viewing.

    Attributes:
        channel_id: ID of the channel with new activity
    """

    channel_id: str

    @classmethod
    def _from_data(cls, data: Dict[str, Any]) -> "ChatNotification":
        """Create from data dictionary."""
        return cls(channel_id=get_str(data, "channel_id"))


@dataclass
class SetActiveChannelRequest(Schema):
    """
    Request to make a channel the user's active channel.

    Attributes:
        channel_id: ID of the channel to make active
    """

    channel_id: str

    @classmethod
    def _from_data(cls, data: Dict[str, Any]) -> "SetActiveChannelRequest":
        """Create from data dictionary."""
        return cls(channel_id=get_str(data, "channel_id"))


@dataclass
class UserOnlineEvent(Schema):
    """A user came online."""

    user: UserInfo

    @classmethod
    def _from_data(cls, data: Dict[str, Any]) -> "UserOnlineEvent":
        """Create from data dictionary."""
        return cls(user=UserInfo.from_dict(data["user"]))


@dataclass
class UserOfflineEvent(Schema):
    """A user went offline."""

    user: UserInfo

    @classmethod
    def _from_data(cls, data: Dict[str, Any]) -> "UserOfflineEvent":
        """Create from data dictionary."""
        return cls(user=UserInfo.from_dict(data["user"]))


@dataclass
class FriendRequestReceivedEvent(Schema):
    """
    The user received a friend request.

    Attributes:
        initiating_user: User that sent the friend request
        requested_user: User the friend request was sent to
    """

    initiating_user: UserInfo
    requested_user: UserInfo

    @classmethod
    def _from_data(cls, data: Dict[str, Any]) -> "FriendRequestReceivedEvent":
        """Create from data dictionary."""
        return cls(
            initiating_user=UserInfo.from_dict(data["initiating_user"]),
            requested_user=UserInfo.from_dict(data["requested_user"]),
        )


@dataclass
class FriendRequestAcceptedEvent(Schema):
    """
    A friend request was accepted.

    Attributes:
        initiating_user: User that sent the friend request
        accepting_user: User that accepted it
        direct_message_channel: ID of the new direct message channel
    """

    initiating_user: UserInfo
    accepting_user: UserInfo
    direct_message_channel: str

    @classmethod
    def _from_data(cls, data: Dict[str, Any]) -> "FriendRequestAcceptedEvent":
        """Create from data dictionary."""
        return cls(
            initiating_user=UserInfo.from_dict(data["initiating_user"]),
            accepting_user=UserInfo.from_dict(data["accepting_user"]),
            direct_message_channel=get_str(data, "direct_message_channel"),
        )


@dataclass
class RoomCreatedEvent(Schema):
    """A room was created."""

    room: Room

    @classmethod
    def _from_data(cls, data: Dict[str, Any]) -> "RoomCreatedEvent":
        """Create from data dictionary."""
        return cls(room=Room.from_dict(data["room"]))


@dataclass
class UserJoinedRoomEvent(Schema):
    """
    A user joined a room.

    Attributes:
        room_id: ID of the room
        channel_id: ID of the room's channel
        user: The user that joined
    """

    room_id: str
    channel_id: str
    user: UserInfo

    @classmethod
    def _from_data(cls, data: Dict[str, Any]) -> "UserJoinedRoomEvent":
        """Create from data dictionary."""
        return cls(
            room_id=get_str(data, "room_id"),
            channel_id=get_str(data, "channel_id"),
            user=UserInfo.from_dict(data["user"]),
        )


@dataclass
class UserProfileUpdatedEvent(Schema):
    """
    The user's profile is stale and should be re-fetched.

    Attributes:
        reason: Flags naming the stale parts of the profile
    """

    reason: UserProfileUpdateCode

    @classmethod
    def _from_data(cls, data: Dict[str, Any]) -> "UserProfileUpdatedEvent":
        """Create from data dictionary."""
        reason = get_int(data, "reason")
        if reason < 0:
            raise ValueError("update code must be unsigned")
        return cls(reason=UserProfileUpdateCode(reason))

    def is_stale(self, code: UserProfileUpdateCode) -> bool:
        """True if every flag in code is set on this event."""
        return (self.reason & code) == code
