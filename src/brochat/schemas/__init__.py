"""
Schemas Package

This package contains the wire schemas shared by the BroChat client and
server. Schemas are organized by category: member, room, user, channel,
responses, and events (feed payloads).

The Schema base class provides the serialization and strict
deserialization methods every schema uses.
"""

from .base import Schema, format_timestamp, parse_timestamp
from .member import (
    RelationshipType,
    UserInfo,
    UserRelationship,
    SendFriendRequestRequest,
    AcceptFriendRequestRequest,
)
from .room import RoomMembershipModel, Room, CreateRoomRequest
from .user import User
from .channel import ChannelType, Channel, ChatMessage
from .responses import ErrorResponse
from .events import (
    UserProfileUpdateCode,
    ChatMessageRequest,
    ChatMacroRequest,
    ChatNotification,
    SetActiveChannelRequest,
    UserOnlineEvent,
    UserOfflineEvent,
    FriendRequestReceivedEvent,
    FriendRequestAcceptedEvent,
    RoomCreatedEvent,
    UserJoinedRoomEvent,
    UserProfileUpdatedEvent,
)

__all__ = [
    # Base
    "Schema",
    "format_timestamp",
    "parse_timestamp",
    # Member schemas
    "RelationshipType",
    "UserInfo",
    "UserRelationship",
    "SendFriendRequestRequest",
    "AcceptFriendRequestRequest",
    # Room schemas
    "RoomMembershipModel",
    "Room",
    "CreateRoomRequest",
    # User schemas
    "User",
    # Channel schemas
    "ChannelType",
    "Channel",
    "ChatMessage",
    # Responses
    "ErrorResponse",
    # Feed payloads
    "UserProfileUpdateCode",
    "ChatMessageRequest",
    "ChatMacroRequest",
    "ChatNotification",
    "SetActiveChannelRequest",
    "UserOnlineEvent",
    "UserOfflineEvent",
    "FriendRequestReceivedEvent",
    "FriendRequestAcceptedEvent",
    "RoomCreatedEvent",
    "UserJoinedRoomEvent",
    "UserProfileUpdatedEvent",
]
