"""
Member Schema Definitions

This module defines the user identity projections and relationship
structures, plus the friend request bodies sent to the server.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import IntFlag
from typing import Any, Dict

from .base import Schema, get_bool, get_int, get_str, get_timestamp


class RelationshipType(IntFlag):
    """
    Relationship between the calling user and another user.

    Values are bit flags so a relationship can combine states.
    """

    DEFAULT = 1 << 0
    FRIEND = 1 << 1
    FRIEND_REQUEST_RECEIVED = 1 << 2
    FRIENDSHIP_REQUESTED = 1 << 3


@dataclass
class UserInfo(Schema):
    """
    Minimal identity projection of a user.

    Attributes:
        id: The user's ID
        username: The user's username
        last_online_utc: When the user was last online
    """

    id: str
    username: str
    last_online_utc: datetime

    @classmethod
    def _from_data(cls, data: Dict[str, Any]) -> "UserInfo":
        """Create from data dictionary."""
        return cls(
            id=get_str(data, "id"),
            username=get_str(data, "username"),
            last_online_utc=get_timestamp(data, "last_online_utc"),
        )


@dataclass
class UserRelationship(Schema):
    """
    A relationship the calling user has with another user.

    Attributes:
        user_id: ID of the other user
        type: Relationship flags
        direct_message_channel_id: Channel for direct messages with the user
        username: Username of the other user
        last_online_utc: When the other user was last online
        is_online: Whether the other user is online now
    """

    user_id: str
    type: RelationshipType
    direct_message_channel_id: str
    username: str
    last_online_utc: datetime
    is_online: bool

    @classmethod
    def _from_data(cls, data: Dict[str, Any]) -> "UserRelationship":
        """Create from data dictionary."""
        return cls(
            user_id=get_str(data, "user_id"),
            type=RelationshipType(get_int(data, "type")),
            direct_message_channel_id=get_str(data, "direct_message_channel_id"),
            username=get_str(data, "username"),
            last_online_utc=get_timestamp(data, "last_online_utc"),
            is_online=get_bool(data, "is_online"),
        )

    @property
    def is_friend(self) -> bool:
        """True if the users are friends."""
        return RelationshipType.FRIEND in self.type


@dataclass
class SendFriendRequestRequest(Schema):
    """
    Body of a send friend request call.

    Attributes:
        requested_user_id: ID of the user the request is sent to
    """

    requested_user_id: str


@dataclass
class AcceptFriendRequestRequest(Schema):
    """
    Body of an accept friend request call.

    Attributes:
        initiating_user_id: ID of the user that sent the request
    """

    initiating_user_id: str
