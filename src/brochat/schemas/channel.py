"""
Channel Schema Definitions

This module defines channels and the chat messages sent in them.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import IntEnum
from typing import Any, Dict, List, Union

from .base import Schema, get_enum, get_int, get_list, get_str, get_timestamp
from .member import UserInfo


class ChannelType(IntEnum):
    """Kind of channel."""

    # Direct messages between two users.
    DIRECT_MESSAGE = 0
    # Group messages in a room.
    ROOM = 1


@dataclass
class Channel(Schema):
    """
    A communication channel between two or more users.

    Attributes:
        id: The channel ID
        type: The channel type
        users: Members of the channel
    """

    id: str
    type: Union[ChannelType, int]
    users: List[UserInfo]

    @classmethod
    def _from_data(cls, data: Dict[str, Any]) -> "Channel":
        """Create from data dictionary."""
        return cls(
            id=get_str(data, "id"),
            type=get_enum(data, "type", ChannelType, reader=get_int),
            users=[UserInfo.from_dict(user) for user in get_list(data, "users")],
        )


@dataclass
class ChatMessage(Schema):
    """
    A processed chat message.

    Attributes:
        id: Unique identifier for the message
        channel_id: ID of the channel the message was sent in
        sender_user_id: ID of the sending user
        content: The message content
        recieved_at_utc: When the server received the message
    """

    id: str
    channel_id: str
    sender_user_id: str
    content: str
    recieved_at_utc: datetime

    @classmethod
    def _from_data(cls, data: Dict[str, Any]) -> "ChatMessage":
        """Create from data dictionary."""
        return cls(
            id=get_str(data, "id"),
            channel_id=get_str(data, "channel_id"),
            sender_user_id=get_str(data, "sender_user_id"),
            content=get_str(data, "content"),
            recieved_at_utc=get_timestamp(data, "recieved_at_utc"),
        )
