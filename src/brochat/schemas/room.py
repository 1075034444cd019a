"""
Room Schema Definitions

This module defines the structures for room operations including room
information and room creation.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Union

from .base import Schema, get_enum, get_str, get_timestamp
from .member import UserInfo


class RoomMembershipModel(str, Enum):
    """Who may join a room."""

    # The owner's friends may join.
    FRIENDS = "friends"
    # Anyone may join.
    PUBLIC = "public"


@dataclass
class Room(Schema):
    """
    A chat room.

    Attributes:
        id: Unique identifier for the room
        name: Name of the room
        channel_id: ID of the room's chat channel
        owner: User that owns the room
        membership_model: Who may join the room
        created_at_utc: When the room was created
    """

    id: str
    name: str
    channel_id: str
    owner: UserInfo
    membership_model: Union[RoomMembershipModel, str]
    created_at_utc: datetime

    @classmethod
    def _from_data(cls, data: Dict[str, Any]) -> "Room":
        """Create from data dictionary."""
        return cls(
            id=get_str(data, "id"),
            name=get_str(data, "name"),
            channel_id=get_str(data, "channel_id"),
            owner=UserInfo.from_dict(data["owner"]),
            membership_model=get_enum(
                data, "membership_model", RoomMembershipModel
            ),
            created_at_utc=get_timestamp(data, "created_at_utc"),
        )


@dataclass
class CreateRoomRequest(Schema):
    """
    Request to create a new room.

    Users cannot own more than 20 rooms; the server enforces this.

    Attributes:
        name: Name of the room to create
        membership_model: Membership model for the room
    """

    name: str
    membership_model: Union[RoomMembershipModel, str] = RoomMembershipModel.PUBLIC
