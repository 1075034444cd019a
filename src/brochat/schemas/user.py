"""
User Schema Definitions

This module defines the full user profile returned for the calling user.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional

from .base import Schema, get_list, get_str, get_timestamp
from .member import RelationshipType, UserRelationship
from .room import Room


@dataclass
class User(Schema):
    """
    A user's profile.

    Attributes:
        id: The user's ID (same as the identity service ID)
        username: The user's username
        relationships: Relationships with other users
        rooms: Rooms the user owns or is a member of
        last_online_utc: When the user was last online
        created_at_utc: When the user was created
    """

    id: str
    username: str
    relationships: List[UserRelationship]
    rooms: List[Room]
    last_online_utc: datetime
    created_at_utc: datetime

    @classmethod
    def _from_data(cls, data: Dict[str, Any]) -> "User":
        """Create from data dictionary."""
        return cls(
            id=get_str(data, "id"),
            username=get_str(data, "username"),
            relationships=[
                UserRelationship.from_dict(item)
                for item in get_list(data, "relationships")
            ],
            rooms=[Room.from_dict(item) for item in get_list(data, "rooms")],
            last_online_utc=get_timestamp(data, "last_online_utc"),
            created_at_utc=get_timestamp(data, "created_at_utc"),
        )

    def friends(self) -> List[UserRelationship]:
        """Return the relationships that are friendships."""
        return [rel for rel in self.relationships if rel.is_friend]

    def pending_friend_requests(self) -> List[UserRelationship]:
        """Return relationships with a received, unanswered friend request."""
        return [
            rel
            for rel in self.relationships
            if RelationshipType.FRIEND_REQUEST_RECEIVED in rel.type
        ]

    def find_room(self, room_id: str) -> Optional[Room]:
        """Return the room with the given ID, or None."""
        for room in self.rooms:
            if room.id == room_id:
                return room
        return None
