"""
REST resource paths.

Paths containing ":name" placeholders are filled with resolve_path.
"""

from http import HTTPStatus
from urllib.parse import urljoin, urlsplit

GET_USER_PATH = "/api/brochat/user"
GET_USERS_PATH = "/api/brochat/users"
GET_CHANNEL_PATH = "/api/brochat/channels/:channelId"
GET_CHANNEL_MESSAGES_PATH = "/api/brochat/channels/:channelId/messages"
SEND_FRIEND_REQUEST_PATH = "/api/brochat/friends/send-friend-request"
ACCEPT_FRIEND_REQUEST_PATH = "/api/brochat/friends/accept-friend-request"
GET_ROOMS_PATH = "/api/brochat/rooms"
CREATE_ROOM_PATH = "/api/brochat/rooms"
JOIN_ROOM_PATH = "/api/brochat/rooms/:roomId/join"

CHANNEL_ID_PARAM = ":channelId"
ROOM_ID_PARAM = ":roomId"

# Status each operation expects on success.
STATUS_OK = HTTPStatus.OK
STATUS_CREATED = HTTPStatus.CREATED
STATUS_NO_CONTENT = HTTPStatus.NO_CONTENT


def resolve_path(template: str, param: str, value: str) -> str:
    """Substitute the first occurrence of param in template with value."""
    return template.replace(param, value, 1)


def is_valid_base_url(base_url: str) -> bool:
    """True if base_url is an absolute http(s) URL with a host."""
    try:
        parts = urlsplit(base_url)
        # Accessing port validates it.
        parts.port
    except ValueError:
        return False
    return parts.scheme in ("http", "https") and bool(parts.hostname)


def build_url(base_url: str, path: str) -> str:
    """
    Resolve an absolute path against the base URL.

    The path replaces any path on the base URL.
    """
    return urljoin(base_url, path)
