"""
Query Options

QueryOptions is an immutable set of query parameters for the list
operations (users and channel messages). Options that are not set are not
sent. Options with an empty key or an empty value are dropped, so an empty
parameter can never be forced onto the wire.

page_size is sent as given. The server caps it at 100.

Usage:
    options = QueryOptions(page=2, page_size=50, before_msg="msg-123")
    next_page = options.replace(page=3)
"""

from dataclasses import dataclass, field, replace
from typing import Dict, Mapping, Optional

PAGE = "page"
PAGE_SIZE = "page-size"
BEFORE_MESSAGE = "before-msg"
EXCLUDE_SELF = "exclude-self"
EXCLUDE_FRIENDS = "exclude-friends"
USERNAME_FILTER = "username-filter"

# Enforced by the server, not the client.
SERVER_MAX_PAGE_SIZE = 100


def _format_bool(value: bool) -> str:
    return "true" if value else "false"


@dataclass(frozen=True)
class QueryOptions:
    """
    Query parameters for list operations.

    Attributes:
        page: Page to start the query from
        page_size: Number of items per page
        before_msg: Only return messages sent before this message ID
        exclude_self: Leave the calling user out of user listings
        exclude_friends: Leave the calling user's friends out of user listings
        username_filter: Only return users whose username matches
        extra: Additional raw parameters. Named fields take precedence
               over extra entries with the same key
    """

    page: Optional[int] = None
    page_size: Optional[int] = None
    before_msg: Optional[str] = None
    exclude_self: Optional[bool] = None
    exclude_friends: Optional[bool] = None
    username_filter: Optional[str] = None
    extra: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self):
        for name in ("page", "page_size"):
            value = getattr(self, name)
            if value is not None and value < 0:
                raise ValueError(f"{name} must not be negative")
        # Copy so later changes to the caller's mapping are not seen.
        object.__setattr__(self, "extra", dict(self.extra))

    def replace(self, **changes) -> "QueryOptions":
        """Return a copy with the given fields changed."""
        return replace(self, **changes)

    def to_params(self) -> Dict[str, str]:
        """
        Build the query parameters.

        Returns:
            dict: Parameter name to value, without empty keys or values
        """
        params: Dict[str, str] = {}
        for key, value in self.extra.items():
            params[key] = value

        named = {
            PAGE: None if self.page is None else str(self.page),
            PAGE_SIZE: None if self.page_size is None else str(self.page_size),
            BEFORE_MESSAGE: self.before_msg,
            EXCLUDE_SELF: None
            if self.exclude_self is None
            else _format_bool(self.exclude_self),
            EXCLUDE_FRIENDS: None
            if self.exclude_friends is None
            else _format_bool(self.exclude_friends),
            USERNAME_FILTER: self.username_filter,
        }
        for key, value in named.items():
            if value is not None:
                params[key] = value

        return {key: value for key, value in params.items() if key and value}
