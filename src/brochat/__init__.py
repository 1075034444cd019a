"""
BroChat Client Package

This package provides the client-side protocol layer for the BroChat chat
service: the REST client, the real-time feed envelope protocol, chat macro
classification and the response code taxonomy shared with the server.

Modules:
    - codes: Response code space and descriptions
    - result: Result wrapper returned by every client operation
    - client: REST client operations
    - options: Query options for list operations
    - feed: Feed envelope encoding and decoding
    - feed_client: WebSocket feed consumer
    - macro: Chat macro classification
    - schemas: Wire schemas
"""

from .codes import (
    ResponseCode,
    SUCCESS_RANGE_START,
    describe,
    is_failure,
    is_success,
    is_server_failure,
    is_client_failure,
)
from .result import Result, make_result, make_content_result
from .errors import (
    BroChatError,
    FeedError,
    SerializationError,
    UnsupportedContentTypeError,
    MalformedPayloadError,
    MalformedFeedMessageError,
    MacroParsingError,
)
from .macro import (
    MacroType,
    MacroRequest,
    DiceRoll,
    classify,
    parse_macro,
    parse_dice_roll,
)
from .feed import (
    FeedMessageType,
    FeedMessage,
    FeedCodec,
    UnrecognizedFeedMessage,
    JSON_CONTENT_TYPE,
    encode,
    encode_json,
    decode,
)
from .options import QueryOptions
from .client import AuthInfo, BroChatClient
from .feed_client import FeedClient, FeedStats
from .config import ClientConfig

__all__ = [
    # Response codes
    "ResponseCode",
    "SUCCESS_RANGE_START",
    "describe",
    "is_failure",
    "is_success",
    "is_server_failure",
    "is_client_failure",
    # Results and errors
    "Result",
    "make_result",
    "make_content_result",
    "BroChatError",
    "FeedError",
    "SerializationError",
    "UnsupportedContentTypeError",
    "MalformedPayloadError",
    "MalformedFeedMessageError",
    "MacroParsingError",
    # Macros
    "MacroType",
    "MacroRequest",
    "DiceRoll",
    "classify",
    "parse_macro",
    "parse_dice_roll",
    # Feed
    "FeedMessageType",
    "FeedMessage",
    "FeedCodec",
    "UnrecognizedFeedMessage",
    "JSON_CONTENT_TYPE",
    "encode",
    "encode_json",
    "decode",
    "FeedClient",
    "FeedStats",
    # REST client
    "QueryOptions",
    "AuthInfo",
    "BroChatClient",
    "ClientConfig",
]
