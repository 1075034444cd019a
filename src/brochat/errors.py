"""
Exception Types

This module defines the exceptions raised by the BroChat client library.

Hierarchy:
    BroChatError            - materialized failure of a client Result
    FeedError               - base for feed envelope problems
        SerializationError          - payload could not be encoded
        UnsupportedContentTypeError - no decoder for the content type
        MalformedPayloadError       - decoder registered, payload garbage
        MalformedFeedMessageError   - the envelope frame itself is garbage
    MacroParsingError       - macro arguments could not be parsed

Client operations never raise these for transport or server failures;
they return a Result instead. BroChatError exists for callers that prefer
raising the error carried by a failed Result.
"""

from typing import List, Optional, Sequence


class BroChatError(Exception):
    """
    Error derived from a failed client Result.

    Attributes:
        code: Numeric response code
        message: Human readable description of the code
        details: Additional detail strings supplied with the failure
    """

    def __init__(
        self, code: int, message: str, details: Optional[Sequence[str]] = None
    ):
        self.code = code
        self.message = message
        self.details: List[str] = list(details or [])
        super().__init__(str(self))

    def __str__(self) -> str:
        if self.details:
            return f"{self.message}: {'; '.join(self.details)}"
        return self.message

    def __repr__(self) -> str:
        return (
            f"BroChatError(code={self.code!r}, message={self.message!r}, "
            f"details={self.details!r})"
        )


class FeedError(Exception):
    """Base class for feed envelope encode/decode failures."""


class SerializationError(FeedError):
    """Raised when a payload cannot be represented in the chosen encoding."""


class UnsupportedContentTypeError(FeedError):
    """Raised when an envelope declares a content type with no decoder."""

    def __init__(self, content_type: str):
        self.content_type = content_type
        super().__init__(f"unsupported feed content type: {content_type!r}")


class MalformedPayloadError(FeedError):
    """Raised when a payload does not decode with its registered decoder."""

    def __init__(self, message_type: str, reason: str):
        self.message_type = message_type
        self.reason = reason
        super().__init__(f"malformed {message_type} payload: {reason}")


class MalformedFeedMessageError(FeedError):
    """Raised when a raw frame is not a valid feed envelope."""


class MacroParsingError(ValueError):
    """Raised when macro arguments are invalid."""

    def __init__(self, details: str):
        self.details = details
        super().__init__(details)
