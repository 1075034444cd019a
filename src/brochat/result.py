"""
Result Wrapper

A Result pairs one response code with optional detail strings and, for
content-bearing operations, the decoded content. Every client operation
returns exactly one Result; nothing is retried internally.

Callers must check the code (is_failure / error()) rather than infer
success from the content. A failed Result never carries content.

Usage:
    result = await client.get_user(auth)
    err = result.error()
    if err:
        raise err
    user = result.content
"""

from dataclasses import dataclass
from typing import Generic, Optional, Tuple, TypeVar

from .codes import describe, is_failure, to_response_code
from .errors import BroChatError

T = TypeVar("T")


@dataclass(frozen=True)
class Result(Generic[T]):
    """
    Outcome of a client operation.

    Attributes:
        code: Response code (a ResponseCode member, or a raw int when the
              server sent a code this client does not know)
        details: Detail strings attached to the outcome
        content: Decoded content on success, None otherwise
    """

    code: int
    details: Tuple[str, ...] = ()
    content: Optional[T] = None

    @property
    def is_failure(self) -> bool:
        """True when the code is in a failure range."""
        return is_failure(self.code)

    @property
    def message(self) -> str:
        """Human readable description of the code."""
        return describe(self.code)

    def error(self) -> Optional[BroChatError]:
        """
        Build the error for this Result.

        Returns:
            None on success, otherwise a BroChatError carrying the
            described code and the attached details.
        """
        if not self.is_failure:
            return None
        return BroChatError(self.code, describe(self.code), self.details)


def make_result(code: int, *details: str) -> Result[None]:
    """Create a Result with no content."""
    return Result(code=to_response_code(code), details=tuple(details))


def make_content_result(code: int, content: T, *details: str) -> Result[T]:
    """
    Create a content-bearing Result.

    Content passed with a failure code is dropped so a failed Result
    can never be mistaken for a real (if empty) payload.
    """
    if is_failure(code):
        content = None
    return Result(
        code=to_response_code(code), details=tuple(details), content=content
    )
