"""
Response Code Space

Every client operation reports its outcome as a single small unsigned
integer. The integer space is split into three disjoint ranges:

    [0, 63]     failures reported by the server
    [64, 127]   failures detected on the client (transport, formatting)
    [128, 255]  success

Success codes are numerically greater than every failure code, so one
comparison against SUCCESS_RANGE_START separates success from failure.

Codes are logged and persisted by clients, so numbers are never reused or
renumbered. New codes are appended at the tail of their range.
"""

from enum import IntEnum
from typing import Dict

SERVER_FAILURE_RANGE_START = 0
CLIENT_FAILURE_RANGE_START = 64
SUCCESS_RANGE_START = 128
MAX_RESPONSE_CODE = 255

UNKNOWN_ERROR_MESSAGE = "unknown error"


class ResponseCode(IntEnum):
    """Named response codes."""

    # Server failures
    UNHANDLED = 0
    FORBIDDEN = 1
    VALIDATION = 2
    PARSE_FAILURE = 3
    NOT_FOUND = 4
    CONFLICT = 5
    INVALID_OPERATION = 6
    UNAUTHORIZED = 7

    # Client failures
    INVALID_HOST_ADDRESS = 64
    REQUEST_FORMATTING_ERROR = 65
    CONNECTION_TIMEOUT = 66
    CONNECTION_ERROR = 67
    UNEXPECTED_RESPONSE = 68
    REQUEST_ERROR = 69

    # Success
    SUCCESS = 128
    SUCCESS_NO_CONTENT = 129


_DESCRIPTIONS: Dict[int, str] = {
    ResponseCode.UNHANDLED: "an unhandled error occurred on the server",
    ResponseCode.FORBIDDEN: "forbidden",
    ResponseCode.VALIDATION: "the request failed validation",
    ResponseCode.PARSE_FAILURE: "the server could not parse the request",
    ResponseCode.NOT_FOUND: "resource not found",
    ResponseCode.CONFLICT: "the request conflicts with the current state",
    ResponseCode.INVALID_OPERATION: "the operation is not valid",
    ResponseCode.UNAUTHORIZED: "unauthorized",
    ResponseCode.INVALID_HOST_ADDRESS: "invalid host address",
    ResponseCode.REQUEST_FORMATTING_ERROR: "the request could not be formatted",
    ResponseCode.CONNECTION_TIMEOUT: "the connection timed out",
    ResponseCode.CONNECTION_ERROR: "could not connect to the server",
    ResponseCode.UNEXPECTED_RESPONSE: "unexpected response from the server",
    ResponseCode.REQUEST_ERROR: "the request failed",
    ResponseCode.SUCCESS: "success",
    ResponseCode.SUCCESS_NO_CONTENT: "success (no content)",
}


def describe(code: int) -> str:
    """
    Return the human readable message for a response code.

    Args:
        code: Response code, possibly one this client does not know about

    Returns:
        The description, or "unknown error" for undefined codes.
    """
    return _DESCRIPTIONS.get(code, UNKNOWN_ERROR_MESSAGE)


def is_failure(code: int) -> bool:
    """Return True if code is in either failure range."""
    return code < SUCCESS_RANGE_START


def is_success(code: int) -> bool:
    """Return True if code is in the success range."""
    return code >= SUCCESS_RANGE_START


def is_server_failure(code: int) -> bool:
    """Return True if code was reported by the server."""
    return SERVER_FAILURE_RANGE_START <= code < CLIENT_FAILURE_RANGE_START


def is_client_failure(code: int) -> bool:
    """Return True if code was produced by the client or transport."""
    return CLIENT_FAILURE_RANGE_START <= code < SUCCESS_RANGE_START


def to_response_code(code: int):
    """
    Convert a raw integer to a ResponseCode member when one exists.

    Unknown codes (e.g. from a newer server) are returned unchanged so
    they are never lost.
    """
    try:
        return ResponseCode(code)
    except ValueError:
        return code
