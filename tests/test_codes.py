"""
Tests for the Response Code Space and Result Wrapper

Tests for:
- Range layout and ordering of response codes
- describe() for known and unknown codes
- Result construction, failure detection and error materialization
"""

import pytest

from brochat import (
    BroChatError,
    ResponseCode,
    SUCCESS_RANGE_START,
    describe,
    is_client_failure,
    is_failure,
    is_server_failure,
    is_success,
    make_content_result,
    make_result,
)
from brochat.codes import UNKNOWN_ERROR_MESSAGE


SERVER_CODES = [
    ResponseCode.UNHANDLED,
    ResponseCode.FORBIDDEN,
    ResponseCode.VALIDATION,
    ResponseCode.PARSE_FAILURE,
    ResponseCode.NOT_FOUND,
    ResponseCode.CONFLICT,
    ResponseCode.INVALID_OPERATION,
    ResponseCode.UNAUTHORIZED,
]

CLIENT_CODES = [
    ResponseCode.INVALID_HOST_ADDRESS,
    ResponseCode.REQUEST_FORMATTING_ERROR,
    ResponseCode.CONNECTION_TIMEOUT,
    ResponseCode.CONNECTION_ERROR,
    ResponseCode.UNEXPECTED_RESPONSE,
    ResponseCode.REQUEST_ERROR,
]

SUCCESS_CODES = [ResponseCode.SUCCESS, ResponseCode.SUCCESS_NO_CONTENT]


# ----------------------------------------------------------------------------
# Code space
# ----------------------------------------------------------------------------


def test_codes_are_in_their_ranges():
    for code in SERVER_CODES:
        assert 0 <= code <= 63
        assert is_server_failure(code)
    for code in CLIENT_CODES:
        assert 64 <= code <= 127
        assert is_client_failure(code)
    for code in SUCCESS_CODES:
        assert code >= 128
        assert is_success(code)


def test_every_code_is_accounted_for():
    assert set(ResponseCode) == set(SERVER_CODES + CLIENT_CODES + SUCCESS_CODES)


def test_success_codes_exceed_every_failure_code():
    highest_failure = max(SERVER_CODES + CLIENT_CODES)
    assert min(SUCCESS_CODES) > highest_failure
    assert SUCCESS_RANGE_START == 128


def test_numbers_are_stable():
    """Codes are persisted by clients, so the numbers must not move."""
    assert ResponseCode.UNHANDLED == 0
    assert ResponseCode.NOT_FOUND == 4
    assert ResponseCode.UNAUTHORIZED == 7
    assert ResponseCode.INVALID_HOST_ADDRESS == 64
    assert ResponseCode.CONNECTION_TIMEOUT == 66
    assert ResponseCode.CONNECTION_ERROR == 67
    assert ResponseCode.UNEXPECTED_RESPONSE == 68
    assert ResponseCode.SUCCESS == 128
    assert ResponseCode.SUCCESS_NO_CONTENT == 129


def test_is_failure_matches_threshold_for_all_codes():
    for code in range(0, 256):
        assert is_failure(code) == (code < 128)


def test_describe_covers_every_defined_code():
    for code in ResponseCode:
        assert describe(code) != UNKNOWN_ERROR_MESSAGE


@pytest.mark.parametrize("code", [8, 63, 70, 127, 130, 255, 1000, -1])
def test_describe_unknown_code_falls_back(code):
    assert describe(code) == "unknown error"


# ----------------------------------------------------------------------------
# Result
# ----------------------------------------------------------------------------


def test_make_result_failure():
    result = make_result(ResponseCode.NOT_FOUND, "user not found")
    assert result.is_failure
    assert result.details == ("user not found",)
    assert result.content is None


def test_error_is_none_on_success():
    assert make_result(ResponseCode.SUCCESS_NO_CONTENT).error() is None


def test_error_carries_description_and_details():
    result = make_result(ResponseCode.CONFLICT, "already friends", "try later")
    err = result.error()
    assert isinstance(err, BroChatError)
    assert err.code == ResponseCode.CONFLICT
    assert err.message == describe(ResponseCode.CONFLICT)
    assert err.details == ["already friends", "try later"]
    assert "already friends" in str(err)


def test_error_can_be_raised():
    result = make_result(ResponseCode.FORBIDDEN)
    with pytest.raises(BroChatError):
        raise result.error()


def test_make_content_result_success():
    result = make_content_result(ResponseCode.SUCCESS, ["room"])
    assert not result.is_failure
    assert result.content == ["room"]


def test_make_content_result_drops_content_on_failure():
    """A failed Result must never look like it holds a payload."""
    result = make_content_result(ResponseCode.UNEXPECTED_RESPONSE, [])
    assert result.is_failure
    assert result.content is None


def test_unknown_server_code_is_preserved():
    result = make_result(42, "new failure kind")
    assert result.code == 42
    assert result.is_failure
    assert result.error().message == "unknown error"


def test_known_int_code_becomes_enum_member():
    result = make_result(4)
    assert result.code is ResponseCode.NOT_FOUND


def test_result_is_immutable():
    result = make_result(ResponseCode.SUCCESS)
    with pytest.raises(AttributeError):
        result.code = ResponseCode.UNHANDLED
