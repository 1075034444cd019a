"""
Tests for the Command Line Client

Tests for:
- Argument parsing
- The classify command
- REST commands run against a mock transport
"""

import json

import httpx
import pytest

from brochat import BroChatClient, ClientConfig
from brochat.main import build_parser, main, run_command


def test_parser_users_options():
    args = build_parser().parse_args(
        ["users", "--page", "2", "--page-size", "10", "--exclude-self"]
    )
    assert args.command == "users"
    assert args.page == 2
    assert args.page_size == 10
    assert args.exclude_self is True
    assert args.exclude_friends is None


def test_parser_requires_command():
    with pytest.raises(SystemExit):
        build_parser().parse_args([])


def test_classify_command(capsys):
    """Test that classify prints the macro kind and body as JSON."""
    assert main(["classify", "/ROLL 2d6"]) == 0
    output = json.loads(capsys.readouterr().out)
    assert output == {"is_macro": True, "type": "dice-roll", "body": "2d6"}


def test_classify_plain_text(capsys):
    assert main(["classify", "hello"]) == 0
    output = json.loads(capsys.readouterr().out)
    assert output == {"is_macro": False, "type": "none", "body": None}


def make_client(handler):
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return BroChatClient("https://chat.example.com", http_client=http_client)


@pytest.mark.asyncio
async def test_run_command_prints_content(capsys):
    def handler(request):
        assert request.headers["Authorization"] == "Bearer secret"
        return httpx.Response(200, json=[])

    args = build_parser().parse_args(["rooms"])
    config = ClientConfig(access_token="secret")

    status = await run_command(args, config, make_client(handler))

    assert status == 0
    assert json.loads(capsys.readouterr().out) == []


@pytest.mark.asyncio
async def test_run_command_reports_failure(capsys):
    def handler(request):
        return httpx.Response(404)

    args = build_parser().parse_args(["join-room", "room-1"])
    status = await run_command(args, ClientConfig(), make_client(handler))

    assert status == 1
    assert capsys.readouterr().err.startswith("error 4: resource not found")


@pytest.mark.asyncio
async def test_run_command_no_content(capsys):
    def handler(request):
        assert json.loads(request.content) == {"requested_user_id": "bob"}
        return httpx.Response(204)

    args = build_parser().parse_args(["send-friend-request", "bob"])
    status = await run_command(args, ClientConfig(), make_client(handler))

    assert status == 0
    assert capsys.readouterr().out.strip() == "success (no content)"
