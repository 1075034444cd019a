#!/usr/bin/env python3
"""
BroChat Command Line Client

Runs BroChat REST operations from the command line and prints the result
as JSON. Settings come from BROCHAT_* environment variables (see
brochat.config) and can be overridden with options.

Usage:
    brochat rooms
    brochat users --page 1 --page-size 50 --exclude-self
    brochat messages <channel-id> --before-msg <message-id>
    brochat create-room "Board Games" --membership-model friends
    brochat classify "/roll 2d6"
    brochat listen
"""

import argparse
import asyncio
import dataclasses
import json
import logging
import sys
from typing import Any, List, Optional

from .client import BroChatClient
from .config import ClientConfig
from .feed import FeedMessageType, UnrecognizedFeedMessage
from .feed_client import FeedClient
from .macro import classify, parse_macro
from .options import QueryOptions
from .result import Result
from .schemas import (
    AcceptFriendRequestRequest,
    CreateRoomRequest,
    Schema,
    SendFriendRequestRequest,
)

logger = logging.getLogger(__name__)


def _to_jsonable(content: Any) -> Any:
    if isinstance(content, Schema):
        return content.to_dict()
    if isinstance(content, list):
        return [_to_jsonable(item) for item in content]
    return content


def _print_result(result: Result) -> int:
    """Print a Result and return the process exit status."""
    err = result.error()
    if err:
        print(f"error {int(result.code)}: {err}", file=sys.stderr)
        return 1
    if result.content is not None:
        print(json.dumps(_to_jsonable(result.content), indent=2))
    else:
        print(result.message)
    return 0


def _options_from_args(args: argparse.Namespace) -> QueryOptions:
    return QueryOptions(
        page=getattr(args, "page", None),
        page_size=getattr(args, "page_size", None),
        before_msg=getattr(args, "before_msg", None),
        exclude_self=getattr(args, "exclude_self", None),
        exclude_friends=getattr(args, "exclude_friends", None),
        username_filter=getattr(args, "username_filter", None),
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(prog="brochat", description="BroChat client")
    parser.add_argument("--base-url", help="Base URL of the BroChat API")
    parser.add_argument("--feed-url", help="WebSocket URL of the feed")
    parser.add_argument("--token", help="Access token")
    parser.add_argument("--log-level", help="Logging level (e.g. DEBUG)")

    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("user", help="Show the calling user's profile")

    users = sub.add_parser("users", help="List users")
    users.add_argument("--page", type=int)
    users.add_argument("--page-size", type=int)
    users.add_argument("--username-filter")
    users.add_argument("--exclude-self", action="store_true", default=None)
    users.add_argument("--exclude-friends", action="store_true", default=None)

    channel = sub.add_parser("channel", help="Show a channel")
    channel.add_argument("channel_id")

    messages = sub.add_parser("messages", help="List channel messages")
    messages.add_argument("channel_id")
    messages.add_argument("--page", type=int)
    messages.add_argument("--page-size", type=int)
    messages.add_argument("--before-msg")

    sub.add_parser("rooms", help="List rooms that can be joined")

    create_room = sub.add_parser("create-room", help="Create a room")
    create_room.add_argument("name")
    create_room.add_argument(
        "--membership-model", choices=["public", "friends"], default="public"
    )

    join_room = sub.add_parser("join-room", help="Join a room")
    join_room.add_argument("room_id")

    send_friend = sub.add_parser("send-friend-request", help="Send a friend request")
    send_friend.add_argument("user_id")

    accept_friend = sub.add_parser(
        "accept-friend-request", help="Accept a friend request"
    )
    accept_friend.add_argument("user_id")

    classify_cmd = sub.add_parser("classify", help="Classify a chat line")
    classify_cmd.add_argument("line")

    sub.add_parser("listen", help="Print feed events until interrupted")

    return parser


async def run_command(
    args: argparse.Namespace, config: ClientConfig, client: BroChatClient
) -> int:
    """
    Run one REST command.

    Returns:
        int: Process exit status
    """
    auth = config.auth_info()
    command = args.command

    if command == "user":
        result = await client.get_user(auth)
    elif command == "users":
        result = await client.get_users(auth, _options_from_args(args))
    elif command == "channel":
        result = await client.get_channel(auth, args.channel_id)
    elif command == "messages":
        result = await client.get_channel_messages(
            auth, args.channel_id, _options_from_args(args)
        )
    elif command == "rooms":
        result = await client.get_rooms(auth)
    elif command == "create-room":
        request = CreateRoomRequest(
            name=args.name, membership_model=args.membership_model
        )
        result = await client.create_room(auth, request)
    elif command == "join-room":
        result = await client.join_room(auth, args.room_id)
    elif command == "send-friend-request":
        result = await client.send_friend_request(
            auth, SendFriendRequestRequest(requested_user_id=args.user_id)
        )
    elif command == "accept-friend-request":
        result = await client.accept_friend_request(
            auth, AcceptFriendRequestRequest(initiating_user_id=args.user_id)
        )
    else:
        raise ValueError(f"unknown command: {command}")

    return _print_result(result)


def run_classify(line: str) -> int:
    """Print how a chat line is classified."""
    is_macro, macro_type = classify(line)
    request = parse_macro(line)
    print(
        json.dumps(
            {
                "is_macro": is_macro,
                "type": macro_type.value,
                "body": request.body if request else None,
            }
        )
    )
    return 0


async def run_listen(config: ClientConfig) -> int:
    """Print every feed payload until the connection closes."""
    feed = FeedClient(config.feed_url, config.auth_info())

    def show(payload: Any) -> None:
        if isinstance(payload, UnrecognizedFeedMessage):
            print(json.dumps({"unrecognized": payload.type_tag}))
            return
        print(json.dumps(_to_jsonable(payload)))

    for message_type in FeedMessageType:
        feed.on(message_type, show)
    feed.on_unrecognized(show)

    try:
        await feed.connect()
    except ConnectionError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    try:
        await feed.receive_feed()
    finally:
        await feed.disconnect()
        logger.info("Feed stats: %s", dataclasses.asdict(feed.stats))
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the command line client."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = ClientConfig.from_env()
    except ValueError as e:
        parser.error(str(e))

    overrides = {}
    if args.base_url:
        overrides["base_url"] = args.base_url
    if args.feed_url:
        overrides["feed_url"] = args.feed_url
    if args.token:
        overrides["access_token"] = args.token
    if args.log_level:
        overrides["log_level"] = args.log_level.upper()
    config = dataclasses.replace(config, **overrides)

    logging.basicConfig(
        level=getattr(logging, config.log_level, logging.WARNING),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    logger.debug("Loaded %r", config)

    if args.command == "classify":
        return run_classify(args.line)

    try:
        if args.command == "listen":
            return asyncio.run(run_listen(config))
        return asyncio.run(run_command(args, config, config.create_client()))
    except KeyboardInterrupt:
        print("\nExiting...")
        return 0


if __name__ == "__main__":
    sys.exit(main())
