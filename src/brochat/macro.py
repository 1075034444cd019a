"""
Chat Macro Classification

A chat line whose first token starts with "/" is a macro command rather
than plain chat text. This module classifies raw lines and extracts the
macro arguments.

    /roll 2d6    -> dice roll, body "2d6"
    /FLIP        -> coin flip (the command token is case-insensitive)
    /dance       -> unrecognized command
    hello /roll  -> plain chat text

Classification is pure and never fails. An UNRECOGNIZED result still
means the sender meant a command, so callers should answer with an
"unknown command" message rather than posting the line as chat.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Tuple

from .errors import MacroParsingError
from .schemas.events import ChatMacroRequest

MACRO_MARKER = "/"

_WHITESPACE = re.compile(r"\s+")
_ROLL_TOKEN = re.compile(r"^(\d*)[dD](\d+)$")

MAX_DICE_COUNT = 100
MAX_DICE_SIDES = 1000


class MacroType(str, Enum):
    """Kinds of chat lines."""

    NONE = "none"
    ROLL = "dice-roll"
    FLIP = "coin-flip"
    UNRECOGNIZED = "unknown"


KNOWN_MACROS: Dict[str, MacroType] = {
    "/roll": MacroType.ROLL,
    "/flip": MacroType.FLIP,
}


@dataclass(frozen=True)
class MacroRequest:
    """
    A classified macro line.

    Attributes:
        type: The macro kind
        body: Argument text following the command token
    """

    type: MacroType
    body: str = ""

    @property
    def arguments(self) -> List[str]:
        """Body split on whitespace."""
        return self.body.split()

    def to_chat_macro_request(self, channel_id: str) -> ChatMacroRequest:
        """
        Build the feed payload for this macro.

        Raises:
            MacroParsingError: If the macro is not a recognized command
        """
        if self.type in (MacroType.NONE, MacroType.UNRECOGNIZED):
            raise MacroParsingError(f"unknown macro type: {self.type.value}")
        return ChatMacroRequest(
            channel_id=channel_id,
            type=self.type.value,
            arguments=self.arguments,
        )


@dataclass(frozen=True)
class DiceRoll:
    """Parsed arguments of a /roll macro."""

    count: int
    sides: int


def _split(raw: str) -> Tuple[str, str]:
    parts = _WHITESPACE.split(raw, maxsplit=1)
    token = parts[0]
    body = parts[1] if len(parts) > 1 else ""
    return token, body


def classify(raw: str) -> Tuple[bool, MacroType]:
    """
    Classify a raw chat line.

    Args:
        raw: The line as typed by the user

    Returns:
        tuple: (is_macro, macro_type)
    """
    token, _ = _split(raw)
    if not token.startswith(MACRO_MARKER):
        return False, MacroType.NONE
    return True, KNOWN_MACROS.get(token.lower(), MacroType.UNRECOGNIZED)


def parse_macro(raw: str) -> Optional[MacroRequest]:
    """
    Parse a raw chat line into a MacroRequest.

    Returns:
        None for plain chat text, otherwise the classified request. The
        body keeps the argument text verbatim (case included).
    """
    is_macro, macro_type = classify(raw)
    if not is_macro:
        return None
    _, body = _split(raw)
    return MacroRequest(type=macro_type, body=body)


def parse_dice_roll(body: str) -> DiceRoll:
    """
    Parse /roll arguments of the form NdM.

    "d20" is one twenty-sided die and an empty body is one six-sided die.

    Raises:
        MacroParsingError: If the token is not a valid roll
    """
    tokens = body.split()
    if not tokens:
        return DiceRoll(count=1, sides=6)
    if len(tokens) > 1:
        raise MacroParsingError("invalid roll command token")

    match = _ROLL_TOKEN.match(tokens[0])
    if not match:
        raise MacroParsingError("invalid roll command token")

    count = int(match.group(1)) if match.group(1) else 1
    sides = int(match.group(2))
    if not 1 <= count <= MAX_DICE_COUNT or not 2 <= sides <= MAX_DICE_SIDES:
        raise MacroParsingError("invalid roll command token")
    return DiceRoll(count=count, sides=sides)
