"""Text conversions for scalar setting values.

Every decoder is total: malformed text coerces to False / 0 / 0.0 instead of
raising, a broken config file must never stop the server from starting.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable

TRUE_TEXT = "true"
FALSE_TEXT = "false"

_TRUTHY = (TRUE_TEXT, "1", "yes", "on")


def bool_to_text(value: bool) -> str:
    return TRUE_TEXT if value else FALSE_TEXT


def text_to_bool(text: Any) -> bool:
    """Normalize document text to bool.

    Accepts "true" (any case) plus the loose forms "1", "yes" and "on";
    everything else, including None, is False.
    """
    if isinstance(text, bool):
        return text
    if text is None:
        return False
    return str(text).strip().lower() in _TRUTHY


def float_to_text(value: float) -> str:
    """Fixed two decimal places, e.g. ``1.00``."""
    return f"{float(value):.2f}"


def text_to_float(text: Any) -> float:
    try:
        return float(str(text).strip())
    except (TypeError, ValueError):
        return 0.0


def int_to_text(value: int) -> str:
    return str(int(value))


def text_to_int(text: Any) -> int:
    try:
        return int(str(text).strip())
    except (TypeError, ValueError):
        return 0


def _identity(value: Any) -> str:
    return "" if value is None else str(value)


@dataclass(frozen=True)
class ScalarCodec:
    """Encode/decode pair for one value type."""

    name: str
    encode: Callable[[Any], str]
    decode: Callable[[Any], Any]


BOOL = ScalarCodec("bool", bool_to_text, text_to_bool)
FLOAT = ScalarCodec("float", float_to_text, text_to_float)
INT = ScalarCodec("int", int_to_text, text_to_int)
TEXT = ScalarCodec("text", _identity, _identity)
