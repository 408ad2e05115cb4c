"""Accessors for foreign failure values.

Raw failures arrive as Python exceptions, duck-typed objects exposing
``name``/``code``/``meta``/``message`` attributes, or plain mappings carrying
the same keys (errors deserialized from another service, for example).
Rules read them only through these helpers.
"""

from __future__ import annotations

import traceback
from collections.abc import Mapping
from typing import Any


def attribute(raw: Any, key: str, default: Any = None) -> Any:
    if isinstance(raw, Mapping):
        return raw.get(key, default)
    return getattr(raw, key, default)


def error_name(raw: Any) -> str:
    """Declared name of a failure.

    Exceptions are named by their class. Other values use their ``name``
    key or attribute, falling back to the class name.
    """
    if isinstance(raw, BaseException):
        return type(raw).__name__
    name = attribute(raw, "name")
    if isinstance(name, str) and name:
        return name
    return type(raw).__name__


def error_message(raw: Any) -> str:
    if isinstance(raw, BaseException):
        return str(raw)
    message = attribute(raw, "message")
    if message is None:
        return "" if isinstance(raw, Mapping) else str(raw)
    return str(message)


def error_stack(raw: Any) -> str | None:
    if isinstance(raw, BaseException):
        if raw.__traceback__ is None:
            return None
        return "".join(traceback.format_exception(raw))
    stack = attribute(raw, "stack")
    return stack if isinstance(stack, str) else None


def origin(raw: Any, **values: Any) -> dict[str, Any]:
    """Context recording where a synthesized error came from."""
    context = {"original_error": error_name(raw), **values}
    return {key: value for key, value in context.items() if value is not None}
