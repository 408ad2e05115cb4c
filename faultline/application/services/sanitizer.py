"""Redaction of sensitive data before it leaves the process.

ErrorSanitizer is gated by one flag (``Settings.should_sanitize``). When the
flag is off every method returns its input unchanged, which keeps local
development output fully diagnosable.

Message redaction:
    Values following ``password``, ``token``, ``key`` or ``secret`` and an
    ``=`` or ``:`` separator are replaced with ``***``. Matching is
    case-insensitive, the key must not follow a letter ("api_key" matches,
    "monkey" does not) and the key and separator are preserved:

        "password=hunter2 invalid"  ->  "password=*** invalid"
        "API Token: abc123"         ->  "API Token: ***"

Context redaction:
    - Top-level keys password, token, key, secret, authorization are removed.
    - The ``user`` section is stripped of password/token at every depth.
    - ``fields`` and ``metadata`` are stripped of the top-level sensitive set.

All operations are idempotent and never raise.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

from faultline.core.errors import StructuredError

REDACTION_MARKER = "***"

SENSITIVE_KEYS = frozenset({"password", "token", "key", "secret", "authorization"})
SENSITIVE_USER_KEYS = frozenset({"password", "token"})

_SECRET_VALUE = re.compile(
    r"(?<![A-Za-z])(?P<key>password|token|key|secret)"
    r"(?P<sep>\s*[=:]\s*)(?P<value>[^\s,;&]+)",
    re.IGNORECASE,
)


def _redact(match: re.Match[str]) -> str:
    return f"{match.group('key')}{match.group('sep')}{REDACTION_MARKER}"


def _drop_keys(data: Mapping[str, Any], keys: frozenset[str]) -> dict[str, Any]:
    return {
        key: value for key, value in data.items() if str(key).lower() not in keys
    }


def _strip_nested(value: Any, keys: frozenset[str]) -> Any:
    if isinstance(value, Mapping):
        return {
            key: _strip_nested(item, keys)
            for key, item in value.items()
            if str(key).lower() not in keys
        }
    if isinstance(value, list | tuple):
        return [_strip_nested(item, keys) for item in value]
    return value


class ErrorSanitizer:
    """Redacts messages and context dicts.

    Args:
        enabled: Apply redaction. Disabled sanitizers are pass-through.
        generic_message: Replacement message for non-operational errors.
    """

    def __init__(
        self,
        enabled: bool,
        *,
        generic_message: str = "An internal error occurred",
    ) -> None:
        self.enabled = enabled
        self.generic_message = generic_message

    def sanitize_message(self, text: str) -> str:
        if not self.enabled or not text:
            return text
        return _SECRET_VALUE.sub(_redact, text)

    def sanitize_context(self, context: Mapping[str, Any] | None) -> dict[str, Any]:
        """Return a redacted copy of a materialized context dict.

        Args:
            context: Output of ``ErrorContext.to_dict()`` (or any mapping).

        Returns:
            dict: New dict. The input is never modified.
        """
        if not context:
            return {}
        if not self.enabled:
            return dict(context)

        cleaned = _drop_keys(context, SENSITIVE_KEYS)
        user = cleaned.get("user")
        if isinstance(user, Mapping):
            cleaned["user"] = _strip_nested(user, SENSITIVE_USER_KEYS)
        for section in ("fields", "metadata"):
            value = cleaned.get(section)
            if isinstance(value, Mapping):
                cleaned[section] = _drop_keys(value, SENSITIVE_KEYS)
        return cleaned

    def public_message(self, error: StructuredError) -> str:
        """Message safe to show the client.

        Non-operational errors are always replaced with the generic message
        while sanitizing; operational ones are redacted in place.
        """
        if self.enabled and not error.is_operational:
            return self.generic_message
        return self.sanitize_message(error.message)
