"""Conversion of arbitrary failures into StructuredError.

ErrorNormalizer walks an explicit, ordered chain of NormalizationRule
objects; the first rule whose predicate matches builds the error. New
foreign sources are supported by adding a rule, never by editing an
existing one.

Default chain:
    1. StructuredError           -> returned unchanged
    2. Aliases and framework     -> matching family (aliases.py)
    3. Persistence errors        -> mapped by engine code (persistence.py)
    4. Upstream/network/timeout  -> External/Network/Timeout (transport.py)
    5. Anything else             -> InternalServerError

``normalize()`` never raises. A rule that fails is logged at WARNING and the
failure falls through to step 5.

Usage:
    normalizer = ErrorNormalizer(sanitize=settings.should_sanitize)
    error = normalizer.normalize(exc)

    # Project-specific sources run before the defaults
    normalizer = normalizer.with_rules(
        NormalizationRule(name="stripe", matches=is_stripe_error, build=from_stripe)
    )
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Self

from faultline.application.normalization.aliases import ALIAS_RULES
from faultline.application.normalization.persistence import PERSISTENCE_RULES
from faultline.application.normalization.rule import NormalizationRule
from faultline.application.normalization.shapes import (
    error_message,
    error_name,
    error_stack,
    origin,
)
from faultline.application.normalization.transport import TRANSPORT_RULES
from faultline.core.errors import InternalServerError, StructuredError
from faultline.domain.protocols import LoggerProtocol

PASSTHROUGH_RULE = NormalizationRule(
    name="structured",
    matches=lambda raw: isinstance(raw, StructuredError),
    build=lambda raw: raw,
)

DEFAULT_RULES: tuple[NormalizationRule, ...] = (
    *ALIAS_RULES,
    *PERSISTENCE_RULES,
    *TRANSPORT_RULES,
)


class ErrorNormalizer:
    """Chain-of-responsibility normalizer.

    Args:
        rules: Rules tried after the StructuredError pass-through.
            Defaults to ``DEFAULT_RULES``.
        sanitize: Replace the message of unrecognized failures with
            ``generic_message``.
        generic_message: Message used for unrecognized failures while
            sanitizing.
        logger: Receives a warning when a rule raises.
    """

    def __init__(
        self,
        rules: Sequence[NormalizationRule] | None = None,
        *,
        sanitize: bool = False,
        generic_message: str = "An internal error occurred",
        logger: LoggerProtocol | None = None,
    ) -> None:
        self._rules = tuple(DEFAULT_RULES if rules is None else rules)
        self._sanitize = sanitize
        self._generic_message = generic_message
        self._logger = logger

    @property
    def rules(self) -> tuple[NormalizationRule, ...]:
        return (PASSTHROUGH_RULE, *self._rules)

    def with_rules(self, *rules: NormalizationRule) -> Self:
        """Return a normalizer trying ``rules`` before the current ones.

        StructuredError pass-through always stays first.
        """
        return type(self)(
            (*rules, *self._rules),
            sanitize=self._sanitize,
            generic_message=self._generic_message,
            logger=self._logger,
        )

    def normalize(self, raw: Any) -> StructuredError:
        for rule in self.rules:
            try:
                if rule.matches(raw):
                    return rule.build(raw)
            except Exception as exc:
                if self._logger is not None:
                    self._logger.warning(
                        "Normalization rule failed",
                        rule=rule.name,
                        reason=type(exc).__name__,
                    )
                break
        return self._fallback(raw)

    def _fallback(self, raw: Any) -> StructuredError:
        try:
            original = error_message(raw)
            message = self._generic_message if self._sanitize else original
            return InternalServerError(
                message or self._generic_message,
                context=origin(
                    raw,
                    original_message=original or None,
                    stack=error_stack(raw),
                ),
            )
        except Exception:
            return InternalServerError(
                self._generic_message,
                context={"original_error": _safe_name(raw)},
            )


def _safe_name(raw: Any) -> str:
    try:
        return error_name(raw)
    except Exception:
        return type(raw).__name__
