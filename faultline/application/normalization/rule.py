"""Normalization rule type."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from faultline.core.errors import StructuredError


@dataclass(frozen=True, slots=True)
class NormalizationRule:
    """One link of the normalization chain.

    Attributes:
        name: Identifier used in logs when the rule fails.
        matches: Predicate over the raw failure.
        build: Builds the StructuredError for a matching failure.
    """

    name: str
    matches: Callable[[Any], bool]
    build: Callable[[Any], StructuredError]
