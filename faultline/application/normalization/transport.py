"""Rules for network and timeout failures.

Timeouts are checked before generic transport errors because several
transport exceptions are both (``httpx.ConnectTimeout`` is a TransportError
and a TimeoutException). Errors named FetchError or NetworkError stay
network errors even when their message mentions a timeout.
"""

from __future__ import annotations

import socket
from typing import Any

import httpx

from faultline.application.normalization.rule import NormalizationRule
from faultline.application.normalization.shapes import (
    error_message,
    error_name,
    error_stack,
    origin,
)
from faultline.core.enums import ErrorKind
from faultline.core.errors import (
    ExternalServiceError,
    NetworkError,
    OperationTimeoutError,
    StructuredError,
)

NETWORK_NAMES = frozenset({"FetchError", "NetworkError"})
TIMEOUT_NAMES = frozenset({"TimeoutError"})


def _details(raw: Any) -> dict[str, Any]:
    return origin(
        raw, original_message=error_message(raw) or None, stack=error_stack(raw)
    )


def _is_upstream_status(raw: Any) -> bool:
    return isinstance(raw, httpx.HTTPStatusError)


def _from_upstream_status(raw: httpx.HTTPStatusError) -> StructuredError:
    status = raw.response.status_code
    if status == 503:
        kind = ErrorKind.SERVICE_UNAVAILABLE
    elif status == 504:
        kind = ErrorKind.EXTERNAL_SERVICE_TIMEOUT
    else:
        kind = ErrorKind.EXTERNAL_API_ERROR
    return ExternalServiceError(
        "External service request failed",
        raw.request.url.host or None,
        kind=kind,
        context=origin(raw, upstream_status=status),
    )


def _is_timeout(raw: Any) -> bool:
    if isinstance(raw, httpx.TimeoutException | TimeoutError):
        return True
    if error_name(raw) in NETWORK_NAMES:
        return False
    if error_name(raw) in TIMEOUT_NAMES:
        return True
    return "timeout" in error_message(raw).lower()


def _from_timeout(raw: Any) -> StructuredError:
    return OperationTimeoutError("Request timeout", context=_details(raw))


def _is_network(raw: Any) -> bool:
    if isinstance(raw, httpx.TransportError | ConnectionError | socket.gaierror):
        return True
    return error_name(raw) in NETWORK_NAMES


def _from_network(raw: Any) -> StructuredError:
    kind = ErrorKind.DNS_ERROR if isinstance(raw, socket.gaierror) else None
    return NetworkError("Network request failed", kind, context=_details(raw))


TRANSPORT_RULES: tuple[NormalizationRule, ...] = (
    NormalizationRule(
        name="upstream_status", matches=_is_upstream_status, build=_from_upstream_status
    ),
    NormalizationRule(name="timeout", matches=_is_timeout, build=_from_timeout),
    NormalizationRule(name="network", matches=_is_network, build=_from_network),
)
