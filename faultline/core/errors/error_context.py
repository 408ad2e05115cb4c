"""Structured diagnostic context attached to errors.

ErrorContext is a closed set of named, optional sections (user, request,
resource, fields, metadata) plus an ``extra`` mapping for unstructured
diagnostic keys that specific error families thread through (retry_after,
original_error, stack, target, db_code, ...).

Contexts are immutable. Enrichment always produces a new instance via
``merge()``; existing keys are only replaced when ``overwrite=True`` is passed.

Usage:
    from faultline.core.errors import ErrorContextBuilder

    context = (
        ErrorContextBuilder()
        .add_user("user-123", "user@example.com")
        .add_request("req-1", "POST", "/api/v1/users")
        .add_field("email", "not-an-email")
        .build()
    )
    context.to_dict()
    # {"user": {"user_id": "user-123", "email": "user@example.com"},
    #  "request": {"id": "req-1", "method": "POST", "path": "/api/v1/users"},
    #  "fields": {"email": "not-an-email"}}
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Self

SECTION_NAMES = frozenset({"user", "request", "resource", "fields", "metadata"})


def _freeze(mapping: Mapping[str, Any] | None) -> Mapping[str, Any]:
    return MappingProxyType(dict(mapping or {}))


def _merge_maps(
    base: Mapping[str, Any], incoming: Mapping[str, Any], overwrite: bool
) -> dict[str, Any]:
    merged = dict(base)
    for key, value in incoming.items():
        if overwrite or key not in merged:
            merged[key] = value
    return merged


def _compact(values: dict[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in values.items() if value is not None}


def _text(value: Any) -> str | None:
    return None if value is None else str(value)


@dataclass(frozen=True, slots=True, kw_only=True)
class UserContext:
    """Who triggered the failure.

    Attributes:
        user_id: User identifier.
        email: Optional email address.
        attributes: Any other user keys carried from foreign sources.
    """

    user_id: str
    email: str | None = None
    attributes: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "attributes", _freeze(self.attributes))

    def to_dict(self) -> dict[str, Any]:
        return {
            **dict(self.attributes),
            **_compact({"user_id": self.user_id, "email": self.email}),
        }

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> UserContext:
        values = dict(data)
        user_id = values.pop("user_id", None) or values.pop("userId", None)
        email = values.pop("email", None)
        return cls(
            user_id=str(user_id or "unknown"), email=_text(email), attributes=values
        )


@dataclass(frozen=True, slots=True, kw_only=True)
class RequestContext:
    """The inbound request being processed when the failure happened."""

    id: str | None = None
    method: str | None = None
    path: str | None = None
    ip: str | None = None
    user_agent: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return _compact(
            {
                "id": self.id,
                "method": self.method,
                "path": self.path,
                "ip": self.ip,
                "user_agent": self.user_agent,
            }
        )

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> RequestContext:
        return cls(
            id=_text(
                data.get("id") or data.get("request_id") or data.get("requestId")
            ),
            method=_text(data.get("method")),
            path=_text(data.get("path") or data.get("pathname")),
            ip=_text(data.get("ip")),
            user_agent=_text(data.get("user_agent") or data.get("userAgent")),
        )


@dataclass(frozen=True, slots=True, kw_only=True)
class ResourceContext:
    """The resource the failing operation targeted."""

    type: str
    id: str

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type, "id": self.id}

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> ResourceContext:
        return cls(
            type=str(data.get("type") or data.get("resource_type") or "unknown"),
            id=str(data.get("id") or data.get("resource_id") or ""),
        )


@dataclass(frozen=True, slots=True, kw_only=True)
class ErrorContext:
    """Immutable diagnostic context for a StructuredError.

    Attributes:
        user: Acting user, if known.
        request: Inbound request metadata, if known.
        resource: Targeted resource, if known.
        fields: Field name to offending value (validation).
        metadata: Arbitrary caller-supplied metadata.
        extra: Family-specific diagnostic keys, flattened into ``to_dict()``.
    """

    user: UserContext | None = None
    request: RequestContext | None = None
    resource: ResourceContext | None = None
    fields: Mapping[str, Any] = field(default_factory=dict)
    metadata: Mapping[str, Any] = field(default_factory=dict)
    extra: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        reserved = SECTION_NAMES.intersection(self.extra)
        if reserved:
            raise ValueError(f"extra keys shadow context sections: {sorted(reserved)}")
        object.__setattr__(self, "fields", _freeze(self.fields))
        object.__setattr__(self, "metadata", _freeze(self.metadata))
        object.__setattr__(self, "extra", _freeze(self.extra))

    @property
    def is_empty(self) -> bool:
        return not self.to_dict()

    def get(self, key: str, default: Any = None) -> Any:
        """Look up a key of the materialized context."""
        return self.to_dict().get(key, default)

    def to_dict(self) -> dict[str, Any]:
        """Materialize as a plain nested dict, omitting empty sections."""
        data: dict[str, Any] = {}
        if self.user is not None:
            data["user"] = self.user.to_dict()
        if self.request is not None:
            request = self.request.to_dict()
            if request:
                data["request"] = request
        if self.resource is not None:
            data["resource"] = self.resource.to_dict()
        if self.fields:
            data["fields"] = dict(self.fields)
        if self.metadata:
            data["metadata"] = dict(self.metadata)
        data.update(self.extra)
        return data

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> ErrorContext:
        """Parse a loose mapping: known section names become sections."""
        if not data:
            return cls()
        values = dict(data)
        user = values.pop("user", None)
        request = values.pop("request", None)
        resource = values.pop("resource", None)
        fields = values.pop("fields", None)
        metadata = values.pop("metadata", None)
        return cls(
            user=_section(user, UserContext),
            request=_section(request, RequestContext),
            resource=_section(resource, ResourceContext),
            fields=fields if isinstance(fields, Mapping) else {},
            metadata=metadata if isinstance(metadata, Mapping) else {},
            extra=values,
        )

    @classmethod
    def coerce(cls, value: ErrorContext | Mapping[str, Any] | None) -> ErrorContext:
        if isinstance(value, ErrorContext):
            return value
        return cls.from_mapping(value)

    def merge(
        self,
        other: ErrorContext | Mapping[str, Any] | None,
        *,
        overwrite: bool = False,
    ) -> ErrorContext:
        """Return a new context combining this one with ``other``.

        Args:
            other: Context or loose mapping to merge in.
            overwrite: Replace keys that are already present. When False,
                only absent sections and keys are filled.

        Returns:
            ErrorContext: The merged context. ``self`` is left untouched.
        """
        incoming = ErrorContext.coerce(other)
        return replace(
            self,
            user=_pick(self.user, incoming.user, overwrite),
            request=_pick(self.request, incoming.request, overwrite),
            resource=_pick(self.resource, incoming.resource, overwrite),
            fields=_merge_maps(self.fields, incoming.fields, overwrite),
            metadata=_merge_maps(self.metadata, incoming.metadata, overwrite),
            extra=_merge_maps(self.extra, incoming.extra, overwrite),
        )


def _section(value: Any, section_type: Any) -> Any:
    if value is None or isinstance(value, section_type):
        return value
    if isinstance(value, Mapping):
        return section_type.from_mapping(value)
    return None


def _pick(current: Any, incoming: Any, overwrite: bool) -> Any:
    if incoming is None:
        return current
    if current is None or overwrite:
        return incoming
    return current


class ErrorContextBuilder:
    """Fluent accumulator for ErrorContext.

    ``add_field`` and ``add_metadata`` accumulate; the single-valued sections
    keep the last call. ``build()`` can be called any number of times and
    every call returns an independent snapshot.
    """

    def __init__(self) -> None:
        self._user: UserContext | None = None
        self._request: RequestContext | None = None
        self._resource: ResourceContext | None = None
        self._fields: dict[str, Any] = {}
        self._metadata: dict[str, Any] = {}

    def add_user(self, user_id: str, email: str | None = None) -> Self:
        self._user = UserContext(user_id=user_id, email=email)
        return self

    def add_request(
        self,
        request_id: str,
        method: str | None = None,
        path: str | None = None,
        *,
        ip: str | None = None,
        user_agent: str | None = None,
    ) -> Self:
        self._request = RequestContext(
            id=request_id, method=method, path=path, ip=ip, user_agent=user_agent
        )
        return self

    def add_resource(self, resource_type: str, resource_id: str) -> Self:
        self._resource = ResourceContext(type=resource_type, id=resource_id)
        return self

    def add_field(self, name: str, value: Any) -> Self:
        self._fields[name] = value
        return self

    def add_metadata(self, key: str, value: Any) -> Self:
        self._metadata[key] = value
        return self

    def build(self) -> ErrorContext:
        return ErrorContext(
            user=self._user,
            request=self._request,
            resource=self._resource,
            fields=dict(self._fields),
            metadata=dict(self._metadata),
        )
