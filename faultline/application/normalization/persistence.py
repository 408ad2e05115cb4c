"""Rules for persistence-layer failures.

Two sources are understood:

Prisma-shaped errors (``name`` starting with ``PrismaClient``), as produced
by Prisma clients in other services and forwarded as plain objects or
mappings with ``code`` and ``meta``:

    P2002  unique constraint      -> ConflictError(DUPLICATE_ENTRY), target
    P2025  record not found       -> NotFoundError(RESOURCE_NOT_FOUND)
    P2003  foreign key            -> ValidationError, field
    P2014  relation violation     -> ValidationError, relation
    P2021  table does not exist   -> DatabaseError(QUERY_FAILED), table
    P2022  column does not exist  -> DatabaseError(QUERY_FAILED), column
    other                         -> DatabaseError(QUERY_FAILED), db_code

SQLAlchemy exceptions, mapped by SQLSTATE where the driver exposes one
(psycopg ``pgcode``/``sqlstate``, asyncpg ``sqlstate``) and by the
constraint message otherwise (SQLite):

    23505 unique        -> ConflictError(DUPLICATE_ENTRY)
    23503 foreign key   -> ValidationError
    23502 not null      -> ValidationError(MISSING_REQUIRED_FIELD)
    other integrity     -> DatabaseError(CONSTRAINT_VIOLATION)
    NoResultFound       -> NotFoundError
    StaleDataError      -> ConflictError(CONCURRENT_MODIFICATION)
    connection failures -> DatabaseError(DATABASE_CONNECTION_ERROR)
    anything else       -> DatabaseError(QUERY_FAILED), db_code

Statements and bound parameters are never copied into context.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

from sqlalchemy import exc as sa_exc
from sqlalchemy.orm.exc import StaleDataError

from faultline.application.normalization.rule import NormalizationRule
from faultline.application.normalization.shapes import (
    attribute,
    error_message,
    error_name,
    origin,
)
from faultline.core.enums import ErrorKind
from faultline.core.errors import (
    ConflictError,
    DatabaseError,
    NotFoundError,
    StructuredError,
    ValidationError,
)

UNIQUE_VIOLATION = "23505"
FOREIGN_KEY_VIOLATION = "23503"
NOT_NULL_VIOLATION = "23502"
UNDEFINED_TABLE = "42P01"
UNDEFINED_COLUMN = "42703"

# "Key (email)=(a@b.c) already exists." (PostgreSQL detail)
_PG_KEY = re.compile(r"Key \((?P<columns>[^)]+)\)")
# "UNIQUE constraint failed: users.email, users.tenant_id" (SQLite)
_SQLITE_CONSTRAINT = re.compile(
    r"(?P<constraint>UNIQUE|FOREIGN KEY|NOT NULL) constraint failed"
    r"(?::\s*(?P<columns>.+))?",
    re.IGNORECASE,
)


# ---------------------------------------------------------------------------
# Prisma-shaped errors
# ---------------------------------------------------------------------------


def _is_prisma(raw: Any) -> bool:
    return error_name(raw).startswith("PrismaClient")


def _prisma_known_request(raw: Any) -> StructuredError:
    code = attribute(raw, "code")
    meta = attribute(raw, "meta")
    if not isinstance(meta, Mapping):
        meta = {}

    match code:
        case "P2002":
            return ConflictError(
                "Resource already exists",
                ErrorKind.DUPLICATE_ENTRY,
                context=origin(raw, db_code=code, target=meta.get("target")),
            )
        case "P2025":
            return NotFoundError(
                "Record not found",
                ErrorKind.RESOURCE_NOT_FOUND,
                context=origin(raw, db_code=code),
            )
        case "P2003":
            return ValidationError(
                "Foreign key constraint failed",
                field=meta.get("field_name"),
                context=origin(raw, db_code=code),
            )
        case "P2014":
            return ValidationError(
                "Invalid relation operation",
                context=origin(raw, db_code=code, relation=meta.get("relation_name")),
            )
        case "P2021":
            return DatabaseError(
                "Table does not exist",
                ErrorKind.QUERY_FAILED,
                context=origin(raw, db_code=code, table=meta.get("table")),
            )
        case "P2022":
            return DatabaseError(
                "Column does not exist",
                ErrorKind.QUERY_FAILED,
                context=origin(raw, db_code=code, column=meta.get("column")),
            )
    return DatabaseError(
        "Database operation failed",
        ErrorKind.QUERY_FAILED,
        context=origin(raw, db_code=code, original_message=error_message(raw) or None),
    )


def _from_prisma(raw: Any) -> StructuredError:
    name = error_name(raw)
    if name == "PrismaClientKnownRequestError":
        return _prisma_known_request(raw)
    if name == "PrismaClientValidationError":
        return ValidationError(
            "Database validation failed",
            context=origin(raw, original_message=error_message(raw) or None),
        )
    if name == "PrismaClientInitializationError":
        return DatabaseError(
            "Database connection failed",
            ErrorKind.DATABASE_CONNECTION_ERROR,
            context=origin(raw, db_code=attribute(raw, "errorCode")),
        )
    return DatabaseError(
        "Database operation failed",
        ErrorKind.QUERY_FAILED,
        context=origin(raw, original_message=error_message(raw) or None),
    )


# ---------------------------------------------------------------------------
# SQLAlchemy
# ---------------------------------------------------------------------------


def sqlstate(error: sa_exc.SQLAlchemyError) -> str | None:
    """SQLSTATE reported by the DBAPI driver, if any."""
    orig = getattr(error, "orig", None)
    if orig is None:
        return None
    for attr in ("sqlstate", "pgcode"):
        value = getattr(orig, attr, None)
        if isinstance(value, str) and value:
            return value
    return None


def _driver_message(error: sa_exc.SQLAlchemyError) -> str:
    orig = getattr(error, "orig", None)
    return str(orig) if orig is not None else str(error)


def _columns(error: sa_exc.SQLAlchemyError) -> list[str] | None:
    orig = getattr(error, "orig", None)
    diag = getattr(orig, "diag", None)
    column = getattr(diag, "column_name", None) or getattr(orig, "column_name", None)
    if column:
        return [column]
    message = _driver_message(error)
    if found := _PG_KEY.search(message):
        return [part.strip() for part in found.group("columns").split(",")]
    if (found := _SQLITE_CONSTRAINT.search(message)) and found.group("columns"):
        return [
            part.strip().rsplit(".", 1)[-1]
            for part in found.group("columns").split(",")
        ]
    return None


def _constraint(error: sa_exc.SQLAlchemyError) -> str | None:
    orig = getattr(error, "orig", None)
    diag = getattr(orig, "diag", None)
    return getattr(diag, "constraint_name", None) or getattr(orig, "constraint_name", None)


def _integrity_code(error: sa_exc.IntegrityError) -> str | None:
    code = sqlstate(error)
    if code:
        return code
    found = _SQLITE_CONSTRAINT.search(_driver_message(error))
    if not found:
        return None
    return {
        "UNIQUE": UNIQUE_VIOLATION,
        "FOREIGN KEY": FOREIGN_KEY_VIOLATION,
        "NOT NULL": NOT_NULL_VIOLATION,
    }[found.group("constraint").upper()]


def _from_integrity(raw: sa_exc.IntegrityError) -> StructuredError:
    code = _integrity_code(raw)
    columns = _columns(raw)
    constraint = _constraint(raw)
    if code == UNIQUE_VIOLATION:
        return ConflictError(
            "Resource already exists",
            ErrorKind.DUPLICATE_ENTRY,
            context=origin(raw, db_code=code, target=columns, constraint=constraint),
        )
    if code == FOREIGN_KEY_VIOLATION:
        return ValidationError(
            "Foreign key constraint failed",
            field=columns[0] if columns else None,
            context=origin(raw, db_code=code, constraint=constraint),
        )
    if code == NOT_NULL_VIOLATION:
        return ValidationError(
            "Required field is missing",
            ErrorKind.MISSING_REQUIRED_FIELD,
            field=columns[0] if columns else None,
            context=origin(raw, db_code=code),
        )
    return DatabaseError(
        "Constraint violation",
        ErrorKind.CONSTRAINT_VIOLATION,
        context=origin(raw, db_code=code, constraint=constraint),
    )


def _from_sqlalchemy(raw: sa_exc.SQLAlchemyError) -> StructuredError:
    if isinstance(raw, sa_exc.IntegrityError):
        return _from_integrity(raw)
    if isinstance(raw, sa_exc.NoResultFound):
        return NotFoundError(
            "Record not found",
            ErrorKind.RESOURCE_NOT_FOUND,
            context=origin(raw),
        )
    if isinstance(raw, StaleDataError):
        return ConflictError(
            "Resource was modified concurrently",
            ErrorKind.CONCURRENT_MODIFICATION,
            context=origin(raw),
        )
    if isinstance(
        raw,
        sa_exc.OperationalError
        | sa_exc.InterfaceError
        | sa_exc.DisconnectionError
        | sa_exc.TimeoutError,
    ):
        return DatabaseError(
            "Database connection failed",
            ErrorKind.DATABASE_CONNECTION_ERROR,
            context=origin(raw, db_code=sqlstate(raw) or raw.code),
        )

    code = sqlstate(raw) or raw.code
    if code == UNDEFINED_TABLE:
        message = "Table does not exist"
    elif code == UNDEFINED_COLUMN:
        message = "Column does not exist"
    else:
        message = "Database operation failed"
    return DatabaseError(
        message,
        ErrorKind.QUERY_FAILED,
        context=origin(raw, db_code=code),
    )


PERSISTENCE_RULES: tuple[NormalizationRule, ...] = (
    NormalizationRule(name="prisma", matches=_is_prisma, build=_from_prisma),
    NormalizationRule(
        name="sqlalchemy",
        matches=lambda raw: isinstance(raw, sa_exc.SQLAlchemyError),
        build=_from_sqlalchemy,
    ),
)
