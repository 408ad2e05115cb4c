"""Error kinds (machine-readable codes).

ErrorKind is the closed taxonomy of failure types. Each kind belongs to exactly
one family and carries the family's canonical HTTP status code and category.
Values equal member names and are used verbatim as the wire ``code``.

Families:
- Validation (400)
- Authentication (401)
- Authorization (403)
- Not found (404)
- Conflict (409)
- Rate limit (429)
- External service (502/503)
- Database (500)
- Network (502)
- Timeout (408)
- Security (403)
- Business rule (422)
- Internal (500)
"""

from enum import Enum

from faultline.core.enums.error_category import ErrorCategory


class ErrorKind(str, Enum):
    """Machine-readable error kinds.

    Use ``status_code`` and ``category`` instead of branching on members.
    """

    # Validation errors
    INVALID_INPUT = "INVALID_INPUT"
    MISSING_REQUIRED_FIELD = "MISSING_REQUIRED_FIELD"
    INVALID_FORMAT = "INVALID_FORMAT"
    VALIDATION_FAILED = "VALIDATION_FAILED"

    # Authentication errors
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    TOKEN_EXPIRED = "TOKEN_EXPIRED"
    TOKEN_INVALID = "TOKEN_INVALID"
    SESSION_EXPIRED = "SESSION_EXPIRED"
    ACCOUNT_LOCKED = "ACCOUNT_LOCKED"
    ACCOUNT_DISABLED = "ACCOUNT_DISABLED"

    # Authorization errors
    INSUFFICIENT_PERMISSIONS = "INSUFFICIENT_PERMISSIONS"
    ACCESS_DENIED = "ACCESS_DENIED"
    RESOURCE_FORBIDDEN = "RESOURCE_FORBIDDEN"

    # Not found errors
    USER_NOT_FOUND = "USER_NOT_FOUND"
    RESOURCE_NOT_FOUND = "RESOURCE_NOT_FOUND"
    ENDPOINT_NOT_FOUND = "ENDPOINT_NOT_FOUND"

    # Conflict errors
    RESOURCE_ALREADY_EXISTS = "RESOURCE_ALREADY_EXISTS"
    DUPLICATE_ENTRY = "DUPLICATE_ENTRY"
    CONCURRENT_MODIFICATION = "CONCURRENT_MODIFICATION"

    # Rate limit errors
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"
    TOO_MANY_REQUESTS = "TOO_MANY_REQUESTS"

    # External service errors
    EXTERNAL_API_ERROR = "EXTERNAL_API_ERROR"
    EXTERNAL_SERVICE_TIMEOUT = "EXTERNAL_SERVICE_TIMEOUT"
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"

    # Database errors
    DATABASE_CONNECTION_ERROR = "DATABASE_CONNECTION_ERROR"
    QUERY_FAILED = "QUERY_FAILED"
    TRANSACTION_FAILED = "TRANSACTION_FAILED"
    CONSTRAINT_VIOLATION = "CONSTRAINT_VIOLATION"

    # Network errors
    NETWORK_ERROR = "NETWORK_ERROR"
    CONNECTION_TIMEOUT = "CONNECTION_TIMEOUT"
    DNS_ERROR = "DNS_ERROR"

    # Timeout errors
    TIMEOUT = "TIMEOUT"

    # Security errors
    SECURITY_VIOLATION = "SECURITY_VIOLATION"
    SUSPICIOUS_ACTIVITY = "SUSPICIOUS_ACTIVITY"
    BRUTE_FORCE_ATTEMPT = "BRUTE_FORCE_ATTEMPT"

    # Business rule errors
    BUSINESS_RULE_VIOLATION = "BUSINESS_RULE_VIOLATION"
    INVALID_OPERATION = "INVALID_OPERATION"
    DEPENDENCY_NOT_MET = "DEPENDENCY_NOT_MET"

    # Internal errors
    INTERNAL_SERVER_ERROR = "INTERNAL_SERVER_ERROR"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"

    @property
    def status_code(self) -> int:
        """Canonical HTTP status code for this kind."""
        return _KIND_TABLE[self][0]

    @property
    def category(self) -> ErrorCategory:
        """Category of the family this kind belongs to."""
        return _KIND_TABLE[self][1]


_KIND_TABLE: dict[ErrorKind, tuple[int, ErrorCategory]] = {
    ErrorKind.INVALID_INPUT: (400, ErrorCategory.VALIDATION),
    ErrorKind.MISSING_REQUIRED_FIELD: (400, ErrorCategory.VALIDATION),
    ErrorKind.INVALID_FORMAT: (400, ErrorCategory.VALIDATION),
    ErrorKind.VALIDATION_FAILED: (400, ErrorCategory.VALIDATION),
    ErrorKind.INVALID_CREDENTIALS: (401, ErrorCategory.AUTHENTICATION),
    ErrorKind.TOKEN_EXPIRED: (401, ErrorCategory.AUTHENTICATION),
    ErrorKind.TOKEN_INVALID: (401, ErrorCategory.AUTHENTICATION),
    ErrorKind.SESSION_EXPIRED: (401, ErrorCategory.AUTHENTICATION),
    ErrorKind.ACCOUNT_LOCKED: (401, ErrorCategory.AUTHENTICATION),
    ErrorKind.ACCOUNT_DISABLED: (401, ErrorCategory.AUTHENTICATION),
    ErrorKind.INSUFFICIENT_PERMISSIONS: (403, ErrorCategory.AUTHORIZATION),
    ErrorKind.ACCESS_DENIED: (403, ErrorCategory.AUTHORIZATION),
    ErrorKind.RESOURCE_FORBIDDEN: (403, ErrorCategory.AUTHORIZATION),
    ErrorKind.USER_NOT_FOUND: (404, ErrorCategory.NOT_FOUND),
    ErrorKind.RESOURCE_NOT_FOUND: (404, ErrorCategory.NOT_FOUND),
    ErrorKind.ENDPOINT_NOT_FOUND: (404, ErrorCategory.NOT_FOUND),
    ErrorKind.RESOURCE_ALREADY_EXISTS: (409, ErrorCategory.CONFLICT),
    ErrorKind.DUPLICATE_ENTRY: (409, ErrorCategory.CONFLICT),
    ErrorKind.CONCURRENT_MODIFICATION: (409, ErrorCategory.CONFLICT),
    ErrorKind.RATE_LIMIT_EXCEEDED: (429, ErrorCategory.RATE_LIMIT),
    ErrorKind.TOO_MANY_REQUESTS: (429, ErrorCategory.RATE_LIMIT),
    ErrorKind.EXTERNAL_API_ERROR: (502, ErrorCategory.EXTERNAL_SERVICE),
    ErrorKind.EXTERNAL_SERVICE_TIMEOUT: (502, ErrorCategory.EXTERNAL_SERVICE),
    ErrorKind.SERVICE_UNAVAILABLE: (503, ErrorCategory.EXTERNAL_SERVICE),
    ErrorKind.DATABASE_CONNECTION_ERROR: (500, ErrorCategory.DATABASE),
    ErrorKind.QUERY_FAILED: (500, ErrorCategory.DATABASE),
    ErrorKind.TRANSACTION_FAILED: (500, ErrorCategory.DATABASE),
    ErrorKind.CONSTRAINT_VIOLATION: (500, ErrorCategory.DATABASE),
    ErrorKind.NETWORK_ERROR: (502, ErrorCategory.EXTERNAL_SERVICE),
    ErrorKind.CONNECTION_TIMEOUT: (502, ErrorCategory.EXTERNAL_SERVICE),
    ErrorKind.DNS_ERROR: (502, ErrorCategory.EXTERNAL_SERVICE),
    ErrorKind.TIMEOUT: (408, ErrorCategory.EXTERNAL_SERVICE),
    ErrorKind.SECURITY_VIOLATION: (403, ErrorCategory.SECURITY),
    ErrorKind.SUSPICIOUS_ACTIVITY: (403, ErrorCategory.SECURITY),
    ErrorKind.BRUTE_FORCE_ATTEMPT: (403, ErrorCategory.SECURITY),
    ErrorKind.BUSINESS_RULE_VIOLATION: (422, ErrorCategory.BUSINESS_LOGIC),
    ErrorKind.INVALID_OPERATION: (422, ErrorCategory.BUSINESS_LOGIC),
    ErrorKind.DEPENDENCY_NOT_MET: (422, ErrorCategory.BUSINESS_LOGIC),
    ErrorKind.INTERNAL_SERVER_ERROR: (500, ErrorCategory.INTERNAL),
    ErrorKind.UNKNOWN_ERROR: (500, ErrorCategory.INTERNAL),
}
