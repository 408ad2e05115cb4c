"""Application environment types.

Defines the runtime environments the error layer can be deployed into.
Used by Settings to decide environment-specific behavior (sanitization,
stack traces in responses, log rendering).

Environments:
- DEVELOPMENT: Local development, verbose errors, human-readable logs
- TESTING: Automated test execution, JSON logs
- CI: Continuous integration, JSON logs
- PRODUCTION: Production-like deployment, sanitized responses
"""

from enum import Enum


class Environment(str, Enum):
    """Application environment types."""

    DEVELOPMENT = "development"
    TESTING = "testing"
    CI = "ci"
    PRODUCTION = "production"
