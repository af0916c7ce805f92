"""
Error taxonomy for engagement operations.

Services raise these; the HTTP layer turns them into the {code, message}
envelope using each class's status_code.
"""


class EngagementError(Exception):
    """Base class for every structured error raised by the core."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class ValidationError(EngagementError):
    """Malformed or missing required input."""

    status_code = 400


class Unauthenticated(EngagementError):
    """No verifiable caller identity on a request that needs one."""

    status_code = 401


class MissingCredential(Unauthenticated):
    pass


class InvalidSignature(Unauthenticated):
    pass


class TokenExpired(Unauthenticated):
    pass


class MalformedToken(Unauthenticated):
    pass


class ConfigurationError(Unauthenticated):
    """The server has no signing key, so no credential can be verified."""


class Unauthorized(EngagementError):
    """Authenticated, but not allowed to touch the target resource."""

    status_code = 403


class NotFound(EngagementError):
    status_code = 404


class StoreUnavailable(EngagementError):
    """The document store failed; surfaced as-is, never retried."""

    status_code = 500


class DuplicateItem(EngagementError):
    """Insert hit an existing key (another request created the item first)."""

    status_code = 409
