"""
Application error taxonomy.

Routers never build HTTP errors for these by hand: the handlers registered in
studiodesk.main map each class to its status code.
"""


class StudioError(Exception):
    """Base class for errors raised by use cases and the session gate."""
    public_message = "Request failed"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.public_message)
        self.message = message or self.public_message


class AuthenticationError(StudioError):
    """Missing/invalid session or bad credentials (401)."""
    public_message = "Not authenticated"


class PermissionDeniedError(StudioError):
    """Authenticated, but the role does not allow the operation (403)."""
    public_message = "Forbidden"


class ValidationError(StudioError, ValueError):
    """Input that passed schema checks but breaks a business rule (400)."""
    public_message = "Invalid request data"


class NotFoundError(StudioError):
    """Record is absent or belongs to another firm (404)."""
    public_message = "Not found"

    @classmethod
    def for_entity(cls, entity: str) -> "NotFoundError":
        return cls(f"{entity} not found")


class StorageError(StudioError):
    """Persistence failure; logged server-side, generic message to the client (500)."""
    public_message = "Internal server error"
