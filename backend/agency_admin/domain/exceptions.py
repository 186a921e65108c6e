"""Domain-specific exceptions — framework-independent."""


class EntityNotFoundError(Exception):
    """Raised when a mutation targets an entity missing from the local collection."""

    def __init__(self, entity_type: str, entity_id: str):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(f"{entity_type} with id '{entity_id}' not found")


class EntityValidationError(Exception):
    """Raised before any gateway call when submitted fields are invalid."""

    def __init__(self, entity_type: str, errors: list[str]):
        self.entity_type = entity_type
        self.errors = errors
        super().__init__(f"Invalid {entity_type}: {'; '.join(errors)}")


class GatewayError(Exception):
    """Raised when the remote data gateway rejects or fails a call.

    Covers transport failures (status_code 0), permission denials from
    row-level security and constraint violations.
    """

    def __init__(self, status_code: int, message: str, operation: str = ""):
        self.status_code = status_code
        self.message = message
        self.operation = operation
        prefix = f"[{operation}] " if operation else ""
        super().__init__(f"{prefix}{status_code}: {message}")


class PermissionDeniedError(Exception):
    """Raised when the current session lacks the role an operation needs."""

    def __init__(self, required_role: str, actual_role: str | None):
        self.required_role = required_role
        self.actual_role = actual_role
        super().__init__(
            f"Role '{required_role}' required, session has '{actual_role or 'anonymous'}'"
        )


class PartialWriteError(GatewayError):
    """Raised when a write spanning several calls failed after some of them landed.

    The server may now hold a mix of old and new state for the entity, so
    the caller must re-read it before trusting its local copy.
    """
