class VaultError(Exception):
    """Base class for every error raised by securepass."""


class ValidationError(VaultError):
    """Form input rejected before any store call; errors are keyed by field."""

    def __init__(self, errors: dict[str, list[str]]):
        self.errors = errors
        fields = ", ".join(sorted(errors))
        super().__init__(f"Invalid input for: {fields}")

    def first(self, field: str) -> str | None:
        messages = self.errors.get(field)
        return messages[0] if messages else None


class StoreError(VaultError):
    """A list/create/update/delete call failed (transport, permission, server)."""


class NotFoundError(StoreError):
    def __init__(self, record_id: str):
        self.record_id = record_id
        super().__init__(f"Record not found: {record_id}")


class AuthError(VaultError):
    """Identity provider operation failed; the message is safe to show to the user."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class SessionError(VaultError):
    """Record access attempted while the session is still loading or signed out."""
