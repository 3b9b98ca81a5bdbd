"""Domain error taxonomy. The API layer maps each class to an HTTP status."""


class AppError(Exception):
    """Base class for errors raised by services and repositories."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class InvalidCredentials(AppError):
    """Unknown username or wrong password (deliberately indistinguishable)."""

    status_code = 401

    def __init__(self, message: str = "Invalid username or password.") -> None:
        super().__init__(message)


class Unauthorized(AppError):
    """Token subject does not resolve to a live account."""

    status_code = 401

    def __init__(self, message: str = "Not authenticated") -> None:
        super().__init__(message)


class DuplicateUsername(AppError):
    status_code = 400

    def __init__(self, username: str) -> None:
        self.username = username
        super().__init__(f"Username '{username}' is already taken.")


class PermissionDenied(AppError):
    """Authorization policy denied the action."""

    status_code = 403


class NotFound(AppError):
    status_code = 404

    def __init__(self, kind: str, record_id: str) -> None:
        self.kind = kind
        self.record_id = record_id
        super().__init__(f"{kind} '{record_id}' not found")


class ValidationError(AppError):
    """Missing or malformed required field."""

    status_code = 400


class UploadFailed(AppError):
    """Object storage rejected or failed the upload."""

    status_code = 500


class UpstreamStoreError(AppError):
    """Generic store failure. Message is logged, never returned to the caller."""

    status_code = 500
    public_message = "Storage backend error"
