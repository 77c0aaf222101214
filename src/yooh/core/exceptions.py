class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class NotFoundError(DomainError):
    """Raised when a referenced entity does not exist."""


class AlreadySignedError(DomainError):
    """Attendance was already signed for this class today."""


class NoActiveClassError(DomainError):
    """No class template is in session at the evaluated instant."""


class OutsideZoneError(DomainError):
    """The user is not inside the school zone."""


class PermissionDeniedError(DomainError):
    """Location or notification permission was denied by the user."""


class RemoteUnavailableError(DomainError):
    """The remote document store could not be reached."""


class MigrationError(DomainError):
    """The bulk local-to-remote migration failed."""
