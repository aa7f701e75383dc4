class DomainError(Exception):
    """Base exception for business rule violations."""

    kind = "domain_error"


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    kind = "validation_error"


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""

    kind = "forbidden"


class NotFound(DomainError):
    """Raised when a referenced lecture does not exist."""

    kind = "not_found"


class OutOfWindow(DomainError):
    """Raised when a token is requested outside the lecture window."""

    kind = "out_of_window"


class NotEnrolled(DomainError):
    """Raised when the student is not enrolled in the lecture's section."""

    kind = "not_enrolled"


class InvalidToken(DomainError):
    """Raised when an attendance token cannot be decrypted or parsed."""

    kind = "invalid_token"


class TokenMismatch(DomainError):
    """Raised when a token was issued to a different student."""

    kind = "token_mismatch"


class TokenExpired(DomainError):
    """Raised when a well-formed token is past its expiry.

    Kept apart from InvalidToken so clients know to request a new token.
    """

    kind = "token_expired"


class LectureNotActive(DomainError):
    """Raised when a heartbeat arrives outside the lecture window."""

    kind = "lecture_not_active"


class InvalidLectureState(DomainError):
    """Raised when a lifecycle transition is not allowed from the current status."""

    kind = "invalid_state"
