"""
Custom exceptions for the application.
"""


class LingodrillException(Exception):
    """Base exception for all Lingodrill application exceptions."""
    pass


class ValidationError(LingodrillException):
    """Raised when validation fails."""
    pass


class NotFoundError(LingodrillException):
    """Raised when a requested resource is not found."""
    pass


class ConflictError(LingodrillException):
    """Raised when there's a conflict (e.g., duplicate entry)."""
    pass


class SessionStateError(ConflictError):
    """Raised when a practice session cannot perform an action in its current state."""
    pass


class PersistenceError(LingodrillException):
    """Raised when the flashcard store fails to write."""
    pass


class RecognitionError(LingodrillException):
    """Raised by a speech recognizer that produced no transcript."""
    pass

