"""Custom exception hierarchy for classifieds."""


class ClassifiedsError(Exception):
    """Base exception for all classifieds errors."""


class EntityNotFoundError(ClassifiedsError):
    """Raised when a referenced entity does not exist."""


class ReferentialIntegrityError(EntityNotFoundError):
    """Raised when a reference points at an entity outside the registry."""


class InvalidEntityStateError(ClassifiedsError):
    """Raised when an entity is in an invalid state for the operation."""


class EntityInUseError(InvalidEntityStateError):
    """Raised when removing an entity that is still referenced."""


class InvalidValueError(ClassifiedsError, ValueError):
    """Raised when a field value is outside its allowed range."""


class ConfigurationError(ClassifiedsError):
    """Raised when configuration is invalid or missing."""


class SerializationError(ClassifiedsError):
    """Raised when a textual record cannot be read back."""
