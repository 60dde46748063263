"""Tests for custom exception hierarchy."""

from classifieds.exceptions import (
    ClassifiedsError,
    ConfigurationError,
    EntityInUseError,
    EntityNotFoundError,
    InvalidEntityStateError,
    InvalidValueError,
    ReferentialIntegrityError,
    SerializationError,
)


class TestExceptionHierarchy:
    """Test exception inheritance chain."""

    def test_classifieds_error_is_exception(self) -> None:
        assert isinstance(ClassifiedsError("test"), Exception)

    def test_entity_not_found_is_classifieds_error(self) -> None:
        assert isinstance(EntityNotFoundError("test"), ClassifiedsError)

    def test_referential_integrity_is_entity_not_found(self) -> None:
        err = ReferentialIntegrityError("test")
        assert isinstance(err, EntityNotFoundError)
        assert isinstance(err, ClassifiedsError)

    def test_entity_in_use_is_invalid_state(self) -> None:
        err = EntityInUseError("test")
        assert isinstance(err, InvalidEntityStateError)
        assert isinstance(err, ClassifiedsError)

    def test_invalid_value_is_value_error(self) -> None:
        err = InvalidValueError("test")
        assert isinstance(err, ValueError)
        assert isinstance(err, ClassifiedsError)

    def test_configuration_error_is_classifieds_error(self) -> None:
        assert isinstance(ConfigurationError("test"), ClassifiedsError)

    def test_serialization_error_is_classifieds_error(self) -> None:
        assert isinstance(SerializationError("test"), ClassifiedsError)

    def test_exception_message(self) -> None:
        err = ReferentialIntegrityError("User u-001 not found")
        assert str(err) == "User u-001 not found"
