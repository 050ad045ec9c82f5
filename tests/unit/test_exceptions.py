"""Tests for custom exceptions."""

import pytest

from musiq.core.exceptions import (
    CatalogError,
    InvalidTransitionError,
    MusiqError,
    NotFoundError,
    PersistenceError,
    PlaybackError,
)


class TestMusiqError:
    """Tests for base exception."""

    def test_base_exception(self) -> None:
        """Test base exception can be raised."""
        with pytest.raises(MusiqError):
            raise MusiqError("Test error")

    def test_base_exception_message(self) -> None:
        """Test base exception preserves message."""
        error = MusiqError("Something went wrong")
        assert str(error) == "Something went wrong"

    @pytest.mark.parametrize(
        "error_class",
        [CatalogError, PlaybackError, PersistenceError, NotFoundError],
    )
    def test_subclasses_inherit_from_base(self, error_class: type[MusiqError]) -> None:
        """Test every domain error is a MusiqError."""
        error = error_class("boom")
        assert isinstance(error, MusiqError)
        assert str(error) == "boom"


class TestInvalidTransitionError:
    """Tests for invalid transition error."""

    def test_is_musiq_error(self) -> None:
        """Test that InvalidTransitionError inherits from base."""
        assert isinstance(InvalidTransitionError("skip", "feedback"), MusiqError)

    def test_message(self) -> None:
        """Test message names the operation and phase."""
        error = InvalidTransitionError("submit a guess", "complete")
        assert str(error) == "Cannot submit a guess while game is in 'complete' phase"

    def test_message_with_reason(self) -> None:
        """Test reason is appended to the message."""
        error = InvalidTransitionError("give up", "playing", "only allowed on attempt 5")
        assert str(error) == "Cannot give up while game is in 'playing' phase: only allowed on attempt 5"

    def test_attributes(self) -> None:
        """Test operation and phase are kept for callers."""
        error = InvalidTransitionError("skip", "feedback")
        assert error.operation == "skip"
        assert error.phase == "feedback"
