"""Custom exceptions for MusIQ."""


class MusiqError(Exception):
    """Base exception for all MusIQ errors."""

    pass


class CatalogError(MusiqError):
    """No songs could be loaded for a game."""

    pass


class PlaybackError(MusiqError):
    """A preview clip could not be loaded or played."""

    pass


class PersistenceError(MusiqError):
    """Game history could not be written."""

    pass


class NotFoundError(MusiqError):
    """Resource not found."""

    pass


class InvalidTransitionError(MusiqError):
    """A game operation was called in a phase that does not allow it."""

    def __init__(self, operation: str, phase: str, reason: str | None = None):
        self.operation = operation
        self.phase = phase
        message = f"Cannot {operation} while game is in '{phase}' phase"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
