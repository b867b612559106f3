"""Exceptions raised by the word drill core."""


class WordrillError(Exception):
    """Base class for all application errors."""


class ColdStartFailure(WordrillError):
    """The word catalog could not be loaded; the process must not serve traffic."""


class NotFound(WordrillError):
    """A requested user or record does not exist."""


class NotAuthenticated(WordrillError):
    """The request carries no verified identity."""


class ValidationError(WordrillError):
    """Input rejected before any store access."""


class StoreError(WordrillError):
    """The backing store failed to complete an operation."""


class ItemExists(StoreError):
    """A put collided with an existing record on a unique key."""
