"""Custom exception hierarchy for multidrag."""

from __future__ import annotations


class MultiDragError(Exception):
    """Base class for all custom errors raised by multidrag."""


# --- layered hierarchy ---

class DomainError(MultiDragError):
    """Base class for errors raised by the drag/selection state machines."""


class ApplicationError(MultiDragError):
    """Base class for errors raised while talking to external callbacks."""


# --- Domain errors ---

class InvalidTransitionError(DomainError):
    """Raised when a drag session operation is called in the wrong phase."""

    def __init__(self, operation: str, phase: object, expected: object) -> None:
        super().__init__(
            f"cannot {operation}() while the drag session is {phase}; expected {expected}"
        )
        self.operation = operation
        self.phase = phase
        self.expected = expected


class UnknownItemError(DomainError):
    """Raised when an index or identity does not belong to the current list."""


# --- Application errors ---

class PageRequestError(ApplicationError):
    """Raised (and reported, never propagated) when a page request fails."""


# --- Settings errors ---

class SettingsError(MultiDragError):
    """Base class for configuration related failures."""


class OptionsLoadError(SettingsError):
    """Raised when an options file cannot be read or parsed."""


class OptionsValidationError(SettingsError):
    """Raised when list options fail schema validation."""


__all__ = [
    "ApplicationError",
    "DomainError",
    "InvalidTransitionError",
    "MultiDragError",
    "OptionsLoadError",
    "OptionsValidationError",
    "PageRequestError",
    "SettingsError",
    "UnknownItemError",
]
