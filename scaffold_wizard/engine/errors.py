"""Exceptions raised by wizard steps and the engine.

The engine never wraps these. A step raises whatever it raises and the
caller sees the same object, so the caller decides how to surface it:

- UserCancelledError: silent abort
- anything else raised by a step: operational failure, show it
- MissingContextError / WizardStateError: programming errors
"""


class WizardError(Exception):
    """Base class for wizard errors."""


class UserCancelledError(WizardError):
    """The user (or caller) chose not to proceed."""

    def __init__(self, message: str = "Operation cancelled."):
        super().__init__(message)


class MissingContextError(WizardError, KeyError):
    """A step read a context field that no earlier step wrote."""

    def __init__(self, key: str):
        self.key = key
        super().__init__(key)

    def __str__(self) -> str:
        return f"Context field '{self.key}' was read before any step set it"


class WizardStateError(WizardError):
    """A wizard phase was called out of order."""


def is_cancellation(exc: BaseException) -> bool:
    """Return True if exc means the user cancelled rather than a failure."""
    return isinstance(exc, UserCancelledError)
