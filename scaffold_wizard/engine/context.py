"""Shared mutable context threaded through one wizard run."""

import re
from collections.abc import MutableMapping
from typing import Any, Dict, Iterator, Mapping, Optional

from .errors import MissingContextError


class WizardContext(MutableMapping):
    """
    Mutable mapping shared by every step of a wizard run.

    Wraps the caller's dict by reference, so fields written by steps are
    visible to whoever built the wizard. Reading a field that was never set
    raises MissingContextError instead of quietly returning a default; use
    get() when a field is genuinely optional.
    """

    def __init__(self, data: Optional[Dict[str, Any]] = None):
        self._data = data if data is not None else {}

    @property
    def data(self) -> Dict[str, Any]:
        """The underlying dict (the caller's object, not a copy)."""
        return self._data

    def __getitem__(self, key: str) -> Any:
        try:
            return self._data[key]
        except KeyError:
            raise MissingContextError(key) from None

    def __setitem__(self, key: str, value: Any) -> None:
        self._data[key] = value

    def __delitem__(self, key: str) -> None:
        del self._data[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"WizardContext({self._data!r})"

    def require(self, key: str) -> Any:
        """Return a field that an earlier step must have set."""
        return self[key]

    def is_set(self, key: str) -> bool:
        """True if the field exists and is not None."""
        return self._data.get(key) is not None


def as_context(context: Optional[Mapping[str, Any]]) -> WizardContext:
    """Wrap a plain dict (by reference) or pass a WizardContext through."""
    if isinstance(context, WizardContext):
        return context
    if context is None:
        return WizardContext()
    if isinstance(context, dict):
        return WizardContext(context)
    return WizardContext(dict(context))


def copy_wizard_context(context: MutableMapping, prior: Optional[Mapping[str, Any]]) -> None:
    """Carry answers from a prior run into a new context.

    Fields already present in context win; everything else is copied from
    prior. A None prior is a no-op.
    """
    if not prior:
        return

    for key, value in prior.items():
        if key not in context:
            context[key] = value


def interpolate(template: str, ctx: Mapping[str, Any]) -> str:
    """Replace {key} placeholders with context values.

    Unknown placeholders are left as-is.

    Examples:
        >>> interpolate("Found {count} items", {'count': 5})
        'Found 5 items'
    """
    def replacer(match):
        key = match.group(1)
        if key in ctx:
            return str(ctx[key])
        return match.group(0)

    return re.sub(r'\{([^}]+)\}', replacer, template)
