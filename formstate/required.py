"""Registry of required-field handlers.

Each required field registers one RequiredHandler: a display message and an
``is_required(state, error)`` predicate. Missing status is never cached; it
is evaluated against the field's current state and error on every query, so
it always reflects the latest writes.

A field stays registered until it is explicitly unregistered.

Usage:
    >>> values = {"name": ""}
    >>> registry = RequiredRegistry(values.get, lambda key: None)
    >>> registry.register_required("name")
    True
    >>> registry.is_field_missing("name")
    True
    >>> values["name"] = "Ada"
    >>> registry.is_any_field_missing()
    False
"""

import logging
from types import MappingProxyType
from typing import Any, Callable, Dict, Mapping, Optional

from formstate.types import (
    ComponentError,
    ComponentState,
    RequiredHandler,
    RequiredMessage,
    StateKey,
)

logger = logging.getLogger(__name__)

StateGetter = Callable[[StateKey], Optional[ComponentState]]
ErrorGetter = Callable[[StateKey], Optional[ComponentError]]


class RequiredRegistry:
    """Required handlers per field with live missing-field derivation.

    Args:
        get_state: Returns the current (display) state for a field
        get_error: Returns the current error payload for a field
    """

    def __init__(self, get_state: StateGetter, get_error: ErrorGetter) -> None:
        self._get_state = get_state
        self._get_error = get_error
        self._handlers: Mapping[StateKey, RequiredHandler] = MappingProxyType({})

    def register_required(self, state_key: StateKey, handler: Optional[Any] = None) -> bool:
        """Register the required handler for ``state_key``.

        Unset or malformed parts of ``handler`` fall back to the defaults:
        ``not state`` as predicate and ``"<key> Missing and Required"`` as
        message.

        Returns:
            True if the registry changed, False if an equal handler was
            already registered for this field
        """
        resolved = RequiredHandler.for_field(state_key, handler)
        if self._handlers.get(state_key) == resolved:
            return False
        self._handlers = MappingProxyType({**self._handlers, state_key: resolved})
        logger.debug("Registered required handler for field %s", state_key)
        return True

    def unregister_required(self, state_key: StateKey) -> None:
        if state_key not in self._handlers:
            return
        self._handlers = MappingProxyType(
            {key: value for key, value in self._handlers.items() if key != state_key}
        )

    def get_required_handler(self, state_key: StateKey) -> Optional[RequiredHandler]:
        return self._handlers.get(state_key)

    def is_field_missing(self, state_key: StateKey) -> bool:
        """Evaluate the field's handler now; unregistered fields are never missing."""
        handler = self._handlers.get(state_key)
        if handler is None:
            return False
        return self._evaluate(state_key, handler)

    def get_all_required_messages(self) -> Dict[StateKey, RequiredMessage]:
        """Evaluate every registered handler.

        Returns:
            Mapping of state key to its display message and current missing status
        """
        return {
            state_key: RequiredMessage(
                display_message=handler.display_message,
                is_missing=self._evaluate(state_key, handler),
            )
            for state_key, handler in self._handlers.items()
        }

    def is_any_field_missing(self) -> bool:
        return any(message.is_missing for message in self.get_all_required_messages().values())

    def _evaluate(self, state_key: StateKey, handler: RequiredHandler) -> bool:
        return bool(handler.is_required(self._get_state(state_key), self._get_error(state_key)))


__all__ = [
    "RequiredRegistry",
]
