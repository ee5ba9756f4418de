"""Per-field error payload store.

Error payloads are opaque to the engine. The only thing the store adds is a
default ``displayError`` entry so every field in error has something to show.
Presence of an entry means the field is in error.
"""

import logging
from types import MappingProxyType
from typing import Any, Mapping, Optional

from formstate.types import ComponentError, StateKey

logger = logging.getLogger(__name__)


def default_error(state_key: StateKey) -> dict:
    return {"displayError": f"{state_key} Error"}


class ErrorStore:
    """One error payload per field.

    Examples:
        >>> errors = ErrorStore()
        >>> errors.set_field_error("email", {"code": "invalid"})
        >>> dict(errors.get_field_error("email"))
        {'displayError': 'email Error', 'code': 'invalid'}
    """

    def __init__(self) -> None:
        self._errors: Mapping[StateKey, ComponentError] = MappingProxyType({})

    def set_field_error(self, state_key: StateKey, error: Optional[ComponentError] = None) -> None:
        """Store ``error`` for ``state_key`` merged over the default template.

        Mapping payloads are merged over ``{"displayError": "<key> Error"}``;
        None stores the bare template; any other payload is stored unchanged.
        """
        payload: Any
        if error is None:
            payload = MappingProxyType(default_error(state_key))
        elif isinstance(error, Mapping):
            payload = MappingProxyType({**default_error(state_key), **error})
        else:
            payload = error
        self._errors = MappingProxyType({**self._errors, state_key: payload})
        logger.debug("Set error for field %s", state_key)

    def remove_field_error(self, state_key: StateKey) -> None:
        if state_key not in self._errors:
            return
        self._errors = MappingProxyType(
            {key: value for key, value in self._errors.items() if key != state_key}
        )
        logger.debug("Removed error for field %s", state_key)

    def get_field_error(self, state_key: StateKey) -> Optional[ComponentError]:
        return self._errors.get(state_key)

    def get_all_errors(self) -> Mapping[StateKey, ComponentError]:
        return self._errors


__all__ = [
    "ErrorStore",
    "default_error",
]
