"""Busy-field tracking for forms whose fields do their own fetching.

A field marks itself busy while it performs side work (e.g. loading the
options of a dropdown). The form counts as loading while any field is busy;
the coordinator additionally ORs in the loading flag supplied by its caller.
"""

import logging
from typing import FrozenSet

from formstate.types import StateKey

logger = logging.getLogger(__name__)


class LoadingStore:
    """Set of fields currently marked busy."""

    def __init__(self) -> None:
        self._busy: FrozenSet[StateKey] = frozenset()

    def enable_loading(self, state_key: StateKey) -> None:
        if state_key in self._busy:
            return
        self._busy = self._busy | {state_key}
        logger.debug("Field %s is loading", state_key)

    def disable_loading(self, state_key: StateKey) -> None:
        if state_key not in self._busy:
            return
        self._busy = self._busy - {state_key}
        logger.debug("Field %s finished loading", state_key)

    def is_field_loading(self, state_key: StateKey) -> bool:
        return state_key in self._busy

    def is_form_loading(self) -> bool:
        """True while at least one field is busy."""
        return bool(self._busy)

    @property
    def busy_fields(self) -> FrozenSet[StateKey]:
        return self._busy


__all__ = [
    "LoadingStore",
]
