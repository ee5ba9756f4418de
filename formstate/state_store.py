"""Dual-state store for form field values.

The store keeps two views of every field:

- ``form_state`` / ``form_meta``: values the user actually changed in this
  session (committed state). In edit mode this only holds edited fields.
- ``display_state`` / ``display_meta``: what should currently be shown.
  It is seeded from the externally supplied initial state and mirrors the
  committed values once a field is edited.

Every key in ``form_state`` is present in ``display_state`` with the same
value (same for meta).

The store is copy-on-write: each mutation replaces the affected dicts, so a
view returned by a read accessor never changes underneath its holder, and
the same view object is returned until a relevant mutation happens.

Usage:
    >>> store = StateStore()
    >>> store.seed_initial_state("email", "a@b.com", None)
    >>> store.get_field_state("email")
    'a@b.com'
    >>> dict(store.get_all_form_state())
    {}
    >>> store.state_changed
    False
"""

import logging
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

from formstate.types import ComponentMeta, ComponentState, StateKey

logger = logging.getLogger(__name__)


def _without(mapping: Mapping[StateKey, Any], state_key: StateKey) -> Dict[StateKey, Any]:
    return {key: value for key, value in mapping.items() if key != state_key}


class StateStore:
    """Committed and displayed state/meta per field."""

    def __init__(self) -> None:
        self._form_state: Mapping[StateKey, ComponentState] = MappingProxyType({})
        self._display_state: Mapping[StateKey, ComponentState] = MappingProxyType({})
        self._form_meta: Mapping[StateKey, ComponentMeta] = MappingProxyType({})
        self._display_meta: Mapping[StateKey, ComponentMeta] = MappingProxyType({})
        self._state_changed = False

    @property
    def state_changed(self) -> bool:
        """True once a committed (non-seeded) write or removal has happened."""
        return self._state_changed

    def set_field_state(
        self,
        state_key: StateKey,
        state: Optional[ComponentState] = None,
        meta: Optional[ComponentMeta] = None,
    ) -> None:
        """Commit a user change for ``state_key``.

        ``state`` and ``meta`` are written independently; a None half is left
        untouched.
        """
        if state is not None:
            self._form_state = MappingProxyType({**self._form_state, state_key: state})
            self._display_state = MappingProxyType({**self._display_state, state_key: state})
            self._state_changed = True
            logger.debug("Committed state for field %s", state_key)
        if meta is not None:
            self._form_meta = MappingProxyType({**self._form_meta, state_key: meta})
            self._display_meta = MappingProxyType({**self._display_meta, state_key: meta})
            self._state_changed = True
            logger.debug("Committed meta for field %s", state_key)

    def remove_field_state(self, state_key: StateKey) -> None:
        """Drop ``state_key`` from every state and meta mapping.

        The mappings are rebuilt rather than patched. The form is marked as
        changed even when the key was never present.
        """
        self._form_state = MappingProxyType(_without(self._form_state, state_key))
        self._display_state = MappingProxyType(_without(self._display_state, state_key))
        self._form_meta = MappingProxyType(_without(self._form_meta, state_key))
        self._display_meta = MappingProxyType(_without(self._display_meta, state_key))
        self._state_changed = True
        logger.debug("Removed state for field %s", state_key)

    def seed_initial_state(
        self,
        state_key: StateKey,
        state: Optional[ComponentState] = None,
        meta: Optional[ComponentMeta] = None,
    ) -> None:
        """Populate the display mappings from initial data.

        Seeding never counts as a user edit: ``state_changed`` is reset to
        False. A half that the user already committed is not overwritten.
        """
        if state is not None:
            if state_key in self._form_state:
                logger.debug("Field %s already committed; keeping its display state", state_key)
            else:
                self._display_state = MappingProxyType({**self._display_state, state_key: state})
        if meta is not None:
            if state_key in self._form_meta:
                logger.debug("Field %s already committed; keeping its display meta", state_key)
            else:
                self._display_meta = MappingProxyType({**self._display_meta, state_key: meta})
        self._state_changed = False

    def get_field_state(self, state_key: StateKey) -> Optional[ComponentState]:
        return self._display_state.get(state_key)

    def get_field_meta(self, state_key: StateKey) -> Optional[ComponentMeta]:
        return self._display_meta.get(state_key)

    def get_all_display_state(self) -> Mapping[StateKey, ComponentState]:
        return self._display_state

    def get_all_display_meta(self) -> Mapping[StateKey, ComponentMeta]:
        return self._display_meta

    def get_all_form_state(self) -> Mapping[StateKey, ComponentState]:
        return self._form_state

    def get_all_form_meta(self) -> Mapping[StateKey, ComponentMeta]:
        return self._form_meta


__all__ = [
    "StateStore",
]
