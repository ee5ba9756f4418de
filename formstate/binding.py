"""Per-field view of a form coordinator.

A FieldBinding is what a field component receives when it attaches to a
form. Every operation is bound to the field's own StateKey, so a field can
only touch its own slice of the form; the rest of the form is visible only
through the form-wide aggregate reads.

Usage:
    >>> from formstate.coordinator import FormCoordinator
    >>> form = FormCoordinator(initial_state={"email": "a@b.com"})
    >>> email = form.attach("email", initial_state_key="email")
    >>> email.component_state
    'a@b.com'
    >>> email.set_state("c@d.com")
    >>> dict(form.get_all_form_state())
    {'email': 'c@d.com'}
"""

from typing import TYPE_CHECKING, Any, Mapping, Optional

from formstate.events import FormEvent
from formstate.types import (
    ComponentError,
    ComponentMeta,
    ComponentState,
    InitialStateKey,
    Projection,
    Projector,
    RequiredHandler,
    RequiredMessage,
    StateKey,
)

if TYPE_CHECKING:
    from formstate.coordinator import FormCoordinator


def default_projector(initial_state_key: InitialStateKey, initial_state: Mapping[str, Any]) -> Projection:
    """Project the value stored under ``initial_state_key`` as both state and meta."""
    value = initial_state.get(initial_state_key)
    return {"state": value, "meta": value}


class FieldBinding:
    """Operations available to one field of a form.

    Attributes:
        state_key: The field's identifier within the form
        initial_state_key: Key the field was last seeded from, if any
    """

    def __init__(self, coordinator: "FormCoordinator", state_key: StateKey) -> None:
        self._coordinator = coordinator
        self.state_key = state_key

    def __repr__(self) -> str:
        return f"FieldBinding(state_key={self.state_key!r})"

    @property
    def initial_state_key(self) -> Optional[InitialStateKey]:
        return self._coordinator.get_seed_identity(self.state_key)

    # Own slice

    @property
    def component_state(self) -> Optional[ComponentState]:
        return self._coordinator.get_field_state(self.state_key)

    @property
    def component_meta(self) -> Optional[ComponentMeta]:
        return self._coordinator.get_field_meta(self.state_key)

    @property
    def component_error(self) -> Optional[ComponentError]:
        return self._coordinator.get_field_error(self.state_key)

    @property
    def is_loading(self) -> bool:
        return self._coordinator.is_field_loading(self.state_key)

    @property
    def is_missing(self) -> bool:
        return self._coordinator.is_field_missing(self.state_key)

    @property
    def required_handler(self) -> Optional[RequiredHandler]:
        return self._coordinator.get_required_handler(self.state_key)

    def set_state(
        self,
        state: Optional[ComponentState] = None,
        meta: Optional[ComponentMeta] = None,
    ) -> None:
        self._coordinator.set_field_state(self.state_key, state, meta)

    def remove_state(self) -> None:
        self._coordinator.remove_field_state(self.state_key)

    def set_error(self, error: Optional[ComponentError] = None) -> None:
        self._coordinator.set_field_error(self.state_key, error)

    def remove_error(self) -> None:
        self._coordinator.remove_field_error(self.state_key)

    def register_required(self, handler: Optional[Any] = None) -> bool:
        return self._coordinator.register_required(self.state_key, handler)

    def enable_loading(self) -> None:
        self._coordinator.enable_loading(self.state_key)

    def disable_loading(self) -> None:
        self._coordinator.disable_loading(self.state_key)

    def bind_initial_state(
        self,
        initial_state_key: InitialStateKey,
        projector: Optional[Projector] = None,
    ) -> bool:
        return self._coordinator.bind_initial_state(self.state_key, initial_state_key, projector)

    # Form-wide aggregates

    def get_all_display_state(self) -> Mapping[StateKey, ComponentState]:
        return self._coordinator.get_all_display_state()

    def get_all_meta(self) -> Mapping[StateKey, ComponentMeta]:
        return self._coordinator.get_all_display_meta()

    def get_all_errors(self) -> Mapping[StateKey, ComponentError]:
        return self._coordinator.get_all_errors()

    def get_all_required_messages(self) -> Mapping[StateKey, RequiredMessage]:
        return self._coordinator.get_all_required_messages()

    @property
    def any_missing(self) -> bool:
        return self._coordinator.is_any_field_missing()

    @property
    def form_loading(self) -> bool:
        return self._coordinator.is_form_loading()

    @property
    def form_mounting(self) -> bool:
        return self._coordinator.is_form_mounting()

    def dispatch_action(
        self,
        button_id: Optional[str] = None,
        button_data: Optional[Any] = None,
    ) -> FormEvent:
        """Forward a button-like action to the form and return its snapshot."""
        return self._coordinator.dispatch_action(button_id, button_data)


__all__ = [
    "FieldBinding",
    "default_projector",
]
