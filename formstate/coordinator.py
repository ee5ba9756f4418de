"""FormCoordinator: shared state for the fields of one form.

The coordinator composes the state, error, loading and required stores and
the mounting gate behind a single surface. Fields attach to it and receive a
FieldBinding; hosts dispatch actions through it to obtain a FormEvent
snapshot that is forwarded to the submit sink.

Two operating modes fall out of the initial-state mapping:

- create mode: no initial state; display and committed state converge as the
  user types.
- edit mode: fields seed their display state from the initial state; the
  committed state only holds what the user changed, so a submit carries just
  the edits while ``display_state`` carries the full picture.

Usage:
    >>> events = []
    >>> form = FormCoordinator(initial_state={"email": "a@b.com"}, on_button_click=events.append)
    >>> email = form.attach("email", initial_state_key="email")
    >>> name = form.attach("name")
    >>> name.register_required({"displayMessage": "Name is required"})
    True
    >>> form.stabilize()
    True
    >>> event = name.dispatch_action()
    >>> event.form_required.any_missing
    True
    >>> dict(event.state.form_state)
    {}
    >>> len(events)
    1
"""

import logging
from types import MappingProxyType
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from formstate.binding import FieldBinding, default_projector
from formstate.config import FormConfig
from formstate.error_store import ErrorStore
from formstate.events import ActionEmitter, ActionListener, FormEvent, FormEventState, FormRequired
from formstate.loading import LoadingStore
from formstate.mounting import MountingGate
from formstate.required import RequiredRegistry
from formstate.state_store import StateStore
from formstate.types import (
    ComponentError,
    ComponentMeta,
    ComponentState,
    EventType,
    InitialStateKey,
    Projector,
    RequiredHandler,
    RequiredMessage,
    StateKey,
)
from formstate.validation import EventValidator

logger = logging.getLogger(__name__)


class FormCoordinator:
    """Coordinator for the fields of a single mounted form.

    All stores are owned by the coordinator and discarded with it. Fields
    never see the stores directly, only their FieldBinding.

    Attributes:
        initial_state: Read-only initial-state mapping (empty in create mode)
        default_button_id: Action id used when none is given to dispatch_action

    Examples:
        >>> form = FormCoordinator()
        >>> form.set_field_state("a", "x")
        >>> event = form.dispatch_action("submit", {})
        >>> event.to_dict()["state"]["formState"]
        {'a': 'x'}
        >>> event.state.state_changed
        True
    """

    def __init__(
        self,
        initial_state: Optional[Mapping[str, Any]] = None,
        loading: bool = False,
        on_button_click: Optional[ActionListener] = None,
        *,
        default_button_id: str = "submit",
        validate_events: bool = False,
    ):
        """Initialize the coordinator.

        Args:
            initial_state: Starting data for edit mode
            loading: Form-wide loading flag supplied by the form's owner
            on_button_click: Submit sink, called with one FormEvent per dispatched action
            default_button_id: Action id used when a field dispatches without one
            validate_events: Check every snapshot against FORM_EVENT_SCHEMA and
                log a warning when it does not conform

        Raises:
            ValueError: If initial_state is not a mapping
        """
        self._config = FormConfig(
            initial_state=initial_state or {},
            loading=loading,
            default_button_id=default_button_id,
            validate_events=validate_events,
        )
        self._loading = bool(loading)

        self._state = StateStore()
        self._errors = ErrorStore()
        self._busy = LoadingStore()
        self._required = RequiredRegistry(self._state.get_field_state, self._errors.get_field_error)
        self._mounting = MountingGate()
        self._emitter = ActionEmitter()
        self._validator = EventValidator() if validate_events else None

        self._bindings: Dict[StateKey, FieldBinding] = {}
        self._seed_identities: Dict[StateKey, InitialStateKey] = {}
        self._assembly_depth = 0
        self._deferred: List[Tuple[Callable[..., Any], Tuple[Any, ...]]] = []

        if on_button_click is not None:
            self._emitter.on_any(on_button_click)

    @classmethod
    def from_config(
        cls,
        config: FormConfig,
        on_button_click: Optional[ActionListener] = None,
    ) -> "FormCoordinator":
        return cls(
            initial_state=config.initial_state,
            loading=config.loading,
            on_button_click=on_button_click,
            default_button_id=config.default_button_id,
            validate_events=config.validate_events,
        )

    @property
    def initial_state(self) -> Mapping[str, Any]:
        return self._config.initial_state

    @property
    def default_button_id(self) -> str:
        return self._config.default_button_id

    @property
    def state_changed(self) -> bool:
        return self._state.state_changed

    # Field lifecycle

    def attach(
        self,
        state_key: StateKey,
        initial_state_key: Optional[InitialStateKey] = None,
        projector: Optional[Projector] = None,
    ) -> FieldBinding:
        """Attach a field and return its binding.

        A key attaches once per form; attaching it again returns the existing
        binding. When ``initial_state_key`` is given the field is seeded from
        the initial state (see bind_initial_state).
        """
        binding = self._bindings.get(state_key)
        if binding is None:
            binding = FieldBinding(self, state_key)
            self._bindings[state_key] = binding
            logger.debug("Attached field %s", state_key)
        if initial_state_key:
            self.bind_initial_state(state_key, initial_state_key, projector)
        return binding

    def detach(self, state_key: StateKey) -> None:
        """Unregister a field.

        Clears the field's error, loading and required entries and forgets
        its seed identity. State and meta are left in place; remove them with
        remove_field_state.
        """
        self._mutate(self._detach, state_key)

    def _detach(self, state_key: StateKey) -> None:
        self._bindings.pop(state_key, None)
        self._seed_identities.pop(state_key, None)
        self._errors.remove_field_error(state_key)
        self._busy.disable_loading(state_key)
        self._required.unregister_required(state_key)
        logger.debug("Detached field %s", state_key)

    def get_binding(self, state_key: StateKey) -> Optional[FieldBinding]:
        return self._bindings.get(state_key)

    def stabilize(self) -> bool:
        """Mark the end of the form's first stabilization pass.

        Returns:
            True the first time, False on every later call
        """
        return self._mounting.settle()

    def set_loading(self, loading: bool) -> None:
        """Update the form-wide loading flag supplied by the form's owner."""
        self._loading = bool(loading)

    # Writes

    def set_field_state(
        self,
        state_key: StateKey,
        state: Optional[ComponentState] = None,
        meta: Optional[ComponentMeta] = None,
    ) -> None:
        self._mutate(self._state.set_field_state, state_key, state, meta)

    def remove_field_state(self, state_key: StateKey) -> None:
        self._mutate(self._state.remove_field_state, state_key)

    def set_field_error(self, state_key: StateKey, error: Optional[ComponentError] = None) -> None:
        self._mutate(self._errors.set_field_error, state_key, error)

    def remove_field_error(self, state_key: StateKey) -> None:
        self._mutate(self._errors.remove_field_error, state_key)

    def enable_loading(self, state_key: StateKey) -> None:
        self._mutate(self._busy.enable_loading, state_key)

    def disable_loading(self, state_key: StateKey) -> None:
        self._mutate(self._busy.disable_loading, state_key)

    def register_required(self, state_key: StateKey, handler: Optional[Any] = None) -> bool:
        """Register a required handler for a field.

        Returns:
            True if the registry changed; False if an equal handler was
            already registered or the call was deferred behind a snapshot
        """
        if self._assembly_depth:
            self._defer(self._required.register_required, state_key, handler)
            return False
        return self._required.register_required(state_key, handler)

    def bind_initial_state(
        self,
        state_key: StateKey,
        initial_state_key: InitialStateKey,
        projector: Optional[Projector] = None,
    ) -> bool:
        """Seed a field's display state from the initial-state mapping.

        Runs ``projector(initial_state_key, initial_state)`` and seeds the
        returned ``state``/``meta``. Fires at most once per
        ``(state_key, initial_state_key)`` pair; binding the same pair again
        is a no-op. A missing or non-callable projector falls back to
        default_projector.

        Returns:
            True if the field was seeded by this call
        """
        if self._assembly_depth:
            self._defer(self._bind_initial_state, state_key, initial_state_key, projector)
            return False
        return self._bind_initial_state(state_key, initial_state_key, projector)

    def _bind_initial_state(
        self,
        state_key: StateKey,
        initial_state_key: InitialStateKey,
        projector: Optional[Projector],
    ) -> bool:
        if not state_key or not initial_state_key:
            return False
        if self._seed_identities.get(state_key) == initial_state_key:
            return False
        if not callable(projector):
            if projector is not None:
                logger.debug("Ignoring non-callable projector for field %s", state_key)
            projector = default_projector

        projection = projector(initial_state_key, self.initial_state)
        self._seed_identities[state_key] = initial_state_key
        if not isinstance(projection, Mapping):
            logger.warning(
                "Projector for field %s returned %s instead of a mapping; not seeding",
                state_key,
                type(projection).__name__,
            )
            return False

        self._state.seed_initial_state(state_key, projection.get("state"), projection.get("meta"))
        logger.debug("Seeded field %s from initial state key %s", state_key, initial_state_key)
        return True

    def get_seed_identity(self, state_key: StateKey) -> Optional[InitialStateKey]:
        return self._seed_identities.get(state_key)

    # Reads

    def get_field_state(self, state_key: StateKey) -> Optional[ComponentState]:
        return self._state.get_field_state(state_key)

    def get_field_meta(self, state_key: StateKey) -> Optional[ComponentMeta]:
        return self._state.get_field_meta(state_key)

    def get_field_error(self, state_key: StateKey) -> Optional[ComponentError]:
        return self._errors.get_field_error(state_key)

    def is_field_loading(self, state_key: StateKey) -> bool:
        return self._busy.is_field_loading(state_key)

    def is_field_missing(self, state_key: StateKey) -> bool:
        return self._required.is_field_missing(state_key)

    def get_required_handler(self, state_key: StateKey) -> Optional[RequiredHandler]:
        return self._required.get_required_handler(state_key)

    def get_all_display_state(self) -> Mapping[StateKey, ComponentState]:
        return self._state.get_all_display_state()

    def get_all_display_meta(self) -> Mapping[StateKey, ComponentMeta]:
        return self._state.get_all_display_meta()

    def get_all_form_state(self) -> Mapping[StateKey, ComponentState]:
        return self._state.get_all_form_state()

    def get_all_form_meta(self) -> Mapping[StateKey, ComponentMeta]:
        return self._state.get_all_form_meta()

    def get_all_errors(self) -> Mapping[StateKey, ComponentError]:
        return self._errors.get_all_errors()

    def get_all_required_messages(self) -> Dict[StateKey, RequiredMessage]:
        return self._required.get_all_required_messages()

    def is_any_field_missing(self) -> bool:
        return self._required.is_any_field_missing()

    def is_form_loading(self) -> bool:
        return self._loading or self._busy.is_form_loading()

    def is_form_mounting(self) -> bool:
        return self._mounting.is_mounting

    # Actions

    def on_action(self, action_id: str, listener: ActionListener) -> None:
        self._emitter.on(action_id, listener)

    def on_any_action(self, listener: ActionListener) -> None:
        self._emitter.on_any(listener)

    def off_action(self, action_id: str, listener: ActionListener) -> None:
        self._emitter.off(action_id, listener)

    def off_any_action(self, listener: ActionListener) -> None:
        self._emitter.off_any(listener)

    def dispatch_action(
        self,
        action_id: Optional[str] = None,
        action_payload: Optional[Any] = None,
    ) -> FormEvent:
        """Assemble a snapshot of the form and forward it to the submit sink.

        The snapshot is built synchronously; writes issued while it is being
        built (e.g. from a required predicate) are applied once the outermost
        snapshot is complete, or has failed. Missing required fields do not
        block the dispatch; check ``event.form_required.any_missing``
        in the sink.

        Args:
            action_id: Identifier of the triggering action; defaults to default_button_id
            action_payload: Opaque data from the triggering field; defaults to {}

        Returns:
            The dispatched FormEvent
        """
        event = self._assemble(action_id or self.default_button_id, action_payload)
        logger.debug("Dispatching action %r", event.id)

        if self._validator is not None:
            result = self._validator.validate(event.to_dict())
            if not result.is_valid:
                logger.warning(
                    "Form event for action %r does not match the event schema: %s",
                    event.id,
                    "; ".join(f"{e.path}: {e.message}" for e in result.errors),
                )

        self._emitter.emit(event)
        return event

    def _assemble(self, action_id: str, action_payload: Optional[Any]) -> FormEvent:
        if action_payload is None:
            action_payload = {}
        if isinstance(action_payload, Mapping):
            action_payload = MappingProxyType(dict(action_payload))

        self._assembly_depth += 1
        try:
            required = self._required.get_all_required_messages()
            event = FormEvent(
                id=action_id,
                type=EventType.BUTTON_CLICK,
                state=FormEventState(
                    display_meta=self._state.get_all_display_meta(),
                    form_meta=self._state.get_all_form_meta(),
                    display_state=self._state.get_all_display_state(),
                    form_state=self._state.get_all_form_state(),
                    form_loading=self.is_form_loading(),
                    form_mounting=self._mounting.is_mounting,
                    initial_state=self.initial_state,
                    state_changed=self._state.state_changed,
                ),
                form_errors=self._errors.get_all_errors(),
                button_data=action_payload,
                form_required=FormRequired(
                    required=MappingProxyType(required),
                    any_missing=any(message.is_missing for message in required.values()),
                ),
            )
        finally:
            self._assembly_depth -= 1
            if not self._assembly_depth:
                self._flush_deferred()
        return event

    def _mutate(self, operation: Callable[..., Any], *args: Any) -> None:
        if self._assembly_depth:
            self._defer(operation, *args)
            return
        operation(*args)

    def _defer(self, operation: Callable[..., Any], *args: Any) -> None:
        logger.debug("Deferring %s until the current snapshot is assembled", operation.__name__)
        self._deferred.append((operation, args))

    def _flush_deferred(self) -> None:
        while self._deferred:
            operation, args = self._deferred.pop(0)
            operation(*args)


__all__ = [
    "FormCoordinator",
]
