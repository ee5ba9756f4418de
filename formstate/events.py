"""Form snapshot events and action listeners.

Dispatching an action (typically a submit button click) produces one
immutable FormEvent: a point-in-time snapshot of every store in the form.
The event is then handed to the submit sink and any registered listeners.

Serialized events use camelCase keys:

    {
      "id": "submit",
      "type": "buttonClick",
      "state": {"displayMeta", "formMeta", "displayState", "formState",
                "formLoading", "formMounting", "initialState", "stateChanged"},
      "errors": {"formErrors"},
      "buttonData": {...},
      "formRequired": {"required": {key: {"displayMessage", "isMissing"}},
                       "anyMissing": bool}
    }
"""

import json
import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Dict, List, Mapping, Optional

from formstate.types import EventType, RequiredMessage, StateKey

logger = logging.getLogger(__name__)


def _frozen(mapping: Optional[Mapping[str, Any]]) -> Mapping[str, Any]:
    if isinstance(mapping, MappingProxyType):
        return mapping
    return MappingProxyType(dict(mapping or {}))


def _plain(value: Any) -> Any:
    """Recursively turn read-only mapping views into plain dicts."""
    if isinstance(value, Mapping):
        return {key: _plain(item) for key, item in value.items()}
    return value


@dataclass(frozen=True)
class FormEventState:
    """State portion of a FormEvent.

    Attributes:
        display_meta: Meta currently shown, seeded values included
        form_meta: Meta the user changed
        display_state: State currently shown, seeded values included
        form_state: State the user changed
        form_loading: Whether the form or any field was loading
        form_mounting: Whether the form had not settled yet
        initial_state: Initial-state mapping the form was built with
        state_changed: Whether any user change happened since the last seed
    """
    display_meta: Mapping[StateKey, Any] = field(default_factory=lambda: MappingProxyType({}))
    form_meta: Mapping[StateKey, Any] = field(default_factory=lambda: MappingProxyType({}))
    display_state: Mapping[StateKey, Any] = field(default_factory=lambda: MappingProxyType({}))
    form_state: Mapping[StateKey, Any] = field(default_factory=lambda: MappingProxyType({}))
    form_loading: bool = False
    form_mounting: bool = False
    initial_state: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))
    state_changed: bool = False

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for serialization."""
        return {
            "displayMeta": _plain(self.display_meta),
            "formMeta": _plain(self.form_meta),
            "displayState": _plain(self.display_state),
            "formState": _plain(self.form_state),
            "formLoading": self.form_loading,
            "formMounting": self.form_mounting,
            "initialState": _plain(self.initial_state),
            "stateChanged": self.state_changed,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FormEventState":
        """Create FormEventState from dict."""
        return cls(
            display_meta=_frozen(data.get("displayMeta")),
            form_meta=_frozen(data.get("formMeta")),
            display_state=_frozen(data.get("displayState")),
            form_state=_frozen(data.get("formState")),
            form_loading=bool(data.get("formLoading", False)),
            form_mounting=bool(data.get("formMounting", False)),
            initial_state=_frozen(data.get("initialState")),
            state_changed=bool(data.get("stateChanged", False)),
        )


@dataclass(frozen=True)
class FormRequired:
    """Required-field status of every registered field at snapshot time."""
    required: Mapping[StateKey, RequiredMessage] = field(
        default_factory=lambda: MappingProxyType({})
    )
    any_missing: bool = False

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for serialization."""
        return {
            "required": {key: message.to_dict() for key, message in self.required.items()},
            "anyMissing": self.any_missing,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FormRequired":
        """Create FormRequired from dict."""
        required = {
            key: RequiredMessage.from_dict(message)
            for key, message in (data.get("required") or {}).items()
        }
        return cls(
            required=MappingProxyType(required),
            any_missing=bool(data.get("anyMissing", False)),
        )


@dataclass(frozen=True)
class FormEvent:
    """Immutable snapshot of a form, assembled for one dispatched action.

    Attributes:
        id: Identifier of the triggering action (button id)
        type: Event type
        state: State/meta mappings and form-wide flags
        form_errors: Error payload per field in error
        button_data: Opaque payload supplied by the triggering field
        form_required: Required status per registered field

    Examples:
        >>> event = FormEvent(id="submit")
        >>> event.to_dict()["type"]
        'buttonClick'
    """
    id: str = "submit"
    type: EventType = EventType.BUTTON_CLICK
    state: FormEventState = field(default_factory=FormEventState)
    form_errors: Mapping[StateKey, Any] = field(default_factory=lambda: MappingProxyType({}))
    button_data: Any = field(default_factory=lambda: MappingProxyType({}))
    form_required: FormRequired = field(default_factory=FormRequired)

    def __post_init__(self):
        """Normalize string event types to EventType."""
        if isinstance(self.type, str) and not isinstance(self.type, EventType):
            object.__setattr__(self, "type", EventType(self.type))

    def to_dict(self) -> Dict[str, Any]:
        """Convert event to dictionary for serialization."""
        return {
            "id": self.id,
            "type": self.type.value,
            "state": self.state.to_dict(),
            "errors": {"formErrors": _plain(self.form_errors)},
            "buttonData": _plain(self.button_data),
            "formRequired": self.form_required.to_dict(),
        }

    def to_json(self) -> str:
        """Convert event to single-line JSON."""
        return json.dumps(self.to_dict(), separators=(',', ':'))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FormEvent":
        """Create FormEvent from dictionary (camelCase keys)."""
        errors = data.get("errors") or {}
        button_data = data.get("buttonData")
        return cls(
            id=data["id"],
            type=EventType(data.get("type", EventType.BUTTON_CLICK.value)),
            state=FormEventState.from_dict(data.get("state") or {}),
            form_errors=_frozen(errors.get("formErrors")),
            button_data=(
                _frozen(button_data)
                if button_data is None or isinstance(button_data, Mapping)
                else button_data
            ),
            form_required=FormRequired.from_dict(data.get("formRequired") or {}),
        )


ActionListener = Callable[[FormEvent], None]
"""Type alias for action listener callbacks.

Listeners are called synchronously after a snapshot has been assembled.
"""


class ActionEmitter:
    """Dispatches FormEvents to listeners, keyed by action id.

    - Action-specific subscriptions (e.g. only the "save-draft" button)
    - Wildcard subscriptions (every dispatched action; the submit sink)
    - Synchronous dispatch in registration order
    - Listener exceptions are logged and isolated from other listeners

    Examples:
        >>> emitter = ActionEmitter()
        >>> seen = []
        >>> emitter.on_any(seen.append)
        >>> emitter.emit(FormEvent(id="submit"))
        >>> len(seen)
        1
    """

    def __init__(self):
        self._listeners: Dict[str, List[ActionListener]] = {}
        self._any_listeners: List[ActionListener] = []

    def on(self, action_id: str, listener: ActionListener) -> None:
        self._listeners.setdefault(action_id, []).append(listener)

    def on_any(self, listener: ActionListener) -> None:
        self._any_listeners.append(listener)

    def off(self, action_id: str, listener: ActionListener) -> None:
        listeners = self._listeners.get(action_id, [])
        if listener in listeners:
            listeners.remove(listener)

    def off_any(self, listener: ActionListener) -> None:
        if listener in self._any_listeners:
            self._any_listeners.remove(listener)

    def emit(self, event: FormEvent) -> None:
        """Dispatch ``event`` to every interested listener.

        Action-specific listeners run first, then wildcard listeners. A
        listener that raises is logged and skipped.
        """
        for listener in list(self._listeners.get(event.id, [])) + list(self._any_listeners):
            try:
                listener(event)
            except Exception:
                logger.exception("Listener for action %r failed", event.id)

    def clear(self) -> None:
        self._listeners.clear()
        self._any_listeners.clear()

    def listener_count(self, action_id: Optional[str] = None) -> int:
        """Count registered listeners, for one action id or in total."""
        if action_id is not None:
            return len(self._listeners.get(action_id, []))
        return len(self._any_listeners) + sum(len(items) for items in self._listeners.values())


__all__ = [
    "FormEventState",
    "FormRequired",
    "FormEvent",
    "ActionListener",
    "ActionEmitter",
]
