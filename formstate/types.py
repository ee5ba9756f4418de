"""Core type definitions for the formstate coordination engine.

This module defines the fundamental types shared by every store:
- StateKey / InitialStateKey: field identifiers
- EventType: the kinds of snapshot events a form emits
- RequiredHandler: per-field predicate + message deciding whether a field is missing
- RequiredMessage: the evaluated result of a RequiredHandler
- Projection: the value a projector returns when seeding initial state

Component state, meta and error payloads are opaque to the engine and are
typed as ``Any``.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Mapping, Optional

from typing_extensions import NotRequired, TypedDict

StateKey = str
InitialStateKey = str
ComponentState = Any
ComponentMeta = Any
ComponentError = Any

IsRequired = Callable[[ComponentState, ComponentError], bool]


class EventType(str, Enum):
    """Snapshot event types.

    Every dispatched action produces one FormEvent carrying one of these types.
    """
    BUTTON_CLICK = "buttonClick"


class Projection(TypedDict):
    """Result of projecting a field's starting value off the initial state."""
    state: NotRequired[ComponentState]
    meta: NotRequired[ComponentMeta]


Projector = Callable[[InitialStateKey, Mapping[str, Any]], Projection]


def not_provided(state: ComponentState, error: ComponentError = None) -> bool:
    """Default required predicate: a field is missing while its state is falsy."""
    return not state


def default_display_message(state_key: StateKey) -> str:
    return f"{state_key} Missing and Required"


@dataclass(frozen=True)
class RequiredHandler:
    """Registered required-check for a single field.

    Attributes:
        display_message: Message shown while the field is missing
        is_required: Predicate called with ``(state, error)``; True means missing

    Examples:
        >>> handler = RequiredHandler(display_message="Email is required")
        >>> handler.is_required("")
        True
        >>> handler.is_required("a@b.com")
        False
    """
    display_message: str = ""
    is_required: IsRequired = not_provided

    @classmethod
    def for_field(
        cls,
        state_key: StateKey,
        handler: Optional[Any] = None,
    ) -> "RequiredHandler":
        """Build a handler for ``state_key``, filling unset parts with defaults.

        ``handler`` may be a RequiredHandler, a mapping with snake_case or
        camelCase keys, or None. Parts of the wrong type are ignored.
        """
        display_message = default_display_message(state_key)
        is_required: IsRequired = not_provided

        if isinstance(handler, RequiredHandler):
            candidate_message: Any = handler.display_message
            candidate_check: Any = handler.is_required
        elif isinstance(handler, Mapping):
            candidate_message = handler.get("display_message", handler.get("displayMessage"))
            candidate_check = handler.get("is_required", handler.get("isRequired"))
        else:
            candidate_message = None
            candidate_check = None

        if isinstance(candidate_message, str) and candidate_message:
            display_message = candidate_message
        if callable(candidate_check):
            is_required = candidate_check

        return cls(display_message=display_message, is_required=is_required)


@dataclass(frozen=True)
class RequiredMessage:
    """Evaluated required status of one field at a point in time."""
    display_message: str
    is_missing: bool

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for serialization."""
        return {
            "displayMessage": self.display_message,
            "isMissing": self.is_missing,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RequiredMessage":
        """Create RequiredMessage from dict."""
        return cls(
            display_message=data["displayMessage"],
            is_missing=bool(data["isMissing"]),
        )


__all__ = [
    "StateKey",
    "InitialStateKey",
    "ComponentState",
    "ComponentMeta",
    "ComponentError",
    "IsRequired",
    "EventType",
    "Projection",
    "Projector",
    "not_provided",
    "default_display_message",
    "RequiredHandler",
    "RequiredMessage",
]
