"""Form construction options."""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping


@dataclass(frozen=True)
class FormConfig:
    """Options a FormCoordinator is built with.

    Attributes:
        initial_state: Externally supplied starting data (edit mode); empty in create mode
        loading: Form-wide loading flag from the form's owner
        default_button_id: Action id used when a field dispatches without one
        validate_events: Check each dispatched snapshot against FORM_EVENT_SCHEMA

    Examples:
        >>> config = FormConfig.from_dict({"initialState": {"email": "a@b.com"}})
        >>> config.initial_state["email"]
        'a@b.com'
        >>> config.default_button_id
        'submit'
    """
    initial_state: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))
    loading: bool = False
    default_button_id: str = "submit"
    validate_events: bool = False

    def __post_init__(self):
        """Freeze the initial-state mapping."""
        initial_state = self.initial_state
        if initial_state is None:
            initial_state = {}
        if not isinstance(initial_state, Mapping):
            raise ValueError(
                f"initial_state must be a mapping, got {type(initial_state).__name__}"
            )
        if not isinstance(initial_state, MappingProxyType):
            object.__setattr__(self, "initial_state", MappingProxyType(dict(initial_state)))

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for serialization."""
        return {
            "initialState": dict(self.initial_state),
            "loading": self.loading,
            "defaultButtonId": self.default_button_id,
            "validateEvents": self.validate_events,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FormConfig":
        """Create FormConfig from dict (camelCase keys)."""
        return cls(
            initial_state=data.get("initialState") or {},
            loading=bool(data.get("loading", False)),
            default_button_id=data.get("defaultButtonId", "submit"),
            validate_events=bool(data.get("validateEvents", False)),
        )


__all__ = [
    "FormConfig",
]
