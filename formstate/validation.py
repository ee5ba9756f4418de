"""JSON Schema check for serialized form events.

Submit sinks usually forward ``FormEvent.to_dict()`` to another process.
FORM_EVENT_SCHEMA describes that envelope so a sink (or the coordinator, when
built with ``validate_events=True``) can verify it before sending. Only the
envelope is checked; field state, meta and error payloads stay opaque.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List

import jsonschema
from jsonschema import Draft7Validator

_MAPPING = {"type": "object"}

FORM_EVENT_SCHEMA: Dict[str, Any] = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "title": "FormEvent",
    "type": "object",
    "required": ["id", "type", "state", "errors", "buttonData", "formRequired"],
    "properties": {
        "id": {"type": "string", "minLength": 1},
        "type": {"const": "buttonClick"},
        "state": {
            "type": "object",
            "required": [
                "displayMeta",
                "formMeta",
                "displayState",
                "formState",
                "formLoading",
                "formMounting",
                "initialState",
                "stateChanged",
            ],
            "properties": {
                "displayMeta": _MAPPING,
                "formMeta": _MAPPING,
                "displayState": _MAPPING,
                "formState": _MAPPING,
                "formLoading": {"type": "boolean"},
                "formMounting": {"type": "boolean"},
                "initialState": _MAPPING,
                "stateChanged": {"type": "boolean"},
            },
        },
        "errors": {
            "type": "object",
            "required": ["formErrors"],
            "properties": {"formErrors": _MAPPING},
        },
        "formRequired": {
            "type": "object",
            "required": ["required", "anyMissing"],
            "properties": {
                "required": {
                    "type": "object",
                    "additionalProperties": {
                        "type": "object",
                        "required": ["displayMessage", "isMissing"],
                        "properties": {
                            "displayMessage": {"type": "string"},
                            "isMissing": {"type": "boolean"},
                        },
                    },
                },
                "anyMissing": {"type": "boolean"},
            },
        },
    },
}


@dataclass(frozen=True)
class EnvelopeError:
    """A single envelope violation.

    Attributes:
        path: Dot-notation path of the offending value ("" for the root)
        message: Human-readable description
    """
    path: str
    message: str

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for serialization."""
        return {"path": self.path, "message": self.message}


@dataclass(frozen=True)
class ValidationResult:
    """Result of checking a serialized event against FORM_EVENT_SCHEMA."""
    is_valid: bool
    errors: List[EnvelopeError] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for serialization."""
        return {
            "isValid": self.is_valid,
            "errors": [e.to_dict() for e in self.errors],
        }


class EventValidator:
    """Validates serialized FormEvents with jsonschema.

    Examples:
        >>> from formstate.events import FormEvent
        >>> EventValidator().validate(FormEvent().to_dict()).is_valid
        True
        >>> EventValidator().validate({"id": "submit"}).is_valid
        False
    """

    def __init__(self, schema: Dict[str, Any] = FORM_EVENT_SCHEMA) -> None:
        """Initialize the validator.

        Raises:
            jsonschema.SchemaError: If the provided schema is invalid
        """
        Draft7Validator.check_schema(schema)
        self.schema = schema
        self.validator = Draft7Validator(schema)

    def validate(self, data: Dict[str, Any]) -> ValidationResult:
        errors = sorted(self.validator.iter_errors(data), key=lambda e: list(e.path))
        if not errors:
            return ValidationResult(is_valid=True)
        return ValidationResult(
            is_valid=False,
            errors=[self._translate_error(error) for error in errors],
        )

    def _translate_error(self, error: jsonschema.ValidationError) -> EnvelopeError:
        path = ".".join(str(p) for p in error.path)
        if error.validator == "required":
            missing_prop = error.message.split("'")[1] if "'" in error.message else "field"
            full_path = f"{path}.{missing_prop}" if path else missing_prop
            return EnvelopeError(path=full_path, message=f"'{full_path}' is required")
        return EnvelopeError(path=path, message=error.message)


__all__ = [
    "FORM_EVENT_SCHEMA",
    "EnvelopeError",
    "ValidationResult",
    "EventValidator",
]
