"""Unit tests for form events.

Tests cover:
- FormEvent defaults and immutability
- Serialization (to_dict, to_json) and deserialization (from_dict)
- Envelope validation against FORM_EVENT_SCHEMA
- ActionEmitter subscriptions, ordering and listener isolation
"""

import json
from types import MappingProxyType

import jsonschema
import pytest

from formstate.events import ActionEmitter, FormEvent, FormEventState, FormRequired
from formstate.types import EventType, RequiredMessage
from formstate.validation import FORM_EVENT_SCHEMA, EventValidator


def make_event(**overrides):
    defaults = dict(
        id="submit",
        state=FormEventState(
            display_meta=MappingProxyType({"country": {"id": 1}}),
            form_meta=MappingProxyType({}),
            display_state=MappingProxyType({"email": "a@b.com", "country": 1}),
            form_state=MappingProxyType({"country": 1}),
            form_loading=False,
            form_mounting=False,
            initial_state=MappingProxyType({"email": "a@b.com"}),
            state_changed=True,
        ),
        form_errors=MappingProxyType(
            {"email": MappingProxyType({"displayError": "email Error", "code": "x"})}
        ),
        button_data=MappingProxyType({"draft": True}),
        form_required=FormRequired(
            required=MappingProxyType(
                {"email": RequiredMessage(display_message="Email please", is_missing=False)}
            ),
            any_missing=False,
        ),
    )
    defaults.update(overrides)
    return FormEvent(**defaults)


class TestFormEventCreation:
    """Test FormEvent construction."""

    def test_defaults(self):
        """Should default to an empty submit buttonClick event."""
        event = FormEvent()

        assert event.id == "submit"
        assert event.type == EventType.BUTTON_CLICK
        assert event.state.form_state == {}
        assert event.state.state_changed is False
        assert event.form_errors == {}
        assert event.button_data == {}
        assert event.form_required.any_missing is False

    def test_string_type_normalized(self):
        """Should convert a string type into EventType."""
        event = FormEvent(type="buttonClick")
        assert event.type is EventType.BUTTON_CLICK

    def test_unknown_type_rejected(self):
        """Should reject unknown event types."""
        with pytest.raises(ValueError):
            FormEvent(type="keyPress")

    def test_event_is_immutable(self):
        """Should prevent modification of event fields (frozen dataclass)."""
        event = make_event()

        with pytest.raises(Exception):  # FrozenInstanceError
            event.id = "other"
        with pytest.raises(TypeError):
            event.state.form_state["country"] = 2


class TestFormEventSerialization:
    """Test the camelCase wire format."""

    def test_to_dict_shape(self):
        """Should serialize every documented field."""
        result = make_event().to_dict()

        assert result == {
            "id": "submit",
            "type": "buttonClick",
            "state": {
                "displayMeta": {"country": {"id": 1}},
                "formMeta": {},
                "displayState": {"email": "a@b.com", "country": 1},
                "formState": {"country": 1},
                "formLoading": False,
                "formMounting": False,
                "initialState": {"email": "a@b.com"},
                "stateChanged": True,
            },
            "errors": {"formErrors": {"email": {"displayError": "email Error", "code": "x"}}},
            "buttonData": {"draft": True},
            "formRequired": {
                "required": {"email": {"displayMessage": "Email please", "isMissing": False}},
                "anyMissing": False,
            },
        }

    def test_to_dict_returns_plain_dicts(self):
        """Should not leak read-only views into serialized output."""
        result = make_event().to_dict()

        assert type(result["state"]["formState"]) is dict
        assert type(result["errors"]["formErrors"]["email"]) is dict

    def test_to_json_single_line(self):
        """Should produce compact JSON."""
        line = make_event().to_json()

        assert "\n" not in line
        assert json.loads(line)["state"]["formState"] == {"country": 1}

    def test_from_dict_restores_event(self):
        """Should rebuild an equal event from its dict form."""
        event = make_event()
        restored = FormEvent.from_dict(event.to_dict())

        assert restored == event
        assert restored.form_required.required["email"].display_message == "Email please"

    def test_from_dict_fills_defaults(self):
        """Should tolerate missing optional sections."""
        restored = FormEvent.from_dict({"id": "save"})

        assert restored.id == "save"
        assert restored.type == EventType.BUTTON_CLICK
        assert restored.button_data == {}
        assert restored.state.initial_state == {}

    def test_opaque_button_data(self):
        """Should pass non-mapping button data through unchanged."""
        event = FormEvent(button_data=["row", 3])
        assert event.to_dict()["buttonData"] == ["row", 3]
        assert FormEvent.from_dict(event.to_dict()).button_data == ["row", 3]


class TestEnvelopeValidation:
    """Test FORM_EVENT_SCHEMA checks."""

    def test_schema_is_valid_draft7(self):
        """Should ship a schema that passes Draft 7 meta-validation."""
        jsonschema.Draft7Validator.check_schema(FORM_EVENT_SCHEMA)

    def test_serialized_event_is_valid(self):
        """Should accept events produced by to_dict."""
        result = EventValidator().validate(make_event().to_dict())

        assert result.is_valid is True
        assert result.errors == []

    def test_missing_section_reported(self):
        """Should report missing top-level sections by path."""
        data = make_event().to_dict()
        del data["formRequired"]

        result = EventValidator().validate(data)

        assert result.is_valid is False
        assert [e.path for e in result.errors] == ["formRequired"]

    def test_nested_type_error_reported(self):
        """Should report nested type errors with a dot path."""
        data = make_event().to_dict()
        data["state"]["stateChanged"] = "yes"

        result = EventValidator().validate(data)

        assert result.is_valid is False
        assert result.errors[0].path == "state.stateChanged"

    def test_missing_nested_field_reported(self):
        """Should include the missing property in the path."""
        data = make_event().to_dict()
        del data["state"]["formMounting"]

        result = EventValidator().validate(data)

        assert result.errors[0].path == "state.formMounting"
        assert "required" in result.errors[0].message

    def test_result_to_dict(self):
        """Should serialize results with camelCase keys."""
        result = EventValidator().validate({"id": "submit"})
        payload = result.to_dict()

        assert payload["isValid"] is False
        assert {"path": "type", "message": "'type' is required"} in payload["errors"]

    def test_invalid_schema_rejected(self):
        """Should reject an invalid custom schema."""
        with pytest.raises(jsonschema.SchemaError):
            EventValidator({"type": "not-a-type"})


class TestActionEmitter:
    """Test action listener dispatch."""

    def test_action_specific_listener(self):
        """Should only call listeners registered for the event's id."""
        emitter = ActionEmitter()
        saved, submitted = [], []
        emitter.on("save", saved.append)
        emitter.on("submit", submitted.append)

        emitter.emit(FormEvent(id="submit"))

        assert saved == []
        assert len(submitted) == 1

    def test_specific_before_wildcard(self):
        """Should call action-specific listeners before wildcard listeners."""
        emitter = ActionEmitter()
        order = []
        emitter.on_any(lambda e: order.append("any"))
        emitter.on("submit", lambda e: order.append("submit"))

        emitter.emit(FormEvent(id="submit"))

        assert order == ["submit", "any"]

    def test_failing_listener_isolated(self, caplog):
        """Should log a failing listener and keep calling the others."""
        emitter = ActionEmitter()
        received = []

        def broken(event):
            raise RuntimeError("sink down")

        emitter.on_any(broken)
        emitter.on_any(received.append)

        with caplog.at_level("ERROR", logger="formstate.events"):
            emitter.emit(FormEvent(id="submit"))

        assert len(received) == 1
        assert "submit" in caplog.text

    def test_off_and_counts(self):
        """Should remove listeners and count the rest."""
        emitter = ActionEmitter()
        listener = lambda e: None
        emitter.on("submit", listener)
        emitter.on_any(listener)
        assert emitter.listener_count() == 2
        assert emitter.listener_count("submit") == 1

        emitter.off("submit", listener)
        emitter.off_any(listener)
        emitter.off("unknown", listener)

        assert emitter.listener_count() == 0

    def test_clear(self):
        """Should drop every listener."""
        emitter = ActionEmitter()
        emitter.on("a", lambda e: None)
        emitter.on_any(lambda e: None)
        emitter.clear()
        assert emitter.listener_count() == 0
