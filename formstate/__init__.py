"""formstate: field-state coordination for composite forms.

formstate lets independently rendered field components share one form state
without knowing about each other:
- Dual state per field: committed (user edits) vs. displayed (seeded + edits)
- Per-field error payloads, busy flags and required handlers
- One-shot mounting gate for first paint
- Immutable FormEvent snapshots assembled when an action is dispatched

Basic usage:
    >>> from formstate import FormCoordinator
    >>> form = FormCoordinator(initial_state={"email": "a@b.com"})
    >>> email = form.attach("email", initial_state_key="email")
    >>> email.component_state
    'a@b.com'
    >>> form.state_changed
    False
"""

__version__ = "0.1.0"
__author__ = "formstate developers"

# Version info
VERSION = (0, 1, 0)

# Core exports
from formstate.binding import FieldBinding, default_projector
from formstate.config import FormConfig
from formstate.coordinator import FormCoordinator
from formstate.events import FormEvent
from formstate.types import RequiredHandler, RequiredMessage

# Package metadata
__all__ = [
    "__version__",
    "VERSION",
    "FormCoordinator",
    "FormConfig",
    "FieldBinding",
    "FormEvent",
    "RequiredHandler",
    "RequiredMessage",
    "default_projector",
]
