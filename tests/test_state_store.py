"""Unit tests for the dual-state store.

Tests cover:
- Committed writes reach both committed and display mappings
- State and meta halves are independent
- Seeding only touches display mappings and never marks the form changed
- Removal rebuilds every mapping and always marks the form changed
- Read views are read-only and stable until a relevant mutation
"""

import pytest

from formstate.state_store import StateStore


class TestSetFieldState:
    """Test committed writes."""

    def test_state_written_to_form_and_display(self):
        """Should write state into form_state and display_state."""
        store = StateStore()
        store.set_field_state("name", "Ada")

        assert store.get_all_form_state() == {"name": "Ada"}
        assert store.get_all_display_state() == {"name": "Ada"}
        assert store.get_field_state("name") == "Ada"
        assert store.state_changed is True

    def test_meta_written_to_form_and_display(self):
        """Should write meta into form_meta and display_meta."""
        store = StateStore()
        store.set_field_state("country", None, {"id": 1, "label": "France"})

        assert store.get_all_form_meta() == {"country": {"id": 1, "label": "France"}}
        assert store.get_field_meta("country") == {"id": 1, "label": "France"}
        assert store.state_changed is True

    def test_state_only_leaves_meta_untouched(self):
        """Should not touch meta when only state is given."""
        store = StateStore()
        store.set_field_state("country", 1, {"id": 1})
        store.set_field_state("country", 2)

        assert store.get_field_state("country") == 2
        assert store.get_field_meta("country") == {"id": 1}
        assert store.get_all_form_meta() == {"country": {"id": 1}}

    def test_meta_only_leaves_state_untouched(self):
        """Should not touch state when only meta is given."""
        store = StateStore()
        store.set_field_state("country", 1, {"id": 1})
        store.set_field_state("country", None, {"id": 2})

        assert store.get_field_state("country") == 1
        assert store.get_all_form_state() == {"country": 1}
        assert store.get_field_meta("country") == {"id": 2}

    def test_falsy_values_are_written(self):
        """Should treat empty string, zero and False as provided values."""
        store = StateStore()
        store.set_field_state("text", "")
        store.set_field_state("count", 0)
        store.set_field_state("flag", False)

        assert store.get_all_form_state() == {"text": "", "count": 0, "flag": False}

    def test_nothing_provided_is_a_no_op(self):
        """Should not mark the form changed when neither half is given."""
        store = StateStore()
        store.set_field_state("name")

        assert store.get_all_form_state() == {}
        assert store.state_changed is False


class TestSeedInitialState:
    """Test seeding from initial data."""

    def test_seed_only_touches_display(self):
        """Should fill display mappings and leave committed mappings empty."""
        store = StateStore()
        store.seed_initial_state("email", "a@b.com", "a@b.com")

        assert store.get_all_display_state() == {"email": "a@b.com"}
        assert store.get_all_display_meta() == {"email": "a@b.com"}
        assert store.get_all_form_state() == {}
        assert store.get_all_form_meta() == {}

    def test_seed_resets_state_changed(self):
        """Should reset state_changed to False after a commit."""
        store = StateStore()
        store.set_field_state("name", "Ada")
        store.seed_initial_state("email", "a@b.com")

        assert store.state_changed is False

    def test_seed_does_not_overwrite_committed_value(self):
        """Should keep the committed value visible in display state."""
        store = StateStore()
        store.set_field_state("email", "new@b.com", "new-meta")
        store.seed_initial_state("email", "old@b.com", "old-meta")

        assert store.get_field_state("email") == "new@b.com"
        assert store.get_field_meta("email") == "new-meta"
        assert store.get_all_form_state() == {"email": "new@b.com"}

    def test_edit_after_seed_makes_both_equal(self):
        """Should converge display and committed state after an edit."""
        store = StateStore()
        store.seed_initial_state("email", "a@b.com")
        store.set_field_state("email", "c@d.com")

        assert store.get_all_display_state()["email"] == "c@d.com"
        assert store.get_all_form_state()["email"] == "c@d.com"
        assert store.state_changed is True


class TestRemoveFieldState:
    """Test field removal."""

    def test_removes_from_every_mapping(self):
        """Should drop the key from state and meta, committed and display."""
        store = StateStore()
        store.set_field_state("a", "x", "mx")
        store.set_field_state("b", "y", "my")
        store.remove_field_state("a")

        assert "a" not in store.get_all_form_state()
        assert "a" not in store.get_all_display_state()
        assert "a" not in store.get_all_form_meta()
        assert "a" not in store.get_all_display_meta()

    def test_other_keys_unchanged(self):
        """Should keep every other field's values."""
        store = StateStore()
        store.seed_initial_state("seeded", "s")
        store.set_field_state("a", "x")
        store.set_field_state("b", "y", "my")
        store.remove_field_state("a")

        assert store.get_all_form_state() == {"b": "y"}
        assert store.get_all_display_state() == {"seeded": "s", "b": "y"}
        assert store.get_all_display_meta() == {"b": "my"}

    def test_remove_absent_key_marks_changed(self):
        """Should mark the form changed even when the key was never present."""
        store = StateStore()
        store.seed_initial_state("email", "a@b.com")
        assert store.state_changed is False

        store.remove_field_state("missing")

        assert store.state_changed is True
        assert store.get_all_display_state() == {"email": "a@b.com"}


class TestReadViews:
    """Test read-only, referentially stable views."""

    def test_views_are_read_only(self):
        """Should reject writes through returned mappings."""
        store = StateStore()
        store.set_field_state("a", "x")

        with pytest.raises(TypeError):
            store.get_all_display_state()["a"] = "y"

    def test_same_view_until_mutation(self):
        """Should return the identical object while nothing changed."""
        store = StateStore()
        store.set_field_state("a", "x")

        first = store.get_all_display_state()
        assert store.get_all_display_state() is first

        store.set_field_state("a", "y")
        assert store.get_all_display_state() is not first

    def test_meta_write_keeps_state_view(self):
        """Should not replace the state view on a meta-only write."""
        store = StateStore()
        store.set_field_state("a", "x")
        state_view = store.get_all_display_state()

        store.set_field_state("a", None, "meta")

        assert store.get_all_display_state() is state_view

    def test_old_view_not_affected_by_later_writes(self):
        """Should leave previously returned views unchanged."""
        store = StateStore()
        store.set_field_state("a", "x")
        before = store.get_all_form_state()

        store.set_field_state("a", "y")
        store.remove_field_state("a")

        assert before == {"a": "x"}

    def test_unknown_field_reads_none(self):
        """Should return None for fields without state or meta."""
        store = StateStore()
        assert store.get_field_state("nope") is None
        assert store.get_field_meta("nope") is None
