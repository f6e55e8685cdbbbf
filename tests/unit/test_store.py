"""
test_store.py — Unit tests for core/store.py

Covers the observable store primitive, the GraphQL-derived flags, the
auth-visibility transition and form reset.
"""

import pytest

from mockdeck.core.config import GRAPHQL_PATH
from mockdeck.core.store import Derived, FormState, Store, default_methods, graphql_methods

# ── Store / Derived ────────────────────────────────────────────────────────────


class TestStore:
    def test_subscribe_calls_immediately_and_on_change(self):
        seen = []
        store = Store(1)
        store.subscribe(seen.append)
        store.set(2)
        store.update(lambda v: v + 1)
        assert seen == [1, 2, 3]

    def test_subscribe_without_immediate_call(self):
        seen = []
        store = Store("a")
        store.subscribe(seen.append, immediate=False)
        assert seen == []
        store.set("b")
        assert seen == ["b"]

    def test_unsubscribe_stops_notifications(self):
        seen = []
        store = Store(0)
        unsubscribe = store.subscribe(seen.append)
        unsubscribe()
        store.set(5)
        assert seen == [0]

    def test_derived_is_read_only(self):
        source = Store(False)
        derived = Derived(source, lambda v: not v)
        with pytest.raises(AttributeError):
            derived.set(True)

    def test_derived_subscribers_see_fresh_value(self):
        """A derived subscriber is called with a value consistent with its source."""
        source = Store(False)
        derived = Derived(source, lambda v: not v)
        pairs = []
        derived.subscribe(lambda d: pairs.append((source.get(), d)), immediate=False)
        source.set(True)
        source.set(False)
        assert pairs == [(True, False), (False, True)]

    def test_observer_registered_before_derived_never_sees_stale_flag(self):
        """Even an observer subscribed before the derived store reads a consistent value."""
        source = Store(False)
        observed = []
        source.subscribe(lambda v: observed.append((v, derived.get())), immediate=False)
        derived = Derived(source, lambda v: not v)
        source.set(True)
        assert observed == [(True, False)]


# ── FormState defaults and derived flags ──────────────────────────────────────


class TestFormDerivedFlags:
    def test_defaults(self):
        form = FormState()
        snap = form.snapshot()
        assert snap["path"] == ""
        assert snap["methods"] == {"GET": True, "POST": False, "PUT": False, "DELETE": False}
        assert snap["auth_type"] == "none"
        assert snap["response_file"] is None
        assert form.show_path_field.get() is True
        assert form.disable_http_methods.get() is False

    @pytest.mark.parametrize("enabled", [True, False])
    def test_path_and_methods_flags_follow_graphql(self, enabled):
        form = FormState()
        form.handle_graphql_toggle(enabled)
        assert form.show_path_field.get() is (not enabled)
        assert form.disable_http_methods.get() is enabled


# ── update_auth_fields ────────────────────────────────────────────────────────


class TestUpdateAuthFields:
    @pytest.mark.parametrize(
        "auth_type, expected",
        [
            ("basic", (True, False)),
            ("token", (False, True)),
            ("none", (False, False)),
            ("something-else", (False, False)),
        ],
    )
    def test_visibility_pair(self, auth_type, expected):
        form = FormState()
        form.update_auth_fields(auth_type)
        pair = (form.show_basic_auth_fields.get(), form.show_token_auth_fields.get())
        assert pair == expected
        assert not all(pair)

    def test_has_no_other_side_effect(self):
        form = FormState()
        before = form.snapshot()
        form.update_auth_fields("basic")
        assert form.snapshot() == before

    def test_set_auth_type_keeps_flags_in_step(self):
        form = FormState()
        form.set_auth_type("token")
        assert form.auth_type.get() == "token"
        assert form.show_token_auth_fields.get() is True
        form.set_auth_type("basic")
        assert form.show_basic_auth_fields.get() is True
        assert form.show_token_auth_fields.get() is False

    def test_direct_auth_type_write_updates_flags(self):
        """A plain write to auth_type, as a UI binding would do, moves the flags too."""
        form = FormState()
        form.auth_type.set("basic")
        assert (form.show_basic_auth_fields.get(), form.show_token_auth_fields.get()) == (True, False)
        form.auth_type.set("token")
        assert (form.show_basic_auth_fields.get(), form.show_token_auth_fields.get()) == (False, True)

    def test_flag_subscribers_see_new_auth_type(self):
        form = FormState()
        seen = []
        form.show_token_auth_fields.subscribe(lambda v: seen.append((form.auth_type.get(), v)), immediate=False)
        form.auth_type.set("token")
        assert seen == [("token", True)]


# ── handle_graphql_toggle ─────────────────────────────────────────────────────


class TestGraphQLToggle:
    def test_enable_pins_path_and_post(self):
        form = FormState()
        form.path.set("/users")
        form.set_method("PUT", True)
        form.handle_graphql_toggle(True)
        assert form.path.get() == GRAPHQL_PATH
        assert form.methods.get() == {"GET": False, "POST": True, "PUT": False, "DELETE": False}
        assert form.is_graphql.get() is True

    def test_round_trip_restores_defaults(self):
        """Toggling GraphQL on then off restores methods={GET} and an empty path."""
        form = FormState()
        form.handle_graphql_toggle(True)
        form.handle_graphql_toggle(False)
        assert form.methods.get() == {"GET": True, "POST": False, "PUT": False, "DELETE": False}
        assert form.path.get() == ""
        assert form.is_graphql.get() is False

    def test_method_checkboxes_are_inert_in_graphql_mode(self):
        form = FormState()
        form.handle_graphql_toggle(True)
        form.set_method("GET", True)
        form.set_method("POST", False)
        assert form.methods.get()["POST"] is True
        assert form.methods.get()["GET"] is False

    def test_unknown_method_rejected(self):
        form = FormState()
        with pytest.raises(KeyError):
            form.set_method("PATCH", True)


# ── reset_form / handle_file_input ────────────────────────────────────────────


class TestResetForm:
    def test_reset_restores_every_default(self, effects):
        form = FormState(effects)
        pristine = form.snapshot()
        form.path.set("/x")
        form.set_method("DELETE", True)
        form.status_code.set(404)
        form.delay.set(10)
        form.rate_limit.set("5/1000")
        form.set_auth_type("basic")
        form.username.set("u")
        form.password.set("p")
        form.token_data.set("{}")
        form.handle_file_input("/tmp/body.json")
        form.with_dynamic_vars.set(True)

        form.reset_form()

        assert form.snapshot() == pristine
        assert form.show_basic_auth_fields.get() is False
        assert form.show_token_auth_fields.get() is False
        assert effects.file_input_clears == 1

    def test_reset_from_graphql_mode(self):
        form = FormState()
        form.handle_graphql_toggle(True)
        form.reset_form()
        assert form.show_path_field.get() is True
        assert form.path.get() == ""

    def test_empty_file_selection_is_ignored(self):
        form = FormState()
        form.handle_file_input("a.json")
        form.handle_file_input("")
        form.handle_file_input(None)
        assert form.response_file.get() == "a.json"

    def test_subscribe_all_fires_on_any_field(self):
        form = FormState()
        calls = []
        unsubscribe = form.subscribe_all(calls.append)
        assert calls == []
        form.delay.set(3)
        form.username.set("x")
        assert calls == [form, form]
        unsubscribe()
        form.delay.set(4)
        assert len(calls) == 2


# ── GraphQL invariant as seen by observers ────────────────────────────────────


def _graphql_states(form):
    """Record (is_graphql, path, methods) on every field change."""
    states = []
    form.subscribe_all(lambda f: states.append((f.is_graphql.get(), f.path.get(), dict(f.methods.get()))))
    return states


def _pinned(states):
    return all(path == GRAPHQL_PATH and methods == graphql_methods() for on, path, methods in states if on)


class TestGraphQLObservers:
    def test_reset_from_graphql_mode_never_shows_mixed_state(self):
        form = FormState()
        form.handle_graphql_toggle(True)
        states = _graphql_states(form)

        form.reset_form()

        assert states
        assert _pinned(states)
        assert states[-1] == (False, "", default_methods())

    def test_toggle_round_trip_never_shows_mixed_state(self):
        form = FormState()
        states = _graphql_states(form)

        form.handle_graphql_toggle(True)
        form.handle_graphql_toggle(False)

        assert any(on for on, _, _ in states)
        assert _pinned(states)
