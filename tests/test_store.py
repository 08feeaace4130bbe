# Tests for SettingsStore
import pytest

from ccgear.errors import (
    DuplicateIdError,
    InvalidProfileError,
    InvalidReorderError,
    InvalidServerError,
    ModelNotFoundError,
    ServerNotFoundError,
)
from ccgear.codec import decode, encode
from ccgear.models import ServerSpec, Settings
from ccgear.store import SettingsStore


@pytest.fixture
def store(profile_factory) -> SettingsStore:
    """Clean store holding three profiles."""
    return SettingsStore(Settings(custom_models=[
        profile_factory("a", "Alpha", "alpha-1", "openai"),
        profile_factory("b", "Beta", "beta-1", "anthropic"),
        profile_factory("c", "Gamma", "gamma-1", "openai"),
    ]))


def ids(store: SettingsStore) -> list[str]:
    return [p.id for p in store.models]


class TestDirtyTracking:
    """Every mutator marks the store dirty."""

    def test_new_store_is_clean(self):
        store = SettingsStore()
        assert store.dirty is False
        assert store.settings == Settings()

    @pytest.mark.parametrize("mutate", [
        lambda s, f: s.add_model(f("d", "Delta", "delta", "p")),
        lambda s, f: s.update_model("a", {"title": "A2"}),
        lambda s, f: s.delete_model("a"),
        lambda s, f: s.delete_model("missing"),
        lambda s, f: s.delete_models(["a", "b"]),
        lambda s, f: s.reorder_models(["c", "b", "a"]),
        lambda s, f: s.reorder_models(["a", "b", "c"]),
        lambda s, f: s.move_model("a", 2),
        lambda s, f: s.duplicate_model("a"),
        lambda s, f: s.add_server("fs", ServerSpec(command="npx")),
        lambda s, f: s.update_server("fs", ServerSpec(command="npx")),
        lambda s, f: s.rename_server("old", "new", ServerSpec(command="npx")),
        lambda s, f: s.delete_server("missing"),
        lambda s, f: s.set_allowed([]),
        lambda s, f: s.set_denied(["Bash"]),
        lambda s, f: s.set_env({}),
    ])
    def test_mutator_sets_dirty(self, store, profile_factory, mutate):
        mutate(store, profile_factory)
        assert store.dirty is True

    def test_mark_saved_clears_dirty_only(self, store):
        store.set_env({"A": "1"})
        store.mark_saved()
        assert store.dirty is False
        assert store.settings.env == {"A": "1"}

    def test_replace_clears_dirty(self, store):
        store.delete_model("a")
        store.replace(Settings())
        assert store.dirty is False
        assert store.models == []


class TestModels:
    """Tests for profile operations."""

    def test_add_model_appends(self, store, profile_factory):
        store.add_model(profile_factory("d", "Delta", "delta", "p"))
        assert ids(store) == ["a", "b", "c", "d"]

    def test_add_duplicate_id_rejected(self, store, profile_factory):
        with pytest.raises(DuplicateIdError, match="'a'"):
            store.add_model(profile_factory("a", "Other", "other", "p"))
        assert ids(store) == ["a", "b", "c"]
        assert store.dirty is False

    def test_add_incomplete_rejected(self, store, profile_factory):
        with pytest.raises(InvalidProfileError, match="provider"):
            store.add_model(profile_factory("d", "Delta", "delta", ""))
        assert store.dirty is False

    def test_update_with_mapping(self, store):
        updated = store.update_model("b", {"title": "Beta 2", "max_tokens": 4096})
        assert updated.title == "Beta 2"
        assert updated.max_tokens == 4096
        assert updated.model_id == "beta-1"
        assert store.get_model("b") == updated
        assert ids(store) == ["a", "b", "c"]

    def test_update_with_profile(self, store, profile_factory):
        replacement = profile_factory("b", "New", "new-model", "mistral")
        store.update_model("b", replacement)
        assert store.get_model("b") == replacement

    def test_update_missing_leaves_clean(self, store):
        """Test updating an absent id raises and does not mark dirty."""
        with pytest.raises(ModelNotFoundError, match="'zzz' not found"):
            store.update_model("zzz", {"title": "x"})
        assert store.dirty is False

    def test_update_cannot_change_id(self, store, profile_factory):
        with pytest.raises(ValueError, match="Cannot change model id"):
            store.update_model("a", {"id": "z"})
        with pytest.raises(ValueError, match="Cannot change model id"):
            store.update_model("a", profile_factory("z"))

    def test_update_unknown_field(self, store):
        with pytest.raises(ValueError, match="Unknown model field"):
            store.update_model("a", {"colour": "red"})

    def test_update_to_incomplete_rejected(self, store):
        with pytest.raises(InvalidProfileError):
            store.update_model("a", {"title": ""})
        assert store.get_model("a").title == "Alpha"

    def test_delete_is_idempotent(self, store):
        store.delete_model("b")
        store.delete_model("b")
        assert ids(store) == ["a", "c"]

    def test_delete_models_counts(self, store):
        assert store.delete_models(["a", "c", "nope"]) == 2
        assert ids(store) == ["b"]

    def test_reorder(self, store):
        store.reorder_models(["c", "a", "b"])
        assert ids(store) == ["c", "a", "b"]

    def test_reorder_accepts_profiles(self, store):
        store.reorder_models(list(reversed(store.models)))
        assert ids(store) == ["c", "b", "a"]

    @pytest.mark.parametrize("order,message", [
        (["a", "b"], "missing: c"),
        (["a", "b", "c", "d"], "unknown: d"),
        (["a", "a", "b", "c"], "repeated ids"),
        (["a", "b", "x"], "unknown: x; missing: c"),
    ])
    def test_reorder_invalid_leaves_settings(self, store, order, message):
        """Test a non-permutation is rejected without any change."""
        before = list(store.models)
        with pytest.raises(InvalidReorderError, match=message):
            store.reorder_models(order)
        assert store.models == before
        assert store.dirty is False

    def test_move_model(self, store):
        store.move_model("a", 1)
        assert ids(store) == ["b", "a", "c"]

    def test_move_model_clamps(self, store):
        store.move_model("a", 99)
        assert ids(store) == ["b", "c", "a"]
        store.move_model("a", -5)
        assert ids(store) == ["a", "b", "c"]

    def test_move_missing(self, store):
        with pytest.raises(ModelNotFoundError):
            store.move_model("zzz", 0)

    def test_duplicate_model(self, store):
        copy = store.duplicate_model("b")
        assert copy.id not in ("a", "b", "c")
        assert copy.title == "Beta (Copy)"
        assert copy.model_id == "beta-1"
        assert store.models[-1] == copy

    def test_empty_optional_strings_stored_as_unset(self, store, profile_factory):
        """Test "" for apiKeyEnvVar/baseUrl is stored as None so a save round-trips."""
        store.add_model(profile_factory("d", "Delta", "delta", "p", api_key_env_var="", base_url=""))
        store.update_model("a", {"base_url": ""})

        assert store.get_model("d").api_key_env_var is None
        assert store.get_model("d").base_url is None
        assert store.get_model("a").base_url is None
        assert decode(encode(store.settings)) == store.settings

    def test_providers(self, store):
        assert store.providers() == ["openai", "anthropic"]

    def test_find_models(self, store):
        assert [p.id for p in store.find_models("GAM")] == ["c"]
        assert [p.id for p in store.find_models(provider="openai")] == ["a", "c"]
        assert [p.id for p in store.find_models("beta", provider="openai")] == []
        assert len(store.find_models()) == 3

    def test_has_model_id(self, store):
        assert store.has_model_id("alpha-1") is True
        assert store.has_model_id("a") is False


class TestServers:
    """Tests for MCP server operations."""

    def test_add_and_overwrite(self, fs_server):
        store = SettingsStore()
        store.add_server("fs", fs_server)
        store.update_server("fs", ServerSpec(command="node"))
        assert store.settings.mcp_servers == {"fs": ServerSpec(command="node")}

    def test_add_requires_command(self):
        store = SettingsStore()
        with pytest.raises(InvalidServerError, match="command"):
            store.add_server("fs", ServerSpec(command=" "))
        with pytest.raises(InvalidServerError, match="name"):
            store.add_server("", ServerSpec(command="npx"))
        assert store.dirty is False

    def test_url_server_allowed(self):
        store = SettingsStore()
        spec = ServerSpec(command="", extra={"url": "https://example.com/mcp"})
        store.add_server("remote", spec)
        assert store.settings.mcp_servers["remote"] == spec

    def test_rename(self, fs_server):
        store = SettingsStore(Settings(mcp_servers={"old": fs_server}))
        store.rename_server("old", "new", fs_server)
        assert list(store.settings.mcp_servers) == ["new"]

    def test_rename_same_name_updates(self, fs_server):
        store = SettingsStore(Settings(mcp_servers={"fs": fs_server}))
        store.rename_server("fs", "fs", ServerSpec(command="node"))
        assert store.settings.mcp_servers == {"fs": ServerSpec(command="node")}

    def test_duplicate_server(self, fs_server):
        store = SettingsStore(Settings(mcp_servers={"fs": fs_server}))

        assert store.duplicate_server("fs") == "fs-copy"
        assert store.duplicate_server("fs") == "fs-copy-2"
        assert list(store.settings.mcp_servers) == ["fs", "fs-copy", "fs-copy-2"]
        assert store.settings.mcp_servers["fs-copy"] == fs_server
        assert store.settings.mcp_servers["fs-copy"].args is not fs_server.args
        assert store.dirty is True

    def test_duplicate_missing_server(self):
        store = SettingsStore()
        with pytest.raises(ServerNotFoundError, match="'nope'"):
            store.duplicate_server("nope")
        assert store.dirty is False

    def test_delete_is_idempotent(self, fs_server):
        store = SettingsStore(Settings(mcp_servers={"fs": fs_server}))
        store.delete_server("fs")
        store.delete_server("fs")
        assert store.settings.mcp_servers == {}


class TestPermissionsAndEnv:
    """Tests for whole-list replacement."""

    def test_set_lists_keep_duplicates(self):
        store = SettingsStore()
        store.set_allowed(["Bash", "Bash"])
        store.set_denied(("Write",))
        assert store.settings.permissions.allow == ["Bash", "Bash"]
        assert store.settings.permissions.deny == ["Write"]

    def test_set_env_copies(self):
        store = SettingsStore()
        env = {"A": "1"}
        store.set_env(env)
        env["B"] = "2"
        assert store.settings.env == {"A": "1"}
