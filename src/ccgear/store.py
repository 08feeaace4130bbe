# In-memory settings state for ccgear
from collections import Counter
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import fields, replace
from typing import Any

from ccgear.codec import default_settings
from ccgear.errors import (
    DuplicateIdError,
    InvalidProfileError,
    InvalidReorderError,
    InvalidServerError,
    ModelNotFoundError,
    ServerNotFoundError,
)
from ccgear.models import ModelProfile, ServerSpec, Settings, new_model_id
from ccgear.utils.validation import missing_model_fields

# ABOUTME: ModelProfile attributes an update patch may set
PATCHABLE_FIELDS = frozenset(f.name for f in fields(ModelProfile))


def _require_complete(profile: ModelProfile) -> None:
    missing = missing_model_fields(profile)
    if missing:
        raise InvalidProfileError(
            f"Model '{profile.id}' missing required field(s): {', '.join(missing)}"
        )


def _normalized(profile: ModelProfile) -> ModelProfile:
    # "" and None both mean unset for the optional string fields
    if profile.api_key_env_var == "" or profile.base_url == "":
        return replace(
            profile,
            api_key_env_var=profile.api_key_env_var or None,
            base_url=profile.base_url or None,
        )
    return profile


def _require_server(name: str, spec: ServerSpec) -> None:
    if not name.strip():
        raise InvalidServerError("Server name is required")
    if not spec.command.strip() and "url" not in spec.extra:
        raise InvalidServerError(f"Server '{name}' missing required 'command' field")


class SettingsStore:
    """Mutable model of the settings being edited.

    ABOUTME: Every mutator sets dirty, even when the value does not change
    ABOUTME: replace() and mark_saved() are the only ways to clear dirty
    ABOUTME: One instance per editing session, owned by SettingsSession
    """

    def __init__(self, settings: Settings | None = None) -> None:
        self._settings = settings if settings is not None else default_settings()
        self._dirty = False

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def dirty(self) -> bool:
        """True when there are edits not yet written to disk."""
        return self._dirty

    def replace(self, settings: Settings) -> None:
        """Install a full new Settings value (after load or discard)."""
        self._settings = settings
        self._dirty = False

    def mark_saved(self) -> None:
        """Clear dirty after a successful write. Settings are untouched."""
        self._dirty = False

    # Model profiles -------------------------------------------------------

    @property
    def models(self) -> list[ModelProfile]:
        return self._settings.custom_models

    def get_model(self, model_id: str) -> ModelProfile | None:
        for profile in self._settings.custom_models:
            if profile.id == model_id:
                return profile
        return None

    def has_model_id(self, provider_model_id: str) -> bool:
        """Whether any profile uses this provider-side modelId."""
        return any(p.model_id == provider_model_id for p in self._settings.custom_models)

    def add_model(self, profile: ModelProfile) -> None:
        """Append a profile.

        Raises:
            DuplicateIdError: If a profile with profile.id exists
            InvalidProfileError: If title, modelId or provider is empty
        """
        if self.get_model(profile.id) is not None:
            raise DuplicateIdError(f"Model id '{profile.id}' already exists")
        _require_complete(profile)

        self._settings.custom_models = [*self._settings.custom_models, _normalized(profile)]
        self._dirty = True

    def update_model(self, model_id: str, patch: ModelProfile | Mapping[str, Any]) -> ModelProfile:
        """Replace the profile with matching id.

        ABOUTME: A ModelProfile patch replaces every field, a mapping only the named ones
        ABOUTME: The id never changes

        Args:
            model_id: Id of the profile to update
            patch: Full replacement or {attribute: value} changes

        Returns:
            The stored, updated profile

        Raises:
            ModelNotFoundError: If no profile has model_id (dirty is not set)
            ValueError: If the patch changes the id or names an unknown field
            InvalidProfileError: If the result misses a required field
        """
        current = self.get_model(model_id)
        if current is None:
            raise ModelNotFoundError(f"Model id '{model_id}' not found")

        if isinstance(patch, ModelProfile):
            if patch.id != model_id:
                raise ValueError(f"Cannot change model id '{model_id}' to '{patch.id}'")
            updated = patch
        else:
            unknown = set(patch) - PATCHABLE_FIELDS
            if unknown:
                raise ValueError(f"Unknown model field(s): {', '.join(sorted(unknown))}")
            if "id" in patch and patch["id"] != model_id:
                raise ValueError(f"Cannot change model id '{model_id}' to '{patch['id']}'")
            updated = replace(current, **patch)

        updated = _normalized(updated)
        _require_complete(updated)

        self._settings.custom_models = [
            updated if p.id == model_id else p for p in self._settings.custom_models
        ]
        self._dirty = True
        return updated

    def delete_model(self, model_id: str) -> None:
        """Remove the profile with matching id. Idempotent, always sets dirty."""
        self._settings.custom_models = [
            p for p in self._settings.custom_models if p.id != model_id
        ]
        self._dirty = True

    def delete_models(self, model_ids: Iterable[str]) -> int:
        """Batch delete. Returns how many profiles were removed."""
        doomed = set(model_ids)
        before = len(self._settings.custom_models)
        self._settings.custom_models = [
            p for p in self._settings.custom_models if p.id not in doomed
        ]
        self._dirty = True
        return before - len(self._settings.custom_models)

    def reorder_models(self, new_order: Sequence[ModelProfile | str]) -> None:
        """Replace the model order with a permutation of the current entries.

        Args:
            new_order: Profiles or ids, each current id exactly once

        Raises:
            InvalidReorderError: If the ids differ from the current ones
        """
        new_ids = [item if isinstance(item, str) else item.id for item in new_order]
        by_id = {p.id: p for p in self._settings.custom_models}

        if Counter(new_ids) != Counter(by_id):
            unknown = sorted(set(new_ids) - set(by_id))
            missing = sorted(set(by_id) - set(new_ids))
            details = []
            if unknown:
                details.append(f"unknown: {', '.join(unknown)}")
            if missing:
                details.append(f"missing: {', '.join(missing)}")
            if not details:
                details.append("repeated ids")
            raise InvalidReorderError(
                f"New order is not a permutation of current models ({'; '.join(details)})"
            )

        self._settings.custom_models = [by_id[model_id] for model_id in new_ids]
        self._dirty = True

    def move_model(self, model_id: str, index: int) -> None:
        """Move one profile to index (clamped), via reorder_models()."""
        profile = self.get_model(model_id)
        if profile is None:
            raise ModelNotFoundError(f"Model id '{model_id}' not found")

        order = [p for p in self._settings.custom_models if p.id != model_id]
        index = max(0, min(index, len(order)))
        order.insert(index, profile)
        self.reorder_models(order)

    def duplicate_model(self, model_id: str) -> ModelProfile:
        """Append a copy of a profile with a fresh id and a ' (Copy)' title."""
        source = self.get_model(model_id)
        if source is None:
            raise ModelNotFoundError(f"Model id '{model_id}' not found")

        copy = replace(
            source,
            id=new_model_id(),
            title=f"{source.title} (Copy)",
            extra=dict(source.extra),
        )
        self.add_model(copy)
        return copy

    def providers(self) -> list[str]:
        """Distinct non-empty providers in model order."""
        seen: list[str] = []
        for profile in self._settings.custom_models:
            if profile.provider and profile.provider not in seen:
                seen.append(profile.provider)
        return seen

    def find_models(self, search: str = "", provider: str | None = None) -> list[ModelProfile]:
        """Filter profiles by case-insensitive text and exact provider."""
        needle = search.lower()
        return [
            p for p in self._settings.custom_models
            if (
                needle in p.title.lower()
                or needle in p.model_id.lower()
                or needle in p.provider.lower()
            )
            and (provider is None or p.provider == provider)
        ]

    # MCP servers ----------------------------------------------------------

    def add_server(self, name: str, spec: ServerSpec) -> None:
        """Set the server under name, overwriting any existing entry."""
        _require_server(name, spec)
        self._settings.mcp_servers = {**self._settings.mcp_servers, name: spec}
        self._dirty = True

    def update_server(self, name: str, spec: ServerSpec) -> None:
        """Same map-set operation as add_server()."""
        self.add_server(name, spec)

    def rename_server(self, old_name: str, new_name: str, spec: ServerSpec) -> None:
        """Store spec under new_name and drop old_name if it differs."""
        _require_server(new_name, spec)
        if old_name != new_name:
            self.delete_server(old_name)
        self.update_server(new_name, spec)

    def duplicate_server(self, name: str) -> str:
        """Store a copy of a server as '<name>-copy' (numbered if taken).

        Returns:
            Name of the new entry

        Raises:
            ServerNotFoundError: If no server is named name
        """
        source = self._settings.mcp_servers.get(name)
        if source is None:
            raise ServerNotFoundError(f"MCP server '{name}' not found")

        new_name = f"{name}-copy"
        counter = 2
        while new_name in self._settings.mcp_servers:
            new_name = f"{name}-copy-{counter}"
            counter += 1

        self.add_server(new_name, replace(
            source, args=list(source.args), env=dict(source.env), extra=dict(source.extra)
        ))
        return new_name

    def delete_server(self, name: str) -> None:
        """Remove the server if present. Idempotent, always sets dirty."""
        self._settings.mcp_servers = {
            key: value for key, value in self._settings.mcp_servers.items() if key != name
        }
        self._dirty = True

    # Permissions and env ----------------------------------------------------

    def set_allowed(self, tools: Iterable[str]) -> None:
        """Replace the allow list. Duplicates are the caller's problem."""
        self._settings.permissions.allow = list(tools)
        self._dirty = True

    def set_denied(self, tools: Iterable[str]) -> None:
        """Replace the deny list. Duplicates are the caller's problem."""
        self._settings.permissions.deny = list(tools)
        self._dirty = True

    def set_env(self, env: Mapping[str, str]) -> None:
        """Replace the whole env map."""
        self._settings.env = dict(env)
        self._dirty = True
