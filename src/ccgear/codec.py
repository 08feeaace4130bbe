# Settings file parsing and serialization for ccgear
import json
import logging
import re
from dataclasses import replace
from typing import Any

from ccgear.errors import MalformedConfigError
from ccgear.models import ModelProfile, Permissions, ServerSpec, Settings, new_model_id

logger = logging.getLogger(__name__)

# ABOUTME: Top-level keys ccgear owns; everything else is passed through on save
MANAGED_KEYS = ("customModels", "mcpServers", "permissions", "env")

# ABOUTME: JSON key -> ModelProfile attribute for the canonical profile shape
PROFILE_FIELDS = {
    "id": "id",
    "title": "title",
    "modelId": "model_id",
    "provider": "provider",
    "apiKeyEnvVar": "api_key_env_var",
    "maxTokens": "max_tokens",
    "baseUrl": "base_url",
}

# ABOUTME: Deprecated inline-secret profile shape -> canonical key
LEGACY_PROFILE_KEYS = {
    "model": "modelId",
    "displayName": "title",
    "maxOutputTokens": "maxTokens",
}

SERVER_FIELDS = ("command", "args", "env")
PERMISSION_FIELDS = ("allow", "deny")


def default_settings() -> Settings:
    """Return the settings used when the file is absent or unusable."""
    return Settings()


def _str_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, str)]


def _str_dict(value: Any, context: str) -> dict[str, str]:
    if not isinstance(value, dict):
        return {}
    result: dict[str, str] = {}
    for key, item in value.items():
        if isinstance(item, str):
            result[key] = item
        elif isinstance(item, (int, float, bool)):
            result[key] = json.dumps(item) if isinstance(item, bool) else str(item)
        else:
            logger.warning(f"Dropping non-scalar value for '{key}' in {context}")
    return result


def _optional_str(value: Any) -> str | None:
    if isinstance(value, str) and value:
        return value
    return None


def _optional_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        # isdigit() also accepts characters like "²" that int() rejects
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


def normalize_legacy_profile(data: dict[str, Any]) -> tuple[dict[str, Any], str | None]:
    """Rewrite a deprecated profile dict into the canonical key set.

    ABOUTME: model/displayName/maxOutputTokens are renamed, canonical keys win
    ABOUTME: Inline apiKey is removed and returned separately so it is never persisted

    Args:
        data: Raw profile dict in either shape

    Returns:
        Tuple of (canonical-shape copy, inline secret or None)
    """
    result = dict(data)
    for old_key, new_key in LEGACY_PROFILE_KEYS.items():
        if old_key in result:
            value = result.pop(old_key)
            result.setdefault(new_key, value)

    secret = result.pop("apiKey", None)
    if not isinstance(secret, str) or not secret:
        secret = None
    return result, secret


def profile_from_dict(data: dict[str, Any], profile_id: str | None = None) -> ModelProfile:
    """Build a ModelProfile from a canonical-shape dict.

    ABOUTME: Missing string fields become empty strings, never an error
    ABOUTME: Unknown keys are kept in extra

    Args:
        data: Profile dict (run normalize_legacy_profile() first for old files)
        profile_id: Id to use instead of data["id"]
    """
    raw_id = data.get("id")
    if profile_id is None:
        profile_id = raw_id if isinstance(raw_id, str) and raw_id else new_model_id()

    def text(key: str) -> str:
        value = data.get(key)
        return value if isinstance(value, str) else ""

    return ModelProfile(
        id=profile_id,
        title=text("title"),
        model_id=text("modelId"),
        provider=text("provider"),
        api_key_env_var=_optional_str(data.get("apiKeyEnvVar")),
        max_tokens=_optional_int(data.get("maxTokens")),
        base_url=_optional_str(data.get("baseUrl")),
        extra={k: v for k, v in data.items() if k not in PROFILE_FIELDS},
    )


def profile_to_dict(profile: ModelProfile) -> dict[str, Any]:
    """Convert ModelProfile to its JSON dict.

    ABOUTME: Omits optional fields that are None or empty
    """
    result: dict[str, Any] = {
        "id": profile.id,
        "title": profile.title,
        "modelId": profile.model_id,
        "provider": profile.provider,
    }
    if profile.api_key_env_var:
        result["apiKeyEnvVar"] = profile.api_key_env_var
    if profile.max_tokens is not None:
        result["maxTokens"] = profile.max_tokens
    if profile.base_url:
        result["baseUrl"] = profile.base_url
    result.update(profile.extra)
    return result


def server_from_dict(name: str, data: dict[str, Any]) -> ServerSpec:
    """Convert a JSON server entry to ServerSpec.

    ABOUTME: Handles missing args/env gracefully
    ABOUTME: A missing command (e.g. HTTP servers) becomes "" and is not written back
    """
    command = data.get("command")
    if not isinstance(command, str):
        command = ""
    return ServerSpec(
        command=command,
        args=_str_list(data.get("args")),
        env=_str_dict(data.get("env"), f"server '{name}' env"),
        extra={k: v for k, v in data.items() if k not in SERVER_FIELDS},
    )


def server_to_dict(spec: ServerSpec) -> dict[str, Any]:
    """Convert ServerSpec to its JSON dict.

    ABOUTME: Omits empty args/env for cleaner output
    """
    result: dict[str, Any] = {}
    if spec.command:
        result["command"] = spec.command
    if spec.args:
        result["args"] = list(spec.args)
    if spec.env:
        result["env"] = dict(spec.env)
    result.update(spec.extra)
    return result


def _env_name_for(provider: str) -> str:
    stem = re.sub(r"[^A-Za-z0-9]+", "_", provider).strip("_").upper()
    return f"{stem or 'CUSTOM_MODEL'}_API_KEY"


def _migrate_secret(profile: ModelProfile, secret: str, env: dict[str, str]) -> ModelProfile:
    """Move an inline API key into env and point the profile at it."""
    if profile.api_key_env_var:
        name = profile.api_key_env_var
        if name in env and env[name] != secret:
            logger.warning(
                f"Model '{profile.title or profile.model_id}' has an inline apiKey and "
                f"apiKeyEnvVar '{name}' is already set; dropping the inline key"
            )
            return profile
    else:
        base_name = _env_name_for(profile.provider)
        name = base_name
        counter = 2
        while name in env and env[name] != secret:
            name = f"{base_name}_{counter}"
            counter += 1

    env[name] = secret
    logger.warning(
        f"Moved inline apiKey of model '{profile.title or profile.model_id}' "
        f"into env variable '{name}'"
    )
    return replace(profile, api_key_env_var=name)


def settings_from_dict(data: dict[str, Any]) -> Settings:
    """Build Settings from a parsed JSON object, substituting defaults.

    ABOUTME: Missing or wrong-shaped top-level fields fall back to defaults
    ABOUTME: Duplicate or missing model ids are replaced with fresh ones
    ABOUTME: Legacy inline secrets are migrated into the env map
    """
    env = _str_dict(data.get("env"), "env")

    models: list[ModelProfile] = []
    seen_ids: set[str] = set()
    raw_models = data.get("customModels")
    for index, entry in enumerate(raw_models if isinstance(raw_models, list) else []):
        if not isinstance(entry, dict):
            logger.warning(f"Skipping customModels[{index}]: not an object")
            continue

        canonical, secret = normalize_legacy_profile(entry)
        profile = profile_from_dict(canonical)
        if profile.id in seen_ids:
            logger.warning(f"customModels[{index}] repeats id '{profile.id}', assigning a new id")
            profile = profile_from_dict(canonical, profile_id=new_model_id())
        if secret is not None:
            profile = _migrate_secret(profile, secret, env)

        seen_ids.add(profile.id)
        models.append(profile)

    servers: dict[str, ServerSpec] = {}
    raw_servers = data.get("mcpServers")
    for name, entry in (raw_servers.items() if isinstance(raw_servers, dict) else []):
        if not isinstance(entry, dict):
            logger.warning(f"Skipping MCP server '{name}': not an object")
            continue
        servers[name] = server_from_dict(name, entry)

    raw_permissions = data.get("permissions")
    if isinstance(raw_permissions, dict):
        permissions = Permissions(
            allow=_str_list(raw_permissions.get("allow")),
            deny=_str_list(raw_permissions.get("deny")),
            extra={k: v for k, v in raw_permissions.items() if k not in PERMISSION_FIELDS},
        )
    else:
        permissions = Permissions()

    return Settings(
        custom_models=models,
        mcp_servers=servers,
        permissions=permissions,
        env=env,
    )


def settings_to_dict(settings: Settings) -> dict[str, Any]:
    """Convert Settings to the four managed top-level fields."""
    return {
        "customModels": [profile_to_dict(p) for p in settings.custom_models],
        "mcpServers": {
            name: server_to_dict(spec) for name, spec in settings.mcp_servers.items()
        },
        "permissions": {
            "allow": list(settings.permissions.allow),
            "deny": list(settings.permissions.deny),
            **settings.permissions.extra,
        },
        "env": dict(settings.env),
    }


def decode(raw_text: str) -> Settings:
    """Parse settings file content.

    ABOUTME: Fail-fast only on invalid JSON or a non-object root
    ABOUTME: Tolerates partially populated or hand-edited files

    Args:
        raw_text: Full file content

    Returns:
        Parsed Settings

    Raises:
        MalformedConfigError: If the text is not a JSON object

    Examples:
        >>> decode("{}") == default_settings()
        True
    """
    try:
        data = json.loads(raw_text)
    except (ValueError, RecursionError) as e:
        raise MalformedConfigError(f"Invalid JSON: {e}") from e

    if not isinstance(data, dict):
        raise MalformedConfigError(
            f"Settings root must be a JSON object, got {type(data).__name__}"
        )

    return settings_from_dict(data)


def _parse_object(raw_text: str | None) -> dict[str, Any] | None:
    if raw_text is None:
        return None
    try:
        data = json.loads(raw_text)
    except (ValueError, RecursionError):
        logger.debug("Existing settings content is not valid JSON, ignoring it for merge")
        return None
    return data if isinstance(data, dict) else None


def encode(settings: Settings, existing_raw: str | None = None) -> str:
    """Serialize settings to pretty-printed JSON.

    ABOUTME: Unmanaged top-level keys of existing_raw are preserved verbatim
    ABOUTME: Managed keys keep their position when they already existed
    ABOUTME: Uses 2-space indentation and a trailing newline

    Args:
        settings: Settings to write
        existing_raw: Current file content used as merge base, if any

    Returns:
        JSON text ready to write
    """
    managed = settings_to_dict(settings)
    base = _parse_object(existing_raw)

    if base is None:
        output = managed
    else:
        output = {
            key: managed[key] if key in managed else value
            for key, value in base.items()
        }
        for key, value in managed.items():
            output.setdefault(key, value)

    return json.dumps(output, indent=2, ensure_ascii=False) + "\n"
