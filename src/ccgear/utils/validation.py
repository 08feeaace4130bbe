# ABOUTME: Validation utilities for ccgear settings
# ABOUTME: Presence checks gate store mutations, the rest are advisory findings
import os
import shutil
from collections.abc import Mapping
from dataclasses import dataclass
from urllib.parse import urlparse

from ccgear.models import ModelProfile, Permissions, ServerSpec, Settings
from ccgear.utils.env import ENV_NAME_PATTERN

# ABOUTME: Attribute -> JSON name of the fields a profile cannot be saved without
REQUIRED_MODEL_FIELDS = {
    "title": "title",
    "model_id": "modelId",
    "provider": "provider",
}


@dataclass(frozen=True)
class ValidationError:
    """Represents a validation error or warning.

    ABOUTME: Uses frozen dataclass for immutability
    ABOUTME: Severity level distinguishes between blocking errors and warnings
    """
    subject: str
    message: str
    severity: str  # 'error' or 'warning'


def missing_model_fields(profile: ModelProfile) -> list[str]:
    """Return JSON names of required profile fields that are empty."""
    return [
        json_name
        for attr, json_name in REQUIRED_MODEL_FIELDS.items()
        if not getattr(profile, attr).strip()
    ]


def validate_command_exists(command: str) -> ValidationError | None:
    """Validate that a command exists on the system.

    ABOUTME: Uses shutil.which() for cross-platform command lookup
    ABOUTME: Returns None if command found, ValidationError otherwise

    Examples:
        >>> validate_command_exists("nonexistent_cmd")
        ValidationError(subject='', message='Command not found: nonexistent_cmd', severity='error')
    """
    if shutil.which(command) is None:
        return ValidationError(
            subject="",
            message=f"Command not found: {command}",
            severity="error"
        )
    return None


def validate_url(url: str) -> ValidationError | None:
    """Validate that a base URL is properly formatted.

    ABOUTME: Requires HTTP or HTTPS scheme and a host
    """
    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https"):
        return ValidationError(
            subject="",
            message=f"URL must use HTTP or HTTPS scheme: {url}",
            severity="warning"
        )
    if not parsed.netloc:
        return ValidationError(
            subject="",
            message=f"URL missing host/domain: {url}",
            severity="warning"
        )
    return None


def validate_model(
    profile: ModelProfile,
    env: Mapping[str, str] | None = None,
) -> list[ValidationError]:
    """Validate one model profile.

    ABOUTME: Missing title/modelId/provider are errors
    ABOUTME: Bad env var names, unset key variables, bad URLs are warnings

    Args:
        profile: Profile to check
        env: Settings env map; os.environ is consulted as well

    Returns:
        List of ValidationError instances (empty if valid)
    """
    subject = profile.title or profile.id
    results = [
        ValidationError(subject, f"Missing required field '{name}'", "error")
        for name in missing_model_fields(profile)
    ]

    var = profile.api_key_env_var
    if var:
        if not ENV_NAME_PATTERN.match(var):
            results.append(ValidationError(
                subject, f"'{var}' is not a valid environment variable name", "warning"
            ))
        elif var not in (env or {}) and var not in os.environ:
            results.append(ValidationError(
                subject, f"Environment variable '{var}' not set", "warning"
            ))

    if profile.max_tokens is not None and profile.max_tokens <= 0:
        results.append(ValidationError(
            subject, f"maxTokens must be positive, got {profile.max_tokens}", "warning"
        ))

    if profile.base_url:
        url_error = validate_url(profile.base_url)
        if url_error:
            results.append(ValidationError(subject, url_error.message, url_error.severity))

    return results


def validate_server(name: str, spec: ServerSpec, check_command: bool = True) -> list[ValidationError]:
    """Validate an MCP server entry.

    ABOUTME: Entries without a command are only valid when they carry a url
    ABOUTME: check_command=False skips the shutil.which() lookup

    Examples:
        >>> validate_server("fs", ServerSpec(command="npx"), check_command=False)
        []
    """
    results: list[ValidationError] = []
    if not name.strip():
        results.append(ValidationError(name, "Server name is required", "error"))

    if not spec.command.strip():
        if "url" not in spec.extra:
            results.append(ValidationError(name, "Missing required field 'command'", "error"))
    elif check_command:
        command_error = validate_command_exists(spec.command)
        if command_error:
            results.append(ValidationError(name, command_error.message, command_error.severity))

    for key in spec.env:
        if not ENV_NAME_PATTERN.match(key):
            results.append(ValidationError(
                name, f"'{key}' is not a valid environment variable name", "warning"
            ))

    return results


def find_permission_conflicts(permissions: Permissions) -> list[str]:
    """Return tool names present in both allow and deny, in allow order."""
    denied = set(permissions.deny)
    conflicts: list[str] = []
    for tool in permissions.allow:
        if tool in denied and tool not in conflicts:
            conflicts.append(tool)
    return conflicts


def validate_settings(settings: Settings, check_commands: bool = True) -> list[ValidationError]:
    """Validate the whole settings aggregate.

    ABOUTME: Returns list of all validation errors/warnings
    ABOUTME: Used by 'ccgear validate'; saving does not depend on it
    """
    results: list[ValidationError] = []

    for profile in settings.custom_models:
        results.extend(validate_model(profile, settings.env))

    for name, spec in settings.mcp_servers.items():
        results.extend(validate_server(name, spec, check_command=check_commands))

    for tool in find_permission_conflicts(settings.permissions):
        results.append(ValidationError(
            "permissions", f"'{tool}' is both allowed and denied", "warning"
        ))

    for key in settings.env:
        if not ENV_NAME_PATTERN.match(key):
            results.append(ValidationError(
                "env", f"'{key}' is not a valid environment variable name", "warning"
            ))

    return results
