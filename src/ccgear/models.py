# Core data models for ccgear
import uuid
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Protocol, runtime_checkable


def new_model_id() -> str:
    """Generate a fresh, never-reused model profile id."""
    return str(uuid.uuid4())


@dataclass(frozen=True)
class ModelProfile:
    """One configured model endpoint.

    ABOUTME: Frozen so edits go through SettingsStore.update_model()
    ABOUTME: Stores only the NAME of the env var holding the API key
    ABOUTME: Unrecognized keys from disk live in extra and are written back
    """
    id: str
    title: str
    model_id: str
    provider: str
    api_key_env_var: str | None = None
    max_tokens: int | None = None
    base_url: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ServerSpec:
    """MCP server launch definition.

    ABOUTME: The server name is the key in Settings.mcp_servers, not a field
    ABOUTME: Keys such as type/url that ccgear does not edit are kept in extra
    """
    command: str
    args: list[str] = field(default_factory=list)
    env: dict[str, str] = field(default_factory=dict)
    extra: dict[str, Any] = field(default_factory=dict)


@dataclass
class Permissions:
    """Allowed and denied tool names."""
    allow: list[str] = field(default_factory=list)
    deny: list[str] = field(default_factory=list)
    extra: dict[str, Any] = field(default_factory=dict)


@dataclass
class Settings:
    """The whole edited settings aggregate.

    ABOUTME: custom_models order is the user's display/selection order
    ABOUTME: Mutable container; mutate it only through SettingsStore
    """
    custom_models: list[ModelProfile] = field(default_factory=list)
    mcp_servers: dict[str, ServerSpec] = field(default_factory=dict)
    permissions: Permissions = field(default_factory=Permissions)
    env: dict[str, str] = field(default_factory=dict)


@runtime_checkable
class FileAccessor(Protocol):
    """File-system capability the session layer is given.

    ABOUTME: Uses @runtime_checkable for isinstance() support
    ABOUTME: Implementations raise SettingsIOError on read/write failure
    """

    def path(self) -> Path:
        """Location of the settings file."""
        ...

    def ensure_directory(self) -> Path:
        """Create the settings directory (and parents) if missing."""
        ...

    def exists(self, path: Path) -> bool:
        """Whether path exists."""
        ...

    def read_text(self, path: Path) -> str:
        """Read the whole file as UTF-8 text."""
        ...

    def write_text(self, path: Path, content: str) -> None:
        """Replace the file with content without leaving it half-written."""
        ...
