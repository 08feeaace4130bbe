# Built-in presets for models, MCP servers, tools and env variables
from dataclasses import dataclass, field

from ccgear.models import ModelProfile, ServerSpec, new_model_id
from ccgear.store import SettingsStore


@dataclass(frozen=True)
class ModelPreset:
    title: str
    model_id: str
    provider: str
    api_key_env_var: str | None = None
    max_tokens: int | None = None
    base_url: str | None = None


@dataclass(frozen=True)
class EnvPreset:
    name: str
    is_secret: bool


@dataclass(frozen=True)
class ServerPreset:
    name: str
    command: str
    args: tuple[str, ...] = ()
    env: dict[str, str] = field(default_factory=dict)

    def to_spec(self) -> ServerSpec:
        return ServerSpec(command=self.command, args=list(self.args), env=dict(self.env))


MODEL_PRESETS: tuple[ModelPreset, ...] = (
    ModelPreset("GPT-4 Turbo", "gpt-4-turbo", "openai", "OPENAI_API_KEY", 128000),
    ModelPreset("GPT-4o", "gpt-4o", "openai", "OPENAI_API_KEY", 128000),
    ModelPreset(
        "Claude 3.5 Sonnet", "claude-3-5-sonnet-20241022", "anthropic", "ANTHROPIC_API_KEY", 200000
    ),
    ModelPreset("Gemini 1.5 Pro", "gemini-1.5-pro", "google", "GEMINI_API_KEY", 1000000),
    ModelPreset(
        "DeepSeek Chat", "deepseek-chat", "deepseek", "DEEPSEEK_API_KEY", 64000,
        "https://api.deepseek.com/v1",
    ),
)

MCP_PRESETS: tuple[ServerPreset, ...] = (
    ServerPreset(
        "filesystem", "npx",
        ("-y", "@modelcontextprotocol/server-filesystem", "/path/to/directory"),
    ),
    ServerPreset(
        "github", "npx", ("-y", "@modelcontextprotocol/server-github"),
        {"GITHUB_PERSONAL_ACCESS_TOKEN": ""},
    ),
    ServerPreset(
        "postgres", "npx",
        ("-y", "@modelcontextprotocol/server-postgres", "postgresql://localhost/mydb"),
    ),
    ServerPreset(
        "sqlite", "npx",
        ("-y", "@modelcontextprotocol/server-sqlite", "/path/to/database.db"),
    ),
    ServerPreset(
        "brave-search", "npx", ("-y", "@modelcontextprotocol/server-brave-search"),
        {"BRAVE_API_KEY": ""},
    ),
    ServerPreset("puppeteer", "npx", ("-y", "@modelcontextprotocol/server-puppeteer")),
)

TOOL_PRESETS: tuple[str, ...] = (
    "Bash",
    "Read",
    "Write",
    "Edit",
    "MultiEdit",
    "Glob",
    "Grep",
    "LS",
    "TodoRead",
    "TodoWrite",
    "WebFetch",
    "WebSearch",
    "mcp__*",
)

ENV_PRESETS: tuple[EnvPreset, ...] = (
    EnvPreset("ANTHROPIC_API_KEY", True),
    EnvPreset("OPENAI_API_KEY", True),
    EnvPreset("GITHUB_TOKEN", True),
    EnvPreset("OPENROUTER_API_KEY", True),
    EnvPreset("GEMINI_API_KEY", True),
    EnvPreset("AZURE_OPENAI_API_KEY", True),
    EnvPreset("AZURE_OPENAI_ENDPOINT", False),
    EnvPreset("HTTP_PROXY", False),
    EnvPreset("HTTPS_PROXY", False),
    EnvPreset("NO_PROXY", False),
)


def find_model_preset(key: str) -> ModelPreset | None:
    """Look up a model preset by modelId or (case-insensitive) title."""
    for preset in MODEL_PRESETS:
        if key == preset.model_id or key.lower() == preset.title.lower():
            return preset
    return None


def find_server_preset(name: str) -> ServerPreset | None:
    for preset in MCP_PRESETS:
        if preset.name == name:
            return preset
    return None


def apply_model_preset(store: SettingsStore, preset: ModelPreset) -> ModelProfile | None:
    """Add a profile built from preset.

    Returns:
        The new profile, or None if a model with the same modelId exists
    """
    if store.has_model_id(preset.model_id):
        return None
    profile = ModelProfile(
        id=new_model_id(),
        title=preset.title,
        model_id=preset.model_id,
        provider=preset.provider,
        api_key_env_var=preset.api_key_env_var,
        max_tokens=preset.max_tokens,
        base_url=preset.base_url,
    )
    store.add_model(profile)
    return profile


def apply_server_preset(store: SettingsStore, preset: ServerPreset) -> bool:
    """Add preset's server unless a server with that name exists."""
    if preset.name in store.settings.mcp_servers:
        return False
    store.add_server(preset.name, preset.to_spec())
    return True


def add_tool(store: SettingsStore, tool: str, list_name: str) -> bool:
    """Append a tool to the 'allow' or 'deny' list.

    ABOUTME: Trims the name, ignores empty and already-listed names

    Returns:
        True if the list changed
    """
    tool = tool.strip()
    current = _tool_list(store, list_name)
    if not tool or tool in current:
        return False
    _set_tool_list(store, list_name, [*current, tool])
    return True


def remove_tool(store: SettingsStore, tool: str, list_name: str) -> bool:
    """Remove a tool from the 'allow' or 'deny' list. True if it was there."""
    current = _tool_list(store, list_name)
    if tool not in current:
        return False
    _set_tool_list(store, list_name, [t for t in current if t != tool])
    return True


def _tool_list(store: SettingsStore, list_name: str) -> list[str]:
    if list_name == "allow":
        return store.settings.permissions.allow
    if list_name == "deny":
        return store.settings.permissions.deny
    raise ValueError(f"Unknown permission list '{list_name}'. Must be 'allow' or 'deny'.")


def _set_tool_list(store: SettingsStore, list_name: str, tools: list[str]) -> None:
    if list_name == "allow":
        store.set_allowed(tools)
    else:
        store.set_denied(tools)
