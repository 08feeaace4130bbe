# Terminal rendering of settings sections
from ccgear import __version__
from ccgear.models import ModelProfile, ServerSpec, Settings
from ccgear.utils.env import is_secret_name, mask_value
from ccgear.utils.validation import find_permission_conflicts


def print_models(models: list[ModelProfile]) -> None:
    """Print profiles in their stored order, numbered from 1."""
    if not models:
        print("  (no custom models)")
        return

    for position, profile in enumerate(models, start=1):
        print(f"  {position}. {profile.title} [{profile.model_id}]")
        print(f"     id: {profile.id}")
        print(f"     provider: {profile.provider}")
        if profile.api_key_env_var:
            print(f"     apiKeyEnvVar: {profile.api_key_env_var}")
        if profile.max_tokens is not None:
            print(f"     maxTokens: {profile.max_tokens}")
        if profile.base_url:
            print(f"     baseUrl: {profile.base_url}")


def print_server(name: str, spec: ServerSpec) -> None:
    print(f"  {name}")
    if spec.command:
        print(f"    command: {spec.command}")
    elif "url" in spec.extra:
        print(f"    url: {spec.extra['url']}")

    if spec.args:
        print(f"    args: {' '.join(spec.args)}")

    if spec.env:
        env_str = ", ".join(
            f"{k}={mask_value(v) if is_secret_name(k) else v}" for k, v in spec.env.items()
        )
        print(f"    env: {env_str}")


def print_servers(servers: dict[str, ServerSpec]) -> None:
    if not servers:
        print("  (no MCP servers)")
        return
    for name, spec in servers.items():
        print_server(name, spec)


def print_permissions(settings: Settings) -> None:
    permissions = settings.permissions
    print(f"  allow: {', '.join(permissions.allow) or '(none)'}")
    print(f"  deny:  {', '.join(permissions.deny) or '(none)'}")
    for tool in find_permission_conflicts(permissions):
        print(f"  ⚠ '{tool}' is both allowed and denied")


def print_env(env: dict[str, str], show_secrets: bool = False) -> None:
    if not env:
        print("  (no environment variables)")
        return
    for name, value in env.items():
        shown = value if show_secrets or not is_secret_name(name) else mask_value(value)
        print(f"  {name}={shown}")


def print_about() -> None:
    print(f"  ccgear v{__version__}")
    print("  Editor for ~/.claude/settings.json")
