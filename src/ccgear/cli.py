# CLI interface for ccgear
import argparse
import logging
import shutil
import sys
from dataclasses import replace
from pathlib import Path

from ccgear import __version__
from ccgear.config import LocalFileAccessor, get_backup_dir
from ccgear.display import print_env, print_models, print_permissions, print_servers
from ccgear.errors import SettingsError
from ccgear.models import ModelProfile, ServerSpec, new_model_id
from ccgear.presets import (
    ENV_PRESETS,
    MCP_PRESETS,
    MODEL_PRESETS,
    TOOL_PRESETS,
    add_tool,
    apply_model_preset,
    apply_server_preset,
    find_model_preset,
    find_server_preset,
    remove_tool,
)
from ccgear.session import SettingsSession
from ccgear.transfer import default_export_filename, export_models, import_models
from ccgear.utils import create_backup, find_permission_conflicts, parse_env_pairs, validate_settings

# ABOUTME: Exit codes
# 0 = success, 1 = partial success / warnings, 2 = config error, 3 = fatal
EXIT_SUCCESS = 0
EXIT_PARTIAL = 1
EXIT_CONFIG_ERROR = 2
EXIT_FATAL = 3

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"

# ABOUTME: models edit option dest -> ModelProfile attribute
MODEL_EDIT_OPTIONS = {
    "title": "title",
    "model_id": "model_id",
    "provider": "provider",
    "api_key_env": "api_key_env_var",
    "max_tokens": "max_tokens",
    "base_url": "base_url",
}


def _home(args: argparse.Namespace) -> Path | None:
    home = getattr(args, "home", None)
    return Path(home).expanduser() if home else None


def open_session(args: argparse.Namespace) -> SettingsSession:
    """Build a session for the settings file selected by --home.

    ABOUTME: Backups go to <home>/.claude/backups before each write
    """
    home = _home(args)
    return SettingsSession(LocalFileAccessor(home), backup_dir=get_backup_dir(home))


def _load_for_edit(session: SettingsSession) -> bool:
    """Load settings; refuse to continue if the file could not be used.

    ABOUTME: Saving after a failed load would replace the file with defaults
    """
    report = session.load()
    if not report.ok:
        print(f"Error: could not load {report.path}: {report.error}")
        if report.backup_path:
            print(f"  Corrupt file backed up to {report.backup_path}")
        print("Refusing to modify it. Fix or remove the file and try again.")
        return False
    return True


def _save(session: SettingsSession) -> int:
    report = session.save()
    if not report.ok:
        print(f"Error: failed to save {report.path}: {report.error}")
        return EXIT_FATAL
    print(f"  Saved {report.path}")
    return EXIT_SUCCESS


def _split_csv(value: str | None) -> list[str]:
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


def _model_patch(args: argparse.Namespace) -> dict:
    """Collect the models edit options that were given.

    ABOUTME: An empty --api-key-env or --base-url clears the field
    """
    patch = {}
    for option, attribute in MODEL_EDIT_OPTIONS.items():
        value = getattr(args, option, None)
        if value is None:
            continue
        if attribute in ("api_key_env_var", "base_url"):
            value = value or None
        patch[attribute] = value
    return patch


def cmd_show(args: argparse.Namespace) -> int:
    """Execute show command.

    ABOUTME: Prints a one-screen summary of every section
    """
    print(f"ccgear show v{__version__}")
    print()

    try:
        session = open_session(args)
        report = session.load()
        settings = session.store.settings

        print(f"Settings file: {report.path}")
        if report.source == "defaults" and report.ok:
            print("  (file does not exist yet, showing defaults)")
        elif not report.ok:
            print(f"  Warning: {report.error} (showing defaults)")
        print()

        print(f"Custom models: {len(settings.custom_models)}")
        print(f"MCP servers: {len(settings.mcp_servers)}")
        print(
            f"Permissions: {len(settings.permissions.allow)} allowed, "
            f"{len(settings.permissions.deny)} denied"
        )
        print(f"Environment variables: {len(settings.env)}")

        conflicts = find_permission_conflicts(settings.permissions)
        if conflicts:
            print()
            print(f"Warning: both allowed and denied: {', '.join(conflicts)}")
            return EXIT_PARTIAL

        return EXIT_SUCCESS if report.ok else EXIT_CONFIG_ERROR

    except Exception as e:
        print(f"Fatal error: {e}")
        return EXIT_FATAL


def cmd_models(args: argparse.Namespace) -> int:
    """Execute models subcommands.

    ABOUTME: Read-only subcommands (list, presets, export) never write
    ABOUTME: Mutating subcommands load, change the store, then save
    """
    print(f"ccgear models v{__version__}")
    print()

    action = args.models_command
    try:
        session = open_session(args)
        store = session.store

        if action in (None, "list"):
            report = session.load()
            if not report.ok:
                print(f"Warning: {report.error} (showing defaults)")
            search = getattr(args, "search", None) or ""
            provider = getattr(args, "provider", None)
            models = store.find_models(search, provider)
            print(f"Custom models in {report.path}:")
            print()
            print_models(models)
            print()
            print(f"Total: {len(models)} model(s)")
            providers = store.providers()
            if providers:
                print(f"Providers: {', '.join(providers)}")
            return EXIT_SUCCESS

        if action == "presets":
            session.load()
            for preset in MODEL_PRESETS:
                marker = " [added]" if store.has_model_id(preset.model_id) else ""
                print(f"  {preset.model_id} - {preset.title} ({preset.provider}){marker}")
            return EXIT_SUCCESS

        if action == "export":
            report = session.load()
            if not report.ok:
                print(f"Error: could not load {report.path}: {report.error}")
                return EXIT_CONFIG_ERROR
            target = Path(args.file) if args.file else Path.cwd() / default_export_filename()
            export_models(store.models, target)
            print(f"Exported {len(store.models)} model(s) to {target}")
            return EXIT_SUCCESS

        if not _load_for_edit(session):
            return EXIT_CONFIG_ERROR

        if action == "add":
            profile = ModelProfile(
                id=new_model_id(),
                title=args.title,
                model_id=args.model_id,
                provider=args.provider,
                api_key_env_var=args.api_key_env or None,
                max_tokens=args.max_tokens,
                base_url=args.base_url or None,
            )
            if store.has_model_id(profile.model_id):
                print(f"Warning: a model with modelId '{profile.model_id}' already exists.")
            store.add_model(profile)
            print(f"Added model '{profile.title}' ({profile.id})")

        elif action == "edit":
            patch = _model_patch(args)
            if not patch:
                print("No changes given. See 'ccgear models edit --help'.")
                return EXIT_CONFIG_ERROR
            profile = store.update_model(args.id, patch)
            print(f"Updated model '{profile.title}' ({profile.id})")

        elif action == "remove":
            removed = store.delete_models(args.ids)
            if removed == 0:
                print("No matching model ids found.")
                return EXIT_CONFIG_ERROR
            print(f"Removed {removed} model(s)")

        elif action == "copy":
            copy = store.duplicate_model(args.id)
            print(f"Copied to '{copy.title}' ({copy.id})")

        elif action == "move":
            store.move_model(args.id, args.position - 1)
            print(f"Moved {args.id} to position {args.position}")

        elif action == "preset":
            preset = find_model_preset(args.name)
            if preset is None:
                print(f"Unknown model preset '{args.name}'. Run 'ccgear models presets'.")
                return EXIT_CONFIG_ERROR
            profile = apply_model_preset(store, preset)
            if profile is None:
                print(f"Model '{preset.model_id}' already configured.")
                return EXIT_SUCCESS
            print(f"Added model '{profile.title}' ({profile.id})")

        elif action == "import":
            try:
                raw_text = Path(args.file).read_text(encoding="utf-8")
            except OSError as e:
                print(f"Error: cannot read {args.file}: {e}")
                return EXIT_CONFIG_ERROR
            result = import_models(store, raw_text)
            print(f"Imported {result.imported} model(s)")
            if result.skipped_duplicates:
                print(f"  Skipped {result.skipped_duplicates} already configured")
            if result.skipped_invalid:
                print(f"  Skipped {result.skipped_invalid} without modelId/provider")
            if result.imported == 0:
                return EXIT_SUCCESS

        return _save(session)

    except SettingsError as e:
        print(f"Error: {e}")
        return EXIT_CONFIG_ERROR
    except Exception as e:
        print(f"Fatal error: {e}")
        return EXIT_FATAL


def cmd_mcp(args: argparse.Namespace) -> int:
    """Execute mcp subcommands.

    ABOUTME: add overwrites an existing server of the same name (with warning)
    """
    print(f"ccgear mcp v{__version__}")
    print()

    action = args.mcp_command
    try:
        session = open_session(args)
        store = session.store

        if action in (None, "list"):
            report = session.load()
            if not report.ok:
                print(f"Warning: {report.error} (showing defaults)")
            print(f"MCP Servers in {report.path}:")
            print()
            print_servers(store.settings.mcp_servers)
            print()
            print(f"Total: {len(store.settings.mcp_servers)} server(s)")
            return EXIT_SUCCESS

        if action == "presets":
            session.load()
            for preset in MCP_PRESETS:
                marker = " [added]" if preset.name in store.settings.mcp_servers else ""
                print(f"  {preset.name}: {preset.command} {' '.join(preset.args)}{marker}")
            return EXIT_SUCCESS

        if not _load_for_edit(session):
            return EXIT_CONFIG_ERROR

        if action == "add":
            if args.name in store.settings.mcp_servers:
                print(f"Warning: Server '{args.name}' already exists. It will be replaced.")
            try:
                env_vars = parse_env_pairs(_split_csv(args.env))
            except ValueError as e:
                print(f"Error: {e}")
                return EXIT_CONFIG_ERROR
            spec = ServerSpec(command=args.command, args=_split_csv(args.args), env=env_vars)
            store.add_server(args.name, spec)
            print(f"Added server '{args.name}'")

        elif action == "remove":
            if args.name not in store.settings.mcp_servers:
                print(f"  Server '{args.name}' not found in settings.")
                return EXIT_CONFIG_ERROR
            store.delete_server(args.name)
            print(f"Removed server '{args.name}'")

        elif action == "edit":
            current = store.settings.mcp_servers.get(args.name)
            if current is None:
                print(f"  Server '{args.name}' not found in settings.")
                return EXIT_CONFIG_ERROR
            changes = {}
            if args.command is not None:
                changes["command"] = args.command
            if args.args is not None:
                changes["args"] = _split_csv(args.args)
            if args.env is not None:
                try:
                    changes["env"] = parse_env_pairs(_split_csv(args.env))
                except ValueError as e:
                    print(f"Error: {e}")
                    return EXIT_CONFIG_ERROR
            new_name = args.rename or args.name
            if not changes and new_name == args.name:
                print("No changes given. Use --rename, --command, --args or --env.")
                return EXIT_CONFIG_ERROR
            if new_name != args.name and new_name in store.settings.mcp_servers:
                print(f"Error: Server '{new_name}' already exists.")
                return EXIT_CONFIG_ERROR
            store.rename_server(args.name, new_name, replace(current, **changes))
            if new_name != args.name:
                print(f"Renamed server '{args.name}' to '{new_name}'")
            else:
                print(f"Updated server '{args.name}'")

        elif action == "copy":
            new_name = store.duplicate_server(args.name)
            print(f"Copied server '{args.name}' to '{new_name}'")

        elif action == "preset":
            preset = find_server_preset(args.name)
            if preset is None:
                print(f"Unknown MCP preset '{args.name}'. Run 'ccgear mcp presets'.")
                return EXIT_CONFIG_ERROR
            if not apply_server_preset(store, preset):
                print(f"Server '{preset.name}' already configured.")
                return EXIT_SUCCESS
            print(f"Added server '{preset.name}'")

        return _save(session)

    except SettingsError as e:
        print(f"Error: {e}")
        return EXIT_CONFIG_ERROR
    except Exception as e:
        print(f"Fatal error: {e}")
        return EXIT_FATAL


def cmd_permissions(args: argparse.Namespace) -> int:
    """Execute permissions subcommands."""
    print(f"ccgear permissions v{__version__}")
    print()

    action = args.permissions_command
    try:
        session = open_session(args)
        store = session.store

        if action in (None, "list"):
            report = session.load()
            if not report.ok:
                print(f"Warning: {report.error} (showing defaults)")
            print(f"Permissions in {report.path}:")
            print()
            print_permissions(store.settings)
            listed = set(store.settings.permissions.allow) | set(store.settings.permissions.deny)
            available = [tool for tool in TOOL_PRESETS if tool not in listed]
            if available:
                print()
                print(f"  Known tools not listed: {', '.join(available)}")
            return EXIT_SUCCESS

        if not _load_for_edit(session):
            return EXIT_CONFIG_ERROR

        changed = 0
        if action in ("allow", "deny"):
            for tool in args.tools:
                if add_tool(store, tool, action):
                    changed += 1
            print(f"Added {changed} tool(s) to {action} list")
        elif action == "remove":
            for tool in args.tools:
                changed += remove_tool(store, tool, "allow") + remove_tool(store, tool, "deny")
            print(f"Removed {changed} entr{'y' if changed == 1 else 'ies'}")

        if changed == 0:
            return EXIT_SUCCESS

        exit_code = _save(session)
        conflicts = find_permission_conflicts(store.settings.permissions)
        if conflicts and exit_code == EXIT_SUCCESS:
            print(f"Warning: both allowed and denied: {', '.join(conflicts)}")
            return EXIT_PARTIAL
        return exit_code

    except SettingsError as e:
        print(f"Error: {e}")
        return EXIT_CONFIG_ERROR
    except Exception as e:
        print(f"Fatal error: {e}")
        return EXIT_FATAL


def cmd_env(args: argparse.Namespace) -> int:
    """Execute env subcommands.

    ABOUTME: Values of secret-looking names are masked unless --show-secrets
    """
    print(f"ccgear env v{__version__}")
    print()

    action = args.env_command
    try:
        session = open_session(args)
        store = session.store

        if action in (None, "list"):
            report = session.load()
            if not report.ok:
                print(f"Warning: {report.error} (showing defaults)")
            print(f"Environment variables in {report.path}:")
            print()
            print_env(store.settings.env, show_secrets=getattr(args, "show_secrets", False))
            return EXIT_SUCCESS

        if action == "presets":
            session.load()
            for preset in ENV_PRESETS:
                secret = " (secret)" if preset.is_secret else ""
                marker = " [set]" if preset.name in store.settings.env else ""
                print(f"  {preset.name}{secret}{marker}")
            return EXIT_SUCCESS

        if not _load_for_edit(session):
            return EXIT_CONFIG_ERROR

        env = dict(store.settings.env)
        if action == "set":
            try:
                updates = parse_env_pairs(args.pairs)
            except ValueError as e:
                print(f"Error: {e}")
                return EXIT_CONFIG_ERROR
            env.update(updates)
            print(f"Set {len(updates)} variable(s)")
        elif action == "unset":
            missing = [name for name in args.names if name not in env]
            for name in args.names:
                env.pop(name, None)
            if missing:
                print(f"  Not set: {', '.join(missing)}")
            if len(missing) == len(args.names):
                return EXIT_CONFIG_ERROR
            print(f"Unset {len(args.names) - len(missing)} variable(s)")

        store.set_env(env)
        return _save(session)

    except SettingsError as e:
        print(f"Error: {e}")
        return EXIT_CONFIG_ERROR
    except Exception as e:
        print(f"Fatal error: {e}")
        return EXIT_FATAL


def cmd_validate(args: argparse.Namespace) -> int:
    """Execute validate command.

    ABOUTME: Loads settings and validates without modifying files
    ABOUTME: Errors give exit code 2, warnings only give exit code 1
    """
    print(f"ccgear validate v{__version__}")
    print()

    try:
        session = open_session(args)
        print(f"Validating {session.path}...")
        print()

        report = session.load()
        if not report.ok:
            print(f"  ✗ {report.error}")
            return EXIT_CONFIG_ERROR
        if report.source == "defaults":
            print("  ✓ No settings file yet (defaults)")
            return EXIT_SUCCESS

        settings = session.store.settings
        print("  ✓ JSON syntax valid")
        print(f"  ✓ {len(settings.custom_models)} model(s), {len(settings.mcp_servers)} server(s)")

        commands = sorted({spec.command for spec in settings.mcp_servers.values() if spec.command})
        missing_commands = []
        if commands:
            print()
            print("  Checking MCP server commands:")
            for cmd in commands:
                cmd_path = shutil.which(cmd)
                if cmd_path:
                    print(f"    ✓ {cmd} -> {cmd_path}")
                else:
                    print(f"    ✗ {cmd} not found")
                    missing_commands.append(cmd)

        # Commands were checked above
        findings = validate_settings(settings, check_commands=False)
        errors = [f for f in findings if f.severity == "error"]
        warnings = [f for f in findings if f.severity == "warning"]

        if findings:
            print()
            for finding in findings:
                mark = "✗" if finding.severity == "error" else "⚠"
                print(f"  {mark} {finding.subject}: {finding.message}")

        print()
        error_count = len(errors) + len(missing_commands)
        print(f"Validation complete: {error_count} error(s), {len(warnings)} warning(s)")

        if error_count:
            return EXIT_CONFIG_ERROR
        if warnings:
            return EXIT_PARTIAL
        return EXIT_SUCCESS

    except Exception as e:
        print(f"Fatal error: {e}")
        return EXIT_FATAL


def cmd_backup(args: argparse.Namespace) -> int:
    """Execute backup command."""
    print(f"ccgear backup v{__version__}")
    print()

    session = open_session(args)
    try:
        backup_path = create_backup(session.path, get_backup_dir(_home(args)))
    except FileNotFoundError:
        print(f"Error: Settings file not found at {session.path}")
        return EXIT_CONFIG_ERROR
    except OSError as e:
        print(f"Fatal error: {e}")
        return EXIT_FATAL

    print(f"Backed up {session.path} to {backup_path}")
    return EXIT_SUCCESS


def cmd_edit(args: argparse.Namespace) -> int:
    """Execute edit command (interactive section editor)."""
    from ccgear.interactive import run_editor

    print(f"ccgear edit v{__version__}")
    print()
    return run_editor(open_session(args))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ccgear",
        description="Editor for Claude settings (~/.claude/settings.json)"
    )

    parser.add_argument(
        "--version", "-V",
        action="version",
        version=f"ccgear v{__version__}"
    )
    parser.add_argument(
        "--home",
        help="Home directory holding .claude/ (default: your home directory)"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("show", help="Summarize the settings file")
    subparsers.add_parser("validate", help="Validate settings without modifying them")
    subparsers.add_parser("backup", help="Create a timestamped backup of the settings file")
    subparsers.add_parser("edit", help="Interactive section editor")

    # models command
    models_parser = subparsers.add_parser("models", help="Manage custom model profiles")
    models_sub = models_parser.add_subparsers(dest="models_command")

    list_parser = models_sub.add_parser("list", help="List model profiles")
    list_parser.add_argument("--search", help="Filter by title, modelId or provider")
    list_parser.add_argument("--provider", help="Only show this provider")

    add_parser = models_sub.add_parser("add", help="Add a model profile")
    add_parser.add_argument("--title", required=True, help="Display name")
    add_parser.add_argument("--model-id", required=True, help="Provider-side model identifier")
    add_parser.add_argument("--provider", required=True, help="Provider tag (e.g., openai)")
    add_parser.add_argument("--api-key-env", help="Name of the env variable holding the API key")
    add_parser.add_argument("--max-tokens", type=int, help="Maximum tokens")
    add_parser.add_argument("--base-url", help="API base URL")

    edit_parser = models_sub.add_parser("edit", help="Change fields of a model profile")
    edit_parser.add_argument("id", help="Model id")
    edit_parser.add_argument("--title", help="Display name")
    edit_parser.add_argument("--model-id", help="Provider-side model identifier")
    edit_parser.add_argument("--provider", help="Provider tag")
    edit_parser.add_argument("--api-key-env", help="API key variable name (empty to clear)")
    edit_parser.add_argument("--max-tokens", type=int, help="Maximum tokens")
    edit_parser.add_argument("--base-url", help="API base URL (empty to clear)")

    remove_parser = models_sub.add_parser("remove", help="Remove model profiles by id")
    remove_parser.add_argument("ids", nargs="+", help="Model ids")

    copy_parser = models_sub.add_parser("copy", help="Duplicate a model profile")
    copy_parser.add_argument("id", help="Model id")

    move_parser = models_sub.add_parser("move", help="Move a model to a position (1-based)")
    move_parser.add_argument("id", help="Model id")
    move_parser.add_argument("position", type=int, help="New position, 1 = first")

    models_sub.add_parser("presets", help="List built-in model presets")
    preset_parser = models_sub.add_parser("preset", help="Add a built-in model preset")
    preset_parser.add_argument("name", help="Preset modelId or title")

    export_parser = models_sub.add_parser("export", help="Export model profiles to JSON")
    export_parser.add_argument("file", nargs="?", help="Output file")

    import_parser = models_sub.add_parser("import", help="Import model profiles from JSON")
    import_parser.add_argument("file", help="Export file to import")

    # mcp command
    mcp_parser = subparsers.add_parser("mcp", help="Manage MCP servers")
    mcp_sub = mcp_parser.add_subparsers(dest="mcp_command")
    mcp_sub.add_parser("list", help="List MCP servers")

    mcp_add = mcp_sub.add_parser("add", help="Add or replace an MCP server")
    mcp_add.add_argument("name", help="Name of the MCP server")
    mcp_add.add_argument("--command", required=True, help="Command to run")
    mcp_add.add_argument("--args", help="Comma-separated arguments")
    mcp_add.add_argument("--env", help="Comma-separated KEY=VALUE environment variables")

    mcp_remove = mcp_sub.add_parser("remove", help="Remove an MCP server")
    mcp_remove.add_argument("name", help="Name of the MCP server")

    mcp_edit = mcp_sub.add_parser("edit", help="Change or rename an MCP server")
    mcp_edit.add_argument("name", help="Name of the MCP server")
    mcp_edit.add_argument("--rename", help="New name")
    mcp_edit.add_argument("--command", help="Command to run")
    mcp_edit.add_argument("--args", help="Comma-separated arguments (replaces the list)")
    mcp_edit.add_argument("--env", help="Comma-separated KEY=VALUE pairs (replaces the env)")

    mcp_copy = mcp_sub.add_parser("copy", help="Duplicate an MCP server as <name>-copy")
    mcp_copy.add_argument("name", help="Name of the MCP server")

    mcp_sub.add_parser("presets", help="List built-in MCP server presets")
    mcp_preset = mcp_sub.add_parser("preset", help="Add a built-in MCP server preset")
    mcp_preset.add_argument("name", help="Preset name")

    # permissions command
    perm_parser = subparsers.add_parser("permissions", help="Manage tool permissions")
    perm_sub = perm_parser.add_subparsers(dest="permissions_command")
    perm_sub.add_parser("list", help="Show allowed and denied tools")
    for name, help_text in (
        ("allow", "Add tools to the allow list"),
        ("deny", "Add tools to the deny list"),
        ("remove", "Remove tools from both lists"),
    ):
        sub = perm_sub.add_parser(name, help=help_text)
        sub.add_argument("tools", nargs="+", help="Tool names (e.g., Bash, Read)")

    # env command
    env_parser = subparsers.add_parser("env", help="Manage environment variables")
    env_sub = env_parser.add_subparsers(dest="env_command")
    env_list = env_sub.add_parser("list", help="List environment variables")
    env_list.add_argument("--show-secrets", action="store_true", help="Do not mask secret values")
    env_sub.add_parser("presets", help="List commonly used variable names")
    env_set = env_sub.add_parser("set", help="Set variables")
    env_set.add_argument("pairs", nargs="+", help="KEY=VALUE pairs")
    env_unset = env_sub.add_parser("unset", help="Remove variables")
    env_unset.add_argument("names", nargs="+", help="Variable names")

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point.

    ABOUTME: Parses args and dispatches to appropriate command
    ABOUTME: Returns exit code for sys.exit()
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format=LOG_FORMAT,
    )

    commands = {
        "show": cmd_show,
        "models": cmd_models,
        "mcp": cmd_mcp,
        "permissions": cmd_permissions,
        "env": cmd_env,
        "validate": cmd_validate,
        "backup": cmd_backup,
        "edit": cmd_edit,
    }

    handler = commands.get(args.command)
    if handler is None:
        # No command specified, show help
        parser.print_help()
        return EXIT_SUCCESS
    return handler(args)


if __name__ == "__main__":
    sys.exit(main())
