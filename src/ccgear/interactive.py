# Interactive section editor for ccgear
import shlex
from collections.abc import Callable
from dataclasses import replace

from ccgear.display import print_about, print_env, print_models, print_permissions, print_servers
from ccgear.errors import ServerNotFoundError, SettingsError
from ccgear.guard import NavigationIntent, Section, UnsavedChoice, check_navigation
from ccgear.models import ModelProfile, ServerSpec, new_model_id
from ccgear.presets import (
    add_tool,
    apply_model_preset,
    apply_server_preset,
    find_model_preset,
    find_server_preset,
    remove_tool,
)
from ccgear.session import SettingsSession
from ccgear.store import SettingsStore
from ccgear.utils.env import parse_env_pairs

# ABOUTME: Terminal codes for interactive UI
BOLD = "\033[1m"
RESET = "\033[0m"
YELLOW = "\033[93m"

InputFn = Callable[[str], str]

# ABOUTME: Settings-file field names accepted by the models edit command
MODEL_EDIT_FIELDS = {
    "title": "title",
    "modelId": "model_id",
    "provider": "provider",
    "apiKeyEnvVar": "api_key_env_var",
    "maxTokens": "max_tokens",
    "baseUrl": "base_url",
}

CHOICE_KEYS = {
    "s": UnsavedChoice.SAVE,
    "save": UnsavedChoice.SAVE,
    "d": UnsavedChoice.DISCARD,
    "discard": UnsavedChoice.DISCARD,
    "c": UnsavedChoice.CANCEL,
    "cancel": UnsavedChoice.CANCEL,
}

HELP_TEXT = {
    Section.MODELS: [
        "add TITLE MODEL_ID PROVIDER [API_KEY_ENV]",
        "edit ID FIELD=VALUE... (title, modelId, provider, apiKeyEnvVar, maxTokens, baseUrl)",
        "rm ID",
        "copy ID",
        "move ID POSITION",
        "preset MODEL_ID",
    ],
    Section.MCP: [
        "add NAME COMMAND [ARG...]",
        "edit NAME COMMAND [ARG...]",
        "rename NAME NEW_NAME",
        "copy NAME",
        "rm NAME",
        "preset NAME",
    ],
    Section.PERMISSIONS: [
        "allow TOOL",
        "deny TOOL",
        "rm TOOL",
    ],
    Section.ENV: [
        "set KEY=VALUE",
        "unset KEY",
    ],
    Section.ABOUT: [],
}


def ask_unsaved_choice(input_fn: InputFn = input) -> UnsavedChoice:
    """Prompt until the user picks save, discard or cancel.

    ABOUTME: End of input counts as cancel
    """
    while True:
        try:
            answer = input_fn(
                f"{YELLOW}You have unsaved changes.{RESET} [s]ave, [d]iscard or [c]ancel? "
            ).strip().lower()
        except EOFError:
            return UnsavedChoice.CANCEL
        if answer in CHOICE_KEYS:
            return CHOICE_KEYS[answer]
        print("  Please answer s, d or c.")


def _model_patch(assignments: list[str]) -> dict:
    """Turn FIELD=VALUE words into an update_model patch.

    ABOUTME: An empty value clears apiKeyEnvVar, maxTokens and baseUrl
    """
    patch = {}
    for field_name, value in parse_env_pairs(assignments).items():
        attribute = MODEL_EDIT_FIELDS.get(field_name)
        if attribute is None:
            raise ValueError(
                f"Unknown field '{field_name}' (use {', '.join(MODEL_EDIT_FIELDS)})"
            )
        if attribute == "max_tokens":
            patch[attribute] = int(value) if value else None
        elif attribute in ("api_key_env_var", "base_url"):
            patch[attribute] = value or None
        else:
            patch[attribute] = value
    return patch


class SectionEditor:
    """Line-oriented editor over one SettingsSession.

    ABOUTME: Section switches and quitting go through the navigation guard
    ABOUTME: Edits only touch the store; 'save' writes them
    """

    def __init__(self, session: SettingsSession, input_fn: InputFn = input) -> None:
        self.session = session
        self.input_fn = input_fn
        self.section = Section.MODELS
        self.running = True

    @property
    def store(self) -> SettingsStore:
        return self.session.store

    def navigate(self, intent: NavigationIntent) -> bool:
        """Ask about unsaved edits if needed. True if intent may go ahead."""
        pending = check_navigation(self.store.dirty, intent, current=self.section)
        if pending is None:
            return True

        choice = ask_unsaved_choice(self.input_fn)
        proceed = self.session.resolve_navigation(pending, choice)
        if choice is UnsavedChoice.SAVE and not proceed:
            report = self.session.last_save
            print(f"Save failed: {report.error if report else 'unknown error'}")
        elif choice is UnsavedChoice.DISCARD:
            print("Changes discarded.")
        return proceed

    def show(self) -> None:
        settings = self.store.settings
        print(f"{BOLD}[{self.section.value}]{RESET}")
        if self.section is Section.MODELS:
            print_models(settings.custom_models)
        elif self.section is Section.MCP:
            print_servers(settings.mcp_servers)
        elif self.section is Section.PERMISSIONS:
            print_permissions(settings)
        elif self.section is Section.ENV:
            print_env(settings.env)
        else:
            print_about()

    def print_help(self) -> None:
        print("Commands: go SECTION, show, save, discard, help, quit")
        print(f"Sections: {', '.join(s.value for s in Section)}")
        for line in HELP_TEXT[self.section]:
            print(f"  {line}")

    def handle(self, line: str) -> None:
        """Run one command line."""
        try:
            words = shlex.split(line)
        except ValueError as e:
            print(f"  {e}")
            return
        if not words:
            return

        command, rest = words[0].lower(), words[1:]

        if command in ("quit", "exit", "q"):
            if self.navigate(NavigationIntent(None, "quit")):
                self.running = False
        elif command == "help":
            self.print_help()
        elif command == "show":
            self.show()
        elif command == "go":
            self._go(rest)
        elif command == "save":
            report = self.session.save()
            print(f"Saved {report.path}" if report.ok else f"Save failed: {report.error}")
        elif command in ("discard", "reload"):
            report = self.session.discard_and_reload()
            print("Reloaded." if report.ok else f"Reload failed, using defaults: {report.error}")
        else:
            self._edit(command, rest)

    def _go(self, rest: list[str]) -> None:
        if len(rest) != 1:
            print("  Usage: go SECTION")
            return
        try:
            target = Section(rest[0].lower())
        except ValueError:
            print(f"  Unknown section '{rest[0]}'")
            return
        if self.navigate(NavigationIntent(target, f"switch to {target.value}")):
            self.section = target
            self.show()

    def _edit(self, command: str, rest: list[str]) -> None:
        handlers = {
            Section.MODELS: self._edit_models,
            Section.MCP: self._edit_mcp,
            Section.PERMISSIONS: self._edit_permissions,
            Section.ENV: self._edit_env,
        }
        handler = handlers.get(self.section)
        try:
            if handler is None or not handler(command, rest):
                print(f"  Unknown command '{command}'. Type 'help'.")
        except (SettingsError, ValueError) as e:
            print(f"  Error: {e}")

    def _edit_models(self, command: str, rest: list[str]) -> bool:
        store = self.store
        if command == "add" and len(rest) in (3, 4):
            profile = ModelProfile(
                id=new_model_id(),
                title=rest[0],
                model_id=rest[1],
                provider=rest[2],
                api_key_env_var=(rest[3] if len(rest) == 4 else "") or None,
            )
            store.add_model(profile)
            print(f"  Added {profile.title} ({profile.id})")
        elif command == "edit" and len(rest) >= 2:
            profile = store.update_model(rest[0], _model_patch(rest[1:]))
            print(f"  Updated {profile.title} ({profile.id})")
        elif command == "rm" and len(rest) == 1:
            store.delete_model(rest[0])
        elif command == "copy" and len(rest) == 1:
            copy = store.duplicate_model(rest[0])
            print(f"  Added {copy.title} ({copy.id})")
        elif command == "move" and len(rest) == 2:
            store.move_model(rest[0], int(rest[1]) - 1)
        elif command == "preset" and len(rest) == 1:
            preset = find_model_preset(rest[0])
            if preset is None:
                print(f"  Unknown preset '{rest[0]}'")
            elif apply_model_preset(store, preset) is None:
                print(f"  {preset.model_id} already configured")
        else:
            return False
        return True

    def _edit_mcp(self, command: str, rest: list[str]) -> bool:
        store = self.store
        if command == "add" and len(rest) >= 2:
            store.add_server(rest[0], ServerSpec(command=rest[1], args=rest[2:]))
        elif command == "edit" and len(rest) >= 2:
            current = self._server(rest[0])
            store.update_server(rest[0], replace(current, command=rest[1], args=rest[2:]))
        elif command == "rename" and len(rest) == 2:
            old_name, new_name = rest
            current = self._server(old_name)
            if new_name != old_name and new_name in store.settings.mcp_servers:
                print(f"  Server '{new_name}' already exists")
            else:
                store.rename_server(old_name, new_name, current)
        elif command == "copy" and len(rest) == 1:
            print(f"  Added {store.duplicate_server(rest[0])}")
        elif command == "rm" and len(rest) == 1:
            store.delete_server(rest[0])
        elif command == "preset" and len(rest) == 1:
            preset = find_server_preset(rest[0])
            if preset is None:
                print(f"  Unknown preset '{rest[0]}'")
            elif not apply_server_preset(store, preset):
                print(f"  {preset.name} already configured")
        else:
            return False
        return True

    def _server(self, name: str) -> ServerSpec:
        spec = self.store.settings.mcp_servers.get(name)
        if spec is None:
            raise ServerNotFoundError(f"MCP server '{name}' not found")
        return spec

    def _edit_permissions(self, command: str, rest: list[str]) -> bool:
        if len(rest) != 1:
            return False
        if command in ("allow", "deny"):
            add_tool(self.store, rest[0], command)
        elif command == "rm":
            remove_tool(self.store, rest[0], "allow")
            remove_tool(self.store, rest[0], "deny")
        else:
            return False
        return True

    def _edit_env(self, command: str, rest: list[str]) -> bool:
        env = dict(self.store.settings.env)
        if command == "set" and rest:
            env.update(parse_env_pairs(rest))
        elif command == "unset" and rest:
            for name in rest:
                env.pop(name, None)
        else:
            return False
        self.store.set_env(env)
        return True

    def run(self) -> None:
        while self.running:
            marker = "*" if self.store.dirty else ""
            try:
                line = self.input_fn(f"ccgear [{self.section.value}]{marker}> ")
            except EOFError:
                print()
                if self.store.dirty:
                    self.navigate(NavigationIntent(None, "quit"))
                break
            self.handle(line)


def run_editor(session: SettingsSession, input_fn: InputFn = input) -> int:
    """Load settings and run the interactive editor until the user quits.

    Returns:
        Exit code (0 on normal quit, 2 if the settings file could not be loaded)
    """
    report = session.load()
    if not report.ok:
        print(f"Error: could not load {report.path}: {report.error}")
        print("Fix or remove the file and try again.")
        return 2

    print(f"Editing {report.path}. Type 'help' for commands.")
    editor = SectionEditor(session, input_fn)
    editor.show()
    try:
        editor.run()
    except KeyboardInterrupt:
        print()
        print("Operation cancelled.")
    return 0
