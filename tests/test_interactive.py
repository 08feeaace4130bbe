# ABOUTME: Tests for the interactive section editor
# ABOUTME: Input is scripted through a fake input function
import json

import pytest

from ccgear.guard import Section, UnsavedChoice
from ccgear.interactive import SectionEditor, ask_unsaved_choice, run_editor
from ccgear.session import SettingsSession


def scripted(*lines: str):
    """Input function returning lines in order, then EOF."""
    remaining = list(lines)

    def input_fn(prompt: str = "") -> str:
        if not remaining:
            raise EOFError
        return remaining.pop(0)

    return input_fn


@pytest.fixture
def session(memory_accessor) -> SettingsSession:
    memory_accessor.files[memory_accessor.path()] = json.dumps({"env": {"A": "1"}})
    session = SettingsSession(memory_accessor)
    session.load()
    return session


def saved(memory_accessor) -> dict:
    return json.loads(memory_accessor.files[memory_accessor.path()])


class TestAskUnsavedChoice:
    """Tests for the unsaved-changes prompt."""

    @pytest.mark.parametrize("answer,choice", [
        ("s", UnsavedChoice.SAVE),
        ("Discard", UnsavedChoice.DISCARD),
        (" c ", UnsavedChoice.CANCEL),
    ])
    def test_answers(self, answer, choice):
        assert ask_unsaved_choice(scripted(answer)) is choice

    def test_reprompts_on_garbage(self, capsys):
        assert ask_unsaved_choice(scripted("maybe", "d")) is UnsavedChoice.DISCARD
        assert "Please answer" in capsys.readouterr().out

    def test_eof_cancels(self):
        assert ask_unsaved_choice(scripted()) is UnsavedChoice.CANCEL


class TestSectionEditor:
    """Tests for SectionEditor command handling."""

    def test_switch_when_clean(self, session, capsys):
        editor = SectionEditor(session, scripted())
        editor.handle("go mcp")
        assert editor.section is Section.MCP
        assert "(no MCP servers)" in capsys.readouterr().out

    def test_unknown_section(self, session, capsys):
        editor = SectionEditor(session, scripted())
        editor.handle("go elsewhere")
        assert editor.section is Section.MODELS
        assert "Unknown section" in capsys.readouterr().out

    def test_cancel_keeps_section_and_edits(self, session, memory_accessor):
        editor = SectionEditor(session, scripted("c"))
        editor.handle("add Alpha alpha-1 openai")
        editor.handle("go env")

        assert editor.section is Section.MODELS
        assert session.store.dirty is True
        assert memory_accessor.writes == []

    def test_discard_reloads_and_switches(self, session, capsys):
        editor = SectionEditor(session, scripted("d"))
        editor.handle("add Alpha alpha-1 openai")
        editor.handle("go env")

        assert editor.section is Section.ENV
        assert session.store.models == []
        assert session.store.dirty is False
        assert "Changes discarded." in capsys.readouterr().out

    def test_save_then_switch(self, session, memory_accessor):
        editor = SectionEditor(session, scripted("s"))
        editor.handle("add Alpha alpha-1 openai OPENAI_API_KEY")
        editor.handle("go mcp")

        assert editor.section is Section.MCP
        model = saved(memory_accessor)["customModels"][0]
        assert model["modelId"] == "alpha-1"
        assert model["apiKeyEnvVar"] == "OPENAI_API_KEY"

    def test_failed_save_blocks_switch(self, session, memory_accessor, capsys):
        memory_accessor.fail_write = True
        editor = SectionEditor(session, scripted("s"))
        editor.handle("add Alpha alpha-1 openai")
        editor.handle("go mcp")

        assert editor.section is Section.MODELS
        assert session.store.dirty is True
        assert "Save failed" in capsys.readouterr().out

    def test_model_edits(self, session):
        editor = SectionEditor(session, scripted())
        editor.handle("add Alpha alpha-1 openai")
        editor.handle('add "Beta Model" beta-1 anthropic')
        beta = session.store.models[1]
        editor.handle(f"move {beta.id} 1")
        editor.handle(f"copy {beta.id}")
        editor.handle("preset gpt-4o")

        titles = [p.title for p in session.store.models]
        assert titles == ["Beta Model", "Alpha", "Beta Model (Copy)", "GPT-4o"]

        editor.handle(f"rm {beta.id}")
        assert len(session.store.models) == 3

    def test_errors_are_printed(self, session, capsys):
        editor = SectionEditor(session, scripted())
        editor.handle("copy missing-id")
        editor.handle("move x notanumber")
        out = capsys.readouterr().out
        assert "Error: Model id 'missing-id' not found" in out
        assert "Error:" in out.splitlines()[-1]

    def test_unknown_command(self, session, capsys):
        editor = SectionEditor(session, scripted())
        editor.handle("frobnicate")
        assert "Unknown command 'frobnicate'" in capsys.readouterr().out

    def test_mcp_edits(self, session):
        editor = SectionEditor(session, scripted())
        editor.section = Section.MCP
        editor.handle("add fs npx -y pkg")
        editor.handle("preset github")
        assert list(session.store.settings.mcp_servers) == ["fs", "github"]
        assert session.store.settings.mcp_servers["fs"].args == ["-y", "pkg"]
        editor.handle("rm fs")
        assert list(session.store.settings.mcp_servers) == ["github"]

    def test_model_field_edits(self, session, capsys):
        editor = SectionEditor(session, scripted())
        editor.handle("add Alpha alpha-1 openai OPENAI_API_KEY")
        alpha = session.store.models[0]

        editor.handle(f'edit {alpha.id} "title=Alpha Two" maxTokens=4096 apiKeyEnvVar=')

        profile = session.store.get_model(alpha.id)
        assert profile.title == "Alpha Two"
        assert profile.max_tokens == 4096
        assert profile.api_key_env_var is None
        assert profile.model_id == "alpha-1"
        assert "Updated Alpha Two" in capsys.readouterr().out

    def test_model_edit_errors(self, session, capsys):
        editor = SectionEditor(session, scripted())
        editor.handle("add Alpha alpha-1 openai")
        alpha = session.store.models[0]

        editor.handle(f"edit {alpha.id} colour=red")
        editor.handle(f"edit {alpha.id} maxTokens=lots")
        editor.handle("edit missing-id title=X")

        out = capsys.readouterr().out
        assert "Unknown field 'colour'" in out
        assert "Model id 'missing-id' not found" in out
        assert session.store.get_model(alpha.id) == alpha

    def test_add_with_empty_key_env(self, session, memory_accessor):
        editor = SectionEditor(session, scripted())
        editor.handle('add Alpha alpha-1 openai ""')
        assert session.store.models[0].api_key_env_var is None
        session.save()
        assert "apiKeyEnvVar" not in saved(memory_accessor)["customModels"][0]

    def test_mcp_edit_rename_copy(self, session):
        editor = SectionEditor(session, scripted())
        editor.section = Section.MCP
        editor.handle("add fs npx -y pkg")

        editor.handle("edit fs node server.js")
        editor.handle("rename fs files")
        editor.handle("copy files")

        servers = session.store.settings.mcp_servers
        assert list(servers) == ["files", "files-copy"]
        assert servers["files"].command == "node"
        assert servers["files"].args == ["server.js"]
        assert servers["files-copy"] == servers["files"]

    def test_mcp_rename_errors(self, session, capsys):
        editor = SectionEditor(session, scripted())
        editor.section = Section.MCP
        editor.handle("add a npx")
        editor.handle("add b node")

        editor.handle("rename a b")
        editor.handle("rename nope c")
        editor.handle("copy nope")

        out = capsys.readouterr().out
        assert "Server 'b' already exists" in out
        assert out.count("MCP server 'nope' not found") == 2
        assert list(session.store.settings.mcp_servers) == ["a", "b"]

    def test_permission_edits(self, session):
        editor = SectionEditor(session, scripted())
        editor.section = Section.PERMISSIONS
        editor.handle("allow Bash")
        editor.handle("deny Bash")
        editor.handle("rm Bash")
        editor.handle("allow Read")
        assert session.store.settings.permissions.allow == ["Read"]
        assert session.store.settings.permissions.deny == []

    def test_env_edits(self, session):
        editor = SectionEditor(session, scripted())
        editor.section = Section.ENV
        editor.handle("set B=2 C=3")
        editor.handle("unset A C")
        assert session.store.settings.env == {"B": "2"}

    def test_about_has_no_edits(self, session, capsys):
        editor = SectionEditor(session, scripted())
        editor.section = Section.ABOUT
        editor.handle("add x")
        assert "Unknown command" in capsys.readouterr().out

    def test_bad_quoting(self, session, capsys):
        editor = SectionEditor(session, scripted())
        editor.handle('add "unterminated')
        assert "quotation" in capsys.readouterr().out

    def test_quit_cancelled_keeps_running(self, session):
        editor = SectionEditor(session, scripted("c"))
        editor.handle("add Alpha alpha-1 openai")
        editor.handle("quit")
        assert editor.running is True


class TestRunEditor:
    """Tests for run_editor."""

    def test_quit_clean(self, session, memory_accessor):
        assert run_editor(session, scripted("show", "quit")) == 0
        assert memory_accessor.writes == []

    def test_edit_save_quit(self, session, memory_accessor):
        code = run_editor(session, scripted("go env", "set B=2", "save", "quit"))
        assert code == 0
        assert saved(memory_accessor)["env"] == {"A": "1", "B": "2"}

    def test_eof_with_edits_asks_once(self, session, memory_accessor):
        """Test end of input with pending edits prompts and then exits."""
        commands = scripted("go env", "set B=2")
        prompts = []

        def input_fn(prompt: str = "") -> str:
            prompts.append(prompt)
            if "unsaved changes" in prompt:
                return "s"
            return commands(prompt)

        code = run_editor(session, input_fn)
        assert code == 0
        assert saved(memory_accessor)["env"] == {"A": "1", "B": "2"}
        assert sum("unsaved changes" in p for p in prompts) == 1

    def test_load_failure(self, memory_accessor, capsys):
        memory_accessor.files[memory_accessor.path()] = "{"
        session = SettingsSession(memory_accessor)
        assert run_editor(session, scripted()) == 2
        assert "could not load" in capsys.readouterr().out

    def test_keyboard_interrupt(self, session, capsys):
        def interrupt(prompt: str = "") -> str:
            raise KeyboardInterrupt

        assert run_editor(session, interrupt) == 0
        assert "Operation cancelled." in capsys.readouterr().out
