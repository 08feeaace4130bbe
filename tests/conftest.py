# Shared fixtures for ccgear tests
from pathlib import Path

import pytest

from ccgear.config import LocalFileAccessor
from ccgear.errors import SettingsIOError
from ccgear.models import ModelProfile, ServerSpec


class MemoryAccessor:
    """In-memory FileAccessor with switchable failures."""

    def __init__(self, files: dict[Path, str] | None = None) -> None:
        self.files: dict[Path, str] = dict(files or {})
        self.directories: set[Path] = set()
        self.fail_read = False
        self.fail_write = False
        self.writes: list[tuple[Path, str]] = []

    def path(self) -> Path:
        return Path("/home/test/.claude/settings.json")

    def ensure_directory(self) -> Path:
        directory = self.path().parent
        self.directories.add(directory)
        return directory

    def exists(self, path: Path) -> bool:
        return path in self.files

    def read_text(self, path: Path) -> str:
        if self.fail_read:
            raise SettingsIOError(f"Cannot read {path}: permission denied")
        return self.files[path]

    def write_text(self, path: Path, content: str) -> None:
        if self.fail_write:
            raise SettingsIOError(f"Cannot write {path}: disk full")
        self.writes.append((path, content))
        self.files[path] = content


@pytest.fixture
def memory_accessor() -> MemoryAccessor:
    return MemoryAccessor()


@pytest.fixture
def local_accessor(tmp_path: Path) -> LocalFileAccessor:
    return LocalFileAccessor(home=tmp_path)


def make_profile(
    profile_id: str = "m1",
    title: str = "GPT-4o",
    model_id: str = "gpt-4o",
    provider: str = "openai",
    **kwargs,
) -> ModelProfile:
    return ModelProfile(id=profile_id, title=title, model_id=model_id, provider=provider, **kwargs)


@pytest.fixture
def profile_factory():
    return make_profile


@pytest.fixture
def fs_server() -> ServerSpec:
    return ServerSpec(command="npx", args=["-y", "pkg"])
