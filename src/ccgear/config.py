# Settings file location and local file-system access for ccgear
import logging
import os
from pathlib import Path

from ccgear.errors import SettingsIOError

logger = logging.getLogger(__name__)

# ABOUTME: Settings directory lives in the user's home
CLAUDE_DIR_NAME = ".claude"

# ABOUTME: Main settings file (JSON format)
SETTINGS_FILE_NAME = "settings.json"

# ABOUTME: Timestamped backups are kept beside the settings file
BACKUP_DIR_NAME = "backups"


def get_claude_dir(home: Path | None = None) -> Path:
    """Return the settings directory, ~/.claude by default."""
    return (home if home is not None else Path.home()) / CLAUDE_DIR_NAME


def get_settings_path(home: Path | None = None) -> Path:
    """Return the path to the settings file.

    ABOUTME: Returns ~/.claude/settings.json
    ABOUTME: File may not exist yet - absence is not an error

    Args:
        home: Home directory override (defaults to Path.home())

    Returns:
        Path to settings file
    """
    return get_claude_dir(home) / SETTINGS_FILE_NAME


def get_backup_dir(home: Path | None = None) -> Path:
    """Return the backup directory path. Does not create it."""
    return get_claude_dir(home) / BACKUP_DIR_NAME


class LocalFileAccessor:
    """FileAccessor backed by the local disk.

    ABOUTME: Resolves <home>/.claude/settings.json
    ABOUTME: Writes go through a sibling .tmp file and os.replace()
    """

    def __init__(self, home: Path | None = None) -> None:
        """Initialize accessor with optional home directory.

        ABOUTME: Defaults to Path.home() if not provided
        """
        self._home = home if home is not None else Path.home()

    @property
    def home(self) -> Path:
        return self._home

    def path(self) -> Path:
        return get_settings_path(self._home)

    def ensure_directory(self) -> Path:
        """Create ~/.claude if it doesn't exist.

        Returns:
            Path to settings directory (guaranteed to exist)

        Raises:
            SettingsIOError: If the directory cannot be created
        """
        claude_dir = get_claude_dir(self._home)
        try:
            claude_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise SettingsIOError(f"Cannot create directory {claude_dir}: {e}") from e
        return claude_dir

    def exists(self, path: Path) -> bool:
        return path.exists()

    def read_text(self, path: Path) -> str:
        try:
            with open(path, encoding="utf-8") as f:
                return f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise SettingsIOError(f"Cannot read {path}: {e}") from e

    def write_text(self, path: Path, content: str) -> None:
        """Write content atomically.

        ABOUTME: A failed write leaves any existing file untouched
        ABOUTME: The temp file is removed if the write fails

        Raises:
            SettingsIOError: If the file cannot be written
        """
        tmp = path.with_name(path.name + ".tmp")
        try:
            with open(tmp, "w", encoding="utf-8") as f:
                f.write(content)
            os.replace(tmp, path)
        except OSError as e:
            try:
                tmp.unlink(missing_ok=True)
            except OSError:
                logger.warning(f"Failed to remove temporary file {tmp}")
            raise SettingsIOError(f"Cannot write {path}: {e}") from e
        logger.debug(f"Wrote {len(content)} characters to {path}")
