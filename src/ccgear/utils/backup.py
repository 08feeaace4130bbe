# ABOUTME: Backup utilities for the settings file.
# ABOUTME: Handles timestamped backups with automatic retention cleanup (keep last 5 per file).
import logging
import re
import shutil
from datetime import datetime
from pathlib import Path

logger = logging.getLogger(__name__)

# ABOUTME: Backups kept per source file name
DEFAULT_MAX_BACKUPS = 5

# Pattern matches: {stem}_{YYYYMMDD}_{HHMMSS}[_{n}].{ext}
# e.g., settings_20260108_143022.json
BACKUP_PATTERN = re.compile(r"^(.+?)_(\d{8}_\d{6})(?:_(\d+))?\.(.+)$")


def create_backup(
    source_path: Path,
    backup_dir: Path,
    max_backups: int = DEFAULT_MAX_BACKUPS,
    suffix: str = "",
) -> Path:
    """Create a timestamped backup of a file.

    ABOUTME: Backup format: {stem}{suffix}_{YYYYMMDD}_{HHMMSS}.{ext}
    ABOUTME: Uses shutil.copy2() to preserve file metadata
    ABOUTME: Creates backup_dir if it doesn't exist

    Args:
        source_path: Path to file to backup
        backup_dir: Directory where backup should be created
        max_backups: Backups to keep for this source name
        suffix: Extra tag appended to the stem (e.g. "-corrupt")

    Returns:
        Path to created backup file

    Raises:
        FileNotFoundError: If source_path doesn't exist
        OSError: If backup creation fails

    Examples:
        >>> backup_path = create_backup(Path("~/.claude/settings.json").expanduser(),
        ...                             Path("~/.claude/backups").expanduser())
        >>> backup_path.name
        'settings_20260108_143022.json'
    """
    if not source_path.exists():
        raise FileNotFoundError(f"Source file not found: {source_path}")

    backup_dir.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    prefix = f"{source_path.stem}{suffix}"
    extension = source_path.suffix

    backup_path = backup_dir / f"{prefix}_{timestamp}{extension}"
    counter = 1
    while backup_path.exists():
        backup_path = backup_dir / f"{prefix}_{timestamp}_{counter}{extension}"
        counter += 1

    shutil.copy2(source_path, backup_path)
    logger.debug(f"Backed up {source_path} to {backup_path}")

    cleanup_old_backups(backup_dir, max_backups)

    return backup_path


def list_backups(backup_dir: Path) -> list[Path]:
    """Return backup files in backup_dir, newest first."""
    if not backup_dir.exists():
        return []

    found: list[tuple[str, int, Path]] = []
    for file_path in backup_dir.iterdir():
        if not file_path.is_file():
            continue
        match = BACKUP_PATTERN.match(file_path.name)
        if match:
            found.append((match.group(2), int(match.group(3) or 0), file_path))

    found.sort(key=lambda x: (x[0], x[1]), reverse=True)
    return [path for _, _, path in found]


def cleanup_old_backups(backup_dir: Path, max_backups: int = DEFAULT_MAX_BACKUPS) -> list[Path]:
    """Remove old backup files, keeping only the most recent per source.

    ABOUTME: Groups backups by prefix (before _timestamp)
    ABOUTME: Deletes backups beyond max_backups for each prefix
    ABOUTME: Logs warnings on errors but does not raise exceptions

    Returns:
        List of paths that were deleted
    """
    deleted_files: list[Path] = []

    backups_by_prefix: dict[str, list[Path]] = {}
    for file_path in list_backups(backup_dir):
        match = BACKUP_PATTERN.match(file_path.name)
        if match:
            backups_by_prefix.setdefault(match.group(1), []).append(file_path)

    for backups in backups_by_prefix.values():
        # list_backups() already returns newest first
        for file_path in backups[max_backups:]:
            try:
                file_path.unlink()
                deleted_files.append(file_path)
                logger.debug(f"Deleted old backup: {file_path}")
            except OSError as e:
                logger.warning(f"Failed to delete old backup {file_path}: {e}")

    return deleted_files
