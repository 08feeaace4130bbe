# Load/save orchestration for ccgear
import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from ccgear.codec import decode, default_settings, encode
from ccgear.errors import MalformedConfigError, OperationInProgressError
from ccgear.guard import PendingNavigation, UnsavedChoice
from ccgear.models import FileAccessor
from ccgear.store import SettingsStore
from ccgear.utils.backup import DEFAULT_MAX_BACKUPS, create_backup

logger = logging.getLogger(__name__)


class SessionState(Enum):
    IDLE = "idle"
    LOADING = "loading"
    SAVING = "saving"


@dataclass
class LoadReport:
    """Report from a load.

    ABOUTME: source is "file" when the file was decoded, "defaults" otherwise
    ABOUTME: error is set when defaults were installed because of a failure
    """
    path: Path
    source: str
    error: str | None = None
    backup_path: Path | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class SaveReport:
    """Report from a save. error is set when nothing was written."""
    path: Path
    backup_path: Path | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class SettingsSession:
    """Coordinates the file accessor, the codec and the store.

    ABOUTME: IO and malformed-content failures are returned in reports, never raised
    ABOUTME: A second load/save while one is running raises OperationInProgressError
    ABOUTME: Optional backup_dir enables timestamped backups before each write
    """

    def __init__(
        self,
        accessor: FileAccessor,
        store: SettingsStore | None = None,
        backup_dir: Path | None = None,
        max_backups: int = DEFAULT_MAX_BACKUPS,
    ) -> None:
        self._accessor = accessor
        self._store = store if store is not None else SettingsStore()
        self._backup_dir = backup_dir
        self._max_backups = max_backups
        self._state = SessionState.IDLE
        self.last_load: LoadReport | None = None
        self.last_save: SaveReport | None = None

    @property
    def store(self) -> SettingsStore:
        return self._store

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def path(self) -> Path:
        return self._accessor.path()

    def _begin(self, state: SessionState) -> None:
        if self._state is not SessionState.IDLE:
            raise OperationInProgressError(
                f"Cannot start {state.value}: {self._state.value} already in progress"
            )
        self._state = state

    def _backup(self, path: Path, suffix: str = "") -> Path | None:
        if self._backup_dir is None:
            return None
        try:
            return create_backup(path, self._backup_dir, self._max_backups, suffix=suffix)
        except OSError as e:
            logger.warning(f"Failed to back up {path}: {e}")
            return None

    def load(self) -> LoadReport:
        """Load settings from disk into the store.

        ABOUTME: Missing file installs defaults and creates nothing
        ABOUTME: Any failure installs defaults and is reported in the result
        ABOUTME: A corrupt file is backed up (when backups are enabled)

        Returns:
            LoadReport describing where the settings came from
        """
        self._begin(SessionState.LOADING)
        path = self._accessor.path()
        try:
            if not self._accessor.exists(path):
                logger.debug(f"No settings file at {path}, using defaults")
                self._store.replace(default_settings())
                report = LoadReport(path=path, source="defaults")
            else:
                settings = decode(self._accessor.read_text(path))
                self._store.replace(settings)
                logger.debug(f"Loaded settings from {path}")
                report = LoadReport(path=path, source="file")
        except MalformedConfigError as e:
            logger.warning(f"Settings file {path} is malformed: {e}")
            self._store.replace(default_settings())
            report = LoadReport(
                path=path,
                source="defaults",
                error=str(e),
                backup_path=self._backup(path, suffix="-corrupt"),
            )
        except OSError as e:
            logger.warning(f"Failed to load {path}: {e}")
            self._store.replace(default_settings())
            report = LoadReport(path=path, source="defaults", error=str(e))
        finally:
            self._state = SessionState.IDLE

        self.last_load = report
        return report

    def discard_and_reload(self) -> LoadReport:
        """Drop pending edits by loading the file again."""
        return self.load()

    def save(self) -> SaveReport:
        """Write the store's settings to disk.

        ABOUTME: Unmanaged keys of the existing file are merged back in
        ABOUTME: An unreadable existing file aborts the save instead of being overwritten
        ABOUTME: dirty is cleared only after a successful write

        Returns:
            SaveReport; error is set if nothing was written
        """
        self._begin(SessionState.SAVING)
        path = self._accessor.path()
        backup_path = None
        try:
            self._accessor.ensure_directory()

            merge_base = None
            if self._accessor.exists(path):
                merge_base = self._accessor.read_text(path)
                backup_path = self._backup(path)

            content = encode(self._store.settings, merge_base)
            self._accessor.write_text(path, content)
        except OSError as e:
            logger.warning(f"Failed to save {path}: {e}")
            report = SaveReport(path=path, backup_path=backup_path, error=str(e))
        else:
            self._store.mark_saved()
            logger.debug(f"Saved settings to {path}")
            report = SaveReport(path=path, backup_path=backup_path)
        finally:
            self._state = SessionState.IDLE

        self.last_save = report
        return report

    def resolve_navigation(self, pending: PendingNavigation, choice: UnsavedChoice) -> bool:
        """Act on the user's answer to the unsaved-changes prompt.

        ABOUTME: DISCARD reloads and proceeds
        ABOUTME: SAVE proceeds only if the save succeeded (see last_save)
        ABOUTME: CANCEL never proceeds

        Returns:
            True if the caller should carry out pending.intent
        """
        if choice not in pending.choices:
            raise ValueError(f"Choice '{choice}' not offered for this navigation")

        if choice is UnsavedChoice.DISCARD:
            self.discard_and_reload()
            return True
        if choice is UnsavedChoice.SAVE:
            return self.save().ok
        return False
