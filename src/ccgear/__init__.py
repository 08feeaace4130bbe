# ccgear - Editor for Claude settings.json
# ABOUTME: Version information
__version__ = "0.1.0"

# ABOUTME: Export core data models and errors
from ccgear.models import FileAccessor, ModelProfile, Permissions, ServerSpec, Settings
from ccgear.errors import (
    DuplicateIdError,
    InvalidProfileError,
    InvalidReorderError,
    InvalidServerError,
    MalformedConfigError,
    ModelNotFoundError,
    OperationInProgressError,
    ServerNotFoundError,
    SettingsError,
    SettingsIOError,
)

# ABOUTME: Export the accessor, codec, store and session
from ccgear.config import LocalFileAccessor, get_settings_path
from ccgear.codec import decode, default_settings, encode
from ccgear.store import SettingsStore
from ccgear.session import LoadReport, SaveReport, SessionState, SettingsSession
from ccgear.guard import NavigationIntent, PendingNavigation, Section, UnsavedChoice, check_navigation

__all__ = [
    "__version__",
    "FileAccessor",
    "ModelProfile",
    "Permissions",
    "ServerSpec",
    "Settings",
    "SettingsError",
    "SettingsIOError",
    "MalformedConfigError",
    "DuplicateIdError",
    "InvalidReorderError",
    "ModelNotFoundError",
    "ServerNotFoundError",
    "InvalidProfileError",
    "InvalidServerError",
    "OperationInProgressError",
    "LocalFileAccessor",
    "get_settings_path",
    "decode",
    "encode",
    "default_settings",
    "SettingsStore",
    "SettingsSession",
    "SessionState",
    "LoadReport",
    "SaveReport",
    "Section",
    "UnsavedChoice",
    "NavigationIntent",
    "PendingNavigation",
    "check_navigation",
]
