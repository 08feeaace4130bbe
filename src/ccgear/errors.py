# Exception taxonomy for ccgear
# ABOUTME: IO and malformed-content errors are recovered by the session layer
# ABOUTME: Store contract errors signal caller bugs and propagate


class SettingsError(Exception):
    """Base class for all ccgear errors."""


class SettingsIOError(SettingsError, OSError):
    """Reading, writing, or creating the settings location failed."""


class MalformedConfigError(SettingsError, ValueError):
    """File content is not valid JSON (or not a JSON object)."""


class DuplicateIdError(SettingsError, ValueError):
    """A model profile with the same id is already present."""


class InvalidReorderError(SettingsError, ValueError):
    """Reorder sequence is not a permutation of the current model ids."""


class ModelNotFoundError(SettingsError, KeyError):
    """No model profile with the requested id."""

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the plain message
        return str(self.args[0]) if self.args else ""


class ServerNotFoundError(ModelNotFoundError):
    """No MCP server with the requested name."""


class InvalidProfileError(SettingsError, ValueError):
    """A model profile is missing a required field."""


class InvalidServerError(SettingsError, ValueError):
    """An MCP server entry is missing its name or command."""


class OperationInProgressError(SettingsError, RuntimeError):
    """A load or save was started while another one is still running."""
