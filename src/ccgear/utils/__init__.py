# ABOUTME: Utility modules for ccgear
# ABOUTME: Exports env helpers, backup, and validation functions

from ccgear.utils.backup import cleanup_old_backups, create_backup, list_backups
from ccgear.utils.env import is_secret_name, mask_value, parse_env_pairs
from ccgear.utils.validation import (
    ValidationError,
    find_permission_conflicts,
    missing_model_fields,
    validate_command_exists,
    validate_model,
    validate_server,
    validate_settings,
)

__all__ = [
    "is_secret_name",
    "mask_value",
    "parse_env_pairs",
    "ValidationError",
    "find_permission_conflicts",
    "missing_model_fields",
    "validate_command_exists",
    "validate_model",
    "validate_server",
    "validate_settings",
    "create_backup",
    "cleanup_old_backups",
    "list_backups",
]
