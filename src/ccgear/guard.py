# Unsaved-changes navigation guard
from dataclasses import dataclass
from enum import Enum


class Section(str, Enum):
    """Editor sections the user can switch between."""
    MODELS = "models"
    MCP = "mcp"
    PERMISSIONS = "permissions"
    ENV = "env"
    ABOUT = "about"


class UnsavedChoice(str, Enum):
    """What to do with pending edits before navigating away."""
    SAVE = "save"
    DISCARD = "discard"
    CANCEL = "cancel"


@dataclass(frozen=True)
class NavigationIntent:
    """Something the user asked for that would replace the visible section.

    ABOUTME: target is None for intents that are not section switches (quit, reload)
    """
    target: Section | None
    description: str = ""


@dataclass(frozen=True)
class PendingNavigation:
    """Token returned when the caller must ask the user before proceeding."""
    intent: NavigationIntent
    choices: tuple[UnsavedChoice, ...] = (
        UnsavedChoice.SAVE,
        UnsavedChoice.DISCARD,
        UnsavedChoice.CANCEL,
    )


def check_navigation(
    dirty: bool,
    intent: NavigationIntent,
    current: Section | None = None,
) -> PendingNavigation | None:
    """Decide whether an intent needs the unsaved-changes prompt.

    ABOUTME: Pure function, no hidden state
    ABOUTME: Switching to the section already shown never prompts

    Args:
        dirty: Whether the store has unsaved edits
        intent: What the user wants to do
        current: Section currently shown, if any

    Returns:
        None if the caller may proceed now, else a PendingNavigation token
        to be resolved with SettingsSession.resolve_navigation()

    Examples:
        >>> check_navigation(False, NavigationIntent(Section.MCP)) is None
        True
        >>> check_navigation(True, NavigationIntent(Section.MCP)).choices[0]
        <UnsavedChoice.SAVE: 'save'>
    """
    if not dirty:
        return None
    if current is not None and intent.target == current:
        return None
    return PendingNavigation(intent=intent)
