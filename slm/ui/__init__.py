"""Graphical front end built on the Textual framework."""

from .app import LibraryManagerApp
from .screens import (
    BaseScreen,
    MainMenuScreen,
    SettingsScreen,
    get_registered_screens,
    get_screen_by_name,
)

__all__ = [
    "BaseScreen",
    "LibraryManagerApp",
    "MainMenuScreen",
    "SettingsScreen",
    "get_registered_screens",
    "get_screen_by_name",
]
