"""Screen components for the graphical front end."""

from .base import BaseScreen
from .main_menu import MainMenuScreen
from .settings import SettingsScreen

_SCREEN_REGISTRY: dict[str, type[BaseScreen]] = {
    "main_menu": MainMenuScreen,
    "settings": SettingsScreen,
}


def get_screen_by_name(name: str) -> BaseScreen | None:
    """Get a new screen instance by its registered name, or None."""
    screen_class = _SCREEN_REGISTRY.get(name)
    if screen_class:
        return screen_class()
    return None


def get_registered_screens() -> list[str]:
    return list(_SCREEN_REGISTRY.keys())


__all__ = [
    "BaseScreen",
    "MainMenuScreen",
    "SettingsScreen",
    "get_registered_screens",
    "get_screen_by_name",
]
