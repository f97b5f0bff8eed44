"""Settings store: loads, repairs and persists the settings document."""

import json
from dataclasses import asdict, fields
from pathlib import Path
from typing import Any

import structlog

from ..models import (
    BUNDLED_DLC_TITLE_ID,
    TEMPLATE_DLC_NAME,
    TEMPLATE_TITLE_ID,
    TEMPLATE_TITLE_NAME,
    TEMPLATE_VERSION,
    AppSettings,
    CatalogFeed,
    OrganizeOptions,
)
from .errors import ConfigCorruptError, ConfigIOError

log = structlog.stdlib.get_logger()


SETTINGS_FILENAME = "settings.json"

DEFAULT_TITLES_JSON_URL = "https://tinfoil.media/repo/db/titles.json"
DEFAULT_VERSIONS_JSON_URL = "https://raw.githubusercontent.com/blawar/titledb/master/versions.json"

# ETags meaning "never fetched"; they never match a live resource
TITLES_ETAG_SENTINEL = 'W/"a5b02845cf6bd61:0"'
VERSIONS_ETAG_SENTINEL = 'W/"2ef50d1cb6bd61:0"'

DEFAULT_URLS: dict[CatalogFeed, str] = {
    CatalogFeed.TITLES: DEFAULT_TITLES_JSON_URL,
    CatalogFeed.VERSIONS: DEFAULT_VERSIONS_JSON_URL,
}

ETAG_SENTINELS: dict[CatalogFeed, str] = {
    CatalogFeed.TITLES: TITLES_ETAG_SENTINEL,
    CatalogFeed.VERSIONS: VERSIONS_ETAG_SENTINEL,
}


def default_settings() -> AppSettings:
    """Build the settings document written on first run."""
    return AppSettings(
        versions_json_url=DEFAULT_VERSIONS_JSON_URL,
        versions_etag=VERSIONS_ETAG_SENTINEL,
        titles_json_url=DEFAULT_TITLES_JSON_URL,
        titles_etag=TITLES_ETAG_SENTINEL,
        prod_keys="",
        folder="",
        scan_folders=[],
        gui=True,
        debug=False,
        check_for_missing_updates=True,
        check_for_missing_dlc=True,
        hide_missing_games=False,
        hide_demo_games=False,
        organize_options=OrganizeOptions(
            create_folder_per_game=False,
            dlc_folder="",
            updates_folder="",
            rename_files=False,
            delete_empty_folders=False,
            delete_old_update_files=False,
            folder_name_template=f"{{{TEMPLATE_TITLE_NAME}}}",
            switch_safe_file_names=True,
            file_name_template=(
                f"{{{TEMPLATE_TITLE_NAME}}} ({{{TEMPLATE_DLC_NAME}}})"
                f"[{{{TEMPLATE_TITLE_ID}}}][v{{{TEMPLATE_VERSION}}}]"
            ),
            process_when_missing_base_game=False,
        ),
        scan_recursively=True,
        gui_page_size=100,
        ignore_dlc_updates=False,
        ignore_dlc_title_ids=[BUNDLED_DLC_TITLE_ID],
        ignore_update_title_ids=[],
        ignore_file_types=[],
    )


def settings_to_dict(settings: AppSettings) -> dict[str, Any]:
    """Convert settings to a JSON-ready dict, keys in field order."""
    return asdict(settings)


def serialize_settings(settings: AppSettings) -> str:
    """Render settings the way they are stored on disk."""
    return json.dumps(settings_to_dict(settings), indent=2, ensure_ascii=False) + "\n"


_INVALID = object()


def _coerce(value: Any, expected: Any) -> Any:
    """Return ``value`` if it matches the field type, else ``_INVALID``."""
    if expected is bool:
        return value if isinstance(value, bool) else _INVALID
    if expected is int:
        return value if isinstance(value, int) and not isinstance(value, bool) else _INVALID
    if expected is str:
        return value if isinstance(value, str) else _INVALID
    if expected == list[str]:
        if isinstance(value, list) and all(isinstance(item, str) for item in value):
            return list(value)
        return _INVALID
    return _INVALID


def _fill_fields(target: Any, data: dict[str, Any]) -> list[str]:
    """Copy valid values from ``data`` onto ``target``; return rejected keys."""
    rejected = []
    for f in fields(target):
        if f.name not in data:
            continue
        if f.type is OrganizeOptions:
            value = data[f.name]
            if isinstance(value, dict):
                rejected.extend(f"{f.name}.{key}" for key in _fill_fields(target.organize_options, value))
            else:
                rejected.append(f.name)
            continue
        coerced = _coerce(data[f.name], f.type)
        if coerced is _INVALID:
            rejected.append(f.name)
        else:
            setattr(target, f.name, coerced)
    return rejected


def settings_from_dict(data: dict[str, Any]) -> AppSettings:
    """Build settings from a decoded document.

    Missing or wrongly typed values keep the ``AppSettings`` field default;
    unknown keys are ignored.
    """
    settings = AppSettings()
    rejected = _fill_fields(settings, data)
    if rejected:
        log.warning("Ignoring invalid settings values", fields=rejected)
    return settings


class SettingsStore:
    """Owner of the settings document for one working directory.

    The first ``load`` reads (or creates) ``settings.json`` and keeps the
    result; later calls return the same instance without touching disk
    until ``save`` replaces it or ``reset`` forgets it. The store does no
    locking, callers sharing it across threads must serialize access.
    """

    def __init__(self, base_directory: Path, logger: Any = None) -> None:
        self.base_directory: Path = Path(base_directory)
        self._log = logger or log
        self._settings: AppSettings | None = None

    @property
    def settings_path(self) -> Path:
        return self.base_directory / SETTINGS_FILENAME

    def cache_path(self, feed: CatalogFeed) -> Path:
        """Location of the locally cached copy of a catalog."""
        return self.base_directory / feed.cache_filename

    def load(self) -> AppSettings:
        """Load, repair and cache the settings document.

        Never raises: a missing, unreadable or corrupted file is replaced
        by the default document.
        """
        if self._settings is not None:
            return self._settings

        if not self.settings_path.exists():
            self._log.info("Settings file not found, creating defaults", path=str(self.settings_path))
            return self._save_defaults()

        try:
            data = self._read_document()
        except (ConfigIOError, ConfigCorruptError) as e:
            self._log.warning(
                "Missing or corrupted settings file, creating a new one",
                path=str(self.settings_path),
                error=e.technical_details,
            )
            return self._save_defaults()

        self._settings = self.verify(settings_from_dict(data))
        self._log.info("Settings loaded", path=str(self.settings_path))
        return self._settings

    def save(self, settings: AppSettings) -> AppSettings:
        """Replace the settings file with ``settings``.

        The document is written to a temporary file and moved into place so
        readers never see a partial file.

        Raises:
            ConfigIOError: If the file cannot be written
        """
        path = self.settings_path
        temp_path = path.with_suffix(path.suffix + ".tmp")
        try:
            self.base_directory.mkdir(parents=True, exist_ok=True)
            temp_path.write_text(serialize_settings(settings), encoding="utf-8")
            temp_path.replace(path)
        except OSError as e:
            self._log.error("Failed to save settings", path=str(path), error=str(e))
            try:
                temp_path.unlink(missing_ok=True)
            except OSError:
                self._log.warning("Failed to remove temporary settings file", path=str(temp_path))
            raise ConfigIOError("Failed to save settings.", path=str(path), original_error=e) from e

        self._settings = settings
        self._log.debug("Settings saved", path=str(path))
        return settings

    def load_as_raw_text(self) -> str:
        """Return the settings file exactly as stored on disk."""
        if not self.settings_path.exists():
            self._save_defaults()
        try:
            return self.settings_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            self._log.error("Failed to read settings file", path=str(self.settings_path), error=str(e))
            return serialize_settings(self.load())

    def reset(self) -> None:
        """Forget the cached document so the next ``load`` reads disk."""
        self._settings = None

    def verify(self, settings: AppSettings) -> AppSettings:
        """Repair empty catalog URLs and reset ETags of missing cache files."""
        for feed in CatalogFeed:
            if not settings.url_for(feed):
                setattr(settings, feed.url_field, DEFAULT_URLS[feed])
            if not self.cache_path(feed).exists():
                settings.set_etag(feed, ETAG_SENTINELS[feed])
        return settings

    def _read_document(self) -> dict[str, Any]:
        try:
            text = self.settings_path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise ConfigCorruptError("Settings file is not UTF-8 text.", str(self.settings_path), e) from e
        except OSError as e:
            raise ConfigIOError("Settings file could not be read.", str(self.settings_path), e) from e

        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise ConfigCorruptError("Settings file is not valid JSON.", str(self.settings_path), e) from e

        if not isinstance(data, dict):
            raise ConfigCorruptError(
                f"Expected a JSON object, got {type(data).__name__}.", str(self.settings_path)
            )
        return data

    def _save_defaults(self) -> AppSettings:
        settings = default_settings()
        try:
            self.save(settings)
        except ConfigIOError:
            self._log.error("Could not persist default settings, continuing in memory")
            self._settings = settings
        return settings
