"""Settings data models."""

from dataclasses import dataclass, field
from enum import Enum


# Placeholder tokens understood by the organize templates, written as {TOKEN}
TEMPLATE_TITLE_ID = "TITLE_ID"
TEMPLATE_TITLE_NAME = "TITLE_NAME"
TEMPLATE_DLC_NAME = "DLC_NAME"
TEMPLATE_VERSION = "VERSION"
TEMPLATE_REGION = "REGION"
TEMPLATE_VERSION_TXT = "VERSION_TXT"
TEMPLATE_TYPE = "TYPE"

# Bundled DLC that never receives standalone updates
BUNDLED_DLC_TITLE_ID = "01007F600B135007"


class CatalogFeed(Enum):
    """Remote metadata catalogs cached in the working directory."""
    TITLES = "titles"
    VERSIONS = "versions"

    @property
    def cache_filename(self) -> str:
        return f"{self.value}.json"

    @property
    def url_field(self) -> str:
        return f"{self.value}_json_url"

    @property
    def etag_field(self) -> str:
        return f"{self.value}_etag"


@dataclass
class OrganizeOptions:
    """Naming and layout policy used by the organize engine."""
    create_folder_per_game: bool = False
    dlc_folder: str = ""
    updates_folder: str = ""
    rename_files: bool = False
    delete_empty_folders: bool = False
    delete_old_update_files: bool = False
    folder_name_template: str = ""
    switch_safe_file_names: bool = True
    file_name_template: str = ""
    process_when_missing_base_game: bool = False


@dataclass
class AppSettings:
    """The persisted settings document.

    Field order is the on-disk key order. Defaults here are the values a
    field keeps when it is missing from a document being loaded; the full
    first-run defaults are built by ``slm.services.settings.default_settings``.
    """
    versions_json_url: str = ""
    versions_etag: str = ""
    titles_json_url: str = ""
    titles_etag: str = ""
    prod_keys: str = ""
    folder: str = ""
    scan_folders: list[str] = field(default_factory=list)
    gui: bool = False
    debug: bool = False
    check_for_missing_updates: bool = False
    check_for_missing_dlc: bool = False
    hide_missing_games: bool = False
    hide_demo_games: bool = False
    organize_options: OrganizeOptions = field(default_factory=OrganizeOptions)
    scan_recursively: bool = False
    gui_page_size: int = 100
    ignore_dlc_updates: bool = False
    ignore_dlc_title_ids: list[str] = field(default_factory=lambda: [BUNDLED_DLC_TITLE_ID])
    ignore_update_title_ids: list[str] = field(default_factory=list)
    ignore_file_types: list[str] = field(default_factory=list)

    def url_for(self, feed: CatalogFeed) -> str:
        return getattr(self, feed.url_field)

    def etag_for(self, feed: CatalogFeed) -> str:
        return getattr(self, feed.etag_field)

    def set_etag(self, feed: CatalogFeed, etag: str) -> None:
        setattr(self, feed.etag_field, etag)

    @property
    def library_folders(self) -> list[str]:
        """Primary folder followed by the extra scan folders."""
        folders = [self.folder] if self.folder else []
        return folders + list(self.scan_folders)
