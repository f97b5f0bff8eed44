"""Tests for the settings store."""

import copy
import json
import tempfile
from dataclasses import fields
from pathlib import Path

from hypothesis import given, settings as hypothesis_settings, strategies as st

from slm.models import AppSettings, CatalogFeed, OrganizeOptions
from slm.services import (
    ConfigIOError,
    DEFAULT_TITLES_JSON_URL,
    DEFAULT_VERSIONS_JSON_URL,
    SETTINGS_FILENAME,
    SettingsStore,
    TITLES_ETAG_SENTINEL,
    VERSIONS_ETAG_SENTINEL,
    default_settings,
    serialize_settings,
    settings_to_dict,
)

import pytest


texts = st.text(max_size=30)
non_empty_texts = st.text(min_size=1, max_size=60)
text_lists = st.lists(texts, max_size=5)

organize_strategy = st.builds(
    OrganizeOptions,
    create_folder_per_game=st.booleans(),
    dlc_folder=texts,
    updates_folder=texts,
    rename_files=st.booleans(),
    delete_empty_folders=st.booleans(),
    delete_old_update_files=st.booleans(),
    folder_name_template=texts,
    switch_safe_file_names=st.booleans(),
    file_name_template=texts,
    process_when_missing_base_game=st.booleans(),
)

settings_strategy = st.builds(
    AppSettings,
    versions_json_url=non_empty_texts,
    versions_etag=texts,
    titles_json_url=non_empty_texts,
    titles_etag=texts,
    prod_keys=texts,
    folder=texts,
    scan_folders=text_lists,
    gui=st.booleans(),
    debug=st.booleans(),
    check_for_missing_updates=st.booleans(),
    check_for_missing_dlc=st.booleans(),
    hide_missing_games=st.booleans(),
    hide_demo_games=st.booleans(),
    organize_options=organize_strategy,
    scan_recursively=st.booleans(),
    gui_page_size=st.integers(min_value=0, max_value=10_000),
    ignore_dlc_updates=st.booleans(),
    ignore_dlc_title_ids=text_lists,
    ignore_update_title_ids=text_lists,
    ignore_file_types=text_lists,
)


def write_document(base: Path, document: object) -> None:
    (base / SETTINGS_FILENAME).write_text(json.dumps(document), encoding="utf-8")


def touch_caches(base: Path) -> None:
    for feed in CatalogFeed:
        (base / feed.cache_filename).write_text("{}", encoding="utf-8")


class TestRoundTrip:
    """Saving then loading reproduces the document."""

    @given(settings_strategy)
    @hypothesis_settings(max_examples=50, deadline=None)
    def test_round_trip_without_cached_catalogs(self, document: AppSettings) -> None:
        """ETags fall back to their sentinels when no catalog is cached."""
        with tempfile.TemporaryDirectory() as temp_dir:
            base = Path(temp_dir)
            SettingsStore(base).save(copy.deepcopy(document))

            loaded = SettingsStore(base).load()

            expected = copy.deepcopy(document)
            expected.titles_etag = TITLES_ETAG_SENTINEL
            expected.versions_etag = VERSIONS_ETAG_SENTINEL
            assert loaded == expected

    @given(settings_strategy)
    @hypothesis_settings(max_examples=50, deadline=None)
    def test_round_trip_with_cached_catalogs(self, document: AppSettings) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            base = Path(temp_dir)
            touch_caches(base)
            SettingsStore(base).save(copy.deepcopy(document))

            assert SettingsStore(base).load() == document

    def test_round_trip_example(self, tmp_path: Path) -> None:
        document = default_settings()
        document.folder = "/games/switch"
        document.scan_folders = ["/mnt/a", "/mnt/b", "/mnt/a"]
        document.organize_options.rename_files = True
        document.titles_etag = 'W/"feedbeef"'
        (tmp_path / "titles.json").write_text("{}", encoding="utf-8")

        SettingsStore(tmp_path).save(document)
        loaded = SettingsStore(tmp_path).load()

        assert loaded.folder == "/games/switch"
        assert loaded.scan_folders == ["/mnt/a", "/mnt/b", "/mnt/a"]
        assert loaded.organize_options.rename_files is True
        assert loaded.titles_etag == 'W/"feedbeef"'
        assert loaded.versions_etag == VERSIONS_ETAG_SENTINEL


class TestLoad:
    def test_load_is_cached(self, tmp_path: Path) -> None:
        store = SettingsStore(tmp_path)
        first = store.load()

        (tmp_path / SETTINGS_FILENAME).unlink()
        second = store.load()

        assert second is first
        assert not (tmp_path / SETTINGS_FILENAME).exists()

    def test_two_stores_load_identical_documents(self, tmp_path: Path) -> None:
        SettingsStore(tmp_path).load()
        assert SettingsStore(tmp_path).load() == SettingsStore(tmp_path).load()

    def test_reset_rereads_disk(self, tmp_path: Path) -> None:
        store = SettingsStore(tmp_path)
        store.load()
        write_document(tmp_path, {"folder": "/elsewhere"})

        assert store.load().folder == ""
        store.reset()
        assert store.load().folder == "/elsewhere"

    def test_empty_directory_creates_defaults(self, tmp_path: Path) -> None:
        store = SettingsStore(tmp_path)

        loaded = store.load()

        assert loaded == default_settings()
        on_disk = json.loads((tmp_path / SETTINGS_FILENAME).read_text(encoding="utf-8"))
        assert on_disk == settings_to_dict(default_settings())

    def test_defaults_table(self) -> None:
        defaults = default_settings()
        assert defaults.titles_json_url == DEFAULT_TITLES_JSON_URL
        assert defaults.titles_etag == TITLES_ETAG_SENTINEL
        assert defaults.versions_json_url == DEFAULT_VERSIONS_JSON_URL
        assert defaults.versions_etag == VERSIONS_ETAG_SENTINEL
        assert defaults.gui is True
        assert defaults.debug is False
        assert defaults.scan_recursively is True
        assert defaults.check_for_missing_updates is True
        assert defaults.check_for_missing_dlc is True
        assert defaults.gui_page_size == 100
        assert defaults.ignore_dlc_title_ids == ["01007F600B135007"]
        assert defaults.organize_options.switch_safe_file_names is True
        assert defaults.organize_options.folder_name_template == "{TITLE_NAME}"
        assert defaults.organize_options.file_name_template == "{TITLE_NAME} ({DLC_NAME})[{TITLE_ID}][v{VERSION}]"
        assert defaults.organize_options.create_folder_per_game is False
        assert defaults.scan_folders == []
        assert defaults.ignore_file_types == []

    @given(st.sampled_from([feed for feed in CatalogFeed]))
    @hypothesis_settings(deadline=None)
    def test_empty_url_is_repaired(self, feed: CatalogFeed) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            base = Path(temp_dir)
            document = settings_to_dict(default_settings())
            document[feed.url_field] = ""
            write_document(base, document)

            loaded = SettingsStore(base).load()

            assert loaded.titles_json_url == DEFAULT_TITLES_JSON_URL
            assert loaded.versions_json_url == DEFAULT_VERSIONS_JSON_URL

    @given(texts, texts)
    @hypothesis_settings(max_examples=50, deadline=None)
    def test_etag_reset_when_cache_missing(self, titles_etag: str, versions_etag: str) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            base = Path(temp_dir)
            document = settings_to_dict(default_settings())
            document["titles_etag"] = titles_etag
            document["versions_etag"] = versions_etag
            write_document(base, document)

            loaded = SettingsStore(base).load()

            assert loaded.titles_etag == TITLES_ETAG_SENTINEL
            assert loaded.versions_etag == VERSIONS_ETAG_SENTINEL

    def test_etag_kept_when_cache_present(self, tmp_path: Path) -> None:
        (tmp_path / "versions.json").write_text("{}", encoding="utf-8")
        document = settings_to_dict(default_settings())
        document["versions_etag"] = '"abc123"'
        document["titles_etag"] = '"def456"'
        write_document(tmp_path, document)

        loaded = SettingsStore(tmp_path).load()

        assert loaded.versions_etag == '"abc123"'
        assert loaded.titles_etag == TITLES_ETAG_SENTINEL

    @pytest.mark.parametrize("content", ["{not json", "[1, 2, 3]", "\"settings\"", ""])
    def test_corrupt_file_is_replaced_by_defaults(self, tmp_path: Path, content: str) -> None:
        (tmp_path / SETTINGS_FILENAME).write_text(content, encoding="utf-8")

        loaded = SettingsStore(tmp_path).load()

        assert loaded == default_settings()
        on_disk = json.loads((tmp_path / SETTINGS_FILENAME).read_text(encoding="utf-8"))
        assert on_disk == settings_to_dict(default_settings())

    def test_undecodable_file_is_replaced_by_defaults(self, tmp_path: Path) -> None:
        (tmp_path / SETTINGS_FILENAME).write_bytes(b"\xff\xfe\x00garbage")

        assert SettingsStore(tmp_path).load() == default_settings()

    def test_invalid_fields_keep_field_defaults(self, tmp_path: Path) -> None:
        write_document(
            tmp_path,
            {
                "gui": "yes",
                "gui_page_size": 50,
                "scan_folders": "not-a-list",
                "ignore_file_types": ["nsz", 3],
                "debug": True,
                "organize_options": {"rename_files": True, "dlc_folder": 3},
                "unknown_key": "ignored",
            },
        )

        loaded = SettingsStore(tmp_path).load()

        assert loaded.gui is False
        assert loaded.gui_page_size == 50
        assert loaded.scan_folders == []
        assert loaded.ignore_file_types == []
        assert loaded.debug is True
        assert loaded.organize_options.rename_files is True
        assert loaded.organize_options.dlc_folder == ""
        assert loaded.organize_options.switch_safe_file_names is True

    def test_boolean_is_not_accepted_as_page_size(self, tmp_path: Path) -> None:
        write_document(tmp_path, {"gui_page_size": True})
        assert SettingsStore(tmp_path).load().gui_page_size == 100

    def test_unwritable_directory_still_loads_defaults(self, tmp_path: Path) -> None:
        not_a_directory = tmp_path / "file"
        not_a_directory.write_text("", encoding="utf-8")

        loaded = SettingsStore(not_a_directory).load()

        assert loaded == default_settings()


class TestSave:
    def test_save_replaces_cached_instance(self, tmp_path: Path) -> None:
        store = SettingsStore(tmp_path)
        store.load()
        replacement = default_settings()
        replacement.folder = "/new"

        store.save(replacement)

        assert store.load() is replacement

    def test_save_uses_stable_field_order(self, tmp_path: Path) -> None:
        store = SettingsStore(tmp_path)
        store.save(default_settings())

        on_disk = json.loads((tmp_path / SETTINGS_FILENAME).read_text(encoding="utf-8"))

        assert list(on_disk) == [f.name for f in fields(AppSettings)]
        assert list(on_disk["organize_options"]) == [f.name for f in fields(OrganizeOptions)]

    def test_save_leaves_no_temporary_file(self, tmp_path: Path) -> None:
        SettingsStore(tmp_path).save(default_settings())
        assert sorted(p.name for p in tmp_path.iterdir()) == [SETTINGS_FILENAME]

    def test_save_failure_is_reported(self, tmp_path: Path) -> None:
        not_a_directory = tmp_path / "file"
        not_a_directory.write_text("", encoding="utf-8")
        store = SettingsStore(not_a_directory)

        with pytest.raises(ConfigIOError) as exc_info:
            store.save(default_settings())

        assert exc_info.value.path == str(not_a_directory / SETTINGS_FILENAME)
        assert exc_info.value.original_error is not None


class TestRawText:
    def test_raw_text_creates_defaults(self, tmp_path: Path) -> None:
        text = SettingsStore(tmp_path).load_as_raw_text()

        assert json.loads(text) == settings_to_dict(default_settings())
        assert text == (tmp_path / SETTINGS_FILENAME).read_text(encoding="utf-8")

    def test_raw_text_is_verbatim(self, tmp_path: Path) -> None:
        content = '{"folder": "/games",   "debug": true}'
        (tmp_path / SETTINGS_FILENAME).write_text(content, encoding="utf-8")

        assert SettingsStore(tmp_path).load_as_raw_text() == content

    def test_raw_text_falls_back_to_memory(self, tmp_path: Path) -> None:
        not_a_directory = tmp_path / "file"
        not_a_directory.write_text("", encoding="utf-8")

        text = SettingsStore(not_a_directory).load_as_raw_text()

        assert text == serialize_settings(default_settings())

    def test_raw_text_of_undecodable_file_restores_defaults(self, tmp_path: Path) -> None:
        (tmp_path / SETTINGS_FILENAME).write_bytes(b"\xff\xfe\x00garbage")
        store = SettingsStore(tmp_path)

        text = store.load_as_raw_text()

        assert json.loads(text) == settings_to_dict(default_settings())
        assert (tmp_path / SETTINGS_FILENAME).read_text(encoding="utf-8") == text
        assert store.load_as_raw_text() == text
