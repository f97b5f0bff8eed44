"""Tests for the console front end."""

from io import StringIO
from pathlib import Path
from unittest.mock import AsyncMock, Mock

import pytest

from slm.main import ApplicationContext
from slm.services import NetworkError, SettingsStore
from slm.console import ConsoleFrontEnd


def make_context(tmp_path: Path, check: AsyncMock) -> ApplicationContext:
    context = ApplicationContext(tmp_path, SettingsStore(tmp_path))
    context._freshness_checker = Mock(check_for_newer_release=check)
    return context


class TestConsoleFrontEnd:
    @pytest.mark.asyncio
    async def test_reports_newer_release(self, tmp_path: Path) -> None:
        out = StringIO()
        context = make_context(tmp_path, AsyncMock(return_value=True))

        exit_code = await ConsoleFrontEnd(context, out=out).start()

        assert exit_code == 0
        output = out.getvalue()
        assert f"Working directory: {tmp_path}" in output
        assert "Library folders: none configured" in output
        assert "Titles catalog: not downloaded yet" in output
        assert "A newer release is available." in output
        await context.cleanup()

    @pytest.mark.asyncio
    async def test_lists_library_folders(self, tmp_path: Path) -> None:
        store = SettingsStore(tmp_path)
        document = store.load()
        document.folder = "/games"
        document.scan_folders = ["/mnt/usb"]
        store.save(document)
        (tmp_path / "versions.json").write_text("{}", encoding="utf-8")
        out = StringIO()
        context = ApplicationContext(tmp_path, store)
        context._freshness_checker = Mock(check_for_newer_release=AsyncMock(return_value=False))

        await ConsoleFrontEnd(context, out=out).start()

        output = out.getvalue()
        assert "  /games\n  /mnt/usb" in output
        assert "Versions catalog: cached" in output
        assert "You are running the latest version." in output
        await context.cleanup()

    @pytest.mark.asyncio
    async def test_network_failure_is_reported_not_fatal(self, tmp_path: Path) -> None:
        out = StringIO()
        context = make_context(tmp_path, AsyncMock(side_effect=NetworkError("Could not reach the update server.")))

        exit_code = await ConsoleFrontEnd(context, out=out).start()

        assert exit_code == 0
        assert "Could not reach the update server." in out.getvalue()
        assert "Check your internet connection" in out.getvalue()
        await context.cleanup()
