"""Unit tests for the workspace module registry."""

from __future__ import annotations

import logging

import pytest

from omt_analysis.config import Settings
from omt_analysis.errors import DuplicateFolder, UnknownFolder
from omt_analysis.models import CheckFileResult
from omt_analysis.workspace.registry import ModuleRegistry
from tests.conftest import InMemoryFileSystem

DEFAULT = CheckFileResult(path="/folder/defaultPath.omt", module_name="defaultModule")


@pytest.fixture
def registry() -> ModuleRegistry:
    return ModuleRegistry(InMemoryFileSystem(), Settings())


class TestCheckForChanges:
    def test_ignores_result_without_module(self, registry: ModuleRegistry) -> None:
        registry.check_for_changes(DEFAULT.model_copy(update={"module_name": None}))
        assert registry.watched_modules == []

    def test_creates_module_with_new_name(self, registry: ModuleRegistry) -> None:
        registry.check_for_changes(DEFAULT)

        [module] = registry.watched_modules
        assert module.name == "defaultModule"
        assert module.uri == "/folder/defaultPath.omt"

    def test_replaces_module_at_other_path(
        self, registry: ModuleRegistry, caplog: pytest.LogCaptureFixture
    ) -> None:
        registry.check_for_changes(DEFAULT)

        with caplog.at_level(logging.WARNING, logger="omt_analysis.workspace.registry"):
            registry.check_for_changes(DEFAULT.model_copy(update={"path": "/otherPath.omt"}))

        [module] = registry.watched_modules
        assert module.uri == "/otherPath.omt"
        assert "There is another module named 'defaultModule'" in caplog.text

    def test_same_result_twice_is_idempotent(
        self, registry: ModuleRegistry, caplog: pytest.LogCaptureFixture
    ) -> None:
        registry.check_for_changes(DEFAULT)

        with caplog.at_level(logging.WARNING, logger="omt_analysis.workspace.registry"):
            registry.check_for_changes(DEFAULT)

        assert len(registry.watched_modules) == 1
        assert caplog.records == []

    def test_rename_drops_old_name(self, registry: ModuleRegistry) -> None:
        registry.check_for_changes(DEFAULT)
        registry.check_for_changes(DEFAULT.model_copy(update={"module_name": "renamed"}))

        assert registry.get_module_path("defaultModule") is None
        assert registry.get_module_path("renamed") == "/folder/defaultPath.omt"

    def test_rename_into_taken_name_drops_old_name(self, registry: ModuleRegistry) -> None:
        registry.check_for_changes(CheckFileResult(path="/folder/a.omt", module_name="Old"))
        registry.check_for_changes(CheckFileResult(path="/folder/b.omt", module_name="Taken"))

        registry.check_for_changes(CheckFileResult(path="/folder/a.omt", module_name="Taken"))

        assert registry.get_module_path("Old") is None
        assert registry.get_module_path("Taken") == "/folder/a.omt"
        assert len(registry.watched_modules) == 1

    def test_removing_header_drops_module(self, registry: ModuleRegistry) -> None:
        registry.check_for_changes(DEFAULT)
        registry.check_for_changes(DEFAULT.model_copy(update={"module_name": None}))
        assert registry.watched_modules == []


class TestGetModulePath:
    def test_unknown_name(self, registry: ModuleRegistry) -> None:
        registry.check_for_changes(DEFAULT)
        assert registry.get_module_path("otherName") is None

    def test_known_name(self, registry: ModuleRegistry) -> None:
        registry.check_for_changes(DEFAULT)
        assert registry.get_module_path("defaultModule") == "/folder/defaultPath.omt"


class TestFolders:
    """Folder registration, scanning and removal."""

    @pytest.fixture
    def fs(self) -> InMemoryFileSystem:
        return InMemoryFileSystem(
            {
                "/folder/a.omt": "moduleName: Alpha\n",
                "/folder/nested/b.omt": "moduleName: Beta # shared\n",
                "/folder/plain.omt": "model: {}\n",
                "/folder/notes.txt": "moduleName: Text\n",
                "/folder/node_modules/dep/c.omt": "moduleName: Vendored\n",
                "/folder2/d.omt": "moduleName: Delta\n",
            }
        )

    @pytest.mark.asyncio
    async def test_add_folder_scans_modules(self, fs: InMemoryFileSystem) -> None:
        registry = ModuleRegistry(fs, Settings())

        await registry.add_folder("/folder")

        assert registry.watched_folders == ["/folder"]
        assert sorted(m.name for m in registry.watched_modules) == ["Alpha", "Beta"]
        assert registry.get_module_path("Beta") == "/folder/nested/b.omt"

    @pytest.mark.asyncio
    async def test_add_folder_accepts_file_uri(self, fs: InMemoryFileSystem) -> None:
        registry = ModuleRegistry(fs, Settings())

        await registry.add_folder("file:///folder2")

        assert registry.get_module_path("Delta") == "/folder2/d.omt"

    @pytest.mark.asyncio
    async def test_add_folder_twice_raises(self, fs: InMemoryFileSystem) -> None:
        registry = ModuleRegistry(fs, Settings())
        await registry.add_folder("/folder")

        with pytest.raises(DuplicateFolder):
            await registry.add_folder("/folder")

    @pytest.mark.asyncio
    async def test_add_folder_as_uri_after_path_raises(self, fs: InMemoryFileSystem) -> None:
        registry = ModuleRegistry(fs, Settings())
        await registry.add_folder("/folder")
        reads = len(fs.reads)

        with pytest.raises(DuplicateFolder):
            await registry.add_folder("file:///folder")

        assert registry.watched_folders == ["/folder"]
        assert len(fs.reads) == reads

    @pytest.mark.asyncio
    async def test_remove_folder_by_uri(self, fs: InMemoryFileSystem) -> None:
        registry = ModuleRegistry(fs, Settings())
        await registry.add_folder("/folder")

        registry.remove_folder("file:///folder")

        assert registry.watched_folders == []
        assert registry.watched_modules == []

    @pytest.mark.asyncio
    async def test_remove_folder_drops_its_modules(self, fs: InMemoryFileSystem) -> None:
        registry = ModuleRegistry(fs, Settings())
        await registry.add_folder("/folder")
        await registry.add_folder("/folder2")

        registry.remove_folder("/folder")

        assert registry.watched_folders == ["/folder2"]
        assert [m.name for m in registry.watched_modules] == ["Delta"]

    @pytest.mark.asyncio
    async def test_remove_folder_keeps_prefix_siblings(self) -> None:
        fs = InMemoryFileSystem({"/folder/a.omt": "moduleName: Alpha\n"})
        registry = ModuleRegistry(fs, Settings())
        await registry.add_folder("/fold")
        registry.check_for_changes(CheckFileResult(path="/folder/a.omt", module_name="Alpha"))

        registry.remove_folder("/fold")

        assert registry.get_module_path("Alpha") == "/folder/a.omt"

    def test_remove_unknown_folder_raises(self, registry: ModuleRegistry) -> None:
        with pytest.raises(UnknownFolder):
            registry.remove_folder("/nowhere")

    @pytest.mark.asyncio
    async def test_scan_all_picks_up_new_files(self, fs: InMemoryFileSystem) -> None:
        registry = ModuleRegistry(fs, Settings())
        await registry.add_folder("/folder")
        fs.files["/folder/late.omt"] = "moduleName: Late\n"

        await registry.scan_all()

        assert registry.get_module_path("Late") == "/folder/late.omt"


class TestFileEvents:
    @pytest.mark.asyncio
    async def test_changed_file_is_reread(self) -> None:
        fs = InMemoryFileSystem({"/ws/a.omt": "moduleName: Alpha\n"})
        registry = ModuleRegistry(fs, Settings())

        await registry.on_file_changed("/ws/a.omt")

        assert registry.get_module_path("Alpha") == "/ws/a.omt"

    @pytest.mark.asyncio
    async def test_changed_file_with_text(self, registry: ModuleRegistry) -> None:
        await registry.on_file_changed("/ws/a.omt", "moduleName: Edited\n")
        assert registry.get_module_path("Edited") == "/ws/a.omt"

    @pytest.mark.asyncio
    async def test_unreadable_file_is_logged(
        self, registry: ModuleRegistry, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.ERROR, logger="omt_analysis.workspace.registry"):
            await registry.on_file_created("/ws/missing.omt")

        assert registry.watched_modules == []
        assert "/ws/missing.omt" in caplog.text

    def test_deleted_file_removes_module(self, registry: ModuleRegistry) -> None:
        registry.check_for_changes(DEFAULT)
        registry.on_file_deleted(DEFAULT.path)
        assert registry.watched_modules == []

    def test_deleting_other_file_is_noop(self, registry: ModuleRegistry) -> None:
        registry.check_for_changes(DEFAULT)
        registry.on_file_deleted("/some/other/path.omt")
        assert len(registry.watched_modules) == 1

    def test_is_module_file(self, registry: ModuleRegistry) -> None:
        assert registry.is_module_file("/ws/a.omt") is True
        assert registry.is_module_file("/ws/a.json") is False
        assert registry.is_module_file("/ws/node_modules/a.omt") is False
