"""Unit tests for ProjectStore."""

import json
import logging
from pathlib import Path
from unittest.mock import patch

import pytest

from aycd.core.exceptions import (
    AlreadyExistsError,
    CorruptDescriptorError,
    InvalidProjectError,
    NoHomeDirectoryError,
)
from aycd.core.models import Project, ProjectSettings
from aycd.core.projects import (
    AUXILIARY_DIRS,
    DESCRIPTOR_NAME,
    PROJECT_TAXONOMY,
    ProjectStore,
    default_projects_root,
)


@pytest.fixture
def store(tmp_path):
    return ProjectStore(tmp_path / "projects")


def write_descriptor(project_dir: Path, **fields) -> Path:
    project_dir.mkdir(parents=True, exist_ok=True)
    record = {
        "id": "id-" + project_dir.name,
        "name": project_dir.name,
        "path": str(project_dir),
        "createdAt": 100,
        "modifiedAt": 100,
    }
    record.update(fields)
    (project_dir / DESCRIPTOR_NAME).write_text(json.dumps(record), encoding="utf-8")
    return project_dir


# ============================================================
# Projects root
# ============================================================


class TestProjectsRoot:
    def test_configured_root(self, tmp_path):
        assert ProjectStore(tmp_path).get_projects_root() == tmp_path

    def test_default_root_under_home(self, tmp_path):
        with patch("aycd.core.projects.Path.home", return_value=tmp_path):
            assert ProjectStore().get_projects_root() == tmp_path / "AYCD" / "projects"

    def test_no_home_directory(self):
        with patch("aycd.core.projects.Path.home", side_effect=RuntimeError("no home")):
            with pytest.raises(NoHomeDirectoryError):
                default_projects_root()


# ============================================================
# Create / open
# ============================================================


class TestCreate:
    @pytest.mark.asyncio
    async def test_creates_taxonomy(self, store, tmp_path):
        project = await store.create("test-novel", tmp_path)
        root = Path(project.path)
        assert root == tmp_path / "test-novel"
        for category, subfolders in PROJECT_TAXONOMY.items():
            for subfolder in subfolders:
                assert (root / category / subfolder).is_dir()
        for name in AUXILIARY_DIRS:
            assert (root / name).is_dir()
        assert (root / "WORLD" / "Cast").is_dir()
        assert (root / "NARRATIVE" / "Drafts").is_dir()

    @pytest.mark.asyncio
    async def test_descriptor_is_pretty_camel_case(self, store, tmp_path):
        project = await store.create("Novel", tmp_path)
        text = (Path(project.path) / DESCRIPTOR_NAME).read_text(encoding="utf-8")
        assert text.startswith("{\n  ")
        assert json.loads(text) == {
            "id": project.id,
            "name": "Novel",
            "path": project.path,
            "createdAt": project.created_at,
            "modifiedAt": project.modified_at,
        }

    @pytest.mark.asyncio
    async def test_timestamps_match(self, store, tmp_path):
        project = await store.create("Novel", tmp_path)
        assert project.created_at == project.modified_at > 0

    @pytest.mark.asyncio
    async def test_defaults_to_projects_root(self, store, tmp_path):
        project = await store.create("Rooted")
        assert Path(project.path) == tmp_path / "projects" / "Rooted"

    @pytest.mark.asyncio
    async def test_existing_directory_fails(self, store, tmp_path):
        (tmp_path / "Taken").mkdir()
        with pytest.raises(AlreadyExistsError):
            await store.create("Taken", tmp_path)
        assert not (tmp_path / "Taken" / DESCRIPTOR_NAME).exists()


class TestOpen:
    @pytest.mark.asyncio
    async def test_round_trip(self, store, tmp_path):
        project = await store.create("test-novel", tmp_path)
        opened = await store.open(Path(project.path))
        assert opened.id == project.id
        assert opened.name == project.name
        assert opened == project

    @pytest.mark.asyncio
    async def test_missing_descriptor(self, store, tmp_path):
        with pytest.raises(InvalidProjectError):
            await store.open(tmp_path)

    @pytest.mark.asyncio
    async def test_empty_id_is_invalid(self, store, tmp_path):
        write_descriptor(tmp_path / "p", id="")
        with pytest.raises(InvalidProjectError):
            await store.open(tmp_path / "p")

    @pytest.mark.asyncio
    async def test_unparsable_descriptor(self, store, tmp_path):
        (tmp_path / DESCRIPTOR_NAME).write_text("{not json", encoding="utf-8")
        with pytest.raises(CorruptDescriptorError):
            await store.open(tmp_path)

    @pytest.mark.asyncio
    async def test_wrong_shape_descriptor(self, store, tmp_path):
        write_descriptor(tmp_path / "p", createdAt="yesterday")
        with pytest.raises(CorruptDescriptorError):
            await store.open(tmp_path / "p")

    @pytest.mark.asyncio
    async def test_accepts_snake_case_fields(self, store, tmp_path):
        project_dir = tmp_path / "legacy"
        project_dir.mkdir()
        (project_dir / DESCRIPTOR_NAME).write_text(
            json.dumps(
                {
                    "id": "legacy-id",
                    "name": "legacy",
                    "path": str(project_dir),
                    "created_at": 10,
                    "modified_at": 20,
                }
            ),
            encoding="utf-8",
        )
        project = await store.open(project_dir)
        assert project.created_at == 10
        assert project.modified_at == 20

    @pytest.mark.asyncio
    async def test_moved_project_keeps_stored_path(self, store, tmp_path):
        project = await store.create("novel", tmp_path)
        moved = Path(project.path).rename(tmp_path / "moved")
        opened = await store.open(moved)
        assert opened.path == project.path
        await store.update(opened.model_copy(update={"path": str(moved)}))
        assert (await store.open(moved)).path == str(moved)


# ============================================================
# List / update
# ============================================================


class TestListProjects:
    @pytest.mark.asyncio
    async def test_missing_root_is_empty(self, store):
        assert await store.list_projects() == []

    @pytest.mark.asyncio
    async def test_sorted_by_modified_descending(self, store, tmp_path):
        root = tmp_path / "projects"
        write_descriptor(root / "old", modifiedAt=10)
        write_descriptor(root / "new", modifiedAt=30)
        write_descriptor(root / "mid", modifiedAt=20)
        projects = await store.list_projects()
        assert [p.name for p in projects] == ["new", "mid", "old"]

    @pytest.mark.asyncio
    async def test_invalid_projects_skipped_silently(self, store, tmp_path, caplog):
        root = tmp_path / "projects"
        write_descriptor(root / "good")
        (root / "empty-dir").mkdir()
        (root / "broken").mkdir()
        (root / "broken" / DESCRIPTOR_NAME).write_text("garbage", encoding="utf-8")
        (root / "stray-file.txt").write_text("not a project", encoding="utf-8")

        with caplog.at_level(logging.INFO, logger="aycd.core.projects"):
            projects = await store.list_projects()

        assert [p.name for p in projects] == ["good"]
        assert caplog.records == []

    @pytest.mark.asyncio
    async def test_skips_observable_at_debug(self, store, tmp_path, caplog):
        (tmp_path / "projects" / "empty-dir").mkdir(parents=True)
        with caplog.at_level(logging.DEBUG, logger="aycd.core.projects"):
            assert await store.list_projects() == []
        assert "empty-dir" in caplog.text


class TestUpdate:
    @pytest.mark.asyncio
    async def test_full_record_replace(self, store, tmp_path):
        project = await store.create("Novel", tmp_path)
        changed = project.model_copy(update={"name": "Renamed", "modified_at": 999})
        await store.update(changed)
        opened = await store.open(Path(project.path))
        assert opened.name == "Renamed"
        assert opened.modified_at == 999
        assert opened.id == project.id

    @pytest.mark.asyncio
    async def test_settings_persist(self, store, tmp_path):
        project = await store.create("Novel", tmp_path)
        project.settings = ProjectSettings(theme="dark", ai_enabled=False)
        await store.update(project)

        raw = json.loads((Path(project.path) / DESCRIPTOR_NAME).read_text(encoding="utf-8"))
        assert raw["settings"] == {"theme": "dark", "aiEnabled": False}

        opened = await store.open(Path(project.path))
        assert opened.settings == ProjectSettings(theme="dark", ai_enabled=False)

    @pytest.mark.asyncio
    async def test_update_does_not_merge(self, store, tmp_path):
        project = await store.create("Novel", tmp_path)
        project.settings = ProjectSettings(theme="light")
        await store.update(project)
        project.settings = None
        await store.update(project)
        raw = json.loads((Path(project.path) / DESCRIPTOR_NAME).read_text(encoding="utf-8"))
        assert "settings" not in raw

    @pytest.mark.asyncio
    async def test_reordered_by_update(self, store, tmp_path):
        root = tmp_path / "projects"
        first = await store.create("First")
        await store.create("Second")
        await store.update(first.model_copy(update={"modified_at": first.modified_at + 100}))
        projects = await store.list_projects()
        assert projects[0].name == "First"
        assert Path(projects[0].path).parent == root
