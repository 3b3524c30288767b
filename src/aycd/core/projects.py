"""Project storage.

A project is a directory holding a fixed folder taxonomy and a
``project.json`` descriptor. The descriptor is the only thing that marks a
directory as a project.
"""

import logging
import time
import uuid
from pathlib import Path

from pydantic import ValidationError

from aycd.core.documents import DESCRIPTOR_NAME, NARRATIVE_DIR, WORLD_DIR
from aycd.core.exceptions import (
    AlreadyExistsError,
    CorruptDescriptorError,
    InvalidProjectError,
    NoHomeDirectoryError,
    StoreError,
)
from aycd.core.files import ensure_dir, list_dirs, read_file, write_file
from aycd.core.models import Project

logger = logging.getLogger(__name__)


# Subfolders created in every new project
PROJECT_TAXONOMY: dict[str, tuple[str, ...]] = {
    WORLD_DIR: ("Cast", "Places", "Objects", "Systems", "Lore"),
    NARRATIVE_DIR: ("Drafts", "Final", "Research", "Planning"),
}

# Reserved for caching and search indexing
AUXILIARY_DIRS = ("cache", "search")


def default_projects_root() -> Path:
    """``~/AYCD/projects``."""
    try:
        home = Path.home()
    except (RuntimeError, KeyError) as exc:
        raise NoHomeDirectoryError("Could not determine home directory") from exc
    return home / "AYCD" / "projects"


def init_project_structure(project_path: Path) -> None:
    """Create the standard folder layout under ``project_path``."""
    ensure_dir(project_path)
    for category, subfolders in PROJECT_TAXONOMY.items():
        for subfolder in subfolders:
            ensure_dir(project_path / category / subfolder)
    for name in AUXILIARY_DIRS:
        ensure_dir(project_path / name)


class ProjectStore:
    """Create, open, list and update projects.

    Args:
        projects_root: Where projects live by default. ``None`` means
            ``~/AYCD/projects``.
        log: Logger receiving store events. Defaults to this module's logger.
    """

    def __init__(
        self,
        projects_root: Path | None = None,
        log: logging.Logger | None = None,
    ):
        self.projects_root = projects_root
        self.logger = log or logger

    def get_projects_root(self) -> Path:
        """Directory that holds projects created without a custom path."""
        if self.projects_root is not None:
            return self.projects_root
        return default_projects_root()

    async def create(self, name: str, custom_path: Path | None = None) -> Project:
        """Create a project directory with the standard taxonomy.

        The project lives at ``custom_path/name`` when ``custom_path`` is
        given, otherwise under the projects root.

        Raises:
            AlreadyExistsError: If the project directory already exists.
        """
        parent = custom_path if custom_path is not None else self.get_projects_root()
        project_path = parent / name
        if project_path.exists():
            raise AlreadyExistsError(
                f"Project already exists at: {project_path}", project_path
            )

        init_project_structure(project_path)

        now = int(time.time())
        project = Project(
            id=str(uuid.uuid4()),
            name=name,
            path=str(project_path),
            created_at=now,
            modified_at=now,
        )
        write_file(project_path / DESCRIPTOR_NAME, project.to_descriptor())
        self.logger.info("Created project %r at %s", name, project_path)
        return project

    async def open(self, project_path: Path) -> Project:
        """Load the project descriptor from ``project_path``.

        ``path`` is returned as stored in the descriptor. A project that was
        moved on disk keeps its old ``path`` until :meth:`update` rewrites it.

        Raises:
            InvalidProjectError: If there is no descriptor or its id is empty.
            CorruptDescriptorError: If the descriptor cannot be parsed.
        """
        descriptor = project_path / DESCRIPTOR_NAME
        if not descriptor.exists():
            raise InvalidProjectError(
                f"Not a valid AYCD project: {DESCRIPTOR_NAME} not found", project_path
            )

        content = read_file(descriptor)
        try:
            project = Project.model_validate_json(content)
        except ValidationError as exc:
            raise CorruptDescriptorError(
                f"Failed to parse {DESCRIPTOR_NAME}: {exc.error_count()} error(s)",
                descriptor,
            ) from exc

        if not project.id:
            raise InvalidProjectError(
                f"Not a valid AYCD project: {DESCRIPTOR_NAME} has no id", project_path
            )
        return project

    async def list_projects(self) -> list[Project]:
        """Projects under the projects root, most recently modified first.

        Directories that are not valid projects are skipped without a
        warning.
        """
        root = self.get_projects_root()
        if not root.exists():
            return []

        projects = []
        for path in list_dirs(root):
            try:
                projects.append(await self.open(path))
            except StoreError as exc:
                self.logger.debug("Skipping %s: %s", path, exc)
        return sorted(projects, key=lambda p: p.modified_at, reverse=True)

    async def update(self, project: Project) -> None:
        """Overwrite the descriptor with ``project``.

        The whole record is written; nothing is merged from disk.
        """
        write_file(Path(project.path) / DESCRIPTOR_NAME, project.to_descriptor())
