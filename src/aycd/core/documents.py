"""Markdown document storage.

Documents are plain ``.md`` files anywhere under a project's category
folders. A file's path is its identity; there is no index. Metadata comes
from an optional frontmatter block (see :mod:`aycd.core.frontmatter`), with
fallbacks to the body and to the filesystem.
"""

import logging
import os
import time
import uuid
from pathlib import Path

from aycd.core.exceptions import AlreadyExistsError, NotFoundError, StoreError
from aycd.core.files import (
    delete_file,
    ensure_dir,
    list_dirs,
    list_files,
    read_file,
    write_file,
)
from aycd.core.frontmatter import (
    count_words,
    first_heading,
    parse_frontmatter,
    render_frontmatter,
    sanitize_filename,
)
from aycd.core.models import Document, DocumentType

logger = logging.getLogger(__name__)

WORLD_DIR = "WORLD"
NARRATIVE_DIR = "NARRATIVE"

CATEGORY_TYPES = {
    WORLD_DIR: DocumentType.WORLD,
    NARRATIVE_DIR: DocumentType.NARRATIVE,
}

MARKDOWN_SUFFIX = ".md"

DESCRIPTOR_NAME = "project.json"


def document_type_for(path: Path) -> DocumentType | None:
    """Type of the category folder a document lives under, if any.

    Inside a project (an ancestor holding the descriptor) only the first
    folder below the project root counts. Outside one, the nearest
    WORLD/NARRATIVE ancestor decides.
    """
    for parent in path.parents:
        if (parent / DESCRIPTOR_NAME).is_file():
            category, *rest = path.relative_to(parent).parts
            return CATEGORY_TYPES.get(category) if rest else None
    for parent in path.parents:
        if parent.name in CATEGORY_TYPES:
            return CATEGORY_TYPES[parent.name]
    return None


def _birth_time(stat: os.stat_result) -> int:
    birth = getattr(stat, "st_birthtime", None)
    if birth is None and os.name == "nt":
        birth = stat.st_ctime
    return int(birth) if birth is not None else 0


def _is_markdown(path: Path) -> bool:
    return path.suffix == MARKDOWN_SUFFIX


def _by_recency(documents: list[Document]) -> list[Document]:
    return sorted(documents, key=lambda d: d.modified_at, reverse=True)


class DocumentStore:
    """Create, read, update, delete and list markdown documents.

    The store keeps no state between calls. Every method works on explicit
    paths and goes straight to disk.
    """

    def __init__(self, log: logging.Logger | None = None):
        self.logger = log or logger

    async def create(
        self,
        project_root: Path,
        title: str,
        category: str,
        subcategory: str | None = None,
    ) -> Document:
        """Create ``project_root/category[/subcategory]/<title>.md``.

        The file gets a frontmatter block (id, title, created) and a level-1
        heading. The returned record reflects exactly what was written.

        Raises:
            AlreadyExistsError: If a document with the same filename exists.
        """
        directory = project_root / category
        if subcategory:
            directory = directory / subcategory
        ensure_dir(directory)

        path = directory / f"{sanitize_filename(title)}{MARKDOWN_SUFFIX}"
        if path.exists():
            raise AlreadyExistsError(f"Document already exists: {path}", path)

        now = int(time.time())
        doc_id = str(uuid.uuid4())
        body = f"# {title}\n\n"
        content = render_frontmatter(
            {"id": doc_id, "title": title, "created": now}, body
        )
        write_file(path, content)
        self.logger.info("Created document %s", path)

        return Document(
            id=doc_id,
            path=str(path),
            title=title,
            content=content,
            word_count=count_words(body),
            created_at=now,
            modified_at=now,
            document_type=CATEGORY_TYPES.get(category),
        )

    async def read(self, document_path: Path) -> Document:
        """Read a document and derive its metadata.

        Title falls back from frontmatter to the first ``# `` heading, then
        to the file name. ``created_at`` falls back from frontmatter to the
        file's birth time, then to 0. ``modified_at`` is always the file's
        modification time.

        Raises:
            NotFoundError: If the file does not exist.
        """
        if not document_path.exists():
            raise NotFoundError(f"Document not found: {document_path}", document_path)

        content = read_file(document_path)
        try:
            stat = document_path.stat()
        except OSError:
            stat = None

        fields, body = parse_frontmatter(content)

        doc_id = fields.get("id", "")
        title = fields.get("title")
        if title is None or title == "":
            title = first_heading(body) or document_path.stem
        created = fields.get("created")
        if not isinstance(created, int):
            created = _birth_time(stat) if stat else 0

        return Document(
            id=str(doc_id),
            path=str(document_path),
            title=str(title) or "Untitled",
            content=content,
            word_count=count_words(body),
            created_at=created,
            modified_at=int(stat.st_mtime) if stat else 0,
            document_type=document_type_for(document_path),
        )

    async def update(self, document_path: Path, content: str) -> None:
        """Replace the whole file with ``content``.

        Frontmatter is neither preserved nor regenerated, and derived fields
        are not recomputed. Callers re-read the document to see them.

        Raises:
            NotFoundError: If the file does not exist.
        """
        if not document_path.exists():
            raise NotFoundError(f"Document not found: {document_path}", document_path)
        write_file(document_path, content)

    async def delete(self, document_path: Path) -> None:
        """Remove a document file.

        Raises:
            NotFoundError: If the file does not exist.
        """
        if not document_path.exists():
            raise NotFoundError(f"Document not found: {document_path}", document_path)
        delete_file(document_path)
        self.logger.info("Deleted document %s", document_path)

    async def list_in_dir(self, dir_path: Path) -> list[Document]:
        """Documents directly inside ``dir_path``, most recently modified first.

        A missing directory yields an empty list. Files that cannot be read
        are logged and skipped.
        """
        if not dir_path.exists():
            return []

        documents = []
        for path in list_files(dir_path):
            if _is_markdown(path):
                await self._collect(path, documents)
        return _by_recency(documents)

    async def list_all(self, project_root: Path) -> list[Document]:
        """Every document under the project's WORLD and NARRATIVE folders.

        Other folders in the project are not visited. Ordering and skipping
        follow :meth:`list_in_dir`.
        """
        documents: list[Document] = []
        for category in (WORLD_DIR, NARRATIVE_DIR):
            category_path = project_root / category
            if category_path.exists():
                await self._collect_recursive(category_path, documents)
        return _by_recency(documents)

    async def _collect_recursive(self, directory: Path, documents: list[Document]) -> None:
        for subdir in list_dirs(directory):
            await self._collect_recursive(subdir, documents)
        for path in list_files(directory):
            if _is_markdown(path):
                await self._collect(path, documents)

    async def _collect(self, path: Path, documents: list[Document]) -> None:
        try:
            documents.append(await self.read(path))
        except StoreError as exc:
            self.logger.warning("Failed to read document %s: %s", path, exc)
