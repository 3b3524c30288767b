"""Data models for AYCD projects and documents."""

from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Serializes with camelCase keys, accepts snake_case on input too."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ProjectSettings(CamelModel):
    """Per-project preferences stored alongside the descriptor."""

    theme: Literal["light", "dark", "auto"] | None = None
    default_view: Literal["editor", "canvas", "timeline"] | None = None
    ai_enabled: bool | None = None
    ai_provider: str | None = None


class Project(CamelModel):
    """A writing project rooted at ``path``, described by its project.json."""

    id: str
    name: str
    path: str
    created_at: int
    modified_at: int
    settings: ProjectSettings | None = None

    def to_descriptor(self) -> str:
        """Pretty-printed JSON written to project.json."""
        return self.model_dump_json(by_alias=True, exclude_none=True, indent=2)


class DocumentType(str, Enum):
    """Which top-level category a document belongs to."""

    WORLD = "world"
    NARRATIVE = "narrative"


class Document(CamelModel):
    """A markdown document backed by the file at ``path``.

    ``title``, ``word_count`` and ``created_at`` are derived from the file
    when it is read. After an update they are stale until the next read.
    """

    id: str
    project_id: str = ""
    path: str
    title: str
    content: str = ""
    word_count: int = 0
    created_at: int = 0
    modified_at: int = 0
    document_type: DocumentType | None = None
    metadata: dict[str, Any] | None = None
