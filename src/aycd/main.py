"""AYCD local API: the command layer the desktop shell talks to.

Each route maps to exactly one store operation. Failures reach the shell as
an HTTP error whose ``detail`` is a display-ready sentence.
"""

import logging
from contextlib import contextmanager
from pathlib import Path

from fastapi import FastAPI, HTTPException

from aycd.config import configure_logging, settings
from aycd.core.documents import DocumentStore
from aycd.core.exceptions import (
    AlreadyExistsError,
    CorruptDescriptorError,
    InvalidProjectError,
    NotFoundError,
    PathTraversalError,
    StoreError,
)
from aycd.core.models import CamelModel, Document, Project
from aycd.core.projects import ProjectStore

logger = logging.getLogger(__name__)

configure_logging(settings)

# Initialize app
app = FastAPI(
    title=settings.app_title,
    debug=settings.debug,
)

# Initialize stores
projects = ProjectStore(settings.projects_root)
documents = DocumentStore()

STATUS_CODES: dict[type[StoreError], int] = {
    NotFoundError: 404,
    AlreadyExistsError: 409,
    InvalidProjectError: 422,
    CorruptDescriptorError: 422,
    PathTraversalError: 403,
}


@contextmanager
def command(action: str):
    """Turn store failures into ``Failed to <action>: <cause>`` errors."""
    try:
        yield
    except StoreError as exc:
        logger.info("Failed to %s: %s", action, exc)
        status_code = STATUS_CODES.get(type(exc), 500)
        raise HTTPException(
            status_code=status_code, detail=f"Failed to {action}: {exc}"
        ) from exc


# ========== Request bodies ==========


class CreateProjectRequest(CamelModel):
    name: str
    custom_path: str | None = None


class ProjectPathRequest(CamelModel):
    project_path: str


class CreateDocumentRequest(CamelModel):
    project_path: str
    title: str
    category: str
    subcategory: str | None = None


class DocumentPathRequest(CamelModel):
    document_path: str


class UpdateDocumentRequest(CamelModel):
    document_path: str
    content: str


class DirPathRequest(CamelModel):
    dir_path: str


# ========== Projects ==========


@app.get("/api/projects/root")
async def get_projects_root() -> dict:
    """Default directory for new projects."""
    with command("get projects root"):
        return {"path": str(projects.get_projects_root())}


@app.get("/api/projects", response_model_exclude_none=True)
async def list_projects() -> list[Project]:
    """All projects under the projects root."""
    with command("list projects"):
        return await projects.list_projects()


@app.post("/api/projects", response_model_exclude_none=True)
async def create_project(body: CreateProjectRequest) -> Project:
    """Create a project with the standard folder layout."""
    custom_path = Path(body.custom_path) if body.custom_path else None
    with command("create project"):
        return await projects.create(body.name, custom_path)


@app.post("/api/projects/open", response_model_exclude_none=True)
async def open_project(body: ProjectPathRequest) -> Project:
    """Load an existing project's descriptor."""
    with command("open project"):
        return await projects.open(Path(body.project_path))


@app.put("/api/projects")
async def update_project(project: Project) -> None:
    """Rewrite a project's descriptor."""
    with command("update project"):
        await projects.update(project)


# ========== Documents ==========


@app.post("/api/documents", response_model_exclude_none=True)
async def create_document(body: CreateDocumentRequest) -> Document:
    """Create a markdown document in a project category."""
    with command("create document"):
        return await documents.create(
            Path(body.project_path), body.title, body.category, body.subcategory
        )


@app.post("/api/documents/read", response_model_exclude_none=True)
async def read_document(body: DocumentPathRequest) -> Document:
    """Read a document and its derived metadata."""
    with command("read document"):
        return await documents.read(Path(body.document_path))


@app.put("/api/documents")
async def update_document(body: UpdateDocumentRequest) -> None:
    """Replace a document's content. Re-read to see derived fields."""
    with command("update document"):
        await documents.update(Path(body.document_path), body.content)


@app.post("/api/documents/delete")
async def delete_document(body: DocumentPathRequest) -> None:
    """Delete a document."""
    with command("delete document"):
        await documents.delete(Path(body.document_path))


@app.post("/api/documents/list", response_model_exclude_none=True)
async def list_documents_in_dir(body: DirPathRequest) -> list[Document]:
    """Documents directly inside a directory."""
    with command("list documents"):
        return await documents.list_in_dir(Path(body.dir_path))


@app.post("/api/documents/list-all", response_model_exclude_none=True)
async def list_all_documents(body: ProjectPathRequest) -> list[Document]:
    """Every document in a project's WORLD and NARRATIVE folders."""
    with command("list all documents"):
        return await documents.list_all(Path(body.project_path))
