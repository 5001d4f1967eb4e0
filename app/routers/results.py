"""Serving of assembled project pages and raw assets.

``/results/<name>/...`` serves published projects; ``/preview/<name>/...``
serves any project and disables caching.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import HTMLResponse, Response

from app.models.project import ProjectRecord
from app.models.project_file import ProjectFile
from app.services.assembler import assemble_page
from app.services.store import ProjectStore, get_store

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Results"])

_INDEX = "index.html"


def find_file(store: ProjectStore, name: str, file_path: str) -> Optional[ProjectFile]:
    """Look up *file_path*, then ``<path>/index.html``, then ``<path>.html``."""
    found = store.get_file(name, file_path)
    if found is not None:
        return found

    index_in_folder = (
        f"{file_path}{_INDEX}" if file_path.endswith("/") else f"{file_path}/{_INDEX}"
    )
    found = store.get_file(name, index_in_folder)
    if found is None and "." not in file_path:
        found = store.get_file(name, f"{file_path.rstrip('/')}.html")
    return found


def _serve(
    store: ProjectStore,
    project: ProjectRecord,
    path: str,
    headers: Optional[dict] = None,
) -> Response:
    file_path = path or _INDEX
    project_file = find_file(store, project.name, file_path)

    if project_file is None:
        # Single-file projects predate the file store
        if file_path == _INDEX and project.html:
            return HTMLResponse(project.html, headers=headers)
        raise HTTPException(status_code=404, detail="File not found")

    if project_file.file_type == "page" or project_file.path.endswith(".html"):
        html = assemble_page(
            project_file.path,
            store.get_files(project.name),
            project_name=project.name,
            metadata=project.metadata(),
        )
        return HTMLResponse(html, headers=headers)

    if project_file.file_type == "style" or project_file.path.endswith(".css"):
        media_type = "text/css"
    elif project_file.file_type == "script" or project_file.path.endswith(".js"):
        media_type = "application/javascript"
    else:
        media_type = "text/plain"
    return Response(project_file.content, media_type=media_type, headers=headers)


@router.get("/results/{name}", summary="Serve a published project's index page")
@router.get("/results/{name}/{path:path}", summary="Serve a published project's file")
async def results(name: str, path: str = "", store: ProjectStore = Depends(get_store)) -> Response:
    project = store.get_project(name)
    if project is None or not project.is_published:
        logger.info("Results request for unknown or unpublished project %s", name)
        raise HTTPException(status_code=404, detail="Project not found or not published")
    return _serve(store, project, path)


@router.get("/preview/{name}", summary="Preview a project's index page")
@router.get("/preview/{name}/{path:path}", summary="Preview a project's file")
async def preview(name: str, path: str = "", store: ProjectStore = Depends(get_store)) -> Response:
    project = store.get_project(name)
    if project is None:
        raise HTTPException(status_code=404, detail="Project not found")
    return _serve(store, project, path, headers={"Cache-Control": "no-store"})
