"""Project CRUD, model-output upload and site builds."""

import logging
import uuid
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Request

from app.models.project import ProjectRecord
from app.models.project_file import ProjectFile
from app.models.request import BuildRequest, OutputUploadRequest, ProjectCreateRequest
from app.models.response import BuildResponse, SaveResponse
from app.routers.assemble import limiter
from app.services.builder import build_site, fallback_files
from app.services.generator import Generate, get_generator
from app.services.inline_assets import split_single_page
from app.services.parser import parse_output, strip_code_fence
from app.services.store import ProjectStore, get_store

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Projects"])

_HTML_DOCUMENT_MARKERS = ("<html", "<!doctype html")


def _require_project(store: ProjectStore, name: str) -> ProjectRecord:
    project = store.get_project(name)
    if project is None:
        raise HTTPException(status_code=404, detail=f"Project '{name}' not found.")
    return project


@router.post("/projects", response_model=ProjectRecord, summary="Create or replace a project")
async def create_project(
    body: ProjectCreateRequest, store: ProjectStore = Depends(get_store)
) -> ProjectRecord:
    record = ProjectRecord(**body.model_dump())
    store.save_project(record)
    logger.info("Project saved", extra={"project": record.name})
    return record


@router.get(
    "/projects/{name}/files",
    response_model=List[ProjectFile],
    summary="List a project's files",
)
async def list_files(name: str, store: ProjectStore = Depends(get_store)) -> List[ProjectFile]:
    _require_project(store, name)
    return store.get_files(name)


@router.post(
    "/projects/{name}/output",
    response_model=SaveResponse,
    summary="Parse a model response and save its files",
)
@limiter.limit("30/minute")
async def upload_output(
    request: Request,
    name: str,
    body: OutputUploadRequest,
    store: ProjectStore = Depends(get_store),
) -> SaveResponse:
    """Parse *output* and store the files under project *name*.

    When no fenced block can be parsed, a bare HTML document (possibly behind
    an unterminated fence) is split into page/style/script files; failing
    that, the fallback page is stored when a description was supplied.
    """
    _require_project(store, name)

    files = parse_output(body.output)
    used_fallback = False
    if not files:
        document = strip_code_fence(body.output)
        if document.lower().startswith(_HTML_DOCUMENT_MARKERS):
            files = split_single_page(document)
        elif body.description:
            files = fallback_files(body.description, name)
            used_fallback = True
        else:
            raise HTTPException(status_code=422, detail="No fenced code blocks found in output.")

    saved = store.save_files(name, files)
    logger.info("Saved parsed output", extra={"project": name, "files": saved})
    return SaveResponse(project_name=name, saved_paths=saved, used_fallback=used_fallback)


@router.post("/build", response_model=BuildResponse, summary="Generate a site from a description")
@limiter.limit("5/minute")
async def build(
    request: Request,
    body: BuildRequest,
    store: ProjectStore = Depends(get_store),
    generate: Generate = Depends(get_generator),
) -> BuildResponse:
    project_name = body.project_name or f"site-{uuid.uuid4().hex[:8]}"
    job = await build_site(
        store,
        project_name=project_name,
        description=body.description,
        generate=generate,
    )
    return BuildResponse(
        job_id=job.job_id,
        project_name=job.project_name,
        status=job.status,
        progress=job.progress,
        saved_paths=job.saved_paths,
        used_fallback=job.used_fallback,
        logs=job.logs,
    )
