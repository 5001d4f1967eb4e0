import logging

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import HTMLResponse
from slowapi import Limiter
from slowapi.util import get_remote_address

from app.models.request import AssembleRequest, ParseRequest
from app.models.response import ParseResponse
from app.services.assembler import PageNotFoundError, assemble_page
from app.services.parser import parse_output

logger = logging.getLogger(__name__)

limiter = Limiter(key_func=get_remote_address)
router = APIRouter(tags=["Assembly"])


@router.post("/parse", response_model=ParseResponse, summary="Parse a model response into files")
@limiter.limit("60/minute")
async def parse(request: Request, body: ParseRequest) -> ParseResponse:
    """Split raw model output into typed, path-addressed project files.

    Text without fenced code blocks yields an empty file list; the caller
    decides whether to fall back to a placeholder page.
    """
    files = parse_output(body.output)
    logger.info("Parsed model output", extra={"file_count": len(files)})
    return ParseResponse(files=files, file_count=len(files))


@router.post(
    "/assemble",
    response_class=HTMLResponse,
    summary="Assemble a self-contained HTML page",
    description=(
        "Resolves `<!-- include:... -->` directives, inlines every style and "
        "script file, and injects the base href and head metadata."
    ),
)
@limiter.limit("60/minute")
async def assemble(request: Request, body: AssembleRequest) -> HTMLResponse:
    try:
        html = assemble_page(body.page_path, body.files, body.project_name, body.metadata)
    except PageNotFoundError as exc:
        logger.warning("Assemble request for missing page: %s", exc.page_path)
        raise HTTPException(status_code=404, detail=str(exc))
    return HTMLResponse(html)
