"""Site build orchestration: generate → parse → fallback → save."""

import logging
import uuid
from datetime import datetime, timezone
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from app.models.project import ProjectRecord
from app.models.project_file import ProjectFile
from app.services.generator import Generate, build_site_prompt
from app.services.inline_assets import validate_file_structure
from app.services.parser import generate_fallback_html, parse_output
from app.services.store import ProjectStore

logger = logging.getLogger(__name__)

BuildStatus = Literal["pending", "running", "completed", "failed"]


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class BuildJob(BaseModel):
    job_id: str
    project_name: str
    description: str
    status: BuildStatus = "pending"
    progress: int = 0
    saved_paths: List[str] = Field(default_factory=list)
    used_fallback: bool = False
    error: Optional[str] = None
    logs: List[str] = Field(default_factory=list)

    def add_log(self, message: str) -> None:
        self.logs.append(f"[{_now()}] {message}")

    def advance(self, progress: int, message: str) -> None:
        self.progress = progress
        self.add_log(message)
        logger.info("Build %s: %s", self.job_id, message)


def fallback_files(description: str, job_id: str) -> List[ProjectFile]:
    return [
        ProjectFile(
            path="index.html",
            content=generate_fallback_html(description, job_id),
            language="html",
            file_type="page",
        )
    ]


async def build_site(
    store: ProjectStore,
    project_name: str,
    description: str,
    generate: Generate,
    job_id: Optional[str] = None,
) -> BuildJob:
    """Generate the files for *project_name* from *description* and save them.

    Generation failures never fail the build: when the model call errors or
    its answer contains no usable ``index.html``, a fallback page is saved
    instead.  Storage errors propagate to the caller.
    """
    job = BuildJob(
        job_id=job_id or uuid.uuid4().hex[:12],
        project_name=project_name,
        description=description,
    )
    job.status = "running"
    job.add_log(f"Job {job.job_id} created")

    record = store.get_project(project_name) or ProjectRecord(name=project_name, prompt=description)
    record = record.model_copy(update={"status": "generating", "error": None})
    store.save_project(record)

    job.advance(10, "Generating site...")
    files: List[ProjectFile] = []
    try:
        raw = await generate(build_site_prompt(description))
        files = parse_output(raw)
        job.add_log(f"Parsed {len(files)} file(s)")
    except Exception as exc:
        # Any failure of the model call falls back to the placeholder page
        logger.warning("Generation failed for %s: %s", project_name, exc)
        job.add_log(f"Main generation failed: {str(exc)[:200]}")

    problems = validate_file_structure(files)
    if problems:
        job.advance(85, "Creating fallback...")
        job.add_log("; ".join(problems))
        files = [f for f in files if f.path != "index.html"] + fallback_files(
            description, job.job_id
        )
        job.used_fallback = True

    job.advance(90, "Saving files...")
    try:
        job.saved_paths = store.save_files(project_name, files)
    except Exception as exc:
        job.status = "failed"
        job.error = str(exc)
        job.add_log(f"Build failed: {exc}")
        store.save_project(record.model_copy(update={"status": "error", "error": str(exc)}))
        raise

    store.save_project(record.model_copy(update={"status": "completed"}))
    job.status = "completed"
    job.advance(100, "Build complete")
    return job
