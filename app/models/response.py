from typing import List

from pydantic import BaseModel

from app.models.project_file import ParsedOutput


class ParseResponse(ParsedOutput):
    file_count: int


class SaveResponse(BaseModel):
    project_name: str
    saved_paths: List[str]
    used_fallback: bool = False


class BuildResponse(BaseModel):
    job_id: str
    project_name: str
    status: str
    progress: int
    saved_paths: List[str]
    used_fallback: bool
    logs: List[str]
