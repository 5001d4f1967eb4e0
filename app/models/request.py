from typing import List, Optional

from pydantic import BaseModel, Field

from app.models.metadata import PageMetadata, PageSeo, SeoFields
from app.models.project_file import ProjectFile

# Project names become a URL segment under /results/<name>/
_PROJECT_NAME_PATTERN = r"^[a-z0-9][a-z0-9-]{0,62}$"


class ParseRequest(BaseModel):
    output: str = Field(description="Raw model response containing fenced code blocks.")


class AssembleRequest(BaseModel):
    page_path: str = "index.html"
    files: List[ProjectFile]
    project_name: Optional[str] = Field(
        default=None,
        description="When set, a <base href=\"/results/<project_name>/\"> is injected.",
    )
    metadata: Optional[PageMetadata] = None


class ProjectCreateRequest(BaseModel):
    name: str = Field(pattern=_PROJECT_NAME_PATTERN)
    prompt: str = ""
    is_published: bool = False
    favicon: Optional[str] = None
    global_seo: Optional[SeoFields] = None
    seo_data: List[PageSeo] = Field(default_factory=list)


class OutputUploadRequest(BaseModel):
    output: str
    description: Optional[str] = Field(
        default=None,
        description="Used for the fallback page when no file could be parsed.",
    )


class BuildRequest(BaseModel):
    description: str = Field(min_length=1, max_length=4000)
    project_name: Optional[str] = Field(default=None, pattern=_PROJECT_NAME_PATTERN)
