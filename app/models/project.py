import time
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from app.models.metadata import PageMetadata, PageSeo, SeoFields

ProjectStatus = Literal["pending", "generating", "completed", "error"]


class ProjectRecord(BaseModel):
    """Persisted project metadata, as kept by the project store."""

    name: str
    prompt: str = ""
    status: ProjectStatus = "pending"
    is_published: bool = False
    favicon: Optional[str] = None
    global_seo: Optional[SeoFields] = None
    seo_data: List[PageSeo] = Field(default_factory=list)
    html: Optional[str] = None  # legacy single-file projects
    error: Optional[str] = None
    created_at: float = Field(default_factory=time.time)

    def metadata(self) -> PageMetadata:
        return PageMetadata(
            favicon=self.favicon,
            global_seo=self.global_seo,
            seo_data=self.seo_data,
        )
