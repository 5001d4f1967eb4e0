from typing import List, Optional

from pydantic import BaseModel, Field


class SeoFields(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    og_image: Optional[str] = None


class PageSeo(SeoFields):
    """SEO override for a single page, matched by ``path``."""

    path: str


class PageMetadata(BaseModel):
    """Optional head metadata injected by the page assembler."""

    favicon: Optional[str] = Field(
        default=None,
        description="Favicon URL, project-relative path, or data URI.",
    )
    global_seo: Optional[SeoFields] = None
    seo_data: List[PageSeo] = Field(default_factory=list)

    def seo_for(self, path: str) -> SeoFields:
        """Merge the override for *path* over the global defaults, field by field."""
        base = self.global_seo or SeoFields()
        override = next((s for s in self.seo_data if s.path == path), None)
        if override is None:
            return base
        return SeoFields(
            title=override.title or base.title,
            description=override.description or base.description,
            og_image=override.og_image or base.og_image,
        )
