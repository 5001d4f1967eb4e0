from typing import List, Literal

from pydantic import BaseModel, ConfigDict, field_validator

Language = Literal["html", "css", "javascript"]
FileType = Literal["page", "partial", "style", "script"]


class ProjectFile(BaseModel):
    """One generated file, addressed by its project-relative path."""

    model_config = ConfigDict(frozen=True)

    path: str
    content: str
    language: Language
    file_type: FileType

    @field_validator("path")
    @classmethod
    def _check_path(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("path must not be empty")
        if value.startswith("/"):
            raise ValueError("path must be relative (no leading '/')")
        return value


class ParsedOutput(BaseModel):
    """Files parsed from one model response, in order of appearance."""

    model_config = ConfigDict(frozen=True)

    files: List[ProjectFile]

    @property
    def paths(self) -> List[str]:
        return [f.path for f in self.files]
