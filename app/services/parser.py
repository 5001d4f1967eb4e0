"""Parse a model response into an ordered set of :class:`ProjectFile` objects."""

import html
import re
from pathlib import Path
from typing import TYPE_CHECKING, List

from app.models.project_file import ProjectFile
from app.services.classifier import FileClassifier
from app.services.fences import iter_fences

if TYPE_CHECKING:
    from app.services.store import ProjectStore

# First fenced block anywhere in the text, used by strip_code_fence
_FIRST_BLOCK_RE = re.compile(r"```[^\n`]*\n(.*?)\n```", re.DOTALL)
_LEADING_FENCE_RE = re.compile(r"^```[^\n]*\n?")
_TRAILING_FENCE_RE = re.compile(r"\n?```$")


def parse_output(raw: str) -> List[ProjectFile]:
    """Return the files declared in *raw*, in order of appearance.

    Blocks that are empty after trimming are skipped.  When two blocks claim
    the same path, the first one wins.  Text without fenced blocks yields an
    empty list.
    """
    classifier = FileClassifier()
    files: List[ProjectFile] = []
    seen: set[str] = set()

    for index, match in enumerate(iter_fences(raw)):
        content = match.content.strip()
        if not content:
            continue
        project_file = classifier.classify(match.language, match.path, content, index)
        if project_file.path in seen:
            continue
        seen.add(project_file.path)
        files.append(project_file)

    return files


def save_parsed_output(store: "ProjectStore", project_name: str, raw: str) -> List[str]:
    """Parse *raw* and persist the files under *project_name*; return the saved paths."""
    files = parse_output(raw)
    if not files:
        return []
    return store.save_files(project_name, files)


def _is_safe_relative(path: str) -> bool:
    parts = Path(path).parts
    return bool(parts) and not Path(path).is_absolute() and ".." not in parts


def write_parsed_output(raw: str, output_dir: Path) -> List[str]:
    """Write the files parsed from *raw* below *output_dir*.

    Paths that are absolute or climb out of *output_dir* are skipped.  When
    no ``index.html`` was written, the last HTML block becomes ``index.html``.

    Returns the relative paths written, in order.
    """
    output_dir = Path(output_dir)
    files = parse_output(raw)
    saved: List[str] = []

    for project_file in files:
        if not _is_safe_relative(project_file.path):
            continue
        target = output_dir / project_file.path
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(project_file.content, encoding="utf-8")
        saved.append(project_file.path)

    if "index.html" not in saved:
        html_files = [f for f in files if f.language == "html"]
        if html_files:
            (output_dir / "index.html").write_text(html_files[-1].content, encoding="utf-8")
            saved.append("index.html")

    return saved


def strip_code_fence(text: str) -> str:
    """Return the body of the first fenced block in *text*, or *text* without stray fences."""
    if not text:
        return ""
    match = _FIRST_BLOCK_RE.search(text)
    if match:
        return match.group(1).strip()
    cleaned = text.strip()
    cleaned = _LEADING_FENCE_RE.sub("", cleaned)
    cleaned = _TRAILING_FENCE_RE.sub("", cleaned)
    return cleaned.strip()


_FALLBACK_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>Site {job_id}</title>
    <style>
        * {{ margin: 0; padding: 0; box-sizing: border-box; }}
        body {{
            font-family: Georgia, serif;
            background: #1a1a1a;
            color: #f5f5f5;
            line-height: 1.6;
        }}
        .hero {{
            min-height: 100vh;
            display: flex;
            flex-direction: column;
            justify-content: center;
            align-items: center;
            text-align: center;
            padding: 2rem;
        }}
        h1 {{
            font-size: clamp(2.5rem, 5vw, 4rem);
            margin-bottom: 1rem;
            color: #e8934c;
        }}
        p {{ max-width: 600px; opacity: 0.9; }}
    </style>
</head>
<body>
    <section class="hero">
        <h1>Welcome</h1>
        <p>{description}</p>
    </section>
</body>
</html>
"""


def generate_fallback_html(description: str, job_id: str) -> str:
    """Return a minimal standalone page used when generation produced nothing usable.

    Both *description* and *job_id* are HTML-escaped.
    """
    return _FALLBACK_TEMPLATE.format(
        job_id=html.escape(job_id),
        description=html.escape(description),
    )
