"""Split single-file pages into separate page, style and script files.

Older projects (and models that ignore the multi-file convention) produce one
HTML document with inline ``<style>`` and ``<script>`` elements.  These helpers
move that inline code into ``styles.css`` / ``script.js`` so the page can be
edited and assembled like any other multi-file project.
"""

from typing import List, NamedTuple

from bs4 import BeautifulSoup

from app.models.project_file import ProjectFile

STYLES_PATH = "styles.css"
SCRIPT_PATH = "script.js"


class InlineAssets(NamedTuple):
    clean_html: str
    styles: str
    scripts: str


def extract_inline_assets(html: str) -> InlineAssets:
    """Move inline styles and src-less scripts out of *html*.

    References to the extracted files are added in their place: a stylesheet
    link in the head and a deferred script at the end of the body.
    """
    soup = BeautifulSoup(html, "lxml")
    styles: List[str] = []
    scripts: List[str] = []

    for tag in soup.find_all("style"):
        styles.append(tag.get_text())
        tag.decompose()

    for tag in soup.find_all("script"):
        if tag.get("src"):
            continue
        scripts.append(tag.get_text())
        tag.decompose()

    if styles:
        link = soup.new_tag("link", rel="stylesheet", href=STYLES_PATH)
        (soup.head or soup).append(link)

    if scripts:
        script = soup.new_tag("script", src=SCRIPT_PATH, defer="")
        (soup.body or soup).append(script)

    return InlineAssets(
        clean_html=str(soup),
        styles="\n".join(s.strip() for s in styles).strip(),
        scripts="\n".join(s.strip() for s in scripts).strip(),
    )


def split_single_page(html: str, page_path: str = "index.html") -> List[ProjectFile]:
    """Turn a single self-contained page into page + style + script files."""
    assets = extract_inline_assets(html)
    files = [
        ProjectFile(path=page_path, content=assets.clean_html, language="html", file_type="page")
    ]
    if assets.styles:
        files.append(
            ProjectFile(path=STYLES_PATH, content=assets.styles, language="css", file_type="style")
        )
    if assets.scripts:
        files.append(
            ProjectFile(
                path=SCRIPT_PATH, content=assets.scripts, language="javascript", file_type="script"
            )
        )
    return files


def validate_file_structure(files: List[ProjectFile]) -> List[str]:
    """Return a list of structural problems with *files* (empty when valid)."""
    errors: List[str] = []
    paths = {f.path for f in files}
    if "index.html" not in paths:
        errors.append("Missing index.html")
    elif next(f for f in files if f.path == "index.html").file_type != "page":
        errors.append("index.html is not a page")
    return errors
