"""Assemble one self-contained HTML document from a project's file set.

The assembler works by targeted string substitution rather than a DOM
transform:

1. include directives are resolved (see :mod:`app.services.includes`);
2. the document is given an ``<html>``/``<head>``/``<body>`` skeleton where
   any of them is missing;
3. head and body injections are collected into ordered lists (base href,
   favicon and SEO tags, style blocks, script blocks);
4. a single rendering pass inserts the collected blocks.

Every ``style`` file is inlined as ``<style data-file="<path>">`` in the head
and every ``script`` file as ``<script data-file="<path>">`` at the end of the
body, so the result needs no further requests for project assets.
"""

import re
from dataclasses import dataclass, field
from html import escape
from typing import Dict, Iterable, List, Optional, Sequence

from app.models.metadata import PageMetadata, SeoFields
from app.models.project_file import ProjectFile
from app.services.classifier import normalize_path
from app.services.includes import resolve_includes

RESULTS_PREFIX = "/results"

_DOCTYPE_RE = re.compile(r"^\s*<!DOCTYPE[^>]*>", re.IGNORECASE)
_HTML_OPEN_RE = re.compile(r"<html\b[^>]*>", re.IGNORECASE)
_HTML_CLOSE_RE = re.compile(r"</html\s*>", re.IGNORECASE)
_HEAD_OPEN_RE = re.compile(r"<head\b[^>]*>", re.IGNORECASE)
_HEAD_CLOSE_RE = re.compile(r"</head\s*>", re.IGNORECASE)
_BODY_OPEN_RE = re.compile(r"<body\b[^>]*>", re.IGNORECASE)
_BODY_CLOSE_RE = re.compile(r"</body\s*>", re.IGNORECASE)
_BASE_RE = re.compile(r"<base\b[^>]*>", re.IGNORECASE)
_TITLE_RE = re.compile(r"<title\b[^>]*>.*?</title\s*>", re.IGNORECASE | re.DOTALL)
_LINK_RE = re.compile(r"<link\b[^>]*>", re.IGNORECASE)
_META_RE = re.compile(r"<meta\b[^>]*>", re.IGNORECASE)
_EXTERNAL_SCRIPT_RE = re.compile(r"<script\b([^>]*)>\s*</script\s*>", re.IGNORECASE)
_ATTR_RE = re.compile(r"""([\w:-]+)\s*=\s*(?:"([^"]*)"|'([^']*)'|([^\s"'>]+))""")


class PageNotFoundError(LookupError):
    """Raised when the requested page is not part of the file set."""

    def __init__(self, page_path: str):
        super().__init__(f"Page '{page_path}' is not in the project's file set.")
        self.page_path = page_path


@dataclass
class _Injections:
    head_start: List[str] = field(default_factory=list)
    head_end: List[str] = field(default_factory=list)
    body_end: List[str] = field(default_factory=list)


def base_href(project_name: str) -> str:
    return f"{RESULTS_PREFIX}/{project_name}/"


def assemble_page(
    page_path: str,
    files: Sequence[ProjectFile],
    project_name: Optional[str] = None,
    metadata: Optional[PageMetadata] = None,
) -> str:
    """Return the final HTML for *page_path*.

    Args:
        page_path:    Path of the page to render; must exist in *files*.
        files:        The project's full file set.
        project_name: When given, a ``<base href="/results/<name>/">`` is
                      injected so relative URLs resolve under that prefix.
        metadata:     Optional favicon and SEO defaults / per-page overrides.

    Raises:
        PageNotFoundError: if *page_path* is not in *files*.
    """
    page_path = normalize_path(page_path)
    page = next((f for f in files if f.path == page_path), None)
    if page is None:
        raise PageNotFoundError(page_path)

    html = resolve_includes(page.content, files, frozenset({page.path}))
    html = ensure_skeleton(html)

    styles = [f for f in files if f.file_type == "style"]
    scripts = [f for f in files if f.file_type == "script"]
    html = _drop_asset_references(html, {f.path for f in styles}, {f.path for f in scripts})

    injections = _Injections()

    if project_name:
        base = f'<base href="{escape(base_href(project_name))}">'
        if _BASE_RE.search(html):
            # Relative asset URLs only resolve against the results route
            html = _BASE_RE.sub(lambda _: base, html, count=1)
        else:
            injections.head_start.append(base)

    if metadata is not None:
        html = _collect_metadata(html, page.path, metadata, injections)

    for style in styles:
        injections.head_end.append(
            f'<style data-file="{escape(style.path)}">{style.content}</style>'
        )
    for script in scripts:
        injections.body_end.append(
            f'<script data-file="{escape(script.path)}">{script.content}</script>'
        )

    return _render(html, injections)


def ensure_skeleton(html: str) -> str:
    """Return *html* with ``<html>``, ``<head>`` and ``<body>`` elements present."""
    if not _HTML_OPEN_RE.search(html):
        doctype = _DOCTYPE_RE.match(html)
        prefix = doctype.group(0) if doctype else ""
        rest = html[len(prefix):]
        if not _BODY_OPEN_RE.search(rest) and not _HEAD_OPEN_RE.search(rest):
            rest = f"<body>{rest}</body>"
        html = f"{prefix}<html>{rest}</html>"

    if not _HEAD_OPEN_RE.search(html):
        body = _BODY_OPEN_RE.search(html)
        if body:
            pos = body.start()
        else:
            pos = _HTML_OPEN_RE.search(html).end()
        html = f"{html[:pos]}<head></head>{html[pos:]}"

    if not _BODY_OPEN_RE.search(html):
        head_close = _HEAD_CLOSE_RE.search(html)
        html_close = _last(_HTML_CLOSE_RE, html)
        end = html_close.start() if html_close else len(html)
        if head_close and head_close.end() <= end:
            start = head_close.end()
            html = f"{html[:start]}<body>{html[start:end]}</body>{html[end:]}"
        else:
            html = f"{html[:end]}<body></body>{html[end:]}"

    return html


def _last(pattern: re.Pattern, text: str) -> Optional[re.Match]:
    match = None
    for match in pattern.finditer(text):
        pass
    return match


def _attrs(tag: str) -> Dict[str, str]:
    attrs = {}
    for name, dq, sq, bare in _ATTR_RE.findall(tag):
        attrs[name.lower()] = dq or sq or bare
    return attrs


def _drop_asset_references(html: str, style_paths: set, script_paths: set) -> str:
    """Remove ``<link>``/``<script src>`` references to files that are being inlined."""

    def drop_link(match: re.Match) -> str:
        attrs = _attrs(match.group(0))
        rel = attrs.get("rel", "").lower().split()
        if "stylesheet" in rel and normalize_path(attrs.get("href", "")) in style_paths:
            return ""
        return match.group(0)

    def drop_script(match: re.Match) -> str:
        src = _attrs(match.group(1)).get("src")
        if src is not None and normalize_path(src) in script_paths:
            return ""
        return match.group(0)

    html = _LINK_RE.sub(drop_link, html)
    return _EXTERNAL_SCRIPT_RE.sub(drop_script, html)


def _remove_tags(html: str, pattern: re.Pattern, predicate) -> str:
    return pattern.sub(lambda m: "" if predicate(_attrs(m.group(0))) else m.group(0), html)


def _meta(attr: str, key: str, value: str) -> str:
    return f'<meta {attr}="{key}" content="{escape(value)}">'


def _collect_metadata(
    html: str, page_path: str, metadata: PageMetadata, injections: _Injections
) -> str:
    """Queue favicon/SEO tags, removing the ones they replace; return the updated html."""
    if metadata.favicon:
        html = _remove_tags(
            html, _LINK_RE, lambda a: "icon" in a.get("rel", "").lower().split()
        )
        injections.head_end.append(f'<link rel="icon" href="{escape(metadata.favicon)}">')

    seo: SeoFields = metadata.seo_for(page_path)
    properties: List[tuple[str, str]] = []

    if seo.title:
        title_tag = f"<title>{escape(seo.title)}</title>"
        if _TITLE_RE.search(html):
            html = _TITLE_RE.sub(lambda _: title_tag, html, count=1)
        else:
            injections.head_end.append(title_tag)
        properties.append(("og:title", seo.title))

    if seo.description:
        html = _remove_tags(
            html, _META_RE, lambda a: a.get("name", "").lower() == "description"
        )
        injections.head_end.append(_meta("name", "description", seo.description))
        properties.append(("og:description", seo.description))

    if seo.og_image:
        properties.append(("og:image", seo.og_image))

    replaced = {key for key, _ in properties}
    if replaced:
        html = _remove_tags(html, _META_RE, lambda a: a.get("property", "").lower() in replaced)
    for key, value in properties:
        injections.head_end.append(_meta("property", key, value))

    return html


def _insert(html: str, inserts: Iterable[tuple[int, str]]) -> str:
    # Apply from the back so earlier offsets stay valid
    for pos, block in sorted(inserts, key=lambda item: item[0], reverse=True):
        html = f"{html[:pos]}{block}{html[pos:]}"
    return html


def _render(html: str, injections: _Injections) -> str:
    head_open = _HEAD_OPEN_RE.search(html)
    head_close = _HEAD_CLOSE_RE.search(html)
    body_open = _BODY_OPEN_RE.search(html)
    body_close = _last(_BODY_CLOSE_RE, html)
    html_close = _last(_HTML_CLOSE_RE, html)

    head_start_pos = head_open.end()
    if head_close:
        head_end_pos = head_close.start()
    elif body_open:
        head_end_pos = body_open.start()
    else:
        head_end_pos = head_start_pos

    if body_close:
        body_end_pos = body_close.start()
    elif html_close:
        body_end_pos = html_close.start()
    else:
        body_end_pos = len(html)

    inserts = []
    if injections.body_end:
        inserts.append((body_end_pos, "".join(injections.body_end)))
    if injections.head_end:
        inserts.append((head_end_pos, "".join(injections.head_end)))
    if injections.head_start:
        inserts.append((head_start_pos, "".join(injections.head_start)))
    return _insert(html, inserts)
