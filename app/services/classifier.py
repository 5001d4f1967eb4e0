"""Turn raw fenced blocks into typed :class:`ProjectFile` objects.

The classification of HTML blocks depends on what came before them in the
same response (only the first HTML block is a page by default), so a
:class:`FileClassifier` is a fold over the ordered block sequence: create one
per parsed output and feed it every block in order.

Rules
-----
1. An explicit path hint is normalised and used as-is.  The language comes
   from the fence tag when it is recognised, otherwise from the path's
   extension, otherwise ``html``.
2. Without a hint, the first block of each language gets ``index.html``,
   ``styles.css`` or ``script.js``; later ones get ``page-N.html``,
   ``style-N.css`` or ``script-N.js``, skipping names already taken.
3. CSS is a ``style`` and JavaScript a ``script``.  An HTML block is a
   ``partial`` when its path says so (a segment containing ``partial`` or a
   basename starting with ``header``/``footer``); otherwise the first page
   and the root ``index.html`` are ``page`` and every other HTML block is a
   ``partial``.

Rule 3 means a second top-level page such as ``about.html`` is classified as
a partial.  This is a known limitation of the heuristic.
"""

import posixpath
from typing import Dict, Optional, Set

from app.models.project_file import FileType, Language, ProjectFile

_LANGUAGE_ALIASES: Dict[str, Language] = {
    "html": "html",
    "htm": "html",
    "xhtml": "html",
    "css": "css",
    "javascript": "javascript",
    "js": "javascript",
    "mjs": "javascript",
    "jsx": "javascript",
    "ecmascript": "javascript",
    "node": "javascript",
}

_EXTENSION_LANGUAGES: Dict[str, Language] = {
    ".html": "html",
    ".htm": "html",
    ".xhtml": "html",
    ".css": "css",
    ".js": "javascript",
    ".mjs": "javascript",
}

# (first default, pattern for the N-th path-less block of the same language)
_DEFAULT_PATHS: Dict[Language, tuple[str, str]] = {
    "html": ("index.html", "page-{n}.html"),
    "css": ("styles.css", "style-{n}.css"),
    "javascript": ("script.js", "script-{n}.js"),
}

_ROOT_INDEX = "index.html"
_PARTIAL_PREFIXES = ("header", "footer")


def normalize_path(path: str) -> str:
    """Return *path* as a clean, relative, forward-slash path ('' if nothing remains)."""
    path = path.strip().replace("\\", "/")
    while path.startswith("./"):
        path = path[2:]
    return path.lstrip("/")


def language_from_tag(tag: str) -> Optional[Language]:
    return _LANGUAGE_ALIASES.get(tag.strip().lower())


def language_from_path(path: str) -> Optional[Language]:
    _, ext = posixpath.splitext(path.lower())
    return _EXTENSION_LANGUAGES.get(ext)


def looks_like_partial(path: str) -> bool:
    """True when *path* names itself as an include-only fragment."""
    segments = path.lower().split("/")
    if any("partial" in segment for segment in segments):
        return True
    return segments[-1].startswith(_PARTIAL_PREFIXES)


class FileClassifier:
    """Stateful classifier for the blocks of a single model response."""

    def __init__(self) -> None:
        self.page_seen = False
        self.used_paths: Set[str] = set()
        self._pathless_counts: Dict[Language, int] = {}

    def classify(
        self,
        language_tag: str,
        path_hint: Optional[str],
        content: str,
        index: int,
    ) -> ProjectFile:
        """Classify the block at position *index* of the response.

        Never raises: unknown tags fall back to the path's extension and then
        to HTML.
        """
        tag_language = language_from_tag(language_tag or "")
        path = normalize_path(path_hint or "")

        if path:
            language = tag_language or language_from_path(path) or "html"
        else:
            language = tag_language or "html"
            path = self._default_path(language)

        file_type = self._file_type(language, path)
        self.used_paths.add(path)
        return ProjectFile(path=path, content=content, language=language, file_type=file_type)

    def _default_path(self, language: Language) -> str:
        count = self._pathless_counts.get(language, 0) + 1
        self._pathless_counts[language] = count
        first, pattern = _DEFAULT_PATHS[language]
        candidate = first if count == 1 else pattern.format(n=count)
        n = max(count, 2)
        while candidate in self.used_paths:
            candidate = pattern.format(n=n)
            n += 1
        return candidate

    def _file_type(self, language: Language, path: str) -> FileType:
        if language == "css":
            return "style"
        if language == "javascript":
            return "script"
        if looks_like_partial(path):
            return "partial"
        if not self.page_seen or path == _ROOT_INDEX:
            self.page_seen = True
            return "page"
        return "partial"
