"""Recursive resolution of ``<!-- include:<path> -->`` directives."""

import re
from typing import AbstractSet, Dict, FrozenSet, Iterable, Tuple

from app.models.project_file import ProjectFile
from app.services.classifier import normalize_path

INCLUDE_RE = re.compile(r"<!--\s*include:\s*(\S+?)\s*-->")


def resolve_includes(
    html: str,
    files: Iterable[ProjectFile],
    visited: AbstractSet[str] = frozenset(),
) -> str:
    """Replace every include directive in *html* with the referenced file's content.

    Included content is resolved recursively.  A directive pointing at a
    missing file, or at a file already on the current include chain
    (*visited*), is replaced with an empty string, so resolution always
    terminates.  A partial whose expansion never reached a file on its own
    chain expands the same way from every chain, so it is resolved once per
    call and reused; one that did is reused only on the same chain.
    """
    index = {f.path: f for f in files}
    content, _ = _resolve(html, index, frozenset(visited), {}, {})
    return content


def _resolve(
    html: str,
    index: Dict[str, ProjectFile],
    visited: FrozenSet[str],
    resolved: Dict[str, str],
    resolved_on_chain: Dict[Tuple[str, FrozenSet[str]], str],
) -> Tuple[str, bool]:
    """Return the resolved *html* and whether a cyclic include was cut on the way."""
    cut = False

    def substitute(match: re.Match) -> str:
        nonlocal cut
        path = normalize_path(match.group(1))
        if path in visited:
            cut = True
            return ""
        if path in resolved:
            return resolved[path]
        if (path, visited) in resolved_on_chain:
            cut = True
            return resolved_on_chain[path, visited]
        partial = index.get(path)
        if partial is None:
            return ""
        content, partial_cut = _resolve(
            partial.content, index, visited | {path}, resolved, resolved_on_chain
        )
        if partial_cut:
            # Depends on the chain that reached it
            cut = True
            resolved_on_chain[path, visited] = content
        else:
            resolved[path] = content
        return content

    return INCLUDE_RE.sub(substitute, html), cut
