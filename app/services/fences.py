"""Fenced code-block extraction from free-form model output.

A block opens on a line starting with three backticks, optionally followed by
an info string of the form ``<language>[:<path>]``, and closes on a line that
is exactly three backticks.  Everything in between is the block content.

Nested fences are not supported: once a block is open, any line other than a
bare closing fence is content.  A block that is never closed is dropped.
"""

from typing import Iterator, NamedTuple, Optional

_FENCE = "```"


class FenceMatch(NamedTuple):
    language: str
    path: Optional[str]
    content: str


def _parse_info(info: str) -> tuple[str, Optional[str]]:
    """Split an info string like ``html:partials/nav.html`` into (language, path)."""
    language, sep, path = info.partition(":")
    language = language.strip()
    path = path.strip() if sep else ""
    return language, path or None


def iter_fences(text: str) -> Iterator[FenceMatch]:
    """Yield each complete fenced block in *text*, in order of appearance."""
    in_fence = False
    info = ""
    lines: list[str] = []

    for line in text.splitlines(keepends=True):
        stripped = line.strip()
        if not in_fence:
            if stripped.startswith(_FENCE):
                in_fence = True
                info = stripped[len(_FENCE):]
                lines = []
            continue

        if stripped == _FENCE:
            content = "".join(lines)
            # The newline that terminates the last content line belongs to the fence
            if content.endswith("\r\n"):
                content = content[:-2]
            elif content.endswith("\n"):
                content = content[:-1]
            language, path = _parse_info(info)
            yield FenceMatch(language=language, path=path, content=content)
            in_fence = False
            continue

        lines.append(line)
