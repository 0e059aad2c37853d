"""Documentation-comment parsing for ``/** ... */`` blocks."""

from __future__ import annotations

import re

from .types import Tag

_TAG_RE = re.compile(r"^@(?P<name>[A-Za-z][\w-]*)\s*(?P<text>.*)$")


def is_doc_comment(text: str) -> bool:
    return text.startswith("/**") and not text.startswith("/***") and text.endswith("*/")


def _comment_lines(text: str) -> list[str]:
    """Strip the comment delimiters and leading ``*`` gutters."""
    body = text[3:-2]
    lines: list[str] = []
    for raw_line in body.splitlines():
        line = raw_line.strip()
        if line.startswith("*"):
            line = line[1:]
            if line.startswith(" "):
                line = line[1:]
        lines.append(line.rstrip())
    while lines and not lines[0].strip():
        lines.pop(0)
    while lines and not lines[-1].strip():
        lines.pop()
    return lines


def parse_doc_comment(text: str) -> tuple[str | None, tuple[Tag, ...]]:
    """Return ``(description, tags)`` from a documentation comment.

    The description is everything before the first tag, with paragraph
    line breaks kept. Tag text may continue over several lines; ``@example``
    keeps its line breaks so code samples survive.
    """
    if not is_doc_comment(text):
        return None, ()

    description_lines: list[str] = []
    tags: list[tuple[str, list[str]]] = []
    for line in _comment_lines(text):
        match = _TAG_RE.match(line.strip())
        if match is not None:
            tags.append((match.group("name"), [match.group("text")]))
            continue
        if tags:
            tags[-1][1].append(line)
        else:
            description_lines.append(line)

    description = "\n".join(description_lines).strip() or None
    parsed_tags: list[Tag] = []
    for name, lines in tags:
        if name == "example":
            tag_text = "\n".join(lines).strip()
        else:
            tag_text = " ".join(part.strip() for part in lines if part.strip())
        parsed_tags.append(Tag(tag_name=name, text=tag_text or None))
    return description, tuple(parsed_tags)


__all__ = ["is_doc_comment", "parse_doc_comment"]
