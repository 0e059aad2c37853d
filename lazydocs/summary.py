"""Top-of-file one-line summary extraction used for entry descriptions."""

from __future__ import annotations

import re

from .analysis.jsdoc import is_doc_comment, parse_doc_comment

SUMMARY_MAX_CHARS = 160
MARKDOWN_EXTENSIONS = frozenset({"md", "mdx", "markdown"})

_MARKDOWN_MARKUP_RE = re.compile(r"(\*\*|__|`|\[([^\]]*)\]\([^)]*\))")


def _normalize_summary(text: str) -> str | None:
    """Normalize summary text to one short line."""
    candidate = " ".join(text.strip().split())
    if not candidate:
        return None
    if len(candidate) > SUMMARY_MAX_CHARS:
        return candidate[: SUMMARY_MAX_CHARS - 3].rstrip() + "..."
    return candidate


def _first_paragraph(lines: list[str]) -> str | None:
    paragraph: list[str] = []
    for line in lines:
        stripped = line.strip()
        if not stripped:
            if paragraph:
                break
            continue
        if stripped.startswith("@"):
            break
        paragraph.append(stripped)
    return _normalize_summary(" ".join(paragraph))


def _block_comment_summary(comment: str) -> str | None:
    """Summary of a leading ``/* */`` or ``/** */`` comment."""
    if is_doc_comment(comment):
        description, _tags = parse_doc_comment(comment)
        return _first_paragraph(description.splitlines()) if description else None
    return _first_paragraph([line.strip().lstrip("*") for line in comment[2:-2].splitlines()])


def _line_comment_summary(lines: list[str]) -> str | None:
    body: list[str] = []
    for line in lines:
        stripped = line.strip()
        if not stripped.startswith("//"):
            break
        body.append(stripped.lstrip("/"))
    return _first_paragraph(body)


def markdown_summary(text: str) -> str | None:
    """Return the first prose paragraph of a markdown document.

    Front matter, headings, import/export lines (MDX), HTML/JSX blocks, and
    fenced code are skipped.
    """
    lines = text.splitlines()
    idx = 0
    if lines and lines[0].strip() == "---":
        idx = 1
        while idx < len(lines) and lines[idx].strip() != "---":
            idx += 1
        idx += 1

    paragraph: list[str] = []
    in_fence = False
    for line in lines[idx:]:
        stripped = line.strip()
        if stripped.startswith(("```", "~~~")):
            in_fence = not in_fence
            continue
        if in_fence:
            continue
        if not stripped:
            if paragraph:
                break
            continue
        if not paragraph and stripped.startswith(("#", "import ", "export ", "<", "{", "|", ">")):
            continue
        paragraph.append(stripped)

    if not paragraph:
        return None
    return _normalize_summary(_MARKDOWN_MARKUP_RE.sub(lambda match: match.group(2) or "", " ".join(paragraph)))


def source_summary(text: str) -> str | None:
    """Return the leading comment of a JavaScript or TypeScript module.

    A shebang line is skipped. Only the comment's first paragraph is kept,
    and a doc comment that opens with a tag has no summary.
    """
    lines = text.lstrip("\ufeff").splitlines()
    idx = 0
    if lines and lines[0].startswith("#!"):
        idx = 1
    while idx < len(lines) and not lines[idx].strip():
        idx += 1
    if idx >= len(lines):
        return None

    first = lines[idx].lstrip()
    if first.startswith("/*"):
        rest = "\n".join(lines[idx:]).lstrip()
        end = rest.find("*/", 2)
        if end < 0:
            return None
        return _block_comment_summary(rest[: end + 2])
    if first.startswith("//"):
        return _line_comment_summary(lines[idx:])
    return None


def text_summary(text: str, extension: str | None) -> str | None:
    """Pick the summary strategy for a file's extension."""
    if "\x00" in text[:4096]:
        return None
    if extension is not None and extension.lower() in MARKDOWN_EXTENSIONS:
        return markdown_summary(text)
    return source_summary(text)


__all__ = [
    "MARKDOWN_EXTENSIONS",
    "markdown_summary",
    "source_summary",
    "text_summary",
]
