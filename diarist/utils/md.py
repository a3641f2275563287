#!/usr/bin/env python3
"""
md.py
-------------------
Markdown text helpers used when turning a source file into a diary entry.

Functions:
    split_lines: Split on newline and CRLF only
    split_frontmatter: Separate a leading YAML frontmatter block from the body
    strip_frontmatter: Drop frontmatter and normalize line endings
    count_words: Whitespace-delimited token count
    is_blank: True for empty or whitespace-only text
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import re
from typing import List, Tuple

# --- Third party imports ---
import yaml


FRONTMATTER_DELIMITER = "---"
BYTE_ORDER_MARK = "\ufeff"

_LINE_BREAK = re.compile(r"\r?\n")


def split_lines(content: str) -> List[str]:
    """
    Split on ``\\n`` and ``\\r\\n`` only.

    Form feeds and other Unicode separators stay inside their line; a
    trailing newline does not produce an empty last line.
    """
    lines = _LINE_BREAK.split(content)
    if lines[-1] == "":
        lines.pop()
    return lines


def split_frontmatter(content: str) -> Tuple[str, List[str]]:
    """
    Split markdown content into YAML frontmatter and body.

    Expected format:
        ---
        tags:
          - reflections
        ---

        Body content here...

    Args:
        content: Full markdown file content

    Returns:
        Tuple of (frontmatter_text, body_lines)
        - frontmatter_text: YAML content as string (empty if no frontmatter)
        - body_lines: Body lines, leading blank lines removed when
          frontmatter was found

    Examples:
        >>> fm, body = split_frontmatter("---\\ndate: 2024-01-15\\n---\\n\\nBody text")
        >>> fm
        'date: 2024-01-15'
        >>> body
        ['Body text']
    """
    lines = split_lines(content)

    if not lines or lines[0].strip() != FRONTMATTER_DELIMITER:
        return "", lines

    frontmatter_end = None
    for i, line in enumerate(lines[1:], 1):
        if line.strip() == FRONTMATTER_DELIMITER:
            frontmatter_end = i
            break

    if frontmatter_end is None:
        return "", lines

    frontmatter_lines = lines[1:frontmatter_end]
    body_lines = lines[frontmatter_end + 1 :]

    while body_lines and body_lines[0].strip() == "":
        body_lines.pop(0)

    return "\n".join(frontmatter_lines), body_lines


def _is_yaml_mapping(text: str) -> bool:
    try:
        return isinstance(yaml.safe_load(text), dict)
    except (yaml.YAMLError, ValueError):
        # ValueError: implicit timestamps that are not dates (2024-13-45)
        return False


def strip_frontmatter(content: str) -> str:
    """
    Normalize raw diary text for storage.

    A leading ``---`` block is removed only when it parses as a YAML
    mapping; a horizontal rule followed by prose is left alone. Lines are
    re-joined with ``\\n``, so ``\\r\\n`` endings and the trailing newline
    disappear. A leading byte order mark is dropped.

    Examples:
        >>> strip_frontmatter("---\\ntags:\\n  - reflections\\n---\\n##Actual content")
        '##Actual content'
        >>> strip_frontmatter("One two\\r\\nthree\\n")
        'One two\\nthree'
    """
    if content.startswith(BYTE_ORDER_MARK):
        content = content[len(BYTE_ORDER_MARK) :]
    frontmatter, body_lines = split_frontmatter(content)
    if frontmatter and _is_yaml_mapping(frontmatter):
        return "\n".join(body_lines)
    return "\n".join(split_lines(content))


def count_words(text: str) -> int:
    """Count maximal runs of non-whitespace characters."""
    return len(text.split())


def is_blank(text: str) -> bool:
    """True when ``text`` is empty or contains only whitespace."""
    return not text or not text.strip()
