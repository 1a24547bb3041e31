from __future__ import annotations

import re
from typing import Iterable, List, Optional
from urllib.parse import urljoin, urlparse

MAX_TAGS = 5

INLINE_SPACE_RE = re.compile(r"[^\S\n]+")
BLANK_LINES_RE = re.compile(r"\n{3,}")
SPACE_RE = re.compile(r"\s+")

# "Name - Rest" / "Name: Rest". A bare hyphen only separates when spaced, so "Jay-Z" survives.
LEADING_NAME_SEPARATOR_RE = re.compile(r"^([A-Z][A-Za-z0-9\s&.'-]+?)(?:\s+-\s*|\s*[–—:]\s*)")
LEADING_NAME_VERB_RE = re.compile(
    r"^([A-Z][A-Za-z0-9\s&.'-]+?)\s+"
    r"(?i:drops?|releases?|shares?|unveils?|announces?|returns?|debuts?|premieres?)\b"
)
QUOTED_RE = re.compile(r'"([^"]+)"|“([^”]+)”')
CREDIT_RE = re.compile(r"\b(?i:featuring|feat\.|ft\.|with|by)\s+([A-Z][A-Za-z0-9\s&.'-]{2,25})")


def clean_text(text: Optional[str]) -> str:
    """Collapse whitespace inside lines while keeping paragraph breaks.

    Runs of blank lines shrink to a single blank line and every line is
    trimmed, so "a\\n\\n\\nb" stays two paragraphs instead of one line.
    """
    if not text:
        return ""
    txt = text.replace("\r\n", "\n").replace("\r", "\n")
    lines = [INLINE_SPACE_RE.sub(" ", line).strip() for line in txt.split("\n")]
    txt = "\n".join(lines)
    return BLANK_LINES_RE.sub("\n\n", txt).strip()


def clean_line(text: Optional[str]) -> str:
    if not text:
        return ""
    return SPACE_RE.sub(" ", text).strip()


def _add_unique(tags: List[str], values: Iterable[str]) -> None:
    for value in values:
        tag = clean_line(value)
        if tag and tag not in tags:
            tags.append(tag)


def extract_tags(title: str) -> List[str]:
    """Guess artist-name tags from a headline.

    Leading "Name - ..." phrases come first, then "Name Drops ..." phrases,
    quoted names and finally names after featuring/ft./with/by. Results are
    heuristic and capped at MAX_TAGS.
    """
    if not title:
        return []
    tags: List[str] = []

    m = LEADING_NAME_SEPARATOR_RE.match(title)
    if m:
        _add_unique(tags, [m.group(1)])

    m = LEADING_NAME_VERB_RE.match(title)
    if m:
        _add_unique(tags, [m.group(1)])

    quoted = []
    for m in QUOTED_RE.finditer(title):
        name = (m.group(1) or m.group(2) or "").strip()
        if 2 < len(name) < 30:
            quoted.append(name)
    _add_unique(tags, quoted)

    _add_unique(tags, [m.group(1) for m in CREDIT_RE.finditer(title)])

    return tags[:MAX_TAGS]


def is_absolute_url(value: Optional[str]) -> bool:
    if not isinstance(value, str) or not value:
        return False
    parsed = urlparse(value.strip())
    return parsed.scheme in {"http", "https"} and bool(parsed.netloc)


def absolute_url(href: Optional[str], base_url: str) -> str:
    if not href:
        return ""
    href = href.strip()
    if is_absolute_url(href):
        return href
    return urljoin(base_url, href)
