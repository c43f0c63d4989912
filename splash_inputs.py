from __future__ import annotations

from pathlib import Path
from typing import Iterable

COMMENT_PREFIX = "#"


def _is_splash(line: str) -> bool:
    return bool(line) and not line.startswith(COMMENT_PREFIX)


def parse_splash_lines(text: str) -> tuple[str, ...]:
    """Parse newline-separated splashes.

    Any newline convention is accepted. Whitespace is trimmed; empty lines
    and `#` comments are ignored.
    """

    stripped = (line.strip() for line in text.splitlines())
    return tuple(line for line in stripped if _is_splash(line))


def clean_local_splashes(values: Iterable[object]) -> tuple[str, ...]:
    """Clean a user-edited splash list (non-strings, blanks and comments dropped)."""

    cleaned: list[str] = []
    for value in values:
        if not isinstance(value, str):
            continue
        trimmed = value.strip()
        if _is_splash(trimmed):
            cleaned.append(trimmed)
    return tuple(cleaned)


def load_splashes_from_file(path: Path) -> tuple[str, ...]:
    """Load splashes from a text file (one splash per line)."""

    return parse_splash_lines(path.read_text(encoding="utf-8-sig"))
