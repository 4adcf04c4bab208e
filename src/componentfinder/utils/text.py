"""Text helpers for keyword tokenization."""

from __future__ import annotations

import re
from typing import Iterable, Iterator, List

MIN_TOKEN_LENGTH = 2

_TOKEN_RE = re.compile(r"[^\W_]+")


def iter_tokens(text: str) -> Iterator[str]:
    """Yield lowercase alphanumeric runs of at least two characters."""
    if not text:
        return
    for match in _TOKEN_RE.finditer(text.lower()):
        token = match.group(0)
        if len(token) >= MIN_TOKEN_LENGTH:
            yield token


def tokenize(text: str) -> List[str]:
    return list(iter_tokens(text))


def unique_tokens(parts: Iterable[str]) -> List[str]:
    """Tokenize several strings, keeping first-seen order without repeats."""
    seen: dict[str, None] = {}
    for part in parts:
        for token in iter_tokens(part):
            seen.setdefault(token, None)
    return list(seen)
