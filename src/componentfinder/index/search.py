"""Keyword search primitives: hits, ranking and cancellation."""

from __future__ import annotations

import threading
import time
from bisect import bisect_left
from dataclasses import dataclass
from typing import Iterable, List, Sequence

from componentfinder.errors import SearchCancelled
from componentfinder.models import ComponentRecord

DEFAULT_PAGE_SIZE = 50
MAX_PAGE_SIZE = 200

# Weight of a query token found in the path relative to one found only in content.
PATH_WEIGHT = 2


@dataclass(frozen=True, slots=True)
class SearchHit:
    record: ComponentRecord
    score: int
    path_matches: int

    @property
    def path(self) -> str:
        return self.record.path


def rank_key(hit: SearchHit) -> tuple[int, int, str]:
    """More path matches first, then shorter paths, then path order."""
    return (-hit.path_matches, len(hit.path), hit.path)


def rank(hits: Iterable[SearchHit]) -> List[SearchHit]:
    return sorted(hits, key=rank_key)


def score_hit(record: ComponentRecord, path_matches: int, token_count: int) -> SearchHit:
    content_only = token_count - path_matches
    return SearchHit(
        record=record,
        score=path_matches * PATH_WEIGHT + content_only,
        path_matches=path_matches,
    )


def clamp_page_size(limit: int | None) -> int:
    if limit is None:
        return DEFAULT_PAGE_SIZE
    return max(1, min(int(limit), MAX_PAGE_SIZE))


def expand_prefix(vocabulary: Sequence[str], token: str) -> List[str]:
    """Return every vocabulary entry starting with token.

    ``vocabulary`` must be sorted.
    """
    start = bisect_left(vocabulary, token)
    matches: List[str] = []
    for index in range(start, len(vocabulary)):
        candidate = vocabulary[index]
        if not candidate.startswith(token):
            break
        matches.append(candidate)
    return matches


class SearchBudget:
    """Cancellation flag plus optional deadline checked during a search."""

    def __init__(
        self,
        query: str,
        *,
        cancel: threading.Event | None = None,
        timeout: float | None = None,
    ) -> None:
        self.query = query
        self.cancel = cancel
        self.deadline = time.monotonic() + timeout if timeout is not None else None

    def expired(self) -> bool:
        if self.cancel is not None and self.cancel.is_set():
            return True
        return self.deadline is not None and time.monotonic() >= self.deadline

    def check(self) -> None:
        if self.expired():
            raise SearchCancelled(self.query)
