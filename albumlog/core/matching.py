"""Candidate scoring: pick the search hit that best matches title + artist.

Strings are normalized (lower-case, no whitespace, no common punctuation)
before comparison. Title weighs 60, artist 40; an exact match earns the full
weight and substring containment in either direction a partial one. Only a
best score at or above the threshold is accepted, so a weak guess yields no
match at all.
"""
import re
from typing import List, Optional, Tuple

from albumlog.config import MATCH_THRESHOLD
from albumlog.models.metadata import Candidate

TITLE_EXACT = 60
TITLE_PARTIAL = 35
ARTIST_EXACT = 40
ARTIST_PARTIAL = 20

_WHITESPACE_RE = re.compile(r"\s+")
_PUNCT_RE = re.compile(r"[\[\]()'\".,!?·\-_/]")


def normalize(text: Optional[str]) -> str:
    """Lower-case and strip whitespace and punctuation."""
    text = _WHITESPACE_RE.sub("", (text or "").lower())
    return _PUNCT_RE.sub("", text)


def _field_score(query: str, value: str, exact: int, partial: int) -> int:
    if not query or not value:
        return 0
    if value == query:
        return exact
    if query in value or value in query:
        return partial
    return 0


def score_candidate(title: str, artist: str, candidate: Candidate) -> int:
    """Score 0-100 for how well candidate matches the query."""
    return _field_score(
        normalize(title), normalize(candidate.title), TITLE_EXACT, TITLE_PARTIAL
    ) + _field_score(
        normalize(artist), normalize(candidate.artist), ARTIST_EXACT, ARTIST_PARTIAL
    )


def best_candidate(
    candidates: List[Candidate],
    title: str,
    artist: str,
    threshold: int = MATCH_THRESHOLD,
) -> Optional[Tuple[Candidate, int]]:
    """Return (candidate, score) for the best hit at or above threshold, else None.

    Ties keep the earliest candidate, so providers can pre-order by preference.
    """
    best: Optional[Candidate] = None
    best_score = -1
    for c in candidates:
        s = score_candidate(title, artist, c)
        if s > best_score:
            best, best_score = c, s
    if best is None or best_score < threshold:
        return None
    return best, best_score
