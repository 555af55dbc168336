"""Filter and sort the album listing the way the web grid does."""
import re
from typing import Callable, Dict, List, Optional, Tuple

SORT_KEYS = (
    "sequence",
    "latest",
    "oldest",
    "titleAsc",
    "ratingDesc",
    "ratingAsc",
    "userRatingDesc",
    "userRatingAsc",
)

_YEAR_RE = re.compile(r"\d{4}")
_DATE_RE = re.compile(r"(\d{4})(?:\D+(\d{1,2}))?(?:\D+(\d{1,2}))?")


def year_of(text: Optional[str]) -> Optional[str]:
    """First four-digit run in a free-text year, e.g. "2025. 11. 5" -> "2025"."""
    m = _YEAR_RE.search(text or "")
    return m.group(0) if m else None


def date_key(text: Optional[str]) -> Optional[Tuple[int, int, int]]:
    """(year, month, day) from free text; missing parts count as 0."""
    m = _DATE_RE.search(text or "")
    if not m:
        return None
    return tuple(int(part) if part else 0 for part in m.groups())


def average(scores: Dict[str, float]) -> Optional[float]:
    if not scores:
        return None
    return sum(scores.values()) / len(scores)


def _missing_last(albums: List[dict], key: Callable[[dict], object], reverse: bool) -> List[dict]:
    present = [a for a in albums if key(a) is not None]
    missing = [a for a in albums if key(a) is None]
    present.sort(key=key, reverse=reverse)
    return present + missing


def query_albums(
    albums: List[dict],
    *,
    q: Optional[str] = None,
    genre: Optional[str] = None,
    year: Optional[str] = None,
    unrated_by: Optional[str] = None,
    sort: str = "sequence",
    user_key: Optional[str] = None,
) -> List[dict]:
    """Apply filters then sort. Albums are dicts from the albums route, with
    "ratings" ({user_key: score}) and "average_score" attached.

    Input order is kept for sort="sequence" and for userRating sorts without
    a user_key.
    """
    out = list(albums)
    if q and q.strip():
        needle = q.strip().lower()
        out = [
            a for a in out
            if needle in (a.get("title") or "").lower() or needle in (a.get("artist") or "").lower()
        ]
    if genre and genre != "all":
        out = [a for a in out if a.get("genre") == genre]
    if year and year != "all":
        out = [a for a in out if year_of(a.get("year")) == year]
    if unrated_by:
        out = [a for a in out if unrated_by not in (a.get("ratings") or {})]

    if sort in ("latest", "oldest"):
        return _missing_last(out, lambda a: date_key(a.get("year")), reverse=(sort == "latest"))
    if sort == "titleAsc":
        return sorted(out, key=lambda a: (a.get("title") or "").casefold())
    if sort in ("ratingDesc", "ratingAsc"):
        return _missing_last(out, lambda a: a.get("average_score"), reverse=(sort == "ratingDesc"))
    if sort in ("userRatingDesc", "userRatingAsc") and user_key:
        return _missing_last(
            out, lambda a: (a.get("ratings") or {}).get(user_key), reverse=(sort == "userRatingDesc")
        )
    return out
