"""MusicBrainz release search/detail and Cover Art Archive lookup."""
import logging
import re
from typing import List, Optional, Tuple

from albumlog.config import (
    COVER_ART_BASE,
    MUSICBRAINZ_BASE,
    PREFERRED_COUNTRY_CODE,
    SEARCH_PAGE_SIZE,
)
from albumlog.core.errors import ProviderError
from albumlog.core.http import http_get, json_or_none
from albumlog.models.metadata import Candidate, ReleaseDetail

logger = logging.getLogger(__name__)

# Lucene query syntax; "&&" and "||" are covered by escaping each character
_LUCENE_SPECIAL_RE = re.compile(r'([+\-&|!(){}\[\]^"~*?:\\/])')


def _quote(value: str) -> str:
    """Lucene phrase for a field-qualified query."""
    return '"' + value.replace("\\", "\\\\").replace('"', '\\"') + '"'


def _escape_terms(value: str) -> str:
    """Unquoted Lucene terms with every operator character taken literally."""
    return _LUCENE_SPECIAL_RE.sub(r"\\\1", value)


def _credited_artist(credits: list) -> str:
    if not credits:
        return ""
    first = credits[0] or {}
    return (first.get("artist") or {}).get("name") or first.get("name") or ""


def _parse_candidate(item: dict) -> Optional[Candidate]:
    if not item.get("id"):
        return None
    return Candidate(
        release_id=str(item["id"]),
        title=item.get("title") or "",
        artist=_credited_artist(item.get("artist-credit") or []),
        primary_type=(item.get("release-group") or {}).get("primary-type"),
    )


class MusicBrainzProvider:
    """Open catalog: /release search and lookup, covers from the Cover Art Archive."""

    name = "musicbrainz"

    def __init__(self, country_code: str = PREFERRED_COUNTRY_CODE) -> None:
        self._country_code = country_code

    def check_configured(self) -> None:
        """Anonymous access; nothing to check."""

    def strategies(self, title: str, artist: str, extended: bool = False) -> List[Tuple[str, dict]]:
        out = [("strict", {"query": f"release:{_quote(title)} AND artist:{_quote(artist)}"})]
        if extended:
            out.append(
                ("artist_region", {"query": f"artist:{_quote(artist)} AND country:{self._country_code}"})
            )
            out.append(("title_only", {"query": f"release:{_quote(title)}"}))
        out.append(("free_text", {"query": f"{_escape_terms(title)} {_escape_terms(artist)}"}))
        return out

    def search(self, params: dict) -> List[Candidate]:
        """One search call; albums first so they win equal scores."""
        query = dict(params, fmt="json", limit=str(SEARCH_PAGE_SIZE))
        resp = http_get(f"{MUSICBRAINZ_BASE}/release/", params=query)
        if not resp.ok:
            logger.warning("MusicBrainz search failed (%s) for %s", resp.status_code, params)
            return []
        data = json_or_none(resp)
        if not isinstance(data, dict):
            logger.warning("MusicBrainz search returned no JSON object for %s", params)
            return []
        releases = data.get("releases") if isinstance(data.get("releases"), list) else []
        out = [c for c in (_parse_candidate(r) for r in releases if isinstance(r, dict)) if c]
        out.sort(key=lambda c: c.primary_type != "Album")
        return out

    def fetch_release(self, release_id: str) -> ReleaseDetail:
        # inc is "+"-joined and must not be percent-encoded
        resp = http_get(
            f"{MUSICBRAINZ_BASE}/release/{release_id}?inc=recordings+artist-credits",
            params={"fmt": "json"},
        )
        if not resp.ok:
            raise ProviderError(f"MusicBrainz release detail failed: {resp.status_code}")
        data = json_or_none(resp)
        if not isinstance(data, dict):
            raise ProviderError("MusicBrainz release detail was not JSON")

        date = data.get("date") or data.get("first-release-date") or None
        year = date[:4] if isinstance(date, str) and len(date) >= 4 else None

        tracks = []
        for disc in data.get("media") or []:
            for t in disc.get("tracks") or []:
                name = str(t.get("title") or "").strip()
                if name:
                    tracks.append(name)

        return ReleaseDetail(
            release_id=str(release_id),
            title=data.get("title") or None,
            artist=_credited_artist(data.get("artist-credit") or []) or None,
            year=year,
            date=date,
            tracks=tracks,
            cover_url=self.fetch_cover_url(release_id),
        )

    def fetch_cover_url(self, release_id: str) -> Optional[str]:
        """Front image URL, else first image, else None. Never raises."""
        url = f"{COVER_ART_BASE}/{release_id}"
        try:
            resp = http_get(url)
        except ProviderError:
            return None
        if not resp.ok:
            logger.warning("Cover Art Archive non-ok response: %s %s", resp.status_code, url)
            return None
        data = json_or_none(resp)
        if not isinstance(data, dict):
            return None
        images = data.get("images") or []
        if not images:
            return None
        front = next((img for img in images if img.get("front")), images[0])
        return front.get("image") or None
