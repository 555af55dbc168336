"""Discogs database search and release detail (token auth)."""
import logging
import re
from typing import List, Optional, Tuple

from albumlog.config import DISCOGS_BASE, DISCOGS_TOKEN, PREFERRED_COUNTRY, SEARCH_PAGE_SIZE
from albumlog.core.errors import ConfigurationError, ProviderError
from albumlog.core.http import http_get, json_or_none
from albumlog.models.metadata import Candidate, ReleaseDetail

logger = logging.getLogger(__name__)

# Discogs disambiguates homonymous artists as "Name (2)"
_DISAMBIGUATION_RE = re.compile(r"\s+\(\d+\)$")


def _clean_artist(name: Optional[str]) -> str:
    return _DISAMBIGUATION_RE.sub("", (name or "").strip())


def _split_search_title(raw: str) -> Tuple[str, str]:
    """Search hits carry "Artist - Title" in one field. Returns (artist, title)."""
    if " - " in raw:
        artist, title = raw.split(" - ", 1)
        return _clean_artist(artist), title.strip()
    return "", raw.strip()


def _parse_candidate(item: dict) -> Optional[Candidate]:
    release_id = item.get("id")
    if release_id is None:
        return None
    raw_title = item.get("title") if isinstance(item.get("title"), str) else ""
    if isinstance(item.get("artist"), str):
        artist, title = _clean_artist(item["artist"]), raw_title
    else:
        artist, title = _split_search_title(raw_title)
    return Candidate(release_id=str(release_id), title=title, artist=artist)


def _pick_cover(images: list) -> Optional[str]:
    """First primary image, else first image."""
    if not images:
        return None
    primary = next((img for img in images if img.get("type") == "primary"), images[0])
    return primary.get("uri_https") or primary.get("uri") or primary.get("resource_url") or None


class DiscogsProvider:
    """Marketplace catalog: /database/search and /releases/{id}."""

    name = "discogs"

    def __init__(self, token: Optional[str] = None, preferred_country: str = PREFERRED_COUNTRY) -> None:
        self._token = token
        self._preferred_country = preferred_country

    @property
    def token(self) -> str:
        return self._token if self._token is not None else DISCOGS_TOKEN

    def check_configured(self) -> None:
        if not self.token:
            raise ConfigurationError("DISCOGS_TOKEN is not configured on the server")

    def _headers(self) -> dict:
        return {"Authorization": f"Discogs token={self.token}"}

    def strategies(self, title: str, artist: str, extended: bool = False) -> List[Tuple[str, dict]]:
        """Ordered search parameter sets, most precise first."""
        out = [("strict", {"release_title": title, "artist": artist})]
        if extended:
            out.append(("artist_region", {"artist": artist, "country": self._preferred_country}))
            out.append(("title_only", {"release_title": title}))
        out.append(("free_text", {"q": f"{title} {artist}"}))
        return out

    def search(self, params: dict) -> List[Candidate]:
        """One search call. Non-success statuses mean no candidates."""
        self.check_configured()
        query = dict(params, type="release", per_page=str(SEARCH_PAGE_SIZE))
        resp = http_get(f"{DISCOGS_BASE}/database/search", params=query, headers=self._headers())
        if not resp.ok:
            logger.warning("Discogs search failed (%s) for %s", resp.status_code, params)
            return []
        data = json_or_none(resp)
        if not isinstance(data, dict):
            logger.warning("Discogs search returned no JSON object for %s", params)
            return []
        results = data.get("results") if isinstance(data.get("results"), list) else []
        out = []
        for item in results:
            if not isinstance(item, dict):
                continue
            c = _parse_candidate(item)
            if c is not None:
                out.append(c)
        return out

    def fetch_release(self, release_id: str) -> ReleaseDetail:
        self.check_configured()
        resp = http_get(f"{DISCOGS_BASE}/releases/{release_id}", headers=self._headers())
        if not resp.ok:
            raise ProviderError(f"Discogs release detail failed: {resp.status_code}")
        data = json_or_none(resp)
        if not isinstance(data, dict):
            raise ProviderError("Discogs release detail was not JSON")

        released = data.get("released")
        released = str(released) if released else None
        if data.get("year"):
            year = str(data["year"])
        elif released and len(released) >= 4:
            year = released[:4]
        else:
            year = None

        tracks = []
        for t in data.get("tracklist") or []:
            if t.get("type_") == "heading":
                continue
            name = str(t.get("title") or "").strip()
            if name:
                tracks.append(name)

        artists = data.get("artists") or []
        artist = _clean_artist(artists[0].get("name")) if artists else ""
        return ReleaseDetail(
            release_id=str(release_id),
            title=data.get("title") or None,
            artist=artist or None,
            year=year,
            date=released,
            tracks=tracks,
            cover_url=_pick_cover(data.get("images") or []),
        )
