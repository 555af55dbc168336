"""Resolve (title, artist) to release metadata, consulting the per-album cache first."""
import logging
from typing import Optional

from sqlalchemy.orm import Session

from albumlog.config import EXTENDED_SEARCH, METADATA_PROVIDER
from albumlog.core import metadata_cache
from albumlog.core.discogs_client import DiscogsProvider
from albumlog.core.errors import ConfigurationError
from albumlog.core.matching import best_candidate
from albumlog.core.musicbrainz_client import MusicBrainzProvider
from albumlog.models.metadata import Candidate, ResolvedMetadata

logger = logging.getLogger(__name__)

PROVIDERS = {
    DiscogsProvider.name: DiscogsProvider(),
    MusicBrainzProvider.name: MusicBrainzProvider(),
}


def get_provider(name: Optional[str] = None):
    """Provider by name (default from config). Unknown names are a configuration error."""
    key = (name or METADATA_PROVIDER).lower()
    try:
        return PROVIDERS[key]
    except KeyError:
        raise ConfigurationError(f"Unknown metadata provider: {key!r}") from None


def find_candidate(provider, title: str, artist: str, extended: bool = EXTENDED_SEARCH) -> Optional[Candidate]:
    """Run the provider's strategies in order; first accepted candidate wins."""
    for strategy, params in provider.strategies(title, artist, extended):
        candidates = provider.search(params)
        match = best_candidate(candidates, title, artist)
        if match is not None:
            candidate, score = match
            logger.info(
                "%s %s: matched %r / %r (release %s, score %d)",
                provider.name, strategy, candidate.title, candidate.artist, candidate.release_id, score,
            )
            return candidate
        logger.debug("%s %s: no match among %d candidates", provider.name, strategy, len(candidates))
    return None


def resolve_metadata(
    db: Session,
    title: str,
    artist: str,
    album_id: Optional[int] = None,
    provider_name: Optional[str] = None,
    extended: Optional[bool] = None,
) -> ResolvedMetadata:
    """Best-effort metadata for (title, artist).

    Returns found=False when nothing matches. Raises ConfigurationError or
    ProviderError when the provider cannot be asked or fails mid-resolution.
    With album_id, a cached row short-circuits every external call and a fresh
    result is written back to the cache.
    """
    if album_id is not None:
        cached = metadata_cache.get_cached(db, album_id)
        if cached is not None:
            logger.debug("Metadata cache hit for album %s", album_id)
            return metadata_cache.to_resolved(cached, title, artist)

    provider = get_provider(provider_name)
    provider.check_configured()
    candidate = find_candidate(
        provider, title, artist, EXTENDED_SEARCH if extended is None else extended
    )
    if candidate is None:
        logger.info("%s: no match for %r / %r", provider.name, title, artist)
        return ResolvedMetadata(found=False, input_title=title, input_artist=artist, source=provider.name)

    detail = provider.fetch_release(candidate.release_id)
    result = ResolvedMetadata(
        found=True,
        input_title=title,
        input_artist=artist,
        source=provider.name,
        release_id=detail.release_id,
        title=detail.title or candidate.title or title,
        artist=detail.artist or candidate.artist or artist,
        year=detail.year,
        date=detail.date,
        tracks=detail.tracks,
        cover_url=detail.cover_url,
    )
    if album_id is not None:
        metadata_cache.save(db, album_id, result)
    return result
