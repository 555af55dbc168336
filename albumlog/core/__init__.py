"""Core services: stores, metadata providers, resolver."""
from albumlog.core.discogs_client import DiscogsProvider
from albumlog.core.musicbrainz_client import MusicBrainzProvider

__all__ = ["DiscogsProvider", "MusicBrainzProvider"]
