"""Provider search candidates, release detail, and resolver output."""
from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class Candidate:
    """One search hit from a provider, before the detail fetch."""
    release_id: str
    title: str
    artist: str
    primary_type: Optional[str] = None  # MusicBrainz release-group type


@dataclass
class ReleaseDetail:
    """Normalized release detail from a provider."""
    release_id: str
    title: Optional[str]
    artist: Optional[str]
    year: Optional[str]
    date: Optional[str]
    tracks: List[str] = field(default_factory=list)
    cover_url: Optional[str] = None


@dataclass
class ResolvedMetadata:
    """Resolver outcome. found=False means no acceptable candidate."""
    found: bool
    input_title: str
    input_artist: str
    source: Optional[str] = None
    release_id: Optional[str] = None
    title: Optional[str] = None
    artist: Optional[str] = None
    year: Optional[str] = None
    date: Optional[str] = None
    tracks: List[str] = field(default_factory=list)
    cover_url: Optional[str] = None
    from_cache: bool = False

    def to_dict(self) -> dict:
        return {
            "found": self.found,
            "from_cache": self.from_cache,
            "release_id": self.release_id,
            "source": self.source,
            "input": {"title": self.input_title, "artist": self.input_artist},
            "resolved": {
                "title": self.title,
                "artist": self.artist,
                "year": self.year,
                "date": self.date,
            },
            "tracks": list(self.tracks),
            "cover_url": self.cover_url,
        }
