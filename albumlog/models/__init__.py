"""Data models for albums, ratings, notes, and resolved metadata."""
from albumlog.models.metadata import Candidate, ReleaseDetail, ResolvedMetadata
from albumlog.models.tables import Album, AlbumMetadata, Base, Note, Rating

__all__ = [
    "Album",
    "AlbumMetadata",
    "Base",
    "Candidate",
    "Note",
    "Rating",
    "ReleaseDetail",
    "ResolvedMetadata",
]
