"""Persist and load albums."""
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from albumlog.models.metadata import ResolvedMetadata
from albumlog.models.tables import Album

TRACKLIST_SEPARATOR = "; "


def list_albums(db: Session) -> List[Album]:
    """All albums, newest sequence first."""
    return (
        db.query(Album)
        .order_by(Album.sequence.desc(), Album.id.desc())
        .all()
    )


def next_sequence(db: Session) -> int:
    """max(sequence) + 1, or 1 for an empty table.

    Read-then-write: concurrent creators can get the same number. Sequence is
    display data only, so duplicates are tolerated.
    """
    current = db.query(func.max(Album.sequence)).scalar()
    return current + 1 if current is not None else 1


def create_album(
    db: Session,
    title: str,
    artist: str,
    *,
    genre: Optional[str] = None,
    year: Optional[str] = None,
) -> Album:
    """Insert a new album with the next sequence number and return it."""
    album = Album(
        sequence=next_sequence(db),
        title=title,
        artist=artist,
        genre=genre,
        year=year,
    )
    db.add(album)
    db.commit()
    db.refresh(album)
    return album


def apply_metadata(db: Session, album: Album, meta: ResolvedMetadata) -> Album:
    """Copy cover, year and joined tracklist onto the album row."""
    album.cover_url = meta.cover_url
    album.year = meta.year or album.year
    album.tracklist = TRACKLIST_SEPARATOR.join(meta.tracks) if meta.tracks else None
    db.commit()
    db.refresh(album)
    return album
