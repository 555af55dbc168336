"""Resolved metadata cached per album id."""
import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from albumlog.models.metadata import ResolvedMetadata
from albumlog.models.tables import AlbumMetadata

logger = logging.getLogger(__name__)


def get_cached(db: Session, album_id: int) -> Optional[AlbumMetadata]:
    """Cached row for album_id or None."""
    return db.query(AlbumMetadata).filter(AlbumMetadata.album_id == album_id).first()


def to_resolved(row: AlbumMetadata, title: str, artist: str) -> ResolvedMetadata:
    """Cache rows do not keep the resolved names; echo the query instead."""
    return ResolvedMetadata(
        found=True,
        input_title=title,
        input_artist=artist,
        source=row.source,
        release_id=row.external_release_id,
        title=title,
        artist=artist,
        year=row.year,
        date=None,
        tracks=list(row.tracks or []),
        cover_url=row.cover_url,
        from_cache=True,
    )


def save(db: Session, album_id: int, meta: ResolvedMetadata) -> bool:
    """Upsert the cache row for album_id. Returns False if the store rejected it."""
    try:
        row = get_cached(db, album_id)
        if row is None:
            row = AlbumMetadata(album_id=album_id)
            db.add(row)
        row.external_release_id = meta.release_id
        row.cover_url = meta.cover_url
        row.year = meta.year
        row.tracks = list(meta.tracks)
        row.source = meta.source
        db.commit()
        return True
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("album_metadata upsert failed for album %s: %s", album_id, e)
        return False
