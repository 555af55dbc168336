"""Album list and creation; creation auto-fills cover, year and tracklist."""
import logging
from typing import Dict, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel
from sqlalchemy.orm import Session

from albumlog.api.state import get_db
from albumlog.core import album_store, rating_store
from albumlog.core.album_query import SORT_KEYS, average, query_albums
from albumlog.core.errors import MetadataError
from albumlog.core.resolver import resolve_metadata
from albumlog.models.tables import Album

logger = logging.getLogger(__name__)

router = APIRouter()


class CreateAlbumBody(BaseModel):
    title: Optional[str] = None
    artist: Optional[str] = None
    genre: Optional[str] = None
    year: Optional[str] = None


def _clean(value: Optional[str]) -> Optional[str]:
    value = (value or "").strip()
    return value or None


def _album_to_dict(a: Album, scores: Optional[Dict[str, float]] = None) -> dict:
    scores = scores or {}
    return {
        "id": a.id,
        "sequence": a.sequence,
        "title": a.title,
        "artist": a.artist,
        "genre": a.genre,
        "year": a.year,
        "cover_url": a.cover_url,
        "tracklist": a.tracklist,
        "created_at": a.created_at.isoformat() if a.created_at else None,
        "ratings": dict(scores),
        "average_score": average(scores),
    }


@router.get("")
def list_albums(
    q: Optional[str] = None,
    genre: Optional[str] = None,
    year: Optional[str] = None,
    unrated_by: Optional[str] = None,
    sort: str = "sequence",
    user_key: Optional[str] = Query(None, alias="userKey"),
    db: Session = Depends(get_db),
):
    """List albums, newest sequence first unless another sort is asked for."""
    if sort not in SORT_KEYS:
        raise HTTPException(
            status_code=400,
            detail=f"Unknown sort {sort!r}; use one of: {', '.join(SORT_KEYS)}",
        )
    scores = rating_store.scores_by_album(db)
    items = [_album_to_dict(a, scores.get(a.id)) for a in album_store.list_albums(db)]
    return {
        "albums": query_albums(
            items, q=q, genre=genre, year=year, unrated_by=unrated_by, sort=sort, user_key=user_key
        )
    }


@router.post("")
def create_album(body: CreateAlbumBody, db: Session = Depends(get_db)):
    """Add an album, then try to resolve its metadata.

    The album is kept even when nothing matches or the provider fails; the
    response then carries metadata=null.
    """
    title, artist = _clean(body.title), _clean(body.artist)
    if not title or not artist:
        raise HTTPException(status_code=400, detail="title and artist are required")

    album = album_store.create_album(
        db, title, artist, genre=_clean(body.genre), year=_clean(body.year)
    )

    try:
        meta = resolve_metadata(db, title, artist, album_id=album.id)
    except MetadataError as e:
        logger.warning("Metadata for album %s (%s / %s) unavailable: %s", album.id, title, artist, e)
        meta = None

    if meta is None or not meta.found:
        return {"album": _album_to_dict(album), "metadata": None}

    album = album_store.apply_metadata(db, album, meta)
    return {"album": _album_to_dict(album), "metadata": meta.to_dict()}
