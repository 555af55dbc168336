"""Ratings: one score per (album, user); upsert and delete."""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import AliasChoices, BaseModel, Field
from sqlalchemy.orm import Session

from albumlog.api.state import get_db
from albumlog.core import rating_store
from albumlog.models.tables import Rating

router = APIRouter()

ALL_FOR_ALBUM = "allForAlbum"


class RatingKeyBody(BaseModel):
    album_id: Optional[int] = Field(None, validation_alias=AliasChoices("albumId", "album_id"))
    # profileKey is what the web client sends
    user_key: Optional[str] = Field(
        None, validation_alias=AliasChoices("userKey", "profileKey", "user_key")
    )


class RatingBody(RatingKeyBody):
    score: Optional[float] = None


def _rating_to_dict(r: Rating) -> dict:
    return {"album_id": r.album_id, "user_key": r.user_key, "score": r.score}


def _require_key(body: RatingKeyBody) -> None:
    if not body.album_id or not body.user_key:
        raise HTTPException(status_code=400, detail="albumId and userKey are required")


@router.get("")
def list_ratings(
    album_id: Optional[int] = Query(None, alias="albumId"),
    user_key: Optional[str] = Query(None, alias="userKey"),
    mode: Optional[str] = None,
    db: Session = Depends(get_db),
):
    """Ratings filtered by album and/or user; mode=allForAlbum returns every user's score."""
    if mode == ALL_FOR_ALBUM:
        if album_id is None:
            raise HTTPException(status_code=400, detail="albumId is required for mode=allForAlbum")
        user_key = None
    ratings = rating_store.list_ratings(db, album_id=album_id, user_key=user_key)
    return {"ratings": [_rating_to_dict(r) for r in ratings]}


@router.post("")
def upsert_rating(body: RatingBody, db: Session = Depends(get_db)):
    _require_key(body)
    if body.score is None:
        raise HTTPException(status_code=400, detail="albumId, userKey, score are required")
    rating = rating_store.upsert_rating(db, body.album_id, body.user_key, body.score)
    return {"rating": _rating_to_dict(rating)}


@router.delete("")
def delete_rating(body: RatingKeyBody, db: Session = Depends(get_db)):
    """Remove a user's score (the user toggled it off)."""
    _require_key(body)
    deleted = rating_store.delete_rating(db, body.album_id, body.user_key)
    return {"ok": True, "deleted": deleted}
