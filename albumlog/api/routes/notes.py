"""Notes: one free-text note per (album, user), saved on every edit."""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import AliasChoices, BaseModel, Field
from sqlalchemy.orm import Session

from albumlog.api.state import get_db
from albumlog.core import note_store
from albumlog.models.tables import Note

router = APIRouter()


class NoteBody(BaseModel):
    album_id: Optional[int] = Field(None, validation_alias=AliasChoices("albumId", "album_id"))
    user_key: Optional[str] = Field(
        None, validation_alias=AliasChoices("userKey", "profileKey", "user_key")
    )
    content: Optional[str] = None


def _note_to_dict(n: Note) -> dict:
    return {"album_id": n.album_id, "user_key": n.user_key, "content": n.content}


@router.get("")
def list_notes(
    album_id: Optional[int] = Query(None, alias="albumId"),
    user_key: Optional[str] = Query(None, alias="userKey"),
    db: Session = Depends(get_db),
):
    notes = note_store.list_notes(db, album_id=album_id, user_key=user_key)
    return {"notes": [_note_to_dict(n) for n in notes]}


@router.post("")
def upsert_note(body: NoteBody, db: Session = Depends(get_db)):
    if not body.album_id or not body.user_key:
        raise HTTPException(status_code=400, detail="albumId and userKey are required")
    note = note_store.upsert_note(db, body.album_id, body.user_key, body.content or "")
    return {"note": _note_to_dict(note)}
