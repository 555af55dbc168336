"""Per-(album, user) free-text notes, saved on every edit."""
from typing import List, Optional

from sqlalchemy.orm import Session

from albumlog.models.tables import Note


def list_notes(
    db: Session, album_id: Optional[int] = None, user_key: Optional[str] = None
) -> List[Note]:
    query = db.query(Note)
    if album_id is not None:
        query = query.filter(Note.album_id == album_id)
    if user_key:
        query = query.filter(Note.user_key == user_key)
    return query.order_by(Note.album_id, Note.user_key).all()


def upsert_note(db: Session, album_id: int, user_key: str, content: str) -> Note:
    note = (
        db.query(Note)
        .filter(Note.album_id == album_id, Note.user_key == user_key)
        .first()
    )
    if note is None:
        note = Note(album_id=album_id, user_key=user_key, content=content)
        db.add(note)
    else:
        note.content = content
    db.commit()
    db.refresh(note)
    return note
