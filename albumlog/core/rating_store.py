"""Per-(album, user) scores."""
from collections import defaultdict
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from albumlog.models.tables import Rating


def list_ratings(
    db: Session, album_id: Optional[int] = None, user_key: Optional[str] = None
) -> List[Rating]:
    query = db.query(Rating)
    if album_id is not None:
        query = query.filter(Rating.album_id == album_id)
    if user_key:
        query = query.filter(Rating.user_key == user_key)
    return query.order_by(Rating.album_id, Rating.user_key).all()


def scores_by_album(db: Session) -> Dict[int, Dict[str, float]]:
    """{album_id: {user_key: score}} for every rating."""
    out: Dict[int, Dict[str, float]] = defaultdict(dict)
    for r in db.query(Rating).all():
        out[r.album_id][r.user_key] = r.score
    return dict(out)


def upsert_rating(db: Session, album_id: int, user_key: str, score: float) -> Rating:
    """Create or replace the score for (album_id, user_key)."""
    rating = (
        db.query(Rating)
        .filter(Rating.album_id == album_id, Rating.user_key == user_key)
        .first()
    )
    if rating is None:
        rating = Rating(album_id=album_id, user_key=user_key, score=score)
        db.add(rating)
    else:
        rating.score = score
    db.commit()
    db.refresh(rating)
    return rating


def delete_rating(db: Session, album_id: int, user_key: str) -> bool:
    """Remove the score for (album_id, user_key). Returns True if one existed."""
    deleted = (
        db.query(Rating)
        .filter(Rating.album_id == album_id, Rating.user_key == user_key)
        .delete()
    )
    db.commit()
    return deleted > 0
