"""Relational tables: albums, cached metadata, ratings, notes."""
from datetime import datetime, timezone

from sqlalchemy import JSON, Column, DateTime, Float, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Album(Base):
    __tablename__ = "albums"

    id = Column(Integer, primary_key=True, index=True)
    # Advisory display number; duplicates are possible (see album_store.next_sequence)
    sequence = Column(Integer, index=True)
    title = Column(String(300), nullable=False)
    artist = Column(String(300), nullable=False)
    genre = Column(String(100))
    year = Column(String(50))  # free text, e.g. "2025. 11. 5"
    cover_url = Column(String(1000))
    tracklist = Column(Text)  # "Intro; First Song; ..."
    created_at = Column(DateTime(timezone=True), default=_utcnow)


class AlbumMetadata(Base):
    __tablename__ = "album_metadata"

    id = Column(Integer, primary_key=True)
    album_id = Column(Integer, nullable=False, unique=True, index=True)
    # Discogs or MusicBrainz id depending on `source`
    external_release_id = Column(String(100))
    cover_url = Column(String(1000))
    year = Column(String(10))
    tracks = Column(JSON)
    source = Column(String(20))
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)


class Rating(Base):
    __tablename__ = "ratings"
    __table_args__ = (UniqueConstraint("album_id", "user_key", name="uq_ratings_album_user"),)

    id = Column(Integer, primary_key=True)
    album_id = Column(Integer, nullable=False, index=True)
    user_key = Column(String(50), nullable=False)
    score = Column(Float, nullable=False)


class Note(Base):
    __tablename__ = "notes"
    __table_args__ = (UniqueConstraint("album_id", "user_key", name="uq_notes_album_user"),)

    id = Column(Integer, primary_key=True)
    album_id = Column(Integer, nullable=False, index=True)
    user_key = Column(String(50), nullable=False)
    content = Column(Text, nullable=False, default="")
