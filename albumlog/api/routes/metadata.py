"""Metadata lookup: cached per album, else resolved from the configured provider."""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from albumlog.api.state import get_db
from albumlog.core.errors import ConfigurationError, ProviderError
from albumlog.core.resolver import resolve_metadata

router = APIRouter()


@router.get("")
def get_metadata(
    title: Optional[str] = None,
    artist: Optional[str] = None,
    album_id: Optional[int] = Query(None, alias="albumId"),
    provider: Optional[str] = None,
    db: Session = Depends(get_db),
):
    """Return release metadata for title + artist.

    404 means no acceptable match; 503 means the provider is not configured;
    502 means the provider failed while answering.
    """
    title, artist = (title or "").strip(), (artist or "").strip()
    if not title or not artist:
        raise HTTPException(
            status_code=400,
            detail="Missing required query params: title, artist",
        )
    try:
        result = resolve_metadata(db, title, artist, album_id=album_id, provider_name=provider)
    except ConfigurationError as e:
        return JSONResponse(status_code=503, content={"error": "CONFIG_ERROR", "message": str(e)})
    except ProviderError as e:
        return JSONResponse(status_code=502, content={"error": "PROVIDER_ERROR", "message": str(e)})

    if not result.found:
        return JSONResponse(
            status_code=404,
            content={
                "found": False,
                "reason": "NO_MATCH",
                "message": f"No matching release on {result.source}",
            },
        )
    return result.to_dict()
