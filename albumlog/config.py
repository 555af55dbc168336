"""Configuration: env, database, metadata providers, users."""
import os
from pathlib import Path

from dotenv import load_dotenv

# Base paths (project root = parent of albumlog package)
BASE_DIR = Path(__file__).resolve().parent.parent

# Load .env from project root so DISCOGS_TOKEN etc. are set
load_dotenv(BASE_DIR / ".env")

DATA_DIR = BASE_DIR / "data"


def _env_flag(name: str, default: str = "0") -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes")


# API
API_HOST = os.getenv("ALBUMLOG_API_HOST", "0.0.0.0")
API_PORT = int(os.getenv("ALBUMLOG_API_PORT", "8000"))
# CORS origin of the web client; "*" when unset
WEB_ORIGIN = os.getenv("ALBUMLOG_WEB_ORIGIN", "")

# Store
DATABASE_URL = os.getenv("ALBUMLOG_DATABASE_URL", f"sqlite:///{DATA_DIR / 'albumlog.db'}")

# Metadata providers
METADATA_PROVIDER = os.getenv("ALBUMLOG_METADATA_PROVIDER", "discogs").lower()
DISCOGS_TOKEN = os.getenv("DISCOGS_TOKEN", "").strip()
DISCOGS_BASE = "https://api.discogs.com"
MUSICBRAINZ_BASE = "https://musicbrainz.org/ws/2"
COVER_ART_BASE = "https://coverartarchive.org/release"
# MusicBrainz rejects anonymous clients; keep a contact in the UA
USER_AGENT = os.getenv("ALBUMLOG_USER_AGENT", "AlbumLog/1.0 (+https://github.com/albumlog)")
HTTP_TIMEOUT_SEC = float(os.getenv("ALBUMLOG_HTTP_TIMEOUT_SEC", "25"))
SEARCH_PAGE_SIZE = 10

# Search strategy: strict -> free text, or strict -> artist@region -> title -> free text
EXTENDED_SEARCH = _env_flag("ALBUMLOG_EXTENDED_SEARCH")
PREFERRED_COUNTRY = os.getenv("ALBUMLOG_PREFERRED_COUNTRY", "South Korea")  # Discogs country name
PREFERRED_COUNTRY_CODE = os.getenv("ALBUMLOG_PREFERRED_COUNTRY_CODE", "KR")  # MusicBrainz ISO code

# Candidate acceptance (0-100)
MATCH_THRESHOLD = 70

# Fixed user enumeration (not enforced by the store)
USERS = [
    u.strip()
    for u in os.getenv("ALBUMLOG_USERS", "arkyteccc,mangopatbbang,SJH,wugibugi").split(",")
    if u.strip()
]


def ensure_data_dir() -> None:
    DATA_DIR.mkdir(parents=True, exist_ok=True)
