"""Shared fixtures: in-memory store, API client, and a fake for provider HTTP."""
import pytest
from fastapi.testclient import TestClient

from albumlog.api.app import app
from albumlog.api.state import AppState, get_state

DISCOGS_SEARCH = "https://api.discogs.com/database/search"
DISCOGS_RELEASE = "https://api.discogs.com/releases/"
MB_SEARCH = "https://musicbrainz.org/ws/2/release/?"
MB_RELEASE = "https://musicbrainz.org/ws/2/release/"
CAA = "https://coverartarchive.org/release/"


class FakeResponse:
    def __init__(self, status_code=200, payload=None, url=""):
        self.status_code = status_code
        self._payload = payload
        self.url = url

    @property
    def ok(self):
        return self.status_code < 400

    def json(self):
        if self._payload is None:
            raise ValueError("No JSON body")
        return self._payload


class FakeHTTP:
    """Stands in for http_get. Routes by longest URL prefix and records every call."""

    def __init__(self):
        self.routes = {}
        self.calls = []

    def add(self, prefix, responder):
        """responder: FakeResponse, or callable(url, params) -> FakeResponse."""
        self.routes[prefix] = responder

    @staticmethod
    def respond(payload=None, status=200):
        return FakeResponse(status_code=status, payload=payload)

    def urls(self, prefix=""):
        return [url for url, _ in self.calls if url.startswith(prefix)]

    def __call__(self, url, **kwargs):
        params = dict(kwargs.get("params") or {})
        self.calls.append((url, params))
        # MusicBrainz search is told apart from lookups by its trailing "/"
        key_url = url + "?" if url.endswith("/release/") else url
        for prefix in sorted(self.routes, key=len, reverse=True):
            if key_url.startswith(prefix):
                responder = self.routes[prefix]
                resp = responder(url, params) if callable(responder) else responder
                resp.url = url
                return resp
        return FakeResponse(404, url=url)


@pytest.fixture
def state():
    s = AppState("sqlite://")
    s.init_db()
    yield s
    s.dispose()


@pytest.fixture
def db(state):
    session = state.session()
    yield session
    session.close()


@pytest.fixture
def client(state):
    app.dependency_overrides[get_state] = lambda: state
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def fake_http(monkeypatch):
    fake = FakeHTTP()
    monkeypatch.setattr("albumlog.core.discogs_client.http_get", fake)
    monkeypatch.setattr("albumlog.core.musicbrainz_client.http_get", fake)
    monkeypatch.setattr("albumlog.core.discogs_client.DISCOGS_TOKEN", "test-token")
    monkeypatch.setattr("albumlog.core.resolver.METADATA_PROVIDER", "discogs")
    monkeypatch.setattr("albumlog.core.resolver.EXTENDED_SEARCH", False)
    return fake


def discogs_hit(release_id, artist, title):
    return {"id": release_id, "title": f"{artist} - {title}", "type": "release"}


def discogs_release(release_id, artist, title, year=1997, tracks=("One", "Two"), images=None):
    return {
        "id": release_id,
        "title": title,
        "year": year,
        "released": f"{year}-05-21" if year else "",
        "artists": [{"name": artist}],
        "tracklist": [{"title": t, "type_": "track"} for t in tracks],
        "images": images if images is not None else [
            {"type": "secondary", "uri": "https://img/secondary.jpg"},
            {"type": "primary", "uri": "https://img/primary.jpg"},
        ],
    }


@pytest.fixture
def discogs_payloads():
    """Builders for Discogs search hits and release detail bodies."""
    return discogs_hit, discogs_release
