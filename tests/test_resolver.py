"""Strategy cascade, cache short-circuit and failure semantics of the resolver."""
import pytest

from albumlog.core import metadata_cache
from albumlog.core.errors import ConfigurationError, ProviderError
from albumlog.core.resolver import get_provider, resolve_metadata
from albumlog.models.metadata import ResolvedMetadata
from albumlog.models.tables import AlbumMetadata
from conftest import CAA, DISCOGS_RELEASE, DISCOGS_SEARCH, MB_RELEASE, MB_SEARCH


def _search_by_strategy(fake_http, hit, by_strategy):
    """Discogs search responder keyed on the strategy's distinguishing param."""
    def responder(url, params):
        if "q" in params:
            key = "free_text"
        elif "release_title" in params and "artist" in params:
            key = "strict"
        elif "country" in params:
            key = "artist_region"
        else:
            key = "title_only"
        return fake_http.respond({"results": [hit(*r) for r in by_strategy.get(key, [])]})
    return responder


def test_strict_match_skips_later_strategies(fake_http, discogs_payloads, db):
    hit, release = discogs_payloads
    fake_http.add(DISCOGS_SEARCH, _search_by_strategy(fake_http, hit, {
        "strict": [(1, "Radiohead", "OK Computer OKNOTOK"), (2, "Radiohead", "OK Computer")],
    }))
    fake_http.add(DISCOGS_RELEASE, fake_http.respond(release(2, "Radiohead", "OK Computer")))

    result = resolve_metadata(db, "OK Computer", "Radiohead")
    assert result.found
    assert result.release_id == "2"
    assert result.source == "discogs"
    assert result.year == "1997"
    assert result.tracks == ["One", "Two"]
    assert result.from_cache is False
    assert len(fake_http.urls(DISCOGS_SEARCH)) == 1
    assert fake_http.urls(DISCOGS_RELEASE) == [DISCOGS_RELEASE + "2"]


def test_falls_back_to_free_text(fake_http, discogs_payloads, db):
    hit, release = discogs_payloads
    fake_http.add(DISCOGS_SEARCH, _search_by_strategy(fake_http, hit, {
        "strict": [],
        "free_text": [(7, "Frank Ocean", "Blonde")],
    }))
    fake_http.add(DISCOGS_RELEASE, fake_http.respond(release(7, "Frank Ocean", "Blonde", year=2016)))

    result = resolve_metadata(db, "Blonde", "Frank Ocean")
    assert result.found and result.release_id == "7"
    assert len(fake_http.urls(DISCOGS_SEARCH)) == 2


def test_low_confidence_everywhere_is_not_found(fake_http, discogs_payloads, db):
    hit, _ = discogs_payloads
    fake_http.add(DISCOGS_SEARCH, _search_by_strategy(fake_http, hit, {
        "strict": [(1, "The Beatles", "Abbey Road")],
        "free_text": [(2, "Miles Davis", "Kind of Blue")],
    }))

    result = resolve_metadata(db, "OK Computer", "Radiohead", album_id=5)
    assert result.found is False
    assert fake_http.urls(DISCOGS_RELEASE) == []
    assert metadata_cache.get_cached(db, 5) is None


def test_search_errors_fall_through_to_next_strategy(fake_http, discogs_payloads, db):
    hit, release = discogs_payloads

    def responder(url, params):
        if "q" not in params:
            return fake_http.respond({"message": "Server error"}, status=500)
        return fake_http.respond({"results": [hit(3, "Björk", "Homogenic")]})

    fake_http.add(DISCOGS_SEARCH, responder)
    fake_http.add(DISCOGS_RELEASE, fake_http.respond(release(3, "Björk", "Homogenic")))
    assert resolve_metadata(db, "Homogenic", "Björk").found


def test_extended_strategy_order(fake_http, discogs_payloads, db):
    hit, release = discogs_payloads
    fake_http.add(DISCOGS_SEARCH, _search_by_strategy(fake_http, hit, {
        "title_only": [(9, "IU", "Palette")],
    }))
    fake_http.add(DISCOGS_RELEASE, fake_http.respond(release(9, "IU", "Palette", year=2017)))

    result = resolve_metadata(db, "Palette", "IU", extended=True)
    assert result.release_id == "9"
    searched = [params for url, params in fake_http.calls if url == DISCOGS_SEARCH]
    assert "release_title" in searched[0] and "artist" in searched[0]
    assert "country" in searched[1]
    assert searched[2].get("release_title") == "Palette" and "artist" not in searched[2]
    assert len(searched) == 3


def test_fresh_result_is_cached_then_served_without_calls(fake_http, discogs_payloads, db):
    hit, release = discogs_payloads
    fake_http.add(DISCOGS_SEARCH, fake_http.respond({"results": [hit(4, "Radiohead", "Kid A")]}))
    fake_http.add(DISCOGS_RELEASE, fake_http.respond(release(4, "Radiohead", "Kid A", year=2000)))

    first = resolve_metadata(db, "Kid A", "Radiohead", album_id=11)
    assert first.found and not first.from_cache
    row = metadata_cache.get_cached(db, 11)
    assert row.external_release_id == "4"
    assert row.source == "discogs"
    assert row.tracks == ["One", "Two"]

    fake_http.calls.clear()
    second = resolve_metadata(db, "Kid A", "Radiohead", album_id=11)
    assert fake_http.calls == []
    assert second.from_cache is True
    assert second.year == "2000"
    assert second.cover_url == "https://img/primary.jpg"
    assert second.tracks == ["One", "Two"]


def test_cache_hit_needs_no_credentials(fake_http, monkeypatch, db):
    monkeypatch.setattr("albumlog.core.discogs_client.DISCOGS_TOKEN", "")
    metadata_cache.save(db, 8, ResolvedMetadata(
        found=True, input_title="T", input_artist="A", source="discogs",
        release_id="77", year="1999", tracks=["x"], cover_url="https://c",
    ))
    result = resolve_metadata(db, "T", "A", album_id=8)
    assert result.from_cache and result.release_id == "77"
    assert fake_http.calls == []


def test_cache_upsert_keeps_one_row_per_album(db):
    meta = ResolvedMetadata(found=True, input_title="T", input_artist="A", source="discogs", release_id="1")
    metadata_cache.save(db, 1, meta)
    meta.release_id = "2"
    metadata_cache.save(db, 1, meta)
    rows = db.query(AlbumMetadata).filter(AlbumMetadata.album_id == 1).all()
    assert [r.external_release_id for r in rows] == ["2"]


def test_missing_token_is_configuration_error(fake_http, monkeypatch, db):
    monkeypatch.setattr("albumlog.core.discogs_client.DISCOGS_TOKEN", "")
    with pytest.raises(ConfigurationError):
        resolve_metadata(db, "Kid A", "Radiohead")
    assert fake_http.calls == []


def test_unknown_provider():
    with pytest.raises(ConfigurationError):
        get_provider("napster")


def test_transport_error_surfaces(fake_http, db):
    def reset(url, params):
        raise ProviderError("connection reset")

    fake_http.add(DISCOGS_SEARCH, reset)
    with pytest.raises(ProviderError):
        resolve_metadata(db, "Kid A", "Radiohead")


def test_detail_failure_after_match_surfaces(fake_http, discogs_payloads, db):
    hit, _ = discogs_payloads
    fake_http.add(DISCOGS_SEARCH, fake_http.respond({"results": [hit(4, "Radiohead", "Kid A")]}))
    fake_http.add(DISCOGS_RELEASE, fake_http.respond(None, status=502))
    with pytest.raises(ProviderError):
        resolve_metadata(db, "Kid A", "Radiohead", album_id=3)
    assert metadata_cache.get_cached(db, 3) is None


def test_musicbrainz_provider_end_to_end(fake_http, db):
    fake_http.add(MB_SEARCH, fake_http.respond({"releases": [{
        "id": "mb-1",
        "title": "Homogenic",
        "artist-credit": [{"artist": {"name": "Björk"}}],
        "release-group": {"primary-type": "Album"},
    }]}))
    fake_http.add(MB_RELEASE, fake_http.respond({
        "id": "mb-1", "title": "Homogenic", "date": "1997-09-22",
        "artist-credit": [{"artist": {"name": "Björk"}}],
        "media": [{"tracks": [{"title": "Hunter"}, {"title": "Jóga"}]}],
    }))
    fake_http.add(CAA, fake_http.respond(None, status=404))

    result = resolve_metadata(db, "Homogenic", "Björk", album_id=2, provider_name="musicbrainz")
    assert result.found and result.source == "musicbrainz"
    assert result.year == "1997"
    assert result.tracks == ["Hunter", "Jóga"]
    assert result.cover_url is None
    assert metadata_cache.get_cached(db, 2).source == "musicbrainz"
