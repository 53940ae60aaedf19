import io

import pytest

pytest.importorskip("flask")

from PIL import Image

from cached_image.app import create_app
from cached_image.infrastructure.cache import DefaultImageCache

URL = "http://example.com/photo.png"


def _png_bytes():
    buffer = io.BytesIO()
    Image.new("RGB", (7, 5), (30, 60, 90)).save(buffer, "PNG")
    return buffer.getvalue()


@pytest.fixture
def cache():
    return DefaultImageCache()


@pytest.fixture
def fetch_calls():
    return []


@pytest.fixture
def client(cache, fetch_calls):
    async def fetch(url):
        fetch_calls.append(url)
        if "broken" in url:
            raise ConnectionError("unreachable")
        return _png_bytes()

    app = create_app(cache=cache, fetch=fetch)
    app.testing = True
    return app.test_client()


def test_image_serves_png_and_caches(client, cache, fetch_calls):
    response = client.get("/image", query_string={"url": URL})

    assert response.status_code == 200
    assert response.mimetype == "image/png"
    assert response.headers["X-Load-State"] == "Loaded"
    assert Image.open(io.BytesIO(response.data)).size == (7, 5)
    assert URL in cache

    client.get("/image", query_string={"url": URL})
    assert fetch_calls == [URL]


def test_image_failure_serves_error_image(client, cache):
    response = client.get("/image", query_string={"url": "http://broken.example/x.png"})

    assert response.status_code == 502
    assert response.headers["X-Load-State"] == "Failed"
    assert response.mimetype == "image/png"
    assert len(cache) == 0


def test_image_without_url_serves_placeholder(client, fetch_calls):
    response = client.get("/image")

    assert response.status_code == 400
    assert response.headers["X-Load-State"] == "NoURL"
    assert fetch_calls == []


def test_cache_patch_updates_limits(client, cache):
    response = client.patch("/cache", json={"count_limit": 3, "total_cost_limit": 500})

    assert response.status_code == 200
    assert response.get_json()["updated"] == {"count_limit": 3, "total_cost_limit": 500}
    assert cache.count_limit == 3
    assert cache.total_cost_limit == 500


def test_cache_patch_reports_invalid_fields(client, cache):
    response = client.patch("/cache", json={"count_limit": "many", "total_cost_limit": -1})

    assert response.status_code == 400
    assert set(response.get_json()["errors"]) == {"count_limit", "total_cost_limit"}
    assert cache.count_limit == 0


def test_cache_get_and_delete(client, cache):
    client.get("/image", query_string={"url": URL})

    assert client.get("/cache").get_json()["count"] == 1
    assert client.delete("/cache").get_json()["count"] == 0
    assert len(cache) == 0


def test_health(client):
    payload = client.get("/health").get_json()

    assert payload["ok"] is True
    assert "version" in payload


def test_image_serves_cmyk_source_as_png(cache):
    buffer = io.BytesIO()
    Image.new("CMYK", (4, 3), (0, 255, 0, 0)).save(buffer, "JPEG")
    payload = buffer.getvalue()

    async def fetch(url):
        return payload

    app = create_app(cache=cache, fetch=fetch)
    app.testing = True
    client = app.test_client()

    for _ in range(2):
        response = client.get("/image", query_string={"url": URL})
        assert response.status_code == 200
        assert response.headers["X-Load-State"] == "Loaded"
        assert Image.open(io.BytesIO(response.data)).size == (4, 3)
