"""
Tests for composer.images.cache

Test Coverage:
- Request coalescing for in-flight sources
- Memoization of successful loads
- Failure handling without retry
- LoadBatch settle callbacks
"""
import threading

import pytest
from PIL import Image

from lostsword_toolkit.composer.images import (
    AssetCache,
    ImageNotFoundError,
    ImageSource,
)


class GatedSource(ImageSource):
    """Image source that blocks until released and counts opens per src."""

    def __init__(self, missing=()):
        self.release = threading.Event()
        self.calls = {}
        self._lock = threading.Lock()
        self._missing = set(missing)

    def open(self, src):
        with self._lock:
            self.calls[src] = self.calls.get(src, 0) + 1
        self.release.wait(timeout=5)
        if src in self._missing:
            raise ImageNotFoundError(f"Image not found: {src}")
        return Image.new("RGBA", (4, 4), (255, 0, 0, 255))


@pytest.fixture
def source():
    return GatedSource(missing={"/assets/missing.png"})


@pytest.fixture
def cache(source):
    cache = AssetCache(source, max_workers=4)
    yield cache
    source.release.set()
    cache.close()


class TestRequest:
    """Tests for AssetCache.request()."""

    def test_concurrent_requests_share_one_load(self, cache, source):
        # Act
        first = cache.request("/assets/a.png")
        second = cache.request("/assets/a.png")

        # Assert
        assert first is second
        assert cache.is_loading("/assets/a.png")
        source.release.set()
        first.result(timeout=5)
        assert source.calls["/assets/a.png"] == 1

    def test_not_ready_while_loading(self, cache):
        cache.request("/assets/a.png")

        assert not cache.is_ready("/assets/a.png")
        assert cache.get("/assets/a.png") is None

    def test_success_is_memoized(self, cache, source):
        source.release.set()
        image = cache.request("/assets/a.png").result(timeout=5)

        again = cache.request("/assets/a.png")

        assert again.done()
        assert again.result() is image
        assert cache.is_ready("/assets/a.png")
        assert cache.get("/assets/a.png") is image
        assert cache.size == 1
        assert source.calls["/assets/a.png"] == 1

    def test_failure_is_not_ready_and_not_retried(self, cache, source):
        source.release.set()
        with pytest.raises(ImageNotFoundError):
            cache.request("/assets/missing.png").result(timeout=5)

        again = cache.request("/assets/missing.png")

        assert again.done()
        assert isinstance(again.exception(), ImageNotFoundError)
        assert not cache.is_ready("/assets/missing.png")
        assert cache.has_failed("/assets/missing.png")
        assert source.calls["/assets/missing.png"] == 1

    def test_failure_is_logged(self, cache, source, caplog):
        source.release.set()

        with caplog.at_level("WARNING"):
            cache.request("/assets/missing.png").exception(timeout=5)

        assert "Image load failed for /assets/missing.png" in caplog.text

    def test_request_after_close_raises(self, source):
        cache = AssetCache(source)
        cache.close()

        with pytest.raises(RuntimeError):
            cache.request("/assets/a.png")


class TestLoadBatch:
    """Tests for request_many() and LoadBatch."""

    def test_callback_fires_once_after_all_settle(self, cache, source):
        # Arrange
        calls = []
        settled = threading.Event()
        batch = cache.request_many(["/assets/a.png", "/assets/b.png", "/assets/a.png"])

        def on_done(b):
            calls.append(b)
            settled.set()

        batch.add_done_callback(on_done)
        assert not batch.done
        assert calls == []

        # Act
        source.release.set()

        # Assert
        assert settled.wait(timeout=5)
        assert batch.wait(timeout=5)
        assert calls == [batch]
        assert batch.sources == ("/assets/a.png", "/assets/b.png")

    def test_failed_members_still_settle_batch(self, cache, source):
        source.release.set()
        batch = cache.request_many({"/assets/a.png", "/assets/missing.png"})

        assert batch.wait(timeout=5)
        assert batch.done
        assert batch.failed == ["/assets/missing.png"]

    def test_empty_batch_calls_back_immediately(self, cache):
        calls = []
        batch = cache.request_many([])

        batch.add_done_callback(calls.append)

        assert batch.done
        assert calls == [batch]

    def test_callback_added_after_settle_runs_on_caller(self, cache, source):
        source.release.set()
        batch = cache.request_many(["/assets/a.png"])
        batch.wait(timeout=5)
        calls = []

        batch.add_done_callback(calls.append)

        assert calls == [batch]

    def test_wait_times_out_while_gated(self, cache):
        batch = cache.request_many(["/assets/slow.png"])

        assert batch.wait(timeout=0.05) is False


class TestDirectorySource:
    """AssetCache over real files."""

    def test_loads_png_from_asset_root(self, asset_root):
        from lostsword_toolkit.composer.images import DirectoryImageSource

        with AssetCache(DirectoryImageSource(asset_root)) as cache:
            image = cache.request("/assets/char/h1.png").result(timeout=5)

        assert image.mode == "RGBA"
        assert image.getpixel((0, 0)) == (255, 0, 0, 255)


def test_from_config_reads_asset_root(asset_root):
    from lostsword_toolkit.composer import CacheConfig

    with AssetCache.from_config(CacheConfig(asset_root=asset_root, max_workers=2)) as cache:
        assert cache.request("/assets/pet/p1.png").result(timeout=5).size == (40, 40)


def test_cache_config_rejects_empty_pool(tmp_path):
    from lostsword_toolkit.composer import CacheConfig

    with pytest.raises(ValueError):
        CacheConfig(asset_root=tmp_path, max_workers=0)
