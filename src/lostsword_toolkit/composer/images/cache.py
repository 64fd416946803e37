"""
Module: composer.images.cache

Purpose:
    Session image cache. Loads asset images on a thread pool, coalesces
    concurrent requests for the same source, memoizes successes for the
    rest of the session and answers synchronous "is it resident?" queries
    for the draw pass.

Key Classes:
    - AssetCache: Request/poll interface over background loads
    - LoadBatch: The loads for one required-source set

Dependencies:
    - concurrent.futures: Thread pool execution
    - threading (std): Lock guarding the cache maps, Event for batch settle
    - PIL.Image: Image handles
    - composer.images.provider: ImageSource

Used By:
    - composer.controller: Batch loading before a render
    - composer.output.renderer: is_ready()/get() while drawing
"""

from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from threading import Event, Lock
from typing import Callable, Dict, Iterable, List, Optional

from PIL import Image

from ..config import CacheConfig
from .provider import DirectoryImageSource, ImageSource

logger = logging.getLogger(__name__)


class AssetCache:
    """
    Thread pool-backed image cache keyed by source identifier.

    - Requests for a source already loading return the same Future.
    - Successful loads are kept for the life of the cache; no eviction.
    - Failed loads are remembered without a handle: is_ready() stays
      False and later requests return the settled failure, never a retry.

    Usage:
        cache = AssetCache(DirectoryImageSource(root))
        try:
            batch = cache.request_many(model.required_sources())
            batch.wait()
            image = cache.get(src)
        finally:
            cache.close()
    """

    def __init__(
        self,
        source: ImageSource,
        *,
        max_workers: int = 4,
        executor: Optional[ThreadPoolExecutor] = None,
    ) -> None:
        """
        Initialize cache.

        Args:
            source: Where images are loaded from
            max_workers: Pool size when no executor is given
            executor: Shared executor (not shut down by close())
        """
        self._source = source
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="asset-load"
        )
        self._lock = Lock()
        self._images: Dict[str, Image.Image] = {}
        self._inflight: Dict[str, Future] = {}
        self._failed: Dict[str, BaseException] = {}
        self._closed = False

    @classmethod
    def from_config(cls, config: CacheConfig) -> "AssetCache":
        """Cache reading from ``config.asset_root`` with ``config.max_workers`` loaders."""
        logger.info(f"Asset cache over {config.asset_root} ({config.max_workers} workers)")
        return cls(DirectoryImageSource(config.asset_root), max_workers=config.max_workers)

    # ─────────────────────────────────────────────────────────────────────
    # Requests
    # ─────────────────────────────────────────────────────────────────────

    def request(self, src: str) -> Future:
        """
        Ensure ``src`` is loading or loaded.

        Args:
            src: Asset source identifier

        Returns:
            Future resolving to the PIL Image. Completed immediately for
            cached or previously failed sources.

        Raises:
            RuntimeError: If the cache has been closed
        """
        with self._lock:
            if self._closed:
                raise RuntimeError("AssetCache is closed")
            image = self._images.get(src)
            if image is not None:
                return _completed(image)
            error = self._failed.get(src)
            if error is not None:
                return _failed(error)
            future = self._inflight.get(src)
            if future is None:
                future = self._executor.submit(self._load, src)
                self._inflight[src] = future
                logger.debug(f"Loading {src}")
            return future

    def request_many(self, sources: Iterable[str]) -> "LoadBatch":
        """Request every source and group the futures into a LoadBatch."""
        unique = sorted(set(sources))
        return LoadBatch({src: self.request(src) for src in unique})

    # ─────────────────────────────────────────────────────────────────────
    # Queries (safe from the draw pass)
    # ─────────────────────────────────────────────────────────────────────

    def is_ready(self, src: str) -> bool:
        """True if ``src`` has loaded successfully."""
        with self._lock:
            return src in self._images

    def get(self, src: str) -> Optional[Image.Image]:
        """Loaded image for ``src``, or None if loading or failed."""
        with self._lock:
            return self._images.get(src)

    def has_failed(self, src: str) -> bool:
        """True if loading ``src`` failed."""
        with self._lock:
            return src in self._failed

    def is_loading(self, src: str) -> bool:
        """True if ``src`` has an outstanding load."""
        with self._lock:
            return src in self._inflight

    @property
    def size(self) -> int:
        """Number of resident images."""
        with self._lock:
            return len(self._images)

    # ─────────────────────────────────────────────────────────────────────
    # Lifecycle
    # ─────────────────────────────────────────────────────────────────────

    def close(self) -> None:
        """Stop accepting requests and shut down an owned pool."""
        with self._lock:
            self._closed = True
        if self._owns_executor:
            self._executor.shutdown(wait=True)

    def __enter__(self) -> "AssetCache":
        return self

    def __exit__(self, *args) -> None:
        self.close()

    def _load(self, src: str) -> Image.Image:
        """Worker: load one image and record the outcome before the Future settles."""
        try:
            image = self._source.open(src)
        except Exception as e:
            with self._lock:
                self._failed[src] = e
                self._inflight.pop(src, None)
            logger.warning(f"Image load failed for {src}: {e}")
            raise
        with self._lock:
            self._images[src] = image
            self._inflight.pop(src, None)
        logger.debug(f"Loaded {src} ({image.width}x{image.height})")
        return image


class LoadBatch:
    """
    Futures for one required-source set.

    Settles once every member has resolved or failed. Done callbacks run
    exactly once, on whichever thread settles the last member (or
    immediately on the caller's thread if already settled).

    Example:
        >>> batch = cache.request_many({"/assets/a.png", "/assets/b.png"})
        >>> batch.add_done_callback(lambda b: print(len(b.failed)))
    """

    def __init__(self, futures: Dict[str, Future]) -> None:
        self._futures = dict(futures)
        self._lock = Lock()
        self._pending = len(self._futures)
        self._settled = Event()
        self._callbacks: List[Callable[["LoadBatch"], None]] = []
        if not self._futures:
            self._settled.set()
        for future in self._futures.values():
            future.add_done_callback(self._member_done)

    @property
    def sources(self) -> tuple[str, ...]:
        """Sources in this batch (sorted)."""
        return tuple(self._futures)

    @property
    def done(self) -> bool:
        """True once every load has settled."""
        return self._settled.is_set()

    @property
    def failed(self) -> List[str]:
        """Sources whose load failed (only meaningful once done)."""
        return [
            src for src, future in self._futures.items()
            if future.done() and future.exception() is not None
        ]

    def wait(self, timeout: Optional[float] = None) -> bool:
        """
        Block until every load settles and the batch has been marked done.

        Args:
            timeout: Max seconds to wait (None = indefinite)

        Returns:
            True if the batch settled within the timeout
        """
        return self._settled.wait(timeout)

    def add_done_callback(self, callback: Callable[["LoadBatch"], None]) -> None:
        """Call ``callback(batch)`` once the batch settles."""
        with self._lock:
            if self._pending > 0:
                self._callbacks.append(callback)
                return
        callback(self)

    def _member_done(self, _future: Future) -> None:
        with self._lock:
            self._pending -= 1
            if self._pending > 0:
                return
            callbacks, self._callbacks = self._callbacks, []
            self._settled.set()
        for callback in callbacks:
            try:
                callback(self)
            except Exception:
                logger.exception("LoadBatch callback failed")


def _completed(image: Image.Image) -> Future:
    future: Future = Future()
    future.set_result(image)
    return future


def _failed(error: BaseException) -> Future:
    future: Future = Future()
    future.set_exception(error)
    return future
