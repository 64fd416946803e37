"""
Module: composer.controller

Purpose:
    Tie the roster model, image cache, layout engine and compositor into
    a preview session. Every model change requests the images of the new
    state; when those loads settle, the session signals that a frame is
    ready, but only for the most recent request, so a burst of edits
    produces one frame instead of a queue of stale ones.

    Model change → request images → batch settles → on_frame_ready → render

Key Classes:
    - PreviewSession: Render orchestration for one editor session

Dependencies:
    - threading (std): Generation counter lock
    - composer.layout: Geometry
    - composer.images: AssetCache, LoadBatch
    - composer.output: render_scene, RasterSurface
    - roster: SlotAssignmentModel

Used By:
    - gui.preview_widget: Live preview
"""

from __future__ import annotations

import logging
import math
from pathlib import Path
from threading import Lock
from typing import Callable, Optional

from lostsword_toolkit.roster import RosterSnapshot, SlotAssignmentModel

from .config import DEFAULT_CANVAS_WIDTH, DEFAULT_TEMPLATE, RenderConfig, TemplateConfig
from .images import AssetCache, LoadBatch
from .layout import LayoutTree, compute_layout
from .output import RasterSurface, render_scene, required_sources
from .output.renderer import DEFAULT_RENDER_CONFIG

logger = logging.getLogger(__name__)

FrameCallback = Callable[[int], None]


class PreviewSession:
    """
    Render orchestration for one editor session.

    The session listens to the model; each change (and each note edit)
    starts a new generation. ``on_frame_ready(generation)`` is called
    from whichever thread settles the generation's loads, and only if no
    newer generation has started. Earlier generations' images still stay
    in the cache.

    Usage:
        with AssetCache(DirectoryImageSource(root)) as cache:
            session = PreviewSession(model, cache, scale=2.0)
            model.set_character(0, hero)
            session.render_when_ready(timeout=5).save(Path("roster.png"))
    """

    def __init__(
        self,
        model: SlotAssignmentModel,
        cache: AssetCache,
        *,
        width: float = DEFAULT_CANVAS_WIDTH,
        scale: float = 1.0,
        template: TemplateConfig = DEFAULT_TEMPLATE,
        render_config: RenderConfig = DEFAULT_RENDER_CONFIG,
        on_frame_ready: Optional[FrameCallback] = None,
    ) -> None:
        """
        Initialize session and start loading the initial images.

        Args:
            model: Roster state owner
            cache: Image cache (not closed by the session)
            width: Logical canvas width
            scale: Device pixels per logical pixel
            template: Layout constants
            render_config: Colours, labels and fonts
            on_frame_ready: Called with the generation number when a frame is ready

        Raises:
            TypeError/ValueError: For an invalid width or scale
        """
        if isinstance(scale, bool) or not isinstance(scale, (int, float)) \
                or not math.isfinite(scale) or scale <= 0:
            raise ValueError(f"scale must be a positive finite number: {scale!r}")

        self._model = model
        self._cache = cache
        self._layout = compute_layout(width, template)
        self._scale = scale
        self._config = render_config
        self._on_frame_ready = on_frame_ready

        self._lock = Lock()
        self._generation = 0
        self._batch: Optional[LoadBatch] = None
        self._note_text = ""
        self._last_surface: Optional[RasterSurface] = None
        self._closed = False

        model.add_listener(self._on_model_changed)
        self.invalidate()

    # ─────────────────────────────────────────────────────────────────────
    # Properties
    # ─────────────────────────────────────────────────────────────────────

    @property
    def layout(self) -> LayoutTree:
        """Geometry of this session's canvas."""
        return self._layout

    @property
    def scale(self) -> float:
        """Device pixels per logical pixel."""
        return self._scale

    @property
    def generation(self) -> int:
        """Number of the most recent invalidation."""
        with self._lock:
            return self._generation

    @property
    def note_text(self) -> str:
        """Free text drawn in the note region."""
        return self._note_text

    @note_text.setter
    def note_text(self, value: str) -> None:
        if value == self._note_text:
            return
        self._note_text = value or ""
        self.invalidate()

    @property
    def last_surface(self) -> Optional[RasterSurface]:
        """Most recent render, if any."""
        with self._lock:
            return self._last_surface

    # ─────────────────────────────────────────────────────────────────────
    # Rendering
    # ─────────────────────────────────────────────────────────────────────

    def invalidate(self) -> LoadBatch:
        """
        Start a new generation: request every image the current state needs.

        Returns:
            The new generation's LoadBatch

        Raises:
            RuntimeError: If the session has been closed
        """
        if self._closed:
            raise RuntimeError("PreviewSession is closed")

        batch = self._cache.request_many(required_sources(self._model.snapshot, self._config))
        with self._lock:
            self._generation += 1
            generation = self._generation
            self._batch = batch
        logger.debug(f"Generation {generation}: {len(batch.sources)} sources")
        batch.add_done_callback(lambda _batch: self._batch_settled(generation))
        return batch

    def render(self) -> RasterSurface:
        """Draw the current state now with whatever images are resident."""
        surface = render_scene(
            self._layout,
            self._model.snapshot,
            self._cache,
            self._note_text,
            scale=self._scale,
            config=self._config,
        )
        with self._lock:
            self._last_surface = surface
        return surface

    def render_when_ready(self, timeout: Optional[float] = None) -> RasterSurface:
        """
        Wait for the current generation's loads, then render.

        Renders anyway (with placeholders) if the timeout expires.
        """
        with self._lock:
            batch = self._batch
        if batch is not None and not batch.wait(timeout):
            logger.warning(f"Images still loading after {timeout}s, rendering placeholders")
        return self.render()

    def export_png(self, path: Path) -> Path:
        """
        Write the last rendered frame as PNG, rendering once if none exists.

        Args:
            path: Destination file

        Returns:
            The written path
        """
        surface = self.last_surface or self.render()
        return surface.save(path)

    # ─────────────────────────────────────────────────────────────────────
    # Lifecycle
    # ─────────────────────────────────────────────────────────────────────

    def close(self) -> None:
        """Detach from the model and stop signalling frames."""
        with self._lock:
            self._closed = True
        self._model.remove_listener(self._on_model_changed)

    def __enter__(self) -> "PreviewSession":
        return self

    def __exit__(self, *args) -> None:
        self.close()

    def _on_model_changed(self, snapshot: RosterSnapshot) -> None:
        self.invalidate()

    def _batch_settled(self, generation: int) -> None:
        with self._lock:
            stale = self._closed or generation != self._generation
        if stale:
            logger.debug(f"Generation {generation} settled after a newer request, skipped")
            return
        if self._on_frame_ready is not None:
            self._on_frame_ready(generation)
