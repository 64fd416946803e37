"""
Module: gui.preview_widget

Purpose:
    Qt widget showing the live roster preview. Owns a PreviewSession,
    repaints when the session reports a settled frame and maps clicks to
    template regions so the editor can open the right picker.

Key Classes:
    - PreviewCanvas: Preview display and click target

Dependencies:
    - PySide6: Widgets, painting, signals
    - composer.controller: PreviewSession
    - composer.layout: hit_test

Used By:
    - Roster editor window
"""

from __future__ import annotations

import logging
import math
from typing import Optional

from PySide6.QtCore import QRectF, QSize, Qt, Signal
from PySide6.QtGui import QImage, QPainter
from PySide6.QtWidgets import QWidget

from lostsword_toolkit.composer import (
    DEFAULT_CANVAS_WIDTH,
    AssetCache,
    PreviewSession,
    RasterSurface,
    RenderConfig,
    hit_test,
)
from lostsword_toolkit.composer.output.renderer import DEFAULT_RENDER_CONFIG
from lostsword_toolkit.roster import SlotAssignmentModel

logger = logging.getLogger(__name__)


class PreviewCanvas(QWidget):
    """
    Live roster preview.

    Frames are drawn on the UI thread: the session's settle callback runs
    on a loader thread and only emits a queued signal.

    Signals:
        regionClicked(HitRegion): A template region was clicked
    """

    regionClicked = Signal(object)
    _frameReady = Signal(int)

    def __init__(
        self,
        model: SlotAssignmentModel,
        cache: AssetCache,
        *,
        width: float = DEFAULT_CANVAS_WIDTH,
        scale: Optional[float] = None,
        render_config: RenderConfig = DEFAULT_RENDER_CONFIG,
        parent=None,
    ):
        super().__init__(parent)
        self._frameReady.connect(self._on_frame_ready, Qt.ConnectionType.QueuedConnection)

        self._image: Optional[QImage] = None
        self._session = PreviewSession(
            model,
            cache,
            width=width,
            scale=scale or self.devicePixelRatioF(),
            render_config=render_config,
            on_frame_ready=self._frameReady.emit,
        )

        layout = self._session.layout
        self.setFixedSize(QSize(math.ceil(layout.width), math.ceil(layout.height)))
        self.setCursor(Qt.CursorShape.PointingHandCursor)
        self.refresh()

    @property
    def session(self) -> PreviewSession:
        """The preview session driving this widget."""
        return self._session

    def set_note_text(self, text: str) -> None:
        """Update the note region text."""
        self._session.note_text = text

    def refresh(self) -> RasterSurface:
        """Render the current state now and repaint."""
        surface = self._session.render()
        image = QImage.fromData(surface.to_png(), "PNG")
        image.setDevicePixelRatio(surface.scale)
        self._image = image
        self.update()
        return surface

    def shutdown(self) -> None:
        """Detach the session from the model."""
        self._session.close()

    def _on_frame_ready(self, generation: int) -> None:
        if generation != self._session.generation:
            return
        self.refresh()

    def paintEvent(self, event):
        if self._image is None:
            return
        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.SmoothPixmapTransform)
        painter.drawImage(
            QRectF(0, 0, self.width(), self.height()),
            self._image,
            QRectF(0, 0, self._image.width(), self._image.height()),
        )
        painter.end()

    def mousePressEvent(self, event):
        if event.button() != Qt.MouseButton.LeftButton:
            super().mousePressEvent(event)
            return
        pos = event.position()
        region = hit_test(self._session.layout, pos.x(), pos.y())
        if region is not None:
            logger.debug(f"Clicked {region.kind} {region.index}")
            self.regionClicked.emit(region)

    def closeEvent(self, event):
        self.shutdown()
        super().closeEvent(event)
