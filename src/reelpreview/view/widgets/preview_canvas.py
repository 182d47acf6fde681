"""
Preview Canvas
Shows the rendered session, scaled to fit the widget while keeping aspect.
"""
from typing import Optional

from PySide6.QtCore import QRectF
from PySide6.QtGui import QColor, QImage, QPainter
from PySide6.QtWidgets import QSizePolicy, QWidget

from reelpreview.controller.renderer import render_preview
from reelpreview.model.state import SessionState


class PreviewCanvas(QWidget):
    """
    Widget that paints the session preview.

    The picture is re-rendered at natural size on every refresh() and only
    scaled on paint, so resizing the window never touches the layout.
    """
    BACKGROUND = QColor("#101018")

    def __init__(self, session: SessionState, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.session = session
        self._image: Optional[QImage] = None

        self.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Expanding)
        self.setMinimumSize(320, 180)

    def refresh(self) -> None:
        self._image = render_preview(self.session)
        self.update()

    def target_rect(self) -> QRectF:
        """Where the image lands inside the widget (letterboxed)."""
        if self._image is None or self._image.isNull():
            return QRectF()
        img_w, img_h = self._image.width(), self._image.height()
        scale = min(self.width() / img_w, self.height() / img_h)
        w, h = img_w * scale, img_h * scale
        return QRectF((self.width() - w) / 2, (self.height() - h) / 2, w, h)

    def paintEvent(self, event) -> None:
        painter = QPainter(self)
        try:
            painter.fillRect(self.rect(), self.BACKGROUND)
            if self._image is not None:
                painter.setRenderHint(QPainter.SmoothPixmapTransform, True)
                painter.drawImage(self.target_rect(), self._image)
        finally:
            painter.end()
