from __future__ import annotations
from typing import Any, Optional

from PySide6.QtCore import Qt
from PySide6.QtGui import QFont, QImage, QPixmap
from PySide6.QtWidgets import QLabel, QWidget

from ..core.async_image import AsyncImageController


class AsyncImageLabel(QLabel):
    """QLabel front end for an AsyncImageController.

    Shows the placeholder text until the image arrives. Visibility is forwarded
    to the controller, so scrolling a card out of a hidden tab cancels its fetch.
    """

    def __init__(self, controller: AsyncImageController, max_width: int = 320,
                 parent: Optional[QWidget] = None):
        super().__init__(parent)
        self._controller = controller
        self._controller.setParent(self)
        self._max_width = max_width
        self.setAlignment(Qt.AlignmentFlag.AlignCenter)
        font = QFont(self.font())
        font.setPointSizeF(max(font.pointSizeF() - 2, 7))
        self.setFont(font)

        self._controller.displayChanged.connect(self._render)
        self._render(self._controller.display())

    @property
    def controller(self) -> AsyncImageController:
        return self._controller

    def _render(self, shown: Any) -> None:
        if isinstance(shown, QImage):
            pix = QPixmap.fromImage(shown)
            if pix.width() > self._max_width:
                pix = pix.scaledToWidth(self._max_width, Qt.TransformationMode.SmoothTransformation)
            self.setPixmap(pix)
        else:
            self.setText(str(shown))

    def showEvent(self, e):
        super().showEvent(e)
        self._controller.appear()

    def hideEvent(self, e):
        super().hideEvent(e)
        self._controller.disappear()

    def release(self) -> None:
        """Stop any fetch for good before the widget is thrown away."""
        self._controller.close()

    def closeEvent(self, e):
        self.release()
        super().closeEvent(e)
