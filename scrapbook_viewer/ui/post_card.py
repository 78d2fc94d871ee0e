from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from PySide6.QtCore import QThreadPool, Qt
from PySide6.QtGui import QImage
from PySide6.QtWidgets import QFrame, QHBoxLayout, QLabel, QVBoxLayout, QWidget

from ..core.async_image import AsyncImageController
from ..core.dates import scrapbook_format
from ..core.image_cache import ImageCache
from ..core.image_loader import FetchFn
from ..core.models import Attachment, Post
from .async_image_label import AsyncImageLabel

AVATAR_SIZE = 32


@dataclass
class ImageSources:
    """What every image widget needs to build its loader."""

    fetch: FetchFn
    cache: Optional[ImageCache] = None
    placeholder: str = "Loading…"
    pool: Optional[QThreadPool] = None


def attachment_caption(count: int) -> str:
    return f"{count} attachment{'' if count == 1 else 's'}"


def _avatar_crop(image: QImage) -> QImage:
    return image.scaled(
        AVATAR_SIZE, AVATAR_SIZE,
        Qt.AspectRatioMode.KeepAspectRatioByExpanding,
        Qt.TransformationMode.SmoothTransformation,
    )


class AttachmentsStrip(QWidget):
    """Row of image attachments; non-image or thumbnail-less attachments are skipped."""

    def __init__(self, attachments: List[Attachment], sources: ImageSources, parent=None):
        super().__init__(parent)
        lay = QHBoxLayout(self)
        lay.setContentsMargins(0, 0, 0, 0)
        lay.setAlignment(Qt.AlignmentFlag.AlignLeft | Qt.AlignmentFlag.AlignTop)
        self.images: List[AsyncImageLabel] = []
        for attachment in attachments:
            controller = AsyncImageController.for_attachment(
                attachment, sources.fetch,
                placeholder=sources.placeholder, cache=sources.cache, pool=sources.pool,
            )
            if controller is None:
                continue
            label = AsyncImageLabel(controller)
            lay.addWidget(label)
            self.images.append(label)

    def release(self) -> None:
        for label in self.images:
            label.release()


class PostCard(QFrame):
    def __init__(self, post: Post, sources: ImageSources, now: Optional[datetime] = None, parent=None):
        super().__init__(parent)
        self.post = post
        self.setFrameShape(QFrame.Shape.StyledPanel)
        lay = QVBoxLayout(self)

        header = QHBoxLayout()
        self.avatar = AsyncImageLabel(
            AsyncImageController(
                post.user.avatar_url, sources.fetch, placeholder="",
                cache=sources.cache, transform=_avatar_crop, pool=sources.pool,
            ),
            max_width=AVATAR_SIZE,
        )
        self.avatar.setFixedSize(AVATAR_SIZE, AVATAR_SIZE)
        header.addWidget(self.avatar)
        self.author = QLabel(f"<b>@{post.user.username}</b>")
        header.addWidget(self.author)
        if post.user.streak_count:
            header.addWidget(QLabel(f"{post.user.streak_count}-day streak"))
        header.addStretch(1)
        self.date = QLabel(scrapbook_format(post.timestamp_date, now))
        header.addWidget(self.date)
        lay.addLayout(header)

        self.text = QLabel(post.text)
        self.text.setWordWrap(True)
        self.text.setTextInteractionFlags(Qt.TextInteractionFlag.TextSelectableByMouse)
        lay.addWidget(self.text)

        self.caption = QLabel(attachment_caption(len(post.attachments)))
        self.caption.setStyleSheet("color: gray;")
        lay.addWidget(self.caption)

        self.attachments: Optional[AttachmentsStrip] = None
        if post.attachments:
            self.attachments = AttachmentsStrip(post.attachments, sources)
            lay.addWidget(self.attachments)

    def release(self) -> None:
        self.avatar.release()
        if self.attachments is not None:
            self.attachments.release()
