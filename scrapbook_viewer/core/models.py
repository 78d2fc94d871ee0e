from __future__ import annotations
from datetime import datetime, timezone
import math
from typing import List, Optional
from urllib.parse import urlsplit

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_AVATAR_URL = "https://hackclub.com/team/orpheus.jpg"


def absolute_url(value: Optional[str]) -> Optional[str]:
    """Return value if it parses as an absolute http(s) URL, else None."""
    if not value:
        return None
    try:
        parts = urlsplit(value.strip())
    except ValueError:
        return None
    if parts.scheme not in ("http", "https") or not parts.netloc:
        return None
    return value.strip()


class Thumbnail(BaseModel):
    url: str
    width: int = 0
    height: int = 0

    @property
    def id(self) -> str:
        return self.url


class ThumbnailCollection(BaseModel):
    small: Optional[Thumbnail] = None
    large: Optional[Thumbnail] = None
    full: Optional[Thumbnail] = None


class Attachment(BaseModel):
    id: str
    url: str = ""
    type: str = ""
    filename: str = ""
    thumbnails: Optional[ThumbnailCollection] = None

    @property
    def is_image(self) -> bool:
        return self.type.startswith("image/")

    @property
    def large_url(self) -> Optional[str]:
        if self.thumbnails is None or self.thumbnails.large is None:
            return None
        return absolute_url(self.thumbnails.large.url)


class User(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    username: str
    streak_count: int = Field(default=0, alias="streakCount")
    avatar: Optional[str] = None

    @property
    def avatar_url(self) -> str:
        return absolute_url(self.avatar) or DEFAULT_AVATAR_URL


class Post(BaseModel):
    id: str
    user: User
    text: str = ""
    attachments: List[Attachment] = Field(default_factory=list)
    # Unix seconds; the API sends an integer, older payloads a numeric string
    timestamp: Optional[float] = None

    @field_validator("timestamp", mode="before")
    @classmethod
    def _lenient_timestamp(cls, value):
        if value is None:
            return None
        try:
            seconds = float(value)
        except (TypeError, ValueError):
            return 0.0
        return seconds if math.isfinite(seconds) else 0.0

    @property
    def timestamp_date(self) -> datetime:
        return datetime.fromtimestamp(self.timestamp or 0, tz=timezone.utc)

    @property
    def image_attachments(self) -> List[Attachment]:
        return [a for a in self.attachments if a.is_image]

    @property
    def image_urls(self) -> List[str]:
        """Large-thumbnail URLs worth fetching, in attachment order."""
        urls = []
        for attachment in self.image_attachments:
            url = attachment.large_url
            if url:
                urls.append(url)
        return urls
