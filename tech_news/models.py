from datetime import datetime, timezone
from typing import Any, Dict, Optional

from pydantic import BaseModel
from sqlmodel import SQLModel, Field


def to_utc(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def parse_timestamp(value: Any) -> datetime:
    """Parse an ISO-8601 string (a trailing 'Z' included) into an aware UTC datetime.

    Raises ValueError for anything else, None included.
    """
    if isinstance(value, datetime):
        return to_utc(value)
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"not a timestamp: {value!r}")
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return to_utc(datetime.fromisoformat(text))


def format_timestamp(dt: datetime) -> str:
    return to_utc(dt).isoformat()


class Article(BaseModel):
    """One news item. Two articles are the same article iff their urls match."""

    title: str
    description: Optional[str] = None
    content: Optional[str] = None
    url: str
    image_url: Optional[str] = None
    published_at: datetime

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Article):
            return NotImplemented
        return self.url == other.url

    def __hash__(self) -> int:
        return hash(self.url)

    def __repr__(self) -> str:
        return f"Article(title={self.title!r}, url={self.url!r})"

    # ---- NewsAPI-shaped payloads ----

    @classmethod
    def from_json(cls, payload: Dict[str, Any]) -> "Article":
        return cls(
            title=payload.get("title") or "",
            description=payload.get("description"),
            content=payload.get("content"),
            url=payload.get("url") or "",
            image_url=payload.get("urlToImage"),
            published_at=parse_timestamp(payload.get("publishedAt")),
        )

    def to_json(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "description": self.description,
            "content": self.content,
            "url": self.url,
            "urlToImage": self.image_url,
            "publishedAt": format_timestamp(self.published_at),
        }

    # ---- saved_articles rows ----

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Article":
        if not row.get("url"):
            raise ValueError("row has no url")
        return cls(
            title=row.get("title") or "",
            description=row.get("description"),
            content=row.get("content"),
            url=row["url"],
            image_url=row.get("image_url"),
            published_at=parse_timestamp(row.get("published_at")),
        )

    def to_row(self) -> Dict[str, Any]:
        return {
            "url": self.url,
            "title": self.title,
            "description": self.description,
            "content": self.content,
            "image_url": self.image_url,
            "published_at": format_timestamp(self.published_at),
        }


class SavedArticle(SQLModel, table=True):
    __tablename__ = "saved_articles"

    url: str = Field(primary_key=True)
    title: str
    description: Optional[str] = None
    content: Optional[str] = None
    image_url: Optional[str] = None
    published_at: str  # ISO-8601, UTC
