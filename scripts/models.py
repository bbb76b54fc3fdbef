from dataclasses import dataclass, field
from typing import List, Optional, TypedDict


@dataclass
class Video:
    videoId: str
    title: str
    description: str
    publishedAt: str
    thumbnail: str
    url: str  # relative to the output dir
    duration: Optional[str] = None  # ISO 8601, Data API only
    duration_text: str = ""
    tags: List[str] = field(default_factory=list)
    views: int = 0


class VideoDict(TypedDict, total=False):
    videoId: str
    title: str
    description: str
    publishedAt: str
    thumbnail: str
    url: str
    duration: Optional[str]
    duration_text: str
    tags: List[str]
    views: int


class RawVideoDict(TypedDict, total=False):
    """Partial record as produced by either acquisition strategy."""

    videoId: Optional[str]
    title: Optional[str]
    description: Optional[str]
    publishedAt: Optional[str]
    published_at: Optional[str]
    thumbnail: Optional[str]
    url: Optional[str]
    duration: Optional[str]
    duration_text: Optional[str]
    tags: Optional[List[str]]
    views: Optional[int]
