from __future__ import annotations

from dataclasses import asdict
from typing import Any, Iterable, List, Mapping, Optional

from . import models, paths
from .durations import to_human_duration
from .utils import first_present

# Preferred Data API thumbnail sizes, largest first.
THUMBNAIL_PREFERENCE = ("maxres", "standard", "high", "medium", "default")


def default_thumbnail(video_id: str) -> str:
    return paths.YOUTUBE_THUMB_URL.format(video_id=video_id)


def page_filename(video_id: str) -> str:
    return f"{paths.VIDEO_PAGE_PREFIX}{video_id}{paths.VIDEO_PAGE_SUFFIX}"


def pick_thumbnail(
    thumbnails: Optional[Mapping[str, Any]], video_id: str
) -> str:
    """Pick the best available thumbnail URL, ending at the hqdefault image."""
    thumbnails = thumbnails or {}
    candidates = []
    for size in THUMBNAIL_PREFERENCE:
        entry = thumbnails.get(size)
        if isinstance(entry, Mapping):
            candidates.append(entry.get("url"))
    return first_present(*candidates, default=default_thumbnail(video_id))


def _as_int(value: Any) -> int:
    if value is None or value == "":
        return 0
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


def normalize_video(raw: Mapping[str, Any]) -> models.VideoDict:
    video_id = str(raw.get("videoId") or "")
    duration = raw.get("duration") or None
    duration_text = first_present(
        raw.get("duration_text"),
        to_human_duration(duration) if duration else None,
        default="",
    )
    video = models.Video(
        videoId=video_id,
        title=str(raw.get("title") or ""),
        description=str(raw.get("description") or ""),
        publishedAt=str(
            first_present(raw.get("publishedAt"), raw.get("published_at"), default="")
        ),
        thumbnail=str(first_present(raw.get("thumbnail"), default=default_thumbnail(video_id))),
        url=page_filename(video_id),
        duration=duration,
        duration_text=str(duration_text),
        tags=[str(t) for t in (raw.get("tags") or [])],
        views=_as_int(raw.get("views")),
    )
    return asdict(video)  # type: ignore[return-value]


def normalize_videos(raw_videos: Iterable[Mapping[str, Any]]) -> List[models.VideoDict]:
    return [normalize_video(v) for v in raw_videos]
