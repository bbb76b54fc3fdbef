"""Fetch a channel's uploads through the YouTube Data API v3.

Three steps: resolve the channel's uploads playlist, page through it, then
enrich the collected ids with duration, tags and view counts in batches.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Set

import requests

from . import models, paths
from .config_loader import SiteConfig, YouTubeConfig
from .durations import to_human_duration
from .http_utils import get_json
from .normalize import page_filename, pick_thumbnail
from .utils import chunked, first_present

LOGGER = logging.getLogger("yt_site")


class ChannelNotFoundError(RuntimeError):
    pass


def _api_get(
    session: requests.Session,
    endpoint: str,
    params: Dict[str, Any],
    youtube_cfg: YouTubeConfig,
    site_cfg: SiteConfig,
) -> Dict[str, Any]:
    return get_json(
        session,
        f"{paths.YOUTUBE_API_BASE}/{endpoint}",
        {**params, "key": youtube_cfg.api_key},
        timeout=site_cfg.request_timeout,
        retries=site_cfg.max_retries,
        backoff_seconds=site_cfg.backoff_seconds,
    )


def fetch_uploads_playlist_id(
    session: requests.Session, youtube_cfg: YouTubeConfig, site_cfg: SiteConfig
) -> str:
    data = _api_get(
        session,
        "channels",
        {"part": "contentDetails,snippet", "id": youtube_cfg.channel_id},
        youtube_cfg,
        site_cfg,
    )
    items = data.get("items") or []
    if not items:
        raise ChannelNotFoundError("Channel not found or API key invalid")
    return str(items[0]["contentDetails"]["relatedPlaylists"]["uploads"])


def playlist_item_to_video(item: Dict[str, Any]) -> models.RawVideoDict:
    snippet = item.get("snippet") or {}
    details = item.get("contentDetails") or {}
    video_id = str(
        first_present(
            details.get("videoId"),
            (snippet.get("resourceId") or {}).get("videoId"),
            default="",
        )
    )
    return {
        "videoId": video_id,
        "title": snippet.get("title"),
        "description": snippet.get("description"),
        # videoPublishedAt is the real upload time; snippet.publishedAt is when
        # the item was added to the playlist.
        "publishedAt": first_present(
            details.get("videoPublishedAt"), snippet.get("publishedAt")
        ),
        "thumbnail": pick_thumbnail(snippet.get("thumbnails"), video_id),
        "url": page_filename(video_id),
    }


def fetch_playlist_videos(
    session: requests.Session,
    playlist_id: str,
    youtube_cfg: YouTubeConfig,
    site_cfg: SiteConfig,
) -> List[models.RawVideoDict]:
    videos: List[models.RawVideoDict] = []
    seen: Set[str] = set()
    page_token = ""
    pages = 0
    while True:
        data = _api_get(
            session,
            "playlistItems",
            {
                "part": "snippet,contentDetails",
                "playlistId": playlist_id,
                "maxResults": paths.PLAYLIST_PAGE_SIZE,
                "pageToken": page_token,
            },
            youtube_cfg,
            site_cfg,
        )
        pages += 1
        for item in data.get("items") or []:
            video = playlist_item_to_video(item)
            video_id = video["videoId"]
            if not video_id:
                LOGGER.debug("Skipping playlist item without a videoId")
                continue
            if video_id in seen:
                LOGGER.debug("Skipping repeated playlist item %s", video_id)
                continue
            seen.add(video_id)
            videos.append(video)
        page_token = data.get("nextPageToken") or ""
        if not page_token:
            break
    LOGGER.info("Fetched %s playlist items over %s page(s)", len(videos), pages)
    return videos


def enrich_videos(
    session: requests.Session,
    videos: List[models.RawVideoDict],
    youtube_cfg: YouTubeConfig,
    site_cfg: SiteConfig,
) -> None:
    """Merge duration, tags and views from videos.list onto ``videos`` in place."""
    by_id: Dict[str, models.RawVideoDict] = {
        str(v.get("videoId")): v for v in videos if v.get("videoId")
    }
    ids = list(by_id.keys())
    for batch in chunked(ids, paths.DETAILS_BATCH_SIZE):
        data = _api_get(
            session,
            "videos",
            {"part": "contentDetails,statistics,snippet", "id": ",".join(batch)},
            youtube_cfg,
            site_cfg,
        )
        for item in data.get("items") or []:
            video = by_id.get(str(item.get("id")))
            if video is None:
                continue
            duration = (item.get("contentDetails") or {}).get("duration")
            video["duration"] = duration
            video["duration_text"] = to_human_duration(duration) if duration else ""
            video["tags"] = list((item.get("snippet") or {}).get("tags") or [])
            video["views"] = int((item.get("statistics") or {}).get("viewCount") or 0)


def fetch_all_videos(
    session: requests.Session, youtube_cfg: YouTubeConfig, site_cfg: SiteConfig
) -> Optional[List[models.RawVideoDict]]:
    """Return the channel's videos newest-first, or None without an API key."""
    if not youtube_cfg.api_key:
        return None
    playlist_id = fetch_uploads_playlist_id(session, youtube_cfg, site_cfg)
    LOGGER.info("Uploads playlist for %s: %s", youtube_cfg.channel_id, playlist_id)
    videos = fetch_playlist_videos(session, playlist_id, youtube_cfg, site_cfg)
    enrich_videos(session, videos, youtube_cfg, site_cfg)
    videos.reverse()
    return videos
