"""Fallback source: the channel's public Atom feed (no API key needed).

The feed only lists recent uploads and carries no duration, tags or view
counts; those stay at their defaults.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Set
from xml.etree import ElementTree as ET

import requests

from . import models, paths
from .config_loader import SiteConfig
from .http_utils import get_response
from .normalize import default_thumbnail, page_filename

LOGGER = logging.getLogger("yt_site")

NS = {
    "atom": "http://www.w3.org/2005/Atom",
    "yt": "http://www.youtube.com/xml/schemas/2015",
    "media": "http://search.yahoo.com/mrss/",
}


def feed_url(channel_id: str) -> str:
    return f"{paths.YOUTUBE_FEED_URL}?channel_id={channel_id}"


def _text(entry: ET.Element, path: str) -> Optional[str]:
    value = entry.findtext(path, namespaces=NS)
    if value is None:
        return None
    return value.strip() or None


def parse_feed(document: bytes | str) -> List[models.RawVideoDict]:
    """Return one partial record per video id, in document order."""
    root = ET.fromstring(document)
    entries: List[models.RawVideoDict] = []
    seen: Set[str] = set()
    for entry in root.findall("atom:entry", NS):
        video_id = _text(entry, "yt:videoId")
        if not video_id:
            LOGGER.debug("Skipping feed entry without yt:videoId")
            continue
        if video_id in seen:
            LOGGER.debug("Skipping repeated feed entry %s", video_id)
            continue
        seen.add(video_id)
        entries.append(
            {
                "videoId": video_id,
                "title": _text(entry, "atom:title"),
                "publishedAt": _text(entry, "atom:published"),
                "thumbnail": default_thumbnail(video_id),
                "url": page_filename(video_id),
            }
        )
    return entries


def fetch_feed_videos(
    session: requests.Session, channel_id: str, site_cfg: SiteConfig
) -> List[models.RawVideoDict]:
    response = get_response(
        session,
        feed_url(channel_id),
        timeout=site_cfg.request_timeout,
        retries=site_cfg.max_retries,
        backoff_seconds=site_cfg.backoff_seconds,
    )
    entries = parse_feed(response.content)
    LOGGER.info("Feed returned %s entries", len(entries))
    entries.reverse()
    return entries
