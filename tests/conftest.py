import json
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple

import pytest
import requests

from scripts.config_loader import SiteConfig, YouTubeConfig


class FakeResponse:
    def __init__(self, status_code: int = 200, payload: Any = None, content: bytes = b""):
        self.status_code = status_code
        self._payload = payload
        self.content = content if content else json.dumps(payload or {}).encode("utf-8")

    @property
    def text(self) -> str:
        return self.content.decode("utf-8")

    def json(self) -> Any:
        return self._payload

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"HTTP {self.status_code}", response=self)


Handler = Callable[[Dict[str, Any]], FakeResponse]


class FakeSession:
    """Minimal stand-in for ``requests.Session`` that routes GETs by URL prefix."""

    def __init__(self, routes: Dict[str, Handler]):
        self.routes = routes
        self.calls: List[Tuple[str, Dict[str, Any]]] = []
        self.closed = False

    def get(self, url: str, params: Optional[Dict[str, Any]] = None, timeout: Any = None):
        self.calls.append((url, dict(params or {})))
        for prefix, handler in self.routes.items():
            if url.startswith(prefix):
                return handler(dict(params or {}))
        raise requests.ConnectionError(f"no route for {url}")

    def calls_to(self, fragment: str) -> List[Dict[str, Any]]:
        return [params for url, params in self.calls if fragment in url]

    def close(self) -> None:
        self.closed = True


API = "https://www.googleapis.com/youtube/v3"
FEED = "https://www.youtube.com/feeds/videos.xml"


def playlist_item(video_id: str, published: str, title: str = "") -> Dict[str, Any]:
    return {
        "snippet": {
            "title": title or f"Video {video_id}",
            "description": f"About {video_id}",
            "publishedAt": "2030-01-01T00:00:00Z",
            "thumbnails": {
                "default": {"url": f"https://i.ytimg.com/vi/{video_id}/default.jpg"},
                "high": {"url": f"https://i.ytimg.com/vi/{video_id}/hqdefault.jpg"},
            },
            "resourceId": {"videoId": video_id},
        },
        "contentDetails": {"videoId": video_id, "videoPublishedAt": published},
    }


def video_details(video_id: str, duration: str, views: str, tags: List[str]) -> Dict[str, Any]:
    return {
        "id": video_id,
        "contentDetails": {"duration": duration},
        "statistics": {"viewCount": views},
        "snippet": {"tags": tags},
    }


def api_routes(pages: List[List[Dict[str, Any]]], details: List[Dict[str, Any]]) -> Dict[str, Handler]:
    """Routes for a channel whose uploads span ``pages`` (oldest-first)."""

    def channels(params: Dict[str, Any]) -> FakeResponse:
        return FakeResponse(
            payload={"items": [{"contentDetails": {"relatedPlaylists": {"uploads": "UU-test"}}}]}
        )

    def playlist_items(params: Dict[str, Any]) -> FakeResponse:
        token = params.get("pageToken") or ""
        index = int(token[1:]) if token else 0
        payload: Dict[str, Any] = {"items": pages[index]}
        if index + 1 < len(pages):
            payload["nextPageToken"] = f"p{index + 1}"
        return FakeResponse(payload=payload)

    def videos(params: Dict[str, Any]) -> FakeResponse:
        wanted = set(params["id"].split(","))
        return FakeResponse(payload={"items": [d for d in details if d["id"] in wanted]})

    return {
        f"{API}/channels": channels,
        f"{API}/playlistItems": playlist_items,
        f"{API}/videos": videos,
    }


def atom_feed(entries: List[Tuple[str, str, str]]) -> bytes:
    body = "".join(
        f"""
  <entry>
    <id>yt:video:{vid}</id>
    <yt:videoId>{vid}</yt:videoId>
    <title>{title}</title>
    <published>{published}</published>
    <media:group><media:title>{title}</media:title></media:group>
  </entry>"""
        for vid, title, published in entries
    )
    return f"""<?xml version="1.0" encoding="UTF-8"?>
<feed xmlns:yt="http://www.youtube.com/xml/schemas/2015" xmlns:media="http://search.yahoo.com/mrss/" xmlns="http://www.w3.org/2005/Atom">
  <title>Test channel</title>{body}
</feed>
""".encode("utf-8")


def feed_route(document: bytes) -> Dict[str, Handler]:
    return {FEED: lambda params: FakeResponse(content=document)}


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch):
    for name in ("GITHUB_REPOSITORY", "GITHUB_REPOSITORY_OWNER", "YT_API_KEY", "SITE_URL"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def site_cfg(tmp_path: Path) -> SiteConfig:
    return SiteConfig(
        output_dir=tmp_path / "docs",
        site_url="https://example.com/",
        site_title="Test Channel",
        max_retries=0,
        backoff_seconds=0.0,
        request_timeout=5.0,
    )


@pytest.fixture
def youtube_cfg() -> YouTubeConfig:
    return YouTubeConfig(channel_id="UCtest", api_key="test-key")
