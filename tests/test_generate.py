import json
from pathlib import Path
from xml.etree import ElementTree as ET

import pytest
import requests

from conftest import (
    API,
    FakeResponse,
    FakeSession,
    api_routes,
    atom_feed,
    feed_route,
    playlist_item,
    video_details,
)
from scripts import generate
from scripts.config_loader import YouTubeConfig, apply_cli_overrides, load_env_config

SITEMAP_NS = "{http://www.sitemaps.org/schemas/sitemap/0.9}"


def _three_video_routes():
    pages = [
        [playlist_item("v1", "2024-01-01T00:00:00Z"), playlist_item("v2", "2024-02-01T00:00:00Z")],
        [playlist_item("v3", "2024-03-01T00:00:00Z")],
    ]
    details = [
        video_details("v1", "PT1M30S", "100", ["one"]),
        video_details("v2", "PT45S", "200", []),
        video_details("v3", "PT2H5M", "300", ["three"]),
    ]
    return api_routes(pages, details)


def test_end_to_end_api_run_writes_all_artifacts(youtube_cfg, site_cfg):
    session = FakeSession(_three_video_routes())

    videos = generate.generate_site(youtube_cfg, site_cfg, session=session)

    out: Path = site_cfg.output_dir
    pages = sorted(p.name for p in out.glob("video-*.html"))
    assert pages == ["video-v1.html", "video-v2.html", "video-v3.html"]

    data = json.loads((out / "videos.json").read_text(encoding="utf-8"))
    assert [v["videoId"] for v in data] == ["v3", "v2", "v1"]
    assert data[0]["publishedAt"] >= data[-1]["publishedAt"]
    assert data == videos
    assert data[0]["duration_text"] == "2:05:00"
    assert data[0]["views"] == 300

    sitemap = ET.parse(out / "sitemap.xml").getroot()
    assert len(sitemap.findall(f"{SITEMAP_NS}url")) == 4

    feed = ET.parse(out / "feed.xml").getroot()
    items = feed.findall("channel/item")
    assert len(items) == 3
    assert {i.findtext("guid") for i in items} == {"v1", "v2", "v3"}

    assert (out / "robots.txt").exists()
    # the injected session belongs to the caller
    assert session.closed is False


def test_missing_api_key_selects_feed_fallback(site_cfg):
    doc = atom_feed([("f1", "First", "2024-01-01T00:00:00+00:00"), ("f2", "Second", "2024-01-02T00:00:00+00:00")])
    session = FakeSession(feed_route(doc))

    videos = generate.generate_site(YouTubeConfig(channel_id="UCtest"), site_cfg, session=session)

    assert not session.calls_to("googleapis")
    assert [v["videoId"] for v in videos] == ["f2", "f1"]
    for v in videos:
        assert set(v) == {
            "videoId",
            "title",
            "description",
            "publishedAt",
            "thumbnail",
            "url",
            "duration",
            "duration_text",
            "tags",
            "views",
        }
        assert v["thumbnail"] == f"https://i.ytimg.com/vi/{v['videoId']}/hqdefault.jpg"
        assert v["url"] == f"video-{v['videoId']}.html"
    assert (site_cfg.output_dir / "video-f1.html").exists()


def test_api_failure_falls_back_to_feed(youtube_cfg, site_cfg, caplog):
    routes = {f"{API}/channels": lambda params: FakeResponse(payload={"items": []})}
    routes.update(feed_route(atom_feed([("f1", "First", "2024-01-01T00:00:00+00:00")])))
    session = FakeSession(routes)

    with caplog.at_level("WARNING", logger="yt_site"):
        videos = generate.generate_site(youtube_cfg, site_cfg, session=session)

    assert [v["videoId"] for v in videos] == ["f1"]
    assert "API fetch failed" in caplog.text


def test_feed_failure_propagates(site_cfg):
    session = FakeSession({})
    with pytest.raises(requests.ConnectionError):
        generate.generate_site(YouTubeConfig(channel_id="UCtest"), site_cfg, session=session)
    assert not site_cfg.output_dir.exists()


def test_stale_video_pages_are_pruned(youtube_cfg, site_cfg):
    site_cfg.output_dir.mkdir(parents=True)
    stale = site_cfg.output_dir / "video-gone.html"
    stale.write_text("old", encoding="utf-8")
    keep = site_cfg.output_dir / "index.html"
    keep.write_text("index", encoding="utf-8")

    generate.generate_site(youtube_cfg, site_cfg, session=FakeSession(_three_video_routes()))

    assert not stale.exists()
    assert keep.exists()


def test_dry_run_writes_nothing(youtube_cfg, site_cfg):
    videos = generate.generate_site(
        youtube_cfg, site_cfg, session=FakeSession(_three_video_routes()), dry_run=True
    )
    assert len(videos) == 3
    assert not site_cfg.output_dir.exists()


def test_env_config_and_cli_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("YT_API_KEY", " secret ")
    monkeypatch.setenv("SITE_URL", "https://videos.example.org")
    monkeypatch.setenv("MAX_RETRIES", "5")
    monkeypatch.setenv("PRUNE_STALE_PAGES", "false")
    monkeypatch.delenv("YT_CHANNEL_ID", raising=False)
    monkeypatch.delenv("OUTPUT_DIR", raising=False)

    youtube_cfg, site_cfg = load_env_config()
    assert youtube_cfg.api_key == "secret"
    assert youtube_cfg.channel_id == "UCqIV4jce9V3lY4UoNObmXBA"
    assert site_cfg.site_url == "https://videos.example.org/"
    assert site_cfg.max_retries == 5
    assert site_cfg.prune_stale_pages is False
    assert site_cfg.output_dir.name == "docs"

    args = generate.parse_cli_args(
        ["--output", str(tmp_path), "--channel-id", "UCother", "--max-retries", "0"]
    )
    youtube_cfg, site_cfg = apply_cli_overrides(youtube_cfg, site_cfg, args)
    assert site_cfg.output_dir == tmp_path
    assert youtube_cfg.channel_id == "UCother"
    assert site_cfg.max_retries == 0
    assert site_cfg.site_url == "https://videos.example.org/"


def test_repeated_upload_keeps_enriched_page(youtube_cfg, site_cfg):
    pages = [
        [playlist_item("a", "2024-01-01T00:00:00Z")],
        [playlist_item("a", "2024-01-01T00:00:00Z")],
    ]
    session = FakeSession(api_routes(pages, [video_details("a", "PT1M30S", "10", [])]))

    videos = generate.generate_site(youtube_cfg, site_cfg, session=session)

    assert [v["videoId"] for v in videos] == ["a"]
    page = (site_cfg.output_dir / "video-a.html").read_text(encoding="utf-8")
    assert "1:30" in page
    feed = ET.parse(site_cfg.output_dir / "feed.xml").getroot()
    assert len(feed.findall("channel/item")) == 1
