#!/usr/bin/env python3
"""Fetch a YouTube channel's videos and write a static site for them.

Outputs `videos.json`, one `video-<id>.html` per video, `sitemap.xml`,
`feed.xml` and `robots.txt` into the output directory (default: docs/).
"""

import argparse
import logging
from pathlib import Path
from typing import List, Optional

import requests
from dotenv import load_dotenv

from scripts import feed_fallback, models, storage, utils, youtube_api
from scripts.config_loader import (
    SiteConfig,
    YouTubeConfig,
    apply_cli_overrides,
    load_env_config,
)
from scripts.normalize import normalize_videos

LOGGER = logging.getLogger("yt_site")


def parse_cli_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Generate static video pages, sitemap and feed for a YouTube channel."
    )
    parser.add_argument(
        "--output", type=Path, help="Output directory (default: OUTPUT_DIR env, fallback: docs/)."
    )
    parser.add_argument(
        "--site-url",
        dest="site_url",
        help="Public base URL of the site (default: SITE_URL env or GitHub Pages URL).",
    )
    parser.add_argument(
        "--channel-id",
        dest="channel_id",
        help="YouTube channel ID (default: YT_CHANNEL_ID env or built-in channel).",
    )
    parser.add_argument(
        "--max-retries",
        type=int,
        dest="max_retries",
        help="Retries for transient API errors (default: MAX_RETRIES env, fallback: 2).",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Do not write any files; fetch and report only.",
    )
    return parser.parse_args(argv)


def acquire_videos(
    session: requests.Session, youtube_cfg: YouTubeConfig, site_cfg: SiteConfig
) -> List[models.RawVideoDict]:
    videos: Optional[List[models.RawVideoDict]] = None
    try:
        videos = youtube_api.fetch_all_videos(session, youtube_cfg, site_cfg)
    except Exception as e:
        LOGGER.warning("API fetch failed: %s", e)
    if videos is None:
        if not youtube_cfg.api_key:
            LOGGER.info("YT_API_KEY not set.")
        LOGGER.info("Falling back to RSS feed…")
        videos = feed_fallback.fetch_feed_videos(session, youtube_cfg.channel_id, site_cfg)
    return videos


def generate_site(
    youtube_cfg: YouTubeConfig,
    site_cfg: SiteConfig,
    session: Optional[requests.Session] = None,
    dry_run: bool = False,
) -> List[models.VideoDict]:
    LOGGER.info("Starting generator for channel %s", youtube_cfg.channel_id)
    own_session = session is None
    http = session or requests.Session()
    try:
        raw_videos = acquire_videos(http, youtube_cfg, site_cfg)
    finally:
        if own_session:
            http.close()

    videos = normalize_videos(raw_videos)

    if dry_run:
        LOGGER.info("DRY RUN — skipping writes. Videos: %s", len(videos))
        return videos

    storage.write_site(videos, site_cfg)
    LOGGER.info("Done. Wrote %s videos to %s", len(videos), site_cfg.output_dir)
    return videos


def main(argv: Optional[List[str]] = None) -> None:
    utils.setup_logging()
    load_dotenv()
    args = parse_cli_args(argv)
    youtube_cfg, site_cfg = load_env_config()
    youtube_cfg, site_cfg = apply_cli_overrides(youtube_cfg, site_cfg, args)
    generate_site(youtube_cfg, site_cfg, dry_run=args.dry_run)


if __name__ == "__main__":
    main()
