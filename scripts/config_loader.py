import argparse
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Tuple

from . import paths, utils


@dataclass
class YouTubeConfig:
    channel_id: str
    api_key: str = ""


@dataclass
class SiteConfig:
    output_dir: Path
    site_url: str
    site_title: str
    max_retries: int = 2
    backoff_seconds: float = 2.0
    request_timeout: float = 30.0
    prune_stale_pages: bool = True


def load_env_config() -> Tuple[YouTubeConfig, SiteConfig]:
    youtube = YouTubeConfig(
        channel_id=utils.clean_channel_id(
            utils.env_str("YT_CHANNEL_ID", paths.DEFAULT_CHANNEL_ID)
        ),
        api_key=utils.env_str("YT_API_KEY"),
    )
    output_raw = utils.env_str("OUTPUT_DIR")
    site = SiteConfig(
        output_dir=Path(output_raw) if output_raw else paths.DOCS,
        site_url=utils.site_base_url(utils.env_str("SITE_URL")),
        site_title=utils.env_str("SITE_TITLE", paths.DEFAULT_SITE_TITLE),
        max_retries=utils.env_int("MAX_RETRIES", 2),
        backoff_seconds=utils.env_float("BACKOFF_SECONDS", 2.0),
        request_timeout=utils.env_float("REQUEST_TIMEOUT", 30.0),
        prune_stale_pages=utils.env_bool("PRUNE_STALE_PAGES", True),
    )
    return youtube, site


def apply_cli_overrides(
    youtube: YouTubeConfig, site: SiteConfig, args: argparse.Namespace
) -> Tuple[YouTubeConfig, SiteConfig]:
    channel_id = getattr(args, "channel_id", None)
    if channel_id:
        youtube = replace(youtube, channel_id=utils.clean_channel_id(channel_id))
    site = replace(
        site,
        output_dir=site.output_dir
        if getattr(args, "output", None) is None
        else args.output,
        site_url=site.site_url
        if not getattr(args, "site_url", None)
        else utils.normalize_site_url(args.site_url),
        max_retries=site.max_retries
        if getattr(args, "max_retries", None) is None
        else args.max_retries,
    )
    return youtube, site
