import logging
from pathlib import Path
from typing import Iterable, List, Sequence

from . import models, paths, site_files
from .config_loader import SiteConfig
from .video_pages import render_video_page

LOGGER = logging.getLogger("yt_site")


def ensure_output_dir(out_dir: Path) -> None:
    out_dir.mkdir(parents=True, exist_ok=True)


def _write_if_changed(path: Path, data: bytes) -> bool:
    tmp_path = path.with_suffix(path.suffix + ".tmp")
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        if path.exists() and path.read_bytes() == data:
            return False
    except OSError:
        # If we cannot read, fall back to writing.
        pass
    tmp_path.write_bytes(data)
    tmp_path.replace(path)
    return True


def write_text(path: Path, text: str) -> bool:
    return _write_if_changed(path, text.encode("utf-8"))


def write_videos_json(out_dir: Path, videos: Sequence[models.VideoDict]) -> bool:
    changed = write_text(out_dir / paths.VIDEOS_JSON_NAME, site_files.render_videos_json(videos))
    LOGGER.info("Wrote %s", paths.VIDEOS_JSON_NAME)
    return changed


def write_video_pages(
    out_dir: Path, videos: Iterable[models.VideoDict], site_cfg: SiteConfig
) -> int:
    changed = 0
    for v in videos:
        page_html = render_video_page(v, site_cfg.site_url, site_cfg.site_title)
        if write_text(out_dir / v["url"], page_html):
            changed += 1
    return changed


def prune_stale_pages(out_dir: Path, videos: Iterable[models.VideoDict]) -> List[Path]:
    """Delete ``video-*.html`` files that no longer belong to the collection."""
    keep = {v["url"] for v in videos}
    removed: List[Path] = []
    for f in out_dir.glob(f"{paths.VIDEO_PAGE_PREFIX}*{paths.VIDEO_PAGE_SUFFIX}"):
        if f.name not in keep:
            f.unlink(missing_ok=True)
            removed.append(f)
    return removed


def write_sitemap(out_dir: Path, videos: Sequence[models.VideoDict], site_url: str) -> bool:
    return _write_if_changed(
        out_dir / paths.SITEMAP_NAME, site_files.render_sitemap(videos, site_url)
    )


def write_rss(
    out_dir: Path, videos: Sequence[models.VideoDict], site_url: str, site_title: str
) -> bool:
    return _write_if_changed(
        out_dir / paths.RSS_NAME, site_files.render_rss(videos, site_url, site_title)
    )


def write_robots(out_dir: Path, site_url: str) -> bool:
    return write_text(out_dir / paths.ROBOTS_NAME, site_files.render_robots(site_url))


def write_site(videos: Sequence[models.VideoDict], site_cfg: SiteConfig) -> None:
    out_dir = site_cfg.output_dir
    ensure_output_dir(out_dir)
    write_videos_json(out_dir, videos)
    pages_changed = write_video_pages(out_dir, videos, site_cfg)
    LOGGER.info("Wrote %s video pages (%s changed)", len(videos), pages_changed)
    if site_cfg.prune_stale_pages:
        removed = prune_stale_pages(out_dir, videos)
        if removed:
            LOGGER.info("Removed %s stale video pages", len(removed))
    write_sitemap(out_dir, videos, site_cfg.site_url)
    write_rss(out_dir, videos, site_cfg.site_url, site_cfg.site_title)
    write_robots(out_dir, site_cfg.site_url)
    LOGGER.info("Wrote %s, %s, %s", paths.SITEMAP_NAME, paths.RSS_NAME, paths.ROBOTS_NAME)
