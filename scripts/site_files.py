import json
from datetime import datetime, timezone
from email.utils import format_datetime
from typing import List, Optional, Sequence
from urllib.parse import urljoin
from xml.etree import ElementTree as ET

from . import models, paths, utils


def video_link(video: models.VideoDict, base_url: str) -> str:
    return urljoin(base_url, video.get("url") or "")


def _as_utc(dt: datetime) -> datetime:
    return dt if dt.tzinfo is not None else dt.replace(tzinfo=timezone.utc)


def rss_date(value: Optional[str]) -> str:
    dt = utils.iso_to_dt(value)
    if dt is None:
        return value or ""
    return format_datetime(_as_utc(dt))


def render_videos_json(videos: Sequence[models.VideoDict]) -> str:
    return json.dumps(list(videos), ensure_ascii=False, indent=2) + "\n"


def render_rss(
    videos: Sequence[models.VideoDict],
    site_url: str = "",
    site_title: str = paths.DEFAULT_SITE_TITLE,
) -> bytes:
    base_url = utils.normalize_site_url(site_url)

    ET.register_namespace("atom", "http://www.w3.org/2005/Atom")

    rss = ET.Element("rss", version="2.0")
    channel_el = ET.SubElement(rss, "channel")
    ET.SubElement(channel_el, "title").text = site_title
    ET.SubElement(channel_el, "link").text = base_url
    ET.SubElement(channel_el, "description").text = f"Latest videos from {site_title}"
    ET.SubElement(
        channel_el,
        "{http://www.w3.org/2005/Atom}link",
        attrib={
            "href": urljoin(base_url, paths.RSS_NAME),
            "rel": "self",
            "type": "application/rss+xml",
        },
    )
    newest = utils.iso_to_dt(videos[0].get("publishedAt")) if videos else None
    if newest is not None:
        ET.SubElement(channel_el, "lastBuildDate").text = format_datetime(_as_utc(newest))

    for v in videos:
        item = ET.SubElement(channel_el, "item")
        ET.SubElement(item, "title").text = v.get("title") or ""
        ET.SubElement(item, "link").text = video_link(v, base_url)
        ET.SubElement(item, "guid", isPermaLink="false").text = v.get("videoId") or ""
        ET.SubElement(item, "pubDate").text = rss_date(v.get("publishedAt"))
        ET.SubElement(item, "description").text = v.get("description") or ""

    return ET.tostring(rss, encoding="utf-8", xml_declaration=True)


def render_sitemap(videos: Sequence[models.VideoDict], site_url: str = "") -> bytes:
    base_url = utils.normalize_site_url(site_url)

    urlset = ET.Element("urlset", xmlns="http://www.sitemaps.org/schemas/sitemap/0.9")

    def add_url(loc: str, lastmod_value: Optional[str]) -> None:
        if not loc:
            return
        url_el = ET.SubElement(urlset, "url")
        ET.SubElement(url_el, "loc").text = loc
        if lastmod_value:
            ET.SubElement(url_el, "lastmod").text = lastmod_value

    newest = videos[0].get("publishedAt") if videos else None
    add_url(base_url, utils.fmt_lastmod(utils.iso_to_dt(newest)))
    for v in videos:
        add_url(
            video_link(v, base_url),
            utils.fmt_lastmod(utils.iso_to_dt(v.get("publishedAt"))),
        )

    return ET.tostring(urlset, encoding="utf-8", xml_declaration=True)


def render_robots(site_url: str = "") -> str:
    base_url = utils.normalize_site_url(site_url)
    lines: List[str] = [
        "# Robots file is auto-generated from SITE_URL or the GitHub Pages URL.",
        "User-agent: *",
        "Allow: /",
        "",
        f"Sitemap: {urljoin(base_url, paths.SITEMAP_NAME)}",
        "",
    ]
    return "\n".join(lines)
