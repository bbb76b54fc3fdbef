"""Render one self-contained HTML page per video.

Each page carries SEO/Open Graph tags, a JSON-LD ``VideoObject`` block and
an embedded YouTube player.
"""

from __future__ import annotations

import html
import json
from typing import Any, Dict, List

from . import models, paths, utils
from .normalize import page_filename
from .utils import first_present

DATE_FMT = "%Y-%m-%d"


def safe_json_dumps(data: Any) -> str:
    """Dump JSON that is safe to embed inside HTML."""
    raw = json.dumps(data, ensure_ascii=False)
    return (
        raw.replace("<", "\\u003c")
        .replace(">", "\\u003e")
        .replace("&", "\\u0026")
    )


def escape_html(value: Any) -> str:
    # Escapes & < > " ' so the result is safe in text and attributes.
    return html.escape(str(value), quote=True)


def format_date(iso: str | None, fmt: str = DATE_FMT) -> str:
    if not iso:
        return ""
    dt = utils.iso_to_dt(iso)
    if dt is None:
        return iso[:10]
    return dt.strftime(fmt)


def format_views(views: Any) -> str:
    if not isinstance(views, int) or views <= 0:
        return ""
    return f"{views:,} views"


def watch_url(video_id: str) -> str:
    return paths.YOUTUBE_WATCH_URL.format(video_id=video_id)


def embed_url(video_id: str) -> str:
    return paths.YOUTUBE_EMBED_URL.format(video_id=video_id)


def video_json_ld(video: models.VideoDict) -> Dict[str, Any]:
    vid = video.get("videoId") or ""
    data: Dict[str, Any] = {
        "@context": "https://schema.org",
        "@type": "VideoObject",
        "name": video.get("title") or "",
        "description": video.get("description") or "",
        "thumbnailUrl": video.get("thumbnail") or "",
        "uploadDate": video.get("publishedAt") or "",
        "url": watch_url(vid),
        "embedUrl": embed_url(vid),
    }
    if video.get("duration"):
        data["duration"] = video["duration"]
    return data


def render_tags(tags: List[str]) -> str:
    if not tags:
        return ""
    items = "".join(f'<li class="tag">{escape_html(t)}</li>' for t in tags)
    return f'<ul class="tags">{items}</ul>'


def render_video_page(
    video: models.VideoDict,
    site_url: str = "",
    site_title: str = paths.DEFAULT_SITE_TITLE,
) -> str:
    vid = video.get("videoId") or ""
    title = escape_html(video.get("title") or "")
    description = video.get("description") or ""
    meta_desc = escape_html(description[: paths.DESCRIPTION_META_LIMIT])
    thumbnail = escape_html(video.get("thumbnail") or "")
    page_url = escape_html(
        utils.normalize_site_url(site_url) + (video.get("url") or page_filename(vid))
    )
    stats = " • ".join(
        v
        for v in (
            format_date(video.get("publishedAt")),
            video.get("duration_text") or "",
            format_views(video.get("views")),
        )
        if v
    )
    description_html = (
        escape_html(description).replace("\n", "<br>")
        if description
        else '<span class="muted">No description.</span>'
    )
    page_title = first_present(title, escape_html(vid))

    return f"""<!doctype html>
<html lang="en">
<head>
  <meta charset="utf-8" />
  <meta name="viewport" content="width=device-width,initial-scale=1" />
  <title>{page_title} — {escape_html(site_title)}</title>
  <meta name="description" content="{meta_desc}" />
  <link rel="canonical" href="{page_url}" />
  <meta property="og:type" content="video.other" />
  <meta property="og:title" content="{title}" />
  <meta property="og:description" content="{meta_desc}" />
  <meta property="og:image" content="{thumbnail}" />
  <meta property="og:url" content="{page_url}" />
  <meta property="og:video" content="{escape_html(embed_url(vid))}" />
  <meta name="twitter:card" content="player" />
  <meta name="twitter:title" content="{title}" />
  <meta name="twitter:description" content="{meta_desc}" />
  <meta name="twitter:image" content="{thumbnail}" />
  <link rel="stylesheet" href="styles.css" />
  <link rel="alternate" type="application/rss+xml" title="{escape_html(site_title)}" href="{paths.RSS_NAME}" />
  <script type="application/ld+json">{safe_json_dumps(video_json_ld(video))}</script>
</head>
<body>
  <main class="container">
    <article class="card" data-video-id="{escape_html(vid)}">
      <h1>{title}</h1>
      <p class="stats">{escape_html(stats)}</p>
      <div class="video-embed" style="margin:18px 0;">
        <iframe width="100%" height="420" src="{escape_html(embed_url(vid))}" title="{title}" frameborder="0" allowfullscreen loading="lazy"></iframe>
      </div>
      {render_tags(video.get("tags") or [])}
      <section>
        <h2>Description</h2>
        <p>{description_html}</p>
      </section>
      <p><a href="{escape_html(watch_url(vid))}" target="_blank" rel="noopener">Watch on YouTube</a></p>
      <p><a href="./">← Back to all videos</a></p>
    </article>
  </main>
</body>
</html>
"""
