from pathlib import Path

# Shared filesystem locations and fixed names for the channel site.
ROOT = Path(__file__).resolve().parents[1]
DOCS = ROOT / "docs"

VIDEOS_JSON_NAME = "videos.json"
SITEMAP_NAME = "sitemap.xml"
RSS_NAME = "feed.xml"
ROBOTS_NAME = "robots.txt"
VIDEO_PAGE_PREFIX = "video-"
VIDEO_PAGE_SUFFIX = ".html"

DEFAULT_CHANNEL_ID = "UCqIV4jce9V3lY4UoNObmXBA"
DEFAULT_SITE_URL = "https://YOUR-SITE-DOMAIN/"
DEFAULT_SITE_TITLE = "I Love Shorts"

YOUTUBE_API_BASE = "https://www.googleapis.com/youtube/v3"
YOUTUBE_FEED_URL = "https://www.youtube.com/feeds/videos.xml"
YOUTUBE_WATCH_URL = "https://www.youtube.com/watch?v={video_id}"
YOUTUBE_EMBED_URL = "https://www.youtube.com/embed/{video_id}"
YOUTUBE_THUMB_URL = "https://i.ytimg.com/vi/{video_id}/hqdefault.jpg"

# Data API limits: playlistItems page size and videos.list id batch size.
PLAYLIST_PAGE_SIZE = 50
DETAILS_BATCH_SIZE = 50
DESCRIPTION_META_LIMIT = 250
