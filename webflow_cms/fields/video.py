"""
Video URL classification for VideoLink previews.

Classification is purely textual: the same URL always yields the same
result and nothing is fetched over the network.
"""

import enum
import re
from urllib.parse import quote

from pydantic import BaseModel

from webflow_cms.utils.sanitize import truncate


class VideoProvider(str, enum.Enum):
    YOUTUBE = "youtube"
    VIMEO = "vimeo"
    DIRECT_FILE = "direct_file"
    DAILYMOTION = "dailymotion"
    FACEBOOK = "facebook"
    TIKTOK = "tiktok"
    UNKNOWN = "unknown"


class VideoClassification(BaseModel):
    """Result of classifying a video URL."""

    provider: VideoProvider
    url: str
    embed_id: str | None = None
    embed_url: str | None = None
    mime_type: str | None = None
    label: str

    @property
    def embeddable(self) -> bool:
        return self.embed_url is not None


VIDEO_FILE_PATTERN = re.compile(r"\.(mp4|webm|ogg|mov|avi|mkv|m4v)$", re.IGNORECASE)
UNKNOWN_LABEL_LENGTH = 40


def _segment_after(url: str, marker: str, *terminators: str) -> str:
    """Return the text after ``marker`` cut at the first of ``terminators``."""
    _, _, rest = url.partition(marker)
    for terminator in terminators:
        rest = rest.split(terminator, 1)[0]
    return rest


def _youtube_id(url: str) -> str:
    if "youtu.be/" in url:
        return _segment_after(url, "youtu.be/", "?", "&")
    if "watch?v=" in url:
        return _segment_after(url, "watch?v=", "&")
    if "embed/" in url:
        return _segment_after(url, "embed/", "?", "&")
    return ""


def classify(url: str) -> VideoClassification:
    """
    Classify a video URL by provider.

    Rules are checked in order and the first match wins: YouTube, Vimeo
    (numeric ids only), direct video files, Dailymotion, Facebook, TikTok.
    Anything else is ``UNKNOWN`` and should be shown as a plain link.
    """
    if not isinstance(url, str):
        url = ""
    url = url.strip()

    if "youtube.com" in url or "youtu.be" in url:
        video_id = _youtube_id(url)
        if video_id:
            return VideoClassification(
                provider=VideoProvider.YOUTUBE,
                url=url,
                embed_id=video_id,
                embed_url=f"https://www.youtube.com/embed/{video_id}",
                label=f"YouTube: {video_id}",
            )

    if "vimeo.com" in url:
        video_id = _segment_after(url, "vimeo.com/", "?", "/")
        if video_id.isdigit() and video_id.isascii():
            return VideoClassification(
                provider=VideoProvider.VIMEO,
                url=url,
                embed_id=video_id,
                embed_url=f"https://player.vimeo.com/video/{video_id}",
                label=f"Vimeo: {video_id}",
            )

    match = VIDEO_FILE_PATTERN.search(url)
    if match:
        return VideoClassification(
            provider=VideoProvider.DIRECT_FILE,
            url=url,
            embed_url=url,
            mime_type=f"video/{match.group(1).lower()}",
            label=url.rsplit("/", 1)[-1],
        )

    if "dailymotion.com" in url and "/video/" in url:
        video_id = _segment_after(url, "/video/", "?", "_")
        if video_id:
            return VideoClassification(
                provider=VideoProvider.DAILYMOTION,
                url=url,
                embed_id=video_id,
                embed_url=f"https://www.dailymotion.com/embed/video/{video_id}",
                label=f"Dailymotion: {video_id}",
            )

    if "facebook.com" in url and "/videos/" in url:
        return VideoClassification(
            provider=VideoProvider.FACEBOOK,
            url=url,
            embed_url=f"https://www.facebook.com/plugins/video.php?href={quote(url, safe='')}&show_text=0&width=320",
            label="Facebook Video",
        )

    if "tiktok.com" in url:
        return VideoClassification(provider=VideoProvider.TIKTOK, url=url, label="View on TikTok")

    return VideoClassification(
        provider=VideoProvider.UNKNOWN,
        url=url,
        label=truncate(url, UNKNOWN_LABEL_LENGTH),
    )
