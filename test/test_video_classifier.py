"""
Tests for video URL classification

Tests provider detection, embed URLs and rule precedence.
"""

import pytest

from webflow_cms.fields.video import VideoProvider, classify


class TestYouTube:
    """Test YouTube URL forms"""

    @pytest.mark.parametrize(
        "url",
        [
            "https://www.youtube.com/watch?v=dQw4w9WgXcQ",
            "https://www.youtube.com/watch?v=dQw4w9WgXcQ&t=42",
            "https://youtu.be/dQw4w9WgXcQ",
            "https://youtu.be/dQw4w9WgXcQ?si=abc",
            "https://www.youtube.com/embed/dQw4w9WgXcQ",
        ],
    )
    def test_extracts_video_id(self, url):
        result = classify(url)
        assert result.provider is VideoProvider.YOUTUBE
        assert result.embed_id == "dQw4w9WgXcQ"
        assert result.embed_url == "https://www.youtube.com/embed/dQw4w9WgXcQ"
        assert result.embeddable

    def test_channel_url_is_not_a_video(self):
        assert classify("https://www.youtube.com/@somechannel").provider is VideoProvider.UNKNOWN


class TestVimeo:
    """Test Vimeo URL forms"""

    def test_numeric_id(self):
        result = classify("https://vimeo.com/76979871")
        assert result.provider is VideoProvider.VIMEO
        assert result.embed_url == "https://player.vimeo.com/video/76979871"

    def test_query_string_ignored(self):
        assert classify("https://vimeo.com/76979871?share=copy").embed_id == "76979871"

    def test_non_numeric_path_is_not_vimeo(self):
        assert classify("https://vimeo.com/channels/staffpicks").provider is VideoProvider.UNKNOWN


class TestDirectFiles:
    """Test direct video file links"""

    @pytest.mark.parametrize("extension", ["mp4", "webm", "ogg", "mov", "avi", "mkv", "m4v"])
    def test_known_extensions(self, extension):
        result = classify(f"https://cdn.example.com/clips/intro.{extension}")
        assert result.provider is VideoProvider.DIRECT_FILE
        assert result.mime_type == f"video/{extension}"
        assert result.label == f"intro.{extension}"

    def test_extension_case_insensitive(self):
        assert classify("https://cdn.example.com/INTRO.MP4").mime_type == "video/mp4"

    def test_youtube_wins_over_file_extension(self):
        """Earlier rules take precedence"""
        assert classify("https://youtu.be/abc123.mp4").provider is VideoProvider.YOUTUBE


class TestOtherProviders:
    """Test Dailymotion, Facebook and TikTok"""

    def test_dailymotion(self):
        result = classify("https://www.dailymotion.com/video/x7tgad0_some-title")
        assert result.provider is VideoProvider.DAILYMOTION
        assert result.embed_url == "https://www.dailymotion.com/embed/video/x7tgad0"

    def test_facebook_embeds_via_plugin(self):
        url = "https://www.facebook.com/page/videos/123456/"
        result = classify(url)
        assert result.provider is VideoProvider.FACEBOOK
        assert result.embed_url.startswith("https://www.facebook.com/plugins/video.php?href=https%3A%2F%2F")

    def test_tiktok_is_link_only(self):
        result = classify("https://www.tiktok.com/@user/video/123")
        assert result.provider is VideoProvider.TIKTOK
        assert result.label == "View on TikTok"
        assert not result.embeddable


class TestUnknown:
    """Test fallback for unrecognized URLs"""

    def test_unknown_url_label_truncated(self):
        url = "https://example.com/" + "v" * 60
        result = classify(url)
        assert result.provider is VideoProvider.UNKNOWN
        assert result.label == url[:40] + "..."
        assert result.embed_url is None

    def test_empty_url(self):
        assert classify("").provider is VideoProvider.UNKNOWN

    def test_classification_is_deterministic(self):
        url = "https://vimeo.com/76979871"
        assert classify(url) == classify(url)


class TestReferenceUrls:
    """Reference classifications"""

    @pytest.mark.parametrize(
        "url,provider,embed_id",
        [
            ("https://youtu.be/dQw4w9WgXcQ", VideoProvider.YOUTUBE, "dQw4w9WgXcQ"),
            ("https://vimeo.com/76979871", VideoProvider.VIMEO, "76979871"),
            ("https://vimeo.com/abc", VideoProvider.UNKNOWN, None),
            ("clip.mp4", VideoProvider.DIRECT_FILE, None),
            ("https://example.com/page", VideoProvider.UNKNOWN, None),
        ],
    )
    def test_classification(self, url, provider, embed_id):
        result = classify(url)
        assert result.provider is provider
        assert result.embed_id == embed_id

    def test_surrounding_whitespace_ignored(self):
        assert classify("  https://vimeo.com/76979871  ").embed_id == "76979871"
