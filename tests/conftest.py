from __future__ import annotations

from typing import Any, Callable

import pytest

from ytaudio.fetcher import ExtractionFlags, MetadataBackend, MetadataFetcher


class FakeBackend(MetadataBackend):
    name = "fake"

    def __init__(self, info: dict[str, Any] | None = None, error: Exception | None = None):
        self.info = info or {}
        self.error = error
        self.calls: list[tuple[str, ExtractionFlags]] = []

    def fetch_metadata(self, url: str, flags: ExtractionFlags) -> dict[str, Any]:
        self.calls.append((url, flags))
        if self.error is not None:
            raise self.error
        return self.info


def video_info(*formats: dict[str, Any], **fields: Any) -> dict[str, Any]:
    info = {
        "id": "abc123",
        "title": "Song",
        "uploader": "Band",
        "thumbnail": "https://i.ytimg.com/vi/abc123/maxresdefault.jpg",
        "duration": 215,
        "formats": list(formats),
    }
    info.update(fields)
    return info


@pytest.fixture
def config() -> dict[str, Any]:
    return {
        "host": "127.0.0.1",
        "port": 10000,
        "allow_origins": ["*"],
        "service_name": "youtube-audio-extractor",
        "log_level": "INFO",
        "extractor_backend": "library",
        "simple_backend": "binary",
        "ytdlp_binary": "yt-dlp",
        "cookies_file": None,
        "player_clients": ["android", "web"],
    }


@pytest.fixture
def make_fetcher() -> Callable[..., tuple[MetadataFetcher, FakeBackend]]:
    def _make(info: dict[str, Any] | None = None, error: Exception | None = None):
        backend = FakeBackend(info=info, error=error)
        return MetadataFetcher(backend), backend

    return _make


@pytest.fixture
def make_info() -> Callable[..., dict[str, Any]]:
    return video_info
