from typing import Optional

from .models import ContentMetadata, ExtractResponse, FormatVariant, SimpleExtractResponse

DEFAULT_TITLE = "Unknown Title"
DEFAULT_ARTIST = "Unknown Artist"
THUMBNAIL_URL = "https://i.ytimg.com/vi/{video_id}/hqdefault.jpg"


def default_thumbnail(video_id: str) -> str:
    return THUMBNAIL_URL.format(video_id=video_id)


def build_extract_response(video_id: str, metadata: ContentMetadata, audio: FormatVariant) -> ExtractResponse:
    return ExtractResponse(
        audio_url=audio.url,
        title=metadata.title or DEFAULT_TITLE,
        artist=metadata.uploader_name or DEFAULT_ARTIST,
        thumbnail=metadata.thumbnail or default_thumbnail(video_id),
        duration=metadata.duration,
        format=audio.ext,
        quality=audio.abr if audio.abr is not None else "unknown",
    )


def _last_thumbnail(metadata: ContentMetadata) -> Optional[str]:
    for thumb in reversed(metadata.thumbnails):
        if thumb.get("url"):
            return thumb["url"]
    return None


def build_simple_response(video_id: str, metadata: ContentMetadata, audio: FormatVariant) -> SimpleExtractResponse:
    """Envelope for /extract-simple: numeric quality and duration, largest thumbnail."""
    return SimpleExtractResponse(
        audio_url=audio.url,
        title=metadata.title or DEFAULT_TITLE,
        artist=metadata.uploader_name or DEFAULT_ARTIST,
        thumbnail=_last_thumbnail(metadata) or metadata.thumbnail or default_thumbnail(video_id),
        duration=int(metadata.duration or 0),
        format=audio.ext,
        quality=audio.abr or 0,
    )
