"""Best-audio selection over yt-dlp format lists."""

import logging
from typing import Iterable, List, Optional

from .models import FormatVariant

logger = logging.getLogger(__name__)

# yt-dlp marks an absent stream with the literal codec "none"
NO_CODEC = "none"


def is_audio_only(fmt: FormatVariant) -> bool:
    return fmt.vcodec == NO_CODEC and fmt.acodec != NO_CODEC


def has_audio(fmt: FormatVariant) -> bool:
    return fmt.acodec != NO_CODEC


def _highest_bitrate(formats: List[FormatVariant]) -> Optional[FormatVariant]:
    if not formats:
        return None
    # max() keeps the first of equal keys, so ties go to the earlier format
    return max(formats, key=lambda f: f.abr or 0)


def pick_best_audio(formats: Iterable[FormatVariant]) -> Optional[FormatVariant]:
    """Choose the format to serve as the audio stream.

    Audio-only formats are preferred. When the extractor exposes none, any
    format carrying audio is accepted instead. In both tiers the highest
    ``abr`` wins, a missing bitrate counting as 0.

    Returns:
        The chosen format, or None when nothing carries audio
    """
    formats = list(formats)

    best = _highest_bitrate([f for f in formats if is_audio_only(f)])
    if best is not None:
        return best

    fallback = _highest_bitrate([f for f in formats if has_audio(f)])
    if fallback is not None:
        logger.debug(f"No audio-only format, falling back to {fallback.format_id or fallback.ext}")
    return fallback
