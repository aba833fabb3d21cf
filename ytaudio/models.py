from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class FormatVariant(BaseModel):
    """One entry of yt-dlp's ``formats`` list."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    url: Optional[str] = None
    vcodec: Optional[str] = None
    acodec: Optional[str] = None
    abr: Optional[Union[int, float]] = None
    ext: Optional[str] = None
    format_id: Optional[str] = None


class ContentMetadata(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    title: Optional[str] = None
    uploader: Optional[str] = None
    channel: Optional[str] = None
    thumbnail: Optional[str] = None
    thumbnails: List[Dict[str, Any]] = Field(default_factory=list)
    duration: Optional[Union[int, float]] = None
    formats: List[FormatVariant] = Field(default_factory=list)

    @property
    def uploader_name(self) -> Optional[str]:
        return self.uploader or self.channel

    @classmethod
    def from_info(cls, info: Dict[str, Any]) -> "ContentMetadata":
        # playlist-like responses carry the video under "entries"
        entries = info.get("entries")
        if entries:
            info = next((e for e in entries if e), info)
        data = dict(info)
        data["formats"] = info.get("formats") or []
        data["thumbnails"] = [t for t in (info.get("thumbnails") or []) if isinstance(t, dict)]
        return cls.model_validate(data)


class ExtractResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    audio_url: Optional[str] = Field(default=None, alias="audioUrl")
    title: str
    artist: str
    thumbnail: str
    duration: Optional[Union[int, float]] = None
    format: Optional[str] = None
    quality: Union[int, float, str] = "unknown"


class SimpleExtractResponse(ExtractResponse):
    duration: int = 0
    quality: Union[int, float] = 0
