"""Metadata fetching through yt-dlp, in-process or as a subprocess."""

import json
import logging
import shutil
import subprocess
from urllib.parse import quote
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yt_dlp

from .errors import ClientInputError, ExtractionFailure
from .models import ContentMetadata

logger = logging.getLogger(__name__)

WATCH_URL = "https://www.youtube.com/watch?v={video_id}"

BACKENDS = ("library", "binary")


def watch_url(video_id: str) -> str:
    return WATCH_URL.format(video_id=quote(video_id, safe=""))


@dataclass(frozen=True)
class ExtractionFlags:
    """Behavioral flags passed to yt-dlp on every extraction."""

    no_check_certificates: bool = True
    no_warnings: bool = True
    player_clients: Tuple[str, ...] = ("android", "web")
    cookie_file: Optional[str] = None

    def to_ydl_opts(self) -> Dict[str, Any]:
        opts: Dict[str, Any] = {
            "quiet": True,
            "logger": logging.getLogger("yt_dlp"),
            "no_warnings": self.no_warnings,
            "nocheckcertificate": self.no_check_certificates,
            "noplaylist": True,
            "skip_download": True,
        }
        if self.player_clients:
            opts["extractor_args"] = {"youtube": {"player_client": list(self.player_clients)}}
        if self.cookie_file:
            opts["cookiefile"] = self.cookie_file
        return opts

    def to_cli_args(self) -> List[str]:
        args = ["-J", "--no-playlist"]
        if self.no_warnings:
            args.append("--no-warnings")
        if self.no_check_certificates:
            args.append("--no-check-certificates")
        if self.player_clients:
            args += ["--extractor-args", "youtube:player_client=" + ",".join(self.player_clients)]
        if self.cookie_file:
            args += ["--cookies", self.cookie_file]
        return args


class MetadataBackend:
    """Resolves a watch URL into yt-dlp's info dictionary."""

    name = "backend"

    def fetch_metadata(self, url: str, flags: ExtractionFlags) -> Dict[str, Any]:
        raise NotImplementedError


class LibraryBackend(MetadataBackend):
    name = "library"

    def fetch_metadata(self, url: str, flags: ExtractionFlags) -> Dict[str, Any]:
        with yt_dlp.YoutubeDL(flags.to_ydl_opts()) as ydl:
            info = ydl.extract_info(url, download=False)
            if not info:
                raise ExtractionFailure("Failed to extract audio", f"yt-dlp returned no metadata for {url}")
            return ydl.sanitize_info(info)


class BinaryBackend(MetadataBackend):
    name = "binary"

    def __init__(self, binary: str = "yt-dlp"):
        self.binary = binary

    def fetch_metadata(self, url: str, flags: ExtractionFlags) -> Dict[str, Any]:
        cmd = [self.binary, *flags.to_cli_args(), url]
        try:
            proc = subprocess.run(cmd, check=True, capture_output=True, text=True)
        except FileNotFoundError as exc:
            raise ExtractionFailure("Failed to extract audio", f"yt-dlp executable not found: {self.binary}") from exc
        except subprocess.CalledProcessError as exc:
            stderr = (exc.stderr or "").strip()
            raise ExtractionFailure("Failed to extract audio", stderr or str(exc)) from exc

        try:
            return json.loads(proc.stdout)
        except json.JSONDecodeError as exc:
            raise ExtractionFailure("Failed to extract audio", f"yt-dlp printed invalid JSON: {exc}") from exc


class MetadataFetcher:
    """Long-lived handle that turns video ids into ContentMetadata."""

    def __init__(self, backend: MetadataBackend, flags: Optional[ExtractionFlags] = None):
        self.backend = backend
        self.flags = flags or ExtractionFlags()

    def fetch(self, video_id: Optional[str]) -> ContentMetadata:
        if not video_id or not video_id.strip():
            raise ClientInputError("Missing videoId parameter")

        url = watch_url(video_id.strip())
        logger.info(f"Fetching metadata for {video_id} via {self.backend.name} backend")
        try:
            info = self.backend.fetch_metadata(url, self.flags)
            return ContentMetadata.from_info(info)
        except ExtractionFailure:
            raise
        except Exception as e:
            raise ExtractionFailure("Failed to extract audio", str(e)) from e


def other_backend(name: str) -> str:
    return "binary" if name == "library" else "library"


def build_flags(config: Dict[str, Any]) -> ExtractionFlags:
    cookie_file = config.get("cookies_file")
    if cookie_file and not Path(cookie_file).is_file():
        logger.debug(f"Cookie file {cookie_file} not found, extracting without cookies")
        cookie_file = None
    return ExtractionFlags(
        player_clients=tuple(config.get("player_clients") or ()),
        cookie_file=cookie_file,
    )


def provision_backend(name: str, config: Dict[str, Any]) -> Optional[MetadataBackend]:
    """Resolve a backend by name at startup.

    Returns None when the backend cannot be used, e.g. the yt-dlp executable
    is not on disk. Nothing is downloaded.
    """
    if name == "library":
        return LibraryBackend()

    if name == "binary":
        binary = config.get("ytdlp_binary") or "yt-dlp"
        resolved = shutil.which(binary)
        if resolved is None:
            logger.error(f"yt-dlp executable '{binary}' not found, binary backend disabled")
            return None
        logger.info(f"Using yt-dlp executable at {resolved}")
        return BinaryBackend(binary=resolved)

    logger.error(f"Unknown extractor backend '{name}'")
    return None


def provision_fetcher(name: str, config: Dict[str, Any]) -> Optional[MetadataFetcher]:
    backend = provision_backend(name, config)
    if backend is None:
        return None
    return MetadataFetcher(backend, build_flags(config))
