"""Configuration loading and logging setup."""

import logging
import os
from pathlib import Path
from typing import Dict, List

from dotenv import load_dotenv
from rich.logging import RichHandler

from .fetcher import BACKENDS, other_backend

PROJECT_ROOT = Path(__file__).parent.parent

load_dotenv(PROJECT_ROOT / ".env")


def _split(value: str) -> List[str]:
    return [v.strip() for v in value.split(",") if v.strip()]


def _port(value: str):
    try:
        return int(value)
    except ValueError:
        return value


def load_config() -> Dict:
    """Load configuration from environment variables."""
    backend = os.getenv("EXTRACTOR_BACKEND", "library").strip().lower()

    cookies_file = os.getenv("COOKIES_FILE", "cookies.txt")
    if cookies_file and not Path(cookies_file).is_absolute():
        cookies_file = str(PROJECT_ROOT / cookies_file)

    return {
        "host": os.getenv("HOST", "0.0.0.0"),
        "port": _port(os.getenv("PORT", "10000")),
        "allow_origins": _split(os.getenv("ALLOW_ORIGINS", "*")) or ["*"],
        "service_name": os.getenv("SERVICE_NAME", "youtube-audio-extractor"),
        "log_level": os.getenv("LOG_LEVEL", "INFO"),
        "extractor_backend": backend,
        "simple_backend": os.getenv("SIMPLE_BACKEND", other_backend(backend)).strip().lower(),
        "ytdlp_binary": os.getenv("YTDLP_BINARY", "yt-dlp"),
        "cookies_file": cookies_file,
        "player_clients": _split(os.getenv("PLAYER_CLIENTS", "android,web")),
    }


def validate_config(config: Dict) -> List[str]:
    """Validate configuration and return list of errors."""
    errors = []

    for key in ("extractor_backend", "simple_backend"):
        if config.get(key) not in BACKENDS:
            errors.append(f"{key.upper()} must be one of {', '.join(BACKENDS)}, got '{config.get(key)}'")

    port = config.get("port", 0)
    if not isinstance(port, int) or not 0 < port < 65536:
        errors.append(f"PORT must be an integer between 1 and 65535, got {port!r}")

    if not isinstance(logging.getLevelName(str(config.get("log_level", "")).upper()), int):
        errors.append(f"Unknown LOG_LEVEL: {config.get('log_level')}")

    return errors


def setup_logging(log_level: str = "INFO") -> None:
    """Set up logging with Rich console output."""
    logging.root.handlers.clear()

    rich_handler = RichHandler(
        show_time=True,
        show_level=True,
        show_path=False,
        rich_tracebacks=True,
        markup=False,
    )

    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.INFO),
        handlers=[rich_handler],
        format="%(message)s",
    )

    noisy_loggers = [
        "yt_dlp",
        "httpx",
        "urllib3.connectionpool",
    ]

    for logger_name in noisy_loggers:
        logging.getLogger(logger_name).setLevel(logging.WARNING)
