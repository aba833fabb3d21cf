import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Dict, Optional

from fastapi import APIRouter, Depends, FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse, RedirectResponse

from .config import load_config
from .envelope import build_extract_response, build_simple_response
from .errors import AudioExtractorError, BackendUnavailable, ClientInputError, ExtractionFailure, NotFoundError
from .fetcher import MetadataFetcher, provision_fetcher
from .models import ExtractResponse, SimpleExtractResponse
from .selector import pick_best_audio

logger = logging.getLogger(__name__)

ENDPOINTS = [
    "GET /extract?videoId=XXXX - Extract audio URL",
    "GET /extract-simple?videoId=XXXX - Simple extraction",
    "GET /stream?videoId=XXXX - Direct audio stream",
    "GET /health - Health check",
]

router = APIRouter()


def require_video_id(video_id: Optional[str] = Query(None, alias="videoId")) -> str:
    if not video_id or not video_id.strip():
        raise ClientInputError("Missing videoId parameter")
    return video_id.strip()


def _ready(fetcher: Optional[MetadataFetcher]) -> MetadataFetcher:
    if fetcher is None:
        raise BackendUnavailable("Service unavailable", "Extraction backend not initialized")
    return fetcher


def get_fetcher(request: Request) -> MetadataFetcher:
    return _ready(request.app.state.fetcher)


def get_simple_fetcher(request: Request) -> MetadataFetcher:
    return _ready(request.app.state.simple_fetcher)


@router.get("/health")
def health(request: Request):
    return {
        "status": "ok",
        "service": request.app.state.config["service_name"],
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@router.get("/extract", response_model=ExtractResponse)
def extract(
    video_id: str = Depends(require_video_id),
    fetcher: MetadataFetcher = Depends(get_fetcher),
):
    metadata = fetcher.fetch(video_id)
    audio = pick_best_audio(metadata.formats)
    if audio is None:
        raise NotFoundError("No audio stream found")
    return build_extract_response(video_id, metadata, audio)


@router.get("/extract-simple", response_model=SimpleExtractResponse)
def extract_simple(
    video_id: str = Depends(require_video_id),
    fetcher: MetadataFetcher = Depends(get_simple_fetcher),
):
    metadata = fetcher.fetch(video_id)
    audio = pick_best_audio(metadata.formats)
    if audio is None:
        raise NotFoundError("No audio stream found")
    return build_simple_response(video_id, metadata, audio)


@router.get("/stream")
def stream(
    video_id: str = Depends(require_video_id),
    fetcher: MetadataFetcher = Depends(get_fetcher),
):
    try:
        metadata = fetcher.fetch(video_id)
        audio = pick_best_audio(metadata.formats)
    except Exception as e:
        logger.error(f"Stream error for {video_id}: {e}")
        return PlainTextResponse("Stream failed", status_code=500)

    if audio is None or not audio.url:
        return PlainTextResponse("No audio found", status_code=404)

    return RedirectResponse(audio.url, status_code=302)


async def handle_extractor_error(request: Request, exc: AudioExtractorError) -> JSONResponse:
    if isinstance(exc, ExtractionFailure):
        logger.error(f"Extraction error on {request.url.path}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"Unhandled error on {request.url.path}: {exc}", exc_info=exc)
    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error", "message": str(exc)},
    )


def create_app(
    config: Optional[Dict] = None,
    fetcher: Optional[MetadataFetcher] = None,
    simple_fetcher: Optional[MetadataFetcher] = None,
) -> FastAPI:
    """Build the API.

    Fetchers passed in are used as-is; missing ones are provisioned from
    ``config`` when the application starts. A fetcher that cannot be
    provisioned stays None and its endpoints answer 503.
    """
    config = config or load_config()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if app.state.fetcher is None:
            app.state.fetcher = provision_fetcher(config["extractor_backend"], config)
        if app.state.simple_fetcher is None:
            app.state.simple_fetcher = provision_fetcher(config["simple_backend"], config)

        logger.info(f"YouTube Audio Extractor API running on port {config['port']}")
        logger.info("Endpoints available:")
        for endpoint in ENDPOINTS:
            logger.info(f"  {endpoint}")
        yield

    app = FastAPI(title="YouTube Audio Extractor API", lifespan=lifespan)
    app.state.config = config
    app.state.fetcher = fetcher
    app.state.simple_fetcher = simple_fetcher

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config["allow_origins"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(AudioExtractorError, handle_extractor_error)
    app.add_exception_handler(Exception, handle_unexpected_error)
    app.include_router(router)
    return app
