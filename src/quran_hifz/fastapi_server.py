"""
FastAPI backend for the Quran memorization trainer.

Proxies the AlQuran Cloud API to the browser and stores per-user phase progress.
"""

import logging
from typing import List, Optional

from fastapi import FastAPI, HTTPException, Path, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, RedirectResponse
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
import uvicorn

from .api_clients import AlQuranAPIClient, QuranAPIError
from .config import get_settings
from .progress_store import Progress, storage, utc_timestamp


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# Pydantic models for API requests/responses
class ProgressRequest(CamelModel):
    """Request model for saving memorization progress."""
    user_id: int = Field(..., ge=1, description="Learner id")
    surah_id: int = Field(..., ge=1, le=114, description="Surah number (1-114)")
    verse_number: int = Field(..., ge=1, description="Ayah number within the surah")
    phase: int = Field(..., ge=1, le=5, description="Memorization phase (1-5)")
    completed: Optional[bool] = Field(None, description="Whether the verse is fully memorized")
    last_accessed: Optional[str] = Field(None, description="Ignored; the server stamps the time")


class ProgressResponse(CamelModel):
    """Response model for a stored progress record."""
    id: int
    user_id: int
    surah_id: int
    verse_number: int
    phase: int
    completed: bool
    last_accessed: str


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    message: str


settings = get_settings()

# Initialize FastAPI app
app = FastAPI(
    title="Quran Memorization Trainer API",
    description="Quran content proxy and memorization progress tracking",
    version="1.0.0"
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

quran_client = AlQuranAPIClient()
logger = logging.getLogger(__name__)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Report invalid input as 400 with the validation errors."""
    message = "Invalid progress data" if request.url.path.startswith("/api/progress") else "Invalid request"
    return JSONResponse(
        status_code=400,
        content={"detail": message, "errors": jsonable_encoder(exc.errors())},
    )


@app.get("/health", response_model=HealthResponse)
def health_check():
    """Health check endpoint."""
    return HealthResponse(status="healthy", message="Quran memorization API is running")


# Quran API proxy routes

@app.get("/api/quran/surahs")
def get_surahs():
    """Fetch the list of all surahs."""
    try:
        return quran_client.fetch_surahs()
    except QuranAPIError as e:
        logger.error(f"Error fetching surahs: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch surahs")


@app.get("/api/quran/surah/{surah_id}")
def get_surah(surah_id: int = Path(..., ge=1, le=114, description="Surah number (1-114)")):
    """Fetch a surah with its verses and translations."""
    try:
        return quran_client.fetch_surah(surah_id)
    except QuranAPIError as e:
        logger.error(f"Error fetching surah {surah_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch surah details")


@app.get("/api/quran/verse/{surah_id}/{verse_number}")
def get_verse(
    surah_id: int = Path(..., ge=1, le=114, description="Surah number (1-114)"),
    verse_number: int = Path(..., ge=1, description="Ayah number"),
):
    """Fetch a single verse with its translation."""
    try:
        return quran_client.fetch_verse(surah_id, verse_number)
    except QuranAPIError as e:
        logger.error(f"Error fetching verse {surah_id}:{verse_number}: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch verse details")


@app.get("/api/quran/audio/{surah_id}/{verse_number}")
def get_audio(
    surah_id: int = Path(..., ge=1, le=114, description="Surah number (1-114)"),
    verse_number: int = Path(..., ge=1, description="Ayah number"),
):
    """Redirect to the recitation audio of a verse."""
    try:
        audio_url = quran_client.fetch_audio_url(surah_id, verse_number)
    except QuranAPIError as e:
        logger.error(f"Error fetching audio {surah_id}:{verse_number}: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch audio")
    return RedirectResponse(audio_url, status_code=302)


# Progress tracking routes

@app.get("/api/progress/user/{user_id}", response_model=List[ProgressResponse])
def get_user_progress(user_id: int):
    """All progress records of a user."""
    try:
        return [_convert_progress(progress) for progress in storage.get_all_progress_for_user(user_id)]
    except Exception as e:
        logger.error(f"Error getting progress for user {user_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to get user progress")


@app.get("/api/progress/{user_id}/{surah_id}/{verse_number}", response_model=ProgressResponse)
def get_progress(user_id: int, surah_id: int, verse_number: int):
    """Progress of a user on one verse."""
    try:
        progress = storage.get_progress(user_id, surah_id, verse_number)
    except Exception as e:
        logger.error(f"Error getting progress: {e}")
        raise HTTPException(status_code=500, detail="Failed to get progress")

    if progress is None:
        raise HTTPException(status_code=404, detail="Progress not found")
    return _convert_progress(progress)


@app.post("/api/progress", response_model=ProgressResponse, status_code=201)
def update_progress(request: ProgressRequest):
    """Create or update the progress record for (user, surah, verse)."""
    try:
        progress = storage.update_progress(
            user_id=request.user_id,
            surah_id=request.surah_id,
            verse_number=request.verse_number,
            phase=request.phase,
            completed=request.completed,
            last_accessed=utc_timestamp(),
        )
    except Exception as e:
        logger.error(f"Error updating progress: {e}")
        raise HTTPException(status_code=500, detail="Failed to update progress")
    return _convert_progress(progress)


def _convert_progress(progress: Progress) -> ProgressResponse:
    """Convert a stored Progress record to API response format."""
    return ProgressResponse(
        id=progress.id,
        user_id=progress.user_id,
        surah_id=progress.surah_id,
        verse_number=progress.verse_number,
        phase=progress.phase,
        completed=progress.completed,
        last_accessed=progress.last_accessed,
    )


def mount_ui(path: str = "/") -> FastAPI:
    """Serve the Gradio trainer from the API app. Returns the combined app."""
    import gradio as gr
    from .gradio_app import build_app

    return gr.mount_gradio_app(app, build_app(), path=path)


# Development server function
def run_server(host: Optional[str] = None, port: Optional[int] = None, reload: bool = False, with_ui: bool = False):
    """Run the FastAPI server."""
    if with_ui:
        uvicorn.run(
            mount_ui(),
            host=host or settings.host,
            port=port or settings.port,
            log_level=settings.log_level,
        )
        return

    uvicorn.run(
        "quran_hifz.fastapi_server:app",
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
        log_level=settings.log_level,
    )


def main():
    # Configure logging
    logging.basicConfig(level=settings.log_level.upper())

    # Run server
    run_server(reload=True)


if __name__ == "__main__":
    main()
