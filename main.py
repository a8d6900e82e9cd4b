import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config.settings import get_settings
from src.core.logging_config import setup_logging
from src.routers import scoring as scoring_router
from src.services.store_factory import build_score_store, close_score_store
from services.quiz_scoring.catalog import get_catalog
from services.quiz_scoring.service import CentralizedScoringService

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    setup_logging(settings.log_level)
    catalog = get_catalog(settings.catalog_path) if settings.catalog_path else get_catalog()
    store = await build_score_store(settings)
    app.state.scoring_service = CentralizedScoringService(
        store=store,
        catalog=catalog,
        fallback_enabled=settings.fallback_enabled,
    )
    logger.info(f"Scoring service ready ({settings.store_backend} store, {len(catalog)} business models)")
    try:
        yield
    finally:
        await close_score_store(store)
        logger.info("Scoring service stopped")


app = FastAPI(title="Business Model Quiz Scoring API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(scoring_router.router, prefix="/api/v1", tags=["scoring"])


@app.get("/health", tags=["Health Check"])
async def health():
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn
    # Better to run with `uvicorn main:app --reload` from the project root directory
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
