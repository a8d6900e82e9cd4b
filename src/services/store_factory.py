import logging
from typing import Optional

from config.settings import ScoringSettings
from src.services.storage import InMemoryScoreStore, ScoreStore

logger = logging.getLogger(__name__)


async def build_score_store(settings: ScoringSettings) -> ScoreStore:
    """Creates the score store selected by SCORING_STORE_BACKEND."""
    backend = settings.store_backend
    if backend == "redis":
        from src.cache.score_cache import RedisScoreStore
        logger.info("Using Redis score store")
        return RedisScoreStore()
    if backend == "sql":
        from src.db.database import get_async_engine, get_session_factory, init_models
        from src.db.score_repository import SqlScoreStore
        engine = get_async_engine(settings.database_url)
        await init_models(engine)
        logger.info("Using SQL score store")
        return SqlScoreStore(get_session_factory(engine), engine=engine)
    logger.info("Using in-memory score store")
    return InMemoryScoreStore()


async def close_score_store(store: Optional[ScoreStore]) -> None:
    if store is not None:
        await store.close()
