import logging
from typing import Any, Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker

from src.db.models import ScoredAttemptRecord
from src.services.storage import ScoreStore, StoreUnavailableError

logger = logging.getLogger(__name__)


class SqlScoreStore(ScoreStore):
    """
    Score store on a relational database. The unique constraint on
    (attempt_id, record_type) makes insert-if-absent safe across processes:
    the losing writer gets an IntegrityError and reads back the winner's row.
    """

    def __init__(self, session_factory: async_sessionmaker, engine: Optional[AsyncEngine] = None):
        self._session_factory = session_factory
        self._engine = engine

    async def close(self) -> None:
        if self._engine is not None:
            await self._engine.dispose()

    async def _fetch(self, session, attempt_id: str, record_type: str) -> Optional[ScoredAttemptRecord]:
        result = await session.execute(
            select(ScoredAttemptRecord).where(
                ScoredAttemptRecord.attempt_id == attempt_id,
                ScoredAttemptRecord.record_type == record_type,
            )
        )
        return result.scalars().first()

    async def get(self, attempt_id: str, record_type: str) -> Optional[Any]:
        try:
            async with self._session_factory() as session:
                record = await self._fetch(session, attempt_id, record_type)
        except SQLAlchemyError as e:
            logger.error(f"Failed to read {record_type} for attempt {attempt_id}: {e}")
            raise StoreUnavailableError(f"Database read failed for attempt {attempt_id}") from e
        return record.payload if record is not None else None

    async def insert_if_absent(self, attempt_id: str, record_type: str, value: Any) -> Any:
        try:
            async with self._session_factory() as session:
                existing = await self._fetch(session, attempt_id, record_type)
                if existing is not None:
                    return existing.payload
                session.add(ScoredAttemptRecord(attempt_id=attempt_id, record_type=record_type, payload=value))
                try:
                    await session.commit()
                    logger.debug(f"Stored {record_type} for attempt {attempt_id}")
                    return value
                except IntegrityError:
                    await session.rollback()
                    logger.info(f"Concurrent insert for attempt {attempt_id} lost; reading existing record")
                    existing = await self._fetch(session, attempt_id, record_type)
                    if existing is None:
                        raise StoreUnavailableError(
                            f"Record for attempt {attempt_id} conflicted but could not be read back"
                        )
                    return existing.payload
        except SQLAlchemyError as e:
            logger.error(f"Failed to store {record_type} for attempt {attempt_id}: {e}")
            raise StoreUnavailableError(f"Database write failed for attempt {attempt_id}") from e

    async def delete(self, attempt_id: str, record_type: str) -> bool:
        try:
            async with self._session_factory() as session:
                result = await session.execute(
                    delete(ScoredAttemptRecord).where(
                        ScoredAttemptRecord.attempt_id == attempt_id,
                        ScoredAttemptRecord.record_type == record_type,
                    )
                )
                await session.commit()
        except SQLAlchemyError as e:
            logger.error(f"Failed to delete {record_type} for attempt {attempt_id}: {e}")
            raise StoreUnavailableError(f"Database delete failed for attempt {attempt_id}") from e
        return result.rowcount > 0
