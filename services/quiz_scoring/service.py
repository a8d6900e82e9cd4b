import asyncio
import logging
from typing import Any, Callable, Dict, List, Optional

from src.services.storage import ScoreStore

from .catalog import BusinessModelCatalog, get_catalog
from .matching import calculate_business_model_matches, rank_matches
from .models import (
    RECORD_TYPE_BUSINESS_MODEL_SCORES,
    BusinessModelScore,
    CatalogMismatchError,
    ScoresNotFoundError,
    Scored,
    ScoringOutcome,
    Unavailable,
)

logger = logging.getLogger(__name__)

Matcher = Callable[[Any, BusinessModelCatalog], List[BusinessModelScore]]

PLACEHOLDER_RANKING = (
    ('affiliate-marketing', 85),
    ('content-creation', 80),
    ('freelancing', 75),
)


class CentralizedScoringService:
    """
    Single source of truth for business-model scores of a quiz attempt.

    Scores are computed at most once per attempt id and then served from the
    score store verbatim. Concurrent requests for the same attempt share one
    in-flight computation; different attempts never wait on each other.
    """

    def __init__(
        self,
        store: ScoreStore,
        catalog: Optional[BusinessModelCatalog] = None,
        matcher: Matcher = calculate_business_model_matches,
        fallback_enabled: bool = True,
    ):
        self._store = store
        self._catalog = catalog if catalog is not None else get_catalog()
        self._matcher = matcher
        self._fallback_enabled = fallback_enabled
        self._in_flight: Dict[str, asyncio.Task] = {}

    @property
    def catalog(self) -> BusinessModelCatalog:
        return self._catalog

    def in_flight_count(self) -> int:
        return len(self._in_flight)

    def _verify_against_catalog(self, scores: List[BusinessModelScore]) -> None:
        unknown = [s.id for s in scores if s.id not in self._catalog]
        if unknown:
            raise CatalogMismatchError(f"Scores reference ids missing from the catalog: {unknown}")

    def _decode(self, payload: List[Dict[str, Any]]) -> List[BusinessModelScore]:
        """Decodes a stored record; records from an older catalog raise CatalogMismatchError."""
        scores = [BusinessModelScore.model_validate(item) for item in payload]
        self._verify_against_catalog(scores)
        return scores

    async def _compute_and_persist(self, attempt_id: str, quiz_response: Any) -> List[BusinessModelScore]:
        scores = rank_matches(self._matcher(quiz_response, self._catalog))
        self._verify_against_catalog(scores)
        payload = [s.model_dump() for s in scores]
        stored = await self._store.insert_if_absent(attempt_id, RECORD_TYPE_BUSINESS_MODEL_SCORES, payload)
        if stored != payload:
            logger.info(f"Attempt {attempt_id} was scored concurrently elsewhere; using the stored result")
        else:
            logger.info(f"Computed and stored {len(scores)} business model scores for attempt {attempt_id}")
        return self._decode(stored)

    def _start_computation(self, attempt_id: str, quiz_response: Any) -> asyncio.Task:
        task = self._in_flight.get(attempt_id)
        if task is not None:
            return task
        task = asyncio.ensure_future(self._compute_and_persist(attempt_id, quiz_response))
        self._in_flight[attempt_id] = task

        def _evict(finished: asyncio.Task) -> None:
            if self._in_flight.get(attempt_id) is finished:
                del self._in_flight[attempt_id]

        task.add_done_callback(_evict)
        return task

    async def get_or_compute(self, attempt_id: str, quiz_response: Any) -> List[BusinessModelScore]:
        """
        Returns the stored scores for the attempt, computing and persisting
        them first if none exist. Matching and store failures propagate;
        nothing is stored when they occur.
        """
        task = self._in_flight.get(attempt_id)
        if task is None:
            stored = await self._store.get(attempt_id, RECORD_TYPE_BUSINESS_MODEL_SCORES)
            if stored is not None:
                logger.debug(f"Reusing stored scores for attempt {attempt_id}")
                return self._decode(stored)
            task = self._start_computation(attempt_id, quiz_response)
        # shield: one caller being cancelled must not cancel the shared computation
        return await asyncio.shield(task)

    async def get_stored_only(self, attempt_id: str) -> List[BusinessModelScore]:
        """Returns stored scores without ever computing. Raises ScoresNotFoundError."""
        stored = await self._store.get(attempt_id, RECORD_TYPE_BUSINESS_MODEL_SCORES)
        if stored is None:
            raise ScoresNotFoundError(f"No stored scores for attempt {attempt_id}")
        return self._decode(stored)

    async def invalidate(self, attempt_id: str) -> bool:
        """Deletes the stored scores so the next request recomputes them."""
        task = self._in_flight.get(attempt_id)
        if task is not None:
            await asyncio.gather(task, return_exceptions=True)
        removed = await self._store.delete(attempt_id, RECORD_TYPE_BUSINESS_MODEL_SCORES)
        logger.warning(f"Invalidated stored scores for attempt {attempt_id} (existed={removed})")
        return removed

    async def recompute(self, attempt_id: str, quiz_response: Any) -> List[BusinessModelScore]:
        await self.invalidate(attempt_id)
        logger.warning(f"Recomputing scores for attempt {attempt_id}")
        return await self.get_or_compute(attempt_id, quiz_response)

    def _placeholder_scores(self) -> List[BusinessModelScore]:
        placeholders = []
        for model_id, score in PLACEHOLDER_RANKING:
            model = self._catalog.get(model_id)
            if model is not None:
                placeholders.append(
                    BusinessModelScore(id=model.id, name=model.name, score=score, category=model.category)
                )
        return placeholders

    async def resolve_for_presentation(self, attempt_id: str, quiz_response: Any) -> ScoringOutcome:
        """
        Wraps get_or_compute for display paths. Returns Scored on success and
        Unavailable (with non-persisted fallback scores when enabled) for any
        failure to produce the canonical scores. Catalog mismatches still raise.
        """
        try:
            return Scored(scores=await self.get_or_compute(attempt_id, quiz_response))
        except CatalogMismatchError:
            raise
        except Exception as e:
            reason = f"{type(e).__name__}: {e}"

        fallback: List[BusinessModelScore] = []
        if self._fallback_enabled:
            try:
                fallback = rank_matches(self._matcher(quiz_response, self._catalog))
            except Exception as e:
                logger.debug(f"Fallback matching failed for attempt {attempt_id}, using placeholders: {e}")
                fallback = self._placeholder_scores()
        logger.warning(
            f"Scoring fallback used for attempt {attempt_id}: {reason}",
            extra={"event": "scoring.fallback", "attempt_id": attempt_id, "fallback_size": len(fallback)},
        )
        return Unavailable(reason=reason, fallback_scores=fallback)
