from fastapi import APIRouter, HTTPException, Depends, Query, Request
from pydantic.alias_generators import to_camel
from typing import Optional
import logging

from src.schemas.scoring import (
    BusinessModelScoresResponse,
    PersonalityProfileResponse,
    PresentationScoresResponse,
)
from src.services.storage import StoreUnavailableError
from services.quiz_scoring.matching import score_distribution, top_matches
from services.quiz_scoring.models import (
    CatalogMismatchError,
    InvalidQuizResponseError,
    QuizResponse,
    Scored,
    ScoresNotFoundError,
)
from services.quiz_scoring.service import CentralizedScoringService
from services.quiz_scoring.traits import calculate_personality_scores, describe_personality

router = APIRouter()
logger = logging.getLogger(__name__)


def get_scoring_service(request: Request) -> CentralizedScoringService:
    return request.app.state.scoring_service


def _scores_response(attempt_id: str, scores, limit: Optional[int] = None) -> BusinessModelScoresResponse:
    shown = top_matches(scores, limit) if limit is not None else scores
    return BusinessModelScoresResponse(
        attempt_id=attempt_id,
        scores=shown,
        distribution=score_distribution(scores),
    )


@router.post("/quiz-attempts/{attempt_id}/business-model-scores", response_model=BusinessModelScoresResponse)
async def score_quiz_attempt(
    attempt_id: str,
    quiz_response: QuizResponse,
    service: CentralizedScoringService = Depends(get_scoring_service),
):
    """
    Returns the canonical business-model ranking for an attempt, computing
    and storing it on first request.
    """
    try:
        scores = await service.get_or_compute(attempt_id, quiz_response)
        return _scores_response(attempt_id, scores)
    except InvalidQuizResponseError as e:
        logger.error(f"Invalid quiz response for attempt {attempt_id}: {e}")
        raise HTTPException(status_code=422, detail=str(e))
    except StoreUnavailableError as e:
        logger.error(f"Score store unavailable for attempt {attempt_id}: {e}")
        raise HTTPException(status_code=503, detail="Score store unavailable")
    except Exception as e:
        logger.exception(f"Unexpected error scoring attempt {attempt_id}: {e}")
        raise HTTPException(status_code=500, detail="Internal Server Error")


@router.get("/quiz-attempts/{attempt_id}/business-model-scores", response_model=BusinessModelScoresResponse)
async def get_stored_scores(
    attempt_id: str,
    limit: Optional[int] = Query(None, ge=1),
    service: CentralizedScoringService = Depends(get_scoring_service),
):
    try:
        scores = await service.get_stored_only(attempt_id)
        return _scores_response(attempt_id, scores, limit)
    except ScoresNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except StoreUnavailableError as e:
        logger.error(f"Score store unavailable for attempt {attempt_id}: {e}")
        raise HTTPException(status_code=503, detail="Score store unavailable")
    except Exception as e:
        logger.exception(f"Unexpected error reading scores for attempt {attempt_id}: {e}")
        raise HTTPException(status_code=500, detail="Internal Server Error")


@router.post(
    "/quiz-attempts/{attempt_id}/business-model-scores/presentation",
    response_model=PresentationScoresResponse,
)
async def present_quiz_attempt(
    attempt_id: str,
    quiz_response: QuizResponse,
    service: CentralizedScoringService = Depends(get_scoring_service),
):
    """Display-path variant: degrades to fallback scores instead of failing."""
    try:
        outcome = await service.resolve_for_presentation(attempt_id, quiz_response)
    except CatalogMismatchError as e:
        logger.error(f"Catalog mismatch for attempt {attempt_id}: {e}")
        raise HTTPException(status_code=500, detail="Internal Server Error")
    if isinstance(outcome, Scored):
        return PresentationScoresResponse(attempt_id=attempt_id, status=outcome.kind, scores=outcome.scores)
    return PresentationScoresResponse(
        attempt_id=attempt_id,
        status=outcome.kind,
        scores=outcome.fallback_scores,
        reason=outcome.reason,
    )


@router.post(
    "/quiz-attempts/{attempt_id}/business-model-scores/recompute",
    response_model=BusinessModelScoresResponse,
)
async def recompute_quiz_attempt(
    attempt_id: str,
    quiz_response: QuizResponse,
    service: CentralizedScoringService = Depends(get_scoring_service),
):
    try:
        scores = await service.recompute(attempt_id, quiz_response)
        return _scores_response(attempt_id, scores)
    except StoreUnavailableError as e:
        logger.error(f"Score store unavailable for attempt {attempt_id}: {e}")
        raise HTTPException(status_code=503, detail="Score store unavailable")
    except Exception as e:
        logger.exception(f"Unexpected error recomputing attempt {attempt_id}: {e}")
        raise HTTPException(status_code=500, detail="Internal Server Error")


@router.post("/personality-scores", response_model=PersonalityProfileResponse)
async def personality_scores(quiz_response: QuizResponse):
    scores = calculate_personality_scores(quiz_response)
    descriptions = {to_camel(trait): text for trait, text in describe_personality(scores).items()}
    return PersonalityProfileResponse(scores=scores, descriptions=descriptions)
