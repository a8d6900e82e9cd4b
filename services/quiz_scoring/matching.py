# services/quiz_scoring/matching.py
# Scores every catalog business model against a quiz response.

import logging
from typing import Any, Dict, List, Optional, Sequence

from .catalog import BusinessModelCatalog, get_catalog
from .models import (
    BusinessModelDefinition,
    BusinessModelScore,
    FitAdjustment,
    IdealProfile,
    PersonalityScores,
    QuizResponse,
)
from .traits import calculate_personality_scores, coerce_quiz_response, round_half_up

logger = logging.getLogger(__name__)

TRAIT_SCALE_SPAN = 4.0  # 1.0 to 5.0

DISTRIBUTION_BANDS = (
    ('excellent', 90),
    ('good', 80),
    ('fair', 70),
)


def trait_similarity(score: float, target: float) -> float:
    return 1.0 - abs(score - target) / TRAIT_SCALE_SPAN


def profile_fit(traits: PersonalityScores, profile: IdealProfile) -> float:
    """Weighted mean similarity between the trait scores and the ideal targets, 0.0-1.0."""
    total_weight = 0.0
    weighted = 0.0
    for trait, affinity in profile.traits.items():
        weighted += affinity.weight * trait_similarity(getattr(traits, trait), affinity.target)
        total_weight += affinity.weight
    return weighted / total_weight


def adjustment_applies(adjustment: FitAdjustment, response: QuizResponse) -> bool:
    value = getattr(response, adjustment.field)
    if value is None:
        return False
    if adjustment.equals is not None:
        return value == adjustment.equals
    if adjustment.one_of is not None:
        return value in adjustment.one_of
    if adjustment.includes is not None:
        return isinstance(value, list) and adjustment.includes in value
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    if adjustment.at_least is not None:
        return value >= adjustment.at_least
    return value <= adjustment.at_most


def score_business_model(
    model: BusinessModelDefinition,
    traits: PersonalityScores,
    response: QuizResponse,
) -> BusinessModelScore:
    fit = profile_fit(traits, model.ideal_profile) * 100
    adjustment_total = sum(
        adj.delta for adj in model.ideal_profile.adjustments if adjustment_applies(adj, response)
    )
    raw_score = max(0.0, min(100.0, fit + adjustment_total))
    score = int(round_half_up(raw_score, 0))
    return BusinessModelScore(id=model.id, name=model.name, score=score, category=model.category)


def calculate_business_model_matches(
    response: Any,
    catalog: Optional[BusinessModelCatalog] = None,
) -> List[BusinessModelScore]:
    """
    Returns one score per catalog model, in catalog order. The list is not
    sorted; use rank_matches for a ranking. Raises InvalidQuizResponseError
    for a response that is not an answer set.
    """
    if catalog is None:
        catalog = get_catalog()
    quiz = coerce_quiz_response(response)
    traits = calculate_personality_scores(quiz)
    scores = [score_business_model(model, traits, quiz) for model in catalog]
    logger.debug(f"Scored {len(scores)} business models")
    return scores


def rank_matches(scores: Sequence[BusinessModelScore]) -> List[BusinessModelScore]:
    """Highest score first. Equal scores keep their input (catalog) order."""
    return sorted(scores, key=lambda s: -s.score)


def top_matches(scores: Sequence[BusinessModelScore], count: int = 3) -> List[BusinessModelScore]:
    return rank_matches(scores)[:count]


def bottom_matches(scores: Sequence[BusinessModelScore], count: int = 3) -> List[BusinessModelScore]:
    """Weakest matches, worst first."""
    if count <= 0:
        return []
    return list(reversed(rank_matches(scores)[-count:]))


def matches_in_category(scores: Sequence[BusinessModelScore], category: str) -> List[BusinessModelScore]:
    return [s for s in rank_matches(scores) if s.category == category]


def find_match(scores: Sequence[BusinessModelScore], model_id: str) -> Optional[BusinessModelScore]:
    for s in scores:
        if s.id == model_id:
            return s
    return None


def score_distribution(scores: Sequence[BusinessModelScore]) -> Dict[str, int]:
    distribution = {band: 0 for band, _ in DISTRIBUTION_BANDS}
    distribution['poor'] = 0
    for s in scores:
        for band, floor in DISTRIBUTION_BANDS:
            if s.score >= floor:
                distribution[band] += 1
                break
        else:
            distribution['poor'] += 1
    return distribution
