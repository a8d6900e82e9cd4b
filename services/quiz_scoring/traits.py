# services/quiz_scoring/traits.py
# Turns a quiz response into twelve normalized personality-trait scores.

import logging
import math
from collections.abc import Mapping
from typing import Any, Dict

from pydantic import ValidationError

from .models import TRAIT_NAMES, InvalidQuizResponseError, PersonalityScores, QuizResponse
from .trait_tables import QUESTION_TABLES, TRAIT_BOUNDS

logger = logging.getLogger(__name__)

LOW_BAND_CEILING = 2.5
MEDIUM_BAND_CEILING = 3.5

TRAIT_DESCRIPTIONS = {
    'social_comfort': (
        "Prefers working independently and behind-the-scenes",
        "Comfortable with moderate social interaction",
        "Thrives on social interaction and being visible",
    ),
    'discipline': (
        "Works best with flexibility and variety",
        "Balances structure with adaptability",
        "Excels with consistent routines and systems",
    ),
    'risk_tolerance': (
        "Prefers proven, safe approaches",
        "Comfortable with calculated risks",
        "Embraces uncertainty and bold ventures",
    ),
    'tech_comfort': (
        "Prefers simple, familiar tools",
        "Comfortable learning new technologies",
        "Loves exploring cutting-edge tools",
    ),
    'structure_preference': (
        "Thrives with creative freedom",
        "Appreciates some guidance and flexibility",
        "Performs best with clear frameworks",
    ),
    'motivation': (
        "Steady, sustainable approach",
        "Balanced drive and patience",
        "High energy and ambitious goals",
    ),
    'feedback_resilience': (
        "Sensitive to criticism, needs encouragement",
        "Handles feedback constructively",
        "Uses criticism as fuel for improvement",
    ),
    'creativity': (
        "Prefers systematic, logical approaches",
        "Balances creativity with practicality",
        "Thrives on innovation and original ideas",
    ),
    'confidence': (
        "Cautious and thoughtful decision-maker",
        "Balanced confidence and humility",
        "Bold and decisive leader",
    ),
    'adaptability': (
        "Prefers stability and routine",
        "Adjusts well to moderate changes",
        "Thrives in dynamic, changing environments",
    ),
    'focus_preference': (
        "Prefers creative, varied tasks",
        "Balances focus with creativity",
        "Excels at deep, concentrated work",
    ),
    'resilience': (
        "Needs support during setbacks",
        "Recovers steadily from challenges",
        "Bounces back quickly from failures",
    ),
}


def coerce_quiz_response(response: Any) -> QuizResponse:
    """
    Accepts a QuizResponse or a mapping of answers; anything else raises
    InvalidQuizResponseError. Individual answers of the wrong type are
    dropped and contribute nothing.
    """
    if isinstance(response, QuizResponse):
        return response
    if not isinstance(response, Mapping):
        raise InvalidQuizResponseError(
            f"Quiz response must be an object, got {type(response).__name__}"
        )
    try:
        return QuizResponse.model_validate(dict(response))
    except ValidationError as e:
        raise InvalidQuizResponseError(f"Quiz response has malformed answers: {e}") from e


def round_half_up(value: float, digits: int = 1) -> float:
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def accumulate_raw_traits(response: QuizResponse) -> Dict[str, float]:
    """Sums every question table's contribution into a fresh zeroed accumulator."""
    raw = {trait: 0 for trait in TRAIT_NAMES}
    for table in QUESTION_TABLES:
        answer = getattr(response, table.field)
        if answer is None:
            continue
        for trait, delta in table.contributions(answer).items():
            raw[trait] += delta
    return raw


def normalize_trait(trait: str, raw_value: float) -> float:
    """
    Maps a raw accumulator value onto 1.0-5.0 using the trait's calibrated
    window. Values outside the window clamp to the nearest bound.
    """
    low, high = TRAIT_BOUNDS[trait]
    scaled = 1 + ((raw_value - low) / (high - low)) * 4
    clamped = max(1.0, min(5.0, scaled))
    return round_half_up(clamped, 1)


def calculate_personality_scores(response: Any) -> PersonalityScores:
    quiz = coerce_quiz_response(response)
    raw = accumulate_raw_traits(quiz)
    logger.debug(f"Raw trait totals: {raw}")
    return PersonalityScores(**{trait: normalize_trait(trait, raw[trait]) for trait in TRAIT_NAMES})


def trait_band(score: float) -> str:
    if score <= LOW_BAND_CEILING:
        return 'low'
    if score <= MEDIUM_BAND_CEILING:
        return 'medium'
    return 'high'


def describe_personality(scores: PersonalityScores) -> Dict[str, str]:
    """Short plain-language reading of each trait score."""
    band_index = {'low': 0, 'medium': 1, 'high': 2}
    return {
        trait: TRAIT_DESCRIPTIONS[trait][band_index[trait_band(getattr(scores, trait))]]
        for trait in TRAIT_NAMES
    }
