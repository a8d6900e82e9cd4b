import dataclasses

import pytest
from pydantic import ValidationError

from services.quiz_scoring.models import (
    BusinessModelScore,
    FitAdjustment,
    InvalidQuizResponseError,
    PersonalityScores,
    QuizResponse,
    Scored,
    ScoringError,
    ScoresNotFoundError,
    Unavailable,
)


def test_accepts_camel_and_snake_case_keys():
    camel = QuizResponse.model_validate({"techSkillsRating": 4, "familiarTools": ["canva"]})
    snake = QuizResponse.model_validate({"tech_skills_rating": 4, "familiar_tools": ["canva"]})
    assert camel == snake
    assert camel.tech_skills_rating == 4


def test_all_answers_optional_and_unknown_keys_ignored():
    response = QuizResponse.model_validate({"notAQuestion": True})
    assert response.main_motivation is None
    assert not hasattr(response, "not_a_question")


def test_mistyped_answers_become_unanswered():
    response = QuizResponse.model_validate({
        "techSkillsRating": "5",
        "riskComfortLevel": 4.5,
        "selfMotivationLevel": False,
        "mainMotivation": 12,
        "familiarTools": "canva",
    })
    assert response.tech_skills_rating is None
    assert response.risk_comfort_level is None
    assert response.self_motivation_level is None
    assert response.main_motivation is None
    assert response.familiar_tools is None


def test_amount_answers_keep_fractional_values():
    response = QuizResponse.model_validate({"upfrontInvestment": 249.5, "weeklyTimeCommitment": 10})
    assert response.upfront_investment == 249.5
    assert response.weekly_time_commitment == 10


def test_quiz_response_is_frozen():
    response = QuizResponse(tech_skills_rating=4)
    with pytest.raises(ValidationError):
        response.tech_skills_rating = 5


def test_personality_scores_bounded():
    values = {field: 3.0 for field in PersonalityScores.model_fields}
    PersonalityScores(**values)
    values["creativity"] = 5.1
    with pytest.raises(ValidationError):
        PersonalityScores(**values)


def test_business_model_score_bounds():
    with pytest.raises(ValidationError):
        BusinessModelScore(id="a", name="A", score=101, category="c")
    with pytest.raises(ValidationError):
        BusinessModelScore(id="a", name="A", score=-1, category="c")


def test_fit_adjustment_conditions():
    assert FitAdjustment(field="client_calls_comfort", equals="no", delta=-8).equals == "no"
    with pytest.raises(ValidationError, match="exactly one"):
        FitAdjustment(field="client_calls_comfort", delta=-8)


def test_outcome_variants_are_tagged():
    score = BusinessModelScore(id="a", name="A", score=50, category="c")
    scored = Scored(scores=[score])
    unavailable = Unavailable(reason="store down")
    assert scored.kind == "scored"
    assert unavailable.kind == "unavailable"
    assert unavailable.fallback_scores == []
    with pytest.raises(dataclasses.FrozenInstanceError):
        unavailable.reason = "other"


def test_error_hierarchy():
    assert issubclass(InvalidQuizResponseError, ScoringError)
    assert issubclass(InvalidQuizResponseError, ValueError)
    assert issubclass(ScoresNotFoundError, LookupError)
