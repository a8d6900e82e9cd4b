# tests/scoring/test_traits.py
import itertools
import statistics

import pytest

from services.quiz_scoring.models import (
    TRAIT_NAMES,
    InvalidQuizResponseError,
    PersonalityScores,
    QuizResponse,
)
from services.quiz_scoring.traits import (
    TRAIT_DESCRIPTIONS,
    accumulate_raw_traits,
    calculate_personality_scores,
    coerce_quiz_response,
    describe_personality,
    normalize_trait,
    round_half_up,
    trait_band,
)

EMPTY_RESPONSE_SCORES = {
    'social_comfort': 2.5,
    'discipline': 2.2,
    'risk_tolerance': 2.8,
    'tech_comfort': 1.8,
    'structure_preference': 3.0,
    'motivation': 2.0,
    'feedback_resilience': 2.5,
    'creativity': 2.2,
    'confidence': 2.8,
    'adaptability': 2.0,
    'focus_preference': 2.5,
    'resilience': 2.2,
}

SOLO_TECH_SCORES = {
    'social_comfort': 2.2,
    'discipline': 2.6,
    'risk_tolerance': 3.4,
    'tech_comfort': 2.4,
    'structure_preference': 3.0,
    'motivation': 2.6,
    'feedback_resilience': 3.1,
    'creativity': 2.3,
    'confidence': 3.5,
    'adaptability': 2.0,
    'focus_preference': 2.5,
    'resilience': 2.2,
}


def _as_dict(scores: PersonalityScores) -> dict:
    return scores.model_dump()


def test_empty_response_scores_every_trait_from_zero():
    scores = _as_dict(calculate_personality_scores({}))
    assert set(scores) == set(TRAIT_NAMES)
    for trait, expected in EMPTY_RESPONSE_SCORES.items():
        assert scores[trait] == pytest.approx(expected), trait


def test_solo_tech_response_exact_scores(solo_tech_response):
    scores = _as_dict(calculate_personality_scores(solo_tech_response))
    for trait, expected in SOLO_TECH_SCORES.items():
        assert scores[trait] == pytest.approx(expected), trait


def test_snake_case_and_model_input_score_identically(solo_tech_response):
    from_wire = calculate_personality_scores(solo_tech_response)
    from_model = calculate_personality_scores(QuizResponse.model_validate(solo_tech_response))
    from_snake = calculate_personality_scores({
        'work_collaboration_preference': 'solo-only',
        'risk_comfort_level': 5,
        'tech_skills_rating': 5,
        'self_motivation_level': 5,
    })
    assert from_wire == from_model == from_snake


def test_solo_tech_against_dataset_median(solo_tech_response):
    """Solo tech profile: below-median social comfort, above-median risk and tech comfort."""
    dataset = [
        calculate_personality_scores({
            'workCollaborationPreference': collab,
            'riskComfortLevel': risk,
            'techSkillsRating': tech,
            'selfMotivationLevel': drive,
        })
        for collab, risk, tech, drive in itertools.product(
            ['solo-only', 'mostly-solo', 'both', 'team-oriented'],
            range(1, 6), range(1, 6), range(1, 6),
        )
    ]
    solo_tech = calculate_personality_scores(solo_tech_response)

    def median(trait):
        return statistics.median(getattr(s, trait) for s in dataset)

    assert solo_tech.social_comfort < median('social_comfort')
    assert solo_tech.risk_tolerance > median('risk_tolerance')
    assert solo_tech.tech_comfort > median('tech_comfort')


@pytest.mark.parametrize("likert_value,choice_index", [(5, 0), (1, 3), (3, 1), (4, 2)])
def test_extreme_responses_stay_in_range(extreme_response, likert_value, choice_index):
    scores = _as_dict(calculate_personality_scores(extreme_response(likert_value, choice_index)))
    for trait, value in scores.items():
        assert 1.0 <= value <= 5.0, trait
        assert round(value, 1) == value


def test_high_engagement_outscores_low_engagement(extreme_response):
    high = calculate_personality_scores(extreme_response(5, 0))
    low = calculate_personality_scores(extreme_response(1, 3))
    assert high.motivation > low.motivation
    assert high.confidence > low.confidence
    assert high.tech_comfort > low.tech_comfort
    assert high.resilience > low.resilience


def test_out_of_range_likert_answer_contributes_nothing():
    assert calculate_personality_scores({'selfMotivationLevel': 9}) == calculate_personality_scores({})
    assert calculate_personality_scores({'selfMotivationLevel': 0}) == calculate_personality_scores({})


def test_unknown_option_contributes_nothing():
    assert (
        calculate_personality_scores({'workCollaborationPreference': 'hermit'})
        == calculate_personality_scores({})
    )


def test_unknown_keys_are_ignored():
    assert calculate_personality_scores({'favouriteColour': 'teal'}) == calculate_personality_scores({})


@pytest.mark.parametrize("bad_response", [None, "solo-only", ["solo-only"], 42])
def test_non_mapping_response_is_rejected(bad_response):
    with pytest.raises(InvalidQuizResponseError):
        calculate_personality_scores(bad_response)


@pytest.mark.parametrize("answers", [
    {'selfMotivationLevel': 'very'},
    {'techSkillsRating': 'high'},
    {'techSkillsRating': '5'},
    {'riskComfortLevel': 4.5},
    {'selfMotivationLevel': True},
    {'successIncomeGoal': '5000'},
    {'workCollaborationPreference': 3},
    {'familiarTools': 'canva'},
    {'familiarTools': [7, None]},
])
def test_mistyped_answer_contributes_nothing(answers):
    assert calculate_personality_scores(answers) == calculate_personality_scores({})


def test_mistyped_answer_does_not_discard_the_rest(solo_tech_response):
    noisy = dict(solo_tech_response, techSkillsRating='high', familiarTools=['canva', 3])
    response = coerce_quiz_response(noisy)
    assert response.tech_skills_rating is None
    assert response.familiar_tools == ['canva']
    assert response.risk_comfort_level == solo_tech_response['riskComfortLevel']
    without_tech = {k: v for k, v in solo_tech_response.items() if k != 'techSkillsRating'}
    assert (
        calculate_personality_scores(noisy)
        == calculate_personality_scores(dict(without_tech, familiarTools=['canva']))
    )


def test_accumulator_starts_at_zero_for_every_trait():
    raw = accumulate_raw_traits(QuizResponse())
    assert raw == {trait: 0 for trait in TRAIT_NAMES}


def test_accumulator_carries_fractional_terms():
    raw = accumulate_raw_traits(QuizResponse(trial_error_comfort=5, uncertainty_handling=5))
    assert raw['resilience'] == pytest.approx(3.2 + 2.8)


@pytest.mark.parametrize("value,expected", [
    (2.25, 2.3),
    (2.75, 2.8),
    (2.24, 2.2),
    (3.0, 3.0),
])
def test_round_half_up(value, expected):
    assert round_half_up(value) == pytest.approx(expected)


def test_round_half_up_to_integer():
    assert round_half_up(72.5, 0) == 73
    assert round_half_up(72.49, 0) == 72


def test_normalize_clamps_outside_window():
    assert normalize_trait('social_comfort', -100) == 1.0
    assert normalize_trait('social_comfort', 100) == 5.0
    assert normalize_trait('social_comfort', -15) == 1.0
    assert normalize_trait('social_comfort', 25) == 5.0


def test_scoring_is_deterministic(extreme_response):
    response = extreme_response(4, 2)
    assert calculate_personality_scores(response) == calculate_personality_scores(response)


def test_scoring_does_not_mutate_input(solo_tech_response):
    snapshot = dict(solo_tech_response)
    calculate_personality_scores(solo_tech_response)
    assert solo_tech_response == snapshot


@pytest.mark.parametrize("score,band", [
    (1.0, 'low'),
    (2.5, 'low'),
    (2.6, 'medium'),
    (3.5, 'medium'),
    (3.6, 'high'),
    (5.0, 'high'),
])
def test_trait_band(score, band):
    assert trait_band(score) == band


def test_describe_personality(solo_tech_response):
    descriptions = describe_personality(calculate_personality_scores(solo_tech_response))
    assert set(descriptions) == set(TRAIT_NAMES)
    assert descriptions['social_comfort'] == TRAIT_DESCRIPTIONS['social_comfort'][0]
    assert descriptions['confidence'] == TRAIT_DESCRIPTIONS['confidence'][1]
    assert descriptions['risk_tolerance'] == TRAIT_DESCRIPTIONS['risk_tolerance'][1]
