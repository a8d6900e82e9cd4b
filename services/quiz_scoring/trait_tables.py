# services/quiz_scoring/trait_tables.py
# Per-question trait contributions used by the trait scoring function.
# Each table maps one quiz field to deltas on the raw trait accumulator.

import math
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Mapping, Optional, Tuple

TraitDeltas = Mapping[str, float]

_NO_CONTRIBUTION: TraitDeltas = MappingProxyType({})


def _deltas(**contributions: float) -> TraitDeltas:
    return MappingProxyType({trait: value for trait, value in contributions.items() if value != 0})


def _options(**by_option: TraitDeltas) -> Mapping[str, TraitDeltas]:
    """Option keywords use underscores; answer values use hyphens."""
    return MappingProxyType({key.replace('_', '-'): deltas for key, deltas in by_option.items()})


@dataclass(frozen=True)
class LikertTerm:
    """Contribution of a 1-5 answer: (value - offset) * multiplier, optionally floored."""
    offset: float
    multiplier: float
    floor: bool = False

    def apply(self, value: int) -> float:
        contribution = (value - self.offset) * self.multiplier
        if self.floor:
            return math.floor(contribution)
        return contribution


def centered(multiplier: float, floor: bool = False) -> LikertTerm:
    return LikertTerm(offset=3, multiplier=multiplier, floor=floor)


RAW_VALUE = LikertTerm(offset=0, multiplier=1)
REVERSED = LikertTerm(offset=6, multiplier=-1)


@dataclass(frozen=True)
class ChoiceTable:
    field: str
    options: Mapping[str, TraitDeltas]

    def contributions(self, value: Any) -> TraitDeltas:
        if not isinstance(value, str):
            return _NO_CONTRIBUTION
        return self.options.get(value, _NO_CONTRIBUTION)


@dataclass(frozen=True)
class ThresholdTable:
    """Buckets a numeric answer by descending thresholds; `default` covers the rest."""
    field: str
    buckets: Tuple[Tuple[int, TraitDeltas], ...]
    default: TraitDeltas

    def contributions(self, value: Any) -> TraitDeltas:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return _NO_CONTRIBUTION
        for threshold, deltas in self.buckets:
            if value >= threshold:
                return deltas
        return self.default


@dataclass(frozen=True)
class LikertTable:
    field: str
    terms: Mapping[str, LikertTerm]

    def contributions(self, value: Any) -> TraitDeltas:
        # Only answers on the 1-5 scale count
        if isinstance(value, bool) or not isinstance(value, int) or not 1 <= value <= 5:
            return _NO_CONTRIBUTION
        return MappingProxyType({trait: term.apply(value) for trait, term in self.terms.items()})


@dataclass(frozen=True)
class MultiChoiceTable:
    field: str
    options: Mapping[str, TraitDeltas]

    def contributions(self, value: Any) -> TraitDeltas:
        if not isinstance(value, (list, tuple)):
            return _NO_CONTRIBUTION
        totals = {}
        for selected in value:
            for trait, delta in self.options.get(selected, _NO_CONTRIBUTION).items():
                totals[trait] = totals.get(trait, 0) + delta
        return MappingProxyType(totals)


def likert(field: str, **terms: LikertTerm) -> LikertTable:
    return LikertTable(field=field, terms=MappingProxyType(terms))


# --- Normalization window per trait (raw min, raw max) ---

TRAIT_BOUNDS: Mapping[str, Tuple[int, int]] = MappingProxyType({
    'social_comfort': (-15, 25),
    'discipline': (-12, 28),
    'risk_tolerance': (-18, 22),
    'tech_comfort': (-8, 32),
    'structure_preference': (-20, 20),
    'motivation': (-10, 30),
    'feedback_resilience': (-15, 25),
    'creativity': (-12, 28),
    'confidence': (-18, 22),
    'adaptability': (-10, 30),
    'focus_preference': (-15, 25),
    'resilience': (-12, 28),
})


# --- Motivation & vision ---

MAIN_MOTIVATION = ChoiceTable('main_motivation', _options(
    financial_freedom=_deltas(social_comfort=1, discipline=2, risk_tolerance=2, motivation=3,
                              confidence=2, adaptability=2, focus_preference=3, resilience=2),
    flexibility_autonomy=_deltas(social_comfort=-1, discipline=1, risk_tolerance=1, motivation=2,
                                 structure_preference=-2, adaptability=3, focus_preference=1, resilience=1),
    purpose_impact=_deltas(social_comfort=2, motivation=3, creativity=3, confidence=1,
                           adaptability=2, focus_preference=2, resilience=3),
    creativity_passion=_deltas(creativity=4, motivation=2, structure_preference=-1, confidence=1,
                               adaptability=3, focus_preference=1, resilience=2),
))

FIRST_INCOME_TIMELINE = ChoiceTable('first_income_timeline', MappingProxyType({
    'under-1-month': _deltas(motivation=4, risk_tolerance=3, confidence=2, discipline=-1,
                             adaptability=4, focus_preference=4, resilience=3),
    '1-3-months': _deltas(motivation=3, risk_tolerance=2, confidence=1, discipline=1,
                          adaptability=3, focus_preference=3, resilience=2),
    '3-6-months': _deltas(motivation=2, risk_tolerance=1, confidence=1, discipline=2,
                          adaptability=2, focus_preference=2, resilience=3),
    'no-rush': _deltas(motivation=1, risk_tolerance=-1, confidence=-1, discipline=3,
                       adaptability=1, focus_preference=1, resilience=4),
}))

SUCCESS_INCOME_GOAL = ThresholdTable(
    'success_income_goal',
    buckets=(
        (10000, _deltas(confidence=3, motivation=4, risk_tolerance=3, adaptability=4, focus_preference=4, resilience=4)),
        (5000, _deltas(confidence=2, motivation=3, risk_tolerance=2, adaptability=3, focus_preference=3, resilience=3)),
        (2000, _deltas(confidence=1, motivation=2, risk_tolerance=1, adaptability=2, focus_preference=2, resilience=2)),
    ),
    default=_deltas(confidence=-2, motivation=1, risk_tolerance=-1, adaptability=1, focus_preference=2, resilience=1),
)

UPFRONT_INVESTMENT = ThresholdTable(
    'upfront_investment',
    buckets=(
        (2000, _deltas(risk_tolerance=3, confidence=2, motivation=3)),
        (1000, _deltas(risk_tolerance=1, confidence=1, motivation=2)),
        (250, _deltas(risk_tolerance=-1, confidence=-1, motivation=1)),
    ),
    default=_deltas(risk_tolerance=-3, confidence=-2, motivation=-1),
)

PASSION_IDENTITY_ALIGNMENT = likert(
    'passion_identity_alignment',
    creativity=centered(1),
    motivation=centered(1.5, floor=True),
    structure_preference=centered(-1),
    adaptability=centered(1),
    focus_preference=centered(1),
)

BUSINESS_EXIT_PLAN = ChoiceTable('business_exit_plan', _options(
    yes=_deltas(motivation=2, risk_tolerance=2, confidence=1, structure_preference=1),
    no=_deltas(motivation=1, risk_tolerance=-1, confidence=-1, structure_preference=-1),
    not_sure=_deltas(motivation=1),
))

BUSINESS_GROWTH_SIZE = ChoiceTable('business_growth_size', MappingProxyType({
    'side-income': _deltas(confidence=-1, motivation=1, risk_tolerance=-1, discipline=1),
    'full-time-income': _deltas(confidence=1, motivation=2, risk_tolerance=1, discipline=2),
    'multi-6-figure': _deltas(confidence=2, motivation=3, risk_tolerance=2, discipline=3),
    'widely-recognized': _deltas(confidence=3, motivation=4, risk_tolerance=3, discipline=4, social_comfort=2),
}))

PASSIVE_INCOME_IMPORTANCE = likert(
    'passive_income_importance',
    motivation=centered(1),
    discipline=centered(1.5, floor=True),
    structure_preference=centered(1),
)

# --- Time, effort & learning ---

WEEKLY_TIME_COMMITMENT = ThresholdTable(
    'weekly_time_commitment',
    buckets=(
        (25, _deltas(discipline=3, motivation=3, confidence=2)),
        (10, _deltas(discipline=2, motivation=2, confidence=1)),
        (5, _deltas(discipline=1, motivation=1)),
    ),
    default=_deltas(discipline=-2, motivation=-1, confidence=-1),
)

LONG_TERM_CONSISTENCY = likert(
    'long_term_consistency',
    discipline=centered(2),
    motivation=centered(1),
    feedback_resilience=centered(1),
    confidence=centered(1.5, floor=True),
    adaptability=centered(1),
    focus_preference=centered(1),
    resilience=RAW_VALUE,
)

TRIAL_ERROR_COMFORT = likert(
    'trial_error_comfort',
    risk_tolerance=centered(2),
    structure_preference=centered(-2),
    creativity=centered(1),
    feedback_resilience=centered(1),
    adaptability=RAW_VALUE,
    focus_preference=centered(1),
    resilience=LikertTerm(offset=1, multiplier=0.8),
)

LEARNING_PREFERENCE = ChoiceTable('learning_preference', _options(
    hands_on=_deltas(creativity=2, structure_preference=-1, risk_tolerance=1, tech_comfort=1),
    tutorials=_deltas(structure_preference=1, tech_comfort=2),
    reading=_deltas(creativity=1, structure_preference=2, risk_tolerance=-1),
    coaching=_deltas(structure_preference=1, risk_tolerance=-1, social_comfort=1),
))

SYSTEMS_ROUTINES_ENJOYMENT = likert(
    'systems_routines_enjoyment',
    discipline=centered(2),
    structure_preference=centered(2),
    creativity=centered(-1),
    tech_comfort=centered(1),
)

DISCOURAGEMENT_RESILIENCE = likert(
    'discouragement_resilience',
    feedback_resilience=centered(2),
    motivation=centered(1),
    confidence=centered(1),
    discipline=centered(1.5, floor=True),
    adaptability=centered(1),
    focus_preference=centered(1),
    resilience=RAW_VALUE,
)

TOOL_LEARNING_WILLINGNESS = ChoiceTable('tool_learning_willingness', _options(
    yes=_deltas(tech_comfort=3, structure_preference=1, motivation=1, confidence=1),
    no=_deltas(tech_comfort=-3, structure_preference=-1, motivation=-1, confidence=-1),
))

ORGANIZATION_LEVEL = likert(
    'organization_level',
    discipline=centered(2),
    structure_preference=centered(2),
    confidence=centered(1),
    tech_comfort=centered(1.5, floor=True),
)

SELF_MOTIVATION_LEVEL = likert(
    'self_motivation_level',
    motivation=centered(2),
    discipline=centered(2),
    confidence=centered(1),
    feedback_resilience=centered(1.5, floor=True),
)

UNCERTAINTY_HANDLING = likert(
    'uncertainty_handling',
    risk_tolerance=centered(2),
    structure_preference=centered(-2),
    confidence=centered(1),
    creativity=centered(1.5, floor=True),
    adaptability=RAW_VALUE,
    focus_preference=centered(1),
    resilience=LikertTerm(offset=1, multiplier=0.7),
)

REPETITIVE_TASKS_FEELING = ChoiceTable('repetitive_tasks_feeling', _options(
    avoid=_deltas(discipline=-2, structure_preference=-2, creativity=2, motivation=-1),
    tolerate=_deltas(discipline=1),
    dont_mind=_deltas(discipline=2, structure_preference=1, creativity=-1, motivation=1),
    enjoy=_deltas(discipline=3, structure_preference=2, creativity=-2, motivation=2),
))

WORK_COLLABORATION_PREFERENCE = ChoiceTable('work_collaboration_preference', _options(
    solo_only=_deltas(social_comfort=-3, structure_preference=-1, confidence=-1, creativity=1),
    mostly_solo=_deltas(social_comfort=-1, creativity=1),
    team_oriented=_deltas(social_comfort=3, structure_preference=1, confidence=1),
    both=_deltas(social_comfort=1, confidence=1, creativity=1),
))

# --- Personality & preferences ---

BRAND_FACE_COMFORT = likert(
    'brand_face_comfort',
    social_comfort=centered(2),
    confidence=centered(2),
    motivation=centered(1.5, floor=True),
    creativity=centered(1),
)

COMPETITIVENESS_LEVEL = likert(
    'competitiveness_level',
    motivation=centered(2),
    confidence=centered(2),
    risk_tolerance=centered(1),
    feedback_resilience=centered(1.5, floor=True),
)

CREATIVE_WORK_ENJOYMENT = likert(
    'creative_work_enjoyment',
    creativity=centered(2),
    structure_preference=centered(-1),
    motivation=centered(1),
    confidence=centered(1.5, floor=True),
    adaptability=centered(1),
    focus_preference=REVERSED,
)

DIRECT_COMMUNICATION_ENJOYMENT = likert(
    'direct_communication_enjoyment',
    social_comfort=centered(2),
    confidence=centered(2),
    feedback_resilience=centered(1),
    motivation=centered(1.5, floor=True),
)

WORK_STRUCTURE_PREFERENCE = ChoiceTable('work_structure_preference', _options(
    clear_steps=_deltas(structure_preference=3, discipline=2, creativity=-1, risk_tolerance=-1),
    some_structure=_deltas(structure_preference=1, discipline=1),
    mostly_flexible=_deltas(structure_preference=-1, creativity=1, risk_tolerance=1),
    total_freedom=_deltas(structure_preference=-3, discipline=-1, creativity=2, risk_tolerance=2),
))

# --- Tools & environment ---

TECH_SKILLS_RATING = likert(
    'tech_skills_rating',
    tech_comfort=centered(3),
    confidence=centered(1),
    structure_preference=centered(0.5, floor=True),
)

WORKSPACE_AVAILABILITY = ChoiceTable('workspace_availability', _options(
    yes=_deltas(discipline=2, structure_preference=2, confidence=1, tech_comfort=1),
    no=_deltas(discipline=-2, structure_preference=-2, confidence=-1, tech_comfort=-1),
))

SUPPORT_SYSTEM_STRENGTH = ChoiceTable('support_system_strength', _options(
    none=_deltas(confidence=-2, feedback_resilience=-2, motivation=-1, social_comfort=-1),
    one_two=_deltas(),
    small_helpful_group=_deltas(confidence=1, feedback_resilience=1, motivation=1, social_comfort=1),
    very_strong=_deltas(confidence=2, feedback_resilience=2, motivation=2, social_comfort=2),
))

INTERNET_DEVICE_RELIABILITY = likert(
    'internet_device_reliability',
    tech_comfort=centered(2),
    structure_preference=centered(1),
    confidence=centered(1.5, floor=True),
    discipline=centered(1),
)

FAMILIAR_TOOLS = MultiChoiceTable('familiar_tools', _options(
    google_docs_sheets=_deltas(tech_comfort=2, discipline=1, adaptability=1, focus_preference=1),
    canva=_deltas(tech_comfort=2, creativity=1, adaptability=1, focus_preference=1),
    notion=_deltas(tech_comfort=3, structure_preference=1, adaptability=1, focus_preference=1),
    shopify_wix=_deltas(tech_comfort=3, confidence=1, adaptability=1, focus_preference=1),
    zoom_streamyard=_deltas(tech_comfort=2, social_comfort=1, adaptability=1, focus_preference=1),
))

# --- Strategy & decisions ---

DECISION_MAKING_STYLE = ChoiceTable('decision_making_style', _options(
    quickly_instinctively=_deltas(risk_tolerance=2, structure_preference=-2, confidence=1, creativity=1),
    after_some_research=_deltas(risk_tolerance=1, confidence=1, discipline=1),
    logical_process=_deltas(structure_preference=2, confidence=1, discipline=2),
    talking_to_others=_deltas(risk_tolerance=-1, social_comfort=2),
))

RISK_COMFORT_LEVEL = likert(
    'risk_comfort_level',
    risk_tolerance=centered(3),
    confidence=centered(2),
    motivation=centered(1),
    feedback_resilience=centered(1.5, floor=True),
)

FEEDBACK_REJECTION_RESPONSE = likert(
    'feedback_rejection_response',
    feedback_resilience=centered(3),
    confidence=centered(2),
    motivation=centered(1),
    social_comfort=centered(1.5, floor=True),
    adaptability=centered(1),
    focus_preference=centered(1),
    resilience=RAW_VALUE,
)

PATH_PREFERENCE = ChoiceTable('path_preference', _options(
    proven_paths=_deltas(creativity=-2, risk_tolerance=-2, structure_preference=2, confidence=1),
    mix=_deltas(confidence=1),
    mostly_original=_deltas(creativity=2, risk_tolerance=2, structure_preference=-1, confidence=1),
    build_something_new=_deltas(creativity=3, risk_tolerance=3, structure_preference=-2, confidence=2),
))

CONTROL_IMPORTANCE = likert(
    'control_importance',
    confidence=centered(2),
    structure_preference=centered(1),
    risk_tolerance=centered(1.5, floor=True),
    discipline=centered(1),
)

# --- Business-model fit filters ---

ONLINE_PRESENCE_COMFORT = ChoiceTable('online_presence_comfort', _options(
    yes=_deltas(social_comfort=2, confidence=2, tech_comfort=1, creativity=1),
    no=_deltas(social_comfort=-2, confidence=-2, tech_comfort=-1, creativity=-1),
))

CLIENT_CALLS_COMFORT = ChoiceTable('client_calls_comfort', _options(
    yes=_deltas(social_comfort=3, confidence=2, feedback_resilience=1),
    no=_deltas(social_comfort=-3, confidence=-2, feedback_resilience=-1),
))

PHYSICAL_SHIPPING_OPENNESS = ChoiceTable('physical_shipping_openness', _options(
    yes=_deltas(discipline=2, structure_preference=2, tech_comfort=1),
    no=_deltas(discipline=-1, structure_preference=-1),
))

WORK_STYLE_PREFERENCE = ChoiceTable('work_style_preference', _options(
    create_once_passive=_deltas(creativity=2, motivation=2, structure_preference=1, discipline=1),
    work_with_people=_deltas(social_comfort=3, discipline=2, feedback_resilience=1),
    mix_both=_deltas(creativity=1, social_comfort=1, discipline=1, motivation=1),
))


QUESTION_TABLES = (
    MAIN_MOTIVATION,
    FIRST_INCOME_TIMELINE,
    SUCCESS_INCOME_GOAL,
    UPFRONT_INVESTMENT,
    PASSION_IDENTITY_ALIGNMENT,
    BUSINESS_EXIT_PLAN,
    BUSINESS_GROWTH_SIZE,
    PASSIVE_INCOME_IMPORTANCE,
    WEEKLY_TIME_COMMITMENT,
    LONG_TERM_CONSISTENCY,
    TRIAL_ERROR_COMFORT,
    LEARNING_PREFERENCE,
    SYSTEMS_ROUTINES_ENJOYMENT,
    DISCOURAGEMENT_RESILIENCE,
    TOOL_LEARNING_WILLINGNESS,
    ORGANIZATION_LEVEL,
    SELF_MOTIVATION_LEVEL,
    UNCERTAINTY_HANDLING,
    REPETITIVE_TASKS_FEELING,
    WORK_COLLABORATION_PREFERENCE,
    BRAND_FACE_COMFORT,
    COMPETITIVENESS_LEVEL,
    CREATIVE_WORK_ENJOYMENT,
    DIRECT_COMMUNICATION_ENJOYMENT,
    WORK_STRUCTURE_PREFERENCE,
    TECH_SKILLS_RATING,
    WORKSPACE_AVAILABILITY,
    SUPPORT_SYSTEM_STRENGTH,
    INTERNET_DEVICE_RELIABILITY,
    FAMILIAR_TOOLS,
    DECISION_MAKING_STYLE,
    RISK_COMFORT_LEVEL,
    FEEDBACK_REJECTION_RESPONSE,
    PATH_PREFERENCE,
    CONTROL_IMPORTANCE,
    ONLINE_PRESENCE_COMFORT,
    CLIENT_CALLS_COMFORT,
    PHYSICAL_SHIPPING_OPENNESS,
    WORK_STYLE_PREFERENCE,
)


def table_for(field_name: str) -> Optional[Any]:
    for table in QUESTION_TABLES:
        if table.field == field_name:
            return table
    return None
