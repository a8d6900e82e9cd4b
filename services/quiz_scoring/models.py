from dataclasses import dataclass, field
from typing import Any, List, Dict, Optional, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator, model_validator
from pydantic.alias_generators import to_camel

TRAIT_NAMES = (
    'social_comfort',
    'discipline',
    'risk_tolerance',
    'tech_comfort',
    'structure_preference',
    'motivation',
    'feedback_resilience',
    'creativity',
    'confidence',
    'adaptability',
    'focus_preference',
    'resilience',
)

RECORD_TYPE_BUSINESS_MODEL_SCORES = "business_model_scores"


class QuizResponse(BaseModel):
    """
    One submitted answer set. Every field is optional; a missing answer
    contributes nothing to any score. Accepts camelCase (wire) or
    snake_case keys and ignores keys it does not know.
    """
    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
        extra='ignore',
    )

    # Motivation & vision
    main_motivation: Optional[str] = None
    first_income_timeline: Optional[str] = None
    success_income_goal: Optional[float] = None
    upfront_investment: Optional[float] = None
    passion_identity_alignment: Optional[int] = None
    business_exit_plan: Optional[str] = None
    business_growth_size: Optional[str] = None
    passive_income_importance: Optional[int] = None

    # Time, effort & learning
    weekly_time_commitment: Optional[float] = None
    long_term_consistency: Optional[int] = None
    trial_error_comfort: Optional[int] = None
    learning_preference: Optional[str] = None
    systems_routines_enjoyment: Optional[int] = None
    discouragement_resilience: Optional[int] = None
    tool_learning_willingness: Optional[str] = None
    organization_level: Optional[int] = None
    self_motivation_level: Optional[int] = None
    uncertainty_handling: Optional[int] = None
    repetitive_tasks_feeling: Optional[str] = None
    work_collaboration_preference: Optional[str] = None

    # Personality & preferences
    brand_face_comfort: Optional[int] = None
    competitiveness_level: Optional[int] = None
    creative_work_enjoyment: Optional[int] = None
    direct_communication_enjoyment: Optional[int] = None
    work_structure_preference: Optional[str] = None

    # Tools & environment
    tech_skills_rating: Optional[int] = None
    workspace_availability: Optional[str] = None
    support_system_strength: Optional[str] = None
    internet_device_reliability: Optional[int] = None
    familiar_tools: Optional[List[str]] = None

    # Strategy & decisions
    decision_making_style: Optional[str] = None
    risk_comfort_level: Optional[int] = None
    feedback_rejection_response: Optional[int] = None
    path_preference: Optional[str] = None
    control_importance: Optional[int] = None

    # Business-model fit filters
    online_presence_comfort: Optional[str] = None
    client_calls_comfort: Optional[str] = None
    physical_shipping_openness: Optional[str] = None
    work_style_preference: Optional[str] = None
    social_media_interest: Optional[int] = None
    ecosystem_participation: Optional[str] = None
    existing_audience: Optional[str] = None
    promoting_others_openness: Optional[str] = None
    teach_vs_solve_preference: Optional[str] = None
    meaningful_contribution_importance: Optional[int] = None

    # Adaptive follow-ups
    inventory_comfort: Optional[int] = None
    digital_content_comfort: Optional[int] = None
    teaching_comfort: Optional[int] = None
    public_speaking_comfort: Optional[int] = None
    sales_comfort: Optional[int] = None

    @field_validator('*', mode='before')
    @classmethod
    def drop_mistyped_answers(cls, v: Any, info: ValidationInfo) -> Any:
        """An answer of the wrong type counts as unanswered; "5" is not read as 5."""
        if v is None or isinstance(v, bool):
            return None
        expected = cls.model_fields[info.field_name].annotation
        if expected == Optional[str]:
            return v if isinstance(v, str) else None
        if expected == Optional[List[str]]:
            if not isinstance(v, (list, tuple)):
                return None
            return [tool for tool in v if isinstance(tool, str)]
        if expected == Optional[float]:
            return v if isinstance(v, (int, float)) else None
        # Likert and rating answers
        if isinstance(v, float) and v.is_integer():
            return int(v)
        return v if isinstance(v, int) else None


class PersonalityScores(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_camel)

    social_comfort: float = Field(..., ge=1.0, le=5.0)
    discipline: float = Field(..., ge=1.0, le=5.0)
    risk_tolerance: float = Field(..., ge=1.0, le=5.0)
    tech_comfort: float = Field(..., ge=1.0, le=5.0)
    structure_preference: float = Field(..., ge=1.0, le=5.0)
    motivation: float = Field(..., ge=1.0, le=5.0)
    feedback_resilience: float = Field(..., ge=1.0, le=5.0)
    creativity: float = Field(..., ge=1.0, le=5.0)
    confidence: float = Field(..., ge=1.0, le=5.0)
    adaptability: float = Field(..., ge=1.0, le=5.0)
    focus_preference: float = Field(..., ge=1.0, le=5.0)
    resilience: float = Field(..., ge=1.0, le=5.0)


# --- Business-model catalog ---

class TraitAffinity(BaseModel):
    target: float = Field(..., ge=1.0, le=5.0)
    weight: float = Field(1.0, gt=0)


class FitAdjustment(BaseModel):
    """A score delta applied when a direct answer matches a condition."""
    field: str
    delta: float
    equals: Optional[Union[str, int]] = None
    one_of: Optional[List[Union[str, int]]] = None
    at_least: Optional[int] = None
    at_most: Optional[int] = None
    includes: Optional[str] = None

    @model_validator(mode='after')
    def _exactly_one_condition(self):
        conditions = [self.equals, self.one_of, self.at_least, self.at_most, self.includes]
        if sum(c is not None for c in conditions) != 1:
            raise ValueError(
                f"Adjustment on '{self.field}' must define exactly one of "
                "equals, one_of, at_least, at_most, includes"
            )
        return self


class IdealProfile(BaseModel):
    traits: Dict[str, TraitAffinity]
    adjustments: List[FitAdjustment] = Field(default_factory=list)


class Milestone(BaseModel):
    title: str
    steps: List[str]


class ActionPlan(BaseModel):
    phase1: List[Milestone]
    phase2: List[Milestone]
    phase3: List[Milestone]


class BusinessModelDefinition(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    category: str
    description: str
    difficulty: Optional[Literal['Easy', 'Medium', 'Hard']] = None
    startup_cost: str
    time_to_profit: str
    potential_income: str
    pros: List[str]
    cons: List[str]
    action_plan: ActionPlan
    ideal_profile: IdealProfile


class BusinessModelCatalogConfig(BaseModel):
    version: str
    business_models: List[BusinessModelDefinition]


class BusinessModelScore(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    score: int = Field(..., ge=0, le=100)
    category: str


# --- Presentation outcome ---

@dataclass(frozen=True)
class Scored:
    scores: List[BusinessModelScore]
    kind: Literal['scored'] = 'scored'


@dataclass(frozen=True)
class Unavailable:
    """Scores could not be produced canonically. Never persisted."""
    reason: str
    fallback_scores: List[BusinessModelScore] = field(default_factory=list)
    kind: Literal['unavailable'] = 'unavailable'


ScoringOutcome = Union[Scored, Unavailable]


# --- Custom Exceptions ---

class ScoringError(Exception):
    """Base class for quiz scoring failures."""
    pass

class InvalidQuizResponseError(ScoringError, ValueError):
    """Raised when a quiz response is not a structurally valid answer set."""
    pass

class CatalogValidationError(ScoringError, ValueError):
    """Raised when the business-model catalog file fails validation."""
    pass

class CatalogMismatchError(ScoringError):
    """Raised when computed scores reference ids absent from the catalog."""
    pass

class ScoresNotFoundError(ScoringError, LookupError):
    """Raised when no stored scores exist for a quiz attempt."""
    pass
