from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from services.quiz_scoring.models import BusinessModelScore, PersonalityScores


class BusinessModelScoresResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)

    attempt_id: str
    scores: List[BusinessModelScore]
    distribution: Dict[str, int]


class PresentationScoresResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)

    attempt_id: str
    status: str = Field(..., description="'scored' or 'unavailable'")
    scores: List[BusinessModelScore]
    reason: Optional[str] = None


class PersonalityProfileResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)

    scores: PersonalityScores
    descriptions: Dict[str, str]
