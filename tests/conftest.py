import pytest

from services.quiz_scoring.catalog import get_catalog, load_catalog_data
from src.services.storage import InMemoryScoreStore

# Solo worker who rates tech skills, risk comfort and self-motivation at the top
# of the scale and skips every other question.
SOLO_TECH_RESPONSE = {
    "workCollaborationPreference": "solo-only",
    "riskComfortLevel": 5,
    "techSkillsRating": 5,
    "selfMotivationLevel": 5,
}

LIKERT_FIELDS = (
    "passionIdentityAlignment", "passiveIncomeImportance", "longTermConsistency",
    "trialErrorComfort", "systemsRoutinesEnjoyment", "discouragementResilience",
    "organizationLevel", "selfMotivationLevel", "uncertaintyHandling",
    "brandFaceComfort", "competitivenessLevel", "creativeWorkEnjoyment",
    "directCommunicationEnjoyment", "techSkillsRating", "internetDeviceReliability",
    "riskComfortLevel", "feedbackRejectionResponse", "controlImportance",
)


def build_extreme_response(likert_value: int, choice_index: int) -> dict:
    """Every Likert answer set to one value and every choice question to its Nth option."""
    choices = {
        "mainMotivation": ["financial-freedom", "flexibility-autonomy", "purpose-impact", "creativity-passion"],
        "firstIncomeTimeline": ["under-1-month", "1-3-months", "3-6-months", "no-rush"],
        "businessExitPlan": ["yes", "no", "not-sure", "not-sure"],
        "businessGrowthSize": ["widely-recognized", "multi-6-figure", "full-time-income", "side-income"],
        "learningPreference": ["hands-on", "tutorials", "reading", "coaching"],
        "toolLearningWillingness": ["yes", "no", "no", "no"],
        "repetitiveTasksFeeling": ["enjoy", "dont-mind", "tolerate", "avoid"],
        "workCollaborationPreference": ["team-oriented", "both", "mostly-solo", "solo-only"],
        "workStructurePreference": ["clear-steps", "some-structure", "mostly-flexible", "total-freedom"],
        "workspaceAvailability": ["yes", "no", "no", "no"],
        "supportSystemStrength": ["very-strong", "small-helpful-group", "one-two", "none"],
        "decisionMakingStyle": ["logical-process", "after-some-research", "quickly-instinctively", "talking-to-others"],
        "pathPreference": ["build-something-new", "mostly-original", "mix", "proven-paths"],
        "onlinePresenceComfort": ["yes", "no", "no", "no"],
        "clientCallsComfort": ["yes", "no", "no", "no"],
        "physicalShippingOpenness": ["yes", "no", "no", "no"],
        "workStylePreference": ["create-once-passive", "work-with-people", "mix-both", "mix-both"],
    }
    response = {field: likert_value for field in LIKERT_FIELDS}
    response.update({field: options[choice_index] for field, options in choices.items()})
    amounts = [(20000, 5000, 40), (6000, 1500, 20), (2500, 300, 8), (100, 0, 2)][choice_index]
    response["successIncomeGoal"], response["upfrontInvestment"], response["weeklyTimeCommitment"] = amounts
    response["familiarTools"] = (
        ["google-docs-sheets", "canva", "notion", "shopify-wix", "zoom-streamyard"] if choice_index == 0 else []
    )
    return response


@pytest.fixture
def catalog():
    return get_catalog()


@pytest.fixture
def memory_store():
    return InMemoryScoreStore()


@pytest.fixture
def solo_tech_response():
    return dict(SOLO_TECH_RESPONSE)


@pytest.fixture
def extreme_response():
    return build_extreme_response


def catalog_entry(model_id, traits, adjustments=None, category="test-category"):
    return {
        "id": model_id,
        "name": model_id.replace("-", " ").title(),
        "category": category,
        "description": "Test business model",
        "startup_cost": "$0",
        "time_to_profit": "1 week",
        "potential_income": "$1K/month",
        "pros": ["Cheap"],
        "cons": ["Slow"],
        "action_plan": {"phase1": [], "phase2": [], "phase3": []},
        "ideal_profile": {"traits": traits, "adjustments": adjustments or []},
    }


@pytest.fixture
def catalog_factory():
    """Builds a small validated catalog; each entry is (id, traits[, adjustments[, category]])."""
    def _build(*entries_args):
        entries = [catalog_entry(*args) for args in entries_args]
        return load_catalog_data({"version": "test", "business_models": entries})
    return _build
