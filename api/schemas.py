"""Pydantic models for ranking request/response schemas."""

from typing import Optional

from pydantic import BaseModel, Field, field_validator

from core import RISK_LEVELS, GoalWeight, Recommendation, UserPreference, normalize_risk
from sdg_recommender import RankingResult


class SelectedGoal(BaseModel):
    """One SDG goal picked in the survey, with its importance."""

    goal_id: int = Field(..., ge=1, le=17, description="SDG goal id (1-17)")
    importance_score: int = Field(..., ge=1, le=5, description="Importance the user assigned (1-5)")


class RankingRequest(BaseModel):
    """Request model for a company ranking."""

    selected_goals: list[SelectedGoal] = Field(
        ..., min_length=1, description="Goals in the order the user selected them"
    )
    risk_preference: str = Field(..., description="안전형 / 중립형 / 공격형 (or SAFE / NEUTRAL / AGGRESSIVE)")
    top_n: int = Field(default=3, ge=1, description="Number of companies to return")

    model_config = {
        "json_schema_extra": {
            "example": {
                "selected_goals": [
                    {"goal_id": 7, "importance_score": 5},
                    {"goal_id": 13, "importance_score": 3},
                ],
                "risk_preference": "공격형",
                "top_n": 3,
            }
        }
    }

    @field_validator("risk_preference")
    @classmethod
    def check_risk_preference(cls, value: str) -> str:
        label = normalize_risk(value)
        if label not in RISK_LEVELS:
            raise ValueError(f"Unknown risk preference: {value}")
        return label

    @field_validator("selected_goals")
    @classmethod
    def check_unique_goals(cls, goals: list[SelectedGoal]) -> list[SelectedGoal]:
        ids = [g.goal_id for g in goals]
        if len(ids) != len(set(ids)):
            raise ValueError("Each goal may be selected only once")
        return goals

    def to_preference(self) -> UserPreference:
        """Convert to the core preference model."""
        return UserPreference(
            goal_weights=tuple(
                GoalWeight(goal_id=g.goal_id, importance=g.importance_score)
                for g in self.selected_goals
            ),
            risk_preference=self.risk_preference,
        )


class RankedCompanyResponse(BaseModel):
    """One ranked company, before enrichment."""

    company_name: str
    corp_code: str = Field(..., description="Listing code, text with leading zeros kept")
    score: float = Field(..., description="Match score, comparable only within one ranking")
    top_goal_code: str = Field(..., description="Best matching selected goal (e.g. G07)")
    reference_sentence: str = Field(default="", description="Evidence sentence for the top goal")


class RankingResponse(BaseModel):
    """Response model for a ranking request."""

    total_companies: int = Field(..., description="Number of companies scored")
    companies: list[RankedCompanyResponse]

    @classmethod
    def from_result(cls, result: RankingResult) -> "RankingResponse":
        return cls(
            total_companies=result.metadata.get("total_companies", len(result.ranked)),
            companies=[RankedCompanyResponse(**entry) for entry in result.to_response()],
        )


class RecommendationResponse(BaseModel):
    """Response model for an enriched recommendation."""

    corp_name: str
    corp_code: str
    match_score: float
    top_sdg: str = Field(..., description="Top goal code (e.g. G07)")
    explanation: str
    investment_report: str
    sns_promotion: str
    image_reference_sentence: str
    sdg_alignment: list[float] = Field(
        default_factory=list, description="Per-goal alignment on a 1-5 scale, 17 entries or empty"
    )
    image_data_url: Optional[str] = None
    video_url: Optional[str] = None

    @classmethod
    def from_recommendation(cls, rec: Recommendation) -> "RecommendationResponse":
        return cls(
            corp_name=rec.company_name,
            corp_code=rec.corp_code,
            match_score=rec.match_score,
            top_sdg=rec.top_goal_code,
            explanation=rec.explanation,
            investment_report=rec.investment_report,
            sns_promotion=rec.social_post,
            image_reference_sentence=rec.image_reference_sentence,
            sdg_alignment=rec.alignment_vector,
            image_data_url=rec.image_data_url,
            video_url=rec.video_url,
        )


class ModelOutput(BaseModel):
    """Full enriched output, as consumed by the dashboard."""

    recommended_companies: list[RecommendationResponse]
