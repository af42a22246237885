"""
Shared data models for the SDG company recommender.

This module contains the core data classes used throughout the pipeline:
the raw company row, the user's survey answers and the scored/enriched
results derived from them.
"""

import math
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

from .constants import (
    COMPANY_NAME_COLUMN,
    CORP_CODE_COLUMN,
    MAX_IMPORTANCE,
    MENTIONS_COLUMN_TEMPLATE,
    MIN_IMPORTANCE,
    NUM_GOALS,
    REFERENCE_COLUMN_TEMPLATE,
    RISK_LEVELS,
    RISK_TAG_COLUMN,
    SENTIMENT_COLUMN_TEMPLATE,
    goal_code,
    normalize_risk,
)
from .errors import InvalidPreferenceError

NUMERIC_PATTERN = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$")


def parse_number(text: str) -> Optional[float]:
    """Parse a trimmed cell as a finite number, or return None if it is not numeric.

    Overflowing literals such as "1e400" count as non-numeric.
    """
    if not text or not NUMERIC_PATTERN.match(text):
        return None
    number = float(text)
    return number if math.isfinite(number) else None


def _metric(value: Any) -> float:
    """Read a metric cell; empty, missing or non-numeric cells count as 0."""
    if isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        return float(value) if math.isfinite(value) else 0.0
    if isinstance(value, str):
        number = parse_number(value.strip())
        return number if number is not None else 0.0
    return 0.0


@dataclass(frozen=True)
class GoalMetrics:
    """Per-goal metrics of one company, extracted upstream from its reports."""
    mentions_per_1k: float = 0.0
    sentiment_mean: float = 0.0
    reference_sentence: str = ""

    @property
    def activity(self) -> float:
        """Mention volume times sentiment polarity."""
        return self.mentions_per_1k * self.sentiment_mean


@dataclass(frozen=True)
class RawCompanyRecord:
    """One row of the company table.

    `corp_code` is always text so listing codes like "036460" keep their
    leading zeros. Goals without columns in the table get zero metrics.
    """
    company_name: str
    corp_code: str
    risk_tag: str
    goals: Dict[int, GoalMetrics] = field(default_factory=dict)
    fields: Dict[str, Any] = field(default_factory=dict)

    def goal(self, goal_id: int) -> GoalMetrics:
        return self.goals.get(goal_id, GoalMetrics())

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "RawCompanyRecord":
        """Build a record from a typed table row (see core.data_io.parse_rows)."""
        goals = {}
        for goal_id in range(1, NUM_GOALS + 1):
            code = goal_code(goal_id)
            sentence = row.get(REFERENCE_COLUMN_TEMPLATE.format(code=code), "")
            goals[goal_id] = GoalMetrics(
                mentions_per_1k=_metric(row.get(MENTIONS_COLUMN_TEMPLATE.format(code=code))),
                sentiment_mean=_metric(row.get(SENTIMENT_COLUMN_TEMPLATE.format(code=code))),
                reference_sentence="" if sentence is None else str(sentence),
            )

        return cls(
            company_name=str(row.get(COMPANY_NAME_COLUMN, "")),
            corp_code=str(row.get(CORP_CODE_COLUMN, "")),
            risk_tag=normalize_risk(row.get(RISK_TAG_COLUMN, "")),
            goals=goals,
            fields=dict(row),
        )


@dataclass(frozen=True)
class GoalWeight:
    """A goal the user selected and how much it matters to them (1-5)."""
    goal_id: int
    importance: int


@dataclass(frozen=True)
class UserPreference:
    """The user's survey answers for one recommendation request.

    Goal order is the user's selection order and decides top-goal ties.
    """
    goal_weights: Tuple[GoalWeight, ...]
    risk_preference: str

    def __post_init__(self):
        object.__setattr__(self, "goal_weights", tuple(self.goal_weights))
        object.__setattr__(self, "risk_preference", normalize_risk(self.risk_preference))

        if not self.goal_weights:
            raise InvalidPreferenceError("At least one SDG goal must be selected")

        seen = set()
        for weight in self.goal_weights:
            if not 1 <= weight.goal_id <= NUM_GOALS:
                raise InvalidPreferenceError(f"Unknown goal id: {weight.goal_id}")
            if not MIN_IMPORTANCE <= weight.importance <= MAX_IMPORTANCE:
                raise InvalidPreferenceError(
                    f"Importance for goal {weight.goal_id} must be between "
                    f"{MIN_IMPORTANCE} and {MAX_IMPORTANCE}, got {weight.importance}"
                )
            if weight.goal_id in seen:
                raise InvalidPreferenceError(f"Goal {weight.goal_id} selected more than once")
            seen.add(weight.goal_id)

        if self.risk_preference not in RISK_LEVELS:
            raise InvalidPreferenceError(f"Unknown risk preference: {self.risk_preference}")

    @classmethod
    def from_pairs(
        cls,
        pairs: Sequence[Tuple[int, int]],
        risk_preference: str,
    ) -> "UserPreference":
        """Build a preference from (goal_id, importance) pairs."""
        return cls(
            goal_weights=tuple(GoalWeight(goal_id=g, importance=i) for g, i in pairs),
            risk_preference=risk_preference,
        )

    @property
    def goal_ids(self) -> List[int]:
        return [w.goal_id for w in self.goal_weights]


@dataclass
class ScoredCompany:
    """A record with its match score and dominant selected goal."""
    record: RawCompanyRecord
    score: float
    top_goal_id: int

    @property
    def top_goal_code(self) -> str:
        return goal_code(self.top_goal_id)

    @property
    def top_goal(self) -> GoalMetrics:
        return self.record.goal(self.top_goal_id)

    @property
    def reference_sentence(self) -> str:
        """The record's evidence sentence for its top goal."""
        return self.top_goal.reference_sentence


@dataclass
class Recommendation:
    """A ranked company merged with its enrichment output.

    Consumed by the presentation layer. `image_data_url`/`video_url` are
    None when no visual could be generated.
    """
    company_name: str
    corp_code: str
    match_score: float
    top_goal_code: str
    explanation: str
    investment_report: str
    social_post: str
    image_reference_sentence: str
    alignment_vector: List[float] = field(default_factory=list)
    image_data_url: Optional[str] = None
    video_url: Optional[str] = None
