"""
Core shared utilities for the SDG company recommender.

This package provides the shared data models, constants, errors and table
I/O used across the recommendation pipeline modules.

Usage:
    from core import RawCompanyRecord, UserPreference
    from core import parse_table, load_company_table
    from core import RISK_MULTIPLIERS, SDG_LIST
"""

from .models import (
    GoalMetrics,
    GoalWeight,
    RawCompanyRecord,
    Recommendation,
    ScoredCompany,
    UserPreference,
)
from .data_io import (
    detect_delimiter,
    load_company_table,
    parse_rows,
    parse_table,
    split_line,
)
from .errors import InvalidPreferenceError, TableLoadError
from .constants import (
    DEFAULT_RISK_MULTIPLIER,
    DEFAULT_TOP_N,
    NUM_GOALS,
    RISK_AGGRESSIVE,
    RISK_LEVELS,
    RISK_MULTIPLIERS,
    RISK_NEUTRAL,
    RISK_SAFE,
    SDG_LIST,
    SDG_TITLES,
    goal_code,
    normalize_risk,
)

__all__ = [
    # Models
    "GoalMetrics",
    "GoalWeight",
    "RawCompanyRecord",
    "Recommendation",
    "ScoredCompany",
    "UserPreference",
    # Data I/O
    "detect_delimiter",
    "load_company_table",
    "parse_rows",
    "parse_table",
    "split_line",
    # Errors
    "InvalidPreferenceError",
    "TableLoadError",
    # Constants
    "DEFAULT_RISK_MULTIPLIER",
    "DEFAULT_TOP_N",
    "NUM_GOALS",
    "RISK_AGGRESSIVE",
    "RISK_LEVELS",
    "RISK_MULTIPLIERS",
    "RISK_NEUTRAL",
    "RISK_SAFE",
    "SDG_LIST",
    "SDG_TITLES",
    "goal_code",
    "normalize_risk",
]
