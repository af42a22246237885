"""
Shared constants for the SDG company recommender.

This module contains the goal catalogue, risk labels, the risk affinity table
and the table column naming scheme used across the pipeline.
"""

# ============================================================================
# SDG catalogue
# ============================================================================

NUM_GOALS = 17

SDG_LIST = [
    {"id": 1, "code": "G01", "title": "빈곤 종식", "color": "#E5243B"},
    {"id": 2, "code": "G02", "title": "기아 종식", "color": "#DDA63A"},
    {"id": 3, "code": "G03", "title": "건강과 웰빙", "color": "#4C9F38"},
    {"id": 4, "code": "G04", "title": "양질의 교육", "color": "#C5192D"},
    {"id": 5, "code": "G05", "title": "성평등", "color": "#FF3A21"},
    {"id": 6, "code": "G06", "title": "깨끗한 물과 위생", "color": "#26BDE2"},
    {"id": 7, "code": "G07", "title": "깨끗한 에너지", "color": "#FCC30B"},
    {"id": 8, "code": "G08", "title": "좋은 일자리와 경제 성장", "color": "#A21942"},
    {"id": 9, "code": "G09", "title": "산업, 혁신, 사회기반시설", "color": "#FD6925"},
    {"id": 10, "code": "G10", "title": "불평등 감소", "color": "#DD1367"},
    {"id": 11, "code": "G11", "title": "지속가능한 도시와 공동체", "color": "#FD9D24"},
    {"id": 12, "code": "G12", "title": "책임감 있는 소비와 생산", "color": "#BF8B2E"},
    {"id": 13, "code": "G13", "title": "기후변화 대응", "color": "#3F7E44"},
    {"id": 14, "code": "G14", "title": "해양 생태계 보존", "color": "#0A97D9"},
    {"id": 15, "code": "G15", "title": "육상 생태계 보존", "color": "#56C02B"},
    {"id": 16, "code": "G16", "title": "평화, 정의, 제도", "color": "#00689D"},
    {"id": 17, "code": "G17", "title": "지구촌 협력", "color": "#19486A"},
]

SDG_TITLES = {sdg["id"]: sdg["title"] for sdg in SDG_LIST}

MIN_IMPORTANCE = 1
MAX_IMPORTANCE = 5


def goal_code(goal_id: int) -> str:
    """Return the table code for a goal id (7 -> "G07")."""
    return f"G{goal_id:02d}"


# ============================================================================
# Table columns
# ============================================================================

COMPANY_NAME_COLUMN = "company_name"
CORP_CODE_COLUMN = "corp_code"
RISK_TAG_COLUMN = "Risk_Tag"

MENTIONS_COLUMN_TEMPLATE = "{code}_mentions_per_1k_tokens"
SENTIMENT_COLUMN_TEMPLATE = "{code}_sent_mean"
REFERENCE_COLUMN_TEMPLATE = "{code}_reference_sentence"


# ============================================================================
# Risk profile
# ============================================================================

RISK_SAFE = "안전형"
RISK_NEUTRAL = "중립형"
RISK_AGGRESSIVE = "공격형"

RISK_LEVELS = (RISK_SAFE, RISK_NEUTRAL, RISK_AGGRESSIVE)

# English aliases accepted from API/CLI callers
RISK_ALIASES = {
    "SAFE": RISK_SAFE,
    "NEUTRAL": RISK_NEUTRAL,
    "AGGRESSIVE": RISK_AGGRESSIVE,
}

# (user preference, company tag) -> score multiplier; any other pair is 1.0
RISK_MULTIPLIERS = {
    (RISK_SAFE, RISK_SAFE): 1.2,
    (RISK_SAFE, RISK_AGGRESSIVE): 0.8,
    (RISK_AGGRESSIVE, RISK_AGGRESSIVE): 1.2,
    (RISK_AGGRESSIVE, RISK_SAFE): 0.9,
    (RISK_NEUTRAL, RISK_NEUTRAL): 1.1,
}

DEFAULT_RISK_MULTIPLIER = 1.0


def normalize_risk(label: str) -> str:
    """Map an English alias or Korean label onto the Korean risk label.

    Unknown labels are returned trimmed but otherwise unchanged.
    """
    text = str(label).strip()
    return RISK_ALIASES.get(text.upper(), text)


# ============================================================================
# Recommender defaults
# ============================================================================

DEFAULT_TOP_N = 3

# 1-5 scale used for the per-goal alignment radar
ALIGNMENT_MIN = 1.0
ALIGNMENT_MAX = 5.0
