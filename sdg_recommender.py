"""
SDG Recommender - SDG 선호도 기반 기업 점수화 및 랭킹 모듈

사용자가 선택한 SDG 목표(중요도 1~5)와 투자 위험 성향을 바탕으로
기업 테이블의 각 행을 점수화하고 상위 N개 기업을 추천한다.

점수 공식:
1. 기본 점수: Σ (mentions_per_1k × sent_mean × 중요도)  (선택한 목표만)
2. 위험 성향 보정: 사용자 성향 × 기업 Risk_Tag 조합에 따른 배수 (1.2 / 1.1 / 0.9 / 0.8 / 1.0)
3. 최종 점수 = 기본 점수 × 보정 배수  (클리핑/반올림 없음, 음수 허용)

특징:
- 순수 함수, 동일 입력이면 항상 동일 점수
- 누락되었거나 숫자가 아닌 지표는 0으로 취급
- 동점은 테이블 원래 순서 유지 (stable sort)
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Sequence, Tuple

import numpy as np

from core import (
    DEFAULT_RISK_MULTIPLIER,
    DEFAULT_TOP_N,
    NUM_GOALS,
    RISK_MULTIPLIERS,
    SDG_TITLES,
    InvalidPreferenceError,
    RawCompanyRecord,
    ScoredCompany,
    TableLoadError,
    UserPreference,
    goal_code,
)
from core.constants import ALIGNMENT_MAX, ALIGNMENT_MIN

logger = logging.getLogger(__name__)


# ============================================================================
# 점수 계산
# ============================================================================

def risk_multiplier(user_risk: str, company_risk: str) -> float:
    """사용자 위험 성향과 기업 Risk_Tag 조합의 점수 배수"""
    return RISK_MULTIPLIERS.get((user_risk, company_risk), DEFAULT_RISK_MULTIPLIER)


def score_company(record: RawCompanyRecord, preference: UserPreference) -> Tuple[float, int]:
    """단일 기업의 매칭 점수와 대표 SDG 계산

    Args:
        record: 기업 테이블의 한 행
        preference: 사용자 SDG 선택 및 위험 성향

    Returns:
        (최종 점수, 대표 목표 ID)

    Raises:
        InvalidPreferenceError: 선택된 목표가 없을 때
    """
    if not preference.goal_weights:
        raise InvalidPreferenceError("At least one SDG goal must be selected")

    base_score = 0.0
    top_goal_id = preference.goal_weights[0].goal_id
    top_activity = None

    for weight in preference.goal_weights:
        metrics = record.goal(weight.goal_id)
        activity = metrics.activity
        base_score += activity * weight.importance

        # 엄격한 > 비교: 동점이면 먼저 선택한 목표 유지
        if top_activity is None or activity > top_activity:
            top_activity = activity
            top_goal_id = weight.goal_id

    score = base_score * risk_multiplier(preference.risk_preference, record.risk_tag)
    return score, top_goal_id


def rank_companies(
    records: Sequence[RawCompanyRecord],
    preference: UserPreference,
    top_n: int = DEFAULT_TOP_N,
) -> List[ScoredCompany]:
    """전체 기업 점수화 후 상위 N개 반환

    Args:
        records: 로드된 기업 목록 (필터링 없이 전부 후보)
        preference: 사용자 선호도
        top_n: 반환할 기업 수 (양의 정수)

    Returns:
        점수 내림차순 ScoredCompany 리스트 (길이 <= top_n)

    Raises:
        TableLoadError: records 가 비어 있을 때
        ValueError: top_n 이 양의 정수가 아닐 때
    """
    if not records:
        raise TableLoadError("No company records loaded; cannot rank")
    if isinstance(top_n, bool) or not isinstance(top_n, int) or top_n < 1:
        raise ValueError(f"top_n must be a positive integer, got {top_n!r}")
    if not preference.goal_weights:
        raise InvalidPreferenceError("At least one SDG goal must be selected")

    scored = []
    for record in records:
        score, top_goal_id = score_company(record, preference)
        scored.append(ScoredCompany(record=record, score=score, top_goal_id=top_goal_id))

    # sorted 는 stable: 동점이면 테이블 순서 유지
    scored = sorted(scored, key=lambda s: s.score, reverse=True)
    return scored[:top_n]


def compute_alignment_vector(record: RawCompanyRecord) -> List[float]:
    """17개 SDG 각각의 부합도를 1~5 척도로 환산 (레이더 차트용)

    각 목표의 mentions × sentiment 값을 기업 내에서 min-max 정규화한다.
    모든 값이 같으면 전부 중간값(3.0)을 반환한다.
    """
    activity = np.array(
        [record.goal(goal_id).activity for goal_id in range(1, NUM_GOALS + 1)],
        dtype=float,
    )
    low, high = activity.min(), activity.max()
    if high == low:
        scaled = np.full(NUM_GOALS, (ALIGNMENT_MIN + ALIGNMENT_MAX) / 2)
    else:
        scaled = ALIGNMENT_MIN + (activity - low) / (high - low) * (ALIGNMENT_MAX - ALIGNMENT_MIN)
    return [round(float(v), 2) for v in scaled]


# ============================================================================
# 데이터 클래스
# ============================================================================

@dataclass
class RankingResult:
    """한 번의 추천 요청 결과"""
    preference: UserPreference
    ranked: List[ScoredCompany] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)

    def to_response(self) -> List[Dict[str, Any]]:
        """표현 계층/보강 단계로 넘길 응답 형식"""
        return [
            {
                "company_name": s.record.company_name,
                "corp_code": s.record.corp_code,
                "score": s.score,
                "top_goal_code": s.top_goal_code,
                "reference_sentence": s.reference_sentence,
            }
            for s in self.ranked
        ]


# ============================================================================
# 핵심 클래스
# ============================================================================

class SdgRecommender:
    """SDG 선호도 기반 기업 추천기

    Example:
        recommender = SdgRecommender(load_company_table(Path("data/companies.csv")))
        preference = UserPreference.from_pairs([(7, 5), (13, 3)], "공격형")
        result = recommender.recommend(preference, top_n=3)
    """

    def __init__(self, records: Sequence[RawCompanyRecord]):
        """초기화

        Args:
            records: 기업 테이블 레코드 (비어 있으면 TableLoadError)
        """
        if not records:
            raise TableLoadError("No company records loaded; cannot build recommender")
        self.records = list(records)

    def recommend(
        self,
        preference: UserPreference,
        top_n: int = DEFAULT_TOP_N,
    ) -> RankingResult:
        """추천 실행

        Args:
            preference: 사용자 선호도
            top_n: 추천 기업 수

        Returns:
            RankingResult
        """
        ranked = rank_companies(self.records, preference, top_n)
        logger.info(
            "Ranked %d companies for goals %s (%s), returning top %d",
            len(self.records), preference.goal_ids, preference.risk_preference, len(ranked),
        )
        return RankingResult(
            preference=preference,
            ranked=ranked,
            metadata={
                "total_companies": len(self.records),
                "top_n": top_n,
                "score_formula": "sum(mentions * sentiment * importance) * risk_multiplier",
                "tie_break": "table order",
            },
        )


# ============================================================================
# 유틸리티 함수
# ============================================================================

def ranking_result_to_dict(result: RankingResult) -> Dict[str, Any]:
    """RankingResult 를 dict 로 변환"""
    return {
        "preference": {
            "selected_goals": [
                {"goal_id": w.goal_id, "importance_score": w.importance}
                for w in result.preference.goal_weights
            ],
            "risk_preference": result.preference.risk_preference,
        },
        "recommended_companies": result.to_response(),
        "metadata": result.metadata,
    }


def save_ranking_result(result: RankingResult, output_path: Path) -> None:
    """추천 결과를 JSON 파일로 저장"""
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w", encoding="utf-8") as f:
        json.dump(ranking_result_to_dict(result), f, ensure_ascii=False, indent=2)


def print_ranking_result(result: RankingResult) -> None:
    """추천 결과 출력"""
    goals = ", ".join(
        f"{goal_code(w.goal_id)} {SDG_TITLES.get(w.goal_id, '')}({w.importance})"
        for w in result.preference.goal_weights
    )
    print("\n" + "=" * 70)
    print(f"추천 결과: {goals} / {result.preference.risk_preference}")
    print("=" * 70)

    for i, s in enumerate(result.ranked, 1):
        print(f"  {i}. {s.record.company_name} ({s.record.corp_code}) "
              f"score={s.score:.3f} top={s.top_goal_code} risk={s.record.risk_tag}")
        if s.reference_sentence:
            print(f"     근거: {s.reference_sentence[:80]}")

    print("\n" + "-" * 70)
    print(f"전체 기업 수: {result.metadata.get('total_companies', 0)}")
    print(f"추천 수: {len(result.ranked)}")
