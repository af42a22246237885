#!/usr/bin/env python3
"""
SDG Recommender Test Suite

Tests for the scoring engine and ranking pipeline:
1. Weighted base score and risk affinity multipliers
2. Top goal selection and tie handling
3. Ranking order, truncation and stable ties
4. Precondition failures (empty table, no goals)
5. Alignment vector scaling
"""

import json
import sys
from pathlib import Path

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from core import (
    RISK_AGGRESSIVE,
    RISK_NEUTRAL,
    RISK_SAFE,
    GoalWeight,
    InvalidPreferenceError,
    RawCompanyRecord,
    TableLoadError,
    UserPreference,
)
from sdg_recommender import (
    SdgRecommender,
    compute_alignment_vector,
    rank_companies,
    ranking_result_to_dict,
    risk_multiplier,
    save_ranking_result,
    score_company,
)


def make_record(name="A", corp_code="000001", risk=RISK_NEUTRAL, **goals):
    """Build a record; goals given as g7=(mentions, sentiment[, sentence])."""
    row = {"company_name": name, "corp_code": corp_code, "Risk_Tag": risk}
    for key, values in goals.items():
        code = f"G{int(key[1:]):02d}"
        row[f"{code}_mentions_per_1k_tokens"] = values[0]
        row[f"{code}_sent_mean"] = values[1]
        if len(values) > 2:
            row[f"{code}_reference_sentence"] = values[2]
    return RawCompanyRecord.from_row(row)


# =============================================================================
# Scoring engine
# =============================================================================


class TestScoreCompany:
    """Tests for single-record scoring."""

    def test_end_to_end_example(self):
        record = make_record(risk=RISK_AGGRESSIVE, g7=(4, 2))
        preference = UserPreference.from_pairs([(7, 5)], RISK_AGGRESSIVE)

        score, top_goal = score_company(record, preference)

        assert score == pytest.approx(48.0)
        assert top_goal == 7

    def test_weighted_sum_over_selected_goals_only(self):
        record = make_record(g1=(2, 1), g2=(3, 2), g3=(100, 100))
        preference = UserPreference.from_pairs([(1, 2), (2, 3)], RISK_SAFE)

        score, _ = score_company(record, preference)

        # 2*1*2 + 3*2*3 = 22, SAFE vs NEUTRAL -> 1.0
        assert score == pytest.approx(22.0)

    def test_deterministic(self):
        record = make_record(g4=(1.3, 0.7), g9=(2.2, -0.1))
        preference = UserPreference.from_pairs([(4, 3), (9, 5)], RISK_NEUTRAL)

        results = {score_company(record, preference) for _ in range(5)}
        assert len(results) == 1

    def test_negative_sentiment_gives_negative_score(self):
        record = make_record(g13=(5, -1.5))
        preference = UserPreference.from_pairs([(13, 4)], RISK_NEUTRAL)

        score, _ = score_company(record, preference)
        assert score == pytest.approx(5 * -1.5 * 4 * 1.1)

    def test_missing_column_counts_as_zero(self):
        record = make_record(g7=(2, 1))
        preference = UserPreference.from_pairs([(5, 5), (7, 1)], RISK_SAFE)

        score, top_goal = score_company(record, preference)
        assert score == pytest.approx(2.0)
        assert top_goal == 7

    def test_empty_goal_weights_rejected(self):
        with pytest.raises(InvalidPreferenceError):
            UserPreference(goal_weights=(), risk_preference=RISK_SAFE)


class TestRiskMultiplier:
    """Tests for the risk affinity table."""

    @pytest.mark.parametrize("user, company, expected", [
        (RISK_SAFE, RISK_SAFE, 1.2),
        (RISK_SAFE, RISK_AGGRESSIVE, 0.8),
        (RISK_SAFE, RISK_NEUTRAL, 1.0),
        (RISK_AGGRESSIVE, RISK_AGGRESSIVE, 1.2),
        (RISK_AGGRESSIVE, RISK_SAFE, 0.9),
        (RISK_AGGRESSIVE, RISK_NEUTRAL, 1.0),
        (RISK_NEUTRAL, RISK_NEUTRAL, 1.1),
        (RISK_NEUTRAL, RISK_SAFE, 1.0),
        (RISK_NEUTRAL, RISK_AGGRESSIVE, 1.0),
        (RISK_SAFE, "기타", 1.0),
    ])
    def test_table(self, user, company, expected):
        assert risk_multiplier(user, company) == expected

    def test_safe_preference_ratios(self):
        preference = UserPreference.from_pairs([(6, 2)], RISK_SAFE)
        safe, _ = score_company(make_record(risk=RISK_SAFE, g6=(3, 1)), preference)
        neutral, _ = score_company(make_record(risk=RISK_NEUTRAL, g6=(3, 1)), preference)
        aggressive, _ = score_company(make_record(risk=RISK_AGGRESSIVE, g6=(3, 1)), preference)

        assert safe == pytest.approx(1.2 * neutral)
        assert safe == pytest.approx(1.5 * aggressive)

    def test_english_aliases_normalised(self):
        preference = UserPreference.from_pairs([(1, 1)], "aggressive")
        record = make_record(risk="AGGRESSIVE", g1=(1, 1))

        assert preference.risk_preference == RISK_AGGRESSIVE
        assert score_company(record, preference)[0] == pytest.approx(1.2)


class TestTopGoal:
    """Tests for dominant goal selection."""

    def test_strictly_greatest_product_wins(self):
        record = make_record(g2=(1, 1), g8=(3, 2), g11=(5, 1))
        preference = UserPreference.from_pairs([(2, 5), (8, 1), (11, 1)], RISK_NEUTRAL)

        assert score_company(record, preference)[1] == 8

    def test_tie_keeps_first_selected(self):
        record = make_record(g3=(2, 2), g10=(4, 1))
        preference = UserPreference.from_pairs([(10, 1), (3, 5)], RISK_NEUTRAL)

        assert score_company(record, preference)[1] == 10

    def test_all_zero_keeps_first_selected(self):
        record = make_record()
        preference = UserPreference.from_pairs([(12, 3), (4, 3)], RISK_NEUTRAL)

        assert score_company(record, preference) == (0.0, 12)

    def test_unselected_goal_never_top(self):
        record = make_record(g1=(1, 1), g17=(100, 100))
        preference = UserPreference.from_pairs([(1, 1)], RISK_NEUTRAL)

        assert score_company(record, preference)[1] == 1

    def test_negative_products_pick_least_negative(self):
        record = make_record(g5=(2, -3), g6=(1, -1))
        preference = UserPreference.from_pairs([(5, 1), (6, 1)], RISK_NEUTRAL)

        assert score_company(record, preference)[1] == 6


class TestUserPreference:
    """Tests for preference validation."""

    def test_duplicate_goal_rejected(self):
        with pytest.raises(InvalidPreferenceError):
            UserPreference.from_pairs([(3, 1), (3, 2)], RISK_SAFE)

    def test_goal_out_of_range_rejected(self):
        with pytest.raises(InvalidPreferenceError):
            UserPreference.from_pairs([(18, 1)], RISK_SAFE)

    def test_importance_out_of_range_rejected(self):
        with pytest.raises(InvalidPreferenceError):
            UserPreference(goal_weights=(GoalWeight(goal_id=1, importance=6),), risk_preference=RISK_SAFE)

    def test_unknown_risk_rejected(self):
        with pytest.raises(InvalidPreferenceError):
            UserPreference.from_pairs([(1, 1)], "very risky")

    def test_all_goals_accepted(self):
        preference = UserPreference.from_pairs([(g, 1) for g in range(1, 18)], RISK_SAFE)
        assert len(preference.goal_weights) == 17


# =============================================================================
# Ranking pipeline
# =============================================================================


class TestRankCompanies:
    """Tests for sort and truncation."""

    @pytest.fixture
    def ten_records(self):
        mentions = [3, 9, 1, 7, 5, 10, 2, 8, 4, 6]
        return [
            make_record(name=f"C{i}", corp_code=f"{i:06d}", g7=(m, 1))
            for i, m in enumerate(mentions)
        ]

    def test_top_n_truncation(self, ten_records):
        preference = UserPreference.from_pairs([(7, 1)], RISK_SAFE)

        ranked = rank_companies(ten_records, preference, top_n=3)

        assert len(ranked) == 3
        assert [r.record.company_name for r in ranked] == ["C5", "C1", "C7"]
        assert [r.score for r in ranked] == sorted([r.score for r in ranked], reverse=True)

    def test_top_n_larger_than_table(self, ten_records):
        preference = UserPreference.from_pairs([(7, 1)], RISK_SAFE)
        assert len(rank_companies(ten_records, preference, top_n=50)) == 10

    def test_ties_keep_table_order(self):
        records = [make_record(name=n, g1=(1, 1)) for n in ["first", "second", "third"]]
        preference = UserPreference.from_pairs([(1, 1)], RISK_SAFE)

        ranked = rank_companies(records, preference, top_n=3)
        assert [r.record.company_name for r in ranked] == ["first", "second", "third"]

    def test_records_with_missing_columns_still_ranked(self):
        records = [make_record(name="empty"), make_record(name="negative", g2=(1, -1))]
        preference = UserPreference.from_pairs([(2, 1)], RISK_NEUTRAL)

        ranked = rank_companies(records, preference, top_n=2)
        assert [r.record.company_name for r in ranked] == ["empty", "negative"]

    def test_overflowing_metric_does_not_break_order(self):
        records = [
            make_record(name="low", g7=(1, 1)),
            make_record(name="overflow", g7=("1e400", 0)),
            make_record(name="high", g7=(5, 1)),
        ]
        preference = UserPreference.from_pairs([(7, 1)], RISK_SAFE)

        ranked = rank_companies(records, preference, top_n=3)
        assert [r.record.company_name for r in ranked] == ["high", "low", "overflow"]
        assert ranked[2].score == 0.0

    def test_empty_records_rejected(self):
        preference = UserPreference.from_pairs([(7, 5)], RISK_SAFE)
        with pytest.raises(TableLoadError):
            rank_companies([], preference, top_n=3)

    @pytest.mark.parametrize("top_n", [0, -1, 2.5])
    def test_invalid_top_n_rejected(self, ten_records, top_n):
        preference = UserPreference.from_pairs([(7, 5)], RISK_SAFE)
        with pytest.raises(ValueError):
            rank_companies(ten_records, preference, top_n=top_n)


class TestSdgRecommender:
    """Tests for the recommender wrapper and result helpers."""

    def test_recommend_response_shape(self):
        records = [
            make_record(name="에코전지", corp_code="036460", risk=RISK_AGGRESSIVE, g7=(4, 2, "태양광 확대")),
            make_record(name="그린물산", corp_code="005930", g7=(1, 1)),
        ]
        recommender = SdgRecommender(records)
        result = recommender.recommend(UserPreference.from_pairs([(7, 5)], RISK_AGGRESSIVE), top_n=1)

        assert result.to_response() == [{
            "company_name": "에코전지",
            "corp_code": "036460",
            "score": pytest.approx(48.0),
            "top_goal_code": "G07",
            "reference_sentence": "태양광 확대",
        }]
        assert result.metadata["total_companies"] == 2

    def test_empty_records_rejected(self):
        with pytest.raises(TableLoadError):
            SdgRecommender([])

    def test_save_result_keeps_corp_code_text(self, tmp_path):
        recommender = SdgRecommender([make_record(corp_code="000660", g1=(1, 1))])
        result = recommender.recommend(UserPreference.from_pairs([(1, 3)], RISK_SAFE))

        output = tmp_path / "out" / "ranking.json"
        save_ranking_result(result, output)

        with open(output, "r", encoding="utf-8") as f:
            data = json.load(f)
        assert data["recommended_companies"][0]["corp_code"] == "000660"
        assert data == json.loads(json.dumps(ranking_result_to_dict(result), ensure_ascii=False))


# =============================================================================
# Alignment vector
# =============================================================================


class TestAlignmentVector:
    """Tests for the 1-5 per-goal alignment scaling."""

    def test_scaled_between_one_and_five(self):
        record = make_record(g1=(4, 1), g2=(2, 1))
        vector = compute_alignment_vector(record)

        assert len(vector) == 17
        assert vector[0] == 5.0
        assert vector[1] == 3.0
        assert min(vector) == 1.0

    def test_flat_record_is_midpoint(self):
        assert compute_alignment_vector(make_record()) == [3.0] * 17
