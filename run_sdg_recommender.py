#!/usr/bin/env python3
"""
SDG Recommender CLI - SDG 선호도 기반 기업 추천 스크립트

기업 테이블(CSV/TSV)을 읽어 사용자가 선택한 SDG 목표와 위험 성향으로
기업을 점수화하고 상위 N개를 추천한다. 선택적으로 설명 텍스트/이미지/영상을 보강한다.

Usage:
    # 목표 7(중요도 5), 13(중요도 3), 공격형, 결과 출력만
    python run_sdg_recommender.py --table data/company_sdg.csv --goal 7:5 --goal 13:3 --risk 공격형 --print-only

    # 상위 5개 추천 후 JSON 저장
    python run_sdg_recommender.py --table data/company_sdg.csv --goal 3:4 --risk SAFE --top-n 5

    # 템플릿 텍스트로 보강 (네트워크 호출 없음)
    python run_sdg_recommender.py --table data/company_sdg.csv --goal 7:5 --risk 중립형 --enrich --mode mock

    # 실제 생성 호출 + 이미지 (OPENROUTER_API_KEY 필요)
    python run_sdg_recommender.py --table data/company_sdg.csv --goal 7:5 --risk 공격형 --enrich --mode live --with-image
"""

import argparse
import json
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Tuple

from dotenv import load_dotenv

from api.data_loader import get_table_cache
from api.schemas import ModelOutput, RecommendationResponse
from core import DEFAULT_TOP_N, InvalidPreferenceError, TableLoadError, UserPreference
from narrative_generator import EnrichmentConfig, RecommendationEnricher
from sdg_recommender import (
    RankingResult,
    SdgRecommender,
    print_ranking_result,
    ranking_result_to_dict,
    save_ranking_result,
)


# 기본 경로
DEFAULT_TABLE = Path("data/company_sdg.csv")
DEFAULT_OUTPUT_DIR = Path("output/sdg_recommendations")

LOAD_FAILURE_MESSAGE = "데이터를 불러올 수 없습니다. 잠시 후 다시 시도해주세요."


def parse_goal(value: str) -> Tuple[int, int]:
    """GOAL_ID[:IMPORTANCE] 파싱 (e.g., "7:5" -> (7, 5)), 중요도 생략 시 5"""
    goal, _, importance = value.partition(":")
    try:
        return int(goal), int(importance) if importance else 5
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid goal '{value}', expected GOAL_ID[:IMPORTANCE]")


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """명령행 인자 파싱"""
    parser = argparse.ArgumentParser(
        description="SDG Recommender - SDG 선호도 기반 기업 추천",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # 결과 출력만
  python run_sdg_recommender.py --goal 7:5 --goal 13:3 --risk 공격형 --print-only

  # 템플릿 텍스트로 보강
  python run_sdg_recommender.py --goal 7:5 --risk 중립형 --enrich --mode mock
        """
    )

    # 데이터 경로
    parser.add_argument(
        "--table",
        type=Path,
        default=DEFAULT_TABLE,
        help=f"기업 SDG 지표 테이블 경로 (default: {DEFAULT_TABLE})",
    )

    # 사용자 선호도
    parser.add_argument(
        "--goal",
        dest="goals",
        action="append",
        type=parse_goal,
        required=True,
        help="선택한 SDG 목표와 중요도 (e.g., 7:5), 선택 순서대로 반복 지정",
    )
    parser.add_argument(
        "--risk",
        type=str,
        required=True,
        help="위험 성향: 안전형/중립형/공격형 (또는 SAFE/NEUTRAL/AGGRESSIVE)",
    )
    parser.add_argument(
        "--top-n",
        type=int,
        default=DEFAULT_TOP_N,
        help=f"추천 기업 수 (default: {DEFAULT_TOP_N})",
    )

    # 보강
    parser.add_argument(
        "--enrich",
        action="store_true",
        help="추천 이유/리포트/SNS 문구 생성",
    )
    parser.add_argument(
        "--mode",
        choices=["live", "mock"],
        default=None,
        help="보강 모드 (default: ENRICHMENT_MODE 환경 변수, 없으면 API key 유무로 결정)",
    )
    parser.add_argument(
        "--with-image",
        action="store_true",
        help="이미지 생성 (live 모드)",
    )
    parser.add_argument(
        "--with-video",
        action="store_true",
        help="소개 영상 생성 (live 모드, OPENAI_API_KEY 필요)",
    )

    # 출력
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=DEFAULT_OUTPUT_DIR,
        help=f"출력 디렉토리 (default: {DEFAULT_OUTPUT_DIR})",
    )
    parser.add_argument(
        "--print-only",
        action="store_true",
        help="결과 출력만, 파일 저장 안 함",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="조용한 모드",
    )

    return parser.parse_args(argv)


def save_recommendations(recommendations: ModelOutput, output_path: Path) -> None:
    """보강된 추천 결과를 JSON 으로 저장"""
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w", encoding="utf-8") as f:
        json.dump(recommendations.model_dump(), f, ensure_ascii=False, indent=2)


def enrich_result(args: argparse.Namespace, result: RankingResult) -> ModelOutput:
    """랭킹 결과 보강"""
    config = EnrichmentConfig.from_env(
        mode=args.mode,
        generate_image=args.with_image,
        generate_video=args.with_video,
        video_dir=args.output_dir / "videos",
    )
    if not args.quiet:
        print(f"\nEnriching {len(result.ranked)} companies (mode={config.mode})...")

    enricher = RecommendationEnricher(config)
    recommendations = enricher.enrich(result.ranked, show_progress=not args.quiet)
    return ModelOutput(
        recommended_companies=[RecommendationResponse.from_recommendation(r) for r in recommendations]
    )


def main(argv: Optional[List[str]] = None) -> int:
    """메인 엔트리"""
    load_dotenv()
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.WARNING if args.quiet else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        preference = UserPreference.from_pairs(args.goals, args.risk)
    except InvalidPreferenceError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    if args.top_n < 1:
        print(f"Error: --top-n must be positive, got {args.top_n}", file=sys.stderr)
        return 2

    # 데이터 로드 (실패 시 부분 결과 없이 종료)
    try:
        recommender = SdgRecommender(get_table_cache().get(args.table))
    except TableLoadError as e:
        print(LOAD_FAILURE_MESSAGE, file=sys.stderr)
        print(f"Error: cannot load data: {e}", file=sys.stderr)
        return 1

    start_time = datetime.now()
    result = recommender.recommend(preference, top_n=args.top_n)

    if args.print_only or not args.quiet:
        print_ranking_result(result)

    enriched = None
    if args.enrich:
        try:
            enriched = enrich_result(args, result)
        except ValueError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 2

    if args.print_only:
        if enriched is not None:
            print(json.dumps(enriched.model_dump(), ensure_ascii=False, indent=2))
        return 0

    timestamp = start_time.strftime("%Y%m%d_%H%M%S")
    ranking_file = args.output_dir / f"ranking_{timestamp}.json"
    save_ranking_result(result, ranking_file)
    if not args.quiet:
        print(f"\nSaved ranking to: {ranking_file}")

    if enriched is not None:
        recommendations_file = args.output_dir / f"recommendations_{timestamp}.json"
        save_recommendations(enriched, recommendations_file)
        if not args.quiet:
            print(f"Saved recommendations to: {recommendations_file}")

    if not args.quiet:
        summary = ranking_result_to_dict(result)
        duration = (datetime.now() - start_time).total_seconds()
        print(f"\n{'=' * 50}")
        print("SUMMARY")
        print(f"{'=' * 50}")
        print(f"Companies scored: {summary['metadata']['total_companies']}")
        print(f"Recommended: {len(summary['recommended_companies'])}")
        print(f"Total time: {duration:.2f}s")

    return 0


if __name__ == "__main__":
    sys.exit(main())
