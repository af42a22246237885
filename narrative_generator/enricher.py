"""
Recommendation Enricher - 랭킹 결과 보강

상위 N개 ScoredCompany 각각에 대해 설명 텍스트와 이미지/영상을 생성해
Recommendation 으로 합친다. 기업별 작업은 서로 독립적이며 스레드 풀로 병렬 실행한다.

실패 정책:
- 텍스트 실패 -> 템플릿 텍스트 (항상 비어 있지 않음)
- 미디어 실패 -> None
- 어떤 경우에도 점수/순위는 변하지 않고 예외가 밖으로 나가지 않는다.
"""

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import List, Optional, Sequence

from core import Recommendation, ScoredCompany
from sdg_recommender import compute_alignment_vector

from .media_generator import MediaGenerator
from .models import EnrichmentConfig, MediaResult, Narrative
from .narrative_writer import NarrativeWriter
from .templates import fallback_narrative

logger = logging.getLogger(__name__)


class RecommendationEnricher:
    """랭킹 결과 보강기

    mock/live 는 설정(EnrichmentConfig.mode)으로 명시적으로 전환한다.

    Example:
        enricher = RecommendationEnricher(EnrichmentConfig.from_env())
        recommendations = enricher.enrich(result.ranked)
    """

    def __init__(
        self,
        config: EnrichmentConfig,
        writer: Optional[NarrativeWriter] = None,
        media: Optional[MediaGenerator] = None,
    ):
        """초기화

        Args:
            config: 보강 설정
            writer: 텍스트 생성기 (None 이면 live 모드에서 설정으로 생성)
            media: 미디어 생성기 (None 이면 live 모드에서 설정으로 생성)
        """
        self.config = config
        self.writer = writer
        self.media = media

        if config.is_live:
            if self.writer is None:
                self.writer = NarrativeWriter(
                    api_key=config.api_key,
                    model=config.text_model,
                    base_url=config.base_url,
                    timeout=config.request_timeout,
                )
            if self.media is None and (config.generate_image or config.generate_video):
                self.media = MediaGenerator(
                    api_key=config.api_key,
                    image_model=config.image_model,
                    base_url=config.base_url,
                    timeout=config.media_timeout,
                    video_api_key=config.video_api_key,
                    video_base_url=config.video_base_url,
                    video_model=config.video_model,
                    video_dir=config.video_dir,
                )

    def _narrative(self, scored: ScoredCompany) -> Narrative:
        record = scored.record
        sentiment = scored.top_goal.sentiment_mean

        if not self.config.is_live or self.writer is None:
            return fallback_narrative(record.company_name, scored.top_goal_id, record.risk_tag, sentiment)

        try:
            return self.writer.generate_narrative(
                company_name=record.company_name,
                reference_sentence=scored.reference_sentence,
                risk_tag=record.risk_tag,
                sentiment_score=sentiment,
                goal_id=scored.top_goal_id,
            )
        except Exception as e:
            logger.warning("Narrative writer raised for %s: %s", record.company_name, e)
            return fallback_narrative(record.company_name, scored.top_goal_id, record.risk_tag, sentiment)

    def _media(self, scored: ScoredCompany) -> MediaResult:
        name = scored.record.company_name
        result = MediaResult(company_name=name)
        if not self.config.is_live or self.media is None:
            return result

        sentence = scored.reference_sentence
        if self.config.generate_image:
            try:
                result.image_data_url = self.media.generate_image(sentence, name)
            except Exception as e:
                logger.warning("Image generator raised for %s: %s", name, e)
        if self.config.generate_video:
            try:
                result.video_url = self.media.generate_video(sentence, name)
            except Exception as e:
                logger.warning("Video generator raised for %s: %s", name, e)
        return result

    def enrich_one(self, scored: ScoredCompany) -> Recommendation:
        """단일 기업 보강"""
        narrative = self._narrative(scored)
        media = self._media(scored)
        alignment = compute_alignment_vector(scored.record) if self.config.compute_alignment else []

        return Recommendation(
            company_name=scored.record.company_name,
            corp_code=scored.record.corp_code,
            match_score=scored.score,
            top_goal_code=scored.top_goal_code,
            explanation=narrative.explanation,
            investment_report=narrative.investment_report,
            social_post=narrative.social_post,
            image_reference_sentence=scored.reference_sentence,
            alignment_vector=alignment,
            image_data_url=media.image_data_url,
            video_url=media.video_url,
        )

    def enrich(
        self,
        ranked: Sequence[ScoredCompany],
        show_progress: bool = False,
    ) -> List[Recommendation]:
        """랭킹 결과 전체 보강 (순위 유지)

        Args:
            ranked: rank_companies 결과
            show_progress: 진행률 표시 여부

        Returns:
            입력과 같은 순서의 Recommendation 리스트
        """
        from tqdm import tqdm

        if not ranked:
            return []

        results: List[Optional[Recommendation]] = [None] * len(ranked)
        workers = self.config.max_workers or len(ranked)

        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = {executor.submit(self.enrich_one, s): i for i, s in enumerate(ranked)}

            iterator = as_completed(futures)
            if show_progress:
                iterator = tqdm(iterator, total=len(futures), desc="Enriching recommendations")

            for future in iterator:
                i = futures[future]
                try:
                    results[i] = future.result()
                except Exception as e:
                    scored = ranked[i]
                    logger.warning("Enrichment failed for %s: %s", scored.record.company_name, e)
                    results[i] = self._fallback_recommendation(scored)

        return results

    def _fallback_recommendation(self, scored: ScoredCompany) -> Recommendation:
        record = scored.record
        narrative = fallback_narrative(
            record.company_name, scored.top_goal_id, record.risk_tag, scored.top_goal.sentiment_mean
        )
        return Recommendation(
            company_name=record.company_name,
            corp_code=record.corp_code,
            match_score=scored.score,
            top_goal_code=scored.top_goal_code,
            explanation=narrative.explanation,
            investment_report=narrative.investment_report,
            social_post=narrative.social_post,
            image_reference_sentence=scored.reference_sentence,
        )
