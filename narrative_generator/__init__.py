"""
Narrative Generator Package

추천 결과 보강(enrichment) 시스템, 포함 항목:
- NarrativeWriter: 추천 이유 / 투자 리포트 / SNS 문구 생성
- MediaGenerator: 이미지(data URL) / 소개 영상 생성
- RecommendationEnricher: 상위 N개 기업 병렬 보강, 실패 시 템플릿 대체
"""

from .models import (
    EnrichmentConfig,
    MediaResult,
    Narrative,
)
from .narrative_writer import NarrativeWriter
from .media_generator import MediaGenerator
from .templates import fallback_narrative
from .enricher import RecommendationEnricher

__all__ = [
    # Models
    "EnrichmentConfig",
    "MediaResult",
    "Narrative",
    # Core classes
    "NarrativeWriter",
    "MediaGenerator",
    "RecommendationEnricher",
    # Templates
    "fallback_narrative",
]
