"""
Narrative Generator Data Models

보강(enrichment) 단계의 데이터 구조와 설정.
"""

import os
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Optional

ENRICHMENT_MODES = ("live", "mock")

DEFAULT_BASE_URL = "https://openrouter.ai/api/v1"


@dataclass
class Narrative:
    """추천 기업 한 곳에 대한 설명 텍스트 묶음"""
    company_name: str
    explanation: str                    # 추천 이유 (150자 내외)
    investment_report: str              # 투자 리포트
    social_post: str                    # SNS 홍보 문구 (해시태그 포함)
    is_fallback: bool = False           # 템플릿 대체 텍스트 여부
    generated_at: str = ""

    def __post_init__(self):
        if not self.generated_at:
            self.generated_at = datetime.now().isoformat()


@dataclass
class MediaResult:
    """기업 홍보용 이미지/영상 생성 결과 (실패 시 None)"""
    company_name: str
    image_data_url: Optional[str] = None
    video_url: Optional[str] = None


@dataclass
class EnrichmentConfig:
    """보강 단계 설정

    mode:
        - "live": OpenRouter 로 실제 생성 호출 (api_key 필수)
        - "mock": 네트워크 호출 없이 템플릿 텍스트만 사용, 미디어 없음
    """
    mode: str = "mock"
    api_key: Optional[str] = None
    base_url: str = DEFAULT_BASE_URL
    text_model: str = "google/gemini-2.5-flash"
    image_model: str = "google/gemini-2.5-flash-image"
    video_model: str = "sora-2"
    video_base_url: Optional[str] = None      # None 이면 OpenAI 기본 엔드포인트
    video_api_key: Optional[str] = None
    request_timeout: float = 120.0
    media_timeout: float = 300.0
    generate_image: bool = True
    generate_video: bool = False
    compute_alignment: bool = True
    max_workers: Optional[int] = None         # None 이면 기업 수만큼
    video_dir: Path = field(default_factory=lambda: Path("output/videos"))

    def __post_init__(self):
        if self.mode not in ENRICHMENT_MODES:
            raise ValueError(f"Unknown enrichment mode: {self.mode} (expected one of {ENRICHMENT_MODES})")
        if self.mode == "live" and not self.api_key:
            raise ValueError("OPENROUTER_API_KEY is required")
        self.video_dir = Path(self.video_dir)

    @property
    def is_live(self) -> bool:
        return self.mode == "live"

    @classmethod
    def from_env(cls, **overrides) -> "EnrichmentConfig":
        """환경 변수에서 설정 읽기

        ENRICHMENT_MODE 가 없으면 OPENROUTER_API_KEY 유무로 live/mock 결정.
        """
        api_key = os.getenv("OPENROUTER_API_KEY") or None
        values = {
            "mode": os.getenv("ENRICHMENT_MODE") or ("live" if api_key else "mock"),
            "api_key": api_key,
            "video_api_key": os.getenv("OPENAI_API_KEY") or None,
        }
        if os.getenv("ENRICHMENT_TEXT_MODEL"):
            values["text_model"] = os.getenv("ENRICHMENT_TEXT_MODEL")
        if os.getenv("ENRICHMENT_IMAGE_MODEL"):
            values["image_model"] = os.getenv("ENRICHMENT_IMAGE_MODEL")
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)
