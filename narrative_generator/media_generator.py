"""
Media Generator - 기업 홍보 이미지/영상 생성

- 이미지: OpenRouter 이미지 출력 모델 (modalities=["image", "text"]), data URL 반환
- 영상: OpenAI videos API (생성 -> 상태 폴링 -> 파일 다운로드), 로컬 파일 경로 반환

두 기능 모두 best-effort: 실패하거나 키가 없으면 None 을 반환하고 예외를 던지지 않는다.
"""

import logging
import re
import time
from pathlib import Path
from typing import Any, Optional

from openai import OpenAI

from .models import DEFAULT_BASE_URL
from .templates import build_image_prompt, build_video_prompt

logger = logging.getLogger(__name__)

VIDEO_PENDING_STATUSES = {"queued", "in_progress"}


def _get(obj: Any, key: str) -> Any:
    """dict 와 SDK 객체 모두에서 필드 읽기"""
    if isinstance(obj, dict):
        return obj.get(key)
    return getattr(obj, key, None)


class MediaGenerator:
    """이미지/영상 생성기

    Example:
        media = MediaGenerator(api_key="sk-or-...", video_api_key="sk-...")
        data_url = media.generate_image("태양광 발전 설비를 확대했다.", "에코전지")
    """

    DEFAULT_IMAGE_MODEL = "google/gemini-2.5-flash-image"
    DEFAULT_VIDEO_MODEL = "sora-2"

    def __init__(
        self,
        api_key: str,
        image_model: Optional[str] = None,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 300.0,
        video_api_key: Optional[str] = None,
        video_base_url: Optional[str] = None,
        video_model: Optional[str] = None,
        video_dir: Path = Path("output/videos"),
        poll_interval: float = 5.0,
    ):
        """초기화

        Args:
            api_key: OpenRouter API key (이미지)
            image_model: 이미지 모델 이름
            base_url: 이미지용 OpenAI 호환 엔드포인트
            timeout: 미디어 생성 타임아웃 (초)
            video_api_key: 영상 API key, 없으면 영상 생성 비활성
            video_base_url: 영상 엔드포인트 (None 이면 OpenAI 기본값)
            video_model: 영상 모델 이름
            video_dir: 영상 저장 디렉토리
            poll_interval: 영상 상태 폴링 간격 (초)
        """
        if not api_key:
            raise ValueError("OPENROUTER_API_KEY is required")

        self.client = OpenAI(base_url=base_url, api_key=api_key, timeout=timeout)
        self.image_model = image_model or self.DEFAULT_IMAGE_MODEL

        self.video_client = None
        if video_api_key:
            self.video_client = OpenAI(base_url=video_base_url, api_key=video_api_key, timeout=timeout)
        self.video_model = video_model or self.DEFAULT_VIDEO_MODEL
        self.video_dir = Path(video_dir)
        self.timeout = timeout
        self.poll_interval = poll_interval

    def _extract_image_url(self, response: Any) -> Optional[str]:
        for choice in _get(response, "choices") or []:
            message = _get(choice, "message")
            for image in _get(message, "images") or []:
                url = _get(_get(image, "image_url"), "url")
                if url:
                    return url
        return None

    def generate_image(self, reference_sentence: str, company_name: str) -> Optional[str]:
        """근거 문장 기반 이미지 생성

        Returns:
            "data:image/png;base64,..." 형식 URL, 실패 시 None
        """
        if not reference_sentence:
            return None

        try:
            response = self.client.chat.completions.create(
                model=self.image_model,
                messages=[{"role": "user", "content": build_image_prompt(reference_sentence, company_name)}],
                extra_body={"modalities": ["image", "text"]},
            )
        except Exception as e:
            logger.warning("Image generation failed for %s: %s", company_name, e)
            return None

        url = self._extract_image_url(response)
        if not url:
            logger.warning("Image model returned no image for %s", company_name)
        return url

    def generate_video(self, reference_sentence: str, company_name: str) -> Optional[str]:
        """근거 문장 기반 소개 영상 생성

        Returns:
            다운로드된 mp4 파일 경로, 실패/타임아웃/비활성 시 None
        """
        if self.video_client is None or not reference_sentence:
            return None

        try:
            video = self.video_client.videos.create(
                model=self.video_model,
                prompt=build_video_prompt(reference_sentence, company_name),
            )

            deadline = time.monotonic() + self.timeout
            while video.status in VIDEO_PENDING_STATUSES:
                if time.monotonic() > deadline:
                    logger.warning("Video generation timed out for %s (%s)", company_name, video.id)
                    return None
                time.sleep(self.poll_interval)
                video = self.video_client.videos.retrieve(video.id)

            if video.status != "completed":
                logger.warning("Video generation %s for %s", video.status, company_name)
                return None

            self.video_dir.mkdir(parents=True, exist_ok=True)
            safe_name = re.sub(r"[^\w-]+", "_", company_name).strip("_") or "company"
            output_file = self.video_dir / f"{safe_name}_{video.id}.mp4"
            content = self.video_client.videos.download_content(video.id, variant="video")
            content.write_to_file(output_file)
            return str(output_file)

        except Exception as e:
            logger.warning("Video generation failed for %s: %s", company_name, e)
            return None
