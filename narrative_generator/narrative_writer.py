"""
Narrative Writer - 추천 기업 설명 텍스트 생성

OpenRouter 경유 LLM 으로 기업별 세 가지 텍스트를 생성한다:
- explanation: 추천 이유
- investment_report: 투자 리포트
- social_post: SNS 홍보 문구

호출 실패나 JSON 파싱 실패 시 templates.fallback_narrative 로 대체한다.
"""

import json
import logging
from typing import Optional

from openai import OpenAI

from .models import DEFAULT_BASE_URL, Narrative
from .templates import RISK_DESCRIPTIONS, fallback_narrative

logger = logging.getLogger(__name__)


class NarrativeWriter:
    """기업 설명 텍스트 생성기

    Example:
        writer = NarrativeWriter(api_key="sk-or-...")
        narrative = writer.generate_narrative("에코전지", "태양광 발전 설비를 확대했다.", "공격형", 0.8)
    """

    DEFAULT_MODEL = "google/gemini-2.5-flash"

    def __init__(
        self,
        api_key: str,
        model: Optional[str] = None,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 120.0,
    ):
        """초기화

        Args:
            api_key: OpenRouter API key
            model: 모델 이름 (기본 gemini-2.5-flash)
            base_url: OpenAI 호환 엔드포인트
            timeout: 요청 타임아웃 (초)
        """
        if not api_key:
            raise ValueError("OPENROUTER_API_KEY is required")

        self.client = OpenAI(base_url=base_url, api_key=api_key, timeout=timeout)
        self.model = model or self.DEFAULT_MODEL

    def _build_prompt(
        self,
        company_name: str,
        reference_sentence: str,
        risk_tag: str,
        sentiment_score: float,
    ) -> str:
        risk_text = RISK_DESCRIPTIONS.get(risk_tag, "")
        return f"""당신은 ESG 및 SDGs 기반 금융 투자 전문가입니다.
아래 기업 정보를 바탕으로 투자자에게 보여줄 세 가지 글을 작성하세요.

## 기업 정보
- 기업명: {company_name}
- 공시 근거 문장: {reference_sentence or '없음'}
- 기업 위험 유형: {risk_tag or '정보 없음'} {f'({risk_text} 투자자에게 적합)' if risk_text else ''}
- 해당 SDG 활동 감성 점수: {sentiment_score:.3f} (양수=긍정, 음수=부정)

## 작성 요구사항
1. explanation: 이 기업이 왜 추천되었는지, 어떤 SDG 활동을 하는지 150자 내외로 구체적으로 설명
2. investment_report: 핵심 SDG 활동, 위험 요인, 투자 관점 요약을 담은 300자 내외 리포트
3. social_post: 친근한 톤의 SNS 홍보 문구 (마지막에 해시태그 3~5개)
4. 근거 문장에 없는 수치나 사실을 지어내지 마세요.

## 출력
JSON 형식, 세 필드만:
```json
{{
  "explanation": "...",
  "investment_report": "...",
  "social_post": "..."
}}
```
"""

    def _parse_response(self, response_text: str) -> Optional[dict]:
        """응답에서 JSON 추출, 실패하거나 필드가 비어 있으면 None"""
        try:
            json_text = response_text
            if "```json" in response_text:
                json_text = response_text.split("```json")[1].split("```")[0]
            elif "```" in response_text:
                json_text = response_text.split("```")[1].split("```")[0]

            data = json.loads(json_text.strip())
        except (json.JSONDecodeError, IndexError):
            return None

        if not isinstance(data, dict):
            return None
        fields = ("explanation", "investment_report", "social_post")
        if not all(isinstance(data.get(k), str) and data[k].strip() for k in fields):
            return None
        return data

    def generate_narrative(
        self,
        company_name: str,
        reference_sentence: str,
        risk_tag: str,
        sentiment_score: float,
        goal_id: Optional[int] = None,
    ) -> Narrative:
        """기업 설명 텍스트 생성

        Args:
            company_name: 기업명
            reference_sentence: 대표 SDG 의 근거 문장
            risk_tag: 기업 Risk_Tag
            sentiment_score: 대표 SDG 감성 점수
            goal_id: 대표 SDG (fallback 문구용)

        Returns:
            Narrative (실패 시 is_fallback=True 인 템플릿 텍스트)
        """
        prompt = self._build_prompt(company_name, reference_sentence, risk_tag, sentiment_score)

        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                response_format={"type": "json_object"},
                temperature=0.7,
            )
            response_text = response.choices[0].message.content or "{}"
        except Exception as e:
            logger.warning("Narrative generation failed for %s: %s", company_name, e)
            return fallback_narrative(company_name, goal_id, risk_tag, sentiment_score)

        data = self._parse_response(response_text)
        if data is None:
            logger.warning("Unparseable narrative response for %s, using template", company_name)
            return fallback_narrative(company_name, goal_id, risk_tag, sentiment_score)

        return Narrative(
            company_name=company_name,
            explanation=data["explanation"].strip(),
            investment_report=data["investment_report"].strip(),
            social_post=data["social_post"].strip(),
        )
