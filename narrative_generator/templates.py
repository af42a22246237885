"""
Narrative Templates - 템플릿 문구와 미디어 프롬프트

| 용도            | 사용 시점                                 |
|-----------------|-------------------------------------------|
| fallback 텍스트 | mock 모드, 또는 생성 호출 실패/파싱 실패  |
| 이미지 프롬프트 | 기업 상세 화면의 SDG 비주얼 스냅샷        |
| 영상 프롬프트   | 기업 소개 영상                            |
"""

from typing import Optional

from core import RISK_AGGRESSIVE, RISK_NEUTRAL, RISK_SAFE, SDG_TITLES

from .models import Narrative


RISK_DESCRIPTIONS = {
    RISK_SAFE: "안정적인 수익을 중시하는",
    RISK_NEUTRAL: "수익과 위험의 균형을 추구하는",
    RISK_AGGRESSIVE: "높은 성장 가능성을 추구하는",
}

DEFAULT_HASHTAGS = ["#ESG투자", "#SDGs", "#지속가능한미래"]


def goal_title(goal_id: Optional[int]) -> str:
    """목표 ID 의 한글 명칭 (알 수 없으면 '지속가능발전')"""
    return SDG_TITLES.get(goal_id, "지속가능발전")


def sentiment_phrase(sentiment_score: float) -> str:
    if sentiment_score > 0:
        return "긍정적인 평가를 받고 있습니다"
    if sentiment_score < 0:
        return "개선이 필요한 영역으로 평가되고 있습니다"
    return "꾸준히 언급되고 있습니다"


def fallback_narrative(
    company_name: str,
    goal_id: Optional[int] = None,
    risk_tag: str = "",
    sentiment_score: float = 0.0,
) -> Narrative:
    """생성 서비스 없이 만드는 결정적(deterministic) 설명 텍스트

    세 필드 모두 항상 비어 있지 않다.
    """
    title = goal_title(goal_id)
    risk_text = RISK_DESCRIPTIONS.get(risk_tag, "다양한 성향의")
    name = company_name or "이 기업"

    explanation = (
        f"{name}은(는) '{title}' 분야에서 주목할 만한 활동을 보이는 기업입니다. "
        f"공시 자료에서 해당 목표와 관련된 활동이 {sentiment_phrase(sentiment_score)}."
    )
    investment_report = (
        f"[{name} 투자 리포트]\n"
        f"- 핵심 SDG: {title}\n"
        f"- 위험 성향: {risk_tag or '정보 없음'} ({risk_text} 투자자에게 적합)\n"
        f"- 감성 점수: {sentiment_score:.2f}\n"
        f"본 리포트는 자동 생성된 요약이며 투자 권유가 아닙니다."
    )
    hashtags = " ".join([f"#{name.replace(' ', '')}"] + DEFAULT_HASHTAGS)
    social_post = f"'{title}'에 진심인 기업, {name}을(를) 소개합니다! {hashtags}"

    return Narrative(
        company_name=company_name,
        explanation=explanation,
        investment_report=investment_report,
        social_post=social_post,
        is_fallback=True,
    )


def build_image_prompt(reference_sentence: str, company_name: str) -> str:
    """SDG 비주얼 스냅샷 이미지 프롬프트"""
    return (
        f"A bright, optimistic editorial illustration of the sustainability activity of "
        f"the Korean company '{company_name}'. Scene based on this statement from its report: "
        f"\"{reference_sentence}\". No text, no logos."
    )


def build_video_prompt(reference_sentence: str, company_name: str) -> str:
    """기업 소개 영상 프롬프트"""
    return (
        f"A short cinematic video introducing the ESG activity of the company '{company_name}'. "
        f"Visualize: \"{reference_sentence}\". Hopeful tone, natural light, no on-screen text."
    )
