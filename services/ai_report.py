"""
services/ai_report.py

- 과목별 성적 데이터를 Gemini에 보내 성적 분석 리포트(AIReport)를 생성
- 어떤 경우에도 예외를 호출자에게 던지지 않음
  · 외부 호출 실패 / JSON 아님 / 스키마 불일치 → 로컬에서 계산한 기본 리포트 반환
- 응답 파싱은 2단계
  1) strip_code_fence: ```json ... ``` 코드블록 제거
  2) parse_report: JSON 디코딩 + AIReport 스키마 검증 (하나라도 틀리면 실패)
"""

import json
import logging
from typing import Any, List, Optional, Sequence

from pydantic import ValidationError

from schemas.reports import AIReport, ScoredRecord
from services.grade_reconciler import partition_by_result, score_record
from services.llm.base import LLMClient
from services.llm_service import get_llm_client

logger = logging.getLogger(__name__)

FENCE = "```"


class ReportParseError(ValueError):
    """AI 응답을 AIReport로 해석하지 못함"""
    pass


# ==========================================================
# [1단계] 응답 텍스트 정리
# ==========================================================
def strip_code_fence(text: str) -> str:
    """
    - ```json 으로 시작 → 첫 펜스와 다음 펜스 사이
    - ``` 으로 시작     → 첫 번째와 두 번째 펜스 사이
    - 그 외            → 앞뒤 공백만 제거
    """
    text = (text or "").strip()
    if text[:len(FENCE) + 4].lower() == FENCE + "json":
        return text[len(FENCE) + 4:].split(FENCE, 1)[0].strip()
    if text.startswith(FENCE):
        return text.split(FENCE)[1].strip()
    return text


# ==========================================================
# [2단계] JSON + 스키마 검증
# ==========================================================
def parse_report(text: str) -> AIReport:
    payload = strip_code_fence(text)
    try:
        data = json.loads(payload)
    except ValueError as e:
        raise ReportParseError(f"AI response is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise ReportParseError("AI response is not a JSON object")

    try:
        return AIReport.model_validate(data)
    except ValidationError as e:
        raise ReportParseError(f"AI response does not match report schema: {e}") from e


# ==========================================================
# [프롬프트 / 기본 리포트]
# ==========================================================
def build_prompt(subject_name: str, scored: Sequence[ScoredRecord]) -> str:
    data = [s.model_dump(exclude={"passed"}) for s in scored]
    return f"""
You are an academic assistant. Analyze the following student performance data for the subject: "{subject_name}".

Rules:
- Return ONLY a valid JSON object.
- Do NOT include markdown, explanations, or extra text.
- Use double quotes for strings.
- Final grade >= 75 means "passed", otherwise "failed".

Data format: {{ "name": "string", "prelim": number, "midterm": number, "semifinal": number, "final": number }}

Data:
{json.dumps(data, indent=2, ensure_ascii=False)}

Respond with this exact structure:
{{
  "analysis": "A 2-3 sentence summary of overall class performance.",
  "passedStudents": ["Name 1", "Name 2"],
  "failedStudents": ["Name 3"]
}}
"""


def build_fallback_report(subject_name: str, passed: List[str], failed: List[str]) -> AIReport:
    return AIReport(
        analysis=(
            f"Performance summary for {subject_name}: "
            f"{len(passed)} students passed, {len(failed)} students failed."
        ),
        passed_students=list(passed),
        failed_students=list(failed),
    )


# ==========================================================
# [메인] 리포트 생성
# ==========================================================
async def generate_report(subject_name: str, records: Sequence[Any],
                          llm: Optional[LLMClient] = None) -> AIReport:
    """
    records: name + prelim/midterm/semifinal/final 을 가진 레코드 (dict/ReconciledGrade 등)
    항상 유효한 AIReport를 반환
    """
    try:
        scored = [score_record(r) for r in records]
    except Exception as e:
        logger.warning(f"Could not score records for {subject_name!r}, using empty fallback: {e}")
        return build_fallback_report(subject_name, [], [])

    passed, failed = partition_by_result(scored)
    fallback = build_fallback_report(subject_name, passed, failed)

    try:
        client = llm or get_llm_client()
        text = await client.generate(build_prompt(subject_name, scored))
        report = parse_report(text)
    except Exception as e:
        logger.warning(f"AI report generation failed for {subject_name!r}, using fallback: {e}")
        return fallback

    logger.info(f"AI report generated for {subject_name!r} ({len(scored)} records)")
    return report
