from pydantic import BaseModel, ConfigDict, Field
from typing import List


class ScoredRecord(BaseModel):
    """AI 분석용 레코드: 빈 점수는 0, final은 파생값"""
    name: str
    prelim: float = 0
    midterm: float = 0
    semifinal: float = 0
    final: float = 0
    passed: bool = False


class AIReport(BaseModel):
    """
    AI 성적 분석 결과
    - analysis: 자연어 요약
    - passedStudents / failedStudents: 순서가 유지되는 이름 목록
    - strict 모드: 외부 모델 응답의 타입이 조금이라도 다르면 검증 실패 처리
    """
    analysis: str
    passed_students: List[str] = Field(..., alias="passedStudents")
    failed_students: List[str] = Field(..., alias="failedStudents")

    model_config = ConfigDict(populate_by_name=True, strict=True, extra="ignore")
