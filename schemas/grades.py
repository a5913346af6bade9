from pydantic import BaseModel, ConfigDict
from typing import Literal, Optional, Union

# ✅ 성적 항목(학기 구분) - 이 네 필드만 개별 저장 가능
TERM_FIELDS = ("prelim", "midterm", "semifinal", "final")
TermField = Literal["prelim", "midterm", "semifinal", "final"]


class GradeCreate(BaseModel):
    student_id: int                          # 학생 ID
    subject_id: int                          # 과목 ID
    prelim: Optional[float] = None
    midterm: Optional[float] = None
    semifinal: Optional[float] = None
    final: Optional[float] = None


class Grade(GradeCreate):
    id: int                                  # 성적 고유 ID

    model_config = ConfigDict(from_attributes=True)


class GradeFieldUpdate(BaseModel):
    """성적 한 칸 저장 요청 (입력칸 포커스 해제 시 1회 호출)"""
    field: TermField
    value: Union[float, str, None] = None    # "" 또는 None → 빈 값(NULL)


class ReconciledGrade(BaseModel):
    """화면 표시용 성적 레코드 (학생 이름 결합, 빈 값은 None 유지)"""
    id: int
    name: str
    prelim: Optional[float] = None
    midterm: Optional[float] = None
    semifinal: Optional[float] = None
    final: Optional[float] = None
