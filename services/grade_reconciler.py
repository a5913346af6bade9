"""
services/grade_reconciler.py

- 성적 행(grades)과 학생 행(students)을 합쳐 화면 표시용 레코드로 변환
- AI 분석 직전에 최종 점수(final)와 합격 여부를 계산
  · final이 저장되어 있으면 그대로 사용
  · 비어 있으면 prelim/midterm/semifinal 평균 (소수점 둘째 자리 반올림)
  · final >= 75 → 합격 (75점 포함)
"""

import math
from typing import Any, Iterable, List, Optional, Sequence, Tuple

from config.settings import settings
from schemas.grades import ReconciledGrade
from schemas.reports import ScoredRecord

UNKNOWN_STUDENT = "Unknown Student"


def _is_empty(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _as_number(value: Any) -> Optional[float]:
    """숫자로 해석 가능하면 float, 아니면 None"""
    if _is_empty(value) or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def to_number(value: Any) -> float:
    """빈 값/숫자 아님 → 0"""
    number = _as_number(value)
    return 0.0 if number is None else number


def derive_final(prelim: Any, midterm: Any, semifinal: Any, final: Any) -> float:
    stored = _as_number(final)
    if stored is not None:
        return round(stored, 2)
    mean = (to_number(prelim) + to_number(midterm) + to_number(semifinal)) / 3
    return round(mean, 2)


def is_passing(final: float) -> bool:
    return final >= settings.PASSING_SCORE


def _field(row: Any, name: str) -> Any:
    # ORM 객체 / dict / pydantic 모두 지원
    if isinstance(row, dict):
        return row.get(name)
    return getattr(row, name, None)


def _display_name(student: Any) -> str:
    return f"{_field(student, 'first_name')} {_field(student, 'last_name')}"


def reconcile_grades(grades: Sequence[Any], students: Iterable[Any]) -> List[ReconciledGrade]:
    """
    성적 행 순서를 그대로 유지하며 학생 이름을 붙인다.
    참조하는 학생이 없으면 "Unknown Student" (예외 없음)
    """
    names = {_field(s, "id"): _display_name(s) for s in students}

    records = []
    for g in grades:
        records.append(ReconciledGrade(
            id=_field(g, "id"),
            name=names.get(_field(g, "student_id"), UNKNOWN_STUDENT),
            prelim=_as_number(_field(g, "prelim")),
            midterm=_as_number(_field(g, "midterm")),
            semifinal=_as_number(_field(g, "semifinal")),
            final=_as_number(_field(g, "final")),
        ))
    return records


def score_record(record: Any) -> ScoredRecord:
    name = _field(record, "name")
    prelim = _field(record, "prelim")
    midterm = _field(record, "midterm")
    semifinal = _field(record, "semifinal")
    final = derive_final(prelim, midterm, semifinal, _field(record, "final"))
    return ScoredRecord(
        name=UNKNOWN_STUDENT if _is_empty(name) else str(name),
        prelim=to_number(prelim),
        midterm=to_number(midterm),
        semifinal=to_number(semifinal),
        final=final,
        passed=is_passing(final),
    )


def partition_by_result(scored: Iterable[ScoredRecord]) -> Tuple[List[str], List[str]]:
    """(합격자 이름, 불합격자 이름) - 입력 순서 유지"""
    passed, failed = [], []
    for s in scored:
        (passed if s.passed else failed).append(s.name)
    return passed, failed


def load_subject_records(store, subject_id: int):
    """
    과목 성적 조회 → 참조 학생 조회 → 이름 결합
    반환: StoreResult(data=List[ReconciledGrade]) 또는 조회 오류 그대로
    """
    grades = store.list_grades_by_subject(subject_id)
    if not grades.ok or not grades.data:
        return grades

    student_ids = list(dict.fromkeys(g.student_id for g in grades.data))
    students = store.list_students_by_ids(student_ids)
    if not students.ok:
        return students

    grades.data = reconcile_grades(grades.data, students.data)
    return grades
