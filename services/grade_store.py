"""
services/grade_store.py

- 학생/과목/성적 테이블에 대한 CRUD 호출을 감싸는 얇은 클라이언트
- 모든 메서드는 예외를 던지지 않고 StoreResult(data, error)를 반환
  → 호출자는 error가 있으면 알림(메시지)만 띄우고 계속 진행
- 성적은 필드 단위로 독립 저장 (일괄 저장/트랜잭션 묶음 없음)
"""

import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from models.grades import Grade as GradeModel
from models.students import Student as StudentModel
from models.subjects import Subject as SubjectModel
from schemas.grades import TERM_FIELDS

logger = logging.getLogger(__name__)


@dataclass
class StoreError:
    code: int          # HTTP 스타일 코드 (400/404/500)
    message: str


@dataclass
class StoreResult:
    data: Any = None
    error: Optional[StoreError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _not_found(what: str, record_id: int) -> StoreResult:
    return StoreResult(error=StoreError(404, f"{what} {record_id} not found"))


class GradeStore:
    """요청 단위 Session을 받아 테이블별 CRUD를 제공"""

    def __init__(self, db: Session):
        self.db = db

    # ===============================================================
    # 공통 처리
    # ===============================================================
    def _run(self, action: str, fn) -> StoreResult:
        """DB 오류를 잡아 롤백 후 StoreError로 변환"""
        try:
            return fn()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"{action} failed: {e}")
            return StoreResult(error=StoreError(500, f"{action} failed"))

    def _insert(self, model, data: Dict[str, Any], action: str) -> StoreResult:
        def op():
            row = model(**data)
            self.db.add(row)
            self.db.commit()
            self.db.refresh(row)
            return StoreResult(data=row)
        return self._run(action, op)

    def _update(self, model, record_id: int, data: Dict[str, Any], what: str) -> StoreResult:
        def op():
            row = self.db.get(model, record_id)
            if row is None:
                return _not_found(what, record_id)
            for key, value in data.items():
                setattr(row, key, value)
            self.db.commit()
            self.db.refresh(row)
            return StoreResult(data=row)
        return self._run(f"update {what}", op)

    def _delete(self, model, record_id: int, what: str) -> StoreResult:
        def op():
            row = self.db.get(model, record_id)
            if row is None:
                return _not_found(what, record_id)
            self.db.delete(row)
            self.db.commit()
            return StoreResult(data=record_id)
        return self._run(f"delete {what}", op)

    def _get(self, model, record_id: int, what: str) -> StoreResult:
        def op():
            row = self.db.get(model, record_id)
            if row is None:
                return _not_found(what, record_id)
            return StoreResult(data=row)
        return self._run(f"get {what}", op)

    # ===============================================================
    # 학생
    # ===============================================================
    def list_students(self) -> StoreResult:
        """전체 학생 (최근 등록 순)"""
        return self._run("list students", lambda: StoreResult(
            data=self.db.query(StudentModel)
            .order_by(StudentModel.created_at.desc(), StudentModel.id.desc())
            .all()
        ))

    def list_students_by_ids(self, ids: Iterable[int]) -> StoreResult:
        ids = list(ids)
        if not ids:
            return StoreResult(data=[])
        return self._run("list students by id", lambda: StoreResult(
            data=self.db.query(StudentModel).filter(StudentModel.id.in_(ids)).all()
        ))

    def get_student(self, student_id: int) -> StoreResult:
        return self._get(StudentModel, student_id, "student")

    def insert_student(self, data: Dict[str, Any]) -> StoreResult:
        return self._insert(StudentModel, data, "insert student")

    def update_student(self, student_id: int, data: Dict[str, Any]) -> StoreResult:
        return self._update(StudentModel, student_id, data, "student")

    def delete_student(self, student_id: int) -> StoreResult:
        return self._delete(StudentModel, student_id, "student")

    # ===============================================================
    # 과목
    # ===============================================================
    def list_subjects(self) -> StoreResult:
        return self._run("list subjects", lambda: StoreResult(
            data=self.db.query(SubjectModel).order_by(SubjectModel.id).all()
        ))

    def get_subject(self, subject_id: int) -> StoreResult:
        return self._get(SubjectModel, subject_id, "subject")

    def insert_subject(self, data: Dict[str, Any]) -> StoreResult:
        return self._insert(SubjectModel, data, "insert subject")

    def update_subject(self, subject_id: int, data: Dict[str, Any]) -> StoreResult:
        return self._update(SubjectModel, subject_id, data, "subject")

    def delete_subject(self, subject_id: int) -> StoreResult:
        return self._delete(SubjectModel, subject_id, "subject")

    # ===============================================================
    # 성적
    # ===============================================================
    def list_grades_by_subject(self, subject_id: int) -> StoreResult:
        return self._run("list grades", lambda: StoreResult(
            data=self.db.query(GradeModel)
            .filter(GradeModel.subject_id == subject_id)
            .order_by(GradeModel.id)
            .all()
        ))

    def insert_grade(self, data: Dict[str, Any]) -> StoreResult:
        return self._insert(GradeModel, data, "insert grade")

    def update_grade_field(self, grade_id: int, field: str, value: Any) -> StoreResult:
        """
        성적 한 칸만 저장
        - "" / None → NULL
        - 그 외 값은 float로 변환 (변환 불가 시 400)
        """
        if field not in TERM_FIELDS:
            return StoreResult(error=StoreError(400, f"Unknown grade field: {field}"))

        if value is None or (isinstance(value, str) and not value.strip()):
            number = None
        else:
            try:
                number = float(value)
            except (TypeError, ValueError):
                return StoreResult(error=StoreError(400, f"Invalid value for {field}: {value!r}"))
            if not math.isfinite(number):
                return StoreResult(error=StoreError(400, f"Invalid value for {field}: {value!r}"))

        return self._update(GradeModel, grade_id, {field: number}, "grade")
