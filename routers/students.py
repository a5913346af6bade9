import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from database.db import get_db
from schemas.students import Student as StudentSchema, StudentCreate
from services.grade_store import GradeStore
from utils.responses import failure, success

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/students", tags=["students"])


def _out(row) -> dict:
    return StudentSchema.model_validate(row).model_dump(mode="json")


def _fail(result, message: str):
    # 404는 원인 그대로, 그 외는 화면 알림 문구로
    logger.warning(f"{message}: {result.error.message}")
    if result.error.code == 404:
        return failure(404, "Student not found")
    return failure(result.error.code, message)


# ✅ [CREATE] 학생 추가
@router.post("/")
def create_student(student: StudentCreate, db: Session = Depends(get_db)):
    result = GradeStore(db).insert_student(student.model_dump())
    if not result.ok:
        return _fail(result, "Failed to add student")
    return success(_out(result.data), "Student added!")


# ✅ [READ] 전체 학생 조회 (최근 등록 순)
@router.get("/")
def read_students(db: Session = Depends(get_db)):
    result = GradeStore(db).list_students()
    if not result.ok:
        return _fail(result, "Failed to load students")
    return success([_out(r) for r in result.data], "Students loaded")


# ✅ [READ] 특정 학생 상세 조회
@router.get("/{student_id}")
def read_student(student_id: int, db: Session = Depends(get_db)):
    result = GradeStore(db).get_student(student_id)
    if not result.ok:
        return _fail(result, "Failed to load students")
    return success(_out(result.data), "Student loaded")


# ✅ [UPDATE] 학생 정보 수정
@router.put("/{student_id}")
def update_student(student_id: int, updated: StudentCreate, db: Session = Depends(get_db)):
    result = GradeStore(db).update_student(student_id, updated.model_dump())
    if not result.ok:
        return _fail(result, "Failed to update")
    return success(_out(result.data), "Student updated!")


# ✅ [DELETE] 학생 삭제 (성적은 DB에서 CASCADE)
@router.delete("/{student_id}")
def delete_student(student_id: int, db: Session = Depends(get_db)):
    result = GradeStore(db).delete_student(student_id)
    if not result.ok:
        return _fail(result, "Failed to delete")
    return success({"student_id": student_id}, "Deleted!")
