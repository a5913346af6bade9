import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from database.db import get_db
from schemas.subjects import Subject as SubjectSchema, SubjectCreate
from services.grade_store import GradeStore
from utils.responses import failure, success

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/subjects", tags=["subjects"])


def _out(row) -> dict:
    return SubjectSchema.model_validate(row).model_dump()


def _fail(result, message: str):
    logger.warning(f"{message}: {result.error.message}")
    if result.error.code == 404:
        return failure(404, "Subject not found")
    return failure(result.error.code, message)


# ✅ [CREATE] 과목 추가
@router.post("/")
def create_subject(subject: SubjectCreate, db: Session = Depends(get_db)):
    result = GradeStore(db).insert_subject(subject.model_dump())
    if not result.ok:
        return _fail(result, "Add failed")
    return success(_out(result.data), "Added!")


# ✅ [READ] 전체 과목 조회
@router.get("/")
def read_subjects(db: Session = Depends(get_db)):
    result = GradeStore(db).list_subjects()
    if not result.ok:
        return _fail(result, "Failed to load subjects")
    return success([_out(r) for r in result.data], "Subjects loaded")


# ✅ [READ] 특정 과목 조회
@router.get("/{subject_id}")
def read_subject(subject_id: int, db: Session = Depends(get_db)):
    result = GradeStore(db).get_subject(subject_id)
    if not result.ok:
        return _fail(result, "Failed to load subjects")
    return success(_out(result.data), "Subject loaded")


# ✅ [UPDATE] 과목 정보 수정
@router.put("/{subject_id}")
def update_subject(subject_id: int, updated: SubjectCreate, db: Session = Depends(get_db)):
    result = GradeStore(db).update_subject(subject_id, updated.model_dump())
    if not result.ok:
        return _fail(result, "Update failed")
    return success(_out(result.data), "Updated!")


# ✅ [DELETE] 과목 삭제
@router.delete("/{subject_id}")
def delete_subject(subject_id: int, db: Session = Depends(get_db)):
    result = GradeStore(db).delete_subject(subject_id)
    if not result.ok:
        return _fail(result, "Delete failed")
    return success({"subject_id": subject_id}, "Deleted!")
