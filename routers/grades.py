import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from database.db import get_db
from schemas.grades import Grade as GradeSchema, GradeCreate, GradeFieldUpdate
from services.grade_reconciler import load_subject_records
from services.grade_sheet import store_saver
from services.grade_store import GradeStore
from utils.responses import failure, success

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/grades", tags=["grades"])


# ==========================================================
# [1단계] 과목별 성적표 (학생 이름 결합)
# ==========================================================

# ✅ [READ] 선택한 과목의 성적 목록
@router.get("/subject/{subject_id}")
def read_subject_grades(subject_id: int, db: Session = Depends(get_db)):
    result = load_subject_records(GradeStore(db), subject_id)
    if not result.ok:
        logger.error(f"Load grades error: {result.error.message}")
        return failure(result.error.code, "Failed to load grades")
    return success([r.model_dump() for r in result.data], f"{len(result.data)} grade rows loaded")


# ==========================================================
# [2단계] 성적 추가 / 필드 단위 저장
# ==========================================================

# ✅ [CREATE] 성적 행 추가
@router.post("/")
def create_grade(grade: GradeCreate, db: Session = Depends(get_db)):
    result = GradeStore(db).insert_grade(grade.model_dump())
    if not result.ok:
        return failure(result.error.code, "Failed to add grade")
    return success(GradeSchema.model_validate(result.data).model_dump(), "Grade added!")


# ✅ [UPDATE] 성적 한 칸 저장 (입력칸 포커스 해제 시)
@router.patch("/{grade_id}")
async def save_grade_field(grade_id: int, update: GradeFieldUpdate, db: Session = Depends(get_db)):
    save = store_saver(GradeStore(db))
    result = await save(grade_id, update.field, update.value)
    if not result.ok:
        logger.error(f"Save error: {result.error.message}")
        if result.error.code == 404:
            return failure(404, "Grade not found")
        return failure(result.error.code, "Failed to save grade")
    return success(GradeSchema.model_validate(result.data).model_dump(), "Grade saved!")
