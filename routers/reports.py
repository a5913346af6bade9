import logging
from urllib.parse import quote

from fastapi import APIRouter, Depends
from fastapi.responses import Response
from sqlalchemy.orm import Session

from database.db import get_db
from services.ai_report import generate_report
from services.grade_reconciler import load_subject_records
from services.grade_store import GradeStore
from services.pdf_service import PDFService
from utils.responses import failure, success

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/reports", tags=["AI reports"])

pdf_service = PDFService()


def _load(subject_id: int, db: Session):
    """(과목명, 성적 레코드) 또는 실패 응답"""
    store = GradeStore(db)
    subject = store.get_subject(subject_id)
    if not subject.ok:
        if subject.error.code == 404:
            return None, failure(404, "Please select a subject")
        return None, failure(subject.error.code, "Failed to load subjects")

    records = load_subject_records(store, subject_id)
    if not records.ok:
        return None, failure(records.error.code, "Failed to load grades")
    if not records.data:
        return None, failure(400, "No grades to analyze")

    return (subject.data.subject_name, records.data), None


# ✅ [AI] 과목 성적 분석 리포트 (JSON)
@router.post("/subject/{subject_id}")
async def create_subject_report(subject_id: int, db: Session = Depends(get_db)):
    loaded, error = _load(subject_id, db)
    if error is not None:
        return error
    subject_name, records = loaded

    report = await generate_report(subject_name, records)
    return success(
        {
            "subject": subject_name,
            "report": report.model_dump(by_alias=True),
            "records": [r.model_dump() for r in records],
        },
        "AI report generated",
    )


# ✅ [PDF] 과목 성적 분석 리포트 (PDF 다운로드)
@router.post("/subject/{subject_id}/pdf")
async def create_subject_report_pdf(subject_id: int, db: Session = Depends(get_db)):
    loaded, error = _load(subject_id, db)
    if error is not None:
        return error
    subject_name, records = loaded

    report = await generate_report(subject_name, records)
    try:
        pdf_content = pdf_service.generate_grade_report_pdf(subject_name, report, records)
    except Exception as e:
        logger.exception("PDF rendering failed")
        return failure(500, f"PDF generation failed: {e}")

    filename = quote(f"AI_Report_{subject_name}.pdf")
    return Response(
        content=pdf_content,
        media_type="application/pdf",
        headers={"Content-Disposition": f"attachment; filename*=UTF-8''{filename}"},
    )
