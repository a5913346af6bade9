from sqlalchemy import Column, Integer, Float, ForeignKey
from database.db import Base

class Grade(Base):
    __tablename__ = "grades"  # 학생별/과목별 성적 테이블

    id = Column(Integer, primary_key=True, index=True)     # 성적 고유 ID (Primary Key)
    # ✅ 부모(학생/과목) 삭제 시 정리는 DB가 담당 (ON DELETE CASCADE)
    student_id = Column(Integer, ForeignKey("students.id", ondelete="CASCADE"), nullable=False, index=True)
    subject_id = Column(Integer, ForeignKey("subjects.id", ondelete="CASCADE"), nullable=False, index=True)
    prelim = Column(Float, nullable=True)                  # 예비고사 (Prelim)
    midterm = Column(Float, nullable=True)                 # 중간고사 (Midterm)
    semifinal = Column(Float, nullable=True)               # 준기말 (Semi-final)
    final = Column(Float, nullable=True)                   # 기말 (Final) - 비어 있으면 평균으로 대체
