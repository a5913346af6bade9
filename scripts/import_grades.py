import csv
from sqlalchemy.orm import Session
from database.db import Base, SessionLocal, engine
from models.grades import Grade as GradeModel  # ✅ 모델 import
from schemas.grades import TERM_FIELDS

CSV_PATH = "data/grades.csv"  # ✅ 파일 경로

def _score(raw):
    # 빈 칸은 NULL (0점과 구분)
    raw = (raw or "").strip()
    return float(raw) if raw else None

def migrate_grades(csv_path: str = CSV_PATH, db: Session | None = None) -> int:
    own_session = db is None
    if own_session:
        Base.metadata.create_all(bind=engine)
        db = SessionLocal()

    count = 0
    try:
        with open(csv_path, newline="", encoding="utf-8-sig") as csvfile:
            reader = csv.DictReader(csvfile)
            for row in reader:
                grade = GradeModel(
                    id=int(row["id"]),                      # 성적 고유 ID
                    student_id=int(row["student_id"]),      # 학생 ID
                    subject_id=int(row["subject_id"]),      # 과목 ID
                    **{f: _score(row.get(f)) for f in TERM_FIELDS}  # prelim/midterm/semifinal/final
                )
                db.add(grade)
                count += 1
        db.commit()
    finally:
        if own_session:
            db.close()

    print(f"✅ 성적 CSV → DB 마이그레이션 완료 ({count}건)")
    return count

if __name__ == "__main__":
    migrate_grades()
