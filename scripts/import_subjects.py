import csv
from sqlalchemy.orm import Session
from database.db import Base, SessionLocal, engine
from models.subjects import Subject as SubjectModel  # ✅ 모델 import

CSV_PATH = "data/subjects.csv"  # ✅ 파일 경로

def migrate_subjects(csv_path: str = CSV_PATH, db: Session | None = None) -> int:
    own_session = db is None
    if own_session:
        Base.metadata.create_all(bind=engine)
        db = SessionLocal()

    count = 0
    try:
        with open(csv_path, newline="", encoding="utf-8-sig") as csvfile:
            reader = csv.DictReader(csvfile)
            for row in reader:
                subject = SubjectModel(
                    id=int(row["id"]),                      # 과목 고유 ID
                    subject_code=row["subject_code"],       # 과목 코드 (예: IT301)
                    subject_name=row["subject_name"],       # 과목 이름
                    instructor=row["instructor"]            # 담당 교수
                )
                db.add(subject)
                count += 1
        db.commit()
    finally:
        if own_session:
            db.close()

    print(f"✅ 과목 CSV → DB 마이그레이션 완료 ({count}건)")
    return count

if __name__ == "__main__":
    migrate_subjects()
