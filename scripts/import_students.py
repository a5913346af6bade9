import csv
from sqlalchemy.orm import Session
from database.db import Base, SessionLocal, engine
from models.students import Student as StudentModel  # ✅ 모델 import

CSV_PATH = "data/students.csv"  # ✅ 파일 경로

def migrate_students(csv_path: str = CSV_PATH, db: Session | None = None) -> int:
    own_session = db is None
    if own_session:
        Base.metadata.create_all(bind=engine)
        db = SessionLocal()

    count = 0
    try:
        with open(csv_path, newline="", encoding="utf-8-sig") as csvfile:
            reader = csv.DictReader(csvfile)
            for row in reader:
                student = StudentModel(
                    id=int(row["id"]),                          # 고유 학생 ID
                    student_number=row["student_number"],       # 학번
                    first_name=row["first_name"],               # 이름
                    last_name=row["last_name"],                 # 성
                    course=row["course"],                       # 학과/과정
                    year_level=int(row.get("year_level") or 1)  # 학년 (1~4)
                )
                db.add(student)
                count += 1
        db.commit()
    finally:
        if own_session:
            db.close()

    print(f"✅ 학생 정보 CSV → DB 마이그레이션 완료 ({count}건)")
    return count

if __name__ == "__main__":
    migrate_students()
