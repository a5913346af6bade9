from sqlalchemy import Column, Integer, String, DateTime, func
from database.db import Base

class Student(Base):
    __tablename__ = "students"  # 학생 기본 정보 테이블

    id = Column(Integer, primary_key=True, index=True)                  # 고유 학생 ID (Primary Key)
    student_number = Column(String(30), nullable=False, unique=True)   # 학번
    first_name = Column(String(100), nullable=False)                   # 이름
    last_name = Column(String(100), nullable=False)                    # 성
    course = Column(String(100), nullable=False)                       # 학과/과정 (예: BSIT)
    year_level = Column(Integer, nullable=False, default=1)            # 학년 (1~4)
    created_at = Column(DateTime, nullable=False, server_default=func.now())  # 등록 시각
