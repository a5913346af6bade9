from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional

# ✅ 입력용 (POST/PUT 등)
class StudentCreate(BaseModel):
    student_number: str = Field(..., min_length=1)      # 학번
    first_name: str = Field(..., min_length=1)          # 이름
    last_name: str = Field(..., min_length=1)           # 성
    course: str = Field(..., min_length=1)              # 학과/과정
    year_level: int = Field(1, ge=1, le=4)              # 학년 (1~4)

# ✅ 전체 출력용 (GET, 상세조회 등)
class Student(StudentCreate):
    id: int
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
