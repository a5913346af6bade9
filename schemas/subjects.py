from pydantic import BaseModel, ConfigDict, Field

# ✅ 입력용: POST/PUT 요청에서 사용할 스키마
class SubjectCreate(BaseModel):
    subject_code: str = Field(..., min_length=1)        # 과목 코드
    subject_name: str = Field(..., min_length=1)        # 과목 이름
    instructor: str = Field(..., min_length=1)          # 담당 교수

# ✅ 출력용: GET, POST 응답 등에서 사용할 스키마
class Subject(SubjectCreate):
    id: int                                             # 고유 과목 ID

    model_config = ConfigDict(from_attributes=True)
