import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from database.db import Base, enable_sqlite_foreign_keys, get_db
from models.grades import Grade as GradeModel
from models.students import Student as StudentModel
from models.subjects import Subject as SubjectModel
from services.llm.base import LLMClient, LLMError


@pytest.fixture
def db_session():
    # 테스트마다 새 인메모리 SQLite
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    event.listen(engine, "connect", enable_sqlite_foreign_keys)
    Base.metadata.create_all(bind=engine)
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    db = TestingSession()
    try:
        yield db
    finally:
        db.close()
        engine.dispose()


@pytest.fixture
def client(db_session):
    from main import app

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def seeded(db_session):
    """과목 1개 + 학생 3명 + 성적 3행 (80, 90 / 50·60·70 평균 60)"""
    subject = SubjectModel(id=1, subject_code="IT301", subject_name="Web Development", instructor="J. Reyes")
    db_session.add(subject)
    db_session.add_all([
        StudentModel(id=1, student_number="2021-0001", first_name="Ana", last_name="Cruz", course="BSIT", year_level=3),
        StudentModel(id=2, student_number="2021-0002", first_name="Ben", last_name="Diaz", course="BSIT", year_level=3),
        StudentModel(id=3, student_number="2021-0003", first_name="Cara", last_name="Lim", course="BSIT", year_level=3),
    ])
    db_session.flush()  # 관계(relationship) 없는 모델은 FK 순서를 모르므로 부모 행을 먼저 INSERT
    db_session.add_all([
        GradeModel(id=10, student_id=1, subject_id=1, prelim=78, midterm=82, semifinal=80, final=80),
        GradeModel(id=11, student_id=2, subject_id=1, prelim=88, midterm=91, semifinal=90, final=90),
        GradeModel(id=12, student_id=3, subject_id=1, prelim=50, midterm=60, semifinal=70, final=None),
    ])
    db_session.commit()
    return db_session


class FakeLLM(LLMClient):
    """고정 응답 또는 예외를 돌려주는 테스트용 LLM"""

    def __init__(self, text=None, error=None):
        self.text = text
        self.error = error
        self.prompts = []

    async def generate(self, prompt: str, **kwargs) -> str:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.text


@pytest.fixture
def failing_llm():
    return FakeLLM(error=LLMError("connection refused"))
