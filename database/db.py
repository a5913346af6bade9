from sqlalchemy import create_engine, event         # SQLAlchemy 엔진 생성 도구 / 연결 이벤트
from sqlalchemy.orm import declarative_base, sessionmaker  # 모델 Base 클래스 / 세션 팩토리

from config.settings import settings               # ✅ 환경변수 설정 파일 불러오기

IS_SQLITE = settings.DATABASE_URL.startswith("sqlite")

# ✅ SQLite는 스레드 검사를 꺼야 FastAPI 스레드풀에서 세션 사용 가능
connect_args = {"check_same_thread": False} if IS_SQLITE else {}

# ✅ 환경변수에서 DB 연결 URL을 불러와 엔진 생성
engine = create_engine(settings.DATABASE_URL, connect_args=connect_args)


def enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # SQLite는 연결마다 FK 검사를 켜야 ON DELETE CASCADE 동작
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


if IS_SQLITE:
    event.listen(engine, "connect", enable_sqlite_foreign_keys)

# ✅ 세션 팩토리: DB 연결에 사용할 세션 생성기 정의
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# ✅ 모델 정의 시 상속할 Base 클래스 (Declarative 방식 사용)
Base = declarative_base()


def get_db():
    """요청 단위 DB 세션 (FastAPI Depends 용)"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
