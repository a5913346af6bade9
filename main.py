from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging

from config.settings import settings

# ✅ 로깅 설정 (레벨은 .env의 LOG_LEVEL)
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
# HTTP 라이브러리 디버그 로그 비활성화
logging.getLogger("httpcore").setLevel(logging.WARNING)
logging.getLogger("httpx").setLevel(logging.WARNING)

logger = logging.getLogger(__name__)

# ✅ DB / 모델 (create_all 대상 테이블 등록)
from database.db import Base, engine
from models import grades as _grades, students as _students, subjects as _subjects  # noqa: F401

# ✅ 미들웨어 임포트
from middlewares.timing import TimingMiddleware
from middlewares.error_handler import add_error_handlers

# ✅ 라우터 임포트
from routers import students, subjects, grades, reports


# ✅ 앱 수명주기: 시작 시 테이블 준비
@asynccontextmanager
async def lifespan(app: FastAPI):
    # 테이블이 없으면 생성 (기존 테이블은 건드리지 않음)
    Base.metadata.create_all(bind=engine)
    logger.info(f"Database ready ({engine.url.get_backend_name()})")
    yield


app = FastAPI(
    title=settings.APP_TITLE,
    description=settings.APP_DESCRIPTION,
    version=settings.APP_VERSION,
    lifespan=lifespan,
)

# ✅ CORS 설정 (프론트엔드 연동)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ✅ 요청 지연 측정 미들웨어 (응답 헤더 X-Latency-Ms 추가)
app.add_middleware(TimingMiddleware)

# ✅ 전역 에러 핸들러 등록 (일관된 JSON 에러 포맷)
add_error_handlers(app)

# ✅ /v1 프리픽스 라우터 등록
app.include_router(students.router, prefix="/v1")
app.include_router(subjects.router, prefix="/v1")
app.include_router(grades.router,   prefix="/v1")
app.include_router(reports.router,  prefix="/v1")   # ✅ AI 리포트 / PDF


# ✅ 헬스체크 엔드포인트
@app.get("/health")
def health_check():
    return {"status": "ok", "message": "API is running"}


# ✅ 루트 엔드포인트 (소개)
@app.get("/")
def root():
    return {
        "message": "Student Grade Management System",
        "features": [
            "Full CRUD for Students, Subjects, and Grades",
            "AI-powered performance insights using Google Gemini",
            "PDF report generation for easy sharing",
        ],
        "routes": ["/v1/students", "/v1/subjects", "/v1/grades", "/v1/reports"],
    }
