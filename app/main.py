# app/main.py

# ------------------------
# 환경 변수 로드
# ------------------------
from dotenv import load_dotenv
load_dotenv()

from contextlib import asynccontextmanager

# ------------------------
# FastAPI, CORS 미들웨어 import
# ------------------------
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import settings
from app.db.init_db import init_db
from app.logging_config import setup_logging

# ------------------------
# 라우터 import
# ------------------------
from app.routers import answers as answers_router
from app.routers import questions as questions_router
from app.routers import job_descriptions as job_descriptions_router

setup_logging(settings.log_level)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()  # 테이블 없으면 생성
    yield

# ------------------------
# 1) FastAPI 앱 생성
# ------------------------
app = FastAPI(title="Interview Answer Scoring API", lifespan=lifespan)

# ------------------------
# 2) CORS 미들웨어 추가
#    - CORS_ORIGINS 기본값은 전체 허용 (개발용)
# ------------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=False,  # 쿠키 안 씀
    allow_methods=["*"],
    allow_headers=["*"],
)

# ------------------------
# 3) 라우터 등록
# ------------------------
app.include_router(questions_router.router)
app.include_router(answers_router.router)
app.include_router(job_descriptions_router.router)

# ------------------------
# 4) Health check
# ------------------------
@app.get("/")
def root():
    return {"ok": True}


@app.get("/up")
def up():
    return {"status": "up"}
