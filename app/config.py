# app/config.py


from dotenv import load_dotenv
from pathlib import Path
from pydantic_settings import BaseSettings, SettingsConfigDict

load_dotenv()  # .env 파일 먼저 읽기

BASE_DIR = Path(__file__).resolve().parent.parent

class Settings(BaseSettings):
    # 환경 구분
    app_env: str = "local"
    log_level: str = "INFO"
    cors_origins: str = "*"  # 콤마 구분

    # DB 필수 설정
    database_url: str                        # DATABASE_URL

    # OpenAI
    openai_api_key: str | None = None
    openai_transcribe_model: str = "whisper-1"
    openai_scoring_model: str = "gpt-4o-mini"

    # STT: openai | google
    stt_provider: str = "openai"
    stt_language: str = "en-US"
    google_stt_key_path: str | None = None   # GOOGLE_STT_KEY_PATH

    # 미디어 저장소: local | supabase
    media_backend: str = "local"
    media_root: str = str(BASE_DIR / "media")
    media_retention: str = "keep"            # keep | delete_on_complete | delete_on_terminal
    supabase_url: str | None = None
    supabase_service_role_key: str | None = None
    supabase_video_bucket: str = "videos"

    # ffmpeg / 외부 호출 타임아웃(초)
    ffmpeg_path: str = "ffmpeg"
    ffmpeg_timeout_sec: float = 120
    stt_timeout_sec: float = 120
    scoring_timeout_sec: float = 60

    # 작업 큐 / 락
    redis_url: str = "redis://localhost:6379/0"
    celery_broker_url: str | None = None
    celery_result_backend: str | None = None
    celery_task_time_limit: int = 900
    answer_lock_backend: str = "redis"       # redis | local (local 은 단일 프로세스 --pool=solo 전용)
    answer_lock_ttl_sec: int = 1800

    # 파이프라인 동작
    allow_reprocess: bool = False
    fail_on_missing_media: bool = False

    # 🔥 pydantic-settings v2 스타일
    model_config = SettingsConfigDict(
        env_file=str(BASE_DIR / ".env"),  # 루트 .env 절대경로
        env_file_encoding="utf-8",
        extra="ignore",                   # 필요 없는 env 무시
    )

    @property
    def broker_url(self) -> str:
        return self.celery_broker_url or self.redis_url

    @property
    def cors_origin_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

settings = Settings()

if __name__ == "__main__":
    print("BASE_DIR:", BASE_DIR)
    print("DATABASE_URL:", settings.database_url)
    print("MEDIA_BACKEND:", settings.media_backend)
    print("STT_PROVIDER:", settings.stt_provider)
