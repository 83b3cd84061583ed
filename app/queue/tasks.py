# app/queue/tasks.py
import logging

from celery.signals import worker_process_init

from app.config import settings
from app.logging_config import setup_logging
from app.queue.celery_app import celery_app
from app.services.answer_pipeline import build_pipeline

logger = logging.getLogger(__name__)

_pipeline = None


def get_pipeline():
    # 워커 프로세스당 1개 (OpenAI/Supabase/Redis 클라이언트 재사용)
    global _pipeline
    if _pipeline is None:
        _pipeline = build_pipeline(settings)
    return _pipeline


@worker_process_init.connect
def _init_worker_logging(**kwargs):
    setup_logging(settings.log_level)


@celery_app.task(name="answers.process_answer")
def process_answer(answer_id: int):
    status = get_pipeline().process(answer_id)
    logger.info("[TASK] process_answer answer_id=%s result=%s", answer_id, status.value if status else "skipped")
    return status.value if status else None


def enqueue_answer(answer_id: int) -> None:
    """제출 엔드포인트에서 호출: 답변 1건당 작업 1개"""
    process_answer.delay(answer_id)
