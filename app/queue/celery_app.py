"""
Celery 애플리케이션 - Redis 브로커 기반 작업 큐.
at-least-once 전달: 작업 완료 후 ack (acks_late), 워커 유실 시 재전달.
같은 answer_id 중복 실행은 AnswerLock 으로 막는다.
"""

from celery import Celery

from app.config import settings

celery_app = Celery(
    "answer_scoring",
    broker=settings.broker_url,
    backend=settings.celery_result_backend,
    include=["app.queue.tasks"],
)

celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    task_ignore_result=True,
    task_acks_late=True,
    task_reject_on_worker_lost=True,
    task_time_limit=settings.celery_task_time_limit,  # 외부 호출 타임아웃의 최후 방어선
    worker_prefetch_multiplier=1,
    worker_hijack_root_logger=False,
)
