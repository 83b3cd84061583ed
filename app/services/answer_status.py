# app/services/answer_status.py
# 답변 상태 머신: queued -> processing -> completed | failed (앞으로만 이동)
from enum import Enum


class AnswerStatus(str, Enum):
    QUEUED = "queued"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (AnswerStatus.COMPLETED, AnswerStatus.FAILED)


class FailureReason(str, Enum):
    MISSING_MEDIA = "missing_media"
    EXTRACTION_FAILED = "extraction_failed"
    TRANSCRIPTION_FAILED = "transcription_failed"
    SCORING_FAILED = "scoring_failed"


class InvalidTransition(Exception):
    def __init__(self, current, target):
        self.current = current
        self.target = target
        super().__init__(f"invalid status transition: {current} -> {target}")


_FORWARD = {
    AnswerStatus.QUEUED: {AnswerStatus.PROCESSING},
    AnswerStatus.PROCESSING: {AnswerStatus.COMPLETED, AnswerStatus.FAILED},
    AnswerStatus.COMPLETED: set(),
    AnswerStatus.FAILED: set(),
}


def advance(current, target, allow_reprocess: bool = False) -> AnswerStatus:
    """
    상태 전이 검증 후 target 반환.
    - 기본: queued→processing, processing→completed|failed 만 허용
    - allow_reprocess=True: processing|completed|failed → processing 재진입 추가 허용
    """
    current = AnswerStatus(current)
    target = AnswerStatus(target)

    if target in _FORWARD[current]:
        return target
    if allow_reprocess and target == AnswerStatus.PROCESSING and current != AnswerStatus.QUEUED:
        return target
    raise InvalidTransition(current.value, target.value)
