# app/services/errors.py
# 답변 처리 파이프라인 예외 정의


class PipelineError(Exception):
    """파이프라인 단계 실패 공통 부모"""


class MissingMediaError(PipelineError):
    """답변에 영상이 첨부되어 있지 않음 (데이터 오류)"""


class MediaStoreError(PipelineError):
    """스토리지 업로드/다운로드 실패"""


class AudioExtractionError(PipelineError):
    """ffmpeg 오디오 추출 실패 (도구 없음, 비정상 종료, 타임아웃, 빈 출력)"""


class TranscriptionError(PipelineError):
    """STT 호출 실패 또는 응답 형식 오류"""


class ScoringError(PipelineError):
    """LLM 채점 호출 실패 또는 응답 형식 오류"""
