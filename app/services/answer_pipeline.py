# app/services/answer_pipeline.py
# 답변 처리 파이프라인: processing → 영상 다운로드 → 오디오 추출 → STT → 채점 → completed | failed
import os
import logging
from tempfile import NamedTemporaryFile

from app.models.answer import Answer
from app.services.answer_lock import AnswerLock
from app.services.answer_status import AnswerStatus, FailureReason, InvalidTransition, advance
from app.services.audio_extract import extract_audio
from app.services.errors import AudioExtractionError, MediaStoreError, MissingMediaError

logger = logging.getLogger(__name__)

RETENTION_KEEP = "keep"
RETENTION_DELETE_ON_COMPLETE = "delete_on_complete"
RETENTION_DELETE_ON_TERMINAL = "delete_on_terminal"
RETENTION_POLICIES = (RETENTION_KEEP, RETENTION_DELETE_ON_COMPLETE, RETENTION_DELETE_ON_TERMINAL)


def _remove_quietly(*paths):
    for path in paths:
        if not path:
            continue
        try:
            os.remove(path)
            logger.debug("[PIPELINE] temp_file_removed path=%s", path)
        except FileNotFoundError:
            pass
        except OSError:
            logger.warning("[PIPELINE] temp_file_remove_failed path=%s", path)


class AnswerPipeline:
    """
    answer_id 하나를 받아 completed 또는 failed 로 만든다.

    - 레코드가 없으면 아무것도 하지 않는다 (no-op, 에러 아님)
    - 같은 answer_id 작업은 AnswerLock 으로 직렬화, 락을 못 잡으면 건너뜀
    - 상태 변경과 transcript 저장은 각각 별도 commit (폴링 클라이언트가 중간 상태를 볼 수 있음)
    - 재시도 없음: 외부 호출 실패 한 번이면 failed
    """

    def __init__(
        self,
        session_factory,
        media_store,
        stt_service,
        scoring_service,
        lock: AnswerLock,
        ffmpeg_path: str = "ffmpeg",
        ffmpeg_timeout: float | None = None,
        allow_reprocess: bool = False,
        fail_on_missing_media: bool = False,
        media_retention: str = RETENTION_KEEP,
    ):
        if media_retention not in RETENTION_POLICIES:
            raise ValueError(f"unknown media retention policy: {media_retention}")
        self.session_factory = session_factory
        self.media_store = media_store
        self.stt_service = stt_service
        self.scoring_service = scoring_service
        self.lock = lock
        self.ffmpeg_path = ffmpeg_path
        self.ffmpeg_timeout = ffmpeg_timeout
        self.allow_reprocess = allow_reprocess
        self.fail_on_missing_media = fail_on_missing_media
        self.media_retention = media_retention

    def process(self, answer_id: int) -> AnswerStatus | None:
        """최종 상태를 반환. 건너뛴 경우(레코드 없음, 락 점유, 재처리 불가) None."""
        with self.lock.hold(answer_id) as acquired:
            if not acquired:
                return None
            return self._run(answer_id)

    # --- 단계별 처리 ---

    def _run(self, answer_id: int) -> AnswerStatus | None:
        # 1) processing 표시
        media_path = self._start(answer_id)
        if media_path is False:
            return None

        video_path = None
        audio_path = None
        try:
            # 2) 영상 다운로드 → 임시 파일
            try:
                if not media_path:
                    raise MissingMediaError(f"No video attached to answer {answer_id}")
                video_bytes = self.media_store.download(media_path)
            except MissingMediaError:
                if self.fail_on_missing_media:
                    logger.error("[PIPELINE] missing_media answer_id=%s", answer_id)
                    return self._finish(answer_id, AnswerStatus.FAILED, media_path,
                                        failure_reason=FailureReason.MISSING_MEDIA.value)
                raise

            suffix = os.path.splitext(media_path)[1] or ".webm"
            with NamedTemporaryFile(delete=False, suffix=suffix) as tmp:
                video_path = tmp.name
                tmp.write(video_bytes)
            with NamedTemporaryFile(delete=False, suffix=".wav") as tmp:
                audio_path = tmp.name
            logger.info("[PIPELINE] 20%% media_downloaded answer_id=%s bytes=%d", answer_id, len(video_bytes))

            # 3) 오디오 추출 (mono, 16kHz)
            try:
                extract_audio(
                    video_path,
                    audio_path,
                    ffmpeg_path=self.ffmpeg_path,
                    timeout=self.ffmpeg_timeout,
                )
                with open(audio_path, "rb") as f:
                    wav_bytes = f.read()
            except (AudioExtractionError, OSError) as e:
                logger.error("[PIPELINE] extraction_failed answer_id=%s error=%s", answer_id, e)
                return self._finish(answer_id, AnswerStatus.FAILED, media_path,
                                    failure_reason=FailureReason.EXTRACTION_FAILED.value)
            logger.info("[PIPELINE] 40%% audio_extracted answer_id=%s bytes=%d", answer_id, len(wav_bytes))

            # 4) STT → transcript 즉시 저장
            try:
                transcript = self.stt_service.transcribe(wav_bytes)
            except Exception as e:
                logger.error("[PIPELINE] transcription_failed answer_id=%s error=%s", answer_id, e)
                return self._finish(answer_id, AnswerStatus.FAILED, media_path,
                                    failure_reason=FailureReason.TRANSCRIPTION_FAILED.value)
            self._save(answer_id, transcript=transcript)
            logger.info("[PIPELINE] 70%% transcript_saved answer_id=%s text=%s...", answer_id, transcript[:50])

            # 5) 채점 (실패해도 transcript 는 유지)
            try:
                score = self.scoring_service.score(transcript)
            except Exception as e:
                logger.error("[PIPELINE] scoring_failed answer_id=%s error=%s", answer_id, e)
                return self._finish(answer_id, AnswerStatus.FAILED, media_path,
                                    failure_reason=FailureReason.SCORING_FAILED.value)

            logger.info("[PIPELINE] 100%% scored answer_id=%s score=%s", answer_id, score)
            return self._finish(answer_id, AnswerStatus.COMPLETED, media_path, score=score)
        finally:
            _remove_quietly(video_path, audio_path)

    def _start(self, answer_id: int):
        """processing 으로 전이 후 media_path 반환. 진행하지 않을 때는 False."""
        with self.session_factory() as db:
            answer = db.get(Answer, answer_id)
            if answer is None:
                logger.info("[PIPELINE] answer_not_found answer_id=%s → no-op", answer_id)
                return False

            try:
                status = advance(answer.status, AnswerStatus.PROCESSING, self.allow_reprocess)
            except InvalidTransition as e:
                logger.warning("[PIPELINE] skip answer_id=%s reason=%s", answer_id, e)
                return False

            if answer.status != AnswerStatus.QUEUED.value:
                # 재처리: 이전 결과를 비워 score/status 불변식 유지
                logger.info("[PIPELINE] reprocess answer_id=%s previous_status=%s", answer_id, answer.status)
                answer.transcript = None
                answer.score = None
                answer.failure_reason = None

            answer.status = status.value
            db.commit()
            logger.info("[PIPELINE] START answer_id=%s question_id=%s", answer_id, answer.question_id)
            return answer.media_path

    def _save(self, answer_id: int, **fields):
        with self.session_factory() as db:
            answer = db.get(Answer, answer_id)
            if answer is None:
                logger.warning("[PIPELINE] answer_vanished answer_id=%s", answer_id)
                return
            for name, value in fields.items():
                setattr(answer, name, value)
            db.commit()

    def _finish(self, answer_id: int, target: AnswerStatus, media_path, **fields) -> AnswerStatus | None:
        """종료 상태 기록. 그 사이 다른 작업이 이미 종료 상태로 만들었으면 덮어쓰지 않고 None."""
        with self.session_factory() as db:
            answer = db.get(Answer, answer_id)
            if answer is None:
                logger.warning("[PIPELINE] answer_vanished answer_id=%s", answer_id)
                return target
            try:
                answer.status = advance(answer.status, target).value
            except InvalidTransition as e:
                logger.warning("[PIPELINE] skip_finish answer_id=%s target=%s reason=%s", answer_id, target.value, e)
                return None
            for name, value in fields.items():
                setattr(answer, name, value)
            db.commit()

        self._apply_retention(answer_id, target, media_path)
        return target

    def _apply_retention(self, answer_id: int, status: AnswerStatus, media_path):
        if not media_path or self.media_retention == RETENTION_KEEP:
            return
        if self.media_retention == RETENTION_DELETE_ON_COMPLETE and status != AnswerStatus.COMPLETED:
            return
        try:
            self.media_store.delete(media_path)
        except (MediaStoreError, OSError) as e:
            logger.warning("[PIPELINE] media_delete_failed answer_id=%s key=%s error=%s", answer_id, media_path, e)
            return
        # 삭제된 키를 가리키지 않도록 비움
        self._save(answer_id, media_path=None)
        logger.info("[PIPELINE] media_deleted answer_id=%s key=%s", answer_id, media_path)


def build_pipeline(settings, session_factory=None) -> AnswerPipeline:
    from app.db.session import SessionLocal
    from app.services.answer_eval import build_scoring_service
    from app.services.answer_lock import build_answer_lock
    from app.services.storage_service import build_media_store
    from app.services.stt_service import build_stt_service

    return AnswerPipeline(
        session_factory=session_factory or SessionLocal,
        media_store=build_media_store(settings),
        stt_service=build_stt_service(settings),
        scoring_service=build_scoring_service(settings),
        lock=build_answer_lock(settings),
        ffmpeg_path=settings.ffmpeg_path,
        ffmpeg_timeout=settings.ffmpeg_timeout_sec,
        allow_reprocess=settings.allow_reprocess,
        fail_on_missing_media=settings.fail_on_missing_media,
        media_retention=settings.media_retention,
    )
