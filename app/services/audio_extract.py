# app/services/audio_extract.py
import os
import shutil
import subprocess
import logging

from app.services.errors import AudioExtractionError

logger = logging.getLogger(__name__)

SAMPLE_RATE = 16000
CHANNELS = 1


def extract_audio(
    video_path: str,
    output_path: str,
    ffmpeg_path: str = "ffmpeg",
    sample_rate: int = SAMPLE_RATE,
    channels: int = CHANNELS,
    timeout: float | None = None,
) -> str:
    """
    영상 컨테이너에서 오디오만 WAV로 추출 (기본 mono, 16kHz).
    도구 없음 / 비정상 종료 / 타임아웃 / 빈 출력은 모두 AudioExtractionError.
    """
    ffmpeg_cmd = shutil.which(ffmpeg_path)
    if not ffmpeg_cmd:
        raise AudioExtractionError(f"ffmpeg not found: {ffmpeg_path}")

    cmd = [
        ffmpeg_cmd,
        "-y",                      # overwrite
        "-i", video_path,
        "-vn",                     # 영상 트랙 제거
        "-ac", str(channels),      # mono
        "-ar", str(sample_rate),   # 16kHz sample rate
        "-f", "wav",
        output_path,
    ]
    logger.debug("[FFMPEG] run %s", " ".join(cmd))

    try:
        subprocess.run(cmd, check=True, capture_output=True, timeout=timeout)
    except subprocess.TimeoutExpired as e:
        raise AudioExtractionError(f"ffmpeg timed out after {e.timeout}s") from e
    except subprocess.CalledProcessError as e:
        stderr = (e.stderr or b"").decode("utf-8", errors="replace").strip()
        raise AudioExtractionError(
            f"ffmpeg exited with {e.returncode}: {stderr[-500:]}"
        ) from e
    except OSError as e:
        raise AudioExtractionError(f"ffmpeg could not be started: {e}") from e

    # 빈 출력 체크
    if not os.path.exists(output_path) or os.path.getsize(output_path) == 0:
        raise AudioExtractionError("ffmpeg produced no audio output")

    return output_path
