# app/logging_config.py
import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s:%(name)s:%(message)s"


def setup_logging(level: str = "INFO") -> None:
    """API 서버와 워커 공통: stdout 핸들러 1개"""
    root = logging.getLogger()
    if any(getattr(h, "_answer_scoring", False) for h in root.handlers):
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler._answer_scoring = True
    root.addHandler(handler)
    root.setLevel(level.upper())
