from __future__ import annotations
import logging
import re
from logging.handlers import RotatingFileHandler
from pathlib import Path

from tdaoptions.settings import LoggingCfg


DEFAULT_FMT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
CONSOLE_FMT = "%(asctime)s | %(levelname)s | %(message)s"

_BEARER = re.compile(r"(Bearer\s+)[^\s'\"]+")

_installed: list[logging.Handler] = []


class RedactBearerFilter(logging.Filter):
    """메시지에 섞인 액세스 토큰(Bearer ...)을 가린다"""

    def filter(self, record: logging.LogRecord) -> bool:
        msg = record.getMessage()
        if "Bearer" in msg:
            record.msg = _BEARER.sub(r"\1***", msg)
            record.args = None
        return True


def setup(cfg: LoggingCfg | None = None) -> Path:
    """
    콘솔 + 회전 파일 로깅. 설정의 `logging:` 블록을 그대로 받는다.
    두 번째 호출부터는 아무 것도 하지 않는다. 로그 파일 경로를 돌려준다.
    """
    cfg = cfg or LoggingCfg()
    path = Path(cfg.log_dir) / cfg.filename
    if _installed:
        return path

    path.parent.mkdir(parents=True, exist_ok=True)
    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    redact = RedactBearerFilter()

    ch = logging.StreamHandler()
    ch.setLevel(cfg.console_level.upper())
    ch.setFormatter(logging.Formatter(CONSOLE_FMT))

    # 주문 로그 파일(회전)
    fh = RotatingFileHandler(
        path,
        maxBytes=cfg.max_bytes,
        backupCount=cfg.backup_count,
        encoding="utf-8",
    )
    fh.setLevel(cfg.file_level.upper())
    fh.setFormatter(logging.Formatter(DEFAULT_FMT))

    for h in (ch, fh):
        h.addFilter(redact)
        root.addHandler(h)
        _installed.append(h)

    logging.getLogger("urllib3").setLevel(logging.WARNING)
    for name, level in cfg.levels.items():
        logging.getLogger(name).setLevel(level.upper())
    return path


def teardown() -> None:
    root = logging.getLogger()
    while _installed:
        h = _installed.pop()
        root.removeHandler(h)
        h.close()
