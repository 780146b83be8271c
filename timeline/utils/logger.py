"""
Python 로깅 설정.

원칙:
- INFO: 중요 비즈니스 이벤트 (가입, 로그인, 사진 업로드/삭제)
- WARNING: 클라이언트 오류 (잘못된 인증, 검증 실패)
- ERROR: 시스템 오류, 저장소 실패
- 개인정보 제외 (username, password, token 등은 파일 로그에 남기지 않음)

로그 출력:
- stdout: 사람이 읽기 쉬운 텍스트
- LOG_DIR 설정 시 {LOG_DIR}/app.log, error.log: NDJSON
"""
import contextvars
import json
import logging
import sys
import uuid
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Optional

from timeline.config import get_settings

logger = logging.getLogger("timeline")

# 로깅에서 제외할 개인정보 필드
_SENSITIVE_FIELDS = frozenset({"username", "password", "token", "secret"})

# Request ID를 저장하는 context variable (비동기 안전)
request_id_var: contextvars.ContextVar[Optional[str]] = contextvars.ContextVar(
    "request_id", default=None
)


def generate_request_id() -> str:
    """새 Request ID 생성. 짧고 읽기 쉬운 형식."""
    return uuid.uuid4().hex[:12]


def get_request_id() -> Optional[str]:
    """현재 Request ID 반환."""
    return request_id_var.get()


def set_request_id(request_id: Optional[str] = None) -> str:
    """Request ID 설정. None이면 새로 생성."""
    rid = request_id or generate_request_id()
    request_id_var.set(rid)
    return rid


# 로그 레코드의 표준 필드 (ctx에 넣지 않음)
_STANDARD_ATTRS = frozenset(
    {
        "name", "msg", "args", "created", "filename", "funcName",
        "levelname", "levelno", "lineno", "module", "msecs",
        "pathname", "process", "processName", "relativeCreated",
        "stack_info", "exc_info", "exc_text", "thread", "threadName",
        "message", "asctime", "taskName",
    }
)


class JsonLinesFormatter(logging.Formatter):
    """
    NDJSON 포맷터.

    출력 필드:
    - ts: UTC 타임스탬프
    - level: 로그 레벨
    - rid: Request ID (요청 추적)
    - event: 이벤트 타입 (lifecycle, request, auth, photo, storage, db)
    - msg: 메시지
    - ctx: 추가 컨텍스트 (개인정보 제외)
    - exc: 예외 정보 (에러 시)
    """

    def format(self, record: logging.LogRecord) -> str:
        dt = datetime.fromtimestamp(record.created, tz=timezone.utc)
        payload = {
            "ts": dt.strftime("%Y-%m-%dT%H:%M:%S") + f".{int(record.msecs):03d}Z",
            "level": record.levelname,
        }

        rid = get_request_id()
        if rid:
            payload["rid"] = rid

        if getattr(record, "event", None):
            payload["event"] = record.event

        payload["msg"] = record.getMessage()

        extra_ctx = {
            k: v for k, v in record.__dict__.items()
            if k not in _STANDARD_ATTRS
            and k != "event"
            and k not in _SENSITIVE_FIELDS
            and v is not None
        }
        if extra_ctx:
            payload["ctx"] = extra_ctx

        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)

        return json.dumps(payload, ensure_ascii=False, default=str)


def setup_logging() -> None:
    """
    로깅 설정.

    - stdout: 텍스트 포맷
    - stderr: ERROR 이상
    - LOG_DIR/app.log: INFO 이상 NDJSON, LOG_DIR/error.log: ERROR 이상 NDJSON
    - 외부 라이브러리 로그 억제
    """
    settings = get_settings()
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG if settings.debug else logging.INFO)
    root_logger.handlers.clear()

    text_formatter = logging.Formatter(
        "%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setLevel(logging.INFO)
    stdout_handler.setFormatter(text_formatter)
    root_logger.addHandler(stdout_handler)

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setLevel(logging.ERROR)
    stderr_handler.setFormatter(text_formatter)
    root_logger.addHandler(stderr_handler)

    if settings.log_dir:
        json_formatter = JsonLinesFormatter()
        try:
            log_dir = Path(settings.log_dir)
            log_dir.mkdir(parents=True, exist_ok=True)

            file_handler = RotatingFileHandler(
                log_dir / "app.log",
                maxBytes=10 * 1024 * 1024,
                backupCount=5,
                encoding="utf-8",
            )
            file_handler.setLevel(logging.INFO)
            file_handler.setFormatter(json_formatter)
            root_logger.addHandler(file_handler)

            error_handler = RotatingFileHandler(
                log_dir / "error.log",
                maxBytes=10 * 1024 * 1024,
                backupCount=5,
                encoding="utf-8",
            )
            error_handler.setLevel(logging.ERROR)
            error_handler.setFormatter(json_formatter)
            root_logger.addHandler(error_handler)
        except OSError as e:
            root_logger.warning("File logging disabled: %s", e)

    # 외부 라이브러리 로그 억제
    for name in ("uvicorn", "uvicorn.access", "uvicorn.error", "httpx", "httpcore", "asyncio"):
        logging.getLogger(name).setLevel(logging.WARNING)

    # SQLAlchemy 로그 억제 (느린 쿼리는 timeline.db에서 별도 로깅)
    for name in ("sqlalchemy", "sqlalchemy.engine", "sqlalchemy.pool", "sqlalchemy.orm"):
        logging.getLogger(name).setLevel(logging.WARNING)


def _log(level: int, message: str, exc_info: bool = False, **extra: Any) -> None:
    logger.log(level, message, exc_info=exc_info, extra=extra)


def log_info(message: str, **extra: Any) -> None:
    """INFO 로그 (구조화된 컨텍스트는 키워드 인자로 전달)."""
    _log(logging.INFO, message, **extra)


def log_warning(message: str, **extra: Any) -> None:
    _log(logging.WARNING, message, **extra)


def log_error(message: str, exc_info: bool = False, **extra: Any) -> None:
    _log(logging.ERROR, message, exc_info=exc_info, **extra)
