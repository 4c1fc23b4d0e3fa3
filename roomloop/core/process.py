"""
프로세스 레벨 치명적 에러 처리

이벤트 루프나 메인 스레드에서 처리되지 않은 예외는 로그를 남긴 뒤
종료 코드 1로 프로세스를 종료합니다.
"""

import asyncio
import logging
import os
import sys
from typing import Any, Dict

logger = logging.getLogger(__name__)

FATAL_EXIT_CODE = 1


def _terminate():
    logging.shutdown()
    os._exit(FATAL_EXIT_CODE)


def handle_loop_exception(loop: asyncio.AbstractEventLoop, context: Dict[str, Any]):
    """asyncio 이벤트 루프의 처리되지 않은 예외 핸들러"""
    exception = context.get("exception")
    message = context.get("message", "Unhandled exception in event loop")

    logger.critical(
        f"Unhandled Rejection: {message}",
        exc_info=(type(exception), exception, exception.__traceback__) if exception else None,
        extra={"event_type": "fatal_error", "source": "event_loop"}
    )
    _terminate()


def handle_uncaught_exception(exc_type, exc_value, exc_traceback):
    """sys.excepthook 대체 (KeyboardInterrupt는 기본 동작 유지)"""
    if issubclass(exc_type, KeyboardInterrupt):
        sys.__excepthook__(exc_type, exc_value, exc_traceback)
        return

    logger.critical(
        f"Uncaught Exception: {exc_value}",
        exc_info=(exc_type, exc_value, exc_traceback),
        extra={"event_type": "fatal_error", "source": "main_thread"}
    )
    _terminate()


def install_fatal_handlers(loop: asyncio.AbstractEventLoop = None):
    """치명적 에러 핸들러 등록 (loop를 생략하면 excepthook만 등록)"""
    sys.excepthook = handle_uncaught_exception
    if loop is not None:
        loop.set_exception_handler(handle_loop_exception)
