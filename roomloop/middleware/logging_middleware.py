"""
API 요청 로깅 미들웨어

모든 API 요청과 응답을 구조화된 형태로 로깅합니다.
"""

import time
import uuid
from typing import Callable, Optional
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from roomloop.core.logging import (
    get_logger,
    set_request_context,
    clear_request_context,
    log_api_call,
)

logger = get_logger(__name__)

SENSITIVE_REQUEST_HEADERS = {"authorization", "cookie", "x-api-key"}


class LoggingMiddleware(BaseHTTPMiddleware):
    """API 요청/응답 로깅 미들웨어"""

    def __init__(self, app, log_requests: bool = True, slow_request_threshold_ms: float = 1000):
        super().__init__(app)
        self.log_requests = log_requests
        self.slow_request_threshold_ms = slow_request_threshold_ms

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
        start_time = time.time()

        set_request_context(request_id)

        if self.log_requests:
            self._log_request(request, request_id)

        try:
            response = await call_next(request)

            duration_ms = (time.time() - start_time) * 1000
            # get_current_user 의존성이 설정한 값
            user_id = getattr(request.state, "user_id", None)

            log_api_call(
                logger,
                method=request.method,
                path=request.url.path,
                status_code=response.status_code,
                duration_ms=duration_ms,
                user_id=user_id,
                request_id=request_id,
                query_params=dict(request.query_params) if request.query_params else None,
                client_ip=self._get_client_ip(request)
            )

            if duration_ms > self.slow_request_threshold_ms:
                logger.warning(
                    f"Slow request detected: {request.method} {request.url.path}",
                    extra={
                        "event_type": "slow_request",
                        "request_id": request_id,
                        "duration_ms": duration_ms,
                        "threshold_ms": self.slow_request_threshold_ms,
                    }
                )

            response.headers["X-Request-ID"] = request_id
            return response

        except Exception as e:
            duration_ms = (time.time() - start_time) * 1000

            logger.error(
                f"Request failed: {request.method} {request.url.path}",
                extra={
                    "event_type": "api_error",
                    "request_id": request_id,
                    "method": request.method,
                    "path": request.url.path,
                    "duration_ms": duration_ms,
                    "error": str(e),
                    "error_type": type(e).__name__,
                    "client_ip": self._get_client_ip(request)
                },
                exc_info=True
            )

            raise

        finally:
            clear_request_context()

    def _log_request(self, request: Request, request_id: str):
        """요청 정보 로깅 (민감한 헤더 제외)"""
        filtered_headers = {}
        for name, value in request.headers.items():
            if name.lower() in SENSITIVE_REQUEST_HEADERS:
                filtered_headers[name] = "***REDACTED***"
            else:
                filtered_headers[name] = value

        logger.debug(
            f"Request started: {request.method} {request.url.path}",
            extra={
                "event_type": "request_started",
                "request_id": request_id,
                "method": request.method,
                "path": request.url.path,
                "headers": filtered_headers,
                "client_ip": self._get_client_ip(request),
            }
        )

    def _get_client_ip(self, request: Request) -> Optional[str]:
        """클라이언트 IP 주소 추출"""
        # X-Forwarded-For 헤더 확인 (프록시/로드밸런서 사용 시)
        forwarded_for = request.headers.get("x-forwarded-for")
        if forwarded_for:
            return forwarded_for.split(",")[0].strip()

        real_ip = request.headers.get("x-real-ip")
        if real_ip:
            return real_ip

        if request.client is not None:
            return request.client.host

        return "unknown"
