import logging
import traceback
from typing import Callable

from fastapi import Request, Response, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from pydantic import ValidationError as PydanticValidationError
from pymongo.errors import ConnectionFailure, ServerSelectionTimeoutError, OperationFailure

from roomloop.core.errors import (
    BaseCustomException,
    UpstreamPersistenceError,
    ValidationError,
    create_error_response,
    create_validation_error_response
)
from roomloop.core.config import settings

logger = logging.getLogger(__name__)


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """
    통합 에러 처리 미들웨어

    라우터 밖으로 빠져나온 예외를 캐치하고 표준화된 에러 응답을 반환합니다.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        try:
            response = await call_next(request)
            return response

        except BaseCustomException as e:
            return JSONResponse(
                status_code=e.status_code,
                content=e.to_dict()
            )

        except PydanticValidationError as e:
            # 응답 모델 검증 실패 등
            validation_errors = []

            for error in e.errors():
                field_name = ".".join(str(loc) for loc in error["loc"])
                validation_errors.append(
                    ValidationError(
                        field=field_name,
                        message=error["msg"],
                        value=error.get("input")
                    )
                )

            error_response = create_validation_error_response(
                "Request validation failed",
                validation_errors
            )

            return JSONResponse(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                content=error_response.model_dump(mode="json")
            )

        except (ConnectionFailure, ServerSelectionTimeoutError) as e:
            # MongoDB 연결 에러
            persistence_error = UpstreamPersistenceError(
                details={"detail": str(e) if settings.debug else None}
            )

            logger.error(
                f"MongoDB connection error: {type(e).__name__}: {e}",
                extra={"event_type": "database_error", "path": request.url.path}
            )

            return JSONResponse(
                status_code=persistence_error.status_code,
                content=persistence_error.to_dict()
            )

        except OperationFailure as e:
            # MongoDB 작업 실패 (권한, 유효하지 않은 쿼리 등)
            persistence_error = UpstreamPersistenceError(
                "MongoDB operation failed",
                error="mongodb_operation_error",
                status_code=status.HTTP_400_BAD_REQUEST,
                details={"detail": str(e) if settings.debug else None}
            )

            logger.error(
                f"MongoDB operation error: {e}",
                extra={"event_type": "database_error", "path": request.url.path}
            )

            return JSONResponse(
                status_code=persistence_error.status_code,
                content=persistence_error.to_dict()
            )

        except Exception as e:
            error_detail = None
            if settings.debug:
                error_detail = {
                    "exception": str(e),
                    "type": type(e).__name__,
                    "traceback": traceback.format_exc()
                }

            error_response = create_error_response(
                "internal_server_error",
                "An unexpected error occurred",
                status.HTTP_500_INTERNAL_SERVER_ERROR,
                error_detail
            )

            logger.error(
                f"Unhandled exception: {type(e).__name__}: {e}",
                extra={"event_type": "unhandled_error", "path": request.url.path},
                exc_info=True
            )

            return JSONResponse(
                status_code=error_response.status_code,
                content=error_response.model_dump()
            )


def create_http_exception_handler():
    """FastAPI/Starlette HTTPException 핸들러 생성"""
    async def http_exception_handler(request: Request, exc):
        """HTTPException을 표준 형식으로 변환"""

        if isinstance(exc, BaseCustomException):
            return JSONResponse(
                status_code=exc.status_code,
                content=exc.to_dict(),
                headers=getattr(exc, "headers", None)
            )

        # 존재하지 않는 API 경로
        if exc.status_code == status.HTTP_404_NOT_FOUND and request.url.path.startswith("/api/"):
            return JSONResponse(
                status_code=status.HTTP_404_NOT_FOUND,
                content={"message": "API endpoint not found"}
            )

        error_response = create_error_response(
            "http_error",
            exc.detail if isinstance(exc.detail, str) else "HTTP error occurred",
            exc.status_code,
            {"detail": exc.detail} if not isinstance(exc.detail, str) else None
        )

        return JSONResponse(
            status_code=exc.status_code,
            content=error_response.model_dump(),
            headers=getattr(exc, "headers", None)
        )

    return http_exception_handler
