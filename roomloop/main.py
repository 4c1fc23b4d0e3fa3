"""
RoomLoop - FastAPI + Socket.IO Application

마이크로 밋업 채팅방의 REST API와 실시간 릴레이(Socket.IO)를 하나의 ASGI 앱으로 제공합니다.

실행:
    uvicorn roomloop.main:asgi_app --host 0.0.0.0 --port 5500
"""

import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from prometheus_fastapi_instrumentator import Instrumentator
from starlette.exceptions import HTTPException as StarletteHTTPException

from roomloop.core.config import settings
from roomloop.core.logging import setup_logging
from roomloop.core.process import install_fatal_handlers
from roomloop.database import init_databases, close_databases
from roomloop.middleware.error_handler import ErrorHandlerMiddleware, create_http_exception_handler
from roomloop.middleware.logging_middleware import LoggingMiddleware
from roomloop.realtime import RealtimeGateway
from roomloop import api
from roomloop.api import include_routers

setup_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifecycle management"""
    # Startup
    logger.info(f"{settings.app_name} starting up ({settings.environment})")
    install_fatal_handlers(asyncio.get_running_loop())

    await init_databases()

    yield

    # Shutdown
    logger.info(f"{settings.app_name} shutting down")
    app.state.gateway.shutdown()
    await close_databases()


app = FastAPI(
    title=settings.app_name,
    version=settings.version,
    lifespan=lifespan
)

# 미들웨어 (마지막에 추가한 것이 가장 바깥)
app.add_middleware(ErrorHandlerMiddleware)
app.add_middleware(LoggingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_exception_handler(StarletteHTTPException, create_http_exception_handler())

# Include routers (roomloop/api/* 모듈의 router 전부)
include_routers(app, "api", api.__path__)

# Prometheus metrics
Instrumentator().instrument(app).expose(app)


@app.get("/")
async def root():
    return {
        "message": "RoomLoop API Server",
        "status": "Running",
        "environment": settings.environment
    }


# Socket.IO 게이트웨이 (REST 라우터는 app.state.gateway로 접근)
gateway = RealtimeGateway(allowed_origins=settings.allowed_origins)
app.state.gateway = gateway

asgi_app = gateway.asgi_app(app)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "roomloop.main:asgi_app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug
    )
