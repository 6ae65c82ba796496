"""
Главный модуль FastAPI приложения Blog API.

Содержит конфигурацию приложения, middleware, обработчики ошибок и роутеры.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from blog_api.api.v1.payload import format_errors
from blog_api.api.v1.routers import api_router
from blog_api.core.config import settings
from blog_api.core.exceptions import BlogError
from blog_api.core.logging import setup_logging
from blog_api.schemas.common import ErrorEnvelope

setup_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

# Создание экземпляра FastAPI приложения
app = FastAPI(
    title="Blog API",
    description="API блога: посты, категории, комментарии",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# Настройка CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Загруженные изображения раздаются только из локального хранилища
if settings.STORAGE_TYPE == "local":
    app.mount(
        "/uploads",
        StaticFiles(directory=settings.STORAGE_PATH, check_dir=False),
        name="uploads",
    )


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code, content=ErrorEnvelope(error=message).model_dump()
    )


# Обработчики ошибок
@app.exception_handler(BlogError)
async def blog_error_handler(request: Request, exc: BlogError):
    """Типизированные ошибки сервисного слоя."""
    log = logger.error if exc.status_code >= 500 else logger.warning
    log(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.message}")
    return _error(exc.status_code, exc.message)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    """Ошибки валидации запроса отдаются как 400."""
    message = format_errors(exc.errors())
    logger.warning(f"Validation error on {request.method} {request.url.path}: {message}")
    return _error(400, message)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return _error(exc.status_code, str(exc.detail))


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception):
    """Обработка всех остальных исключений."""
    logger.error(
        f"Unexpected error on {request.method} {request.url.path}: {exc}",
        exc_info=exc,
    )
    return _error(500, "Server Error")


@app.get("/healthz")
def healthz():
    """
    Health check endpoint для мониторинга состояния приложения.

    Returns:
        dict: Статус приложения
    """
    return {"status": "ok", "service": "Blog API", "version": "1.0.0"}


# Подключение API роутеров
app.include_router(api_router, prefix="/api")
