"""
errors.py

애플리케이션 공통 에러 타입과 에러 응답(envelope) 핸들러.

서비스 계층은 FastAPI에 의존하지 않고 AppError만 발생시키며,
main.py에서 등록한 핸들러가 이를 아래 형태의 JSON으로 변환한다.

    {
      "success": false,
      "error": {"code": ..., "message": ..., "details": ...},
      "statusCode": ...,
      "timestamp": ...,
      "path": ...
    }

관련 파일:
- storefront.main               : install_error_handlers 호출
- storefront.services.*         : AppError 발생

"""

import logging
from datetime import datetime, timezone
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class AppError(Exception):
    def __init__(self, code: str, message: str, status_code: int = 400, details: Any = None):
        super().__init__(message)
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details


def bad_request(code: str, message: str, details: Any = None) -> AppError:
    return AppError(code, message, status.HTTP_400_BAD_REQUEST, details)


def unauthorized(code: str, message: str) -> AppError:
    return AppError(code, message, status.HTTP_401_UNAUTHORIZED)


def forbidden(message: str = "Insufficient role for this operation") -> AppError:
    return AppError("FORBIDDEN", message, status.HTTP_403_FORBIDDEN)


def not_found(code: str, message: str) -> AppError:
    return AppError(code, message, status.HTTP_404_NOT_FOUND)


def conflict(code: str, message: str) -> AppError:
    return AppError(code, message, status.HTTP_409_CONFLICT)


_HTTP_CODES = {
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
}


def error_body(request: Request, *, status_code: int, code: str, message: str, details: Any = None) -> dict:
    return {
        "success": False,
        "error": {
            "code": code,
            "message": message,
            "details": details,
        },
        "statusCode": status_code,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "path": request.url.path,
    }


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(
            request,
            status_code=exc.status_code,
            code=exc.code,
            message=exc.message,
            details=exc.details,
        ),
    )


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    details = [
        {"loc": [str(p) for p in e.get("loc", ())], "msg": e.get("msg"), "type": e.get("type")}
        for e in errors
    ]
    message = details[0]["msg"] if details else "Validation failed"
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body(
            request,
            status_code=status.HTTP_400_BAD_REQUEST,
            code="VALIDATION_ERROR",
            message=message,
            details=details,
        ),
    )


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(
            request,
            status_code=exc.status_code,
            code=_HTTP_CODES.get(exc.status_code, "HTTP_ERROR"),
            message=str(exc.detail),
        ),
        headers=getattr(exc, "headers", None),
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    # 경로/시각은 응답에 남기고 상세 내용은 로그로만 기록
    logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body(
            request,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            code="INTERNAL_SERVER_ERROR",
            message="Internal server error",
        ),
    )


def install_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
