"""
异常处理器

将注册中心的业务异常转换为统一的 JSON 错误响应：
{"error": {"type": ..., "message": ..., "details": {...}}}
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from enginehub.core.exceptions import EngineRegistryException
from enginehub.core.logger import logger


async def engine_registry_exception_handler(
    request: Request, exc: EngineRegistryException
) -> JSONResponse:
    logger.debug(f"{request.method} {request.url.path} -> {exc.status_code} {exc.error_type}")
    return JSONResponse(status_code=exc.status_code, content={"error": exc.to_dict()})


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(EngineRegistryException, engine_registry_exception_handler)
