"""
应用入口

uvicorn enginehub.main:app
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI

from enginehub import __version__
from enginehub.api.admin import engines_router
from enginehub.api.exception_handlers import register_exception_handlers
from enginehub.config import config
from enginehub.core.logger import logger, setup_logging


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"enginehub v{__version__} starting ({config.environment})")
    config.log_startup_warnings()
    if config.environment in {"development", "test", "testing"}:
        from enginehub.database import init_db

        init_db()
    yield
    logger.info("enginehub stopped")


def create_app() -> FastAPI:
    setup_logging(config.log_level)

    app = FastAPI(title="enginehub", version=__version__, lifespan=lifespan)
    app.include_router(engines_router)
    register_exception_handlers(app)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("enginehub.main:app", host=config.host, port=config.port)
