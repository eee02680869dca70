from contextlib import asynccontextmanager

from fastapi import FastAPI

from app.startup import startup_task
from custom_exceptions.startup_error import StartupError
from utils.logger import logger


@asynccontextmanager
async def lifespan(app: FastAPI):
    try:
        provider = await startup_task()
    except Exception as e:
        logger.error("Startup aborted: %s", str(e))
        raise StartupError(f"Startup aborted: {e}", cause=e) from e

    logger.info("Logs Explorer API ready (provider=%s, model=%s)", provider.name, provider.model)
    try:
        yield
    finally:
        logger.info("Logs Explorer API shutting down")
