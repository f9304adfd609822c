import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from starlette.exceptions import HTTPException as StarletteHTTPException
from fastapi.responses import JSONResponse

from config import get_settings
from database.db import db
from database.init import create_tables, init_from_env
from services.errors import ServiceError
from utils.logging_config import setup_logging

from .api.router import router as api_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    setup_logging(settings)
    init_from_env(settings.database_url or None)
    create_tables()
    logger.info("🚀 API бэк-офиса запущено")
    try:
        yield
    finally:
        if not db.is_closed():
            db.close()


app = FastAPI(title="CRM back-office API", lifespan=lifespan)
app.include_router(api_router, prefix="/api")


@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError):
    logger.warning("%s %s → %s: %s", request.method, request.url.path, exc.status_code, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"statusCode": exc.status_code, "message": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.get("/ping")
def ping():
    return {"message": "pong"}
