import logging
from contextlib import asynccontextmanager

import uvicorn
from botocore.exceptions import BotoCoreError, ClientError
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from mangum import Mangum
from starlette.exceptions import HTTPException as StarletteHTTPException

from lifelink.api import routers
from lifelink.core.config import Settings, get_settings
from lifelink.core.dependencies import open_data_access
from lifelink.core.errors import LifelinkError
from lifelink.core.logging_config import configure_logging, request_context
from lifelink.data_access.dynamodb import DynamoDataAccess

logger = logging.getLogger(__name__)


def _validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path"))
    return f"{location}: {first['msg']}" if location else first["msg"]


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(LifelinkError)
    async def lifelink_error_handler(request: Request, exc: LifelinkError):
        return JSONResponse(status_code=exc.status_code, content=exc.to_body())

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content={"error": _validation_message(exc)})

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail},
            headers=getattr(exc, "headers", None)
        )

    @app.exception_handler(ClientError)
    @app.exception_handler(BotoCoreError)
    async def database_error_handler(request: Request, exc: Exception):
        logger.error(f"Database error on {request.url.path}: {exc}")
        return JSONResponse(status_code=500, content={"error": str(exc)})

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.url.path}")
        return JSONResponse(status_code=500, content={"error": str(exc)})


def create_app(settings: Settings | None = None, data_access: DynamoDataAccess | None = None) -> FastAPI:
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owned = None
        if getattr(app.state, "data_access", None) is None:
            owned = open_data_access(settings)
            app.state.data_access = owned
            logger.info(f"Connected to DynamoDB table {settings.DYNAMODB_TABLE_NAME}")
        if not settings.ADMIN_API_KEY:
            logger.warning("ADMIN_API_KEY is not set; admin verification endpoints are open to any caller.")
        try:
            yield
        finally:
            if owned is not None:
                owned.close()
                app.state.data_access = None

    app = FastAPI(title="Lifelink API", lifespan=lifespan)
    app.state.settings = settings
    app.state.data_access = data_access

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ALLOW_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)

    @app.middleware("http")
    async def bind_request_context(request: Request, call_next):
        token = request_context.set(f"{request.method} {request.url.path}")
        try:
            return await call_next(request)
        finally:
            request_context.reset(token)

    @app.get("/")
    def read_root():
        return {"message": "Welcome to the Lifelink API"}

    app.include_router(routers.router)
    app.include_router(routers.admin_router)
    return app


settings = get_settings()
configure_logging(settings.LOG_LEVEL)

app = create_app(settings)

handler = Mangum(app)


def run() -> None:
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    run()
