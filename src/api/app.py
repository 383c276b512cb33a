from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from .error import ClientError, ServerError
import logging

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="[%(asctime)s] [%(levelname)s] %(name)s: %(message)s",
    )


async def handle_client_error(request: Request, exc: ClientError):
    error = exc.base_error
    content = {"message": error.message, "code": error.code, **error.details}
    logger.warning(f"Client error: {error.code} | endpoint={request.url.path}")
    return JSONResponse(status_code=exc.status_code, content=content)


async def handle_server_error(request: Request, exc: ServerError):
    logger.error(f"Server error: {exc.base_error.code} | endpoint={request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": "Internal server error", "code": exc.base_error.code},
    )


async def handle_unexpected_error(request: Request, exc: Exception):
    logger.exception(f"Unhandled error | endpoint={request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": "Internal server error", "code": "INTERNAL_ERROR"},
    )


async def handle_validation_error(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    message = errors[0]["msg"] if errors else "Invalid input"
    logger.info(f"Validation error | endpoint={request.url.path} message={message}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "message": message,
            "code": "VALIDATION_ERROR",
            "details": [
                {"loc": list(err["loc"]), "msg": err["msg"], "type": err["type"]}
                for err in errors
            ],
        },
    )


def create_app(ApplicationConfig) -> FastAPI:
    configure_logging(ApplicationConfig.LOG_LEVEL)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        from src.depends import create_tables

        await create_tables()
        logger.info("Database tables ready")
        yield

    app = FastAPI(title="StudIQ API", version="0.1.0", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ApplicationConfig.CORS_ORIGINS,
        allow_credentials=ApplicationConfig.CORS_ALLOW_CREDENTIALS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    from src.api.routes import materials, password_reset

    app.include_router(password_reset.router, tags=["Password Reset"])
    app.include_router(materials.router, tags=["Materials"])

    app.add_exception_handler(ClientError, handle_client_error)
    app.add_exception_handler(ServerError, handle_server_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)

    return app
