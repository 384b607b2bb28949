import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic_core import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from starlette import status

logger = logging.getLogger(__name__)


async def database_error_exception_handler(
    request: Request, exc: SQLAlchemyError
) -> JSONResponse:
    logger.error("Datastore query failed on %s %s: %s", request.method, request.url.path, exc)
    detail = str(exc.orig) if getattr(exc, "orig", None) is not None else str(exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": detail},
    )


async def validation_error_exception_handler(
    request: Request, exc: ValidationError
) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": exc.errors(include_url=False, include_context=False)},
    )


def register_exception_handlers(app: FastAPI):
    app.add_exception_handler(SQLAlchemyError, database_error_exception_handler)
    app.add_exception_handler(ValidationError, validation_error_exception_handler)
