import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from internship_portal import settings
from internship_portal.database.config.db import engine, Base
from internship_portal.database import models  # noqa: F401  registers all tables
from internship_portal.lifecycle.errors import InternalError, PortalError, Unauthorized
from internship_portal.routers import api_router

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables ready")
    yield


app = FastAPI(title="Micro-Internship Portal", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


async def portal_error_handler(request: Request, exc: PortalError) -> JSONResponse:
    headers = None
    if isinstance(exc, Unauthorized):
        headers = {"WWW-Authenticate": "Bearer"}
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message},
        headers=headers,
    )


async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    # Driver messages stay in the log, the client gets the generic 500
    logger.error("Database error on %s %s", request.method, request.url.path, exc_info=exc)
    return await portal_error_handler(request, InternalError())


app.add_exception_handler(PortalError, portal_error_handler)
app.add_exception_handler(SQLAlchemyError, database_error_handler)

# Include the API router
app.include_router(api_router)
