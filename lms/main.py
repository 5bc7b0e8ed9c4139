"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.trustedhost import TrustedHostMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from lms.config import settings
from lms.api import (
    health_router,
    users_router,
    courses_router,
    weeks_router,
    learning_items_router,
    documents_router,
    quiz_banks_router,
    questions_router,
    quizzes_router,
    enrollments_router,
    files_router,
)
from lms.core.exceptions import LMSError
from lms.schemas.common import error

logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s  %(name)-25s  %(levelname)-8s  %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("🚀 LMS backend starting…")
    yield
    logger.info("✅ LMS backend shut down")


app = FastAPI(
    title="LMS API",
    description="Courses, learning content and auto-graded quizzes",
    version="0.1.0",
    lifespan=lifespan,
)

# ── Middleware ─────────────────────────────────────────────────────────────────

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(TrustedHostMiddleware, allowed_hosts=settings.ALLOWED_HOSTS)

# ── Error envelope ────────────────────────────────────────────────────────────


@app.exception_handler(LMSError)
async def lms_error_handler(request: Request, exc: LMSError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=error(exc.message))


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content=error(str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    problems = "; ".join(
        f"{'.'.join(str(part) for part in err['loc'] if part != 'body')}: {err['msg']}"
        for err in exc.errors()
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error(f"Validation failed: {problems}"),
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error(f"An unexpected error occurred: {exc}"),
    )


# ── Routers ───────────────────────────────────────────────────────────────────

app.include_router(health_router, tags=["Health"])
app.include_router(users_router, tags=["Users"])
app.include_router(courses_router, prefix="/courses", tags=["Courses"])
app.include_router(weeks_router, prefix="/weeks", tags=["Weeks"])
app.include_router(learning_items_router, prefix="/learning-items", tags=["Learning items"])
app.include_router(documents_router, prefix="/documents", tags=["Documents"])
app.include_router(quiz_banks_router, prefix="/api/quiz-banks", tags=["Quiz banks"])
app.include_router(questions_router, prefix="/api/questions", tags=["Questions"])
app.include_router(quizzes_router, prefix="/api/quizzes", tags=["Quizzes"])
app.include_router(enrollments_router, prefix="/enrollments", tags=["Enrollments"])
app.include_router(files_router, prefix="/files", tags=["Files"])


@app.get("/")
async def root():
    return {
        "name": "LMS API",
        "version": "0.1.0",
        "docs": "/docs",
        "health": "/health",
    }
