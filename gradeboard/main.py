import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from gradeboard.core.config import LOG_LEVEL
from gradeboard.core.logging_middleware import LoggingMiddleware
from gradeboard.db.init_db import init_db
from gradeboard.routers.assignments import router as assignments_router
from gradeboard.routers.auth import router as auth_router
from gradeboard.routers.final_grades import router as final_grades_router
from gradeboard.routers.grades import router as grades_router
from gradeboard.routers.grading import router as grading_router
from gradeboard.routers.groups import router as groups_router
from gradeboard.routers.quizzes import router as quizzes_router
from gradeboard.routers.submissions import router as submissions_router
from gradeboard.services.errors import GradeboardError

logging.basicConfig(level=LOG_LEVEL)
logger = logging.getLogger(__name__)

app = FastAPI(title="Gradeboard")

# Middleware
app.add_middleware(LoggingMiddleware)


@app.exception_handler(GradeboardError)
async def gradeboard_error_handler(request: Request, exc: GradeboardError):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


# Health check
@app.get("/health")
def health():
    return {"status": "ok"}


# Startup event
@app.on_event("startup")
def on_startup():
    init_db()


# Include routers
app.include_router(auth_router, prefix="/auth", tags=["auth"])
app.include_router(groups_router, prefix="/final", tags=["final"])
app.include_router(grading_router, prefix="/admin/final/grading", tags=["grading"])
app.include_router(final_grades_router, prefix="/admin/final", tags=["final-grades"])
app.include_router(assignments_router, tags=["assignments"])
app.include_router(submissions_router, tags=["submissions"])
app.include_router(quizzes_router, prefix="/quizzes", tags=["quizzes"])

# Grades and leaderboard (no prefix, routes define full paths)
app.include_router(grades_router, tags=["grades"])
