"""Student Project Planner: FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from planner.config import settings
from planner.database import init_db
from planner.logging_config import setup_logging
from planner.middleware.rate_limit import limiter
from planner.middleware.request_logging import RequestLoggingMiddleware
from planner.routers import auth, courses, assignments, projects, dashboard

setup_logging()
logger = logging.getLogger(__name__)

API_VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting Student Project Planner API - Version: %s", API_VERSION)
    # A broken database must not keep the process from starting
    try:
        init_db()
    except Exception:
        logger.exception("An error occurred while initializing the database")
    yield
    logger.info("Shutting down Student Project Planner API")


_cors_origins = [o.strip() for o in settings.ALLOWED_ORIGINS.split(",") if o.strip()]

app = FastAPI(
    title="Student Project Planner",
    description="Courses, assignments and group projects for students.",
    version=API_VERSION,
    lifespan=lifespan,
)

# Rate limiting
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

app.add_middleware(RequestLoggingMiddleware)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Log unexpected failures and hide their details from the caller."""
    logger.error(
        "Unhandled exception - Path: %s, Method: %s",
        request.url.path,
        request.method,
        exc_info=exc,
    )
    return JSONResponse(status_code=500, content={"detail": "An unexpected error occurred."})


# Routers
app.include_router(auth.router)
app.include_router(courses.router)
app.include_router(assignments.router)
app.include_router(projects.router)
app.include_router(dashboard.router)


@app.get("/")
def root():
    return {
        "name": "Student Project Planner API",
        "version": API_VERSION,
        "docs": "/docs",
    }


@app.get("/health")
def health():
    return {"status": "ok", "version": API_VERSION}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("planner.main:app", host="127.0.0.1", port=8000, reload=True)
