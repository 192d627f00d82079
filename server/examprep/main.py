import logging

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from examprep.config import settings
from examprep.database import init_db
from examprep.errors import http_exception_handler

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title=settings.app_name,
    version=settings.api_version,
    debug=settings.debug
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Every error leaves as {"error": ...}
app.add_exception_handler(StarletteHTTPException, http_exception_handler)


@app.on_event("startup")
async def startup_event():
    """Create missing tables when configured to"""
    if settings.auto_create_tables:
        init_db()
    logger.info("%s is starting (admin configured: %s)", settings.app_name, bool(settings.admin_email))


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "message": f"Welcome to {settings.app_name}",
        "version": settings.api_version,
        "status": "running"
    }


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy"}


# Import and include routers
from examprep.routes import admin, ai, courses, debug, exams, questions, sessions, share, stats  # noqa: E402

app.include_router(exams.router, prefix="/api/exams", tags=["Exams"])
app.include_router(admin.router, prefix="/api/admin", tags=["Admin"])
app.include_router(questions.router, prefix="/api/questions", tags=["Questions"])
app.include_router(sessions.router, prefix="/api", tags=["Sessions"])
app.include_router(stats.router, prefix="/api/stats", tags=["Stats"])
app.include_router(share.router, prefix="/api/share", tags=["Share"])
app.include_router(courses.router, prefix="/api/courses", tags=["Courses"])
app.include_router(debug.router, prefix="/api/debug", tags=["Debug"])
app.include_router(ai.router, prefix="/api/ai", tags=["AI"])


def run():
    """Serve the API with uvicorn using the configured host and port."""
    uvicorn.run("examprep.main:app", host=settings.host, port=settings.port, reload=settings.debug)


if __name__ == "__main__":
    run()
