# app/main.py
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.core.config import settings
from app.core.logging import configure_logging
from app.db.base import Base
from app.db.session import engine

# Import routers (router objects, not modules)
from app.api.forms import router as forms_router
from app.api.submissions import router as submissions_router
from app.api.analytics import router as analytics_router
from app.api.notifications import router as notifications_router

configure_logging(settings.LOG_LEVEL)


@asynccontextmanager
async def lifespan(app: FastAPI):
    Base.metadata.create_all(bind=engine)
    yield


app = FastAPI(
    title="Form Builder Platform",
    version="1.0.0",
    lifespan=lifespan,
)

# --------------------------------------------------
# CORS CONFIG
# --------------------------------------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    # allow origin variations on localhost (ports) during development
    allow_origin_regex=r"http://localhost(:[0-9]+)?",
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# --------------------------------------------------
# API ROUTES
# --------------------------------------------------

# Forms (publish, edit, fill-out validation)
app.include_router(forms_router, prefix="/api/v1")

# Submissions (submit, results, report)
app.include_router(submissions_router, prefix="/api/v1")

# Analytics (per-question distributions)
app.include_router(analytics_router, prefix="/api/v1")

# Push notification tokens
app.include_router(notifications_router, prefix="/api/v1")

# --------------------------------------------------
# ROOT HEALTH CHECK
# --------------------------------------------------
@app.get("/")
def health_check():
    return {
        "status": "ok",
        "service": "Form Builder Platform",
        "version": "1.0.0"
    }
