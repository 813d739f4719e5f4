import logging
from datetime import datetime, timezone

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from todoapp.config.settings import settings
from todoapp.logging_setup import setup_logging
from todoapp.routers import admin, auth, task
from todoapp.utils.handlers import register_exception_handlers

setup_logging(settings.LOG_LEVEL)
logger = logging.getLogger("todoapp")

app = FastAPI(title="To-Do API")

# CORS configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)

register_exception_handlers(app)

# Route registration; /api/v1 mirrors the bare paths for older clients
for prefix in ("", "/api/v1"):
    app.include_router(auth.router, prefix=prefix)
    app.include_router(task.router, prefix=prefix)
    app.include_router(admin.router, prefix=prefix)


@app.on_event("startup")
async def startup_event():
    logger.info(f"Starting To-Do API ({settings.ENVIRONMENT})")


@app.on_event("shutdown")
async def shutdown_event():
    logger.info("Shutting down To-Do API")


# Root route
@app.get("/")
def read_root():
    return {"success": True, "message": "To-Do API"}


@app.get("/health")
def health():
    return {
        "success": True,
        "message": "Server is running",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
