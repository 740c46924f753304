# FastAPI application entrypoint - initializes app, mounts routers, exposes health

from contextlib import asynccontextmanager
from datetime import datetime
from fastapi import FastAPI
import logging

from eventhub.api import ping, upload, discover, users
from eventhub.core.config import settings
from eventhub.core.database import create_tables
from eventhub.services.media_processor import media_processor

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    create_tables()
    yield


app = FastAPI(title="EventHub", lifespan=lifespan)

app.include_router(ping.router, prefix="/api", tags=["health"])
app.include_router(upload.router, prefix="/api", tags=["media"])
app.include_router(discover.router, prefix="/api", tags=["discover"])
app.include_router(users.router, prefix="/api", tags=["users"])

@app.get("/")
def read_root():
    return {"system": "EventHub", "status": "online", "version": "1.0.0-alpha"}

@app.get("/health")
def health_check():
    """
    System health: host load, processing queues and media tool availability.
    """
    import psutil

    cpu_percent = psutil.cpu_percent(interval=0.1)
    memory = psutil.virtual_memory()
    disk = psutil.disk_usage('/')

    status = "healthy"
    issues = []

    if cpu_percent > 90:
        status = "degraded"
        issues.append("High CPU usage")

    if memory.percent > 90:
        status = "degraded"
        issues.append("High memory usage")

    if disk.percent > 95:
        status = "degraded"
        issues.append("Low disk space")

    ffmpeg_available = media_processor.transcoder.is_available()
    if not ffmpeg_available:
        status = "degraded"
        issues.append("FFmpeg not available")

    return {
        "status": status,
        "timestamp": datetime.utcnow().isoformat(),
        "issues": issues if issues else None,
        "cpu": {"usage_percent": cpu_percent},
        "memory": {"total": memory.total, "available": memory.available, "percent": memory.percent},
        "disk": {"total": disk.total, "free": disk.free, "percent": disk.percent},
        "queues": media_processor.stats(),
        "services": {
            "database": "sqlite" if settings.database_url.startswith("sqlite") else "configured",
            "ffmpeg": "available" if ffmpeg_available else "missing",
        },
    }
