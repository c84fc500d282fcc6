# skillsync/main.py

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from skillsync.api import (
    devices,
    matches,
    meetings,
    messages,
    notifications,
    profiles,
    reviews,
    sessions,
    stats,
)
from skillsync.core.circuit_breaker import limiter
from skillsync.core.exceptions import SkillSyncError
from skillsync.utils.logger import setup_logger

logger = logging.getLogger(__name__)

app = FastAPI(
    title="SkillSync Backend",
    version="1.0.0",
    description="Peer-to-peer skill exchange: profiles, matching, sessions, chat and notifications",
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

setup_logger()


@app.exception_handler(SkillSyncError)
async def skillsync_error_handler(request: Request, exc: SkillSyncError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    else:
        logger.info("%s %s rejected: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


# Register routers
app.include_router(profiles.router, tags=["Profiles"])
app.include_router(matches.router, tags=["Matching"])
app.include_router(sessions.router, tags=["Sessions"])
app.include_router(reviews.router, tags=["Reviews"])
app.include_router(messages.router, tags=["Messages"])
app.include_router(devices.router, tags=["Devices"])
app.include_router(stats.router, tags=["Stats"])
app.include_router(meetings.router, tags=["Meetings"])
app.include_router(notifications.router, tags=["Notifications"])


@app.get("/health")
def health_check():
    return {"status": "ok"}
