"""
api/app.py — FastAPI application factory

Every request is bound to an attempt slot through the ``testprep_session``
cookie; an unknown or expired cookie gets a fresh slot.
"""

import logging
import threading
import time

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware

import api.session as session
from api.routes import router
from config import SESSION_CLEANUP_INTERVAL, SESSION_TTL

SESSION_COOKIE = "testprep_session"

logger = logging.getLogger(__name__)


async def bind_attempt_slot(request: Request, call_next):
    sid = request.cookies.get(SESSION_COOKIE)
    if not sid or session.get_slot(sid) is None:
        sid = session.open_slot()
    request.state.session_id = sid

    response: Response = await call_next(request)
    response.set_cookie(SESSION_COOKIE, sid, max_age=SESSION_TTL, httponly=True, samesite="lax")
    return response


def _sweep_forever(interval: float) -> None:
    while True:
        time.sleep(interval)
        dropped = session.cleanup_expired()
        if dropped:
            logger.info(f"Dropped {dropped} idle session(s) and their history")


def create_app(start_cleanup: bool = True) -> FastAPI:
    """Build the app. ``start_cleanup=False`` skips the idle-session sweeper thread."""
    app = FastAPI(title="TestPrep CBT", docs_url=None, redoc_url=None)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.middleware("http")(bind_attempt_slot)
    app.include_router(router)

    if start_cleanup:
        threading.Thread(
            target=_sweep_forever, args=(SESSION_CLEANUP_INTERVAL,), name="session-sweeper", daemon=True
        ).start()
    return app
