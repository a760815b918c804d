# backend/aeroclub/main.py
from __future__ import annotations

import logging
import os

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from aeroclub.engine import EngineError, NoAvailabilityError
from aeroclub.routers.aircraft import router as aircraft_router
from aeroclub.routers.missions import router as missions_router
from aeroclub.routers.calendar import router as calendar_router
from aeroclub.routers.schedule import router as schedule_router

logger = logging.getLogger(__name__)


def build_app() -> FastAPI:
    app = FastAPI(title="Aeroclub Scheduling API")

    # CORS (adjust origins as you need)
    frontend_origin = os.getenv("FRONTEND_ORIGIN", "http://localhost:5173")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[frontend_origin],
        allow_origin_regex=r"^https?://(localhost|127\.0\.0\.1|0\.0\.0\.0)(:\d+)?$",
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        max_age=600,
    )

    # Engine faults are not validation verdicts: bad input shape, not a busy aircraft
    @app.exception_handler(EngineError)
    async def engine_error(request: Request, exc: EngineError):
        status = 404 if isinstance(exc, NoAvailabilityError) else 422
        logger.warning(f"[engine] {request.method} {request.url.path}: {exc}")
        return JSONResponse(status_code=status, content={"detail": str(exc)})

    # Health
    @app.get("/health")
    def health():
        return {"ok": True}

    app.include_router(aircraft_router)
    app.include_router(missions_router)
    app.include_router(calendar_router)
    app.include_router(schedule_router)

    return app


app = build_app()
