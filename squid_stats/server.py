"""HTTP routes exposing the backfill and player stats."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .errors import FetchFailed, StorageUnavailable
from .service import SquidStatsService

logger = logging.getLogger(__name__)


def error(code: int = 1, text: str = "Unknown error") -> dict:
    return {"code": code, "message": text}


def create_app(service: SquidStatsService, manage_lifecycle: bool = True) -> FastAPI:
    """
    Build the FastAPI app around an existing service.

    With `manage_lifecycle` the app starts and stops the service itself.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if manage_lifecycle:
            await service.start()
        try:
            yield
        finally:
            if manage_lifecycle:
                await service.stop()

    app = FastAPI(title="squid-stats", lifespan=lifespan)
    app.state.service = service

    @app.exception_handler(StorageUnavailable)
    async def storage_unavailable(request: Request, exc: StorageUnavailable):
        logger.error(f"{request.url.path}: {exc}")
        return JSONResponse(status_code=503, content=error(503, str(exc)))

    @app.exception_handler(FetchFailed)
    async def fetch_failed(request: Request, exc: FetchFailed):
        logger.error(f"{request.url.path}: {exc}")
        return JSONResponse(status_code=502, content=error(502, str(exc)))

    @app.get("/stats/{player}")
    async def player_stats(player: str):
        summary = await service.player_summary(player)
        return summary.to_dict()

    # Replays archived history; run after deployment or a restart
    @app.get("/parser")
    async def parser():
        report = await service.run_backfill()
        return {"status": "OK", **report.to_dict()}

    return app
