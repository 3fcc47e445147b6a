"""
HTTP server for hubtrack.

Provides a FastAPI event ingest endpoint so a host plugin can forward its
session lifecycle events to a SessionTracker running in this process.
"""

import asyncio
import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from hubtrack import __version__
from hubtrack.sessions.tracker import SessionTracker

logger = logging.getLogger(__name__)


class HTTPServer:
    """
    Event ingest server.

    Request handlers run concurrently, while the tracker expects one event
    at a time, so every dispatch goes through a single lock.
    """

    def __init__(
        self,
        tracker: SessionTracker,
        host: str = "127.0.0.1",
        port: int = 5056,
    ) -> None:
        self.tracker = tracker
        self.host = host
        self.port = port
        self._event_lock = asyncio.Lock()
        self.app = self._create_app()

    def _create_app(self) -> FastAPI:
        app = FastAPI(
            title="hubtrack",
            description="Session event ingest for Hub task tracking",
            version=__version__,
        )
        self._register_exception_handlers(app)
        self._register_routes(app)
        return app

    async def dispatch(self, events: list[Any]) -> int:
        """Feed events to the tracker in order, one at a time."""
        async with self._event_lock:
            for event in events:
                await self.tracker.handle_event(event)
        return len(events)

    def _register_exception_handlers(self, app: FastAPI) -> None:
        """
        Register global exception handlers.

        All exceptions return 200 OK so a forwarding hook never fails.
        """

        @app.exception_handler(Exception)
        async def global_exception_handler(
            request: Request,
            exc: Exception,
        ) -> JSONResponse:
            logger.error(
                "Unhandled exception in HTTP server: %s",
                exc,
                exc_info=True,
                extra={"path": request.url.path, "method": request.method},
            )
            return JSONResponse(
                status_code=200,
                content={
                    "status": "error",
                    "message": "Internal error occurred but request acknowledged",
                    "error_logged": True,
                },
            )

    def _register_routes(self, app: FastAPI) -> None:
        @app.get("/health")
        async def health() -> dict[str, Any]:
            return {
                "status": "healthy",
                "version": __version__,
                "active_sessions": len(self.tracker.sessions),
            }

        @app.post("/events")
        async def ingest_event(request: Request) -> dict[str, Any]:
            """
            Process one session lifecycle event.

            Request body: a single OpenCode event, e.g.
                {"type": "session.idle", "sessionId": "abc"}
            """
            payload = await self._read_json(request)
            if not isinstance(payload, dict):
                logger.warning("Ignored /events body: expected a JSON object")
                return {"status": "ignored"}
            await self.dispatch([payload])
            return {"status": "ok"}

        @app.post("/events/batch")
        async def ingest_events(request: Request) -> dict[str, Any]:
            """Process a list of events in order."""
            payload = await self._read_json(request)
            if not isinstance(payload, list):
                logger.warning("Ignored /events/batch body: expected a JSON array")
                return {"status": "ignored"}
            processed = await self.dispatch(payload)
            return {"status": "ok", "processed": processed}

    @staticmethod
    async def _read_json(request: Request) -> Any:
        """Parsed request body, or None when it is not valid JSON."""
        try:
            return await request.json()
        except ValueError as e:
            logger.warning(f"Invalid JSON body on {request.url.path}: {e}")
            return None
