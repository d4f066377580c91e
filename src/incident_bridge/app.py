"""FastAPI application: poll loop lifespan plus health, metadata and debug endpoints."""

import asyncio
import contextlib
import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse

from incident_bridge.config import get_settings
from incident_bridge.errors import RemoteError
from incident_bridge.jira.client import close_client
from incident_bridge.jira.metadata import get_metadata_resolver
from incident_bridge.logging_config import configure_logging
from incident_bridge.poller import Poller, build_poller

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: configure logging, load config, run the poll loop."""
    settings = get_settings()
    configure_logging(settings.log_level)
    app.state.settings = settings
    app.state.poller = None
    poll_task: asyncio.Task | None = None

    missing = settings.missing_credentials()
    if missing:
        logger.error("Polling disabled, missing settings: %s", ", ".join(missing))
    else:
        app.state.poller = build_poller(settings)
        poll_task = asyncio.create_task(
            app.state.poller.run_forever(settings.poll_interval_seconds)
        )

    yield

    if poll_task is not None:
        poll_task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await poll_task
    await close_client()


app = FastAPI(
    title="Incident Bridge",
    lifespan=lifespan,
)


async def verify_scheduler(request: Request) -> None:
    """Verify the scheduler secret header for protected endpoints.

    Compares the X-Scheduler-Secret header against the configured secret.
    Raises HTTPException 403 if the header is missing, empty, or mismatched.
    """
    settings = get_settings()
    secret = request.headers.get("X-Scheduler-Secret", "")
    if not settings.scheduler_secret or secret != settings.scheduler_secret:
        raise HTTPException(status_code=403, detail="Invalid scheduler secret")


def get_poller(request: Request) -> Poller | None:
    return getattr(request.app.state, "poller", None)


@app.get("/")
@app.get("/health")
async def health():
    """Liveness endpoint."""
    return {
        "status": "ok",
        "service": "incident-bridge",
        "version": "0.1.0",
    }


@app.get("/meta")
async def meta():
    """Return the cached Jira priorities and category options, loading them if needed."""
    resolver = get_metadata_resolver()
    try:
        cache = await resolver.ensure_loaded()
    except RemoteError as exc:
        logger.error("Metadata load failed: %s", exc)
        return JSONResponse(status_code=500, content={"error": exc.detail})
    return cache.model_dump()


@app.get("/debug/last")
async def debug_last(poller: Poller | None = Depends(get_poller)):
    """Return the most recently observed raw Slack message."""
    if poller is None or poller.last_message is None:
        raise HTTPException(status_code=404, detail="No message observed yet")
    return poller.last_message


@app.post("/poll")
async def poll_endpoint(
    _: None = Depends(verify_scheduler),
    poller: Poller | None = Depends(get_poller),
):
    """Run one poll cycle now, unless one is already running."""
    if poller is None:
        raise HTTPException(status_code=503, detail="Polling is not configured")
    try:
        result = await poller.poll_once()
    except RemoteError as exc:
        logger.error("On-demand poll failed: %s", exc)
        return JSONResponse(status_code=502, content={"error": exc.detail})
    if result is None:
        return {"status": "busy"}
    return result.model_dump()
