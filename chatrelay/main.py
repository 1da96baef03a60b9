"""
Chat Relay Service - FastAPI Application

This service:
- Acknowledges join requests for a channel
- Relays a channel's current chatters as a flat audience list
- Answers every unknown route with a failure envelope

Every response, failures included, goes out with HTTP 200; the numeric
outcome lives in the envelope's ``status`` field.
"""

import logging
from datetime import datetime, timezone
from typing import List, Union

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from chatrelay import __version__
from chatrelay.config import settings
from chatrelay.ingest.chatters import ChattersFetchError, close_client, fetch_chatters
from chatrelay.schemas.audience import StatusEnvelope, Viewer
from chatrelay.utils.logging import get_logger
from chatrelay.utils.twitch_api import (
    close_helix_client,
    get_helix_client,
    helix_client_ready,
)

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

logger = get_logger(__name__, category="system")
chatters_logger = get_logger(f"{__name__}.chatters", category="chatters")

STATUS_OK = 200
STATUS_FAILED = 500

# Relay routes answer regardless of method
ANY_METHOD = ["GET", "POST", "PUT", "PATCH", "DELETE"]


def envelope(status: int) -> JSONResponse:
    return JSONResponse(content=StatusEnvelope(status=status).model_dump())


app = FastAPI(
    title="Chat Relay Service",
    description="Relays Twitch chatter listings as a normalized audience",
    version=__version__,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(StarletteHTTPException)
async def unknown_request(request: Request, exc: StarletteHTTPException):
    """Unmatched routes and methods get the failure envelope."""
    logger.debug(
        "Unhandled request %s %s (%s)", request.method, request.url.path, exc.status_code
    )
    return envelope(STATUS_FAILED)


# ============================================================================
# ENDPOINTS
# ============================================================================


@app.api_route("/join/{channel}", methods=ANY_METHOD, response_model=StatusEnvelope)
async def join_request(channel: str):
    """
    Join a channel.

    Not acted on yet: the channel is ignored and the request always succeeds.
    """
    return StatusEnvelope(status=STATUS_OK)


@app.api_route(
    "/channel/{channel}/audience",
    methods=ANY_METHOD,
    response_model=Union[List[Viewer], StatusEnvelope],
)
async def audience_request(channel: str):
    """
    List everyone currently in a channel's chat.

    Returns:
        JSON array of {name, inChat, isFollower, isMod}, or {"status": 500}
        if the chatter listing could not be fetched or decoded
    """
    try:
        viewers = await fetch_chatters(channel)
    except ChattersFetchError as exc:
        chatters_logger.warning("Audience request for %s failed: %s", channel, exc)
        return envelope(STATUS_FAILED)

    return JSONResponse(
        content=[viewer.model_dump(by_alias=True) for viewer in viewers.values()]
    )


@app.get("/health")
async def health_check():
    """Health check endpoint for Docker and load balancers."""
    return {
        "status": "healthy",
        "service": "chatrelay",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "helix_client": "ready" if helix_client_ready() else "unavailable",
    }


@app.on_event("startup")
async def startup_event():
    """Build the Helix client (with its rate-limit waiter) and announce the port."""
    try:
        await get_helix_client()
    except ValueError as exc:
        logger.error("Helix client unavailable: %s", exc)

    logger.info("Listening on %s:%s", settings.host, settings.port)


@app.on_event("shutdown")
async def shutdown_event():
    """Close outbound HTTP clients."""
    logger.info("Chat relay shutting down")
    await close_client()
    await close_helix_client()


def run() -> None:
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
