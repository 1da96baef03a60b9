"""
Chatter aggregation from the TMI chatter listing

TMI returns everyone currently in a channel's chat, split into role buckets.
The buckets are flattened into one mapping keyed by lowercased login. Buckets
are applied in a fixed order and a later bucket replaces any earlier record
for the same key.
"""

import asyncio
import json
from typing import Any, Dict, Optional, Tuple

import httpx
from pydantic import ValidationError

from chatrelay.config import settings
from chatrelay.schemas.audience import ChattersPayload, Viewer
from chatrelay.utils.logging import get_logger

logger = get_logger(__name__, category="chatters")

CHATTERS_PATH = "/chatters"

# (bucket, is_mod) in application order. Staff is not flagged as a moderator.
BUCKET_ORDER: Tuple[Tuple[str, bool], ...] = (
    ("vips", False),
    ("moderators", True),
    ("staff", False),
    ("admins", True),
    ("global_mods", True),
    ("viewers", False),
)


class ChattersFetchError(RuntimeError):
    """Chatter listing could not be fetched or decoded."""


_client: Optional[httpx.AsyncClient] = None
_client_lock = asyncio.Lock()


async def _get_client() -> httpx.AsyncClient:
    global _client
    if _client is None:
        async with _client_lock:
            if _client is None:
                timeout = httpx.Timeout(settings.chatters_timeout_seconds)
                _client = httpx.AsyncClient(timeout=timeout)
    return _client


async def close_client() -> None:
    global _client
    if _client is not None:
        await _client.aclose()
        _client = None


def chatters_url(channel: str) -> str:
    return f"{settings.tmi_base_url}{channel}{CHATTERS_PATH}"


def aggregate_chatters(payload: ChattersPayload) -> Dict[str, Viewer]:
    """
    Flatten the role buckets into a mapping of lowercased name -> Viewer.

    Every entry is in chat and treated as a follower. Records are replaced
    whole, never merged field by field.
    """
    viewers: Dict[str, Viewer] = {}
    buckets = payload.chatters
    if buckets is None:
        return viewers

    for bucket, is_mod in BUCKET_ORDER:
        for name in getattr(buckets, bucket) or []:
            viewers[name.lower()] = Viewer(
                name=name,
                in_chat=True,
                is_follower=True,
                is_mod=is_mod,
            )
    return viewers


def parse_chatters(body: bytes) -> ChattersPayload:
    """
    Decode a TMI response body.

    Raises:
        ChattersFetchError: If the body is not JSON or not chatter-shaped
    """
    try:
        data: Any = json.loads(body.decode("utf-8", errors="replace"))
    except ValueError as exc:
        raise ChattersFetchError(f"Chatter listing is not valid JSON: {exc}") from exc

    if data is None:
        return ChattersPayload()

    try:
        return ChattersPayload.model_validate(data)
    except ValidationError as exc:
        raise ChattersFetchError(f"Unexpected chatter listing shape: {exc}") from exc


async def fetch_chatters(
    channel: str,
    client: Optional[httpx.AsyncClient] = None,
) -> Dict[str, Viewer]:
    """
    Fetch and aggregate the current chatters of a channel.

    The response status is not inspected; whatever body comes back is decoded.

    Args:
        channel: Twitch channel login
        client: HTTP client to use; defaults to the shared short-timeout client

    Returns:
        Mapping of lowercased login -> Viewer (empty if nobody is in chat)

    Raises:
        ChattersFetchError: On network failure, an overall timeout
            (chatters_timeout_seconds) or an undecodable body
    """
    if client is None:
        client = await _get_client()

    headers = {"Client-ID": settings.client_id or ""}
    url = chatters_url(channel)

    # One deadline for the whole exchange, body included
    try:
        response = await asyncio.wait_for(
            client.get(url, headers=headers), settings.chatters_timeout_seconds
        )
    except asyncio.TimeoutError as exc:
        logger.warning(
            "Timed out fetching chatters for %s after %ss",
            channel,
            settings.chatters_timeout_seconds,
        )
        raise ChattersFetchError(f"Timed out fetching chatters for {channel}") from exc
    except httpx.HTTPError as exc:
        logger.warning("Failed to fetch chatters for %s: %s", channel, exc)
        raise ChattersFetchError(f"Failed to fetch chatters for {channel}") from exc

    if response.status_code != 200:
        logger.debug(
            "Chatter listing for %s returned %s; decoding body anyway",
            channel,
            response.status_code,
        )

    try:
        payload = parse_chatters(response.content)
    except ChattersFetchError as exc:
        logger.warning("Failed to decode chatters for %s: %s", channel, exc)
        raise

    viewers = aggregate_chatters(payload)
    logger.info("Fetched %s chatters for %s", len(viewers), channel)
    return viewers
