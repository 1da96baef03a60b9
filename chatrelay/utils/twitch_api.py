"""
Shared Twitch Helix API client
"""

import asyncio
from typing import Any, Dict, List, Optional, Sequence

import httpx
from chatrelay.config import settings
from chatrelay.utils.logging import get_logger
from chatrelay.utils.rate_limit import rate_limit_hook

logger = get_logger(__name__, category="system")


_client: Optional[httpx.AsyncClient] = None
_client_lock = asyncio.Lock()


def build_helix_client(
    client_id: Optional[str] = None,
    access_token: Optional[str] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> httpx.AsyncClient:
    """
    Build a Helix client identified by CLIENT_ID.

    Helix rejects calls without a bearer token, so TWITCH_BOT_TOKEN is sent as
    Authorization when configured (an "oauth:" prefix is stripped).

    Every response passes through the rate-limit waiter before it is handed
    back to the caller.

    Raises:
        ValueError: If no client ID is configured.
    """
    client_id = client_id if client_id is not None else settings.client_id
    if not client_id:
        raise ValueError("CLIENT_ID is not configured")

    access_token = access_token if access_token is not None else settings.twitch_bot_token
    headers = {"Client-ID": client_id}
    if access_token:
        if access_token.startswith("oauth:"):
            access_token = access_token[6:]
        headers["Authorization"] = f"Bearer {access_token}"
    else:
        logger.warning("TWITCH_BOT_TOKEN not set; Helix calls will be unauthorized")

    timeout = httpx.Timeout(settings.helix_timeout_seconds, connect=10.0)
    return httpx.AsyncClient(
        base_url=settings.helix_base_url,
        headers=headers,
        timeout=timeout,
        transport=transport,
        event_hooks={"response": [rate_limit_hook]},
    )


async def get_helix_client() -> httpx.AsyncClient:
    global _client
    if _client is None:
        async with _client_lock:
            if _client is None:
                _client = build_helix_client()
                logger.info("Helix client created")
    return _client


def helix_client_ready() -> bool:
    return _client is not None and not _client.is_closed


async def close_helix_client() -> None:
    global _client
    if _client is not None:
        await _client.aclose()
        _client = None
        logger.info("Helix client closed")


async def get_users(
    logins: Sequence[str],
    client: Optional[httpx.AsyncClient] = None,
) -> List[Dict[str, Any]]:
    """
    Look up Twitch users by login name.

    Args:
        logins: Login names (case-insensitive), at most 100 per Helix call
        client: Helix client to use; defaults to the shared one

    Returns:
        The ``data`` array from the Helix /users response

    Raises:
        httpx.HTTPStatusError: On a non-2xx Helix response
    """
    if not logins:
        return []

    if client is None:
        client = await get_helix_client()

    params = [("login", login.lower()) for login in logins]
    response = await client.get("/users", params=params)
    response.raise_for_status()
    users = response.json().get("data", [])
    logger.debug("Resolved %s of %s Helix users", len(users), len(logins))
    return users
