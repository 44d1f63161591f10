"""Factory for the short-lived HTTP client used by one collection cycle."""

from typing import Optional

import httpx


def create_http_client(
    timeout: float = 3.0,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> httpx.AsyncClient:
    """
    Create an httpx.AsyncClient that never reuses connections.

    Every request opens a fresh connection and asks the server to close it
    afterwards, so nothing carries over from one polling cycle to the next.
    The pool is uncapped since every endpoint task of a cycle shares it.

    Args:
        timeout: Response timeout in seconds. 0 disables the timeout.
        transport: Optional transport override (e.g. httpx.MockTransport)

    Returns:
        httpx.AsyncClient: Client to be closed by the caller
    """
    return httpx.AsyncClient(
        timeout=timeout if timeout > 0 else None,
        limits=httpx.Limits(max_connections=None, max_keepalive_connections=0),
        headers={"Connection": "close"},
        transport=transport,
    )
