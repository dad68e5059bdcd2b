"""HTTP clients addressed to a tenant host."""

from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient


def client_for(app: FastAPI, host: str, token: str | None = None) -> AsyncClient:
    """Build a client whose requests carry ``host`` as the Host header."""
    headers = {"Authorization": f"Bearer {token}"} if token else {}
    return AsyncClient(
        transport=ASGITransport(app=app),
        base_url=f"http://{host}",
        headers=headers,
    )
