"""클라이언트 re-export."""

from sonya.httpclient.client._base import BaseClient
from sonya.httpclient.client.async_client import AsyncClient
from sonya.httpclient.client.sync_client import Client

__all__ = [
    "BaseClient",
    "AsyncClient",
    "Client",
]
