"""Async wrapper for the openFDA client used by the MCP tool handlers."""

import asyncio
from functools import wraps
from typing import Any, Awaitable, Callable, Dict, TypeVar

from .api_client import OpenFDAClient
from .query_builder import ExternalQuery

T = TypeVar('T')


def async_wrapper(method_name: str) -> Callable[[Callable[..., T]], Callable[..., Awaitable[T]]]:
    """Decorator to convert synchronous client methods to async."""

    def decorator(func: Callable[..., T]) -> Callable[..., Awaitable[T]]:
        @wraps(func)
        async def async_method(self, *args, **kwargs) -> T:
            sync_method = getattr(self.sync_client, method_name)
            # Run the blocking HTTP call in a thread pool
            loop = asyncio.get_running_loop()
            return await loop.run_in_executor(
                None, lambda: sync_method(*args, **kwargs)
            )

        return async_method

    return decorator


class AsyncOpenFDAClient:
    """Async wrapper for OpenFDAClient."""

    def __init__(self, sync_client: OpenFDAClient):
        self.sync_client = sync_client

    @async_wrapper("fetch")
    async def fetch(self, query: ExternalQuery) -> Dict[str, Any]:
        """Fetch a query result."""
        ...

    def close(self) -> None:
        self.sync_client.close()
