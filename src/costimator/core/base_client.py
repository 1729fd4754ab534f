"""Base client for the services the estimator reads from (billing catalog, cluster API)."""

import asyncio
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Optional
import structlog

from costimator.core.exceptions import ClientConnectionException

logger = structlog.get_logger(__name__)


class BaseClient(ABC):
    """Async client over a blocking SDK.

    Subclasses create the SDK client in ``connect`` and issue calls through
    ``_call`` so the event loop is never blocked.
    """

    def __init__(self, config: Dict[str, Any], service: str, name: Optional[str] = None):
        self.config = config
        self.service = service
        self.name = name or self.__class__.__name__
        self._connected = False
        self.logger = logger.bind(client=self.name, service=service)

    @abstractmethod
    async def connect(self) -> None:
        """Create the SDK client and load credentials."""
        pass

    @abstractmethod
    async def disconnect(self) -> None:
        """Release the SDK client."""
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Cheap request proving the credentials work."""
        pass

    @property
    def is_connected(self) -> bool:
        return self._connected

    def _require_connection(self) -> None:
        if not self._connected:
            raise ClientConnectionException(self.service, "Client not connected")

    async def _call(self, func: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
        """Run a blocking SDK call in a worker thread."""
        self._require_connection()
        return await asyncio.to_thread(func, *args, **kwargs)

    async def __aenter__(self):
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.disconnect()
