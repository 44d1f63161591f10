"""Base collector abstract class and per-endpoint error isolation."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any
import logging
from functools import wraps

from ..services.sink import Sink
from .errors import ArangoDBError, CollectionError


@dataclass
class CycleSummary:
    """Outcome of one collection cycle across all configured endpoints."""

    configured: int = 0
    skipped: int = 0
    succeeded: int = 0
    failed: int = 0

    @property
    def dispatched(self) -> int:
        """Number of endpoints a fetch task was launched for."""
        return self.succeeded + self.failed


class BaseCollector(ABC):
    """Abstract base class for all collectors."""

    def __init__(self, config: Any, logger: logging.Logger):
        """
        Initialize base collector.

        Args:
            config: Collector-specific configuration
            logger: Logger instance
        """
        self.config = config
        self.logger = logger.getChild(self.__class__.__name__)

    @abstractmethod
    async def gather(self, sink: Sink) -> CycleSummary:
        """
        Run one collection cycle, emitting records and errors to the sink.

        Returns:
            CycleSummary: Counts of what happened this cycle

        Note:
            Must not raise for per-endpoint failures. Implementations should
            wrap their per-endpoint coroutine with @safe_gather.
        """
        pass


def safe_gather(func):
    """
    Decorator isolating one endpoint's failure from its siblings.

    The wrapped coroutine is called as ``func(self, endpoint, sink, ...)``.
    Any exception it raises is logged and handed to ``sink.report_error``
    instead of propagating. Exceptions outside the ArangoDBError hierarchy
    are wrapped in CollectionError so the reported error always names the
    endpoint.

    Args:
        func: Per-endpoint collector method to wrap

    Returns:
        Wrapped coroutine returning True on success, False on failure
    """
    @wraps(func)
    async def wrapper(self, endpoint, sink: Sink, *args, **kwargs) -> bool:
        try:
            await func(self, endpoint, sink, *args, **kwargs)
        except ArangoDBError as e:
            self.logger.error(f"Collection failed: {e}")
            sink.report_error(e)
            return False
        except Exception as e:
            self.logger.error(f"Unexpected collection failure for {endpoint.url}: {e}", exc_info=True)
            error = CollectionError(f"unexpected error: {e}", url=endpoint.url)
            error.__cause__ = e
            sink.report_error(error)
            return False
        return True
    return wrapper
