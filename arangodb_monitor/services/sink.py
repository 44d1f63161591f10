"""Sinks receiving metric records and per-endpoint errors from collectors."""

import logging
import threading
from abc import ABC, abstractmethod
from typing import Dict, List

from ..utils.metrics import MetricRecord, Numeric


class Sink(ABC):
    """
    Destination for collected records.

    Both methods may be called concurrently by several endpoint tasks, so
    implementations must do their own synchronization.
    """

    @abstractmethod
    def submit(self, name: str, tags: Dict[str, str], fields: Dict[str, Numeric]) -> None:
        """
        Accept one record.

        Args:
            name: Measurement name (e.g. "arangodb_system")
            tags: Tag set, e.g. {"url": "http://localhost:8529"}
            fields: Field name to numeric value
        """
        pass

    @abstractmethod
    def report_error(self, error: Exception) -> None:
        """Accept one per-endpoint error."""
        pass


class MemorySink(Sink):
    """Keeps records and errors in memory."""

    def __init__(self):
        self._lock = threading.Lock()
        self.records: List[MetricRecord] = []
        self.errors: List[Exception] = []

    def submit(self, name: str, tags: Dict[str, str], fields: Dict[str, Numeric]) -> None:
        record = MetricRecord(name=name, tags=dict(tags), fields=dict(fields))
        with self._lock:
            self.records.append(record)

    def report_error(self, error: Exception) -> None:
        with self._lock:
            self.errors.append(error)

    def records_for(self, url: str) -> List[MetricRecord]:
        """Return records tagged with the given endpoint URL."""
        with self._lock:
            return [r for r in self.records if r.tags.get("url") == url]


class LoggingSink(Sink):
    """
    Writes every record as a structured log line.

    Paired with the JSON formatter from setup_logger, each record becomes
    one JSON object carrying measurement, tags and fields.
    """

    def __init__(self, logger: logging.Logger = None):
        self.logger = logger or logging.getLogger(__name__)
        self.submitted = 0
        self.failed = 0
        self._lock = threading.Lock()

    def submit(self, name: str, tags: Dict[str, str], fields: Dict[str, Numeric]) -> None:
        with self._lock:
            self.submitted += 1
        self.logger.info(
            name,
            extra={"measurement": name, "tags": dict(tags), "fields": dict(fields)}
        )

    def report_error(self, error: Exception) -> None:
        with self._lock:
            self.failed += 1
        self.logger.error(
            f"Collection error: {error}",
            extra={
                "error_type": type(error).__name__,
                "url": getattr(error, "url", None),
            }
        )
