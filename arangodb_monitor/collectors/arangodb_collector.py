"""ArangoDB statistics collector."""

import asyncio
from dataclasses import dataclass
from typing import List, Optional, Type, TypeVar
import logging

import httpx
from pydantic import BaseModel, ValidationError

from ..config.models import ArangoDBConfig
from ..services.sink import Sink
from .arangodb_stats import ArangoStatistics, LoginRequest, LoginResponse, normalize
from .base import BaseCollector, CycleSummary, safe_gather
from .errors import (
    ConfigurationError,
    ConnectivityError,
    DecodeError,
    MalformedStatisticsError,
    ResponseStatusError,
)
from .http_client import create_http_client


LOGIN_PATH = "/_open/auth"
STATS_PATH = "/_admin/statistics"

SAMPLE_CONFIG = """\
arangodb:
  ## An array of urls endpoints to get results from
  urls:
    - "http://localhost:8529"

  ## Specify timeout duration for slower connections
  # response_timeout: "3s"

  username: "root"
  password: "${ARANGODB_PASSWORD}"

monitoring:
  interval_seconds: 10

logging:
  level: "INFO"
"""

M = TypeVar("M", bound=BaseModel)


@dataclass(frozen=True)
class Endpoint:
    """A parsed endpoint: the URL as configured and the base used for requests."""

    url: str
    base: str


def parse_endpoint(raw: str) -> Endpoint:
    """
    Parse a configured endpoint URL.

    Args:
        raw: URL string from configuration

    Returns:
        Endpoint: Parsed endpoint

    Raises:
        ConfigurationError: If the URL is unusable
    """
    try:
        url = httpx.URL(raw)
    except httpx.InvalidURL as e:
        raise ConfigurationError(f"invalid URL: {e}", url=repr(raw)) from e

    if url.scheme not in ("http", "https") or not url.host:
        raise ConfigurationError("URL must be an absolute http:// or https:// URL", url=raw)

    return Endpoint(url=raw, base=str(url).rstrip("/"))


class ArangoDBCollector(BaseCollector):
    """Collector for ArangoDB server statistics."""

    description = "Read metrics from an ArangoDB server"

    def __init__(
        self,
        config: ArangoDBConfig,
        logger: logging.Logger,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        """
        Initialize ArangoDB collector.

        Args:
            config: Endpoints, credentials and response timeout
            logger: Logger instance
            transport: Optional httpx transport, passed to every cycle's client
        """
        super().__init__(config, logger)
        self.transport = transport

    @staticmethod
    def sample_config() -> str:
        return SAMPLE_CONFIG

    def parse_endpoints(self) -> List[Endpoint]:
        """Parse configured URLs, logging and dropping the ones that fail."""
        endpoints = []
        for raw in self.config.urls:
            try:
                endpoints.append(parse_endpoint(raw))
            except ConfigurationError as e:
                self.logger.warning(f"Could not parse {raw!r}, skipping. Error: {e}")
        return endpoints

    async def gather(self, sink: Sink) -> CycleSummary:
        """
        Collect statistics from all configured endpoints concurrently.

        One task is launched per parsed endpoint and the cycle waits for all
        of them. Failures are reported to the sink per endpoint; this method
        itself does not raise for them.

        Args:
            sink: Receiver of records and per-endpoint errors

        Returns:
            CycleSummary: Counts of skipped, succeeded and failed endpoints
        """
        endpoints = self.parse_endpoints()
        summary = CycleSummary(
            configured=len(self.config.urls),
            skipped=len(self.config.urls) - len(endpoints)
        )

        if not endpoints:
            self.logger.info("No ArangoDB endpoints to collect from")
            return summary

        self.logger.info(f"Gathering statistics from {len(endpoints)} ArangoDB endpoints")

        async with create_http_client(self.config.response_timeout, self.transport) as client:
            tasks = [self._gather_endpoint(endpoint, sink, client) for endpoint in endpoints]
            outcomes = await asyncio.gather(*tasks)

        summary.succeeded = sum(1 for ok in outcomes if ok)
        summary.failed = len(outcomes) - summary.succeeded
        self.logger.info(
            f"Collection cycle finished: {summary.succeeded} succeeded, "
            f"{summary.failed} failed, {summary.skipped} skipped"
        )
        return summary

    @safe_gather
    async def _gather_endpoint(self, endpoint: Endpoint, sink: Sink, client: httpx.AsyncClient):
        """Log in, fetch statistics and submit the three records for one endpoint."""
        token = await self.authenticate(client, endpoint)
        stats = await self.fetch_statistics(client, endpoint, token)

        try:
            groups = normalize(stats)
        except MalformedStatisticsError as e:
            raise MalformedStatisticsError(e.message, url=endpoint.url) from e

        tags = {"url": endpoint.url}
        for name, fields in groups.items():
            sink.submit(name, tags, fields)

        self.logger.debug(f"Collected statistics from {endpoint.url}")

    async def authenticate(self, client: httpx.AsyncClient, endpoint: Endpoint) -> str:
        """
        Exchange the configured credentials for a bearer token.

        Args:
            client: HTTP client for this cycle
            endpoint: Endpoint to log in to

        Returns:
            str: JWT bearer token

        Raises:
            ConnectivityError: If the endpoint cannot be reached
            ResponseStatusError: If the login is answered with a non-2xx status
            DecodeError: If the body is not {"jwt": "..."}
        """
        body = LoginRequest(username=self.config.username, password=self.config.password)
        response = await self._request(
            client, endpoint, "POST", LOGIN_PATH, "Login", json=body.model_dump()
        )
        return self._decode(response, LoginResponse, endpoint, "login").jwt

    async def fetch_statistics(
        self,
        client: httpx.AsyncClient,
        endpoint: Endpoint,
        token: str
    ) -> ArangoStatistics:
        """
        Fetch and decode /_admin/statistics.

        Args:
            client: HTTP client for this cycle
            endpoint: Endpoint to query
            token: Bearer token from authenticate()

        Returns:
            ArangoStatistics: Decoded payload, missing fields zero-valued

        Raises:
            ConnectivityError: If the endpoint cannot be reached
            ResponseStatusError: If the request is answered with a non-2xx status
            DecodeError: If the body does not match the statistics shape
        """
        response = await self._request(
            client, endpoint, "GET", STATS_PATH, "Stats",
            headers={"Authorization": "Bearer " + token}
        )
        return self._decode(response, ArangoStatistics, endpoint, "stats")

    async def _request(
        self,
        client: httpx.AsyncClient,
        endpoint: Endpoint,
        method: str,
        path: str,
        label: str,
        **kwargs
    ) -> httpx.Response:
        try:
            response = await client.request(method, endpoint.base + path, **kwargs)
        except httpx.TransportError as e:
            raise ConnectivityError(
                f"error making HTTP {label} request: {type(e).__name__}: {e}",
                url=endpoint.url
            ) from e

        if not response.is_success:
            raise ResponseStatusError(
                f"HTTP {label} request returned status {response.status_code}",
                url=endpoint.url,
                status_code=response.status_code
            )
        return response

    @staticmethod
    def _decode(response: httpx.Response, model: Type[M], endpoint: Endpoint, label: str) -> M:
        try:
            return model.model_validate_json(response.content)
        except ValidationError as e:
            first = e.errors()[0]
            location = ".".join(str(part) for part in first.get("loc", ())) or "body"
            raise DecodeError(
                f"error decoding {label} body at {location}: {first['msg']}",
                url=endpoint.url
            ) from e
