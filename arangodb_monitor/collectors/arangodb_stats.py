"""Wire models for the ArangoDB login and statistics APIs, and field extraction."""

from typing import Annotated, Any, Dict, List, Sequence

from pydantic import AliasChoices, BaseModel, Field, model_validator

from ..utils.metrics import Numeric
from .errors import MalformedStatisticsError


SYSTEM_MEASUREMENT = "arangodb_system"
SERVER_MEASUREMENT = "arangodb_server"
CLIENT_MEASUREMENT = "arangodb_client"

# Upper bounds (seconds) of the requestTime distribution, in server order
REQUEST_TIME_BUCKETS = ("req_0.01", "req_0.05", "req_0.1", "req_0.2", "req_0.5", "req_1")


class LoginRequest(BaseModel):
    """Body of POST /_open/auth."""
    username: str
    password: str


class LoginResponse(BaseModel):
    """Body returned by POST /_open/auth."""
    jwt: str


class _StatsSection(BaseModel):
    """Base for statistics sections: null values fall back to the field default."""

    @model_validator(mode="before")
    @classmethod
    def drop_nulls(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data


# Numbers must arrive as JSON numbers; "5" is a decode error, not 5
Counter = Annotated[int, Field(strict=True, ge=0)]
Gauge = Annotated[float, Field(strict=True)]


class ArangoSystem(_StatsSection):
    """Process-level figures from the `system` section."""
    majorPageFaults: Counter = 0
    minorPageFaults: Counter = 0
    numberOfThreads: Counter = 0
    residentSize: Gauge = 0.0
    systemTime: Gauge = 0.0
    userTime: Gauge = 0.0
    virtualSize: Counter = 0


class ArangoServer(_StatsSection):
    """Host-level figures from the `server` section."""
    physicalMemory: Counter = 0
    uptime: Gauge = 0.0


class ArangoRequestTime(_StatsSection):
    """The `client.requestTime` distribution."""
    # Sample count, keyed "requestTime" like its section; "count" is accepted too
    count: Counter = Field(
        default=0, validation_alias=AliasChoices("requestTime", "count")
    )
    counts: List[Counter] = Field(default_factory=list)
    sum: Gauge = 0.0


class ArangoClient(_StatsSection):
    requestTime: ArangoRequestTime = Field(default_factory=ArangoRequestTime)


class ArangoStatistics(_StatsSection):
    """Decoded body of GET /_admin/statistics. Unknown keys are ignored."""
    client: ArangoClient = Field(default_factory=ArangoClient)
    server: ArangoServer = Field(default_factory=ArangoServer)
    system: ArangoSystem = Field(default_factory=ArangoSystem)


def extract_buckets(counts: Sequence[int]) -> Dict[str, int]:
    """
    Map the ordered histogram counts onto the fixed bucket names.

    Counts past the last named bucket (the open-ended "> 1s" bucket) are
    ignored.

    Args:
        counts: Bucket counts as reported by the server

    Returns:
        Dict[str, int]: Bucket name to count

    Raises:
        MalformedStatisticsError: If fewer counts than named buckets are present
    """
    if len(counts) < len(REQUEST_TIME_BUCKETS):
        raise MalformedStatisticsError(
            "malformed statistics: insufficient histogram buckets "
            f"(expected at least {len(REQUEST_TIME_BUCKETS)}, got {len(counts)})"
        )
    return {name: counts[i] for i, name in enumerate(REQUEST_TIME_BUCKETS)}


def system_fields(stats: ArangoStatistics) -> Dict[str, Numeric]:
    system = stats.system
    return {
        "majorPageFaults": system.majorPageFaults,
        "minorPageFaults": system.minorPageFaults,
        "numberOfThreads": system.numberOfThreads,
        "residentSize": system.residentSize,
        "systemTime": system.systemTime,
        "userTime": system.userTime,
        "virtualSize": system.virtualSize,
    }


def server_fields(stats: ArangoStatistics) -> Dict[str, Numeric]:
    return {
        "physicalMemory": stats.server.physicalMemory,
        "uptime": stats.server.uptime,
    }


def client_fields(stats: ArangoStatistics) -> Dict[str, Numeric]:
    request_time = stats.client.requestTime
    fields: Dict[str, Numeric] = dict(extract_buckets(request_time.counts))
    fields["count"] = request_time.count
    fields["sum"] = request_time.sum
    return fields


def normalize(stats: ArangoStatistics) -> Dict[str, Dict[str, Numeric]]:
    """
    Flatten decoded statistics into the three emitted field groups.

    Args:
        stats: Decoded statistics payload

    Returns:
        Dict[str, Dict[str, Numeric]]: Measurement name to field mapping,
        in system, server, client order

    Raises:
        MalformedStatisticsError: If the request time histogram is too short
    """
    return {
        SYSTEM_MEASUREMENT: system_fields(stats),
        SERVER_MEASUREMENT: server_fields(stats),
        CLIENT_MEASUREMENT: client_fields(stats),
    }
