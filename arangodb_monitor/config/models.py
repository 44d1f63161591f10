"""Pydantic configuration models for the ArangoDB monitor."""

from pydantic import BaseModel, Field, field_validator
from typing import List, Union
import re


_DURATION_PART = re.compile(r'(\d+(?:\.\d+)?)(ms|s|m|h)')
_DURATION_UNITS = {"ms": 0.001, "s": 1.0, "m": 60.0, "h": 3600.0}


def parse_duration(value: str) -> float:
    """
    Parse a duration string such as "3s", "500ms" or "1m30s" into seconds.

    Args:
        value: Duration string

    Returns:
        float: Duration in seconds

    Raises:
        ValueError: If the string is not a valid duration
    """
    text = value.strip()
    if not text:
        raise ValueError('Duration must not be empty')

    # A bare number is taken as seconds
    try:
        return float(text)
    except ValueError:
        pass

    total = 0.0
    position = 0
    for match in _DURATION_PART.finditer(text):
        if match.start() != position:
            break
        total += float(match.group(1)) * _DURATION_UNITS[match.group(2)]
        position = match.end()

    if position != len(text):
        raise ValueError(f'Invalid duration: {value!r} (use e.g. "3s", "500ms", "1m30s")')
    return total


class ArangoDBConfig(BaseModel):
    """Endpoints and credentials for ArangoDB statistics collection."""
    # URLs are checked at collection time so one bad entry only drops itself
    urls: List[str] = Field(default_factory=lambda: ["http://localhost:8529"])
    response_timeout: float = 3.0  # seconds, 0 disables the timeout
    username: str = "root"
    password: str = ""

    @field_validator('response_timeout', mode='before')
    @classmethod
    def validate_timeout(cls, v: Union[str, int, float]) -> float:
        """Accept seconds or a duration string, reject negative values."""
        if isinstance(v, str):
            v = parse_duration(v)
        if isinstance(v, (int, float)) and v < 0:
            raise ValueError('response_timeout must not be negative')
        return v


class MonitoringConfig(BaseModel):
    """Collection schedule configuration."""
    interval_seconds: int = Field(default=10, ge=1)


class LoggingConfig(BaseModel):
    """Logging configuration."""
    level: str = "INFO"

    @field_validator('level')
    @classmethod
    def validate_level(cls, v: str) -> str:
        level = v.upper()
        if level not in ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'):
            raise ValueError(f'Unknown log level: {v}')
        return level


class MonitorConfig(BaseModel):
    """Root configuration model."""
    arangodb: ArangoDBConfig = Field(default_factory=ArangoDBConfig)
    monitoring: MonitoringConfig = Field(default_factory=MonitoringConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
