"""Metric record emitted to sinks."""

from dataclasses import dataclass, field
from typing import Dict, Optional, Union
import time


Numeric = Union[int, float]


@dataclass
class MetricRecord:
    """One named group of metric fields sharing a tag set."""

    name: str
    tags: Dict[str, str]
    fields: Dict[str, Numeric] = field(default_factory=dict)
    timestamp: Optional[float] = None

    def __post_init__(self):
        """Set timestamp if not provided."""
        if self.timestamp is None:
            self.timestamp = time.time()
