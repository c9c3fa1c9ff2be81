"""Core domain models for decoded metric data."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class MetricType(Enum):
    """Kind of metric a sample belongs to."""

    COUNTER = "counter"
    GAUGE = "gauge"
    TIMER = "timer"


class Unit(Enum):
    """Unit of measure attached to a quantity."""

    NANOSECOND = "nanosecond"
    MICROSECOND = "microsecond"
    MILLISECOND = "millisecond"
    SECOND = "second"
    MINUTE = "minute"
    HOUR = "hour"
    DAY = "day"


@dataclass(frozen=True)
class Quantity:
    """A numeric value with an optional unit.

    Attributes:
        value: The measured value.
        unit: Unit of measure, or None for dimensionless values.
    """

    value: float
    unit: Unit | None = None


@dataclass(frozen=True)
class Metric:
    """Samples of a single metric within a record.

    Attributes:
        type: The metric kind (counter, gauge or timer).
        values: Ordered quantities sampled for this metric.
    """

    type: MetricType
    values: tuple[Quantity, ...] = ()


@dataclass(frozen=True)
class Record:
    """A set of metrics sharing an id, a timestamp and dimensions.

    Attributes:
        id: Unique identifier of the record.
        time: Timezone-aware UTC timestamp.
        dimensions: Key-value pairs describing where the metrics come from.
        metrics: Metric name to Metric.
    """

    id: str
    time: datetime
    dimensions: dict[str, str] = field(default_factory=dict)
    metrics: dict[str, Metric] = field(default_factory=dict)
