"""Registry of statsd wire type tokens.

The default registry is built once when this module is imported and is
read-only afterwards, so it can be shared by any number of parsers and
threads without locking.
"""

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from types import MappingProxyType

from metricwire.core.models import MetricType, Unit


@dataclass(frozen=True)
class StatsdType:
    """Semantics of a statsd type token.

    Attributes:
        token: Wire token (e.g. "c", "ms").
        metric_type: Metric kind records of this type are emitted as.
        unit: Unit attached to emitted quantities, if any.
        sampled: Whether a sample rate may accompany this type.
    """

    token: str
    metric_type: MetricType
    unit: Unit | None = None
    sampled: bool = False


COUNTER = StatsdType("c", MetricType.COUNTER, sampled=True)
GAUGE = StatsdType("g", MetricType.GAUGE)
HISTOGRAM = StatsdType("h", MetricType.TIMER, sampled=True)
METER = StatsdType("m", MetricType.COUNTER)
TIMER = StatsdType("ms", MetricType.TIMER, Unit.MILLISECOND, sampled=True)
# Sets ("s") are not supported: they need first-class support downstream.


class StatsdTypeRegistry:
    """Immutable lookup of StatsdType entries by wire token."""

    def __init__(self, types: Iterable[StatsdType]) -> None:
        """Build the registry.

        Args:
            types: Entries to register; tokens must be unique.

        Raises:
            TypeError: If an entry is not a StatsdType.
            ValueError: If a token is registered twice.
        """
        by_token: dict[str, StatsdType] = {}
        for statsd_type in types:
            if not isinstance(statsd_type, StatsdType):
                raise TypeError(f"expected StatsdType, got {type(statsd_type).__name__}")
            if statsd_type.token in by_token:
                raise ValueError(f"token {statsd_type.token!r} already registered")
            by_token[statsd_type.token] = statsd_type
        self._by_token = MappingProxyType(by_token)

    def lookup(self, token: str | None) -> StatsdType | None:
        """Return the entry for a token, or None if it is unknown."""
        if token is None:
            return None
        return self._by_token.get(token)

    def __contains__(self, token: object) -> bool:
        return token in self._by_token

    def __iter__(self) -> Iterator[StatsdType]:
        return iter(self._by_token.values())

    def __len__(self) -> int:
        return len(self._by_token)


DEFAULT_REGISTRY = StatsdTypeRegistry([COUNTER, GAUGE, HISTOGRAM, METER, TIMER])
