"""Port interfaces for parsers, record sinks and injected collaborators.

The core depends only on these interfaces. Collaborators that the parser
consumes (clock, random source, id generator) are plain callables so tests
can swap them for deterministic stand-ins.
"""

from collections.abc import Callable
from datetime import datetime
from typing import Protocol, runtime_checkable

from metricwire.core.models import Record

# Returns the current time as a timezone-aware UTC datetime.
Clock = Callable[[], datetime]
# Returns a uniformly distributed float in [0.0, 1.0).
RandomSource = Callable[[], float]
# Returns a new unique record identifier.
IdGenerator = Callable[[], str]


@runtime_checkable
class RecordParserPort(Protocol):
    """Port for parsers turning wire data into records.

    Implementations raise ParsingError when the data cannot be decoded.
    """

    def parse(self, data: bytes) -> list[Record]:
        """Parse raw data into zero or more records."""
        ...


@runtime_checkable
class RecordSinkPort(Protocol):
    """Port for the consumer of decoded records.

    Aggregation and storage live behind this interface.
    """

    async def write(self, record: Record) -> None:
        """Accept a decoded record."""
        ...
