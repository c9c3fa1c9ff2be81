"""Parser for statsd datagrams.

Supports both the plain statsd protocol and the DogStatsD extension that
carries tags::

    NAME[:VALUE]|TYPE[|@SAMPLE_RATE][|#KEY:VALUE,KEY:VALUE...]

Two things differ from a classic statsd server. Every counter or meter
value, which is a delta, is emitted as a sample of its metric rather than
summed. Sets are not supported, since they need first-class support in the
aggregation layer downstream.
"""

import logging
import random
import re
import uuid
from datetime import datetime, timezone

from metricwire.core.exceptions import ParsingError
from metricwire.core.models import Metric, Quantity, Record
from metricwire.core.numbers import DEFAULT_NUMBER_FORMAT, NumberFormat, parse_number
from metricwire.core.ports import Clock, IdGenerator, RandomSource
from metricwire.core.statsd_types import (
    DEFAULT_REGISTRY,
    METER,
    StatsdType,
    StatsdTypeRegistry,
)

logger = logging.getLogger(__name__)

STATSD_PATTERN = re.compile(
    r"(?P<name>[^:@|]*)(?::(?P<value>[^|]*))?\|(?P<type>[^|]+)"
    r"(?:\|@(?P<sample_rate>[^|]+))?(?:\|#(?P<tags>.+))?"
)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _random_id() -> str:
    return str(uuid.uuid4())


class StatsdToRecordParser:
    """Turns statsd datagrams into records, one record per line.

    Example:
        ```python
        parser = StatsdToRecordParser()
        records = parser.parse(b"page.views:1|c|#env:prod")
        ```
    """

    def __init__(
        self,
        clock: Clock | None = None,
        random_source: RandomSource | None = None,
        id_generator: IdGenerator | None = None,
        registry: StatsdTypeRegistry = DEFAULT_REGISTRY,
        number_format: NumberFormat = DEFAULT_NUMBER_FORMAT,
    ) -> None:
        """Initialize the parser with its collaborators.

        Args:
            clock: Returns the current time; naive values are read as UTC
                (default: system clock).
            random_source: Returns a float in [0, 1) used for sampling
                (default: random.random).
            id_generator: Returns unique record ids (default: UUID4 strings).
            registry: Type token registry.
            number_format: Separators used to read values.
        """
        self._clock = clock or _utc_now
        self._random_source = random_source or random.random
        self._id_generator = id_generator or _random_id
        self._registry = registry
        self._number_format = number_format

    def parse(self, data: bytes) -> list[Record]:
        """Parse a statsd datagram.

        A sample rate of zero, or a failed sampling roll, on any line drops
        the whole datagram: the result is an empty list even when earlier
        lines were valid.

        Args:
            data: Raw datagram, UTF-8 encoded, one sample per line.

        Returns:
            Records in line order.

        Raises:
            ParsingError: If any line is malformed.
        """
        records: list[Record] = []
        for raw in data.split(b"\n"):
            if not raw:
                continue
            try:
                record = self._parse_line(raw)
            except ParsingError as e:
                logger.debug(
                    "Rejecting datagram: %s",
                    e.message,
                    extra={"statsd_line": raw.decode("utf-8", errors="replace")},
                )
                raise
            # @tra: Parser.Statsd.Sampling.DropsDatagram
            if record is None:
                return []
            records.append(record)
        return records

    def _parse_line(self, raw: bytes) -> Record | None:
        """Parse one line; None means sampling dropped it."""
        line = raw.decode("utf-8", errors="replace")
        match = STATSD_PATTERN.fullmatch(line)
        if match is None:
            raise ParsingError("Invalid statsd line", raw)

        name = self._parse_name(raw, match.group("name"))
        statsd_type = self._parse_type(raw, match.group("type"))
        value = self._parse_value(raw, match.group("value"), statsd_type)
        sample_rate = self._parse_sample_rate(
            raw, match.group("sample_rate"), statsd_type
        )
        dimensions = self._parse_tags(raw, match.group("tags"))

        if sample_rate is not None and sample_rate != 1.0:
            if sample_rate == 0.0:
                logger.debug("Dropping datagram: zero sample rate for %s", name)
                return None
            if self._random_source() > sample_rate:
                logger.debug("Dropping datagram: %s sampled out", name)
                return None

        return self._create_record(name, value, statsd_type, dimensions)

    def _parse_name(self, raw: bytes, name: str | None) -> str:
        if not name:
            raise ParsingError("Name not found or empty", raw)
        return name

    def _parse_type(self, raw: bytes, token: str | None) -> StatsdType:
        statsd_type = self._registry.lookup(token)
        if statsd_type is None:
            raise ParsingError("Type not found or unsupported", raw)
        return statsd_type

    def _parse_value(
        self, raw: bytes, value: str | None, statsd_type: StatsdType
    ) -> float:
        if not value:
            if statsd_type == METER:
                return 1.0
            raise ParsingError("Value required but not specified", raw)
        try:
            return parse_number(value, self._number_format)
        except ValueError as e:
            raise ParsingError("Value is not a number", raw) from e

    def _parse_sample_rate(
        self, raw: bytes, sample_rate: str | None, statsd_type: StatsdType
    ) -> float | None:
        if sample_rate is None:
            return None
        if not statsd_type.sampled:
            raise ParsingError(
                f"Sample rate not supported for type {statsd_type.token!r}",
                raw,
            )
        try:
            rate = float(sample_rate)
        except ValueError as e:
            raise ParsingError("Sample rate is not a number", raw) from e
        # NaN fails both comparisons
        if not 0.0 <= rate <= 1.0:
            raise ParsingError("Invalid sample rate", raw)
        return rate

    def _parse_tags(self, raw: bytes, tags: str | None) -> dict[str, str]:
        dimensions: dict[str, str] = {}
        if tags is None:
            return dimensions
        for pair in tags.split(","):
            key, separator, value = pair.partition(":")
            if not separator:
                raise ParsingError(f"Invalid tag {pair!r}", raw)
            if key in dimensions:
                raise ParsingError(f"Duplicate tag {key!r}", raw)
            dimensions[key] = value
        return dimensions

    def _create_record(
        self,
        name: str,
        value: float,
        statsd_type: StatsdType,
        dimensions: dict[str, str],
    ) -> Record:
        metric = Metric(
            type=statsd_type.metric_type,
            values=(Quantity(value=value, unit=statsd_type.unit),),
        )
        return Record(
            id=self._id_generator(),
            time=self._now(),
            dimensions=dimensions,
            metrics={name: metric},
        )

    def _now(self) -> datetime:
        now = self._clock()
        # Naive clock values are taken to be UTC already
        if now.tzinfo is None:
            return now.replace(tzinfo=timezone.utc)
        return now.astimezone(timezone.utc)
