"""metricwire: statsd datagram decoding and regex template replacement."""

from metricwire.config import Config, IngestConfig, LoggingConfig
from metricwire.core.exceptions import (
    ConfigurationError,
    MetricwireError,
    ParsingError,
    ReplacementError,
)
from metricwire.core.models import Metric, MetricType, Quantity, Record, Unit
from metricwire.core.numbers import NumberFormat, parse_number
from metricwire.core.parsers.statsd import StatsdToRecordParser
from metricwire.core.ports import RecordParserPort, RecordSinkPort
from metricwire.core.replacement import replace_all
from metricwire.core.statsd_types import DEFAULT_REGISTRY, StatsdType, StatsdTypeRegistry

__all__ = [
    "DEFAULT_REGISTRY",
    "Config",
    "ConfigurationError",
    "IngestConfig",
    "LoggingConfig",
    "Metric",
    "MetricType",
    "MetricwireError",
    "NumberFormat",
    "ParsingError",
    "Quantity",
    "Record",
    "RecordParserPort",
    "RecordSinkPort",
    "ReplacementError",
    "StatsdToRecordParser",
    "StatsdType",
    "StatsdTypeRegistry",
    "Unit",
    "parse_number",
    "replace_all",
]
