"""Wire protocol parsers producing records."""

from metricwire.core.parsers.statsd import StatsdToRecordParser

__all__ = ["StatsdToRecordParser"]
