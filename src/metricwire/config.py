"""Configuration for metricwire, read from the environment."""

import os
from collections.abc import Mapping
from dataclasses import dataclass, field

from metricwire.core.exceptions import ConfigurationError
from metricwire.core.numbers import NumberFormat

ENV_PREFIX = "METRICWIRE_"
LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
LOG_FORMATS = {"json", "text"}


@dataclass(frozen=True)
class LoggingConfig:
    level: str = "INFO"
    format: str = "json"


@dataclass(frozen=True)
class IngestConfig:
    """Settings of the HTTP ingest endpoint.

    Attributes:
        path: Path accepting POSTed datagrams.
        max_datagram_bytes: Largest accepted request body.
    """

    path: str = "/statsd"
    max_datagram_bytes: int = 65535


@dataclass(frozen=True)
class Config:
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    number_format: NumberFormat = field(default_factory=NumberFormat)
    ingest: IngestConfig = field(default_factory=IngestConfig)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Config":
        """Build a config from METRICWIRE_* environment variables.

        Unset variables keep their defaults.

        Raises:
            ConfigurationError: If a variable holds an invalid value.
        """
        env = os.environ if environ is None else environ

        def get(name: str, default: str) -> str:
            return env.get(ENV_PREFIX + name, default)

        level = get("LOG_LEVEL", LoggingConfig.level).upper()
        if level not in LOG_LEVELS:
            raise ConfigurationError(f"invalid log level: {level!r}")
        log_format = get("LOG_FORMAT", LoggingConfig.format).lower()
        if log_format not in LOG_FORMATS:
            raise ConfigurationError(f"invalid log format: {log_format!r}")

        try:
            number_format = NumberFormat(
                grouping_separator=get(
                    "GROUPING_SEPARATOR", NumberFormat.grouping_separator
                ),
                decimal_separator=get("DECIMAL_SEPARATOR", NumberFormat.decimal_separator),
            )
        except ValueError as e:
            raise ConfigurationError(str(e)) from e

        path = get("INGEST_PATH", IngestConfig.path)
        if not path.startswith("/"):
            raise ConfigurationError(f"ingest path must start with '/': {path!r}")
        raw_max = get("MAX_DATAGRAM_BYTES", str(IngestConfig.max_datagram_bytes))
        try:
            max_datagram_bytes = int(raw_max)
        except ValueError as e:
            raise ConfigurationError(f"invalid max datagram bytes: {raw_max!r}") from e
        if max_datagram_bytes <= 0:
            raise ConfigurationError(f"invalid max datagram bytes: {raw_max!r}")

        return cls(
            logging=LoggingConfig(level=level, format=log_format),
            number_format=number_format,
            ingest=IngestConfig(path=path, max_datagram_bytes=max_datagram_bytes),
        )
