"""NDJSON encoder for records."""

import json
from collections.abc import Iterable
from typing import Any

from metricwire.core.models import Metric, Record


def _encode_metric(metric: Metric) -> dict[str, Any]:
    return {
        "type": metric.type.value,
        "values": [
            {
                "value": quantity.value,
                "unit": quantity.unit.value if quantity.unit is not None else None,
            }
            for quantity in metric.values
        ],
    }


def encode_records(records: Iterable[Record]) -> str:
    """Encode records to newline-delimited JSON.

    Args:
        records: An iterable of Record objects.

    Returns:
        NDJSON string with one JSON object per line.
        Empty string if no records.
    """
    lines = []
    for record in records:
        obj = {
            "id": record.id,
            "time": record.time.isoformat(),
            "dimensions": record.dimensions,
            "metrics": {
                name: _encode_metric(metric) for name, metric in record.metrics.items()
            },
        }
        lines.append(json.dumps(obj))

    if not lines:
        return ""

    return "\n".join(lines) + "\n"
