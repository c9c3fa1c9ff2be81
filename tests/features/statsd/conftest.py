"""BDD step definitions for statsd decoding features."""

from dataclasses import dataclass, field
from datetime import datetime, timezone

import pytest
from pytest_bdd import given, parsers, then, when

from metricwire.core.exceptions import ParsingError
from metricwire.core.models import MetricType, Record, Unit
from metricwire.core.parsers.statsd import StatsdToRecordParser


@dataclass
class DecodingScenarioContext:
    """Shared state between steps in a decoding scenario."""

    rolls: list[float] = field(default_factory=list)
    parser: StatsdToRecordParser | None = None
    records: list[Record] = field(default_factory=list)
    error: ParsingError | None = None


@pytest.fixture
def ctx() -> DecodingScenarioContext:
    """Fresh scenario context for each test."""
    return DecodingScenarioContext()


# === Given ===
@given("a statsd parser with a fixed clock")
def step_parser(ctx: DecodingScenarioContext) -> None:
    ctx.parser = StatsdToRecordParser(
        clock=lambda: datetime(2023, 12, 11, tzinfo=timezone.utc),
        random_source=lambda: ctx.rolls.pop(0),
        id_generator=lambda: "record",
    )


@given(parsers.parse("the random source returns {roll:g}"))
def step_roll(ctx: DecodingScenarioContext, roll: float) -> None:
    ctx.rolls.append(roll)


# === When ===
@when(parsers.parse('the datagram "{datagram}" is decoded'))
def step_decode(ctx: DecodingScenarioContext, datagram: str) -> None:
    assert ctx.parser is not None
    try:
        ctx.records = ctx.parser.parse(datagram.replace("\\n", "\n").encode())
    except ParsingError as e:
        ctx.error = e


# === Then ===
@then(parsers.parse("{count:d} record is produced"))
def step_record_count(ctx: DecodingScenarioContext, count: int) -> None:
    assert ctx.error is None
    assert len(ctx.records) == count


@then("no records are produced")
def step_no_records(ctx: DecodingScenarioContext) -> None:
    assert ctx.error is None
    assert ctx.records == []


@then(parsers.parse('metric "{name}" has type "{metric_type}" and unit "{unit}"'))
def step_metric_type(
    ctx: DecodingScenarioContext, name: str, metric_type: str, unit: str
) -> None:
    metric = ctx.records[0].metrics[name]
    assert metric.type is MetricType[metric_type]
    expected_unit = None if unit == "none" else Unit[unit]
    assert [q.unit for q in metric.values] == [expected_unit]


@then(parsers.parse('metric "{name}" has value {value:g}'))
def step_metric_value(ctx: DecodingScenarioContext, name: str, value: float) -> None:
    assert [q.value for q in ctx.records[0].metrics[name].values] == [value]


@then("the record has dimensions:")
def step_dimensions(ctx: DecodingScenarioContext, datatable: list[list[str]]) -> None:
    expected = {row[0]: row[1] for row in datatable[1:] if len(row) >= 2}
    assert ctx.records[0].dimensions == expected


@then(parsers.parse('a parsing error is raised for "{line}"'))
def step_parsing_error(ctx: DecodingScenarioContext, line: str) -> None:
    assert ctx.error is not None
    assert ctx.error.data == line.encode()
