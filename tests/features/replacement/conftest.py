"""BDD step definitions for replacement features."""

import re
from dataclasses import dataclass, field

import pytest
from pytest_bdd import given, parsers, then, when

from metricwire.core.exceptions import ReplacementError
from metricwire.core.replacement import replace_all


@dataclass
class ReplacementScenarioContext:
    """Shared state between steps in a replacement scenario."""

    pattern: re.Pattern[str] | None = None
    variables: dict[str, str] = field(default_factory=dict)
    result: str | None = None
    error: ReplacementError | None = None


@pytest.fixture
def ctx() -> ReplacementScenarioContext:
    """Fresh scenario context for each test."""
    return ReplacementScenarioContext()


@given(parsers.parse('the pattern "{pattern}"'))
def step_pattern(ctx: ReplacementScenarioContext, pattern: str) -> None:
    ctx.pattern = re.compile(pattern)


@given(parsers.parse('the pattern "{pattern}" with named groups {first} and {second}'))
def step_named_pattern(
    ctx: ReplacementScenarioContext, pattern: str, first: str, second: str
) -> None:
    """Wrap the first and last path segments in the named groups."""
    head, middle, tail = pattern.split("/")
    ctx.pattern = re.compile(
        f"(?P<{first}>{head})/{middle}/(?P<{second}>{tail})"
    )


@given("the variables:")
def step_variables(
    ctx: ReplacementScenarioContext, datatable: list[list[str]]
) -> None:
    ctx.variables = {row[0]: row[1] for row in datatable[1:] if len(row) >= 2}


@when(parsers.parse('"{text}" is replaced with "{template}"'))
def step_replace(ctx: ReplacementScenarioContext, text: str, template: str) -> None:
    assert ctx.pattern is not None
    try:
        ctx.result = replace_all(ctx.pattern, text, template, ctx.variables)
    except ReplacementError as e:
        ctx.error = e


@then(parsers.parse('the result is "{expected}"'))
def step_result(ctx: ReplacementScenarioContext, expected: str) -> None:
    assert ctx.error is None
    assert ctx.result == expected


@then("a replacement error is raised")
def step_error(ctx: ReplacementScenarioContext) -> None:
    assert ctx.error is not None
    assert ctx.result is None
