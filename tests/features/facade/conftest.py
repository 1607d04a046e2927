"""BDD step definitions for facade features."""

import ast
import re
from dataclasses import dataclass, field
from typing import Any

import pytest
from pytest_bdd import given, parsers, then, when

from udpstats.adapters.transport.in_memory import InMemoryTransport
from udpstats.core.facade import Stats


@dataclass
class FacadeScenarioContext:
    """Shared state between steps in a facade scenario."""

    draw: float = 0.0
    stats: Stats | None = None
    transport: InMemoryTransport | None = None
    result: Any = None
    lines: list[str] = field(default_factory=list)


@pytest.fixture
def ctx() -> FacadeScenarioContext:
    """Fresh scenario context for each test."""
    return FacadeScenarioContext()


# === Given ===
@given(parsers.parse('a stats client with prefix "{prefix}"'))
def step_stats_client(ctx: FacadeScenarioContext, prefix: str) -> None:
    ctx.transport = InMemoryTransport(rng=lambda: ctx.draw)
    ctx.stats = Stats(ctx.transport, prefix=prefix)


@given(parsers.parse("the sampler draws {draw:g}"))
def step_sampler(ctx: FacadeScenarioContext, draw: float) -> None:
    ctx.draw = draw


# === When ===
@when(parsers.parse('I increment "{name}"'))
def step_increment(ctx: FacadeScenarioContext, name: str) -> None:
    ctx.result = ctx.stats.increment(name)


@when(parsers.parse('I increment "{name}" at sample rate {rate:g}'))
def step_increment_sampled(ctx: FacadeScenarioContext, name: str, rate: float) -> None:
    ctx.result = ctx.stats.increment(name, rate)


@when(parsers.parse('I record the outcome {outcome} for "{name}"'))
def step_increment_on(ctx: FacadeScenarioContext, outcome: str, name: str) -> None:
    ctx.result = ctx.stats.increment_on(name, ast.literal_eval(outcome))


@when(parsers.parse('I send a batch incrementing "{first}" and gauging "{second}" at {value:d}'))
def step_bulk(ctx: FacadeScenarioContext, first: str, second: str, value: int) -> None:
    with ctx.stats.bulk() as batch:
        batch.increment(first)
        batch.gauge(second, value)
    ctx.result = batch.result


@when(parsers.parse('I time "{name}" around a block returning "{value}"'))
def step_time(ctx: FacadeScenarioContext, name: str, value: str) -> None:
    ctx.result = ctx.stats.time(name, lambda: value)


# === Then ===
@then(parsers.parse('the collector receives "{line}"'))
def step_receives(ctx: FacadeScenarioContext, line: str) -> None:
    assert ctx.transport.lines == [line]


@then("nothing is sent")
def step_nothing_sent(ctx: FacadeScenarioContext) -> None:
    assert ctx.transport.lines == []


@then(parsers.parse("the call reports {expected}"))
def step_call_reports(ctx: FacadeScenarioContext, expected: str) -> None:
    assert ctx.result is ast.literal_eval(expected)


@then(parsers.parse("the outcome {outcome} is returned"))
def step_outcome_returned(ctx: FacadeScenarioContext, outcome: str) -> None:
    assert ctx.result == ast.literal_eval(outcome)


@then(parsers.parse('a single datagram is sent with lines "{first}" and "{second}"'))
def step_single_datagram(ctx: FacadeScenarioContext, first: str, second: str) -> None:
    assert ctx.transport.lines == [f"{first}\n{second}"]
    assert ctx.result is True


@then(parsers.parse('the block result "{value}" is returned'))
def step_block_result(ctx: FacadeScenarioContext, value: str) -> None:
    assert ctx.result == value


@then(parsers.parse('one timing is sent for "{bucket}"'))
def step_one_timing(ctx: FacadeScenarioContext, bucket: str) -> None:
    assert len(ctx.transport.lines) == 1
    assert re.fullmatch(rf"{re.escape(bucket)}:\d+\|ms", ctx.transport.lines[0])
