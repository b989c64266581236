"""Step definitions for logger.feature."""

import io
import json
from dataclasses import dataclass, field
from typing import Any

import pytest
from pytest_bdd import given, parsers, then, when

from applogger.core.levels import Level
from applogger.core.logger import Logger
from applogger.core.logging_context import context_with_fields


@dataclass
class LoggerScenarioContext:
    """Shared state between steps in a logger scenario."""

    stream: io.StringIO = field(default_factory=io.StringIO)
    exit_statuses: list[int] = field(default_factory=list)
    logger: Logger | None = None
    derived: Logger | None = None

    def entries(self) -> list[dict[str, Any]]:
        return [json.loads(line) for line in self.stream.getvalue().split("\n") if line]

    def only_entry(self) -> dict[str, Any]:
        entries = self.entries()
        assert len(entries) == 1
        return entries[0]


@pytest.fixture
def ctx() -> LoggerScenarioContext:
    """Fresh scenario context for each test."""
    return LoggerScenarioContext()


# === Given ===


@given("a logger writing to memory")
def given_memory_logger(ctx: LoggerScenarioContext) -> None:
    ctx.logger = Logger.from_streams(ctx.stream, terminator=ctx.exit_statuses.append)


@given(parsers.parse('the logger has default field "{key}" set to "{value}"'))
def given_default_field(ctx: LoggerScenarioContext, key: str, value: str) -> None:
    assert ctx.logger is not None
    ctx.logger = ctx.logger.with_fields({key: value})


# === When ===


@when(
    parsers.parse(
        '"{message}" is logged at {level} with context field "{key}" set to "{value}"'
    )
)
def when_logged_with_context(
    ctx: LoggerScenarioContext, message: str, level: str, key: str, value: str
) -> None:
    assert ctx.logger is not None
    ctx.logger.log(context_with_fields({key: value}), Level.from_name(level), message)


@when(parsers.re(r'"(?P<message>[^"]*)" is logged at (?P<level>[A-Z]+)$'))
def when_logged(ctx: LoggerScenarioContext, message: str, level: str) -> None:
    assert ctx.logger is not None
    ctx.logger.log(None, Level.from_name(level), message)


@when(
    parsers.parse(
        'an HTTP entry "{message}" is logged at {level} '
        "with code {code:d} and duration {duration:f}"
    )
)
def when_http_logged(
    ctx: LoggerScenarioContext, message: str, level: str, code: int, duration: float
) -> None:
    assert ctx.logger is not None
    ctx.logger.log_http(None, Level.from_name(level), message, code, duration)


@when(parsers.parse('a logger is derived with field "{key}" set to "{value}"'))
def when_derived(ctx: LoggerScenarioContext, key: str, value: str) -> None:
    assert ctx.logger is not None
    ctx.derived = ctx.logger.with_fields({key: value})


@when(parsers.parse('the derived logger logs "{message}"'))
def when_derived_logs(ctx: LoggerScenarioContext, message: str) -> None:
    assert ctx.derived is not None
    ctx.derived.info(message)


@when(parsers.parse('the parent logger logs "{message}"'))
def when_parent_logs(ctx: LoggerScenarioContext, message: str) -> None:
    assert ctx.logger is not None
    ctx.logger.info(message)


@when("the logger is closed")
def when_closed(ctx: LoggerScenarioContext) -> None:
    assert ctx.logger is not None
    ctx.logger.close()


# === Then ===


@then("one entry is written")
def then_one_entry(ctx: LoggerScenarioContext) -> None:
    assert len(ctx.entries()) == 1


@then(parsers.parse("{count:d} entries are written"))
def then_n_entries(ctx: LoggerScenarioContext, count: int) -> None:
    assert len(ctx.entries()) == count


@then("no entries are written")
def then_no_entries(ctx: LoggerScenarioContext) -> None:
    assert ctx.stream.getvalue() == ""


@then(parsers.parse('the entry attribute "{key}" is "{value}"'))
def then_attribute(ctx: LoggerScenarioContext, key: str, value: str) -> None:
    assert ctx.only_entry()["attributes"][key] == value


@then(parsers.parse('entry {index:d} attribute "{key}" is "{value}"'))
def then_nth_attribute(
    ctx: LoggerScenarioContext, index: int, key: str, value: str
) -> None:
    assert ctx.entries()[index - 1]["attributes"][key] == value


@then(parsers.parse('entry {index:d} has no attribute "{key}"'))
def then_nth_missing_attribute(
    ctx: LoggerScenarioContext, index: int, key: str
) -> None:
    assert key not in ctx.entries()[index - 1].get("attributes", {})


@then(parsers.parse('the entry level is "{level}"'))
def then_level(ctx: LoggerScenarioContext, level: str) -> None:
    assert ctx.only_entry()["level"] == level


@then(parsers.parse('the entry has no "{name}" field'))
def then_field_missing(ctx: LoggerScenarioContext, name: str) -> None:
    assert name not in ctx.only_entry()


@then(parsers.parse("the entry code is {code:d}"))
def then_code(ctx: LoggerScenarioContext, code: int) -> None:
    assert ctx.only_entry()["code"] == code


@then(parsers.parse("the entry duration is {duration:f}"))
def then_duration(ctx: LoggerScenarioContext, duration: float) -> None:
    assert ctx.only_entry()["duration"] == pytest.approx(duration)


@then(parsers.parse("the process is asked to exit with status {status:d}"))
def then_exit_status(ctx: LoggerScenarioContext, status: int) -> None:
    assert ctx.exit_statuses == [status]
