"""Shared pytest fixtures for frontline tests."""

from __future__ import annotations

import io
import logging
from collections.abc import Generator
from pathlib import Path

import pytest
from click.testing import CliRunner

from frontline.domain.sources import InputSources
from frontline.infrastructure.loggers import MemoryLogger
from frontline.services.dispatcher import Dispatcher
from frontline.services.registry import Registry
from tests.fakes import CommandForward, CommandRepeater, MockCommand, MockPrintBarCommand


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def _restore_logging() -> Generator[None]:
    """Restore root and ``frontline`` logger state after each test.

    The CLI configures logging on every invocation; its stderr handler must
    not leak into later tests.
    """
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    fl = logging.getLogger("frontline")
    fl_level = fl.level
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)
    fl.setLevel(fl_level)


@pytest.fixture
def registry() -> Registry:
    """Registry mirroring the classic handle-request scenarios.

    - ``testHandleRequest1``: one MockCommand storing ``"test"``
    - ``testHandleRequest2``: MockCommand with a default ``value``
    - ``testHandleRequest3``: a repeater reading the context
    - ``testForwardRequest1``: forwards to ``testHandleRequest2``
    - ``testRequestCache2``: a cacheable request printing ``bar``
    """
    reg = Registry()
    reg.logger("fail", MemoryLogger)

    reg.request("testHandleRequest1").command("mockCommand", MockCommand)
    (
        reg.request("testHandleRequest2")
        .command("mockCommand2", MockCommand)
        .param("value", source="get:value", default="From Default")
    )
    (
        reg.request("testHandleRequest3")
        .command("mockCommand3", MockCommand)
        .param("value", default="From Default 2")
        .command("repeater", CommandRepeater)
        .param("cmd", source="context:mockCommand3")
    )
    (
        reg.request("testForwardRequest1")
        .command("forwarder", CommandForward)
        .param("forward", default="testHandleRequest2")
    )
    reg.request("testRequestCache2", caching=True).command("printer", MockPrintBarCommand)
    return reg


@pytest.fixture
def sink() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def dispatcher(registry: Registry, sink: io.StringIO) -> Dispatcher:
    """Dispatcher over the shared registry writing to an in-memory sink."""
    d = Dispatcher(registry, sources=InputSources(), output=sink)
    try:
        yield d
    finally:
        d.close()


@pytest.fixture
def app_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolated working directory for CLI tests, with no config env override."""
    monkeypatch.delenv("FRONTLINE_CONFIG", raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


def memory_messages(d: Dispatcher, name: str = "fail") -> list[str]:
    """Messages recorded by the named MemoryLogger of *d*."""
    logger = d.loggers.get_logger(name)
    assert isinstance(logger, MemoryLogger)
    return logger.messages


DEMO_CONFIG = """\
[app]
name = "demo"

[loggers.quiet]
invokes = "memory"

[requests.default]
[[requests.default.commands]]
name = "echo"
invokes = "tests.fakes:EchoCommand"
params.text = { value = "home page" }

[requests.hello]
[[requests.hello.commands]]
name = "printer"
invokes = "tests.fakes:MockPrintBarCommand"

[requests.echo]
caching = true
[[requests.echo.commands]]
name = "echo"
invokes = "tests.fakes:EchoCommand"
params.text = { from = "get:text post:text arg:1", value = "nothing" }

[requests.jump]
[[requests.jump.commands]]
name = "forwarder"
invokes = "tests.fakes:CommandForward"
params.forward = { value = "_hidden" }

[requests._hidden]
internal = true
[[requests._hidden.commands]]
name = "secret"
invokes = "tests.fakes:EchoCommand"
params.text = { from = "cookie:token session:token", value = "hidden" }

[requests.halt]
[[requests.halt.commands]]
name = "fatal"
invokes = "tests.fakes:FatalCommand"

[requests.warn]
[[requests.warn.commands]]
name = "rec"
invokes = "tests.fakes:RecoverableCommand"
[[requests.warn.commands]]
name = "printer"
invokes = "tests.fakes:MockPrintBarCommand"

[requests.boom]
[[requests.boom.commands]]
name = "boom"
invokes = "tests.fakes:ExplodingCommand"
"""


@pytest.fixture
def demo_app(app_dir: Path) -> Path:
    """App directory holding a frontline.toml built from the test doubles."""
    (app_dir / "frontline.toml").write_text(DEMO_CONFIG)
    return app_dir
