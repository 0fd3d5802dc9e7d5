"""Tests for Request, CommandDescriptor and ParamSpec."""

from __future__ import annotations

import pytest

from frontline.domain.errors import ConfigurationError
from frontline.domain.request import CommandDescriptor, ParamSpec, Request
from tests.fakes import MockCommand


class TestParamSpec:
    def test_tokens(self) -> None:
        assert ParamSpec("id", "get:id  post:id").tokens == ("get:id", "post:id")

    def test_no_source(self) -> None:
        assert ParamSpec("id").tokens == ()


class TestCommandDescriptor:
    def test_factory_called_once_with_name(self) -> None:
        calls: list[str] = []

        def factory(name: str) -> MockCommand:
            calls.append(name)
            return MockCommand(name)

        descriptor = CommandDescriptor.create("cmd", factory)
        assert calls == ["cmd"]
        assert descriptor.instance.name == "cmd"

    def test_class_name(self) -> None:
        descriptor = CommandDescriptor.create("cmd", MockCommand)
        assert descriptor.class_name == "tests.fakes.MockCommand"

    def test_params_are_read_only(self) -> None:
        descriptor = CommandDescriptor.create("cmd", MockCommand, params={"a": ParamSpec("a")})
        with pytest.raises(TypeError):
            descriptor.params["b"] = ParamSpec("b")  # type: ignore[index]

    def test_listeners_stored_as_tuples(self) -> None:
        handler = print
        descriptor = CommandDescriptor.create("cmd", MockCommand, listeners={"done": [handler]})
        assert descriptor.listeners["done"] == (handler,)

    def test_factory_not_callable(self) -> None:
        with pytest.raises(ConfigurationError, match="not callable"):
            CommandDescriptor.create("cmd", "not-a-class")

    def test_instance_without_execute(self) -> None:
        with pytest.raises(ConfigurationError, match="no execute"):
            CommandDescriptor.create("cmd", lambda name: object())


class TestRequest:
    def test_iterates_in_order(self) -> None:
        request = Request(
            "r",
            commands=(
                CommandDescriptor.create("b", MockCommand),
                CommandDescriptor.create("a", MockCommand),
            ),
        )
        assert [d.name for d in request] == ["b", "a"]
        assert request.command_names() == ["b", "a"]
        assert len(request) == 2

    def test_duplicate_command_names_rejected(self) -> None:
        with pytest.raises(ConfigurationError, match="duplicate"):
            Request(
                "r",
                commands=(
                    CommandDescriptor.create("a", MockCommand),
                    CommandDescriptor.create("a", MockCommand),
                ),
            )

    def test_flags(self) -> None:
        request = Request("r", caching=True, explain=True)
        assert request.is_caching()
        assert request.is_explaining()
        assert not request.internal
