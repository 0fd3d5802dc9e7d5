"""Tests for Registry and RequestBuilder."""

from __future__ import annotations

import pytest

from frontline.config.models import FrontlineConfig
from frontline.domain.errors import ConfigurationError, RequestNotFoundError
from frontline.infrastructure.caches import MemoryCache
from frontline.infrastructure.loggers import MemoryLogger, StructlogLogger
from frontline.services.mapper import RequestMapper
from frontline.services.registry import BackendSpec, Registry, import_string
from tests.fakes import MockCommand, MockRequestMapper


class TestImportString:
    def test_colon_path(self) -> None:
        assert import_string("tests.fakes:MockCommand") is MockCommand

    def test_dotted_path(self) -> None:
        assert import_string("tests.fakes.MockCommand") is MockCommand

    def test_builtin_alias(self) -> None:
        assert import_string("memory", {"memory": MemoryCache}) is MemoryCache

    def test_objects_pass_through(self) -> None:
        assert import_string(MockCommand) is MockCommand

    def test_missing_module(self) -> None:
        with pytest.raises(ConfigurationError, match="Cannot import"):
            import_string("no_such_module_xyz:Thing")

    def test_missing_attribute(self) -> None:
        with pytest.raises(ConfigurationError, match="no attribute"):
            import_string("tests.fakes:Nope")

    def test_bare_name(self) -> None:
        with pytest.raises(ConfigurationError, match="expected"):
            import_string("justaname")


class TestBackendSpec:
    def test_create_passes_name_and_params(self) -> None:
        cache = BackendSpec("memory", {"ttl": 5}).create("pages", {"memory": MemoryCache})
        assert isinstance(cache, MemoryCache)
        assert cache.name == "pages"
        assert cache.default_ttl == 5

    def test_bad_params(self) -> None:
        with pytest.raises(ConfigurationError, match="Cannot construct"):
            BackendSpec(MemoryCache, {"bogus": 1}).create("pages", {})


class TestRequestBuilder:
    def test_build(self) -> None:
        reg = Registry()
        (
            reg.request("home", caching=True)
            .command("a", MockCommand)
            .param("value", source="get:v", default="x")
            .command("b", "tests.fakes:MockCommand")
        )
        request = reg.get_request("home")
        assert request.command_names() == ["a", "b"]
        assert request.caching
        first = next(iter(request))
        assert first.params["value"].source == "get:v"
        assert first.params["value"].default == "x"

    def test_duplicate_command(self) -> None:
        builder = Registry().request("r").command("a", MockCommand)
        with pytest.raises(ConfigurationError, match="duplicate"):
            builder.command("a", MockCommand)

    def test_param_before_command(self) -> None:
        with pytest.raises(ConfigurationError, match="before any command"):
            Registry().request("r").param("x")

    def test_flag_setters(self) -> None:
        reg = Registry()
        reg.request("r").command("a", MockCommand).set_caching().set_explain()
        request = reg.get_request("r")
        assert request.caching and request.explain


class TestRequests:
    def test_unknown(self) -> None:
        with pytest.raises(RequestNotFoundError) as exc_info:
            Registry().get_request("nope")
        assert exc_info.value.name == "nope"
        assert not exc_info.value.internal

    def test_internal_requires_flag(self) -> None:
        reg = Registry()
        reg.request("hidden", internal=True).command("a", MockCommand)
        assert not reg.has_request("hidden")
        assert reg.has_request("hidden", allow_internal=True)
        with pytest.raises(RequestNotFoundError) as exc_info:
            reg.get_request("hidden")
        assert exc_info.value.internal
        assert reg.get_request("hidden", allow_internal=True).internal

    def test_built_request_is_reused(self) -> None:
        reg = Registry()
        reg.request("r").command("a", MockCommand)
        assert reg.get_request("r") is reg.get_request("r")

    def test_lazy_import(self) -> None:
        reg = Registry()
        reg.request("broken").command("a", "no_such_module_xyz:Thing")
        assert reg.has_request("broken")
        with pytest.raises(ConfigurationError):
            reg.get_request("broken")

    def test_add_request(self) -> None:
        reg = Registry()
        reg.request("r").command("a", MockCommand)
        built = reg.get_request("r")
        other = Registry()
        other.add_request(built)
        assert other.get_request("r") is built

    def test_request_names_and_describe(self) -> None:
        reg = Registry()
        reg.request("a").command("x", MockCommand)
        reg.request("b", internal=True).command("y", "never.imported:Thing")
        assert reg.request_names() == ["a", "b"]
        assert reg.describe("b") == {
            "name": "b",
            "commands": ["y"],
            "caching": False,
            "explain": False,
            "internal": True,
        }
        with pytest.raises(RequestNotFoundError):
            reg.describe("c")


class TestCollaborators:
    def test_create_backends(self) -> None:
        reg = Registry()
        reg.logger("mem", "memory").logger("log", "structlog", categories=["Fatal Error"])
        reg.cache("pages", "memory", default=True)
        loggers = reg.create_loggers()
        assert isinstance(loggers["mem"], MemoryLogger)
        assert isinstance(loggers["log"], StructlogLogger)
        assert loggers["log"].categories == frozenset({"Fatal Error"})
        assert reg.create_caches()["pages"].is_default

    def test_request_mapper_default_and_override(self) -> None:
        reg = Registry()
        assert reg.get_request_mapper() is RequestMapper
        reg.set_request_mapper("tests.fakes:MockRequestMapper")
        assert reg.get_request_mapper() is MockRequestMapper


class TestFromConfig:
    def test_builds_everything(self) -> None:
        config = FrontlineConfig.model_validate(
            {
                "app": {"base_url": "/app/"},
                "request_mapper": "tests.fakes:MockRequestMapper",
                "context": {"site": "example"},
                "loggers": {"fail": {"invokes": "memory"}},
                "caches": {"pages": {"invokes": "memory", "default": True, "ttl": 30}},
                "datasources": {"db": {"invokes": "sql", "url": "sqlite:///:memory:"}},
                "requests": {
                    "home": {
                        "caching": True,
                        "commands": [
                            {
                                "name": "greet",
                                "invokes": "tests.fakes:MockCommand",
                                "params": {"value": {"from": "get:who", "value": "world"}},
                                "listeners": {"done": ["tests.fakes:record_event"]},
                            }
                        ],
                    },
                    "secret": {"internal": True},
                },
            }
        )
        reg = Registry.from_config(config)
        assert reg.base_url == "/app/"
        assert reg.initial_context == {"site": "example"}
        assert reg.get_request_mapper() is MockRequestMapper
        assert set(reg.get_loggers()) == {"fail"}
        assert reg.get_caches()["pages"].params == {"default": True, "ttl": 30}
        assert reg.get_datasources()["db"].params == {"url": "sqlite:///:memory:"}

        request = reg.get_request("home")
        assert request.caching
        descriptor = next(iter(request))
        assert descriptor.params["value"].source == "get:who"
        assert descriptor.params["value"].default == "world"
        assert len(descriptor.listeners["done"]) == 1
        assert not reg.has_request("secret")
