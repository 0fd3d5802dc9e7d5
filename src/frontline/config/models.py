"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, frontline.toml only holds
overrides plus the request map. A minimal app needs one ``[requests.*]``
table.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# --- frontline.toml sections ---


class AppConfig(BaseModel):
    """[app] section."""

    model_config = {"frozen": True}

    name: str = "frontline"
    default_request: str = "default"
    not_found_request: str = "404"
    max_forward_depth: int = Field(default=16, ge=0)
    base_url: str = "/"


class PluginsConfig(BaseModel):
    """[plugins] section."""

    model_config = {"frozen": True}

    entry_points: bool = True
    local_dir: str = ".frontline/plugins"


class BackendConfig(BaseModel):
    """[loggers.*], [caches.*] and [datasources.*] tables.

    ``invokes`` names the backend (builtin alias or ``module:Class``);
    every other key is passed to the backend constructor.
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    invokes: str

    @property
    def params(self) -> dict[str, Any]:
        return dict(self.model_extra or {})


class ParamConfig(BaseModel):
    """One entry of ``params`` on a command: ``{ from = "...", value = ... }``."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    from_: str | None = Field(default=None, alias="from")
    value: Any = None


class CommandConfig(BaseModel):
    """One ``[[requests.<name>.commands]]`` entry."""

    model_config = {"frozen": True}

    name: str
    invokes: str
    params: dict[str, ParamConfig] = Field(default_factory=dict)
    listeners: dict[str, list[str]] = Field(default_factory=dict)


class RequestConfig(BaseModel):
    """[requests.<name>] table."""

    model_config = {"frozen": True}

    caching: bool = False
    explain: bool = False
    internal: bool = False
    commands: list[CommandConfig] = Field(default_factory=list)


class FrontlineConfig(BaseModel):
    """Root configuration composing all sections."""

    model_config = {"frozen": True}

    app: AppConfig = Field(default_factory=AppConfig)
    plugins: PluginsConfig = Field(default_factory=PluginsConfig)
    request_mapper: str | None = None
    context: dict[str, Any] = Field(default_factory=dict)
    loggers: dict[str, BackendConfig] = Field(default_factory=dict)
    caches: dict[str, BackendConfig] = Field(default_factory=dict)
    datasources: dict[str, BackendConfig] = Field(default_factory=dict)
    requests: dict[str, RequestConfig] = Field(default_factory=dict)
