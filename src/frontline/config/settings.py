"""Unified settings: CLI flags, env vars, and TOML config in one object.

Priority chain (highest to lowest):
  1. Init kwargs: CLI flags passed by Click
  2. Env vars: ``FRONTLINE_*`` prefix
  3. TOML file: ``frontline.toml`` discovered via walk-up
  4. Code defaults: baked into the section models
"""

from __future__ import annotations

import threading
import tomllib
from pathlib import Path
from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from frontline.config.discovery import find_config
from frontline.config.models import (
    AppConfig,
    BackendConfig,
    PluginsConfig,
    RequestConfig,
)


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Read settings from a discovered ``frontline.toml``."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = {}
        if toml_path and toml_path.is_file():
            raw = toml_path.read_text(encoding="utf-8")
            try:
                self._data = tomllib.loads(raw)
            except tomllib.TOMLDecodeError as exc:
                import click

                msg = f"Invalid TOML in {toml_path}: {exc}"
                raise click.ClickException(msg) from exc

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        val = self._data.get(field_name)
        return val, field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        return self._data


# TOML path handed to settings_customise_sources during construction.
_tls = threading.local()


class FrontlineSettings(BaseSettings):
    """Everything the CLI needs to build a dispatcher, frozen after construction.

    Attributes:
        app_root: Directory holding ``frontline.toml`` (or CWD if none).
        config_path: The TOML file actually used, if any.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "FRONTLINE_",
        "env_nested_delimiter": "__",
    }

    app_root: Path = Field(default_factory=Path.cwd)
    config_path: Path | None = None

    # --- CLI flags ---
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False

    # --- TOML sections ---
    app: AppConfig = Field(default_factory=AppConfig)
    plugins: PluginsConfig = Field(default_factory=PluginsConfig)
    request_mapper: str | None = None
    context: dict[str, Any] = Field(default_factory=dict)
    loggers: dict[str, BackendConfig] = Field(default_factory=dict)
    caches: dict[str, BackendConfig] = Field(default_factory=dict)
    datasources: dict[str, BackendConfig] = Field(default_factory=dict)
    requests: dict[str, RequestConfig] = Field(default_factory=dict)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert the TOML source between env vars and defaults."""
        toml_path = getattr(_tls, "toml_path", None)
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, toml_path),
        )

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        app_root: Path | None = None,
        **cli_flags: Any,
    ) -> FrontlineSettings:
        """Construct settings for a CLI invocation.

        An explicit *config_path* that does not exist is ignored rather
        than treated as an error, so ``--version`` and ``--help`` always work.
        """
        toml_path: Path | None = None
        if config_path:
            p = Path(config_path)
            if p.is_file():
                toml_path = p
        else:
            toml_path = find_config(app_root)

        resolved_root = app_root
        if resolved_root is None:
            resolved_root = toml_path.parent if toml_path else Path.cwd()

        _tls.toml_path = toml_path
        try:
            return cls(app_root=resolved_root, config_path=toml_path, **cli_flags)
        finally:
            _tls.toml_path = None
