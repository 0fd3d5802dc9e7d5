"""AppContext: shared Click context for all commands.

Created once by the root CLI group and passed to subcommands via
``@click.pass_obj``. The registry and plugin manager are built lazily so
``--help`` and ``--version`` never import application command classes.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import click

from frontline.domain.errors import FrontlineError
from frontline.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from frontline.config.settings import FrontlineSettings
    from frontline.domain.ports import TextSink
    from frontline.domain.sources import InputSources
    from frontline.plugins.manager import PluginManager
    from frontline.services.dispatcher import Dispatcher
    from frontline.services.registry import Registry
    from frontline.services.result import DispatchResult


class AppContext:
    """State shared by every subcommand of one CLI invocation."""

    def __init__(self, settings: FrontlineSettings) -> None:
        self.settings = settings
        self._registry: Registry | None = None
        self._plugins: PluginManager | None = None

        from frontline.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

    @property
    def output_settings(self) -> OutputSettings:
        return OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )

    @property
    def registry(self) -> Registry:
        """The request registry (built lazily from settings)."""
        if self._registry is None:
            from frontline.services.registry import Registry

            self._registry = Registry.from_config(self.settings)
        return self._registry

    @property
    def plugins(self) -> PluginManager:
        """Plugin manager with entry-point and local plugins loaded."""
        if self._plugins is None:
            from frontline.plugins.manager import PluginManager

            self._plugins = PluginManager()
            self._plugins.discover_and_load(
                entry_points=self.settings.plugins.entry_points,
                local_dir=self.settings.app_root / self.settings.plugins.local_dir,
            )
        return self._plugins

    def dispatcher(
        self,
        *,
        sources: InputSources | None = None,
        output: TextSink | None = None,
    ) -> Dispatcher:
        """A dispatcher over the shared registry. Configuration errors exit 1."""
        from frontline.services.dispatcher import Dispatcher

        try:
            return Dispatcher.from_settings(
                self.settings,
                registry=self.registry,
                sources=sources,
                output=output,
                plugins=self.plugins,
            )
        except FrontlineError as exc:
            raise click.ClickException(str(exc)) from exc

    def default_identifier(self, identifier: str | None) -> str:
        return identifier or self.settings.app.default_request

    def emit(
        self, result: DispatchResult, *, summary_to_stderr: bool = False, **extra: Any
    ) -> None:
        """Format and output a DispatchResult with correct exit semantics.

        * Success: the summary goes to stdout (stderr when the command's
          own output already owns stdout). Warnings go to stderr in human
          mode; in JSON mode they are part of the payload.
        * Failure: written to stderr, exit code 1.
        """
        settings = self.output_settings
        text = format_result(result, settings=settings, **extra)
        if not result.ok:
            click.echo(text, err=not settings.json_output)
            raise SystemExit(1)
        if settings.json_output:
            click.echo(text)
            return
        if summary_to_stderr and not settings.verbose:
            for warning in result.warnings:
                click.echo(f"WARNING: {warning}", err=True)
            return
        if text:
            click.echo(text, err=summary_to_stderr)
