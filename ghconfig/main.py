"""Main CLI entry point."""

import json
import os
from pathlib import Path
from typing import List, Optional

import typer

from .configuration import GitHubConfiguration
from .errors import ConfigurationError, ErrorHandler, ProxyResolutionError
from .logging_config import setup_logging
from .proxy import ProxyConfig
from .settings import Settings

app = typer.Typer(help="Inspect the configuration used to publish pull-request analysis to GitHub")


def load_settings(properties_file: Optional[Path], properties: Optional[List[str]]) -> Settings:
    """Settings from the properties file, overridden by -D assignments."""
    settings = Settings()
    if properties_file:
        if not properties_file.exists():
            raise FileNotFoundError(f"Properties file not found: {properties_file}")
        settings = Settings.from_properties_file(properties_file)
    return settings.merged(Settings.from_pairs(properties or []))


def _build_configuration(
    properties_file: Optional[Path], properties: Optional[List[str]], verbose: bool
) -> GitHubConfiguration:
    setup_logging(verbose)
    try:
        settings = load_settings(properties_file, properties)
        proxy_config = ProxyConfig.from_environment(properties=settings.as_dict())
    except FileNotFoundError as e:
        ErrorHandler.handle_file_error(e, str(properties_file))
        raise typer.Exit(1)
    except ConfigurationError as e:
        ErrorHandler.handle_configuration_error(e)
        raise typer.Exit(1)
    return GitHubConfiguration(settings, proxy_config)


@app.command()
def show(
    properties: Optional[List[str]] = typer.Option(
        None, "--property", "-D", help="Set a property, e.g. -D github.repository=owner/repo"
    ),
    properties_file: Optional[Path] = typer.Option(
        None, "--properties-file", "-f", help="Read properties from a key=value file"
    ),
    format: str = typer.Option("json", "--format", help="Output format: json or markdown"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """Show every resolved publishing setting."""
    config = _build_configuration(properties_file, properties, verbose)
    try:
        snapshot = config.snapshot()
    except ConfigurationError as e:
        ErrorHandler.handle_configuration_error(e)
        raise typer.Exit(1)
    except ProxyResolutionError as e:
        ErrorHandler.handle_proxy_error(e)
        raise typer.Exit(1)
    except Exception as e:
        ErrorHandler.handle_unexpected_error(e, debug=bool(os.getenv("DEBUG")))
        raise typer.Exit(1)

    if format == "markdown":
        md = f"""# GitHub Publishing Configuration

- Repository: {snapshot.repository}
- Pull request: #{snapshot.pull_request}
- Enabled: {snapshot.enabled}
- Endpoint: {snapshot.endpoint}
- Inline comments: {snapshot.inline_comments}
- OAuth token: {snapshot.oauth or 'N/A'}
- Proxy: {snapshot.proxy or 'none'}
"""
        typer.echo(md)
    else:
        typer.echo(json.dumps(snapshot.to_dict(), ensure_ascii=False, indent=2))


@app.command()
def repo(
    properties: Optional[List[str]] = typer.Option(
        None, "--property", "-D", help="Set a property, e.g. -D github.repository=owner/repo"
    ),
    properties_file: Optional[Path] = typer.Option(
        None, "--properties-file", "-f", help="Read properties from a key=value file"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """Print the resolved owner/repo."""
    config = _build_configuration(properties_file, properties, verbose)
    try:
        typer.echo(config.repository())
    except ConfigurationError as e:
        ErrorHandler.handle_configuration_error(e)
        raise typer.Exit(1)


@app.command()
def proxy(
    properties: Optional[List[str]] = typer.Option(
        None, "--property", "-D", help="Set a property, e.g. -D github.repository=owner/repo"
    ),
    properties_file: Optional[Path] = typer.Option(
        None, "--properties-file", "-f", help="Read properties from a key=value file"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """Print the proxy used to reach the GitHub endpoint."""
    config = _build_configuration(properties_file, properties, verbose)
    if not config.is_proxy_connection_enabled():
        typer.echo("No proxy configured", err=True)
        raise typer.Exit(0)
    try:
        typer.echo(str(config.http_proxy()))
    except ProxyResolutionError as e:
        ErrorHandler.handle_proxy_error(e)
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
