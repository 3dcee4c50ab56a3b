"""Exceptions and centralized error handling for CLI commands."""

from typing import Optional

import typer


class GitHubConfigError(Exception):
    """Base exception for configuration resolution errors."""


class ConfigurationError(GitHubConfigError):
    """The GitHub repository or another setting cannot be determined."""


class ProxyResolutionError(GitHubConfigError):
    """A proxy was expected but could not be resolved."""

    def __init__(self, message: str, endpoint: Optional[str] = None):
        self.message = message
        self.endpoint = endpoint
        super().__init__(message)


class InvalidProxyEndpointError(ProxyResolutionError):
    """The endpoint to route through the proxy is not a valid URI."""


class ProxyNotDefinedError(ProxyResolutionError):
    """No proxy candidate is available for the endpoint."""


class ErrorHandler:
    """Centralized error handling for CLI commands."""

    @staticmethod
    def handle_configuration_error(error: ConfigurationError) -> None:
        """
        Handle repository or settings resolution errors.

        Args:
            error: The ConfigurationError that occurred
        """
        typer.echo(f"Configuration error: {error}", err=True)

    @staticmethod
    def handle_proxy_error(error: ProxyResolutionError) -> None:
        """
        Handle proxy resolution errors with hints.

        Args:
            error: The ProxyResolutionError that occurred
        """
        typer.echo(f"Proxy error: {error.message}", err=True)
        if error.endpoint is not None:
            typer.echo(f"  Endpoint: {error.endpoint}", err=True)
        if isinstance(error, ProxyNotDefinedError):
            typer.echo(
                "  Hint: Set http.proxyHost and http.proxyPort, or HTTPS_PROXY",
                err=True,
            )
        elif isinstance(error, InvalidProxyEndpointError):
            typer.echo(
                "  Hint: github.endpoint must be an absolute URL such as https://api.github.com",
                err=True,
            )

    @staticmethod
    def handle_file_error(error: Exception, path: Optional[str] = None) -> None:
        """
        Handle file I/O errors.

        Args:
            error: The exception that occurred
            path: Optional path that caused the error
        """
        if path:
            typer.echo(f"File error for '{path}': {error}", err=True)
        else:
            typer.echo(f"File error: {error}", err=True)

    @staticmethod
    def handle_unexpected_error(error: Exception, debug: bool = False) -> None:
        """
        Handle unexpected errors with optional traceback.

        Args:
            error: The exception that occurred
            debug: If True, print full traceback
        """
        typer.echo(f"Unexpected error: {error}", err=True)
        if debug:
            import traceback

            typer.echo(traceback.format_exc(), err=True)

