"""Configuration facade used by the pull-request publisher."""

from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional

from .constants import (
    GITHUB_DISABLE_INLINE_COMMENTS,
    GITHUB_ENDPOINT,
    GITHUB_OAUTH,
    GITHUB_PULL_REQUEST,
    MAX_GLOBAL_ISSUES,
)
from .errors import ProxyNotDefinedError
from .proxy import ProxyConfig, ProxyDescriptor, ProxyResolver
from .repository import resolve_repository
from .settings import ConfigSource, get_github_token, redact_secret


@dataclass
class PublishConfig:
    """Resolved values, as reported by ``ghconfig show``."""

    enabled: bool
    repository: str
    pull_request: int
    endpoint: Optional[str]
    inline_comments: bool
    oauth: Optional[str] = None
    proxy: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class GitHubConfiguration:
    """
    Effective configuration for posting analysis results to a pull request.

    Args:
        settings: Source of the ``github.*`` and ``links.*`` properties
        proxy_config: Proxy settings. Defaults to the platform settings
            (``ProxyConfig.from_environment()``).
    """

    MAX_GLOBAL_ISSUES = MAX_GLOBAL_ISSUES

    def __init__(self, settings: ConfigSource, proxy_config: Optional[ProxyConfig] = None):
        self._settings = settings
        self._proxy = ProxyResolver(
            proxy_config if proxy_config is not None else ProxyConfig.from_environment()
        )
        self._repository: Optional[str] = None

    def pull_request_number(self) -> int:
        return self._settings.get_int(GITHUB_PULL_REQUEST)

    def repository(self) -> str:
        """Repository as ``owner/repo``, resolved once. Raises ConfigurationError."""
        if self._repository is None:
            self._repository = resolve_repository(self._settings)
        return self._repository

    def oauth(self) -> Optional[str]:
        """OAuth token from settings, falling back to GH_TOKEN / GITHUB_TOKEN."""
        return self._settings.get_string(GITHUB_OAUTH) or get_github_token()

    def is_enabled(self) -> bool:
        return self._settings.has_key(GITHUB_PULL_REQUEST)

    def endpoint(self) -> Optional[str]:
        return self._settings.get_string(GITHUB_ENDPOINT)

    def try_report_issues_inline(self) -> bool:
        return not self._settings.get_boolean(GITHUB_DISABLE_INLINE_COMMENTS)

    def is_proxy_connection_enabled(self) -> bool:
        return self._proxy.is_proxy_configured()

    def http_proxy(self) -> ProxyDescriptor:
        """Proxy for the configured endpoint. Raises ProxyResolutionError."""
        return self._proxy.resolve_proxy(self.endpoint())

    def snapshot(self) -> PublishConfig:
        """All resolved values, with secrets redacted."""
        token = self.oauth()
        proxy = None
        if self.is_proxy_connection_enabled():
            try:
                proxy = str(self.http_proxy())
            except ProxyNotDefinedError:
                proxy = f"direct (no proxy applies to {self.endpoint()})"
        return PublishConfig(
            enabled=self.is_enabled(),
            repository=self.repository(),
            pull_request=self.pull_request_number(),
            endpoint=self.endpoint(),
            inline_comments=self.try_report_issues_inline(),
            oauth=redact_secret(token) if token else None,
            proxy=proxy,
        )
