"""Outbound proxy detection and selection for GitHub API calls.

Proxy state is read once into an immutable ``ProxyConfig`` and passed to the
resolver explicitly. Nothing here mutates process-wide state, so resolvers can
be used from several threads without locking.
"""

import fnmatch
import urllib.request
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Dict, List, Mapping, Optional, Tuple
from urllib.parse import SplitResult, quote, unquote, urlsplit

import httpx

from .constants import (
    DEFAULT_HTTP_PROXY_PORT,
    DEFAULT_HTTPS_PROXY_PORT,
    DEFAULT_SOCKS_PROXY_PORT,
    HTTP_NON_PROXY_HOSTS,
    HTTP_PROXY_HOST,
    HTTP_PROXY_PASSWORD,
    HTTP_PROXY_PORT,
    HTTP_PROXY_USER,
    HTTPS_PROXY_HOST,
    HTTPS_PROXY_PORT,
    SOCKS_PROXY_HOST,
    SOCKS_PROXY_PORT,
)
from .errors import ConfigurationError, InvalidProxyEndpointError, ProxyNotDefinedError
from .logging_config import get_logger
from .settings import redact_secret

logger = get_logger()


class ProxyScheme(str, Enum):
    """Which proxy setting a descriptor was selected from."""

    HTTP = "http"
    HTTPS = "https"
    SOCKS = "socks"

    @property
    def url_scheme(self) -> str:
        # HTTPS proxies are still spoken to in plain HTTP (CONNECT).
        return "socks5" if self is ProxyScheme.SOCKS else "http"


@dataclass(frozen=True)
class ProxyCredentials:
    """Username and password for proxy authentication."""

    user: str
    password: str = field(repr=False)


@dataclass(frozen=True)
class ProxyDescriptor:
    """A resolved proxy endpoint."""

    host: str
    port: int
    scheme: ProxyScheme
    credentials: Optional[ProxyCredentials] = None

    @property
    def url(self) -> str:
        """Proxy URL, credentials included and percent-encoded."""
        userinfo = ""
        if self.credentials is not None:
            userinfo = (
                f"{quote(self.credentials.user, safe='')}:"
                f"{quote(self.credentials.password, safe='')}@"
            )
        return f"{self.scheme.url_scheme}://{userinfo}{self.host}:{self.port}"

    def as_httpx_proxy(self) -> httpx.Proxy:
        """Build an ``httpx.Proxy`` for use as ``httpx.Client(proxy=...)``."""
        auth = None
        if self.credentials is not None:
            auth = (self.credentials.user, self.credentials.password)
        return httpx.Proxy(f"{self.scheme.url_scheme}://{self.host}:{self.port}", auth=auth)

    def __str__(self) -> str:
        text = f"{self.scheme.value.upper()} @ {self.host}:{self.port}"
        if self.credentials is not None:
            text += (
                f" (user: {self.credentials.user}, "
                f"password: {redact_secret(self.credentials.password, 0)})"
            )
        return text


def _parse_port(key: str, value: Optional[str]) -> Optional[int]:
    if value is None or not value.strip():
        return None
    try:
        return int(value)
    except ValueError:
        raise ConfigurationError(f"Proxy property '{key}' must be a port number, got: {value!r}")


def _split_proxy_url(value: str) -> SplitResult:
    if "://" not in value:
        value = "http://" + value
    try:
        parsed = urlsplit(value)
        parsed.port  # non-numeric or out-of-range ports raise here
    except ValueError as e:
        raise ConfigurationError(f"Invalid proxy URL {value!r}: {e}")
    if not parsed.hostname:
        raise ConfigurationError(f"Invalid proxy URL {value!r}: missing host")
    return parsed


def _environment_proxies(env: Optional[Mapping[str, str]]) -> Dict[str, str]:
    """``*_proxy`` variables keyed by scheme, lowercase names winning."""
    if env is None:
        return urllib.request.getproxies()
    proxies: Dict[str, str] = {}
    for name, value in env.items():
        if value and name.lower().endswith("_proxy") and name.lower() == name:
            proxies[name[:-6]] = value
    for name, value in env.items():
        key = name.lower()[:-6]
        if value and name.lower().endswith("_proxy") and key not in proxies:
            proxies[key] = value
    return proxies


@dataclass(frozen=True)
class ProxyConfig:
    """Snapshot of the proxy settings of the running process.

    ``user``/``password`` come from the proxy properties and apply to every
    proxy. ``url_credentials`` holds credentials embedded in environment proxy
    URLs, keyed by the proxy host they were given for.

    ``non_proxy_hosts`` are ``http.nonProxyHosts`` globs matched against the
    whole host name; ``no_proxy`` entries are ``NO_PROXY`` domain suffixes.
    """

    http_host: Optional[str] = None
    http_port: Optional[int] = None
    https_host: Optional[str] = None
    https_port: Optional[int] = None
    socks_host: Optional[str] = None
    socks_port: Optional[int] = None
    user: Optional[str] = None
    password: Optional[str] = field(default=None, repr=False)
    non_proxy_hosts: Tuple[str, ...] = ()
    no_proxy: Tuple[str, ...] = ()
    url_credentials: Tuple[Tuple[str, ProxyCredentials], ...] = field(default=(), repr=False)

    @classmethod
    def from_properties(cls, properties: Mapping[str, str]) -> "ProxyConfig":
        """
        Build from JVM-style proxy properties (``http.proxyHost`` and friends).

        Raises:
            ConfigurationError: If a port property is not a number
        """

        def get(key: str) -> Optional[str]:
            value = properties.get(key)
            return value.strip() if value and value.strip() else None

        non_proxy = get(HTTP_NON_PROXY_HOSTS)
        return cls(
            http_host=get(HTTP_PROXY_HOST),
            http_port=_parse_port(HTTP_PROXY_PORT, get(HTTP_PROXY_PORT)),
            https_host=get(HTTPS_PROXY_HOST),
            https_port=_parse_port(HTTPS_PROXY_PORT, get(HTTPS_PROXY_PORT)),
            socks_host=get(SOCKS_PROXY_HOST),
            socks_port=_parse_port(SOCKS_PROXY_PORT, get(SOCKS_PROXY_PORT)),
            user=get(HTTP_PROXY_USER),
            password=properties.get(HTTP_PROXY_PASSWORD) or None,
            non_proxy_hosts=tuple(p.strip() for p in non_proxy.split("|") if p.strip())
            if non_proxy
            else (),
        )

    @classmethod
    def from_environment(
        cls,
        properties: Optional[Mapping[str, str]] = None,
        env: Optional[Mapping[str, str]] = None,
    ) -> "ProxyConfig":
        """
        Build from explicit proxy properties plus the platform proxy settings.

        Each scheme takes its host and port from one place: the properties
        when they set that scheme's host, otherwise the platform settings.
        Platform settings come from ``HTTP_PROXY``/``HTTPS_PROXY``/
        ``ALL_PROXY``/``NO_PROXY`` (or the OS configuration, via
        ``urllib.request.getproxies``) when ``env`` is None, otherwise from
        ``env``.

        Raises:
            ConfigurationError: If a proxy property or proxy URL is malformed
        """
        explicit = cls.from_properties(properties or {})
        proxies = _environment_proxies(env)

        found: Dict[str, SplitResult] = {}
        for scheme in ("http", "https", "all"):
            if proxies.get(scheme):
                found[scheme] = _split_proxy_url(proxies[scheme])

        all_proxy = found.pop("all", None)
        if all_proxy is not None:
            if all_proxy.scheme.startswith("socks"):
                found["socks"] = all_proxy
            else:
                found.setdefault("http", all_proxy)
                found.setdefault("https", all_proxy)

        hosts: Dict[str, Tuple[Optional[str], Optional[int]]] = {}
        url_credentials: Dict[str, ProxyCredentials] = {}
        for scheme, explicit_host, explicit_port in (
            ("http", explicit.http_host, explicit.http_port),
            ("https", explicit.https_host, explicit.https_port),
            ("socks", explicit.socks_host, explicit.socks_port),
        ):
            parsed = found.get(scheme)
            if explicit_host is not None or parsed is None:
                hosts[scheme] = (explicit_host, explicit_port)
                continue
            hosts[scheme] = (parsed.hostname, parsed.port)
            if parsed.username is not None and parsed.password is not None:
                url_credentials.setdefault(
                    parsed.hostname,
                    ProxyCredentials(unquote(parsed.username), unquote(parsed.password)),
                )

        no_proxy = proxies.get("no", "")
        return cls(
            http_host=hosts["http"][0],
            http_port=hosts["http"][1],
            https_host=hosts["https"][0],
            https_port=hosts["https"][1],
            socks_host=hosts["socks"][0],
            socks_port=hosts["socks"][1],
            user=explicit.user,
            password=explicit.password,
            non_proxy_hosts=explicit.non_proxy_hosts,
            no_proxy=tuple(p.strip() for p in no_proxy.split(",") if p.strip()),
            url_credentials=tuple(url_credentials.items()),
        )

    @property
    def credentials(self) -> Optional[ProxyCredentials]:
        """Credentials from the proxy properties, when both user and password are set."""
        if self.user is not None and self.password is not None:
            return ProxyCredentials(self.user, self.password)
        return None

    def credentials_for(self, host: str) -> Optional[ProxyCredentials]:
        """Credentials to present to the proxy at ``host``."""
        if self.credentials is not None:
            return self.credentials
        return dict(self.url_credentials).get(host)

    def reconciled(self) -> "ProxyConfig":
        """Let the HTTP proxy serve HTTPS too when no HTTPS proxy is set."""
        if self.http_host is not None and self.https_host is None:
            return replace(
                self,
                https_host=self.http_host,
                https_port=self.https_port if self.https_port is not None else self.http_port,
            )
        return self


def is_proxy_configured(config: ProxyConfig) -> bool:
    """True iff an HTTP, HTTPS or SOCKS proxy host is set."""
    return any(host is not None for host in (config.http_host, config.https_host, config.socks_host))


def parse_endpoint(endpoint: Optional[str]) -> SplitResult:
    """
    Parse the endpoint a proxy is needed for.

    Raises:
        InvalidProxyEndpointError: If the endpoint is not an absolute URI with a host
    """

    def invalid(reason: str) -> InvalidProxyEndpointError:
        return InvalidProxyEndpointError(
            f"Proxy address syntax invalid for endpoint {endpoint!r}: {reason}",
            endpoint=endpoint,
        )

    if endpoint is None or not endpoint.strip():
        raise invalid("endpoint is empty")
    if any(c.isspace() for c in endpoint):
        raise invalid("whitespace is not allowed")
    try:
        uri = urlsplit(endpoint)
        uri.port  # non-numeric or out-of-range ports raise here
    except ValueError as e:
        raise invalid(str(e))
    if not uri.scheme:
        raise invalid("missing scheme")
    if not uri.hostname:
        raise invalid("missing host")
    return uri


def bypasses_proxy(host: str, config: ProxyConfig) -> bool:
    """
    True if ``host`` must be reached directly.

    ``non_proxy_hosts`` globs must match the whole host name, so ``github.com``
    does not cover ``api.github.com``. ``no_proxy`` entries also match every
    subdomain, and ``*`` matches everything.
    """
    host = host.lower()
    for pattern in config.non_proxy_hosts:
        if fnmatch.fnmatchcase(host, pattern.lower()):
            return True
    for suffix in config.no_proxy:
        suffix = suffix.lower().lstrip(".")
        if suffix == "*" or host == suffix or host.endswith("." + suffix):
            return True
    return False


def select_proxies(uri: SplitResult, config: ProxyConfig) -> List[ProxyDescriptor]:
    """
    Return proxy candidates for ``uri``, best first.

    ``http`` and ``https`` URIs use their scheme's proxy and fall back to
    SOCKS; other schemes only use SOCKS. Bypassed hosts get no candidates.
    """
    if uri.hostname and bypasses_proxy(uri.hostname, config):
        return []

    scheme = uri.scheme.lower()
    candidates = []
    if scheme == "http" and config.http_host is not None:
        candidates.append(
            ProxyDescriptor(
                config.http_host,
                config.http_port or DEFAULT_HTTP_PROXY_PORT,
                ProxyScheme.HTTP,
                config.credentials_for(config.http_host),
            )
        )
    elif scheme == "https" and config.https_host is not None:
        candidates.append(
            ProxyDescriptor(
                config.https_host,
                config.https_port or DEFAULT_HTTPS_PROXY_PORT,
                ProxyScheme.HTTPS,
                config.credentials_for(config.https_host),
            )
        )
    if config.socks_host is not None:
        candidates.append(
            ProxyDescriptor(
                config.socks_host,
                config.socks_port or DEFAULT_SOCKS_PROXY_PORT,
                ProxyScheme.SOCKS,
                config.credentials_for(config.socks_host),
            )
        )
    return candidates


class ProxyResolver:
    """Decide whether a proxy is configured and pick one for an endpoint."""

    def __init__(self, config: ProxyConfig):
        self._config = config

    @property
    def config(self) -> ProxyConfig:
        return self._config

    def is_proxy_configured(self) -> bool:
        return is_proxy_configured(self._config)

    def resolve_proxy(self, endpoint: Optional[str]) -> ProxyDescriptor:
        """
        Select the proxy to reach ``endpoint`` through.

        Args:
            endpoint: Absolute URL of the GitHub API

        Returns:
            The first proxy candidate for the endpoint

        Raises:
            InvalidProxyEndpointError: If the endpoint is not a valid URI
            ProxyNotDefinedError: If no proxy applies to the endpoint
        """
        self._config = config = self._config.reconciled()

        if config.credentials is not None:
            logger.debug(f"Proxy authentication enabled for user {config.credentials.user}")

        try:
            uri = parse_endpoint(endpoint)
        except InvalidProxyEndpointError as e:
            logger.debug(f"Unable to select a proxy: {e}")
            raise

        candidates = select_proxies(uri, config)
        if not candidates:
            message = (
                f"Proxy is not defined for {endpoint}, "
                f"check {HTTP_PROXY_HOST}, {HTTP_PROXY_PORT}"
            )
            logger.debug(message)
            raise ProxyNotDefinedError(message, endpoint=endpoint)

        selected = candidates[0]
        logger.info(f"A proxy has been configured - {selected}")
        return selected
