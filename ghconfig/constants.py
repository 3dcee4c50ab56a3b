"""Centralized constants for GitHub publishing configuration."""

# Property keys
GITHUB_REPO = "github.repository"
GITHUB_PULL_REQUEST = "github.pullRequest"
GITHUB_OAUTH = "github.oauth"
GITHUB_ENDPOINT = "github.endpoint"
GITHUB_DISABLE_INLINE_COMMENTS = "github.disableInlineComments"
LINKS_SOURCES_DEV = "links.scm_dev"
LINKS_SOURCES = "links.scm"

# Defaults
DEFAULT_ENDPOINT = "https://api.github.com"
MAX_GLOBAL_ISSUES = 10

# Token display
TOKEN_VISIBLE_CHARS = 4

# Token environment variables, checked in order
GITHUB_TOKEN_ENV_VARS = ("GH_TOKEN", "GITHUB_TOKEN")

# Proxy system properties
HTTP_PROXY_HOST = "http.proxyHost"
HTTP_PROXY_PORT = "http.proxyPort"
HTTPS_PROXY_HOST = "https.proxyHost"
HTTPS_PROXY_PORT = "https.proxyPort"
SOCKS_PROXY_HOST = "socksProxyHost"
SOCKS_PROXY_PORT = "socksProxyPort"
HTTP_PROXY_USER = "http.proxyUser"
HTTP_PROXY_PASSWORD = "http.proxyPassword"
HTTP_NON_PROXY_HOSTS = "http.nonProxyHosts"

# Default proxy ports per scheme
DEFAULT_HTTP_PROXY_PORT = 80
DEFAULT_HTTPS_PROXY_PORT = 443
DEFAULT_SOCKS_PROXY_PORT = 1080
