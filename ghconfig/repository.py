"""Resolve the GitHub ``owner/repo`` identifier from settings."""

import re
from typing import Optional

from .constants import GITHUB_REPO, LINKS_SOURCES, LINKS_SOURCES_DEV
from .errors import ConfigurationError
from .logging_config import get_logger
from .settings import ConfigSource

# Both patterns are matched against the whole value, never searched.
_GIT_SSH_RE = re.compile(r".*@github\.com:(.*/.*)\.git")
_GIT_HTTP_RE = re.compile(r"https?://github\.com/(.*/.*)\.git")

logger = get_logger()


def match_ssh_url(url: str) -> Optional[str]:
    """Return ``owner/repo`` from an SSH remote such as ``git@github.com:owner/repo.git``."""
    m = _GIT_SSH_RE.fullmatch(url)
    return m.group(1) if m else None


def match_http_url(url: str) -> Optional[str]:
    """Return ``owner/repo`` from an HTTP(S) remote such as ``https://github.com/owner/repo.git``."""
    m = _GIT_HTTP_RE.fullmatch(url)
    return m.group(1) if m else None


def extract_repo_from_git_url(url_or_repo: str) -> Optional[str]:
    """
    Extract ``owner/repo`` from a GitHub remote URL.

    Only ``.git``-suffixed github.com remotes are recognised. Anything else,
    including a bare ``owner/repo``, yields None.
    """
    return match_ssh_url(url_or_repo) or match_http_url(url_or_repo)


def _is_not_blank(value: Optional[str]) -> bool:
    return value is not None and value.strip() != ""


def _repo_from_property(config: ConfigSource) -> str:
    url_or_repo = config.get_string(GITHUB_REPO) or ""
    repo = extract_repo_from_git_url(url_or_repo)
    if repo is not None:
        return repo
    if "/" not in url_or_repo:
        logger.warning(
            f"Property '{GITHUB_REPO}' is {url_or_repo!r}, which does not look like owner/repo"
        )
    return url_or_repo


def _repo_from_scm_links(config: ConfigSource) -> str:
    dev_url = config.get_string(LINKS_SOURCES_DEV)
    url = config.get_string(LINKS_SOURCES)

    repo = None
    if _is_not_blank(dev_url):
        repo = extract_repo_from_git_url(dev_url)
    if repo is None and _is_not_blank(url):
        repo = extract_repo_from_git_url(url)
    if repo is None:
        raise ConfigurationError(
            "Unable to parse GitHub repository name for this project. "
            "Only github.com remotes ending in '.git' are recognised. "
            "Please check configuration:\n"
            f"  * {LINKS_SOURCES_DEV}: {dev_url}\n"
            f"  * {LINKS_SOURCES}: {url}"
        )
    return repo


def resolve_repository(config: ConfigSource) -> str:
    """
    Resolve the repository to publish to.

    The explicit repository property wins; otherwise the developer SCM link
    is tried before the plain SCM link.

    Args:
        config: Settings to read

    Returns:
        Repository identifier, normally ``owner/repo``

    Raises:
        ConfigurationError: If no repository can be determined
    """
    if config.has_key(GITHUB_REPO):
        return _repo_from_property(config)
    if _is_not_blank(config.get_string(LINKS_SOURCES_DEV)) or _is_not_blank(
        config.get_string(LINKS_SOURCES)
    ):
        return _repo_from_scm_links(config)
    raise ConfigurationError(
        "Unable to determine GitHub repository name for this project. "
        f"Please provide it using property '{GITHUB_REPO}' "
        f"or configure property '{LINKS_SOURCES}'."
    )
