"""Tests for repository resolution."""

import logging

import pytest

from ghconfig.constants import GITHUB_REPO, LINKS_SOURCES, LINKS_SOURCES_DEV
from ghconfig.errors import ConfigurationError
from ghconfig.repository import (
    extract_repo_from_git_url,
    match_http_url,
    match_ssh_url,
    resolve_repository,
)
from ghconfig.settings import Settings


class TestMatchSshUrl:
    """Tests for match_ssh_url function."""

    def test_standard_ssh_remote(self):
        assert match_ssh_url("git@github.com:acme/widgets.git") == "acme/widgets"

    def test_dashes_and_dots(self):
        assert match_ssh_url("git@github.com:my-org/my.repo.git") == "my-org/my.repo"

    def test_prefix_before_user_is_accepted(self):
        """Anything up to the '@' belongs to the match."""
        assert match_ssh_url("scm:git:git@github.com:acme/widgets.git") == "acme/widgets"

    def test_missing_git_suffix(self):
        assert match_ssh_url("git@github.com:acme/widgets") is None

    def test_other_host(self):
        assert match_ssh_url("git@gitlab.com:acme/widgets.git") is None

    def test_trailing_text_does_not_match(self):
        """The pattern must cover the whole value, not a substring."""
        assert match_ssh_url("git@github.com:acme/widgets.git (mirror)") is None


class TestMatchHttpUrl:
    """Tests for match_http_url function."""

    def test_https_remote(self):
        assert match_http_url("https://github.com/acme/widgets.git") == "acme/widgets"

    def test_http_remote(self):
        assert match_http_url("http://github.com/acme/widgets.git") == "acme/widgets"

    def test_missing_git_suffix(self):
        assert match_http_url("https://github.com/acme/widgets") is None

    def test_other_host(self):
        assert match_http_url("https://gitlab.com/acme/widgets.git") is None

    def test_leading_text_does_not_match(self):
        assert match_http_url("scm:git:https://github.com/acme/widgets.git") is None

    def test_ssh_remote_is_not_http(self):
        assert match_http_url("git@github.com:acme/widgets.git") is None


class TestExtractRepoFromGitUrl:
    """Tests for extract_repo_from_git_url function."""

    @pytest.mark.parametrize(
        "url",
        [
            "git@github.com:acme/widgets.git",
            "https://github.com/acme/widgets.git",
            "http://github.com/acme/widgets.git",
        ],
    )
    def test_recognised_remotes(self, url):
        assert extract_repo_from_git_url(url) == "acme/widgets"

    @pytest.mark.parametrize(
        "value",
        [
            "acme/widgets",
            "https://github.com/acme/widgets",
            "https://bitbucket.org/acme/widgets.git",
            "",
        ],
    )
    def test_unrecognised_values(self, value):
        assert extract_repo_from_git_url(value) is None


class TestResolveRepository:
    """Tests for resolve_repository function."""

    def test_explicit_url(self):
        config = Settings({GITHUB_REPO: "https://github.com/acme/widgets.git"})
        assert resolve_repository(config) == "acme/widgets"

    def test_explicit_owner_repo_unchanged(self):
        config = Settings({GITHUB_REPO: "acme/widgets"})
        assert resolve_repository(config) == "acme/widgets"

    def test_explicit_property_wins_over_scm_links(self):
        config = Settings(
            {
                GITHUB_REPO: "acme/explicit",
                LINKS_SOURCES_DEV: "git@github.com:acme/dev.git",
                LINKS_SOURCES: "https://github.com/acme/plain.git",
            }
        )
        assert resolve_repository(config) == "acme/explicit"

    def test_developer_link_tried_first(self):
        config = Settings(
            {
                LINKS_SOURCES_DEV: "git@github.com:acme/dev.git",
                LINKS_SOURCES: "https://github.com/acme/plain.git",
            }
        )
        assert resolve_repository(config) == "acme/dev"

    def test_plain_link_used_when_developer_link_unparsable(self):
        config = Settings(
            {
                LINKS_SOURCES_DEV: "https://gitlab.com/acme/dev",
                LINKS_SOURCES: "https://github.com/acme/plain.git",
            }
        )
        assert resolve_repository(config) == "acme/plain"

    def test_plain_link_alone(self):
        config = Settings({LINKS_SOURCES: "https://github.com/acme/plain.git"})
        assert resolve_repository(config) == "acme/plain"

    def test_unparsable_links_report_both_values(self):
        config = Settings(
            {
                LINKS_SOURCES_DEV: "git@github.com:acme/widgets.git?ref=main",
                LINKS_SOURCES: "https://github.com/acme/widgets",
            }
        )
        with pytest.raises(ConfigurationError) as exc_info:
            resolve_repository(config)
        message = str(exc_info.value)
        assert "Unable to parse GitHub repository name" in message
        assert f"{LINKS_SOURCES_DEV}: git@github.com:acme/widgets.git?ref=main" in message
        assert f"{LINKS_SOURCES}: https://github.com/acme/widgets" in message

    def test_nothing_configured(self):
        with pytest.raises(ConfigurationError, match="Unable to determine GitHub repository"):
            resolve_repository(Settings())

    def test_blank_links_count_as_unset(self):
        config = Settings({LINKS_SOURCES_DEV: "   ", LINKS_SOURCES: ""})
        with pytest.raises(ConfigurationError, match=GITHUB_REPO):
            resolve_repository(config)

    def test_value_without_slash_is_kept_and_logged(self, caplog):
        config = Settings({GITHUB_REPO: "widgets"})
        with caplog.at_level(logging.WARNING, logger="ghconfig"):
            assert resolve_repository(config) == "widgets"
        assert "does not look like owner/repo" in caplog.text
