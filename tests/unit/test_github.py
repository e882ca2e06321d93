"""Tests for publishing through the GitHub CLI."""

from __future__ import annotations

import subprocess
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from release_ip.exceptions import PublishError
from release_ip.forge.github import GitHubCliPublisher


@pytest.fixture
def publisher(tmp_path: Path) -> GitHubCliPublisher:
    return GitHubCliPublisher(tmp_path)


class TestAvailability:
    def test_not_installed(self, publisher: GitHubCliPublisher):
        """Missing gh means unavailable."""
        with patch("shutil.which", return_value=None):
            assert publisher.cli_major_version() is None
            assert not publisher.is_available()

    def test_recent_version(self, publisher: GitHubCliPublisher):
        with (
            patch("shutil.which", return_value="/usr/bin/gh"),
            patch("subprocess.run") as mock_run,
        ):
            mock_run.return_value = MagicMock(
                stdout="gh version 2.40.1 (2023-12-13)\nhttps://github.com/cli/cli/releases\n",
                returncode=0,
            )

            assert publisher.cli_major_version() == 2
            assert publisher.is_available()

    def test_too_old(self, publisher: GitHubCliPublisher):
        """Pre-1.0 releases of gh are not used."""
        with (
            patch("shutil.which", return_value="/usr/bin/gh"),
            patch("subprocess.run") as mock_run,
        ):
            mock_run.return_value = MagicMock(stdout="gh version 0.11.1 (2020-07-28)\n")

            assert not publisher.is_available()

    def test_version_command_fails(self, publisher: GitHubCliPublisher):
        with (
            patch("shutil.which", return_value="/usr/bin/gh"),
            patch("subprocess.run", side_effect=subprocess.CalledProcessError(1, "gh")),
        ):
            assert not publisher.is_available()

    def test_unparseable_version(self, publisher: GitHubCliPublisher):
        with (
            patch("shutil.which", return_value="/usr/bin/gh"),
            patch("subprocess.run") as mock_run,
        ):
            mock_run.return_value = MagicMock(stdout="something else\n")

            assert not publisher.is_available()


class TestPublish:
    def test_publish_passes_notes_file(self, publisher: GitHubCliPublisher, tmp_path: Path):
        """Notes are written to a file handed to gh release create."""
        seen: dict[str, str] = {}

        def fake_run(args, **kwargs):
            seen["notes"] = Path(args[args.index("--notes-file") + 1]).read_text()
            return MagicMock(returncode=0)

        with patch("subprocess.run", side_effect=fake_run) as mock_run:
            publisher.publish("v1.3.0", "v1.3.0", "### Added\n- loopback")

        args = mock_run.call_args[0][0]
        assert args[:4] == ["gh", "release", "create", "v1.3.0"]
        assert args[args.index("--title") + 1] == "v1.3.0"
        assert mock_run.call_args.kwargs["cwd"] == tmp_path
        assert seen["notes"] == "### Added\n- loopback\n"

    def test_publish_failure(self, publisher: GitHubCliPublisher):
        with patch("subprocess.run") as mock_run:
            mock_run.side_effect = subprocess.CalledProcessError(
                1, "gh", stderr="HTTP 422: Validation Failed"
            )

            with pytest.raises(PublishError) as exc_info:
                publisher.publish("v1.3.0", "v1.3.0", "notes")

        assert "Validation Failed" in str(exc_info.value)

    def test_publish_cli_missing(self, publisher: GitHubCliPublisher):
        with patch("subprocess.run", side_effect=FileNotFoundError("gh")):
            with pytest.raises(PublishError, match="not found"):
                publisher.publish("v1.3.0", "v1.3.0", "notes")
