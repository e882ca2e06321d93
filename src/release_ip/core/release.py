"""Release orchestration.

The orchestrator sequences the version and changelog engines against git,
the project's version files and the GitHub publisher. Two workflows exist:

- a development bump writes ``<next>-dev`` to the version files and commits
- a full release creates a release branch, rewrites the changelog, commits,
  tags, reopens the Unreleased section, bumps to the next development
  version, merges into the main branch, pushes and publishes

The user confirms at fixed checkpoints. A rejected confirmation stops the
run; everything done so far (commits, branches) stays in place.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from release_ip.core.changelog import (
    parse_lines,
    prepare_release,
    render_lines,
    render_notes,
    reopen_unreleased,
)
from release_ip.core.version import BumpType, Version
from release_ip.exceptions import (
    ChangelogError,
    DirtyWorkingTreeError,
    ProjectError,
    UserRejectedError,
)
from release_ip.project.descriptor import (
    find_descriptor,
    get_descriptor_version,
    read_version_file,
    update_descriptor_version,
    write_version_file,
)

if TYPE_CHECKING:
    from collections.abc import Callable
    from datetime import date
    from pathlib import Path

    from release_ip.config.models import ReleaseIpConfig
    from release_ip.forge.github import GitHubCliPublisher
    from release_ip.vcs.git import GitRepository

    Confirm = Callable[[str], bool]


@dataclass(frozen=True)
class ReleaseIntent:
    """What the user asked for."""

    kind: BumpType
    dev_only: bool = False


@dataclass(frozen=True)
class ReleasePlan:
    """Versions and names computed for one run."""

    current: Version
    next_version: Version
    tag: str
    branch: str
    dev_version: Version


class ReleaseOrchestrator:
    """Drive a development bump or a full release."""

    def __init__(
        self,
        repo: GitRepository,
        config: ReleaseIpConfig,
        project_path: Path,
        *,
        confirm: Confirm,
        publisher: GitHubCliPublisher | None = None,
        console: Console | None = None,
        today: date | None = None,
    ) -> None:
        self.repo = repo
        self.config = config
        self.project_path = project_path
        self.confirm = confirm
        self.publisher = publisher
        self.console = console or Console()
        self.today = today

    # Paths

    @property
    def changelog_path(self) -> Path:
        return self.project_path / self.config.changelog.path

    @property
    def version_file_path(self) -> Path:
        return self.project_path / self.config.version.version_file

    def descriptor_path(self) -> Path | None:
        return find_descriptor(self.project_path, self.config.version.descriptor)

    def release_files(self) -> list[Path]:
        candidates = [self.changelog_path, self.version_file_path, self.descriptor_path()]
        return [path for path in candidates if path is not None and path.exists()]

    # Planning

    def current_version(self) -> Version:
        """Version of the latest release tag, or the configured initial version."""
        latest_tag = self.repo.get_latest_tag(self.config.tag_pattern)
        if latest_tag is None:
            return Version.parse(self.config.version.initial_version)
        return Version.from_tag(latest_tag, self.config.effective_tag_prefix)

    def plan(self, intent: ReleaseIntent) -> ReleasePlan:
        current = self.current_version()
        next_version = current.bump(intent.kind)
        if intent.dev_only:
            dev_base = next_version
        else:
            dev_base = next_version.bump(BumpType.PATCH)
        return ReleasePlan(
            current=current,
            next_version=next_version,
            tag=self.config.tag_for(next_version),
            branch=self.config.branch_for(next_version),
            dev_version=dev_base.with_prerelease(self.config.version.dev_suffix),
        )

    # Steps

    def check_clean(self) -> None:
        """Refuse to start while release files carry uncommitted changes.

        Raises:
            DirtyWorkingTreeError: If anything is staged or a release file
                differs from HEAD
        """
        if self.repo.has_staged_changes():
            raise DirtyWorkingTreeError(
                "There are staged changes. Commit or unstage them before releasing."
            )
        dirty = [path for path in self.release_files() if self.repo.path_has_changes(path)]
        if dirty:
            names = ", ".join(path.name for path in dirty)
            raise DirtyWorkingTreeError(
                f"Uncommitted changes in {names}. Commit them before releasing."
            )

    def warn_on_version_drift(self) -> None:
        """Warn when the VERSION file and the descriptor disagree before they are rewritten."""
        descriptor = self.descriptor_path()
        if descriptor is None or not self.version_file_path.is_file():
            return
        try:
            file_version = read_version_file(self.version_file_path)
            descriptor_version = get_descriptor_version(descriptor)
        except ProjectError as e:
            self.console.print(f"[yellow]Warning:[/] {escape(e.message)}")
            return
        if file_version != descriptor_version:
            self.console.print(
                f"[yellow]Warning:[/] {self.config.version.version_file} says "
                f"{escape(file_version)} but {descriptor.name} says "
                f"{escape(descriptor_version)}; both will be overwritten."
            )

    def _confirm(self, question: str) -> None:
        if not self.confirm(question):
            raise UserRejectedError("Aborted by user.")

    def _review_last_commit(self, question: str) -> None:
        self.console.print(escape(self.repo.show_last_commit().rstrip()))
        self._confirm(question)

    def _write_version_artifacts(self, version: Version) -> list[Path]:
        written = [self.version_file_path]
        write_version_file(self.version_file_path, str(version))
        self.console.print(f"  [green]✓[/] Set {self.config.version.version_file} to {version}")

        descriptor = self.descriptor_path()
        if descriptor is not None:
            update_descriptor_version(descriptor, str(version))
            written.append(descriptor)
            self.console.print(f"  [green]✓[/] Updated version in {descriptor.name}")
        return written

    def _commit(self, paths: list[Path], message: str) -> None:
        self.repo.add(*paths)
        self.repo.commit(message, *paths)
        self.console.print(f"  [green]✓[/] Committed: {escape(message)}")

    def _read_changelog(self) -> list[str]:
        if not self.changelog_path.is_file():
            raise ChangelogError(f"Changelog not found: {self.changelog_path}")
        return parse_lines(self.changelog_path.read_text(encoding="utf-8"))

    def _write_changelog(self, lines: list[str]) -> None:
        self.changelog_path.write_text(render_lines(lines), encoding="utf-8")

    def _publish(self, plan: ReleasePlan, notes: str) -> None:
        github = self.config.github
        if self.publisher is not None and github.enabled and self.publisher.is_available():
            self.publisher.publish(
                plan.tag,
                self.config.release_title_for(plan.next_version),
                notes,
            )
            self.console.print(f"  [green]✓[/] Published GitHub release {plan.tag}")
            return

        if self.publisher is None or not github.enabled:
            reason = "GitHub publishing is disabled."
        else:
            reason = f"{github.cli} {github.min_cli_major}.x or newer was not found."
        self.console.print(
            Panel(
                f"[yellow]{reason}[/]\n"
                f"Create the GitHub release for [cyan]{plan.tag}[/] by hand "
                "with these release notes:\n\n"
                f"{escape(notes)}",
                title="[yellow]Manual Action Required[/]",
                border_style="yellow",
            )
        )

    # Workflows

    def run(self, intent: ReleaseIntent) -> ReleasePlan:
        if intent.dev_only:
            return self.dev_bump(intent.kind)
        return self.release(intent.kind)

    def dev_bump(self, kind: BumpType) -> ReleasePlan:
        """Write and commit the next development version."""
        plan = self.plan(ReleaseIntent(kind, dev_only=True))
        self.warn_on_version_drift()
        self.console.print(
            f"\nBumping from [cyan]{plan.current}[/] to [green]{plan.dev_version}[/]\n"
        )

        paths = self._write_version_artifacts(plan.dev_version)
        self._commit(paths, f"Bump version to {plan.dev_version}")
        self._review_last_commit("Does this commit look right?")
        return plan

    def release(self, kind: BumpType) -> ReleasePlan:
        """Perform a full release.

        Raises:
            DirtyWorkingTreeError: If release files have uncommitted changes
            MissingUnreleasedSectionError: If the changelog has no Unreleased section
            UserRejectedError: If the user declines a confirmation
            ExternalCommandError: If git or gh fails
        """
        self.check_clean()
        plan = self.plan(ReleaseIntent(kind))
        self.warn_on_version_drift()
        git = self.config.git
        self.console.print(
            f"\nReleasing [green]{plan.next_version}[/] (previous: [cyan]{plan.current}[/])\n"
        )

        released, notes_lines = prepare_release(
            self._read_changelog(), plan.next_version, self.today
        )
        notes = render_notes(notes_lines)

        self.repo.checkout_new_branch(plan.branch)
        self.console.print(f"  [green]✓[/] Created branch {plan.branch}")

        self._write_changelog(released)
        paths = [self.changelog_path, *self._write_version_artifacts(plan.next_version)]
        self._commit(paths, f"Release {plan.next_version}")
        self._review_last_commit(f"Tag this commit as {plan.tag}?")

        self.repo.create_annotated_tag(plan.tag, f"Release {plan.next_version}")
        self.console.print(f"  [green]✓[/] Tagged {plan.tag}")

        self._write_changelog(
            reopen_unreleased(
                released,
                self.config.changelog.subsections,
                after_line=self.config.changelog.reopen_after_line,
            )
        )
        paths = [self.changelog_path, *self._write_version_artifacts(plan.dev_version)]
        self._commit(paths, f"Bump version to {plan.dev_version}")

        self.repo.push_branch(git.remote, plan.branch, set_upstream=True)
        self.console.print(f"  [green]✓[/] Pushed {plan.branch} to {git.remote}")
        self._confirm(f"Merge {plan.branch} into {git.main_branch} and publish {plan.tag}?")

        self.repo.checkout(git.main_branch)
        self.repo.merge_ff_only(plan.branch)
        self.repo.push_branch(git.remote, git.main_branch)
        self.repo.push_tag(git.remote, plan.tag)
        self.console.print(f"  [green]✓[/] Pushed {git.main_branch} and {plan.tag}")

        self._publish(plan, notes)

        self.repo.delete_remote_branch(git.remote, plan.branch)
        self.repo.delete_local_branch(plan.branch)
        self.console.print(f"  [green]✓[/] Deleted branch {plan.branch}")

        self.console.print(
            Panel(
                f"[green]Released {plan.next_version}![/]\n\n"
                f"Tag [cyan]{plan.tag}[/] is pushed and {git.main_branch} "
                f"is at development version [cyan]{plan.dev_version}[/].",
                title="[green]Release Complete[/]",
                border_style="green",
            )
        )
        return plan
