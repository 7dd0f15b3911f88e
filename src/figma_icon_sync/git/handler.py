"""Commit synced icons and open a pull request."""

import asyncio
import re
import subprocess
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Tuple

import httpx
from loguru import logger

from figma_icon_sync.config import GitConfig
from figma_icon_sync.exceptions import GitError
from figma_icon_sync.sync.utils import BatchReport

GITHUB_API_URL = "https://api.github.com"
PR_FILE_LIMIT = 10

GITHUB_REMOTE_PATTERNS = (
    re.compile(r"git@github\.com:([^/]+)/(.+?)(?:\.git)?$"),
    re.compile(r"https://(?:[^@/]+@)?github\.com/([^/]+)/(.+?)(?:\.git)?$"),
)

Runner = Callable[[Sequence[str], Path], str]


def default_runner(args: Sequence[str], cwd: Path) -> str:
    """Run a git command and return its stdout."""
    try:
        completed = subprocess.run(
            list(args), cwd=cwd, check=True, capture_output=True, text=True
        )
    except FileNotFoundError as e:
        raise GitError("git executable not found") from e
    except subprocess.CalledProcessError as e:
        raise GitError(f"{' '.join(args)} failed: {(e.stderr or e.stdout).strip()}") from e
    return completed.stdout


def parse_github_remote(url: str) -> Optional[Tuple[str, str]]:
    """Return (owner, repo) for SSH or HTTPS GitHub remote URLs."""
    for pattern in GITHUB_REMOTE_PATTERNS:
        match = pattern.match(url.strip())
        if match:
            return match.group(1), match.group(2)
    return None


def commit_message(report: BatchReport, base: str) -> str:
    details = [
        f"{label}: {len(paths)} icon(s)"
        for label, paths in (
            ("Added", report.added),
            ("Updated", report.updated),
            ("Deleted", report.deleted),
        )
        if paths
    ]
    if not details:
        return base
    return base + "\n\n" + "\n".join(details)


def _file_section(title: str, paths: List[str]) -> str:
    lines = [f"### {title} ({len(paths)})"]
    lines.extend(f"- {path}" for path in paths[:PR_FILE_LIMIT])
    if len(paths) > PR_FILE_LIMIT:
        lines.append(f"- ... and {len(paths) - PR_FILE_LIMIT} more")
    return "\n".join(lines) + "\n"


def pull_request_body(report: BatchReport, base: str) -> str:
    sections = [
        _file_section(title, paths)
        for title, paths in (
            ("Added", report.added),
            ("Updated", report.updated),
            ("Deleted", report.deleted),
        )
        if paths
    ]
    if report.errors:
        lines = [f"### Errors ({len(report.errors)})"]
        lines.extend(f"- {error.source}: {error.error}" for error in report.errors)
        sections.append("\n".join(lines) + "\n")

    return base + "\n\n## Changes\n\n" + "\n".join(sections)


class GitHandler:
    """Branch, commit, push and open a pull request for the output directory."""

    def __init__(
        self,
        config: GitConfig,
        output_directory: Path,
        *,
        github_token: Optional[str] = None,
        cwd: Optional[Path] = None,
        runner: Optional[Runner] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.config = config
        self.output_directory = output_directory
        self.github_token = github_token
        self.cwd = cwd or Path.cwd()
        self._runner = runner or default_runner
        self._transport = transport

    def _git(self, *args: str) -> str:
        return self._runner(["git", *args], self.cwd)

    def has_changes(self, path: Optional[Path] = None) -> bool:
        args = ["status", "--porcelain"]
        if path is not None:
            args.extend(["--", str(path)])
        return bool(self._git(*args).strip())

    def current_branch(self) -> str:
        return self._git("rev-parse", "--abbrev-ref", "HEAD").strip()

    def commit_changes(self, report: BatchReport) -> bool:
        """Commit the output directory on the sync branch.

        Returns:
            True if a commit was created
        """
        if not self.has_changes(self.output_directory):
            logger.info("No changes to commit")
            return False

        branch = self.config.branch
        if self.current_branch() != branch:
            try:
                self._git("checkout", "-b", branch)
            except GitError:
                # Branch already exists
                self._git("checkout", branch)

        self._git("add", "--all", "--", str(self.output_directory))
        self._git("commit", "-m", commit_message(report, self.config.commit_message))
        logger.info(f"Changes committed to branch: {branch}")
        return True

    def push_branch(self) -> None:
        self._git("push", "--set-upstream", "origin", self.config.branch)
        logger.info(f"Pushed branch to origin/{self.config.branch}")

    def _github_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=GITHUB_API_URL,
            headers={
                "Authorization": f"Bearer {self.github_token}",
                "Accept": "application/vnd.github+json",
            },
            timeout=30.0,
            transport=self._transport,
        )

    async def create_pull_request(self, report: BatchReport) -> Optional[str]:
        """Open a pull request for the sync branch, or return the existing one.

        Returns:
            The pull request URL, or None if no GitHub token is configured
        """
        if not self.github_token:
            logger.warning("GITHUB_TOKEN not set, skipping pull request creation")
            return None

        origin = await asyncio.to_thread(self._git, "remote", "get-url", "--push", "origin")
        origin = origin.strip()
        repo_info = parse_github_remote(origin)
        if repo_info is None:
            raise GitError(f"Could not parse GitHub repository from remote URL: {origin}")
        owner, repo = repo_info
        branch = await asyncio.to_thread(self.current_branch)

        async with self._github_client() as client:
            try:
                existing = await client.get(
                    f"/repos/{owner}/{repo}/pulls",
                    params={"head": f"{owner}:{branch}", "state": "open"},
                )
                existing.raise_for_status()
                if existing.json():
                    url = existing.json()[0]["html_url"]
                    logger.info(f"Pull request already exists: {url}")
                    return url

                created = await client.post(
                    f"/repos/{owner}/{repo}/pulls",
                    json={
                        "title": self.config.pr_title,
                        "body": pull_request_body(report, self.config.pr_body),
                        "head": branch,
                        "base": self.config.base_branch,
                    },
                )
                created.raise_for_status()
            except httpx.HTTPError as e:
                raise GitError(f"GitHub API request failed: {e}") from e

        url = created.json()["html_url"]
        logger.info(f"Pull request created: {url}")
        return url

    async def automate(self, report: BatchReport) -> Optional[str]:
        """Commit, then push and open a pull request when configured.

        git runs in a worker thread so the event loop is never blocked.
        """
        if not await asyncio.to_thread(self.commit_changes, report):
            return None
        if not self.config.create_pr:
            return None
        await asyncio.to_thread(self.push_branch)
        return await self.create_pull_request(report)
