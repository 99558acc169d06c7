"""Commit and push updated data files when running under CI."""

import logging
import os
import subprocess
from collections.abc import Callable, Sequence
from pathlib import Path

from airsounds.errors import PublishError

logger = logging.getLogger(__name__)


def is_ci() -> bool:
    return os.environ.get("CI", "").lower() == "true" or "GITHUB_ACTIONS" in os.environ


class GitPublisher:
    def __init__(
        self,
        repo_dir: str | Path = ".",
        author_name: str = "Forecast Bot",
        author_email: str = "bot@airsounds.github.io",
        message: str = "Update forecast data",
        runner: Callable[..., subprocess.CompletedProcess] = subprocess.run,
    ):
        self.repo_dir = Path(repo_dir)
        self.author_name = author_name
        self.author_email = author_email
        self.message = message
        self.runner = runner

    def _git(self, *args: str) -> str:
        try:
            proc = self.runner(
                ["git", *args],
                cwd=self.repo_dir,
                check=True,
                capture_output=True,
                text=True,
            )
        except subprocess.CalledProcessError as e:
            raise PublishError(f"git {args[0]} failed: {e.stderr}") from e
        return proc.stdout

    def has_changes(self) -> bool:
        # Includes untracked files, so newly created day files count.
        return bool(self._git("status", "--porcelain").strip())

    def publish(self, paths: Sequence[str | Path]) -> bool:
        """Commit and push paths. Returns False when there was nothing to do."""
        if not paths:
            return False
        if not self.has_changes():
            logger.info("No changes")
            return False
        self._git("config", "user.name", self.author_name)
        self._git("config", "user.email", self.author_email)
        self._git("add", "--", *(str(p) for p in paths))
        self._git("commit", "-m", self.message)
        self._git("push")
        logger.info("Pushed %d files", len(paths))
        return True
