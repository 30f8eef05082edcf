"""Commit-and-push synchronization of the notes root with ``git``.

The sequence is: check for local changes, stage and commit them, find out
whether the branch is ahead of its upstream, and push if it is. Every failure
mode maps to a distinct ``SyncOutcome`` status instead of an exception.
No timeouts are applied; a hanging ``git push`` blocks until it finishes.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path

SYNC_COMMIT_MESSAGE = "auto-sync from lazynotes"

SYNC_UP_TO_DATE = "up-to-date"
SYNC_SYNCED = "synced"
SYNC_COMMITTED_LOCALLY = "committed-locally"
SYNC_GIT_MISSING = "git-missing"
SYNC_NOT_A_REPOSITORY = "not-a-repository"
SYNC_NETWORK_ERROR = "network-error"
SYNC_AUTH_FAILED = "auth-failed"
SYNC_PUSH_REJECTED = "push-rejected"
SYNC_FAILED = "failed"

_SUCCESS_STATUSES = frozenset({SYNC_UP_TO_DATE, SYNC_SYNCED, SYNC_COMMITTED_LOCALLY})

_AUTH_MARKERS = (
    "authentication failed",
    "permission denied",
    "could not read username",
    "could not read password",
    "invalid username or password",
    "403",
)
_NETWORK_MARKERS = (
    "could not resolve host",
    "unable to access",
    "connection refused",
    "connection timed out",
    "network is unreachable",
    "could not read from remote repository",
)
_REJECTED_MARKERS = ("[rejected]", "non-fast-forward", "failed to push some refs")

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SyncOutcome:
    status: str
    message: str

    @property
    def ok(self) -> bool:
        return self.status in _SUCCESS_STATUSES


def _run_git(root: Path, args: list[str]) -> subprocess.CompletedProcess[str]:
    return subprocess.run(
        ["git", "-C", str(root), *args],
        stdin=subprocess.DEVNULL,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        text=True,
        encoding="utf-8",
        errors="replace",
        check=False,
    )


def classify_push_error(stderr: str) -> str:
    """Map ``git push`` stderr onto a sync status."""
    lowered = stderr.casefold()
    if any(marker in lowered for marker in _REJECTED_MARKERS):
        return SYNC_PUSH_REJECTED
    if any(marker in lowered for marker in _AUTH_MARKERS):
        return SYNC_AUTH_FAILED
    if any(marker in lowered for marker in _NETWORK_MARKERS):
        return SYNC_NETWORK_ERROR
    return SYNC_FAILED


_PUSH_FAILURE_MESSAGES = {
    SYNC_PUSH_REJECTED: "push rejected (pull and merge remote changes first)",
    SYNC_AUTH_FAILED: "push failed: authentication failed",
    SYNC_NETWORK_ERROR: "push failed: remote unreachable",
    SYNC_FAILED: "push failed",
}


def _first_line(text: str) -> str:
    for line in text.splitlines():
        stripped = line.strip()
        if stripped:
            return stripped
    return ""


def _push(root: Path) -> SyncOutcome:
    # stdin stays attached so credential helpers can prompt on the terminal.
    proc = subprocess.run(
        ["git", "-C", str(root), "push"],
        stderr=subprocess.PIPE,
        text=True,
        encoding="utf-8",
        errors="replace",
        check=False,
    )
    if proc.returncode == 0:
        return SyncOutcome(SYNC_SYNCED, "synced!")
    status = classify_push_error(proc.stderr or "")
    detail = _first_line(proc.stderr or "")
    logger.error("git push failed (%s): %s", status, detail)
    return SyncOutcome(status, _PUSH_FAILURE_MESSAGES[status])


def run_git_sync(root: Path, commit_message: str = SYNC_COMMIT_MESSAGE) -> SyncOutcome:
    """Commit local changes under ``root`` and push them if ahead of upstream."""
    if shutil.which("git") is None:
        return SyncOutcome(SYNC_GIT_MISSING, "git is not installed")

    try:
        inside = _run_git(root, ["rev-parse", "--is-inside-work-tree"])
        if inside.returncode != 0 or inside.stdout.strip() != "true":
            return SyncOutcome(SYNC_NOT_A_REPOSITORY, "not a git repo (run 'git init' in the notes folder)")

        status = _run_git(root, ["status", "--porcelain"])
        if status.returncode != 0:
            return SyncOutcome(SYNC_FAILED, f"git status failed: {_first_line(status.stderr)}")
        committed = False
        if status.stdout.strip():
            add = _run_git(root, ["add", "-A"])
            if add.returncode != 0:
                return SyncOutcome(SYNC_FAILED, f"git add failed: {_first_line(add.stderr)}")
            commit = _run_git(root, ["commit", "-m", commit_message])
            if commit.returncode != 0:
                detail = _first_line(commit.stderr) or _first_line(commit.stdout)
                return SyncOutcome(SYNC_FAILED, f"git commit failed: {detail}")
            committed = True
            logger.info("Committed local changes in %s", root)

        upstream = _run_git(root, ["rev-parse", "--abbrev-ref", "--symbolic-full-name", "@{u}"])
        if upstream.returncode != 0:
            if committed:
                return SyncOutcome(SYNC_COMMITTED_LOCALLY, "committed locally (no upstream configured)")
            return SyncOutcome(SYNC_UP_TO_DATE, "nothing to sync (no upstream configured)")

        ahead = _run_git(root, ["rev-list", "--count", "@{u}..HEAD"])
        try:
            ahead_count = int(ahead.stdout.strip() or "0") if ahead.returncode == 0 else 0
        except ValueError:
            ahead_count = 0
        if ahead_count <= 0:
            if committed:
                return SyncOutcome(SYNC_COMMITTED_LOCALLY, "committed locally (nothing to push)")
            return SyncOutcome(SYNC_UP_TO_DATE, "already up to date")

        return _push(root)
    except OSError as exc:
        logger.error("git sync failed: %s", exc)
        return SyncOutcome(SYNC_FAILED, f"git sync failed: {exc}")


__all__ = [
    "SYNC_AUTH_FAILED",
    "SYNC_COMMITTED_LOCALLY",
    "SYNC_COMMIT_MESSAGE",
    "SYNC_FAILED",
    "SYNC_GIT_MISSING",
    "SYNC_NETWORK_ERROR",
    "SYNC_NOT_A_REPOSITORY",
    "SYNC_PUSH_REJECTED",
    "SYNC_SYNCED",
    "SYNC_UP_TO_DATE",
    "SyncOutcome",
    "classify_push_error",
    "run_git_sync",
]
