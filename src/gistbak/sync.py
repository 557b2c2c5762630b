import enum
import logging
import os
import subprocess
from pathlib import Path
from typing import Sequence

from .parser import GistRepo

logger = logging.getLogger(__name__)


class SyncAction(enum.Enum):
    CLONED = "cloned"
    UPDATED = "updated"


def _git(cmd: Sequence[str], cwd: Path) -> None:
    logger.debug(f"Running: {' '.join(cmd)} (in {cwd})")
    env = {**os.environ, "GIT_TERMINAL_PROMPT": "0"}
    subprocess.run(cmd, cwd=cwd, env=env, check=True)


def sync_repo(
    repo: GistRepo,
    workspace: Path,
    clone_args: Sequence[str] = (),
) -> SyncAction:
    local_dst = workspace / repo.name

    if local_dst.is_dir():
        logger.info(f"{repo} already cloned, pulling")
        _git(["git", "pull", "--quiet"], cwd=local_dst)
        return SyncAction.UPDATED

    logger.info(f"cloning {repo.url}")
    _git(["git", "clone", "--quiet", repo.url, repo.name, *clone_args], cwd=workspace)
    return SyncAction.CLONED
