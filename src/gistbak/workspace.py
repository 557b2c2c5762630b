import logging
import shutil
import tempfile
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator

logger = logging.getLogger(__name__)


@dataclass
class Workspace:
    path: Path
    temporary: bool

    @classmethod
    def create(cls, directory: Path | None = None) -> "Workspace":
        if directory is None:
            path = Path(tempfile.mkdtemp(prefix="gistbak-"))
            logger.debug(f"use temporary workspace {path}")
            return cls(path, temporary=True)

        directory.mkdir(parents=True, exist_ok=True)
        logger.debug(f"use workspace {directory}")
        return cls(directory, temporary=False)

    def release(self, failed: bool) -> None:
        """Remove the workspace after a failed run, or a temporary one
        after a successful run. A given directory survives success."""

        if not (failed or self.temporary):
            return
        logger.debug(f"remove workspace {self.path}")
        shutil.rmtree(self.path, ignore_errors=True)


@contextmanager
def acquire_workspace(directory: Path | None = None) -> Iterator[Workspace]:
    workspace = Workspace.create(directory)
    try:
        yield workspace
    except BaseException:
        workspace.release(failed=True)
        raise
    workspace.release(failed=False)
